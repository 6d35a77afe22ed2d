from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from lms import progress as progress_service
from lms.api.dependencies import get_current_session, parse_id
from lms.errors import ValidationFailure
from lms.quiz import as_utc

router = APIRouter(prefix="/api/progress", tags=["progress"])


class LessonCompletion(BaseModel):
    courseId: Optional[int] = None
    lessonId: Optional[int] = None


def _required_course_id(value: Optional[str]) -> int:
    course_id = parse_id(value, "courseId")
    if course_id is None:
        raise ValidationFailure("courseId is required")
    return course_id


def _progress_row(p):
    completed_at = as_utc(p.completed_at)
    return {"lesson": p.lesson_id, "completedAt": completed_at.isoformat() if completed_at else None}


@router.get("")
def list_progress(courseId: Optional[str] = Query(None), session: dict = Depends(get_current_session)):
    course_id = _required_course_id(courseId)
    return [_progress_row(p) for p in progress_service.get_progress(session["id"], course_id)]


@router.post("")
def complete_lesson(payload: LessonCompletion, session: dict = Depends(get_current_session)):
    if payload.courseId is None or payload.lessonId is None:
        raise ValidationFailure("Invalid data")
    p = progress_service.mark_lesson_complete(session["id"], payload.courseId, payload.lessonId)
    return _progress_row(p)


@router.get("/summary")
def progress_summary(courseId: Optional[str] = Query(None), session: dict = Depends(get_current_session)):
    return progress_service.summarize_course_progress(session["id"], _required_course_id(courseId))
