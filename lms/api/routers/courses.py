from fastapi import APIRouter, Depends

from lms import courses as course_service
from lms.api.dependencies import get_current_session
from lms.errors import NotFound

router = APIRouter(prefix="/api/courses", tags=["courses"])


@router.get("")
def list_courses(session: dict = Depends(get_current_session)):
    return [
        {"_id": c.id, "title": c.title, "description": c.description or ""}
        for c in course_service.list_courses()
    ]


@router.get("/{course_id}")
def get_course(course_id: int, session: dict = Depends(get_current_session)):
    outline = course_service.get_course_outline(course_id)
    if outline is None:
        raise NotFound("Course not found")
    return outline
