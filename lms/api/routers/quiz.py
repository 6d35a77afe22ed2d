from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict

from lms import quiz as quiz_service
from lms.api.dependencies import get_current_session, parse_id, require_role
from lms.errors import NotFound, ValidationFailure

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


class SubmittedAnswer(BaseModel):
    model_config = ConfigDict(extra="allow")

    selectedAnswer: Any = None
    questionId: Optional[int] = None


class QuizSubmission(BaseModel):
    quizId: Optional[int] = None
    answers: Optional[List[SubmittedAnswer]] = None


@router.get("")
def get_course_quiz(courseId: Optional[str] = Query(None), session: dict = Depends(get_current_session)):
    course_id = parse_id(courseId, "courseId")
    if course_id is None:
        raise ValidationFailure("courseId is required")
    quiz = quiz_service.get_quiz_for_course(course_id)
    if not quiz:
        raise NotFound("Quiz not found")
    return quiz_service.quiz_for_student(quiz, quiz_service.get_questions_for_quiz(quiz.id))


@router.get("/response")
def list_responses(courseId: Optional[str] = Query(None), admin=Depends(require_role("admin"))):
    return quiz_service.list_quiz_responses(parse_id(courseId, "courseId"))


@router.post("/response")
def submit_response(payload: QuizSubmission, session: dict = Depends(get_current_session)):
    if payload.quizId is None or payload.answers is None:
        raise ValidationFailure("Invalid data")
    answers = [a.model_dump(exclude_unset=True) for a in payload.answers]
    return quiz_service.submit_quiz_response(payload.quizId, session["id"], answers)


@router.get("/response/user")
def get_own_response(courseId: Optional[str] = Query(None), session: dict = Depends(get_current_session)):
    course_id = parse_id(courseId, "courseId")
    if course_id is None:
        raise ValidationFailure("courseId is required")
    response = quiz_service.get_user_quiz_response(session["id"], course_id)
    if response is None:
        raise NotFound("Quiz response not found")
    return response
