from typing import Any, Dict, Iterable, List

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from lms.courses import get_course_outline, iter_lessons
from lms.db import get_session
from lms.errors import NotFound
from lms.models import Lesson, LessonProgress, Module
from lms.quiz import get_quiz_for_course, get_user_quiz_response


def mark_lesson_complete(user_id: int, course_id: int, lesson_id: int) -> LessonProgress:
    """Record a finished lesson; repeated calls return the existing record."""
    with get_session() as session:
        lesson = session.get(Lesson, lesson_id)
        module = session.get(Module, lesson.module_id) if lesson else None
        if not module or module.course_id != course_id:
            raise NotFound("Lesson not found in course")

        q = select(LessonProgress).where(
            LessonProgress.user_id == user_id, LessonProgress.lesson_id == lesson_id
        )
        existing = session.exec(q).first()
        if existing:
            return existing
        progress = LessonProgress(user_id=user_id, course_id=course_id, lesson_id=lesson_id)
        session.add(progress)
        try:
            session.commit()
        except IntegrityError:
            # another request recorded the same lesson first
            session.rollback()
            return session.exec(q).one()
        session.refresh(progress)
        return progress


def get_progress(user_id: int, course_id: int) -> List[LessonProgress]:
    with get_session() as session:
        q = (
            select(LessonProgress)
            .where(LessonProgress.user_id == user_id, LessonProgress.course_id == course_id)
            .order_by(LessonProgress.completed_at)
        )
        return list(session.exec(q))


def get_completed_lesson_ids(user_id: int, course_id: int) -> List[int]:
    return [p.lesson_id for p in get_progress(user_id, course_id)]


def all_lessons_completed(outline: Dict[str, Any], completed_ids: Iterable[int]) -> bool:
    completed = set(completed_ids)
    return all(lesson['_id'] in completed for lesson in iter_lessons(outline))


def summarize_course_progress(user_id: int, course_id: int) -> Dict[str, Any]:
    """Lesson completion counts and whether the course quiz can be taken."""
    outline = get_course_outline(course_id)
    if outline is None:
        raise NotFound("Course not found")

    lesson_ids = [lesson['_id'] for lesson in iter_lessons(outline)]
    completed = set(get_completed_lesson_ids(user_id, course_id))
    done = sum(1 for lid in lesson_ids if lid in completed)
    finished = all_lessons_completed(outline, completed)

    quiz = get_quiz_for_course(course_id)
    response = get_user_quiz_response(user_id, course_id) if quiz else None
    return {
        'courseId': course_id,
        'totalLessons': len(lesson_ids),
        'completedLessons': done,
        'percent': round(done * 100 / len(lesson_ids)) if lesson_ids else 100,
        'allLessonsCompleted': finished,
        'quizId': quiz.id if quiz else None,
        'quizAvailable': finished and quiz is not None,
        'quizCompleted': response is not None,
    }
