from typing import Any, Dict, List, Optional
from sqlmodel import select

from lms.db import get_session
from lms.errors import NotFound
from lms.models import Course, Module, Lesson


def create_course(title: str, description: str | None = None) -> Course:
    with get_session() as session:
        course = Course(title=title, description=description)
        session.add(course)
        session.commit()
        session.refresh(course)
        return course


def add_module(course_id: int, title: str, description: str | None = None) -> Module:
    with get_session() as session:
        if not session.get(Course, course_id):
            raise NotFound("Course not found")
        count = len(session.exec(select(Module.id).where(Module.course_id == course_id)).all())
        module = Module(course_id=course_id, title=title, description=description, position=count)
        session.add(module)
        session.commit()
        session.refresh(module)
        return module


def add_lesson(module_id: int, title: str, description: str | None = None, video_ref: str | None = None) -> Lesson:
    with get_session() as session:
        if not session.get(Module, module_id):
            raise NotFound("Module not found")
        count = len(session.exec(select(Lesson.id).where(Lesson.module_id == module_id)).all())
        lesson = Lesson(
            module_id=module_id,
            title=title,
            description=description,
            video_ref=video_ref,
            position=count,
        )
        session.add(lesson)
        session.commit()
        session.refresh(lesson)
        return lesson


def list_courses() -> List[Course]:
    with get_session() as session:
        q = select(Course).order_by(Course.title)
        return list(session.exec(q))


def get_course_outline(course_id: int) -> Optional[Dict[str, Any]]:
    """Course with its modules and lessons nested in display order, or None."""
    with get_session() as session:
        course = session.get(Course, course_id)
        if not course:
            return None
        modules = session.exec(
            select(Module).where(Module.course_id == course_id).order_by(Module.position, Module.id)
        ).all()
        module_ids = [m.id for m in modules]
        lessons_by_module: Dict[int, List[Lesson]] = {mid: [] for mid in module_ids}
        if module_ids:
            lessons = session.exec(
                select(Lesson).where(Lesson.module_id.in_(module_ids)).order_by(Lesson.position, Lesson.id)
            ).all()
            for lesson in lessons:
                lessons_by_module[lesson.module_id].append(lesson)

        return {
            '_id': course.id,
            'title': course.title,
            'description': course.description or '',
            'modules': [
                {
                    '_id': m.id,
                    'title': m.title,
                    'description': m.description or '',
                    'lessons': [
                        {
                            '_id': lesson.id,
                            'title': lesson.title,
                            'description': lesson.description or '',
                            'videoRef': lesson.video_ref,
                        }
                        for lesson in lessons_by_module[m.id]
                    ],
                }
                for m in modules
            ],
        }


def iter_lessons(outline: Dict[str, Any]):
    for module in outline.get('modules', []):
        for lesson in module.get('lessons', []):
            yield lesson


def find_next_lesson(outline: Dict[str, Any], lesson_id: int):
    """Lesson following ``lesson_id`` in course order, crossing module boundaries."""
    found_current = False
    for lesson in iter_lessons(outline):
        if found_current:
            return lesson
        if lesson['_id'] == lesson_id:
            found_current = True
    return None
