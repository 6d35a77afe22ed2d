from datetime import timezone
from lms.db import get_session
from lms.models import User, Course, Module, Quiz, QuizResponse, LessonProgress, Lesson


def test_datetime_fields_are_timezone_aware():
    with get_session() as s:
        admin = User(email='tz_admin@example.com', password_hash='x', name='A', role='admin')
        s.add(admin)
        s.flush()  # ensure defaults applied but before DB roundtrip
        # in-memory default should be timezone-aware
        assert admin.created_at.tzinfo is not None and admin.created_at.tzinfo == timezone.utc
        s.commit()

        course = Course(title='TZ Course')
        s.add(course)
        s.flush()
        assert course.created_at.tzinfo == timezone.utc
        s.commit()

        module = Module(course_id=course.id, title='M')
        s.add(module)
        s.commit()
        lesson = Lesson(module_id=module.id, title='L')
        s.add(lesson)
        s.commit()

        quiz = Quiz(title='TZ Quiz', module_id=module.id, course_id=course.id)
        s.add(quiz)
        s.flush()
        assert quiz.created_at.tzinfo == timezone.utc
        assert quiz.minimum_score == 70
        assert quiz.time_limit == 30
        s.commit()

        response = QuizResponse(quiz_id=quiz.id, user_id=admin.id)
        s.add(response)
        s.flush()
        assert response.completed_at.tzinfo == timezone.utc
        s.commit()

        progress = LessonProgress(user_id=admin.id, course_id=course.id, lesson_id=lesson.id)
        s.add(progress)
        s.flush()
        assert progress.completed_at.tzinfo == timezone.utc
        s.commit()
