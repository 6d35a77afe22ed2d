import os

# point the engine at a throwaway database before lms.db is imported
os.environ["DATABASE_URL"] = "sqlite:///./test_app.db"

import pytest
from sqlmodel import SQLModel

import lms.models  # noqa: F401
from lms.auth import create_access_token
from lms.courses import add_lesson, add_module, create_course
from lms.db import engine, get_session, init_db
from lms.models import User
from lms.quiz import create_quiz


@pytest.fixture(autouse=True)
def reset_db():
    # Ensure a clean DB for every test
    SQLModel.metadata.drop_all(engine)
    init_db()
    yield


@pytest.fixture(scope='session', autouse=True)
def remove_db_file():
    yield
    engine.dispose()
    try:
        os.remove(os.path.join(os.getcwd(), 'test_app.db'))
    except OSError:
        pass


@pytest.fixture
def make_user():
    def _make(email, role='student', name='Student'):
        with get_session() as s:
            user = User(email=email, password_hash='x', name=name, role=role)
            s.add(user)
            s.commit()
            s.refresh(user)
            return user
    return _make


@pytest.fixture
def auth_header():
    def _header(user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}
    return _header


@pytest.fixture
def make_course():
    """Course with one module of two lessons and, unless disabled, a four question quiz."""
    def _make(title='Python', with_quiz=True, quiz_course=True):
        course = create_course(title, 'desc')
        module = add_module(course.id, 'Basics')
        lessons = [add_lesson(module.id, 'Intro'), add_lesson(module.id, 'Loops')]
        quiz = None
        if with_quiz:
            questions = [
                {'type': 'multiple_choice', 'text': f'Q{i}', 'correct_answer': letter}
                for i, letter in enumerate(['A', 'B', 'C', 'D'], start=1)
            ]
            quiz = create_quiz(
                f'{title} quiz',
                module.id,
                questions,
                course_id=course.id if quiz_course else None,
            )
        return {'course': course, 'module': module, 'lessons': lessons, 'quiz': quiz}
    return _make
