import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from sqlmodel import select

from lms.auth import create_user
from lms.courses import add_lesson, add_module, create_course
from lms.db import get_session, init_db
from lms.models import Course, User
from lms.quiz import create_quiz


SEED_COURSE_PREFIX = "[DEMO]"


def _ensure_user(email, password, name, role):
    with get_session() as session:
        user = session.exec(select(User).where(User.email == email)).first()
        if user:
            return user
    return create_user(email, password, name=name, role=role)


def main():
    parser = argparse.ArgumentParser(description="Seed a demo course with lessons and a final quiz.")
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--student-email", default="student@example.com")
    parser.add_argument("--password", default="changeme")
    parser.add_argument("--modules", type=int, default=2)
    parser.add_argument("--lessons", type=int, default=3, help="Lessons per module.")
    args = parser.parse_args()
    if args.modules < 1:
        parser.error("--modules must be at least 1")

    init_db()

    admin = _ensure_user(args.admin_email, args.password, "Admin", "admin")
    student = _ensure_user(args.student_email, args.password, "Demo Student", "student")

    with get_session() as session:
        existing = session.exec(select(Course)).all()
        if any(c.title.startswith(SEED_COURSE_PREFIX) for c in existing):
            raise SystemExit("Demo course already exists.")

    course = create_course(f"{SEED_COURSE_PREFIX} Python basics", "Variables, control flow and functions.")
    last_module = None
    for m in range(args.modules):
        last_module = add_module(course.id, f"Module {m + 1}", f"Topics of part {m + 1}")
        for lesson_no in range(args.lessons):
            add_lesson(
                last_module.id,
                f"Lesson {m + 1}.{lesson_no + 1}",
                "Watch the video and mark the lesson as complete.",
                video_ref="https://www.youtube.com/watch?v=kqtD5dpn9C8",
            )

    questions = [
        {
            'type': 'multiple_choice',
            'text': 'Which keyword defines a function?',
            'options': [
                {'text': 'def', 'isCorrect': True},
                {'text': 'func', 'isCorrect': False},
                {'text': 'lambda', 'isCorrect': False},
            ],
        },
        {
            'type': 'true_false',
            'text': 'Python lists are mutable.',
            'options': [{'text': 'true', 'isCorrect': True}, {'text': 'false', 'isCorrect': False}],
        },
        {
            'type': 'multiple_choice',
            'text': 'What does len([1, 2, 3]) return?',
            'options': [{'text': '2', 'isCorrect': False}, {'text': '3', 'isCorrect': True}],
        },
        {
            'type': 'essay',
            'text': 'Name the statement that leaves a loop early.',
            'correct_answer': 'break',
        },
    ]
    quiz = create_quiz(
        "Final quiz",
        last_module.id,
        questions,
        course_id=course.id,
        description="Answer every question.",
    )

    print(f"Course {course.id}, quiz {quiz.id}")
    print(f"Admin: {admin.email} / Student: {student.email} (password: {args.password})")


if __name__ == '__main__':
    main()
