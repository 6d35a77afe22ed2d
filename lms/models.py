from typing import Optional
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone

def now_utc():
    return datetime.now(timezone.utc)

class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: Optional[str] = None
    password_hash: str
    role: str = Field(default="student")  # admin|student
    created_at: datetime = Field(default_factory=now_utc)

class Course(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=now_utc)

class Module(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    course_id: int = Field(foreign_key="course.id", index=True)
    title: str
    description: Optional[str] = None
    position: int = Field(default=0)

class Lesson(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    module_id: int = Field(foreign_key="module.id", index=True)
    title: str
    description: Optional[str] = None
    video_ref: Optional[str] = None
    position: int = Field(default=0)

class Quiz(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: Optional[str] = None
    module_id: int = Field(foreign_key="module.id")
    course_id: Optional[int] = Field(default=None, foreign_key="course.id", index=True)
    minimum_score: int = Field(default=70)  # percent needed to pass
    time_limit: int = Field(default=30)  # minutes
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)

class Question(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    quiz_id: int = Field(foreign_key="quiz.id", index=True)
    position: int = Field(default=0)
    text: str
    type: str  # multiple_choice|true_false|essay
    options: Optional[str] = None  # JSON: list of {text, isCorrect}
    correct_answer: Optional[str] = None
    points: int = Field(default=1)

class QuizResponse(SQLModel, table=True):
    __tablename__ = "quiz_response"

    id: Optional[int] = Field(default=None, primary_key=True)
    quiz_id: int = Field(foreign_key="quiz.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    answers: Optional[str] = None  # JSON: submitted answers with isCorrect
    score: int = Field(default=0)
    completed_at: datetime = Field(default_factory=now_utc, index=True)


class LessonProgress(SQLModel, table=True):
    __tablename__ = "lesson_progress"
    __table_args__ = (UniqueConstraint("user_id", "lesson_id", name="uq_progress_user_lesson"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    course_id: int = Field(foreign_key="course.id", index=True)
    lesson_id: int = Field(foreign_key="lesson.id")
    completed_at: datetime = Field(default_factory=now_utc)
