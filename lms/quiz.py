import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlmodel import select

from lms import config
from lms.db import get_session
from lms.errors import Conflict, NotFound, ValidationFailure
from lms.models import Course, Question, Quiz, QuizResponse, User, now_utc

logger = logging.getLogger(__name__)

QUESTION_TYPES = ("multiple_choice", "true_false", "essay")
MISSING_USER_NAME = "User not found"


def create_quiz(
    title: str,
    module_id: int,
    questions: List[Dict[str, Any]],
    course_id: Optional[int] = None,
    description: Optional[str] = None,
    minimum_score: int = 70,
    time_limit: int = 30,
) -> Quiz:
    """questions: list of dicts: {type, text, options(optional list of {text, isCorrect}), correct_answer, points}
    """
    for q in questions:
        if q.get('type') not in QUESTION_TYPES:
            raise ValidationFailure(f"Unknown question type: {q.get('type')}")

    with get_session() as session:
        quiz = Quiz(
            title=title,
            description=description,
            module_id=module_id,
            course_id=course_id,
            minimum_score=minimum_score,
            time_limit=time_limit,
        )
        session.add(quiz)
        session.commit()
        session.refresh(quiz)

        for position, q in enumerate(questions):
            options = None
            if q.get('options') is not None:
                options = json.dumps(q['options'])
            correct_answer = q.get('correct_answer')
            question = Question(
                quiz_id=quiz.id,
                position=position,
                type=q['type'],
                text=q.get('text'),
                options=options,
                correct_answer=str(correct_answer) if correct_answer is not None else None,
                points=q.get('points', 1),
            )
            session.add(question)
        session.commit()

    return quiz


def get_questions_for_quiz(quiz_id: int) -> List[Question]:
    with get_session() as session:
        q = select(Question).where(Question.quiz_id == quiz_id).order_by(Question.position, Question.id)
        return list(session.exec(q))


def get_quizzes_for_course(course_id: int) -> List[Quiz]:
    with get_session() as session:
        q = select(Quiz).where(Quiz.course_id == course_id).order_by(Quiz.created_at, Quiz.id)
        return list(session.exec(q))


def get_quiz_for_course(course_id: int) -> Optional[Quiz]:
    quizzes = get_quizzes_for_course(course_id)
    return quizzes[0] if quizzes else None


def _load_options(question: Question) -> List[Dict[str, Any]]:
    if not question.options:
        return []
    try:
        options = json.loads(question.options)
    except ValueError:
        return []
    return options if isinstance(options, list) else []


def quiz_for_student(quiz: Quiz, questions: List[Question]) -> Dict[str, Any]:
    """Quiz payload for the student dialog; correct answers are left out."""
    return {
        '_id': quiz.id,
        'title': quiz.title,
        'description': quiz.description or '',
        'courseId': quiz.course_id,
        'minimumScore': quiz.minimum_score,
        'timeLimit': quiz.time_limit,
        'questions': [
            {
                '_id': q.id,
                'question': q.text,
                'type': q.type,
                'options': [opt.get('text') for opt in _load_options(q) if isinstance(opt, dict)],
                'points': q.points,
            }
            for q in questions
        ],
    }


def expected_answer(question: Question) -> Optional[str]:
    """Stored correct answer, falling back to the first option flagged correct."""
    if question.correct_answer is not None:
        return question.correct_answer
    for opt in _load_options(question):
        if isinstance(opt, dict) and opt.get('isCorrect'):
            return opt.get('text')
    return None


def is_answer_correct(question: Question, selected) -> bool:
    # exact match for every question type, no trimming or case folding
    expected = expected_answer(question)
    if expected is None or selected is None:
        return False
    return selected == expected


def compute_score(correct: int, total: int) -> int:
    """Percentage of correct answers, rounded half up to an integer."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


def grade_answers(questions: List[Question], answers: List[Any]) -> Tuple[List[Dict[str, Any]], int]:
    """Grade submitted answers against the quiz questions.

    Answer i is graded against question i; ``questionId`` and any other
    submitted fields are stored as sent but never used for matching. Returns
    the answers extended with ``isCorrect`` and the number of correct ones.
    """
    graded = []
    correct_count = 0
    for index, answer in enumerate(answers):
        if not isinstance(answer, dict):
            answer = {'selectedAnswer': answer}
        question = questions[index] if index < len(questions) else None
        is_correct = question is not None and is_answer_correct(question, answer.get('selectedAnswer'))
        if is_correct:
            correct_count += 1
        graded.append({**answer, 'isCorrect': is_correct})
    return graded, correct_count


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # sqlite hands datetimes back without tzinfo; they were written in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_response(
    response: QuizResponse,
    quiz: Quiz,
    course: Optional[Course],
    user: Optional[User],
) -> Dict[str, Any]:
    completed_at = as_utc(response.completed_at)
    return {
        '_id': response.id,
        'user': {
            'name': (user.name if user else None) or MISSING_USER_NAME,
            'email': (user.email if user else None) or '',
        },
        'quiz': {
            '_id': quiz.id,
            'title': quiz.title,
            'course': {'_id': course.id, 'title': course.title} if course else None,
        },
        'score': response.score,
        'passed': response.score >= quiz.minimum_score,
        'completedAt': completed_at.isoformat() if completed_at else None,
        'answers': json.loads(response.answers) if response.answers else [],
    }


def submit_quiz_response(quiz_id, user_id: int, answers) -> Dict[str, Any]:
    """Grade a submission, persist it and return the enriched response."""
    if quiz_id is None or answers is None:
        raise ValidationFailure("Invalid data")
    if not isinstance(answers, list):
        raise ValidationFailure("Answers must be a list")

    with get_session() as session:
        quiz = session.get(Quiz, quiz_id)
        if not quiz:
            raise NotFound("Quiz not found")
        course = session.get(Course, quiz.course_id) if quiz.course_id is not None else None
        if not course:
            raise ValidationFailure("Quiz has no associated course")

        if not config.ALLOW_RETAKES:
            previous = session.exec(
                select(QuizResponse.id).where(
                    QuizResponse.quiz_id == quiz.id, QuizResponse.user_id == user_id
                )
            ).first()
            if previous is not None:
                logger.info("Rejected repeated submission of quiz %s by user %s", quiz.id, user_id)
                raise Conflict("Quiz already answered")

        questions = list(session.exec(
            select(Question).where(Question.quiz_id == quiz.id).order_by(Question.position, Question.id)
        ))
        graded, correct_count = grade_answers(questions, answers)
        score = compute_score(correct_count, len(questions))

        response = QuizResponse(
            quiz_id=quiz.id,
            user_id=user_id,
            answers=json.dumps(graded),
            score=score,
            completed_at=now_utc(),
        )
        session.add(response)
        session.commit()
        session.refresh(response)
        logger.info(
            "Stored response %s for quiz %s by user %s: %s/%s correct, score %s",
            response.id, quiz.id, user_id, correct_count, len(questions), score,
        )

        user = session.get(User, user_id)
        return format_response(response, quiz, course, user)


def list_quiz_responses(course_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """Enriched responses, most recently completed first.

    Responses whose quiz or quiz course no longer resolves are skipped.
    """
    with get_session() as session:
        rquery = select(QuizResponse)
        if course_id is not None:
            quiz_ids = list(session.exec(select(Quiz.id).where(Quiz.course_id == course_id)))
            if not quiz_ids:
                return []
            rquery = rquery.where(QuizResponse.quiz_id.in_(quiz_ids))
        rquery = rquery.order_by(QuizResponse.completed_at.desc(), QuizResponse.id.desc())
        responses = list(session.exec(rquery))
        if not responses:
            return []

        quiz_map = {
            q.id: q for q in session.exec(
                select(Quiz).where(Quiz.id.in_(list({r.quiz_id for r in responses})))
            )
        }
        course_ids = {q.course_id for q in quiz_map.values() if q.course_id is not None}
        course_map = {}
        if course_ids:
            course_map = {c.id: c for c in session.exec(select(Course).where(Course.id.in_(list(course_ids))))}
        user_map = {
            u.id: u for u in session.exec(
                select(User).where(User.id.in_(list({r.user_id for r in responses})))
            )
        }

        results = []
        for r in responses:
            quiz = quiz_map.get(r.quiz_id)
            course = course_map.get(quiz.course_id) if quiz else None
            if quiz is None or course is None:
                logger.warning(
                    "Skipping quiz response %s: quiz %s or its course is missing", r.id, r.quiz_id
                )
                continue
            results.append(format_response(r, quiz, course, user_map.get(r.user_id)))
        return results


def get_user_quiz_response(user_id: int, course_id: int) -> Optional[Dict[str, Any]]:
    """Latest enriched response of a user to any quiz of the course."""
    with get_session() as session:
        quizzes = {q.id: q for q in session.exec(select(Quiz).where(Quiz.course_id == course_id))}
        if not quizzes:
            return None
        response = session.exec(
            select(QuizResponse)
            .where(QuizResponse.user_id == user_id, QuizResponse.quiz_id.in_(list(quizzes)))
            .order_by(QuizResponse.completed_at.desc(), QuizResponse.id.desc())
        ).first()
        if response is None:
            return None
        course = session.get(Course, course_id)
        user = session.get(User, user_id)
        return format_response(response, quizzes[response.quiz_id], course, user)
