import json

import pytest

from lms.models import Question
from lms.quiz import compute_score, expected_answer, grade_answers, is_answer_correct


def _mcq(qid, answer, position=0):
    return Question(id=qid, quiz_id=1, position=position, text=f'Q{qid}', type='multiple_choice', correct_answer=answer)


def test_positional_grading_example():
    questions = [_mcq(i + 1, letter, i) for i, letter in enumerate('ABCD')]
    answers = [{'selectedAnswer': s} for s in ['A', 'B', 'X', 'D']]
    graded, correct = grade_answers(questions, answers)
    assert correct == 3
    assert [a['isCorrect'] for a in graded] == [True, True, False, True]
    assert compute_score(correct, len(questions)) == 75


def test_question_id_does_not_change_positional_grading():
    questions = [_mcq(10, 'A', 0), _mcq(11, 'B', 1)]
    answers = [
        {'questionId': 11, 'selectedAnswer': 'B'},
        {'questionId': 10, 'selectedAnswer': 'A'},
    ]
    graded, correct = grade_answers(questions, answers)
    assert correct == 0
    assert graded[0] == {'questionId': 11, 'selectedAnswer': 'B', 'isCorrect': False}


def test_question_id_pointing_elsewhere_keeps_position():
    questions = [_mcq(i + 1, letter, i) for i, letter in enumerate('ABCD')]
    answers = [{'questionId': 2, 'selectedAnswer': 'A'}] + [{'selectedAnswer': s} for s in 'BCD']
    graded, correct = grade_answers(questions, answers)
    assert correct == 4
    assert [a['isCorrect'] for a in graded] == [True, True, True, True]
    assert compute_score(correct, len(questions)) == 100


def test_unknown_and_extra_answers_are_wrong():
    questions = [_mcq(1, 'A')]
    answers = [
        {'selectedAnswer': 'A'},
        {'selectedAnswer': 'A'},
        {'questionId': 99, 'selectedAnswer': 'A'},
    ]
    graded, correct = grade_answers(questions, answers)
    assert correct == 1
    assert [a['isCorrect'] for a in graded] == [True, False, False]


def test_submitted_fields_are_kept():
    graded, _ = grade_answers([_mcq(1, 'A')], [{'selectedAnswer': 'A', 'timeSpent': 12}])
    assert graded == [{'selectedAnswer': 'A', 'timeSpent': 12, 'isCorrect': True}]


def test_expected_answer_falls_back_to_flagged_option():
    q = Question(
        id=1, quiz_id=1, text='Pick', type='multiple_choice',
        options=json.dumps([{'text': 'x', 'isCorrect': False}, {'text': 'y', 'isCorrect': True}]),
    )
    assert expected_answer(q) == 'y'
    assert is_answer_correct(q, 'y')
    assert not is_answer_correct(q, 'x')


def test_question_without_answer_key_is_never_correct():
    q = Question(id=1, quiz_id=1, text='Pick', type='multiple_choice')
    assert expected_answer(q) is None
    assert not is_answer_correct(q, 'anything')


def test_choice_answers_must_match_exactly():
    q = _mcq(1, '2')
    assert is_answer_correct(q, '2')
    assert not is_answer_correct(q, 2)
    assert not is_answer_correct(q, ' 2 ')
    assert not is_answer_correct(q, '3')


def test_true_false_needs_the_stored_value():
    q = Question(id=1, quiz_id=1, text='Sky is blue', type='true_false', correct_answer='true')
    assert is_answer_correct(q, 'true')
    assert not is_answer_correct(q, True)
    assert not is_answer_correct(q, 'True')
    assert not is_answer_correct(q, 'yes')
    assert not is_answer_correct(q, 'false')


def test_essay_answers_are_compared_verbatim():
    q = Question(id=1, quiz_id=1, text='Language', type='essay', correct_answer='C++')
    assert is_answer_correct(q, 'C++')
    assert not is_answer_correct(q, 'C#')
    assert not is_answer_correct(q, 'c++')
    assert not is_answer_correct(q, 'C++ ')


def test_mixed_quiz_with_near_misses_scores_zero():
    questions = [
        Question(id=1, quiz_id=1, position=0, text='Language', type='essay', correct_answer='C++'),
        _mcq(2, 'A', 1),
    ]
    graded, correct = grade_answers(questions, [{'selectedAnswer': 'C#'}, {'selectedAnswer': ' A '}])
    assert correct == 0
    assert compute_score(correct, len(questions)) == 0


@pytest.mark.parametrize(
    'correct,total,score',
    [(0, 4, 0), (4, 4, 100), (1, 8, 13), (1, 3, 33), (2, 3, 67), (5, 10, 50), (0, 0, 0)],
)
def test_compute_score_rounds_half_up(correct, total, score):
    assert compute_score(correct, total) == score


def test_score_stays_in_percent_range():
    for total in range(1, 25):
        for correct in range(total + 1):
            score = compute_score(correct, total)
            assert 0 <= score <= 100
            assert abs(score - 100 * correct / total) <= 0.5
