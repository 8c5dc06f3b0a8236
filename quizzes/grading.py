from rest_framework.exceptions import ValidationError

from courses.models import Question

PASSING_PERCENTAGE = 60


# --------------------------------------------------
# Helpers
# --------------------------------------------------

def normalize_text(s):
    return " ".join(("" if s is None else str(s)).lower().split())


def is_answer_correct(question, submitted):
    if question.question_type == Question.SINGLE_CHOICE:
        return submitted == str(question.correct_answers[0])

    if question.question_type == Question.MULTI_CHOICE:
        return set(submitted) == {str(a) for a in question.correct_answers}

    if question.question_type == Question.FREE_TEXT:
        accepted = {normalize_text(a) for a in question.correct_answers}
        return normalize_text(submitted) in accepted

    return False


# --------------------------------------------------
# Grade a submission
# --------------------------------------------------

def grade_against_bank(answers, questions):
    """
    Grade every answer server-side. ``questions`` is the lesson's question
    bank keyed by id; questions left unanswered score zero but still count
    towards the maximum.
    """
    graded = []
    answered = set()

    for item in answers:
        question = questions.get(item['question_id'])
        if question is None:
            raise ValidationError({'answers': [f"Question {item['question_id']} does not belong to this lesson"]})
        if item['type'] != question.question_type:
            raise ValidationError({'answers': [
                f"Question {question.id} expects a {question.question_type} answer, got {item['type']}"
            ]})

        correct = is_answer_correct(question, item['answer'])
        graded.append({
            'question_id': question.id,
            'question_type': question.question_type,
            'submitted_answer': item['answer'],
            'is_correct': correct,
            'points_awarded': question.points if correct else 0,
            'points_possible': question.points,
        })
        answered.add(question.id)

    for question_id, question in questions.items():
        if question_id in answered:
            continue
        graded.append({
            'question_id': question_id,
            'question_type': question.question_type,
            'submitted_answer': None,
            'is_correct': False,
            'points_awarded': 0,
            'points_possible': question.points,
        })

    return graded


def accept_client_grading(answers):
    """Lessons without a question bank: trust the caller's own grading."""
    graded = []
    for item in answers:
        if 'is_correct' not in item or 'points' not in item:
            raise ValidationError({'answers': [
                f"Question {item['question_id']}: is_correct and points are required for this lesson"
            ]})

        graded.append({
            'question_id': item['question_id'],
            'question_type': item['type'],
            'submitted_answer': item['answer'],
            'is_correct': item['is_correct'],
            'points_awarded': item['points'] if item['is_correct'] else 0,
            'points_possible': item['points'],
        })
    return graded


def score_answers(graded):
    """Returns (total_score, max_score, percentage, passed)."""
    total_score = sum(a['points_awarded'] for a in graded)
    max_score = sum(a['points_possible'] for a in graded)

    if max_score <= 0:
        raise ValidationError({'answers': ["A quiz submission must be worth at least one point"]})

    percentage = total_score / max_score * 100
    return total_score, max_score, percentage, percentage >= PASSING_PERCENTAGE
