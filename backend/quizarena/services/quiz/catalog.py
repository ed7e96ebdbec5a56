from typing import Dict, List

from quizarena import db
from quizarena.models import Question
from .errors import NotFound

POINT_VALUES: Dict[str, int] = {'Easy': 25, 'Medium': 50, 'Hard': 100}
MAX_HINTS: Dict[str, int] = {'Easy': 1, 'Medium': 2, 'Hard': 3}
HINT_COST_STEP = 5


def point_value(difficulty: str) -> int:
    return POINT_VALUES[difficulty]


def max_hints(difficulty: str) -> int:
    return MAX_HINTS[difficulty]


def hint_cost(hint_index: int) -> int:
    """Cost of the hint at ``hint_index`` (0-indexed): 5, 10, 15."""
    return HINT_COST_STEP * (hint_index + 1)


def hint_limit(question: Question) -> int:
    """Hints a team may reveal: what the question carries, capped by its tier."""
    return min(len(question.hints), max_hints(question.difficulty))


def get_question(question_id) -> Question:
    question = None
    if not isinstance(question_id, bool):
        try:
            question = db.session.get(Question, int(question_id))
        except (TypeError, ValueError):
            question = None
    if question is None:
        raise NotFound('Question not found.')
    return question


def list_questions() -> List[Question]:
    return Question.query.order_by(Question.id).all()


def public_view(question: Question) -> dict:
    """Team-facing view of a question: no correct answer, no hint texts."""
    limit = hint_limit(question)
    return {
        'id': question.id,
        'text': question.text,
        'category': question.category,
        'difficulty': question.difficulty,
        'links': question.links,
        'marks': point_value(question.difficulty),
        'max_attempts': question.max_attempts or 1,
        'hint_count': limit,
        'hint_costs': [hint_cost(i) for i in range(limit)],
    }
