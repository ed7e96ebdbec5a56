from datetime import timedelta

import pytest

from quizarena import db
from quizarena.models import Team
from quizarena.services.quiz.attempts import attempt
from quizarena.services.quiz.catalog import hint_limit
from quizarena.services.quiz.errors import AlreadySubmitted, NoHintsAvailable, QuizExpired
from quizarena.services.quiz.hints import reveal_hint
from quizarena.services.quiz.session import submit

HARD_HINTS = ['Two letters.', 'From the Latin word aurum.', 'Starts with A.']


@pytest.fixture()
def hard_question(make_question):
    return make_question(text='Chemical symbol for Gold?', correct_answer='Au', difficulty='Hard', max_attempts=2, hints=HARD_HINTS)


def test_hints_revealed_in_order_with_rising_cost(team, hard_question, live_window, clock_start):
    now = clock_start + timedelta(minutes=1)

    first = reveal_hint(team.id, hard_question.id, 0, now=now)
    assert first == {'hint_text': 'Two letters.', 'new_score': -5, 'hints_used': 1, 'cost': 5}

    second = reveal_hint(team.id, hard_question.id, 1, now=now)
    assert second['new_score'] == -15
    third = reveal_hint(team.id, hard_question.id, 2, now=now)
    assert third['hint_text'] == 'Starts with A.'
    assert third['new_score'] == -30

    with pytest.raises(NoHintsAvailable):
        reveal_hint(team.id, hard_question.id, 3, now=now)


@pytest.mark.parametrize('index', [1, 2, -1])
def test_out_of_order_hint_index_fails(team, hard_question, live_window, clock_start, index):
    with pytest.raises(NoHintsAvailable):
        reveal_hint(team.id, hard_question.id, index, now=clock_start)
    db.session.expire_all()
    assert db.session.get(Team, team.id).score == 0


def test_repeating_a_revealed_index_fails(team, hard_question, live_window, clock_start):
    reveal_hint(team.id, hard_question.id, 0, now=clock_start)
    with pytest.raises(NoHintsAvailable):
        reveal_hint(team.id, hard_question.id, 0, now=clock_start)


def test_hint_count_capped_by_difficulty(team, make_question, live_window, clock_start):
    easy = make_question(hints=['City of Light.', 'On the Seine.', 'Capital.'])
    assert hint_limit(easy) == 1

    reveal_hint(team.id, easy.id, 0, now=clock_start)
    with pytest.raises(NoHintsAvailable):
        reveal_hint(team.id, easy.id, 1, now=clock_start)


def test_question_without_hints(team, make_question, live_window, clock_start):
    question = make_question(difficulty='Hard', hints=[])
    with pytest.raises(NoHintsAvailable):
        reveal_hint(team.id, question.id, 0, now=clock_start)


def test_no_hint_after_correct_answer(team, hard_question, live_window, clock_start):
    attempt(team.id, hard_question.id, 'Au', now=clock_start)
    with pytest.raises(NoHintsAvailable):
        reveal_hint(team.id, hard_question.id, 0, now=clock_start)


def test_hint_cost_then_correct_answer_nets_points(team, hard_question, live_window, clock_start):
    reveal_hint(team.id, hard_question.id, 0, now=clock_start)
    result = attempt(team.id, hard_question.id, 'au', now=clock_start)
    assert result['score'] == 95


def test_hint_rejected_after_submit_or_expiry(team, hard_question, live_window, clock_start):
    with pytest.raises(QuizExpired):
        reveal_hint(team.id, hard_question.id, 0, now=clock_start + timedelta(minutes=31))

    submit(team.id, now=clock_start + timedelta(minutes=5))
    with pytest.raises(AlreadySubmitted):
        reveal_hint(team.id, hard_question.id, 0, now=clock_start + timedelta(minutes=6))


def test_non_integer_hint_index(team, hard_question, live_window, clock_start):
    with pytest.raises(NoHintsAvailable):
        reveal_hint(team.id, hard_question.id, 'first', now=clock_start)
    # JSON true/false are not indexes even though they compare equal to 1/0
    with pytest.raises(NoHintsAvailable):
        reveal_hint(team.id, hard_question.id, False, now=clock_start)
    db.session.expire_all()
    assert db.session.get(Team, team.id).score == 0
