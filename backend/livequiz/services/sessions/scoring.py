from typing import NamedTuple, Optional

from .state import FastestCorrect, Player, Session

POINTS_PER_CORRECT = 100


class AnswerOutcome(NamedTuple):
    player: Player
    is_correct: bool
    elapsed_seconds: float


def score_answer(
    session: Session,
    sid: str,
    answer_index,
    now: float,
    points: int = POINTS_PER_CORRECT,
) -> Optional[AnswerOutcome]:
    """Apply one answer to the session's current question.

    Returns None when the answer cannot be scored (session not live, quiz not
    loaded, index out of range, or unknown player). A correct answer adds a
    flat ``points`` award and may take over ``fastest_correct``; an equal
    elapsed time keeps the earlier record.

    Repeat submissions for the same question are scored independently.
    """
    if not session.is_live or session.snapshot is None:
        return None
    question = session.current_question
    if question is None:
        return None
    player = session.players.get(sid)
    if player is None:
        return None

    elapsed = now - session.question_started_at
    is_correct = answer_index == question.correct_option_index
    if is_correct:
        player.score += points
        fastest = session.fastest_correct
        if fastest is None or elapsed < fastest.elapsed_seconds:
            session.fastest_correct = FastestCorrect(player.name, elapsed)
    return AnswerOutcome(player, is_correct, elapsed)
