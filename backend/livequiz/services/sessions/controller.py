import contextlib
import logging
import time
from functools import partial
from typing import Callable, Optional

from flask import current_app

from livequiz.errors import PersistenceFailure, SessionNotFound
from .outbound import Outbound
from .scoring import POINTS_PER_CORRECT, AnswerOutcome, score_answer
from .state import Player, QuizSnapshot, Session, SessionRegistry
from .timer import QuestionTimer

EXTENSION_KEY = 'livequiz.sessions'


def get_controller() -> "SessionController":
    return current_app.extensions[EXTENSION_KEY]


class SessionController:
    """Owns the session registry and drives every live quiz session.

    All mutation of a Session happens under ``session.lock``. Outbound
    messages go through the injected ``Outbound``; quizzes are read from
    ``quiz_store`` and finished sessions are handed to ``archive``.
    """

    def __init__(
        self,
        outbound: Outbound,
        quiz_store,
        archive,
        registry: Optional[SessionRegistry] = None,
        clock: Callable[[], float] = time.monotonic,
        spawn: Optional[Callable] = None,
        sleep: Callable[[float], None] = time.sleep,
        points_per_correct: int = POINTS_PER_CORRECT,
        tick_interval: float = 1.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.outbound = outbound
        self.quiz_store = quiz_store
        self.archive = archive
        self.registry = registry if registry is not None else SessionRegistry()
        self.points_per_correct = points_per_correct
        self.tick_interval = tick_interval
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock
        self._spawn = spawn
        self._sleep = sleep
        self._app = None

    def init_app(self, app) -> None:
        self._app = app
        self.logger = app.logger
        app.extensions[EXTENSION_KEY] = self

    def _app_context(self):
        if self._app is None:
            return contextlib.nullcontext()
        return self._app.app_context()

    # ---- lifecycle ----

    def create_session(self, quiz_ref, host_sid: str) -> str:
        session = self.registry.create(quiz_ref, host_sid)
        self.outbound.join(host_sid, session.room)
        self.outbound.to_participant(host_sid, 'session-created', {'code': session.code})
        self.logger.info(f"[session-create] code={session.code} quiz={quiz_ref} host={host_sid}")
        return session.code

    def join_session(self, code, sid: str, name: str) -> Player:
        session = self.registry.get(code)
        if session is None:
            raise SessionNotFound(code)
        with session.lock:
            if self.registry.get(code) is not session:
                raise SessionNotFound(code)
            player = session.add_player(sid, name)
            self.outbound.join(sid, session.room)
            self.outbound.to_participant(session.host_sid, 'player-joined', player.to_dict())
            self.outbound.to_participant(sid, 'join-success', {'code': session.code, 'name': name})
        self.logger.info(f"[session-join] code={session.code} player={sid} name={name!r}")
        return player

    def start_session(self, code, sid: str) -> bool:
        session = self.registry.get(code)
        if session is None:
            return False
        with session.lock:
            if sid != session.host_sid:
                self.logger.debug(f"[unauthorized] code={session.code} sid={sid} action=start")
                return False
            if session.is_live:
                return False
            if not self._ensure_snapshot(session):
                return False
            session.is_live = True
            session.current_question_index = 0
            self.outbound.to_room(
                session.room, 'game-started', {'code': session.code, 'title': session.snapshot.title}
            )
            self.logger.info(f"[session-start] code={session.code} questions={len(session.snapshot)}")
            self.dispatch_question(session)
        return True

    def advance_question(self, code, sid: str) -> bool:
        session = self.registry.get(code)
        if session is None:
            return False
        with session.lock:
            if sid != session.host_sid:
                self.logger.debug(f"[unauthorized] code={session.code} sid={sid} action=advance")
                return False
            if not session.is_live:
                return False
            session.current_question_index += 1
            self.dispatch_question(session)
        return True

    def submit_answer(self, code, sid: str, answer_index) -> Optional[AnswerOutcome]:
        session = self.registry.get(code)
        if session is None:
            return None
        with session.lock:
            outcome = score_answer(session, sid, answer_index, self._clock(), self.points_per_correct)
            if outcome is None:
                return None
            self.logger.debug(
                f"[answer] code={session.code} index={session.current_question_index} "
                f"player={sid} correct={outcome.is_correct} elapsed={outcome.elapsed_seconds:.2f}s"
            )
            self.outbound.to_participant(
                session.host_sid,
                'player-answered',
                {'player_id': sid, 'name': outcome.player.name},
            )
        return outcome

    # ---- question dispatch ----

    def dispatch_question(self, session: Session) -> None:
        """Broadcast the question at the current index, or end the game past the last one."""
        with session.lock:
            if not self._ensure_snapshot(session):
                return
            question = session.current_question
            if question is None:
                self._finish(session)
                return
            session.question_started_at = self._clock()
            session.fastest_correct = None
            self.outbound.to_room(
                session.room,
                'new-question',
                question.to_public_dict(session.current_question_index, len(session.snapshot)),
            )
            self._start_timer(session, question.time_limit)

    def _ensure_snapshot(self, session: Session) -> bool:
        if session.snapshot is not None:
            return True
        try:
            with self._app_context():
                data = self.quiz_store.load(session.quiz_ref)
        except PersistenceFailure as exc:
            self.logger.warning(f"[quiz-load-failed] code={session.code} quiz={session.quiz_ref}: {exc}")
            self.outbound.to_participant(
                session.host_sid,
                'error',
                {'message': 'Quiz could not be loaded', 'code': session.code},
            )
            return False
        session.snapshot = QuizSnapshot.from_dict(data)
        return True

    def _finish(self, session: Session) -> None:
        if self.registry.get(session.code) is not session:
            return
        self._cancel_timer(session)
        session.is_live = False
        players = session.roster()
        self.outbound.to_room(session.room, 'game-over', {'code': session.code, 'players': players})
        record = {'quiz_ref': session.quiz_ref, 'code': session.code, 'players': players}
        try:
            with self._app_context():
                self.archive.save(record)
        except PersistenceFailure:
            self.logger.exception(f"[archive-failed] code={session.code} quiz={session.quiz_ref}")
        finally:
            self.registry.remove(session.code)
        self.logger.info(f"[game-over] code={session.code} players={len(players)}")

    # ---- timers ----

    def _start_timer(self, session: Session, seconds: int) -> QuestionTimer:
        self._cancel_timer(session)
        timer = QuestionTimer(
            seconds,
            on_tick=partial(self._on_tick, session),
            on_expire=partial(self._on_expire, session),
            interval=self.tick_interval,
            sleep=self._sleep,
        )
        session.active_timer = timer
        timer.start(spawn=self._spawn)
        self.logger.info(
            f"[timer-set] code={session.code} index={session.current_question_index} duration={seconds}s"
        )
        return timer

    def _cancel_timer(self, session: Session) -> None:
        timer = session.active_timer
        if timer is None:
            return
        session.active_timer = None
        if timer.active:
            timer.cancel()
            self.logger.info(f"[timer-cancel] code={session.code} remaining={timer.remaining}s")

    def _on_tick(self, session: Session, timer: QuestionTimer, remaining: int) -> None:
        with session.lock:
            if session.active_timer is not timer:
                return
            self.outbound.to_room(session.room, 'timer-tick', {'remaining_seconds': remaining})

    def _on_expire(self, session: Session, timer: QuestionTimer) -> None:
        with session.lock:
            if session.active_timer is not timer:
                return
            session.active_timer = None
            fastest = session.fastest_correct
            self.outbound.to_room(
                session.room,
                'question-ended',
                {'fastest_correct': fastest.to_dict() if fastest else None},
            )
            self.logger.info(
                f"[timer-expire] code={session.code} index={session.current_question_index} "
                f"fastest={fastest.player_name if fastest else None}"
            )
