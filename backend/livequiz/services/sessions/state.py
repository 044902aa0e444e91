"""In-memory session state and the registry of live sessions."""
import random
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple


def random_session_code() -> str:
    return str(random.randint(100000, 999999))


@dataclass(frozen=True)
class QuestionSnapshot:
    text: str
    options: Tuple[str, ...]
    correct_option_index: int
    time_limit: int

    def to_public_dict(self, index: int, total: int) -> dict:
        """Question payload for players; never carries the correct index."""
        return {
            'text': self.text,
            'options': list(self.options),
            'time_limit': self.time_limit,
            'index': index,
            'total': total,
        }


@dataclass(frozen=True)
class QuizSnapshot:
    title: str
    questions: Tuple[QuestionSnapshot, ...]

    def __len__(self) -> int:
        return len(self.questions)

    @classmethod
    def from_dict(cls, data: dict) -> "QuizSnapshot":
        return cls(
            title=data['title'],
            questions=tuple(
                QuestionSnapshot(
                    text=q['text'],
                    options=tuple(q['options']),
                    correct_option_index=int(q['correct_option_index']),
                    time_limit=int(q['time_limit']),
                )
                for q in data.get('questions', [])
            ),
        )


@dataclass
class Player:
    sid: str
    name: str
    score: int = 0

    def to_dict(self) -> dict:
        return {'id': self.sid, 'name': self.name, 'score': self.score}


@dataclass(frozen=True)
class FastestCorrect:
    player_name: str
    elapsed_seconds: float

    def to_dict(self) -> dict:
        return {
            'player_name': self.player_name,
            'elapsed_seconds': round(self.elapsed_seconds, 2),
        }


@dataclass
class Session:
    code: str
    quiz_ref: int
    host_sid: str
    players: Dict[str, Player] = field(default_factory=dict)  # sid -> Player, join order
    current_question_index: int = -1
    is_live: bool = False
    snapshot: Optional[QuizSnapshot] = None
    question_started_at: float = 0.0
    fastest_correct: Optional[FastestCorrect] = None
    active_timer: Optional[object] = None
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @property
    def room(self) -> str:
        return self.code

    @property
    def current_question(self) -> Optional[QuestionSnapshot]:
        if self.snapshot is None:
            return None
        if 0 <= self.current_question_index < len(self.snapshot):
            return self.snapshot.questions[self.current_question_index]
        return None

    def add_player(self, sid: str, name: str) -> Player:
        player = Player(sid=sid, name=name)
        self.players[sid] = player
        return player

    def roster(self) -> List[dict]:
        return [{'name': p.name, 'score': p.score} for p in self.players.values()]


class SessionRegistry:
    """Process-wide mapping of session code to live Session."""

    def __init__(self, code_factory: Callable[[], str] = random_session_code):
        self._code_factory = code_factory
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def create(self, quiz_ref, host_sid: str) -> Session:
        with self._lock:
            code = self._code_factory()
            while code in self._sessions:
                code = self._code_factory()
            session = Session(code=code, quiz_ref=quiz_ref, host_sid=host_sid)
            self._sessions[code] = session
            return session

    def get(self, code) -> Optional[Session]:
        if code is None:
            return None
        return self._sessions.get(str(code))

    def remove(self, code) -> Optional[Session]:
        with self._lock:
            return self._sessions.pop(str(code), None)

    def __contains__(self, code) -> bool:
        return str(code) in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

