import threading
import time
from typing import Callable, Optional


class QuestionTimer:
    """Cancellable per-question countdown.

    - ``tick()`` advances the countdown by one step and fires the callbacks
    - ``run()`` is the background loop: sleep, tick, until expired or canceled
    - ``cancel()`` is idempotent and stops the loop at its next wake-up

    Callbacks receive the timer itself so the owner can check that the timer
    is still the one attached to its session before acting on a tick.
    """

    def __init__(
        self,
        seconds: int,
        on_tick: Callable[["QuestionTimer", int], None],
        on_expire: Callable[["QuestionTimer"], None],
        interval: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.remaining = max(0, int(seconds))
        self.interval = interval
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._sleep = sleep
        self._cancelled = threading.Event()
        self._expired = False
        self._started = False

    @property
    def active(self) -> bool:
        return self._started and not self._expired and not self._cancelled.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self, spawn: Optional[Callable] = None) -> "QuestionTimer":
        """Arm the countdown; with ``spawn`` the loop runs as a background task."""
        self._started = True
        if spawn is not None:
            spawn(self.run)
        return self

    def cancel(self) -> None:
        self._cancelled.set()

    def tick(self) -> bool:
        if not self.active:
            return False
        self.remaining = max(0, self.remaining - 1)
        self._on_tick(self, self.remaining)
        if self.remaining <= 0 and not self.cancelled:
            self._expired = True
            self._on_expire(self)
        return self.active

    def run(self) -> None:
        while self.active:
            self._sleep(self.interval)
            if not self.active:
                return
            self.tick()
