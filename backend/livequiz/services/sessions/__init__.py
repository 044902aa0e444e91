"""Live session engine: registry, countdowns, scoring and lifecycle.

This package holds the in-memory game state for running quiz sessions.
Socket handlers translate transport events into controller calls; the
controller only talks back to clients through an ``Outbound`` object,
so everything here can be exercised without a live transport.
"""

from .controller import SessionController
from .outbound import Outbound, SocketIOOutbound
from .state import FastestCorrect, Player, QuestionSnapshot, QuizSnapshot, Session, SessionRegistry
from .timer import QuestionTimer
