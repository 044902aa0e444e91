class SessionNotFound(Exception):
    """Raised when a session code does not resolve to a live session."""

    def __init__(self, code):
        super().__init__(f"Session {code} not found")
        self.code = code


class PersistenceFailure(Exception):
    """A Quiz Store or Result Archive call failed."""


class QuizNotFound(PersistenceFailure):
    def __init__(self, quiz_ref):
        super().__init__(f"Quiz {quiz_ref} not found")
        self.quiz_ref = quiz_ref
