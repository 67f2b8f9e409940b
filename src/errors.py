"""Error kinds surfaced by SpeechController.

None of these propagate out of the controller: they are caught, logged and
exposed as ``controller.error`` / ``controller.error_message``.
"""


class SpeechError(Exception):
    """Base class for recognition errors shown to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InitializationFailure(SpeechError):
    """Engine unavailable, or it raised during initialization."""


class StartFailure(SpeechError):
    """Engine raised while a listen request was being made."""


class StopFailure(SpeechError):
    """Engine raised while a stop request was being made."""


class EngineReportedError(SpeechError):
    """Asynchronous error event from the engine.

    A permanent error requires re-initialization before the next start;
    a transient one allows retry.
    """

    def __init__(self, message: str, permanent: bool = False) -> None:
        super().__init__(message)
        self.permanent = permanent
