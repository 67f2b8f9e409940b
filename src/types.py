"""Type definitions for the dictation transcript engine."""

from dataclasses import dataclass, field
from enum import Enum


class RecognitionStatus(str, Enum):
    """Status strings reported by the recognition engine and the controller.

    Engines may report statuses outside this set; the controller carries
    status as a plain string and only compares against these values.
    """
    IDLE = 'idle'
    INITIALIZING = 'initializing'
    READY = 'ready'
    FAILED = 'failed'
    STARTING = 'starting'
    LISTENING = 'listening'
    DONE = 'done'
    NOT_LISTENING = 'notListening'
    DONE_NO_RESULT = 'doneNoResult'


# Statuses that end the current recognition session
TERMINAL_STATUSES = frozenset({
    RecognitionStatus.DONE.value,
    RecognitionStatus.NOT_LISTENING.value,
    RecognitionStatus.DONE_NO_RESULT.value,
})


class LifecycleState(str, Enum):
    """Lifecycle states of the recognition engine as seen by SpeechController.

    State Transitions:
    - UNINITIALIZED → INITIALIZING: initialize() called
    - INITIALIZING → READY | FAILED: engine initialization finished
    - FAILED → INITIALIZING: retry
    - READY → STARTING: start() called
    - STARTING → LISTENING: listen request accepted
    - STARTING → READY: listen request failed
    - LISTENING → STARTING: start() called while listening (restart)
    - LISTENING → READY: stop() or terminal status
    - READY | STARTING | LISTENING → UNINITIALIZED: permanent engine error
    """
    UNINITIALIZED = 'uninitialized'
    INITIALIZING = 'initializing'
    READY = 'ready'
    FAILED = 'failed'
    STARTING = 'starting'
    LISTENING = 'listening'


class ListenMode(str, Enum):
    CONFIRMATION = 'confirmation'
    SEARCH = 'search'
    DICTATION = 'dictation'


@dataclass
class ListenOptions:
    """Options handed to the engine with every listen request."""
    partial_results: bool = True
    cancel_on_error: bool = True
    listen_mode: ListenMode = ListenMode.DICTATION
    auto_punctuation: bool = True


@dataclass
class TranscriptState:
    """Committed and in-flight transcript buffers.

    Attributes:
        committed_text: Text of sessions that have ended
        session_text: Latest (possibly incomplete) result of the active session
    """
    committed_text: str = ''
    session_text: str = ''


@dataclass(frozen=True)
class RecognitionResult:
    """One recognition hypothesis delivered by the engine.

    Attributes:
        recognized_words: Recognized text
        final_result: True for the last, authoritative hypothesis of a session
        confidence: Engine confidence in ``[0.0, 1.0]``, 0.0 when unknown
    """
    recognized_words: str
    final_result: bool = False
    confidence: float = 0.0


@dataclass(frozen=True)
class SpeechRecognitionError:
    """Asynchronous error reported by the engine."""
    error_msg: str
    permanent: bool = False


@dataclass(frozen=True)
class LocaleName:
    locale_id: str
    name: str = ''


@dataclass(frozen=True)
class SpeechSnapshot:
    """Immutable view of controller state handed to the presentation layer."""
    display_text: str
    committed_text: str
    status: str
    error_message: str
    ready: bool
    locale_id: str
    sound_level: float
    is_listening: bool
    lifecycle: LifecycleState
    locale_names: tuple[LocaleName, ...] = field(default_factory=tuple)
