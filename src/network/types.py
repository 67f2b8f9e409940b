"""WebSocket wire protocol message types for the remote recognition engine (v1)."""

from dataclasses import dataclass, field
from typing import Literal


# ---------------------------------------------------------------------------
# Client → Server
# ---------------------------------------------------------------------------

@dataclass
class WsListenCommand:
    """JSON listen frame asking the service to begin a recognition session.

    Args:
        locale_id: Locale to recognize; ``None`` selects the service default.
        partial_results: Stream partial hypotheses as well as final ones.
        cancel_on_error: Abort the session on the first recognition error.
        listen_mode: ``"confirmation"``, ``"search"`` or ``"dictation"``.
        auto_punctuation: Let the service insert punctuation.
        listen_for: Maximum session duration in seconds.
        pause_for: Trailing-silence timeout in seconds.
    """

    locale_id: str | None
    partial_results: bool = True
    cancel_on_error: bool = True
    listen_mode: str = "dictation"
    auto_punctuation: bool = True
    listen_for: float | None = None
    pause_for: float | None = None


@dataclass
class WsControlCommand:
    """JSON control_command frame sent from client to server.

    Args:
        command: ``"stop"`` finishes the session and delivers its final result;
            ``"cancel"`` discards it.
        timestamp: Client wall-clock time when the command was issued.
    """

    command: Literal["stop", "cancel"]
    timestamp: float


# ---------------------------------------------------------------------------
# Server → Client
# ---------------------------------------------------------------------------

@dataclass
class WsEngineReady:
    """JSON engine_ready frame sent by the server right after connect.

    Args:
        protocol_version: Wire protocol version string (``"v1"``).
        locales: Supported locales as ``{"locale_id": ..., "name": ...}`` dicts.
        system_locale: Locale preferred by the host system, if known.
    """

    protocol_version: str
    locales: list[dict] = field(default_factory=list)
    system_locale: str | None = None


@dataclass
class WsStatus:
    """JSON status frame: recognition lifecycle status such as ``listening`` or ``done``."""

    status: str


@dataclass
class WsRecognitionResult:
    """JSON recognition_result frame streamed from server to client.

    Args:
        text: Recognized text of the current session so far.
        final: ``True`` for the session's last, authoritative hypothesis.
        confidence: Confidence in ``[0.0, 1.0]``.
    """

    text: str
    final: bool = False
    confidence: float = 0.0


@dataclass
class WsSoundLevel:
    """JSON sound_level frame carrying the current input level."""

    level: float


@dataclass
class WsError:
    """JSON error frame sent from server to client.

    Args:
        error_code: Machine-readable error code.
        message: Human-readable description.
        permanent: If ``True``, the service must be re-initialized before listening again.
    """

    error_code: str
    message: str
    permanent: bool = False


# ---------------------------------------------------------------------------
# Union types
# ---------------------------------------------------------------------------

ServerMessage = WsEngineReady | WsStatus | WsRecognitionResult | WsSoundLevel | WsError
ClientTextMessage = WsListenCommand | WsControlCommand
