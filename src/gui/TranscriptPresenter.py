"""
TranscriptPresenter - Pure formatting of SpeechSnapshot for the transcript window.

Kept free of tkinter so the presentation rules can be tested headless.
"""
from src.types import RecognitionStatus, SpeechSnapshot

DEFAULT_SOUND_LEVEL_SCALE = 35.0
SYSTEM_DEFAULT_LOCALE = 'system default'


def format_pills(snapshot: SpeechSnapshot) -> list[str]:
    """Return the header pill captions: readiness, status and locale."""
    locale = snapshot.locale_id or SYSTEM_DEFAULT_LOCALE
    return [
        f"Ready: {'Yes' if snapshot.ready else 'No'}",
        f"Status: {snapshot.status}",
        f"Locale: {locale}",
    ]


def sound_level_fraction(level: float, scale: float = DEFAULT_SOUND_LEVEL_SCALE) -> float:
    """Map an engine sound level to a progress fraction in [0.0, 1.0].

    Engines report levels with either sign, so the magnitude is used.
    """
    if scale <= 0:
        return 0.0
    return min(max(abs(level) / scale, 0.0), 1.0)


def mic_caption(is_listening: bool) -> str:
    return 'Listening...' if is_listening else 'Tap to start'


def mic_button_label(is_listening: bool) -> str:
    return 'Stop' if is_listening else 'Start'


def show_reset(snapshot: SpeechSnapshot) -> bool:
    """Reset is offered once a session is done and something was committed."""
    return (snapshot.status == RecognitionStatus.DONE.value
            and bool(snapshot.committed_text.strip()))
