"""Protocol definitions for speech-to-text system components.

This module defines structural interfaces using Python's Protocol for duck typing.
"""

from typing import Callable, Protocol

from src.types import (
    ListenOptions,
    LocaleName,
    RecognitionResult,
    SpeechRecognitionError,
)

StatusListener = Callable[[str], None]
ErrorListener = Callable[[SpeechRecognitionError], None]
ResultListener = Callable[[RecognitionResult], None]
SoundLevelListener = Callable[[float], None]


class RecognitionEngine(Protocol):
    """External speech recognition engine.

    The engine owns audio capture and acoustic recognition. It reports
    results, status changes, sound levels and errors through the callbacks
    registered in initialize() and listen().

    Thread Safety:
        Implementations must invoke callbacks on the event-loop thread that
        awaits their coroutines. SpeechController relies on this and holds no locks.
    """

    @property
    def is_listening(self) -> bool:
        ...

    async def initialize(self, on_status: StatusListener, on_error: ErrorListener) -> bool:
        """Prepare the engine.

        Returns:
            True if recognition is available
        """
        ...

    async def listen(
        self,
        on_result: ResultListener,
        on_sound_level_change: SoundLevelListener,
        listen_options: ListenOptions,
        locale_id: str | None = None,
        listen_for: float | None = None,
        pause_for: float | None = None,
    ) -> None:
        """Begin a recognition session.

        Args:
            on_result: Receives partial and final results
            on_sound_level_change: Receives input level updates
            listen_options: Partial results, cancel-on-error, mode, punctuation
            locale_id: Locale to recognize, None for the engine default
            listen_for: Maximum session duration in seconds
            pause_for: Trailing-silence timeout in seconds
        """
        ...

    async def stop(self) -> None:
        ...

    async def cancel(self) -> None:
        ...

    async def locales(self) -> list[LocaleName]:
        ...

    async def system_locale(self) -> LocaleName | None:
        ...
