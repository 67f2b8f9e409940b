# tests/engine_fixture.py
import asyncio
from typing import Optional

from src.types import ListenOptions, LocaleName, RecognitionResult, SpeechRecognitionError


class FakeRecognitionEngine:
    """In-memory RecognitionEngine for controller tests.

    Records calls in ``calls`` and lets tests emit engine events through
    emit_result / emit_status / emit_error / emit_sound_level.
    """

    def __init__(self, available: bool = True,
                 locales: Optional[list[LocaleName]] = None,
                 system_locale: Optional[str] = None):
        self.available = available
        self._locales = locales if locales is not None else []
        self._system_locale = system_locale
        self.is_listening = False
        self.calls: list[str] = []

        self.initialize_error: Optional[Exception] = None
        self.listen_error: Optional[Exception] = None
        self.stop_error: Optional[Exception] = None
        # When set, initialize()/listen() wait for it before returning
        self.initialize_gate: Optional[asyncio.Event] = None
        self.listen_gate: Optional[asyncio.Event] = None

        self.on_status = None
        self.on_error = None
        self.on_result = None
        self.on_sound_level = None
        self.listen_kwargs: dict = {}

    async def initialize(self, on_status, on_error) -> bool:
        self.calls.append('initialize')
        self.on_status = on_status
        self.on_error = on_error
        if self.initialize_gate is not None:
            await self.initialize_gate.wait()
        if self.initialize_error is not None:
            raise self.initialize_error
        return self.available

    async def listen(self, on_result, on_sound_level_change, listen_options: ListenOptions,
                     locale_id=None, listen_for=None, pause_for=None) -> None:
        self.calls.append('listen')
        self.listen_kwargs = {
            'listen_options': listen_options,
            'locale_id': locale_id,
            'listen_for': listen_for,
            'pause_for': pause_for,
        }
        if self.listen_gate is not None:
            await self.listen_gate.wait()
        if self.listen_error is not None:
            raise self.listen_error
        self.on_result = on_result
        self.on_sound_level = on_sound_level_change
        self.is_listening = True

    async def stop(self) -> None:
        self.calls.append('stop')
        if self.stop_error is not None:
            raise self.stop_error
        self.is_listening = False

    async def cancel(self) -> None:
        self.calls.append('cancel')
        self.is_listening = False

    async def locales(self) -> list[LocaleName]:
        self.calls.append('locales')
        return list(self._locales)

    async def system_locale(self) -> Optional[LocaleName]:
        self.calls.append('system_locale')
        if self._system_locale is None:
            return None
        return LocaleName(locale_id=self._system_locale)

    # Event helpers

    def emit_result(self, text: str, final: bool = False) -> None:
        self.on_result(RecognitionResult(recognized_words=text, final_result=final))

    def emit_status(self, status: str) -> None:
        self.on_status(status)

    def emit_error(self, message: str, permanent: bool = False) -> None:
        self.on_error(SpeechRecognitionError(error_msg=message, permanent=permanent))

    def emit_sound_level(self, level: float) -> None:
        self.on_sound_level(level)
