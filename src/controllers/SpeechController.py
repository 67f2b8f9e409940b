"""
SpeechController - Lifecycle controller for the external recognition engine.

Serializes initialize/start/stop requests through SpeechLifecycleState, maps
engine callbacks onto TranscriptAccumulator calls and surfaces errors as
user-visible messages. Every state change is published to observers as an
immutable SpeechSnapshot.

All methods and engine callbacks run on a single asyncio event-loop thread.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from src.ConfigLoader import DEFAULT_CONFIG
from src.SpeechLifecycleState import SpeechLifecycleState
from src.TranscriptAccumulator import TranscriptAccumulator
from src.errors import (
    EngineReportedError,
    InitializationFailure,
    SpeechError,
    StartFailure,
    StopFailure,
)
from src.protocols import RecognitionEngine
from src.types import (
    TERMINAL_STATUSES,
    LifecycleState,
    ListenMode,
    ListenOptions,
    LocaleName,
    RecognitionResult,
    RecognitionStatus,
    SpeechRecognitionError,
    SpeechSnapshot,
)

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = 'Speech recognition is unavailable on this device.'


class SpeechController:
    """
    Drives a RecognitionEngine and owns the transcript.

    Attributes:
        transcript: TranscriptAccumulator receiving session results
        lifecycle: SpeechLifecycleState guarding overlapping initialize/start
    """

    def __init__(self, engine: RecognitionEngine, config: Optional[Dict[str, Any]] = None,
                 transcript: Optional[TranscriptAccumulator] = None):
        """
        Args:
            engine: External recognition engine
            config: Application configuration (``listening`` and ``transcript`` sections)
            transcript: Accumulator to use (created from config if None)
        """
        config = config or {}
        listening = {**DEFAULT_CONFIG['listening'], **config.get('listening', {})}
        transcript_config = {**DEFAULT_CONFIG['transcript'], **config.get('transcript', {})}

        self._engine = engine
        self._listen_for: float = float(listening['listen_for'])
        self._pause_for: float = float(listening['pause_for'])
        self._listen_options = ListenOptions(
            partial_results=bool(listening['partial_results']),
            cancel_on_error=bool(listening['cancel_on_error']),
            listen_mode=ListenMode(listening['listen_mode']),
            auto_punctuation=bool(listening['auto_punctuation']),
        )

        self.transcript = transcript or TranscriptAccumulator(
            placeholder_text=transcript_config['placeholder_text']
        )
        self.lifecycle = SpeechLifecycleState()

        self._status: str = RecognitionStatus.IDLE.value
        self._error: Optional[SpeechError] = None
        self._locale_id: str = ''
        self._locale_names: List[LocaleName] = []
        self._sound_level: float = 0.0
        self._observers: List[Callable[[SpeechSnapshot], None]] = []
        # Set when the engine reports a permanent error before initialize() finishes
        self._permanent_error_during_init = False

    # ------------------------------------------------------------------
    # Presentation-facing state
    # ------------------------------------------------------------------

    @property
    def display_text(self) -> str:
        return self.transcript.get_display_text()

    @property
    def status(self) -> str:
        return self._status

    @property
    def error(self) -> Optional[SpeechError]:
        return self._error

    @property
    def error_message(self) -> str:
        return self._error.message if self._error is not None else ''

    @property
    def ready(self) -> bool:
        return self.lifecycle.is_ready

    @property
    def resolved_locale_id(self) -> str:
        """Locale used for listening; empty string means the engine default."""
        return self._locale_id

    @property
    def locale_names(self) -> List[LocaleName]:
        return list(self._locale_names)

    @property
    def sound_level(self) -> float:
        return self._sound_level

    @property
    def is_listening(self) -> bool:
        return self._engine.is_listening

    def snapshot(self) -> SpeechSnapshot:
        """Capture the current state for the presentation layer."""
        return SpeechSnapshot(
            display_text=self.display_text,
            committed_text=self.transcript.committed_text,
            status=self._status,
            error_message=self.error_message,
            ready=self.ready,
            locale_id=self._locale_id,
            sound_level=self._sound_level,
            is_listening=self.is_listening,
            lifecycle=self.lifecycle.get_state(),
            locale_names=tuple(self._locale_names),
        )

    def register_observer(self, observer: Callable[[SpeechSnapshot], None]) -> None:
        """Register a callback receiving a SpeechSnapshot after every state change.

        Args:
            observer: Callable accepting a SpeechSnapshot
        """
        if observer not in self._observers:
            self._observers.append(observer)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def initialize(self) -> bool:
        """Initialize the engine and resolve the locale.

        Returns:
            True if the engine is ready. False when initialization failed or
            another initialization is already in flight.
        """
        if self.lifecycle.is_ready:
            return True
        if self.lifecycle.get_state() is LifecycleState.INITIALIZING:
            logger.debug("initialize() ignored: initialization already in flight")
            return False

        self.lifecycle.set_state(LifecycleState.INITIALIZING)
        self._error = None
        self._permanent_error_during_init = False
        self._status = RecognitionStatus.INITIALIZING.value
        self._notify()

        ready = False
        try:
            ready = bool(await self._engine.initialize(
                on_status=self._on_status,
                on_error=self._on_error,
            ))
            system_locale = None
            if ready:
                self._locale_names = list(await self._engine.locales())
                system_locale = await self._engine.system_locale()
            self._locale_id = self._resolve_locale(
                system_locale.locale_id if system_locale is not None else None
            )
            if not ready:
                self._set_error(InitializationFailure(UNAVAILABLE_MESSAGE))
        except Exception as e:
            ready = False
            self._set_error(InitializationFailure(f"Initialization failed: {e}"), exc_info=True)
        finally:
            if ready and self._permanent_error_during_init:
                ready = False
            self.lifecycle.set_state(LifecycleState.READY if ready else LifecycleState.FAILED)
            if self._status == RecognitionStatus.INITIALIZING.value:
                self._status = (RecognitionStatus.READY if ready else RecognitionStatus.FAILED).value
            self._notify()

        logger.info("Recognition engine ready=%s, locale=%r", ready, self._locale_id or 'system default')
        return ready

    async def start(self) -> None:
        """Start a new listening session.

        Ignored while another start or an initialization is in flight. Any
        in-flight session text is committed first.
        """
        if self.lifecycle.is_busy():
            logger.debug("start() ignored: lifecycle is %s", self.lifecycle.get_state().value)
            return

        self.transcript.on_session_ended()
        self._notify()

        if not self.lifecycle.is_ready:
            ready = await self.initialize()
            if not ready or not self.lifecycle.is_ready:
                return

        self.lifecycle.set_state(LifecycleState.STARTING)
        self._error = None
        self._status = RecognitionStatus.STARTING.value
        self._notify()

        started = False
        try:
            await self._engine.cancel()
            await self._engine.listen(
                on_result=self._on_result,
                on_sound_level_change=self._on_sound_level,
                listen_options=self._listen_options,
                locale_id=self._locale_id or None,
                listen_for=self._listen_for,
                pause_for=self._pause_for,
            )
            started = True
        except Exception as e:
            self._set_error(StartFailure(f"Unable to start listening: {e}"), exc_info=True)
        finally:
            # A permanent error or a restart may already have moved the machine on
            if self.lifecycle.get_state() is LifecycleState.STARTING:
                self.lifecycle.set_state(LifecycleState.LISTENING if started else LifecycleState.READY)
            self._notify()

    async def stop(self) -> None:
        """Commit any pending session text, then ask the engine to stop.

        Safe to call when not listening.
        """
        self.transcript.on_session_ended()
        try:
            await self._engine.stop()
        except Exception as e:
            self._set_error(StopFailure(f"Unable to stop listening: {e}"), exc_info=True)
        self.lifecycle.transition_if(LifecycleState.LISTENING, LifecycleState.READY)
        self._notify()

    def reset(self) -> None:
        """Clear the transcript and any surfaced error."""
        self.transcript.reset()
        self._error = None
        self._notify()

    # ------------------------------------------------------------------
    # Engine callbacks
    # ------------------------------------------------------------------

    def _on_status(self, status: str) -> None:
        self._status = status
        if status == RecognitionStatus.LISTENING.value:
            self.lifecycle.transition_if(LifecycleState.STARTING, LifecycleState.LISTENING)
        elif status in TERMINAL_STATUSES:
            self._sound_level = 0.0
            self.transcript.on_session_ended()
            self.lifecycle.transition_if(LifecycleState.LISTENING, LifecycleState.READY)
        self._notify()

    def _on_result(self, result: RecognitionResult) -> None:
        self.transcript.on_result(result.recognized_words, result.final_result)
        self._notify()

    def _on_sound_level(self, level: float) -> None:
        self._sound_level = level
        self._notify()

    def _on_error(self, error: SpeechRecognitionError) -> None:
        permanent = bool(error.permanent)
        self._set_error(EngineReportedError(
            f"{error.error_msg} (permanent: {str(permanent).lower()})",
            permanent=permanent,
        ))
        if permanent and self.lifecycle.is_ready:
            # Next start() must initialize the engine again
            self.lifecycle.set_state(LifecycleState.UNINITIALIZED)
        elif permanent and self.lifecycle.get_state() is LifecycleState.INITIALIZING:
            self._permanent_error_during_init = True
        self._notify()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _resolve_locale(self, candidate: Optional[str]) -> str:
        """Adopt the system locale only if the engine lists it; otherwise use the default."""
        if not candidate or not self._locale_names:
            return ''
        for locale in self._locale_names:
            if locale.locale_id == candidate:
                return candidate
        logger.info("System locale %r not supported by engine, using engine default", candidate)
        return ''

    def _set_error(self, error: SpeechError, exc_info: bool = False) -> None:
        self._error = error
        logger.warning("%s: %s", error.__class__.__name__, error.message, exc_info=exc_info)

    def _notify(self) -> None:
        """Publish a snapshot to all observers. Observer failures are logged and skipped."""
        if not self._observers:
            return
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception as e:
                logger.error(f"Observer {observer!r} failed: {e}", exc_info=True)
