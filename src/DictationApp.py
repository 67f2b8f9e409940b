"""Dictation app orchestrator: recognition engine + SpeechController + Tk window.

The asyncio event loop runs on a daemon thread and owns the engine and the
controller; every controller mutation happens there. The Tk main loop runs on
the calling thread. Button clicks are forwarded to the loop with
run_coroutine_threadsafe / call_soon_threadsafe, and controller snapshots
travel back to the window through its observer.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Any, Optional

from src.controllers.SpeechController import SpeechController
from src.engine.WsRecognitionEngine import DEFAULT_HANDSHAKE_TIMEOUT, WsRecognitionEngine

logger = logging.getLogger(__name__)

_SHUTDOWN_TIMEOUT = 5.0


class DictationApp:
    """Wires the engine, the controller and the window for one app run.

    Args:
        config: Application configuration dict.
        engine: Recognition engine (WsRecognitionEngine on engine.server_url if None).
        window: Presentation object with ``on_snapshot``, ``render`` and ``run``
            (TranscriptWindow if None).
    """

    def __init__(self, config: dict, engine: Any = None, window: Any = None) -> None:
        self._config = config
        self._engine = engine or WsRecognitionEngine(
            server_url=config['engine']['server_url'],
            handshake_timeout=float(config['engine'].get('handshake_timeout', DEFAULT_HANDSHAKE_TIMEOUT)),
        )
        self.controller = SpeechController(self._engine, config)

        self._loop = asyncio.new_event_loop()
        self._loop_thread: threading.Thread | None = None

        if window is None:
            from src.gui.TranscriptWindow import TranscriptWindow
            window = TranscriptWindow(
                config=config,
                on_start=self.request_start,
                on_stop=self.request_stop,
                on_reset=self.request_reset,
            )
        self._window = window
        self.controller.register_observer(self._window.on_snapshot)

    def start(self) -> Future:
        """Start the event-loop thread and begin engine initialization.

        Returns:
            Future resolving to the initialize() result.
        """
        self._loop_thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="DictationApp-EventLoop",
        )
        self._loop_thread.start()
        self._window.render(self.controller.snapshot())
        logger.info("DictationApp: started")
        return asyncio.run_coroutine_threadsafe(self.controller.initialize(), self._loop)

    def run(self) -> None:
        """Start, run the window main loop, then shut down."""
        self.start()
        try:
            self._window.run()
        finally:
            self.shutdown()

    def request_start(self) -> Future:
        return asyncio.run_coroutine_threadsafe(self.controller.start(), self._loop)

    def request_stop(self) -> Future:
        return asyncio.run_coroutine_threadsafe(self.controller.stop(), self._loop)

    def request_reset(self) -> None:
        self._loop.call_soon_threadsafe(self.controller.reset)

    def shutdown(self) -> None:
        """Stop listening, close the engine and stop the event loop."""
        if self._loop_thread is None:
            return

        future = asyncio.run_coroutine_threadsafe(self._close_engine(), self._loop)
        try:
            future.result(timeout=_SHUTDOWN_TIMEOUT)
        except Exception as e:
            logger.warning("DictationApp: engine shutdown failed: %s", e)

        self._loop.call_soon_threadsafe(self._loop.stop)
        self._loop_thread.join(timeout=_SHUTDOWN_TIMEOUT)
        self._loop_thread = None
        logger.info("DictationApp: stopped")

    async def _close_engine(self) -> None:
        await self.controller.stop()
        close = getattr(self._engine, 'close', None)
        if close is not None:
            await close()

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()
        self._loop.close()
