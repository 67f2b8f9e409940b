"""RecognitionEngine backed by a remote recognition service over WebSocket.

The service owns audio capture and recognition. This adapter sends listen /
stop / cancel commands as JSON text frames and dispatches the service's
status, result, sound level and error frames to the callbacks registered by
SpeechController. Callbacks run on the event loop that owns the connection.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

import websockets
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from src.network.codec import decode_server_message, encode_client_message
from src.network.types import (
    WsControlCommand,
    WsEngineReady,
    WsError,
    WsListenCommand,
    WsRecognitionResult,
    WsSoundLevel,
    WsStatus,
)
from src.protocols import ErrorListener, ResultListener, SoundLevelListener, StatusListener
from src.types import (
    TERMINAL_STATUSES,
    ListenOptions,
    LocaleName,
    RecognitionResult,
    RecognitionStatus,
    SpeechRecognitionError,
)

logger = logging.getLogger(__name__)

CONNECTION_LOST_MESSAGE = "Connection to recognition service lost"
DEFAULT_HANDSHAKE_TIMEOUT = 10.0  # seconds to wait for engine_ready

Connector = Callable[[str], Awaitable[Any]]


async def _websockets_connect(server_url: str) -> Any:
    return await websockets.connect(server_url)


class WsRecognitionEngine:
    """WebSocket client implementing the RecognitionEngine protocol.

    Connection lifecycle:
    - initialize(): connect, read the engine_ready frame, start the receive task
    - connection loss: report status ``notListening`` and a permanent error,
      drop the connection so the next initialize() reconnects
    - close(): cancel the receive task and close the socket

    Args:
        server_url: WebSocket URL of the recognition service (ws://host:port).
        connect: Coroutine function opening the connection; defaults to websockets.connect.
        handshake_timeout: Seconds to wait for the engine_ready frame.
    """

    def __init__(self, server_url: str, connect: Optional[Connector] = None,
                 handshake_timeout: float = DEFAULT_HANDSHAKE_TIMEOUT) -> None:
        self._server_url = server_url
        self._handshake_timeout = handshake_timeout
        self._connect = connect or _websockets_connect
        self._websocket: Any = None
        self._receive_task: asyncio.Task | None = None
        self._listening = False
        self._locales: list[LocaleName] = []
        self._system_locale: str | None = None

        self._on_status: StatusListener | None = None
        self._on_error: ErrorListener | None = None
        self._on_result: ResultListener | None = None
        self._on_sound_level: SoundLevelListener | None = None

    @property
    def is_listening(self) -> bool:
        return self._listening

    @property
    def is_connected(self) -> bool:
        return self._websocket is not None

    # ------------------------------------------------------------------
    # RecognitionEngine protocol
    # ------------------------------------------------------------------

    async def initialize(self, on_status: StatusListener, on_error: ErrorListener) -> bool:
        """Connect to the service and wait for its engine_ready frame.

        Args:
            on_status: Receives status strings.
            on_error: Receives SpeechRecognitionError events.

        Returns:
            True when connected; False if the service is unreachable or does
            not send engine_ready within the handshake timeout.

        Raises:
            ValueError: If the first frame is not a valid engine_ready frame.
        """
        self._on_status = on_status
        self._on_error = on_error
        if self._websocket is not None:
            return True

        try:
            websocket = await self._connect(self._server_url)
        except (OSError, asyncio.TimeoutError, InvalidHandshake, InvalidURI) as e:
            logger.warning("WsRecognitionEngine: cannot connect to %s: %s", self._server_url, e)
            return False

        try:
            raw = await asyncio.wait_for(websocket.recv(), timeout=self._handshake_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "WsRecognitionEngine: no engine_ready from %s within %.1fs",
                self._server_url, self._handshake_timeout,
            )
            await websocket.close()
            return False

        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            message = decode_server_message(raw)
            if not isinstance(message, WsEngineReady):
                raise ValueError(f"expected engine_ready frame, got {type(message).__name__}")
        except ValueError:
            await websocket.close()
            raise

        self._locales = [
            LocaleName(locale_id=entry["locale_id"], name=str(entry.get("name") or ""))
            for entry in message.locales
            if isinstance(entry, dict) and isinstance(entry.get("locale_id"), str) and entry["locale_id"]
        ]
        self._system_locale = message.system_locale
        self._websocket = websocket
        self._receive_task = asyncio.get_running_loop().create_task(self._receive_loop())

        logger.info(
            "WsRecognitionEngine: connected to %s (protocol %s, %d locales)",
            self._server_url, message.protocol_version, len(self._locales),
        )
        return True

    async def listen(
        self,
        on_result: ResultListener,
        on_sound_level_change: SoundLevelListener,
        listen_options: ListenOptions,
        locale_id: str | None = None,
        listen_for: float | None = None,
        pause_for: float | None = None,
    ) -> None:
        """Send a listen command.

        Raises:
            ConnectionError: If initialize() has not connected.
        """
        if self._websocket is None:
            raise ConnectionError("Recognition service is not connected")

        self._on_result = on_result
        self._on_sound_level = on_sound_level_change
        command = WsListenCommand(
            locale_id=locale_id,
            partial_results=listen_options.partial_results,
            cancel_on_error=listen_options.cancel_on_error,
            listen_mode=listen_options.listen_mode.value,
            auto_punctuation=listen_options.auto_punctuation,
            listen_for=listen_for,
            pause_for=pause_for,
        )
        await self._websocket.send(encode_client_message(command))
        self._listening = True

    async def stop(self) -> None:
        await self._send_control("stop")

    async def cancel(self) -> None:
        await self._send_control("cancel")

    async def locales(self) -> list[LocaleName]:
        return list(self._locales)

    async def system_locale(self) -> LocaleName | None:
        if not self._system_locale:
            return None
        for locale in self._locales:
            if locale.locale_id == self._system_locale:
                return locale
        return LocaleName(locale_id=self._system_locale)

    async def close(self) -> None:
        """Cancel the receive task and close the websocket."""
        task = self._receive_task
        self._receive_task = None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        websocket = self._websocket
        self._websocket = None
        self._listening = False
        if websocket is not None:
            try:
                await websocket.close()
            except ConnectionClosed:
                pass

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _send_control(self, command: str) -> None:
        """Send stop/cancel; a no-op when not connected."""
        self._listening = False
        if self._websocket is None:
            logger.debug("WsRecognitionEngine: %s ignored, not connected", command)
            return
        await self._websocket.send(encode_client_message(
            WsControlCommand(command=command, timestamp=time.time())
        ))

    async def _receive_loop(self) -> None:
        """Async task: iterate text frames and dispatch them to callbacks.

        Algorithm:
            1. async-iterate websocket frames; skip binary frames.
            2. Dispatch each text frame.
            3. When the connection ends, close the socket and report the loss as
               a permanent error.
        """
        try:
            async for message in self._websocket:
                if isinstance(message, str):
                    self._dispatch(message)
                else:
                    logger.debug("WsRecognitionEngine: unexpected binary frame, ignoring")
        except ConnectionClosed:
            logger.warning("WsRecognitionEngine: connection closed by server")
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("WsRecognitionEngine: unexpected error in receive loop")

        await self._handle_disconnect()

    def _dispatch(self, text: str) -> None:
        try:
            message = decode_server_message(text)
        except ValueError as e:
            logger.warning("WsRecognitionEngine: ignoring malformed frame: %s", e)
            return

        if isinstance(message, WsStatus):
            if message.status == RecognitionStatus.LISTENING.value:
                self._listening = True
            elif message.status in TERMINAL_STATUSES:
                self._listening = False
            if self._on_status is not None:
                self._on_status(message.status)
        elif isinstance(message, WsRecognitionResult):
            if self._on_result is not None:
                self._on_result(RecognitionResult(
                    recognized_words=message.text,
                    final_result=message.final,
                    confidence=message.confidence,
                ))
        elif isinstance(message, WsSoundLevel):
            if self._on_sound_level is not None:
                self._on_sound_level(message.level)
        elif isinstance(message, WsError):
            logger.warning(
                "WsRecognitionEngine: service error %s: %s (permanent=%s)",
                message.error_code, message.message, message.permanent,
            )
            if self._on_error is not None:
                self._on_error(SpeechRecognitionError(
                    error_msg=message.message,
                    permanent=message.permanent,
                ))
        else:
            logger.debug("WsRecognitionEngine: ignoring %s frame", type(message).__name__)

    async def _handle_disconnect(self) -> None:
        websocket = self._websocket
        self._websocket = None
        self._receive_task = None
        self._listening = False

        # The loop may have ended on an error while the socket is still open
        if websocket is not None:
            try:
                await websocket.close()
            except ConnectionClosed:
                pass

        if self._on_status is not None:
            self._on_status(RecognitionStatus.NOT_LISTENING.value)
        if self._on_error is not None:
            self._on_error(SpeechRecognitionError(error_msg=CONNECTION_LOST_MESSAGE, permanent=True))
