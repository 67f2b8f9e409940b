"""Encode and decode WebSocket wire protocol frames (v1).

All messages are UTF-8 JSON text frames carrying a ``type`` discriminator.
"""

import json

from src.network.types import (
    ClientTextMessage,
    ServerMessage,
    WsControlCommand,
    WsEngineReady,
    WsError,
    WsListenCommand,
    WsRecognitionResult,
    WsSoundLevel,
    WsStatus,
)

PROTOCOL_VERSION = "v1"


# ---------------------------------------------------------------------------
# JSON text frames: client → server
# ---------------------------------------------------------------------------

def encode_client_message(msg: ClientTextMessage) -> str:
    """Encode a client-side message dataclass to a UTF-8 JSON string.

    Args:
        msg: WsListenCommand or WsControlCommand.

    Returns:
        JSON string suitable for sending as a WebSocket text frame.

    Raises:
        TypeError: If msg is not a recognised client message type.
    """
    if isinstance(msg, WsListenCommand):
        obj = {
            "type": "listen",
            "locale_id": msg.locale_id,
            "partial_results": msg.partial_results,
            "cancel_on_error": msg.cancel_on_error,
            "listen_mode": msg.listen_mode,
            "auto_punctuation": msg.auto_punctuation,
            "listen_for": msg.listen_for,
            "pause_for": msg.pause_for,
        }
    elif isinstance(msg, WsControlCommand):
        obj = {
            "type": "control_command",
            "command": msg.command,
            "timestamp": msg.timestamp,
        }
    else:
        raise TypeError(f"Unknown client message type: {type(msg)}")

    return json.dumps(obj)


# ---------------------------------------------------------------------------
# JSON text frames: server → client
# ---------------------------------------------------------------------------

def decode_server_message(text: str) -> ServerMessage:
    """Decode a UTF-8 JSON text frame from the server into a typed dataclass.

    Args:
        text: Raw JSON string from a WebSocket text frame.

    Returns:
        One of WsEngineReady, WsStatus, WsRecognitionResult, WsSoundLevel, WsError.

    Raises:
        ValueError: On invalid JSON, missing/unknown type, missing fields or
            fields of the wrong type.
    """
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in server message: {exc}") from exc

    if not isinstance(obj, dict):
        raise ValueError("Server message must be a JSON object")

    msg_type = obj.get("type")
    if msg_type is None:
        raise ValueError("Server message missing 'type' field")

    try:
        if msg_type == "engine_ready":
            locales = obj.get("locales") or []
            if not isinstance(locales, list):
                raise TypeError(f"locales must be a list, got {type(locales).__name__}")
            system_locale = obj.get("system_locale")
            if system_locale is not None and not isinstance(system_locale, str):
                raise TypeError(f"system_locale must be a string, got {type(system_locale).__name__}")
            return WsEngineReady(
                protocol_version=obj["protocol_version"],
                locales=locales,
                system_locale=system_locale,
            )
        if msg_type == "status":
            return WsStatus(status=_require_str(obj, "status"))
        if msg_type == "recognition_result":
            return WsRecognitionResult(
                text=_require_str(obj, "text"),
                final=bool(obj.get("final", False)),
                confidence=float(obj.get("confidence", 0.0)),
            )
        if msg_type == "sound_level":
            return WsSoundLevel(level=float(obj["level"]))
        if msg_type == "error":
            return WsError(
                error_code=obj.get("error_code", "INTERNAL_ERROR"),
                message=_require_str(obj, "message"),
                permanent=bool(obj.get("permanent", False)),
            )
    except KeyError as exc:
        raise ValueError(f"{msg_type} message missing field {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{msg_type} message has an invalid field: {exc}") from exc

    raise ValueError(f"unknown message type: {msg_type!r}")


def _require_str(obj: dict, key: str) -> str:
    value = obj[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value
