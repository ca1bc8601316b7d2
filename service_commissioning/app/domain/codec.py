"""
Codec for registry payloads.

Pure transforms between structured values, canonical JSON bytes and base64
text. Nothing here performs I/O. Every failure surfaces as EncodingError.
"""

import base64
import binascii
import json
from typing import Any, Type, TypeVar, Union

from pydantic import BaseModel

from shared.logging import get_logger
from shared.errors import EncodingError

logger = get_logger("commissioning.codec")

ModelT = TypeVar("ModelT", bound=BaseModel)


def to_json_bytes(value: Any) -> bytes:
    """Serialize a wire model or JSON-compatible value to compact UTF-8 JSON."""
    try:
        if isinstance(value, BaseModel):
            return value.model_dump_json(by_alias=True).encode("utf-8")
        return json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        logger.error("JSON serialization failed", value_type=type(value).__name__, error=str(e))
        raise EncodingError(
            "Failed to serialize value",
            details={"value_type": type(value).__name__, "error": str(e)}
        ) from e


def encode_base64(data: Union[bytes, bytearray, str]) -> str:
    """Encode raw bytes (str is taken as UTF-8) to standard base64 text."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not isinstance(data, (bytes, bytearray)):
        logger.error("Base64 encoding rejected value", value_type=type(data).__name__)
        raise EncodingError(
            "Only bytes or str can be base64-encoded",
            details={"value_type": type(data).__name__}
        )
    return base64.b64encode(bytes(data)).decode("ascii")


def encode_payload(value: Any) -> str:
    """Serialize a structured value to JSON and base64-encode the bytes."""
    return encode_base64(to_json_bytes(value))


def encode_signature(signature: Union[bytes, bytearray, str]) -> str:
    """Base64 of the raw signature."""
    return encode_base64(signature)


def decode_base64(text: Union[str, bytes]) -> bytes:
    """Strictly decode base64 text."""
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, TypeError, ValueError) as e:
        logger.error("Base64 decoding failed", error=str(e))
        raise EncodingError("Invalid base64 payload", details={"error": str(e)}) from e


def decode_model(text: Union[str, bytes], model: Type[ModelT]) -> ModelT:
    """Decode a base64 embedded JSON document into ``model``."""
    raw = decode_base64(text)
    try:
        return model.model_validate_json(raw)
    except ValueError as e:
        logger.error("Embedded document parsing failed", model=model.__name__, error=str(e))
        raise EncodingError(
            f"Embedded document is not a valid {model.__name__}",
            details={"model": model.__name__, "error": str(e)}
        ) from e
