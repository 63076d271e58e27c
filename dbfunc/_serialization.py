"""JSON encoding used by structured logging."""

from typing import Any

import msgspec

__all__ = ("decode_json", "encode_json")


def _default(value: Any) -> Any:
    """Fallback for values msgspec cannot encode natively."""
    return str(value)


_encoder = msgspec.json.Encoder(enc_hook=_default)
_decoder = msgspec.json.Decoder()


def encode_json(data: Any, *, as_bytes: bool = False) -> "str | bytes":
    """Encode data to JSON.

    Args:
        data: Data to encode.
        as_bytes: Return bytes instead of a string.

    Returns:
        JSON string or bytes.
    """
    encoded = _encoder.encode(data)
    if as_bytes:
        return encoded
    return encoded.decode("utf-8")


def decode_json(data: "str | bytes") -> Any:
    """Decode JSON text or bytes into Python objects."""
    return _decoder.decode(data)
