from __future__ import annotations

import json
from typing import Any


class JsonEncoder:
    """Encodes params and payloads as json.

    Exceptions are the one non-json value accepted, since failed jobs
    commonly report the error they died with. They decode as a plain
    Exception carrying the original message.
    """

    def encode(self, obj: Any) -> str | None:
        if obj is None:
            return None

        return json.dumps(obj, default=_encode_error)

    def decode(self, obj: str | None) -> Any:
        if obj is None:
            return None

        return json.loads(obj, object_hook=_decode_error)


def _encode_error(obj: Any) -> dict[str, Any]:
    if isinstance(obj, BaseException):
        return {"__error__": str(obj)}

    msg = f"{type(obj).__name__} is not json serializable, use JsonPickleEncoder for arbitrary values"
    raise TypeError(msg)


def _decode_error(obj: dict[str, Any]) -> Any:
    if "__error__" in obj:
        return Exception(obj["__error__"])
    return obj
