from __future__ import annotations

import datetime
from typing import Any

import pytest

from jobfuture.encoders import JsonEncoder, JsonPickleEncoder


@pytest.mark.parametrize(
    "value",
    [
        None,
        {},
        {"x": 1, "y": [1, 2], "z": {"nested": "value"}},
    ],
)
def test_json_encoder(value: Any) -> None:
    encoder = JsonEncoder()
    assert encoder.decode(encoder.encode(value)) == value


def test_json_encoder_flattens_exceptions() -> None:
    encoder = JsonEncoder()
    decoded = encoder.decode(encoder.encode({"error": ValueError("boom")}))

    assert isinstance(decoded["error"], Exception)
    assert str(decoded["error"]) == "boom"


@pytest.mark.parametrize("value", [{"when": datetime.date(2024, 1, 1)}, {"tags": {"a", "b"}}, {"obj": object()}])
def test_json_encoder_rejects_values_it_cannot_represent(value: Any) -> None:
    with pytest.raises(TypeError):
        JsonEncoder().encode(value)


def test_json_encoder_preserves_key_order() -> None:
    encoder = JsonEncoder()
    decoded = encoder.decode(encoder.encode({"b": 1, "a": 2, "c": 3}))
    assert list(decoded) == ["b", "a", "c"]


def test_jsonpickle_encoder_keeps_exception_types() -> None:
    encoder = JsonPickleEncoder()
    decoded = encoder.decode(encoder.encode({"error": ValueError("boom"), "shape": (1, 2)}))

    assert isinstance(decoded["error"], ValueError)
    assert decoded["shape"] == (1, 2)
    assert encoder.encode(None) is None
    assert encoder.decode(None) is None
