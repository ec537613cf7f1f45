# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""Shared pydantic field types."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer

from clcred.exceptions import ArithmeticFailure
from clcred.primitives.numbers import from_decimal, to_decimal


def _coerce_big_int(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return from_decimal(value)
        except ArithmeticFailure as exc:
            raise ValueError(str(exc)) from exc
    return value


# Non-negative big integer; JSON carries it as a decimal string.
BigInt = Annotated[
    int,
    Field(ge=0),
    BeforeValidator(_coerce_big_int),
    PlainSerializer(to_decimal, return_type=str, when_used="json"),
]
