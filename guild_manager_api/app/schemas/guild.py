"""
Pydantic schemas for guilds.

``GuildCreate`` and ``GuildUpdate`` are the explicit input schemas of
the HTTP boundary; a body that fails them never reaches the service.
The two treat ``level`` differently on purpose: on creation a missing
or unusable level silently becomes ``1``, while on update an unusable
level rejects the whole request and a missing one keeps the stored
value.

A level "resolves to a number" when it is an int, a finite float or a
string holding one (``"5"``, ``" 2.5 "``).  Booleans never do.  The
resolved value is truncated towards zero.
"""

import math
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

# sqlite stores INTEGER in 64 bits
SQLITE_MAX_INT = 2**63 - 1
MAX_LEVEL = SQLITE_MAX_INT

NAME_REQUIRED_MESSAGE = "Guild name is required and must be a non-empty string."


def resolve_level(value: Any) -> Optional[float]:
    """Return ``value`` as a finite number, or ``None`` when it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def _clean_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(NAME_REQUIRED_MESSAGE)
    return value.strip()


class GuildCreate(BaseModel):
    """Body of ``POST /api/guilds``."""

    name: str = Field(..., examples=["Knights of Valor"])
    level: int = Field(None, validate_default=True, examples=[5])

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return _clean_name(v)

    @field_validator("level", mode="before")
    @classmethod
    def default_level(cls, v: Any) -> int:
        number = resolve_level(v)
        if number is None or number < 1 or number > MAX_LEVEL:
            return 1
        return int(number)


class GuildUpdate(BaseModel):
    """Body of ``PUT /api/guilds/{id}``.

    ``level`` stays ``None`` when it was omitted (or sent as ``null``).
    """

    name: str = Field(..., examples=["Iron Legion"])
    level: Optional[int] = Field(None, examples=[4])

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return _clean_name(v)

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: Any) -> Optional[int]:
        if v is None:
            return None
        number = resolve_level(v)
        if number is None or int(number) < 1 or number > MAX_LEVEL:
            raise ValueError("If provided, level must be a positive number.")
        return int(number)


class GuildRead(BaseModel):
    """A stored guild as exposed over HTTP."""

    id: int
    name: str
    level: int

    model_config = {
        "from_attributes": True,
    }


class ErrorResponse(BaseModel):
    """Body of every non-success response."""

    error: str
    details: Optional[str] = None
