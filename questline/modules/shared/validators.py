"""
Questline Domain Validators

Purpose
-------
Input validation for the lifecycle operations. Every operation validates
all of its inputs through these helpers before touching the player, so a
failure never leaves a partial mutation behind.

Design Notes
------------
Validators:
- Accept the raw caller value (strings, numbers, booleans, None)
- Return the normalized value on success
- Raise ValidationError / InsufficientResourcesError on failure
- Never read or write player state

Usage
-----
    from questline.modules.shared.validators import validate_minutes

    minutes = validate_minutes(" 42.4 ", max_minutes=60)   # 42
    validate_minutes(200, max_minutes=180)
    # Raises: ValidationError("Minutes must be between 1 and 180")
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any

from questline.domain.models.enums import Attribute
from questline.modules.shared.constants import (
    DEFAULT_QUEST_MINUTES,
    MIN_QUEST_MINUTES,
    NOTE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from questline.modules.shared.exceptions import InsufficientResourcesError, ValidationError
from questline.modules.shared.formulas import round_half_up


def validate_title(raw: Any) -> str:
    """
    Validate and normalize a quest or template title.

    Returns:
        The trimmed title

    Raises:
        ValidationError: If the title is not text, or its trimmed length is
            outside [3, 120]
    """
    if not isinstance(raw, str):
        raise ValidationError("title", "Title is required")

    title = raw.strip()
    if len(title) < TITLE_MIN_LENGTH:
        raise ValidationError(
            "title",
            f"Title must be at least {TITLE_MIN_LENGTH} characters",
            length=len(title),
        )
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            "title",
            f"Title must be at most {TITLE_MAX_LENGTH} characters",
            length=len(title),
        )
    return title


def parse_attribute(raw: Any, field: str = "type") -> Attribute:
    """
    Parse a quest type or stat key into an Attribute.

    Accepts an Attribute or its string value (case and surrounding
    whitespace ignored).

    Raises:
        ValidationError: If the value names none of the three attributes
    """
    if isinstance(raw, Attribute):
        return raw
    if isinstance(raw, str):
        try:
            return Attribute(raw.strip().lower())
        except ValueError:
            pass

    allowed = ", ".join(Attribute.values())
    raise ValidationError(field, f"Invalid {field}: must be one of {allowed}", value=raw)


def validate_minutes(raw: Any, max_minutes: int) -> int:
    """
    Validate a requested quest duration against the current minute cap.

    Blank input (None or whitespace) defaults to 25, lowered to the cap if
    the cap is smaller. Anything else is rounded half-up to an integer and
    must land in [1, max_minutes].

    Args:
        raw: Requested minutes (int, float, numeric string, or blank)
        max_minutes: Cap from the player's stat for the quest type

    Returns:
        Validated whole minutes

    Raises:
        ValidationError: If the value is not numeric or falls outside the
            allowed range (the message names the exact bounds)
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return min(DEFAULT_QUEST_MINUTES, max_minutes)

    if isinstance(raw, bool):
        raise ValidationError("minutes", "Minutes must be a number", value=raw)

    if isinstance(raw, int):
        minutes = raw
    elif isinstance(raw, (float, Decimal, str)):
        try:
            number = Decimal(raw.strip()) if isinstance(raw, str) else Decimal(str(raw))
        except InvalidOperation:
            raise ValidationError("minutes", "Minutes must be a number", value=raw) from None
        if not number.is_finite():
            raise ValidationError("minutes", "Minutes must be a number", value=raw)
        # Bound before rounding: quantize overflows on huge magnitudes
        if number < MIN_QUEST_MINUTES - 1:
            _minutes_too_low(max_minutes, raw)
        if number > max_minutes + 1:
            _minutes_too_high(max_minutes, raw)
        minutes = round_half_up(number)
    else:
        raise ValidationError("minutes", "Minutes must be a number", value=raw)

    if minutes < MIN_QUEST_MINUTES:
        _minutes_too_low(max_minutes, raw)
    if minutes > max_minutes:
        _minutes_too_high(max_minutes, raw)
    return minutes


def _minutes_too_low(max_minutes: int, raw: Any) -> None:
    raise ValidationError(
        "minutes",
        f"Minutes must be at least {MIN_QUEST_MINUTES}",
        minimum=MIN_QUEST_MINUTES,
        maximum=max_minutes,
        value=raw,
    )


def _minutes_too_high(max_minutes: int, raw: Any) -> None:
    raise ValidationError(
        "minutes",
        f"Minutes must be between {MIN_QUEST_MINUTES} and {max_minutes}",
        minimum=MIN_QUEST_MINUTES,
        maximum=max_minutes,
        value=raw,
    )


def validate_points(raw: Any) -> int:
    """
    Validate a stat allocation amount.

    Whole-valued floats (3.0) are accepted; booleans, fractions and
    non-positive values are not.

    Raises:
        ValidationError: If points is not a positive integer
    """
    if isinstance(raw, bool):
        raise ValidationError("points", "Points must be a positive integer", value=raw)
    if isinstance(raw, float) and math.isfinite(raw) and raw.is_integer():
        raw = int(raw)
    if not isinstance(raw, int) or raw <= 0:
        raise ValidationError("points", "Points must be a positive integer", value=raw)
    return raw


def validate_note(raw: Any) -> str:
    """
    Validate an optional quest note.

    Returns:
        The trimmed note, or "" when absent
    """
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise ValidationError("note", "Note must be text")

    note = raw.strip()
    if len(note) > NOTE_MAX_LENGTH:
        raise ValidationError(
            "note",
            f"Note must be at most {NOTE_MAX_LENGTH} characters",
            length=len(note),
        )
    return note


def validate_resource_cost(resource: str, required: int, available: int) -> None:
    """
    Validate that a player has sufficient resources.

    Raises:
        InsufficientResourcesError: If available < required
    """
    if available < required:
        raise InsufficientResourcesError(resource, required, available)
