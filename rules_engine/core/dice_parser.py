"""
Dice parser module for the rules engine.

Parses damage dice notation (``NdM``, ``NdM+K``, ``NdM-K``) and rolls
individual dice from an injectable uniform [0, 1) random source, so that
every roll can be made deterministic in tests.
"""

import math
import random
import re
from collections.abc import Callable
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field

from .constants import D20_SIDES, MAX_DICE_COUNT, MAX_DIE_SIDES
from .error_handling import InvalidDiceNotationError

# A uniform [0, 1) random number generator.
RandomSource = Callable[[], float]


class DiceNotation(BaseModel):
    """Parsed form of a dice notation such as '2d6+3'."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(description="Number of dice to roll")
    sides: int = Field(description="Number of sides of each die")
    modifier: int = Field(default=0, description="Flat signed modifier")

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if self.count <= 0:
            raise ValueError("count must be a positive integer")
        if self.sides <= 0:
            raise ValueError("sides must be a positive integer")

    def __str__(self) -> str:
        if self.modifier:
            return f"{self.count}d{self.sides}{self.modifier:+d}"
        return f"{self.count}d{self.sides}"


DICE_NOTATION_PATTERN = re.compile(r"^(\d+)d(\d+)([+-]\d+)?$")


def parse_dice_notation(notation: str) -> DiceNotation:
    """
    Parses a dice notation of the form NdM[+/-K].

    Args:
        notation (str): The notation to parse (e.g., '1d8+3').

    Returns:
        DiceNotation: The parsed dice count, die size and modifier.

    Raises:
        InvalidDiceNotationError: If the notation is malformed or out of limits.

    """
    if not isinstance(notation, str):
        log_warning(
            f"Dice notation must be a string, got {type(notation).__name__}",
            {"notation": notation},
        )
        raise InvalidDiceNotationError(str(notation), "not a string")

    match = DICE_NOTATION_PATTERN.match(notation)
    if not match:
        log_warning(
            f"Invalid dice notation format: '{notation}'",
            {"notation": notation},
        )
        raise InvalidDiceNotationError(notation)

    count_str, sides_str, modifier_str = match.groups()
    count = int(count_str)
    sides = int(sides_str)
    modifier = int(modifier_str) if modifier_str else 0

    if count <= 0 or count > MAX_DICE_COUNT:
        log_warning(
            f"Number of dice must be between 1 and {MAX_DICE_COUNT}, got {count}",
            {"notation": notation, "count": count, "sides": sides},
        )
        raise InvalidDiceNotationError(notation, f"bad dice count {count}")

    if sides <= 0 or sides > MAX_DIE_SIDES:
        log_warning(
            f"Number of sides must be between 1 and {MAX_DIE_SIDES}, got {sides}",
            {"notation": notation, "count": count, "sides": sides},
        )
        raise InvalidDiceNotationError(notation, f"bad die size {sides}")

    return DiceNotation(count=count, sides=sides, modifier=modifier)


def roll_die(sides: int, rng: RandomSource | None = None) -> int:
    """
    Rolls a single die.

    A value r drawn from the random source yields the face floor(r * sides) + 1.

    Args:
        sides (int): Number of sides of the die.
        rng (RandomSource | None): Optional uniform [0, 1) generator.

    Returns:
        int: A face between 1 and sides.

    """
    r = rng() if rng else random.random()
    return math.floor(r * sides) + 1


def roll_d20(rng: RandomSource | None = None) -> int:
    """Rolls a d20."""
    return roll_die(D20_SIDES, rng)


def roll_dice(count: int, sides: int, rng: RandomSource | None = None) -> list[int]:
    """
    Rolls several dice of the same size.

    Args:
        count (int): Number of dice.
        sides (int): Number of sides on each die.
        rng (RandomSource | None): Optional uniform [0, 1) generator.

    Returns:
        list[int]: The individual faces, in rolling order.

    """
    return [roll_die(sides, rng) for _ in range(count)]
