"""
Damage module for the rules engine.

Rolls damage dice from a notation such as '1d8+3', doubling the dice on
critical hits.
"""

from pydantic import BaseModel, ConfigDict, Field

from rules_engine.core.dice_parser import RandomSource, parse_dice_notation, roll_dice
from rules_engine.core.logging import log_debug


class DamageRoll(BaseModel):
    """Result of a damage roll."""

    model_config = ConfigDict(frozen=True)

    notation: str = Field(description="The rolled notation (e.g., '1d8+3')")
    rolls: list[int] = Field(description="Individual die faces")
    modifier: int = Field(default=0, description="Flat modifier added once")
    damage_type: str = Field(description="Type of damage (e.g., 'slashing')")
    total: int = Field(description="Total damage, never below 0")
    is_critical: bool = Field(default=False)

    def __str__(self) -> str:
        faces = "+".join(map(str, self.rolls))
        detail = f"{self.notation}({faces}"
        if self.modifier:
            detail += f"{self.modifier:+d}"
        return f"{self.total} {self.damage_type} [{detail})]"


def roll_damage(
    notation: str,
    is_critical: bool,
    damage_type: str,
    rng: RandomSource | None = None,
) -> DamageRoll:
    """
    Rolls damage dice.

    On a critical hit the number of dice is doubled, the modifier is not.

    Args:
        notation (str): Dice notation of the form NdM[+/-K].
        is_critical (bool): Whether the damage comes from a critical hit.
        damage_type (str): Type of damage.
        rng (RandomSource | None): Optional uniform [0, 1) generator.

    Returns:
        DamageRoll: The rolled damage.

    Raises:
        InvalidDiceNotationError: If the notation is malformed.

    """
    dice = parse_dice_notation(notation)
    count = dice.count * 2 if is_critical else dice.count
    rolls = roll_dice(count, dice.sides, rng)
    total = max(0, sum(rolls) + dice.modifier)

    log_debug(
        f"Damage {notation}: {rolls} {dice.modifier:+d} = {total} {damage_type}",
        {"critical": is_critical},
    )

    return DamageRoll(
        notation=notation,
        rolls=rolls,
        modifier=dice.modifier,
        damage_type=damage_type,
        total=total,
        is_critical=is_critical,
    )
