"""
Roll mechanics module for the rules engine.

Aggregates advantage and disadvantage sources into a roll state and resolves
d20 rolls. Every builder returns a new roll context, the input is never
modified.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .constants import RollState, RollType
from .dice_parser import RandomSource, roll_d20
from .logging import log_debug


class RollSource(BaseModel):
    """A source of advantage or disadvantage for a roll."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(
        description="Source identifier (e.g., 'prone', 'target-restrained')",
    )
    reason: str | None = Field(
        default=None,
        description="Optional human-readable reason",
    )


class RollContext(BaseModel):
    """Transient input to a single d20 roll."""

    model_config = ConfigDict(frozen=True)

    roll_type: RollType = Field(description="Type of roll being made")
    advantage_sources: list[RollSource] = Field(
        default_factory=list,
        description="Sources granting advantage",
    )
    disadvantage_sources: list[RollSource] = Field(
        default_factory=list,
        description="Sources granting disadvantage",
    )
    bonuses: list[int] = Field(
        default_factory=list,
        description="Flat bonuses to the roll",
    )


class RollResult(BaseModel):
    """Output of a resolved d20 roll."""

    model_config = ConfigDict(frozen=True)

    rolls: list[int] = Field(
        description="The raw die values (one if normal, two otherwise)",
    )
    final_roll: int = Field(description="The die value that was kept")
    total: int = Field(description="Final die value plus all bonuses")
    bonuses: list[int] = Field(default_factory=list, description="Flat bonuses")
    roll_state: RollState = Field(description="Roll state that was applied")
    advantage_sources: list[RollSource] = Field(default_factory=list)
    disadvantage_sources: list[RollSource] = Field(default_factory=list)
    is_natural_twenty: bool = Field(default=False)
    is_natural_one: bool = Field(default=False)
    is_critical_hit: bool = Field(
        default=False,
        description="Natural 20 for now, class features may widen the range",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if len(self.rolls) not in (1, 2):
            raise ValueError("rolls must contain one or two die values")

    @property
    def bonus_total(self) -> int:
        """Sum of all the flat bonuses."""
        return sum(self.bonuses)

    @classmethod
    def placeholder(cls) -> "RollResult":
        """
        Builds a zero-valued result, used when no roll is performed.

        Returns:
            RollResult: A synthetic result with a single zero die.

        """
        return cls(rolls=[0], final_roll=0, total=0, roll_state=RollState.NORMAL)


def determine_roll_state(
    advantage_sources: list[RollSource],
    disadvantage_sources: list[RollSource],
) -> RollState:
    """
    Determines the final roll state from advantage and disadvantage sources.

    Any number of sources on one side only gives that state, sources on both
    sides cancel out to a normal roll. Only presence matters, not counts.

    Args:
        advantage_sources (list[RollSource]): Sources granting advantage.
        disadvantage_sources (list[RollSource]): Sources granting disadvantage.

    Returns:
        RollState: The final roll state.

    """
    has_advantage = len(advantage_sources) > 0
    has_disadvantage = len(disadvantage_sources) > 0
    if has_advantage and has_disadvantage:
        return RollState.NORMAL
    if has_advantage:
        return RollState.ADVANTAGE
    if has_disadvantage:
        return RollState.DISADVANTAGE
    return RollState.NORMAL


def make_d20_roll(context: RollContext, rng: RandomSource | None = None) -> RollResult:
    """
    Makes a d20 roll, honouring advantage and disadvantage.

    Args:
        context (RollContext): The roll context.
        rng (RandomSource | None): Optional uniform [0, 1) generator.

    Returns:
        RollResult: The resolved roll.

    """
    roll_state = determine_roll_state(
        context.advantage_sources,
        context.disadvantage_sources,
    )

    if roll_state == RollState.NORMAL:
        rolls = [roll_d20(rng)]
        final_roll = rolls[0]
    else:
        rolls = [roll_d20(rng), roll_d20(rng)]
        if roll_state == RollState.ADVANTAGE:
            final_roll = max(rolls)
        else:
            final_roll = min(rolls)

    total = final_roll + sum(context.bonuses)
    is_natural_twenty = final_roll == 20
    is_natural_one = final_roll == 1

    log_debug(
        f"{context.roll_type.value} roll: {rolls} -> {final_roll} = {total}",
        {"state": roll_state.value, "bonuses": context.bonuses},
    )

    return RollResult(
        rolls=rolls,
        final_roll=final_roll,
        total=total,
        bonuses=list(context.bonuses),
        roll_state=roll_state,
        advantage_sources=list(context.advantage_sources),
        disadvantage_sources=list(context.disadvantage_sources),
        is_natural_twenty=is_natural_twenty,
        is_natural_one=is_natural_one,
        is_critical_hit=is_natural_twenty,
    )


def create_roll_context(
    roll_type: RollType | str,
    bonuses: list[int] | None = None,
) -> RollContext:
    """
    Creates an empty roll context.

    Args:
        roll_type (RollType | str): Type of roll.
        bonuses (list[int] | None): Flat bonuses to apply.

    Returns:
        RollContext: A context without advantage or disadvantage sources.

    """
    return RollContext(roll_type=RollType(roll_type), bonuses=list(bonuses or []))


def add_advantage(
    context: RollContext,
    source: str,
    reason: str | None = None,
) -> RollContext:
    """Returns a copy of the context with one more advantage source."""
    return context.model_copy(
        update={
            "advantage_sources": [
                *context.advantage_sources,
                RollSource(source=source, reason=reason),
            ]
        }
    )


def add_disadvantage(
    context: RollContext,
    source: str,
    reason: str | None = None,
) -> RollContext:
    """Returns a copy of the context with one more disadvantage source."""
    return context.model_copy(
        update={
            "disadvantage_sources": [
                *context.disadvantage_sources,
                RollSource(source=source, reason=reason),
            ]
        }
    )
