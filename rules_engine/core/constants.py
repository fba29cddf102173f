"""
Constants and enumerations for the rules engine.

Defines global constants and enumerations for roll types, roll states,
abilities, resource restoration, condition effects and action types used
throughout the rules engine.
"""

from enum import Enum

# Global verbose level for combat output:
# 0 - Minimal (e.g., only final results)
# 1 - Moderate (e.g., show dice rolls)
# 2 - Full detail (e.g., roll sources, state changes, debug logging)
GLOBAL_VERBOSE_LEVEL = 0

# Walking speed used when the derived stats do not provide one.
DEFAULT_WALK_SPEED = 30

# Number of sides of the die used for attacks, saves and checks.
D20_SIDES = 20

# Death saves are conceptually bounded at three successes or failures.
MAX_DEATH_SAVES = 3

# Exhaustion levels (2014 rules).
MAX_EXHAUSTION_LEVEL = 6

# Reasonable limits for dice notation.
MAX_DICE_COUNT = 100
MAX_DIE_SIDES = 1000


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().capitalize()


class RollType(NiceEnum):
    """Defines the kind of d20 roll being made."""

    ATTACK = "attack"
    SAVE = "save"
    CHECK = "check"
    INITIATIVE = "initiative"


class RollState(NiceEnum):
    """Final roll state after aggregating advantage and disadvantage."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"

    @property
    def color(self) -> str:
        """Returns the color string associated with this roll state."""
        return {
            RollState.ADVANTAGE: "bold green",
            RollState.DISADVANTAGE: "bold red",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.value)

    def colorize(self, message: str) -> str:
        """Applies roll state color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class Ability(NiceEnum):
    """The six ability scores, used for saving throws."""

    STR = "STR"
    DEX = "DEX"
    CON = "CON"
    INT = "INT"
    WIS = "WIS"
    CHA = "CHA"


class RestorationType(NiceEnum):
    """Defines when a tracked resource is restored."""

    SPELL_SLOT = "spellSlot"
    PER_SHORT_REST = "perShortRest"
    PER_LONG_REST = "perLongRest"
    PER_TURN = "perTurn"
    UNLIMITED = "unlimited"
    PER_DAY = "perDay"
    OTHER = "other"


class RestType(NiceEnum):
    """Defines the kind of rest a character takes."""

    SHORT = "short"
    LONG = "long"

    def restores(self) -> set[RestorationType]:
        """
        Returns the restoration types that this rest refills.

        Returns:
            set[RestorationType]: The restoration types restored by the rest.

        """
        if self == RestType.SHORT:
            return {RestorationType.PER_SHORT_REST}
        return {
            RestorationType.PER_SHORT_REST,
            RestorationType.PER_LONG_REST,
            RestorationType.PER_DAY,
        }


class ConditionEffect(NiceEnum):
    """Defines the mechanical effect a condition has on a kind of roll."""

    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"
    AUTO_FAIL = "auto-fail"
    CRIT_ON_HIT = "crit-on-hit"


class ActionType(NiceEnum):
    """Defines the per-turn action economy slots."""

    ACTION = "action"
    BONUS_ACTION = "bonus action"
    REACTION = "reaction"

    @property
    def color(self) -> str:
        """Returns the color string associated with this action type."""
        return {
            ActionType.ACTION: "bold yellow",
            ActionType.BONUS_ACTION: "bold green",
            ActionType.REACTION: "bold red",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies action type color formatting to a message."""
        return f"[{self.color}]{message}[/]"
