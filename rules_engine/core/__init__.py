"""
Core module for the rules engine.

This module contains the fundamental components the rest of the engine is
built on: game constants, dice parsing and rolling, d20 roll mechanics,
error types and logging.
"""

from .constants import (
    Ability,
    ActionType,
    ConditionEffect,
    RestorationType,
    RestType,
    RollState,
    RollType,
)
from .dice_parser import (
    DiceNotation,
    RandomSource,
    parse_dice_notation,
    roll_d20,
    roll_dice,
    roll_die,
)
from .error_handling import (
    InvalidDiceNotationError,
    RulesEngineError,
    UnknownConditionError,
)
from .roll_mechanics import (
    RollContext,
    RollResult,
    RollSource,
    add_advantage,
    add_disadvantage,
    create_roll_context,
    determine_roll_state,
    make_d20_roll,
)

__all__ = [
    # Import from constants.py
    "Ability",
    "ActionType",
    "ConditionEffect",
    "RestorationType",
    "RestType",
    "RollState",
    "RollType",
    # Import from dice_parser.py
    "DiceNotation",
    "RandomSource",
    "parse_dice_notation",
    "roll_d20",
    "roll_dice",
    "roll_die",
    # Import from error_handling.py
    "InvalidDiceNotationError",
    "RulesEngineError",
    "UnknownConditionError",
    # Import from roll_mechanics.py
    "RollContext",
    "RollResult",
    "RollSource",
    "add_advantage",
    "add_disadvantage",
    "create_roll_context",
    "determine_roll_state",
    "make_d20_roll",
]
