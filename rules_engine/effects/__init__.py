"""
Effects module for the rules engine.

Provides the status condition table and the functions applying active
conditions to rolls.
"""

from .condition_mechanics import (
    CONDITION_MECHANICS,
    ActiveCondition,
    ConditionMechanics,
    apply_conditions_to_roll,
    check_auto_crit,
    check_auto_fail_save,
    get_condition_mechanics,
    has_speed_zero,
    is_incapacitated,
    is_unable_to_move_or_speak,
)

__all__ = [
    "CONDITION_MECHANICS",
    "ActiveCondition",
    "ConditionMechanics",
    "apply_conditions_to_roll",
    "check_auto_crit",
    "check_auto_fail_save",
    "get_condition_mechanics",
    "has_speed_zero",
    "is_incapacitated",
    "is_unable_to_move_or_speak",
]
