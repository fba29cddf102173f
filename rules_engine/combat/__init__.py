"""
Combat module for the rules engine.

Resolves attacks and saving throws and rolls their damage.
"""

from .combat_resolver import (
    AttackAction,
    AttackResult,
    SavingThrowAction,
    SavingThrowResult,
    resolve_attack,
    resolve_saving_throw,
)
from .damage import DamageRoll, roll_damage

__all__ = [
    "AttackAction",
    "AttackResult",
    "DamageRoll",
    "SavingThrowAction",
    "SavingThrowResult",
    "resolve_attack",
    "resolve_saving_throw",
    "roll_damage",
]
