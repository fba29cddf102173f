"""
Tests for damage rolls.
"""

import pytest

from rules_engine.combat.damage import roll_damage
from rules_engine.core.error_handling import InvalidDiceNotationError


def test_roll_damage(make_rng):
    damage = roll_damage("1d8+3", False, "slashing", make_rng((6, 8)))
    assert damage.rolls == [6]
    assert damage.modifier == 3
    assert damage.total == 9
    assert damage.damage_type == "slashing"
    assert not damage.is_critical
    assert str(damage) == "9 slashing [1d8+3(6+3)]"


def test_critical_doubles_dice_not_modifier(make_rng):
    """
    Test that a critical hit rolls twice the dice and adds the modifier once.
    """
    rng = make_rng((1, 6), (2, 6), (3, 6), (4, 6))
    damage = roll_damage("2d6+3", True, "piercing", rng)

    assert rng.calls == 4
    assert damage.rolls == [1, 2, 3, 4]
    assert damage.total == 13
    assert damage.is_critical


def test_damage_never_negative(make_rng):
    damage = roll_damage("1d4-5", False, "bludgeoning", make_rng((1, 4)))
    assert damage.total == 0
    assert str(damage) == "0 bludgeoning [1d4-5(1-5)]"


def test_invalid_damage_notation_raises():
    with pytest.raises(InvalidDiceNotationError):
        roll_damage("2d", False, "fire")
