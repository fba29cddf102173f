"""
Tests for dice notation parsing and die rolling.
"""

import pytest

from rules_engine.core.dice_parser import parse_dice_notation, roll_dice, roll_die
from rules_engine.core.error_handling import InvalidDiceNotationError


def test_parse_with_positive_modifier():
    dice = parse_dice_notation("2d6+3")
    assert (dice.count, dice.sides, dice.modifier) == (2, 6, 3)
    assert str(dice) == "2d6+3"


def test_parse_with_negative_modifier():
    dice = parse_dice_notation("1d4-5")
    assert (dice.count, dice.sides, dice.modifier) == (1, 4, -5)


def test_parse_without_modifier():
    dice = parse_dice_notation("8d6")
    assert dice.modifier == 0
    assert str(dice) == "8d6"


@pytest.mark.parametrize(
    "notation",
    ["", "d6", "2d", "2x6", "1d8 + 3", "1d8+", "abc", "0d6", "1d0", "101d6", "1d1001"],
)
def test_invalid_notation_raises(notation):
    """
    Test that malformed notation is a hard failure.
    """
    with pytest.raises(InvalidDiceNotationError):
        parse_dice_notation(notation)


def test_invalid_notation_is_a_value_error():
    with pytest.raises(ValueError, match="Invalid dice notation"):
        parse_dice_notation("fireball")


def test_roll_die_mapping():
    assert roll_die(6, lambda: 0.0) == 1
    assert roll_die(6, lambda: 0.5) == 4
    assert roll_die(8, lambda: 0.65) == 6
    assert roll_die(6, lambda: 0.9999) == 6


def test_roll_dice_records_each_face():
    values = iter([0.1, 0.6, 0.95])
    assert roll_dice(3, 10, lambda: next(values)) == [2, 7, 10]
