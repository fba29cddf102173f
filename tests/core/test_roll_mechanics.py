"""
Tests for d20 roll mechanics.
"""

import pytest

from rules_engine.core.constants import RollState, RollType
from rules_engine.core.roll_mechanics import (
    RollResult,
    RollSource,
    add_advantage,
    add_disadvantage,
    create_roll_context,
    determine_roll_state,
    make_d20_roll,
)


def _sources(count: int) -> list[RollSource]:
    return [RollSource(source=f"source-{i}") for i in range(count)]


@pytest.mark.parametrize("advantages", range(0, 4))
@pytest.mark.parametrize("disadvantages", range(0, 4))
def test_determine_roll_state_presence_rule(advantages, disadvantages):
    """
    Test that only the presence of sources on each side matters.
    """
    state = determine_roll_state(_sources(advantages), _sources(disadvantages))
    if advantages > 0 and disadvantages == 0:
        assert state == RollState.ADVANTAGE
    elif advantages == 0 and disadvantages > 0:
        assert state == RollState.DISADVANTAGE
    else:
        assert state == RollState.NORMAL


def test_create_roll_context_is_empty():
    context = create_roll_context("attack", [5, 2])
    assert context.roll_type == RollType.ATTACK
    assert context.bonuses == [5, 2]
    assert context.advantage_sources == []
    assert context.disadvantage_sources == []


def test_builders_do_not_mutate_input():
    """
    Test that adding sources returns a new context and leaves the input alone.
    """
    base = create_roll_context(RollType.CHECK)
    with_advantage = add_advantage(base, "help-action", "Ally helped")
    with_both = add_disadvantage(with_advantage, "poisoned")

    assert base.advantage_sources == []
    assert base.disadvantage_sources == []
    assert with_advantage.disadvantage_sources == []
    assert with_both.advantage_sources == [RollSource(source="help-action", reason="Ally helped")]
    assert with_both.disadvantage_sources == [RollSource(source="poisoned")]
    assert with_both.roll_type == RollType.CHECK


def test_normal_roll_uses_single_die(make_rng):
    rng = make_rng(12)
    result = make_d20_roll(create_roll_context(RollType.CHECK, [3]), rng)

    assert rng.calls == 1
    assert result.rolls == [12]
    assert result.final_roll == 12
    assert result.total == 15
    assert result.roll_state == RollState.NORMAL


def test_advantage_keeps_higher(make_rng):
    context = add_advantage(create_roll_context(RollType.ATTACK, [2]), "invisible")
    result = make_d20_roll(context, make_rng(7, 16))

    assert result.rolls == [7, 16]
    assert result.final_roll == 16
    assert result.total == 18
    assert result.roll_state == RollState.ADVANTAGE


def test_disadvantage_keeps_lower(make_rng):
    context = add_disadvantage(create_roll_context(RollType.ATTACK, [2]), "prone")
    result = make_d20_roll(context, make_rng(15, 8))

    assert result.rolls == [15, 8]
    assert result.final_roll == 8
    assert result.roll_state == RollState.DISADVANTAGE
    assert result.disadvantage_sources[0].source == "prone"


def test_cancelled_roll_rolls_once(make_rng):
    context = add_disadvantage(
        add_advantage(create_roll_context(RollType.SAVE), "bless"),
        "restrained",
    )
    rng = make_rng(4)
    result = make_d20_roll(context, rng)

    assert rng.calls == 1
    assert result.roll_state == RollState.NORMAL
    # Both source lists are kept for transparency.
    assert len(result.advantage_sources) == 1
    assert len(result.disadvantage_sources) == 1


def test_bonuses_are_summed(make_rng):
    result = make_d20_roll(create_roll_context(RollType.INITIATIVE, [2, 3, -1]), make_rng(10))
    assert result.total == 14
    assert result.bonus_total == 4


def test_natural_twenty_is_critical(make_rng):
    result = make_d20_roll(create_roll_context(RollType.ATTACK, [0]), make_rng(20))
    assert result.is_natural_twenty
    assert result.is_critical_hit
    assert not result.is_natural_one


def test_natural_one(make_rng):
    result = make_d20_roll(create_roll_context(RollType.ATTACK, [10]), make_rng(1))
    assert result.is_natural_one
    assert not result.is_critical_hit
    assert result.total == 11


def test_die_mapping_bounds():
    """
    Test that the die mapping covers the whole [0, 1) range.
    """
    low = make_d20_roll(create_roll_context(RollType.CHECK), lambda: 0.0)
    high = make_d20_roll(create_roll_context(RollType.CHECK), lambda: 0.999999)
    assert low.final_roll == 1
    assert high.final_roll == 20


def test_default_random_source_stays_in_range():
    for _ in range(50):
        result = make_d20_roll(create_roll_context(RollType.CHECK))
        assert 1 <= result.final_roll <= 20


def test_placeholder_result():
    placeholder = RollResult.placeholder()
    assert placeholder.rolls == [0]
    assert placeholder.total == 0
    assert placeholder.roll_state == RollState.NORMAL
    assert not placeholder.is_critical_hit
