"""
Tests for the action economy and concentration.
"""

import pytest

from rules_engine.character.turn_operations import (
    concentration_save_dc,
    end_concentration,
    reset_action_economy,
    spend_action,
    spend_movement,
    start_concentration,
)
from rules_engine.core.constants import ActionType


@pytest.mark.parametrize(
    "action_type, flag",
    [
        (ActionType.ACTION, "has_action"),
        (ActionType.BONUS_ACTION, "has_bonus_action"),
        (ActionType.REACTION, "has_reaction"),
    ],
)
def test_spend_action_once(attacker, action_type, flag):
    """
    Test that each slot of the action economy can be spent once per turn.
    """
    first = spend_action(attacker, action_type)
    assert first.success
    assert not getattr(first.state.action_economy, flag)
    assert getattr(attacker.action_economy, flag)
    assert first.changes == [f"Used {action_type.value}"]

    second = spend_action(first.state, action_type)
    assert not second.success
    assert second.error == f"No {action_type.value} available this turn"
    assert second.state is first.state


def test_spend_action_accepts_strings(attacker):
    result = spend_action(attacker, "bonus action")
    assert result.success
    assert result.state.action_economy.has_action
    assert not result.state.action_economy.has_bonus_action


def test_incapacitated_cannot_act(attacker, with_conditions):
    stunned = with_conditions(attacker, "stunned")
    result = spend_action(stunned, ActionType.REACTION)
    assert not result.success
    assert result.error == "Cannot take a reaction while incapacitated"
    assert result.state is stunned


def test_spend_movement(attacker):
    result = spend_movement(attacker, 20)
    assert result.success
    assert result.state.action_economy.movement_remaining == 10

    too_far = spend_movement(result.state, 15)
    assert not too_far.success
    assert too_far.error == "Cannot move 15 ft: only 10 ft remaining"


def test_spend_no_movement(attacker):
    result = spend_movement(attacker, 0)
    assert result.success
    assert result.state is attacker


def test_grappled_cannot_move(attacker, with_conditions):
    grappled = with_conditions(attacker, "grappled")
    result = spend_movement(grappled, 5)
    assert not result.success
    assert result.error == "Cannot move: speed is 0 due to a condition"


def test_reset_action_economy(attacker):
    spent = spend_action(spend_movement(attacker, 30).state, ActionType.ACTION).state
    result = reset_action_economy(spent, 30)

    economy = result.state.action_economy
    assert economy.has_action
    assert economy.has_bonus_action
    assert economy.has_reaction
    assert economy.movement_remaining == 30
    assert result.changes == ["Action economy reset (30 ft of movement)"]
    assert not spent.action_economy.has_action


def test_reset_action_economy_with_zero_speed_condition(attacker, with_conditions):
    restrained = with_conditions(attacker, "restrained")
    result = reset_action_economy(restrained, 30)
    assert result.state.action_economy.movement_remaining == 0
    assert result.state.action_economy.has_action


def test_start_concentration(caster):
    result = start_concentration(caster, "bless", "bless", 1)
    concentration = result.state.concentration

    assert concentration.is_concentrating
    assert concentration.active_effect == "bless"
    assert concentration.spell_level == 1
    assert result.changes == ["Concentrating on bless"]
    assert not caster.concentration.is_concentrating


def test_start_concentration_replaces_previous(caster):
    """
    Test that only one effect can be concentrated on at a time.
    """
    blessed = start_concentration(caster, "bless").state
    result = start_concentration(blessed, "hold person", spell_level=2)

    assert result.state.concentration.active_effect == "hold person"
    assert result.changes == ["Concentration on bless ended", "Concentrating on hold person"]


def test_end_concentration(caster):
    blessed = start_concentration(caster, "bless").state
    result = end_concentration(blessed)
    assert not result.state.concentration.is_concentrating
    assert result.changes == ["Concentration on bless ended"]

    idle = end_concentration(result.state)
    assert idle.state is result.state
    assert idle.changes == ["Not concentrating"]


@pytest.mark.parametrize("damage, dc", [(0, 10), (9, 10), (21, 10), (22, 11), (45, 22)])
def test_concentration_save_dc(damage, dc):
    assert concentration_save_dc(damage) == dc
