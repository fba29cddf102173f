"""
Tests for attack and saving throw resolution.
"""

import pytest

from rules_engine.combat.combat_resolver import (
    AttackAction,
    SavingThrowAction,
    resolve_attack,
    resolve_saving_throw,
)
from rules_engine.core.constants import Ability, RollState
from rules_engine.core.error_handling import InvalidDiceNotationError


def _attack(attacker, defender, **kwargs) -> AttackAction:
    params = {
        "attack_bonus": 5,
        "damage_dice": "1d8+3",
        "damage_type": "slashing",
    }
    params.update(kwargs)
    return AttackAction(attacker=attacker, defender=defender, **params)


def _save(character, **kwargs) -> SavingThrowAction:
    params = {"save_dc": 13, "ability": Ability.DEX, "save_bonus": 1}
    params.update(kwargs)
    return SavingThrowAction(character=character, **params)


# ==============================================================================
# ATTACKS
# ==============================================================================


def test_attack_hits_and_deals_damage(attacker, defender, make_rng):
    result = resolve_attack(_attack(attacker, defender), 14, make_rng(15, (6, 8)))

    assert result.is_hit
    assert not result.is_critical
    assert result.target_ac == 14
    assert result.attack_roll.total == 20
    assert result.damage_roll.total == 9
    assert result.defender_state.current_hp == 11
    assert defender.current_hp == 20
    assert result.log == [
        "Attack roll: 15 + 5 = 20 (normal)",
        "Hit! (AC 14)",
        "Damage: 9 slashing",
        "Took 9 damage (20 → 11 HP)",
    ]


def test_attack_meeting_ac_hits(attacker, defender, make_rng):
    result = resolve_attack(_attack(attacker, defender), 14, make_rng(9, (1, 8)))
    assert result.attack_roll.total == 14
    assert result.is_hit


def test_attack_miss_leaves_states_untouched(attacker, defender, make_rng):
    rng = make_rng(3)
    result = resolve_attack(_attack(attacker, defender), 14, rng)

    assert not result.is_hit
    assert result.damage_roll is None
    assert result.defender_state is None
    assert rng.calls == 1
    assert result.log == ["Attack roll: 3 + 5 = 8 (normal)", "Miss! (AC 14)"]


def test_prone_attacker_rolls_with_disadvantage(attacker, defender, with_conditions, make_rng):
    """
    Test that the attacker's own conditions shape the roll.
    """
    prone = with_conditions(attacker, "prone")
    result = resolve_attack(_attack(prone, defender), 14, make_rng(15, 8))

    assert result.attack_roll.roll_state == RollState.DISADVANTAGE
    assert result.attack_roll.rolls == [15, 8]
    assert result.attack_roll.final_roll == 8
    assert not result.is_hit
    assert result.log[0] == "Attack roll: 8 + 5 = 13 (disadvantage)"


def test_restrained_defender_grants_advantage(attacker, defender, with_conditions, make_rng):
    restrained = with_conditions(defender, "restrained")
    result = resolve_attack(_attack(attacker, restrained), 14, make_rng(4, 12, (2, 8)))

    assert result.attack_roll.roll_state == RollState.ADVANTAGE
    assert result.attack_roll.advantage_sources[0].source == "target-restrained"
    assert result.is_hit
    assert result.damage_roll.total == 5


def test_natural_twenty_always_hits_and_crits(attacker, defender, make_rng):
    rng = make_rng(20, (3, 8), (5, 8))
    result = resolve_attack(_attack(attacker, defender), 30, rng)

    assert result.is_hit
    assert result.is_critical
    assert result.damage_roll.rolls == [3, 5]
    assert result.damage_roll.total == 11
    assert "Critical hit!" in result.log


def test_melee_against_paralyzed_is_automatic_critical(
    attacker, defender, with_conditions, make_rng
):
    """
    Test that a melee attack within 5 feet of a paralyzed target crits on any roll.
    """
    paralyzed = with_conditions(defender, "paralyzed")
    action = _attack(attacker, paralyzed, is_melee_within_5_feet=True)
    result = resolve_attack(action, 14, make_rng(2, 3, (4, 8), (5, 8)))

    assert result.attack_roll.roll_state == RollState.ADVANTAGE
    assert result.attack_roll.total == 8
    assert not result.attack_roll.is_critical_hit
    assert result.is_hit
    assert result.is_critical
    assert result.damage_roll.rolls == [4, 5]
    assert result.damage_roll.total == 12
    assert result.defender_state.current_hp == 8


def test_ranged_against_paralyzed_is_not_automatic(attacker, defender, with_conditions, make_rng):
    paralyzed = with_conditions(defender, "paralyzed")
    result = resolve_attack(_attack(attacker, paralyzed), 14, make_rng(2, 3))

    assert not result.is_hit
    assert not result.is_critical
    assert result.defender_state is None


def test_damage_hits_temp_hp_first(attacker, defender, make_rng):
    shielded = defender.model_copy(update={"temp_hp": 5})
    result = resolve_attack(_attack(attacker, shielded), 10, make_rng(15, (5, 8)))

    assert result.defender_state.temp_hp == 0
    assert result.defender_state.current_hp == 17


def test_attack_with_invalid_notation_raises(attacker, defender, make_rng):
    action = _attack(attacker, defender, damage_dice="fireball")
    with pytest.raises(InvalidDiceNotationError):
        resolve_attack(action, 10, make_rng(20))


# ==============================================================================
# SAVING THROWS
# ==============================================================================


def test_stunned_fails_dexterity_save_without_rolling(defender, with_conditions, make_rng):
    """
    Test that an automatic failure never consumes the random source.
    """
    stunned = with_conditions(defender, "stunned")
    rng = make_rng()
    result = resolve_saving_throw(_save(stunned, save_dc=15), rng)

    assert rng.calls == 0
    assert result.auto_fail
    assert not result.success
    assert result.save_dc == 15
    assert result.save_roll.total == 0
    assert result.character_state is None
    assert result.log == ["DEX save auto-fails due to conditions"]


def test_auto_fail_applies_failure_damage(defender, with_conditions, make_rng):
    unconscious = with_conditions(defender, "unconscious")
    action = _save(unconscious, damage_on_fail="2d6", damage_on_success="1d6", damage_type="fire")
    result = resolve_saving_throw(action, make_rng((3, 6), (4, 6)))

    assert result.auto_fail
    assert result.damage_roll.total == 7
    assert result.character_state.current_hp == 13
    assert result.log[0] == "DEX save auto-fails due to conditions"
    assert "Damage: 7 fire" in result.log


def test_paralyzed_rolls_wisdom_saves(defender, with_conditions, make_rng):
    paralyzed = with_conditions(defender, "paralyzed")
    result = resolve_saving_throw(_save(paralyzed, ability=Ability.WIS), make_rng(14))
    assert not result.auto_fail
    assert result.success


def test_successful_save_applies_success_damage(defender, make_rng):
    action = _save(defender, damage_on_fail="8d6", damage_on_success="1d6", damage_type="fire")
    result = resolve_saving_throw(action, make_rng(15, (4, 6)))

    assert result.success
    assert not result.auto_fail
    assert result.save_roll.total == 16
    assert result.damage_roll.total == 4
    assert result.character_state.current_hp == 16
    assert result.log[:3] == [
        "DEX save: 15 + 1 = 16 (normal)",
        "Success! (DC 13)",
        "Damage: 4 fire",
    ]


def test_failed_save_applies_failure_damage(defender, make_rng):
    action = _save(defender, damage_on_fail="2d6", damage_type="fire")
    result = resolve_saving_throw(action, make_rng(5, (6, 6), (6, 6)))

    assert not result.success
    assert result.damage_roll.total == 12
    assert result.character_state.current_hp == 8
    assert "Failure! (DC 13)" in result.log


def test_save_without_damage(defender, make_rng):
    result = resolve_saving_throw(_save(defender, damage_on_fail="2d6"), make_rng(18))
    assert result.success
    assert result.damage_roll is None
    assert result.character_state is None


def test_restrained_saves_with_disadvantage(defender, with_conditions, make_rng):
    restrained = with_conditions(defender, "restrained")
    result = resolve_saving_throw(_save(restrained), make_rng(15, 8))

    assert result.save_roll.roll_state == RollState.DISADVANTAGE
    assert result.save_roll.total == 9
    assert not result.success
    assert result.log[0] == "DEX save: 8 + 1 = 9 (disadvantage)"


def test_negative_save_bonus_in_log(defender, make_rng):
    result = resolve_saving_throw(_save(defender, save_bonus=-2, ability="WIS"), make_rng(10))
    assert result.log[0] == "WIS save: 10 - 2 = 8 (normal)"
