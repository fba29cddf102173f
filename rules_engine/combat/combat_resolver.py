"""
Combat resolver module for the rules engine.

Resolves a single attack or saving throw end to end: builds the roll
context, applies the conditions of everyone involved, rolls, decides the
outcome, rolls and applies damage, and returns an immutable result with a
human-readable log.
"""

from pydantic import BaseModel, ConfigDict, Field

from rules_engine.character.character_state import CharacterState
from rules_engine.character.resource_operations import take_damage
from rules_engine.core.constants import Ability, RollType
from rules_engine.core.dice_parser import RandomSource
from rules_engine.core.logging import log_debug
from rules_engine.core.roll_mechanics import RollResult, create_roll_context, make_d20_roll
from rules_engine.effects.condition_mechanics import (
    apply_conditions_to_roll,
    check_auto_crit,
    check_auto_fail_save,
)

from .damage import DamageRoll, roll_damage


class AttackAction(BaseModel):
    """Static parameters of an attack."""

    attacker: CharacterState = Field(description="State of the attacker")
    defender: CharacterState = Field(description="State of the defender")
    attack_bonus: int = Field(description="Ability modifier plus proficiency")
    damage_dice: str = Field(description="Damage notation (e.g., '1d8+3')")
    damage_type: str = Field(description="Type of damage")
    is_melee_within_5_feet: bool = Field(
        default=False,
        description="Whether this is a melee attack made within 5 feet",
    )


class AttackResult(BaseModel):
    """Outcome of an attack."""

    model_config = ConfigDict(frozen=True)

    attack_roll: RollResult
    is_hit: bool
    is_critical: bool = Field(default=False)
    target_ac: int
    damage_roll: DamageRoll | None = Field(default=None)
    defender_state: CharacterState | None = Field(
        default=None,
        description="Defender state after damage, None on a miss",
    )
    log: list[str] = Field(default_factory=list)


class SavingThrowAction(BaseModel):
    """Static parameters of a saving throw."""

    character: CharacterState = Field(description="State of the saving character")
    save_dc: int = Field(description="Difficulty class")
    ability: Ability = Field(description="Ability used for the save")
    save_bonus: int = Field(default=0, description="Ability modifier plus proficiency")
    damage_on_fail: str | None = Field(default=None)
    damage_on_success: str | None = Field(
        default=None,
        description="Already-halved notation, the engine does not halve",
    )
    damage_type: str = Field(default="untyped")


class SavingThrowResult(BaseModel):
    """Outcome of a saving throw."""

    model_config = ConfigDict(frozen=True)

    save_roll: RollResult
    success: bool
    save_dc: int
    auto_fail: bool
    damage_roll: DamageRoll | None = Field(default=None)
    character_state: CharacterState | None = Field(
        default=None,
        description="Character state after damage, None if no damage applied",
    )
    log: list[str] = Field(default_factory=list)


def _format_bonus(bonus: int) -> str:
    return f"+ {bonus}" if bonus >= 0 else f"- {-bonus}"


def _apply_damage(
    state: CharacterState,
    notation: str,
    is_critical: bool,
    damage_type: str,
    log: list[str],
    rng: RandomSource | None,
) -> tuple[DamageRoll, CharacterState]:
    damage_roll = roll_damage(notation, is_critical, damage_type, rng)
    log.append(f"Damage: {damage_roll.total} {damage_roll.damage_type}")
    damage_result = take_damage(state, damage_roll.total)
    log.extend(damage_result.changes)
    return damage_roll, damage_result.state


def resolve_attack(
    action: AttackAction,
    defender_ac: int,
    rng: RandomSource | None = None,
) -> AttackResult:
    """
    Resolves an attack.

    The attack hits when the total meets the defender's AC, or on any
    critical hit (a natural 20, or a melee hit within 5 feet of a paralyzed
    or unconscious defender). A miss leaves every state untouched.

    Args:
        action (AttackAction): The attack.
        defender_ac (int): Armor class of the defender.
        rng (RandomSource | None): Optional uniform [0, 1) generator, used
            for the d20 and then for the damage dice.

    Returns:
        AttackResult: The outcome, including the updated defender on a hit.

    Raises:
        InvalidDiceNotationError: If the damage notation is malformed.

    """
    log: list[str] = []

    context = create_roll_context(RollType.ATTACK, [action.attack_bonus])
    context = apply_conditions_to_roll(context, action.attacker.conditions, False)
    context = apply_conditions_to_roll(context, action.defender.conditions, True)

    attack_roll = make_d20_roll(context, rng)
    log.append(
        f"Attack roll: {attack_roll.final_roll} {_format_bonus(action.attack_bonus)} "
        f"= {attack_roll.total} ({attack_roll.roll_state.value})"
    )

    is_auto_crit = check_auto_crit(action.defender.conditions, action.is_melee_within_5_feet)
    is_critical = attack_roll.is_critical_hit or is_auto_crit
    is_hit = attack_roll.total >= defender_ac or is_critical

    log_debug(
        f"{action.attacker.character_id} attacks {action.defender.character_id}",
        {"total": attack_roll.total, "ac": defender_ac, "hit": is_hit, "critical": is_critical},
    )

    if not is_hit:
        log.append(f"Miss! (AC {defender_ac})")
        return AttackResult(
            attack_roll=attack_roll,
            is_hit=False,
            target_ac=defender_ac,
            log=log,
        )

    log.append("Critical hit!" if is_critical else f"Hit! (AC {defender_ac})")
    damage_roll, defender_state = _apply_damage(
        action.defender,
        action.damage_dice,
        is_critical,
        action.damage_type,
        log,
        rng,
    )
    return AttackResult(
        attack_roll=attack_roll,
        is_hit=True,
        is_critical=is_critical,
        target_ac=defender_ac,
        damage_roll=damage_roll,
        defender_state=defender_state,
        log=log,
    )


def resolve_saving_throw(
    action: SavingThrowAction,
    rng: RandomSource | None = None,
) -> SavingThrowResult:
    """
    Resolves a saving throw.

    Conditions that make the save fail automatically skip the roll entirely.
    Otherwise the save succeeds when the total meets the DC. The matching
    damage notation, if any, is rolled and applied to the character.

    Args:
        action (SavingThrowAction): The saving throw.
        rng (RandomSource | None): Optional uniform [0, 1) generator.

    Returns:
        SavingThrowResult: The outcome.

    Raises:
        InvalidDiceNotationError: If a damage notation is malformed.

    """
    log: list[str] = []
    ability = action.ability.value

    if check_auto_fail_save(action.character.conditions, action.ability):
        log.append(f"{ability} save auto-fails due to conditions")
        damage_roll = None
        character_state = None
        if action.damage_on_fail:
            damage_roll, character_state = _apply_damage(
                action.character,
                action.damage_on_fail,
                False,
                action.damage_type,
                log,
                rng,
            )
        return SavingThrowResult(
            save_roll=RollResult.placeholder(),
            success=False,
            save_dc=action.save_dc,
            auto_fail=True,
            damage_roll=damage_roll,
            character_state=character_state,
            log=log,
        )

    context = create_roll_context(RollType.SAVE, [action.save_bonus])
    context = apply_conditions_to_roll(context, action.character.conditions, False)

    save_roll = make_d20_roll(context, rng)
    log.append(
        f"{ability} save: {save_roll.final_roll} {_format_bonus(action.save_bonus)} "
        f"= {save_roll.total} ({save_roll.roll_state.value})"
    )

    success = save_roll.total >= action.save_dc
    log.append(f"Success! (DC {action.save_dc})" if success else f"Failure! (DC {action.save_dc})")

    notation = action.damage_on_success if success else action.damage_on_fail
    damage_roll = None
    character_state = None
    if notation:
        damage_roll, character_state = _apply_damage(
            action.character,
            notation,
            False,
            action.damage_type,
            log,
            rng,
        )

    return SavingThrowResult(
        save_roll=save_roll,
        success=success,
        save_dc=action.save_dc,
        auto_fail=False,
        damage_roll=damage_roll,
        character_state=character_state,
        log=log,
    )
