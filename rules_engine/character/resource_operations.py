"""
Resource operations module for the rules engine.

Consumes and restores resources, spell slots and hit points. Operations
never raise for gameplay failures and never modify their input: they return
a ``StateUpdateResult`` holding either a new state, or the original state
together with ``success=False`` and an error message.
"""

from typing import Literal

from rules_engine.core.constants import MAX_EXHAUSTION_LEVEL, RestType
from rules_engine.core.logging import log_debug

from .character_state import (
    CharacterState,
    StateUpdateResult,
    clone_character_state,
)

Amount = int | Literal["max"]


def _failure(state: CharacterState, error: str) -> StateUpdateResult:
    log_debug(error, {"character_id": state.character_id})
    return StateUpdateResult(state=state, success=False, error=error)


def _is_negative(amount: Amount) -> bool:
    return amount != "max" and amount < 0


def _restored_value(current: int, maximum: int, amount: Amount) -> int:
    if amount == "max":
        return maximum
    return min(current + amount, maximum)


# ==============================================================================
# RESOURCES
# ==============================================================================


def consume_resource(
    state: CharacterState,
    resource_id: str,
    amount: int = 1,
) -> StateUpdateResult:
    """
    Spends uses of a resource.

    Args:
        state (CharacterState): The current state.
        resource_id (str): Resource id (e.g., 'rage', 'ki-points').
        amount (int): Amount to consume. Defaults to 1.

    Returns:
        StateUpdateResult: The new state, or the original one on failure.

    """
    if amount < 0:
        return _failure(state, f"Cannot consume a negative amount ({amount}) of resource '{resource_id}'")

    resource = state.resources.get(resource_id)
    if resource is None:
        return _failure(state, f"Resource '{resource_id}' does not exist on character")

    new_current = resource.current - amount
    if new_current < 0:
        return _failure(
            state,
            f"Cannot consume {amount} of resource '{resource_id}': "
            f"only {resource.current} available (max {resource.max})",
        )

    new_state = clone_character_state(state)
    new_state.resources[resource_id].current = new_current
    return StateUpdateResult(
        state=new_state,
        success=True,
        changes=[f"Consumed {amount} {resource_id} ({resource.current} → {new_current})"],
    )


def restore_resource(
    state: CharacterState,
    resource_id: str,
    amount: Amount = "max",
) -> StateUpdateResult:
    """
    Regains uses of a resource, up to its maximum.

    When nothing changes the original state object is returned as is.

    Args:
        state (CharacterState): The current state.
        resource_id (str): Resource id.
        amount (int | 'max'): Amount to restore. Defaults to 'max'.

    Returns:
        StateUpdateResult: The new state, or the original one.

    """
    if _is_negative(amount):
        return _failure(state, f"Cannot restore a negative amount ({amount}) of resource '{resource_id}'")

    resource = state.resources.get(resource_id)
    if resource is None:
        return _failure(state, f"Resource '{resource_id}' does not exist on character")

    new_current = _restored_value(resource.current, resource.max, amount)
    if new_current == resource.current:
        return StateUpdateResult(
            state=state,
            success=True,
            changes=[f"Resource '{resource_id}' already at {resource.current}/{resource.max}"],
        )

    new_state = clone_character_state(state)
    new_state.resources[resource_id].current = new_current
    return StateUpdateResult(
        state=new_state,
        success=True,
        changes=[f"Restored {resource_id} ({resource.current} → {new_current})"],
    )


def can_use_resource(state: CharacterState, resource_id: str, amount: int = 1) -> bool:
    """Checks whether the character has at least ``amount`` uses left."""
    resource = state.resources.get(resource_id)
    return resource is not None and resource.current >= amount


def get_resource_uses(state: CharacterState, resource_id: str) -> tuple[int, int]:
    """
    Returns the current and maximum uses of a resource.

    Args:
        state (CharacterState): The current state.
        resource_id (str): Resource id.

    Returns:
        tuple[int, int]: (current, max), or (0, 0) for unknown resources.

    """
    resource = state.resources.get(resource_id)
    if resource is None:
        return 0, 0
    return resource.current, resource.max


def restore_resources_on_rest(state: CharacterState, rest_type: RestType | str) -> StateUpdateResult:
    """
    Restores what a short or long rest restores.

    A short rest refills short-rest resources. A long rest also refills
    long-rest and per-day resources and every spell slot, restores hit
    points, clears temporary hit points and death saves, and removes one
    level of exhaustion.

    Args:
        state (CharacterState): The current state.
        rest_type (RestType | str): The kind of rest.

    Returns:
        StateUpdateResult: The new state with one change line per restored item.

    """
    rest_type = RestType(rest_type)
    restored_types = rest_type.restores()
    new_state = clone_character_state(state)
    changes: list[str] = []

    for resource_id, resource in new_state.resources.items():
        if resource.restoration_type in restored_types and resource.current < resource.max:
            changes.append(f"Restored {resource_id} ({resource.current} → {resource.max})")
            resource.current = resource.max

    if rest_type == RestType.LONG:
        if new_state.spell_slots is not None:
            for level, slot in sorted(new_state.spell_slots.items()):
                if slot.current < slot.max:
                    changes.append(f"Restored level {level} slots ({slot.current} → {slot.max})")
                    slot.current = slot.max
        if new_state.current_hp < new_state.max_hp:
            changes.append(f"Healed {new_state.max_hp - new_state.current_hp} HP ({new_state.current_hp} → {new_state.max_hp})")
            new_state.current_hp = new_state.max_hp
        new_state.temp_hp = 0
        new_state.death_save_successes = 0
        new_state.death_save_failures = 0
        if new_state.exhaustion_level > 0:
            new_state.exhaustion_level = min(new_state.exhaustion_level, MAX_EXHAUSTION_LEVEL) - 1
            changes.append(f"Exhaustion reduced to {new_state.exhaustion_level}")

    if not changes:
        changes.append(f"Nothing to restore on a {rest_type.value} rest")

    log_debug(
        f"{state.character_id} takes a {rest_type.value} rest",
        {"changes": len(changes)},
    )
    return StateUpdateResult(state=new_state, success=True, changes=changes)


# ==============================================================================
# SPELL SLOTS
# ==============================================================================


def consume_spell_slot(state: CharacterState, level: int) -> StateUpdateResult:
    """
    Spends one spell slot of the given level.

    Args:
        state (CharacterState): The current state.
        level (int): Spell slot level (1-9).

    Returns:
        StateUpdateResult: The new state, or the original one on failure.

    """
    if state.spell_slots is None:
        return _failure(state, "Character does not have spellcasting")

    slot = state.spell_slots.get(level)
    if slot is None:
        return _failure(state, f"Character does not have spell slots of level {level}")

    if slot.current <= 0:
        return _failure(state, f"No level {level} spell slots remaining (0/{slot.max})")

    new_state = clone_character_state(state)
    new_state.spell_slots[level].current = slot.current - 1
    return StateUpdateResult(
        state=new_state,
        success=True,
        changes=[f"Consumed level {level} spell slot ({slot.current} → {slot.current - 1})"],
    )


def restore_spell_slots(
    state: CharacterState,
    level: int | Literal["all"],
    amount: Amount = "max",
) -> StateUpdateResult:
    """
    Regains spell slots of one level, or of every level.

    Args:
        state (CharacterState): The current state.
        level (int | 'all'): Level to restore, or 'all'.
        amount (int | 'max'): Slots to restore per level. Defaults to 'max'.

    Returns:
        StateUpdateResult: The new state, with one change line per level that
            actually changed.

    """
    if _is_negative(amount):
        return _failure(state, f"Cannot restore a negative amount ({amount}) of spell slots")

    if state.spell_slots is None:
        return _failure(state, "Character does not have spellcasting")

    if level == "all":
        levels = sorted(state.spell_slots)
    elif level in state.spell_slots:
        levels = [level]
    else:
        return _failure(state, f"Character does not have spell slots of level {level}")

    new_state = clone_character_state(state)
    changes: list[str] = []
    for slot_level in levels:
        slot = new_state.spell_slots[slot_level]
        old_current = slot.current
        slot.current = _restored_value(slot.current, slot.max, amount)
        if slot.current != old_current:
            changes.append(f"Restored level {slot_level} slots ({old_current} → {slot.current})")

    return StateUpdateResult(
        state=new_state,
        success=True,
        changes=changes or ["Spell slots already at maximum"],
    )


# ==============================================================================
# HIT POINTS
# ==============================================================================


def take_damage(state: CharacterState, damage: int) -> StateUpdateResult:
    """
    Applies damage, temporary hit points absorb it first.

    Current hit points never go below 0. Death is left to the caller.

    Args:
        state (CharacterState): The current state.
        damage (int): Amount of damage.

    Returns:
        StateUpdateResult: The new state.

    """
    if damage <= 0:
        return StateUpdateResult(state=state, success=True, changes=["No damage taken"])

    new_state = clone_character_state(state)
    changes: list[str] = []
    remaining = damage

    if new_state.temp_hp > 0:
        temp_lost = min(new_state.temp_hp, remaining)
        new_state.temp_hp -= temp_lost
        remaining -= temp_lost
        changes.append(f"Lost {temp_lost} temporary HP ({state.temp_hp} → {new_state.temp_hp})")

    if remaining > 0:
        old_hp = new_state.current_hp
        new_state.current_hp = max(0, new_state.current_hp - remaining)
        changes.append(f"Took {remaining} damage ({old_hp} → {new_state.current_hp} HP)")

    log_debug(
        f"{state.character_id} takes {damage} damage",
        {"hp": new_state.current_hp, "temp_hp": new_state.temp_hp},
    )
    return StateUpdateResult(state=new_state, success=True, changes=changes)


def heal(state: CharacterState, amount: int) -> StateUpdateResult:
    """
    Restores hit points, up to the maximum.

    Args:
        state (CharacterState): The current state.
        amount (int): Amount of healing.

    Returns:
        StateUpdateResult: The new state, logging the healing actually applied.

    """
    if amount <= 0:
        return StateUpdateResult(state=state, success=True, changes=["No healing applied"])

    new_state = clone_character_state(state)
    old_hp = new_state.current_hp
    new_state.current_hp = min(new_state.current_hp + amount, new_state.max_hp)
    healed = new_state.current_hp - old_hp

    if healed > 0:
        changes = [f"Healed {healed} HP ({old_hp} → {new_state.current_hp})"]
    else:
        changes = ["Already at maximum HP"]
    return StateUpdateResult(state=new_state, success=True, changes=changes)


def gain_temp_hp(state: CharacterState, amount: int) -> StateUpdateResult:
    """
    Gains temporary hit points. They do not stack: the higher value is kept.

    Args:
        state (CharacterState): The current state.
        amount (int): Temporary hit points granted.

    Returns:
        StateUpdateResult: The new state.

    """
    if amount <= 0:
        return StateUpdateResult(state=state, success=True, changes=["No temporary HP gained"])

    new_state = clone_character_state(state)
    old_temp = new_state.temp_hp
    new_state.temp_hp = max(old_temp, amount)

    if new_state.temp_hp > old_temp:
        changes = [f"Gained {amount} temporary HP ({old_temp} → {new_state.temp_hp})"]
    else:
        changes = [f"Temporary HP not changed (current {old_temp} >= new {amount})"]
    return StateUpdateResult(state=new_state, success=True, changes=changes)
