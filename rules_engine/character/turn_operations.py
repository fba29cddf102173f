"""
Turn operations module for the rules engine.

Spends and resets the per-turn action economy and tracks concentration.
Like the resource operations, these are copy-on-write and report gameplay
failures through ``StateUpdateResult``.
"""

from rules_engine.core.constants import ActionType
from rules_engine.core.logging import log_debug
from rules_engine.effects.condition_mechanics import has_speed_zero, is_incapacitated

from .character_state import (
    ActionEconomy,
    CharacterState,
    ConcentrationState,
    StateUpdateResult,
    clone_character_state,
)

_ACTION_FLAGS: dict[ActionType, str] = {
    ActionType.ACTION: "has_action",
    ActionType.BONUS_ACTION: "has_bonus_action",
    ActionType.REACTION: "has_reaction",
}


def reset_action_economy(state: CharacterState, speed: int) -> StateUpdateResult:
    """
    Restores the action economy at the start of the character's turn.

    Movement is reset to ``speed``, or to 0 if a condition such as grappled
    or restrained reduces the speed to 0.

    Args:
        state (CharacterState): The current state.
        speed (int): Walking speed of the character, in feet.

    Returns:
        StateUpdateResult: The new state.

    """
    movement = 0 if has_speed_zero(state.conditions) else max(0, speed)
    new_state = clone_character_state(state)
    new_state.action_economy = ActionEconomy(movement_remaining=movement)
    return StateUpdateResult(
        state=new_state,
        success=True,
        changes=[f"Action economy reset ({movement} ft of movement)"],
    )


def spend_action(state: CharacterState, action_type: ActionType | str) -> StateUpdateResult:
    """
    Spends the action, bonus action or reaction of the turn.

    Args:
        state (CharacterState): The current state.
        action_type (ActionType | str): Which slot to spend.

    Returns:
        StateUpdateResult: The new state, or the original one on failure.

    """
    action_type = ActionType(action_type)
    if is_incapacitated(state.conditions):
        error = f"Cannot take a {action_type.value} while incapacitated"
        log_debug(error, {"character_id": state.character_id})
        return StateUpdateResult(state=state, success=False, error=error)

    flag = _ACTION_FLAGS[action_type]
    if not getattr(state.action_economy, flag):
        error = f"No {action_type.value} available this turn"
        log_debug(error, {"character_id": state.character_id})
        return StateUpdateResult(state=state, success=False, error=error)

    new_state = clone_character_state(state)
    setattr(new_state.action_economy, flag, False)
    return StateUpdateResult(
        state=new_state,
        success=True,
        changes=[f"Used {action_type.value}"],
    )


def spend_movement(state: CharacterState, feet: int) -> StateUpdateResult:
    """
    Spends movement.

    Args:
        state (CharacterState): The current state.
        feet (int): Distance moved, in feet.

    Returns:
        StateUpdateResult: The new state, or the original one on failure.

    """
    if feet <= 0:
        return StateUpdateResult(state=state, success=True, changes=["No movement spent"])

    if has_speed_zero(state.conditions):
        return StateUpdateResult(
            state=state,
            success=False,
            error="Cannot move: speed is 0 due to a condition",
        )

    remaining = state.action_economy.movement_remaining
    if feet > remaining:
        return StateUpdateResult(
            state=state,
            success=False,
            error=f"Cannot move {feet} ft: only {remaining} ft remaining",
        )

    new_state = clone_character_state(state)
    new_state.action_economy.movement_remaining = remaining - feet
    return StateUpdateResult(
        state=new_state,
        success=True,
        changes=[f"Moved {feet} ft ({remaining} → {remaining - feet} ft remaining)"],
    )


# ==============================================================================
# CONCENTRATION
# ==============================================================================


def start_concentration(
    state: CharacterState,
    effect: str,
    source: str | None = None,
    spell_level: int | None = None,
) -> StateUpdateResult:
    """
    Starts concentrating on an effect, dropping any previous one.

    Args:
        state (CharacterState): The current state.
        effect (str): The effect being concentrated on.
        source (str | None): Spell or feature granting the effect.
        spell_level (int | None): Level the spell was cast at.

    Returns:
        StateUpdateResult: The new state.

    """
    changes: list[str] = []
    previous = state.concentration.active_effect
    if previous is not None:
        changes.append(f"Concentration on {previous} ended")

    new_state = clone_character_state(state)
    new_state.concentration = ConcentrationState(
        active_effect=effect,
        source=source,
        spell_level=spell_level,
    )
    changes.append(f"Concentrating on {effect}")
    return StateUpdateResult(state=new_state, success=True, changes=changes)


def end_concentration(state: CharacterState) -> StateUpdateResult:
    """Ends the current concentration, if any."""
    previous = state.concentration.active_effect
    if previous is None:
        return StateUpdateResult(state=state, success=True, changes=["Not concentrating"])

    new_state = clone_character_state(state)
    new_state.concentration = ConcentrationState()
    return StateUpdateResult(
        state=new_state,
        success=True,
        changes=[f"Concentration on {previous} ended"],
    )


def concentration_save_dc(damage: int) -> int:
    """DC of the Constitution save made to keep concentrating after damage."""
    return max(10, damage // 2)
