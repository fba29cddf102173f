"""
Character module for the rules engine.

Provides the mutable character state, its initialization from derived
stats, and the copy-on-write operations over it.
"""

from .character_state import (
    ActionEconomy,
    CharacterState,
    ConcentrationState,
    DerivedResource,
    DerivedSpellcasting,
    DerivedSpellSlot,
    DerivedStats,
    SpellSlot,
    StateUpdateResult,
    TrackedResource,
    clone_character_state,
    initialize_character_state,
    reset_to_full_resources,
)
from .resource_operations import (
    can_use_resource,
    consume_resource,
    consume_spell_slot,
    gain_temp_hp,
    get_resource_uses,
    heal,
    restore_resource,
    restore_resources_on_rest,
    restore_spell_slots,
    take_damage,
)
from .turn_operations import (
    concentration_save_dc,
    end_concentration,
    reset_action_economy,
    spend_action,
    spend_movement,
    start_concentration,
)

__all__ = [
    # Import from character_state.py
    "ActionEconomy",
    "CharacterState",
    "ConcentrationState",
    "DerivedResource",
    "DerivedSpellcasting",
    "DerivedSpellSlot",
    "DerivedStats",
    "SpellSlot",
    "StateUpdateResult",
    "TrackedResource",
    "clone_character_state",
    "initialize_character_state",
    "reset_to_full_resources",
    # Import from resource_operations.py
    "can_use_resource",
    "consume_resource",
    "consume_spell_slot",
    "gain_temp_hp",
    "get_resource_uses",
    "heal",
    "restore_resource",
    "restore_resources_on_rest",
    "restore_spell_slots",
    "take_damage",
    # Import from turn_operations.py
    "concentration_save_dc",
    "end_concentration",
    "reset_action_economy",
    "spend_action",
    "spend_movement",
    "start_concentration",
]
