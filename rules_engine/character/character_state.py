"""
Character state module for the rules engine.

Defines the mutable gameplay record of a combatant (hit points, resources,
spell slots, conditions, concentration, action economy, death saves) and its
initialization from the derived stats produced by character creation.

Every operation of the engine is copy-on-write: the state passed in is never
modified, a new state is returned instead.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rules_engine.core.constants import (
    DEFAULT_WALK_SPEED,
    MAX_DEATH_SAVES,
    MAX_EXHAUSTION_LEVEL,
    RestorationType,
)
from rules_engine.core.error_handling import ensure_non_negative_int, require_non_empty_string
from rules_engine.core.logging import log_debug
from rules_engine.effects.condition_mechanics import ActiveCondition


# ==============================================================================
# DERIVED STATS (input boundary)
# ==============================================================================


class DerivedResource(BaseModel):
    """A limited-use resource as computed by character derivation."""

    id: str = Field(default="", description="Resource identifier")
    max: int = Field(description="Maximum uses")
    type: RestorationType = Field(
        default=RestorationType.PER_LONG_REST,
        description="When the resource is restored",
    )


class DerivedSpellSlot(BaseModel):
    """Spell slots of a single level as computed by character derivation."""

    max: int = Field(description="Maximum slots of this level")


class DerivedSpellcasting(BaseModel):
    """The spellcasting part of the derived stats."""

    slots: dict[int, DerivedSpellSlot] = Field(
        default_factory=dict,
        description="Spell slots by level",
    )


class DerivedStats(BaseModel):
    """Snapshot of the derived stats consumed by the engine."""

    hit_points: int = Field(description="Maximum hit points")
    proficiency_bonus: int = Field(default=2, description="Proficiency bonus")
    speed: dict[str, int] = Field(
        default_factory=dict,
        description="Movement type -> speed in feet",
    )
    resources: dict[str, DerivedResource] = Field(
        default_factory=dict,
        description="Resources by id",
    )
    spellcasting: DerivedSpellcasting | None = Field(
        default=None,
        description="Spellcasting data, None for non-spellcasters",
    )


# ==============================================================================
# CHARACTER STATE
# ==============================================================================


class TrackedResource(BaseModel):
    """Resource with current and maximum values."""

    current: int = Field(description="Current value (0 to max)")
    max: int = Field(description="Maximum value")
    restoration_type: RestorationType = Field(description="When it is restored")

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if self.max < 0:
            raise ValueError("max must be non-negative")
        if not 0 <= self.current <= self.max:
            raise ValueError("current must be between 0 and max")


class SpellSlot(BaseModel):
    """Spell slots of a single level."""

    current: int = Field(description="Slots left")
    max: int = Field(description="Maximum slots")

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not 0 <= self.current <= self.max:
            raise ValueError("current must be between 0 and max")


class ConcentrationState(BaseModel):
    """The single effect a character is concentrating on, if any."""

    active_effect: str | None = Field(default=None)
    source: str | None = Field(default=None)
    spell_level: int | None = Field(default=None)

    @property
    def is_concentrating(self) -> bool:
        return self.active_effect is not None


class ActionEconomy(BaseModel):
    """Per-turn availability of actions and movement."""

    has_action: bool = Field(default=True)
    has_bonus_action: bool = Field(default=True)
    has_reaction: bool = Field(default=True)
    movement_remaining: int = Field(default=DEFAULT_WALK_SPEED)


class CharacterState(BaseModel):
    """Mutable gameplay state of a single combatant."""

    character_id: str = Field(description="Character identifier")

    # Hit points.
    current_hp: int = Field(description="Current hit points")
    max_hp: int = Field(description="Maximum hit points")
    temp_hp: int = Field(default=0, description="Temporary hit points")

    # Resources.
    resources: dict[str, TrackedResource] = Field(default_factory=dict)
    spell_slots: dict[int, SpellSlot] | None = Field(
        default=None,
        description="Spell slots by level, None if not a spellcaster",
    )

    conditions: list[ActiveCondition] = Field(default_factory=list)
    concentration: ConcentrationState = Field(default_factory=ConcentrationState)
    action_economy: ActionEconomy = Field(default_factory=ActionEconomy)

    death_save_successes: int = Field(default=0)
    death_save_failures: int = Field(default=0)

    initiative: int | None = Field(default=None)
    exhaustion_level: int = Field(default=0)
    has_inspiration: bool = Field(default=False)

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not 0 <= self.death_save_successes <= MAX_DEATH_SAVES:
            raise ValueError(f"death_save_successes must be between 0 and {MAX_DEATH_SAVES}")
        if not 0 <= self.death_save_failures <= MAX_DEATH_SAVES:
            raise ValueError(f"death_save_failures must be between 0 and {MAX_DEATH_SAVES}")
        if not 0 <= self.exhaustion_level <= MAX_EXHAUSTION_LEVEL:
            raise ValueError(f"exhaustion_level must be between 0 and {MAX_EXHAUSTION_LEVEL}")

    @property
    def is_spellcaster(self) -> bool:
        return self.spell_slots is not None

    @property
    def is_conscious(self) -> bool:
        return self.current_hp > 0


class StateUpdateResult(BaseModel):
    """Result of a state transition."""

    model_config = ConfigDict(frozen=True)

    state: CharacterState = Field(description="The resulting state")
    success: bool = Field(description="Whether the operation succeeded")
    error: str | None = Field(default=None, description="Error message on failure")
    changes: list[str] = Field(
        default_factory=list,
        description="Human-readable description of what changed",
    )


# ==============================================================================
# INITIALIZATION
# ==============================================================================


def initialize_character_state(character_id: str, derived: DerivedStats) -> CharacterState:
    """
    Creates the initial state of a character from its derived stats.

    Hit points, resources and spell slots start at their maximum, there are
    no conditions, and the action economy is full.

    Args:
        character_id (str): Unique character identifier.
        derived (DerivedStats): Derived stats of the character.

    Returns:
        CharacterState: The initial state.

    """
    require_non_empty_string(character_id, "character_id")
    context = {"character_id": character_id}
    max_hp = ensure_non_negative_int(derived.hit_points, "hit_points", context=context)

    resources: dict[str, TrackedResource] = {}
    for resource_id, resource in derived.resources.items():
        maximum = ensure_non_negative_int(resource.max, f"resources[{resource_id}].max", context=context)
        resources[resource_id] = TrackedResource(
            current=maximum,
            max=maximum,
            restoration_type=resource.type,
        )

    spell_slots: dict[int, SpellSlot] | None = None
    if derived.spellcasting is not None:
        spell_slots = {}
        for level, slot in derived.spellcasting.slots.items():
            maximum = ensure_non_negative_int(slot.max, f"spell_slots[{level}].max", context=context)
            spell_slots[int(level)] = SpellSlot(current=maximum, max=maximum)

    walk_speed = derived.speed.get("walk", DEFAULT_WALK_SPEED)

    log_debug(
        f"Initialized state for {character_id}",
        {"hp": max_hp, "resources": len(resources), "spellcaster": spell_slots is not None},
    )

    return CharacterState(
        character_id=character_id,
        current_hp=max_hp,
        max_hp=max_hp,
        temp_hp=0,
        resources=resources,
        spell_slots=spell_slots,
        conditions=[],
        concentration=ConcentrationState(),
        action_economy=ActionEconomy(movement_remaining=walk_speed),
        death_save_successes=0,
        death_save_failures=0,
        initiative=None,
        exhaustion_level=0,
        has_inspiration=False,
    )


def clone_character_state(state: CharacterState) -> CharacterState:
    """
    Creates a copy of a character state.

    Resources, spell slot levels, conditions, concentration and action
    economy are all new containers, so changing the clone never affects the
    original.

    Args:
        state (CharacterState): The state to clone.

    Returns:
        CharacterState: The copy.

    """
    return state.model_copy(deep=True)


def reset_to_full_resources(state: CharacterState) -> CharacterState:
    """
    Restores every resource and spell slot, hit points and death saves.

    Args:
        state (CharacterState): The current state.

    Returns:
        CharacterState: A new state with everything at maximum.

    """
    new_state = clone_character_state(state)
    for resource in new_state.resources.values():
        resource.current = resource.max
    if new_state.spell_slots is not None:
        for slot in new_state.spell_slots.values():
            slot.current = slot.max
    new_state.current_hp = new_state.max_hp
    new_state.temp_hp = 0
    new_state.death_save_successes = 0
    new_state.death_save_failures = 0
    return new_state
