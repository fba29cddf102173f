"""
Condition mechanics module for the rules engine.

Holds the table describing the mechanical consequences of each status
condition and the functions translating the conditions active on a creature
into roll modifications, auto-fail and auto-crit queries, and
incapacitation checks.

Conditions are plain data: each entry of ``CONDITION_MECHANICS`` is a flat
record of optional effect fields. Condition ids missing from the table are
skipped everywhere, so newer data never breaks older code paths.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from rules_engine.core.constants import Ability, ConditionEffect, RollType
from rules_engine.core.error_handling import UnknownConditionError
from rules_engine.core.roll_mechanics import RollContext, add_advantage, add_disadvantage


class ConditionMechanics(BaseModel):
    """Mechanical effects of a single condition."""

    model_config = ConfigDict(frozen=True)

    condition: str = Field(description="Condition identifier")
    description: str = Field(description="Rules text of the condition")
    attack_rolls: ConditionEffect | None = Field(
        default=None,
        description="Effect on attack rolls made by the conditioned creature",
    )
    incoming_attacks: ConditionEffect | None = Field(
        default=None,
        description="Effect on attack rolls against the conditioned creature",
    )
    incoming_melee_attacks: ConditionEffect | None = Field(
        default=None,
        description="Effect on melee attacks made within 5 feet of the creature",
    )
    ability_checks: ConditionEffect | None = Field(
        default=None,
        description="Effect on ability checks",
    )
    saving_throws: ConditionEffect | None = Field(
        default=None,
        description="Effect on every saving throw",
    )
    auto_fail_saves: frozenset[Ability] = Field(
        default_factory=frozenset,
        description="Abilities whose saving throws automatically fail",
    )
    speed_zero: bool = Field(default=False)
    incapacitated: bool = Field(default=False)
    cannot_move_or_speak: bool = Field(default=False)
    drops_items: bool = Field(default=False)
    falls_prone: bool = Field(default=False)

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.condition:
            raise ValueError("condition must be a non-empty string")
        if self.incoming_attacks not in (
            None,
            ConditionEffect.ADVANTAGE,
            ConditionEffect.DISADVANTAGE,
        ):
            raise ValueError("incoming_attacks must be advantage or disadvantage")
        if self.incoming_melee_attacks not in (
            None,
            ConditionEffect.ADVANTAGE,
            ConditionEffect.CRIT_ON_HIT,
        ):
            raise ValueError("incoming_melee_attacks must be advantage or crit-on-hit")


class ActiveCondition(BaseModel):
    """A condition applied to a character."""

    condition: str = Field(description="Condition id (prone, invisible, ...)")
    source: str | None = Field(
        default=None,
        description="Source of the condition, for tracking",
    )
    duration: int | Literal["instant"] | None = Field(
        default=None,
        description="Duration in rounds, 'instant', or None for indefinite",
    )
    save_dc: int | None = Field(default=None, description="DC to end the condition")
    save_ability: Ability | None = Field(
        default=None,
        description="Ability used for the save that ends the condition",
    )


_INCAPACITATING_SAVES = frozenset({Ability.STR, Ability.DEX})

CONDITION_MECHANICS: dict[str, ConditionMechanics] = {
    mechanics.condition: mechanics
    for mechanics in [
        ConditionMechanics(
            condition="prone",
            description=(
                "A prone creature's only movement option is to crawl. The creature "
                "has disadvantage on attack rolls. An attack roll against the "
                "creature has advantage if the attacker is within 5 feet of the "
                "creature. Otherwise, the attack roll has disadvantage."
            ),
            attack_rolls=ConditionEffect.DISADVANTAGE,
            # Simplified: range is not tracked, every incoming attack gets it.
            incoming_melee_attacks=ConditionEffect.ADVANTAGE,
        ),
        ConditionMechanics(
            condition="invisible",
            description=(
                "An invisible creature is impossible to see without special senses. "
                "The creature has advantage on attack rolls, and attack rolls "
                "against the creature have disadvantage."
            ),
            attack_rolls=ConditionEffect.ADVANTAGE,
            incoming_attacks=ConditionEffect.DISADVANTAGE,
        ),
        ConditionMechanics(
            condition="poisoned",
            description=(
                "A poisoned creature has disadvantage on attack rolls and ability "
                "checks."
            ),
            attack_rolls=ConditionEffect.DISADVANTAGE,
            ability_checks=ConditionEffect.DISADVANTAGE,
        ),
        ConditionMechanics(
            condition="frightened",
            description=(
                "A frightened creature has disadvantage on ability checks and attack "
                "rolls while the source of its fear is within line of sight."
            ),
            attack_rolls=ConditionEffect.DISADVANTAGE,
            ability_checks=ConditionEffect.DISADVANTAGE,
        ),
        ConditionMechanics(
            condition="restrained",
            description=(
                "A restrained creature's speed becomes 0. The creature has "
                "disadvantage on attack rolls and Dexterity saving throws. Attack "
                "rolls against the creature have advantage."
            ),
            speed_zero=True,
            attack_rolls=ConditionEffect.DISADVANTAGE,
            # Dexterity only by the book, applied to every save here.
            saving_throws=ConditionEffect.DISADVANTAGE,
            incoming_attacks=ConditionEffect.ADVANTAGE,
        ),
        ConditionMechanics(
            condition="stunned",
            description=(
                "A stunned creature is incapacitated, can't move, and can speak only "
                "falteringly. The creature automatically fails Strength and "
                "Dexterity saving throws. Attack rolls against the creature have "
                "advantage."
            ),
            incapacitated=True,
            cannot_move_or_speak=True,
            speed_zero=True,
            auto_fail_saves=_INCAPACITATING_SAVES,
            incoming_attacks=ConditionEffect.ADVANTAGE,
        ),
        ConditionMechanics(
            condition="paralyzed",
            description=(
                "A paralyzed creature is incapacitated and can't move or speak. The "
                "creature automatically fails Strength and Dexterity saving throws. "
                "Attack rolls against the creature have advantage. Any attack that "
                "hits the creature is a critical hit if the attacker is within 5 "
                "feet of the creature."
            ),
            incapacitated=True,
            cannot_move_or_speak=True,
            speed_zero=True,
            auto_fail_saves=_INCAPACITATING_SAVES,
            incoming_attacks=ConditionEffect.ADVANTAGE,
            incoming_melee_attacks=ConditionEffect.CRIT_ON_HIT,
        ),
        ConditionMechanics(
            condition="unconscious",
            description=(
                "An unconscious creature is incapacitated, can't move or speak, and "
                "is unaware of its surroundings. The creature drops whatever it's "
                "holding and falls prone. The creature automatically fails Strength "
                "and Dexterity saving throws. Attack rolls against the creature have "
                "advantage. Any attack that hits the creature is a critical hit if "
                "the attacker is within 5 feet of the creature."
            ),
            incapacitated=True,
            cannot_move_or_speak=True,
            speed_zero=True,
            auto_fail_saves=_INCAPACITATING_SAVES,
            incoming_attacks=ConditionEffect.ADVANTAGE,
            incoming_melee_attacks=ConditionEffect.CRIT_ON_HIT,
            drops_items=True,
            falls_prone=True,
        ),
        ConditionMechanics(
            condition="charmed",
            description=(
                "A charmed creature can't attack the charmer or target the charmer "
                "with harmful abilities or magical effects. The charmer has "
                "advantage on any ability check to interact socially with the "
                "creature."
            ),
            # Depends on who the charmer is, so no general roll effect.
        ),
        ConditionMechanics(
            condition="blinded",
            description=(
                "A blinded creature can't see and automatically fails any ability "
                "check that requires sight. Attack rolls against the creature have "
                "advantage, and the creature's attack rolls have disadvantage."
            ),
            attack_rolls=ConditionEffect.DISADVANTAGE,
            incoming_attacks=ConditionEffect.ADVANTAGE,
            ability_checks=ConditionEffect.DISADVANTAGE,
        ),
        ConditionMechanics(
            condition="deafened",
            description=(
                "A deafened creature can't hear and automatically fails any ability "
                "check that requires hearing."
            ),
            ability_checks=ConditionEffect.DISADVANTAGE,
        ),
        ConditionMechanics(
            condition="grappled",
            description=(
                "A grappled creature's speed becomes 0, and it can't benefit from "
                "any bonus to its speed."
            ),
            speed_zero=True,
        ),
        ConditionMechanics(
            condition="petrified",
            description=(
                "A petrified creature is transformed, along with any nonmagical "
                "object it is wearing or carrying, into a solid inanimate substance. "
                "The creature is incapacitated, can't move or speak, and is unaware "
                "of its surroundings. Attack rolls against the creature have "
                "advantage. The creature automatically fails Strength and Dexterity "
                "saving throws. The creature has resistance to all damage. The "
                "creature is immune to poison and disease."
            ),
            incapacitated=True,
            cannot_move_or_speak=True,
            speed_zero=True,
            auto_fail_saves=_INCAPACITATING_SAVES,
            incoming_attacks=ConditionEffect.ADVANTAGE,
        ),
    ]
}


def get_condition_mechanics(condition_id: str) -> ConditionMechanics:
    """
    Returns the mechanics of a condition.

    Args:
        condition_id (str): The condition id.

    Returns:
        ConditionMechanics: The condition entry.

    Raises:
        UnknownConditionError: If the condition is not in the table.

    """
    mechanics = CONDITION_MECHANICS.get(condition_id)
    if mechanics is None:
        raise UnknownConditionError(condition_id)
    return mechanics


def _known_mechanics(conditions: list[ActiveCondition]) -> list[ConditionMechanics]:
    """Mechanics of the active conditions, skipping the unknown ones."""
    return [
        CONDITION_MECHANICS[active.condition]
        for active in conditions
        if active.condition in CONDITION_MECHANICS
    ]


def _apply_actor_effect(
    context: RollContext,
    effect: ConditionEffect | None,
    mechanics: ConditionMechanics,
) -> RollContext:
    if effect == ConditionEffect.ADVANTAGE:
        return add_advantage(context, mechanics.condition, mechanics.description)
    if effect == ConditionEffect.DISADVANTAGE:
        return add_disadvantage(context, mechanics.condition, mechanics.description)
    return context


def apply_conditions_to_roll(
    context: RollContext,
    conditions: list[ActiveCondition],
    is_defender: bool = False,
) -> RollContext:
    """
    Applies the effects of active conditions to a roll context.

    When ``is_defender`` is false the conditions belong to the creature making
    the roll and the effect matching the roll type is applied, tagged with the
    condition id. When true, the conditions belong to the target of an attack:
    only attack rolls are affected and the sources are tagged
    ``target-<condition>`` (or ``target-<condition>-melee`` for the melee
    advantage granted by conditions such as prone).

    Args:
        context (RollContext): The roll context to modify.
        conditions (list[ActiveCondition]): The active conditions.
        is_defender (bool): Whether the conditions belong to the attack target.

    Returns:
        RollContext: A new context with the extra sources.

    """
    modified = context
    for mechanics in _known_mechanics(conditions):
        if not is_defender:
            if context.roll_type == RollType.ATTACK:
                modified = _apply_actor_effect(modified, mechanics.attack_rolls, mechanics)
            elif context.roll_type == RollType.CHECK:
                modified = _apply_actor_effect(modified, mechanics.ability_checks, mechanics)
            elif context.roll_type == RollType.SAVE:
                modified = _apply_actor_effect(modified, mechanics.saving_throws, mechanics)
            continue

        if context.roll_type != RollType.ATTACK:
            continue
        source = f"target-{mechanics.condition}"
        reason = f"Target is {mechanics.condition}"
        if mechanics.incoming_attacks == ConditionEffect.ADVANTAGE:
            modified = add_advantage(modified, source, reason)
        elif mechanics.incoming_attacks == ConditionEffect.DISADVANTAGE:
            modified = add_disadvantage(modified, source, reason)
        # Attack range is not known here, melee advantage is always granted.
        if mechanics.incoming_melee_attacks == ConditionEffect.ADVANTAGE:
            modified = add_advantage(
                modified,
                f"{source}-melee",
                f"{reason} (melee advantage)",
            )
    return modified


def check_auto_fail_save(conditions: list[ActiveCondition], ability: Ability | str) -> bool:
    """
    Checks whether a saving throw automatically fails because of conditions.

    Args:
        conditions (list[ActiveCondition]): The active conditions.
        ability (Ability | str): The ability used for the save.

    Returns:
        bool: True if the save fails without rolling.

    """
    ability = Ability(ability)
    return any(
        mechanics.saving_throws == ConditionEffect.AUTO_FAIL
        or ability in mechanics.auto_fail_saves
        for mechanics in _known_mechanics(conditions)
    )


def is_incapacitated(conditions: list[ActiveCondition]) -> bool:
    """Checks whether any active condition incapacitates the creature."""
    return any(mechanics.incapacitated for mechanics in _known_mechanics(conditions))


def check_auto_crit(conditions: list[ActiveCondition], is_melee_within_5_feet: bool) -> bool:
    """
    Checks whether a hit against the creature is automatically critical.

    Args:
        conditions (list[ActiveCondition]): The conditions of the target.
        is_melee_within_5_feet (bool): Whether the attack is a melee attack
            made within 5 feet of the target.

    Returns:
        bool: True if any hit becomes a critical hit.

    """
    if not is_melee_within_5_feet:
        return False
    return any(
        mechanics.incoming_melee_attacks == ConditionEffect.CRIT_ON_HIT
        for mechanics in _known_mechanics(conditions)
    )


def has_speed_zero(conditions: list[ActiveCondition]) -> bool:
    """Checks whether any active condition reduces the speed to 0."""
    return any(mechanics.speed_zero for mechanics in _known_mechanics(conditions))


def is_unable_to_move_or_speak(conditions: list[ActiveCondition]) -> bool:
    """Checks whether any active condition prevents moving and speaking."""
    return any(mechanics.cannot_move_or_speak for mechanics in _known_mechanics(conditions))
