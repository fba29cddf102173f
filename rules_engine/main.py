"""
Demo entry point for the rules engine.

Initializes a fighter and a wizard from their derived stats and plays a
short exchange: a sword attack against a restrained wizard, a fireball the
fighter has to save against, and the fighter catching its breath on a
short rest. Pass ``--seed`` to replay the same dice.
"""

import argparse
import logging
import random

from rules_engine.character.character_state import (
    DerivedResource,
    DerivedSpellcasting,
    DerivedSpellSlot,
    DerivedStats,
    StateUpdateResult,
    initialize_character_state,
)
from rules_engine.character.resource_operations import (
    consume_resource,
    consume_spell_slot,
    heal,
    restore_resources_on_rest,
)
from rules_engine.combat.combat_resolver import (
    AttackAction,
    SavingThrowAction,
    resolve_attack,
    resolve_saving_throw,
)
from rules_engine.core import constants
from rules_engine.core.constants import Ability, RestorationType
from rules_engine.core.dice_parser import roll_die
from rules_engine.core.logging import log_info, setup_logging
from rules_engine.core.sheets import (
    print_attack_result,
    print_character_state,
    print_saving_throw_result,
)
from rules_engine.core.utils import cprint, crule
from rules_engine.effects.condition_mechanics import ActiveCondition


def _report(result: StateUpdateResult) -> None:
    for line in result.changes if result.success else [result.error]:
        cprint(f"  {line}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Rules engine demo duel.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the dice.")
    parser.add_argument(
        "--verbose",
        type=int,
        choices=[0, 1, 2],
        default=constants.GLOBAL_VERBOSE_LEVEL,
        help="Output detail level.",
    )
    args = parser.parse_args(argv)

    constants.GLOBAL_VERBOSE_LEVEL = args.verbose
    setup_logging(logging.DEBUG if args.verbose >= 2 else logging.WARNING)
    rng = random.Random(args.seed).random
    log_info("Starting demo duel", {"seed": args.seed, "verbose": args.verbose})

    crule("Rules Engine Demo", style="bold green")

    fighter = initialize_character_state(
        "fighter",
        DerivedStats(
            hit_points=28,
            proficiency_bonus=2,
            speed={"walk": 30},
            resources={
                "second-wind": DerivedResource(
                    id="second-wind", max=1, type=RestorationType.PER_SHORT_REST
                ),
                "action-surge": DerivedResource(
                    id="action-surge", max=1, type=RestorationType.PER_SHORT_REST
                ),
            },
        ),
    )
    wizard = initialize_character_state(
        "wizard",
        DerivedStats(
            hit_points=18,
            proficiency_bonus=2,
            speed={"walk": 30},
            spellcasting=DerivedSpellcasting(
                slots={1: DerivedSpellSlot(max=4), 2: DerivedSpellSlot(max=3), 3: DerivedSpellSlot(max=2)}
            ),
        ),
    )
    wizard = wizard.model_copy(
        update={"conditions": [ActiveCondition(condition="restrained", source="net")]}
    )

    print_character_state(fighter)
    print_character_state(wizard)

    crule("Fighter attacks", style="bold yellow")
    attack = resolve_attack(
        AttackAction(
            attacker=fighter,
            defender=wizard,
            attack_bonus=5,
            damage_dice="1d8+3",
            damage_type="slashing",
            is_melee_within_5_feet=True,
        ),
        defender_ac=12,
        rng=rng,
    )
    print_attack_result(attack)
    if attack.defender_state is not None:
        wizard = attack.defender_state

    crule("Wizard casts Fireball", style="bold red")
    cast = consume_spell_slot(wizard, 3)
    _report(cast)
    wizard = cast.state
    save = resolve_saving_throw(
        SavingThrowAction(
            character=fighter,
            save_dc=13,
            ability=Ability.DEX,
            save_bonus=1,
            damage_on_fail="8d6",
            damage_on_success="4d6",
            damage_type="fire",
        ),
        rng=rng,
    )
    print_saving_throw_result(save)
    if save.character_state is not None:
        fighter = save.character_state

    crule("Fighter recovers", style="bold green")
    second_wind = consume_resource(fighter, "second-wind")
    _report(second_wind)
    if second_wind.success:
        healed = heal(second_wind.state, roll_die(10, rng) + 1)
        _report(healed)
        fighter = healed.state
    rest = restore_resources_on_rest(fighter, "short")
    _report(rest)
    fighter = rest.state

    print_character_state(fighter)
    print_character_state(wizard)


if __name__ == "__main__":
    main()
