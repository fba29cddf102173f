"""
Module for printing character states and resolution results in a formatted way.
"""

from rich.padding import Padding

from rules_engine.character.character_state import CharacterState
from rules_engine.combat.combat_resolver import AttackResult, SavingThrowResult
from rules_engine.core import constants
from rules_engine.core.constants import ActionType
from rules_engine.core.roll_mechanics import RollResult
from rules_engine.core.utils import cprint, crule, make_bar


def print_character_state(state: CharacterState, padding: int = 2) -> None:
    """
    Prints the current state of a character.

    Args:
        state (CharacterState): The state to display.
        padding (int): Left padding for the output. Defaults to 2.

    """
    crule(f"[bold]{state.character_id}[/]", style="bold blue", characters="-")

    hp = f"HP {make_bar(state.current_hp, state.max_hp, color='green')} "
    hp += f"{state.current_hp}/{state.max_hp}"
    if state.temp_hp:
        hp += f" [cyan](+{state.temp_hp} temp)[/]"
    cprint(Padding(hp, (0, padding)))

    for resource_id, resource in state.resources.items():
        cprint(
            Padding(
                f"{resource_id}: {make_bar(resource.current, resource.max, color='yellow')} "
                f"{resource.current}/{resource.max} [dim]({resource.restoration_type.value})[/]",
                (0, padding),
            )
        )

    if state.spell_slots:
        slots = ", ".join(
            f"L{level} {slot.current}/{slot.max}"
            for level, slot in sorted(state.spell_slots.items())
        )
        cprint(Padding(f"Spell slots: [blue]{slots}[/]", (0, padding)))

    if state.conditions:
        names = ", ".join(f"[magenta]{c.condition}[/]" for c in state.conditions)
        cprint(Padding(f"Conditions: {names}", (0, padding)))

    if state.concentration.is_concentrating:
        cprint(
            Padding(
                f"Concentrating on [bold yellow]{state.concentration.active_effect}[/]",
                (0, padding),
            )
        )

    economy = state.action_economy
    available = [
        action_type.colored_name
        for action_type, flag in [
            (ActionType.ACTION, economy.has_action),
            (ActionType.BONUS_ACTION, economy.has_bonus_action),
            (ActionType.REACTION, economy.has_reaction),
        ]
        if flag
    ]
    cprint(
        Padding(
            f"Available: {', '.join(available) or '[dim]nothing[/]'}, "
            f"{economy.movement_remaining} ft",
            (0, padding),
        )
    )


def print_roll_result(roll: RollResult, padding: int = 4) -> None:
    """
    Prints a d20 roll with the sources that shaped it.

    Args:
        roll (RollResult): The roll to display.
        padding (int): Left padding for the output. Defaults to 4.

    """
    dice = " / ".join(str(value) for value in roll.rolls)
    line = f"d20 [{dice}] → {roll.final_roll} {roll.bonus_total:+d} = [bold]{roll.total}[/] "
    line += roll.roll_state.colored_name
    if roll.is_natural_twenty:
        line += " [bold green]natural 20[/]"
    elif roll.is_natural_one:
        line += " [bold red]natural 1[/]"
    cprint(Padding(line, (0, padding)))
    for source in roll.advantage_sources:
        cprint(Padding(f"[green]+[/] {source.source}", (0, padding + 2)))
    for source in roll.disadvantage_sources:
        cprint(Padding(f"[red]-[/] {source.source}", (0, padding + 2)))


def _print_log(log: list[str], padding: int) -> None:
    for line in log:
        cprint(Padding(line, (0, padding)))


def print_attack_result(result: AttackResult, padding: int = 4) -> None:
    """
    Prints the outcome of an attack.

    Args:
        result (AttackResult): The attack outcome.
        padding (int): Left padding for the output. Defaults to 4.

    """
    if constants.GLOBAL_VERBOSE_LEVEL >= 1:
        print_roll_result(result.attack_roll, padding)
    if result.is_critical:
        cprint(Padding(":boom: [bold red]Critical hit![/]", (0, padding)))
    elif result.is_hit:
        cprint(Padding(":dagger: [bold yellow]Hit[/]", (0, padding)))
    else:
        cprint(Padding(":shield: [dim]Miss[/]", (0, padding)))
    if result.damage_roll is not None:
        cprint(Padding(f"Damage: {result.damage_roll}", (0, padding)))
    if constants.GLOBAL_VERBOSE_LEVEL >= 2:
        _print_log(result.log, padding + 2)


def print_saving_throw_result(result: SavingThrowResult, padding: int = 4) -> None:
    """
    Prints the outcome of a saving throw.

    Args:
        result (SavingThrowResult): The saving throw outcome.
        padding (int): Left padding for the output. Defaults to 4.

    """
    if result.auto_fail:
        cprint(Padding("[bold red]Automatic failure[/]", (0, padding)))
    else:
        if constants.GLOBAL_VERBOSE_LEVEL >= 1:
            print_roll_result(result.save_roll, padding)
        outcome = "[bold green]Success[/]" if result.success else "[bold red]Failure[/]"
        cprint(Padding(f"{outcome} (DC {result.save_dc})", (0, padding)))
    if result.damage_roll is not None:
        cprint(Padding(f"Damage: {result.damage_roll}", (0, padding)))
    if constants.GLOBAL_VERBOSE_LEVEL >= 2:
        _print_log(result.log, padding + 2)
