"""
Shared fixtures for the rules engine tests.
"""

import pytest

from rules_engine.character.character_state import (
    CharacterState,
    DerivedResource,
    DerivedSpellcasting,
    DerivedSpellSlot,
    DerivedStats,
    initialize_character_state,
)
from rules_engine.core.constants import RestorationType
from rules_engine.effects.condition_mechanics import ActiveCondition


class SequenceRNG:
    """Deterministic random source returning a fixed sequence of values."""

    def __init__(self, values: list[float]) -> None:
        self.values = list(values)
        self.calls = 0

    def __call__(self) -> float:
        assert self.calls < len(self.values), "random source exhausted"
        value = self.values[self.calls]
        self.calls += 1
        return value


def face(value: int, sides: int) -> float:
    """Returns the [0, 1) value that makes a die of ``sides`` show ``value``."""
    return (value - 0.5) / sides


@pytest.fixture
def make_rng():
    """
    Factory building a SequenceRNG from (face, sides) pairs.

    A bare integer is taken as a d20 face.
    """

    def _make(*faces: int | tuple[int, int]) -> SequenceRNG:
        values = []
        for item in faces:
            if isinstance(item, tuple):
                values.append(face(*item))
            else:
                values.append(face(item, 20))
        return SequenceRNG(values)

    return _make


@pytest.fixture
def attacker_derived() -> DerivedStats:
    return DerivedStats(hit_points=25, proficiency_bonus=2, speed={"walk": 30})


@pytest.fixture
def defender_derived() -> DerivedStats:
    return DerivedStats(hit_points=20, proficiency_bonus=2, speed={"walk": 30})


@pytest.fixture
def caster_derived() -> DerivedStats:
    return DerivedStats(
        hit_points=18,
        proficiency_bonus=3,
        speed={"walk": 25},
        resources={
            "arcane-recovery": DerivedResource(
                id="arcane-recovery", max=1, type=RestorationType.PER_LONG_REST
            ),
            "channel-divinity": DerivedResource(
                id="channel-divinity", max=2, type=RestorationType.PER_SHORT_REST
            ),
        },
        spellcasting=DerivedSpellcasting(
            slots={
                1: DerivedSpellSlot(max=4),
                2: DerivedSpellSlot(max=3),
                3: DerivedSpellSlot(max=2),
            }
        ),
    )


@pytest.fixture
def attacker(attacker_derived) -> CharacterState:
    return initialize_character_state("attacker", attacker_derived)


@pytest.fixture
def defender(defender_derived) -> CharacterState:
    return initialize_character_state("defender", defender_derived)


@pytest.fixture
def caster(caster_derived) -> CharacterState:
    return initialize_character_state("caster", caster_derived)


@pytest.fixture
def with_conditions():
    """Factory returning a copy of a state with the given conditions."""

    def _with(state: CharacterState, *conditions: str) -> CharacterState:
        return state.model_copy(
            update={"conditions": [ActiveCondition(condition=c) for c in conditions]}
        )

    return _with
