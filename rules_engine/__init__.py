"""
D&D 5e rules engine.

Resolves d20 rolls under advantage and disadvantage, applies status
conditions to them, tracks the mutable state of each combatant, and
resolves attacks and saving throws with deterministic, injectable dice.
"""

__version__ = "0.1.0"
