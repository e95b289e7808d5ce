"""Cave terrain generation: random seeding plus automaton smoothing."""

from .cave_rules import CaveRuleParams, next_state, count_solid_neighbors
from .generator import CaveGenerator, GeneratorState

__all__ = [
    'CaveRuleParams',
    'next_state',
    'count_solid_neighbors',
    'CaveGenerator',
    'GeneratorState',
]
