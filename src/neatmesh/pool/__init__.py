"""
NEAT Pool Package

This package contains classes for managing populations and species in the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Modules:
    species:    Species representation, fitness sharing and reproduction
    population: Top-level population management and evolution

Exported Classes:
    Species: A cluster of genetically similar genomes
    NeatGA:  Top-level evolutionary coordinator
"""

from neatmesh.pool.species    import Species
from neatmesh.pool.population import NeatGA

__all__ = [
    'Species',
    'NeatGA',
]
