"""
NEAT Run Package

This package implements configuration and trial execution for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm.

A trial represents a complete evolutionary run, managing the population through
generations until a solution is found or maximum generations are reached.

Modules:
    config: Configuration management for NEAT parameters
    trial:  Abstract base class for NEAT trials

Exported Classes:
    Config: Configuration parameters for NEAT algorithm
    Trial:  Abstract base class for NEAT trials with joblib parallelization
"""

from neatmesh.run.config import Config
from neatmesh.run.trial  import Trial

__all__ = ['Config', 'Trial']
