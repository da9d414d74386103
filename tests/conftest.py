"""Pytest configuration and shared fixtures."""

import pytest

from neatmesh.genotype  import Topology
from neatmesh.run.config import Config


@pytest.fixture
def small_config():
    """Configuration for a small 2-input, 1-output problem."""
    return Config(population_size=20, num_inputs=2, num_outputs=1)


@pytest.fixture
def topology(small_config):
    """A seeded Topology (inputs 1-2, bias 3, output 4)."""
    return Topology(small_config, seed=42)


@pytest.fixture
def seed_genome(topology):
    """A genome with the seed layout."""
    return topology.seed_genome()
