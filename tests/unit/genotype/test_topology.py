"""
Unit tests for the Topology class.
"""

import pytest

from neatmesh.errors                       import MissingNodeError
from neatmesh.genotype.coordinate          import Coordinate
from neatmesh.genotype.innovation_registry import InnovationType
from neatmesh.genotype.node_gene           import NodeType
from neatmesh.genotype.topology            import Topology
from neatmesh.run.config                   import Config


# ============================================================================
# Seed Layout
# ============================================================================

class TestLayout:
    """Test the seed layout built by the Topology."""

    def test_node_ids_and_types(self, topology):
        """Test inputs first, then the bias, then the outputs."""
        assert [(node_id, node_type) for node_id, node_type, _ in topology.layout] == [
            (1, NodeType.INPUT), (2, NodeType.INPUT), (3, NodeType.BIAS), (4, NodeType.OUTPUT)]

    def test_positions(self):
        """Test the horizontal spreading of inputs and outputs."""
        topology  = Topology(Config(num_inputs=2, num_outputs=2))
        positions = {node_id: position for node_id, _, position in topology.layout}
        assert positions[1] == pytest.approx((0.5, 0.0))
        assert positions[2] == pytest.approx((0.75, 0.0))
        assert positions[3] == pytest.approx((0.25, 0.0))
        assert positions[4] == pytest.approx((1 / 3, 1.0))
        assert positions[5] == pytest.approx((2 / 3, 1.0))

    def test_registry_contents(self, topology):
        """Test that seed nodes and input-to-output links are recorded."""
        registry = topology.registry
        assert len(registry) == 7
        for node_id in (1, 2, 3, 4):
            assert registry.find_by_node_id(node_id) is not None
        for source_id in (1, 2, 3):
            assert registry.check(source_id, 4, InnovationType.NEW_LINK) is not None

    def test_node_counter_continues_after_layout(self, topology):
        """Test that the first allocated node ID follows the seed nodes."""
        assert topology.allocate_node_id() == 5


# ============================================================================
# Counters & Seed Genomes
# ============================================================================

class TestTopology:
    """Test ID allocation and genome creation."""

    def test_counters_are_independent(self, topology):
        """Test that genome and species IDs are numbered separately from 1."""
        assert topology.allocate_genome_id() == 1
        assert topology.allocate_genome_id() == 2
        assert topology.allocate_species_id() == 1

    def test_seed_genome(self, topology):
        """Test the structure of a seed genome."""
        genome = topology.seed_genome()
        assert genome.size() == 4
        assert sorted(link.endpoints for link in genome.links) == [(1, 4), (2, 4), (3, 4)]
        assert all(-1.0 <= link.weight <= 1.0 for link in genome.links)
        assert all(link.enabled and not link.recurrent for link in genome.links)
        output = genome.get_node(4)
        assert output.activation_name == topology.config.output_activation

    def test_seed_genomes_differ_in_weights(self, topology):
        """Test that every seed genome gets its own random weights."""
        first, second = topology.seed_genome(), topology.seed_genome()
        assert first.id != second.id
        assert [l.weight for l in first.links] != [l.weight for l in second.links]

    def test_same_seed_same_run(self, small_config):
        """Test that seeding the Topology makes genomes reproducible."""
        first  = Topology(small_config, seed=3).seed_genome()
        second = Topology(small_config, seed=3).seed_genome()
        assert [l.weight for l in first.links] == [l.weight for l in second.links]

    def test_default_config(self):
        """Test that a Topology without config uses the defaults."""
        topology = Topology()
        assert topology.num_inputs == Config().num_inputs


class TestCreateNodeFromId:
    """Test rebuilding node genes from the registry."""

    def test_hidden_node(self, topology):
        """Test that split nodes come back as hidden nodes with the default activation."""
        record = topology.registry.create(1, 4, InnovationType.NEW_NODE, NodeType.HIDDEN, Coordinate(0.5, 0.5))
        node   = topology.create_node_from_id(record.node_id)
        assert node.type == NodeType.HIDDEN
        assert node.position == Coordinate(0.5, 0.5)
        assert node.activation_name == topology.config.activation_function

    def test_unknown_node(self, topology):
        """Test that unknown node IDs raise MissingNodeError."""
        with pytest.raises(MissingNodeError):
            topology.create_node_from_id(99)


# ============================================================================
# Persistence
# ============================================================================

class TestPersistence:
    """Test to_dict/from_dict."""

    def test_round_trip_continues_sequences(self, topology):
        """Test that a restored Topology continues every ID sequence."""
        topology.seed_genome()
        topology.allocate_species_id()
        topology.registry.create(1, 4, InnovationType.NEW_NODE, NodeType.HIDDEN, Coordinate(0.5, 0.5))

        restored = Topology.from_dict(topology.to_dict())
        assert restored.config.to_dict() == topology.config.to_dict()
        assert restored.registry.records == topology.registry.records
        assert restored.allocate_genome_id() == topology.allocate_genome_id()
        assert restored.allocate_species_id() == topology.allocate_species_id()
        assert restored.allocate_node_id() == topology.allocate_node_id()
        assert restored.registry.allocate_id() == topology.registry.allocate_id()

    def test_restored_registry_allocates_node_ids(self, topology):
        """Test that NEW_NODE innovations of a restored Topology use its node counter."""
        restored = Topology.from_dict(topology.to_dict())
        record   = restored.registry.create(2, 4, InnovationType.NEW_NODE, NodeType.HIDDEN)
        assert record.node_id == 5
