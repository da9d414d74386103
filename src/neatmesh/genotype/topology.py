"""
NEAT Topology Module

Classes:
    Topology: Run-wide context shared by all genomes of a run
"""

import random

from neatmesh.errors                         import MissingNodeError
from neatmesh.genotype.coordinate            import Coordinate
from neatmesh.genotype.genome                import Genome
from neatmesh.genotype.innovation_registry   import InnovationRegistry, InnovationType
from neatmesh.genotype.link_gene             import LinkGene
from neatmesh.genotype.node_gene             import NodeGene, NodeType
from neatmesh.run.config                     import Config

class Topology:
    """
    The context of a NEAT run.

    A Topology owns everything the genomes of a run share:
    - the configuration
    - the counters handing out genome, species and node IDs
    - the innovation registry
    - the seed layout: input, bias and output nodes, with every input and
      the bias linked to every output
    - the random number generator; seeding it makes the run reproducible

    Seed layout (for 'n' inputs and 'm' outputs):
        input  i: ID i+1,  at ((i+2) / (n+2), 0)
        bias    : ID n+1,  at (1 / (n+2), 0)
        output j: ID n+2+j, at ((j+1) / (m+1), 1)

    Public Methods:
        allocate_genome_id():         Hand out the next genome ID
        allocate_species_id():        Hand out the next species ID
        allocate_node_id():           Hand out the next node ID
        seed_genome():                Create a genome with the seed layout and random weights
        create_node_from_id(node_id): Rebuild a node gene from the innovation registry
    """

    def __init__(self, config: Config | None = None, seed: int | None = None):
        """
        Parameters:
            config: Stores configuration parameters (defaults to 'Config()')
            seed:   Seed of the random number generator
        """
        self.config = config if config is not None else Config()
        self.rng    = random.Random(seed)

        self._genome_counter  = 0
        self._species_counter = 0
        self._node_counter    = 0

        self.registry = InnovationRegistry(self.allocate_node_id)
        self._layout: list[tuple[int, NodeType, Coordinate]] = []
        self._do_layout()

    @property
    def num_inputs(self) -> int:
        return self.config.num_inputs

    @property
    def num_outputs(self) -> int:
        return self.config.num_outputs

    @property
    def layout(self) -> list[tuple[int, NodeType, Coordinate]]:
        """The seed nodes, as (node ID, node type, position) triplets."""
        return list(self._layout)

    def _do_layout(self) -> None:
        inputs, outputs = self.num_inputs, self.num_outputs
        input_gap, output_gap = 1 / (inputs + 2), 1 / (outputs + 1)

        node_id = 0
        for i in range(inputs):
            node_id += 1
            self._layout.append((node_id, NodeType.INPUT, Coordinate((i + 2) * input_gap, 0.0)))

        node_id += 1
        self._layout.append((node_id, NodeType.BIAS, Coordinate(input_gap, 0.0)))

        for i in range(outputs):
            node_id += 1
            self._layout.append((node_id, NodeType.OUTPUT, Coordinate((i + 1) * output_gap, 1.0)))

        for node_id, node_type, position in self._layout:
            self.registry.record_node(node_id, node_type, position)
        self._node_counter = node_id

        # Every input (and the bias) is linked to every output
        for source_id, target_id in self._seed_links():
            self.registry.create(source_id, target_id, InnovationType.NEW_LINK)

    def _seed_links(self) -> list[tuple[int, int]]:
        sources = [node_id for node_id, node_type, _ in self._layout if node_type != NodeType.OUTPUT]
        targets = [node_id for node_id, node_type, _ in self._layout if node_type == NodeType.OUTPUT]
        return [(source_id, target_id) for source_id in sources for target_id in targets]

    def allocate_genome_id(self) -> int:
        self._genome_counter += 1
        return self._genome_counter

    def allocate_species_id(self) -> int:
        self._species_counter += 1
        return self._species_counter

    def allocate_node_id(self) -> int:
        self._node_counter += 1
        return self._node_counter

    def _activation_for(self, node_type: NodeType) -> str | None:
        if node_type == NodeType.OUTPUT:
            return self.config.output_activation
        if node_type == NodeType.HIDDEN:
            return self.config.activation_function
        return None

    def seed_genome(self) -> Genome:
        """Create a genome with the seed layout; link weights are uniform in [-1, 1]."""
        nodes = [NodeGene(node_id, node_type, position, activation_name=self._activation_for(node_type))
                 for node_id, node_type, position in self._layout]
        links = [LinkGene(source_id, target_id, self.rng.uniform(-1.0, 1.0))
                 for source_id, target_id in self._seed_links()]
        return Genome(self, nodes, links)

    def create_node_from_id(self, node_id: int) -> NodeGene:
        """
        Rebuild the node gene created by an innovation.

        Raises:
            MissingNodeError: If no innovation created 'node_id'
        """
        record = self.registry.find_by_node_id(node_id)
        if record is None:
            raise MissingNodeError(f"node {node_id} not found in the innovation registry", node_id)
        return NodeGene(node_id, record.node_type, record.position,
                        activation_name=self._activation_for(record.node_type))

    def to_dict(self) -> dict:
        return {
            "config"  : self.config.to_dict(),
            "counters": {
                "genome" : self._genome_counter,
                "species": self._species_counter,
                "node"   : self._node_counter
            },
            "registry": self.registry.to_dict()
        }

    @classmethod
    def from_dict(cls, data: dict, seed: int | None = None) -> 'Topology':
        """
        Restore a Topology, so that the IDs it hands out continue the interrupted sequence.

        The seed layout is rebuilt from the configuration; the innovation registry and
        the counters are replaced by the saved ones.

        Parameters:
            data: Dictionary produced by 'to_dict'
            seed: Seed of the new random number generator
        """
        topology = cls(Config(**data["config"]), seed)
        topology.registry         = InnovationRegistry.from_dict(data["registry"], topology.allocate_node_id)
        topology._genome_counter  = data["counters"]["genome"]
        topology._species_counter = data["counters"]["species"]
        topology._node_counter    = data["counters"]["node"]
        return topology
