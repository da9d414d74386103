"""
NEAT Genome Module

This module implements the Genome class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Genome: Complete genome representing a neural network structure
"""

import logging
import math
from typing import TYPE_CHECKING

from neatmesh.errors                         import AlignmentError, MissingNodeError
from neatmesh.genotype.innovation_registry   import InnovationType
from neatmesh.genotype.link_gene             import LinkGene
from neatmesh.genotype.node_gene             import NodeGene, NodeType
from neatmesh.phenotype.node_mesh            import NodeMesh, UpdateMode
if TYPE_CHECKING:
    from neatmesh.genotype.topology import Topology

logger = logging.getLogger(__name__)

class Genome:
    """
    A NEAT genome representing a neural network as a collection of node and link genes.

    In the NEAT (NeuroEvolution of Augmenting Topologies) algorithm, a genome encodes
    the structure and parameters of a neural network at the genotype level. It consists of:
    - Node genes: describe network nodes (input, bias, output, hidden) and their layout
    - Link genes: describe weighted links between nodes; the innovation registry of
      the run maps the endpoints of each link to its innovation number, which is used
      to align genes during crossover and when measuring compatibility

    Every genome belongs to a Topology, which hands out genome and node IDs, owns the
    innovation registry, the configuration, and the random number generator of the run.

    Invariants:
        - node genes are sorted by vertical position (stable); 'non_input_nodes'
          lists the node genes that are neither input nor bias
        - link genes are sorted by innovation number
        - every link endpoint is the ID of a node gene of this genome

    Public Attributes:
        id:              Unique (per run) identifier
        nodes:           List of node genes
        links:           List of link genes
        non_input_nodes: The output and hidden node genes
        raw_score:       Fitness assigned by the evaluation harness
        shared_score:    Fitness after speciation adjustments (fitness sharing)
        spawn_count:     Number of offspring this genome is worth in the next generation
        species_id:      ID of the species this genome was placed into

    Public Methods:
        add_link_mutation(...):  Add a link between two nodes (possibly a self loop)
        add_node_mutation(...):  Split a link by inserting a hidden node
        mutate_weights(...):     Perturb or replace link weights
        mutate_activation(...):  Perturb node activation responses
        morph():                 Apply all mutations, using the configuration parameters
        crossover_with(other):   Create an offspring with another genome
        compatibility(other):    Compatibility distance to another genome
        phenotype():             Build the executable network
        clone(genome_id):        Copy this genome
        to_dict():               Convert genome to dictionary representation

    Class Methods:
        from_dict(data, topology): Create a genome from a dictionary description
    """

    def __init__(self,
                 topology  : 'Topology',
                 nodes     : list[NodeGene],
                 links     : list[LinkGene],
                 genome_id : int | None = None):
        """
        Parameters:
            topology:  The Topology of the run
            nodes:     The node genes (used as given, not copied)
            links:     The link genes (used as given, not copied)
            genome_id: The genome ID; if None, a fresh ID is allocated

        Raises:
            MissingNodeError: If a link endpoint is not one of the node genes
        """
        self._topology = topology
        self._config   = topology.config

        self.nodes: list[NodeGene] = list(nodes)
        self.links: list[LinkGene] = list(links)
        self.id   : int            = genome_id if genome_id is not None else topology.allocate_genome_id()

        self.raw_score   : float = 0.0
        self.shared_score: float = 0.0
        self.spawn_count : float = 0.0
        self.species_id  : int   = 0

        self._node_index: dict[int, NodeGene] = {node.id: node for node in self.nodes}
        for link in self.links:
            self._require_endpoints(link)
            self._ensure_link_innovation(link.from_id, link.to_id)

        self._segregate()

    @property
    def topology(self) -> 'Topology':
        return self._topology

    def size(self) -> int:
        """The number of node genes."""
        return len(self.nodes)

    def num_links(self) -> int:
        return len(self.links)

    def get_node(self, node_id: int) -> NodeGene | None:
        return self._node_index.get(node_id)

    def has_node(self, node_id: int | None) -> bool:
        return node_id is not None and node_id in self._node_index

    def has_link(self, from_id: int, to_id: int) -> bool:
        return any(link.from_id == from_id and link.to_id == to_id for link in self.links)

    def innovation_ids(self) -> list[int]:
        registry = self._topology.registry
        return [registry.innovation_id_of(link) for link in self.links]

    # ====================================================================================
    # Internal bookkeeping

    def _segregate(self) -> None:
        """Restore the sort order of the node and link genes."""
        self.nodes.sort(key=lambda node: node.position.y)
        self.non_input_nodes = [node for node in self.nodes if not node.type.is_input]
        registry = self._topology.registry
        self.links.sort(key=registry.innovation_id_of)

    def _require_endpoints(self, link: LinkGene) -> None:
        for node_id in link.endpoints:
            if node_id not in self._node_index:
                raise MissingNodeError(f"genome {self.id}: link {link.from_id}=>{link.to_id} "
                                       f"references missing node {node_id}", self.id, node_id)

    def _ensure_link_innovation(self, from_id: int, to_id: int) -> int:
        registry = self._topology.registry
        innovation_id = registry.check(from_id, to_id, InnovationType.NEW_LINK)
        if innovation_id is None:
            innovation_id = registry.create(from_id, to_id, InnovationType.NEW_LINK).innovation_id
        return innovation_id

    def _add_node(self, node: NodeGene) -> None:
        self.nodes.append(node)
        self._node_index[node.id] = node

    def _add_link(self, link: LinkGene) -> None:
        self._require_endpoints(link)
        self._ensure_link_innovation(link.from_id, link.to_id)
        self.links.append(link)

    # ====================================================================================
    # Mutations

    def add_link_mutation(self,
                          probability     : float,
                          loop_probability: float,
                          loop_tries      : int,
                          add_tries       : int) -> None:
        """
        With probability 'probability', add a new link to the genome.

        With probability 'loop_probability' the new link loops back onto a node
        (which must be an output or hidden node not already looping); otherwise
        it joins two distinct, not yet linked nodes, the target being an output
        or hidden node. A link pointing towards a smaller vertical position is
        flagged recurrent. Running out of attempts leaves the genome unchanged.

        Parameters:
            probability:      Probability that a link is added at all
            loop_probability: Probability that the new link is a self loop
            loop_tries:       Attempts made to find a node without a self loop
            add_tries:        Attempts made to find two unlinked nodes
        """
        rng = self._topology.rng
        if rng.random() >= probability:
            return
        if not self.non_input_nodes:
            return

        source = target = None
        if rng.random() < loop_probability:
            for _ in range(loop_tries):
                node = rng.choice(self.non_input_nodes)
                if not node.recurrent and not self.has_link(node.id, node.id):
                    node.recurrent = True
                    source = target = node
                    break
        else:
            for _ in range(add_tries):
                candidate_target = rng.choice(self.non_input_nodes)
                candidate_source = rng.choice(self.nodes)
                if candidate_source.id == candidate_target.id:
                    continue
                if self.has_link(candidate_source.id, candidate_target.id):
                    continue
                source, target = candidate_source, candidate_target
                break

        if source is None:
            logger.debug("genome %d: add_link_mutation gave up", self.id)
            return

        recurrent = source is target or source.position.y > target.position.y
        self._add_link(LinkGene(source.id, target.id, rng.uniform(-1.0, 1.0), True, recurrent))
        self._segregate()

    def _is_splittable(self, link: LinkGene) -> bool:
        return (link.enabled and not link.recurrent and
                self._node_index[link.from_id].type != NodeType.BIAS)

    def add_node_mutation(self, probability: float, old_link_tries: int) -> None:
        """
        With probability 'probability', split an existing link by inserting a hidden node.

        The link to split must be enabled, not recurrent and not leaving the bias node.
        While the genome is small (fewer links than inputs + outputs + 5), up to
        'old_link_tries' picks are made among the oldest links, which keeps new nodes
        from chaining onto each other; otherwise one link is chosen among all eligible
        ones. The chosen link is disabled and replaced by 'from -> new' (weight 1.0)
        and 'new -> to' (the old weight), so the split does not disturb the network.

        If the same link has been split before, anywhere in the run, the node created
        back then is reused, unless this genome already holds it.

        Parameters:
            probability:    Probability that a node is added at all
            old_link_tries: Attempts made to find an old link to split (small genomes)
        """
        rng = self._topology.rng
        if rng.random() >= probability:
            return
        if not self.links:
            return

        # Pick the link to split
        chosen    = None
        num_links = len(self.links)
        if num_links < self._topology.num_inputs + self._topology.num_outputs + 5:
            oldest = max(0, num_links - 1 - int(math.sqrt(num_links)))
            for _ in range(old_link_tries):
                link = self.links[rng.randint(0, oldest)]
                if self._is_splittable(link):
                    chosen = link
                    break
        else:
            eligible = [link for link in self.links if self._is_splittable(link)]
            if eligible:
                chosen = rng.choice(eligible)

        if chosen is None:
            logger.debug("genome %d: add_node_mutation found no link to split", self.id)
            return

        chosen.enabled = False
        from_id, to_id = chosen.endpoints
        position       = self._node_index[from_id].position.midpoint(self._node_index[to_id].position)

        # Reuse an earlier split of this link, or record a new one
        registry = self._topology.registry
        record   = next((r for r in registry.splits_of(from_id, to_id) if not self.has_node(r.node_id)), None)
        if record is None:
            record = registry.create(from_id, to_id, InnovationType.NEW_NODE, NodeType.HIDDEN, position)
            registry.create(from_id, record.node_id, InnovationType.NEW_LINK)
            registry.create(record.node_id, to_id, InnovationType.NEW_LINK)
            logger.debug("genome %d: new node %d splits %d=>%d", self.id, record.node_id, from_id, to_id)

        self._add_node(self._topology.create_node_from_id(record.node_id))
        self._add_link(LinkGene(from_id, record.node_id, 1.0))
        self._add_link(LinkGene(record.node_id, to_id, chosen.weight))
        self._segregate()

    def mutate_weights(self, rate: float, replace_probability: float, max_perturbation: float) -> None:
        """
        Mutate each link weight with probability 'rate': either replace it by a new random
        value (with probability 'replace_probability') or perturb it by at most 'max_perturbation'.
        """
        rng = self._topology.rng
        for link in self.links:
            if rng.random() < rate:
                if rng.random() < replace_probability:
                    link.weight = rng.uniform(-1.0, 1.0)
                else:
                    link.weight += rng.uniform(-1.0, 1.0) * max_perturbation

    def mutate_activation(self, rate: float, max_perturbation: float) -> None:
        rng = self._topology.rng
        for node in self.nodes:
            if rng.random() < rate:
                node.activation_response += rng.uniform(-1.0, 1.0) * max_perturbation

    def morph(self) -> 'Genome':
        """
        Apply all mutation operators, with the rates of the configuration.

        A node is added only while the genome is smaller than 'max_nodes'.

        Returns:
            this genome
        """
        config = self._config
        if self.size() < config.max_nodes:
            self.add_node_mutation(config.add_node_probability, config.old_link_tries)
        self.add_link_mutation(config.add_link_probability,
                               config.loop_probability,
                               config.loop_tries,
                               config.add_link_tries)
        self.mutate_weights(config.weight_mutation_rate,
                            config.weight_replace_probability,
                            config.max_weight_perturbation)
        self.mutate_activation(config.activation_mutation_rate,
                               config.max_activation_perturbation)
        self._segregate()
        return self

    # ====================================================================================
    # Crossover & compatibility

    def crossover_with(self, other: 'Genome') -> 'Genome':
        """
        Create an offspring by crossing this genome with another.

        This genome is the dominant parent. Link genes are aligned by innovation number:
        - Matching genes: inherited from either parent at random; if the gene is disabled
          in either parent, the offspring's copy is enabled with probability
          (1 - cancel_link_probability), otherwise it is enabled
        - Disjoint & excess genes: inherited from whichever parent holds them,
          keeping their enabled status

        The offspring's nodes are the endpoints of the inherited links; node genes
        are taken from this genome when present, otherwise from 'other'. Genes held
        by 'other' alone are skipped when their new nodes would take the offspring
        above 'max_nodes'.

        Parameters:
            other: the other parent genome

        Returns:
            New offspring genome, with a fresh ID

        Raises:
            AlignmentError:   If two genes share an innovation number but not their endpoints
            MissingNodeError: If a link endpoint is missing from both parents
        """
        rng    = self._topology.rng
        cancel = self._config.cancel_link_probability

        innovs_self  = self.innovation_ids()
        innovs_other = other.innovation_ids()

        child_links = []
        other_only  = []
        i = j = 0
        while i < len(self.links) or j < len(other.links):

            # Excess genes
            if i >= len(self.links):
                other_only.append(len(child_links))
                child_links.append(other.links[j].copy())
                j += 1
                continue
            if j >= len(other.links):
                child_links.append(self.links[i].copy())
                i += 1
                continue

            link_self, link_other = self.links[i], other.links[j]
            if innovs_self[i] == innovs_other[j]:
                if not link_self.same_endpoints(link_other):
                    raise AlignmentError(f"innovation {innovs_self[i]} links {link_self.endpoints} "
                                         f"and {link_other.endpoints}", self.id, other.id)
                gene = (link_self if rng.random() < 0.5 else link_other).copy()
                if not link_self.enabled or not link_other.enabled:
                    gene.enabled = rng.random() >= cancel
                else:
                    gene.enabled = True
                child_links.append(gene)
                i += 1
                j += 1

            # Disjoint genes
            elif innovs_self[i] < innovs_other[j]:
                child_links.append(link_self.copy())
                i += 1
            else:
                other_only.append(len(child_links))
                child_links.append(link_other.copy())
                j += 1

        child_links = self._cap_nodes(child_links, other_only)

        # Collect the node genes needed by the inherited links
        child_nodes = {}
        for link in child_links:
            for node_id in link.endpoints:
                if node_id in child_nodes:
                    continue
                node = self.get_node(node_id) or other.get_node(node_id)
                if node is None:
                    raise MissingNodeError(f"node {node_id} missing from both parents", self.id, other.id)
                child_nodes[node_id] = node.copy()

        return Genome(self._topology, list(child_nodes.values()), child_links)

    def _cap_nodes(self, child_links: list[LinkGene], other_only: list[int]) -> list[LinkGene]:
        """
        Drop the genes inherited from the other parent alone whose new endpoints
        would push the offspring above 'max_nodes'; earlier innovations are kept first.
        """
        pending  = set(other_only)
        node_ids = {node_id for k, link in enumerate(child_links) if k not in pending
                    for node_id in link.endpoints}

        dropped = set()
        for k in other_only:
            new_ids = set(child_links[k].endpoints) - node_ids
            if len(node_ids) + len(new_ids) > self._config.max_nodes:
                dropped.add(k)
            else:
                node_ids |= new_ids

        if dropped:
            logger.debug("genome %d: crossover dropped %d genes to stay within %d nodes",
                         self.id, len(dropped), self._config.max_nodes)
        return [link for k, link in enumerate(child_links) if k not in dropped]

    def compatibility(self, other: 'Genome') -> float:
        """
        Calculate the compatibility distance between this genome and another.

        Walks both link lists in innovation order, counting matching, disjoint and excess genes:
            distance = (c1 * E / N) + (c2 * D / N) + c3 * W̄

        Where:
        - E = number of excess link genes
        - D = number of disjoint link genes
        - N = number of link genes in the larger genome (at least 1)
        - W̄ = average weight difference of matching link genes (0 if none match)
        - c1, c2, c3 = weight of the various terms (from configuration)

        Parameters:
            other: the genome relative to which we are calculating the distance

        Returns:
            the compatibility distance between this genome and 'other'
        """
        innovs_self  = self.innovation_ids()
        innovs_other = other.innovation_ids()
        end_self, end_other = len(innovs_self), len(innovs_other)

        num_excess = num_disjoint = num_matched = 0
        weight_diff = 0.0
        i = j = 0
        while i < end_self or j < end_other:
            if i >= end_self:
                j += 1
                num_excess += 1
            elif j >= end_other:
                i += 1
                num_excess += 1
            elif innovs_self[i] == innovs_other[j]:
                weight_diff += abs(self.links[i].weight - other.links[j].weight)
                num_matched += 1
                i += 1
                j += 1
            else:
                num_disjoint += 1
                if innovs_self[i] < innovs_other[j]:
                    i += 1
                else:
                    j += 1

        config  = self._config
        longest = max(1, end_self, end_other)
        distance = (config.excess_coeff   * num_excess   / longest +
                    config.disjoint_coeff * num_disjoint / longest)
        if num_matched > 0:
            distance += config.weight_coeff * weight_diff / num_matched
        return distance

    # ====================================================================================
    # Phenotype, copying & persistence

    def phenotype(self, update_mode: UpdateMode | None = None) -> NodeMesh:
        """
        Build the executable network described by this genome.

        Parameters:
            update_mode: Default update mode of the network (ACTIVE if None)
        """
        return NodeMesh.from_genes(self.nodes, self.links, self._config,
                                   update_mode if update_mode is not None else UpdateMode.ACTIVE)

    def clone(self, genome_id: int | None = None) -> 'Genome':
        """
        Copy this genome, including its scores and species.

        Parameters:
            genome_id: ID of the copy (defaults to this genome's ID)
        """
        copy = Genome(self._topology,
                      [node.copy() for node in self.nodes],
                      [link.copy() for link in self.links],
                      genome_id if genome_id is not None else self.id)
        copy.raw_score    = self.raw_score
        copy.shared_score = self.shared_score
        copy.spawn_count  = self.spawn_count
        copy.species_id   = self.species_id
        return copy

    def to_dict(self) -> dict:
        return {
            "id"          : self.id,
            "raw_score"   : self.raw_score,
            "shared_score": self.shared_score,
            "spawn_count" : self.spawn_count,
            "species_id"  : self.species_id,
            "nodes"       : [node.to_dict() for node in self.nodes],
            "links"       : [link.to_dict() for link in self.links]
        }

    @classmethod
    def from_dict(cls, data: dict, topology: 'Topology') -> 'Genome':
        """
        Create a Genome from a dictionary description (as produced by 'to_dict').

        Parameters:
            data:     Dictionary describing the genome
            topology: The Topology the genome belongs to

        Raises:
            MissingNodeError: If a link endpoint is not one of the nodes
        """
        genome = cls(topology,
                     [NodeGene.from_dict(item) for item in data["nodes"]],
                     [LinkGene.from_dict(item) for item in data["links"]],
                     data["id"])
        genome.raw_score    = data.get("raw_score", 0.0)
        genome.shared_score = data.get("shared_score", 0.0)
        genome.spawn_count  = data.get("spawn_count", 0.0)
        genome.species_id   = data.get("species_id", 0)
        return genome

    def __str__(self):
        node_genes_str = ''.join(str(node) for node in self.nodes)
        link_genes_str = ''.join(str(link) for link in self.links)
        return f"Genome {self.id}\nNodes: {node_genes_str}\nLinks: {link_genes_str}"
