"""
NEAT Node Mesh Module

This module implements the phenotype representation for the NEAT algorithm.
It provides classes for expressing a genome as an executable neural network,
which may contain recurrent links and self loops.

The network is stored as an arena: the mesh owns a list of nodes and a list
of links; a link refers to its endpoints by their index in the node list, and
a node refers to its incoming and outgoing links by their index in the link list.

Classes:
    UpdateMode: How many passes an update makes through the network
    Link:       A weighted link between two nodes
    Node:       A computational node applying an activation function
    NodeMesh:   An executable network built from a genome
"""

from enum   import Enum
from typing import Callable, Sequence, TYPE_CHECKING

import graphviz  # type: ignore
import numpy as np

from neatmesh.activations         import resolve
from neatmesh.genotype.coordinate import Coordinate
from neatmesh.genotype.node_gene  import NodeType  # Needed at runtime

if TYPE_CHECKING:
    from neatmesh.genotype.link_gene import LinkGene
    from neatmesh.genotype.node_gene import NodeGene
    from neatmesh.run.config         import Config

class UpdateMode(Enum):
    """
    ACTIVE:   one pass per update; node outputs persist between updates,
              so recurrent links carry the previous update's values
    SNAPSHOT: as many passes as the network has layers, after which every
              node output is reset, so each update is independent
    """
    ACTIVE   = "active"
    SNAPSHOT = "snapshot"

class Link:
    """
    A weighted link between two nodes of a NodeMesh.

    Public Attributes:
        weight:    Weight multiplier applied to the transmitted signal
        source:    Index of the source node in the mesh
        target:    Index of the destination node in the mesh
        recurrent: Whether the link points backwards
    """

    def __init__(self, weight: float, source: int, target: int, recurrent: bool = False):
        self.weight    = weight
        self.source    = source
        self.target    = target
        self.recurrent = recurrent

    def copy(self) -> 'Link':
        return Link(self.weight, self.source, self.target, self.recurrent)

    def __repr__(self):
        return f"Link({self.source}->{self.target}, w={self.weight:+.3f}{', R' if self.recurrent else ''})"

class Node:
    """
    A node of a NodeMesh.

    Computes: output = activation(sum(weight * source output) / activation_response)

    Public Attributes:
        id:                  ID of the node gene this node expresses
        type:                Node type
        position:            Position in the network layout
        activation_response: Divisor applied to the weighted input
        activation:          The activation function
        output:              The node's current output value
        in_links:            Indices of the incoming links
        out_links:           Indices of the outgoing links
    """

    def __init__(self,
                 node_id            : int,
                 node_type          : NodeType,
                 position           : Coordinate,
                 activation_response: float    = 1.0,
                 activation         : Callable = None):
        self.id                  = node_id
        self.type                = node_type
        self.position            = position
        self.activation_response = activation_response
        self.activation          = activation if activation is not None else resolve(None)
        self.output              = 0.0
        self.in_links : list[int] = []
        self.out_links: list[int] = []

    def flush(self) -> None:
        self.output = 0.0

    def copy(self) -> 'Node':
        node = Node(self.id, self.type, self.position, self.activation_response, self.activation)
        node.output    = self.output
        node.in_links  = list(self.in_links)
        node.out_links = list(self.out_links)
        return node

    def __repr__(self):
        return f"Node({self.type.value}{self.id}, out={self.output:+.3f})"

class NodeMesh:
    """
    An executable network built from a genome.

    Input nodes take the values given to 'update' (in node ID order), the bias
    node outputs the configured bias value, and all other nodes are activated
    in order of increasing vertical position.

    Public Properties:
        depth:        Number of distinct layers (vertical positions)
        input_count:  Number of input nodes (the bias is not an input)
        output_count: Number of output nodes

    Public Methods:
        update(inputs, mode): Feed inputs through the network and return the outputs
        flush():              Reset every node output to 0
        clone():              Copy the network, including its node outputs
        visualize():          Draw the network with Graphviz
    """

    def __init__(self,
                 nodes      : list[Node],
                 links      : list[Link],
                 bias       : float      = 1.0,
                 update_mode: UpdateMode = UpdateMode.ACTIVE):
        """
        Parameters:
            nodes:       The nodes, sorted by vertical position
            links:       The links; their endpoints index 'nodes'
            bias:        Output value of bias nodes
            update_mode: Mode used by 'update' when none is given
        """
        self.nodes       = nodes
        self.links       = links
        self.bias        = bias
        self.update_mode = update_mode

        self._input_indices  = sorted((i for i, n in enumerate(nodes) if n.type == NodeType.INPUT),
                                      key=lambda i: nodes[i].id)
        self._bias_indices   = [i for i, n in enumerate(nodes) if n.type == NodeType.BIAS]
        self._output_indices = sorted((i for i, n in enumerate(nodes) if n.type == NodeType.OUTPUT),
                                      key=lambda i: nodes[i].id)
        self._active_indices = [i for i, n in enumerate(nodes) if not n.type.is_input]
        self._depth          = self._calc_depth()

    @classmethod
    def from_genes(cls,
                   node_genes : Sequence['NodeGene'],
                   link_genes : Sequence['LinkGene'],
                   config     : 'Config',
                   update_mode: UpdateMode = UpdateMode.ACTIVE) -> 'NodeMesh':
        """
        Build a network from node and link genes; disabled link genes are not expressed.

        Node activation functions are looked up by name in 'config.activation_table';
        nodes without a known name use 'config.activation_function', then the sigmoid.
        """
        nodes = [Node(gene.id, gene.type, gene.position, gene.activation_response,
                      resolve(gene.activation_name, config.activation_table, config.activation_function))
                 for gene in sorted(node_genes, key=lambda gene: gene.position.y)]
        index = {node.id: i for i, node in enumerate(nodes)}

        links = []
        for gene in link_genes:
            if not gene.enabled:
                continue
            link = Link(gene.weight, index[gene.from_id], index[gene.to_id], gene.recurrent)
            nodes[link.source].out_links.append(len(links))
            nodes[link.target].in_links.append(len(links))
            links.append(link)

        return cls(nodes, links, config.bias, update_mode)

    def _calc_depth(self) -> int:
        if not self.nodes:
            return 0
        ys = np.sort(np.array([node.position.y for node in self.nodes], dtype=float))
        return 1 + int(np.count_nonzero(~np.isclose(np.diff(ys), 0.0)))

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def input_count(self) -> int:
        return len(self._input_indices)

    @property
    def output_count(self) -> int:
        return len(self._output_indices)

    def _weighted_input(self, node: Node) -> float:
        total = 0.0
        for k in node.in_links:
            link   = self.links[k]
            total += link.weight * self.nodes[link.source].output
        return total

    def update(self, inputs: Sequence[float], mode: UpdateMode | None = None) -> list[float]:
        """
        Feed 'inputs' through the network.

        Parameters:
            inputs: One value per input node, in node ID order
            mode:   UpdateMode.ACTIVE or UpdateMode.SNAPSHOT (defaults to the mesh's mode)

        Returns:
            The output node values, in node ID order

        Raises:
            ValueError: If the number of inputs does not match the number of input nodes
        """
        if mode is None:
            mode = self.update_mode
        if len(inputs) != self.input_count:
            raise ValueError(f"NodeMesh expects {self.input_count} inputs, got {len(inputs)}")

        passes = self._depth if mode == UpdateMode.SNAPSHOT else 1
        for _ in range(passes):
            for i, value in zip(self._input_indices, inputs):
                self.nodes[i].output = float(value)
            for i in self._bias_indices:
                self.nodes[i].output = self.bias
            for i in self._active_indices:
                node = self.nodes[i]
                node.output = float(node.activation(self._weighted_input(node) / node.activation_response))

        outputs = [self.nodes[i].output for i in self._output_indices]
        if mode == UpdateMode.SNAPSHOT:
            self.flush()
        return outputs

    def flush(self) -> None:
        for node in self.nodes:
            node.flush()

    def clone(self) -> 'NodeMesh':
        return NodeMesh([node.copy() for node in self.nodes],
                        [link.copy() for link in self.links],
                        self.bias,
                        self.update_mode)

    def visualize(self, view: bool = True) -> graphviz.Digraph:
        """
        Visualize the network using Graphviz.

        Parameters:
            view: If True, automatically open the visualization after rendering

        Returns:
            graphviz.Digraph object representing the network
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir='BT')  # inputs at the bottom
        dot.attr('graph', labelloc='t')

        common = {'color': 'black', 'style': 'filled', 'shape': 'circle', 'penwidth': '0.5',
                  'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'}
        fill   = {NodeType.INPUT : 'lightgrey',
                  NodeType.BIAS  : 'lightyellow',
                  NodeType.HIDDEN: 'lightblue',
                  NodeType.OUTPUT: 'white'}

        for node in self.nodes:
            label = f"{node.type.value}{node.id}"
            if not node.type.is_input:
                label += f"\\na={node.activation_response:.2f}"
            dot.node(str(node.id), label=label, fillcolor=fill[node.type], **common)

        for link in self.links:
            edge_attrs = {
                'label'    : f"w={link.weight:.2f}",
                'fontsize' : '5',
                'penwidth' : '0.5',
                'arrowsize': '0.5',
                'color'    : 'red' if link.recurrent else 'black'
            }
            dot.edge(str(self.nodes[link.source].id), str(self.nodes[link.target].id), **edge_attrs)

        if view:
            dot.view(cleanup=True)

        return dot
