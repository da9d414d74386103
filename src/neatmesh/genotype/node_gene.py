"""
NEAT Node Gene Module.

This module implements the NodeGene class and NodeType enumeration
for the NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    NodeType: Enumeration for node types (INPUT, BIAS, OUTPUT, HIDDEN)
    NodeGene: Gene encoding a single network node
"""

from enum import Enum

from neatmesh.activations           import activation_codes
from neatmesh.errors                import InvalidIdError
from neatmesh.genotype.coordinate   import Coordinate

class NodeType(Enum):
    """
    Nodes come in four types: input, bias, output, hidden.
    """
    INPUT  = "I"
    BIAS   = "B"
    OUTPUT = "O"
    HIDDEN = "H"

    @property
    def is_input(self) -> bool:
        """Whether nodes of this type receive their value from outside (inputs and bias)."""
        return self in (NodeType.INPUT, NodeType.BIAS)

class NodeGene:
    """
    A gene describing a node in a Neural Network.

    Node genes are identified by a node ID which is handed out by the innovation
    registry and which stays the same across mutations and crossover. The node
    computes its output as: activation(weighted_input / activation_response)

    Public Attributes:
        id:                  Unique (per run), positive identifier for this node
        type:                Type of node (INPUT, BIAS, OUTPUT or HIDDEN)
        position:            Position of the node in the network layout
        recurrent:           Whether the node has a link looping back onto itself
        activation_response: Divisor applied to the weighted input before activation
        activation_name:     Name of the activation function (None = network default)
    """

    def __init__(self,
                 node_id            : int,
                 node_type          : NodeType,
                 position           : Coordinate | None = None,
                 recurrent          : bool              = False,
                 activation_response: float             = 1.0,
                 activation_name    : str | None        = None):
        """
        Parameters:
            node_id:             Unique identifier for this node (must be positive)
            node_type:           Type of node (INPUT, BIAS, OUTPUT or HIDDEN)
            position:            Position of the node in the network layout
            recurrent:           Whether the node loops back onto itself
            activation_response: Divisor applied to the weighted input before activation
            activation_name:     Name of the activation function

        Raises:
            InvalidIdError: If 'node_id' is not positive
        """
        if node_id <= 0:
            raise InvalidIdError(f"creating a node with a bad id {node_id}", node_id)

        self.id                 : int         = node_id
        self.type               : NodeType    = node_type
        self.position           : Coordinate  = position if position is not None else Coordinate()
        self.recurrent          : bool        = recurrent
        self.activation_response: float       = activation_response
        self.activation_name    : str | None  = activation_name

    def copy(self) -> 'NodeGene':
        return NodeGene(self.id, self.type, self.position, self.recurrent,
                        self.activation_response, self.activation_name)

    def to_dict(self) -> dict:
        return {
            "id"                 : self.id,
            "type"               : self.type.name.lower(),
            "position"           : self.position.to_dict(),
            "recurrent"          : self.recurrent,
            "activation_response": self.activation_response,
            "activation"         : self.activation_name
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'NodeGene':
        return cls(data["id"],
                   NodeType[data["type"].upper()],
                   Coordinate.from_dict(data["position"]),
                   data.get("recurrent", False),
                   data.get("activation_response", 1.0),
                   data.get("activation"))

    def __eq__(self, other):
        if not isinstance(other, NodeGene):
            return NotImplemented
        return (self.id                  == other.id                  and
                self.type                == other.type                and
                self.position            == other.position            and
                self.recurrent           == other.recurrent           and
                self.activation_response == other.activation_response and
                self.activation_name     == other.activation_name)

    __hash__ = None

    def __repr__(self):
        return (f"NodeGene(node_id={self.id:03d}, node_type=NodeType.{self.type.name:6s}, "
                f"position=({self.position.x:.3f},{self.position.y:.3f}), recurrent={self.recurrent}, "
                f"activation_response={self.activation_response}, activation={self.activation_name!r})")

    def __str__(self):
        if self.type.is_input:
            return f"[{self.type.value}{self.id}]"
        act_code = activation_codes.get(self.activation_name, "DFT")
        loop     = ",R" if self.recurrent else ""
        return f"[{self.type.value}{self.id},{act_code},a={self.activation_response:.2f}{loop}]"
