"""
NEAT Link Gene Module

This module implements the LinkGene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    LinkGene: Gene encoding a weighted link between two nodes
"""

from neatmesh.errors import InvalidIdError

class LinkGene:
    """
    A gene describing a weighted link between two nodes in a Neural Network.

    Each link gene represents a directed edge of the network graph. A link gene
    does not store its innovation number: the innovation registry maps the
    endpoints '(from_id, to_id)' to it, so two link genes are the same innovation
    exactly when their endpoints match, whatever their weights.

    Links can be disabled, which preserves the structural information while
    removing the link from the phenotype.

    Public Attributes:
        from_id:   ID of the source node
        to_id:     ID of the destination node
        weight:    Weight of the link
        enabled:   Whether this link is expressed in the phenotype
        recurrent: Whether the link points backwards (or loops onto its node)

    Public Methods:
        same_endpoints(other): Whether 'other' links the same two nodes
    """

    def __init__(self,
                 from_id  : int,
                 to_id    : int,
                 weight   : float,
                 enabled  : bool = True,
                 recurrent: bool = False):
        """
        Parameters:
            from_id:   ID of the source node
            to_id:     ID of the destination node
            weight:    Weight of the link
            enabled:   Whether this link is expressed in the phenotype
            recurrent: Whether the link points backwards

        Raises:
            InvalidIdError: If either endpoint ID is not positive
        """
        if from_id <= 0 or to_id <= 0:
            raise InvalidIdError(f"link with bad node ids: from: {from_id}, to: {to_id}", from_id, to_id)

        self.from_id  : int   = from_id
        self.to_id    : int   = to_id
        self.weight   : float = weight
        self.enabled  : bool  = enabled
        self.recurrent: bool  = recurrent

    @property
    def endpoints(self) -> tuple[int, int]:
        return self.from_id, self.to_id

    def same_endpoints(self, other: 'LinkGene') -> bool:
        return self.from_id == other.from_id and self.to_id == other.to_id

    def copy(self) -> 'LinkGene':
        return LinkGene(self.from_id, self.to_id, self.weight, self.enabled, self.recurrent)

    def to_dict(self) -> dict:
        return {
            "from"     : self.from_id,
            "to"       : self.to_id,
            "weight"   : self.weight,
            "enabled"  : self.enabled,
            "recurrent": self.recurrent
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'LinkGene':
        return cls(data["from"], data["to"], data["weight"],
                   data.get("enabled", True), data.get("recurrent", False))

    def __eq__(self, other):
        if not isinstance(other, LinkGene):
            return NotImplemented
        return (self.same_endpoints(other)         and
                self.weight    == other.weight    and
                self.enabled   == other.enabled   and
                self.recurrent == other.recurrent)

    __hash__ = None

    def __repr__(self):
        return (f"LinkGene(from_id={self.from_id:03d}, to_id={self.to_id:03d}, "
                f"weight={self.weight:+.6f}, enabled={self.enabled}, recurrent={self.recurrent})")

    def __str__(self):
        s  = f"[{'E' if self.enabled else 'D'}{'R' if self.recurrent else ''},"
        s += f"{self.from_id:02d}=>{self.to_id:02d},{self.weight:+.02f}]"
        return s
