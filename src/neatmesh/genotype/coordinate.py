"""
NEAT Coordinate Module

Classes:
    Coordinate: Immutable 2D position of a node inside the network layout
"""

from typing import NamedTuple

class Coordinate(NamedTuple):
    """
    Position of a node in the network layout.

    'y' is the vertical layer: input and bias nodes sit at 0.0, output nodes at 1.0,
    and hidden nodes somewhere in between. Nodes are evaluated in increasing 'y'
    order, and a link pointing towards a smaller 'y' is recurrent.
    """
    x: float = 0.0
    y: float = 0.0

    def midpoint(self, other: 'Coordinate') -> 'Coordinate':
        """The position halfway between this position and 'other'."""
        return Coordinate((self.x + other.x) / 2, (self.y + other.y) / 2)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> 'Coordinate':
        return cls(float(data["x"]), float(data["y"]))
