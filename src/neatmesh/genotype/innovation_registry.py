"""
NEAT Innovation Registry Module

This module implements the InnovationRegistry class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationType:     Kind of structural change (NEW_LINK or NEW_NODE)
    InnovationRecord:   A single structural change, as recorded in the registry
    InnovationRegistry: Run-wide history of every structural change
"""

from enum   import Enum
from typing import Callable, TYPE_CHECKING

from neatmesh.errors                import InvalidIdError
from neatmesh.genotype.coordinate   import Coordinate
from neatmesh.genotype.node_gene    import NodeType
if TYPE_CHECKING:
    from neatmesh.genotype.link_gene import LinkGene

class InnovationType(Enum):
    NEW_LINK = "link"
    NEW_NODE = "node"

class InnovationRecord:
    """
    A structural change: either a new link between two nodes,
    or a new node created by splitting the link between two nodes.

    Records describing the nodes of the seed layout have no endpoints.

    Public Attributes:
        innovation_id: Unique (per run), positive identifier of the change
        kind:          InnovationType.NEW_LINK or InnovationType.NEW_NODE
        from_id:       ID of the source node of the link (None for seed nodes)
        to_id:         ID of the destination node of the link (None for seed nodes)
        node_id:       ID of the node created (NEW_NODE only)
        node_type:     Type of the node created (NEW_NODE only)
        position:      Position of the node created
    """

    def __init__(self,
                 innovation_id: int,
                 kind         : InnovationType,
                 from_id      : int | None,
                 to_id        : int | None,
                 node_id      : int | None        = None,
                 node_type    : NodeType | None   = None,
                 position     : Coordinate | None = None):
        self.innovation_id = innovation_id
        self.kind          = kind
        self.from_id       = from_id
        self.to_id         = to_id
        self.node_id       = node_id
        self.node_type     = node_type
        self.position      = position if position is not None else Coordinate()

    def to_dict(self) -> dict:
        return {
            "id"       : self.innovation_id,
            "kind"     : self.kind.value,
            "from"     : self.from_id,
            "to"       : self.to_id,
            "node_id"  : self.node_id,
            "node_type": self.node_type.name.lower() if self.node_type is not None else None,
            "position" : self.position.to_dict()
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'InnovationRecord':
        node_type = data.get("node_type")
        return cls(data["id"],
                   InnovationType(data["kind"]),
                   data.get("from"),
                   data.get("to"),
                   data.get("node_id"),
                   NodeType[node_type.upper()] if node_type else None,
                   Coordinate.from_dict(data["position"]) if "position" in data else None)

    def __eq__(self, other):
        if not isinstance(other, InnovationRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self):
        return (f"InnovationRecord(id={self.innovation_id}, kind={self.kind.name}, "
                f"from={self.from_id}, to={self.to_id}, node_id={self.node_id})")

class InnovationRegistry:
    """
    Tracks structural changes across all genomes of a run.

    The same structural change always resolves to the same innovation ID,
    no matter which genome makes it or when. Records are never deleted.

    Node IDs for NEW_NODE innovations are handed out by the owning Topology,
    through the 'next_node_id' callable given to the constructor.

    Public Methods:
        allocate_id():                   Hand out the next innovation ID
        check(from_id, to_id, kind):     ID of an existing innovation, or None
        create(from_id, to_id, kind):    Record a new innovation
        record_node(...):                Record a node of the seed layout
        node_id_of(innovation_id):       Node ID created by a NEW_NODE innovation
        find(innovation_id):             Record with the given innovation ID
        find_by_node_id(node_id):        Record that created the given node
        innovation_id_of(link):          Innovation ID of a link gene
        splits_of(from_id, to_id):       All NEW_NODE records splitting a link
    """

    def __init__(self, next_node_id: Callable[[], int] | None = None):
        """
        Parameters:
            next_node_id: Allocates a fresh node ID (required for NEW_NODE innovations)
        """
        self._next_node_id = next_node_id
        self._counter      = 0
        self._records      = []     # in creation order

        # Lookup indexes
        self._by_id        = {}     # innovation_id          -> record
        self._by_key       = {}     # (from_id, to_id, kind) -> first record
        self._splits       = {}     # (from_id, to_id)       -> [NEW_NODE records]
        self._by_node      = {}     # node_id                -> record

    @property
    def records(self) -> list[InnovationRecord]:
        return list(self._records)

    @property
    def counter(self) -> int:
        """The last innovation ID handed out (0 if none)."""
        return self._counter

    def __len__(self):
        return len(self._records)

    def allocate_id(self) -> int:
        self._counter += 1
        return self._counter

    def check(self, from_id: int, to_id: int, kind: InnovationType) -> int | None:
        """
        Check whether this structural change has already occurred.

        Parameters:
            from_id: ID of the source node
            to_id:   ID of the destination node
            kind:    NEW_LINK or NEW_NODE

        Returns:
            The innovation ID of the (earliest) matching record, or None

        Raises:
            InvalidIdError: If either node ID is not positive
        """
        if from_id is None or to_id is None or from_id <= 0 or to_id <= 0:
            raise InvalidIdError(f"checking innovation with bad node ids: from: {from_id}, to: {to_id}",
                                 from_id, to_id)
        record = self._by_key.get((from_id, to_id, kind))
        return record.innovation_id if record is not None else None

    def create(self,
               from_id  : int,
               to_id    : int,
               kind     : InnovationType,
               node_type: NodeType | None   = None,
               position : Coordinate | None = None) -> InnovationRecord:
        """
        Record a new structural change.

        A NEW_NODE innovation also gets a fresh node ID from the owning Topology.

        Parameters:
            from_id:   ID of the source node of the link
            to_id:     ID of the destination node of the link
            kind:      NEW_LINK or NEW_NODE
            node_type: Type of the node created (NEW_NODE only)
            position:  Position of the node created

        Returns:
            The new record

        Raises:
            InvalidIdError: If a node ID is not positive, or a NEW_NODE has no node type
        """
        if from_id is None or to_id is None or from_id <= 0 or to_id <= 0:
            raise InvalidIdError(f"creating innovation with bad node ids: from: {from_id}, to: {to_id}",
                                 from_id, to_id)

        node_id = None
        if kind == InnovationType.NEW_NODE:
            if node_type is None:
                raise InvalidIdError("creating a node innovation without a node type", from_id, to_id)
            if self._next_node_id is None:
                raise InvalidIdError("registry has no node id allocator", from_id, to_id)
            node_id = self._next_node_id()

        record = InnovationRecord(self.allocate_id(), kind, from_id, to_id, node_id, node_type, position)
        self._add(record)
        return record

    def record_node(self, node_id: int, node_type: NodeType, position: Coordinate) -> InnovationRecord:
        """Record a node that exists from the start (input, bias or output)."""
        if node_id <= 0:
            raise InvalidIdError(f"recording a node with a bad id {node_id}", node_id)
        record = InnovationRecord(self.allocate_id(), InnovationType.NEW_NODE,
                                  None, None, node_id, node_type, position)
        self._add(record)
        return record

    def _add(self, record: InnovationRecord) -> None:
        self._records.append(record)
        self._by_id[record.innovation_id] = record

        if record.from_id is not None:
            self._by_key.setdefault((record.from_id, record.to_id, record.kind), record)
            if record.kind == InnovationType.NEW_NODE:
                self._splits.setdefault((record.from_id, record.to_id), []).append(record)

        if record.node_id is not None:
            self._by_node.setdefault(record.node_id, record)

    def node_id_of(self, innovation_id: int) -> int | None:
        record = self._by_id.get(innovation_id)
        return record.node_id if record is not None else None

    def find(self, innovation_id: int) -> InnovationRecord | None:
        return self._by_id.get(innovation_id)

    def find_by_node_id(self, node_id: int) -> InnovationRecord | None:
        return self._by_node.get(node_id)

    def innovation_id_of(self, link: 'LinkGene') -> int | None:
        return self.check(link.from_id, link.to_id, InnovationType.NEW_LINK)

    def splits_of(self, from_id: int, to_id: int) -> list[InnovationRecord]:
        """All NEW_NODE records created by splitting the link 'from_id -> to_id', oldest first."""
        return list(self._splits.get((from_id, to_id), []))

    def to_dict(self) -> dict:
        return {
            "counter": self._counter,
            "records": [record.to_dict() for record in self._records]
        }

    @classmethod
    def from_dict(cls, data: dict, next_node_id: Callable[[], int] | None = None) -> 'InnovationRegistry':
        registry = cls(next_node_id)
        for item in data["records"]:
            registry._add(InnovationRecord.from_dict(item))
        registry._counter = data["counter"]
        return registry
