"""
In-memory OSM source graph consumed by the network converter.

Nodes are held in an id-keyed dict of mutable Node objects. Every way that
touches a node mutates the same object, so usage counts accumulated from
different ways are visible to all later stages.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import OsmKey


@dataclass
class Node:
    id: int
    x: float  # lon until projected, then planar meters
    y: float
    used: bool = False
    way_count: int = 0


@dataclass
class Way:
    id: int
    nodes: List[int]
    tags: Dict[str, str] = field(default_factory=dict)
    used: bool = True


@dataclass(frozen=True)
class RelationMember:
    ref_id: int
    role: str = ""
    type: Optional[str] = None  # "node", "way", "relation" or unknown


@dataclass
class Relation:
    id: int
    members: List[RelationMember] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class WayTags:
    """
    Typed view over the tags of a way.

    Only the keys that attribute derivation consults are exposed as fields.
    The complete tag mapping is kept in `other` so that an unrecognized tag
    combination can still be reported verbatim.
    """

    highway: Optional[str] = None
    railway: Optional[str] = None
    oneway: Optional[str] = None
    junction: Optional[str] = None
    maxspeed: Optional[str] = None
    lanes: Optional[str] = None
    psv: Optional[str] = None
    other: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_tags(cls, tags: Dict[str, str]) -> "WayTags":
        return cls(
            highway=tags.get(OsmKey.HIGHWAY.value),
            railway=tags.get(OsmKey.RAILWAY.value),
            oneway=tags.get(OsmKey.ONEWAY.value),
            junction=tags.get(OsmKey.JUNCTION.value),
            maxspeed=tags.get(OsmKey.MAXSPEED.value),
            lanes=tags.get(OsmKey.LANES.value),
            psv=tags.get(OsmKey.PSV.value),
            other=dict(tags),
        )

    @property
    def is_psv(self) -> bool:
        # The key's presence marks the way, whatever its value.
        return OsmKey.PSV.value in self.other

    def describe(self) -> str:
        return str(list(self.other.values()))


@dataclass
class OsmData:
    """Node, way and relation collections supplied by a source graph provider."""

    nodes: Dict[int, Node] = field(default_factory=dict)
    ways: Dict[int, Way] = field(default_factory=dict)
    relations: Dict[int, Relation] = field(default_factory=dict)

    def way_nodes(self, way: Way) -> List[Node]:
        """
        Resolve a way's node ids to Node objects, dropping ids that are not
        in the node set.

        Every pipeline stage walks ways through this method so that node
        indices along a way mean the same thing in each stage.
        """
        nodes = self.nodes
        return [nodes[node_id] for node_id in way.nodes if node_id in nodes]

    def clear(self) -> None:
        self.nodes.clear()
        self.ways.clear()
        self.relations.clear()


def euclidean_distance(a: Node, b: Node) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)
