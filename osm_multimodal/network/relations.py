import logging
from collections import defaultdict
from typing import Dict, FrozenSet, Mapping, Set

from ..osm.constants import BUS, TROLLEYBUS, OsmKey
from ..osm.model import Relation

logger = logging.getLogger(__name__)

_EMPTY: FrozenSet[int] = frozenset()


class RelationModeIndex:
    """
    Reverse index from way id to the ids of the relations that reference it.

    Built with a single pass over all relation members. Only members typed
    as ways, or untyped, are indexed. Node, way and relation ids are separate
    id spaces in OSM, so a child relation id must not match a way id.
    """

    def __init__(self, relations: Mapping[int, Relation]):
        self._relations = relations
        self._members: Dict[int, Set[int]] = defaultdict(set)

        for relation in relations.values():
            for member in relation.members:
                if member.type not in (None, "way"):
                    continue
                self._members[member.ref_id].add(relation.id)

        logger.debug(
            f"Indexed {len(self._members)} members of {len(relations)} relations."
        )

    def __contains__(self, way_id: int) -> bool:
        return way_id in self._members

    def relations_of(self, way_id: int) -> FrozenSet[int]:
        members = self._members.get(way_id)
        return frozenset(members) if members else _EMPTY

    def route_modes(self, way_id: int) -> Set[str]:
        """
        Return the route=* values of all relations containing the way.

        Relations without a route tag contribute nothing. trolleybus is
        reported as bus.
        """
        modes = set()

        for relation_id in self.relations_of(way_id):
            relation = self._relations.get(relation_id)

            if relation is None:
                continue

            mode = relation.tags.get(OsmKey.ROUTE.value)

            if mode is None:
                continue

            modes.add(BUS if mode == TROLLEYBUS else mode)

        return modes
