from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Union
import math

INFINITY = math.inf

Distance = Union[int, float]


class RoutingError(Exception):
    pass


class UnknownNeighbor(RoutingError, KeyError):
    """No direct-link cost is recorded for the given router."""


@dataclass(frozen=True)
class RouteRecord:
    distance: Distance
    next_hop: str

    def __str__(self):
        d = "inf" if self.distance == INFINITY else str(self.distance)
        return f"distance: {d} next hop: {self.next_hop}"


class RoutingTable:
    """
    Distance vector of one router, also used as the advertisement payload.

    - entries: destination -> RouteRecord (best distance known so far)
    - direct_link_cost: neighbor -> configured link weight, fixed once
      the table is initialized
    """

    def __init__(self, owner_id: Optional[str] = None):
        self.owner_id: Optional[str] = owner_id
        self.direct_link_cost: Dict[str, int] = {}
        self._entries: Dict[str, RouteRecord] = {}

    @classmethod
    def initial(cls, owner_id: str, direct_links: Mapping[str, int]) -> "RoutingTable":
        table = cls()
        table.set_owner(owner_id)
        for nb, w in direct_links.items():
            table.add_direct_link(nb, w)
        table.add_entry(owner_id, RouteRecord(0, owner_id))
        return table

    def set_owner(self, owner_id: str) -> None:
        if self.owner_id is not None:
            raise RoutingError(f"owner already set to {self.owner_id}")
        self.owner_id = owner_id

    def add_direct_link(self, neighbor_id: str, weight: int) -> None:
        # only valid while the table is being built from static links
        self.direct_link_cost[neighbor_id] = weight
        self._entries[neighbor_id] = RouteRecord(weight, neighbor_id)

    def add_entry(self, dst: str, record: RouteRecord) -> None:
        self._entries[dst] = record

    def update_entry(self, dst: str, record: RouteRecord) -> None:
        if dst not in self._entries:
            raise RoutingError(f"no entry for {dst} to update")
        self._entries[dst] = record

    def get_direct_link_cost(self, neighbor_id: str) -> int:
        try:
            return self.direct_link_cost[neighbor_id]
        except KeyError:
            raise UnknownNeighbor(neighbor_id) from None

    def get(self, dst: str) -> Optional[RouteRecord]:
        return self._entries.get(dst)

    def entries(self) -> Dict[str, RouteRecord]:
        return dict(self._entries)

    def copy(self) -> "RoutingTable":
        other = RoutingTable(self.owner_id)
        other.direct_link_cost = dict(self.direct_link_cost)
        other._entries = dict(self._entries)
        return other

    def __contains__(self, dst: str) -> bool:
        return dst in self._entries

    def __len__(self):
        return len(self._entries)

    def __eq__(self, other):
        if not isinstance(other, RoutingTable):
            return NotImplemented
        return self.owner_id == other.owner_id and self._entries == other._entries

    def render(self) -> str:
        lines = [f"== {self.owner_id} table =="]
        for dst in sorted(self._entries):
            lines.append(f"  {dst} --> {self._entries[dst]}")
        return "\n".join(lines)

    __str__ = render

    def __repr__(self):
        return f"RoutingTable(owner={self.owner_id!r}, entries={len(self._entries)})"
