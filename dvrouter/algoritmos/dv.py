# dvrouter/algoritmos/dv.py
from dvrouter.table import INFINITY, RouteRecord, RoutingTable


def optimize(local: RoutingTable, incoming: RoutingTable) -> bool:
    """
    One Bellman-Ford pass over a neighbor's advertisement.

    The sender is incoming.owner_id and must be a direct neighbor of
    local; otherwise UnknownNeighbor is raised before anything changes.
    Unknown destinations are added, known ones replaced only by a
    strictly shorter distance. Returns True if any entry was added or
    replaced.
    """
    origin = incoming.owner_id
    link = local.get_direct_link_cost(origin)
    changed = False

    for dst, rec in sorted(incoming.entries().items()):
        cost_via = link + rec.distance  # inf stays inf
        current = local.get(dst)
        if current is None:
            local.add_entry(dst, RouteRecord(cost_via, origin))
            changed = True
        elif cost_via < current.distance:
            local.update_entry(dst, RouteRecord(cost_via, origin))
            changed = True
    return changed


def poison(local: RoutingTable, toward: str) -> RoutingTable:
    """Copy of local for sending to `toward`, with poison reverse applied."""
    out = RoutingTable(local.owner_id)
    for dst, rec in local.entries().items():
        if rec.next_hop == toward:
            out.add_entry(dst, RouteRecord(INFINITY, toward))
        else:
            out.add_entry(dst, rec)
    return out
