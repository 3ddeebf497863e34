from collections import deque
from typing import Dict, Iterable, List

from dvrouter.algoritmos.dv import optimize, poison
from dvrouter.config import Link
from dvrouter.messages import decode_table, encode_table
from dvrouter.table import RoutingTable

# In-process run of the DV exchange, no sockets:
#   python simulate_local.py
# Topología demo: A-B (1), B-C (1), C-D (3), A-D (7)
DEMO_LINKS = [Link(("A", "B"), 1), Link(("B", "C"), 1), Link(("C", "D"), 3), Link(("A", "D"), 7)]


def build_tables(routers: Iterable[str], links: List[Link]) -> Dict[str, RoutingTable]:
    tables = {}
    for rid in routers:
        direct = {l.other_end(rid): l.weight for l in links if l.touches(rid)}
        tables[rid] = RoutingTable.initial(rid, direct)
    return tables


def simulate(routers: Iterable[str], links: List[Link], max_rounds: int = 100) -> Dict[str, RoutingTable]:
    """
    Periodic round = every router sends its full table to each neighbor;
    a receiver that changes answers the sender with a poisoned table
    (event-driven, like the live receive loop). Stops after the first
    round in which no router changed.
    """
    tables = build_tables(routers, links)
    neighbors = {rid: list(t.direct_link_cost) for rid, t in tables.items()}

    for _ in range(max_rounds):
        queue = deque()
        for rid, t in tables.items():
            wire = encode_table(t)  # same bytes a datagram would carry
            for nb in neighbors[rid]:
                queue.append((nb, wire))

        any_change = False
        while queue:
            target_id, wire = queue.popleft()
            adv = decode_table(wire)
            target = tables[target_id]
            if optimize(target, adv):
                any_change = True
                queue.append((adv.owner_id, encode_table(poison(target, adv.owner_id))))
        if not any_change:
            break
    return tables


if __name__ == "__main__":
    routers = sorted({r for l in DEMO_LINKS for r in l.connected_router_ids})
    for rid, t in simulate(routers, DEMO_LINKS).items():
        print()
        print(t.render())
