import socket
import sys

from dvrouter.messages import MAX_DATAGRAM_SIZE, AdvertisementTooLarge, encode_table
from dvrouter.table import INFINITY, RouteRecord, RoutingTable

# Uso: python send_table.py HOST PORT FROM DEST:DIST:NEXTHOP [DEST:DIST:NEXTHOP ...]
#   DIST may be "inf" for an unreachable (poisoned) route.
# Sends one hand-made advertisement, as if router FROM had sent it.


def parse_route(tok: str):
    dst, dist, nh = tok.split(":")
    d = INFINITY if dist.lower() == "inf" else int(dist)
    if d != INFINITY and d < 0:
        raise ValueError(f"negative distance in {tok!r}")
    return dst, RouteRecord(d, nh)


def build_table(origin: str, routes) -> RoutingTable:
    t = RoutingTable(origin)
    for tok in routes:
        dst, rec = parse_route(tok)
        t.add_entry(dst, rec)
    return t


def main(argv):
    if len(argv) < 5:
        print("Uso: python send_table.py HOST PORT FROM DEST:DIST:NEXTHOP [...]")
        return 1
    host, port, origin = argv[1], int(argv[2]), argv[3]
    try:
        table = build_table(origin, argv[4:])
        data = encode_table(table, MAX_DATAGRAM_SIZE)
    except (ValueError, AdvertisementTooLarge) as e:
        print(f"ERROR {e}")
        return 1
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.sendto(data, (host, port))
    print(f"OK sent {len(data)} bytes from {origin} with {len(table)} routes")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
