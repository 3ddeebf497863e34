import json
from typing import Any, Dict

from dvrouter.table import INFINITY, RouteRecord, RoutingTable

MAX_DATAGRAM_SIZE = 1048


class MalformedAdvertisement(ValueError):
    pass


class AdvertisementTooLarge(ValueError):
    pass


def msg_info(table: RoutingTable) -> Dict[str, Any]:
    payload = {}
    for dst, rec in table.entries().items():
        d = None if rec.distance == INFINITY else int(rec.distance)
        payload[dst] = [d, rec.next_hop]
    return {"proto": "dv", "type": "INFO", "from": table.owner_id, "payload": payload}


def encode_table(table: RoutingTable, max_size: int = MAX_DATAGRAM_SIZE) -> bytes:
    data = json.dumps(msg_info(table), sort_keys=True, separators=(",", ":")).encode("utf-8")
    if len(data) > max_size:
        raise AdvertisementTooLarge(
            f"table of {table.owner_id} encodes to {len(data)} bytes (max {max_size})")
    return data


def decode_table(data: bytes) -> RoutingTable:
    try:
        msg = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedAdvertisement(f"undecodable datagram: {e}") from e

    if not isinstance(msg, dict) or msg.get("proto") != "dv" or msg.get("type") != "INFO":
        raise MalformedAdvertisement("not a dv INFO message")
    origin = msg.get("from")
    payload = msg.get("payload")
    if not isinstance(origin, str) or not origin:
        raise MalformedAdvertisement("missing sender id")
    if not isinstance(payload, dict):
        raise MalformedAdvertisement("payload is not a table")

    table = RoutingTable(origin)
    for dst, pair in payload.items():
        if not isinstance(pair, list) or len(pair) != 2:
            raise MalformedAdvertisement(f"bad route for {dst}: {pair!r}")
        d, nh = pair
        if d is None:
            d = INFINITY
        elif isinstance(d, bool) or not isinstance(d, int) or d < 0:
            raise MalformedAdvertisement(f"bad distance for {dst}: {d!r}")
        if not isinstance(nh, str):
            raise MalformedAdvertisement(f"bad next hop for {dst}: {nh!r}")
        table.add_entry(dst, RouteRecord(d, nh))
    return table
