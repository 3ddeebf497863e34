"""
Optional Redis pub/sub feed of routing-table snapshots.

Each router publishes to "{SECTION}.{TOPO}.{ROUTER_ID}"; the streamlit
dashboard (app.py) subscribes to those channels. Routing never depends
on this feed: publish failures are logged and dropped.
"""
import json
import logging
import time
from typing import Any, Dict, Optional

import redis

from dvrouter.config import Settings
from dvrouter.table import INFINITY, RoutingTable

log = logging.getLogger(__name__)


def snapshot(table: RoutingTable, ts: Optional[float] = None) -> Dict[str, Any]:
    routes = []
    for dst, rec in sorted(table.entries().items()):
        d = None if rec.distance == INFINITY else rec.distance
        routes.append({"dest": dst, "distance": d, "next_hop": rec.next_hop})
    return {"router": table.owner_id, "ts": ts if ts is not None else time.time(),
            "routes": routes}


class TablePublisher:
    def __init__(self, client: "redis.Redis", channel: str):
        self.client = client
        self.channel = channel

    def publish(self, table: RoutingTable) -> bool:
        try:
            self.client.publish(self.channel, json.dumps(snapshot(table)))
        except (redis.RedisError, OSError) as e:
            log.warning("[%s] monitor publish to %s failed: %s", table.owner_id, self.channel, e)
            return False
        return True


def get_client(settings: Settings) -> "redis.Redis":
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_pwd,
        decode_responses=True,
    )


def make_publisher(settings: Settings) -> Optional[TablePublisher]:
    if not settings.redis_host:
        return None
    return TablePublisher(get_client(settings), settings.channel())
