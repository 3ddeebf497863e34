import json
from unittest import mock

import redis

from dvrouter.config import Settings
from dvrouter.monitor import TablePublisher, make_publisher, snapshot
from dvrouter.table import INFINITY, RouteRecord, RoutingTable


def table():
    t = RoutingTable.initial("A", {"B": 1})
    t.add_entry("C", RouteRecord(INFINITY, "B"))
    return t


def test_snapshot_shape():
    snap = snapshot(table(), ts=12.5)
    assert snap == {
        "router": "A",
        "ts": 12.5,
        "routes": [
            {"dest": "A", "distance": 0, "next_hop": "A"},
            {"dest": "B", "distance": 1, "next_hop": "B"},
            {"dest": "C", "distance": None, "next_hop": "B"},
        ],
    }


def test_publish_goes_to_channel():
    client = mock.Mock()
    pub = TablePublisher(client, "sec10.topo1.A")
    assert pub.publish(table()) is True
    channel, body = client.publish.call_args[0]
    assert channel == "sec10.topo1.A"
    assert json.loads(body)["router"] == "A"


def test_publish_failure_is_swallowed():
    client = mock.Mock()
    client.publish.side_effect = redis.ConnectionError("down")
    assert TablePublisher(client, "x").publish(table()) is False


def test_no_publisher_without_redis_host():
    assert make_publisher(Settings(router_id="A")) is None


def test_publisher_uses_settings_channel():
    s = Settings(router_id="B", redis_host="localhost", section="s1", topo="t1")
    pub = make_publisher(s)
    assert pub.channel == "s1.t1.B"
    assert isinstance(pub.client, redis.Redis)
