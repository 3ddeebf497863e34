import queue
import socket
import threading

import pytest

from dvrouter.config import Link, RouterConfig
from dvrouter.messages import encode_table


class FakeTransport:
    """In-memory stand-in for SocketTransport; records every send."""

    def __init__(self, max_size=1048):
        self.max_size = max_size
        self.sent = []
        self.inbox = queue.Queue()
        self.bound = False
        self._lock = threading.Lock()

    def bind(self):
        self.bound = True

    def send_table(self, to_id, table):
        data = encode_table(table, self.max_size)
        with self._lock:
            self.sent.append((to_id, table, data))

    def receive(self):
        try:
            return self.inbox.get(timeout=0.05)
        except queue.Empty:
            return None

    def close(self):
        self.bound = False

    def sent_to(self, to_id):
        with self._lock:
            return [t for nb, t, _ in self.sent if nb == to_id]


def make_config(router_id, links, base_port=6000):
    ids = sorted({r for l in links for r in l.connected_router_ids} | {router_id})
    names = {rid: ("127.0.0.1", base_port + i) for i, rid in enumerate(ids)}
    return RouterConfig.build(router_id, names, links)


def free_udp_ports(n):
    socks = [socket.socket(socket.AF_INET, socket.SOCK_DGRAM) for _ in range(n)]
    try:
        for s in socks:
            s.bind(("127.0.0.1", 0))
        return [s.getsockname()[1] for s in socks]
    finally:
        for s in socks:
            s.close()


LINE_LINKS = [Link(("A", "B"), 1), Link(("B", "C"), 1)]


@pytest.fixture
def fake_transport():
    return FakeTransport()
