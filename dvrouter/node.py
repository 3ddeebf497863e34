import enum
import logging
import threading
from typing import Optional

from dvrouter.algoritmos.dv import optimize, poison
from dvrouter.config import RouterConfig
from dvrouter.messages import (MAX_DATAGRAM_SIZE, AdvertisementTooLarge,
                               MalformedAdvertisement, decode_table)
from dvrouter.monitor import TablePublisher
from dvrouter.table import RoutingTable, UnknownNeighbor
from dvrouter.transport_socket import SocketTransport
from dvrouter.utils import Repeater

log = logging.getLogger(__name__)

BROADCAST_DELAY = 5.0
BROADCAST_INTERVAL = 10.0


class NodeState(enum.Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"


class Node:
    """
    One distance-vector router.

    The table is shared by the broadcast thread (reads) and the receive
    loop (reads and writes); every access goes through self.lock, one
    acquisition per logical operation. Sends happen outside the lock.
    """

    def __init__(self, config: RouterConfig, transport=None,
                 publisher: Optional[TablePublisher] = None,
                 broadcast_delay: float = BROADCAST_DELAY,
                 broadcast_interval: float = BROADCAST_INTERVAL):
        self.state = NodeState.INITIALIZING
        self.config = config
        self.me = config.router_id
        self.neighbors = tuple(config.neighbor_ids())
        self.table = RoutingTable.initial(self.me, config.direct_links())
        self.lock = threading.Lock()
        if transport is None:
            transport = SocketTransport(self.me, config.port, config.neighbor_addresses(),
                                        max_size=MAX_DATAGRAM_SIZE)
        self.transport = transport
        self.publisher = publisher
        self.broadcaster = Repeater(broadcast_interval, self.broadcast,
                                    delay_sec=broadcast_delay, name=f"broadcast-{self.me}")
        self._stop = threading.Event()
        log.info("[%s] initial direct link table\n%s", self.me, self.table.render())

    # ---------- lifecycle ----------
    def start(self):
        self.transport.bind()
        self.broadcaster.start()
        self.state = NodeState.RUNNING
        self._publish()

    def run(self):
        """Receive loop; blocks until stop() is called."""
        if self.state is not NodeState.RUNNING:
            self.start()
        while not self._stop.is_set():
            try:
                data = self.transport.receive()
            except OSError as e:
                if self._stop.is_set():
                    break
                log.warning("[%s] receive failed: %s", self.me, e)
                continue
            if data is None:
                continue
            self.on_datagram(data)

    def stop(self):
        self._stop.set()
        self.broadcaster.stop()

    def close(self):
        self.stop()
        self.transport.close()

    # ---------- handlers ----------
    def on_datagram(self, data: bytes) -> bool:
        try:
            adv = decode_table(data)
        except MalformedAdvertisement as e:
            log.warning("[%s] DROP malformed datagram: %s", self.me, e)
            return False
        return self.on_advertisement(adv)

    def on_advertisement(self, adv: RoutingTable) -> bool:
        origin = adv.owner_id
        log.debug("[%s] INFO from %s (%d routes)", self.me, origin, len(adv))
        with self.lock:
            try:
                changed = optimize(self.table, adv)
            except UnknownNeighbor:
                log.warning("[%s] DROP advertisement from non-neighbor %s", self.me, origin)
                return False
            if not changed:
                return False
            reply = poison(self.table, origin)
            rendered = self.table.render()
        log.info("[%s] optimized table\n%s", self.me, rendered)
        self._publish()
        self._send(origin, reply)
        return True

    # ---------- helpers ----------
    def snapshot(self) -> RoutingTable:
        with self.lock:
            return self.table.copy()

    def broadcast(self):
        # full, unfiltered table to every neighbor
        table = self.snapshot()
        for nb in self.neighbors:
            log.debug("[%s] periodic table -> %s", self.me, nb)
            self._send(nb, table)

    def _send(self, to_id: str, table: RoutingTable) -> bool:
        try:
            self.transport.send_table(to_id, table)
        except AdvertisementTooLarge as e:
            log.error("[%s] not sent to %s: %s", self.me, to_id, e)
            return False
        except (OSError, KeyError) as e:
            log.warning("[%s] send to %s failed: %s", self.me, to_id, e)
            return False
        return True

    def _publish(self):
        if self.publisher is not None:
            self.publisher.publish(self.snapshot())
