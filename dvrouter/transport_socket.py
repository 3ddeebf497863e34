import logging
import socket
from typing import Dict, Optional, Tuple

from dvrouter.messages import MAX_DATAGRAM_SIZE, encode_table
from dvrouter.table import RoutingTable

log = logging.getLogger(__name__)


class TransportError(OSError):
    pass


class SocketTransport:
    """UDP endpoint of one router: one advertisement per datagram."""

    def __init__(self, me: str, port: int, neighbors: Dict[str, Tuple[str, int]],
                 host: str = "0.0.0.0", max_size: int = MAX_DATAGRAM_SIZE,
                 recv_timeout: Optional[float] = 1.0):
        self.me = me
        self.host = host
        self.port = port
        self.neighbors = dict(neighbors)
        self.max_size = max_size
        self.recv_timeout = recv_timeout
        self._sock: Optional[socket.socket] = None

    def bind(self):
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            s.bind((self.host, self.port))
        except OSError:
            s.close()
            raise
        s.settimeout(self.recv_timeout)
        self._sock = s
        log.info("[%s] listening on udp %s:%d", self.me, *self.address)

    @property
    def address(self) -> Tuple[str, int]:
        return self._sock.getsockname()[:2]

    def send_table(self, to_id: str, table: RoutingTable):
        data = encode_table(table, self.max_size)  # may raise AdvertisementTooLarge
        host, port = self.neighbors[to_id]
        sock = self._sock
        if sock is None:
            raise TransportError(f"[{self.me}] transport is closed")
        try:
            sock.sendto(data, (host, port))
        except OSError as e:
            raise TransportError(f"send to {to_id} at {host}:{port} failed: {e}") from e

    def receive(self) -> Optional[bytes]:
        """Next datagram, or None if the receive timeout expires first."""
        sock = self._sock
        if sock is None:
            raise TransportError(f"[{self.me}] transport is closed")
        try:
            data, _ = sock.recvfrom(self.max_size)
        except socket.timeout:
            return None
        return data

    def close(self):
        if self._sock is not None:
            self._sock.close()
            self._sock = None
