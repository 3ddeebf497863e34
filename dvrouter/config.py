import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from dotenv import load_dotenv


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Link:
    connected_router_ids: Tuple[str, str]
    weight: int

    def other_end(self, me: str) -> str:
        a, b = self.connected_router_ids
        return b if a == me else a

    def touches(self, me: str) -> bool:
        return me in self.connected_router_ids


def _lines(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                line = line.strip()
                if not line or line.startswith("#"): continue
                yield lineno, line.split()
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e


def load_names(path: str) -> Dict[str, Tuple[str, int]]:
    m = {}
    for lineno, parts in _lines(path):
        if len(parts) != 3:
            raise ConfigError(f"{path}:{lineno}: expected '<id> <host> <port>'")
        nid, host, port = parts
        try:
            port = int(port)
        except ValueError:
            raise ConfigError(f"{path}:{lineno}: bad port {port!r}") from None
        if not 0 < port < 65536:
            raise ConfigError(f"{path}:{lineno}: port {port} out of range")
        if nid in m:
            raise ConfigError(f"{path}:{lineno}: router {nid} listed twice")
        m[nid] = (host, port)
    return m


def load_links(path: str) -> List[Link]:
    links = []
    seen = set()
    for lineno, parts in _lines(path):
        if len(parts) != 3:
            raise ConfigError(f"{path}:{lineno}: expected '<a> <b> <weight>'")
        u, v, w = parts
        try:
            w = int(w)
        except ValueError:
            raise ConfigError(f"{path}:{lineno}: weight {w!r} is not an integer") from None
        if w < 1:
            raise ConfigError(f"{path}:{lineno}: weight must be >= 1")
        if u == v:
            raise ConfigError(f"{path}:{lineno}: link from {u} to itself")
        key = frozenset((u, v))
        if key in seen:
            raise ConfigError(f"{path}:{lineno}: duplicate link {u}-{v}")
        seen.add(key)
        links.append(Link((u, v), w))
    return links


def load_topo(path: str) -> Dict[str, Dict[str, int]]:
    G = {}
    for link in load_links(path):
        u, v = link.connected_router_ids
        G.setdefault(u, {})[v] = link.weight
        G.setdefault(v, {})[u] = link.weight
    return G


@dataclass(frozen=True)
class RouterConfig:
    """Static view of the network from one router; read-only after load."""
    router_id: str
    host: str
    port: int
    links: Tuple[Link, ...]
    addresses: Dict[str, Tuple[str, int]]

    @classmethod
    def build(cls, router_id: str, names: Dict[str, Tuple[str, int]],
              links: List[Link]) -> "RouterConfig":
        if router_id not in names:
            raise ConfigError(f"router {router_id} is not in the names file")
        mine = tuple(l for l in links if l.touches(router_id))
        for l in mine:
            nb = l.other_end(router_id)
            if nb not in names:
                raise ConfigError(f"neighbor {nb} of {router_id} has no address")
        host, port = names[router_id]
        return cls(router_id, host, port, mine, dict(names))

    @classmethod
    def load(cls, router_id: str, names_path: str, topo_path: str) -> "RouterConfig":
        return cls.build(router_id, load_names(names_path), load_links(topo_path))

    def neighbor_ids(self) -> List[str]:
        return [l.other_end(self.router_id) for l in self.links]

    def direct_links(self) -> Dict[str, int]:
        return {l.other_end(self.router_id): l.weight for l in self.links}

    def address_of(self, router_id: str) -> Tuple[str, int]:
        try:
            return self.addresses[router_id]
        except KeyError:
            raise ConfigError(f"no address for router {router_id}") from None

    def neighbor_addresses(self) -> Dict[str, Tuple[str, int]]:
        return {nb: self.addresses[nb] for nb in self.neighbor_ids()}


@dataclass
class Settings:
    router_id: Optional[str] = None
    names_file: Optional[str] = None
    topo_file: Optional[str] = None
    redis_host: Optional[str] = None
    redis_port: int = 6379
    redis_pwd: Optional[str] = None
    section: str = "sec10"
    topo: str = "topo1"
    log_level: str = "INFO"

    def channel(self, router_id: Optional[str] = None) -> str:
        return f"{self.section}.{self.topo}.{router_id or self.router_id}"


def load_settings(env_path: Optional[str] = None) -> Settings:
    # ── settings from .env (real environment wins) ──
    load_dotenv(env_path)
    try:
        redis_port = int(os.getenv("REDIS_PORT", "6379"))
    except ValueError:
        raise ConfigError("REDIS_PORT must be an integer") from None
    return Settings(
        router_id=os.getenv("ROUTER_ID") or None,
        names_file=os.getenv("NAMES_FILE") or None,
        topo_file=os.getenv("TOPO_FILE") or None,
        redis_host=os.getenv("REDIS_HOST") or None,
        redis_port=redis_port,
        redis_pwd=os.getenv("REDIS_PWD") or None,
        section=os.getenv("SECTION", "sec10"),
        topo=os.getenv("TOPO", "topo1"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
