import pytest

from dvrouter.config import (ConfigError, Link, RouterConfig, load_links, load_names,
                             load_settings, load_topo)


@pytest.fixture
def files(tmp_path):
    names = tmp_path / "names.txt"
    names.write_text("# id host port\nA 127.0.0.1 5001\n\nB 127.0.0.1 5002\nC 10.0.0.3 5003\n")
    topo = tmp_path / "topo.txt"
    topo.write_text("A B 1\nB C 2\n# no A-C link\n")
    return str(names), str(topo)


def test_load_names(files):
    names = load_names(files[0])
    assert names == {"A": ("127.0.0.1", 5001), "B": ("127.0.0.1", 5002),
                     "C": ("10.0.0.3", 5003)}


def test_load_links_and_topo(files):
    assert load_links(files[1]) == [Link(("A", "B"), 1), Link(("B", "C"), 2)]
    assert load_topo(files[1]) == {"A": {"B": 1}, "B": {"A": 1, "C": 2}, "C": {"B": 2}}


def test_router_config_for_middle_router(files):
    cfg = RouterConfig.load("B", *files)
    assert cfg.port == 5002
    assert sorted(cfg.neighbor_ids()) == ["A", "C"]
    assert cfg.direct_links() == {"A": 1, "C": 2}
    assert cfg.address_of("C") == ("10.0.0.3", 5003)
    assert cfg.neighbor_addresses() == {"A": ("127.0.0.1", 5001), "C": ("10.0.0.3", 5003)}


def test_router_config_for_edge_router(files):
    cfg = RouterConfig.load("A", *files)
    assert cfg.neighbor_ids() == ["B"]
    with pytest.raises(ConfigError):
        cfg.address_of("Z")


def test_unknown_router_id(files):
    with pytest.raises(ConfigError):
        RouterConfig.load("Z", *files)


def test_neighbor_without_address(tmp_path, files):
    topo = tmp_path / "topo2.txt"
    topo.write_text("A Q 1\n")
    with pytest.raises(ConfigError):
        RouterConfig.load("A", files[0], str(topo))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_names(str(tmp_path / "nope.txt"))


@pytest.mark.parametrize("line", [
    "A B", "A B x", "A B 0", "A B -3", "A B 1.5", "A A 1",
])
def test_bad_topo_lines(tmp_path, line):
    p = tmp_path / "topo.txt"
    p.write_text(line + "\n")
    with pytest.raises(ConfigError):
        load_links(str(p))


def test_duplicate_link(tmp_path):
    p = tmp_path / "topo.txt"
    p.write_text("A B 1\nB A 2\n")
    with pytest.raises(ConfigError):
        load_links(str(p))


@pytest.mark.parametrize("line", [
    "A 127.0.0.1", "A 127.0.0.1 port", "A 127.0.0.1 0", "A 127.0.0.1 70000",
])
def test_bad_names_lines(tmp_path, line):
    p = tmp_path / "names.txt"
    p.write_text(line + "\n")
    with pytest.raises(ConfigError):
        load_names(str(p))


def test_duplicate_name(tmp_path):
    p = tmp_path / "names.txt"
    p.write_text("A 127.0.0.1 5001\nA 127.0.0.1 5002\n")
    with pytest.raises(ConfigError):
        load_names(str(p))


def test_load_settings_from_env_file(tmp_path, monkeypatch):
    for var in ("ROUTER_ID", "NAMES_FILE", "TOPO_FILE", "REDIS_HOST", "REDIS_PORT",
                "REDIS_PWD", "SECTION", "TOPO", "LOG_LEVEL"):
        # setenv first so monkeypatch also undoes what load_dotenv writes
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    env = tmp_path / ".env"
    env.write_text("ROUTER_ID=B\nREDIS_HOST=redis.local\nREDIS_PORT=6380\n"
                   "SECTION=sec20\nTOPO=line\nLOG_LEVEL=debug\n")
    s = load_settings(str(env))
    assert s.router_id == "B"
    assert s.redis_host == "redis.local"
    assert s.redis_port == 6380
    assert s.log_level == "DEBUG"
    assert s.channel() == "sec20.line.B"
    assert s.channel("C") == "sec20.line.C"
    assert s.names_file is None


def test_bad_redis_port(tmp_path, monkeypatch):
    monkeypatch.setenv("REDIS_PORT", "many")
    with pytest.raises(ConfigError):
        load_settings(str(tmp_path / "missing.env"))
