import argparse
import logging
import sys

from dvrouter.config import ConfigError, RouterConfig, load_settings
from dvrouter.monitor import make_publisher
from dvrouter.node import Node

# Uso:
#   python run_node.py --id A --names configs/names-demo.txt --topo configs/topo-demo.txt
# Any flag may come from .env instead (ROUTER_ID, NAMES_FILE, TOPO_FILE).


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Distance-vector router node over UDP")
    parser.add_argument("--id", dest="router_id", default=None, help="this router's id")
    parser.add_argument("--names", dest="names_file", default=None,
                        help="file of '<id> <host> <port>' lines")
    parser.add_argument("--topo", dest="topo_file", default=None,
                        help="file of '<a> <b> <weight>' lines")
    parser.add_argument("--env", dest="env_path", default=None,
                        help="path to a .env file (default: ./.env)")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    settings = load_settings(args.env_path)
    router_id = args.router_id or settings.router_id
    names = args.names_file or settings.names_file
    topo = args.topo_file or settings.topo_file
    logging.basicConfig(level=settings.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if not router_id or not names or not topo:
        raise SystemExit("Uso: python run_node.py --id A --names <path> --topo <path>")
    try:
        config = RouterConfig.load(router_id, names, topo)
    except ConfigError as e:
        raise SystemExit(f"config error: {e}")
    settings.router_id = router_id
    node = Node(config, publisher=make_publisher(settings))
    try:
        node.start()
    except OSError as e:
        raise SystemExit(f"cannot bind port {config.port}: {e}")
    node.run()


if __name__ == "__main__":
    sys.exit(main())
