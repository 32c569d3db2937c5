import argparse
import sys

from . import create_app
from .config import Config, DevConfig, ProdConfig
from .storage.errors import StoreError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonmock",
        description="Serve the collections of a JSON file as a CRUD REST API.",
    )
    parser.add_argument("-db", "--db", dest="db", default=Config.DB_PATH,
                        help="JSON database file (default: %(default)s)")
    parser.add_argument("-port", "--port", dest="port", type=int, default=Config.PORT,
                        help="Server port (default: %(default)s)")
    parser.add_argument("--host", default=Config.HOST,
                        help="Interface to bind (default: %(default)s)")
    parser.add_argument("--debug", action="store_true",
                        help="Run with the Flask debugger and reloader")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config_class = DevConfig if args.debug else ProdConfig

    try:
        app = create_app(config_class, db_path=args.db)
    except StoreError as e:
        print(f"error initializing server: {e}", file=sys.stderr)
        return 1

    print(f"Mock Server running on http://localhost:{args.port}")
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)
    return 0
