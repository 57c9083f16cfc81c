"""Entry point for the web version: python -m tierclick.web"""

import argparse

from tierclick.log import setup_logging
from tierclick.web.server import run_server


def main() -> None:
    parser = argparse.ArgumentParser(description="Tierclick — Web API")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    parser.add_argument("--save-dir", default=None, help="Directory for save files (default: ~/.tierclick)")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args()

    log = setup_logging(args.log_level.upper())
    log.info("serving on http://%s:%s/", args.host, args.port)

    run_server(host=args.host, port=args.port, debug=args.debug, save_dir=args.save_dir)


if __name__ == "__main__":
    main()
