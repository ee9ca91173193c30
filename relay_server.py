#!/usr/bin/env python3
"""
Catalog Relay Server

Runs the backend relay that forwards catalog requests server-side.

Usage:
    python3 relay_server.py
    python3 relay_server.py --host 0.0.0.0 --port 8787 --verbose
"""

import argparse
import logging

from dotenv import load_dotenv

from catalog_extractor.common import load_settings, setup_logging
from catalog_extractor.relay import create_relay_server

logger = logging.getLogger("catalog_extractor.relay")


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="Run the catalog relay endpoint")
    parser.add_argument("--host", help="Bind address (default: relay.host)")
    parser.add_argument("--port", type=int, help="Port (default: relay.port)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logging(verbose=args.verbose)
    server = create_relay_server(load_settings(), host=args.host, port=args.port)
    host, port = server.server_address[:2]
    logger.info("Relay listening on http://%s:%d", host, port)

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
