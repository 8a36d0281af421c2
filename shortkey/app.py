"""
Main entry point for the shortkey service.

Concurrency: two listeners share one in-memory store. The registration
listener runs its accept loop on a background thread and gives every
connection its own thread; the HTTP listener is uvicorn, which runs the
(synchronous) redirect handler on its threadpool. The store's lock is the
only coordination between them.

Usage:
    python -m shortkey

Environment variables (all optional, see shortkey.config):
    SHORTKEY_HOST - Address both listeners bind to
    SHORTKEY_SOCKET_PORT - Registration port (default 1337)
    SHORTKEY_HTTP_PORT - Redirect port (default 8080)
    SHORTKEY_KEY_LENGTH - Generated key length (default 6)
    SHORTKEY_SEED_URLS - JSON list of URLs registered at startup
    SHORTKEY_LOG_LEVEL - Logging level
"""

import logging
import socket
import sys
from typing import Iterable

import uvicorn

from shortkey.config import Config, load_config
from shortkey.lib.keygen import KeyGenerator
from shortkey.lib.store import URLStore
from shortkey.lib.common.logging_config import setup_logging, get_logger
from shortkey.line_server import RegistrationServer
from shortkey.web_app import create_app


def build_store(config: Config) -> URLStore:
    """Create the store shared by both front ends."""
    generator = KeyGenerator(
        length=config.key_length,
        max_attempts=config.max_key_attempts,
    )
    return URLStore(key_generator=generator, logger=get_logger("shortkey.store"))


def seed_store(store: URLStore, urls: Iterable[str], logger: logging.Logger) -> None:
    """Register ``urls`` directly and log the resulting keys."""
    for url in urls:
        key = store.register(url)
        logger.info(f"Seeded {key} -> {url}")


def build_http_server(config: Config, store: URLStore) -> uvicorn.Server:
    app = create_app(store, config, logger=get_logger("shortkey.web"))
    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.http_port,
        log_level=config.log_level.lower(),
        access_log=False,
        timeout_keep_alive=config.http_timeout_keep_alive,
        h11_max_incomplete_event_size=config.http_max_header_bytes,
    )
    return uvicorn.Server(uvicorn_config)


def bind_http_socket(host: str, port: int) -> socket.socket:
    """Bind the HTTP listening socket; uvicorn starts listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("shortkey service")
    logger.info(f"Configuration: {config.model_dump()}")

    store = build_store(config)
    seed_store(store, config.seed_urls, logger)

    try:
        registration = RegistrationServer(
            store,
            host=config.host,
            port=config.socket_port,
            logger=get_logger("shortkey.line_server"),
        )
    except OSError:
        logger.error("Cannot open registration listener, exiting")
        sys.exit(1)

    # Both ports are bound before either listener starts serving.
    try:
        http_socket = bind_http_socket(config.host, config.http_port)
    except OSError as e:
        logger.error(f"Failed to bind HTTP server to {config.host}:{config.http_port}: {e}")
        registration.shutdown()
        sys.exit(1)

    registration.start_in_thread()

    # uvicorn handles SIGINT/SIGTERM itself. A failed startup surfaces as
    # SystemExit with uvicorn's own status code, which is mapped to 1.
    server = build_http_server(config, store)
    try:
        logger.info(f"Starting HTTP server on {config.host}:{config.http_port}")
        server.run(sockets=[http_socket])
    except SystemExit as e:
        if e.code not in (None, 0):
            logger.error(f"HTTP server failed to start (status {e.code}), exiting")
            sys.exit(1)
        raise
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)
    finally:
        logger.info("Shutting down shortkey service...")
        registration.shutdown()
        http_socket.close()

    logger.info(f"Service stopped with {len(store)} entries")


if __name__ == "__main__":
    main()
