import argparse
import logging
import queue
import signal
import sys
import threading
from types import FrameType

from news_svc.api.main import create_app
from news_svc.app_shell.config import ConfigError, Settings, get_settings
from news_svc.app_shell.context import AppContext
from news_svc.app_shell.log import configure_logging
from news_svc.app_shell.server import HttpServer
from news_svc.domain.entities import Post
from news_svc.domain.errors import PostError

logger = logging.getLogger("news_svc.cli")

# Interval at which the main loop checks for a received signal.
_POLL_SECONDS = 0.5

SAMPLE_POSTS = [
    ("Getting started with Go", "A gentle tour of the language and its tooling."),
    ("RESTful API design", "Resources, verbs and status codes done right."),
    ("GraphQL API patterns", "Schemas, resolvers and avoiding N+1 queries."),
    ("Indexing in MongoDB", "Text indexes, compound indexes and sort order."),
    ("Progressive enhancement with htmx", "Partial page updates without a SPA."),
]


def wait_for_stop(server: HttpServer, stop: threading.Event) -> bool:
    """
    Block until a shutdown signal arrives or the listener reports an error.

    Returns True when the listener failed.
    """
    notify = server.notify()
    while not stop.is_set():
        try:
            err = notify.get(timeout=_POLL_SECONDS)
        except queue.Empty:
            continue
        logger.error("HTTP server error: %s", err)
        return True
    return False


def handle_serve(settings: Settings) -> int:
    try:
        ctx = AppContext.create(settings)
    except Exception:
        logger.exception("unable to connect to MongoDB")
        return 1

    stop = threading.Event()

    def _on_signal(signum: int, frame: FrameType | None) -> None:
        logger.info("shutdown signal received: %s", signal.Signals(signum).name)
        stop.set()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    try:
        server = HttpServer(
            create_app(ctx),
            host=settings.server_host,
            port=settings.server_port,
            shutdown_timeout=settings.shutdown_timeout,
        ).start()
        logger.info("starting http server port=%s", settings.server_port)

        failed = wait_for_stop(server, stop)

        try:
            server.shutdown()
        except TimeoutError as e:
            logger.error("server shutdown error: %s", e)
            return 1
        if failed:
            return 1
        logger.info("server stopped gracefully")
        return 0
    finally:
        ctx.close()


def handle_seed(settings: Settings) -> int:
    ctx = AppContext.create(settings)
    try:
        for title, content in SAMPLE_POSTS:
            post_id = ctx.post_service.create(Post(title=title, content=content))
            print(f"Created post {post_id}: {title}")
    except PostError as e:
        logger.error("seed failed: %s", e)
        return 1
    finally:
        ctx.close()
    return 0


def handle_ensure_indexes(settings: Settings) -> int:
    # AppContext.create already ensures indexes on the repo it builds.
    ctx = AppContext.create(settings)
    ctx.close()
    print("Indexes ensured.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="News service")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Run the HTTP server (default)")
    subparsers.add_parser("seed", help="Insert sample posts")
    subparsers.add_parser("ensure-indexes", help="Create the posts indexes and exit")

    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ConfigError as e:
        print(f"CRITICAL: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.is_dev)

    if args.command == "seed":
        return handle_seed(settings)
    if args.command == "ensure-indexes":
        return handle_ensure_indexes(settings)
    return handle_serve(settings)


if __name__ == "__main__":
    sys.exit(main())
