"""Command line entry point.

Usage:
  flood-alert serve [--host HOST] [--port PORT]
  flood-alert sync
  flood-alert notify
  flood-alert init-db
"""

import argparse
import asyncio
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from src.config import get_settings
from src.database import SessionLocal, init_db
from src.services.exceptions import TideFetchError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging for command line runs."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def cmd_sync(_: argparse.Namespace) -> int:
    from src.services.tide_sync import update_tide_predictions

    init_db()
    db = SessionLocal()
    try:
        count = asyncio.run(update_tide_predictions(db))
    except TideFetchError as e:
        logger.error(f"Tide sync failed: {e}")
        return 1
    except SQLAlchemyError as e:
        logger.error(f"Tide sync could not update the cache: {e}")
        db.rollback()
        return 1
    finally:
        db.close()

    print(f"Successfully updated {count} rows.")
    return 0


def cmd_notify(_: argparse.Namespace) -> int:
    from src.services.alerts import send_flood_alerts

    init_db()
    db = SessionLocal()
    try:
        stats = asyncio.run(send_flood_alerts(db))
    finally:
        db.close()

    print(f"Sent {stats['sent']} alerts ({stats['failed']} failed, {stats['floods']} floods).")
    return 1 if stats["failed"] else 0


def cmd_init_db(_: argparse.Namespace) -> int:
    init_db()
    print("Database schema is up to date.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flood-alert",
        description="Flood alerts for the Mill Valley-Sausalito bike path",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the web server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=cmd_serve)

    sync = sub.add_parser("sync", help="Fetch tide predictions and update the cache")
    sync.set_defaults(func=cmd_sync)

    notify = sub.add_parser("notify", help="Email flood alerts to the mailing list")
    notify.set_defaults(func=cmd_notify)

    init = sub.add_parser("init-db", help="Create database tables")
    init.set_defaults(func=cmd_init_db)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
