"""
PVSync - Command line entry point

Usage:
    pvsync /path/to/solar.db

Uploads every pending sample of the configured trackers to PVOutput.
Exit code is 0 when all trackers were drained, 1 on the first error.
"""

import argparse
import logging
import sys

import httpx

from pvsync import __version__
from pvsync.core.config import Settings, get_settings
from pvsync.core.database import create_db_engine, create_session_maker
from pvsync.core.exceptions import PVSyncError
from pvsync.services.store import SampleStore
from pvsync.services.sync import SyncDriver, SyncReport
from pvsync.services.uploader import PVOutputUploader

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pvsync",
        description="Upload pending solar samples to PVOutput",
    )
    parser.add_argument("db_path", help="Path to the SQLite sample store")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def sync(db_path: str, settings: Settings) -> SyncReport:
    """Drain the sample store at db_path using settings."""
    api_key = settings.api_key()

    engine = create_db_engine(db_path)
    try:
        store = SampleStore(create_session_maker(engine))
        with httpx.Client(timeout=settings.pvoutput_timeout) as client:
            driver = SyncDriver(
                store=store,
                uploader=PVOutputUploader(client, settings.pvoutput_url),
                trackers=settings.trackers,
                api_key=api_key,
                batch_size=settings.batch_size,
                tz=settings.pvoutput_tz,
                commit_on_http_error=settings.commit_on_http_error,
            )
            return driver.run()
    finally:
        engine.dispose()


def main(argv: list[str] | None = None) -> int:
    """Entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = get_settings()
        logging.getLogger().setLevel(settings.log_level)
        sync(args.db_path, settings)
    except PVSyncError as e:
        logger.error(f"❌ Sync aborted: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
