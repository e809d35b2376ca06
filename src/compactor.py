from __future__ import annotations

import argparse
import logging
import os
import sys

from src.adapters.persistence import JsonCatalogRepository, S3CatalogRepository
from src.adapters.persistence.local_gtfs_archive import open_gtfs_archive
from src.app.ports.output import ICatalogRepository
from src.app.services.schedule_compactor_service import ScheduleCompactorService
from src.domain.exceptions import MissingTableError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compact a static GTFS archive into the route/stop catalog."
    )
    parser.add_argument(
        "--archive",
        default=os.getenv("GTFS_ARCHIVE", "data/raw/sweden.zip"),
        help="GTFS zip file or directory of extracted .txt tables",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Output directory (default: CATALOG_DIR or public/data)",
    )
    parser.add_argument(
        "--s3",
        action="store_true",
        help="Publish to CATALOG_BUCKET instead of a local directory",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    repository: ICatalogRepository
    if args.s3 or (os.getenv("CATALOG_BUCKET") and not args.out):
        repository = S3CatalogRepository()
    else:
        repository = JsonCatalogRepository(base_path=args.out)

    service = ScheduleCompactorService(
        archive=open_gtfs_archive(args.archive), catalog_repository=repository
    )
    try:
        catalog = service.run()
    except MissingTableError as exc:
        logger.error("%s", exc)
        return 1
    except FileNotFoundError as exc:
        logger.error("Schedule archive not found: %s", exc)
        return 1

    logger.info(
        "%d lines saved (%d routes excluded)",
        catalog.report.lines_written,
        len(catalog.report.excluded_routes),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
