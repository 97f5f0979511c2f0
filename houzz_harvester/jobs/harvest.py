"""CLI job that walks the directory listing and checkpoints every business."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from houzz_harvester.core.checkpoint import CheckpointStore, derive_visited_index
from houzz_harvester.core.config import ConfigError, Settings, get_settings, validate_range
from houzz_harvester.etl.export import BUSINESS_COLUMNS, export_table
from houzz_harvester.etl.extract import extract_business
from houzz_harvester.etl.listing import ListingPaginator
from houzz_harvester.vendors.page_client import PageClient

logger = logging.getLogger(__name__)


@dataclass
class HarvestSummary:
    listing_pages: int = 0
    links_found: int = 0
    saved: int = 0
    already_saved: int = 0
    missing_section: int = 0
    total_records: int = 0


def run_harvest(
    page_client: PageClient,
    store: CheckpointStore,
    settings: Settings,
    *,
    start: int,
    end: int,
    step: int,
    xlsx_path: Optional[str] = None,
) -> HarvestSummary:
    """Harvest every listing page in ``[start, end]`` and return run counters.

    Navigation errors are not caught: the checkpoint already holds everything
    saved so far, and rerunning resumes from it.
    """
    validate_range(start, end, step)

    results = store.load()
    visited = derive_visited_index(results)
    summary = HarvestSummary()
    paginator = ListingPaginator(page_client, settings)

    logger.info("Starting harvest fi=%s..%s step=%s (%d already saved)", start, end, step, len(results))

    for fi, _url, links in paginator.iter_listing_pages(start, end, step):
        summary.listing_pages += 1
        summary.links_found += len(links)

        for url in links:
            if url in visited:
                logger.info("Skip (saved): %s", url)
                summary.already_saved += 1
                continue

            logger.info("Visiting: %s", url)
            page_client.navigate(url)
            page_client.wait(settings.business_settle_ms)
            record = extract_business(page_client.snapshot(), url=url)

            if record is not None:
                store.append(results, record)
                visited.add(url)
                summary.saved += 1
                logger.info("Saved %s (%d total)", url, len(results))
            else:
                summary.missing_section += 1
                logger.warning("No business section on %s", url)

            page_client.wait(settings.business_sleep_ms)

        logger.info("Finished fi=%s; sleeping %.1fs", fi, settings.page_sleep_ms / 1000)
        page_client.wait(settings.page_sleep_ms)

    summary.total_records = len(results)

    if xlsx_path:
        export_table(results, BUSINESS_COLUMNS, xlsx_path)

    logger.info(
        "Completed harvest: pages=%d saved=%d skipped=%d missing=%d total=%d",
        summary.listing_pages,
        summary.saved,
        summary.already_saved,
        summary.missing_section,
        summary.total_records,
    )
    return summary


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Harvest business profiles from the directory listing")
    parser.add_argument("--start", type=int, default=settings.start_fi, help="First listing offset (fi)")
    parser.add_argument("--end", type=int, default=settings.end_fi, help="Last listing offset (fi), inclusive")
    parser.add_argument("--step", type=int, default=settings.step, help="Offset increment between listing pages")
    parser.add_argument("--output-json", default=settings.output_json, help="Checkpoint JSON file")
    parser.add_argument("--output-xlsx", default=settings.output_xlsx, help="Spreadsheet written at the end of the run")
    parser.add_argument("--no-export", action="store_true", help="Skip the spreadsheet export")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")

    try:
        settings = get_settings()
        args = build_parser(settings).parse_args(argv)
        if args.headed:
            settings = replace(settings, headless=False)

        with PageClient(settings) as page_client:
            run_harvest(
                page_client,
                CheckpointStore(args.output_json),
                settings,
                start=args.start,
                end=args.end,
                step=args.step,
                xlsx_path=None if args.no_export else args.output_xlsx,
            )
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except Exception as exc:  # pragma: no cover - CLI fallback
        logger.error("Harvest stopped: %s. Rerun to resume from the checkpoint.", exc, exc_info=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
