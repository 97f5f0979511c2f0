"""Convert a saved harvest JSON file into a spreadsheet."""

import argparse
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from houzz_harvester.core.config import ConfigError, Settings, get_settings
from houzz_harvester.etl.export import BUSINESS_COLUMNS, CONTENT_COLUMNS, export_table

logger = logging.getLogger(__name__)

LAYOUTS = {
    "business": BUSINESS_COLUMNS,
    "content": CONTENT_COLUMNS,
}


def load_dataset(path: Path) -> List[Any]:
    """Read the dataset, exiting with status 1 when it is missing or unusable."""
    if not path.exists():
        logger.error("%s not found", path)
        raise SystemExit(1)

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except ValueError as exc:  # JSONDecodeError and UnicodeDecodeError
        logger.error("JSON is empty or invalid: %s (%s)", path, exc)
        raise SystemExit(1) from exc

    if not isinstance(data, list) or not data:
        logger.error("JSON is empty or invalid: %s", path)
        raise SystemExit(1)

    return data


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert harvested JSON into an Excel workbook")
    parser.add_argument("--input", dest="input_path", default=settings.output_json, help="Harvest JSON file")
    parser.add_argument("--output", dest="output_path", default=settings.output_xlsx, help="Workbook to write")
    parser.add_argument(
        "--layout",
        choices=sorted(LAYOUTS),
        default="business",
        help="Column layout: full business profile or url/content dump",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    try:
        settings = get_settings()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc

    args = build_parser(settings).parse_args(argv)

    rows = [item if isinstance(item, dict) else {} for item in load_dataset(Path(args.input_path))]
    export_table(rows, LAYOUTS[args.layout], args.output_path)
    logger.info("Excel file created: %s", args.output_path)


if __name__ == "__main__":
    main()
