"""JSON checkpoint holding every business harvested so far."""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Set, Union

from houzz_harvester.core.models import BusinessRecord

logger = logging.getLogger(__name__)


class CheckpointError(RuntimeError):
    """Raised when the checkpoint file exists but cannot be used."""


def derive_visited_index(records: Iterable[BusinessRecord]) -> Set[str]:
    return {record.url for record in records}


class CheckpointStore:
    """Load and rewrite the result set stored in a single JSON array file.

    The whole file is rewritten after every append. A run that dies between
    two businesses therefore never loses more than the business in flight.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> List[BusinessRecord]:
        if not self.path.exists():
            logger.info("No checkpoint at %s; starting with an empty result set", self.path)
            return []

        try:
            with self.path.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except ValueError as exc:  # JSONDecodeError and UnicodeDecodeError
            raise CheckpointError(f"Checkpoint {self.path} is not valid UTF-8 JSON: {exc}") from exc

        if not isinstance(payload, list):
            raise CheckpointError(f"Checkpoint {self.path} must contain a JSON array")

        # save() rewrites exactly what load() returned
        for index, item in enumerate(payload):
            if not isinstance(item, dict):
                raise CheckpointError(f"Checkpoint {self.path} entry {index} is not an object")
            if not item.get("url"):
                raise CheckpointError(f"Checkpoint {self.path} entry {index} has no url")

        records = [BusinessRecord.from_dict(item) for item in payload]
        logger.info("Loaded %d saved businesses from %s", len(records), self.path)
        return records

    def save(self, records: List[BusinessRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump([record.to_dict() for record in records], fh, ensure_ascii=False, indent=2)

    def append(self, records: List[BusinessRecord], record: BusinessRecord) -> List[BusinessRecord]:
        """Append ``record`` and durably rewrite the file before returning."""
        records.append(record)
        self.save(records)
        logger.debug("Checkpoint now holds %d businesses", len(records))
        return records
