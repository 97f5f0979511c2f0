"""Spreadsheet export of harvested businesses."""

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Sequence, Union

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from houzz_harvester.core.models import BusinessRecord

logger = logging.getLogger(__name__)

DEFAULT_SHEET_TITLE = "Houzz Businesses"


class ColumnSpec(NamedTuple):
    header: str
    field: Optional[str]  # None -> 1-based row number
    width: int


BUSINESS_COLUMNS = (
    ColumnSpec("No", None, 6),
    ColumnSpec("URL", "url", 80),
    ColumnSpec("Business Name", "business_name", 30),
    ColumnSpec("Phone", "phone", 20),
    ColumnSpec("Website", "website", 40),
    ColumnSpec("Address", "address", 50),
    ColumnSpec("Typical Job Cost", "typical_job_cost", 20),
    ColumnSpec("License Number", "license_number", 20),
    ColumnSpec("Followers", "followers", 15),
    ColumnSpec("Facebook", "facebook", 40),
    ColumnSpec("LinkedIn", "linkedin", 40),
    ColumnSpec("Other Website", "other_website", 40),
)

# Layout for raw page dumps shaped {"url": ..., "content": ...}
CONTENT_COLUMNS = (
    ColumnSpec("No", None, 6),
    ColumnSpec("URL", "url", 80),
    ColumnSpec("Content", "content", 120),
)

Row = Union[BusinessRecord, Mapping[str, Any]]


def _cell_value(row: Row, field_name: str) -> Any:
    if isinstance(row, BusinessRecord):
        value = getattr(row, field_name, "")
    else:
        value = row.get(field_name)
    return "" if value is None else value


def export_table(
    rows: Iterable[Row],
    columns: Sequence[ColumnSpec],
    path: Union[str, Path],
    *,
    sheet_title: str = DEFAULT_SHEET_TITLE,
) -> int:
    """Write ``rows`` to a single-sheet workbook and return the data row count."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    header_font = Font(bold=True)
    for col, spec in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col, value=spec.header)
        cell.font = header_font
        ws.column_dimensions[get_column_letter(col)].width = spec.width

    count = 0
    for count, row in enumerate(rows, 1):
        for col, spec in enumerate(columns, 1):
            value = count if spec.field is None else _cell_value(row, spec.field)
            ws.cell(row=count + 1, column=col, value=value)

    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output)
    logger.info("Wrote %d rows to %s", count, output)
    return count
