"""Turn a rendered business detail page into a BusinessRecord."""

import re
from typing import Iterable, Optional, Tuple
from urllib.parse import urljoin

from bs4 import Tag

from houzz_harvester.core.models import BusinessRecord
from houzz_harvester.vendors.page_client import RenderedPage

BUSINESS_SECTION_SELECTOR = "section#business"
DETAIL_CELL_SELECTOR = ".hui-cell"

LABEL_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("Business Name", "business_name"),
    ("Phone Number", "phone"),
    ("Address", "address"),
    ("Typical Job Cost", "typical_job_cost"),
    ("License Number", "license_number"),
    ("Followers", "followers"),
)

# aria-label substrings of the social/link buttons under the detail cells
LINK_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("Facebook", "facebook"),
    ("Linkedin", "linkedin"),
    ("blog or other site", "other_website"),
)

_WHITESPACE = re.compile(r"\s+")


def normalize_whitespace(text: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def _find_cell(cells: Iterable[Tag], label: str) -> Optional[Tag]:
    for cell in cells:
        heading = cell.find("h3")
        if heading is not None and heading.get_text().strip() == label:
            return cell
    return None


def value_for_label(cells: Iterable[Tag], label: str) -> str:
    """Return the paragraph text next to the heading matching ``label``."""
    cell = _find_cell(cells, label)
    if cell is None:
        return ""
    paragraph = cell.find("p")
    return normalize_whitespace(paragraph.get_text()) if paragraph is not None else ""


def _website_text(cells: Iterable[Tag]) -> str:
    cell = _find_cell(cells, "Website")
    if cell is None:
        return ""
    anchor = cell.find("a")
    return anchor.get_text().strip() if anchor is not None else ""


def _link_by_aria_label(section: Tag, needle: str, base_url: str) -> str:
    for anchor in section.find_all("a"):
        if needle in (anchor.get("aria-label") or ""):
            href = (anchor.get("href") or "").strip()
            return urljoin(base_url, href) if href else ""
    return ""


def extract_business(page: RenderedPage, url: Optional[str] = None) -> Optional[BusinessRecord]:
    """Extract the business profile, or None when the page has no profile section.

    ``url`` is the link the page was reached through; it keys the record even
    when the site redirected elsewhere.
    """
    section = page.select_one(BUSINESS_SECTION_SELECTOR)
    if section is None:
        return None

    cells = section.select(DETAIL_CELL_SELECTOR)
    values = {field_name: value_for_label(cells, label) for label, field_name in LABEL_FIELDS}
    values["website"] = _website_text(cells)
    for needle, field_name in LINK_FIELDS:
        values[field_name] = _link_by_aria_label(section, needle, page.url)

    return BusinessRecord(url=url or page.url, **values)
