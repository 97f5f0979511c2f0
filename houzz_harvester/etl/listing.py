"""Listing page traversal and business link discovery."""

import logging
import re
from typing import Iterator, List, Optional, Set, Tuple
from urllib.parse import parse_qs, urljoin, urlparse

from houzz_harvester.core.config import DEFAULT_LISTING_MARKER, DEFAULT_PROFILE_PREFIX, Settings, get_settings
from houzz_harvester.vendors.page_client import PageClient, RenderedPage

logger = logging.getLogger(__name__)

BUSINESS_LINK_SELECTOR = "a.hui-link.hz-pro-ctl"
PAGINATION_PARAM = "fi"
_PROFILE_ID = re.compile(r"~\d+$")


def listing_url(base_url: str, fi: int) -> str:
    separator = "&" if urlparse(base_url).query else "?"
    return f"{base_url}{separator}{PAGINATION_PARAM}={fi}"


def pages(base_url: str, start: int, end: int, step: int) -> Iterator[Tuple[int, str]]:
    """Yield ``(fi, url)`` for every listing page from ``start`` to ``end`` inclusive."""
    if step <= 0:
        raise ValueError("step must be positive")
    for fi in range(start, end + 1, step):
        yield fi, listing_url(base_url, fi)


def is_business_link(
    url: str,
    *,
    profile_prefix: str = DEFAULT_PROFILE_PREFIX,
    listing_marker: str = DEFAULT_LISTING_MARKER,
) -> bool:
    """True for canonical profile URLs such as ``.../pro/acme-builders~12345``.

    The card anchor class also matches category and pagination links, which
    are rejected here.
    """
    if not url.startswith(profile_prefix):
        return False
    if listing_marker and listing_marker in url:
        return False
    if PAGINATION_PARAM in parse_qs(urlparse(url).query, keep_blank_values=True):
        return False
    return bool(_PROFILE_ID.search(url))


def discover_business_links(
    page: RenderedPage,
    *,
    profile_prefix: str = DEFAULT_PROFILE_PREFIX,
    listing_marker: str = DEFAULT_LISTING_MARKER,
) -> List[str]:
    links: List[str] = []
    seen: Set[str] = set()
    for anchor in page.query_all(BUSINESS_LINK_SELECTOR):
        href = (anchor.get("href") or "").strip()
        if not href:
            continue
        absolute = urljoin(page.url, href)
        if absolute in seen:
            continue
        if is_business_link(absolute, profile_prefix=profile_prefix, listing_marker=listing_marker):
            seen.add(absolute)
            links.append(absolute)
    return links


class ListingPaginator:
    """Walk listing pages and collect the business links on each one."""

    def __init__(self, page_client: PageClient, settings: Optional[Settings] = None) -> None:
        self.page_client = page_client
        self.settings = settings or get_settings()

    def open_listing(self, url: str) -> RenderedPage:
        self.page_client.navigate(url)
        self.page_client.wait(self.settings.listing_settle_ms)

        # cards render lazily below the fold
        self.page_client.scroll_to_bottom()
        self.page_client.wait(self.settings.scroll_settle_ms)
        return self.page_client.snapshot()

    def iter_listing_pages(self, start: int, end: int, step: int) -> Iterator[Tuple[int, str, List[str]]]:
        for fi, url in pages(self.settings.base_url, start, end, step):
            logger.info("Listing page fi=%s %s", fi, url)
            rendered = self.open_listing(url)
            links = discover_business_links(
                rendered,
                profile_prefix=self.settings.profile_prefix,
                listing_marker=self.settings.listing_marker,
            )
            logger.info("Found %d businesses on fi=%s", len(links), fi)
            yield fi, url, links
