import sys
from pathlib import Path

import pytest

# Ensure `houzz_harvester` is importable when running pytest from a checkout.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from houzz_harvester.core import config  # noqa: E402
from houzz_harvester.vendors.page_client import RenderedPage  # noqa: E402

LISTING_ROOT = "https://www.houzz.com/professionals/general-contractor/probr0-bo~t_11786"


def business_html(
    name="Acme Builders",
    phone="  (555)  123-4567  ",
    address="12 Main St\n   Springfield, IL 62701",
    website="www.acme.example",
    facebook="https://www.facebook.com/acme",
    linkedin="https://www.linkedin.com/company/acme",
    other="https://blog.acme.example",
):
    socials = ""
    if facebook:
        socials += f'<a aria-label="Visit Facebook page" href="{facebook}">fb</a>'
    if linkedin:
        socials += f'<a aria-label="Visit Linkedin profile" href="{linkedin}">in</a>'
    if other:
        socials += f'<a aria-label="Visit blog or other site" href="{other}">blog</a>'
    return f"""
    <html><body>
      <section id="business">
        <div class="hui-cell"><h3>Business Name</h3><p>{name}</p></div>
        <div class="hui-cell"><h3>Phone Number</h3><p>{phone}</p></div>
        <div class="hui-cell"><h3>Website</h3><a href="https://{website}">  {website}  </a></div>
        <div class="hui-cell"><h3>Address</h3><p>{address}</p></div>
        <div class="hui-cell"><h3>Typical Job Cost</h3><p>$10,000 - $500,000</p></div>
        <div class="hui-cell"><h3>License Number</h3><p>LIC-42</p></div>
        <div class="hui-cell"><h3>Followers</h3><p>1,204</p></div>
        <div class="hui-cell">{socials}</div>
      </section>
    </body></html>
    """


def listing_html(hrefs):
    anchors = "".join(f'<a class="hui-link hz-pro-ctl" href="{href}">card</a>' for href in hrefs)
    return f"<html><body><div class='results'>{anchors}</div></body></html>"


class DummyPageClient:
    """Serves canned HTML per URL and records every browser interaction."""

    def __init__(self, pages=None, failures=None):
        self.pages = dict(pages or {})
        self.failures = dict(failures or {})
        self.current_url = None
        self.navigations = []
        self.waits = []
        self.scrolls = 0

    def navigate(self, url):
        self.navigations.append(url)
        if url in self.failures:
            raise self.failures[url]
        self.current_url = url

    def wait(self, duration_ms):
        self.waits.append(duration_ms)

    def scroll_to_bottom(self):
        self.scrolls += 1

    def snapshot(self):
        return RenderedPage(url=self.current_url, html=self.pages.get(self.current_url, "<html></html>"))


@pytest.fixture(autouse=True)
def clear_settings_cache():
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()
