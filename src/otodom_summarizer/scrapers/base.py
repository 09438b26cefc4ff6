"""Base scraper class for single listing pages."""

import abc
from urllib.parse import urlparse

import httpx
from fake_useragent import UserAgent
from rich.console import Console
from tenacity import retry, stop_after_attempt, wait_exponential

from otodom_summarizer.config.settings import MAX_RETRIES, TIMEOUT
from otodom_summarizer.models.listing import ListingFields

console = Console()
ua = UserAgent()


class BaseScraper(abc.ABC):
    """Abstract base for listing page scrapers."""

    site_name: str = "unknown"
    hosts: tuple[str, ...] = ()

    def supports(self, url: str) -> bool:
        """Whether the URL belongs to this scraper's site."""
        hostname = urlparse(url).hostname or ""
        return any(hostname == host or hostname.endswith("." + host) for host in self.hosts)

    @abc.abstractmethod
    def parse_listing_page(self, html: str, url: str) -> ListingFields:
        """Parse a listing page into structured fields."""
        ...

    @retry(stop=stop_after_attempt(MAX_RETRIES), wait=wait_exponential(min=2, max=30), reraise=True)
    def fetch_page(self, url: str) -> str:
        """Fetch a page with retry logic and random user agent."""
        headers = {
            "User-Agent": ua.random,
            "Accept-Language": "pl-PL,pl;q=0.9,en;q=0.8",
        }
        with httpx.Client(timeout=TIMEOUT, follow_redirects=True) as client:
            resp = client.get(url, headers=headers)
            resp.raise_for_status()
            return resp.text

    def scrape(self, url: str) -> ListingFields:
        """Fetch and parse one listing."""
        if not self.supports(url):
            raise ValueError(f"Right now this works best on {self.site_name} listing pages: {url}")
        console.print(f"[bold cyan]Fetching {self.site_name} listing...[/]")
        html = self.fetch_page(url)
        return self.parse_listing_page(html, url)
