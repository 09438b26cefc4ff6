"""Listing page scrapers."""

from otodom_summarizer.scrapers.base import BaseScraper
from otodom_summarizer.scrapers.otodom import OtodomScraper

__all__ = ["BaseScraper", "OtodomScraper"]
