"""Scrape a news listing and relay popular, unseen stories to Telegram."""

__version__ = "0.1.0"
