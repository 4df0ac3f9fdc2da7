"""Listing page parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

from selectolax.parser import HTMLParser, Node

from ..config import ListingConfig
from ..errors import ParseError

_LEADING_INT = re.compile(r"^\s*(\d+)")


@dataclass(slots=True, frozen=True)
class NewsItem:
    """One story row of the listing page."""

    url: str
    title: str
    score: int
    comment_link: str
    comment_count: str


def escape_markdown_underscores(text: str) -> str:
    """Escape ``_`` so Telegram Markdown does not read it as italics."""

    return text.replace("_", "\\_")


class Parser:
    """Turn the listing HTML into ordered :class:`NewsItem` objects.

    Story rows and their subtext blocks (score, comments) are sibling rows in
    the markup. They are paired by position, so both collections must have
    the same length; a mismatch raises :class:`ParseError` instead of
    producing misaligned items.
    """

    def __init__(self, listing: ListingConfig | None = None) -> None:
        self.listing = listing or ListingConfig()
        self.selectors = self.listing.selectors
        self.base_url = self.listing.url

    def parse(self, html: str) -> list[NewsItem]:
        container = self._find_container(HTMLParser(html))
        rows = container.css(self.selectors.row)
        subtexts = container.css(self.selectors.subtext)
        if len(rows) != len(subtexts):
            raise ParseError(
                f"Listing layout mismatch: {len(rows)} story rows but {len(subtexts)} subtext blocks"
            )

        items: list[NewsItem] = []
        for index, (row, subtext) in enumerate(zip(rows, subtexts)):
            title, url = self._extract_link(row, index)
            comment_link, comment_count = self._extract_comments(subtext, index)
            items.append(
                NewsItem(
                    url=url,
                    title=title,
                    score=self._extract_score(subtext, index),
                    comment_link=comment_link,
                    comment_count=comment_count,
                )
            )
        return items

    def resolve(self, href: str) -> str:
        """Prefix relative links (self posts) with the listing base URL."""

        if href.lower().startswith("http"):
            return href
        return self.base_url + href

    # ------------------------------------------------------------------
    def _find_container(self, tree: HTMLParser) -> Node:
        for selector in self.selectors.container:
            node = tree.css_first(selector)
            if node is not None:
                return node
        raise ParseError(f"Listing container not found (tried {self.selectors.container})")

    def _extract_link(self, row: Node, index: int) -> tuple[str, str]:
        for selector in self.selectors.link:
            node = row.css_first(selector)
            if node is None:
                continue
            href = (node.attributes.get("href") or "").strip()
            if not href:
                raise ParseError(f"Story row {index} has a link without href")
            url = self.resolve(escape_markdown_underscores(href))
            return node.text().strip(), url
        raise ParseError(f"Story row {index} has no link matching {self.selectors.link}")

    def _extract_score(self, subtext: Node, index: int) -> int:
        node = subtext.css_first(self.selectors.score)
        # no score element means the story has no points yet
        if node is None:
            return 0
        text = node.text()
        match = _LEADING_INT.match(text)
        if match is None:
            raise ParseError(f"Unreadable score {text!r} in row {index}")
        return int(match.group(1))

    def _extract_comments(self, subtext: Node, index: int) -> tuple[str, str]:
        anchors = subtext.css("a")
        if not anchors:
            raise ParseError(f"Subtext block {index} has no comment link")
        last = anchors[-1]
        href = (last.attributes.get("href") or "").strip()
        return self.resolve(href), last.text()


__all__ = ["NewsItem", "Parser", "escape_markdown_underscores"]
