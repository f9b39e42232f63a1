"""Data models for parsed clippings and exclusion records."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Highlight:
    """A single highlighted passage."""

    id: str
    text: str
    metadata: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "metadata": self.metadata}


@dataclass
class Book:
    """A book and its highlights, in the order they appear in the export."""

    id: str
    title: str
    author: str
    amazon_id: str | None = None
    cover_image: str | None = None
    highlights: list[Highlight] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape the browser UI expects."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "amazonId": self.amazon_id,
            "cover_image": self.cover_image,
            "highlights": [highlight.to_dict() for highlight in self.highlights],
        }


@dataclass
class BookExclusion:
    """A row of the excluded books ledger."""

    title: str
    author: str
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "author": self.author, "reason": self.reason}


@dataclass
class HighlightExclusion:
    """A row of the excluded highlights ledger."""

    book_title: str
    highlight_text: str

    def to_dict(self) -> dict[str, Any]:
        return {"book_title": self.book_title, "highlight_text": self.highlight_text}
