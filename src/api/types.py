"""GraphQL type definitions for the Kindle library API."""

import strawberry

from clippings import models


@strawberry.type
class Highlight:
    """A highlighted passage."""

    id: str
    text: str
    metadata: str

    @classmethod
    def from_model(cls, highlight: models.Highlight) -> "Highlight":
        return cls(id=highlight.id, text=highlight.text, metadata=highlight.metadata)


@strawberry.type
class Book:
    """A book with its highlights and cover URL."""

    id: str
    title: str
    author: str
    highlights: list[Highlight]
    amazon_id: str | None = None
    cover_image: str | None = None

    @classmethod
    def from_model(cls, book: models.Book) -> "Book":
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            amazon_id=book.amazon_id,
            cover_image=book.cover_image,
            highlights=[Highlight.from_model(h) for h in book.highlights],
        )


@strawberry.type
class BookExclusion:
    """A book hidden from the library."""

    title: str
    author: str
    reason: str | None = None


@strawberry.type
class HighlightExclusion:
    """A highlight hidden from its book."""

    book_title: str
    highlight_text: str
