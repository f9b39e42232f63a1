"""Read-only GraphQL resolvers over the library and exclusion ledgers."""

import strawberry
from fastapi import Depends
from strawberry.types import Info

from api.dependencies import get_exclusion_store, get_library
from api.types import Book, BookExclusion, HighlightExclusion
from clippings.exclusions import ExclusionStore
from library.assembler import LibraryAssembler


async def get_context(
    library: LibraryAssembler = Depends(get_library),
    store: ExclusionStore = Depends(get_exclusion_store),
) -> dict:
    """Resolver context built from the same dependencies as the REST routes."""
    return {"library": library, "store": store}


@strawberry.type
class Query:
    """GraphQL queries for the Kindle library API."""

    @strawberry.field
    async def books(self, info: Info, with_covers: bool = True) -> list[Book]:
        """
        Books in order of first appearance in the export.

        Args:
            with_covers: Resolve cover images (false skips all network access)
        """
        library: LibraryAssembler = info.context["library"]
        books = await library.assemble(with_covers=with_covers)
        return [Book.from_model(book) for book in books]

    @strawberry.field
    def excluded_books(self, info: Info) -> list[BookExclusion]:
        """Books hidden from the library, in ledger order."""
        store: ExclusionStore = info.context["store"]
        return [
            BookExclusion(title=r.title, author=r.author, reason=r.reason)
            for r in store.list_excluded_books()
        ]

    @strawberry.field
    def excluded_highlights(self, info: Info) -> list[HighlightExclusion]:
        """Highlights hidden from their books, in ledger order."""
        store: ExclusionStore = info.context["store"]
        return [
            HighlightExclusion(book_title=r.book_title, highlight_text=r.highlight_text)
            for r in store.list_excluded_highlights()
        ]
