"""Assemble the library: parsed books with cover images attached."""

import asyncio

from clippings.models import Book
from clippings.parser import ClippingsParser
from common.logger import get_logger
from covers.cache import CoverCache
from covers.resolver import CoverResolver

logger = get_logger(__name__)


class LibraryAssembler:
    """Coordinate the clippings parser with the cover cache and resolver.

    Each call to ``assemble`` re-parses the export, then resolves covers for
    all books concurrently, one task per book. Blocking work (file parsing,
    HTTP requests) runs in worker threads so the event loop stays free.
    """

    def __init__(
        self,
        parser: ClippingsParser | None = None,
        cache: CoverCache | None = None,
        resolver: CoverResolver | None = None,
    ):
        """Initialize assembler.

        Args:
            parser: Clippings parser (default: paths from env)
            cache: Cover cache (default: COVERS_DIR)
            resolver: Cover resolver (default: Amazon then Open Library)
        """
        self.parser = parser or ClippingsParser()
        self.cache = cache or CoverCache()
        self.resolver = resolver or CoverResolver()

    async def assemble(self, with_covers: bool = True) -> list[Book]:
        """Parse the export and attach covers.

        Args:
            with_covers: Resolve covers (False returns parsed books only)

        Returns:
            Books in order of first appearance; ``cover_image`` is None for
            books without a cover

        Raises:
            ClippingsReadError: If the export exists but cannot be read
        """
        books = await asyncio.to_thread(self.parser.parse)
        if not with_covers or not books:
            return books

        # Join-all barrier: return only once every book's cover task settled
        results = await asyncio.gather(
            *(self.attach_cover(book) for book in books), return_exceptions=True
        )
        for book, result in zip(books, results):
            if isinstance(result, BaseException):
                logger.error(f"Error processing cover for '{book.title}': {result}")

        found = sum(1 for book in books if book.cover_image)
        logger.info(f"Covers available for {found}/{len(books)} books")
        return books

    async def attach_cover(self, book: Book) -> None:
        """Set ``book.cover_image`` from the cache, fetching on a miss."""
        cached = self.cache.get(book.title, book.author)
        if cached:
            book.cover_image = cached
            return

        data = await asyncio.to_thread(
            self.resolver.resolve_cover, book.title, book.author, book.amazon_id
        )
        if data:
            book.cover_image = await asyncio.to_thread(
                self.cache.put, data, book.title, book.author
            )

    def assemble_sync(self, with_covers: bool = True) -> list[Book]:
        """Run ``assemble`` outside an event loop (CLI use)."""
        return asyncio.run(self.assemble(with_covers=with_covers))

    def close(self) -> None:
        self.resolver.close()
