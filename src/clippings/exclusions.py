"""Append-only CSV ledgers of excluded books and highlights.

Two ledgers live next to the clippings export:

    exclude.csv              title,author,reason
    excluded-clippings.csv   book_title,highlight_text

Rows are only ever appended. Matching is done on keys built by
``normalize_key``, which the parser uses as well.
"""

import csv
import io
from pathlib import Path

from common.constants import EXCLUDED_BOOKS_HEADER, EXCLUDED_HIGHLIGHTS_HEADER
from common.env import env
from common.logger import get_logger

from .exceptions import InvalidExclusionError, LedgerWriteError
from .models import BookExclusion, HighlightExclusion

logger = get_logger(__name__)


def normalize_key(*parts: str) -> str:
    """Build a case-insensitive match key.

    Each part is trimmed and lower-cased, then the parts are joined with "|".

    Example:
        >>> normalize_key(" Dune ", "Frank Herbert")
        'dune|frank herbert'
    """
    return "|".join((part or "").strip().lower() for part in parts)


def _format_row(values: list[str]) -> str:
    """Render one fully quoted CSV row (internal quotes doubled)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(values)
    return buffer.getvalue()


def _is_blank_ledger(path: Path) -> bool:
    """True if the ledger is missing or an empty file without a header row."""
    return not path.exists() or (path.is_file() and path.stat().st_size == 0)


class ExclusionStore:
    """Reads and appends the two exclusion ledgers.

    The store keeps no state in memory: every load reads the ledger from disk,
    so a failed append can never leave a book looking excluded.
    """

    def __init__(
        self,
        books_path: Path | None = None,
        highlights_path: Path | None = None,
    ):
        """Initialize the store.

        Args:
            books_path: Excluded books ledger (default: from env)
            highlights_path: Excluded highlights ledger (default: from env)
        """
        self.books_path = Path(books_path) if books_path else env.excluded_books_path()
        self.highlights_path = (
            Path(highlights_path) if highlights_path else env.excluded_highlights_path()
        )

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def load_excluded_books(self) -> set[str]:
        """Load the set of excluded ``title|author`` keys."""
        records = self._read_records(self.books_path, EXCLUDED_BOOKS_HEADER)
        keys = {normalize_key(r["title"], r["author"]) for r in records}
        logger.debug(f"Loaded {len(keys)} excluded books from {self.books_path}")
        return keys

    def load_excluded_highlights(self) -> set[str]:
        """Load the set of excluded ``book_title|highlight_text`` keys."""
        records = self._read_records(self.highlights_path, EXCLUDED_HIGHLIGHTS_HEADER)
        keys = {normalize_key(r["book_title"], r["highlight_text"]) for r in records}
        logger.debug(f"Loaded {len(keys)} excluded highlights from {self.highlights_path}")
        return keys

    def list_excluded_books(self) -> list[BookExclusion]:
        """List excluded books in ledger order."""
        records = self._read_records(
            self.books_path, EXCLUDED_BOOKS_HEADER, create_missing=False
        )
        return [
            BookExclusion(title=r["title"], author=r["author"], reason=r.get("reason") or None)
            for r in records
        ]

    def list_excluded_highlights(self) -> list[HighlightExclusion]:
        """List excluded highlights in ledger order."""
        records = self._read_records(
            self.highlights_path, EXCLUDED_HIGHLIGHTS_HEADER, create_missing=False
        )
        return [
            HighlightExclusion(book_title=r["book_title"], highlight_text=r["highlight_text"])
            for r in records
        ]

    def _read_records(
        self, path: Path, header: list[str], create_missing: bool = True
    ) -> list[dict[str, str]]:
        """Read ledger rows, skipping any that lack a required field.

        The first two header columns are required; any further column is
        optional. A missing or empty ledger is (re)written with its header row
        when ``create_missing`` is set. Read errors are logged and yield no rows.
        """
        if _is_blank_ledger(path):
            if create_missing:
                self._create_ledger(path, header)
            return []

        required = header[:2]
        records: list[dict[str, str]] = []
        try:
            with open(path, encoding="utf-8-sig", newline="") as f:
                reader = csv.DictReader(f)
                for row in reader:
                    cleaned = {
                        key.strip(): (value or "").strip()
                        for key, value in row.items()
                        if isinstance(key, str)
                    }
                    if not all(cleaned.get(column) for column in required):
                        logger.warning(
                            f"Skipping malformed row {reader.line_num} in {path.name}: {row}"
                        )
                        continue
                    records.append(cleaned)
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.error(f"Failed to read ledger {path}: {e}")
        return records

    # ------------------------------------------------------------------
    # Appending
    # ------------------------------------------------------------------

    def exclude_book(self, title: str, author: str, reason: str | None = None) -> bool:
        """Append a book to the excluded books ledger.

        Args:
            title: Book title
            author: Book author
            reason: Optional free-text reason

        Returns:
            True once the row has been written

        Raises:
            InvalidExclusionError: If title or author is blank
            LedgerWriteError: If the ledger could not be written
        """
        title = (title or "").strip()
        author = (author or "").strip()
        if not title or not author:
            raise InvalidExclusionError("Missing title or author")

        reason = (reason or "").strip()
        values = [title, author]
        if self._has_reason_column():
            values.append(reason)
        elif reason:
            logger.warning(
                f"{self.books_path.name} has no reason column; "
                f"dropping reason for '{title}': {reason!r}"
            )

        self._append(self.books_path, EXCLUDED_BOOKS_HEADER, values)
        logger.info(f"Excluded book: {normalize_key(title, author)}")
        return True

    def exclude_highlight(self, book_title: str, highlight_text: str) -> bool:
        """Append a highlight to the excluded highlights ledger.

        Args:
            book_title: Title of the book the highlight belongs to
            highlight_text: The highlighted passage

        Returns:
            True once the row has been written

        Raises:
            InvalidExclusionError: If either field is blank
            LedgerWriteError: If the ledger could not be written
        """
        book_title = (book_title or "").strip()
        highlight_text = (highlight_text or "").strip()
        if not book_title or not highlight_text:
            raise InvalidExclusionError("Missing required fields")

        self._append(
            self.highlights_path, EXCLUDED_HIGHLIGHTS_HEADER, [book_title, highlight_text]
        )
        logger.info(f"Excluded highlight from '{book_title}'")
        return True

    def _has_reason_column(self) -> bool:
        """Check whether the books ledger carries the optional reason column.

        Ledgers created before the column existed only have title and author.
        """
        if _is_blank_ledger(self.books_path):
            return True
        try:
            with open(self.books_path, encoding="utf-8-sig", newline="") as f:
                header = next(csv.reader(f), [])
        except (OSError, UnicodeDecodeError, csv.Error):
            return True
        return "reason" in [column.strip() for column in header]

    def _append(self, path: Path, header: list[str], values: list[str]) -> None:
        row = _format_row(values)
        try:
            if _is_blank_ledger(path):
                self._create_ledger(path, header, strict=True)
            # One write per row; concurrent appends never split a row
            with open(path, "a", encoding="utf-8", newline="") as f:
                f.write(row)
        except OSError as e:
            logger.error(f"Failed to append to {path}: {e}")
            raise LedgerWriteError(f"Could not write to {path.name}") from e

    def _create_ledger(self, path: Path, header: list[str], strict: bool = False) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(",".join(header) + "\n", encoding="utf-8")
            logger.info(f"Created ledger: {path}")
        except OSError as e:
            logger.error(f"Failed to create ledger {path}: {e}")
            if strict:
                raise
