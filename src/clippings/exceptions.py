"""Exceptions raised by the clippings pipeline."""


class LibraryError(Exception):
    """Base exception for library errors."""

    pass


class ClippingsReadError(LibraryError):
    """The clippings export exists but could not be read."""

    pass


class ExclusionError(LibraryError):
    """Base exception for exclusion ledger errors."""

    pass


class InvalidExclusionError(ExclusionError):
    """An exclusion request is missing a required field."""

    pass


class LedgerWriteError(ExclusionError):
    """Appending to an exclusion ledger failed."""

    pass
