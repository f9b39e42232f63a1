"""FastAPI dependencies wiring the library components from the environment."""

from functools import lru_cache

from fastapi import Depends

from clippings.exclusions import ExclusionStore
from clippings.parser import ClippingsParser
from covers.cache import CoverCache
from covers.resolver import CoverResolver
from library.assembler import LibraryAssembler


def get_exclusion_store() -> ExclusionStore:
    """Exclusion store over the ledgers configured in the environment."""
    return ExclusionStore()


@lru_cache(maxsize=1)
def get_cover_resolver() -> CoverResolver:
    """Process-wide cover resolver, so HTTP sessions are reused across requests."""
    return CoverResolver()


def get_library(
    store: ExclusionStore = Depends(get_exclusion_store),
    resolver: CoverResolver = Depends(get_cover_resolver),
) -> LibraryAssembler:
    """Library assembler for one request."""
    return LibraryAssembler(
        parser=ClippingsParser(store=store),
        cache=CoverCache(),
        resolver=resolver,
    )
