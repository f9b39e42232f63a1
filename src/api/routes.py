"""JSON endpoints consumed by the browser UI."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from clippings.exceptions import ClippingsReadError, InvalidExclusionError, LedgerWriteError
from clippings.exclusions import ExclusionStore
from common.logger import get_logger
from library.assembler import LibraryAssembler

from .dependencies import get_exclusion_store, get_library

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["library"])


class ExcludeBookRequest(BaseModel):
    """Body of POST /api/exclude-book."""

    title: str | None = None
    author: str | None = None
    reason: str | None = None


class ExcludeHighlightRequest(BaseModel):
    """Body of POST /api/exclude-highlight."""

    model_config = ConfigDict(populate_by_name=True)

    book_title: str | None = Field(default=None, alias="bookTitle")
    highlight_text: str | None = Field(default=None, alias="highlightText")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# Bodies that fail validation on these routes get the blank-field error
VALIDATION_ERRORS = {
    "/api/exclude-book": "Missing title or author",
    "/api/exclude-highlight": "Missing required fields",
}


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer missing, non-JSON or mistyped exclusion bodies with a 400."""
    message = VALIDATION_ERRORS.get(request.url.path)
    if message is None:
        return await request_validation_exception_handler(request, exc)
    logger.debug(f"Rejected body for {request.url.path}: {exc.errors()}")
    return error_response(400, message)


@router.get("/books")
async def list_books(library: LibraryAssembler = Depends(get_library)) -> Any:
    """All non-excluded books with their highlights and cover URLs."""
    try:
        books = await library.assemble()
    except ClippingsReadError as e:
        logger.error(f"Error processing books: {e}")
        return error_response(500, "Error processing books")
    return [book.to_dict() for book in books]


@router.post("/exclude-book")
def exclude_book(
    body: ExcludeBookRequest, store: ExclusionStore = Depends(get_exclusion_store)
) -> Any:
    """Append a book to the excluded books ledger."""
    try:
        store.exclude_book(body.title or "", body.author or "", body.reason)
    except InvalidExclusionError:
        return error_response(400, "Missing title or author")
    except LedgerWriteError as e:
        logger.error(f"Error excluding book '{body.title}': {e}")
        return error_response(500, "Error excluding book")
    return {"success": True}


@router.get("/excluded-books")
def list_excluded_books(store: ExclusionStore = Depends(get_exclusion_store)) -> Any:
    """Rows of the excluded books ledger."""
    return [record.to_dict() for record in store.list_excluded_books()]


@router.post("/exclude-highlight")
def exclude_highlight(
    body: ExcludeHighlightRequest, store: ExclusionStore = Depends(get_exclusion_store)
) -> Any:
    """Append a highlight to the excluded highlights ledger."""
    logger.debug(f"Attempting to exclude highlight from '{body.book_title}'")
    try:
        store.exclude_highlight(body.book_title or "", body.highlight_text or "")
    except InvalidExclusionError:
        return error_response(400, "Missing required fields")
    except LedgerWriteError as e:
        logger.error(f"Error excluding highlight from '{body.book_title}': {e}")
        return error_response(500, "Error excluding highlight")
    return {"success": True}


@router.get("/excluded-highlights")
def list_excluded_highlights(store: ExclusionStore = Depends(get_exclusion_store)) -> Any:
    """Rows of the excluded highlights ledger."""
    return [record.to_dict() for record in store.list_excluded_highlights()]
