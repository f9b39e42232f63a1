"""Tests for the REST endpoints."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_exclusion_store, get_library
from api.main import app
from clippings.exclusions import ExclusionStore
from clippings.exceptions import LedgerWriteError
from clippings.item_id import generate_book_id
from clippings.parser import ClippingsParser
from covers.cache import CoverCache
from library.assembler import LibraryAssembler

CLIPPINGS = (
    "\ufeffDune (Frank Herbert)\n"
    "- Your Highlight on page 8 | ASIN: B00B7NPRY8\n"
    "\n"
    "Fear is the mind-killer\n"
    "==========\n"
    "1984 (George Orwell)\n"
    "- Your Highlight on page 3\n"
    "\n"
    "War is peace\n"
    "==========\n"
)


class NoCovers:
    """Resolver that never finds a cover."""

    def resolve_cover(self, title, author, catalog_id=None):
        return None

    def close(self):
        pass


@pytest.fixture
def workspace(tmp_path):
    clippings = tmp_path / "My Clippings.txt"
    clippings.write_text(CLIPPINGS, encoding="utf-8")
    return tmp_path


@pytest.fixture
def store(workspace):
    return ExclusionStore(
        books_path=workspace / "exclude.csv",
        highlights_path=workspace / "excluded-clippings.csv",
    )


@pytest.fixture
def client(workspace, store):
    def library():
        return LibraryAssembler(
            parser=ClippingsParser(workspace / "My Clippings.txt", store),
            cache=CoverCache(cache_dir=workspace / "covers"),
            resolver=NoCovers(),
        )

    app.dependency_overrides[get_exclusion_store] = lambda: store
    app.dependency_overrides[get_library] = library
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestBooks:
    """Tests for GET /api/books."""

    def test_lists_books_in_order(self, client):
        response = client.get("/api/books")

        assert response.status_code == 200
        books = response.json()
        assert [b["title"] for b in books] == ["Dune", "1984"]

        dune = books[0]
        assert dune["id"] == generate_book_id("Dune", "Frank Herbert")
        assert dune["author"] == "Frank Herbert"
        assert dune["amazonId"] == "B00B7NPRY8"
        assert dune["cover_image"] is None
        assert [h["text"] for h in dune["highlights"]] == ["Fear is the mind-killer"]

    def test_cached_cover_url(self, client, workspace):
        cache = CoverCache(cache_dir=workspace / "covers")
        url = cache.put(b"cover", "Dune", "Frank Herbert")

        books = client.get("/api/books").json()

        assert books[0]["cover_image"] == url
        assert url.startswith("/covers/")

    def test_missing_export_is_empty(self, client, workspace):
        (workspace / "My Clippings.txt").unlink()

        response = client.get("/api/books")

        assert response.status_code == 200
        assert response.json() == []

    def test_unreadable_export_is_500(self, client, workspace):
        path = workspace / "My Clippings.txt"
        path.unlink()
        path.mkdir()

        response = client.get("/api/books")

        assert response.status_code == 500
        assert response.json() == {"error": "Error processing books"}


class TestExcludeBook:
    """Tests for POST /api/exclude-book."""

    def test_excludes_book(self, client):
        response = client.post(
            "/api/exclude-book",
            json={"title": "Dune", "author": "Frank Herbert", "reason": "reread"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert [b["title"] for b in client.get("/api/books").json()] == ["1984"]

    def test_match_ignores_case_and_whitespace(self, client):
        client.post("/api/exclude-book", json={"title": " dune ", "author": "FRANK HERBERT"})
        assert [b["title"] for b in client.get("/api/books").json()] == ["1984"]

    def test_listed_after_exclusion(self, client):
        client.post(
            "/api/exclude-book",
            json={"title": "Dune", "author": "Frank Herbert", "reason": "reread"},
        )

        response = client.get("/api/excluded-books")

        assert response.json() == [
            {"title": "Dune", "author": "Frank Herbert", "reason": "reread"}
        ]

    @pytest.mark.parametrize(
        "body",
        [{"title": "Dune"}, {"author": "Frank Herbert"}, {"title": " ", "author": "x"}, {}],
    )
    def test_missing_fields_is_400(self, client, store, body):
        response = client.post("/api/exclude-book", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing title or author"}
        assert store.list_excluded_books() == []

    @pytest.mark.parametrize(
        "kwargs",
        [
            {},
            {"content": "title=Dune", "headers": {"Content-Type": "application/json"}},
            {"json": {"title": 123, "author": "Frank Herbert"}},
            {"json": ["Dune", "Frank Herbert"]},
        ],
    )
    def test_invalid_body_is_400(self, client, store, kwargs):
        response = client.post("/api/exclude-book", **kwargs)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing title or author"}
        assert store.list_excluded_books() == []

    def test_write_failure_is_500(self, client):
        with patch.object(ExclusionStore, "_append", side_effect=LedgerWriteError("disk full")):
            response = client.post(
                "/api/exclude-book", json={"title": "Dune", "author": "Frank Herbert"}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Error excluding book"}
        assert len(client.get("/api/books").json()) == 2


class TestExcludeHighlight:
    """Tests for POST /api/exclude-highlight."""

    def test_excluding_only_highlight_keeps_book(self, client):
        response = client.post(
            "/api/exclude-highlight",
            json={"bookTitle": "1984", "highlightText": "War is peace"},
        )

        assert response.json() == {"success": True}
        books = client.get("/api/books").json()
        assert [b["title"] for b in books] == ["Dune", "1984"]
        assert books[1]["highlights"] == []

    def test_listed_after_exclusion(self, client):
        client.post(
            "/api/exclude-highlight",
            json={"bookTitle": "Dune", "highlightText": "Fear is the mind-killer"},
        )

        assert client.get("/api/excluded-highlights").json() == [
            {"book_title": "Dune", "highlight_text": "Fear is the mind-killer"}
        ]

    def test_missing_fields_is_400(self, client):
        response = client.post("/api/exclude-highlight", json={"bookTitle": "Dune"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}

    @pytest.mark.parametrize(
        "kwargs",
        [{}, {"json": {"bookTitle": "Dune", "highlightText": ["Fear"]}}],
    )
    def test_invalid_body_is_400(self, client, kwargs):
        response = client.post("/api/exclude-highlight", **kwargs)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}

    def test_write_failure_is_500(self, client):
        with patch.object(ExclusionStore, "_append", side_effect=LedgerWriteError("disk full")):
            response = client.post(
                "/api/exclude-highlight",
                json={"bookTitle": "Dune", "highlightText": "Fear is the mind-killer"},
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Error excluding highlight"}


class TestExcludedLists:
    """Tests for the excluded ledgers listings."""

    def test_empty_when_ledgers_missing(self, client, workspace):
        assert client.get("/api/excluded-books").json() == []
        assert client.get("/api/excluded-highlights").json() == []
        assert not (workspace / "exclude.csv").exists()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
