"""Tests for the cover resolver chain."""

from unittest.mock import Mock, patch

import pytest
import requests

from covers.clients.amazon import AmazonCoverSource
from covers.clients.base import CoverSource, CoverSourceError
from covers.clients.openlibrary import OpenLibraryCoverSource
from covers.resolver import CoverResolver


class StubSource(CoverSource):
    """Cover source returning a canned result and recording calls."""

    def __init__(self, name, result=None, error=None):
        super().__init__(timeout=1)
        self.name = name
        self.result = result
        self.error = error
        self.calls = []

    def fetch_cover(self, title, author, catalog_id=None):
        self.calls.append((title, author, catalog_id))
        if self.error:
            raise self.error
        return self.result


class TestCoverResolver:
    """Test suite for CoverResolver."""

    def test_default_chain(self):
        resolver = CoverResolver(timeout=2)

        assert [type(s) for s in resolver.sources] == [AmazonCoverSource, OpenLibraryCoverSource]
        assert all(s.timeout == 2 for s in resolver.sources)
        assert resolver.sources[0].session is resolver.sources[1].session

    def test_first_hit_short_circuits(self):
        first = StubSource("first", result=b"cover")
        second = StubSource("second", result=b"other")

        resolver = CoverResolver(sources=[first, second])

        assert resolver.resolve_cover("Dune", "Frank Herbert", "B00B7NPRY8") == b"cover"
        assert first.calls == [("Dune", "Frank Herbert", "B00B7NPRY8")]
        assert second.calls == []

    def test_miss_falls_through(self):
        first = StubSource("first", result=None)
        second = StubSource("second", result=b"cover")

        assert CoverResolver(sources=[first, second]).resolve_cover("Dune", "Frank Herbert") == b"cover"

    def test_error_falls_through(self, caplog):
        first = StubSource("first", error=CoverSourceError("timeout"))
        second = StubSource("second", result=b"cover")

        assert CoverResolver(sources=[first, second]).resolve_cover("Dune", "Frank Herbert") == b"cover"
        assert "Cover lookup via first failed" in caplog.text

    def test_empty_bytes_is_a_miss(self):
        first = StubSource("first", result=b"")
        second = StubSource("second", result=None)

        assert CoverResolver(sources=[first, second]).resolve_cover("Dune", "Frank Herbert") is None

    def test_all_fail_returns_none(self):
        sources = [
            StubSource("first", error=CoverSourceError("down")),
            StubSource("second", result=None),
        ]

        assert CoverResolver(sources=sources).resolve_cover("Dune", "Frank Herbert") is None

    @patch("requests.Session.get")
    def test_network_failures_never_raise(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("offline")

        with CoverResolver(timeout=1) as resolver:
            assert resolver.resolve_cover("Dune", "Frank Herbert", "B00B7NPRY8") is None

    @patch("requests.Session.get")
    def test_malformed_search_response_is_a_miss(self, mock_get):
        search = Mock(status_code=200)
        search.json.return_value = {"docs": [None]}
        mock_get.return_value = search

        with CoverResolver(timeout=1) as resolver:
            assert resolver.resolve_cover("Dune", "Frank Herbert") is None

    @patch("requests.Session.get")
    def test_amazon_placeholder_then_openlibrary(self, mock_get):
        placeholder = Mock(status_code=200, content=b"GIF89a")
        search = Mock(status_code=200)
        search.json.return_value = {"docs": [{"cover_i": 99}]}
        cover = Mock(status_code=200, content=b"\xff\xd8" + b"x" * 2000)
        mock_get.side_effect = [placeholder, placeholder, placeholder, search, cover]

        with CoverResolver(timeout=1) as resolver:
            assert resolver.resolve_cover("Dune", "Frank Herbert", "B00B7NPRY8") == cover.content

        assert mock_get.call_args.args[0] == "https://covers.openlibrary.org/b/id/99-L.jpg"

    def test_close_closes_sources(self):
        source = StubSource("first")
        source.session = Mock()

        CoverResolver(sources=[source]).close()

        source.session.close.assert_called_once()

    def test_requires_abstract_method(self):
        with pytest.raises(TypeError):
            CoverSource()
