"""Shared constants for the Kindle library.

For environment-based configuration (paths, timeouts, server settings), use the
env module:
    from common.env import env
    clippings = env.clippings_path()
"""

# Line separating two entries in a Kindle "My Clippings.txt" export
ENTRY_DELIMITER = "=========="

# An entry needs title, metadata, blank line and highlight text
MIN_ENTRY_LINES = 4

# Ledger headers
EXCLUDED_BOOKS_HEADER = ["title", "author", "reason"]
EXCLUDED_HIGHLIGHTS_HEADER = ["book_title", "highlight_text"]

# Public URL prefix the cover cache directory is served under
COVERS_URL_PREFIX = "/covers"
COVER_EXTENSION = ".jpg"

# Amazon returns a tiny placeholder GIF for unknown ASINs
MIN_COVER_BYTES = 1000

USER_AGENT = "Kindle Library/1.0 (Educational Purpose)"
