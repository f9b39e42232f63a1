"""Environment configuration interface for the Kindle library.

All environment variable access goes through this module. Values are read on
every call, so tests can monkeypatch the environment freely.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def data_dir() -> Path:
        """Get the directory holding the clippings export and ledgers.

        Returns:
            Data directory, defaults to ./data
        """
        return Path(os.getenv("DATA_DIR", "./data"))

    @staticmethod
    def clippings_path() -> Path:
        """Get the path of the raw clippings export.

        Returns:
            Path to the export, defaults to <DATA_DIR>/My Clippings.txt
        """
        value = os.getenv("CLIPPINGS_PATH")
        return Path(value) if value else Environment.data_dir() / "My Clippings.txt"

    @staticmethod
    def excluded_books_path() -> Path:
        """Get the path of the excluded books ledger.

        Returns:
            Ledger path, defaults to <DATA_DIR>/exclude.csv
        """
        value = os.getenv("EXCLUDED_BOOKS_PATH")
        return Path(value) if value else Environment.data_dir() / "exclude.csv"

    @staticmethod
    def excluded_highlights_path() -> Path:
        """Get the path of the excluded highlights ledger.

        Returns:
            Ledger path, defaults to <DATA_DIR>/excluded-clippings.csv
        """
        value = os.getenv("EXCLUDED_HIGHLIGHTS_PATH")
        return Path(value) if value else Environment.data_dir() / "excluded-clippings.csv"

    @staticmethod
    def public_dir() -> Path:
        """Get the directory served as the browser UI.

        Returns:
            Public directory, defaults to ./public
        """
        return Path(os.getenv("PUBLIC_DIR", "./public"))

    @staticmethod
    def covers_dir() -> Path:
        """Get the cover cache directory.

        Returns:
            Cover cache directory, defaults to <PUBLIC_DIR>/covers
        """
        value = os.getenv("COVERS_DIR")
        return Path(value) if value else Environment.public_dir() / "covers"

    @staticmethod
    def cover_timeout() -> float:
        """Get the per-request timeout for remote cover lookups.

        Returns:
            Timeout in seconds, defaults to 5.0
        """
        return float(os.getenv("COVER_TIMEOUT", "5"))

    @staticmethod
    def host() -> str:
        """Get the interface the API server binds to.

        Returns:
            Host, defaults to '127.0.0.1'
        """
        return os.getenv("HOST", "127.0.0.1")

    @staticmethod
    def port() -> int:
        """Get the API server port.

        Returns:
            Port, defaults to 3000
        """
        return int(os.getenv("PORT", "3000"))

    @staticmethod
    def cors_origins() -> list[str]:
        """Get the origins allowed to call the API.

        Returns:
            List of origins from comma-separated CORS_ORIGINS, defaults to ['*']
        """
        raw = os.getenv("CORS_ORIGINS", "*")
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        return origins or ["*"]


# Singleton instance for convenient access
env = Environment()


def ensure_directories() -> None:
    """Create the data and cover cache directories if they don't exist."""
    env.data_dir().mkdir(parents=True, exist_ok=True)
    env.covers_dir().mkdir(parents=True, exist_ok=True)
