"""
credentials.py

Where the API key lives. The client only ever calls `get_api_key()`; the
CLI uses `set_api_key()` to persist a new one.
"""

import json
import logging
import os

from ..config import settings

logger = logging.getLogger(__name__)


class ReadOnlyStoreError(RuntimeError):
    """Raised when writing to a store that can only be read."""


class CredentialStore:
    """Holds a single string-valued API key."""

    def get_api_key(self) -> str:
        raise NotImplementedError

    def set_api_key(self, key: str) -> None:
        raise NotImplementedError


class InMemoryCredentialStore(CredentialStore):
    def __init__(self, key=""):
        self._key = key

    def get_api_key(self) -> str:
        return self._key

    def set_api_key(self, key: str) -> None:
        self._key = key


class EnvCredentialStore(CredentialStore):
    """Read-only store backed by an environment variable."""

    def __init__(self, variable=None):
        self.variable = variable or getattr(settings, "API_KEY_ENV", "OPENAI_API_KEY")

    def get_api_key(self) -> str:
        return os.environ.get(self.variable, "")

    def set_api_key(self, key: str) -> None:
        raise ReadOnlyStoreError(f"{self.variable} is read from the environment and cannot be set here")


class FileCredentialStore(CredentialStore):
    """Persists the key as {"api_key": ...} in a user-only JSON file."""

    def __init__(self, path=None):
        self.path = path or getattr(settings, "CREDENTIALS_FILE")

    def get_api_key(self) -> str:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return ""
        except (OSError, ValueError) as e:
            logger.error("Could not read credentials file %s: %s", self.path, e)
            return ""
        if not isinstance(data, dict):
            logger.error("Credentials file %s does not hold a JSON object", self.path)
            return ""
        return str(data.get("api_key", ""))

    def set_api_key(self, key: str) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump({"api_key": key}, f)
        logger.info("Stored API key in %s (length=%d)", self.path, len(key))


class ChainedCredentialStore(CredentialStore):
    """First non-blank key wins; writes go to the first store."""

    def __init__(self, *stores):
        if not stores:
            raise ValueError("ChainedCredentialStore needs at least one store")
        self.stores = stores

    def get_api_key(self) -> str:
        for store in self.stores:
            key = store.get_api_key().strip()
            if key:
                return key
        return ""

    def set_api_key(self, key: str) -> None:
        self.stores[0].set_api_key(key)


def default_store():
    """Credentials file first (writable), then the environment."""
    return ChainedCredentialStore(FileCredentialStore(), EnvCredentialStore())
