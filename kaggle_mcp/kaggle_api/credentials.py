"""Loading and persisting Kaggle API credentials."""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .errors import (
    InvalidCredentialsFileError,
    KaggleError,
    KaggleIOError,
    KaggleNotAuthenticatedError,
)
from .models import KaggleCredentials

logger = logging.getLogger(__name__)

USERNAME_ENV = "KAGGLE_USERNAME"
KEY_ENV = "KAGGLE_KEY"
CREDENTIALS_FILE = "kaggle.json"


class CredentialStore(ABC):
    """Where a verified credential pair is read from and written to."""

    @abstractmethod
    def load(self) -> KaggleCredentials:
        ...

    @abstractmethod
    def save(self, username: str, key: str) -> None:
        ...


class FileCredentialStore(CredentialStore):
    """Environment variables first, then ``~/.kaggle/kaggle.json``."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir

    @property
    def config_dir(self) -> Path:
        """Directory holding kaggle.json. Raises RuntimeError or KeyError if home is unknown."""
        if self._config_dir is not None:
            return self._config_dir
        return Path.home() / ".kaggle"

    def load(self) -> KaggleCredentials:
        username = os.environ.get(USERNAME_ENV)
        key = os.environ.get(KEY_ENV)
        if username is not None and key is not None:
            logger.info("Found credentials in environment variables")
            return KaggleCredentials(username=username, key=key)

        try:
            path = self.config_dir / CREDENTIALS_FILE
        except (RuntimeError, KeyError):
            logger.warning("Could not determine home directory")
            raise KaggleNotAuthenticatedError()

        logger.debug("Checking for %s at %s", CREDENTIALS_FILE, path)
        try:
            exists = path.exists()
        except OSError as e:
            raise KaggleIOError(str(e)) from e
        if not exists:
            logger.warning("No credentials found in environment variables or %s", path)
            raise KaggleNotAuthenticatedError()

        try:
            content = path.read_bytes()
        except OSError as e:
            raise KaggleIOError(str(e)) from e

        try:
            creds = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("Invalid %s format: %s", CREDENTIALS_FILE, e)
            raise InvalidCredentialsFileError() from e

        if not isinstance(creds, dict):
            logger.error("Invalid %s format: not a JSON object", CREDENTIALS_FILE)
            raise InvalidCredentialsFileError()

        username = creds.get("username")
        key = creds.get("key")
        if not isinstance(username, str) or not isinstance(key, str):
            logger.error("Invalid %s format: username and key are required", CREDENTIALS_FILE)
            raise InvalidCredentialsFileError()

        logger.info("Loaded credentials from %s", path)
        return KaggleCredentials(username=username, key=key)

    def save(self, username: str, key: str) -> None:
        try:
            config_dir = self.config_dir
        except (RuntimeError, KeyError) as e:
            raise KaggleError("Could not determine home directory") from e

        path = config_dir / CREDENTIALS_FILE
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(
                json.dumps({"username": username, "key": key}, indent=2),
                encoding="utf-8",
            )
            # Owner read/write only where POSIX permission bits exist
            if os.name == "posix":
                os.chmod(path, 0o600)
        except OSError as e:
            raise KaggleIOError(str(e)) from e

        logger.info("Credentials saved to %s", path)


class MemoryCredentialStore(CredentialStore):
    """Keeps the pair in process memory; nothing touches disk."""

    def __init__(self, credentials: Optional[KaggleCredentials] = None):
        self.credentials = credentials

    def load(self) -> KaggleCredentials:
        if self.credentials is None:
            raise KaggleNotAuthenticatedError()
        return KaggleCredentials(self.credentials.username, self.credentials.key)

    def save(self, username: str, key: str) -> None:
        self.credentials = KaggleCredentials(username=username, key=key)
