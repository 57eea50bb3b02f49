"""Shared credential and configuration state for the Kaggle client."""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from pathlib import Path
from typing import AsyncIterator, Optional

from .models import KaggleCredentials


@dataclass
class KaggleConfig:
    """Configuration for Kaggle API client."""
    competition: Optional[str] = None
    download_path: Optional[Path] = None
    proxy: Optional[str] = None


class ReadWriteLock:
    """Many concurrent readers or one exclusive writer.

    Writers waiting for the lock block new readers from entering.
    """

    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @asynccontextmanager
    async def reader(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and self._writers_waiting == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def writer(self) -> AsyncIterator[None]:
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer and self._readers == 0
                )
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def locked_for_write(self) -> bool:
        return self._writer


class ClientState:
    """Credentials and configuration shared by every client operation.

    Values are copied in and out so callers never hold a reference into
    the guarded state after the lock is released.
    """

    def __init__(
        self,
        credentials: Optional[KaggleCredentials] = None,
        config: Optional[KaggleConfig] = None,
    ):
        self.lock = ReadWriteLock()
        self._credentials = credentials
        self._config = config or KaggleConfig()

    async def get_credentials(self) -> Optional[KaggleCredentials]:
        async with self.lock.reader():
            if self._credentials is None:
                return None
            return replace(self._credentials)

    async def set_credentials(self, credentials: KaggleCredentials) -> None:
        async with self.lock.writer():
            self._credentials = replace(credentials)

    async def has_credentials(self) -> bool:
        async with self.lock.reader():
            return self._credentials is not None

    async def get_config(self) -> KaggleConfig:
        async with self.lock.reader():
            return replace(self._config)

    async def update_config(self, **changes) -> KaggleConfig:
        async with self.lock.writer():
            self._config = replace(self._config, **changes)
            return replace(self._config)
