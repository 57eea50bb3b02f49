"""Kaggle REST API client."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional

import requests

from .. import __version__
from .credentials import CredentialStore, FileCredentialStore
from .errors import (
    KaggleApiError,
    KaggleAuthError,
    KaggleHttpError,
    KaggleInvalidParameterError,
    KaggleJsonError,
    KaggleNotAuthenticatedError,
)
from .models import Competition, Dataset, KaggleCredentials, Kernel, Model
from .state import ClientState, KaggleConfig

logger = logging.getLogger(__name__)

KAGGLE_API_BASE = "https://www.kaggle.com/api/v1"
USER_AGENT = f"kaggle-mcp/{__version__}"

# Names accepted by set_config/unset_config, mapped to KaggleConfig fields
CONFIG_FIELDS = {
    "competition": "competition",
    "path": "download_path",
    "proxy": "proxy",
}


def default_api_base() -> str:
    return os.environ.get("KAGGLE_API_BASE", KAGGLE_API_BASE).rstrip("/")


def _status_text(response: requests.Response) -> str:
    if response.reason:
        return f"{response.status_code} {response.reason}"
    return str(response.status_code)


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


class KaggleClient:
    """Async client for the Kaggle REST API.

    Blocking ``requests`` calls run in the default executor. Credentials and
    configuration live in an injected :class:`ClientState`; the credential
    pair is persisted through an injected :class:`CredentialStore`.
    """

    def __init__(
        self,
        state: Optional[ClientState] = None,
        store: Optional[CredentialStore] = None,
        api_base: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.state = state or ClientState()
        self.store = store or FileCredentialStore()
        self.api_base = (api_base or default_api_base()).rstrip("/")
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
        self._session = session

    def url(self, path: str) -> str:
        return f"{self.api_base}/{path.lstrip('/')}"

    async def _run(self, func: Callable[..., Any], *args) -> Any:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, func, *args)

    async def _send(
        self,
        method: str,
        path: str,
        auth: tuple[str, str],
        params: Optional[dict] = None,
    ) -> requests.Response:
        config = await self.state.get_config()
        proxies = None
        if config.proxy:
            proxies = {"http": config.proxy, "https": config.proxy}

        url = self.url(path)
        logger.debug("%s %s params=%s", method, url, params)

        def _do():
            return self._session.request(
                method,
                url,
                params=params,
                auth=auth,
                proxies=proxies,
            )

        try:
            return await self._run(_do)
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise KaggleHttpError(str(e)) from e

    async def authenticate(self, username: str, key: str) -> None:
        """Verify a credential pair against the API, then store and persist it."""
        logger.info("Authenticating with Kaggle API")
        logger.debug("Username: %s", username)

        response = await self._send("GET", "competitions/list", auth=(username, key))
        if not _is_success(response):
            status = _status_text(response)
            logger.error("Authentication failed with status: %s", status)
            raise KaggleAuthError(f"Invalid credentials: {status}")

        logger.info("Authentication successful")
        await self.state.set_credentials(KaggleCredentials(username=username, key=key))
        await self._run(self.store.save, username, key)

    async def is_authenticated(self) -> bool:
        """Whether credentials are stored. Does not re-validate them."""
        return await self.state.has_credentials()

    async def load_credentials(self) -> None:
        """Load credentials from the store without validating them."""
        logger.info("Loading Kaggle credentials")
        credentials = await self._run(self.store.load)
        await self.state.set_credentials(credentials)

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
    ) -> requests.Response:
        """Send an authenticated request and return the raw response.

        Raises KaggleNotAuthenticatedError without touching the network when
        no credentials are stored, and KaggleApiError on any non-2xx status.
        """
        credentials = await self.state.get_credentials()
        if credentials is None:
            raise KaggleNotAuthenticatedError()

        response = await self._send(
            method, path, auth=(credentials.username, credentials.key), params=params
        )
        if _is_success(response):
            return response

        try:
            text = response.text
        except (requests.RequestException, UnicodeDecodeError):
            text = ""
        raise KaggleApiError(
            code=_status_text(response),
            message=text,
            status_code=response.status_code,
        )

    async def _get_json(self, path: str, params: dict) -> Any:
        response = await self.request("GET", path, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise KaggleJsonError(str(e)) from e

    @staticmethod
    def _expect_list(payload: Any, what: str) -> list:
        if not isinstance(payload, list):
            raise KaggleJsonError(f"expected a list of {what}, got {type(payload).__name__}")
        return payload

    async def list_competitions(
        self,
        search: str = "",
        category: str = "all",
        group: str = "general",
        sort_by: str = "latestDeadline",
        page: int = 1,
    ) -> list[Competition]:
        """List competitions in the order the API returns them."""
        payload = await self._get_json(
            "competitions/list",
            {
                "search": search,
                "category": category,
                "group": group,
                "sortBy": sort_by,
                "page": page,
            },
        )
        rows = self._expect_list(payload, "competitions")
        return [Competition.from_api_response(row) for row in rows]

    async def list_datasets(
        self,
        search: str = "",
        sort_by: str = "hottest",
        page: int = 1,
    ) -> list[Dataset]:
        """List datasets."""
        payload = await self._get_json(
            "datasets/list",
            {"search": search, "sortBy": sort_by, "page": page},
        )
        rows = self._expect_list(payload, "datasets")
        return [Dataset.from_api_response(row) for row in rows]

    async def list_kernels(
        self,
        search: str = "",
        sort_by: str = "hotness",
        page: int = 1,
        page_size: int = 20,
    ) -> list[Kernel]:
        """List kernels (notebooks and scripts)."""
        payload = await self._get_json(
            "kernels/list",
            {"search": search, "sortBy": sort_by, "page": page, "pageSize": page_size},
        )
        rows = self._expect_list(payload, "kernels")
        return [Kernel.from_api_response(row) for row in rows]

    async def list_models(
        self,
        search: str = "",
        sort_by: str = "hotness",
        page_size: int = 20,
        page_token: Optional[str] = None,
    ) -> list[Model]:
        """List models. The API pages these with a token rather than a number."""
        params = {"search": search, "sortBy": sort_by, "pageSize": page_size}
        if page_token:
            params["pageToken"] = page_token
        payload = await self._get_json("models/list", params)
        if isinstance(payload, dict):
            payload = payload.get("models") or []
        rows = self._expect_list(payload, "models")
        return [Model.from_api_response(row) for row in rows]

    async def get_config(self) -> KaggleConfig:
        return await self.state.get_config()

    async def set_config(self, name: str, value: Optional[str]) -> KaggleConfig:
        """Set one configuration value. ``None`` clears it."""
        field_name = CONFIG_FIELDS.get(name)
        if field_name is None:
            raise KaggleInvalidParameterError(
                f"unknown config name {name!r}, expected one of {', '.join(CONFIG_FIELDS)}"
            )
        if field_name == "download_path" and value is not None:
            value = Path(value)
        logger.info("Setting config %s", name)
        return await self.state.update_config(**{field_name: value})

    async def unset_config(self, name: str) -> KaggleConfig:
        return await self.set_config(name, None)
