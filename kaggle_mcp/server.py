"""Kaggle MCP Server - Main entry point."""

import asyncio
import json
import logging
import os
import sys
from typing import Any, Optional

from dotenv import load_dotenv
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, ErrorData, TextContent, Tool
from pydantic import BaseModel, Field, ValidationError

from . import __version__
from .kaggle_api import (
    AuthenticationResponse,
    KaggleClient,
    KaggleConfig,
    KaggleError,
    KaggleInvalidParameterError,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "kaggle-mcp"
INSTRUCTIONS = (
    "This server provides access to the Kaggle API through MCP. "
    "First authenticate using the 'authenticate' tool with your Kaggle credentials."
)
NOT_AUTHENTICATED_MESSAGE = "Not authenticated. Please use the authenticate tool first."
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


class AuthenticateParams(BaseModel):
    kaggle_username: str = Field(description="Your Kaggle username")
    kaggle_key: str = Field(description="Your Kaggle API key")


class CompetitionsListParams(BaseModel):
    search: str = Field(default="", description="Term(s) to search for")
    category: str = Field(
        default="all",
        description="Filter by category (all, featured, research, recruitment, gettingStarted, masters, playground)",
    )
    group: str = Field(
        default="general",
        description="Filter by group (general, entered, inClass)",
    )
    sort_by: str = Field(
        default="latestDeadline",
        description="Sort by (grouped, prize, earliestDeadline, latestDeadline, numberOfTeams, recentlyCreated)",
    )
    page: int = Field(default=1, description="Page number for results paging")


class DatasetsListParams(BaseModel):
    search: str = Field(default="", description="Term(s) to search for")
    sort_by: str = Field(
        default="hottest",
        description="Sort by (hottest, votes, updated, active, published)",
    )
    page: int = Field(default=1, description="Page number for results paging")


class KernelsListParams(BaseModel):
    search: str = Field(default="", description="Term(s) to search for")
    sort_by: str = Field(
        default="hotness",
        description="Sort by (hotness, commentCount, dateCreated, dateRun, relevance, scoreAscending, scoreDescending, viewCount, voteCount)",
    )
    page: int = Field(default=1, description="Page number for results paging")
    page_size: int = Field(default=20, description="Number of items per page")


class ModelsListParams(BaseModel):
    search: str = Field(default="", description="Term(s) to search for")
    sort_by: str = Field(
        default="hotness",
        description="Sort by (hotness, downloadCount, voteCount, notebookCount, createTime)",
    )
    page_size: int = Field(default=20, description="Number of items per page")
    page_token: Optional[str] = Field(
        default=None, description="Token of the page to fetch, from a previous listing"
    )


class ConfigViewParams(BaseModel):
    pass


class ConfigSetParams(BaseModel):
    name: str = Field(description="Configuration name (competition, path, proxy)")
    value: str = Field(description="Value to store")


class ConfigUnsetParams(BaseModel):
    name: str = Field(description="Configuration name (competition, path, proxy)")


TOOL_SPECS: dict[str, tuple[str, type[BaseModel]]] = {
    "authenticate": (
        "Authenticate with the Kaggle API using your username and API key",
        AuthenticateParams,
    ),
    "competitions_list": (
        "List available Kaggle competitions with filtering and sorting options",
        CompetitionsListParams,
    ),
    "datasets_list": (
        "List Kaggle datasets matching a search term",
        DatasetsListParams,
    ),
    "kernels_list": (
        "List Kaggle notebooks and scripts matching a search term",
        KernelsListParams,
    ),
    "models_list": (
        "List Kaggle models matching a search term",
        ModelsListParams,
    ),
    "config_view": (
        "Show the current Kaggle client configuration",
        ConfigViewParams,
    ),
    "config_set": (
        "Set a Kaggle client configuration value (competition, path or proxy)",
        ConfigSetParams,
    ),
    "config_unset": (
        "Clear a Kaggle client configuration value",
        ConfigUnsetParams,
    ),
}


def get_tools() -> list[Tool]:
    """Define all available MCP tools."""
    return [
        Tool(
            name=name,
            description=description,
            inputSchema=params.model_json_schema(),
        )
        for name, (description, params) in TOOL_SPECS.items()
    ]


def parse_params(model: type[BaseModel], arguments: Optional[dict[str, Any]]) -> Any:
    """Validate tool arguments against the tool's parameter model."""
    try:
        return model.model_validate(arguments or {})
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise KaggleInvalidParameterError(details) from e


async def ensure_authenticated(client: KaggleClient):
    if not await client.is_authenticated():
        raise KaggleError(NOT_AUTHENTICATED_MESSAGE)


def config_to_dict(config: KaggleConfig) -> dict:
    return {
        "competition": config.competition,
        "path": str(config.download_path) if config.download_path else None,
        "proxy": config.proxy,
    }


async def handle_authenticate(client: KaggleClient, args: dict) -> dict:
    """Verify and store Kaggle credentials."""
    params = parse_params(AuthenticateParams, args)
    await client.authenticate(params.kaggle_username, params.kaggle_key)
    return AuthenticationResponse(
        success=True,
        message="Successfully authenticated with Kaggle API",
        username=params.kaggle_username,
    ).to_dict()


async def handle_competitions_list(client: KaggleClient, args: dict) -> list[dict]:
    """List competitions."""
    params = parse_params(CompetitionsListParams, args)
    await ensure_authenticated(client)
    try:
        competitions = await client.list_competitions(
            search=params.search,
            category=params.category,
            group=params.group,
            sort_by=params.sort_by,
            page=params.page,
        )
    except KaggleError as e:
        raise KaggleError(f"Error listing competitions: {e}") from e
    return [c.to_dict() for c in competitions]


async def handle_datasets_list(client: KaggleClient, args: dict) -> list[dict]:
    """List datasets."""
    params = parse_params(DatasetsListParams, args)
    await ensure_authenticated(client)
    try:
        datasets = await client.list_datasets(
            search=params.search,
            sort_by=params.sort_by,
            page=params.page,
        )
    except KaggleError as e:
        raise KaggleError(f"Error listing datasets: {e}") from e
    return [d.to_dict() for d in datasets]


async def handle_kernels_list(client: KaggleClient, args: dict) -> list[dict]:
    params = parse_params(KernelsListParams, args)
    await ensure_authenticated(client)
    try:
        kernels = await client.list_kernels(
            search=params.search,
            sort_by=params.sort_by,
            page=params.page,
            page_size=params.page_size,
        )
    except KaggleError as e:
        raise KaggleError(f"Error listing kernels: {e}") from e
    return [k.to_dict() for k in kernels]


async def handle_models_list(client: KaggleClient, args: dict) -> list[dict]:
    params = parse_params(ModelsListParams, args)
    await ensure_authenticated(client)
    try:
        models = await client.list_models(
            search=params.search,
            sort_by=params.sort_by,
            page_size=params.page_size,
            page_token=params.page_token,
        )
    except KaggleError as e:
        raise KaggleError(f"Error listing models: {e}") from e
    return [m.to_dict() for m in models]


async def handle_config_view(client: KaggleClient, args: dict) -> dict:
    parse_params(ConfigViewParams, args)
    return config_to_dict(await client.get_config())


async def handle_config_set(client: KaggleClient, args: dict) -> dict:
    params = parse_params(ConfigSetParams, args)
    return config_to_dict(await client.set_config(params.name, params.value))


async def handle_config_unset(client: KaggleClient, args: dict) -> dict:
    params = parse_params(ConfigUnsetParams, args)
    return config_to_dict(await client.unset_config(params.name))


HANDLERS = {
    "authenticate": handle_authenticate,
    "competitions_list": handle_competitions_list,
    "datasets_list": handle_datasets_list,
    "kernels_list": handle_kernels_list,
    "models_list": handle_models_list,
    "config_view": handle_config_view,
    "config_set": handle_config_set,
    "config_unset": handle_config_unset,
}


async def handle_tool_call(client: KaggleClient, name: str, arguments: Optional[dict[str, Any]]) -> Any:
    """Route tool calls to handlers."""
    handler = HANDLERS.get(name)
    if not handler:
        raise KaggleError(f"Unknown tool: {name}")
    return await handler(client, arguments or {})


async def call_tool_content(
    client: KaggleClient,
    name: str,
    arguments: Optional[dict[str, Any]],
) -> list[TextContent]:
    """Run a tool and render its result, or raise an MCP internal error."""
    try:
        result = await handle_tool_call(client, name, arguments)
    except KaggleError as e:
        logger.error("Tool %s failed: %s", name, e)
        raise McpError(ErrorData(code=INTERNAL_ERROR, message=str(e))) from e
    except Exception as e:
        logger.exception("Tool %s failed unexpectedly", name)
        raise McpError(ErrorData(code=INTERNAL_ERROR, message=str(e))) from e
    return [TextContent(type="text", text=json.dumps(result, indent=2, default=str))]


def create_server(client: KaggleClient) -> Server:
    """Build the MCP server around a Kaggle client."""
    server = Server(SERVER_NAME, version=__version__, instructions=INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return get_tools()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls."""
        return await call_tool_content(client, name, arguments)

    return server


async def load_stored_credentials(client: KaggleClient) -> bool:
    """Best-effort credential load at startup. Failures are logged and ignored."""
    try:
        await client.load_credentials()
    except KaggleError as e:
        logger.info("Starting without stored Kaggle credentials: %s", e)
        return False
    logger.info("Loaded stored Kaggle credentials")
    return True


async def run_server(client: Optional[KaggleClient] = None):
    """Run the MCP server."""
    client = client or KaggleClient()
    await load_stored_credentials(client)
    server = create_server(client)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def configure_logging():
    """Log to stderr; stdout carries the MCP stream."""
    level_name = os.environ.get("KAGGLE_MCP_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(stream=sys.stderr, level=level, format=LOG_FORMAT)


def main():
    """Main entry point."""
    load_dotenv()
    configure_logging()
    logger.info("Starting Kaggle MCP server")
    try:
        asyncio.run(run_server())
    except KeyboardInterrupt:
        logger.info("Kaggle MCP server stopped")


if __name__ == "__main__":
    main()
