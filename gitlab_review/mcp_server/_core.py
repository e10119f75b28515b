"""Core helpers: settings holder, client construction, tool result contract."""

from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import CallToolResult, TextContent

from gitlab_review import ReviewClient, ReviewError, Settings

_settings: Settings | None = None

REVIEW_FAILURE = "Error: "
COMMENT_FAILURE = "Failed to post comment: "
INLINE_FAILURE = "Failed to post inline comment: "

_FAILURE_PREFIXES = {
    "review_merge_request": REVIEW_FAILURE,
    "post_mr_comment": COMMENT_FAILURE,
    "post_inline_comment": INLINE_FAILURE,
}


def configure(settings: Settings) -> None:
    """Install the process settings resolved at startup."""
    global _settings
    _settings = settings


def _get_settings() -> Settings:
    """Return the startup settings, resolving them from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def _get_client() -> ReviewClient:
    """A fresh ReviewClient per invocation; only the settings are shared."""
    return ReviewClient(_get_settings())


def _text_result(text: str, is_error: bool = False) -> CallToolResult:
    """One text block plus the MCP error flag."""
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def _error_text(err: BaseException) -> str:
    """Error message for a tool response; non-string platform messages are JSON-encoded."""
    message = getattr(err, "message", None) or str(err)
    if not isinstance(message, str):
        message = json.dumps(message, ensure_ascii=False)
    return message


async def _call(operation, *, success, failure_prefix):
    """Await a ReviewClient operation, converting every failure into an error result.

    Args:
        operation: Coroutine producing the raw result.
        success: Callable rendering the raw result as response text.
        failure_prefix: Text placed before the error message.
    """
    try:
        result = await operation
    except ReviewError as e:
        return _text_result(f"{failure_prefix}{_error_text(e)}", is_error=True)
    except Exception as e:
        return _text_result(f"{failure_prefix}Unexpected error: {e}", is_error=True)
    return _text_result(success(result))


class ReviewServer(FastMCP):
    """FastMCP server whose tools reject arguments they do not declare.

    Argument validation failures (unknown keys, wrong JSON types) come back
    as error results with the tool's failure prefix, like any other failure.
    """

    async def call_tool(self, name, arguments):
        prefix = _FAILURE_PREFIXES.get(name, REVIEW_FAILURE)
        tool = self._tool_manager.get_tool(name)
        if tool is not None:
            declared = set(tool.parameters.get("properties", {}))
            unknown = sorted(set(arguments or {}) - declared)
            if unknown:
                return _text_result(
                    f"{prefix}[ERROR] Unknown {name} argument(s): {', '.join(unknown)}",
                    is_error=True,
                )
        try:
            return await super().call_tool(name, arguments)
        except ToolError as e:
            return _text_result(f"{prefix}[ERROR] Invalid {name} arguments: {e}", is_error=True)
