"""Run the GitLab review MCP server in streamable-http mode."""

import os

from gitlab_review.mcp_server import configure, load_startup_settings, mcp

if __name__ == "__main__":
    configure(load_startup_settings())
    mcp.settings.host = os.environ.get("MCP_HTTP_HOST", "127.0.0.1")
    mcp.settings.port = int(os.environ.get("MCP_HTTP_PORT", "8808"))
    mcp.run(transport="streamable-http")
