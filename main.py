#!/usr/bin/env python3
"""Driver Sample Build MCP Server - Main entry point."""

import argparse
import asyncio
import contextlib
import json
import logging
import sys
from collections.abc import AsyncIterator
from pathlib import Path

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.types import Tool, TextContent
from starlette.applications import Starlette

from sample_builder.config import ConfigLoader
from sample_builder.models import BuildRequest
from sample_builder.msbuild import MSBuildInvoker
from sample_builder.orchestrator import SampleBuilder
from sample_builder.path_utils import convert_wsl_to_windows_path, find_solution_file
from sample_builder.sln_parser import SolutionParser


# Create MCP server instance
app = Server("driver-sample-build-server")


# Tool definitions
BUILD_SAMPLE_TOOL = Tool(
    name="build_driver_sample",
    description=(
        "Build the Visual Studio solution in a driver sample directory with MSBuild "
        "for one configuration and platform. Runs clean+build with warnings treated as "
        "errors and writes <sample>.<configuration>.<platform>.err/.wrn/.out logs. "
        "Returns status success, skipped (pair not declared by the solution) or failed, "
        "with the matching exit code 0, 2 or 1."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "directory": {
                "type": "string",
                "description": "Path to the sample directory containing the .sln file",
            },
            "sample_name": {
                "type": "string",
                "description": "Sample name for log files (default: derived from directory)",
                "default": None,
            },
            "configuration": {
                "type": "string",
                "description": 'Build configuration (e.g., "Debug", "Release")',
                "default": None,
            },
            "platform": {
                "type": "string",
                "description": 'Target platform (e.g., "x64", "ARM64")',
                "default": None,
            },
            "log_directory": {
                "type": "string",
                "description": "Directory for log files (default: current directory)",
                "default": None,
            },
            "wipe_outputs": {
                "type": "boolean",
                "description": "Remove architecture-named output folders after a successful build",
                "default": None,
            },
        },
        "required": ["directory"],
    },
)

LIST_CONFIGURATIONS_TOOL = Tool(
    name="list_solution_configurations",
    description=(
        "List the Configuration|Platform pairs declared in the "
        "SolutionConfigurationPlatforms section of the .sln file in a sample directory."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "directory": {
                "type": "string",
                "description": "Path to the sample directory containing the .sln file",
            },
        },
        "required": ["directory"],
    },
)


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [BUILD_SAMPLE_TOOL, LIST_CONFIGURATIONS_TOOL]


@app.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool invocations."""
    try:
        if name == "build_driver_sample":
            result = await handle_build_sample(arguments)
            return [TextContent(type="text", text=result)]

        elif name == "list_solution_configurations":
            result = await handle_list_configurations(arguments)
            return [TextContent(type="text", text=result)]

        else:
            raise ValueError(f"Unknown tool: {name}")

    except Exception as e:
        error_msg = f"Error executing {name}: {str(e)}"
        return [TextContent(type="text", text=error_msg)]


async def handle_build_sample(arguments: dict) -> str:
    """Handle build_driver_sample tool invocation.

    Args:
        arguments: Tool arguments

    Returns:
        JSON string with build result
    """
    config = ConfigLoader().load()

    directory = Path(convert_wsl_to_windows_path(arguments["directory"]))
    log_directory = arguments.get("log_directory")
    if log_directory:
        log_directory = Path(convert_wsl_to_windows_path(log_directory))
    else:
        log_directory = config.build.log_directory or Path.cwd()

    wipe_outputs = arguments.get("wipe_outputs")
    if wipe_outputs is None:
        wipe_outputs = config.cleanup.wipe_outputs

    request = BuildRequest(
        directory=directory,
        sample_name=arguments.get("sample_name"),
        configuration=arguments.get("configuration") or config.build.configuration,
        platform=arguments.get("platform") or config.build.platform,
        log_directory=log_directory,
        wipe_outputs=wipe_outputs,
        cleanup_architectures=config.cleanup.architectures,
        verbose=True,
    )

    builder = SampleBuilder(MSBuildInvoker(msbuild_path=config.msbuild.path))
    result = builder.build(request)

    payload = result.model_dump(mode="json")
    payload["exit_code"] = result.exit_code
    return json.dumps(payload, indent=2)


async def handle_list_configurations(arguments: dict) -> str:
    """Handle list_solution_configurations tool invocation.

    Args:
        arguments: Tool arguments

    Returns:
        JSON string with the solution path and its pairs
    """
    directory = Path(convert_wsl_to_windows_path(arguments["directory"]))
    if not directory.is_dir():
        raise FileNotFoundError(f"Directory not found: {directory}")

    solution_path = find_solution_file(directory)
    if solution_path is None:
        raise FileNotFoundError(f"No .sln file found in {directory}")

    pairs = SolutionParser(solution_path).parse()
    return json.dumps(
        {
            "solution_file": str(solution_path),
            "configurations": sorted(str(p) for p in pairs),
        },
        indent=2,
    )


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Driver Sample Build MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http"],
        default="stdio",
        help="Transport type (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0, only used with streamable-http)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port to listen on (default: 8080, only used with streamable-http)",
    )
    return parser.parse_args()


async def run_streamable_http(host: str, port: int) -> None:
    """Run the MCP server with Streamable HTTP transport."""
    import uvicorn

    session_manager = StreamableHTTPSessionManager(app=app)

    @contextlib.asynccontextmanager
    async def lifespan(starlette_app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            yield

    # Starlette only runs the lifespan; /mcp is dispatched at the ASGI level
    # because handle_request writes to send directly.
    starlette_app = Starlette(lifespan=lifespan)

    async def asgi_app(scope, receive, send):
        if scope["type"] == "http" and scope["path"] == "/mcp":
            await session_manager.handle_request(scope, receive, send)
        else:
            await starlette_app(scope, receive, send)

    config = uvicorn.Config(
        asgi_app,
        host=host,
        port=port,
        log_level="info",
    )
    server = uvicorn.Server(config)
    await server.serve()


async def main():
    """Main entry point for the MCP server."""
    args = parse_args()

    # stdout carries the protocol on the stdio transport
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.transport == "streamable-http":
        await run_streamable_http(args.host, args.port)
    else:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
