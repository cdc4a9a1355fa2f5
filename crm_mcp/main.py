#!/usr/bin/env python3
"""
CRM MCP Servers - command line entry point
Starts one vendor server: crm-mcp <vendor> [--transport stdio|sse|http]
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from . import __version__
from .adapters import ADAPTERS, BaseAdapter
from .config import ServerConfig
from .errors import ConfigurationError
from .server import create_server

logger = logging.getLogger(__name__)

JSON_LOG_FORMAT = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
TEXT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """Configure root logging on stderr; stdout belongs to the stdio transport"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=JSON_LOG_FORMAT if log_format == "json" else TEXT_LOG_FORMAT,
        stream=sys.stderr,
        force=True
    )
    # Request lines with credentials in the query string stay out of INFO logs
    logging.getLogger("httpx").setLevel(logging.WARNING)


def load_config(vendor: str, environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Read and check the configuration of one vendor server"""
    if vendor not in ADAPTERS:
        raise ConfigurationError(f"Unknown vendor '{vendor}'. Available: {', '.join(sorted(ADAPTERS))}")

    adapter_cls = ADAPTERS[vendor]
    config = ServerConfig.from_env(vendor, credential_env=adapter_cls.credential_env, environ=environ)
    config.validate_required()
    return config


def build_adapter(config: ServerConfig) -> BaseAdapter:
    return ADAPTERS[config.vendor](config)


async def serve(adapter: BaseAdapter) -> None:
    """Run the vendor server until the transport closes"""
    config = adapter.config
    mcp = create_server(adapter)

    logger.info(f"🚀 Starting {adapter.display_name} v{__version__}")
    logger.info(f"🚢 Transport: {config.transport}")

    async with adapter:
        if config.transport == "stdio":
            await mcp.run_async(transport="stdio")
        else:
            logger.info(f"🔌 Listening on {config.host}:{config.port}")
            await mcp.run_async(transport=config.transport, host=config.host, port=config.port)


def list_vendors() -> List[str]:
    """One summary line per available vendor server"""
    lines = []
    for vendor, adapter_cls in sorted(ADAPTERS.items()):
        adapter = adapter_cls(ServerConfig(vendor=vendor, credential_env=adapter_cls.credential_env))
        info = adapter.get_platform_info()
        asyncio.run(adapter.close())
        lines.append(f"{vendor:<12} {info['tools']:>3} tools  credential: {info['credential']}  ({info['name']})")
    return lines


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="crm-mcp", description="Run a CRM/helpdesk MCP server")
    parser.add_argument("vendor", nargs="?", choices=sorted(ADAPTERS), help="Vendor server to run")
    parser.add_argument("--list", action="store_true", help="List available vendor servers and exit")
    parser.add_argument("--transport", choices=["stdio", "sse", "http"], help="Override MCP_TRANSPORT")
    parser.add_argument("--host", help="Override MCP_HOST")
    parser.add_argument("--port", type=int, help="Override MCP_PORT")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)
    if not args.list and not args.vendor:
        parser.error("a vendor is required (or use --list)")
    return args


def cli(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    load_dotenv()
    setup_logging()

    if args.list:
        setup_logging("WARNING")
        print("\n".join(list_vendors()))
        return

    try:
        config = load_config(args.vendor)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    overrides = {
        key: value for key, value in (
            ("transport", args.transport),
            ("host", args.host),
            ("port", args.port),
            ("log_level", args.log_level.upper() if args.log_level else None),
        ) if value is not None
    }
    if overrides:
        config = config.model_copy(update=overrides)

    setup_logging(config.log_level, config.log_format)

    try:
        asyncio.run(serve(build_adapter(config)))
    except KeyboardInterrupt:
        logger.info("🛑 Server shutdown requested by user")
    except Exception as e:
        logger.error(f"💥 Server crashed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
