"""n8n MCP gateway CLI."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..logger import LoggingConfig, configure_logging
from .client import N8nApiClient
from .config import load_config
from .errors import ConfigError, N8nApiError
from .server import create_gateway


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="n8n MCP gateway")
    parser.add_argument("--env-file", type=Path, help="Path to a .env file with N8N_* settings")
    parser.add_argument("--transport", default="stdio", choices=["stdio", "sse", "streamable-http"])
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--log-dir", help="Also write a detailed log file to this directory")
    parser.add_argument("--check", action="store_true", help="Check the n8n API connection and exit")
    args = parser.parse_args(argv)

    load_dotenv(args.env_file)

    try:
        config = load_config()
    except ConfigError as e:
        sys.stderr.write(f"Configuration error: {e}\n")
        return 2

    configure_logging(
        LoggingConfig(
            level=logging.DEBUG if config.debug else logging.INFO,
            enable_file_logging=args.log_dir is not None,
            log_dir=args.log_dir or "logs",
        )
    )

    if args.check:
        client = N8nApiClient(config)
        try:
            client.check_connectivity()
        except N8nApiError as e:
            sys.stderr.write(f"n8n API check failed: {e}\n")
            return 1
        finally:
            client.close()
        sys.stderr.write(f"n8n API reachable at {config.api_url}\n")
        return 0

    mcp = create_gateway(config, check_connectivity=True)

    if args.transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(transport=args.transport, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
