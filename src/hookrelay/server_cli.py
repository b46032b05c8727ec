"""CLI entry point for the webhook relay server."""

import argparse
import os

from hookrelay.config import settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="hookrelay-server",
        description="Webhook relay: verifies, filters and forwards GitHub deliveries to MS Teams",
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind host (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port})")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level for the relay and uvicorn (default: {settings.log_level})",
    )
    args = parser.parse_args(argv)

    # Read back by build_default_app, which loads settings fresh
    os.environ["HOOKRELAY_LOG_LEVEL"] = args.log_level

    import uvicorn

    uvicorn.run(
        "hookrelay.main:build_default_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
