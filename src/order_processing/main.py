from __future__ import annotations

import sys

import uvicorn

from order_processing.adapters.inbound.cli import run_cli
from order_processing.bootstrap import build_processor, configure_logging
from order_processing.config import load_settings


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = load_settings()
    configure_logging(settings.log_level)

    if not argv:
        uvicorn.run(
            "order_processing.asgi:app",
            host=settings.host,
            port=settings.port,
            reload=False,
        )
        return 0

    return run_cli(build_processor(settings), argv[0])


if __name__ == "__main__":
    raise SystemExit(main())
