from __future__ import annotations

import sys
from typing import Sequence

from loguru import logger

from concordium_exporter import __version__
from concordium_exporter.config import load_config
from concordium_exporter.server import start_server


def main(argv: Sequence[str] | None = None) -> None:
    config = load_config(argv)

    logger.remove()
    logger.add(sys.stderr, level=config.log_level)

    logger.info(f"concordium-exporter: v{__version__}")
    logger.info(f"Parameters: {config.describe()}")

    start_server(config)


if __name__ == "__main__":
    main()
