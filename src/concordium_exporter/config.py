from __future__ import annotations

import argparse
import os
from typing import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from concordium_exporter import __version__

ENV_PREFIX = "CCDEXPORTER_"

DEFAULT_URL = "localhost:10000"
DEFAULT_PORT = 9360
DEFAULT_PASSWORD = "rpcadmin"
DEFAULT_SCRAPE_TIMEOUT_SEC = 10.0
DEFAULT_LOG_LEVEL = "INFO"

USAGE = "concordium_exporter [flags]\n\nPrometheus exporter for Concordium node metrics\n"

_TRUE = {"1", "t", "true"}
_FALSE = {"0", "f", "false"}


class ExporterConfig(BaseModel):
    """Process configuration, fixed at startup."""

    model_config = ConfigDict(frozen=True)

    url: str = DEFAULT_URL
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    password: str = DEFAULT_PASSWORD
    baker: bool = False
    scrape_timeout_sec: float = Field(default=DEFAULT_SCRAPE_TIMEOUT_SEC, gt=0)
    log_level: str = DEFAULT_LOG_LEVEL

    def describe(self) -> str:
        return (
            f"URL={self.url} PORT={self.port} PASSWORD={'*' * len(self.password)} "
            f"BAKER={self.baker} SCRAPE_TIMEOUT={self.scrape_timeout_sec}s"
        )


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def build_parser(env: Mapping[str, str] | None = None) -> argparse.ArgumentParser:
    """Flags fall back to ``CCDEXPORTER_<FLAG>`` environment variables, then to the
    built-in defaults. An explicit flag always wins."""
    env = os.environ if env is None else env

    def default(flag: str, fallback):
        return env.get(f"{ENV_PREFIX}{flag.upper()}") or fallback

    parser = argparse.ArgumentParser(
        prog="concordium_exporter",
        usage=USAGE,
        description="Flags can also be set through CCDEXPORTER_<FLAG> environment variables.",
    )
    parser.add_argument("-url", "--url", default=default("url", DEFAULT_URL), help="Concordium gRPC URL")
    parser.add_argument(
        "-hport",
        "--hport",
        type=int,
        default=default("hport", DEFAULT_PORT),
        help="The port listens on for HTTP requests",
    )
    parser.add_argument(
        "-pwd", "--pwd", default=default("pwd", DEFAULT_PASSWORD), help="The password to pass concordium node"
    )
    parser.add_argument(
        "-baker",
        "--baker",
        type=parse_bool,
        nargs="?",
        const=True,
        default=default("baker", "false"),
        help="Whether your node is baking",
    )
    parser.add_argument(
        "--scrape-timeout",
        type=float,
        default=default("scrape_timeout", DEFAULT_SCRAPE_TIMEOUT_SEC),
        help="Deadline in seconds for collecting one scrape",
    )
    parser.add_argument(
        "--log-level", default=default("log_level", DEFAULT_LOG_LEVEL), help="Log level (DEBUG, INFO, ...)"
    )
    parser.add_argument("--version", action="version", version=f"concordium-exporter: v{__version__}")
    return parser


def load_config(argv: Sequence[str] | None = None, env: Mapping[str, str] | None = None) -> ExporterConfig:
    args = build_parser(env).parse_args(argv)
    # string defaults (env values) are converted by each flag's ``type``
    return ExporterConfig(
        url=args.url,
        port=args.hport,
        password=args.pwd,
        baker=args.baker,
        scrape_timeout_sec=args.scrape_timeout,
        log_level=args.log_level.upper(),
    )
