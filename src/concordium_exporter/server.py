"""HTTP surface of the exporter.

Routes:
  GET /         landing page
  GET /metrics  Prometheus text exposition, collected fresh per request
  GET /health   liveness, never touches the node
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

import grpc
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, Response
from loguru import logger
from prometheus_client import CONTENT_TYPE_LATEST

from concordium_exporter import __version__
from concordium_exporter.builder import NodeAPI
from concordium_exporter.config import ExporterConfig
from concordium_exporter.node_client import NodeClient
from concordium_exporter.publisher import GaugePublisher

LANDING_PAGE = """<html>
<head><title>Concordium Exporter</title></head>
<body>
<h1>Concordium Exporter</h1>
<p><a href="/metrics">Metrics</a></p>
</body>
</html>
"""


def create_app(config: ExporterConfig, node_client: NodeAPI | None = None) -> FastAPI:
    """Build the FastAPI app.

    The gRPC channel is opened once in the lifespan and shared by every scrape.
    Passing ``node_client`` skips the channel entirely (used by tests).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        channel: grpc.aio.Channel | None = None
        client = node_client
        if client is None:
            logger.info(f"Initial connection started ({config.url})")
            channel = grpc.aio.insecure_channel(config.url)
            client = NodeClient.from_channel(channel, config.password)

        app.state.publisher = GaugePublisher(
            client,
            report_baker=config.baker,
            scrape_timeout_sec=config.scrape_timeout_sec,
        )
        try:
            yield
        finally:
            if channel is not None:
                await channel.close()
                logger.info("gRPC channel closed")

    app = FastAPI(title="Concordium Exporter", version=__version__, lifespan=lifespan)

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return LANDING_PAGE

    @app.get("/metrics")
    async def metrics(request: Request) -> Response:
        publisher: GaugePublisher = request.app.state.publisher
        return Response(content=await publisher.scrape(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True, "version": __version__}

    return app


def start_server(config: ExporterConfig) -> None:
    """Blocking runner for the CLI."""
    import uvicorn

    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port, log_level="warning")
