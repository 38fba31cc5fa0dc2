"""FastAPI application serving site search next to the built site."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from docsearch import __version__
from docsearch.config import SearchConfig
from docsearch.index.search import SearchController

LOGGER = logging.getLogger(__name__)


class SearchPayload(BaseModel):
    query: str


def _controller(request: Request) -> SearchController:
    return request.app.state.controller


async def _run_search(request: Request, query: str) -> dict[str, Any]:
    controller = _controller(request)
    available = await controller.wait_ready()
    results = controller.query_changed(query)
    return {
        "results": [result.to_render() for result in results],
        "available": available,
    }


def create_app(config: SearchConfig | None = None, **store_kwargs: Any) -> FastAPI:
    """Build the app; the built site is mounted at ``/`` when it exists."""
    config = config or SearchConfig()

    app = FastAPI(title="docsearch", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.config = config
    app.state.controller = SearchController.from_config(config, **store_kwargs)

    @app.on_event("startup")
    async def startup_event() -> None:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        app.state.controller.open()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        app.state.controller.dispose()

    @app.get("/health")
    async def health(request: Request) -> dict[str, Any]:
        controller = _controller(request)
        return {
            "status": "ok" if controller.index_available else "degraded",
            "state": controller.state.value,
            "documents": len(controller.store.snapshot),
        }

    @app.get("/search")
    async def search_get(request: Request, q: str = "") -> dict[str, Any]:
        return await _run_search(request, q)

    @app.post("/search")
    async def search_post(request: Request, payload: SearchPayload) -> dict[str, Any]:
        return await _run_search(request, payload.query)

    site_dir = config.resolve_site_dir(Path.cwd())
    if config.base_url is None and site_dir.is_dir():
        LOGGER.info("Serving site from %s", site_dir)
        app.mount("/", StaticFiles(directory=site_dir, html=True), name="site")

    return app


app = create_app()
