"""
HTTP surface for the article feed.

    POST /api/articles/fetch   {"limit": 10, "generateSummaries": true}
    GET  /api/articles/fetch?limit=10
    GET  /health

`create_app()` builds every collaborator in the lifespan; tests pass a ready
pipeline instead.
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated, Optional

from fastapi import Depends, FastAPI, Request, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from api.errors import ApiError, register_error_handlers
from config.config import Settings, get_settings
from core.bootstrap import open_pipeline
from core.pipeline import ArticlePipeline, clamp_limit

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, s-maxage=300, stale-while-revalidate=600"

class FetchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    limit: Optional[int] = None
    generate_summaries: bool = Field(True, alias="generateSummaries")

def _get_pipeline(request: Request) -> ArticlePipeline:
    return request.app.state.pipeline

def _get_settings(request: Request) -> Settings:
    return request.app.state.settings

PipelineDep = Annotated[ArticlePipeline, Depends(_get_pipeline)]
SettingsDep = Annotated[Settings, Depends(_get_settings)]

async def _read_fetch_request(request: Request) -> FetchRequest:
    # an empty or malformed body means "defaults", not an error
    try:
        payload = await request.json()
    except ValueError:
        return FetchRequest()
    if not isinstance(payload, dict):
        return FetchRequest()
    try:
        return FetchRequest.model_validate(payload)
    except ValidationError:
        logger.warning(f"Ignoring malformed fetch body: {payload!r}")
        return FetchRequest()

async def _fetch(pipeline: ArticlePipeline, settings: Settings, body: FetchRequest, response: Response) -> dict:
    limit = clamp_limit(body.limit, settings)
    try:
        page = await pipeline.fetch_page(limit, generate_summaries=body.generate_summaries)
    except Exception as exc:
        logger.exception("Article fetch failed")
        raise ApiError(500, "Failed to fetch articles") from exc
    response.headers["Cache-Control"] = CACHE_CONTROL
    return page

def create_app(pipeline: Optional[ArticlePipeline] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if pipeline is not None:
            yield
            return
        async with open_pipeline(settings) as built:
            app.state.pipeline = built
            yield

    app = FastAPI(title="BetterFeed articles", lifespan=lifespan)
    app.state.settings = settings
    if pipeline is not None:
        app.state.pipeline = pipeline
    register_error_handlers(app)

    @app.post("/api/articles/fetch")
    async def fetch_articles(request: Request, response: Response, pipeline: PipelineDep, settings: SettingsDep):
        body = await _read_fetch_request(request)
        return await _fetch(pipeline, settings, body, response)

    @app.get("/api/articles/fetch")
    async def fetch_articles_get(response: Response, pipeline: PipelineDep, settings: SettingsDep,
                                 limit: Optional[int] = None, generateSummaries: bool = True):
        body = FetchRequest(limit=limit, generate_summaries=generateSummaries)
        return await _fetch(pipeline, settings, body, response)

    @app.get("/health")
    async def health(request: Request):
        scheduler = getattr(request.app.state.pipeline, "scheduler", None)
        status = {"status": "ok"}
        if scheduler is not None:
            status["enrichment"] = {
                "running": scheduler.running,
                "pending": scheduler.pending,
                "processed": scheduler.processed,
                "failed": scheduler.failed,
            }
        return status

    return app
