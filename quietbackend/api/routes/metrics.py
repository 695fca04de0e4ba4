"""Metrics Scrape Endpoint — Prometheus text exposition of the app's registry."""

from fastapi import APIRouter, Request, Response

from quietbackend.infrastructure.metrics import CONTENT_TYPE_LATEST, render_latest

router = APIRouter(tags=["metrics"])


@router.get("/metrics", include_in_schema=False)
async def scrape(request: Request):
    return Response(
        content=render_latest(request.app.state.metrics_registry),
        media_type=CONTENT_TYPE_LATEST,
    )
