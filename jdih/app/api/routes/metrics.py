"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose registered Prometheus metrics.

    Includes document_counter_increments_total{counter},
    document_counter_failures_total{counter, reason},
    document_counter_latency_ms{counter, outcome} and
    feed_records_served_total{endpoint}.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
