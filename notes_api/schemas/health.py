"""Liveness payload for load balancers."""

from typing import Literal

from notes_api.schemas.base import ApiModel


class HealthResponse(ApiModel):
    status: Literal["ok", "degraded"]
    environment: str
    database: Literal["connected", "disconnected"]
    # "disabled" when REDIS_URL is unset
    cache: Literal["connected", "disconnected", "disabled"]
