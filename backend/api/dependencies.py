from collections.abc import AsyncGenerator
from datetime import date

import httpx
from fastapi import Depends

from backend.settings import Settings


def get_settings() -> Settings:
    return Settings()


def get_today() -> date:
    return date.today()


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Provide a GitHub HTTP client that lives for a single request."""

    async with httpx.AsyncClient(timeout=settings.github_timeout_seconds) as client:
        yield client
