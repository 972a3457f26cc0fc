import hashlib
import logging
from datetime import date

import httpx
from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi.responses import PlainTextResponse
from starlette.responses import Response

from backend.api.dependencies import get_http_client
from backend.api.dependencies import get_settings
from backend.api.dependencies import get_today
from backend.github_api import DataUnavailableError
from backend.services.graph_service import ConfigurationError
from backend.services.graph_service import InvalidParameterError
from backend.services.graph_service import NoAuthorizedUsersError
from backend.services.graph_service import build_contribution_graph
from backend.settings import Settings


logger = logging.getLogger(__name__)

router = APIRouter()

SVG_MEDIA_TYPE = "image/svg+xml"
GENERIC_ERROR_MESSAGE = "An error occurred while generating the contribution graph"


def svg_etag(svg: str) -> str:
    """Weak ETag derived from the document, stable for identical output."""

    digest = hashlib.sha256(svg.encode("utf-8")).hexdigest()[:32]
    return f'W/"{digest}"'


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/", response_class=Response)
async def get_contribution_graph(
    merge: str | None = Query(default=None),
    years: str | None = Query(default=None),
    theme: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
    today: date = Depends(get_today),
) -> Response:
    """Return the merged contribution graph of the configured users as SVG."""

    try:
        svg = await build_contribution_graph(
            client,
            settings,
            merge=merge,
            years=years,
            theme=theme,
            today=today,
        )
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return PlainTextResponse(str(exc), status_code=500)
    except (InvalidParameterError, NoAuthorizedUsersError) as exc:
        return PlainTextResponse(str(exc), status_code=400)
    except DataUnavailableError:
        logger.exception("Failed to fetch contributions")
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)
    except Exception:
        logger.exception("Failed to generate contribution graph")
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)

    return Response(
        content=svg,
        media_type=SVG_MEDIA_TYPE,
        headers={
            "Cache-Control": settings.cache_control,
            "Access-Control-Allow-Origin": "*",
            "ETag": svg_etag(svg),
        },
    )
