from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from alias_service.dependencies import get_resolution_engine
from alias_service.errors import RateLimited
from alias_service.services.resolution import ResolutionEngine, ResolutionOutcome

router = APIRouter(tags=["redirect"])


@router.get("/{alias}")
def redirect_to_long_url(
    alias: str,
    request: Request,
    engine: ResolutionEngine = Depends(get_resolution_engine)
):
    """
    Redirect to the original URL.

    - 302 to the target when the alias resolves
    - 404 carrying the fallback address when it doesn't
    - 429 once the alias has reached its hit threshold

    Hit count and usage event are written before the response is sent.
    """
    resolution = engine.resolve(
        alias,
        client_ip=request.client.host if request.client else "",
        client_signature=request.headers.get("user-agent", ""),
    )

    if resolution.outcome is ResolutionOutcome.RATE_LIMITED:
        raise RateLimited("Too many requests for this alias.")

    if resolution.outcome is ResolutionOutcome.NOT_FOUND:
        return RedirectResponse(url=resolution.location, status_code=status.HTTP_404_NOT_FOUND)

    return RedirectResponse(url=resolution.location, status_code=status.HTTP_302_FOUND)
