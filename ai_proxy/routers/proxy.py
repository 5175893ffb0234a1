"""AI proxy endpoint: the app's only path to Gemini."""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ai_proxy.auth.schemas import User
from ai_proxy.dependencies.quota import enforce_quota, get_gemini_client, get_usage_store
from ai_proxy.schemas.proxy import ProxyRequest
from ai_proxy.services.core.request_builder import (
    MissingMediaError,
    build_upstream_request,
    route_request,
)
from ai_proxy.services.providers.gemini import (
    GeminiClient,
    MissingApiKeyError,
    UpstreamError,
    UpstreamTimeoutError,
)
from ai_proxy.services.utils.usage import UsageStore, UsageStoreError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ai-proxy"])

# One row per served call; tokens_used is a unit count, not Gemini tokens
USAGE_UNITS_PER_CALL = 1


def invalid_input(details: list) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "Invalid input", "details": details},
    )


async def parse_proxy_request(request: Request) -> ProxyRequest:
    """Validate the JSON body, reporting failures as 400 rather than FastAPI's 422."""
    try:
        body = await request.json()
    except ValueError:
        raise invalid_input([{"type": "json_invalid", "loc": ["body"], "msg": "Body is not valid JSON"}])

    try:
        return ProxyRequest.model_validate(body)
    except ValidationError as e:
        # Leave the submitted values out: they can be multi-megabyte base64 blobs
        raise invalid_input(json.loads(e.json(include_url=False, include_input=False)))


@router.post("/ai-proxy")
async def proxy_ai_request(
    request: Request,
    user: User = Depends(enforce_quota),
    store: UsageStore = Depends(get_usage_store),
    gemini: GeminiClient = Depends(get_gemini_client),
) -> JSONResponse:
    """
    Forward one nlu/vision/speech request to Gemini for an admitted caller.

    Authentication and the daily quota are enforced by the enforce_quota
    dependency before the body is even read. On success exactly one usage
    log row is written, after Gemini has answered; failures write nothing.
    """
    proxy_request = await parse_proxy_request(request)

    try:
        call = route_request(proxy_request)
    except MissingMediaError as e:
        logger.warning(f"Rejected {proxy_request.intent.value} request from user {user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    body = build_upstream_request(call)

    try:
        gemini_data = await gemini.generate_content(body)
    except MissingApiKeyError as e:
        logger.error(str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except UpstreamTimeoutError as e:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=e.message)
    except UpstreamError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)

    try:
        store.record_usage(user.id, tokens_used=USAGE_UNITS_PER_CALL)
    except UsageStoreError:
        logger.error(f"Returning Gemini response to user {user.id} without a usage log entry")

    logger.info(f"AI proxy {call.intent.value} request served for user {user.id}")
    return JSONResponse(status_code=status.HTTP_200_OK, content=gemini_data)
