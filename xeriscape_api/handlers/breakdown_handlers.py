"""API handlers for the breakdown endpoints"""

from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from xeriscape_api.config import (
    BREAKDOWN_TEMPERATURE,
    BREAKDOWN_MAX_TOKENS,
    TOPDOWN_TEMPERATURE,
    TOPDOWN_MAX_TOKENS,
    TOPDOWN_PLACEHOLDER_URL,
    ProviderSelection,
    logger,
)
from xeriscape_api.handlers.common import (
    error_response,
    read_json_body,
    resolve_provider,
    validate_body,
)
from xeriscape_api.models.request_models import BreakdownRequest, BreakdownResponse
from xeriscape_api.services.ai_service import ai_service, extract_image_urls, extract_message_content
from xeriscape_api.services.prompt_service import build_breakdown_messages, build_topdown_plan_prompt
from xeriscape_api.utils.errors import UpstreamError


async def _request_breakdown(
    selection: ProviderSelection,
    body: BreakdownRequest,
    topdown: bool,
) -> str:
    payload = {
        "model": selection.chat_model,
        "messages": build_breakdown_messages(
            body.image_url,
            tier=body.tier,
            satellite_reference=body.satellite_reference,
            topdown=topdown,
        ),
        "temperature": TOPDOWN_TEMPERATURE if topdown else BREAKDOWN_TEMPERATURE,
        "max_tokens": TOPDOWN_MAX_TOKENS if topdown else BREAKDOWN_MAX_TOKENS,
    }
    data = await run_in_threadpool(ai_service.create_chat_completion, selection, payload)
    return extract_message_content(data)


async def _request_topdown_plan(selection: ProviderSelection, tier: str) -> str:
    """Generate the bird's-eye plan image, falling back to the placeholder URL"""
    payload = {
        "model": selection.image_model,
        "prompt": build_topdown_plan_prompt(tier),
        "n": 1,
    }
    try:
        data = await run_in_threadpool(ai_service.create_images, selection, payload)
        return extract_image_urls(data)[0]
    except UpstreamError as e:
        logger.warning(f"[topdown-breakdown] Plan image failed, using placeholder: {e.message}")
        return TOPDOWN_PLACEHOLDER_URL


async def breakdown(request: Request) -> JSONResponse:
    """
    Handler for generating a Markdown cost/plant breakdown of a design image

    Args:
        request: Raw request; body is {imageUrl, tier?} or {imageUrl, packageName?}

    Returns:
        JSONResponse with {"breakdown": ...} or {"error": ...}
    """
    try:
        body = validate_body(BreakdownRequest, await read_json_body(request))
        selection = resolve_provider()

        logger.info(f"[breakdown] Analyzing {body.image_url[:100]} for tier {body.tier!r}")
        content = await _request_breakdown(selection, body, topdown=False)

        return JSONResponse(content=BreakdownResponse(breakdown=content).model_dump(exclude_none=True))
    except Exception as e:
        return error_response(e, "breakdown")


async def topdown_breakdown(request: Request) -> JSONResponse:
    """
    Handler for the top-down variant: breakdown plus a generated site plan image

    Args:
        request: Raw request; body is {conceptUrl, satelliteReference?, tier?}

    Returns:
        JSONResponse with {"breakdown": ..., "topDownUrl": ...} or {"error": ...}
    """
    try:
        body = validate_body(BreakdownRequest, await read_json_body(request))
        selection = resolve_provider()

        logger.info(
            f"[topdown-breakdown] Analyzing {body.image_url[:100]} for tier {body.tier!r}"
            f" (satellite reference: {'yes' if body.satellite_reference else 'no'})"
        )
        content = await _request_breakdown(selection, body, topdown=True)
        top_down_url = await _request_topdown_plan(selection, body.tier)

        response = BreakdownResponse(breakdown=content, top_down_url=top_down_url)
        return JSONResponse(content=response.model_dump(by_alias=True, exclude_none=True))
    except Exception as e:
        return error_response(e, "topdown-breakdown")
