"""API handlers for design image generation and the tier catalog"""

from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from xeriscape_api.config import logger
from xeriscape_api.handlers.common import (
    error_response,
    read_json_body,
    resolve_provider,
    validate_body,
)
from xeriscape_api.models.request_models import GenerateRequest, GenerateResponse, GeneratedImage
from xeriscape_api.services.ai_service import ai_service, extract_image_urls
from xeriscape_api.services.prompt_service import build_design_prompt, load_tiers
from xeriscape_api.utils.errors import ClientInputError
from xeriscape_api.utils.image_utils import prepare_reference_image


async def generate_designs(request: Request) -> JSONResponse:
    """
    Handler for generating landscape design images

    Args:
        request: Raw request; body is {prompt, isEdit, imageBase64, n, aspect}

    Returns:
        JSONResponse with {"data": [{"url": ...}, ...]} or {"error": ...}
    """
    try:
        body = validate_body(GenerateRequest, await read_json_body(request))

        reference_url = None
        if body.is_edit:
            if not body.image_base64:
                raise ClientInputError("Missing reference image (imageBase64) for an edit request")
            try:
                reference_url = prepare_reference_image(body.image_base64)
            except ValueError as e:
                raise ClientInputError(f"Invalid reference image: {str(e)}")

        selection = resolve_provider()

        payload = {
            "model": selection.image_model,
            "prompt": f"{body.prompt.strip()} Aspect ratio {body.aspect}.",
            "n": body.n,
        }

        logger.info(f"[generate] Generating {body.n} design(s), edit={body.is_edit}")
        data = await run_in_threadpool(
            ai_service.create_images, selection, payload, reference_url
        )
        urls = extract_image_urls(data)

        response = GenerateResponse(data=[GeneratedImage(url=url) for url in urls])
        return JSONResponse(content=response.model_dump())
    except Exception as e:
        return error_response(e, "generate")


async def list_tiers() -> JSONResponse:
    """
    Handler for the tier catalog

    Returns:
        JSONResponse with each tier and its full design prompt
    """
    try:
        tiers = []
        for tier in load_tiers():
            item = tier.model_dump()
            item["designPrompt"] = build_design_prompt(tier.id)
            tiers.append(item)
        return JSONResponse(content={"tiers": tiers})
    except Exception as e:
        return error_response(e, "tiers")
