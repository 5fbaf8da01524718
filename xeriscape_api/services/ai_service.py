"""
AI service module
Handles the outbound calls to the hosted AI provider (vision chat completion
and image generation) and reads their responses
"""

import requests
from typing import Any, Dict, List, Optional, Tuple

from xeriscape_api.config import UPSTREAM_TIMEOUT_SECONDS, ProviderSelection, logger
from xeriscape_api.utils.errors import UpstreamError, UpstreamTimeoutError
from xeriscape_api.utils.image_utils import decode_base64_image


class AIService:
    """Service for calling the AI provider"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            logger.info("Initializing AIService...")
            cls._instance = super(AIService, cls).__new__(cls)
        return cls._instance

    def _post(
        self,
        selection: ProviderSelection,
        url: str,
        payload: Dict[str, Any],
        files: Optional[List[Tuple[str, Tuple[str, bytes, str]]]] = None,
    ) -> Dict[str, Any]:
        """
        POST a payload to the provider and return the decoded JSON body

        Args:
            selection: Provider and credential to use
            url: Provider endpoint
            payload: Request body; sent as JSON, or as form fields when files are given
            files: Optional multipart file parts

        Returns:
            Decoded JSON response
        """
        name = selection.provider.name
        headers = {"Authorization": f"Bearer {selection.api_key}"}
        if files:
            request_kwargs = {"data": {k: str(v) for k, v in payload.items()}, "files": files}
        else:
            headers["Content-Type"] = "application/json"
            request_kwargs = {"json": payload}

        try:
            response = requests.post(
                url, headers=headers, timeout=UPSTREAM_TIMEOUT_SECONDS, **request_kwargs
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"{name} API timed out after {UPSTREAM_TIMEOUT_SECONDS}s: {str(e)}")
            raise UpstreamTimeoutError(
                f"{name} API timed out after {UPSTREAM_TIMEOUT_SECONDS:g} seconds"
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{name} API request failed: {str(e)}")
            raise UpstreamError(f"{name} API request failed: {str(e)}", status_code=502)

        if not 200 <= response.status_code < 300:
            # Error bodies are not guaranteed to be JSON
            error_text = response.text
            logger.error(f"{name} API error: {response.status_code} {error_text}")
            raise UpstreamError(
                f"{name} API failed ({response.status_code}): {error_text or 'No details provided'}",
                # Only client/server errors are relayed as-is
                status_code=response.status_code if response.status_code >= 400 else 502,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{name} API returned a non-JSON body: {str(e)}")
            raise UpstreamError(f"{name} returned a malformed response body")

    def create_chat_completion(self, selection: ProviderSelection, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Call the vision-capable chat completion endpoint"""
        logger.info(
            f"Requesting chat completion from {selection.provider.name} ({payload.get('model')})"
        )
        return self._post(selection, selection.provider.chat_url, payload)

    def create_images(
        self,
        selection: ProviderSelection,
        payload: Dict[str, Any],
        reference_image: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Call the image generation endpoint, or the image edit endpoint when a
        reference image (data URL) is given

        Providers with multipart edits get the image as an ``image[]`` file
        part; the others get it as ``image.url`` in the JSON body.
        """
        provider = selection.provider
        edit = reference_image is not None
        logger.info(
            f"Requesting {payload.get('n', 1)} image(s) from {provider.name} (edit={edit})"
        )
        if not edit:
            return self._post(selection, provider.image_url, payload)

        if provider.multipart_edits:
            image_data, image_format = decode_base64_image(reference_image)
            image_format = image_format or "png"
            files = [("image[]", (f"reference.{image_format}", image_data, f"image/{image_format}"))]
            return self._post(selection, provider.image_edit_url, payload, files=files)

        return self._post(
            selection, provider.image_edit_url, dict(payload, image={"url": reference_image})
        )


def extract_message_content(data: Any) -> str:
    """
    Read choices[0].message.content from a chat completion response

    Raises:
        UpstreamError: if the content is missing or empty
    """
    content = None
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        pass

    if not isinstance(content, str) or not content.strip():
        logger.error("No content in AI provider response")
        raise UpstreamError("AI provider returned empty or invalid response")
    return content


def extract_image_urls(data: Any) -> List[str]:
    """
    Read the image URLs from an image generation response

    Entries returned as b64_json are converted to PNG data URLs.

    Raises:
        UpstreamError: if no image is present
    """
    items = data.get("data") if isinstance(data, dict) else None
    urls = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        if item.get("url"):
            urls.append(item["url"])
        elif item.get("b64_json"):
            urls.append(f"data:image/png;base64,{item['b64_json']}")

    if not urls:
        logger.error("No images in AI provider response")
        raise UpstreamError("AI provider returned no images")
    return urls


# Singleton instance
ai_service = AIService()
