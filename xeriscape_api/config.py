"""
Configuration module for the application
Contains application-wide settings, constants, and the AI provider table
"""

import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

import dotenv

dotenv.load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("xeriscape_api")
for noisy in ["urllib3", "PIL"]:
    logging.getLogger(noisy).setLevel(logging.WARNING)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# API settings
API_TITLE = "Xeriscape Rebate Designer Backend"
API_DESCRIPTION = (
    "Backend service that turns a yard photo and a rebate tier into AI "
    "landscape designs and a Markdown cost/plant breakdown"
)
API_VERSION = "1.0.0"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Include tracebacks in error bodies. Keep off for public deployments.
EXPOSE_TRACEBACKS = _env_flag("EXPOSE_TRACEBACKS")

# Request settings
UPSTREAM_TIMEOUT_SECONDS = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "45"))

# Chat completion parameters
BREAKDOWN_TEMPERATURE = float(os.getenv("BREAKDOWN_TEMPERATURE", "0.7"))
BREAKDOWN_MAX_TOKENS = int(os.getenv("BREAKDOWN_MAX_TOKENS", "2000"))
TOPDOWN_TEMPERATURE = float(os.getenv("TOPDOWN_TEMPERATURE", "0.65"))
TOPDOWN_MAX_TOKENS = int(os.getenv("TOPDOWN_MAX_TOKENS", "2500"))

# Image generation settings
MAX_IMAGES_PER_REQUEST = 4
TOPDOWN_PLACEHOLDER_URL = os.getenv(
    "TOPDOWN_PLACEHOLDER_URL", "https://placehold.co/1024x1024?text=Top-Down+Plan"
)

# Prompt templates (file names under xeriscape_api/templates)
TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")
BREAKDOWN_TEMPLATE = os.getenv("BREAKDOWN_TEMPLATE", "breakdown_v1.md")
TOPDOWN_TEMPLATE = os.getenv("TOPDOWN_TEMPLATE", "topdown_breakdown_v1.md")
DESIGN_TEMPLATE = os.getenv("DESIGN_TEMPLATE", "design_variations_v1.md")
TOPDOWN_PLAN_TEMPLATE = os.getenv("TOPDOWN_PLAN_TEMPLATE", "topdown_plan_v1.md")

# Tier catalog
TIERS_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "tiers.json")
DEFAULT_TIER = "Unknown"


@dataclass(frozen=True)
class Provider:
    """Endpoints and default models of one hosted AI provider"""

    name: str
    credential_env: str
    chat_url: str
    chat_model: str
    image_url: str
    image_edit_url: str
    image_model: str
    # Image edits are sent as multipart form data instead of JSON
    multipart_edits: bool = False


@dataclass(frozen=True)
class ProviderSelection:
    """A provider together with the credential and models resolved for it"""

    provider: Provider
    api_key: str
    chat_model: str
    image_model: str


# Checked in order; the first populated credential wins
PROVIDERS: Tuple[Provider, ...] = (
    Provider(
        name="xAI",
        credential_env="XAI_API_KEY",
        chat_url="https://api.x.ai/v1/chat/completions",
        chat_model="grok-vision",
        image_url="https://api.x.ai/v1/images/generations",
        image_edit_url="https://api.x.ai/v1/images/edits",
        image_model="grok-2-image",
    ),
    Provider(
        name="OpenAI",
        credential_env="OPENAI_API_KEY",
        chat_url="https://api.openai.com/v1/chat/completions",
        chat_model="gpt-4o",
        image_url="https://api.openai.com/v1/images/generations",
        image_edit_url="https://api.openai.com/v1/images/edits",
        image_model="gpt-image-1",
        multipart_edits=True,
    ),
)


def select_provider(environ: Mapping[str, str]) -> Optional[ProviderSelection]:
    """
    Pick the AI provider from the credentials available in ``environ``

    Args:
        environ: Environment-style mapping, usually ``os.environ``

    Returns:
        ProviderSelection for the first provider whose credential is set,
        or None when no credential is configured
    """
    for provider in PROVIDERS:
        api_key = (environ.get(provider.credential_env) or "").strip()
        if api_key:
            return ProviderSelection(
                provider=provider,
                api_key=api_key,
                chat_model=environ.get("AI_CHAT_MODEL") or provider.chat_model,
                image_model=environ.get("AI_IMAGE_MODEL") or provider.image_model,
            )
    return None
