"""
Prompt service module
Loads the versioned prompt templates and tier catalog, and builds the
messages sent to the AI provider
"""

import json
import functools
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from xeriscape_api.config import (
    TEMPLATE_DIR,
    BREAKDOWN_TEMPLATE,
    TOPDOWN_TEMPLATE,
    DESIGN_TEMPLATE,
    TOPDOWN_PLAN_TEMPLATE,
    TIERS_PATH,
    DEFAULT_TIER,
    logger,
)
from xeriscape_api.models.request_models import Tier
from xeriscape_api.utils.image_utils import is_image_reference

BREAKDOWN_INSTRUCTION = "Analyze this landscape design image:"
TOPDOWN_INSTRUCTION = (
    "Analyze this landscape concept image and describe its top-down layout:"
)


# -------------------- Jinja2 --------------------
env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=False,
    undefined=StrictUndefined,
)


def render_template(filename: str, **values: str) -> str:
    """
    Render a prompt template from the templates directory

    Args:
        filename: Template file name, e.g. breakdown_v1.md
        values: Template variables; inserted as-is, never re-rendered

    Returns:
        Rendered text with surrounding whitespace stripped
    """
    logger.debug(f"Rendering prompt template {filename}")
    tmpl = env.get_template(filename)
    return tmpl.render(**values).strip()


@functools.lru_cache(maxsize=1)
def load_tiers() -> List[Tier]:
    """Load the tier catalog shipped with the package"""
    with open(TIERS_PATH, "r", encoding="utf-8") as f:
        return [Tier(**item) for item in json.load(f)]


def find_tier(name_or_id: str) -> Optional[Tier]:
    """Look up a tier by id or display name, case-insensitively"""
    key = name_or_id.strip().lower()
    for tier in load_tiers():
        if key in (tier.id.lower(), tier.name.lower()):
            return tier
    return None


def render_breakdown_prompt(tier: str = DEFAULT_TIER, topdown: bool = False) -> str:
    """
    Build the system prompt for a breakdown request

    The tier label is interpolated verbatim.
    """
    template = TOPDOWN_TEMPLATE if topdown else BREAKDOWN_TEMPLATE
    return render_template(template, tier=tier or DEFAULT_TIER)


def build_breakdown_messages(
    image_url: str,
    tier: str = DEFAULT_TIER,
    satellite_reference: Optional[str] = None,
    topdown: bool = False,
) -> List[Dict[str, Any]]:
    """
    Build the chat messages for a breakdown request

    Args:
        image_url: Primary design image
        tier: Tier or package label
        satellite_reference: Optional second image URL or address text
        topdown: Use the top-down variant of the prompt

    Returns:
        System message followed by a user message with ordered content parts
    """
    content: List[Dict[str, Any]] = [
        {"type": "text", "text": TOPDOWN_INSTRUCTION if topdown else BREAKDOWN_INSTRUCTION},
        {"type": "image_url", "image_url": {"url": image_url}},
    ]
    if satellite_reference:
        if is_image_reference(satellite_reference):
            content.append({"type": "text", "text": "Satellite reference image of the property:"})
            content.append({"type": "image_url", "image_url": {"url": satellite_reference}})
        else:
            content.append(
                {"type": "text", "text": f"Property address / satellite reference: {satellite_reference}"}
            )

    return [
        {"role": "system", "content": render_breakdown_prompt(tier, topdown=topdown)},
        {"role": "user", "content": content},
    ]


def _tier_prompt(tier: str) -> str:
    if not tier or tier == DEFAULT_TIER:
        return "Colorado native plants with shredded cedar mulch"
    known = find_tier(tier)
    return known.prompt if known else tier


def build_design_prompt(tier: str) -> str:
    """Three-variation design prompt for a tier id, name, or free-form description"""
    return render_template(DESIGN_TEMPLATE, tier_prompt=_tier_prompt(tier))


def build_topdown_plan_prompt(tier: str) -> str:
    """Prompt for the bird's-eye site plan image of the top-down variant"""
    return render_template(TOPDOWN_PLAN_TEMPLATE, tier=tier, tier_prompt=_tier_prompt(tier))
