"""
Data models for API requests and responses
Uses Pydantic for validation and serialization
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List

from xeriscape_api.config import DEFAULT_TIER, MAX_IMAGES_PER_REQUEST


class BreakdownRequest(BaseModel):
    """
    Request model for the breakdown endpoints

    Accepts the historical field names (conceptUrl, packageName,
    satelliteUrl) and normalizes them onto one schema.
    """

    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(
        ...,
        validation_alias=AliasChoices("imageUrl", "conceptUrl", "image_url"),
        description="URL of a previously generated design image",
    )
    tier: str = Field(
        DEFAULT_TIER,
        validation_alias=AliasChoices("tier", "packageName"),
        description="Tier or package label shown to the homeowner",
    )
    satellite_reference: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "satelliteReference", "satelliteUrl", "satellite_reference"
        ),
        description="Second reference image URL or a raw address",
    )

    @field_validator("image_url")
    @classmethod
    def image_url_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Missing image URL")
        return value

    @field_validator("tier", mode="before")
    @classmethod
    def default_blank_tier(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_TIER
        return value

    @field_validator("satellite_reference", mode="before")
    @classmethod
    def blank_reference_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class BreakdownResponse(BaseModel):
    """
    Response model for breakdown results
    """

    model_config = ConfigDict(populate_by_name=True)

    breakdown: str = Field(..., description="Markdown cost/plant breakdown")
    top_down_url: Optional[str] = Field(
        None, alias="topDownUrl", description="Generated top-down plan image"
    )


class GenerateRequest(BaseModel):
    """
    Request model for design image generation
    """

    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(..., description="Image generation prompt")
    is_edit: bool = Field(
        False, alias="isEdit", description="Edit the reference photo instead of generating"
    )
    image_base64: Optional[str] = Field(
        None, alias="imageBase64", description="Base64 reference photo or data URL"
    )
    n: int = Field(1, ge=1, le=MAX_IMAGES_PER_REQUEST, description="Number of images")
    aspect: str = Field("1:1", description="Aspect ratio hint, e.g. 16:9")

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Missing prompt")
        return value


class GeneratedImage(BaseModel):
    url: str


class GenerateResponse(BaseModel):
    """
    Response model for generated design images
    """

    data: List[GeneratedImage] = Field(..., description="Generated images")


class Tier(BaseModel):
    """
    A pricing/rebate bracket offered to the homeowner
    """

    id: str
    name: str
    emoji: str = ""
    rebate: str
    cost: str
    desc: str = ""
    prompt: str = Field(..., description="Design prompt fragment for this tier")


class ErrorResponse(BaseModel):
    """
    Response model for errors
    """

    error: str = Field(..., description="Error message")
    traceback: Optional[str] = Field(None, description="Error traceback for debugging")
