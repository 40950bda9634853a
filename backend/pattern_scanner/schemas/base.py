"""Shared base for API response models."""
from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Response model that rejects unknown fields.

    Every candle and pattern response inherits from this, so a field added
    to a service payload without a matching schema field fails loudly
    instead of silently disappearing from the API.
    """

    model_config = ConfigDict(extra="forbid")
