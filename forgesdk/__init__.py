"""
Forge SDK - Python client for the Forge HTML/CSS render server.
"""

from forgesdk.client import ForgeClient, RawResponse
from forgesdk.modules.render import (
    DitherMethod,
    Flow,
    Orientation,
    OutputFormat,
    Palette,
    PalettePreset,
    RenderPayload,
    RenderRequestBuilder,
)
from forgesdk.shared.errors import (
    ForgeConnectionError,
    ForgeError,
    ForgeServerError,
    ForgeValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "ForgeClient",
    "RawResponse",
    "RenderRequestBuilder",
    "RenderPayload",
    "ForgeError",
    "ForgeConnectionError",
    "ForgeServerError",
    "ForgeValidationError",
    "DitherMethod",
    "Flow",
    "Orientation",
    "OutputFormat",
    "Palette",
    "PalettePreset",
]
