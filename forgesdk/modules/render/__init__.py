"""Render module - build and send render requests."""

from .builder import RenderRequestBuilder
from .schemas import (
    AccessibilityLevel,
    BarcodeAnchor,
    BarcodeOptions,
    BarcodeType,
    DitherMethod,
    EmbeddedFile,
    EmbedRelationship,
    EncryptionOptions,
    ErrorResponse,
    Flow,
    Orientation,
    OutputFormat,
    Palette,
    PalettePreset,
    PdfMode,
    PdfOptions,
    PdfStandard,
    QuantizeOptions,
    RenderPayload,
    SignatureOptions,
    WatermarkLayer,
    WatermarkOptions,
)

__all__ = [
    "RenderRequestBuilder",
    "AccessibilityLevel",
    "BarcodeAnchor",
    "BarcodeOptions",
    "BarcodeType",
    "DitherMethod",
    "EmbeddedFile",
    "EmbedRelationship",
    "EncryptionOptions",
    "ErrorResponse",
    "Flow",
    "Orientation",
    "OutputFormat",
    "Palette",
    "PalettePreset",
    "PdfMode",
    "PdfOptions",
    "PdfStandard",
    "QuantizeOptions",
    "RenderPayload",
    "SignatureOptions",
    "WatermarkLayer",
    "WatermarkOptions",
]
