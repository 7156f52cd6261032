"""
Render module Pydantic schemas for the /render wire contract.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMERATIONS
# =============================================================================

OutputFormat = Literal["pdf", "png", "jpeg", "bmp", "tga", "qoi", "svg"]
Orientation = Literal["portrait", "landscape"]
Flow = Literal["auto", "paginate", "continuous"]
DitherMethod = Literal["none", "floyd-steinberg", "atkinson", "ordered"]
PalettePreset = Literal["auto", "bw", "grayscale", "eink"]
Palette = PalettePreset | list[str]
WatermarkLayer = Literal["over", "under"]
PdfStandard = Literal["none", "pdf/a-2b", "pdf/a-3b"]
PdfMode = Literal["auto", "vector", "raster"]
AccessibilityLevel = Literal["none", "basic", "pdf/ua-1"]
BarcodeType = Literal["qr", "code128", "ean13", "upca", "code39"]
BarcodeAnchor = Literal["top-left", "top-right", "bottom-left", "bottom-right"]
EmbedRelationship = Literal["alternative", "supplement", "data", "source", "unspecified"]

# Paper sizes known to the server. Forwarded as-is, not enforced.
PAPER_SIZES = ("a3", "a4", "a5", "b4", "b5", "letter", "legal", "ledger")


class WireModel(BaseModel):
    """Base for payload models: unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# QUANTIZATION
# =============================================================================

class QuantizeOptions(WireModel):
    """Color quantization applied to raster output."""
    colors: int | None = Field(None, ge=2, le=256, description="Palette size")
    palette: Palette | None = Field(None, description="Preset name or hex colors")
    dither: DitherMethod | None = None


# =============================================================================
# PDF OPTION GROUPS
# =============================================================================

class WatermarkOptions(WireModel):
    """Text or image watermark stamped on pages."""
    text: str | None = None
    image_data: str | None = Field(None, description="Base64 image bytes")
    opacity: float | None = Field(None, ge=0.0, le=1.0)
    rotation: int | float | None = Field(None, description="Degrees")
    color: str | None = Field(None, description="Hex color")
    font_size: int | float | None = Field(None, gt=0)
    scale: float | None = Field(None, gt=0)
    layer: WatermarkLayer | None = None
    pages: str | None = Field(None, description="Page selector, e.g. '1,3-5'")


class EmbeddedFile(WireModel):
    """File attachment embedded in the PDF."""
    path: str
    data: str = Field(..., description="Base64 file bytes")
    mime_type: str | None = None
    description: str | None = None
    relationship: EmbedRelationship | None = None


class BarcodeOptions(WireModel):
    """Barcode drawn onto selected pages."""
    type: BarcodeType
    data: str
    x: int | float | None = None
    y: int | float | None = None
    width: int | float | None = Field(None, gt=0)
    height: int | float | None = Field(None, gt=0)
    anchor: BarcodeAnchor | None = None
    foreground: str | None = None
    background: str | None = None
    draw_background: bool | None = None
    pages: str | None = None


class SignatureOptions(WireModel):
    """Digital signature with a PKCS#12 certificate."""
    certificate_data: str | None = Field(None, description="Base64 PKCS#12 bytes")
    password: str | None = None
    signer_name: str | None = None
    reason: str | None = None
    location: str | None = None
    timestamp_url: str | None = None


class EncryptionOptions(WireModel):
    """Password protection and permission flags."""
    user_password: str | None = None
    owner_password: str | None = None
    permissions: str | None = None


class PdfOptions(WireModel):
    """PDF-specific post-processing."""
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    keywords: str | None = None
    creator: str | None = None
    bookmarks: bool | None = None
    page_numbers: bool | None = None
    standard: PdfStandard | None = None
    embedded_files: list[EmbeddedFile] | None = None
    watermark: WatermarkOptions | None = None
    barcodes: list[BarcodeOptions] | None = None
    mode: PdfMode | None = None
    signature: SignatureOptions | None = None
    encryption: EncryptionOptions | None = None
    accessibility: AccessibilityLevel | None = None
    linearize: bool | None = None
    document_lang: str | None = Field(None, description="BCP-47 language tag")


# =============================================================================
# REQUEST / RESPONSE
# =============================================================================

class RenderPayload(WireModel):
    """Body of POST /render."""
    html: str | None = None
    url: str | None = None
    format: OutputFormat = "pdf"
    width: int | None = Field(None, gt=0, description="Viewport width in CSS pixels")
    height: int | None = Field(None, gt=0, description="Viewport height in CSS pixels")
    paper: str | None = None
    orientation: Orientation | None = None
    margins: str | None = Field(None, description="Preset or 'T,R,B,L' in mm")
    flow: Flow | None = None
    density: int | None = Field(None, gt=0, description="Output DPI")
    background: str | None = None
    timeout: int | float | None = Field(None, gt=0, description="Page load budget in seconds")
    quantize: QuantizeOptions | None = None
    pdf: PdfOptions | None = None

    def to_wire(self) -> dict[str, Any]:
        """Dump to a JSON-ready dict, leaving unset fields out entirely."""
        return self.model_dump(exclude_none=True)


class ErrorResponse(BaseModel):
    """Error body returned by the server on failure."""
    error: str
