"""
Render request builder.

Collects render options through chained setters, turns them into the
/render JSON payload and sends it through a ForgeClient.
"""

from __future__ import annotations

import base64
import json
from typing import TYPE_CHECKING, Any

import requests
from pydantic import ValidationError

from forgesdk.shared.errors import (
    ForgeConnectionError,
    ForgeServerError,
    ForgeValidationError,
)
from forgesdk.shared.logging import get_logger

from .schemas import (
    AccessibilityLevel,
    BarcodeAnchor,
    BarcodeType,
    DitherMethod,
    EmbedRelationship,
    ErrorResponse,
    Flow,
    Orientation,
    OutputFormat,
    Palette,
    PdfMode,
    PdfStandard,
    RenderPayload,
    WatermarkLayer,
)

if TYPE_CHECKING:
    from forgesdk.client import ForgeClient, RawResponse

logger = get_logger(__name__)

RENDER_PATH = "/render"


def encode_binary(value: bytes | str) -> str:
    """Base64-encode raw bytes; strings are assumed to be base64 already."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


def _error_message(response: RawResponse) -> str:
    """Resolve the message of a failed response, falling back to the status."""
    try:
        return ErrorResponse.model_validate(response.json()).error
    except (ValueError, ValidationError):
        return f"HTTP {response.status_code}"


class RenderRequestBuilder:
    """
    Builder for a single render request.

    Obtained from ForgeClient.render_html() or ForgeClient.render_url().
    Every setter stores its value and returns the builder, so options can be
    chained in any order; scalar options are last-write-wins.

    Usage:
        pdf = (
            client.render_html("<h1>Invoice</h1>")
            .paper("a4")
            .pdf_title("Invoice 42")
            .send()
        )

    The builder keeps its state after send(). Sending again posts the
    current options again, including any changed since the last call.
    """

    def __init__(
        self,
        client: ForgeClient,
        *,
        html: str | None = None,
        url: str | None = None,
    ):
        self._client = client
        self._source: dict[str, str] = {}
        if html is not None:
            self._source["html"] = html
        if url is not None:
            self._source["url"] = url

        self._options: dict[str, Any] = {"format": "pdf"}

        # Optional groups hold only the fields that were set; an empty
        # group is left out of the payload.
        self._quantize: dict[str, Any] = {}
        self._pdf: dict[str, Any] = {}
        self._watermark: dict[str, Any] = {}
        self._signature: dict[str, Any] = {}
        self._encryption: dict[str, Any] = {}
        self._embedded_files: list[dict[str, Any]] = []
        self._barcodes: list[dict[str, Any]] = []

    # =========================================================================
    # LAYOUT
    # =========================================================================

    def format(self, format: OutputFormat) -> RenderRequestBuilder:
        """Output format (default: "pdf")."""
        self._options["format"] = format
        return self

    def width(self, px: int) -> RenderRequestBuilder:
        """Viewport width in CSS pixels."""
        self._options["width"] = px
        return self

    def height(self, px: int) -> RenderRequestBuilder:
        """Viewport height in CSS pixels."""
        self._options["height"] = px
        return self

    def paper(self, size: str) -> RenderRequestBuilder:
        """Paper size: a3, a4, a5, b4, b5, letter, legal, ledger."""
        self._options["paper"] = size
        return self

    def orientation(self, orientation: Orientation) -> RenderRequestBuilder:
        self._options["orientation"] = orientation
        return self

    def margins(self, margins: str) -> RenderRequestBuilder:
        """Margins preset or "T,R,B,L" in mm."""
        self._options["margins"] = margins
        return self

    def flow(self, flow: Flow) -> RenderRequestBuilder:
        self._options["flow"] = flow
        return self

    def density(self, dpi: int) -> RenderRequestBuilder:
        """Output DPI (server default: 96)."""
        self._options["density"] = dpi
        return self

    def background(self, color: str) -> RenderRequestBuilder:
        """Background CSS color."""
        self._options["background"] = color
        return self

    def timeout(self, seconds: float) -> RenderRequestBuilder:
        """
        Page load budget in seconds, enforced by the server.

        Unrelated to the client's HTTP timeout.
        """
        self._options["timeout"] = seconds
        return self

    # =========================================================================
    # QUANTIZATION
    # =========================================================================

    def colors(self, n: int) -> RenderRequestBuilder:
        """Number of colors for quantization (2-256)."""
        self._quantize["colors"] = n
        return self

    def palette(self, palette: Palette) -> RenderRequestBuilder:
        """Palette preset (auto, bw, grayscale, eink) or a list of hex colors."""
        self._quantize["palette"] = list(palette) if isinstance(palette, (list, tuple)) else palette
        return self

    def dither(self, method: DitherMethod) -> RenderRequestBuilder:
        self._quantize["dither"] = method
        return self

    # =========================================================================
    # PDF DOCUMENT
    # =========================================================================

    def pdf_title(self, title: str) -> RenderRequestBuilder:
        self._pdf["title"] = title
        return self

    def pdf_author(self, author: str) -> RenderRequestBuilder:
        self._pdf["author"] = author
        return self

    def pdf_subject(self, subject: str) -> RenderRequestBuilder:
        self._pdf["subject"] = subject
        return self

    def pdf_keywords(self, keywords: str) -> RenderRequestBuilder:
        """Comma-separated keywords."""
        self._pdf["keywords"] = keywords
        return self

    def pdf_creator(self, creator: str) -> RenderRequestBuilder:
        """Creator application name."""
        self._pdf["creator"] = creator
        return self

    def pdf_bookmarks(self, enabled: bool) -> RenderRequestBuilder:
        """Generate bookmarks from headings."""
        self._pdf["bookmarks"] = enabled
        return self

    def pdf_page_numbers(self, enabled: bool) -> RenderRequestBuilder:
        self._pdf["page_numbers"] = enabled
        return self

    def pdf_standard(self, standard: PdfStandard) -> RenderRequestBuilder:
        """PDF/A compliance level."""
        self._pdf["standard"] = standard
        return self

    def pdf_mode(self, mode: PdfMode) -> RenderRequestBuilder:
        """Vector, raster or automatic PDF generation."""
        self._pdf["mode"] = mode
        return self

    def pdf_accessibility(self, level: AccessibilityLevel) -> RenderRequestBuilder:
        """Tagging level: none, basic or pdf/ua-1."""
        self._pdf["accessibility"] = level
        return self

    def pdf_linearize(self, enabled: bool) -> RenderRequestBuilder:
        """Restructure for fast web view."""
        self._pdf["linearize"] = enabled
        return self

    def pdf_lang(self, lang: str) -> RenderRequestBuilder:
        """Document language as a BCP-47 tag, e.g. "en-US"."""
        self._pdf["document_lang"] = lang
        return self

    # =========================================================================
    # PDF WATERMARK
    # =========================================================================

    def pdf_watermark_text(self, text: str) -> RenderRequestBuilder:
        self._watermark["text"] = text
        return self

    def pdf_watermark_image(self, image: bytes | str) -> RenderRequestBuilder:
        """Watermark image as raw bytes or a base64 string."""
        self._watermark["image_data"] = encode_binary(image)
        return self

    def pdf_watermark_opacity(self, opacity: float) -> RenderRequestBuilder:
        """Opacity from 0.0 to 1.0."""
        self._watermark["opacity"] = opacity
        return self

    def pdf_watermark_rotation(self, degrees: float) -> RenderRequestBuilder:
        self._watermark["rotation"] = degrees
        return self

    def pdf_watermark_color(self, color: str) -> RenderRequestBuilder:
        """Hex text color."""
        self._watermark["color"] = color
        return self

    def pdf_watermark_font_size(self, size: float) -> RenderRequestBuilder:
        self._watermark["font_size"] = size
        return self

    def pdf_watermark_scale(self, scale: float) -> RenderRequestBuilder:
        """Image scale factor."""
        self._watermark["scale"] = scale
        return self

    def pdf_watermark_layer(self, layer: WatermarkLayer) -> RenderRequestBuilder:
        """Draw over or under page content."""
        self._watermark["layer"] = layer
        return self

    def pdf_watermark_pages(self, pages: str) -> RenderRequestBuilder:
        """Page selector such as "1,3-5", interpreted by the server."""
        self._watermark["pages"] = pages
        return self

    # =========================================================================
    # PDF ATTACHMENTS, BARCODES, SIGNATURE, ENCRYPTION
    # =========================================================================

    def pdf_embed_file(
        self,
        path: str,
        data: bytes | str,
        mime_type: str | None = None,
        description: str | None = None,
        relationship: EmbedRelationship | None = None,
    ) -> RenderRequestBuilder:
        """
        Attach a file to the PDF. Repeated calls accumulate in order.

        Args:
            path: File name as it appears inside the PDF
            data: Raw bytes or a base64 string
            mime_type: Optional MIME type
            description: Optional human-readable description
            relationship: How the file relates to the document (PDF/A-3)
        """
        entry: dict[str, Any] = {"path": path, "data": encode_binary(data)}
        if mime_type is not None:
            entry["mime_type"] = mime_type
        if description is not None:
            entry["description"] = description
        if relationship is not None:
            entry["relationship"] = relationship
        self._embedded_files.append(entry)
        return self

    def pdf_barcode(
        self,
        type: BarcodeType,
        data: str,
        *,
        x: float | None = None,
        y: float | None = None,
        width: float | None = None,
        height: float | None = None,
        anchor: BarcodeAnchor | None = None,
        foreground: str | None = None,
        background: str | None = None,
        draw_background: bool | None = None,
        pages: str | None = None,
    ) -> RenderRequestBuilder:
        """Place a barcode. Repeated calls accumulate in order."""
        entry: dict[str, Any] = {"type": type, "data": data}
        optional = {
            "x": x,
            "y": y,
            "width": width,
            "height": height,
            "anchor": anchor,
            "foreground": foreground,
            "background": background,
            "draw_background": draw_background,
            "pages": pages,
        }
        entry.update({key: value for key, value in optional.items() if value is not None})
        self._barcodes.append(entry)
        return self

    def pdf_sign(
        self,
        certificate: bytes | str,
        password: str | None = None,
        *,
        signer_name: str | None = None,
        reason: str | None = None,
        location: str | None = None,
        timestamp_url: str | None = None,
    ) -> RenderRequestBuilder:
        """Sign the PDF with a PKCS#12 certificate (raw bytes or base64)."""
        self._signature["certificate_data"] = encode_binary(certificate)
        optional = {
            "password": password,
            "signer_name": signer_name,
            "reason": reason,
            "location": location,
            "timestamp_url": timestamp_url,
        }
        self._signature.update({key: value for key, value in optional.items() if value is not None})
        return self

    def pdf_encrypt(
        self,
        user_password: str | None = None,
        owner_password: str | None = None,
        permissions: str | None = None,
    ) -> RenderRequestBuilder:
        """Encrypt the PDF; permissions is a flag string understood by the server."""
        optional = {
            "user_password": user_password,
            "owner_password": owner_password,
            "permissions": permissions,
        }
        self._encryption.update({key: value for key, value in optional.items() if value is not None})
        return self

    # =========================================================================
    # PAYLOAD
    # =========================================================================

    def _pdf_group(self) -> dict[str, Any] | None:
        group = dict(self._pdf)
        if self._embedded_files:
            group["embedded_files"] = [dict(entry) for entry in self._embedded_files]
        if self._watermark:
            group["watermark"] = dict(self._watermark)
        if self._barcodes:
            group["barcodes"] = [dict(entry) for entry in self._barcodes]
        if self._signature:
            group["signature"] = dict(self._signature)
        if self._encryption:
            group["encryption"] = dict(self._encryption)
        return group or None

    def build_request(self) -> RenderPayload:
        """
        Validate the collected options into a RenderPayload model.

        Raises:
            ForgeValidationError: if an option is outside the wire schema
        """
        fields: dict[str, Any] = {**self._source, **self._options}
        if self._quantize:
            fields["quantize"] = dict(self._quantize)
        pdf = self._pdf_group()
        if pdf is not None:
            fields["pdf"] = pdf

        try:
            return RenderPayload.model_validate(fields)
        except ValidationError as e:
            raise ForgeValidationError(
                f"invalid render options: {e.error_count()} error(s)",
                errors=e.errors(include_url=False, include_context=False, include_input=False),
            ) from e

    def build_payload(self) -> dict[str, Any]:
        """Build the JSON payload. Pure: no I/O, same result on every call."""
        return self.build_request().to_wire()

    # =========================================================================
    # SEND
    # =========================================================================

    def send(self) -> bytes:
        """
        Send the render request and return the raw output bytes.

        Returns:
            Response body exactly as received; the format is not checked

        Raises:
            ForgeValidationError: options failed validation, nothing was sent
            ForgeConnectionError: the request could not complete
            ForgeServerError: the server replied with a non-success status
        """
        payload = self.build_payload()
        body = json.dumps(payload)

        try:
            response = self._client.request("POST", RENDER_PATH, json_body=body)
        except requests.RequestException as e:
            logger.warning(f"Render request failed: {e}")
            raise ForgeConnectionError(e) from e

        if not response.ok:
            message = _error_message(response)
            logger.warning(f"Render failed with HTTP {response.status_code}: {message}")
            raise ForgeServerError(response.status_code, message)

        logger.debug(f"Rendered {payload['format']}: {len(response.content)} bytes")
        return response.content
