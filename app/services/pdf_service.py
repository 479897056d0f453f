"""PDF rendering for uploaded images.

Coordinates are millimetres measured from the top-left corner of an A4 page.
``PdfDocument`` converts them to reportlab's bottom-left point space.
"""
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from app.models import GenerationFailure

IMAGE_WIDTH = 160
IMAGE_HEIGHT = 160
IMAGE_TOP = 20
CAPTION_GAP = 10
CAPTION_HEIGHT = 10
CAPTION_BOTTOM_MARGIN = 20
CAPTION_FONT = ("Helvetica", "B", 16)
CAPTION_TEXT = "Thank you for using mesplaques. See you soon!"
OUTPUT_FILENAME = "generated.pdf"

SUPPORTED_IMAGE_FORMATS = ("png", "jpg", "jpeg", "gif")
_FORMAT_ALIASES = {"jpg": "jpeg"}

_CORE_FONTS = {
    "helvetica": {"": "Helvetica", "B": "Helvetica-Bold", "I": "Helvetica-Oblique", "BI": "Helvetica-BoldOblique"},
    "times": {"": "Times-Roman", "B": "Times-Bold", "I": "Times-Italic", "BI": "Times-BoldItalic"},
    "courier": {"": "Courier", "B": "Courier-Bold", "I": "Courier-Oblique", "BI": "Courier-BoldOblique"},
}
_FONT_ALIASES = {"arial": "helvetica"}


class PdfRenderError(Exception):
    pass


class PdfDocument:
    """Single-canvas document with a text cursor, in page units."""

    def __init__(self, pagesize=A4, unit: float = mm):
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=pagesize)
        self._canvas.setTitle(OUTPUT_FILENAME)
        self.k = unit
        self.w = pagesize[0] / unit
        self.h = pagesize[1] / unit
        self.margin = 28.35 / unit
        self.c_margin = self.margin / 10
        self.page = 0
        self.x = self.margin
        self.y = self.margin
        self.lasth = 0.0
        self.font_name: Optional[str] = None
        self.font_size_pt = 12.0
        self._done = False

    @property
    def font_size(self) -> float:
        return self.font_size_pt / self.k

    def get_page_width(self) -> float:
        return self.w

    def get_page_height(self) -> float:
        return self.h

    def add_page(self) -> None:
        if self._done:
            raise PdfRenderError("Document already closed")
        if self.page > 0:
            self._canvas.showPage()
        self.page += 1
        self.x = self.margin
        self.y = self.margin
        # showPage() resets the graphics state
        if self.font_name:
            self._canvas.setFont(self.font_name, self.font_size_pt)

    def ln(self, h: Optional[float] = None) -> None:
        self.x = self.margin
        self.y += self.lasth if h is None else h

    def set_xy(self, x: float, y: float) -> None:
        self.x = x if x >= 0 else self.w + x
        self.y = y if y >= 0 else self.h + y

    def set_font(self, family: str, style: str = "", size: float = 0) -> None:
        fam = (family or "").lower()
        fam = _FONT_ALIASES.get(fam, fam)
        style = "".join(ch for ch in "BI" if ch in (style or "").upper())
        try:
            name = _CORE_FONTS[fam][style]
        except KeyError:
            raise PdfRenderError(f"Undefined font: {family} {style}")
        self.font_name = name
        if size:
            self.font_size_pt = float(size)
        if self.page > 0:
            self._canvas.setFont(self.font_name, self.font_size_pt)

    def get_string_width(self, text: str) -> float:
        if not self.font_name:
            raise PdfRenderError("No font has been set")
        return stringWidth(text or "", self.font_name, self.font_size_pt) / self.k

    def image(self, path: str, x: float, y: float, w: float, h: float, image_format: str = "") -> None:
        self._require_page()
        fmt = (image_format or "").lower()
        if fmt and fmt not in SUPPORTED_IMAGE_FORMATS:
            raise PdfRenderError(f"Unsupported image type: {fmt}")
        try:
            reader = ImageReader(path)
            reader.getSize()
            with Image.open(path) as img:
                actual = (img.format or "").lower()
        except Exception as e:
            raise PdfRenderError(f"Cannot read image file: {path}") from e
        # Decoded data must match the format hint
        if fmt and _FORMAT_ALIASES.get(fmt, fmt) != actual:
            raise PdfRenderError(f"Not a {fmt.upper()} file: {path}")
        self._canvas.drawImage(
            reader,
            x * self.k,
            (self.h - y - h) * self.k,
            width=w * self.k,
            height=h * self.k,
            mask="auto",
        )

    def cell(self, w: float, h: float = 0, text: str = "", border: int = 0, ln: int = 0, align: str = "") -> None:
        self._require_page()
        if w == 0:
            w = self.w - self.margin - self.x
        c = self._canvas
        if border:
            c.rect(self.x * self.k, (self.h - self.y - h) * self.k, w * self.k, h * self.k, stroke=1, fill=0)
        if text:
            tw = self.get_string_width(text)
            if align == "R":
                dx = w - self.c_margin - tw
            elif align == "C":
                dx = (w - tw) / 2
            else:
                dx = self.c_margin
            baseline = self.y + 0.5 * h + 0.3 * self.font_size
            c.drawString((self.x + dx) * self.k, (self.h - baseline) * self.k, text)
        self.lasth = h
        if ln > 0:
            self.y += h
            if ln == 1:
                self.x = self.margin
        else:
            self.x += w

    def output(self) -> bytes:
        self._require_page()
        if not self._done:
            self._canvas.save()
            self._done = True
        return self._buffer.getvalue()

    def _require_page(self) -> None:
        if self.page == 0:
            raise PdfRenderError("No page has been added")


@dataclass(frozen=True)
class Placement:
    image_x: float
    image_y: float
    image_width: float
    image_height: float
    caption_x: float
    caption_y: float
    caption_width: float
    caption_height: float


def image_position(page_width: float) -> Tuple[float, float]:
    return (page_width - IMAGE_WIDTH) / 2, IMAGE_TOP


def caption_position(page_width: float, page_height: float, text_width: float) -> Tuple[float, float]:
    x = (page_width - text_width) / 2
    y = IMAGE_TOP + IMAGE_HEIGHT + CAPTION_GAP
    # Keep the caption on the page
    if y + CAPTION_HEIGHT > page_height:
        y = page_height - CAPTION_BOTTOM_MARGIN
    return x, y


def compute_placement(page_width: float, page_height: float, text_width: float) -> Placement:
    image_x, image_y = image_position(page_width)
    caption_x, caption_y = caption_position(page_width, page_height, text_width)
    return Placement(
        image_x=image_x,
        image_y=image_y,
        image_width=IMAGE_WIDTH,
        image_height=IMAGE_HEIGHT,
        caption_x=caption_x,
        caption_y=caption_y,
        caption_width=text_width,
        caption_height=CAPTION_HEIGHT,
    )


def render_thank_you_pdf(
    image_path: str,
    image_format: str,
    document_factory: Callable[[], PdfDocument] = PdfDocument,
) -> Tuple[Optional[bytes], Optional[GenerationFailure]]:
    """Render the image and caption into a one-page PDF.

    Returns ``(pdf_bytes, None)`` on success or ``(None, failure)`` when the
    renderer raises. A single attempt is made.
    """
    try:
        pdf = document_factory()
        pdf.add_page()
        pdf.ln()

        page_width = pdf.get_page_width()
        image_x, image_y = image_position(page_width)
        pdf.image(image_path, image_x, image_y, IMAGE_WIDTH, IMAGE_HEIGHT, image_format)

        pdf.set_font(*CAPTION_FONT)
        text_width = pdf.get_string_width(CAPTION_TEXT)
        placement = compute_placement(page_width, pdf.get_page_height(), text_width)

        pdf.set_xy(placement.caption_x, placement.caption_y)
        pdf.cell(placement.caption_width, placement.caption_height, CAPTION_TEXT, 0, 0, "C")

        return pdf.output(), None
    except Exception as e:
        return None, GenerationFailure.from_exception(e)
