"""
Module: extractor.images

Purpose:
    Pulls embedded media out of a .docx container into ImageRecords:
    base64 payload, content type from the file extension, the rId the
    document uses to reference it, and (optionally) pixel dimensions.

Key Functions:
    - extract_images(): All media entries in archive order
    - content_type_for(): Extension -> MIME type

Dependencies:
    - Pillow: Dimension probing
    - extractor.archive.DocxArchive

Used By:
    - extractor.pipeline
"""

from __future__ import annotations

import base64
import io
import logging
from typing import List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from math_exam_toolkit.core.models.images import ImageRecord

from .archive import DocxArchive
from .diagnostics import DiagnosticsCollector

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/png"

CONTENT_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
}


def content_type_for(filename: str) -> str:
    """
    Map a media filename to its MIME type.

    Unknown extensions (emf, wmf, ...) fall back to image/png.
    """
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def probe_dimensions(payload: bytes) -> Tuple[Optional[int], Optional[int]]:
    """Return (width, height) in pixels, or (None, None) if undecodable."""
    try:
        with Image.open(io.BytesIO(payload)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.debug(f"Could not probe image size: {e}")
        return None, None
    return width, height


def extract_images(
    archive: DocxArchive,
    *,
    probe_sizes: bool = True,
    diagnostics: Optional[DiagnosticsCollector] = None,
    source_name: str = "",
) -> List[ImageRecord]:
    """
    Read every media entry of the container.

    Ids are assigned sequentially (img_0, img_1, ...) in archive order.
    A failure part-way through is logged and recorded; images read
    before it are returned.

    Args:
        archive: Opened container
        probe_sizes: Decode payloads with Pillow to fill width/height
        diagnostics: Optional collector for degraded extraction
        source_name: Document name used in diagnostics

    Returns:
        List of ImageRecords (possibly partial)

    Example:
        >>> images = extract_images(open_archive(Path("de_thi.docx")))
        >>> images[0].id, images[0].content_type
        ('img_0', 'image/png')
    """
    images: List[ImageRecord] = []
    filename = ""

    try:
        for filename, payload in archive.iter_media():
            width, height = probe_dimensions(payload) if probe_sizes else (None, None)
            images.append(ImageRecord(
                id=f"img_{len(images)}",
                filename=filename,
                base64=base64.b64encode(payload).decode("ascii"),
                content_type=content_type_for(filename),
                r_id=archive.rid_for_filename(filename),
                width=width,
                height=height,
            ))
    except Exception as e:
        logger.warning(f"Image extraction failed after {len(images)} image(s): {e}")
        if diagnostics is not None:
            diagnostics.add_image_failure(
                source_name, str(e), filename=filename, images_kept=len(images)
            )

    logger.debug(f"Extracted {len(images)} image(s)")
    return images
