"""
Module: images

Purpose:
    Provides the ImageRecord dataclass - one embedded media file pulled out
    of a Word container. Records are created once by the image extractor and
    shared (never copied or mutated) by every question that references them.

Key Functions:
    - ImageRecord.data_url(): Inline ``data:`` URL for rendering
    - ImageRecord.is_web_compatible: Whether browsers can show it directly
    - ImageRecord.to_dict() / ImageRecord.from_dict(): Serialization

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.questions.Question
    - core.models.exams.Exam
    - extractor.images
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


WEB_CONTENT_TYPES = frozenset({
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
    "image/svg+xml",
})


@dataclass(frozen=True)
class ImageRecord:
    """
    Embedded image extracted from a document container (immutable).

    Attributes:
        id: Sequential identifier like "img_0", "img_1"
        filename: Original media filename like "image1.png"
        base64: Binary payload encoded as base64 text
        content_type: MIME type inferred from the file extension
        r_id: Relationship ID ("rId4") linking the image to the paragraph
            that referenced it, or "" when no manifest entry matched
        width: Pixel width when the payload could be decoded
        height: Pixel height when the payload could be decoded

    Example:
        >>> img = ImageRecord("img_0", "image1.png", "iVBORw0...", "image/png", "rId5")
        >>> img.data_url()[:22]
        'data:image/png;base64,'
    """

    id: str
    filename: str
    base64: str
    content_type: str
    r_id: str = ""
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def is_web_compatible(self) -> bool:
        """True when browsers can render the payload without conversion."""
        return self.content_type in WEB_CONTENT_TYPES

    def data_url(self) -> str:
        """Return a ``data:`` URL, or "" if the record carries no payload."""
        if not self.base64:
            return ""
        return f"data:{self.content_type};base64,{self.base64}"

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "filename": self.filename,
            "base64": self.base64,
            "content_type": self.content_type,
            "r_id": self.r_id,
        }
        if self.width is not None and self.height is not None:
            d["width"] = self.width
            d["height"] = self.height
        return d

    @classmethod
    def from_dict(cls, data: dict) -> ImageRecord:
        return cls(
            id=data["id"],
            filename=data.get("filename", ""),
            base64=data.get("base64", ""),
            content_type=data.get("content_type", "image/png"),
            r_id=data.get("r_id", ""),
            width=data.get("width"),
            height=data.get("height"),
        )

    def __repr__(self) -> str:
        return f"ImageRecord({self.id!r}, {self.filename!r}, r_id={self.r_id!r})"
