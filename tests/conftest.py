import io
import sys
import zipfile
from pathlib import Path
from xml.sax.saxutils import escape

import pytest
from PIL import Image

# Add src to sys.path so we can import math_exam_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


W = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
A = "http://schemas.openxmlformats.org/drawingml/2006/main"
V = "urn:schemas-microsoft-com:vml"
O = "urn:schemas-microsoft-com:office:office"
RELS = "http://schemas.openxmlformats.org/package/2006/relationships"
IMAGE_REL = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"
HYPERLINK_REL = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"
OFFICE_DOCUMENT_REL = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument"
CONTENT_TYPES = "http://schemas.openxmlformats.org/package/2006/content-types"
DOCUMENT_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"

MEDIA_CONTENT_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "emf": "image/x-emf",
    "wmf": "image/x-wmf",
}


def _run_xml(run) -> str:
    """
    Render one run.

    A run is either plain text or a dict with any of:
    text, underline (bool), image (rId via a:blip), vml (rId via v:imagedata).
    """
    if isinstance(run, str):
        run = {"text": run}

    parts = ["<w:r>"]
    if run.get("underline"):
        parts.append('<w:rPr><w:u w:val="single"/></w:rPr>')
    if run.get("image"):
        parts.append(
            "<w:drawing><a:graphic><a:graphicData><a:pic>"
            f'<a:blip r:embed="{run["image"]}"/>'
            "</a:pic></a:graphicData></a:graphic></w:drawing>"
        )
    if run.get("vml"):
        parts.append(f'<w:pict><v:shape><v:imagedata r:id="{run["vml"]}"/></v:shape></w:pict>')
    if run.get("text"):
        parts.append(f'<w:t xml:space="preserve">{escape(run["text"])}</w:t>')
    parts.append("</w:r>")
    return "".join(parts)


def document_xml(paragraphs) -> str:
    """Render paragraphs (each a string, a run dict, or a list of runs) as document.xml."""
    body = []
    for para in paragraphs:
        runs = para if isinstance(para, list) else [para]
        body.append("<w:p>" + "".join(_run_xml(r) for r in runs) + "</w:p>")
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W}" xmlns:r="{R}" xmlns:a="{A}" xmlns:v="{V}" xmlns:o="{O}">'
        f'<w:body>{"".join(body)}</w:body></w:document>'
    )


def _relationship_xml(rid, target) -> str:
    if target.startswith("http"):
        return f'<Relationship Id="{rid}" Type="{HYPERLINK_REL}" Target="{target}" TargetMode="External"/>'
    return f'<Relationship Id="{rid}" Type="{IMAGE_REL}" Target="{target}"/>'


def relationships_xml(relationships) -> str:
    """Render an rId -> target mapping as document.xml.rels; http targets are external."""
    rels = "".join(_relationship_xml(rid, target) for rid, target in relationships.items())
    return f'<?xml version="1.0" encoding="UTF-8"?><Relationships xmlns="{RELS}">{rels}</Relationships>'


def content_types_xml() -> str:
    """[Content_Types].xml with media defaults and the main document override."""
    defaults = "".join(
        f'<Default Extension="{ext}" ContentType="{ctype}"/>'
        for ext, ctype in MEDIA_CONTENT_TYPES.items()
    )
    return (
        f'<?xml version="1.0" encoding="UTF-8"?><Types xmlns="{CONTENT_TYPES}">'
        '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        '<Default Extension="xml" ContentType="application/xml"/>'
        f"{defaults}"
        f'<Override PartName="/word/document.xml" ContentType="{DOCUMENT_CONTENT_TYPE}"/>'
        "</Types>"
    )


def package_relationships_xml() -> str:
    """_rels/.rels pointing at word/document.xml."""
    return (
        f'<?xml version="1.0" encoding="UTF-8"?><Relationships xmlns="{RELS}">'
        f'<Relationship Id="rId1" Type="{OFFICE_DOCUMENT_REL}" Target="word/document.xml"/>'
        "</Relationships>"
    )


def corrupt_entry(container: bytes, name: str) -> bytes:
    """Flip one byte in the middle of an entry's compressed data."""
    with zipfile.ZipFile(io.BytesIO(container)) as zf:
        info = zf.getinfo(name)
    header = info.header_offset
    name_len = int.from_bytes(container[header + 26:header + 28], "little")
    extra_len = int.from_bytes(container[header + 28:header + 30], "little")
    target = header + 30 + name_len + extra_len + info.compress_size // 2

    data = bytearray(container)
    data[target] ^= 0xFF
    return bytes(data)


def png_bytes(width: int = 4, height: int = 3) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color="white").save(buf, format="PNG")
    return buf.getvalue()


def build_docx(paragraphs=(), media=None, relationships=None, *, include_document=True) -> bytes:
    """
    Build a minimal .docx container in memory.

    Args:
        paragraphs: Paragraph specs for word/document.xml
        media: filename -> payload, stored under word/media/
        relationships: rId -> target (e.g. "media/image1.png")
        include_document: Leave out word/document.xml when False
    """
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", content_types_xml())
        zf.writestr("_rels/.rels", package_relationships_xml())
        if include_document:
            zf.writestr("word/document.xml", document_xml(paragraphs))
        if relationships is not None:
            zf.writestr("word/_rels/document.xml.rels", relationships_xml(relationships))
        for name, payload in (media or {}).items():
            zf.writestr(f"word/media/{name}", payload)
    return buf.getvalue()


# Common test fixtures
@pytest.fixture
def make_docx():
    """Factory fixture: make_docx(paragraphs, media=..., relationships=...) -> bytes."""
    return build_docx


@pytest.fixture
def make_document_xml():
    """Factory fixture: make_document_xml(paragraphs) -> markup string."""
    return document_xml


@pytest.fixture
def damage_entry():
    """Factory fixture: damage_entry(container, entry_name) -> bytes."""
    return corrupt_entry


@pytest.fixture
def png_payload() -> bytes:
    """A decodable 4x3 PNG."""
    return png_bytes()


@pytest.fixture
def sample_exam_docx(make_docx, png_payload) -> bytes:
    """A three-section exam with an image, underline and explicit answers."""
    paragraphs = [
        "SỞ GIÁO DỤC VÀ ĐÀO TẠO",
        "ĐỀ THI THỬ TỐT NGHIỆP THPT MÔN TOÁN",
        "PHẦN 1. Câu trắc nghiệm nhiều phương án lựa chọn",
        "Câu 1: Tính \\(2 + 3\\).",
        "A. 4",
        "B. 5",
        "C. 6",
        "D. 7",
        "Lời giải",
        "Ta có 2 + 3 = 5. Chọn B",
        "Câu 2. Cho hình vẽ bên. Giá trị nào lớn nhất?",
        [{"image": "rId10"}],
        "Hình 1",
        ["A. 1"],
        [{"text": "B", "underline": True}, ". 2"],
        "C. 3",
        "D. 4",
        "PHẦN 2. Câu trắc nghiệm đúng sai",
        "Câu 1. Cho hàm số $y = x^2$.",
        "a) Hàm số đồng biến trên R.",
        "b) Đồ thị đi qua gốc tọa độ.",
        "c) Giá trị nhỏ nhất bằng 0.",
        "d) Hàm số lẻ.",
        "PHẦN 3. Câu trắc nghiệm trả lời ngắn",
        "Câu 1: Nghiệm của phương trình 2x = 3 là?",
        "Lời giải",
        "x = 3/2",
        "Đáp án: 1,5",
    ]
    return make_docx(
        paragraphs,
        media={"image1.png": png_payload},
        relationships={"rId10": "media/image1.png"},
    )
