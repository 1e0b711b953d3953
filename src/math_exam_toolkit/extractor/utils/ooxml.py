"""
Module: extractor.utils.ooxml

Purpose:
    Fixed package paths and the legacy VML names the paragraph segmenter
    needs. WordprocessingML and DrawingML names come from python-docx's
    ``docx.oxml.ns.qn``; its namespace map has no VML prefixes, so those
    two namespaces are spelled out here.
"""

from __future__ import annotations

DOCUMENT_PATH = "word/document.xml"
MEDIA_PREFIX = "word/media/"

VML_NS = "urn:schemas-microsoft-com:vml"
OFFICE_NS = "urn:schemas-microsoft-com:office:office"

# <v:imagedata r:id="..."/> and its o:relid variant
V_IMAGEDATA = f"{{{VML_NS}}}imagedata"
O_RELID = f"{{{OFFICE_NS}}}relid"
