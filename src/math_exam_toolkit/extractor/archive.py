"""
Module: extractor.archive

Purpose:
    Archive reader for Word (.docx) containers. Opens the zip package once
    and exposes the primary document markup, the relationship manifest
    (rId -> media filename) and the raw media entries.

Key Functions:
    - open_archive(): Read a container from bytes or a path

Key Classes:
    - DocxArchive: Immutable view of the parts the importer needs
    - ArchiveError and its fatal subclasses

Dependencies:
    - zipfile (std): Document markup and raw media entries
    - python-docx: Relationship manifest of the main document part
    - lxml: Document markup parsing

Used By:
    - extractor.pipeline: First step of every import
    - extractor.images: Media entries and manifest
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Tuple, Union

import docx
from docx.opc.exceptions import OpcError
from lxml import etree

from .utils.ooxml import DOCUMENT_PATH, MEDIA_PREFIX

logger = logging.getLogger(__name__)

ArchiveSource = Union[bytes, bytearray, Path, str]

# Raised by zipfile for damaged entries (bad CRC, broken deflate stream)
_ENTRY_ERRORS = (zipfile.BadZipFile, zlib.error, OSError, EOFError)

# python-docx failures that only cost image linking
_MANIFEST_ERRORS = (OpcError, KeyError, ValueError, etree.XMLSyntaxError) + _ENTRY_ERRORS


class ArchiveError(Exception):
    """Base class for fatal container errors; no partial exam is produced."""


class InvalidArchiveError(ArchiveError):
    """The uploaded bytes are not a readable zip container."""


class MissingDocumentError(ArchiveError):
    """The container has no primary document markup (word/document.xml)."""


class MalformedDocumentError(ArchiveError):
    """The primary document markup is damaged or not well-formed XML."""


@dataclass(frozen=True)
class DocxArchive:
    """
    Parts of a .docx container used by the importer.

    Attributes:
        document_xml: Raw bytes of word/document.xml
        relationships: rId -> media basename, in manifest order, media
            targets only
        container: Raw container bytes, kept so media is read lazily and a
            damaged media entry cannot fail the whole import
    """
    document_xml: bytes
    relationships: Dict[str, str] = field(default_factory=dict)
    container: bytes = field(default=b"", repr=False)

    def parse_document(self) -> etree._Element:
        """
        Parse the document markup into an lxml tree root.

        Raises:
            MalformedDocumentError: If the markup is not well-formed
        """
        parser = etree.XMLParser(huge_tree=True, resolve_entities=False)
        try:
            return etree.fromstring(self.document_xml, parser)
        except etree.XMLSyntaxError as e:
            raise MalformedDocumentError(f"{DOCUMENT_PATH} is not well-formed: {e}") from e

    def iter_media(self) -> Iterator[Tuple[str, bytes]]:
        """
        Yield (basename, payload) for every file under word/media/.

        Entries come in archive order. Read errors propagate to the caller.
        """
        with zipfile.ZipFile(io.BytesIO(self.container)) as zf:
            for info in zf.infolist():
                if info.filename.startswith(MEDIA_PREFIX) and not info.is_dir():
                    yield info.filename.rsplit("/", 1)[-1], zf.read(info)

    def rid_for_filename(self, filename: str) -> str:
        """Reverse manifest lookup; first matching rId wins, "" if none."""
        for r_id, target in self.relationships.items():
            if target == filename:
                return r_id
        return ""


def open_archive(source: ArchiveSource) -> DocxArchive:
    """
    Open a .docx container and read the parts the importer needs.

    Args:
        source: Raw container bytes or a path to a .docx file

    Returns:
        DocxArchive with document markup, manifest and container bytes

    Raises:
        InvalidArchiveError: If the source is not a zip container
        MissingDocumentError: If word/document.xml is absent
        MalformedDocumentError: If the word/document.xml entry cannot be
            decompressed
        FileNotFoundError: If a path is given and does not exist

    Example:
        >>> archive = open_archive(Path("de_thi.docx"))
        >>> archive.relationships
        {'rId5': 'image1.png'}
    """
    if isinstance(source, (bytes, bytearray)):
        container = bytes(source)
        name = "<bytes>"
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Document not found: {path}")
        container = path.read_bytes()
        name = path.name

    try:
        zf = zipfile.ZipFile(io.BytesIO(container))
    except zipfile.BadZipFile as e:
        raise InvalidArchiveError(f"Not a Word document container ({name}): {e}") from e

    with zf:
        try:
            document_xml = zf.read(DOCUMENT_PATH)
        except KeyError:
            raise MissingDocumentError(
                f"{DOCUMENT_PATH} not found in Word document ({name})"
            ) from None
        except _ENTRY_ERRORS as e:
            raise MalformedDocumentError(
                f"{DOCUMENT_PATH} is damaged in Word document ({name}): {e}"
            ) from e

    relationships = _read_relationships(container)

    logger.debug(
        f"Opened {name}: {len(document_xml)} bytes of markup, "
        f"{len(relationships)} media relationships"
    )
    return DocxArchive(
        document_xml=document_xml,
        relationships=relationships,
        container=container,
    )


def _read_relationships(container: bytes) -> Dict[str, str]:
    """
    Map rId -> media basename from the main document part's relationships.

    A package python-docx cannot load (missing content types, a dangling
    part, a damaged entry) only loses image linking; the markup is still
    imported.
    """
    rels: Dict[str, str] = {}
    try:
        document = docx.Document(io.BytesIO(container))
    except _MANIFEST_ERRORS as e:
        logger.warning(f"Unreadable relationship manifest, images will not be linked: {e}")
        return rels

    for rel in document.part.rels.values():
        if rel.is_external:
            continue
        target = rel.target_ref
        if "media/" in target:
            rels.setdefault(rel.rId, target.rsplit("/", 1)[-1])
    return rels
