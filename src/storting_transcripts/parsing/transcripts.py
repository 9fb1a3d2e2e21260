"""Parse raw Stortinget transcript XML into :class:`TranscriptDocument`.

The parser understands the following layout. Tag names are matched
case-insensitively and namespaces are ignored::

    <referat>
      <dato>2024-01-15T10:00:00</dato>
      <presidentskap>
        <president>Masud Gharahkhani</president>
      </presidentskap>
      <innlegg>
        <taler><navn>Presidenten</navn><parti/><tittel>President</tittel></taler>
        <a>Stortinget er lovleg sett.</a>
      </innlegg>
    </referat>
"""
from __future__ import annotations

from datetime import datetime
from typing import Iterator, List, Optional
from zoneinfo import ZoneInfo
import logging
import re

from lxml import etree

from ..core.errors import ParseError
from ..core.types import Section, TranscriptDocument

LOGGER = logging.getLogger(__name__)

OSLO = ZoneInfo("Europe/Oslo")

_PARAGRAPH_TAGS = {"a", "tekst"}
_WHITESPACE = re.compile(r"\s+")


def _local_name(element: etree._Element) -> str:
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element).localname.lower()


def _children(element: etree._Element, name: str) -> Iterator[etree._Element]:
    for child in element:
        if _local_name(child) == name:
            yield child


def _descendants(element: etree._Element, name: str) -> Iterator[etree._Element]:
    for child in element.iter():
        if _local_name(child) == name:
            yield child


def _text(element: Optional[etree._Element]) -> str:
    if element is None:
        return ""
    return _WHITESPACE.sub(" ", "".join(element.itertext())).strip()


def _child_text(element: etree._Element, name: str) -> Optional[str]:
    text = _text(next(_children(element, name), None))
    return text or None


def _parse_date(root: etree._Element) -> datetime:
    value = _text(next(_descendants(root, "dato"), None))
    if not value:
        raise ParseError("Transcript does not contain a date")
    try:
        # fromisoformat accepts "Z" only from Python 3.11
        parsed = datetime.fromisoformat(value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value)
    except ValueError:
        try:
            parsed = datetime.strptime(value, "%d.%m.%Y")
        except ValueError as exc:
            raise ParseError(f"Unrecognised transcript date {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=OSLO)
    return parsed


def _parse_section(element: etree._Element) -> Optional[Section]:
    speaker = next(_children(element, "taler"), None)
    paragraphs = [
        _text(child) for child in element.iter() if _local_name(child) in _PARAGRAPH_TAGS
    ]
    text = "\n\n".join(paragraph for paragraph in paragraphs if paragraph)
    if not text:
        return None
    if speaker is None:
        return Section(name="", text=text)
    return Section(
        name=_child_text(speaker, "navn") or "",
        party=_child_text(speaker, "parti"),
        title=_child_text(speaker, "tittel"),
        text=text,
    )


def parse_transcript(raw: bytes) -> TranscriptDocument:
    """Parse ``raw`` transcript XML.

    Raises :class:`ParseError` if the document is not well-formed XML or
    lacks a usable date. Speeches without any text are dropped; the
    remaining ones keep their document order.
    """

    if not raw or not raw.strip():
        raise ParseError("Transcript is empty")
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    try:
        root = etree.fromstring(raw, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise ParseError(f"Malformed transcript XML: {exc}") from exc

    date = _parse_date(root)

    presidents: List[str] = []
    for container in _descendants(root, "presidentskap"):
        presidents.extend(text for text in map(_text, _children(container, "president")) if text)

    sections: List[Section] = []
    for element in _descendants(root, "innlegg"):
        section = _parse_section(element)
        if section is not None:
            sections.append(section)
    if not sections:
        LOGGER.warning("No speeches detected in transcript dated %s", date.isoformat())

    return TranscriptDocument(date=date, presidents=presidents, sections=sections)


__all__ = ["parse_transcript"]
