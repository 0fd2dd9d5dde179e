"""Markup event adapter over the standard library SAX parser.

Turns template source into a list of start/end/text events in document
order. Adjacent character data is coalesced into one event.

Comments, processing instructions and the XML declaration produce no
events, so they never reach the rendered output: a template without
directives or placeholders renders as its source minus the wrapper and
minus those constructs.
"""

from __future__ import annotations

import io
import xml.sax
from dataclasses import dataclass
from xml.sax.handler import ContentHandler, feature_external_ges, feature_namespaces

from templatizer.environment.exceptions import TemplateSyntaxError


@dataclass(frozen=True, slots=True)
class StartEvent:
    name: str
    attributes: tuple[tuple[str, str], ...]
    lineno: int


@dataclass(frozen=True, slots=True)
class EndEvent:
    name: str
    lineno: int


@dataclass(frozen=True, slots=True)
class TextEvent:
    content: str
    lineno: int


Event = StartEvent | EndEvent | TextEvent


class _EventCollector(ContentHandler):
    def __init__(self) -> None:
        super().__init__()
        self.events: list[Event] = []
        self._text: list[str] = []
        self._text_line = 0
        self._locator = None

    def setDocumentLocator(self, locator) -> None:
        self._locator = locator

    def _line(self) -> int:
        return self._locator.getLineNumber() if self._locator is not None else 0

    def _flush_text(self) -> None:
        if self._text:
            self.events.append(TextEvent("".join(self._text), self._text_line))
            self._text = []

    def startElement(self, name, attrs) -> None:
        self._flush_text()
        attributes = tuple((key, attrs.getValue(key)) for key in attrs.getNames())
        self.events.append(StartEvent(name, attributes, self._line()))

    def endElement(self, name) -> None:
        self._flush_text()
        self.events.append(EndEvent(name, self._line()))

    def characters(self, content) -> None:
        if not self._text:
            self._text_line = self._line()
        self._text.append(content)

    def endDocument(self) -> None:
        self._flush_text()


def parse_events(source: str, *, name: str | None = None, filename: str | None = None) -> list[Event]:
    """Parse template source into markup events.

    Args:
        source: Complete template source text
        name: Template name (for error messages)
        filename: Source file path (for error messages)

    Returns:
        Events in document order; the first is the root element's start.

    Raises:
        TemplateSyntaxError: If the source is not well-formed XML
    """
    handler = _EventCollector()
    parser = xml.sax.make_parser()
    parser.setFeature(feature_namespaces, False)
    parser.setFeature(feature_external_ges, False)
    parser.setContentHandler(handler)
    try:
        # parse(), unlike feed(), installs the locator that supplies line numbers.
        parser.parse(io.StringIO(source))
    except xml.sax.SAXParseException as e:
        raise TemplateSyntaxError(
            f"Malformed markup: {e.getMessage()}",
            lineno=e.getLineNumber(),
            col_offset=e.getColumnNumber(),
            name=name,
            filename=filename,
        ) from e
    return handler.events
