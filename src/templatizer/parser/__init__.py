"""Markup parsing for Templatizer templates."""

from templatizer.parser.events import EndEvent, Event, StartEvent, TextEvent, parse_events

__all__ = [
    "EndEvent",
    "Event",
    "StartEvent",
    "TextEvent",
    "parse_events",
]
