"""Node data model for compiled templates."""

from templatizer.nodes.markup import Attribute, End, Node, Start, TagKind, Text

__all__ = [
    "Attribute",
    "End",
    "Node",
    "Start",
    "TagKind",
    "Text",
]
