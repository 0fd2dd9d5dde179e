"""Instruction nodes produced from markup events.

A template compiles to a flat tuple of ``Start`` / ``End`` / ``Text``
nodes. Nesting is implicit in the ordering; directive pairs are linked by
``jump`` indices filled in once by the jump resolver.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TagKind(Enum):
    """How the interpreter treats a tag."""

    LITERAL = "literal"
    WRAPPER = "wrapper"
    CONDITIONAL = "if"
    LOOP = "swhile"
    LOOP_ALIAS = "ewhile"  # same behavior as swhile; pairs only with </ewhile>
    INCLUDE = "include"

    @property
    def is_directive(self) -> bool:
        return self not in (TagKind.LITERAL, TagKind.WRAPPER)

    @property
    def is_loop(self) -> bool:
        return self in (TagKind.LOOP, TagKind.LOOP_ALIAS)


Attribute = tuple[str, str]


@dataclass(frozen=True, slots=True)
class Start:
    """Opening tag: ``<name attr="value">`` or a directive entry point.

    For ``if`` and ``swhile`` the ``jump`` target is the index just past
    the matching ``End``, taken when the caller decides to bypass the body.
    """

    name: str
    attributes: tuple[Attribute, ...] = ()
    kind: TagKind = TagKind.LITERAL
    jump: int | None = None
    lineno: int = 0


@dataclass(frozen=True, slots=True)
class End:
    """Closing tag. Loop closes jump back to their opening ``Start``."""

    name: str
    kind: TagKind = TagKind.LITERAL
    jump: int | None = None
    is_loop_back: bool = False
    lineno: int = 0


@dataclass(frozen=True, slots=True)
class Text:
    """Character data, emitted verbatim apart from placeholder markers."""

    content: str
    lineno: int = 0


Node = Start | End | Text
