"""Tag registry used while compiling templates.

Assigns each distinct tag name a stable, first-seen index. The reserved
directive keywords are registered up front so their indices are fixed and
a tag can be classified by index alone.
"""

from __future__ import annotations

from collections.abc import Iterator

from templatizer.nodes import TagKind

# Registration order fixes the directive indices 0..3.
DIRECTIVES: tuple[TagKind, ...] = (
    TagKind.CONDITIONAL,
    TagKind.LOOP,
    TagKind.LOOP_ALIAS,
    TagKind.INCLUDE,
)


class TagRegistry:
    """Append-only mapping from tag name to first-seen index.

    Supports:
        - registry.lookup_or_register("p") -> index
        - registry.kind_of("if") -> TagKind.CONDITIONAL
        - "p" in registry, len(registry)

    The registry holds identity only; node data lives in the node list.
    It is a compile-time artifact and is not retained by templates.
    """

    __slots__ = ("_index", "_names")

    def __init__(self) -> None:
        self._names: list[str] = []
        self._index: dict[str, int] = {}
        for kind in DIRECTIVES:
            self.lookup_or_register(kind.value)

    def lookup_or_register(self, name: str) -> int:
        """Return the index of ``name``, registering it if unseen."""
        idx = self._index.get(name)
        if idx is None:
            idx = len(self._names)
            self._names.append(name)
            self._index[name] = idx
        return idx

    def kind_of(self, name: str) -> TagKind:
        """Classify a tag as one of the directives or as literal markup."""
        idx = self.lookup_or_register(name)
        if idx < len(DIRECTIVES):
            return DIRECTIVES[idx]
        return TagKind.LITERAL

    def names(self) -> list[str]:
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)
