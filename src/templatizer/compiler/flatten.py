"""Template loading: markup events to a flat node list.

Each start/end/text event becomes one node, in document order. The root
element is kept as a pair of ``WRAPPER`` nodes that the interpreter never
emits. ``<include file="..."/>`` tags are replaced in place by the nodes
of the referenced template (without its wrapper), loaded recursively.

Include names resolve relative to the including template's directory.
The chain of templates being loaded is tracked so that a template that
includes itself, directly or through others, fails at load time instead
of recursing forever.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from templatizer.environment.exceptions import (
    CyclicIncludeError,
    IncludeDepthError,
    TemplateSyntaxError,
)
from templatizer.environment.loaders import join_path
from templatizer.nodes import End, Node, Start, TagKind, Text
from templatizer.parser import EndEvent, StartEvent, TextEvent, parse_events

if TYPE_CHECKING:
    from templatizer.environment.loaders import Loader
    from templatizer.environment.registry import TagRegistry

logger = logging.getLogger(__name__)

INLINE_NAME = "<string>"


class TemplateFlattener:
    """Load a template and its includes into one flat node list.

    Not thread-safe: create one per compilation.

    Example:
        >>> flattener = TemplateFlattener(loader, TagRegistry())
        >>> nodes = flattener.flatten("page.xml")
    """

    __slots__ = ("_loader", "_max_include_depth", "_registry", "_wrapper_tag")

    def __init__(
        self,
        loader: Loader | None,
        registry: TagRegistry,
        *,
        wrapper_tag: str | None = None,
        max_include_depth: int = 50,
    ):
        self._loader = loader
        self._registry = registry
        self._wrapper_tag = wrapper_tag
        self._max_include_depth = max_include_depth

    def flatten(
        self,
        name: str | None,
        source: str | None = None,
        filename: str | None = None,
    ) -> list[Node]:
        """Load ``name`` (or parse ``source`` directly) with includes spliced in.

        Raises:
            TemplateNotFoundError: If the template or an include can't be read
            TemplateSyntaxError: If markup is malformed or an include lacks ``file``
            CyclicIncludeError: If an include chain loops back on itself
            IncludeDepthError: If includes nest deeper than the configured limit
        """
        if name is not None:
            name = join_path(name, None)
        return self._load(name, (), source, filename)

    def _read(self, name: str) -> tuple[str, str | None]:
        if self._loader is None:
            raise RuntimeError(f"Cannot load '{name}': no loader configured")
        return self._loader.get_source(name)

    def _load(
        self,
        name: str | None,
        chain: tuple[str, ...],
        source: str | None,
        filename: str | None,
    ) -> list[Node]:
        label = name or INLINE_NAME
        if label in chain:
            raise CyclicIncludeError((*chain, label), name=chain[-1])
        if len(chain) > self._max_include_depth:
            raise IncludeDepthError((*chain, label), self._max_include_depth, name=chain[-1])
        if source is None:
            source, filename = self._read(label)

        events = parse_events(source, name=name, filename=filename)
        chain = (*chain, label)
        nodes: list[Node] = []
        depth = 0
        in_include = False

        for event in events:
            if in_include:
                # Only whitespace may sit between <include> and </include>.
                if isinstance(event, EndEvent):
                    in_include = False
                    depth -= 1
                elif not (isinstance(event, TextEvent) and event.content.isspace()):
                    raise TemplateSyntaxError(
                        "<include> must be empty",
                        lineno=event.lineno,
                        name=name,
                        filename=filename,
                    )
                continue

            match event:
                case StartEvent(name=tag, attributes=attributes, lineno=lineno):
                    if depth == 0:
                        self._check_wrapper(tag, lineno, name, filename)
                        nodes.append(Start(tag, attributes, TagKind.WRAPPER, lineno=lineno))
                    else:
                        kind = self._registry.kind_of(tag)
                        if kind is TagKind.INCLUDE:
                            nodes.extend(self._include(attributes, lineno, chain, name, filename))
                            in_include = True
                        else:
                            nodes.append(Start(tag, attributes, kind, lineno=lineno))
                    depth += 1
                case EndEvent(name=tag, lineno=lineno):
                    depth -= 1
                    kind = TagKind.WRAPPER if depth == 0 else self._registry.kind_of(tag)
                    nodes.append(End(tag, kind, lineno=lineno))
                case TextEvent(content=content, lineno=lineno):
                    nodes.append(Text(content, lineno=lineno))

        return nodes

    def _check_wrapper(
        self, tag: str, lineno: int, name: str | None, filename: str | None
    ) -> None:
        if self._registry.kind_of(tag).is_directive:
            raise TemplateSyntaxError(
                f"<{tag}> is a directive and cannot be the root element",
                lineno=lineno,
                name=name,
                filename=filename,
            )
        if self._wrapper_tag is not None and tag != self._wrapper_tag:
            raise TemplateSyntaxError(
                f"Root element must be <{self._wrapper_tag}>, found <{tag}>",
                lineno=lineno,
                name=name,
                filename=filename,
            )

    def _include(
        self,
        attributes: tuple[tuple[str, str], ...],
        lineno: int,
        chain: tuple[str, ...],
        name: str | None,
        filename: str | None,
    ) -> list[Node]:
        target = dict(attributes).get("file")
        if not target:
            raise TemplateSyntaxError(
                "<include> requires a 'file' attribute",
                lineno=lineno,
                name=name,
                filename=filename,
            )
        include_name = join_path(target, name)
        included = self._load(include_name, chain, None, None)
        # Drop the included template's own wrapper pair.
        body = included[1:-1]
        logger.debug(
            "Spliced include %r into %r (%d nodes)", include_name, chain[-1], len(body)
        )
        return body
