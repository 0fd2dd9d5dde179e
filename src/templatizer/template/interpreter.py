"""Instruction-pointer interpreter over a resolved node tuple.

The interpreter walks the nodes in lockstep with the input channel:

| Node                       | Input consumed          | Next ip                         |
|----------------------------|-------------------------|---------------------------------|
| wrapper Start/End          | none                    | ip + 1                          |
| ``<if>`` and loop opens    | 1 decision              | ip + 1, or jump when bypassed   |
| literal Start              | 1 text per ``@`` attr   | ip + 1                          |
| ``</swhile>``/``</ewhile>``| 1 decision              | jump + 1 on REPEAT, else ip + 1 |
| ``</if>``                  | none                    | ip + 1                          |
| literal End                | none                    | ip + 1                          |
| Text                       | 1 text per ``@``        | ip + 1                          |

A REPEAT returns to the first body node rather than to the loop's opening
tag: the repeat decision already stands for the entry decision of the
next iteration.

Output is produced one chunk per node, so whatever was yielded before an
error stays emitted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from templatizer.environment.exceptions import TemplateRuntimeError, TrailingInputError
from templatizer.nodes import End, Node, Start, TagKind, Text

if TYPE_CHECKING:
    from templatizer.channel import InputChannel
    from templatizer.render_context import RenderContext

logger = logging.getLogger(__name__)

_ATTR_ENTITIES = {'"': "&quot;"}


class Interpreter:
    """Execute one render of a compiled template.

    One instance per render: it owns the instruction pointer and drains
    the channel it was given. The node tuple itself is never modified.

    Example:
        >>> interp = Interpreter(template.nodes, InputChannel(["hi"]), ctx=ctx)
        >>> "".join(interp.run())
        '<p>hi</p>'
    """

    __slots__ = ("_autoescape", "_channel", "_ctx", "_marker", "_nodes")

    def __init__(
        self,
        nodes: Sequence[Node],
        channel: InputChannel,
        *,
        ctx: RenderContext,
        marker: str = "@",
        autoescape: bool = True,
    ):
        self._nodes = nodes
        self._channel = channel
        self._ctx = ctx
        self._marker = marker
        self._autoescape = autoescape

    def run(self) -> Iterator[str]:
        """Yield output chunks until the instruction pointer runs off the end.

        Raises:
            InputTypeMismatchError: An input item has the wrong kind
            ExhaustedInputError: The channel ran dry at a consumption point
            TrailingInputError: Items remain once the template is finished
        """
        nodes = self._nodes
        ctx = self._ctx
        channel = self._channel
        length = len(nodes)
        ip = 0

        while ip < length:
            node = nodes[ip]
            ctx.ip = ip
            ctx.lineno = node.lineno
            try:
                chunk, ip = self._step(node, ip)
            except TemplateRuntimeError as e:
                raise self._locate(e) from e
            finally:
                ctx.consumed = channel.consumed
            if chunk:
                yield chunk

        ctx.ip = length
        if channel:
            remaining = len(channel)
            raise self._locate(
                TrailingInputError(
                    f"{remaining} input item(s) left over after the template finished",
                    remaining=remaining,
                    suggestion="Remove the extra items, or check loop and conditional decisions",
                )
            )
        logger.debug(
            "Rendered %r: %d input items consumed", ctx.template_name, channel.consumed
        )

    def _step(self, node: Node, ip: int) -> tuple[str, int]:
        match node:
            case Start(kind=TagKind.WRAPPER) | End(kind=TagKind.WRAPPER):
                return "", ip + 1
            case Start(kind=TagKind.CONDITIONAL | TagKind.LOOP | TagKind.LOOP_ALIAS, jump=jump):
                if self._channel.pop_decision().runs_body:
                    return "", ip + 1
                return "", jump
            case Start():
                return self._start_tag(node), ip + 1
            case End(is_loop_back=True, jump=jump):
                if self._channel.pop_decision().runs_body:
                    return "", jump + 1
                return "", ip + 1
            case End(kind=TagKind.LITERAL, name=name):
                return f"</{name}>", ip + 1
            case End():
                return "", ip + 1
            case Text(content=content):
                return self._text(content), ip + 1
        raise TypeError(f"Unknown node type: {type(node).__name__}")

    def _fill(self, quote: bool = False) -> str:
        text = self._channel.pop_text()
        if not self._autoescape:
            return text
        return escape(text, _ATTR_ENTITIES) if quote else escape(text)

    def _start_tag(self, node: Start) -> str:
        parts = [f"<{node.name}"]
        for name, value in node.attributes:
            if value == self._marker:
                value = self._fill(quote=True)
            else:
                value = escape(value, _ATTR_ENTITIES)
            parts.append(f' {name}="{value}"')
        parts.append(">")
        return "".join(parts)

    def _text(self, content: str) -> str:
        head, *rest = content.split(self._marker)
        parts = [escape(head)]
        for tail in rest:
            parts.append(self._fill())
            parts.append(escape(tail))
        return "".join(parts)

    def _locate(self, error: TemplateRuntimeError) -> TemplateRuntimeError:
        ctx = self._ctx
        return error.with_location(
            template_name=ctx.template_name,
            lineno=ctx.lineno or None,
            ip=ctx.ip,
            consumed=self._channel.consumed,
        )
