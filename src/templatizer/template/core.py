"""Templatizer Template: compiled node tuple ready for rendering.

A Template wraps the jump-resolved node tuple produced by the compiler and
provides the render API. Every render drains one caller-owned
``InputChannel``:

    ```python
    template = env.get_template("list.xml")
    channel = InputChannel([Decision.ENTER, "a", Decision.REPEAT, "b", Decision.STOP])
    for chunk in template.render_stream(channel):
        send(chunk)
    ```

Thread-Safety:
- The node tuple is immutable after compilation
- Each render creates its own Interpreter and RenderContext
- Renders of one Template may run concurrently as long as each has its
  own channel and sink

"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Protocol

from templatizer.nodes import End, Node, Start, TagKind, Text
from templatizer.render_context import render_context
from templatizer.template.interpreter import Interpreter

if TYPE_CHECKING:
    from templatizer.channel import InputChannel


class _Writer(Protocol):
    def write(self, s: str, /) -> object: ...


class Template:
    """Compiled template ready for rendering.

    Attributes:
        name: Template identifier (for error messages)
        filename: Source file path (for error messages)
        nodes: Resolved, read-only node tuple

    Methods:
        render_stream(channel): Generator of output chunks
        render_to(channel, sink): Stream chunks into a file-like sink or callable
        render(channel): Render into one string

    Example:
        >>> t = env.from_string("<root><p>@</p></root>")
        >>> t.render(InputChannel(["hi"]))
        '<p>hi</p>'

    """

    __slots__ = ("_autoescape", "_filename", "_marker", "_name", "_nodes")

    def __init__(
        self,
        nodes: tuple[Node, ...],
        name: str | None,
        filename: str | None,
        *,
        marker: str = "@",
        autoescape: bool = True,
    ):
        self._nodes = nodes
        self._name = name
        self._filename = filename
        self._marker = marker
        self._autoescape = autoescape

    @property
    def name(self) -> str | None:
        """Template name."""
        return self._name

    @property
    def filename(self) -> str | None:
        """Source filename."""
        return self._filename

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    def render_stream(self, channel: InputChannel) -> Iterator[str]:
        """Render the template as a generator of chunks.

        Output is streamed: if the input sequence turns out to be wrong,
        the chunks already yielded stay yielded. Callers that need all or
        nothing should use ``render()`` or buffer themselves.

        Each node yields at most one chunk, built whole before it is
        yielded. A text run whose second placeholder fails yields nothing
        for that run, not even the text before the first placeholder.

        Args:
            channel: Input items in traversal order; drained by the render

        Yields:
            str: Markup chunks as they are produced

        Raises:
            TemplateRuntimeError: On a type mismatch, exhausted input, or
                input left over at the end
        """
        with render_context(template_name=self._name, filename=self._filename) as ctx:
            interpreter = Interpreter(
                self._nodes,
                channel,
                ctx=ctx,
                marker=self._marker,
                autoescape=self._autoescape,
            )
            yield from interpreter.run()

    def render_to(self, channel: InputChannel, sink: _Writer | Callable[[str], object]) -> None:
        """Stream rendered output into ``sink``.

        ``sink`` is either an object with a ``write()`` method (a file,
        ``io.StringIO``, ``sys.stdout``) or a callable taking one string.
        """
        write = sink if callable(sink) else sink.write
        for chunk in self.render_stream(channel):
            write(chunk)

    def render(self, channel: InputChannel) -> str:
        """Render the whole template into one string.

        Example:
            >>> t.render(InputChannel([Decision.SKIP]))
            ''
        """
        return "".join(self.render_stream(channel))

    def placeholder_count(self) -> int:
        """Number of placeholder points in the template source.

        Counts each point once, whether or not a render reaches it.
        """
        marker = self._marker
        count = 0
        for node in self._nodes:
            if isinstance(node, Text):
                count += node.content.count(marker)
            elif isinstance(node, Start) and node.kind is TagKind.LITERAL:
                count += sum(1 for _, value in node.attributes if value == marker)
        return count

    def directive_count(self) -> int:
        """Number of ``if`` / ``swhile`` / ``ewhile`` directives."""
        return sum(
            1
            for node in self._nodes
            if isinstance(node, End) and node.kind.is_directive
        )

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'}>"
