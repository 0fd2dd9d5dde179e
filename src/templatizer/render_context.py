"""Templatizer RenderContext: per-render state published via ContextVar.

The interpreter updates the context as it walks the node list, so errors
raised anywhere during a render (including from the input channel, which
knows nothing about templates) can be annotated with the template name,
instruction pointer and source line.

Thread Safety:
    ContextVars are per thread and per async task, so concurrent renders
    of the same template never see each other's state.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass


@dataclass
class RenderContext:
    """Position of the render in progress.

    Attributes:
        template_name: Current template name for error messages
        filename: Source file path for error messages
        ip: Instruction pointer into the resolved node tuple
        lineno: Source line of the node at ``ip``
        consumed: Input items consumed so far
    """

    template_name: str | None = None
    filename: str | None = None
    ip: int = 0
    lineno: int = 0
    consumed: int = 0


_render_context: ContextVar[RenderContext | None] = ContextVar(
    "render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Get current render context (None if not in render)."""
    return _render_context.get()


@contextmanager
def render_context(
    template_name: str | None = None,
    filename: str | None = None,
) -> Iterator[RenderContext]:
    """Context manager for render-scoped state.

    Creates a new RenderContext and sets it as the current context for the
    duration of the with block, restoring the previous one on exit.

    Example:
        with render_context(template_name="page.xml") as ctx:
            output = "".join(Interpreter(nodes, channel, ctx=ctx).run())
    """
    ctx = RenderContext(template_name=template_name, filename=filename)
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
