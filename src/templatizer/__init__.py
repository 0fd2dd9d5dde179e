"""Templatizer: input-driven markup templates.

A template is well-formed XML whose root element is a wrapper that is never
emitted. Values and control flow are not computed from data; the caller
supplies them, in order, through an ``InputChannel``:

- ``@`` in text, or an attribute whose whole value is ``@``, consumes one
  piece of filler text
- ``<if>...</if>`` consumes one decision: ENTER runs the body, SKIP jumps past it
- ``<swhile>...</swhile>`` consumes a decision on entry (ENTER / STOP) and
  one at the close of every iteration (REPEAT / STOP)
- ``<ewhile>...</ewhile>`` behaves exactly like ``<swhile>``
- ``<include file="nav.xml"/>`` splices another template in at load time

Quickstart:
    >>> from templatizer import Decision, Environment, InputChannel
    >>> env = Environment()
    >>> t = env.from_string("<root><swhile><li>@</li></swhile></root>")
    >>> t.render(InputChannel([Decision.ENTER, "a", Decision.REPEAT, "b", Decision.STOP]))
    '<li>a</li><li>b</li>'

File-based templates:
    >>> from templatizer import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("templates/"))
    >>> for chunk in env.get_template("index.xml").render_stream(channel):
    ...     send(chunk)

Architecture:
Template Source → SAX events → flat nodes (includes spliced) → jump resolution → Interpreter

Errors:
Compile-time problems raise ``TemplateSyntaxError`` (or
``TemplateNotFoundError``) before anything is rendered. Render-time
problems raise ``TemplateRuntimeError`` subclasses; output streamed before
the error is not retracted.

"""

from templatizer.channel import ControlDecision, Decision, FillerText, InputChannel, InputItem
from templatizer.environment import (
    CyclicIncludeError,
    DictLoader,
    Environment,
    ErrorCode,
    ExhaustedInputError,
    FileSystemLoader,
    IncludeDepthError,
    InputTypeMismatchError,
    TagRegistry,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    TrailingInputError,
    UnbalancedControlFlowError,
)
from templatizer.nodes import End, Node, Start, TagKind, Text
from templatizer.render_context import RenderContext, get_render_context, render_context
from templatizer.template import Interpreter, Template

__version__ = "0.1.0"

__all__ = [
    "ControlDecision",
    "CyclicIncludeError",
    "Decision",
    "DictLoader",
    "End",
    "Environment",
    "ErrorCode",
    "ExhaustedInputError",
    "FileSystemLoader",
    "FillerText",
    "IncludeDepthError",
    "InputChannel",
    "InputItem",
    "InputTypeMismatchError",
    "Interpreter",
    "Node",
    "RenderContext",
    "Start",
    "TagKind",
    "TagRegistry",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "Text",
    "TrailingInputError",
    "UnbalancedControlFlowError",
    "__version__",
    "get_render_context",
    "render_context",
]
