"""Exceptions for the Templatizer template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError           # Loader could not read the template
├── TemplateSyntaxError             # Malformed markup or directive usage
│   ├── UnbalancedControlFlowError  # Directive open/close tags do not pair up
│   ├── CyclicIncludeError          # Template includes itself (directly or not)
│   └── IncludeDepthError           # Include chain deeper than the limit
└── TemplateRuntimeError            # Render-time input error
    ├── InputTypeMismatchError      # Text popped where a decision was due (or vice versa)
    ├── ExhaustedInputError         # Channel empty at a consumption point
    └── TrailingInputError          # Channel not empty when rendering finished

Compile-time errors (the first two branches) abort before a render starts.
Runtime errors abort the render in progress; output that has already been
streamed is not retracted.

Example:
    ```
    T-RUN-001: Expected filler text, got control decision SKIP
      Location: page.xml:4 (node 7)
      Hint: Add filler text to the input channel before the decision
    ```

"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from templatizer.environment import terminal

_DOCS_BASE = "docs/errors.md"


class ErrorCode(Enum):
    """Searchable error codes.

    Format: T-{CATEGORY}-{NUMBER}
    Categories: TPL (template loading), PAR (compilation), RUN (rendering)
    """

    # Template loading errors (T-TPL-xxx)
    TEMPLATE_NOT_FOUND = "T-TPL-001"

    # Compilation errors (T-PAR-xxx)
    SYNTAX_ERROR = "T-PAR-001"
    UNBALANCED_CONTROL_FLOW = "T-PAR-002"
    CYCLIC_INCLUDE = "T-PAR-003"
    INCLUDE_DEPTH = "T-PAR-004"

    # Runtime errors (T-RUN-xxx)
    INPUT_TYPE_MISMATCH = "T-RUN-001"
    EXHAUSTED_INPUT = "T-RUN-002"
    TRAILING_INPUT = "T-RUN-003"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_DOCS_BASE}#{self.value.lower()}"

    @property
    def category(self) -> str:
        prefix = self.value.split("-")[1]
        return {
            "TPL": "template",
            "PAR": "compiler",
            "RUN": "runtime",
        }.get(prefix, "unknown")


class TemplateError(Exception):
    """Base exception for all template errors.

    Catching it covers both compilation and rendering:

        >>> try:
        ...     env.get_template("page.xml").render(channel)
        ... except TemplateError as e:
        ...     log.error(e.format_compact())

    Attributes:
        code: ErrorCode identifying the failure.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a short terminal diagnostic with its docs link."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = terminal.format_error_header(self.code.value, header)
        parts = [header]
        if self.code:
            parts.append(f"  {terminal.dim_text('Docs:')} {terminal.docs_url(self.code.docs_url)}")
        return "\n".join(parts)


class TemplateNotFoundError(TemplateError):
    """The loader could not find or read the requested template."""

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Template markup cannot be compiled.

    Raised for malformed XML as well as for structural problems with the
    directives. The message points at the offending file and line when
    they are known.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        filename: str | None = None,
        col_offset: int | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.filename = filename
        self.col_offset = col_offset
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        loc = self.filename or self.name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
            if self.col_offset is not None:
                loc += f":{self.col_offset}"
        return loc

    def _format_message(self) -> str:
        return f"Syntax Error: {self.message}\n  --> {self.location}"

    def format_compact(self) -> str:
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  --> {terminal.location(self.location)}",
        ]
        if self.code:
            parts.append(f"  {terminal.dim_text('Docs:')} {terminal.docs_url(self.code.docs_url)}")
        return "\n".join(parts)


class UnbalancedControlFlowError(TemplateSyntaxError):
    """A directive close tag has no matching open tag, or vice versa."""

    code: ErrorCode | None = ErrorCode.UNBALANCED_CONTROL_FLOW


class CyclicIncludeError(TemplateSyntaxError):
    """An include chain leads back to a template that is still being loaded.

    Attributes:
        chain: Template names from the outermost template to the repeated one.
    """

    code: ErrorCode | None = ErrorCode.CYCLIC_INCLUDE

    def __init__(self, chain: Sequence[str], **kwargs):
        self.chain = tuple(chain)
        super().__init__(f"Cyclic include: {' → '.join(self.chain)}", **kwargs)


class IncludeDepthError(TemplateSyntaxError):
    """Include nesting exceeds the environment's ``max_include_depth``."""

    code: ErrorCode | None = ErrorCode.INCLUDE_DEPTH

    def __init__(self, chain: Sequence[str], limit: int, **kwargs):
        self.chain = tuple(chain)
        self.limit = limit
        super().__init__(
            f"Maximum include depth exceeded ({limit}) when including '{self.chain[-1]}'",
            **kwargs,
        )


class TemplateRuntimeError(TemplateError):
    """Render-time failure caused by the caller's input sequence.

    Attributes:
        message: Error description
        template_name: Name of the template being rendered
        lineno: Source line of the node being interpreted
        ip: Instruction pointer (index into the resolved node list)
        consumed: Number of input items consumed before the failure
        suggestion: Actionable fix suggestion
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        ip: int | None = None,
        consumed: int | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        self.ip = ip
        self.consumed = consumed
        self.suggestion = suggestion
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        loc = self.template_name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
        if self.ip is not None:
            loc += f" (node {self.ip})"
        return loc

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]
        if self.template_name or self.lineno or self.ip is not None:
            parts.append(f"  Location: {terminal.location(self.location)}")
        if self.consumed is not None:
            parts.append(f"  Input items consumed: {self.consumed}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Suggestion:')} {self.suggestion}")
        return "\n".join(parts)

    def with_location(
        self,
        *,
        template_name: str | None,
        lineno: int | None,
        ip: int | None,
        consumed: int | None,
    ) -> TemplateRuntimeError:
        """Return a copy of this error annotated with render position."""
        return type(self)(
            self.message,
            template_name=template_name,
            lineno=lineno,
            ip=ip,
            consumed=consumed,
            suggestion=self.suggestion,
        )

    def format_compact(self) -> str:
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  Location: {terminal.location(self.location)}",
        ]
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        if self.code:
            parts.append(f"  {terminal.dim_text('Docs:')} {terminal.docs_url(self.code.docs_url)}")
        return "\n".join(parts)


class InputTypeMismatchError(TemplateRuntimeError):
    """The next input item is of the wrong kind for the point reached.

    A placeholder expects filler text, a directive expects a control
    decision. Popping either in place of the other raises this error.
    """

    code: ErrorCode | None = ErrorCode.INPUT_TYPE_MISMATCH


class ExhaustedInputError(TemplateRuntimeError):
    """A placeholder or directive was reached with an empty input channel."""

    code: ErrorCode | None = ErrorCode.EXHAUSTED_INPUT


class TrailingInputError(TemplateRuntimeError):
    """Rendering reached the end of the template with input left over.

    Attributes:
        remaining: Number of unconsumed items.
    """

    code: ErrorCode | None = ErrorCode.TRAILING_INPUT

    def __init__(self, message: str, *, remaining: int = 0, **kwargs):
        self.remaining = remaining
        super().__init__(message, **kwargs)

    def with_location(self, **kwargs) -> TrailingInputError:
        err = super().with_location(**kwargs)
        err.remaining = self.remaining
        return err
