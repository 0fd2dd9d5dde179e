"""Input channel holding the caller's ordered fillers and decisions.

The caller appends items in the exact order the interpreter will reach the
corresponding points: one ``FillerText`` per placeholder, one
``ControlDecision`` per directive visit, repeated for every loop iteration.
Items are consumed first-in, first-out, and each consumption point states
the kind it expects, so an out-of-order sequence fails fast:

    >>> channel = InputChannel([Decision.ENTER, "a", Decision.REPEAT, "b", Decision.STOP])
    >>> env.from_string("<root><swhile><p>@</p></swhile></root>").render(channel)
    '<p>a</p><p>b</p>'

Thread-Safety:
A channel has one producer and one consumer at a time. Ownership passes
to the render that drains it; it must not be shared between renders.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from templatizer.environment.exceptions import (
    ExhaustedInputError,
    InputTypeMismatchError,
)


class Decision(Enum):
    """Control decision for a directive.

    ``ENTER`` and ``REPEAT`` run the body (again); ``SKIP`` and ``STOP``
    bypass or leave it. Conditionals take ``ENTER``/``SKIP``, loop entries
    ``ENTER``/``STOP`` and loop closes ``REPEAT``/``STOP``; the paired
    spellings are interchangeable.
    """

    ENTER = "enter"
    SKIP = "skip"
    REPEAT = "repeat"
    STOP = "stop"

    @property
    def runs_body(self) -> bool:
        return self in (Decision.ENTER, Decision.REPEAT)


@dataclass(frozen=True, slots=True)
class FillerText:
    """Text substituted at one placeholder."""

    text: str


@dataclass(frozen=True, slots=True)
class ControlDecision:
    """Decision consumed by one directive visit."""

    decision: Decision


InputItem = FillerText | ControlDecision


def _coerce(item: InputItem | str | Decision) -> InputItem:
    if isinstance(item, (FillerText, ControlDecision)):
        return item
    if isinstance(item, Decision):
        return ControlDecision(item)
    if isinstance(item, str):
        return FillerText(item)
    raise TypeError(
        f"Input items must be str, Decision, FillerText or ControlDecision, "
        f"got {type(item).__name__}"
    )


def _describe(item: InputItem) -> str:
    match item:
        case FillerText(text=text):
            return f"filler text {text!r}"
        case ControlDecision(decision=decision):
            return f"control decision {decision.name}"


class InputChannel:
    """FIFO of typed input items, drained destructively by one render.

    Attributes:
        consumed: Number of items popped so far.

    Example:
        >>> channel = InputChannel()
        >>> _ = channel.add_text("Hello").add_decision(Decision.SKIP)
        >>> len(channel)
        2
    """

    __slots__ = ("_items", "consumed")

    def __init__(self, items: Iterable[InputItem | str | Decision] = ()):
        self._items: deque[InputItem] = deque()
        self.consumed = 0
        self.extend(items)

    def add_text(self, text: str) -> InputChannel:
        """Append filler text for the next placeholder."""
        if not isinstance(text, str):
            raise TypeError(f"Filler text must be str, got {type(text).__name__}")
        self._items.append(FillerText(text))
        return self

    def add_decision(self, decision: Decision) -> InputChannel:
        """Append a control decision for the next directive visit."""
        if not isinstance(decision, Decision):
            raise TypeError(f"Expected a Decision, got {type(decision).__name__}")
        self._items.append(ControlDecision(decision))
        return self

    def extend(self, items: Iterable[InputItem | str | Decision]) -> InputChannel:
        """Append several items; plain ``str`` and ``Decision`` values are wrapped."""
        self._items.extend(_coerce(item) for item in items)
        return self

    def _pop(self, expected: str) -> InputItem:
        if not self._items:
            raise ExhaustedInputError(
                f"Input exhausted: expected {expected}, but the channel is empty",
                suggestion=f"Append {expected} for every point the render reaches",
            )
        item = self._items.popleft()
        self.consumed += 1
        return item

    def pop_text(self) -> str:
        """Consume the next item, which must be filler text.

        Raises:
            ExhaustedInputError: The channel is empty.
            InputTypeMismatchError: The next item is a control decision.
        """
        item = self._pop("filler text")
        if not isinstance(item, FillerText):
            raise InputTypeMismatchError(
                f"Expected filler text, got {_describe(item)}",
                suggestion="A placeholder was reached; check the order of the input items",
            )
        return item.text

    def pop_decision(self) -> Decision:
        """Consume the next item, which must be a control decision.

        Raises:
            ExhaustedInputError: The channel is empty.
            InputTypeMismatchError: The next item is filler text.
        """
        item = self._pop("a control decision")
        if not isinstance(item, ControlDecision):
            raise InputTypeMismatchError(
                f"Expected control decision, got {_describe(item)}",
                suggestion="A directive was reached; check the order of the input items",
            )
        return item.decision

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[InputItem]:
        """Iterate over pending items without consuming them."""
        return iter(tuple(self._items))

    def __repr__(self) -> str:
        return f"<InputChannel pending={len(self._items)} consumed={self.consumed}>"
