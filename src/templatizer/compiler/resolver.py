"""Jump resolution: link directive open/close nodes by index.

A single left-to-right pass keeps a stack of open directive indices:

- ``<if>``: on the matching ``</if>`` at index ``e``, the ``Start`` gets
  ``jump = e + 1`` (taken on SKIP). The ``End`` falls through.
- ``<swhile>`` / ``<ewhile>``: on the matching close at ``e``, the
  ``End`` gets ``jump = open_index`` and ``is_loop_back``, and the
  ``Start`` gets ``jump = e + 1`` (taken when the loop is bypassed).

Resolved nodes are fresh frozen instances, so every jump is written once.
Complexity: O(n) time, O(depth) stack.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from templatizer.environment.exceptions import UnbalancedControlFlowError
from templatizer.nodes import End, Node, Start, TagKind

logger = logging.getLogger(__name__)


def resolve_jumps(
    nodes: Sequence[Node],
    *,
    name: str | None = None,
    filename: str | None = None,
) -> tuple[Node, ...]:
    """Fill in jump targets for every directive pair.

    Args:
        nodes: Flattened node list from the loader
        name: Template name (for error messages)
        filename: Source file path (for error messages)

    Returns:
        Render-ready, immutable node tuple

    Raises:
        UnbalancedControlFlowError: If a directive close has no matching
            open, closes a different directive, or an open is never closed
    """
    resolved: list[Node] = list(nodes)
    stack: list[int] = []

    for index, node in enumerate(resolved):
        if not node_is_directive(node):
            continue
        if isinstance(node, Start):
            stack.append(index)
            continue

        # node is an End of a directive
        if not stack:
            raise UnbalancedControlFlowError(
                f"</{node.name}> has no matching <{node.name}>",
                lineno=node.lineno,
                name=name,
                filename=filename,
            )
        open_index = stack.pop()
        opener = resolved[open_index]
        if opener.kind is not node.kind:
            raise UnbalancedControlFlowError(
                f"</{node.name}> closes <{opener.name}> opened at line {opener.lineno}",
                lineno=node.lineno,
                name=name,
                filename=filename,
            )
        resolved[open_index] = replace(opener, jump=index + 1)
        if node.kind.is_loop:
            resolved[index] = replace(node, jump=open_index, is_loop_back=True)

    if stack:
        opener = resolved[stack[-1]]
        raise UnbalancedControlFlowError(
            f"<{opener.name}> is never closed",
            lineno=opener.lineno,
            name=name,
            filename=filename,
        )

    logger.debug(
        "Resolved jumps for %r: %d nodes, %d directives",
        name,
        len(resolved),
        sum(1 for n in resolved if isinstance(n, Start) and n.kind.is_directive),
    )
    return tuple(resolved)


def node_is_directive(node: Node) -> bool:
    """True for ``Start``/``End`` nodes of ``if``, ``swhile`` and ``ewhile``."""
    return isinstance(node, (Start, End)) and node.kind in (
        TagKind.CONDITIONAL,
        TagKind.LOOP,
        TagKind.LOOP_ALIAS,
    )
