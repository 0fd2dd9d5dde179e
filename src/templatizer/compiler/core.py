"""Template compiler: loader and jump resolver in one step.

    Template Source → SAX events → flat nodes (includes spliced) → resolved tuple

The tag registry and the resolution stack live only for the duration of
one compilation; the result is an immutable node tuple that any number of
renders may share.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from templatizer.compiler.flatten import TemplateFlattener
from templatizer.compiler.resolver import resolve_jumps
from templatizer.environment.registry import TagRegistry

if TYPE_CHECKING:
    from templatizer.environment import Environment
    from templatizer.nodes import Node

logger = logging.getLogger(__name__)


class Compiler:
    """Compile template source into a jump-resolved node tuple.

    Example:
        >>> compiler = Compiler(env)
        >>> nodes = compiler.compile("page.xml")
    """

    __slots__ = ("_env",)

    def __init__(self, env: Environment):
        self._env = env

    def compile(
        self,
        name: str | None,
        source: str | None = None,
        filename: str | None = None,
    ) -> tuple[Node, ...]:
        """Load ``name`` (or compile ``source``) and resolve its jumps.

        Raises:
            TemplateNotFoundError: If a template can't be read
            TemplateSyntaxError: For malformed markup and include problems
            UnbalancedControlFlowError: If directives don't pair up
        """
        env = self._env
        flattener = TemplateFlattener(
            env.loader,
            TagRegistry(),
            wrapper_tag=env.wrapper_tag,
            max_include_depth=env.max_include_depth,
        )
        nodes = flattener.flatten(name, source, filename)
        resolved = resolve_jumps(nodes, name=name, filename=filename)
        logger.debug("Compiled template %r into %d nodes", name, len(resolved))
        return resolved
