"""Template compilation: flattening, include splicing and jump resolution."""

from templatizer.compiler.core import Compiler
from templatizer.compiler.flatten import TemplateFlattener
from templatizer.compiler.resolver import node_is_directive, resolve_jumps

__all__ = [
    "Compiler",
    "TemplateFlattener",
    "node_is_directive",
    "resolve_jumps",
]
