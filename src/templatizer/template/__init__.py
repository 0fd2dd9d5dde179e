"""Compiled template objects and the interpreter that renders them."""

from templatizer.template.core import Template
from templatizer.template.interpreter import Interpreter

__all__ = [
    "Interpreter",
    "Template",
]
