"""Templatizer environment: configuration, loaders, registry and errors."""

from templatizer.environment.exceptions import (
    CyclicIncludeError,
    ErrorCode,
    ExhaustedInputError,
    IncludeDepthError,
    InputTypeMismatchError,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    TrailingInputError,
    UnbalancedControlFlowError,
)
from templatizer.environment.loaders import DictLoader, FileSystemLoader, Loader, join_path
from templatizer.environment.registry import TagRegistry
from templatizer.environment.core import Environment

__all__ = [
    "CyclicIncludeError",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "ExhaustedInputError",
    "FileSystemLoader",
    "IncludeDepthError",
    "InputTypeMismatchError",
    "Loader",
    "TagRegistry",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "TrailingInputError",
    "UnbalancedControlFlowError",
    "join_path",
]
