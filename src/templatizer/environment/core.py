"""Environment: configuration and template cache.

All configuration is passed explicitly; nothing is read from the process
environment. A template is compiled once per Environment and then reused
for every render.

Example:
    >>> env = Environment(loader=FileSystemLoader("templates/"))
    >>> template = env.get_template("page.xml")
    >>> template.render(InputChannel(["Hello"]))
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from templatizer.compiler import Compiler
from templatizer.template import Template

if TYPE_CHECKING:
    from templatizer.channel import InputChannel
    from templatizer.environment.loaders import Loader

logger = logging.getLogger(__name__)


@dataclass
class Environment:
    """Central configuration for compiling and rendering templates.

    Attributes:
        loader: Source of template text (``FileSystemLoader``, ``DictLoader``)
        marker: Placeholder character, in text and as a whole attribute value
        wrapper_tag: Required root element name, or None to accept any root
        autoescape: Escape filler text as markup before emitting it
        max_include_depth: Deepest allowed include nesting
        cache_size: Compiled templates kept by ``get_template()``

    Thread-Safety:
        ``get_template()`` may be called from several threads; the cache is
        guarded by a lock and compilation of a given name is idempotent.
    """

    loader: Loader | None = None
    marker: str = "@"
    wrapper_tag: str | None = None
    autoescape: bool = True
    max_include_depth: int = 50
    cache_size: int = 400

    _cache: OrderedDict[str, Template] = field(
        default_factory=OrderedDict, init=False, repr=False
    )
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.marker, str) or len(self.marker) != 1:
            raise ValueError(f"marker must be a single character, got {self.marker!r}")
        if self.max_include_depth < 0:
            raise ValueError("max_include_depth must be >= 0")

    def get_template(self, name: str) -> Template:
        """Load, compile and cache a template by name.

        Raises:
            TemplateNotFoundError: If the loader can't provide the template
            TemplateSyntaxError: If the template (or an include) doesn't compile
        """
        with self._lock:
            cached = self._cache.get(name)
            if cached is not None:
                self._cache.move_to_end(name)
                return cached

        if self.loader is None:
            raise RuntimeError("No loader configured; use from_string() or pass loader=")
        logger.debug("Template %r not cached, compiling", name)
        source, filename = self.loader.get_source(name)
        template = self._compile(name, source, filename)

        with self._lock:
            self._cache[name] = template
            self._cache.move_to_end(name)
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
        return template

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Compile a template from source text (not cached).

        Includes inside ``source`` are still resolved through the loader.
        """
        return self._compile(name, source, None)

    def render(self, name: str, channel: InputChannel) -> str:
        """Shortcut for ``get_template(name).render(channel)``."""
        return self.get_template(name).render(channel)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _compile(self, name: str | None, source: str, filename: str | None) -> Template:
        nodes = Compiler(self).compile(name, source, filename)
        return Template(
            nodes,
            name,
            filename,
            marker=self.marker,
            autoescape=self.autoescape,
        )
