"""Where template source comes from.

An Environment asks its loader for ``get_source(name)`` and gets back
``(source, filename)``; ``filename`` may be None for sources that do not
live on disk.

- `FileSystemLoader` reads ``.xml`` files under a base directory
- `DictLoader` serves sources from a mapping (tests, generated templates)

Names are slash-separated. An ``<include file="...">`` is resolved against
the including template's name with `join_path`, so nested includes behave
the same with either loader.

Anything with a matching ``get_source`` works as a loader, for example
templates shipped inside a package:

    ```python
    class PackageLoader:
        def __init__(self, package: str):
            self._root = importlib.resources.files(package) / "templates"

        def get_source(self, name: str) -> tuple[str, str | None]:
            resource = self._root / name
            if not resource.is_file():
                raise TemplateNotFoundError(f"'{name}' is not packaged")
            return resource.read_text("utf-8"), None
    ```

"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Protocol

from templatizer.environment.exceptions import TemplateNotFoundError


class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...


def join_path(name: str, parent: str | None) -> str:
    """Resolve an include target against the including template's name.

    Example:
        >>> join_path("nav.xml", "pages/index.xml")
        'pages/nav.xml'
        >>> join_path("../shared/footer.xml", "pages/index.xml")
        'shared/footer.xml'
    """
    if parent is None or posixpath.isabs(name):
        return posixpath.normpath(name)
    return posixpath.normpath(posixpath.join(posixpath.dirname(parent), name))


class FileSystemLoader:
    """Load templates from a base directory.

    Names are resolved relative to ``base_dir``; absolute paths are used
    as-is. The base directory is an explicit parameter, never taken from
    the process environment.

    Example:
        >>> loader = FileSystemLoader("templates/")
        >>> source, filename = loader.get_source("pages/about.xml")
        >>> filename
        'templates/pages/about.xml'

    Raises:
        TemplateNotFoundError: If the file is missing or unreadable
    """

    __slots__ = ("_base", "_encoding")

    def __init__(self, base_dir: str | Path = ".", encoding: str = "utf-8"):
        self._base = Path(base_dir)
        self._encoding = encoding

    @property
    def base_dir(self) -> Path:
        return self._base

    def get_source(self, name: str) -> tuple[str, str]:
        path = self._base / name
        if not path.is_file():
            raise TemplateNotFoundError(f"Template '{name}' not found in: {self._base}")
        try:
            return path.read_text(self._encoding), str(path)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateNotFoundError(f"Unable to read template '{name}': {e}") from e

    def list_templates(self) -> list[str]:
        """List all ``.xml`` templates under the base directory."""
        if not self._base.is_dir():
            return []
        return sorted(p.relative_to(self._base).as_posix() for p in self._base.rglob("*.xml"))


def _missing_message(name: str, known: list[str]) -> str:
    """``Template 'x' not found`` plus the closest known name, or a short listing."""
    from difflib import get_close_matches

    message = f"Template '{name}' not found"
    close = get_close_matches(name, known, n=1, cutoff=0.6)
    if close:
        return f"{message}. Did you mean '{close[0]}'?"
    if not known:
        return message
    shown = ", ".join(known[:10])
    extra = f" ... ({len(known)} total)" if len(known) > 10 else ""
    return f"{message}. Available: {shown}{extra}"


class DictLoader:
    """Serve template sources from a name → source mapping.

    Example:
        >>> loader = DictLoader({
        ...     "page.xml": '<root><include file="parts/nav.xml"/></root>',
        ...     "parts/nav.xml": "<root><nav>@</nav></root>",
        ... })
        >>> env = Environment(loader=loader)
        >>> env.get_template("page.xml").render(InputChannel(["Home"]))
        '<nav>Home</nav>'

    Raises:
        TemplateNotFoundError: For names missing from the mapping, with a
            "did you mean" hint when one is close
    """

    __slots__ = ("_sources",)

    def __init__(self, sources: dict[str, str]):
        self._sources = sources

    def get_source(self, name: str) -> tuple[str, None]:
        try:
            return self._sources[name], None
        except KeyError:
            raise TemplateNotFoundError(_missing_message(name, self.list_templates())) from None

    def list_templates(self) -> list[str]:
        return sorted(self._sources)
