"""Pytest configuration and fixtures for Templatizer tests."""

import pytest

from templatizer import DictLoader, Environment, FileSystemLoader


@pytest.fixture
def env():
    """Create a basic Environment with no loader."""
    return Environment()


@pytest.fixture
def env_raw():
    """Create an Environment that emits filler text unescaped."""
    return Environment(autoescape=False)


@pytest.fixture
def env_with_loader():
    """Create an Environment with a DictLoader and include-based templates."""
    loader = DictLoader(
        {
            "page.xml": '<root><h1>@</h1><include file="parts/nav.xml"/></root>',
            "parts/nav.xml": '<root><nav><include file="item.xml"/></nav></root>',
            "parts/item.xml": '<root><a href="@">@</a></root>',
            "list.xml": (
                '<root><ul><swhile><li><include file="parts/item.xml"/></li></swhile></ul></root>'
            ),
            "pages/up.xml": '<root><include file="../shared/footer.xml"/></root>',
            "shared/footer.xml": "<root><footer>@</footer></root>",
        }
    )
    return Environment(loader=loader)


@pytest.fixture
def fs_env(tmp_path):
    """Environment with a temp filesystem loader."""
    return Environment(loader=FileSystemLoader(tmp_path))


def write_template(base, name: str, source: str):
    """Write ``source`` to ``base / name``, creating parent directories."""
    path = base / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path
