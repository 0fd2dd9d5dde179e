"""Tests for Environment configuration, caching and loaders."""

from __future__ import annotations

import logging

import pytest

from templatizer import (
    Decision,
    DictLoader,
    Environment,
    FileSystemLoader,
    InputChannel,
    Template,
    TemplateNotFoundError,
)

from .conftest import write_template


class TestConfiguration:
    def test_defaults(self) -> None:
        env = Environment()
        assert env.loader is None
        assert env.marker == "@"
        assert env.wrapper_tag is None
        assert env.autoescape is True

    @pytest.mark.parametrize("marker", ["", "@@", "{{"])
    def test_marker_must_be_one_character(self, marker: str) -> None:
        with pytest.raises(ValueError, match="single character"):
            Environment(marker=marker)

    def test_negative_include_depth_rejected(self) -> None:
        with pytest.raises(ValueError, match="max_include_depth"):
            Environment(max_include_depth=-1)

    def test_wrapper_tag_applies_to_from_string(self) -> None:
        env = Environment(wrapper_tag="templatizer")
        assert env.from_string("<templatizer>ok</templatizer>").render(InputChannel()) == "ok"


class TestGetTemplate:
    def test_requires_loader(self, env: Environment) -> None:
        with pytest.raises(RuntimeError, match="No loader configured"):
            env.get_template("page.xml")

    def test_returns_template(self, env_with_loader: Environment) -> None:
        template = env_with_loader.get_template("parts/item.xml")
        assert isinstance(template, Template)
        assert template.name == "parts/item.xml"
        assert template.filename is None

    def test_cached(self, env_with_loader: Environment) -> None:
        first = env_with_loader.get_template("page.xml")
        assert env_with_loader.get_template("page.xml") is first

    def test_clear_cache(self, env_with_loader: Environment) -> None:
        first = env_with_loader.get_template("page.xml")
        env_with_loader.clear_cache()
        assert env_with_loader.get_template("page.xml") is not first

    def test_cache_is_bounded(self) -> None:
        env = Environment(
            loader=DictLoader({f"{i}.xml": "<root/>" for i in range(3)}),
            cache_size=2,
        )
        zero = env.get_template("0.xml")
        env.get_template("1.xml")
        env.get_template("2.xml")
        assert env.get_template("0.xml") is not zero

    def test_render_shortcut(self, env_with_loader: Environment) -> None:
        assert env_with_loader.render("shared/footer.xml", InputChannel(["x"])) == "<footer>x</footer>"

    def test_compiled_template_is_reusable(self, env_with_loader: Environment) -> None:
        template = env_with_loader.get_template("list.xml")
        assert template.render(InputChannel([Decision.STOP])) == "<ul></ul>"
        assert template.render(InputChannel([Decision.STOP])) == "<ul></ul>"

    def test_compile_is_logged(self, env_with_loader: Environment, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="templatizer"):
            env_with_loader.get_template("page.xml")
        assert any("not cached" in r.getMessage() for r in caplog.records)


class TestFromString:
    def test_not_cached(self, env: Environment) -> None:
        source = "<root>x</root>"
        assert env.from_string(source) is not env.from_string(source)

    def test_name_is_optional(self, env: Environment) -> None:
        assert env.from_string("<root/>").name is None
        assert env.from_string("<root/>", name="inline.xml").name == "inline.xml"

    def test_includes_use_the_loader(self, env_with_loader: Environment) -> None:
        template = env_with_loader.from_string('<root><include file="shared/footer.xml"/></root>')
        assert template.render(InputChannel(["f"])) == "<footer>f</footer>"


class TestTemplateIntrospection:
    def test_placeholder_count(self, env: Environment) -> None:
        template = env.from_string('<root><a href="@" title="x@">@ and @</a></root>')
        assert template.placeholder_count() == 3

    def test_placeholder_count_includes_spliced_templates(self, env_with_loader: Environment) -> None:
        assert env_with_loader.get_template("page.xml").placeholder_count() == 3

    def test_directive_count(self, env: Environment) -> None:
        template = env.from_string("<root><if><swhile/></if><ewhile>@</ewhile></root>")
        assert template.directive_count() == 3

    def test_nodes_are_a_tuple(self, env: Environment) -> None:
        assert isinstance(env.from_string("<root/>").nodes, tuple)

    def test_repr(self, env: Environment) -> None:
        assert repr(env.from_string("<root/>")) == "<Template (inline)>"
        assert repr(env.from_string("<root/>", name="a.xml")) == "<Template a.xml>"


class TestFileSystemLoader:
    def test_get_source(self, tmp_path) -> None:
        path = write_template(tmp_path, "page.xml", "<root/>")
        source, filename = FileSystemLoader(tmp_path).get_source("page.xml")
        assert source == "<root/>"
        assert filename == str(path)

    def test_missing(self, tmp_path) -> None:
        with pytest.raises(TemplateNotFoundError, match="missing.xml"):
            FileSystemLoader(tmp_path).get_source("missing.xml")

    def test_directory_is_not_a_template(self, tmp_path) -> None:
        (tmp_path / "dir.xml").mkdir()
        with pytest.raises(TemplateNotFoundError):
            FileSystemLoader(tmp_path).get_source("dir.xml")

    def test_list_templates(self, tmp_path) -> None:
        write_template(tmp_path, "b.xml", "<root/>")
        write_template(tmp_path, "sub/a.xml", "<root/>")
        write_template(tmp_path, "notes.txt", "skip")
        assert FileSystemLoader(tmp_path).list_templates() == ["b.xml", "sub/a.xml"]

    def test_list_templates_missing_base(self, tmp_path) -> None:
        assert FileSystemLoader(tmp_path / "nope").list_templates() == []

    def test_filename_reaches_template(self, fs_env: Environment, tmp_path) -> None:
        path = write_template(tmp_path, "page.xml", "<root/>")
        assert fs_env.get_template("page.xml").filename == str(path)


class TestDictLoader:
    def test_lists_available_when_no_close_match(self) -> None:
        loader = DictLoader({"alpha.xml": "<root/>", "beta.xml": "<root/>"})
        with pytest.raises(TemplateNotFoundError, match="Available: alpha.xml, beta.xml"):
            loader.get_source("zzzzzzzzzzzzzz")

    def test_list_templates(self) -> None:
        assert DictLoader({"b": "", "a": ""}).list_templates() == ["a", "b"]
