"""Tests for template loading: node flattening and include splicing."""

from __future__ import annotations

import pytest

from templatizer import (
    CyclicIncludeError,
    Decision,
    DictLoader,
    End,
    Environment,
    IncludeDepthError,
    InputChannel,
    Start,
    TagKind,
    TagRegistry,
    TemplateNotFoundError,
    TemplateSyntaxError,
    Text,
)
from templatizer.compiler import TemplateFlattener

from .conftest import write_template


def flatten(source: str, templates: dict[str, str] | None = None, **kwargs):
    flattener = TemplateFlattener(DictLoader(templates or {}), TagRegistry(), **kwargs)
    return flattener.flatten(None, source)


class TestNodes:
    def test_one_node_per_event(self) -> None:
        nodes = flatten('<root><p class="x">hi</p></root>')
        assert nodes == [
            Start("root", (), TagKind.WRAPPER, lineno=1),
            Start("p", (("class", "x"),), TagKind.LITERAL, lineno=1),
            Text("hi", lineno=1),
            End("p", TagKind.LITERAL, lineno=1),
            End("root", TagKind.WRAPPER, lineno=1),
        ]

    def test_directives_are_classified(self) -> None:
        nodes = flatten("<root><if><swhile><ewhile>x</ewhile></swhile></if></root>")
        kinds = [n.kind for n in nodes if not isinstance(n, Text)]
        assert kinds == [
            TagKind.WRAPPER,
            TagKind.CONDITIONAL,
            TagKind.LOOP,
            TagKind.LOOP_ALIAS,
            TagKind.LOOP_ALIAS,
            TagKind.LOOP,
            TagKind.CONDITIONAL,
            TagKind.WRAPPER,
        ]

    def test_jumps_are_unset_before_resolution(self) -> None:
        nodes = flatten("<root><if>x</if></root>")
        assert all(getattr(n, "jump", None) is None for n in nodes)

    def test_any_root_name_is_the_wrapper(self) -> None:
        nodes = flatten("<templatizer><p/></templatizer>")
        assert nodes[0].kind is TagKind.WRAPPER
        assert nodes[-1].kind is TagKind.WRAPPER

    def test_wrapper_tag_enforced(self) -> None:
        with pytest.raises(TemplateSyntaxError, match="Root element must be <templatizer>"):
            flatten("<root/>", wrapper_tag="templatizer")

    def test_wrapper_tag_accepted(self) -> None:
        nodes = flatten("<templatizer>x</templatizer>", wrapper_tag="templatizer")
        assert nodes[1] == Text("x", lineno=1)

    @pytest.mark.parametrize(
        "source",
        ["<if><p>x</p></if>", "<swhile/>", "<ewhile>x</ewhile>", '<include file="x.xml"/>'],
    )
    def test_directive_cannot_be_root(self, source: str) -> None:
        with pytest.raises(TemplateSyntaxError, match="cannot be the root element"):
            flatten(source, {"x.xml": "<root/>"})

    def test_nodes_record_source_lines(self) -> None:
        nodes = flatten("<root>\n<if>\n<p>@</p>\n</if>\n</root>")
        starts = {n.name: n.lineno for n in nodes if isinstance(n, Start)}
        assert starts == {"root": 1, "if": 2, "p": 3}


class TestIncludes:
    def test_include_is_spliced_without_wrapper(self) -> None:
        nodes = flatten(
            '<root><h1>T</h1><include file="nav.xml"/></root>',
            {"nav.xml": "<root><nav>@</nav></root>"},
        )
        names = [n.name for n in nodes if isinstance(n, (Start, End))]
        assert names == ["root", "h1", "h1", "nav", "nav", "root"]
        assert not any(getattr(n, "kind", None) is TagKind.INCLUDE for n in nodes)

    def test_nested_include_resolves_relative_to_includer(self, env_with_loader) -> None:
        out = env_with_loader.get_template("page.xml").render(
            InputChannel(["Title", "/home", "Home"])
        )
        assert out == '<h1>Title</h1><nav><a href="/home">Home</a></nav>'

    def test_parent_directory_include(self, env_with_loader) -> None:
        out = env_with_loader.get_template("pages/up.xml").render(InputChannel(["(c)"]))
        assert out == "<footer>(c)</footer>"

    def test_include_inside_loop_repeats_its_placeholders(self, env_with_loader) -> None:
        channel = InputChannel(
            [Decision.ENTER, "/a", "A", Decision.REPEAT, "/b", "B", Decision.STOP]
        )
        out = env_with_loader.get_template("list.xml").render(channel)
        assert out == '<ul><li><a href="/a">A</a></li><li><a href="/b">B</a></li></ul>'

    def test_include_requires_file_attribute(self) -> None:
        with pytest.raises(TemplateSyntaxError, match="requires a 'file' attribute"):
            flatten("<root><include/></root>")

    def test_include_must_be_empty(self) -> None:
        with pytest.raises(TemplateSyntaxError, match="must be empty"):
            flatten(
                '<root><include file="a.xml"><p/></include></root>',
                {"a.xml": "<root/>"},
            )

    def test_include_whitespace_body_allowed(self) -> None:
        nodes = flatten(
            '<root><include file="a.xml">\n  </include></root>',
            {"a.xml": "<root>A</root>"},
        )
        assert [n for n in nodes if isinstance(n, Text)] == [Text("A", lineno=1)]

    def test_missing_include(self) -> None:
        with pytest.raises(TemplateNotFoundError, match="nav.xml"):
            flatten('<root><include file="nav.xml"/></root>')

    def test_self_include_is_cyclic(self) -> None:
        env = Environment(loader=DictLoader({"a.xml": '<root><include file="a.xml"/></root>'}))
        with pytest.raises(CyclicIncludeError) as exc_info:
            env.get_template("a.xml")
        assert exc_info.value.chain == ("a.xml", "a.xml")

    def test_indirect_cycle(self) -> None:
        env = Environment(
            loader=DictLoader(
                {
                    "a.xml": '<root><include file="b.xml"/></root>',
                    "b.xml": '<root><include file="c.xml"/></root>',
                    "c.xml": '<root><include file="a.xml"/></root>',
                }
            )
        )
        with pytest.raises(CyclicIncludeError) as exc_info:
            env.get_template("a.xml")
        assert exc_info.value.chain == ("a.xml", "b.xml", "c.xml", "a.xml")
        assert "a.xml → b.xml → c.xml → a.xml" in str(exc_info.value)

    def test_same_template_included_twice_is_not_a_cycle(self) -> None:
        env = Environment(
            loader=DictLoader(
                {
                    "page.xml": '<root><include file="hr.xml"/><include file="hr.xml"/></root>',
                    "hr.xml": "<root><hr/></root>",
                }
            )
        )
        assert env.get_template("page.xml").render(InputChannel()) == "<hr></hr><hr></hr>"

    def test_include_depth_limit(self) -> None:
        templates = {
            f"t{i}.xml": f'<root><include file="t{i + 1}.xml"/></root>' for i in range(3)
        }
        templates["t3.xml"] = "<root>end</root>"
        env = Environment(loader=DictLoader(templates), max_include_depth=2)
        with pytest.raises(IncludeDepthError) as exc_info:
            env.get_template("t0.xml")
        assert exc_info.value.limit == 2

        deep_enough = Environment(loader=DictLoader(templates), max_include_depth=3)
        assert deep_enough.get_template("t0.xml").render(InputChannel()) == "end"


class TestFileSystemIncludes:
    def test_include_relative_to_including_file(self, fs_env, tmp_path) -> None:
        write_template(tmp_path, "pages/index.xml", '<root><include file="nav.xml"/></root>')
        write_template(tmp_path, "pages/nav.xml", "<root><nav>@</nav></root>")
        out = fs_env.get_template("pages/index.xml").render(InputChannel(["Home"]))
        assert out == "<nav>Home</nav>"

    def test_absolute_template_path(self, fs_env, tmp_path) -> None:
        path = write_template(tmp_path, "abs/page.xml", '<root><include file="part.xml"/></root>')
        write_template(tmp_path, "abs/part.xml", "<root><b>x</b></root>")
        assert fs_env.get_template(str(path)).render(InputChannel()) == "<b>x</b>"

    def test_malformed_include_reports_its_file(self, fs_env, tmp_path) -> None:
        write_template(tmp_path, "page.xml", '<root><include file="broken.xml"/></root>')
        write_template(tmp_path, "broken.xml", "<root>\n<p></root>")
        with pytest.raises(TemplateSyntaxError) as exc_info:
            fs_env.get_template("page.xml")
        assert "broken.xml" in str(exc_info.value)
        assert exc_info.value.lineno == 2
