"""Tests for docmirror.renderer and docmirror.generator.generate."""

import io

import pytest
from jinja2 import Environment

from docmirror.errors import RenderError
from docmirror.generator import generate
from docmirror.model import Field, FieldEntry, Metadata, Module, ModuleType, Record
from docmirror.renderer import ModuleRenderer, render


@pytest.fixture
def renderer():
    return ModuleRenderer()


class TestModuleRenderer:
    """Tests for ModuleRenderer."""

    def test_empty_module_still_renders_name(self, renderer):
        html = renderer.render(Module("std.empty", Record()))

        assert html.strip()
        assert "std.empty" in html

    def test_renders_fields(self, renderer):
        module = Module(
            "std.list",
            Record(
                types=(Field("List", "list[a]", "A list."),),
                values=(Field("length", "(xs: list[a]) -> int", ""),),
            ),
        )

        html = renderer.render(module)

        assert "List" in html
        assert "A list." in html
        assert "length" in html
        assert "list[a]" in html

    def test_types_section_before_values_section(self, renderer):
        module = Module(
            "m",
            Record(types=(Field("TypeName", "t"),), values=(Field("value_name", "v"),)),
        )

        html = renderer.render(module)

        assert html.index("TypeName") < html.index("value_name")

    def test_field_order_is_preserved(self, renderer):
        module = Module("m", Record(values=(Field("zulu", "int"), Field("alpha", "int"))))

        html = renderer.render(module)

        assert html.index("zulu") < html.index("alpha")

    def test_comments_are_escaped(self, renderer):
        module = Module("m", Record(values=(Field("x", "int", "<b>bold</b>"),)))

        html = renderer.render(module)

        assert "&lt;b&gt;bold&lt;/b&gt;" in html
        assert "<b>bold</b>" not in html

    def test_deterministic(self, renderer):
        module = Module("m", Record(values=(Field("x", "int", "c"),)))

        assert renderer.render(module) == renderer.render(module)

    def test_missing_template_is_render_error(self, tmp_path):
        with pytest.raises(RenderError):
            ModuleRenderer(template_dir=tmp_path)

    def test_broken_template_is_render_error(self, tmp_path):
        (tmp_path / "module.html").write_text("{{ module.missing_attribute }}")
        renderer = ModuleRenderer(template_dir=tmp_path)

        with pytest.raises(RenderError) as exc_info:
            renderer.render(Module("broken", Record()))

        assert exc_info.value.context.module == "broken"


class TestRenderFunction:
    """Tests for the pure render() function."""

    def test_render_with_given_template(self):
        template = Environment().from_string("{{ module.name }}:{{ module.record.values|length }}")

        text = render(Module("pkg.mod", Record(values=(Field("x", "int"),))), template)

        assert text == "pkg.mod:1"


class TestGenerate:
    """Tests for generate()."""

    def test_writes_to_stream_and_returns_text(self):
        typ = ModuleType(
            types=(FieldEntry("Foo", "Foo", "Foo"),),
            values=(FieldEntry("bar", "Int", "Int"),),
        )
        meta = Metadata(members={"Foo": Metadata(comment="the foo")})
        out = io.StringIO()

        text = generate(out, "a.b", typ, meta)

        assert out.getvalue() == text
        for expected in ("a.b", "Foo", "the foo", "bar", "Int"):
            assert expected in text

    def test_reuses_given_renderer(self, tmp_path):
        (tmp_path / "module.html").write_text("custom {{ module.name }}")
        renderer = ModuleRenderer(template_dir=tmp_path)

        text = generate(io.StringIO(), "m", ModuleType(), Metadata(), renderer=renderer)

        assert text == "custom m"
