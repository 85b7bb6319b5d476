from dataclasses import dataclass, field
from typing import Any

import pytest

from rustdoc_adapter.adapter import RustdocAdapter
from rustdoc_adapter.candidate import CandidateValue
from rustdoc_adapter.edges import EdgeHints
from rustdoc_adapter.vertex import Origin, Vertex, VertexKind


def _index():
    return {
        "0:1": {
            "id": "0:1",
            "crate_id": 0,
            "name": "Foo",
            "docs": None,
            "attrs": ["#[derive(Debug)]"],
            "visibility": "public",
            "span": None,
            "inner": {
                "struct": {
                    "kind": {"plain": {"fields": ["0:2"], "fields_stripped": False}},
                    "impls": ["0:3"],
                }
            },
        },
        "0:2": {
            "id": "0:2",
            "crate_id": 0,
            "name": "x",
            "attrs": [],
            "visibility": "default",
            "inner": {"struct_field": {"primitive": "u8"}},
        },
        "0:3": {
            "id": "0:3",
            "crate_id": 0,
            "name": None,
            "attrs": [],
            "visibility": "default",
            "inner": {
                "impl": {
                    "is_unsafe": False,
                    "negative": False,
                    "synthetic": False,
                    "trait": None,
                    "for": {"resolved_path": {"name": "Foo", "id": "0:1"}},
                    "items": ["0:4"],
                    "provided_trait_methods": [],
                }
            },
        },
        "0:4": {
            "id": "0:4",
            "crate_id": 0,
            "name": "new",
            "attrs": [],
            "visibility": "public",
            "inner": {
                "function": {
                    "decl": {"inputs": [["value", {"primitive": "u8"}]]},
                    "header": {"const": True, "async": False, "unsafe": False},
                }
            },
        },
        "0:5": {
            "id": "0:5",
            "crate_id": 0,
            "name": "Kind",
            "attrs": [],
            "visibility": "public",
            "inner": {"enum": {"variants": ["0:6"], "variants_stripped": False, "impls": []}},
        },
        "0:6": {
            "id": "0:6",
            "crate_id": 0,
            "name": "A",
            "attrs": [],
            "visibility": "default",
            "inner": {"variant": {"kind": "plain"}},
        },
        "0:7": {
            "id": "0:7",
            "crate_id": 0,
            "name": "mycrate",
            "attrs": [],
            "visibility": "public",
            "inner": {"module": {"items": []}},
        },
    }


@dataclass
class FakeCrate:
    inner: dict
    imports_index: Any = None
    impl_index: Any = None
    manually_inlined_builtin_traits: dict = field(default_factory=dict)

    def publicly_importable_names(self, item_id):
        return [["mycrate", self.inner["index"][item_id]["name"]]] if item_id == "0:1" else []


def _crate():
    index = _index()
    inner = {
        "root": "0:0",
        "crate_version": "1.0.0",
        "includes_private": False,
        "format_version": 24,
        "index": index,
        "paths": {"0:1": {"path": ["mycrate", "Foo"]}},
    }
    return FakeCrate(
        inner=inner,
        imports_index={("mycrate", "Foo"): [index["0:1"]]},
        impl_index={("0:1", "new"): [(index["0:3"], index["0:4"])]},
    )


@pytest.fixture
def crate():
    return _crate()


@pytest.fixture
def adapter(crate):
    return RustdocAdapter(crate)


def _item(adapter, item_id):
    return Origin.CURRENT_CRATE.make_item_vertex(adapter.current_crate.inner["index"][item_id])


def _neighbors(adapter, vertex, type_name, edge_name, hints=None):
    ((_, neighbors),) = list(adapter.resolve_neighbors([vertex], type_name, edge_name, hints))
    return list(neighbors)


def _value(adapter, vertex, type_name, property_name):
    ((_, value),) = list(adapter.resolve_property([vertex], type_name, property_name))
    return value


def test_starting_crate_vertex(adapter, crate):
    (vertex,) = list(adapter.resolve_starting_vertices("Crate"))
    assert vertex.origin is Origin.CURRENT_CRATE
    assert vertex.as_indexed_crate() is crate


def test_crate_diff_requires_previous(adapter):
    with pytest.raises(ValueError):
        adapter.resolve_starting_vertices("CrateDiff")


def test_crate_diff_edges(crate):
    previous = _crate()
    adapter = RustdocAdapter(crate, previous)
    (diff,) = list(adapter.resolve_starting_vertices("CrateDiff"))
    assert diff.as_crate_diff() == (crate, previous)
    (baseline,) = _neighbors(adapter, diff, "CrateDiff", "baseline")
    assert baseline.origin is Origin.PREVIOUS_CRATE
    assert baseline.as_indexed_crate() is previous


def test_unknown_starting_edge(adapter):
    with pytest.raises(ValueError):
        adapter.resolve_starting_vertices("Nothing")


def test_crate_properties(adapter):
    (crate_vertex,) = list(adapter.resolve_starting_vertices("Crate"))
    assert _value(adapter, crate_vertex, "Crate", "crate_version") == "1.0.0"
    assert _value(adapter, crate_vertex, "Crate", "__typename") == "Crate"


def test_typename_of_items(adapter):
    vertices = [_item(adapter, i) for i in ("0:1", "0:2", "0:3", "0:4", "0:5", "0:6")]
    names = [name for _, name in adapter.resolve_property(vertices, "Item", "__typename")]
    assert names == ["Struct", "StructField", "Impl", "Function", "Enum", "PlainVariant"]


def test_inherited_item_properties_on_subtypes(adapter):
    assert _value(adapter, _item(adapter, "0:1"), "Struct", "name") == "Foo"
    assert _value(adapter, _item(adapter, "0:4"), "Method", "name") == "new"
    assert _value(adapter, _item(adapter, "0:1"), "Struct", "visibility_limit") == "public"


def test_type_specific_properties(adapter):
    assert _value(adapter, _item(adapter, "0:1"), "Struct", "struct_type") == "plain"
    assert _value(adapter, _item(adapter, "0:4"), "Function", "const") is True
    assert _value(adapter, _item(adapter, "0:3"), "Impl", "synthetic") is False


def test_none_vertex_property_passes_through(adapter):
    assert list(adapter.resolve_property([None], "Item", "name")) == [(None, None)]


def test_unknown_property(adapter):
    with pytest.raises(ValueError):
        adapter.resolve_property([], "Span", "color")
    with pytest.raises(ValueError):
        adapter.resolve_property([], "Mystery", "name")


def test_crate_items_skip_unsupported_kinds(adapter):
    (crate_vertex,) = list(adapter.resolve_starting_vertices("Crate"))
    items = _neighbors(adapter, crate_vertex, "Crate", "item")
    assert sorted(v.as_item()["id"] for v in items) == ["0:1", "0:2", "0:3", "0:4", "0:5", "0:6"]


def test_crate_items_by_importable_path(adapter):
    (crate_vertex,) = list(adapter.resolve_starting_vertices("Crate"))
    hints = EdgeHints(importable_path=CandidateValue.single(["mycrate", "Foo"]))
    items = _neighbors(adapter, crate_vertex, "Crate", "item", hints)
    assert [v.as_item()["name"] for v in items] == ["Foo"]


def test_struct_field_and_raw_type(adapter):
    (field_vertex,) = _neighbors(adapter, _item(adapter, "0:1"), "Struct", "field")
    assert field_vertex.as_item()["name"] == "x"
    (raw,) = _neighbors(adapter, field_vertex, "StructField", "raw_type")
    assert _value(adapter, raw, "PrimitiveType", "name") == "u8"
    assert _value(adapter, raw, "RawType", "__typename") == "PrimitiveType"


def test_struct_impls_and_methods(adapter):
    struct = _item(adapter, "0:1")
    (impl_vertex,) = _neighbors(adapter, struct, "Struct", "inherent_impl")
    assert impl_vertex.as_item()["id"] == "0:3"
    hints = EdgeHints(method_name=CandidateValue.single("new"))
    (method,) = _neighbors(adapter, impl_vertex, "Impl", "method", hints)
    assert method.as_item()["name"] == "new"
    assert _neighbors(adapter, impl_vertex, "Impl", "implemented_trait") == []


def test_impl_lookup_by_method_name(adapter):
    hints = EdgeHints(method_name=CandidateValue.single("missing"))
    assert _neighbors(adapter, _item(adapter, "0:1"), "ImplOwner", "impl", hints) == []


def test_function_parameters(adapter):
    params = _neighbors(adapter, _item(adapter, "0:4"), "Function", "parameter")
    assert [_value(adapter, p, "FunctionParameter", "name") for p in params] == ["value"]


def test_attributes_and_paths(adapter):
    struct = _item(adapter, "0:1")
    (attr,) = _neighbors(adapter, struct, "Struct", "attribute")
    assert _value(adapter, attr, "Attribute", "raw_attribute") == "#[derive(Debug)]"
    (content,) = _neighbors(adapter, attr, "Attribute", "content")
    args = _neighbors(adapter, content, "AttributeMetaItem", "argument")
    assert [_value(adapter, a, "AttributeMetaItem", "base") for a in args] == ["Debug"]
    (path,) = _neighbors(adapter, struct, "Struct", "canonical_path")
    assert _value(adapter, path, "Path", "path") == ["mycrate", "Foo"]
    (importable,) = _neighbors(adapter, struct, "Struct", "importable_path")
    assert _value(adapter, importable, "ImportablePath", "path") == ["mycrate", "Foo"]


def test_enum_variants(adapter):
    (variant,) = _neighbors(adapter, _item(adapter, "0:5"), "Enum", "variant")
    assert variant.typename() == "PlainVariant"
    assert _neighbors(adapter, variant, "PlainVariant", "field") == []


def test_unknown_edge(adapter):
    with pytest.raises(ValueError):
        adapter.resolve_neighbors([], "Span", "anything")
    with pytest.raises(ValueError):
        adapter.resolve_neighbors([], "Struct", "nothing")


def test_coercion(adapter):
    vertices = [_item(adapter, "0:1"), _item(adapter, "0:5"), _item(adapter, "0:6"), None]
    to_owner = [ok for _, ok in adapter.resolve_coercion(vertices, "Item", "ImplOwner")]
    assert to_owner == [True, True, False, False]
    to_variant = [ok for _, ok in adapter.resolve_coercion(vertices, "Item", "Variant")]
    assert to_variant == [False, False, True, False]
    to_struct = [ok for _, ok in adapter.resolve_coercion(vertices, "Item", "Struct")]
    assert to_struct == [True, False, False, False]


def test_coercion_of_implemented_trait(adapter):
    vertex = Vertex(Origin.CURRENT_CRATE, VertexKind.IMPLEMENTED_TRAIT, ({"name": "T"}, {}))
    ((_, ok),) = list(adapter.resolve_coercion([vertex], "RawType", "ResolvedPathType"))
    assert ok is True


def test_coercion_from_unknown_type(adapter):
    with pytest.raises(ValueError):
        adapter.resolve_coercion([], "Span", "Struct")