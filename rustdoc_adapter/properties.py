"""Property resolution for each vertex type of the rustdoc schema.

Each resolver checks the property name up front and returns a lazy iterator of
``(vertex, value)`` pairs; a ``None`` vertex yields a ``None`` value.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Mapping, Optional

from rustdoc_adapter.vertex import Vertex

_Getter = Callable[[Vertex], Any]


def _tagged(value: Any) -> tuple[str, Any]:
    if isinstance(value, str):
        return value, None
    if isinstance(value, dict) and len(value) == 1:
        ((tag, payload),) = value.items()
        return tag, payload
    raise ValueError(f"not a tagged enum value: {value!r}")


def _expect(value: Any, message: str) -> Any:
    if value is None:
        raise ValueError(message)
    return value


def _resolve_with(
    vertices: Iterable[Optional[Vertex]], getter: _Getter
) -> Iterator[tuple[Optional[Vertex], Any]]:
    for vertex in vertices:
        yield vertex, (None if vertex is None else getter(vertex))


def _dispatch(
    table: Mapping[str, _Getter],
    type_name: str,
    vertices: Iterable[Optional[Vertex]],
    property_name: str,
) -> Iterator[tuple[Optional[Vertex], Any]]:
    try:
        getter = table[property_name]
    except KeyError:
        raise ValueError(f"unknown {type_name} property {property_name!r}") from None
    return _resolve_with(vertices, getter)


def _crate(vertex: Vertex) -> dict:
    return _expect(vertex.as_crate(), "not a crate")


def _item(vertex: Vertex) -> dict:
    return _expect(vertex.as_item(), "not an item")


def _visibility_limit(vertex: Vertex) -> str:
    tag, payload = _tagged(_item(vertex)["visibility"])
    if tag == "restricted":
        return f"restricted ({payload['path']})"
    if tag in ("public", "default", "crate"):
        return tag
    raise ValueError(f"unknown visibility {tag!r}")


_CRATE_PROPERTIES: dict[str, _Getter] = {
    "root": lambda v: str(_crate(v)["root"]),
    "crate_version": lambda v: _crate(v).get("crate_version"),
    "includes_private": lambda v: _crate(v)["includes_private"],
    "format_version": lambda v: _crate(v)["format_version"],
}

_ITEM_PROPERTIES: dict[str, _Getter] = {
    "id": lambda v: str(_item(v)["id"]),
    "crate_id": lambda v: _item(v)["crate_id"],
    "name": lambda v: _item(v).get("name"),
    "docs": lambda v: _item(v).get("docs"),
    "attrs": lambda v: list(_item(v).get("attrs", [])),
    "visibility_limit": _visibility_limit,
}


def _struct_kind(vertex: Vertex) -> tuple[str, Any]:
    return _tagged(_expect(vertex.as_struct(), "not a struct")["kind"])


def _struct_type(vertex: Vertex) -> str:
    tag, _ = _struct_kind(vertex)
    if tag not in ("plain", "tuple", "unit"):
        raise ValueError(f"unknown struct kind {tag!r}")
    return tag


def _fields_stripped(vertex: Vertex) -> Optional[bool]:
    tag, payload = _struct_kind(vertex)
    return payload["fields_stripped"] if tag == "plain" else None


_STRUCT_PROPERTIES: dict[str, _Getter] = {
    "struct_type": _struct_type,
    "fields_stripped": _fields_stripped,
}


def _span(vertex: Vertex) -> dict:
    return _expect(vertex.as_span(), "not a span")


_SPAN_PROPERTIES: dict[str, _Getter] = {
    "filename": lambda v: str(_span(v)["filename"]),
    "begin_line": lambda v: int(_span(v)["begin"][0]),
    "begin_column": lambda v: int(_span(v)["begin"][1]),
    "end_line": lambda v: int(_span(v)["end"][0]),
    "end_column": lambda v: int(_span(v)["end"][1]),
}

_ENUM_PROPERTIES: dict[str, _Getter] = {
    "variants_stripped": lambda v: _expect(v.as_enum(), "not an enum")["variants_stripped"],
}

_PATH_PROPERTIES: dict[str, _Getter] = {
    "path": lambda v: list(_expect(v.as_path(), "not a path")),
}

_IMPORTABLE_PATH_PROPERTIES: dict[str, _Getter] = {
    "path": lambda v: [
        str(part) for part in _expect(v.as_importable_path(), "not an importable path")
    ],
    "visibility_limit": lambda _v: "public",
}


def _header(vertex: Vertex) -> dict:
    return _expect(vertex.as_function(), "not a function")["header"]


_FUNCTION_LIKE_PROPERTIES: dict[str, _Getter] = {
    "const": lambda v: _header(v)["const"],
    "async": lambda v: _header(v)["async"],
    "unsafe": lambda v: _header(v)["unsafe"],
}

_FUNCTION_PARAMETER_PROPERTIES: dict[str, _Getter] = {
    "name": lambda v: _expect(v.as_function_parameter(), "not a function parameter"),
}


def _impl(vertex: Vertex) -> dict:
    return _expect(vertex.as_impl(), "not an impl")


_IMPL_PROPERTIES: dict[str, _Getter] = {
    "unsafe": lambda v: _impl(v)["is_unsafe"],
    "negative": lambda v: _impl(v)["negative"],
    "synthetic": lambda v: _impl(v)["synthetic"],
}

_ATTRIBUTE_PROPERTIES: dict[str, _Getter] = {
    "raw_attribute": lambda v: _expect(v.as_attribute(), "not an attribute").raw_attribute(),
    "is_inner": lambda v: _expect(v.as_attribute(), "not an attribute").is_inner,
}


def _meta_item(vertex: Vertex):
    return _expect(vertex.as_attribute_meta_item(), "not an attribute meta item")


_ATTRIBUTE_META_ITEM_PROPERTIES: dict[str, _Getter] = {
    "raw_item": lambda v: _meta_item(v).raw_item,
    "base": lambda v: _meta_item(v).base,
    "assigned_item": lambda v: _meta_item(v).assigned_item,
}


def _raw_type_name(vertex: Vertex) -> str:
    raw_type = _expect(vertex.as_raw_type(), "not a raw type")
    tag, payload = _tagged(raw_type)
    if tag == "resolved_path":
        return payload["name"]
    if tag == "primitive":
        return payload
    raise ValueError(f"unexpected raw type vertex content: {raw_type!r}")


_RAW_TYPE_PROPERTIES: dict[str, _Getter] = {"name": _raw_type_name}

_TRAIT_PROPERTIES: dict[str, _Getter] = {
    "unsafe": lambda v: _expect(v.as_trait(), "not a trait")["is_unsafe"],
}

_IMPLEMENTED_TRAIT_PROPERTIES: dict[str, _Getter] = {
    "name": lambda v: _expect(v.as_implemented_trait(), "not an implemented trait")[0]["name"],
}


def resolve_crate_property(vertices, property_name):
    return _dispatch(_CRATE_PROPERTIES, "Crate", vertices, property_name)


def resolve_item_property(vertices, property_name):
    return _dispatch(_ITEM_PROPERTIES, "Item", vertices, property_name)


def resolve_struct_property(vertices, property_name):
    return _dispatch(_STRUCT_PROPERTIES, "Struct", vertices, property_name)


def resolve_span_property(vertices, property_name):
    return _dispatch(_SPAN_PROPERTIES, "Span", vertices, property_name)


def resolve_enum_property(vertices, property_name):
    return _dispatch(_ENUM_PROPERTIES, "Enum", vertices, property_name)


def resolve_path_property(vertices, property_name):
    return _dispatch(_PATH_PROPERTIES, "Path", vertices, property_name)


def resolve_importable_path_property(vertices, property_name):
    return _dispatch(_IMPORTABLE_PATH_PROPERTIES, "ImportablePath", vertices, property_name)


def resolve_function_like_property(vertices, property_name):
    return _dispatch(_FUNCTION_LIKE_PROPERTIES, "FunctionLike", vertices, property_name)


def resolve_function_parameter_property(vertices, property_name):
    return _dispatch(
        _FUNCTION_PARAMETER_PROPERTIES, "FunctionParameter", vertices, property_name
    )


def resolve_impl_property(vertices, property_name):
    return _dispatch(_IMPL_PROPERTIES, "Impl", vertices, property_name)


def resolve_attribute_property(vertices, property_name):
    return _dispatch(_ATTRIBUTE_PROPERTIES, "Attribute", vertices, property_name)


def resolve_attribute_meta_item_property(vertices, property_name):
    return _dispatch(
        _ATTRIBUTE_META_ITEM_PROPERTIES, "AttributeMetaItem", vertices, property_name
    )


def resolve_raw_type_property(vertices, property_name):
    return _dispatch(_RAW_TYPE_PROPERTIES, "RawType", vertices, property_name)


def resolve_trait_property(vertices, property_name):
    return _dispatch(_TRAIT_PROPERTIES, "Trait", vertices, property_name)


def resolve_implemented_trait_property(vertices, property_name):
    return _dispatch(
        _IMPLEMENTED_TRAIT_PROPERTIES, "ImplementedTrait", vertices, property_name
    )