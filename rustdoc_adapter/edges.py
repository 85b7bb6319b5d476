"""Neighbor resolution for every edge of the rustdoc schema.

Each resolver checks the edge name up front and returns a lazy iterator of
``(vertex, neighbors)`` pairs; a ``None`` vertex has no neighbors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from rustdoc_adapter.attributes import Attribute
from rustdoc_adapter.candidate import CandidateValue
from rustdoc_adapter.optimizations.impl_lookup import resolve_owner_impl
from rustdoc_adapter.optimizations.item_lookup import resolve_crate_items
from rustdoc_adapter.optimizations.method_lookup import resolve_impl_methods
from rustdoc_adapter.vertex import Origin, Vertex

CandidateSource = Union[CandidateValue, Callable[[Vertex], CandidateValue], None]
_Neighbors = Iterator[tuple[Optional[Vertex], Iterator[Vertex]]]


@dataclass(frozen=True)
class EdgeHints:
    """What the query is known to require further along an edge.

    ``importable_path`` constrains ``Crate.item -> importable_path.path``;
    ``method_name`` constrains the name of methods reached through impls.
    Either may be a ``CandidateValue``, a callable giving one per vertex, or
    ``None`` when nothing is known.
    """

    importable_path: CandidateSource = None
    method_name: CandidateSource = None


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


def _unknown_edge(type_name: str, edge_name: str) -> ValueError:
    return ValueError(f"unknown {type_name} edge {edge_name!r}")


def _crate_for(current_crate: Any, previous_crate: Any, origin: Origin) -> Any:
    if origin is Origin.CURRENT_CRATE:
        return current_crate
    if previous_crate is None:
        raise ValueError("no previous crate provided")
    return previous_crate


def _item_index(current_crate: Any, previous_crate: Any, origin: Origin) -> dict:
    return _crate_for(current_crate, previous_crate, origin).inner["index"]


def _with_neighbors(
    vertices: Iterable[Optional[Vertex]], neighbors: Callable[[Vertex], Iterator[Vertex]]
) -> _Neighbors:
    for vertex in vertices:
        yield vertex, (iter(()) if vertex is None else neighbors(vertex))


def _items_by_id(origin: Origin, item_index: dict, ids: Iterable[Any]) -> Iterator[Vertex]:
    for item_id in ids:
        try:
            item = item_index[item_id]
        except KeyError:
            raise KeyError(f"missing item {item_id!r}") from None
        yield origin.make_item_vertex(item)


def resolve_crate_diff_edge(vertices, edge_name):
    """Resolve ``CrateDiff.current`` and ``CrateDiff.baseline``."""
    if edge_name == "current":
        origin, position = Origin.CURRENT_CRATE, 0
    elif edge_name == "baseline":
        origin, position = Origin.PREVIOUS_CRATE, 1
    else:
        raise _unknown_edge("CrateDiff", edge_name)

    def neighbors(vertex: Vertex) -> Iterator[Vertex]:
        crates = _expect(vertex.as_crate_diff(), "vertex was not a CrateDiff")
        yield Vertex.new_crate(origin, crates[position])

    return _with_neighbors(vertices, neighbors)


def resolve_crate_edge(adapter, vertices, edge_name, hints=None):
    """Resolve ``Crate.item``."""
    if edge_name != "item":
        raise _unknown_edge("Crate", edge_name)
    hints = hints or EdgeHints()
    return resolve_crate_items(adapter, vertices, hints.importable_path)


def resolve_importable_edge(vertices, edge_name, current_crate, previous_crate):
    """Resolve ``Importable.canonical_path`` and ``Importable.importable_path``."""

    def canonical_path(vertex: Vertex) -> Iterator[Vertex]:
        origin = vertex.origin
        item = _expect(vertex.as_item(), "vertex was not an Item")
        crate = _crate_for(current_crate, previous_crate, origin)
        entry = crate.inner.get("paths", {}).get(item["id"])
        if entry is not None:
            yield origin.make_path_vertex(entry["path"])

    def importable_path(vertex: Vertex) -> Iterator[Vertex]:
        origin = vertex.origin
        item = _expect(vertex.as_item(), "vertex was not an Item")
        crate = _crate_for(current_crate, previous_crate, origin)
        for names in crate.publicly_importable_names(item["id"]):
            yield origin.make_importable_path_vertex(names)

    if edge_name == "canonical_path":
        return _with_neighbors(vertices, canonical_path)
    if edge_name == "importable_path":
        return _with_neighbors(vertices, importable_path)
    raise _unknown_edge("Importable", edge_name)


def resolve_item_edge(vertices, edge_name):
    """Resolve ``Item.span`` and ``Item.attribute``."""

    def span(vertex: Vertex) -> Iterator[Vertex]:
        item = _expect(vertex.as_item(), "vertex was not an Item")
        item_span = item.get("span")
        if item_span is not None:
            yield vertex.origin.make_span_vertex(item_span)

    def attribute(vertex: Vertex) -> Iterator[Vertex]:
        item = _expect(vertex.as_item(), "vertex was not an Item")
        for raw in item.get("attrs", ()):
            yield vertex.origin.make_attribute_vertex(Attribute.parse(raw))

    if edge_name == "span":
        return _with_neighbors(vertices, span)
    if edge_name == "attribute":
        return _with_neighbors(vertices, attribute)
    raise _unknown_edge("Item", edge_name)


def resolve_impl_owner_edge(adapter, vertices, edge_name, hints=None):
    """Resolve ``ImplOwner.impl`` and ``ImplOwner.inherent_impl``."""
    if edge_name not in ("impl", "inherent_impl"):
        raise _unknown_edge("ImplOwner", edge_name)
    hints = hints or EdgeHints()
    return resolve_owner_impl(adapter, vertices, edge_name, hints.method_name)


def resolve_function_like_edge(vertices, edge_name):
    """Resolve ``FunctionLike.parameter``."""
    if edge_name != "parameter":
        raise _unknown_edge("FunctionLike", edge_name)

    def parameter(vertex: Vertex) -> Iterator[Vertex]:
        function = _expect(vertex.as_function(), "vertex was not a Function")
        for name, _type in function["decl"]["inputs"]:
            yield vertex.origin.make_function_parameter_vertex(name)

    return _with_neighbors(vertices, parameter)


def resolve_struct_edge(vertices, edge_name, current_crate, previous_crate):
    """Resolve ``Struct.field``."""
    if edge_name != "field":
        raise _unknown_edge("Struct", edge_name)

    def field(vertex: Vertex) -> Iterator[Vertex]:
        origin = vertex.origin
        struct = _expect(vertex.as_struct(), "vertex was not a Struct")
        item_index = _item_index(current_crate, previous_crate, origin)
        tag, payload = _tagged(struct["kind"])
        if tag == "unit":
            ids: Iterable[Any] = ()
        elif tag == "tuple":
            ids = (field_id for field_id in payload if field_id is not None)
        elif tag == "plain":
            ids = payload["fields"]
        else:
            raise ValueError(f"unknown struct kind {tag!r}")
        yield from _items_by_id(origin, item_index, ids)

    return _with_neighbors(vertices, field)


def resolve_variant_edge(vertices, edge_name, current_crate, previous_crate):
    """Resolve ``Variant.field``."""
    if edge_name != "field":
        raise _unknown_edge("Variant", edge_name)

    def field(vertex: Vertex) -> Iterator[Vertex]:
        origin = vertex.origin
        variant = _expect(vertex.as_variant(), "vertex was not a Variant")
        item_index = _item_index(current_crate, previous_crate, origin)
        tag, payload = _tagged(variant["kind"])
        if tag == "plain":
            ids: Iterable[Any] = ()
        elif tag == "tuple":
            ids = (field_id for field_id in payload if field_id is not None)
        elif tag == "struct":
            ids = payload["fields"]
        else:
            raise ValueError(f"unknown variant kind {tag!r}")
        yield from _items_by_id(origin, item_index, ids)

    return _with_neighbors(vertices, field)


def resolve_enum_edge(vertices, edge_name, current_crate, previous_crate):
    """Resolve ``Enum.variant``."""
    if edge_name != "variant":
        raise _unknown_edge("Enum", edge_name)

    def variant(vertex: Vertex) -> Iterator[Vertex]:
        origin = vertex.origin
        enum_content = _expect(vertex.as_enum(), "vertex was not an Enum")
        item_index = _item_index(current_crate, previous_crate, origin)
        yield from _items_by_id(origin, item_index, enum_content["variants"])

    return _with_neighbors(vertices, variant)


def resolve_struct_field_edge(vertices, edge_name):
    """Resolve ``StructField.raw_type``."""
    if edge_name != "raw_type":
        raise _unknown_edge("StructField", edge_name)

    def raw_type(vertex: Vertex) -> Iterator[Vertex]:
        field_type = _expect(vertex.as_struct_field(), "not a StructField vertex")
        yield vertex.origin.make_raw_type_vertex(field_type)

    return _with_neighbors(vertices, raw_type)


def resolve_impl_edge(adapter, vertices, edge_name, hints=None):
    """Resolve ``Impl.method`` and ``Impl.implemented_trait``."""
    hints = hints or EdgeHints()
    if edge_name == "method":
        return resolve_impl_methods(adapter, vertices, hints.method_name)
    if edge_name != "implemented_trait":
        raise _unknown_edge("Impl", edge_name)

    def implemented_trait(vertex: Vertex) -> Iterator[Vertex]:
        origin = vertex.origin
        crate = _crate_for(adapter.current_crate, adapter.previous_crate, origin)
        impl_content = _expect(vertex.as_impl(), "not an Impl vertex")
        path = impl_content.get("trait")
        if path is None:
            return
        # Traits defined outside the crate are absent from its index; a few
        # common built-in traits are supplied separately.
        found = crate.inner["index"].get(path["id"])
        if found is None:
            found = crate.manually_inlined_builtin_traits.get(path["id"])
        if found is not None:
            yield origin.make_implemented_trait_vertex(path, found)

    return _with_neighbors(vertices, implemented_trait)


def resolve_trait_edge(vertices, edge_name, current_crate, previous_crate):
    """Resolve ``Trait.method``."""
    if edge_name != "method":
        raise _unknown_edge("Trait", edge_name)

    def method(vertex: Vertex) -> Iterator[Vertex]:
        origin = vertex.origin
        item_index = _item_index(current_crate, previous_crate, origin)
        trait_content = _expect(vertex.as_trait(), "not a Trait vertex")
        for item_id in trait_content["items"]:
            item = item_index.get(item_id)
            if item is None:
                continue
            item_vertex = origin.make_item_vertex(item)
            if item_vertex.as_function() is not None:
                yield item_vertex

    return _with_neighbors(vertices, method)


def resolve_implemented_trait_edge(vertices, edge_name):
    """Resolve ``ImplementedTrait.trait``."""
    if edge_name != "trait":
        raise _unknown_edge("ImplementedTrait", edge_name)

    def trait(vertex: Vertex) -> Iterator[Vertex]:
        _path, trait_item = _expect(
            vertex.as_implemented_trait(), "vertex was not an ImplementedTrait"
        )
        yield vertex.origin.make_item_vertex(trait_item)

    return _with_neighbors(vertices, trait)


def resolve_attribute_edge(vertices, edge_name):
    """Resolve ``Attribute.content``."""
    if edge_name != "content":
        raise _unknown_edge("Attribute", edge_name)

    def content(vertex: Vertex) -> Iterator[Vertex]:
        attribute = _expect(vertex.as_attribute(), "vertex was not an Attribute")
        yield vertex.origin.make_attribute_meta_item_vertex(attribute.content)

    return _with_neighbors(vertices, content)


def resolve_attribute_meta_item_edge(vertices, edge_name):
    """Resolve ``AttributeMetaItem.argument``."""
    if edge_name != "argument":
        raise _unknown_edge("AttributeMetaItem", edge_name)

    def argument(vertex: Vertex) -> Iterator[Vertex]:
        meta_item = _expect(
            vertex.as_attribute_meta_item(), "vertex was not an AttributeMetaItem"
        )
        for arg in meta_item.arguments or ():
            yield vertex.origin.make_attribute_meta_item_vertex(arg)

    return _with_neighbors(vertices, argument)