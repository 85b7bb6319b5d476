"""The query adapter that exposes one or two rustdoc crates as a graph."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional

from rustdoc_adapter import edges, properties
from rustdoc_adapter.edges import EdgeHints
from rustdoc_adapter.vertex import Origin, Vertex, VertexKind

_Vertices = Iterable[Optional[Vertex]]

_ITEM_SUBTYPES = frozenset(
    {
        "ImplOwner",
        "Struct",
        "StructField",
        "Enum",
        "Variant",
        "PlainVariant",
        "TupleVariant",
        "StructVariant",
        "Trait",
        "Function",
        "Method",
        "Impl",
    }
)
_INHERITED_ITEM_PROPERTIES = frozenset(
    {"id", "crate_id", "name", "docs", "attrs", "visibility_limit"}
)
_FUNCTION_LIKE_TYPES = frozenset({"FunctionLike", "Function", "Method"})
_FUNCTION_LIKE_PROPERTIES = frozenset({"const", "unsafe", "async"})
_RAW_TYPES = frozenset({"RawType", "ResolvedPathType", "PrimitiveType"})

_IMPORTABLE_TYPES = frozenset({"Importable", "ImplOwner", "Struct", "Enum", "Trait", "Function"})
_ITEM_EDGE_TYPES = _ITEM_SUBTYPES | {"Item"}
_VARIANT_TYPES = frozenset({"Variant", "PlainVariant", "TupleVariant", "StructVariant"})

_COERCIBLE_TYPES = frozenset(
    {"Item", "Variant", "FunctionLike", "Importable", "ImplOwner", "RawType", "ResolvedPathType"}
)
# Abstract types and the concrete types that may stand in for them.
_SUBTYPES_OF = {
    "Variant": frozenset({"PlainVariant", "TupleVariant", "StructVariant"}),
    "ImplOwner": frozenset({"Struct", "Enum"}),
    "ResolvedPathType": frozenset({"ResolvedPathType", "ImplementedTrait"}),
}


def _typenames(vertices: _Vertices) -> Iterator[tuple[Optional[Vertex], Optional[str]]]:
    for vertex in vertices:
        yield vertex, (None if vertex is None else vertex.typename())


def _coerce(
    vertices: _Vertices, coerce_to_type: str
) -> Iterator[tuple[Optional[Vertex], bool]]:
    # Types without an entry have no subtypes, so only an exact match counts.
    accepted = _SUBTYPES_OF.get(coerce_to_type, frozenset({coerce_to_type}))
    for vertex in vertices:
        yield vertex, (vertex is not None and vertex.typename() in accepted)


class RustdocAdapter:
    """Resolves starting vertices, properties, edges and coercions over rustdoc data.

    ``current_crate`` is always present; ``previous_crate`` is the baseline
    used for crate-to-crate comparisons and may be absent.
    """

    def __init__(self, current_crate: Any, previous_crate: Any = None) -> None:
        self.current_crate = current_crate
        self.previous_crate = previous_crate

    def resolve_starting_vertices(self, edge_name: str) -> Iterator[Vertex]:
        """Return the vertices a query starts from for the given root edge."""
        if edge_name == "Crate":
            return iter((Vertex.new_crate(Origin.CURRENT_CRATE, self.current_crate),))
        if edge_name == "CrateDiff":
            if self.previous_crate is None:
                raise ValueError("no previous crate provided")
            pair = (self.current_crate, self.previous_crate)
            return iter((Vertex(Origin.CURRENT_CRATE, VertexKind.CRATE_DIFF, pair),))
        raise ValueError(f"unknown starting edge {edge_name!r}")

    def resolve_property(
        self, vertices: _Vertices, type_name: str, property_name: str
    ) -> Iterator[tuple[Optional[Vertex], Any]]:
        """Pair each vertex with the value of ``type_name.property_name``."""
        if property_name == "__typename":
            return _typenames(vertices)
        if type_name == "Crate":
            return properties.resolve_crate_property(vertices, property_name)
        if type_name == "Item":
            return properties.resolve_item_property(vertices, property_name)
        if type_name in _ITEM_SUBTYPES and property_name in _INHERITED_ITEM_PROPERTIES:
            return properties.resolve_item_property(vertices, property_name)
        if type_name == "Struct":
            return properties.resolve_struct_property(vertices, property_name)
        if type_name == "Enum":
            return properties.resolve_enum_property(vertices, property_name)
        if type_name == "Span":
            return properties.resolve_span_property(vertices, property_name)
        if type_name == "Path":
            return properties.resolve_path_property(vertices, property_name)
        if type_name == "ImportablePath":
            return properties.resolve_importable_path_property(vertices, property_name)
        if type_name in _FUNCTION_LIKE_TYPES and property_name in _FUNCTION_LIKE_PROPERTIES:
            return properties.resolve_function_like_property(vertices, property_name)
        if type_name == "FunctionParameter":
            return properties.resolve_function_parameter_property(vertices, property_name)
        if type_name == "Impl":
            return properties.resolve_impl_property(vertices, property_name)
        if type_name == "Attribute":
            return properties.resolve_attribute_property(vertices, property_name)
        if type_name == "AttributeMetaItem":
            return properties.resolve_attribute_meta_item_property(vertices, property_name)
        if type_name == "Trait":
            return properties.resolve_trait_property(vertices, property_name)
        if type_name == "ImplementedTrait":
            return properties.resolve_implemented_trait_property(vertices, property_name)
        if type_name in _RAW_TYPES and property_name == "name":
            return properties.resolve_raw_type_property(vertices, property_name)
        raise ValueError(f"unknown property {type_name}.{property_name}")

    def resolve_neighbors(
        self,
        vertices: _Vertices,
        type_name: str,
        edge_name: str,
        hints: Optional[EdgeHints] = None,
    ) -> Iterator[tuple[Optional[Vertex], Iterator[Vertex]]]:
        """Pair each vertex with an iterator over its neighbors along ``edge_name``."""
        current, previous = self.current_crate, self.previous_crate
        if type_name == "CrateDiff":
            return edges.resolve_crate_diff_edge(vertices, edge_name)
        if type_name == "Crate":
            return edges.resolve_crate_edge(self, vertices, edge_name, hints)
        if type_name in _IMPORTABLE_TYPES and edge_name in ("importable_path", "canonical_path"):
            return edges.resolve_importable_edge(vertices, edge_name, current, previous)
        if type_name in _ITEM_EDGE_TYPES and edge_name in ("span", "attribute"):
            return edges.resolve_item_edge(vertices, edge_name)
        if type_name in ("ImplOwner", "Struct", "Enum") and edge_name in ("impl", "inherent_impl"):
            return edges.resolve_impl_owner_edge(self, vertices, edge_name, hints)
        if type_name in _FUNCTION_LIKE_TYPES and edge_name == "parameter":
            return edges.resolve_function_like_edge(vertices, edge_name)
        if type_name == "Struct":
            return edges.resolve_struct_edge(vertices, edge_name, current, previous)
        if type_name in _VARIANT_TYPES:
            return edges.resolve_variant_edge(vertices, edge_name, current, previous)
        if type_name == "Enum":
            return edges.resolve_enum_edge(vertices, edge_name, current, previous)
        if type_name == "StructField":
            return edges.resolve_struct_field_edge(vertices, edge_name)
        if type_name == "Impl":
            return edges.resolve_impl_edge(self, vertices, edge_name, hints)
        if type_name == "Trait":
            return edges.resolve_trait_edge(vertices, edge_name, current, previous)
        if type_name == "ImplementedTrait":
            return edges.resolve_implemented_trait_edge(vertices, edge_name)
        if type_name == "Attribute":
            return edges.resolve_attribute_edge(vertices, edge_name)
        if type_name == "AttributeMetaItem":
            return edges.resolve_attribute_meta_item_edge(vertices, edge_name)
        raise ValueError(f"unknown edge {type_name}.{edge_name}")

    def resolve_coercion(
        self, vertices: _Vertices, type_name: str, coerce_to_type: str
    ) -> Iterator[tuple[Optional[Vertex], bool]]:
        """Pair each vertex with whether it is an instance of ``coerce_to_type``."""
        if type_name not in _COERCIBLE_TYPES:
            raise ValueError(f"cannot coerce {type_name} to {coerce_to_type}")
        return _coerce(vertices, coerce_to_type)