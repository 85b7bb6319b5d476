"""Vertices of the rustdoc query graph and the origins they come from."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from rustdoc_adapter.attributes import Attribute, AttributeMetaItem


def _tagged(value: Any) -> tuple[str, Any]:
    """Split a serialized enum value into its tag and payload.

    Unit variants are plain strings; other variants are single-key mappings.
    """
    if isinstance(value, str):
        return value, None
    if isinstance(value, dict) and len(value) == 1:
        ((tag, payload),) = value.items()
        return tag, payload
    raise ValueError(f"not a tagged enum value: {value!r}")


def _item_kind(item: dict) -> tuple[str, Any]:
    """Return the kind tag and payload of a rustdoc item.

    Accepts both ``{"kind": "struct", "inner": {...}}`` and
    ``{"inner": {"struct": {...}}}`` layouts.
    """
    kind = item.get("kind")
    if isinstance(kind, str):
        return kind, item.get("inner")
    return _tagged(item["inner"])


class VertexKind(enum.Enum):
    """What a vertex wraps."""

    CRATE_DIFF = "crate_diff"
    CRATE = "crate"
    ITEM = "item"
    SPAN = "span"
    PATH = "path"
    IMPORTABLE_PATH = "importable_path"
    RAW_TYPE = "raw_type"
    ATTRIBUTE = "attribute"
    ATTRIBUTE_META_ITEM = "attribute_meta_item"
    IMPLEMENTED_TRAIT = "implemented_trait"
    FUNCTION_PARAMETER = "function_parameter"


class Origin(enum.Enum):
    """Which of the two crates being compared a vertex belongs to."""

    CURRENT_CRATE = "current"
    PREVIOUS_CRATE = "previous"

    def make_item_vertex(self, item: dict) -> Vertex:
        return Vertex(self, VertexKind.ITEM, item)

    def make_span_vertex(self, span: dict) -> Vertex:
        return Vertex(self, VertexKind.SPAN, span)

    def make_path_vertex(self, path: Sequence[str]) -> Vertex:
        return Vertex(self, VertexKind.PATH, tuple(path))

    def make_importable_path_vertex(self, importable_path: Sequence[str]) -> Vertex:
        return Vertex(self, VertexKind.IMPORTABLE_PATH, tuple(importable_path))

    def make_raw_type_vertex(self, raw_type: Any) -> Vertex:
        return Vertex(self, VertexKind.RAW_TYPE, raw_type)

    def make_attribute_vertex(self, attr: Attribute) -> Vertex:
        return Vertex(self, VertexKind.ATTRIBUTE, attr)

    def make_attribute_meta_item_vertex(self, meta_item: AttributeMetaItem) -> Vertex:
        return Vertex(self, VertexKind.ATTRIBUTE_META_ITEM, meta_item)

    def make_implemented_trait_vertex(self, path: dict, trait_def: dict) -> Vertex:
        return Vertex(self, VertexKind.IMPLEMENTED_TRAIT, (path, trait_def))

    def make_function_parameter_vertex(self, name: str) -> Vertex:
        return Vertex(self, VertexKind.FUNCTION_PARAMETER, name)


_ITEM_TYPENAMES = {
    "struct": "Struct",
    "enum": "Enum",
    "function": "Function",
    "struct_field": "StructField",
    "impl": "Impl",
    "trait": "Trait",
}

_VARIANT_TYPENAMES = {
    "plain": "PlainVariant",
    "tuple": "TupleVariant",
    "struct": "StructVariant",
}

_FIXED_TYPENAMES = {
    VertexKind.SPAN: "Span",
    VertexKind.PATH: "Path",
    VertexKind.IMPORTABLE_PATH: "ImportablePath",
    VertexKind.CRATE: "Crate",
    VertexKind.CRATE_DIFF: "CrateDiff",
    VertexKind.ATTRIBUTE: "Attribute",
    VertexKind.ATTRIBUTE_META_ITEM: "AttributeMetaItem",
    VertexKind.IMPLEMENTED_TRAIT: "ImplementedTrait",
    VertexKind.FUNCTION_PARAMETER: "FunctionParameter",
}


@dataclass(frozen=True)
class Vertex:
    """A vertex of the query graph: what it wraps and which crate it came from."""

    origin: Origin
    kind: VertexKind
    value: Any

    @classmethod
    def new_crate(cls, origin: Origin, crate: Any) -> Vertex:
        return cls(origin, VertexKind.CRATE, crate)

    def typename(self) -> str:
        """The name of the schema type this vertex actually has."""
        if self.kind is VertexKind.ITEM:
            tag, payload = _item_kind(self.value)
            if tag == "variant":
                variant_tag, _ = _tagged(payload["kind"])
                return _VARIANT_TYPENAMES[variant_tag]
            try:
                return _ITEM_TYPENAMES[tag]
            except KeyError:
                raise ValueError(f"unexpected item kind {tag!r} for item: {self.value!r}") from None
        if self.kind is VertexKind.RAW_TYPE:
            tag, _ = _tagged(self.value)
            if tag == "resolved_path":
                return "ResolvedPathType"
            if tag == "primitive":
                return "PrimitiveType"
            return "OtherType"
        return _FIXED_TYPENAMES[self.kind]

    def _payload(self, kind: VertexKind) -> Any:
        return self.value if self.kind is kind else None

    def _item_payload(self, tag: str) -> Any:
        item = self.as_item()
        if item is None:
            return None
        item_tag, payload = _item_kind(item)
        return payload if item_tag == tag else None

    def as_crate_diff(self) -> Optional[tuple[Any, Any]]:
        return self._payload(VertexKind.CRATE_DIFF)

    def as_indexed_crate(self) -> Any:
        return self._payload(VertexKind.CRATE)

    def as_crate(self) -> Optional[dict]:
        indexed = self.as_indexed_crate()
        return None if indexed is None else indexed.inner

    def as_item(self) -> Optional[dict]:
        return self._payload(VertexKind.ITEM)

    def as_struct(self) -> Optional[dict]:
        return self._item_payload("struct")

    def as_struct_field(self) -> Any:
        return self._item_payload("struct_field")

    def as_span(self) -> Optional[dict]:
        return self._payload(VertexKind.SPAN)

    def as_enum(self) -> Optional[dict]:
        return self._item_payload("enum")

    def as_trait(self) -> Optional[dict]:
        return self._item_payload("trait")

    def as_variant(self) -> Optional[dict]:
        return self._item_payload("variant")

    def as_path(self) -> Optional[tuple[str, ...]]:
        return self._payload(VertexKind.PATH)

    def as_importable_path(self) -> Optional[tuple[str, ...]]:
        return self._payload(VertexKind.IMPORTABLE_PATH)

    def as_function(self) -> Optional[dict]:
        return self._item_payload("function")

    def as_function_parameter(self) -> Optional[str]:
        return self._payload(VertexKind.FUNCTION_PARAMETER)

    def as_impl(self) -> Optional[dict]:
        return self._item_payload("impl")

    def as_attribute(self) -> Optional[Attribute]:
        return self._payload(VertexKind.ATTRIBUTE)

    def as_attribute_meta_item(self) -> Optional[AttributeMetaItem]:
        return self._payload(VertexKind.ATTRIBUTE_META_ITEM)

    def as_raw_type(self) -> Any:
        return self._payload(VertexKind.RAW_TYPE)

    def as_implemented_trait(self) -> Optional[tuple[dict, dict]]:
        return self._payload(VertexKind.IMPLEMENTED_TRAIT)