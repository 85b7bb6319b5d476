"""Resolution of the ``Crate.item`` edge, using the imports index when possible."""

from __future__ import annotations

from itertools import chain
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from rustdoc_adapter.candidate import CandidateKind, CandidateValue
from rustdoc_adapter.vertex import Origin, Vertex

CandidateSource = Union[CandidateValue, Callable[[Vertex], CandidateValue], None]

# Item kinds the schema supports; every other kind is skipped.
_SUPPORTED_KIND_CHECKS = (
    Vertex.as_struct,
    Vertex.as_struct_field,
    Vertex.as_enum,
    Vertex.as_variant,
    Vertex.as_function,
    Vertex.as_impl,
    Vertex.as_trait,
)


def _crate_for(adapter: Any, origin: Origin) -> Any:
    if origin is Origin.CURRENT_CRATE:
        return adapter.current_crate
    if adapter.previous_crate is None:
        raise ValueError("no previous crate provided")
    return adapter.previous_crate


def _is_supported(vertex: Vertex) -> bool:
    return any(check(vertex) is not None for check in _SUPPORTED_KIND_CHECKS)


def _item_vertices(origin: Origin, items: Iterable[dict]) -> Iterator[Vertex]:
    for item in items:
        vertex = origin.make_item_vertex(item)
        if _is_supported(vertex):
            yield vertex


def _items_slow_path(crate: Any, origin: Origin) -> Iterator[Vertex]:
    return _item_vertices(origin, crate.inner["index"].values())


def _items_by_path_value(crate: Any, origin: Origin, value: Any) -> Iterator[Vertex]:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"ImportablePath.path was not a list: {value!r}")
    if crate.imports_index is None:
        raise ValueError("crate's imports_index was never constructed")
    items = crate.imports_index.get(tuple(value))
    if items is None:
        return iter(())
    return _item_vertices(origin, items)


def _items_by_candidate(
    crate: Any, origin: Origin, candidate: CandidateValue
) -> Iterator[Vertex]:
    if candidate.kind is CandidateKind.IMPOSSIBLE:
        return iter(())
    if candidate.kind is CandidateKind.SINGLE:
        return _items_by_path_value(crate, origin, candidate.values[0])
    if candidate.kind is CandidateKind.MULTIPLE:
        return chain.from_iterable(
            _items_by_path_value(crate, origin, value) for value in candidate.values
        )
    return _items_slow_path(crate, origin)


def _neighbors(
    adapter: Any, vertex: Vertex, path_candidate: CandidateSource
) -> Iterator[Vertex]:
    if vertex.as_indexed_crate() is None:
        raise ValueError("vertex was not a Crate")
    crate = _crate_for(adapter, vertex.origin) if False else vertex.as_indexed_crate()
    if path_candidate is None:
        return _items_slow_path(crate, vertex.origin)
    candidate = path_candidate(vertex) if callable(path_candidate) else path_candidate
    return _items_by_candidate(crate, vertex.origin, candidate)


def resolve_crate_items(
    adapter: Any,
    vertices: Iterable[Optional[Vertex]],
    path_candidate: CandidateSource = None,
) -> Iterator[tuple[Optional[Vertex], Iterator[Vertex]]]:
    """Resolve the items of each crate vertex.

    ``path_candidate`` describes what the query requires of the items'
    ``importable_path.path``: ``None`` when nothing is known, a
    ``CandidateValue``, or a callable giving one per crate vertex.
    """
    for vertex in vertices:
        if vertex is None:
            yield vertex, iter(())
        else:
            yield vertex, _neighbors(adapter, vertex, path_candidate)