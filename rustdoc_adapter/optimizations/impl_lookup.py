"""Resolution of the ``ImplOwner.impl`` and ``ImplOwner.inherent_impl`` edges."""

from __future__ import annotations

from itertools import chain
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from rustdoc_adapter.candidate import CandidateKind, CandidateValue
from rustdoc_adapter.vertex import Origin, Vertex

CandidateSource = Union[CandidateValue, Callable[[Vertex], CandidateValue], None]


def _crate_for(adapter: Any, origin: Origin) -> Any:
    if origin is Origin.CURRENT_CRATE:
        return adapter.current_crate
    if adapter.previous_crate is None:
        raise ValueError("no previous crate provided")
    return adapter.previous_crate


def _is_wanted(impl_content: dict, inherent_impls_only: bool) -> bool:
    return not inherent_impls_only or impl_content.get("trait") is None


def _impls_by_method_name(
    origin: Origin,
    impl_index: dict,
    inherent_impls_only: bool,
    item_id: Any,
    method_name: Any,
) -> Iterator[Vertex]:
    if not isinstance(method_name, str):
        raise ValueError(f"method name was not a string: {method_name!r}")
    for impl_item, _method in impl_index.get((item_id, method_name), ()):
        impl_vertex = origin.make_item_vertex(impl_item)
        impl_content = impl_vertex.as_impl()
        if impl_content is None:
            raise ValueError(
                f"the impl index returned a value that was not an impl: {impl_item!r}"
            )
        if _is_wanted(impl_content, inherent_impls_only):
            yield impl_vertex


def _slow_path(adapter: Any, vertex: Vertex, inherent_impls_only: bool) -> Iterator[Vertex]:
    origin = vertex.origin
    item_index = _crate_for(adapter, origin).inner["index"]

    # Only structs and enums own impls.
    owner = vertex.as_struct()
    if owner is None:
        owner = vertex.as_enum()
    if owner is None:
        raise ValueError("vertex was neither a struct nor an enum")

    for impl_id in owner["impls"]:
        item = item_index.get(impl_id)
        if item is None:
            continue
        impl_vertex = origin.make_item_vertex(item)
        impl_content = impl_vertex.as_impl()
        if impl_content is not None and _is_wanted(impl_content, inherent_impls_only):
            yield impl_vertex


def _by_candidate(
    adapter: Any, vertex: Vertex, inherent_impls_only: bool, candidate: CandidateValue
) -> Iterator[Vertex]:
    origin = vertex.origin
    impl_index = _crate_for(adapter, origin).impl_index
    if impl_index is None:
        raise ValueError("no impl index present")
    item = vertex.as_item()
    if item is None:
        raise ValueError("not an item")
    item_id = item["id"]

    if candidate.kind is CandidateKind.IMPOSSIBLE:
        return iter(())
    if candidate.kind is CandidateKind.SINGLE:
        return _impls_by_method_name(
            origin, impl_index, inherent_impls_only, item_id, candidate.values[0]
        )
    if candidate.kind is CandidateKind.MULTIPLE:
        return chain.from_iterable(
            _impls_by_method_name(origin, impl_index, inherent_impls_only, item_id, name)
            for name in candidate.values
        )
    return _slow_path(adapter, vertex, inherent_impls_only)


def resolve_owner_impl(
    adapter: Any,
    vertices: Iterable[Optional[Vertex]],
    edge_name: str,
    method_name_candidate: CandidateSource = None,
) -> Iterator[tuple[Optional[Vertex], Iterator[Vertex]]]:
    """Resolve the impl blocks of each struct or enum vertex.

    ``method_name_candidate`` describes what the query requires of the name of
    a method inside the impl: ``None`` when methods are not looked up by name,
    a ``CandidateValue``, or a callable giving one per vertex.
    """
    if edge_name == "inherent_impl":
        inherent_impls_only = True
    elif edge_name == "impl":
        inherent_impls_only = False
    else:
        raise ValueError(f"unexpected edge name: {edge_name!r}")
    return _resolve(adapter, vertices, inherent_impls_only, method_name_candidate)


def _resolve(
    adapter: Any,
    vertices: Iterable[Optional[Vertex]],
    inherent_impls_only: bool,
    method_name_candidate: CandidateSource,
) -> Iterator[tuple[Optional[Vertex], Iterator[Vertex]]]:
    for vertex in vertices:
        if vertex is None:
            yield vertex, iter(())
        elif method_name_candidate is None:
            yield vertex, _slow_path(adapter, vertex, inherent_impls_only)
        else:
            candidate = (
                method_name_candidate(vertex)
                if callable(method_name_candidate)
                else method_name_candidate
            )
            yield vertex, _by_candidate(adapter, vertex, inherent_impls_only, candidate)