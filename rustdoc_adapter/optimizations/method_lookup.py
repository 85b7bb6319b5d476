"""Resolution of the ``Impl.method`` edge, using the impl index when possible."""

from __future__ import annotations

from itertools import chain
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from rustdoc_adapter.candidate import CandidateKind, CandidateValue
from rustdoc_adapter.vertex import Origin, Vertex

CandidateSource = Union[CandidateValue, Callable[[Vertex], CandidateValue], None]

_POINTER_TAGS = ("borrowed_ref", "raw_pointer")


def _crate_for(adapter: Any, origin: Origin) -> Any:
    if origin is Origin.CURRENT_CRATE:
        return adapter.current_crate
    if adapter.previous_crate is None:
        raise ValueError("no previous crate provided")
    return adapter.previous_crate


def _type_tag(ty: Any) -> tuple[Optional[str], Any]:
    if isinstance(ty, str):
        return ty, None
    if isinstance(ty, dict) and len(ty) == 1:
        ((tag, payload),) = ty.items()
        return tag, payload
    return None, None


def find_impl_owner_id(impl_content: dict) -> Any:
    """Return the id of the type an impl is for, looking through references and pointers.

    Returns None when the implementing type is of any other shape.
    """
    ty = impl_content["for"]
    while True:
        tag, payload = _type_tag(ty)
        if tag == "resolved_path":
            return payload["id"]
        if tag in _POINTER_TAGS:
            ty = payload["type"]
        else:
            return None


def _methods_slow_path(
    impl_content: dict, origin: Origin, item_index: dict
) -> Iterator[Vertex]:
    provided_names = set(impl_content.get("provided_trait_methods") or ())
    provided_ids: Iterable[Any] = ()
    if provided_names:
        trait_path = impl_content.get("trait")
        if trait_path is None:
            raise ValueError("no trait but provided_trait_methods was non-empty")
        trait_item = item_index.get(trait_path["id"])
        if trait_item is not None:
            trait_content = origin.make_item_vertex(trait_item).as_trait()
            if trait_content is None:
                raise ValueError(f"found a non-trait type {trait_item!r}")
            provided_ids = [
                item_id
                for item_id in trait_content["items"]
                if (item_index.get(item_id) or {}).get("name") in provided_names
            ]

    for item_id in chain(provided_ids, impl_content["items"]):
        item = item_index.get(item_id)
        if item is None:
            continue
        vertex = origin.make_item_vertex(item)
        if vertex.as_function() is not None:
            yield vertex


def _method_by_name(
    origin: Origin, impl_index: dict, owner_id: Any, impl_id: Any, method_name: Any
) -> Iterator[Vertex]:
    if not isinstance(method_name, str):
        raise ValueError(f"method name was not a string: {method_name!r}")
    for impl_item, method in impl_index.get((owner_id, method_name), ()):
        if impl_item["id"] == impl_id:
            yield origin.make_item_vertex(method)


def _by_candidate(adapter: Any, vertex: Vertex, candidate: CandidateValue) -> Iterator[Vertex]:
    origin = vertex.origin
    crate = _crate_for(adapter, origin)
    item_index = crate.inner["index"]
    impl_index = crate.impl_index
    if impl_index is None:
        raise ValueError("no impl index present")

    item = vertex.as_item()
    if item is None:
        raise ValueError("not an Item vertex")
    impl_content = vertex.as_impl()
    if impl_content is None:
        raise ValueError("not an Impl vertex")
    impl_id = item["id"]

    owner_id = find_impl_owner_id(impl_content)
    if owner_id is None:
        return _methods_slow_path(impl_content, origin, item_index)
    if candidate.kind is CandidateKind.IMPOSSIBLE:
        return iter(())
    if candidate.kind is CandidateKind.SINGLE:
        return _method_by_name(origin, impl_index, owner_id, impl_id, candidate.values[0])
    if candidate.kind is CandidateKind.MULTIPLE:
        return chain.from_iterable(
            _method_by_name(origin, impl_index, owner_id, impl_id, name)
            for name in candidate.values
        )
    return _methods_slow_path(impl_content, origin, item_index)


def _slow(adapter: Any, vertex: Vertex) -> Iterator[Vertex]:
    item_index = _crate_for(adapter, vertex.origin).inner["index"]
    impl_content = vertex.as_impl()
    if impl_content is None:
        raise ValueError("not an Impl vertex")
    return _methods_slow_path(impl_content, vertex.origin, item_index)


def resolve_impl_methods(
    adapter: Any,
    vertices: Iterable[Optional[Vertex]],
    method_name_candidate: CandidateSource = None,
) -> Iterator[tuple[Optional[Vertex], Iterator[Vertex]]]:
    """Resolve the methods of each impl vertex, including provided trait methods.

    ``method_name_candidate`` describes what the query requires of the method
    name: ``None`` when nothing is known, a ``CandidateValue``, or a callable
    giving one per vertex.
    """
    for vertex in vertices:
        if vertex is None:
            yield vertex, iter(())
        elif method_name_candidate is None:
            yield vertex, _slow(adapter, vertex)
        else:
            candidate = (
                method_name_candidate(vertex)
                if callable(method_name_candidate)
                else method_name_candidate
            )
            yield vertex, _by_candidate(adapter, vertex, candidate)