from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from rustdoc_adapter.candidate import CandidateValue
from rustdoc_adapter.optimizations.item_lookup import resolve_crate_items
from rustdoc_adapter.vertex import Origin, Vertex


@dataclass
class FakeCrate:
    inner: dict
    imports_index: Optional[dict] = None
    impl_index: Optional[dict] = None
    manually_inlined_builtin_traits: dict = field(default_factory=dict)


def _struct(item_id, name):
    return {
        "id": item_id,
        "name": name,
        "inner": {"struct": {"kind": "unit", "impls": []}},
    }


def _function(item_id, name):
    return {
        "id": item_id,
        "name": name,
        "inner": {"function": {"header": {}, "decl": {"inputs": []}}},
    }


FOO = _struct("0:1", "Foo")
BAR = _struct("0:2", "Bar")
RUN = _function("0:3", "run")
MODULE = {"id": "0:4", "name": "m", "inner": {"module": {"items": []}}}


def _crate():
    index = {item["id"]: item for item in (FOO, BAR, RUN, MODULE)}
    imports = {
        ("krate", "Foo"): [FOO],
        ("krate", "Bar"): [BAR],
        ("krate", "m"): [MODULE],
    }
    return FakeCrate(inner={"index": index}, imports_index=imports)


def _names(adapter, vertex, candidate=None):
    results = list(resolve_crate_items(adapter, [vertex], candidate))
    assert len(results) == 1
    returned_vertex, neighbors = results[0]
    assert returned_vertex is vertex
    return [n.as_item()["name"] for n in neighbors]


@pytest.fixture
def setup():
    crate = _crate()
    adapter = SimpleNamespace(current_crate=crate, previous_crate=None)
    vertex = Vertex.new_crate(Origin.CURRENT_CRATE, crate)
    return adapter, vertex


def test_slow_path_skips_unsupported_items(setup):
    adapter, vertex = setup
    assert sorted(_names(adapter, vertex)) == ["Bar", "Foo", "run"]


def test_single_candidate_uses_imports_index(setup):
    adapter, vertex = setup
    assert _names(adapter, vertex, CandidateValue.single(["krate", "Foo"])) == ["Foo"]


def test_single_candidate_missing_path(setup):
    adapter, vertex = setup
    assert _names(adapter, vertex, CandidateValue.single(["krate", "Nope"])) == []


def test_candidate_matching_unsupported_item_is_filtered(setup):
    adapter, vertex = setup
    assert _names(adapter, vertex, CandidateValue.single(["krate", "m"])) == []


def test_impossible_candidate(setup):
    adapter, vertex = setup
    assert _names(adapter, vertex, CandidateValue.impossible()) == []


def test_multiple_candidate_chains_in_order(setup):
    adapter, vertex = setup
    candidate = CandidateValue.multiple([["krate", "Bar"], ["krate", "Foo"]])
    assert _names(adapter, vertex, candidate) == ["Bar", "Foo"]


def test_unknown_candidate_matches_slow_path(setup):
    adapter, vertex = setup
    assert _names(adapter, vertex, CandidateValue.unknown()) == _names(adapter, vertex)


def test_dynamic_candidate_callable(setup):
    adapter, vertex = setup
    seen = []

    def per_vertex(v):
        seen.append(v)
        return CandidateValue.single(("krate", "Bar"))

    assert _names(adapter, vertex, per_vertex) == ["Bar"]
    assert seen == [vertex]


def test_neighbors_keep_origin():
    crate = _crate()
    adapter = SimpleNamespace(current_crate=crate, previous_crate=crate)
    vertex = Vertex.new_crate(Origin.PREVIOUS_CRATE, crate)
    [(_, neighbors)] = list(resolve_crate_items(adapter, [vertex]))
    origins = {n.origin for n in neighbors}
    assert origins == {Origin.PREVIOUS_CRATE}


def test_none_vertex_has_no_neighbors(setup):
    adapter, _ = setup
    [(vertex, neighbors)] = list(resolve_crate_items(adapter, [None]))
    assert vertex is None
    assert list(neighbors) == []


def test_missing_imports_index_raises(setup):
    adapter, vertex = setup
    vertex.as_indexed_crate().imports_index = None
    with pytest.raises(ValueError):
        _names(adapter, vertex, CandidateValue.single(["krate", "Foo"]))


def test_non_list_path_raises(setup):
    adapter, vertex = setup
    with pytest.raises(ValueError):
        _names(adapter, vertex, CandidateValue.single("krate::Foo"))


def test_non_crate_vertex_raises(setup):
    adapter, _ = setup
    item_vertex = Origin.CURRENT_CRATE.make_item_vertex(FOO)
    with pytest.raises(ValueError):
        list(resolve_crate_items(adapter, [item_vertex]))