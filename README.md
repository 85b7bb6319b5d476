# rustdoc_adapter

A Python library that presents the items of a rustdoc JSON crate description
as a graph of typed vertices. A query engine walks the graph by asking the
adapter for starting vertices, property values, neighbours along edges and
type coercions. Every answer is a lazy iterator.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Modules

- `rustdoc_adapter.attributes`: `Attribute.parse` turns attribute text such as
  `#[cfg_attr(feature = "serde", derive(Serialize))]` into an `Attribute`
  (`is_inner`, `content`). The content is a tree of `AttributeMetaItem`
  values (`raw_item`, `base`, `assigned_item`, `arguments`).
- `rustdoc_adapter.candidate`: `CandidateValue` and `CandidateKind` describe
  what is known in advance about a property's value. The four cases are
  `impossible()`, `single(value)`, `multiple(values)` and `unknown()`.
- `rustdoc_adapter.vertex`: `Vertex`, `VertexKind` and `Origin`
  (`CURRENT_CRATE` or `PREVIOUS_CRATE`). A vertex has `as_*` accessors, which
  return `None` on a kind mismatch, and `typename()`.
- `rustdoc_adapter.properties`: the `resolve_*_property(vertices,
  property_name)` functions. Each yields `(vertex, value)` pairs.
- `rustdoc_adapter.optimizations`: `item_lookup.resolve_crate_items`,
  `impl_lookup.resolve_owner_impl` and `method_lookup.resolve_impl_methods`
  (also `find_impl_owner_id`). They use the crate's indexes when a candidate
  value is known, and scan the whole crate otherwise.
- `rustdoc_adapter.edges`: the `resolve_*_edge` functions, which yield
  `(vertex, neighbours)` pairs, and `EdgeHints`.
- `rustdoc_adapter.adapter`: `RustdocAdapter`, the entry point. It sends each
  request to the right resolver.

## Parsing attributes

```python
from rustdoc_adapter.attributes import Attribute

attr = Attribute.parse("#[derive(Debug, Clone)]")
attr.is_inner                                    # False
attr.content.base                                # 'derive'
[arg.base for arg in attr.content.arguments]     # ['Debug', 'Clone']
attr.raw_attribute()                             # '#[derive(Debug, Clone)]'
```

`Attribute.parse` raises `ValueError` for text that is not an attribute.
`AttributeMetaItem.parse` never fails. When it does not recognise a form, it
keeps the whole text as `base`.

## What a crate object must provide

The adapter does not load rustdoc files and does not build indexes. You pass
it crate objects, usually one current crate and an optional previous one. A
crate object needs these members:

- `inner`: the parsed rustdoc JSON as a dict. It holds `index` (id to item),
  `paths`, `root`, `crate_version`, `includes_private` and `format_version`.
- `imports_index`: a mapping from a path tuple such as `("my_crate", "Foo")`
  to the items importable under that path. It is only read when an
  importable-path hint is given, and it may be `None` otherwise.
- `impl_index`: a mapping from `(owner_id, method_name)` to a list of
  `(impl_item, method_item)` pairs. It is only read when a method-name hint is
  given.
- `manually_inlined_builtin_traits`: a mapping from trait id to trait item.
  It is used for traits that are missing from `index`.
- `publicly_importable_names(item_id)`: returns the sequences of names under
  which an item can be imported.

An item may carry its kind as `{"kind": "struct", "inner": {...}}` or as
`{"inner": {"struct": {...}}}`. A tagged value is either a plain string or a
mapping with a single key.

## Using the adapter

```python
from types import SimpleNamespace
from rustdoc_adapter.adapter import RustdocAdapter

crate = SimpleNamespace(
    inner={
        "index": {
            "0:1": {"id": "0:1", "name": "Unit", "kind": "struct",
                    "inner": {"kind": "unit", "impls": []}},
        },
        "paths": {},
        "format_version": 24,
    },
    imports_index=None,
    impl_index=None,
    manually_inlined_builtin_traits={},
    publicly_importable_names=lambda item_id: [],
)

adapter = RustdocAdapter(crate)
crates = list(adapter.resolve_starting_vertices("Crate"))
for _crate_vertex, items in adapter.resolve_neighbors(crates, "Crate", "item"):
    for _item, name in adapter.resolve_property(items, "Item", "name"):
        print(name)                              # Unit
```

`resolve_neighbors` accepts an optional `EdgeHints`. Its `importable_path`
and `method_name` fields can each hold a `CandidateValue`, or a callable that
returns one for each vertex. With a hint set, `Crate.item`,
`ImplOwner.impl`/`inherent_impl` and `Impl.method` use the indexes instead of
a full scan.

`resolve_coercion(vertices, type_name, coerce_to_type)` yields
`(vertex, bool)` pairs. It accepts `Item`, `Variant`, `FunctionLike`,
`Importable`, `ImplOwner`, `RawType` and `ResolvedPathType` as source types.

To compare two versions of a crate, build `RustdocAdapter(current, previous)`
and start from `"CrateDiff"`. Its `current` and `baseline` edges lead to the
two crates.

## Errors

- Unknown starting edges, properties, edges and coercions raise `ValueError`.
- Reaching the previous crate when none was given raises `ValueError`.
- A vertex of the wrong kind raises `ValueError`.
- A field or variant id that is missing from the index raises `KeyError`.

## What this package does not do

It has no query language, no schema file and no query executor. It only
answers the adapter calls listed above. It does not read rustdoc JSON from
disk, and it does not build `imports_index`, `impl_index` or the importable
names of an item. It has no command-line interface.