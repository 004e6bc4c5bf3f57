# tsbind

Describe your data types once and get TypeScript declarations for them:
interfaces for structs, union types for enums, with generics, inlining,
flattening and the common serde-style enum representations.

## Installing

```
pip install tsbind
```

## What it produces

Structs with named fields become interfaces:

```
interface User { user_id: number, first_name: string, last_name: string, }
```

Unit structs become `null`, newtypes become aliases of their inner type,
tuple structs become TypeScript tuples, and enums become unions:

```
type SimpleEnum = "asdf" | "B" | "C";
type ComplexEnum = { kind: "A" } | { kind: "B", data: { foo: string, bar: number, } };
type Untagged = string | number | null;
```

## Building blocks

- `tsbind.types` holds the `TS` interface every type implements (`name`,
  `inline`, `decl`, `inline_flattened`, `dependencies`, `transparent`) and
  the built-in types: primitives, `option`, `vec`, `array`, `hash_set`,
  `btree_set`, `hash_map`, `btree_map`, `tuple_of` and `wrapper`. Numbers up to
  32 bits map to `number`, 64- and 128-bit integers to `bigint`, date and time
  types to `string`.
- `tsbind.attrs` parses container, field and variant attributes
  (`rename`, `rename_all`, `export`, `export_to`, `type`, `inline`, `skip`,
  `optional`, `flatten`, and for enums `tag`, `content`, `untagged`), along
  with the supported serde attributes. Invalid combinations raise
  `DeriveError`.
- `tsbind.derive` turns a `StructDef` into a `DerivedTS` with `struct_def`;
  `tsbind.enums` does the same for an `EnumDef` with `enum_def`, and `derive`
  accepts either.
- `tsbind.export` writes a type's declaration, preceded by the
  `import type` lines for its dependencies, to the file named by its
  `export_to` setting (by default `bindings/<Name>.ts`) with `export_type`.
  Failures raise subclasses of `ExportError`: `CannotBeExported`,
  `FormattingError` and `ManifestDirNotSet`.
- `tsbind.config.Config` reads settings from a `ts.toml` file
  (`ambient_declarations`, default `false`; `out_dir`, default
  `"typescript"`).

## A worked example

`tsbind.example` declares a small set of types (users, roles, vehicles,
generic points and series, tagged enums) and can write them all out:

```python
from tsbind.example import example_types, export_all

for ty in example_types():
    print(ty.decl())

export_all("generated")
```

Each exported file starts with the imports it needs, for example
`import type { User } from "./User";`, followed by
`export interface ...` or `export type ...`.

## Running the tests

```
pip install "tsbind[test]"
pytest
```