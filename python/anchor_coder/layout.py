"""Borsh layouts for IDL types, composed from ``construct`` primitives.

``LayoutCompiler`` turns an :data:`IdlType` into a ``construct.Construct``
whose ``build``/``parse`` speak the borsh wire format. Decoded values are plain
Python objects: structs become ``dict``, vectors and arrays ``list``, enums a
single-key ``dict`` mapping the variant name to its payload.
"""

import logging
from typing import Dict, List, Mapping, Sequence, Tuple

import base58
from construct import (
    Adapter,
    Array,
    Bytes,
    BytesInteger,
    Construct,
    Float32l,
    Float64l,
    GreedyBytes,
    If,
    Int8sl,
    Int8ul,
    Int16sl,
    Int16ul,
    Int32sl,
    Int32ul,
    Int64sl,
    Int64ul,
    LazyBound,
    MappingError,
    PascalString,
    Pass,
    Prefixed,
    PrefixedArray,
    Sequence as TupleLayout,
    Struct,
    Switch,
    this,
)

from .casing import camel_case
from .errors import IdlConfigError, RecursiveTypeError, UnresolvedTypeError
from .idl import (
    IdlField,
    IdlStructVariant,
    IdlTupleVariant,
    IdlType,
    IdlTypeArray,
    IdlTypeDef,
    IdlTypeDefined,
    IdlTypeDefStruct,
    IdlTypeOption,
    IdlTypeVec,
    IdlEnumVariant,
)

logger = logging.getLogger(__name__)

PUBLIC_KEY_LENGTH = 32
MAX_ENUM_VARIANTS = 256


class _List(Adapter):
    def _decode(self, obj, context, path):
        return list(obj)

    def _encode(self, obj, context, path):
        return list(obj)


class _Bool(Adapter):
    def _decode(self, obj, context, path):
        if obj not in (0, 1):
            raise MappingError(f"invalid bool {obj}", path=path)
        return bool(obj)

    def _encode(self, obj, context, path):
        return 1 if obj else 0


class _PublicKey(Adapter):
    def _decode(self, obj, context, path):
        return base58.b58encode(obj).decode("ascii")

    def _encode(self, obj, context, path):
        if isinstance(obj, str):
            try:
                obj = base58.b58decode(obj)
            except ValueError as e:
                raise MappingError(f"invalid base58 public key {obj!r}: {e}", path=path) from e
        obj = bytes(obj)
        if len(obj) != PUBLIC_KEY_LENGTH:
            raise MappingError(
                f"public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(obj)}", path=path
            )
        return obj


class _Fields(Adapter):
    """Fields laid out back to back in declaration order."""

    def __init__(self, fields: Sequence[Tuple[str, Construct]]):
        super().__init__(Struct(*(name / layout for name, layout in fields)))
        self.names = [name for name, _ in fields]

    def _decode(self, obj, context, path):
        return {name: obj[name] for name in self.names}

    def _encode(self, obj, context, path):
        if not isinstance(obj, Mapping):
            raise MappingError(f"expected a mapping of fields, got {obj!r}", path=path)
        missing = [name for name in self.names if name not in obj]
        if missing:
            raise MappingError(f"missing fields: {', '.join(missing)}", path=path)
        return {name: obj[name] for name in self.names}


class _Option(Adapter):
    """One tag byte, 0 for None and 1 for Some, then the value when present."""

    def __init__(self, subcon: Construct):
        super().__init__(Struct("tag" / Int8ul, "value" / If(this.tag == 1, subcon)))

    def _decode(self, obj, context, path):
        if obj["tag"] not in (0, 1):
            raise MappingError(f"invalid option tag {obj['tag']}", path=path)
        return obj["value"]

    def _encode(self, obj, context, path):
        if obj is None:
            return {"tag": 0, "value": None}
        return {"tag": 1, "value": obj}


class _Enum(Adapter):
    """A u8 variant index followed by the payload of that variant."""

    def __init__(self, variants: Sequence[Tuple[str, Construct]]):
        cases = {i: layout for i, (_, layout) in enumerate(variants)}
        super().__init__(Struct("index" / Int8ul, "value" / Switch(this.index, cases)))
        self.names = [name for name, _ in variants]
        self._units = {i for i, (_, layout) in enumerate(variants) if layout is Pass}
        self._index = {camel_case(name): i for i, name in enumerate(self.names)}

    def _decode(self, obj, context, path):
        index = obj["index"]
        if index >= len(self.names):
            raise MappingError(f"invalid variant index {index}", path=path)
        return {self.names[index]: None if index in self._units else obj["value"]}

    def _encode(self, obj, context, path):
        if isinstance(obj, str):
            name, payload = obj, None
        elif isinstance(obj, Mapping) and len(obj) == 1:
            ((name, payload),) = obj.items()
        else:
            raise MappingError(
                f"expected a variant name or a single-key mapping, got {obj!r}", path=path
            )
        index = self._index.get(camel_case(name))
        if index is None:
            raise MappingError(f"unknown variant {name!r}", path=path)
        return {"index": index, "value": payload}


PRIMITIVES: Dict[str, Construct] = {
    "bool": _Bool(Int8ul),
    "u8": Int8ul,
    "i8": Int8sl,
    "u16": Int16ul,
    "i16": Int16sl,
    "u32": Int32ul,
    "i32": Int32sl,
    "u64": Int64ul,
    "i64": Int64sl,
    "u128": BytesInteger(16, signed=False, swapped=True),
    "i128": BytesInteger(16, signed=True, swapped=True),
    "u256": BytesInteger(32, signed=False, swapped=True),
    "i256": BytesInteger(32, signed=True, swapped=True),
    "f32": Float32l,
    "f64": Float64l,
    "bytes": Prefixed(Int32ul, GreedyBytes),
    "string": PascalString(Int32ul, "utf8"),
    "publicKey": _PublicKey(Bytes(PUBLIC_KEY_LENGTH)),
    "pubkey": _PublicKey(Bytes(PUBLIC_KEY_LENGTH)),
}


class LayoutCompiler:
    """Resolves IDL types against a table of type definitions.

    Defined types are compiled once and memoized. While a definition is being
    compiled its name is "open"; a reference back to an open name is only
    allowed behind a ``vec`` or ``option``, where it becomes a lazy handle to
    the memoized layout. A reference with no such indirection describes a
    value of infinite size and raises :class:`RecursiveTypeError`.
    """

    def __init__(self, type_defs: Sequence[IdlTypeDef]):
        self._type_defs = {t.name: t for t in type_defs}
        self._defined: Dict[str, Construct] = {}

    def type_layout(self, ty: IdlType) -> Construct:
        return self._resolve(ty, {})

    def fields_layout(self, fields: Sequence[IdlField]) -> Construct:
        return self._fields(fields, {})

    def _resolve(self, ty: IdlType, open_types: Dict[str, bool]) -> Construct:
        if isinstance(ty, str):
            try:
                return PRIMITIVES[ty]
            except KeyError:
                raise UnresolvedTypeError(f"Unknown primitive type: {ty}") from None
        if isinstance(ty, IdlTypeVec):
            return _List(PrefixedArray(Int32ul, self._resolve(ty.vec, _behind_indirection(open_types))))
        if isinstance(ty, IdlTypeOption):
            return _Option(self._resolve(ty.option, _behind_indirection(open_types)))
        if isinstance(ty, IdlTypeArray):
            return _List(Array(ty.length, self._resolve(ty.element, open_types)))
        if isinstance(ty, IdlTypeDefined):
            return self._resolve_defined(ty.defined, open_types)
        raise UnresolvedTypeError(f"Unknown IDL type: {ty!r}")

    def _resolve_defined(self, name: str, open_types: Dict[str, bool]) -> Construct:
        if name in self._defined:
            return self._defined[name]
        if name in open_types:
            if not open_types[name]:
                raise RecursiveTypeError(
                    f"Type {name} contains itself without a vec or option in between"
                )
            return LazyBound(lambda: self._defined[name])

        type_def = self._type_defs.get(name)
        if type_def is None:
            raise UnresolvedTypeError(f"Type not found: {name}")

        inner = {**open_types, name: False}
        if isinstance(type_def.type, IdlTypeDefStruct):
            layout = self._fields(type_def.type.fields, inner)
        else:
            layout = self._enum(name, type_def.type.variants, inner)
        self._defined[name] = layout
        logger.debug("compiled layout for defined type %s", name)
        return layout

    def _fields(self, fields: Sequence[IdlField], open_types: Dict[str, bool]) -> Construct:
        return _Fields([(f.name, self._resolve(f.type, open_types)) for f in fields])

    def _enum(
        self, name: str, variants: Sequence[IdlEnumVariant], open_types: Dict[str, bool]
    ) -> Construct:
        if len(variants) > MAX_ENUM_VARIANTS:
            raise IdlConfigError(
                f"Enum {name} has {len(variants)} variants, at most {MAX_ENUM_VARIANTS} fit in a u8 tag"
            )
        layouts: List[Tuple[str, Construct]] = []
        for variant in variants:
            if isinstance(variant, IdlStructVariant):
                payload: Construct = self._fields(variant.fields, open_types)
            elif isinstance(variant, IdlTupleVariant):
                payload = _List(TupleLayout(*(self._resolve(t, open_types) for t in variant.types)))
            else:
                payload = Pass
            layouts.append((variant.name, payload))
        return _Enum(layouts)


def _behind_indirection(open_types: Dict[str, bool]) -> Dict[str, bool]:
    return dict.fromkeys(open_types, True)
