import logging
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

import pyarrow

from .casing import camel_case
from .errors import (
    IdlConfigError,
    InstructionDecodeError,
    RecursiveTypeError,
    UnknownInstructionError,
    UnresolvedTypeError,
)
from .idl import (
    IdlStructVariant,
    IdlTupleVariant,
    IdlType,
    IdlTypeArray,
    IdlTypeDef,
    IdlTypeDefEnum,
    IdlTypeDefined,
    IdlTypeOption,
    IdlTypeVec,
)

logger = logging.getLogger(__name__)

# 128 and 256 bit integers do not fit any arrow integer type, they are kept as decimal text.
_WIDE_INTEGERS = frozenset(["u128", "i128", "u256", "i256"])

_PRIMITIVES: Dict[str, pyarrow.DataType] = {
    "bool": pyarrow.bool_(),
    "u8": pyarrow.uint8(),
    "i8": pyarrow.int8(),
    "u16": pyarrow.uint16(),
    "i16": pyarrow.int16(),
    "u32": pyarrow.uint32(),
    "i32": pyarrow.int32(),
    "u64": pyarrow.uint64(),
    "i64": pyarrow.int64(),
    "u128": pyarrow.string(),
    "i128": pyarrow.string(),
    "u256": pyarrow.string(),
    "i256": pyarrow.string(),
    "f32": pyarrow.float32(),
    "f64": pyarrow.float64(),
    "bytes": pyarrow.binary(),
    "string": pyarrow.string(),
    "publicKey": pyarrow.string(),
    "pubkey": pyarrow.string(),
}


def idl_type_to_arrow(
    idl_type: IdlType,
    types: Mapping[str, IdlTypeDef],
    _open: FrozenSet[str] = frozenset(),
) -> pyarrow.DataType:
    if isinstance(idl_type, str):
        try:
            return _PRIMITIVES[idl_type]
        except KeyError:
            raise UnresolvedTypeError(f"Unknown primitive type: {idl_type}") from None
    if isinstance(idl_type, IdlTypeVec):
        return pyarrow.list_(idl_type_to_arrow(idl_type.vec, types, _open))
    if isinstance(idl_type, IdlTypeArray):
        return pyarrow.list_(idl_type_to_arrow(idl_type.element, types, _open), idl_type.length)
    if isinstance(idl_type, IdlTypeOption):
        return idl_type_to_arrow(idl_type.option, types, _open)
    if isinstance(idl_type, IdlTypeDefined):
        name = idl_type.defined
        if name in _open:
            raise RecursiveTypeError(f"Recursive type {name} has no arrow representation")
        type_def = types.get(name)
        if type_def is None:
            raise UnresolvedTypeError(f"Type not found: {name}")
        return _type_def_to_arrow(type_def, types, _open | {name})
    raise IdlConfigError(f"Unknown IDL type: {idl_type!r}")


def _type_def_to_arrow(
    type_def: IdlTypeDef, types: Mapping[str, IdlTypeDef], _open: FrozenSet[str]
) -> pyarrow.DataType:
    if not isinstance(type_def.type, IdlTypeDefEnum):
        return pyarrow.struct(
            [pyarrow.field(f.name, idl_type_to_arrow(f.type, types, _open)) for f in type_def.type.fields]
        )

    # One nullable column per variant, only the decoded variant is set.
    fields = []
    for variant in type_def.type.variants:
        if isinstance(variant, IdlStructVariant):
            dt = pyarrow.struct(
                [pyarrow.field(f.name, idl_type_to_arrow(f.type, types, _open)) for f in variant.fields]
            )
        elif isinstance(variant, IdlTupleVariant):
            dt = pyarrow.struct(
                [
                    pyarrow.field(str(i), idl_type_to_arrow(t, types, _open))
                    for i, t in enumerate(variant.types)
                ]
            )
        else:
            dt = pyarrow.bool_()
        fields.append(pyarrow.field(variant.name, dt))
    return pyarrow.struct(fields)


def to_arrow_value(idl_type: IdlType, value: Any, types: Mapping[str, IdlTypeDef]) -> Any:
    """Reshape a decoded value into what ``pyarrow.array`` expects for its type."""
    if value is None:
        return None
    if isinstance(idl_type, str):
        return str(value) if idl_type in _WIDE_INTEGERS else value
    if isinstance(idl_type, IdlTypeVec):
        return [to_arrow_value(idl_type.vec, v, types) for v in value]
    if isinstance(idl_type, IdlTypeArray):
        return [to_arrow_value(idl_type.element, v, types) for v in value]
    if isinstance(idl_type, IdlTypeOption):
        return to_arrow_value(idl_type.option, value, types)

    type_def = types[idl_type.defined]
    if not isinstance(type_def.type, IdlTypeDefEnum):
        return {f.name: to_arrow_value(f.type, value.get(f.name), types) for f in type_def.type.fields}

    out: Dict[str, Any] = {v.name: None for v in type_def.type.variants}
    if isinstance(value, Mapping):
        ((key, payload),) = value.items()
    else:
        key, payload = value, None
    for variant in type_def.type.variants:
        if camel_case(variant.name) != camel_case(key):
            continue
        if isinstance(variant, IdlStructVariant):
            out[variant.name] = {
                f.name: to_arrow_value(f.type, payload.get(f.name), types) for f in variant.fields
            }
        elif isinstance(variant, IdlTupleVariant):
            out[variant.name] = {
                str(i): to_arrow_value(t, v, types) for i, (t, v) in enumerate(zip(variant.types, payload))
            }
        else:
            out[variant.name] = True
    return out


def instruction_arrow_schema(coder, name: str) -> pyarrow.Schema:
    idl_ix = coder.instruction(name)
    if idl_ix is None:
        raise UnknownInstructionError(f"Unknown method: {camel_case(name)}")
    types = {t.name: t for t in coder.idl.type_defs()}
    return pyarrow.schema(
        [pyarrow.field(arg.name, idl_type_to_arrow(arg.type, types)) for arg in idl_ix.args]
    )


def decode_instructions(
    coder,
    name: str,
    batch: pyarrow.RecordBatch,
    allow_decode_fail: bool = False,
    data_column: str = "data",
) -> pyarrow.RecordBatch:
    """Decode a binary column of instruction data into one column per argument.

    Rows that are null, or that fail to decode while ``allow_decode_fail`` is
    set, come out as null in every column.
    """
    schema = instruction_arrow_schema(coder, name)
    idl_ix = coder.instruction(name)
    types = {t.name: t for t in coder.idl.type_defs()}
    method = camel_case(name)

    rows: List[Optional[Dict[str, Any]]] = []
    for idx, raw in enumerate(batch.column(data_column).to_pylist()):
        if raw is None:
            rows.append(None)
            continue
        try:
            decoded = coder.decode(raw)
            if decoded is None or camel_case(decoded.name) != method:
                raise InstructionDecodeError(f"row {idx} is not a {name} instruction")
        except InstructionDecodeError as e:
            if not allow_decode_fail:
                raise
            logger.warning("failed to decode row %d as %s: %s", idx, name, e)
            rows.append(None)
            continue
        rows.append(decoded.data)

    columns = [
        pyarrow.array(
            [None if row is None else to_arrow_value(arg.type, row.get(arg.name), types) for row in rows],
            type=field.type,
        )
        for arg, field in zip(idl_ix.args, schema)
    ]
    return pyarrow.RecordBatch.from_arrays(columns, schema=schema)
