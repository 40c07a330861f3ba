import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .casing import camel_case, pascal_case, sentence_case
from .errors import FormatError
from .idl import (
    Idl,
    IdlAccount,
    IdlAccountItem,
    IdlAccounts,
    IdlInstruction,
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

TUPLE_VARIANT_PLACEHOLDER = "Tuple formatting not yet implemented"


@dataclass
class Instruction:
    name: str
    data: Dict[str, Any]


@dataclass
class AccountMeta:
    pubkey: str
    is_signer: bool
    is_writable: bool


@dataclass
class ArgDisplay:
    name: str
    type: str
    data: str


@dataclass
class AccountDisplay:
    name: Optional[str]  # None for remaining accounts the IDL does not declare.
    pubkey: str
    is_signer: bool
    is_writable: bool


@dataclass
class InstructionDisplay:
    args: List[ArgDisplay]
    accounts: List[AccountDisplay]


def find_instruction(idl: Idl, name: str) -> Optional[IdlInstruction]:
    method = camel_case(name)
    for ix in idl.instructions:
        if camel_case(ix.name) == method:
            return ix
    return None


def format_instruction(
    ix: Instruction, account_metas: Sequence[AccountMeta], idl: Idl
) -> Optional[InstructionDisplay]:
    """Render decoded instruction arguments and accounts for display.

    Returns None if ``ix`` names an instruction the IDL does not declare.
    Malformed data for a declared instruction raises :class:`FormatError`.
    """
    idl_ix = find_instruction(idl, ix.name)
    if idl_ix is None:
        logger.error("Invalid instruction given: %s", ix.name)
        return None

    types = idl.type_defs() or None
    for field in idl_ix.args:
        if field.name not in ix.data:
            raise FormatError(f"Missing argument {field.name}")
    args = [
        ArgDisplay(
            name=field.name,
            type=format_idl_type(field.type),
            data=format_idl_data(field.type, ix.data[field.name], types),
        )
        for field in idl_ix.args
    ]

    flat_accounts = flatten_idl_accounts(idl_ix.accounts)
    accounts = [
        AccountDisplay(
            # Remaining accounts are unnamed.
            name=flat_accounts[idx].name if idx < len(flat_accounts) else None,
            pubkey=meta.pubkey,
            is_signer=meta.is_signer,
            is_writable=meta.is_writable,
        )
        for idx, meta in enumerate(account_metas)
    ]

    return InstructionDisplay(args=args, accounts=accounts)


def format_idl_type(idl_type: IdlType) -> str:
    if isinstance(idl_type, str):
        return idl_type
    if isinstance(idl_type, IdlTypeVec):
        return f"Vec<{format_idl_type(idl_type.vec)}>"
    if isinstance(idl_type, IdlTypeOption):
        return f"Option<{format_idl_type(idl_type.option)}>"
    if isinstance(idl_type, IdlTypeDefined):
        return idl_type.defined
    if isinstance(idl_type, IdlTypeArray):
        return f"Array<{format_idl_type(idl_type.element)}; {idl_type.length}>"
    raise FormatError(f"Unknown IDL type: {idl_type!r}")


def format_idl_data(
    idl_type: IdlType, data: Any, types: Optional[Sequence[IdlTypeDef]] = None
) -> str:
    if isinstance(idl_type, str):
        return _format_primitive(data)
    if isinstance(idl_type, (IdlTypeVec, IdlTypeArray)):
        inner = idl_type.vec if isinstance(idl_type, IdlTypeVec) else idl_type.element
        if not isinstance(data, (list, tuple)):
            raise FormatError(f"Expected a list for {format_idl_type(idl_type)}, got {data!r}")
        return "[" + ", ".join(format_idl_data(inner, d, types) for d in data) + "]"
    if isinstance(idl_type, IdlTypeOption):
        if data is None:
            return "null"
        return format_idl_data(idl_type.option, data, types)
    if isinstance(idl_type, IdlTypeDefined):
        if types is None:
            raise FormatError("User defined types not provided")
        matches = [t for t in types if t.name == idl_type.defined]
        if len(matches) != 1:
            raise FormatError(f"Type not found: {idl_type.defined}")
        return _format_defined(matches[0], data, types)
    raise FormatError(f"Unknown IDL type: {idl_type!r}")


def _format_primitive(data: Any) -> str:
    if isinstance(data, bool):
        return "true" if data else "false"
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).hex()
    return str(data)


def _format_fields(fields, data: Any, types: Sequence[IdlTypeDef]) -> str:
    if not isinstance(data, Mapping):
        raise FormatError(f"Expected a mapping of fields, got {data!r}")
    return ", ".join(
        f"{f.name}: {format_idl_data(f.type, data[f.name], types)}"
        for f in fields
        if f.name in data
    )


def _format_defined(type_def: IdlTypeDef, data: Any, types: Sequence[IdlTypeDef]) -> str:
    if not isinstance(type_def.type, IdlTypeDefEnum):
        fields = _format_fields(type_def.type.fields, data, types)
        return "{ " + fields + " }" if fields else "{}"

    variants = type_def.type.variants
    if not variants:
        return "{}"

    if isinstance(data, str):
        key, value = data, None
    elif isinstance(data, Mapping) and len(data) == 1:
        ((key, value),) = data.items()
    else:
        raise FormatError(f"Expected a single variant of {type_def.name}, got {data!r}")
    variant = next((v for v in variants if camel_case(v.name) == camel_case(key)), None)
    if variant is None:
        raise FormatError(f"Unable to find variant {key} of {type_def.name}")

    if isinstance(variant, IdlTupleVariant):
        return TUPLE_VARIANT_PLACEHOLDER

    variant_name = pascal_case(key)
    if not isinstance(variant, IdlStructVariant) or not value:
        return variant_name
    named_fields = _format_fields(variant.fields, value, types)
    if not named_fields:
        return variant_name
    return f"{variant_name} {{ {named_fields} }}"


def flatten_idl_accounts(
    accounts: Sequence[IdlAccountItem], prefix: Optional[str] = None
) -> List[IdlAccount]:
    flat: List[IdlAccount] = []
    for account in accounts:
        acc_name = sentence_case(account.name)
        name = f"{prefix} > {acc_name}" if prefix else acc_name
        if isinstance(account, IdlAccounts):
            flat.extend(flatten_idl_accounts(account.accounts, name))
        else:
            flat.append(replace(account, name=name))
    return flat
