import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import IdlConfigError
from . import (
    Idl,
    IdlAccount,
    IdlAccountItem,
    IdlAccounts,
    IdlEnumVariant,
    IdlField,
    IdlInstruction,
    IdlStructVariant,
    IdlTupleVariant,
    IdlType,
    IdlTypeArray,
    IdlTypeDef,
    IdlTypeDefEnum,
    IdlTypeDefined,
    IdlTypeDefStruct,
    IdlTypeOption,
    IdlTypeVec,
    IdlUnitVariant,
)


def load_idl(path: Union[str, Path]) -> Idl:
    with open(path, encoding="utf-8") as f:
        return idl_from_json(json.load(f))


def idl_from_json(obj: Dict[str, Any]) -> Idl:
    metadata = obj.get("metadata") or {}
    return Idl(
        instructions=[_instruction(ix) for ix in obj.get("instructions", [])],
        types=[_type_def(t) for t in obj.get("types", [])],
        accounts=[_type_def(a) for a in obj.get("accounts", []) if "type" in a],
        name=obj.get("name", metadata.get("name")),
        version=obj.get("version", metadata.get("version")),
    )


def parse_idl_type(obj: Any) -> IdlType:
    if isinstance(obj, str):
        return obj
    if isinstance(obj, dict):
        if "vec" in obj:
            return IdlTypeVec(parse_idl_type(obj["vec"]))
        if "option" in obj:
            return IdlTypeOption(parse_idl_type(obj["option"]))
        if "array" in obj:
            element, length = obj["array"]
            return IdlTypeArray(parse_idl_type(element), int(length))
        if "defined" in obj:
            defined = obj["defined"]
            # Newer IDLs nest the name: {"defined": {"name": "Foo"}}
            if isinstance(defined, dict):
                defined = defined["name"]
            return IdlTypeDefined(defined)
    raise IdlConfigError(f"Unknown IDL type: {obj!r}")


def _field(obj: Dict[str, Any]) -> IdlField:
    return IdlField(name=obj["name"], type=parse_idl_type(obj["type"]))


def _variant(obj: Dict[str, Any]) -> IdlEnumVariant:
    fields = obj.get("fields")
    if not fields:
        return IdlUnitVariant(obj["name"])
    if all(isinstance(f, dict) and "name" in f for f in fields):
        return IdlStructVariant(obj["name"], [_field(f) for f in fields])
    return IdlTupleVariant(obj["name"], [parse_idl_type(t) for t in fields])


def _type_def(obj: Dict[str, Any]) -> IdlTypeDef:
    ty = obj["type"]
    kind = ty.get("kind")
    if kind == "struct":
        return IdlTypeDef(
            obj["name"], IdlTypeDefStruct([_field(f) for f in ty.get("fields", [])])
        )
    if kind == "enum":
        return IdlTypeDef(
            obj["name"], IdlTypeDefEnum([_variant(v) for v in ty.get("variants", [])])
        )
    raise IdlConfigError(f"Unsupported type kind {kind!r} for {obj.get('name')}")


def _account_item(obj: Dict[str, Any]) -> IdlAccountItem:
    if "accounts" in obj:
        return IdlAccounts(obj["name"], [_account_item(a) for a in obj["accounts"]])
    return IdlAccount(
        name=obj["name"],
        is_mut=bool(obj.get("isMut", obj.get("writable", False))),
        is_signer=bool(obj.get("isSigner", obj.get("signer", False))),
        is_optional=bool(obj.get("isOptional", obj.get("optional", False))),
        docs=list(obj.get("docs", [])),
    )


def _discriminant(obj: Dict[str, Any]) -> Optional[bytes]:
    if "discriminant" in obj:
        return bytes(obj["discriminant"]["value"])
    if "discriminator" in obj:
        return bytes(obj["discriminator"])
    return None


def _instruction(obj: Dict[str, Any]) -> IdlInstruction:
    accounts: List[IdlAccountItem] = [_account_item(a) for a in obj.get("accounts", [])]
    return IdlInstruction(
        name=obj["name"],
        args=[_field(a) for a in obj.get("args", [])],
        accounts=accounts,
        discriminant=_discriminant(obj),
    )
