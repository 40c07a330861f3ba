from typing import List, Optional, Union, TypeAlias, Literal
from dataclasses import dataclass, field

PrimitiveType: TypeAlias = Literal[
    "bool",
    "u8",
    "i8",
    "u16",
    "i16",
    "u32",
    "i32",
    "u64",
    "i64",
    "u128",
    "i128",
    "u256",
    "i256",
    "f32",
    "f64",
    "bytes",
    "string",
    "publicKey",
    "pubkey",
]
IdlType: TypeAlias = Union[
    PrimitiveType, "IdlTypeVec", "IdlTypeOption", "IdlTypeArray", "IdlTypeDefined"
]


@dataclass(frozen=True)
class IdlTypeVec:
    vec: IdlType


@dataclass(frozen=True)
class IdlTypeOption:
    option: IdlType


@dataclass(frozen=True)
class IdlTypeArray:
    element: IdlType
    length: int


@dataclass(frozen=True)
class IdlTypeDefined:
    defined: str


@dataclass(frozen=True)
class IdlField:
    name: str
    type: IdlType


@dataclass(frozen=True)
class IdlUnitVariant:
    name: str


@dataclass(frozen=True)
class IdlStructVariant:
    name: str
    fields: List[IdlField]


@dataclass(frozen=True)
class IdlTupleVariant:
    name: str
    types: List[IdlType]


IdlEnumVariant: TypeAlias = Union[IdlUnitVariant, IdlStructVariant, IdlTupleVariant]


@dataclass(frozen=True)
class IdlTypeDefStruct:
    fields: List[IdlField]


@dataclass(frozen=True)
class IdlTypeDefEnum:
    variants: List[IdlEnumVariant]


@dataclass(frozen=True)
class IdlTypeDef:
    name: str
    type: Union[IdlTypeDefStruct, IdlTypeDefEnum]


@dataclass(frozen=True)
class IdlAccount:
    name: str
    is_mut: bool = False
    is_signer: bool = False
    is_optional: bool = False
    docs: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class IdlAccounts:
    name: str
    accounts: List["IdlAccountItem"]


IdlAccountItem: TypeAlias = Union[IdlAccount, IdlAccounts]


@dataclass(frozen=True)
class IdlInstruction:
    name: str
    args: List[IdlField] = field(default_factory=list)
    accounts: List[IdlAccountItem] = field(default_factory=list)
    discriminant: Optional[bytes] = None  # (Optional) Explicit discriminator, sighash otherwise.


@dataclass(frozen=True)
class Idl:
    instructions: List[IdlInstruction]
    types: List[IdlTypeDef] = field(default_factory=list)
    accounts: List[IdlTypeDef] = field(default_factory=list)  # Account layouts, usable as defined types.
    name: Optional[str] = None
    version: Optional[str] = None

    def type_defs(self) -> List[IdlTypeDef]:
        return [*self.accounts, *self.types]


class DynType:
    Bool: PrimitiveType = "bool"
    U8: PrimitiveType = "u8"
    I8: PrimitiveType = "i8"
    U16: PrimitiveType = "u16"
    I16: PrimitiveType = "i16"
    U32: PrimitiveType = "u32"
    I32: PrimitiveType = "i32"
    U64: PrimitiveType = "u64"
    I64: PrimitiveType = "i64"
    U128: PrimitiveType = "u128"
    I128: PrimitiveType = "i128"
    U256: PrimitiveType = "u256"
    I256: PrimitiveType = "i256"
    F32: PrimitiveType = "f32"
    F64: PrimitiveType = "f64"
    Bytes: PrimitiveType = "bytes"
    String: PrimitiveType = "string"
    PublicKey: PrimitiveType = "publicKey"
    Vec = IdlTypeVec
    Option = IdlTypeOption
    Array = IdlTypeArray
    Defined = IdlTypeDefined
