from anchor_coder.idl import (
    DynType,
    IdlField,
    IdlStructVariant,
    IdlTupleVariant,
    IdlTypeDef,
    IdlTypeDefEnum,
    IdlTypeDefStruct,
    IdlUnitVariant,
)

OWNER = "11111111111111111111111111111111"

SIDE = IdlTypeDef("Side", IdlTypeDefEnum([IdlUnitVariant("Bid"), IdlUnitVariant("Ask")]))
STATUS = IdlTypeDef(
    "Status",
    IdlTypeDefEnum(
        [
            IdlUnitVariant("Idle"),
            IdlStructVariant("Running", [IdlField("progress", DynType.U8)]),
            IdlTupleVariant("Paused", [DynType.U8, DynType.String]),
        ]
    ),
)
ORDER = IdlTypeDef(
    "Order",
    IdlTypeDefStruct(
        [
            IdlField("price", DynType.U64),
            IdlField("size", DynType.U32),
            IdlField("side", DynType.Defined("Side")),
        ]
    ),
)
