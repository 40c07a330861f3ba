import pytest

from anchor_coder import InstructionCoder
from anchor_coder.idl import (
    DynType,
    Idl,
    IdlAccount,
    IdlAccounts,
    IdlField,
    IdlInstruction,
)

from idl_fixtures import ORDER, OWNER, SIDE, STATUS


@pytest.fixture
def idl() -> Idl:
    return Idl(
        name="exchange",
        instructions=[
            IdlInstruction(
                name="initialize",
                accounts=[
                    IdlAccounts(
                        "authority",
                        [
                            IdlAccount("owner", is_signer=True),
                            IdlAccount("payer", is_mut=True, is_signer=True),
                        ],
                    ),
                    IdlAccount("systemProgram"),
                ],
            ),
            IdlInstruction(
                name="placeOrder",
                args=[
                    IdlField("order", DynType.Defined("Order")),
                    IdlField("memo", DynType.Option(DynType.String)),
                    IdlField("tags", DynType.Vec(DynType.U16)),
                    IdlField("limits", DynType.Array(DynType.U8, 3)),
                    IdlField("owner", DynType.PublicKey),
                ],
                accounts=[IdlAccount("market", is_mut=True), IdlAccount("trader", is_signer=True)],
            ),
            IdlInstruction(
                name="setStatus",
                args=[
                    IdlField("status", DynType.Defined("Status")),
                    IdlField("amount", DynType.U128),
                ],
            ),
        ],
        types=[SIDE, STATUS, ORDER],
    )


@pytest.fixture
def coder(idl) -> InstructionCoder:
    return InstructionCoder(idl)


@pytest.fixture
def place_order_args():
    return {
        "order": {"price": 10, "size": 2, "side": {"Bid": None}},
        "memo": "hi",
        "tags": [1, 2],
        "limits": [1, 2, 3],
        "owner": OWNER,
    }
