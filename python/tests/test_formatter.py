import logging

import pytest

from anchor_coder import AccountMeta, FormatError, Instruction
from anchor_coder.formatter import (
    TUPLE_VARIANT_PLACEHOLDER,
    flatten_idl_accounts,
    format_idl_data,
    format_idl_type,
)
from anchor_coder.idl import DynType, IdlAccount, IdlAccounts

from idl_fixtures import ORDER, SIDE, STATUS


def _metas(n):
    return [
        AccountMeta(pubkey=f"key{i}", is_signer=i == 0, is_writable=i % 2 == 1) for i in range(n)
    ]


@pytest.mark.parametrize(
    "ty, label",
    [
        (DynType.U64, "u64"),
        (DynType.PublicKey, "publicKey"),
        (DynType.Vec(DynType.U8), "Vec<u8>"),
        (DynType.Option(DynType.String), "Option<string>"),
        (DynType.Defined("Order"), "Order"),
        (DynType.Array(DynType.U16, 3), "Array<u16; 3>"),
        (DynType.Vec(DynType.Option(DynType.Defined("Side"))), "Vec<Option<Side>>"),
    ],
)
def test_format_idl_type(ty, label):
    assert format_idl_type(ty) == label


def test_enum_struct_variant(coder):
    decoded = coder.decode(
        coder.encode("setStatus", {"status": {"Running": {"progress": 42}}, "amount": 7})
    )
    display = coder.format(decoded, [])
    status, amount = display.args
    assert (status.name, status.type, status.data) == ("status", "Status", "Running { progress: 42 }")
    assert (amount.name, amount.type, amount.data) == ("amount", "u128", "7")


def test_enum_unit_variant(coder):
    display = coder.format(Instruction("setStatus", {"status": {"Idle": None}, "amount": 0}), [])
    assert display.args[0].data == "Idle"


def test_enum_variant_key_is_pascal_cased():
    assert format_idl_data(DynType.Defined("Status"), {"running": {"progress": 1}}, [STATUS]) == (
        "Running { progress: 1 }"
    )


def test_enum_tuple_variant_uses_placeholder():
    data = format_idl_data(DynType.Defined("Status"), {"Paused": [1, "x"]}, [STATUS])
    assert data == TUPLE_VARIANT_PLACEHOLDER


def test_enum_unknown_variant():
    with pytest.raises(FormatError):
        format_idl_data(DynType.Defined("Status"), {"Stopped": None}, [STATUS])


def test_struct_and_collections(coder, place_order_args):
    display = coder.format(coder.decode(coder.encode("placeOrder", place_order_args)), [])
    rendered = {arg.name: (arg.type, arg.data) for arg in display.args}
    assert rendered == {
        "order": ("Order", "{ price: 10, size: 2, side: Bid }"),
        "memo": ("Option<string>", "hi"),
        "tags": ("Vec<u16>", "[1, 2]"),
        "limits": ("Array<u8; 3>", "[1, 2, 3]"),
        "owner": ("publicKey", "11111111111111111111111111111111"),
    }


def test_option_none_renders_null():
    assert format_idl_data(DynType.Option(DynType.U8), None) == "null"


def test_struct_renders_only_present_fields_in_declared_order():
    value = {"side": {"Ask": None}, "price": 3}
    assert format_idl_data(DynType.Defined("Order"), value, [ORDER, SIDE]) == "{ price: 3, side: Ask }"


def test_primitive_rendering():
    assert format_idl_data(DynType.Bool, True) == "true"
    assert format_idl_data(DynType.Bytes, b"\x01\xff") == "01ff"
    assert format_idl_data(DynType.I64, -4) == "-4"


def test_missing_argument(coder):
    with pytest.raises(FormatError, match="Missing argument memo"):
        coder.format(Instruction("placeOrder", {"order": {"price": 1}}), [])


@pytest.mark.parametrize("ty", [DynType.Vec(DynType.U8), DynType.Array(DynType.U8, 2)])
def test_collection_requires_a_list(ty):
    with pytest.raises(FormatError):
        format_idl_data(ty, None)


def test_defined_without_types():
    with pytest.raises(FormatError):
        format_idl_data(DynType.Defined("Order"), {"price": 1}, None)


def test_defined_missing_from_types():
    with pytest.raises(FormatError):
        format_idl_data(DynType.Defined("Order"), {"price": 1}, [SIDE])


def test_unknown_instruction_returns_none(coder, caplog):
    with caplog.at_level(logging.ERROR, logger="anchor_coder.formatter"):
        assert coder.format(Instruction("cancelOrder", {}), _metas(1)) is None
    assert "cancelOrder" in caplog.text


def test_account_flattening(coder):
    display = coder.format(Instruction("initialize", {}), _metas(4))
    assert [a.name for a in display.accounts] == [
        "Authority > Owner",
        "Authority > Payer",
        "System Program",
        None,
    ]
    assert [a.pubkey for a in display.accounts] == ["key0", "key1", "key2", "key3"]
    assert display.accounts[0].is_signer
    assert display.accounts[1].is_writable
    assert display.args == []


def test_account_flattening_fewer_metas_than_declared(coder):
    display = coder.format(Instruction("initialize", {}), _metas(2))
    assert [a.name for a in display.accounts] == ["Authority > Owner", "Authority > Payer"]


def test_flatten_nested_groups_keeps_declaration_order():
    accounts = [
        IdlAccounts(
            "swap",
            [
                IdlAccount("pool", is_mut=True),
                IdlAccounts("userAccounts", [IdlAccount("tokenA"), IdlAccount("tokenB")]),
            ],
        ),
        IdlAccount("tokenProgram"),
    ]
    flat = flatten_idl_accounts(accounts)
    assert [a.name for a in flat] == [
        "Swap > Pool",
        "Swap > User Accounts > Token A",
        "Swap > User Accounts > Token B",
        "Token Program",
    ]
    assert flat[0].is_mut
