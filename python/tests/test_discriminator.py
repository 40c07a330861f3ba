import hashlib

import pytest

from anchor_coder import (
    CoderConfig,
    DiscriminatorLengthError,
    DuplicateDiscriminatorError,
    IdlConfigError,
    InstructionCoder,
    sighash,
)
from anchor_coder.idl import DynType, Idl, IdlField, IdlInstruction


def test_sighash_matches_anchor_initialize():
    assert sighash("global", "initialize") == bytes([175, 175, 109, 31, 13, 152, 155, 237])


def test_sighash_uses_snake_case_name():
    expected = hashlib.sha256(b"global:place_order").digest()[:8]
    assert sighash("global", "placeOrder") == expected
    assert sighash("global", "place_order") == expected


def test_coder_uses_sighash_by_default(coder):
    assert coder.discriminator_length == 8
    assert coder.discriminator("placeOrder") == sighash("global", "placeOrder")
    assert coder.discriminator("place_order") == coder.discriminator("placeOrder")
    assert coder.discriminator("cancelOrder") is None


def test_custom_namespace():
    idl = Idl(instructions=[IdlInstruction("ping")])
    coder = InstructionCoder(idl, CoderConfig(namespace="state"))
    assert coder.discriminator("ping") == hashlib.sha256(b"state:ping").digest()[:8]


def test_explicit_discriminants_route_by_their_own_length():
    idl = Idl(
        instructions=[
            IdlInstruction("transfer", args=[IdlField("amount", DynType.U64)], discriminant=b"\x03"),
            IdlInstruction("burn", args=[IdlField("amount", DynType.U64)], discriminant=b"\x08"),
        ]
    )
    coder = InstructionCoder(idl)
    assert coder.discriminator_length == 1

    data = coder.encode("burn", {"amount": 5})
    assert data == b"\x08\x05" + b"\x00" * 7
    assert coder.decode(data).name == "burn"
    assert coder.decode(b"\x03" + b"\x01" + b"\x00" * 7).name == "transfer"


def test_mismatched_discriminator_lengths_fail_construction():
    idl = Idl(
        instructions=[
            IdlInstruction("transfer", discriminant=b"\x03"),
            IdlInstruction("burn"),
        ]
    )
    with pytest.raises(DiscriminatorLengthError):
        InstructionCoder(idl)


def test_duplicate_discriminators_fail_construction():
    idl = Idl(
        instructions=[
            IdlInstruction("transfer", discriminant=b"\x03"),
            IdlInstruction("transferChecked", discriminant=b"\x03"),
        ]
    )
    with pytest.raises(DuplicateDiscriminatorError):
        InstructionCoder(idl)


def test_unresolved_type_fails_construction():
    idl = Idl(instructions=[IdlInstruction("ping", args=[IdlField("x", DynType.Defined("Nope"))])])
    with pytest.raises(IdlConfigError):
        InstructionCoder(idl)
