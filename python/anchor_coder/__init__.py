from typing import Any, Mapping, Optional, Sequence, Union
import pyarrow

from . import idl, arrow
from .config import CoderConfig, SIGHASH_GLOBAL_NAMESPACE
from .discriminator import sighash
from .encoding import Encoding, base58_decode_string, base58_encode_bytes, hex_decode, hex_encode
from .errors import (
    IdlError,
    IdlConfigError,
    UnresolvedTypeError,
    RecursiveTypeError,
    DiscriminatorLengthError,
    DuplicateDiscriminatorError,
    UnknownInstructionError,
    InstructionEncodeError,
    InstructionDecodeError,
    FormatError,
)
from .formatter import (
    AccountMeta,
    AccountDisplay,
    ArgDisplay,
    Instruction,
    InstructionDisplay,
)
from .idl.loader import load_idl, idl_from_json
from .instruction import InstructionCoder


def encode_instruction(coder: InstructionCoder, name: str, args: Mapping[str, Any]) -> bytes:
    return coder.encode(name, args)


def decode_instruction(
    coder: InstructionCoder,
    data: Union[bytes, str],
    encoding: Optional[Union[Encoding, str]] = None,
) -> Optional[Instruction]:
    return coder.decode(data, encoding)


def format_instruction(
    coder: InstructionCoder, ix: Instruction, account_metas: Sequence[AccountMeta]
) -> Optional[InstructionDisplay]:
    return coder.format(ix, account_metas)


def decode_instructions(
    coder: InstructionCoder,
    name: str,
    batch: pyarrow.RecordBatch,
    allow_decode_fail: bool = False,
) -> pyarrow.RecordBatch:
    return arrow.decode_instructions(coder, name, batch, allow_decode_fail)


def instruction_arrow_schema(coder: InstructionCoder, name: str) -> pyarrow.Schema:
    return arrow.instruction_arrow_schema(coder, name)


__all__ = [
    "idl",
    "arrow",
    "CoderConfig",
    "SIGHASH_GLOBAL_NAMESPACE",
    "sighash",
    "Encoding",
    "base58_encode_bytes",
    "base58_decode_string",
    "hex_encode",
    "hex_decode",
    "IdlError",
    "IdlConfigError",
    "UnresolvedTypeError",
    "RecursiveTypeError",
    "DiscriminatorLengthError",
    "DuplicateDiscriminatorError",
    "UnknownInstructionError",
    "InstructionEncodeError",
    "InstructionDecodeError",
    "FormatError",
    "AccountMeta",
    "AccountDisplay",
    "ArgDisplay",
    "Instruction",
    "InstructionDisplay",
    "load_idl",
    "idl_from_json",
    "InstructionCoder",
    "encode_instruction",
    "decode_instruction",
    "format_instruction",
    "decode_instructions",
    "instruction_arrow_schema",
]
