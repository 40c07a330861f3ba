import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from construct import Construct, ConstructError

from .casing import camel_case
from .config import CoderConfig
from .discriminator import DiscriminatorTable
from .encoding import Encoding, decode_text
from .errors import InstructionDecodeError, InstructionEncodeError, UnknownInstructionError
from .formatter import (
    AccountMeta,
    Instruction,
    InstructionDisplay,
    find_instruction,
    format_instruction,
)
from .idl import Idl, IdlInstruction
from .layout import LayoutCompiler

logger = logging.getLogger(__name__)


class InstructionCoder:
    """Encodes and decodes program instructions described by an IDL.

    All layouts and the discriminator table are built here, so a bad IDL fails
    on construction. After that the coder is read-only and can be shared.
    """

    def __init__(self, idl: Idl, config: Optional[CoderConfig] = None):
        self.idl = idl
        self.config = config or CoderConfig()
        self._ix_layouts = self._parse_ix_layouts(idl)
        self._table = DiscriminatorTable(
            idl.instructions,
            self._ix_layouts,
            namespace=self.config.namespace,
            sighash_length=self.config.sighash_length,
        )

    @staticmethod
    def _parse_ix_layouts(idl: Idl) -> Dict[str, Construct]:
        compiler = LayoutCompiler(idl.type_defs())
        layouts = {camel_case(ix.name): compiler.fields_layout(ix.args) for ix in idl.instructions}
        logger.debug("compiled %d instruction layouts for %s", len(layouts), idl.name or "idl")
        return layouts

    @property
    def discriminator_length(self) -> int:
        return self._table.length

    def discriminator(self, name: str) -> Optional[bytes]:
        return self._table.discriminator(name)

    def instruction(self, name: str) -> Optional[IdlInstruction]:
        return find_instruction(self.idl, name)

    def encode(self, name: str, args: Mapping[str, Any]) -> bytes:
        method = camel_case(name)
        layout = self._ix_layouts.get(method)
        discriminator = self._table.discriminator(method)
        if layout is None or discriminator is None:
            raise UnknownInstructionError(f"Unknown method: {method}")
        try:
            data = layout.build(args)
        except (ConstructError, TypeError, ValueError) as e:
            raise InstructionEncodeError(f"Unable to encode {name}: {e}") from e
        return discriminator + data

    def decode(
        self,
        ix: Union[bytes, bytearray, memoryview, str],
        encoding: Optional[Union[Encoding, str]] = None,
    ) -> Optional[Instruction]:
        """Decode instruction data, returning None if no instruction matches.

        A ``str`` is decoded as hex or base58 first. Data that carries a known
        discriminator but a malformed body raises :class:`InstructionDecodeError`.
        """
        if isinstance(ix, str):
            encoding = Encoding(encoding or self.config.encoding)
            try:
                ix = decode_text(ix, encoding)
            except ValueError as e:
                raise InstructionDecodeError(f"Invalid {encoding.value} text: {e}") from e
        data = bytes(ix)
        if not data:
            return None

        length = self._table.length
        if len(data) < length:
            raise InstructionDecodeError(
                f"Instruction data is {len(data)} bytes, shorter than the {length} byte discriminator"
            )
        decoder = self._table.lookup(data[:length])
        if decoder is None:
            return None

        name, layout = decoder
        try:
            args = layout.parse(data[length:])
        except ConstructError as e:
            raise InstructionDecodeError(f"Unable to decode {name}: {e}") from e
        return Instruction(name=name, data=args)

    def format(
        self, ix: Instruction, account_metas: Sequence[AccountMeta]
    ) -> Optional[InstructionDisplay]:
        return format_instruction(ix, account_metas, self.idl)
