import hashlib
import logging
from typing import Dict, Mapping, Optional, Sequence, Tuple

from construct import Construct

from .casing import camel_case, snake_case
from .config import SIGHASH_GLOBAL_NAMESPACE
from .encoding import base58_encode_bytes
from .errors import DiscriminatorLengthError, DuplicateDiscriminatorError
from .idl import IdlInstruction

logger = logging.getLogger(__name__)


# Not technically a sighash: the arguments are not part of the preimage since
# Rust has no overloading.
def sighash(namespace: str, name: str, length: int = 8) -> bytes:
    preimage = f"{namespace}:{snake_case(name)}"
    return hashlib.sha256(preimage.encode("utf-8")).digest()[:length]


class DiscriminatorTable:
    """Instruction name <-> discriminator bytes, for both directions of the codec.

    Lookups from bytes are keyed by the base58 text of the discriminator.
    """

    def __init__(
        self,
        instructions: Sequence[IdlInstruction],
        layouts: Mapping[str, Construct],
        namespace: str = SIGHASH_GLOBAL_NAMESPACE,
        sighash_length: int = 8,
    ):
        by_name: Dict[str, bytes] = {}
        by_key: Dict[str, Tuple[str, Construct]] = {}
        length: Optional[int] = None

        for ix in instructions:
            if ix.discriminant is not None:
                disc = bytes(ix.discriminant)
            else:
                disc = sighash(namespace, ix.name, sighash_length)

            if length is not None and length != len(disc):
                raise DiscriminatorLengthError(
                    "All instructions must have the same discriminator length"
                )
            length = len(disc)

            key = base58_encode_bytes(disc)
            if key in by_key:
                raise DuplicateDiscriminatorError(
                    f"Instructions {by_key[key][0]} and {ix.name} share discriminator {disc.hex()}"
                )
            method = camel_case(ix.name)
            by_key[key] = (ix.name, layouts[method])
            by_name[method] = disc

        self._by_name = by_name
        self._by_key = by_key
        self.length = length or 0
        logger.debug(
            "built discriminator table: %d instructions, %d byte discriminators",
            len(by_name),
            self.length,
        )

    def __len__(self) -> int:
        return len(self._by_name)

    def discriminator(self, name: str) -> Optional[bytes]:
        return self._by_name.get(camel_case(name))

    def lookup(self, prefix: bytes) -> Optional[Tuple[str, Construct]]:
        return self._by_key.get(base58_encode_bytes(prefix))
