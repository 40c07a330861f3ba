from dataclasses import dataclass

from .encoding import Encoding

SIGHASH_GLOBAL_NAMESPACE = "global"


@dataclass(frozen=True)
class CoderConfig:
    namespace: str = SIGHASH_GLOBAL_NAMESPACE  # (Optional) Sighash namespace for instructions without an explicit discriminant.
    sighash_length: int = 8  # (Optional) Number of sha256 bytes kept as the sighash discriminator.
    encoding: Encoding = Encoding.HEX  # (Optional) Text encoding assumed when decode() is given a str.
