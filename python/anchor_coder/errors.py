class IdlError(Exception):
    """Base class for everything raised by anchor_coder."""


class IdlConfigError(IdlError):
    """The IDL cannot be turned into a codec. Raised at construction only."""


class UnresolvedTypeError(IdlConfigError):
    pass


class RecursiveTypeError(IdlConfigError):
    pass


class DiscriminatorLengthError(IdlConfigError):
    pass


class DuplicateDiscriminatorError(IdlConfigError):
    pass


class UnknownInstructionError(IdlError, KeyError):
    def __str__(self) -> str:
        # KeyError reprs its argument, keep the plain message.
        return str(self.args[0]) if self.args else ""


class InstructionEncodeError(IdlError):
    pass


class InstructionDecodeError(IdlError):
    pass


class FormatError(IdlError):
    pass
