class InvalidInstruction(Exception):
    """Base class for words that cannot be disassembled."""


class UnknownInstruction(InvalidInstruction):
    pass


class UnsupportedAddressingMode(InvalidInstruction):
    pass


class MalformedOperand(InvalidInstruction):
    pass


class UnsupportedImmediateSize(InvalidInstruction):
    pass


class MissingOperandSize(InvalidInstruction):
    pass
