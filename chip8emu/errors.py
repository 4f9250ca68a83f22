"""Exceptions raised by the interpreter, its loader and its configuration."""

from enum import Enum


class FaultKind(Enum):
    INVALID_OPCODE = "invalid opcode"
    STACK_OVERFLOW = "stack overflow"
    STACK_UNDERFLOW = "stack underflow"
    MEMORY_OUT_OF_RANGE = "memory access out of range"
    REGISTER_OUT_OF_RANGE = "register index out of range"
    KEY_OUT_OF_RANGE = "key index out of range"


class Chip8Error(Exception):
    pass


class LoadError(Chip8Error):
    """The program could not be read or does not fit in memory."""


class ConfigError(Chip8Error):
    pass


class KeyMapError(Chip8Error):
    pass


class Fault(Chip8Error):
    """A fatal runtime fault. Execution must not continue after one."""

    def __init__(self, kind, message, pc=None):
        self.kind = kind
        self.pc = pc
        if pc is not None:
            message = f"{message} (PC=0x{pc:03X})"
        super().__init__(f"{kind.value}: {message}")


class InvalidOpcodeFault(Fault):
    def __init__(self, opcode, pc=None):
        self.opcode = opcode
        self.high_byte = (opcode >> 8) & 0xFF
        self.low_byte = opcode & 0xFF
        super().__init__(FaultKind.INVALID_OPCODE,
                         f"{self.high_byte:02X}{self.low_byte:02X}", pc)


class StackFault(Fault):
    pass


class MemoryFault(Fault):
    def __init__(self, address, pc=None):
        self.address = address
        super().__init__(FaultKind.MEMORY_OUT_OF_RANGE, f"address 0x{address:X}", pc)


class RegisterFault(Fault):
    def __init__(self, index, pc=None):
        self.index = index
        super().__init__(FaultKind.REGISTER_OUT_OF_RANGE, f"V{index}", pc)


class KeyFault(Fault):
    def __init__(self, key, pc=None):
        self.key = key
        super().__init__(FaultKind.KEY_OUT_OF_RANGE, f"key {key}", pc)
