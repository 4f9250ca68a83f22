from chip8emu.cpu import Chip8CPU
from chip8emu.state import Chip8State


def program(state: Chip8State, *opcodes: int, at: int = 0x200) -> None:
    """Write opcodes into memory starting at ``at``."""
    data = bytearray()
    for op in opcodes:
        data += bytes(((op >> 8) & 0xFF, op & 0xFF))
    state.write_block(at, data)


def run(cpu: Chip8CPU, *opcodes: int) -> None:
    """Place straight-line opcodes at PC and execute them in order."""
    program(cpu.state, *opcodes, at=cpu.state.pc)
    for _ in opcodes:
        cpu.step()
