# CHIP-8 machine state.
# Memory - 4096 bytes which includes the fonts (at 0x000) and the program (from 0x200).
# Registers - 16 general-purpose 8-bit registers (V0..VF), VF doubles as a flag.
# Stack - 16 return addresses plus a stack pointer.
# Display - 64x32 pixels, each either on or off (0 || 1).
# Every access below is bounds-checked and raises a Fault instead of wrapping.

import numpy as np

from .constants import (
    KEY_COUNT, MEMORY_SIZE, PROGRAM_START, REGISTER_COUNT, STACK_SIZE,
    fontset, height, width,
)
from .errors import FaultKind, KeyFault, MemoryFault, RegisterFault, StackFault


class Chip8State:

    def __init__(self):
        self.memory = np.zeros(MEMORY_SIZE, dtype=np.uint8)
        self.V = np.zeros(REGISTER_COUNT, dtype=np.uint8)
        self.stack = np.zeros(STACK_SIZE, dtype=np.uint16)
        self.framebuffer = np.zeros((height, width), dtype=np.uint8)
        self.keys = np.zeros(KEY_COUNT, dtype=bool)
        self.reset()

    def reset(self):
        self.memory[:] = 0
        self.V[:] = 0
        self.stack[:] = 0
        self.framebuffer[:] = 0
        self.keys[:] = False
        self.I = 0
        self.pc = PROGRAM_START
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.cycle_count = 0
        self.program_size = 0
        self.load_fonts()

    def load_fonts(self):
        self.memory[:len(fontset)] = fontset

    # ---- Memory ----
    def _check_address(self, address, count=1):
        if address < 0 or address + count > MEMORY_SIZE:
            raise MemoryFault(address if address < 0 else max(address, MEMORY_SIZE), self.pc)

    def read_byte(self, address):
        self._check_address(address)
        return int(self.memory[address])

    def write_byte(self, address, value):
        self._check_address(address)
        self.memory[address] = value & 0xFF

    def read_block(self, address, count):
        self._check_address(address, count)
        return [int(b) for b in self.memory[address:address + count]]

    def write_block(self, address, values):
        values = bytes(values)
        self._check_address(address, len(values))
        self.memory[address:address + len(values)] = np.frombuffer(values, dtype=np.uint8)

    def read_word(self, address):
        hi, lo = self.read_block(address, 2)
        return (hi << 8) | lo

    # ---- Registers ----
    def get_register(self, index):
        if not 0 <= index < REGISTER_COUNT:
            raise RegisterFault(index, self.pc)
        return int(self.V[index])

    def set_register(self, index, value):
        if not 0 <= index < REGISTER_COUNT:
            raise RegisterFault(index, self.pc)
        self.V[index] = value & 0xFF

    # ---- Stack ----
    def push(self, address):
        if self.sp >= STACK_SIZE:
            raise StackFault(FaultKind.STACK_OVERFLOW,
                             f"call with {STACK_SIZE} return addresses already stacked", self.pc)
        self.stack[self.sp] = address & 0xFFFF
        self.sp += 1

    def pop(self):
        if self.sp <= 0:
            raise StackFault(FaultKind.STACK_UNDERFLOW, "return with an empty stack", self.pc)
        self.sp -= 1
        return int(self.stack[self.sp])

    # ---- Keypad ----
    def key_pressed(self, key):
        if not 0 <= key < KEY_COUNT:
            raise KeyFault(key, self.pc)
        return bool(self.keys[key])

    def set_key(self, key, pressed):
        if not 0 <= key < KEY_COUNT:
            raise KeyFault(key)
        self.keys[key] = bool(pressed)

    def release_all_keys(self):
        self.keys[:] = False

    def any_key_pressed(self):
        return bool(self.keys.any())

    # ---- Display ----
    def clear_screen(self):
        self.framebuffer[:] = 0
