# CHIP-8 decoder/executor.
# CPU - Cowgod's CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
#
# Every cycle fetches the two bytes at PC, dispatches on the high nibble and
# runs the matching handler. Handlers return None to fall through to PC + 2,
# or the address to resume at.

import logging
import random

from .constants import FLAG, GLYPH_SIZE, height, width
from .errors import InvalidOpcodeFault

logger = logging.getLogger(__name__)

# (mask, pattern, mnemonic) used for tracing and disassembly
mnemonics = (
    (0xFFFF, 0x00E0, "CLS"),
    (0xFFFF, 0x00EE, "RET"),
    (0xF000, 0x1000, "JP {nnn:03X}"),
    (0xF000, 0x2000, "CALL {nnn:03X}"),
    (0xF000, 0x3000, "SE V{x:X}, {kk:02X}"),
    (0xF000, 0x4000, "SNE V{x:X}, {kk:02X}"),
    (0xF000, 0x5000, "SE V{x:X}, V{y:X}"),
    (0xF000, 0x6000, "LD V{x:X}, {kk:02X}"),
    (0xF000, 0x7000, "ADD V{x:X}, {kk:02X}"),
    (0xF00F, 0x8000, "LD V{x:X}, V{y:X}"),
    (0xF00F, 0x8001, "OR V{x:X}, V{y:X}"),
    (0xF00F, 0x8002, "AND V{x:X}, V{y:X}"),
    (0xF00F, 0x8003, "XOR V{x:X}, V{y:X}"),
    (0xF00F, 0x8004, "ADD V{x:X}, V{y:X}"),
    (0xF00F, 0x8005, "SUB V{x:X}, V{y:X}"),
    (0xF00F, 0x8006, "SHR V{x:X}"),
    (0xF00F, 0x8007, "SUBN V{x:X}, V{y:X}"),
    (0xF00F, 0x800E, "SHL V{x:X}"),
    (0xF000, 0x9000, "SNE V{x:X}, V{y:X}"),
    (0xF000, 0xA000, "LD I, {nnn:03X}"),
    (0xF000, 0xB000, "JP V0, {nnn:03X}"),
    (0xF000, 0xC000, "RND V{x:X}, {kk:02X}"),
    (0xF000, 0xD000, "DRW V{x:X}, V{y:X}, {n:X}"),
    (0xF0FF, 0xE09E, "SKP V{x:X}"),
    (0xF0FF, 0xE0A1, "SKNP V{x:X}"),
    (0xF0FF, 0xF007, "LD V{x:X}, DT"),
    (0xF0FF, 0xF00A, "LD V{x:X}, K"),
    (0xF0FF, 0xF015, "LD DT, V{x:X}"),
    (0xF0FF, 0xF018, "LD ST, V{x:X}"),
    (0xF0FF, 0xF01E, "ADD I, V{x:X}"),
    (0xF0FF, 0xF029, "LD F, V{x:X}"),
    (0xF0FF, 0xF033, "LD B, V{x:X}"),
    (0xF0FF, 0xF055, "LD [I], V{x:X}"),
    (0xF0FF, 0xF065, "LD V{x:X}, [I]"),
)


def disassemble(opcode):
    """Return the assembly text for an opcode, or None if it is not a CHIP-8 instruction."""
    for mask, pattern, text in mnemonics:
        if opcode & mask == pattern:
            return text.format(
                nnn=opcode & 0x0FFF,
                n=opcode & 0xF,
                x=(opcode >> 8) & 0xF,
                y=(opcode >> 4) & 0xF,
                kk=opcode & 0xFF,
            )
    return None


def disassemble_program(data, origin=0x200):
    """Yield (address, opcode, text) for each 2-byte word of a program image."""
    for offset in range(0, len(data) - 1, 2):
        opcode = (data[offset] << 8) | data[offset + 1]
        yield origin + offset, opcode, disassemble(opcode) or f"DW {opcode:04X}"


class Chip8CPU:

    def __init__(self, state, rng=None):
        self.state = state
        self.rng = rng or random.Random()
        self.setup_funcmap()

    # ---- Opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {
            0x0: self._0xxx,  # 00E0 / 00EE - Clear screen / return from subroutine
            0x1: self._1nnn,  # 1nnn - Jump to a memory address
            0x2: self._2nnn,  # 2nnn - Call a subroutine at a memory address
            0x3: self._3xkk,  # 3xkk - Skip next instruction if Vx == kk
            0x4: self._4xkk,  # 4xkk - Skip next instruction if Vx != kk
            0x5: self._5xy0,  # 5xy0 - Skip next instruction if Vx == Vy
            0x6: self._6xkk,  # 6xkk - Vx = kk
            0x7: self._7xkk,  # 7xkk - Vx += kk, no carry
            0x8: self._8xxx,  # 8xy0..8xyE - Math and logic between two registers
            0x9: self._9xy0,  # 9xy0 - Skip next instruction if Vx != Vy
            0xA: self._Annn,  # Annn - I = nnn
            0xB: self._Bnnn,  # Bnnn - Jump to V0 + nnn
            0xC: self._Cxkk,  # Cxkk - Vx = random byte AND kk
            0xD: self._Dxyn,  # Dxyn - Draw an n-row sprite at (Vx, Vy)
            0xE: self._Exxx,  # Ex9E / ExA1 - Skip on key pressed / not pressed
            0xF: self._Fxxx,  # Fx07..Fx65 - timers, memory, I and key input
        }
        self.alu = {
            0x0: lambda vx, vy: (vy, None),
            0x1: lambda vx, vy: (vx | vy, None),
            0x2: lambda vx, vy: (vx & vy, None),
            0x3: lambda vx, vy: (vx ^ vy, None),
            0x4: lambda vx, vy: (vx + vy, 1 if vx + vy > 0xFF else 0),
            0x5: lambda vx, vy: (vx - vy, 1 if vx > vy else 0),
            # shifts operate on Vx only, Vy is ignored
            0x6: lambda vx, vy: (vx >> 1, vx & 1),
            0x7: lambda vx, vy: (vy - vx, 1 if vy > vx else 0),
            0xE: lambda vx, vy: (vx << 1, (vx >> 7) & 1),
        }
        self.fmap = {
            0x07: self._Fx07,
            0x0A: self._Fx0A,
            0x15: self._Fx15,
            0x18: self._Fx18,
            0x1E: self._Fx1E,
            0x29: self._Fx29,
            0x33: self._Fx33,
            0x55: self._Fx55,
            0x65: self._Fx65,
        }

    # ---- Cycle ----
    def fetch(self):
        return self.state.read_word(self.state.pc)

    def execute(self, opcode):
        """Run one opcode against the state and return the resulting PC."""
        pc = self.state.pc
        target = self.funcmap[opcode >> 12](opcode)
        self.state.pc = (pc + 2 if target is None else target) & 0xFFFF
        return self.state.pc

    def step(self):
        """Fetch, decode and execute one instruction.

        Returns False when PC did not move (Fx0A waiting for a key, or a
        jump to itself), True otherwise.
        """
        state = self.state
        pc = state.pc
        opcode = self.fetch()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%03X: %04X  %s", pc, opcode, disassemble(opcode) or "???")
        self.execute(opcode)
        state.cycle_count += 1
        return state.pc != pc

    def _invalid(self, opcode):
        raise InvalidOpcodeFault(opcode, self.state.pc)

    # ---- Opcode Handlers ----

    # 00E0 / 00EE - CLS / RET, any other 0nnn is rejected
    def _0xxx(self, opcode):
        if opcode == 0x00E0:
            self.state.clear_screen()
            return None
        if opcode == 0x00EE:
            # the popped address already points past the CALL
            return self.state.pop()
        self._invalid(opcode)

    # 1nnn - Jump to address nnn
    def _1nnn(self, opcode):
        nnn = opcode & 0x0FFF
        if nnn == self.state.pc:
            logger.debug("Infinite loop detected at 0x%03X", nnn)
        return nnn

    # 2nnn - Call subroutine at nnn
    def _2nnn(self, opcode):
        self.state.push(self.state.pc + 2)
        return opcode & 0x0FFF

    def _skip_if(self, condition):
        return self.state.pc + 4 if condition else None

    # 3xkk - Skip next instruction if Vx == kk
    def _3xkk(self, opcode):
        return self._skip_if(self.state.get_register((opcode >> 8) & 0xF) == opcode & 0xFF)

    # 4xkk - Skip next instruction if Vx != kk
    def _4xkk(self, opcode):
        return self._skip_if(self.state.get_register((opcode >> 8) & 0xF) != opcode & 0xFF)

    # 5xy0 - Skip next instruction if Vx == Vy (low nibble not checked)
    def _5xy0(self, opcode):
        s = self.state
        return self._skip_if(s.get_register((opcode >> 8) & 0xF) == s.get_register((opcode >> 4) & 0xF))

    # 6xkk - Set Vx = kk
    def _6xkk(self, opcode):
        self.state.set_register((opcode >> 8) & 0xF, opcode & 0xFF)

    # 7xkk - Add immediate, wraps, VF untouched
    def _7xkk(self, opcode):
        x = (opcode >> 8) & 0xF
        self.state.set_register(x, self.state.get_register(x) + (opcode & 0xFF))

    # 8xy0..8xyE
    def _8xxx(self, opcode):
        op = self.alu.get(opcode & 0xF)
        if op is None:
            self._invalid(opcode)
        s = self.state
        x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
        result, flag = op(s.get_register(x), s.get_register(y))
        # VF is written before Vx, so 8Fy_ leaves the result in VF
        if flag is not None:
            s.set_register(FLAG, flag)
        s.set_register(x, result)

    # 9xy0 - Skip next instruction if Vx != Vy (low nibble not checked)
    def _9xy0(self, opcode):
        s = self.state
        return self._skip_if(s.get_register((opcode >> 8) & 0xF) != s.get_register((opcode >> 4) & 0xF))

    # Annn - Set I = nnn
    def _Annn(self, opcode):
        self.state.I = opcode & 0x0FFF

    # Bnnn - Jump to V0 + nnn. The extra +2 skips past the computed target.
    def _Bnnn(self, opcode):
        return self.state.get_register(0) + (opcode & 0x0FFF) + 2

    # Cxkk - Vx = random byte AND kk
    def _Cxkk(self, opcode):
        self.state.set_register((opcode >> 8) & 0xF, self.rng.getrandbits(8) & (opcode & 0xFF))

    # Dxyn - DRW Vx, Vy, nibble
    def _Dxyn(self, opcode):
        s = self.state
        x = s.get_register((opcode >> 8) & 0xF)
        y = s.get_register((opcode >> 4) & 0xF)
        n = opcode & 0xF
        buf = s.framebuffer
        s.set_register(FLAG, 0)
        collision = 0
        for row, sprite in enumerate(s.read_block(s.I, n)):
            py = (y + row) % height
            for bit in range(8):
                px = (x + bit) % width
                old = buf[py, px]
                new = old ^ ((sprite >> (7 - bit)) & 1)
                buf[py, px] = new
                if old and not new:
                    collision = 1
        if collision:
            s.set_register(FLAG, 1)

    # Ex9E / ExA1 - SKP / SKNP
    def _Exxx(self, opcode):
        kk = opcode & 0xFF
        if kk not in (0x9E, 0xA1):
            self._invalid(opcode)
        s = self.state
        pressed = s.key_pressed(s.get_register((opcode >> 8) & 0xF))
        return self._skip_if(pressed if kk == 0x9E else not pressed)

    # Fx07..Fx65
    def _Fxxx(self, opcode):
        handler = self.fmap.get(opcode & 0xFF)
        if handler is None:
            self._invalid(opcode)
        return handler((opcode >> 8) & 0xF)

    def _Fx07(self, x):
        self.state.set_register(x, self.state.delay_timer)

    # LD Vx, K: busy-poll. Vx gets 1 (not the key index) once any key is down,
    # otherwise PC stays put and the instruction runs again next cycle.
    def _Fx0A(self, x):
        if not self.state.any_key_pressed():
            return self.state.pc
        self.state.set_register(x, 1)

    def _Fx15(self, x):
        self.state.delay_timer = self.state.get_register(x)

    def _Fx18(self, x):
        self.state.sound_timer = self.state.get_register(x)

    def _Fx1E(self, x):
        self.state.I = (self.state.I + self.state.get_register(x)) & 0xFFFF

    def _Fx29(self, x):
        self.state.I = self.state.get_register(x) * GLYPH_SIZE

    def _Fx33(self, x):
        val = self.state.get_register(x)
        self.state.write_block(self.state.I, (val // 100, (val // 10) % 10, val % 10))

    def _Fx55(self, x):
        self.state.write_block(self.state.I, [self.state.get_register(i) for i in range(x + 1)])

    def _Fx65(self, x):
        for i, b in enumerate(self.state.read_block(self.state.I, x + 1)):
            self.state.set_register(i, b)
