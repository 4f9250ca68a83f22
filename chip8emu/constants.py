# ---- Machine geometry ----
width, height = 64, 32
MEMORY_SIZE = 4096        # max 4096 bytes
REGISTER_COUNT = 16       # V0..VF
STACK_SIZE = 16
KEY_COUNT = 16
PROGRAM_START = 0x200     # programs are loaded at 0x200 (Cowgod's reference)
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START
FLAG = 0xF                # VF doubles as the carry/borrow/collision flag

# ---- Pacing ----
INSTRUCTIONS_PER_SECOND = 540
FRAMES_PER_SECOND = 60

# ---- Font ----
GLYPH_SIZE = 5  # font sprites are 5 bytes tall

# set fonts (binary pixel patterns)
fontset = (
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
)  # notice 80 bytes
