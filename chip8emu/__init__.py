from .cpu import Chip8CPU, disassemble
from .errors import (
    Chip8Error, ConfigError, Fault, FaultKind, InvalidOpcodeFault, KeyFault, KeyMapError,
    LoadError, MemoryFault, RegisterFault, StackFault,
)
from .loader import load_program, load_program_file, read_program
from .pacing import PacingLoop
from .state import Chip8State
from .timers import tick_timers

__version__ = "0.1.0"
