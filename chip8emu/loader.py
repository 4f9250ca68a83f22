import logging

from .constants import MAX_PROGRAM_SIZE, PROGRAM_START
from .errors import LoadError

logger = logging.getLogger(__name__)


def read_program(path):
    """Read a raw CHIP-8 program (no header) from disk."""
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise LoadError(f"could not open {path}: {e.strerror or e}") from e


def load_program(state, data, length=None):
    """Copy the font table and ``data[:length]`` into memory and point PC at 0x200.

    Raises LoadError if the length does not describe ``data`` or the program
    would run past the end of the address space.
    """
    if length is None:
        length = len(data)
    if length < 0 or length > len(data):
        raise LoadError(f"declared length {length} does not match {len(data)} bytes of program data")
    if length > MAX_PROGRAM_SIZE:
        raise LoadError(f"program is {length} bytes, at most {MAX_PROGRAM_SIZE} fit from 0x{PROGRAM_START:03X}")

    state.reset()
    state.write_block(PROGRAM_START, data[:length])
    state.pc = PROGRAM_START
    state.program_size = length
    logger.info("Loaded %d byte program at 0x%03X", length, PROGRAM_START)


def load_program_file(state, path):
    data = read_program(path)
    logger.debug("Loading ROM: %s", path)
    load_program(state, data, len(data))
    return len(data)
