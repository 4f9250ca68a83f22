import random

import pytest

from chip8emu.cpu import Chip8CPU
from chip8emu.state import Chip8State


@pytest.fixture
def state() -> Chip8State:
    return Chip8State()


@pytest.fixture
def cpu(state: Chip8State) -> Chip8CPU:
    return Chip8CPU(state, rng=random.Random(1234))
