import pytest

from chip8emu.constants import fontset
from chip8emu.errors import FaultKind, KeyFault, MemoryFault, RegisterFault, StackFault
from chip8emu.state import Chip8State


def test_initial_state_has_fonts_and_pc_at_program_start(state: Chip8State) -> None:
    assert state.pc == 0x200
    assert state.read_block(0, 80) == list(fontset)
    assert state.read_block(0x200, 16) == [0] * 16
    assert state.sp == 0
    assert state.I == 0
    assert not state.framebuffer.any()
    assert not state.any_key_pressed()


def test_reset_restores_power_on_state(state: Chip8State) -> None:
    state.write_byte(0, 0x12)
    state.write_byte(0x300, 0x34)
    state.set_register(3, 9)
    state.push(0x222)
    state.pc = 0x456
    state.I = 0x789
    state.delay_timer = 5
    state.sound_timer = 6
    state.framebuffer[4, 5] = 1
    state.set_key(7, True)
    state.cycle_count = 99

    state.reset()

    assert state.read_byte(0) == fontset[0]
    assert state.read_byte(0x300) == 0
    assert state.get_register(3) == 0
    assert state.sp == 0
    assert state.pc == 0x200
    assert state.I == 0
    assert state.delay_timer == 0 and state.sound_timer == 0
    assert not state.framebuffer.any()
    assert not state.key_pressed(7)
    assert state.cycle_count == 0


def test_register_writes_wrap_to_eight_bits(state: Chip8State) -> None:
    state.set_register(0, 0x1FF)
    assert state.get_register(0) == 0xFF


@pytest.mark.parametrize("index", [-1, 16, 255])
def test_register_index_out_of_range_faults(state: Chip8State, index: int) -> None:
    with pytest.raises(RegisterFault) as exc:
        state.get_register(index)
    assert exc.value.kind is FaultKind.REGISTER_OUT_OF_RANGE
    with pytest.raises(RegisterFault):
        state.set_register(index, 1)


def test_memory_access_out_of_range_faults(state: Chip8State) -> None:
    with pytest.raises(MemoryFault) as exc:
        state.read_byte(0x1000)
    assert exc.value.kind is FaultKind.MEMORY_OUT_OF_RANGE
    assert exc.value.address == 0x1000
    with pytest.raises(MemoryFault):
        state.write_byte(-1, 0)
    with pytest.raises(MemoryFault) as exc:
        state.read_block(0xFFE, 3)
    assert exc.value.address == 0x1000
    assert state.read_block(0xFFE, 2) == [0, 0]


def test_stack_push_pop_and_limits(state: Chip8State) -> None:
    for i in range(16):
        state.push(0x200 + i * 2)
    with pytest.raises(StackFault) as exc:
        state.push(0x300)
    assert exc.value.kind is FaultKind.STACK_OVERFLOW
    assert state.sp == 16

    popped = [state.pop() for _ in range(16)]
    assert popped == [0x200 + i * 2 for i in reversed(range(16))]
    with pytest.raises(StackFault) as exc:
        state.pop()
    assert exc.value.kind is FaultKind.STACK_UNDERFLOW
    assert state.sp == 0


def test_keypad(state: Chip8State) -> None:
    state.set_key(0xA, True)
    assert state.key_pressed(0xA)
    assert state.any_key_pressed()
    state.release_all_keys()
    assert not state.key_pressed(0xA)
    with pytest.raises(KeyFault):
        state.key_pressed(16)
    with pytest.raises(KeyFault):
        state.set_key(16, True)


def test_fault_message_includes_pc(state: Chip8State) -> None:
    state.pc = 0x2AE
    with pytest.raises(RegisterFault) as exc:
        state.get_register(16)
    assert exc.value.pc == 0x2AE
    assert "PC=0x2AE" in str(exc.value)
