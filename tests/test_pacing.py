import pytest

from chip8emu.cpu import Chip8CPU
from chip8emu.pacing import PacingLoop, cycles_per_frame
from chip8emu.state import Chip8State
from tests.helpers import program


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeFrontend:
    def __init__(self, state: Chip8State, quit_after: int = None) -> None:
        self.state = state
        self.has_exit = False
        self.quit_after = quit_after
        self.polls = 0
        self.presented: list[int] = []
        self.events: list[str] = []

    def poll(self) -> None:
        self.polls += 1
        self.events.append("poll")
        if self.quit_after is not None and self.polls > self.quit_after:
            self.has_exit = True

    def present(self, framebuffer, cycle_count: int) -> None:
        self.events.append("present")
        self.presented.append(cycle_count)


@pytest.fixture
def looping_cpu(cpu: Chip8CPU) -> Chip8CPU:
    # 200: ADD V0, 1 / 202: JP 200
    program(cpu.state, 0x7001, 0x1200)
    return cpu


def test_cycles_per_frame_reference_rate() -> None:
    assert cycles_per_frame(540, 60) == 9
    assert cycles_per_frame(600, 60) == 10


@pytest.mark.parametrize("ips, fps", [(30, 60), (540, 0)])
def test_cycles_per_frame_rejects_bad_rates(ips: int, fps: int) -> None:
    with pytest.raises(ValueError):
        cycles_per_frame(ips, fps)


def test_each_frame_runs_a_fixed_batch(looping_cpu: Chip8CPU) -> None:
    clock = FakeClock()
    frontend = FakeFrontend(looping_cpu.state)
    loop = PacingLoop(looping_cpu, frontend, 540, 60, clock=clock, sleep=clock.sleep)

    assert loop.run(max_frames=3) == 3
    assert frontend.presented == [9, 18, 27]
    assert frontend.events == ["poll", "present"] * 3


def test_deadlines_are_anchored_to_previous_deadline(looping_cpu: Chip8CPU) -> None:
    clock = FakeClock(now=10.0)
    frontend = FakeFrontend(looping_cpu.state)
    loop = PacingLoop(looping_cpu, frontend, 540, 60, clock=clock, sleep=clock.sleep)
    interval = 1.0 / 60

    loop.run_frame()
    assert clock.now == pytest.approx(10.0 + interval)

    # oversleep by half a frame: the next wait is shortened, not restarted from now
    clock.now += interval / 2
    loop.run_frame()
    assert clock.sleeps[-1] == pytest.approx(interval / 2)
    assert clock.now == pytest.approx(10.0 + 2 * interval)
    assert loop.deadline == pytest.approx(10.0 + 3 * interval)


def test_late_frame_does_not_sleep(looping_cpu: Chip8CPU) -> None:
    clock = FakeClock(now=0.0)
    frontend = FakeFrontend(looping_cpu.state)
    loop = PacingLoop(looping_cpu, frontend, 540, 60, clock=clock, sleep=clock.sleep)

    loop.run_frame()
    clock.now += 1.0
    loop.run_frame()
    assert len(clock.sleeps) == 1


def test_timers_tick_once_per_frame(looping_cpu: Chip8CPU) -> None:
    state = looping_cpu.state
    state.delay_timer = 5
    state.sound_timer = 1
    clock = FakeClock()
    loop = PacingLoop(looping_cpu, FakeFrontend(state), 540, 60, clock=clock, sleep=clock.sleep)

    loop.run(max_frames=2)
    assert state.delay_timer == 3
    assert state.sound_timer == 0


def test_quit_stops_before_running_the_batch(looping_cpu: Chip8CPU) -> None:
    clock = FakeClock()
    frontend = FakeFrontend(looping_cpu.state, quit_after=2)
    loop = PacingLoop(looping_cpu, frontend, 540, 60, clock=clock, sleep=clock.sleep)

    assert loop.run() == 2
    assert looping_cpu.state.cycle_count == 18
    assert frontend.presented == [9, 18]


def test_input_sampled_before_batch_is_seen_by_the_batch(cpu: Chip8CPU) -> None:
    state = cpu.state
    # 200: LD V1, K / 202: JP 202
    program(state, 0xF10A, 0x1202)

    class PressOnSecondPoll(FakeFrontend):
        def poll(self) -> None:
            super().poll()
            if self.polls == 2:
                self.state.set_key(4, True)

    clock = FakeClock()
    frontend = PressOnSecondPoll(state)
    loop = PacingLoop(cpu, frontend, 540, 60, clock=clock, sleep=clock.sleep)

    loop.run_frame()
    assert state.pc == 0x200
    loop.run_frame()
    assert state.pc == 0x202
    assert state.get_register(1) == 1
