import logging
import time

from .constants import FRAMES_PER_SECOND, INSTRUCTIONS_PER_SECOND
from .timers import tick_timers

logger = logging.getLogger(__name__)


def cycles_per_frame(instructions_per_second=INSTRUCTIONS_PER_SECOND, frames_per_second=FRAMES_PER_SECOND):
    if frames_per_second <= 0:
        raise ValueError(f"frames per second must be positive, got {frames_per_second}")
    cycles = instructions_per_second // frames_per_second
    if cycles < 1:
        raise ValueError(
            f"{instructions_per_second} instructions/s is less than one instruction per frame at {frames_per_second} fps")
    return cycles


class PacingLoop:
    """Run the CPU in fixed batches, one batch per display frame.

    The frontend must provide ``poll()`` (read pending input into the keypad),
    ``has_exit`` (True once the user asked to quit) and
    ``present(framebuffer, cycle_count)``.

    Frame deadlines advance by exactly one interval from the previous
    deadline, so oversleeping on one frame is made up on the next ones.
    """

    def __init__(self, cpu, frontend, instructions_per_second=INSTRUCTIONS_PER_SECOND,
                 frames_per_second=FRAMES_PER_SECOND, clock=time.monotonic, sleep=time.sleep):
        self.cpu = cpu
        self.state = cpu.state
        self.frontend = frontend
        self.cycles_per_frame = cycles_per_frame(instructions_per_second, frames_per_second)
        self.frame_interval = 1.0 / frames_per_second
        self.clock = clock
        self.sleep = sleep
        self.frames = 0
        self.deadline = None

    def wait_for_deadline(self):
        remaining = self.deadline - self.clock()
        if remaining > 0:
            self.sleep(remaining)

    def run_frame(self):
        if self.deadline is None:
            self.deadline = self.clock() + self.frame_interval

        self.frontend.poll()
        if self.frontend.has_exit:
            return False

        for _ in range(self.cycles_per_frame):
            self.cpu.step()

        self.wait_for_deadline()
        self.frontend.present(self.state.framebuffer, self.state.cycle_count)
        tick_timers(self.state)
        self.deadline += self.frame_interval
        self.frames += 1
        return True

    def run(self, max_frames=None):
        """Run until the frontend reports quit, or for ``max_frames`` frames.

        Returns the number of frames presented. Faults raised by the CPU
        propagate to the caller.
        """
        logger.info("Running %d cycles per frame at %.1f fps",
                    self.cycles_per_frame, 1.0 / self.frame_interval)
        start = self.frames
        while max_frames is None or self.frames - start < max_frames:
            if not self.run_frame():
                logger.info("Quit requested after %d frames, %d cycles", self.frames, self.state.cycle_count)
                break
        return self.frames - start
