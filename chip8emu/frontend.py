# pyglet window for the emulator: presents the framebuffer and fills the keypad.
# We're subclassing pyglet (that'll handle graphics and keyboard handling)
# and overriding whatever def we need from there.

import logging

import numpy as np
import pyglet
from pyglet.window import key

from .constants import height, width
from .errors import KeyMapError

logger = logging.getLogger(__name__)


def resolve_keymap(keymap):
    """Map host key names from a key map file to pyglet key symbols."""
    symbols = {}
    for name, chip8_key in keymap.items():
        symbol = getattr(key, name, None)
        if not isinstance(symbol, int):
            raise KeyMapError(f"unknown host key name {name!r}")
        symbols[symbol] = chip8_key
    return symbols


class Chip8Window(pyglet.window.Window):

    def __init__(self, state, keymap, scale=10, on_color=(0, 255, 0), off_color=(0, 0, 0),
                 show_stats=False, caption="CHIP-8 Emulator"):
        self.scale = scale
        window_width, window_height = width * scale, height * scale
        super().__init__(window_width, window_height, caption=caption, resizable=False, vsync=False)

        self.state = state
        self.keymap = resolve_keymap(keymap)
        self.palette = np.array([tuple(off_color) + (255,), tuple(on_color) + (255,)], dtype=np.uint8)

        # creating ImageData once, updated in place on every present
        blank = np.zeros((window_height, window_width, 4), dtype=np.uint8)
        self.image = pyglet.image.ImageData(window_width, window_height, 'RGBA', blank.tobytes())

        # ---- Performance Counters ----
        self.show_stats = show_stats
        self._bench_time = None
        self._bench_frames = 0
        self._bench_cycles = 0
        self.fps_label = pyglet.text.Label(
            "FPS: 0", font_size=12, x=5, y=window_height - 15,
            anchor_x='left', anchor_y='center', color=(255, 255, 255, 255))
        self.cps_label = pyglet.text.Label(
            "Cycles/s: 0", font_size=12, x=5, y=window_height - 30,
            anchor_x='left', anchor_y='center', color=(255, 255, 255, 255))

    # ---- Input ----
    def poll(self):
        self.dispatch_events()

    def on_key_press(self, symbol, modifiers):
        #@Override
        if symbol == key.ESCAPE:
            self.has_exit = True
        elif symbol == key.F1:
            root = logging.getLogger()
            root.setLevel(logging.INFO if root.isEnabledFor(logging.DEBUG) else logging.DEBUG)
            logger.info("Debug logging %s", "on" if root.isEnabledFor(logging.DEBUG) else "off")
        elif symbol in self.keymap:
            self.state.set_key(self.keymap[symbol], True)

    def on_key_release(self, symbol, modifiers):
        #@Override
        if symbol in self.keymap:
            self.state.set_key(self.keymap[symbol], False)

    def on_deactivate(self):
        # key releases are lost while unfocused
        self.state.release_all_keys()

    def on_draw(self):
        # frames are drawn by present(), not by the pyglet event loop
        pass

    # ---- Drawing ----
    def present(self, framebuffer, cycle_count):
        self.switch_to()
        self.clear()

        # pyglet's origin is bottom-left, the framebuffer's is top-left
        pixels = self.palette[np.flipud(framebuffer)]
        if self.scale != 1:
            pixels = np.repeat(np.repeat(pixels, self.scale, axis=0), self.scale, axis=1)
        self.image.set_data('RGBA', self.width * 4, pixels.tobytes())
        self.image.blit(0, 0)

        if self.show_stats:
            self._update_bench(cycle_count)
            self.fps_label.draw()
            self.cps_label.draw()

        self.flip()

    # FPS / CPS
    def _update_bench(self, cycle_count):
        now = pyglet.clock.get_default().time()
        if self._bench_time is None:
            self._bench_time, self._bench_cycles = now, cycle_count
            return
        self._bench_frames += 1
        elapsed = now - self._bench_time
        if elapsed >= 1.0:
            self.fps_label.text = f"FPS: {self._bench_frames / elapsed:.1f}"
            self.cps_label.text = f"Cycles/s: {(cycle_count - self._bench_cycles) / elapsed:.0f}"
            self._bench_frames = 0
            self._bench_cycles = cycle_count
            self._bench_time = now
