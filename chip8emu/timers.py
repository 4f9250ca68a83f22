# ---- timers ----
# Both timers count down at 60 Hz: once per presented frame, never per instruction.


def tick_timers(state):
    # Delay timer
    if state.delay_timer > 0:
        state.delay_timer -= 1
    # Sound timer (tracked as a value only, nothing is played)
    if state.sound_timer > 0:
        state.sound_timer -= 1
