from __future__ import annotations

from dataclasses import dataclass, replace

WORK = "work"
BREAK = "break"
LONG_BREAK = "longBreak"

MODE_LABELS = {
    WORK: "Focus Time",
    BREAK: "Short Break",
    LONG_BREAK: "Long Break",
}


@dataclass(frozen=True)
class TimerSettings:
    work_minutes: int = 25
    break_minutes: int = 5
    long_break_minutes: int = 15
    sessions_until_long_break: int = 4
    auto_start_breaks: bool = True
    auto_start_pomodoros: bool = False
    notify_on_finish: bool = True

    def minutes_for(self, mode: str) -> int:
        if mode == WORK:
            return self.work_minutes
        if mode == BREAK:
            return self.break_minutes
        if mode == LONG_BREAK:
            return self.long_break_minutes
        raise ValueError(f"Unknown timer mode: {mode}")


@dataclass(frozen=True)
class TimerState:
    mode: str = WORK
    remaining_seconds: int = 25 * 60
    is_active: bool = False
    completed_sessions: int = 0


def initial_state(settings: TimerSettings) -> TimerState:
    return TimerState(mode=WORK, remaining_seconds=settings.work_minutes * 60)


def toggle(state: TimerState) -> TimerState:
    return replace(state, is_active=not state.is_active)


def reset(state: TimerState, settings: TimerSettings) -> TimerState:
    return replace(state, is_active=False, remaining_seconds=settings.minutes_for(state.mode) * 60)


def skip(state: TimerState, settings: TimerSettings) -> TimerState:
    """Jump to the next phase without counting the current one as completed."""
    mode = BREAK if state.mode == WORK else WORK
    return replace(state, mode=mode, is_active=False, remaining_seconds=settings.minutes_for(mode) * 60)


def apply_settings(state: TimerState, settings: TimerSettings) -> TimerState:
    """A paused timer picks up the new duration for its mode; a running one keeps counting."""
    if state.is_active:
        return state
    return replace(state, remaining_seconds=settings.minutes_for(state.mode) * 60)


def _finish_phase(state: TimerState, settings: TimerSettings) -> TimerState:
    if state.mode == WORK:
        completed = state.completed_sessions + 1
        every = max(1, settings.sessions_until_long_break)
        mode = LONG_BREAK if completed % every == 0 else BREAK
        return TimerState(
            mode=mode,
            remaining_seconds=settings.minutes_for(mode) * 60,
            is_active=settings.auto_start_breaks,
            completed_sessions=completed,
        )
    return TimerState(
        mode=WORK,
        remaining_seconds=settings.work_minutes * 60,
        is_active=settings.auto_start_pomodoros,
        completed_sessions=state.completed_sessions,
    )


def tick(state: TimerState, settings: TimerSettings) -> TimerState:
    """Advance one second. Inactive timers are returned unchanged."""
    if not state.is_active:
        return state
    if state.remaining_seconds > 0:
        return replace(state, remaining_seconds=state.remaining_seconds - 1)
    return _finish_phase(state, settings)


def progress(state: TimerState, settings: TimerSettings) -> float:
    total = settings.minutes_for(state.mode) * 60
    if total <= 0:
        return 100.0
    return max(0.0, min(100.0, 100 - (state.remaining_seconds / total) * 100))


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def mode_label(mode: str) -> str:
    return MODE_LABELS.get(mode, mode)
