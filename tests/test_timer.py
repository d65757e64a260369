import unittest
from dataclasses import replace

from studydesk.domain.logic import timer


class TimerTests(unittest.TestCase):
    def setUp(self):
        self.settings = timer.TimerSettings()
        self.state = timer.initial_state(self.settings)

    def test_initial_state(self):
        self.assertEqual(self.state.mode, timer.WORK)
        self.assertEqual(timer.format_time(self.state.remaining_seconds), "25:00")
        self.assertFalse(self.state.is_active)

    def test_tick_only_runs_when_active(self):
        self.assertEqual(timer.tick(self.state, self.settings), self.state)
        running = timer.tick(timer.toggle(self.state), self.settings)
        self.assertEqual(running.remaining_seconds, 25 * 60 - 1)

    def test_work_session_moves_to_short_break(self):
        state = timer.TimerState(mode=timer.WORK, remaining_seconds=0, is_active=True)
        state = timer.tick(state, self.settings)
        self.assertEqual(state.mode, timer.BREAK)
        self.assertEqual(state.remaining_seconds, 5 * 60)
        self.assertEqual(state.completed_sessions, 1)
        self.assertTrue(state.is_active)

    def test_every_fourth_session_is_a_long_break(self):
        state = timer.TimerState(mode=timer.WORK, remaining_seconds=0, is_active=True, completed_sessions=3)
        state = timer.tick(state, self.settings)
        self.assertEqual(state.mode, timer.LONG_BREAK)
        self.assertEqual(state.remaining_seconds, 15 * 60)

    def test_break_returns_to_work_without_auto_start(self):
        state = timer.TimerState(mode=timer.BREAK, remaining_seconds=0, is_active=True, completed_sessions=1)
        state = timer.tick(state, self.settings)
        self.assertEqual(state.mode, timer.WORK)
        self.assertFalse(state.is_active)
        self.assertEqual(state.completed_sessions, 1)

    def test_reset_and_skip(self):
        state = timer.TimerState(mode=timer.BREAK, remaining_seconds=12, is_active=True)
        self.assertEqual(timer.reset(state, self.settings).remaining_seconds, 5 * 60)
        skipped = timer.skip(self.state, self.settings)
        self.assertEqual(skipped.mode, timer.BREAK)
        self.assertEqual(skipped.completed_sessions, 0)

    def test_changed_settings_apply_to_a_paused_timer(self):
        shorter = replace(self.settings, work_minutes=50, break_minutes=10)
        self.assertEqual(timer.apply_settings(self.state, shorter).remaining_seconds, 50 * 60)

        running = timer.TimerState(mode=timer.WORK, remaining_seconds=600, is_active=True)
        self.assertEqual(timer.apply_settings(running, shorter), running)

    def test_auto_start_switches(self):
        settings = replace(self.settings, auto_start_breaks=False, auto_start_pomodoros=True)
        state = timer.tick(timer.TimerState(mode=timer.WORK, remaining_seconds=0, is_active=True), settings)
        self.assertEqual(state.mode, timer.BREAK)
        self.assertFalse(state.is_active)

        state = timer.tick(replace(state, remaining_seconds=0, is_active=True), settings)
        self.assertEqual(state.mode, timer.WORK)
        self.assertTrue(state.is_active)
        self.assertEqual(state.remaining_seconds, 25 * 60)

    def test_progress_and_labels(self):
        state = timer.TimerState(mode=timer.WORK, remaining_seconds=750)
        self.assertAlmostEqual(timer.progress(state, self.settings), 50.0)
        self.assertEqual(timer.format_time(65), "01:05")
        self.assertEqual(timer.mode_label(timer.LONG_BREAK), "Long Break")


if __name__ == "__main__":
    unittest.main()
