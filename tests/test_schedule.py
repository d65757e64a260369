import unittest
from datetime import date

from studydesk.domain.logic import schedule
from studydesk.domain.models.entities import CalendarTask


def task(task_id, day, time="09:00", completed=False):
    return CalendarTask(id=task_id, title=task_id, date=day, time=time, completed=completed)


class TaskRulesTests(unittest.TestCase):
    def test_new_task_defaults(self):
        created = schedule.new_task("  Lab report ", "2026-06-15")
        self.assertEqual(created.title, "Lab report")
        self.assertEqual(created.time, "09:00")
        self.assertEqual(created.duration, 60)
        self.assertEqual(created.priority, "medium")
        self.assertFalse(created.completed)

    def test_required_fields(self):
        with self.assertRaises(schedule.TaskValidationError):
            schedule.new_task("", "2026-06-15")
        with self.assertRaises(schedule.TaskValidationError):
            schedule.new_task("Exam", "2026-02-30")
        with self.assertRaises(schedule.TaskValidationError):
            schedule.new_task("Exam", "2026-06-15", priority="urgent")

    def test_update_toggle_delete(self):
        tasks = (task("a", "2026-06-01"), task("b", "2026-06-02"))
        tasks = schedule.update_task(tasks, "a", title="Physics exam", priority="high")
        self.assertEqual(tasks[0].title, "Physics exam")
        tasks = schedule.toggle_completion(tasks, "b")
        self.assertTrue(tasks[1].completed)
        tasks = schedule.delete_task(tasks, "a")
        self.assertEqual([t.id for t in tasks], ["b"])
        with self.assertRaises(KeyError):
            schedule.delete_task(tasks, "a")

    def test_invalid_update_is_rejected(self):
        tasks = (task("a", "2026-06-01"),)
        with self.assertRaises(schedule.TaskValidationError):
            schedule.update_task(tasks, "a", time="25:00")


class TaskQueryTests(unittest.TestCase):
    def setUp(self):
        self.today = date(2026, 5, 20)
        self.tasks = (
            task("past", "2026-05-01"),
            task("late", "2026-06-05", "23:59"),
            task("done", "2026-05-21", completed=True),
            task("today-b", "2026-05-20", "14:00"),
            task("today-a", "2026-05-20", "08:00"),
            task("soon", "2026-05-25"),
        )

    def test_upcoming_sorted_and_limited(self):
        upcoming = schedule.upcoming_tasks(self.tasks, self.today)
        self.assertEqual([t.id for t in upcoming], ["today-a", "today-b", "soon"])

    def test_tasks_for_date(self):
        self.assertEqual([t.id for t in schedule.tasks_for_date(self.tasks, self.today)], ["today-b", "today-a"])
        self.assertEqual(len(schedule.todays_tasks(self.tasks, self.today)), 2)

    def test_days_until(self):
        self.assertEqual(schedule.days_until(self.tasks[5], self.today), 5)
        self.assertEqual(schedule.days_until(self.tasks[0], self.today), -19)

    def test_month_grid(self):
        grid = schedule.month_grid(2026, 2)
        self.assertEqual(len(grid), 4)
        self.assertEqual(grid[0], [1, 2, 3, 4, 5, 6, 7])
        march = schedule.month_grid(2026, 3)
        self.assertEqual(march[0][0], 1)
        self.assertIsNone(march[-1][-1])


if __name__ == "__main__":
    unittest.main()
