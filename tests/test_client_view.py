"""
Taskboard - Task list view and notification tests
"""

from client.cache import TaskListCache
from client.notifications import FAILURE_MESSAGES, NotificationCenter, Operation
from client.view import ListStatus, TaskListView, filter_tasks
from tests.fakes import FakeTaskApi, make_task


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestFilterTasks:

    def test_blank_search_keeps_everything(self, sample_tasks):
        assert filter_tasks(sample_tasks, "") == sample_tasks
        assert filter_tasks(sample_tasks, "   ") == sample_tasks

    def test_case_insensitive_substring_on_title(self, sample_tasks):
        assert [t.id for t in filter_tasks(sample_tasks, "MILK")] == [2]
        assert [t.id for t in filter_tasks(sample_tasks, " call ")] == [3]

    def test_description_is_not_searched(self, sample_tasks):
        assert filter_tasks(sample_tasks, "Description") == []

    def test_keeps_relative_order(self):
        tasks = [make_task(5, "b plan"), make_task(1, "a plan"), make_task(3, "other")]
        assert [t.id for t in filter_tasks(tasks, "plan")] == [5, 1]


class TestTaskListView:

    def test_status_follows_cache(self, sample_tasks):
        cache = TaskListCache(FakeTaskApi().list_tasks)
        view = TaskListView(cache)
        assert view.status == ListStatus.LOADING

        cache.write([])
        assert view.status == ListStatus.EMPTY

        cache.write(sample_tasks)
        assert view.status == ListStatus.READY
        assert [t.id for t in view.visible] == [1, 2, 3]

        view.set_search("nothing like this")
        assert view.status == ListStatus.NO_MATCHES
        assert view.visible == []
        assert len(view.tasks) == 3

    def test_close_stops_updates(self, sample_tasks):
        cache = TaskListCache(FakeTaskApi().list_tasks)
        cache.write(sample_tasks)
        view = TaskListView(cache)
        view.close()

        cache.write(sample_tasks[:1])
        assert len(view.tasks) == 3


class TestNotificationCenter:

    def test_push_uses_operation_message(self):
        center = NotificationCenter()
        notification = center.push(Operation.DELETE, "Task 2 not found")
        assert notification.message == FAILURE_MESSAGES[Operation.DELETE]
        assert notification.text == "Failed to delete task: Task 2 not found"

    def test_one_notification_per_operation(self):
        center = NotificationCenter()
        center.push(Operation.TOGGLE, "first")
        center.push(Operation.REORDER)
        latest = center.push(Operation.TOGGLE, "second")

        active = center.active()
        assert [n.operation for n in active] == [Operation.REORDER, Operation.TOGGLE]
        assert active[-1] is latest

    def test_expire_after_ttl(self):
        clock = FakeClock()
        center = NotificationCenter(ttl=4.0, clock=clock)
        center.push(Operation.UPDATE)

        clock.now += 3.9
        assert len(center.active()) == 1
        clock.now += 0.2
        assert center.active() == []

    def test_dismiss(self):
        center = NotificationCenter()
        notification = center.push(Operation.CREATE)
        assert center.dismiss(notification.id) is True
        assert center.dismiss(notification.id) is False
        assert center.active() == []
