"""
Taskboard - Drag-and-drop reorder tests
"""

import asyncio

import pytest

from client.cache import TaskListCache
from client.coordinator import OptimisticMutationCoordinator
from client.reorder import (
    DragState,
    GrabRegion,
    GrabSource,
    ReorderInteractionHandler,
    array_move,
)
from errors import InternalError
from tests.fakes import FakeTaskApi, settle


def _ids(cache):
    return [t.id for t in cache.read()]


@pytest.fixture
def handler(sample_tasks):
    api = FakeTaskApi(sample_tasks)
    cache = TaskListCache(api.list_tasks)
    cache.write(api.server_list())
    coordinator = OptimisticMutationCoordinator(api, cache)
    return ReorderInteractionHandler(cache, coordinator)


class TestArrayMove:

    def test_move_down(self):
        assert array_move([1, 2, 3, 4], 0, 2) == [2, 3, 1, 4]

    def test_move_up(self):
        assert array_move([1, 2, 3, 4], 3, 1) == [1, 4, 2, 3]

    def test_same_index_and_input_untouched(self):
        items = [1, 2, 3]
        assert array_move(items, 1, 1) == [1, 2, 3]
        array_move(items, 0, 2)
        assert items == [1, 2, 3]


class TestGrab:

    def test_only_the_handle_starts_a_drag(self, handler):
        for region in (GrabRegion.CHECKBOX, GrabRegion.ACTIONS, GrabRegion.BODY):
            assert handler.grab(1, region) is False
            assert handler.state == DragState.IDLE

        assert handler.grab(1, GrabRegion.HANDLE) is True
        assert handler.state == DragState.DRAGGING
        assert handler.active_id == 1

    def test_unknown_task_is_ignored(self, handler):
        assert handler.grab(42) is False
        assert handler.state == DragState.IDLE

    def test_second_grab_while_dragging_is_ignored(self, handler):
        handler.grab(1)
        assert handler.grab(2) is False
        assert handler.active_id == 1

    def test_keyboard_moves_are_clamped(self, handler):
        handler.grab(2, source=GrabSource.KEYBOARD)
        handler.move_by(1)
        assert handler.over_id == 3
        handler.move_by(5)
        assert handler.over_id == 3
        handler.move_by(-10)
        assert handler.over_id == 1

    def test_cancel_returns_to_idle(self, handler):
        handler.grab(1)
        handler.hover(3)
        handler.cancel()
        assert handler.state == DragState.IDLE
        assert handler.active_id is None


@pytest.mark.asyncio
class TestRelease:

    async def test_drop_on_own_position_does_nothing(self, handler):
        api = handler.coordinator.api
        version = handler.cache.version

        handler.grab(2)
        assert await handler.release(2) is False

        assert handler.state == DragState.IDLE
        assert api.count("update_order") == 0
        assert handler.cache.version == version

    async def test_drop_outside_the_list_does_nothing(self, handler):
        api = handler.coordinator.api
        version = handler.cache.version

        handler.grab(1)
        handler.hover(None)
        assert await handler.release() is False

        assert api.count("update_order") == 0
        assert handler.cache.version == version

    async def test_release_without_drag_does_nothing(self, handler):
        assert await handler.release(3) is False
        assert handler.coordinator.api.count("update_order") == 0

    async def test_drop_moves_a_single_element(self, handler):
        api = handler.coordinator.api

        handler.grab(1)
        handler.hover(3)
        assert await handler.release() is True

        assert _ids(handler.cache) == [2, 3, 1]
        assert api.calls[-1] == ("update_order", ([2, 3, 1],))
        assert api.count("update_order") == 1
        await handler.cache.wait_for_refresh()
        assert [t.order for t in handler.cache.read()] == [1.0, 2.0, 3.0]

    async def test_keyboard_drop(self, handler):
        handler.grab(3, source=GrabSource.KEYBOARD)
        handler.move_by(-1)
        assert await handler.release() is True
        assert _ids(handler.cache) == [1, 3, 2]

    async def test_failed_save_restores_previous_order(self, handler):
        api = handler.coordinator.api
        api.fail_next("update_order", InternalError("Failed to save the new order"))

        handler.grab(3)
        assert await handler.release(1) is True

        assert _ids(handler.cache) == [1, 2, 3]
        assert handler.coordinator.notifications.active()

    async def test_scheduled_drop_reorders_before_the_server_answers(self, handler):
        api = handler.coordinator.api
        api.hold("update_order")

        handler.grab(1)
        handler.hover(2)
        pending = asyncio.create_task(handler.release())
        await settle(lambda: api.count("update_order") == 1)

        assert handler.state == DragState.IDLE
        assert _ids(handler.cache) == [2, 1, 3]
        assert not pending.done()

        api.release("update_order")
        assert await pending is True
        await handler.cache.wait_for_refresh()
        assert _ids(handler.cache) == [2, 1, 3]
