"""Progress relay from the worker channel to WebSocket clients."""

from unittest.mock import AsyncMock, patch

from catalog_api.api.redis_progress import handle_progress_message
from catalog_api.api.websocket import ConnectionManager


async def test_progress_message_is_forwarded():
    with patch("catalog_api.api.redis_progress.manager") as manager:
        manager.broadcast_progress = AsyncMock()
        await handle_progress_message({
            "type": "progress", "task_id": "t1", "progress": 50, "processed": 5, "total": 10,
        })

    manager.broadcast_progress.assert_awaited_once_with("t1", 50.0, 5, 10, [])


async def test_complete_message_carries_counts():
    with patch("catalog_api.api.redis_progress.manager") as manager:
        manager.broadcast_complete = AsyncMock()
        await handle_progress_message({
            "type": "complete", "task_id": "t1", "success": False, "message": "failed",
            "success_count": 0,
        })

    manager.broadcast_complete.assert_awaited_once_with("t1", False, "failed", success_count=0)


async def test_messages_without_task_are_ignored():
    with patch("catalog_api.api.redis_progress.manager") as manager:
        manager.broadcast_progress = AsyncMock()
        await handle_progress_message({"type": "progress"})

    manager.broadcast_progress.assert_not_awaited()


async def test_manager_drops_failed_connections():
    manager = ConnectionManager()
    alive, dead = AsyncMock(), AsyncMock()
    dead.send_json.side_effect = RuntimeError("closed")
    await manager.connect(alive, "t1")
    await manager.connect(dead, "t1")

    await manager.broadcast_complete("t1", True, "done", total=3)

    alive.send_json.assert_awaited_once_with(
        {"type": "complete", "task_id": "t1", "success": True, "message": "done", "total": 3}
    )
    assert manager.active_connections["t1"] == [alive]
