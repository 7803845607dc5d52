from typing import Dict, List
from fastapi import WebSocket


class ConnectionManager:
    """Manages WebSocket connections for import progress updates."""

    def __init__(self):
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, task_id: str):
        """Accept a new WebSocket connection for a specific task."""
        await websocket.accept()
        self.active_connections.setdefault(task_id, []).append(websocket)

    def disconnect(self, websocket: WebSocket, task_id: str):
        """Remove a WebSocket connection."""
        if task_id in self.active_connections:
            if websocket in self.active_connections[task_id]:
                self.active_connections[task_id].remove(websocket)
            if not self.active_connections[task_id]:
                del self.active_connections[task_id]

    async def _send_to_task(self, task_id: str, message: dict):
        disconnected = []
        for connection in list(self.active_connections.get(task_id, [])):
            try:
                await connection.send_json(message)
            except Exception:
                # Client went away mid-send
                disconnected.append(connection)

        for conn in disconnected:
            self.disconnect(conn, task_id)

    async def broadcast_progress(self, task_id: str, progress: float, processed: int, total: int, errors: List[dict]):
        """Broadcast progress update to all connections for a task."""
        await self._send_to_task(task_id, {
            "type": "progress",
            "task_id": task_id,
            "progress": progress,
            "processed": processed,
            "total": total,
            "errors": errors
        })

    async def broadcast_complete(self, task_id: str, success: bool, message: str, **counts):
        """Broadcast completion status to all connections for a task."""
        await self._send_to_task(task_id, {
            "type": "complete",
            "task_id": task_id,
            "success": success,
            "message": message,
            **counts
        })


manager = ConnectionManager()
