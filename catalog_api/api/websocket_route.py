import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from catalog_api.api.websocket import manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


@router.websocket("/ws/{task_id}")
async def websocket_endpoint(websocket: WebSocket, task_id: str):
    """WebSocket endpoint for real-time import progress."""
    await manager.connect(websocket, task_id)
    try:
        await websocket.send_json({
            "type": "connected",
            "task_id": task_id,
            "message": f"Connected to task {task_id}"
        })
        logger.info("WebSocket connected for task %s", task_id)

        while True:
            # Any client message is a keep-alive ping
            await websocket.receive_text()
            await websocket.send_json({
                "type": "pong",
                "message": "connection alive",
                "task_id": task_id
            })
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected for task %s", task_id)
    finally:
        manager.disconnect(websocket, task_id)
