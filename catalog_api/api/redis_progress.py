import asyncio
import json
import logging
import redis.asyncio as aioredis
from catalog_api.config import settings
from catalog_api.api.websocket import manager
from catalog_api.tasks.import_task import PROGRESS_CHANNEL

logger = logging.getLogger(__name__)


async def handle_progress_message(payload: dict) -> None:
    """Route one worker message to the WebSocket clients of its task."""
    msg_type = payload.get('type')
    task_id = payload.get('task_id')
    if not task_id:
        return

    if msg_type == 'progress':
        await manager.broadcast_progress(
            task_id,
            float(payload.get('progress', 0.0)),
            int(payload.get('processed', 0)),
            int(payload.get('total', 0)),
            payload.get('errors', []) or []
        )
    elif msg_type == 'complete':
        counts = {
            key: payload[key]
            for key in ('processed', 'total', 'success_count', 'error_count')
            if key in payload
        }
        await manager.broadcast_complete(
            task_id,
            bool(payload.get('success', True)),
            payload.get('message', ''),
            **counts
        )
    else:
        logger.warning("Unknown progress message type: %s", msg_type)


async def redis_progress_subscriber() -> None:
    """Subscribe to the import progress channel and forward messages to WebSocket clients."""
    redis_client = aioredis.from_url(settings.redis_url)
    pubsub = redis_client.pubsub()
    await pubsub.subscribe(PROGRESS_CHANNEL)
    logger.info("Subscribed to Redis '%s' channel", PROGRESS_CHANNEL)

    try:
        async for message in pubsub.listen():
            if message is None or message.get('type') != 'message':
                continue
            data = message.get('data')
            if not data:
                continue
            if isinstance(data, bytes):
                data = data.decode('utf-8')

            try:
                await handle_progress_message(json.loads(data))
            except (ValueError, TypeError) as e:
                logger.error("Dropping malformed progress message %r: %s", data, e)
                await asyncio.sleep(0.1)
    finally:
        await pubsub.aclose()
        await redis_client.aclose()
