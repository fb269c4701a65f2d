import asyncio
from contextlib import suppress

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.engine.notifications import DeliveryApplied, publisher


router = APIRouter()


def delivery_message(notification: DeliveryApplied) -> dict:
    """JSON body pushed to spectators for one applied delivery."""
    event = notification.event
    return {
        "type": "delivery",
        "match_id": notification.match_id,
        "event_id": notification.event_id,
        "sequence": notification.sequence,
        "innings_no": event.innings_no,
        "over_no": event.over_no,
        "ball_no": event.ball_no,
        "label": event.label,
        "runs": notification.runs,
        "wickets": notification.wickets,
        "legal_balls": notification.legal_balls,
        "innings_ended": notification.innings_ended,
        "match_completed": notification.match_completed,
        "result_summary": notification.result_summary,
    }


@router.websocket("/matches/{match_id}/stream")
async def match_stream(ws: WebSocket, match_id: int) -> None:
    """Stream every delivery scored for a match."""
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def on_delivery(notification: DeliveryApplied) -> None:
        if notification.match_id == match_id:
            loop.call_soon_threadsafe(queue.put_nowait, delivery_message(notification))

    unsubscribe = publisher.subscribe(on_delivery)
    await ws.accept()

    async def sender() -> None:
        while True:
            message = await queue.get()
            await ws.send_json(message)

    send_task = asyncio.create_task(sender())
    try:
        while True:
            await ws.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe()
        send_task.cancel()
        with suppress(asyncio.CancelledError):
            await send_task
