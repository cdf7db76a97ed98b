# Daily Records Feature - Socket.IO Server

import asyncio
import socketio
from typing import Any, Dict, Optional
from app.core.logging import logger
from app.database import get_store
from app.features.auth.service import AuthService
from app.features.records.sync import DailyRecordSynchronizer, Subscription
from app.shared.dates import format_record_date


# Create Socket.IO server with ASGI support
sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*",  # In production, restrict this
    logger=False,
    engineio_logger=False,
)

# Connected devices: {sid: principal_id}
connected_devices: Dict[str, str] = {}

# The one date each socket follows: {sid: (subscription, forwarding task)}
watched_dates: Dict[str, Dict[str, Any]] = {}

# Number of the latest watch/unwatch request per socket: {sid: request}
watch_requests: Dict[str, int] = {}


def _next_request(sid: str) -> int:
    request = watch_requests.get(sid, 0) + 1
    watch_requests[sid] = request
    return request


def _stop_watching(sid: str) -> Optional[str]:
    """Cancel the socket's current subscription; returns the date it followed."""
    watch = watched_dates.pop(sid, None)
    if not watch:
        return None

    subscription: Subscription = watch["subscription"]
    subscription.cancel()
    watch["task"].cancel()
    return subscription.date


async def _forward_snapshots(sid: str, subscription: Subscription) -> None:
    """Emit every snapshot of the subscription to its socket."""
    async for snapshot in subscription:
        # A newer watch_date for this socket supersedes this stream
        current = watched_dates.get(sid)
        if not current or current["subscription"] is not subscription:
            return
        await sio.emit("record_snapshot", snapshot.model_dump(mode="json"), room=sid)


@sio.event
async def connect(sid, environ, auth):
    """Handle client connection; requires an anonymous identity token."""
    token = (auth or {}).get("token")
    principal = AuthService.principal_from_token(token) if token else None

    if principal is None:
        logger.warning(f"Socket authentication failed: {sid}")
        return False  # Reject connection

    connected_devices[sid] = principal.principal_id
    logger.info(f"Socket connected: {sid} (principal {principal.principal_id})")

    await sio.emit("connected", {
        "message": "Connected successfully",
        "principal_id": principal.principal_id,
    }, room=sid)

    return True


@sio.event
async def disconnect(sid):
    """Handle client disconnection."""
    connected_devices.pop(sid, None)
    watch_requests.pop(sid, None)
    date_key = _stop_watching(sid)
    logger.info(f"Socket disconnected: {sid}" + (f" (was watching {date_key})" if date_key else ""))


@sio.event
async def watch_date(sid, data):
    """
    Follow one calendar date, replacing any previously watched date.

    Args:
        data: {"date": "YYYY-MM-DD"}
    """
    if sid not in connected_devices:
        await sio.emit("error", {"message": "Not authenticated"}, room=sid)
        return

    try:
        date_key = format_record_date((data or {}).get("date", ""))
    except (ValueError, TypeError):
        await sio.emit("error", {"message": "date must be YYYY-MM-DD"}, room=sid)
        return

    request = _next_request(sid)
    previous = _stop_watching(sid)
    if previous:
        logger.info(f"Socket {sid} switching from {previous} to {date_key}")

    synchronizer = DailyRecordSynchronizer(get_store())
    subscription = await synchronizer.observe(date_key)

    # The socket may have disconnected or sent a newer request while loading
    if sid not in connected_devices or watch_requests.get(sid) != request:
        logger.debug(f"Socket {sid} dropped superseded watch of {date_key}")
        subscription.cancel()
        return

    _stop_watching(sid)
    task = asyncio.create_task(_forward_snapshots(sid, subscription))
    watched_dates[sid] = {"subscription": subscription, "task": task}

    await sio.emit("watching", {"date": date_key}, room=sid)


@sio.event
async def unwatch_date(sid, data=None):
    """Stop following the current date, including one still loading."""
    if sid in connected_devices:
        _next_request(sid)
    date_key = _stop_watching(sid)
    if date_key:
        await sio.emit("unwatched", {"date": date_key}, room=sid)


# Create ASGI app for Socket.IO
socket_app = socketio.ASGIApp(sio)
