from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from taskrelay.core.orchestration.router import MessageRouter

from .deps import get_router

router = APIRouter()


@router.post("", status_code=202)
async def dispatch_command(message: dict[str, Any], message_router: MessageRouter = Depends(get_router)) -> dict[str, bool]:
    # Outcomes, failures included, arrive as broadcasts on /events.
    await message_router.dispatch(message)
    return {"accepted": True}
