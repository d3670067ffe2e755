"""
Webhook relay routes

- POST /create        注册目标 URL
- POST /hook/{id}     转发请求体到目标 URL
- GET  /logs/{id}     查看最近的转发记录
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from fastapi import APIRouter, Form, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from ...relay import HookStore, RelayLog, forward_payload

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_store(request: Request) -> HookStore:
    return request.app.state.hook_store


@router.post("/create", response_class=PlainTextResponse)
def create_hook(request: Request, target_url: str = Form("")):
    if not target_url.strip():
        return PlainTextResponse("请输入目标 URL", status_code=400)

    hook = _get_store(request).create(target_url.strip())
    return (
        "✅ Webhook 已创建！\n\n"
        f"📥 请求地址：/hook/{hook.id}\n"
        f"📊 日志查看：/logs/{hook.id}"
    )


@router.api_route("/hook/{hook_id}", methods=["POST", "PUT"], response_class=PlainTextResponse)
async def relay_hook(hook_id: str, request: Request):
    store = _get_store(request)
    hook = store.get(hook_id)
    if hook is None:
        return PlainTextResponse("Webhook 不存在", status_code=404)

    body = await request.body()
    timeout = getattr(request.app.state, "http_timeout", None) or 10.0
    status = await asyncio.to_thread(forward_payload, hook.target_url, body, None, timeout)

    store.record(
        hook_id,
        RelayLog(
            timestamp=datetime.now(),
            body=body.decode("utf-8", errors="replace"),
            status_code=status,
        ),
    )
    logger.info(f"Relay: hook {hook_id} forwarded, status {status}")
    return f"转发完成，状态码：{status}"


@router.get("/logs/{hook_id}")
def hook_logs(hook_id: str, request: Request):
    logs = _get_store(request).logs(hook_id)
    if logs is None:
        return PlainTextResponse("Webhook 不存在", status_code=404)
    return JSONResponse(content=[entry.to_dict() for entry in logs])
