from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .config import AppConfig
from .entitlements import IdentityResolver, TokenIdentityResolver
from .pipeline import NoteEnhancementPipeline
from .responses import unauthorized
from .schemas import EnhanceNoteResponse

logger = logging.getLogger(__name__)


def create_app(
    config: AppConfig,
    pipeline: NoteEnhancementPipeline | None = None,
    identity_resolver: IdentityResolver | None = None,
) -> FastAPI:
    pipeline = pipeline or NoteEnhancementPipeline(config)
    identity_resolver = identity_resolver or TokenIdentityResolver(config.auth)

    app = FastAPI(title="Note Enhancer API", description="使用 LLM 增强学生笔记")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/enhance-note", response_model=EnhanceNoteResponse)
    async def enhance_note(request: Request) -> JSONResponse:
        # 先鉴权，再解析请求体
        identity = identity_resolver.resolve(request.headers.get("authorization"))
        if identity is None:
            logger.info("未认证的增强请求")
            result = unauthorized()
            return JSONResponse(status_code=result.status_code, content=result.to_dict())

        payload: Any
        try:
            payload = await request.json()
        except ValueError:
            logger.warning("请求体不是合法 JSON, user: %s", identity.user_id)
            payload = None

        # LLM 调用是阻塞的，放到线程池中执行
        result = await run_in_threadpool(pipeline.enhance, identity, payload)
        return JSONResponse(status_code=result.status_code, content=result.to_dict())

    return app
