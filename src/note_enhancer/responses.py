"""把流水线的各个终态映射为固定的响应结构和状态码。

响应中不包含任何原始异常信息，`details` 只放固定的提示文本。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import CapacityExceededFault, ContentTooLargeError, ProviderFault, RateLimitedFault
from .providers import Completion

NOT_AUTHENTICATED_MESSAGE = "Not authenticated"
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait a moment and try again, or reduce the content size."
RATE_LIMIT_DETAILS = "OpenAI rate limit hit. Try with shorter content."
CAPACITY_MESSAGE = "Content too large for processing. Please reduce the content size and try again."
CAPACITY_DETAILS = "Token limit exceeded. Try with shorter content."
INTERNAL_FAILURE_MESSAGE = "Failed to enhance note. Please try again."

# 序列化时的字段名（驼峰）
_FIELD_NAMES = {
    "success": "success",
    "enhanced_content": "enhancedContent",
    "processing_time": "processingTime",
    "word_count": "wordCount",
    "error": "error",
    "details": "details",
    "estimated_tokens": "estimatedTokens",
    "max_tokens": "maxTokens",
}


@dataclass(frozen=True)
class EnhancementResult:
    status_code: int
    success: bool
    enhanced_content: str | None = None
    processing_time: int | None = None
    word_count: int | None = None
    error: str | None = None
    details: str | None = None
    estimated_tokens: int | None = None
    max_tokens: int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for attr, key in _FIELD_NAMES.items():
            value = getattr(self, attr)
            if value is not None:
                payload[key] = value
        return payload


def unauthorized() -> EnhancementResult:
    return EnhancementResult(status_code=401, success=False, error=NOT_AUTHENTICATED_MESSAGE)


def content_too_large(exc: ContentTooLargeError) -> EnhancementResult:
    return EnhancementResult(
        status_code=400,
        success=False,
        error=(
            f"Content too large ({exc.estimated_tokens} estimated tokens). "
            f"Please reduce content to under {exc.max_tokens} characters."
        ),
        estimated_tokens=exc.estimated_tokens,
        max_tokens=exc.max_tokens,
    )


def internal_failure() -> EnhancementResult:
    return EnhancementResult(status_code=500, success=False, error=INTERNAL_FAILURE_MESSAGE)


def map_fault(fault: ProviderFault) -> EnhancementResult:
    if isinstance(fault, RateLimitedFault):
        return EnhancementResult(status_code=429, success=False, error=RATE_LIMIT_MESSAGE, details=RATE_LIMIT_DETAILS)
    if isinstance(fault, CapacityExceededFault):
        # 429 但不是明确的限流码时，按内容过大处理，返回 400
        return EnhancementResult(status_code=400, success=False, error=CAPACITY_MESSAGE, details=CAPACITY_DETAILS)
    return internal_failure()


def success(completion: Completion) -> EnhancementResult:
    return EnhancementResult(
        status_code=200,
        success=True,
        enhanced_content=completion.content,
        processing_time=completion.processing_time_ms,
        word_count=completion.word_count,
    )
