"""补全服务的两种实现：本地占位（未配置凭证时）与远程 LLM 调用。

具体使用哪一种在进程装配时由 `build_provider` 决定一次。
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Protocol

from .config import LLMConfig
from .llm_client import LLMClient

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
PLACEHOLDER_PROCESSING_TIME_MS = 1000

_WHITESPACE_RE = re.compile(r"\s+")


def count_words(text: str) -> int:
    """按连续空白切分计数；与前端的计数方式保持一致，空串计为 1。"""
    return len(_WHITESPACE_RE.split(text))


@dataclass(frozen=True)
class CompletionRequest:
    model: str
    system_prompt: str
    user_prompt: str
    max_output_tokens: int
    subject: str
    original_content: str
    temperature: float = DEFAULT_TEMPERATURE


@dataclass(frozen=True)
class Completion:
    content: str
    processing_time_ms: int
    word_count: int


class CompletionProvider(Protocol):
    def complete(self, request: CompletionRequest) -> Completion: ...


def build_placeholder_document(subject: str, original_content: str) -> str:
    return (
        f"# Enhanced: {subject}\n"
        "\n"
        "## Summary\n"
        "This is a mock enhancement since no OpenAI API key is configured. "
        "Please add your OpenAI API key to the .env.local file for full functionality.\n"
        "\n"
        "## Original Content\n"
        f"{original_content}\n"
        "\n"
        "## Study Questions\n"
        "1. What are the main points covered in this content?\n"
        "2. How can you apply these concepts in practice?\n"
        "3. What questions do you have about this material?\n"
        "\n"
        "## Key Terms\n"
        "- **Term**: Definition would appear here with real API\n"
        "- **Concept**: Explanation would appear here with real API\n"
        "\n"
        "---\n"
        "\n"
    )


class StubProvider:
    """不访问网络，返回固定结构的占位文档。"""

    def complete(self, request: CompletionRequest) -> Completion:
        logger.info("未配置 LLM 凭证, 返回占位内容, subject: %s", request.subject)
        content = build_placeholder_document(request.subject, request.original_content)
        return Completion(
            content=content,
            processing_time_ms=PLACEHOLDER_PROCESSING_TIME_MS,
            word_count=count_words(content),
        )


class RemoteProvider:
    def __init__(self, client: LLMClient) -> None:
        self._client = client

    def complete(self, request: CompletionRequest) -> Completion:
        start = time.monotonic()
        content = self._client.generate(
            system_prompt=request.system_prompt,
            user_content=request.user_prompt,
            max_tokens=request.max_output_tokens,
            temperature=request.temperature,
            model=request.model,
        )
        elapsed_ms = int((time.monotonic() - start) * 1000)
        return Completion(content=content, processing_time_ms=elapsed_ms, word_count=count_words(content))


def build_provider(config: LLMConfig) -> CompletionProvider:
    if not config.api_key:
        logger.warning("未配置 OPENAI_API_KEY, 使用占位响应")
        return StubProvider()
    return RemoteProvider(LLMClient(config))
