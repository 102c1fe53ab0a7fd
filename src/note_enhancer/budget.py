from __future__ import annotations

import logging
import math

from .errors import ContentTooLargeError
from .model_registry import ModelConfig

logger = logging.getLogger(__name__)

# 粗略估算：1 token ≈ 4 个字符。正向估算与反向换算必须使用同一常数
CHARS_PER_TOKEN = 4


def estimate_token_length(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def check_token_budget(content: str, model_config: ModelConfig) -> int:
    """返回估算 token 数；超过模型输入上限时抛出 ContentTooLargeError。"""
    estimated_tokens = estimate_token_length(content)
    max_tokens = model_config.max_input_tokens
    logger.info("正文 token 估算: %d/%d", estimated_tokens, max_tokens)

    if estimated_tokens > max_tokens:
        raise ContentTooLargeError(
            estimated_tokens=estimated_tokens,
            max_tokens=max_tokens * CHARS_PER_TOKEN,
        )
    return estimated_tokens
