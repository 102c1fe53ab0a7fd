from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class ModelConfig:
    name: str
    max_input_tokens: int
    max_output_tokens: int


# 内置模型表：展示名称、输入 token 上限、输出 token 上限
KNOWN_MODELS: dict[str, ModelConfig] = {
    "gpt-3.5-turbo": ModelConfig(name="GPT-3.5 Turbo", max_input_tokens=16385, max_output_tokens=4096),
    "gpt-4": ModelConfig(name="GPT-4", max_input_tokens=8192, max_output_tokens=4096),
    "gpt-4-turbo": ModelConfig(name="GPT-4 Turbo", max_input_tokens=128000, max_output_tokens=4096),
    "gpt-4o": ModelConfig(name="GPT-4o", max_input_tokens=128000, max_output_tokens=16384),
    "gpt-4o-mini": ModelConfig(name="GPT-4o mini", max_input_tokens=128000, max_output_tokens=16384),
    "claude-3-5-sonnet-latest": ModelConfig(
        name="Claude 3.5 Sonnet", max_input_tokens=200000, max_output_tokens=8192
    ),
    "claude-3-5-haiku-latest": ModelConfig(
        name="Claude 3.5 Haiku", max_input_tokens=200000, max_output_tokens=8192
    ),
    "gemini-1.5-flash": ModelConfig(name="Gemini 1.5 Flash", max_input_tokens=1048576, max_output_tokens=8192),
    "gemini-1.5-pro": ModelConfig(name="Gemini 1.5 Pro", max_input_tokens=2097152, max_output_tokens=8192),
}

# 未知模型按最保守的上限处理
_FALLBACK_INPUT_TOKENS = 4096
_FALLBACK_OUTPUT_TOKENS = 1024


class ModelRegistry:
    def __init__(self, overrides: Mapping[str, ModelConfig] | None = None) -> None:
        self._models = dict(KNOWN_MODELS)
        if overrides:
            self._models.update(overrides)

    def get_model_config(self, model_id: str) -> ModelConfig:
        config = self._models.get(model_id)
        if config is not None:
            return config
        return ModelConfig(
            name=model_id,
            max_input_tokens=_FALLBACK_INPUT_TOKENS,
            max_output_tokens=_FALLBACK_OUTPUT_TOKENS,
        )
