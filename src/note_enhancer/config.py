from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .model_registry import ModelConfig

DEFAULT_MODEL = "gpt-3.5-turbo"
SUPPORTED_PROVIDERS = ("openai", "anthropic", "gemini")


@dataclass
class LLMConfig:
    provider: str = "openai"
    # 为空时走占位响应路径，不调用远程模型
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    base_url: str | None = None


@dataclass
class AuthUser:
    user_id: str
    plans: list[str] = field(default_factory=list)


@dataclass
class AuthConfig:
    # Bearer token -> 用户
    tokens: dict[str, AuthUser] = field(default_factory=dict)


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    # 覆盖或扩展内置模型表
    models: dict[str, ModelConfig] = field(default_factory=dict)


def _require(mapping: dict[str, Any], key: str) -> Any:
    if key not in mapping or mapping[key] in ("", None):
        raise ValueError(f"配置缺少必填字段: {key}")
    return mapping[key]


def _build_llm_config(llm_raw: dict[str, Any], env: dict[str, str]) -> LLMConfig:
    provider = (env.get("LLM_PROVIDER") or llm_raw.get("provider") or "openai").lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"不支持的 LLM provider: {provider}")

    # 环境变量优先于配置文件
    api_key = env.get("OPENAI_API_KEY") or llm_raw.get("api_key") or None
    model = env.get("OPENAI_MODEL") or llm_raw.get("model") or DEFAULT_MODEL
    base_url = env.get("OPENAI_BASE_URL") or llm_raw.get("base_url") or None

    return LLMConfig(provider=provider, api_key=api_key, model=model, base_url=base_url)


def _build_auth_config(auth_raw: dict[str, Any]) -> AuthConfig:
    tokens: dict[str, AuthUser] = {}
    for token, user_raw in (auth_raw.get("tokens") or {}).items():
        user_raw = user_raw or {}
        plans = user_raw.get("plans") or []
        if not isinstance(plans, list):
            raise ValueError(f"auth.tokens.{token}.plans 必须为列表")
        tokens[str(token)] = AuthUser(
            user_id=str(_require(user_raw, "user_id")),
            plans=[str(plan).lower() for plan in plans],
        )
    return AuthConfig(tokens=tokens)


def _build_models(models_raw: dict[str, Any]) -> dict[str, ModelConfig]:
    models: dict[str, ModelConfig] = {}
    for model_id, entry in models_raw.items():
        entry = entry or {}
        models[str(model_id)] = ModelConfig(
            name=str(entry.get("name") or model_id),
            max_input_tokens=int(_require(entry, "max_input_tokens")),
            max_output_tokens=int(_require(entry, "max_output_tokens")),
        )
    return models


def load_config(path: str | Path | None = None, env: dict[str, str] | None = None) -> AppConfig:
    """加载 YAML 配置（可选），再叠加环境变量覆盖。"""
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"配置文件不存在: {path}")
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    env = dict(os.environ) if env is None else env

    llm = _build_llm_config(raw.get("llm") or {}, env)
    auth = _build_auth_config(raw.get("auth") or {})

    server_raw = raw.get("server") or {}
    server = ServerConfig(
        host=server_raw.get("host", "127.0.0.1"),
        port=int(server_raw.get("port", 8000)),
    )

    return AppConfig(llm=llm, auth=auth, server=server, models=_build_models(raw.get("models") or {}))
