from __future__ import annotations

import logging
from typing import Any

import anthropic
from anthropic import APIConnectionError as AnthropicConnectionError
from anthropic import APIStatusError as AnthropicStatusError
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from openai import APIConnectionError as OpenAIConnectionError
from openai import APIStatusError as OpenAIStatusError
from openai import OpenAI

from .config import LLMConfig
from .errors import CapacityExceededFault, ProviderFault, RateLimitedFault, TransientFault, UnknownFault

logger = logging.getLogger(__name__)

# 服务端明确表示“限流”的错误码（OpenAI 的 code / Anthropic 的 error.type）
RATE_LIMIT_CODES = frozenset({"rate_limit_exceeded", "rate_limit_error"})


def classify_status_error(status_code: int | None, code: str | None, message: str = "") -> ProviderFault:
    """把 HTTP 状态码和错误码归类为封闭的故障类型集合。"""
    if code in RATE_LIMIT_CODES:
        return RateLimitedFault(message, status_code=status_code, code=code)
    if status_code == 429:
        return CapacityExceededFault(message, status_code=status_code, code=code)
    if status_code is not None and status_code >= 500:
        return TransientFault(message, status_code=status_code, code=code)
    return UnknownFault(message, status_code=status_code, code=code)


def _extract_error_code(exc: Exception) -> str | None:
    code = getattr(exc, "code", None)
    if code:
        return str(code)
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict):
            value = error.get("code") or error.get("type")
            return str(value) if value else None
    return None


class LLMClient:
    def __init__(self, config: LLMConfig) -> None:
        self._config = config
        provider = (config.provider or "openai").lower()
        self._provider = provider
        self._client: Any

        if provider == "openai":
            self._client = OpenAI(api_key=config.api_key, base_url=config.base_url)
        elif provider == "anthropic":
            client_kwargs: dict[str, Any] = {"api_key": config.api_key}
            if config.base_url:
                client_kwargs["base_url"] = config.base_url
            self._client = anthropic.Anthropic(**client_kwargs)
        elif provider == "gemini":
            self._client = genai.Client(
                api_key=config.api_key,
                http_options=types.HttpOptions(base_url=config.base_url),
            )
        else:
            raise ValueError(f"不支持的 LLM provider: {config.provider}")

    def generate(
        self,
        *,
        system_prompt: str | None,
        user_content: str,
        max_tokens: int,
        temperature: float,
        model: str | None = None,
    ) -> str:
        """
        调用底层 LLM 完成一次生成请求。

        - 厂商 SDK 的异常统一转换为 ProviderFault 子类
        - 模型未返回内容时返回空字符串
        - model 为空时使用配置中的模型
        """
        model = model or self._config.model
        logger.info(
            "LLM 生成请求, provider: %s, model: %s, system_prompt 长度: %d, user_content 长度: %d",
            self._provider,
            model,
            len(system_prompt) if system_prompt else 0,
            len(user_content),
        )

        try:
            if self._provider == "openai":
                result = self._generate_with_openai(model, system_prompt, user_content, max_tokens, temperature)
            elif self._provider == "anthropic":
                result = self._generate_with_anthropic(model, system_prompt, user_content, max_tokens, temperature)
            else:
                result = self._generate_with_gemini(model, system_prompt, user_content, max_tokens, temperature)
        except (OpenAIConnectionError, AnthropicConnectionError) as exc:
            raise TransientFault(str(exc)) from exc
        except (OpenAIStatusError, AnthropicStatusError) as exc:
            raise classify_status_error(exc.status_code, _extract_error_code(exc), str(exc)) from exc
        except genai_errors.APIError as exc:
            raise classify_status_error(exc.code, exc.status, str(exc)) from exc
        except Exception as exc:  # noqa: BLE001
            raise UnknownFault(str(exc)) from exc

        logger.info("LLM 生成完成, 响应长度: %d", len(result))
        return result

    def _generate_with_openai(
        self, model: str, system_prompt: str | None, user_content: str, max_tokens: int, temperature: float
    ) -> str:
        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_content})
        resp = self._client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""

    def _generate_with_anthropic(
        self, model: str, system_prompt: str | None, user_content: str, max_tokens: int, temperature: float
    ) -> str:
        kwargs: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": user_content}],
        }
        if system_prompt:
            kwargs["system"] = system_prompt
        resp = self._client.messages.create(**kwargs)

        parts: list[str] = []
        for block in getattr(resp, "content", []) or []:
            if getattr(block, "type", None) == "text":
                parts.append(getattr(block, "text", ""))
        return "".join(parts).strip()

    def _generate_with_gemini(
        self, model: str, system_prompt: str | None, user_content: str, max_tokens: int, temperature: float
    ) -> str:
        # system_prompt 与 user_content 作为多段输入
        contents: list[str] = []
        if system_prompt:
            contents.append(system_prompt)
        contents.append(user_content)

        resp = self._client.models.generate_content(
            model=model,
            contents=contents,
            config=types.GenerateContentConfig(temperature=temperature, max_output_tokens=max_tokens),
        )
        text = getattr(resp, "text", None)
        if text:
            return text
        # 某些情况下，内容可能在 candidates 中
        for cand in getattr(resp, "candidates", None) or []:
            content = getattr(cand, "content", None)
            if not content:
                continue
            for part in getattr(content, "parts", None) or []:
                if getattr(part, "text", None):
                    return part.text
        return ""
