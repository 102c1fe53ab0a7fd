from __future__ import annotations

import logging
from typing import Any

from .budget import check_token_budget
from .config import AppConfig
from .enhancement import normalize_settings
from .entitlements import Identity, resolve_capabilities
from .errors import CapacityExceededFault, ContentTooLargeError, ProviderFault, RateLimitedFault
from .model_registry import ModelRegistry
from .prompts import SYSTEM_PROMPT, build_enhancement_prompt
from .providers import CompletionProvider, CompletionRequest, build_provider
from .responses import EnhancementResult, content_too_large, internal_failure, map_fault, success, unauthorized
from .schemas import EnhanceNoteRequest, parse_settings

logger = logging.getLogger(__name__)


class NoteEnhancementPipeline:
    def __init__(
        self,
        config: AppConfig,
        provider: CompletionProvider | None = None,
        registry: ModelRegistry | None = None,
    ) -> None:
        self._config = config
        self._registry = registry or ModelRegistry(config.models)
        self._provider = provider or build_provider(config.llm)

    def enhance(self, identity: Identity | None, payload: Any) -> EnhancementResult:
        """执行一次完整的笔记增强，所有结果（含失败）都映射为 EnhancementResult。"""
        if identity is None:
            return unauthorized()

        try:
            return self._enhance(identity, payload)
        except ContentTooLargeError as exc:
            logger.warning("内容超出 token 上限: %d 估算 token, 上限 %d 字符", exc.estimated_tokens, exc.max_tokens)
            return content_too_large(exc)
        except (RateLimitedFault, CapacityExceededFault) as exc:
            logger.warning("LLM 服务返回容量/限流错误, status: %s, code: %s", exc.status_code, exc.code)
            return map_fault(exc)
        except ProviderFault as exc:
            logger.exception("LLM 调用失败, status: %s, code: %s", exc.status_code, exc.code)
            return map_fault(exc)
        except Exception:  # noqa: BLE001
            logger.exception("笔记增强失败, user: %s", identity.user_id)
            return internal_failure()

    def _enhance(self, identity: Identity, payload: Any) -> EnhancementResult:
        request = EnhanceNoteRequest.model_validate(payload).to_request()

        capabilities = resolve_capabilities(identity)
        requested = parse_settings(request.raw_settings) if capabilities.is_paid else None
        settings = normalize_settings(capabilities.is_paid, requested)
        logger.info(
            "开始增强笔记, user: %s, note: %s, 付费: %s, 结构级别: %s",
            identity.user_id,
            request.note_id,
            capabilities.is_paid,
            settings.structure_level.value,
        )

        model = self._config.llm.model
        model_config = self._registry.get_model_config(model)
        logger.info("使用模型: %s (%s)", model, model_config.name)

        check_token_budget(request.original_content, model_config)

        prompt = build_enhancement_prompt(request.subject, request.original_content, settings)
        completion = self._provider.complete(
            CompletionRequest(
                model=model,
                system_prompt=SYSTEM_PROMPT,
                user_prompt=prompt,
                max_output_tokens=model_config.max_output_tokens,
                subject=request.subject,
                original_content=request.original_content,
            )
        )
        logger.info(
            "笔记增强完成, 耗时: %dms, 字数: %d", completion.processing_time_ms, completion.word_count
        )
        return success(completion)
