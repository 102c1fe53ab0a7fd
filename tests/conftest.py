"""共享测试 fixtures 和配置。"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from note_enhancer.config import AppConfig, AuthConfig, AuthUser, LLMConfig
from note_enhancer.entitlements import Identity
from note_enhancer.model_registry import ModelConfig
from note_enhancer.providers import Completion, CompletionRequest

# ============================================================
# 配置相关 Fixtures
# ============================================================


@pytest.fixture
def sample_llm_config() -> LLMConfig:
    """创建测试用 LLM 配置。"""
    return LLMConfig(
        provider="openai",
        api_key="test-api-key-12345",
        model="gpt-4o",
    )


@pytest.fixture
def sample_auth_config() -> AuthConfig:
    """创建测试用鉴权配置：免费、学生、专业三类用户。"""
    return AuthConfig(
        tokens={
            "free-token": AuthUser(user_id="user_free", plans=[]),
            "student-token": AuthUser(user_id="user_student", plans=["student"]),
            "pro-token": AuthUser(user_id="user_pro", plans=["pro"]),
        }
    )


@pytest.fixture
def small_model_config() -> ModelConfig:
    """输入上限 2000 token 的测试模型。"""
    return ModelConfig(name="Tiny Test Model", max_input_tokens=2000, max_output_tokens=512)


@pytest.fixture
def sample_app_config(sample_auth_config: AuthConfig, small_model_config: ModelConfig) -> AppConfig:
    """创建未配置凭证（占位路径）的应用配置。"""
    return AppConfig(
        llm=LLMConfig(provider="openai", api_key=None, model="tiny-model"),
        auth=sample_auth_config,
        models={"tiny-model": small_model_config},
    )


# ============================================================
# 身份相关 Fixtures
# ============================================================


@pytest.fixture
def free_identity() -> Identity:
    return Identity(user_id="user_free")


@pytest.fixture
def student_identity() -> Identity:
    return Identity(user_id="user_student", plans=frozenset({"student"}))


@pytest.fixture
def pro_identity() -> Identity:
    return Identity(user_id="user_pro", plans=frozenset({"pro"}))


# ============================================================
# Provider 替身
# ============================================================


class RecordingProvider:
    """记录调用的补全服务替身，可配置返回值或抛出的异常。"""

    def __init__(self, content: str = "## Enhanced\n\nSome notes", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[CompletionRequest] = []

    def complete(self, request: CompletionRequest) -> Completion:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return Completion(content=self.content, processing_time_ms=42, word_count=len(self.content.split()))


@pytest.fixture
def recording_provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """所有增强项全部开启的请求体。"""
    return {
        "noteId": "note-1",
        "originalContent": "Photosynthesis converts light energy into chemical energy.",
        "subject": "Biology",
        "enhancementSettings": {
            "includeDefinitions": True,
            "generateQuestions": True,
            "createSummary": True,
            "addExamples": True,
            "structureLevel": "comprehensive",
            "autoGenerateFlashcards": True,
        },
    }


# ============================================================
# 路径相关 Fixtures
# ============================================================


@pytest.fixture
def sample_config_path(tmp_path: Path) -> Path:
    """创建临时测试配置文件并返回路径。"""
    config_content = """
llm:
  provider: openai
  api_key: "file-api-key"
  model: "gpt-4o"

auth:
  tokens:
    "student-token":
      user_id: "user_student"
      plans: ["Student"]

server:
  port: 9000

models:
  custom-model:
    name: "Custom"
    max_input_tokens: 1000
    max_output_tokens: 200
"""
    config_path = tmp_path / "test_config.yaml"
    config_path.write_text(config_content, encoding="utf-8")
    return config_path


# ============================================================
# Pytest Hooks
# ============================================================


def pytest_addoption(parser: pytest.Parser) -> None:
    """注册 --run-functional 选项，用于控制真实功能测试执行。"""
    parser.addoption(
        "--run-functional",
        action="store_true",
        default=False,
        help="运行带 functional 标记的真实功能测试，默认跳过以避免调用外部服务",
    )


def pytest_configure(config: pytest.Config) -> None:
    """注册 pytest 标记。"""
    config.addinivalue_line(
        "markers",
        "functional: 需要外部 LLM 服务的真实功能测试",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """默认跳过 functional 测试，除非显式传入 --run-functional。"""
    if config.getoption("--run-functional"):
        return

    skip_marker = pytest.mark.skip(reason="缺少 --run-functional，因此跳过真实功能测试")
    for item in items:
        if "functional" in item.keywords:
            item.add_marker(skip_marker)
