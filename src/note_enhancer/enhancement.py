from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class StructureLevel(str, Enum):
    BASIC = "basic"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"


@dataclass(frozen=True)
class EnhancementSettings:
    include_definitions: bool = False
    generate_questions: bool = False
    create_summary: bool = False
    add_examples: bool = False
    structure_level: StructureLevel = StructureLevel.BASIC
    # 仅透传给调用方，不参与提示词组装
    auto_generate_flashcards: bool = False


# 免费用户固定使用的基础配置
BASIC_SETTINGS = EnhancementSettings(
    include_definitions=True,
    generate_questions=False,
    create_summary=False,
    add_examples=False,
    structure_level=StructureLevel.BASIC,
    auto_generate_flashcards=False,
)


def normalize_settings(is_paid: bool, requested: EnhancementSettings | None) -> EnhancementSettings:
    """付费用户原样使用请求配置，免费用户一律替换为基础配置。

    免费用户的请求配置不会被读取，调用方可以直接传 None。
    """
    if not is_paid:
        return BASIC_SETTINGS
    return requested if requested is not None else EnhancementSettings()


@dataclass(frozen=True)
class EnhancementRequest:
    note_id: str | None
    original_content: str
    subject: str
    # 未经校验的原始配置，仅在付费用户时解析
    raw_settings: Any = None
