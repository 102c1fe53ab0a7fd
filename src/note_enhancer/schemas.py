from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enhancement import EnhancementRequest, EnhancementSettings, StructureLevel


class EnhancementSettingsPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    include_definitions: bool = Field(False, alias="includeDefinitions")
    generate_questions: bool = Field(False, alias="generateQuestions")
    create_summary: bool = Field(False, alias="createSummary")
    add_examples: bool = Field(False, alias="addExamples")
    structure_level: StructureLevel = Field(StructureLevel.BASIC, alias="structureLevel")
    auto_generate_flashcards: bool = Field(False, alias="autoGenerateFlashcards")

    def to_settings(self) -> EnhancementSettings:
        return EnhancementSettings(
            include_definitions=self.include_definitions,
            generate_questions=self.generate_questions,
            create_summary=self.create_summary,
            add_examples=self.add_examples,
            structure_level=self.structure_level,
            auto_generate_flashcards=self.auto_generate_flashcards,
        )


class EnhanceNoteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # noteId 仅透传，不参与处理
    note_id: Any = Field(None, alias="noteId")
    original_content: str = Field(..., alias="originalContent")
    subject: Any = ""
    # 此处不校验：免费用户的配置不会被读取
    enhancement_settings: Any = Field(None, alias="enhancementSettings")

    def to_request(self) -> EnhancementRequest:
        return EnhancementRequest(
            note_id=None if self.note_id is None else str(self.note_id),
            original_content=self.original_content,
            subject="" if self.subject is None else str(self.subject),
            raw_settings=self.enhancement_settings,
        )


def parse_settings(raw: Any) -> EnhancementSettings:
    """严格校验请求中的增强配置；缺省时所有增强项关闭。"""
    return EnhancementSettingsPayload.model_validate(raw if raw is not None else {}).to_settings()


class EnhanceNoteResponse(BaseModel):
    """仅用于 OpenAPI 文档；实际响应由 EnhancementResult.to_dict() 生成。"""

    success: bool
    enhancedContent: str | None = None
    processingTime: int | None = None
    wordCount: int | None = None
    error: str | None = None
    details: str | None = None
    estimatedTokens: int | None = None
    maxTokens: int | None = None
