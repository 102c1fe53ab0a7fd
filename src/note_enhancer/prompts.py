"""笔记增强提示词组装。

各段落的拼接顺序固定，顺序决定了模型感知到的指令优先级，不要随意调整。
"""

from __future__ import annotations

from .enhancement import EnhancementSettings, StructureLevel

SYSTEM_PROMPT = (
    "You are an expert educational assistant that helps students improve their notes. "
    "Always respond in markdown format and focus on clarity, organization, and educational value."
)

# 各增强项的指令片段，保留原有换行以保证输出一致
STRUCTURE_INSTRUCTION = (
    "Organize this content with clear headings, bullet points, and logical flow. \n"
    "  Make it easy to read and understand for students."
)
DETAILED_STRUCTURE_INSTRUCTION = "Organize this content with clear headings and bullet points."
DEFINITIONS_INSTRUCTION = (
    "Identify technical terms, jargon, or complex concepts and provide clear, \n"
    "  student-friendly definitions for each. Format as: **Term**: Definition"
)
QUESTIONS_INSTRUCTION = (
    "Generate 3-5 study questions from this content that would help students \n"
    "  test their understanding. Include both factual and conceptual questions."
)
SUMMARY_INSTRUCTION = (
    "Create concise summaries of each major section. Highlight key takeaways \n"
    "  and main points that students should remember."
)
EXAMPLES_INSTRUCTION = (
    "Add relevant examples, analogies, or real-world applications for abstract \n"
    "  concepts mentioned in the content."
)

_PREAMBLE = "You are an expert educational assistant helping to enhance student notes. "
_FRAMING = "Please enhance this content to make it more organized, clear, and study-friendly.\n\n"
_CLOSING = (
    "Please provide the enhanced content in markdown format. "
    "Make it well-structured, easy to read, and study-friendly. "
    "If you add definitions, format them as **Term**: Definition. "
    "If you add questions, format them as ### Study Questions followed by numbered questions. "
    "If you add summaries, format them as ### Summary followed by bullet points."
)


def select_enhancement_instructions(settings: EnhancementSettings) -> list[str]:
    """按固定优先级挑选指令片段。comprehensive 与 detailed 互斥，basic 不贡献任何片段。"""
    instructions: list[str] = []

    if settings.structure_level == StructureLevel.COMPREHENSIVE:
        instructions.append(STRUCTURE_INSTRUCTION)
    elif settings.structure_level == StructureLevel.DETAILED:
        instructions.append(DETAILED_STRUCTURE_INSTRUCTION)

    if settings.include_definitions:
        instructions.append(DEFINITIONS_INSTRUCTION)
    if settings.generate_questions:
        instructions.append(QUESTIONS_INSTRUCTION)
    if settings.create_summary:
        instructions.append(SUMMARY_INSTRUCTION)
    if settings.add_examples:
        instructions.append(EXAMPLES_INSTRUCTION)

    return instructions


def build_enhancement_prompt(subject: str, original_content: str, settings: EnhancementSettings) -> str:
    enhancements = "\n\n".join(select_enhancement_instructions(settings))
    return (
        _PREAMBLE
        + f"The content is from a {subject} class. "
        + _FRAMING
        + f"Original content:\n{original_content}\n\n"
        + f"Enhancement instructions:\n{enhancements}\n\n"
        + _CLOSING
    )
