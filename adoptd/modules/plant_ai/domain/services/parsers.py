"""
Parsers for plain-text model answers.

The prompts ask for fixed line formats, so these are forgiving regex
splitters rather than strict grammars.
"""

import re
from typing import Optional

from adoptd.modules.care_advice.domain.services.time_phrases import extract_time_recommendations
from adoptd.modules.plant_ai.domain.models.plant_ai import (
    DiagnosisResult,
    DiagnosisSection,
    PlantIdentification,
)
from adoptd.shared.utils.helpers import clean_whitespace

UNKNOWN_PLANT = "Неизвестное растение"

NAME_PATTERN = re.compile(r"Название:\s*([^\n]+)", re.IGNORECASE)
VARIETY_PATTERN = re.compile(r"Сорт:\s*([^\n]+)", re.IGNORECASE)
ORIGIN_PATTERN = re.compile(r"Происхождение:\s*([^\n]+)", re.IGNORECASE)

BLOCK_SPLIT = re.compile(r"(?=\d+\.\s*)")
HEADING_PATTERN = re.compile(r"^\d+\.\s*([^:]+):?")


def _field(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def parse_identification(text: str) -> PlantIdentification:
    return PlantIdentification(
        name=_field(NAME_PATTERN, text) or UNKNOWN_PLANT,
        variety=_field(VARIETY_PATTERN, text),
        origin=_field(ORIGIN_PATTERN, text),
    )


def parse_diagnosis(text: str) -> DiagnosisResult:
    """
    Split a numbered answer into sections.

    Each block starting with ``N.`` becomes a section; ``N. Heading: rest``
    yields the heading and keeps ``rest`` as the first content line. Time
    recommendations are extracted per block.
    """
    sections = []
    for block in BLOCK_SPLIT.split(text or ""):
        if not block.strip():
            continue
        lines = [clean_whitespace(line) for line in block.split("\n") if line.strip()]
        if not lines:
            continue

        heading = None
        content = lines
        match = HEADING_PATTERN.match(lines[0])
        if match:
            heading = match.group(1).strip()
            remaining = lines[0][match.end():].strip()
            content = ([remaining] if remaining else []) + lines[1:]

        sections.append(DiagnosisSection(
            heading=heading,
            content=content,
            recommendations=extract_time_recommendations(block),
        ))
    return DiagnosisResult(sections=sections)
