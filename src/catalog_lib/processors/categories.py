# src/catalog_lib/processors/categories.py
"""
Hierarchical categorisation sheet: columns 1-2 hold Level 1 / Level 2, the
model proposes Levels 3-10 as a JSON array of exactly eight strings which
fill columns 3-10 of the same row.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from jinja2 import TemplateError

from ..enrichment import EnrichmentShapeError
from ..llm import LLMClient, LLMClientError, PromptLibrary
from ..models import EntitySchema
from ..records import Record, coerce_value, is_blank

logger = logging.getLogger(__name__)

LEVEL_COUNT = 8
FIRST_LEVEL_COLUMN = 2
USER_TEMPLATE = "categories_user.jinja"
SYSTEM_PROMPT_FILE = "categories_system.txt"


def level_columns(headers: List[str]) -> List[str]:
    return headers[FIRST_LEVEL_COLUMN:FIRST_LEVEL_COLUMN + LEVEL_COUNT]


def category_schema(headers: List[str]) -> EntitySchema:
    if len(headers) < FIRST_LEVEL_COLUMN:
        raise ValueError("Categorisation sheet needs at least two columns (Level 1, Level 2)")
    cols = tuple(level_columns(headers))
    return EntitySchema(
        name="categories",
        id_field=None,
        completeness_fields=cols,
        enrich_fields=cols,
        label_fields=tuple(headers[:FIRST_LEVEL_COLUMN]),
        timestamps=False,
    )


def empty_levels_skipper(headers: List[str]):
    """Pipeline ``skip`` hook for rows with both Level 1 and Level 2 empty."""
    level1, level2 = headers[0], headers[1]

    def skip(record: Record) -> Optional[str]:
        if is_blank(record.get(level1)) and is_blank(record.get(level2)):
            return "Empty Level 1 and Level 2"
        return None

    return skip


def parse_levels(data) -> List[str]:
    if not isinstance(data, list) or len(data) != LEVEL_COUNT:
        raise EnrichmentShapeError(
            f"Invalid response format. Expected array of {LEVEL_COUNT} items, got: {data!r}"
        )
    return [coerce_value(v) or "" for v in data]


class CategoryEnricher:
    """Enrichment client for one categorisation sheet.

    Same contract as ``EntityEnricher``: ``enrich`` returns the partial
    record, or ``{}`` when the call or the response shape fails.
    """

    def __init__(
        self,
        headers: List[str],
        llm: LLMClient,
        prompts: PromptLibrary,
        system_prompt: Optional[str] = None,
    ) -> None:
        self.headers = headers
        self.columns = level_columns(headers)
        self.llm = llm
        self.prompts = prompts
        self.system_prompt = system_prompt or prompts.system_prompt(SYSTEM_PROMPT_FILE)

    def generate_levels(self, level1: str, level2: str) -> List[str]:
        prompt = self.prompts.render(USER_TEMPLATE, level1=level1, level2=level2)
        # json_object mode only allows objects; the answer here is an array
        data = self.llm.json_call(self.system_prompt, prompt, json_mode=False)
        return parse_levels(data)

    def enrich(self, record: Record, context: Optional[Mapping[str, Record]] = None) -> Dict[str, Optional[str]]:
        level1 = record.get(self.headers[0]) or ""
        level2 = record.get(self.headers[1]) or ""
        try:
            levels = self.generate_levels(level1, level2)
        except (LLMClientError, EnrichmentShapeError, TemplateError) as exc:
            logger.error("Error processing %s - %s: %s", level1, level2, exc)
            return {}
        return {col: value for col, value in zip(self.columns, levels)}
