# src/catalog_lib/enrichment.py
"""
Enrichment client: turn one record into a prompt, ask the model once, and
return the subset of expected fields it answered.

Failures (transport errors, malformed JSON, a response with the wrong shape)
are logged and produce an empty partial, so the caller's record stays as it
was and the batch moves on.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from jinja2 import TemplateError

from .llm import LLMClient, LLMClientError, PromptLibrary
from .models import EntitySchema
from .records import Record, coerce_value

logger = logging.getLogger(__name__)


class EnrichmentShapeError(ValueError):
    """Raised when a response does not carry the expected fields."""


def extract_fields(data: Any, fields: tuple) -> Dict[str, Optional[str]]:
    """Keep only ``fields`` from a JSON object response, coercing values to strings."""
    if not isinstance(data, dict):
        raise EnrichmentShapeError(f"Expected a JSON object, got {type(data).__name__}")
    present = [f for f in fields if f in data]
    if not present:
        raise EnrichmentShapeError(
            f"Response has none of the expected fields ({', '.join(fields)})"
        )
    return {f: coerce_value(data[f]) for f in present}


class EntityEnricher:
    """Enrichment client bound to one entity schema."""

    def __init__(
        self,
        schema: EntitySchema,
        llm: LLMClient,
        prompts: PromptLibrary,
        system_prompt: Optional[str] = None,
    ) -> None:
        self.schema = schema
        self.llm = llm
        self.prompts = prompts
        self.system_prompt = system_prompt or prompts.system_prompt()

    def build_prompt(self, record: Record, context: Optional[Mapping[str, Record]] = None) -> str:
        ctx = dict(context or {})
        return self.prompts.render(
            self.schema.prompt_template,
            record=record,
            schema=self.schema,
            fields=self.schema.enrich_fields,
            context=ctx,
            **ctx,
        )

    def enrich(self, record: Record, context: Optional[Mapping[str, Record]] = None) -> Dict[str, Optional[str]]:
        """Return the partial record proposed by the model, or ``{}`` on failure."""
        label = self.schema.label(record)
        logger.info("Enriching %s record: %s", self.schema.name, label)
        try:
            prompt = self.build_prompt(record, context)
            data = self.llm.json_call(self.system_prompt, prompt)
            partial = extract_fields(data, self.schema.enrich_fields)
        except (LLMClientError, EnrichmentShapeError, TemplateError) as exc:
            logger.error("Failed to enrich %s record %s: %s", self.schema.name, label, exc)
            return {}
        return partial
