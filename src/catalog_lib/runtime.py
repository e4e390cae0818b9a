"""Shared wiring for the numbered scripts: settings, logging, clients."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, Optional

from .backup import backup_timestamp
from .config import Settings, load_settings, require_api_key
from .csv_utils import load_records
from .errors import MissingPreconditionError
from .enrichment import EntityEnricher
from .llm import LLMClient, PromptLibrary
from .logging_utils import setup_logging
from .models import EntitySchema, Reference
from .pipeline import EnrichmentPipeline, PipelineReport, PrepareHook
from .rate import RateLimiter
from .xref import Index, index_records

logger = logging.getLogger(__name__)


def bootstrap(script: str, config_path: Optional[str] = None) -> Settings:
    """Load settings and log to the console plus ``logs/<script>_<stamp>.txt``."""
    settings = load_settings(config_path)
    log_file = settings.logs_dir / f"{script}_{backup_timestamp()}.txt"
    setup_logging(settings.log_level, log_file=log_file)
    logger.info("Logging to %s", log_file)
    return settings


def build_llm(settings: Settings) -> LLMClient:
    return LLMClient(
        model=settings.model,
        api_key=require_api_key(),
        temperature=settings.temperature,
        max_tokens=settings.max_output_tokens,
        timeout_s=settings.timeout_s,
    )


def build_prompts(settings: Settings) -> PromptLibrary:
    return PromptLibrary(settings.prompts_dir)


def build_enricher(schema: EntitySchema, settings: Settings, llm: Optional[LLMClient] = None) -> EntityEnricher:
    return EntityEnricher(schema, llm or build_llm(settings), build_prompts(settings))


def build_limiter(delay_ms: int) -> RateLimiter:
    return RateLimiter(delay_ms)


def load_references(schema: EntitySchema, settings: Settings) -> Dict[str, Index]:
    """Index every entity ``schema`` refers to, keyed by the join field.

    A referenced file that does not exist is a missing precondition.
    """
    refs: Dict[str, Index] = {}
    for ref in schema.references:
        path: Path = settings.data_file(ref.entity)
        if not path.exists():
            raise MissingPreconditionError(
                f"{path.name} not found; process {ref.entity} before {schema.name}"
            )
        refs[ref.field] = index_records(load_records(path), ref.key_field)
        logger.info("Indexed %d %s records", len(refs[ref.field]), ref.entity)
    return refs


def parse_reference(value: str) -> Reference:
    """Parse a ``field:entity[:key_field]`` command-line reference.

    The referenced records reach the prompt under the entity name.
    """
    parts = [p.strip() for p in value.split(":")]
    if len(parts) not in (2, 3) or not all(parts):
        raise argparse.ArgumentTypeError(f"expected field:entity[:key_field], got {value!r}")
    field, entity = parts[:2]
    target = parts[2] if len(parts) == 3 else None
    return Reference(field, entity, entity, target_field=target)


def add_common_args(ap: argparse.ArgumentParser) -> argparse.ArgumentParser:
    ap.add_argument("--config", default=None, help="Path to config.yaml (default: config/config.yaml)")
    ap.add_argument("--delay-ms", type=int, default=None, help="Pause between model calls")
    return ap


def run_entity(
    schema: EntitySchema,
    settings: Settings,
    *,
    delay_ms: Optional[int] = None,
    references: Optional[Dict[str, Index]] = None,
    prepare: Optional[PrepareHook] = None,
    llm: Optional[LLMClient] = None,
    must_exist: bool = False,
    create_defaults: bool = True,
) -> PipelineReport:
    """Run the enrichment pipeline over the file configured for ``schema.name``.

    ``must_exist`` makes a missing entity file fatal; dependent entities
    leave it off so an absent file is seeded from their references unless
    ``create_defaults`` is off.
    """
    refs = references if references is not None else load_references(schema, settings)
    pipeline = EnrichmentPipeline(
        schema,
        settings.data_file(schema.name),
        build_enricher(schema, settings, llm),
        build_limiter(settings.delay_ms if delay_ms is None else delay_ms),
        settings.backups_dir,
        references=refs,
        prepare=prepare,
        checkpoint_every=settings.checkpoint_every,
        create_defaults=create_defaults,
        must_exist=must_exist,
    )
    return pipeline.run()
