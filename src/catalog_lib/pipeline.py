# src/catalog_lib/pipeline.py
"""
Batch enrichment driver.

One run walks LOADING -> FILTERING -> ENRICHING -> SAVING -> DONE:
  * load the entity file
  * run the optional ``prepare`` hook, create default records for an empty
    dependent collection, drop records pointing at unknown references
  * enrich every incomplete record once, pausing between model calls;
    required-field and enum problems are logged, never dropped
  * back up the destination (once, before the first write) and save

Output order equals input order; records created during the run are
appended at the end.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Union

from .backup import create_backup
from .csv_utils import load_records, read_fieldnames, save_records
from .entities import is_complete
from .errors import MissingPreconditionError
from .models import EntitySchema
from .rate import RateLimiter
from .records import Record, merge_missing, now_iso, touch
from .validators import log_validation_result, validate_record
from .xref import Index, build_default_records, filter_orphans, resolve_context

logger = logging.getLogger(__name__)


class PipelineState(str, enum.Enum):
    LOADING = "loading"
    FILTERING = "filtering"
    ENRICHING = "enriching"
    SAVING = "saving"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineReport:
    entity: str
    state: PipelineState = PipelineState.LOADING
    loaded: int = 0
    dropped: int = 0
    defaults_created: int = 0
    skipped: int = 0
    enriched: int = 0
    failed: int = 0
    checkpoints: int = 0
    saved: int = 0
    backup_path: Optional[Path] = None

    def summary(self) -> str:
        return (
            f"{self.entity}: loaded={self.loaded} dropped={self.dropped} "
            f"defaults={self.defaults_created} skipped={self.skipped} "
            f"enriched={self.enriched} failed={self.failed} saved={self.saved}"
        )


# Returns a reason string when the record should be left alone.
SkipHook = Callable[[Record], Optional[str]]
PrepareHook = Callable[[List[Record]], List[Record]]


class EnrichmentPipeline:
    """Enrich one entity collection in place.

    ``enricher`` is anything with ``enrich(record, context) -> dict``; an
    empty dict means the call failed and the record is kept unchanged.
    With ``must_exist`` a missing input file aborts the run.
    """

    def __init__(
        self,
        schema: EntitySchema,
        path: Union[str, Path],
        enricher,
        limiter: RateLimiter,
        backup_dir: Union[str, Path],
        *,
        references: Optional[Mapping[str, Index]] = None,
        prepare: Optional[PrepareHook] = None,
        skip: Optional[SkipHook] = None,
        checkpoint_every: int = 0,
        delimiter: str = ",",
        create_defaults: bool = True,
        clock: Callable[[], str] = now_iso,
        must_exist: bool = False,
    ) -> None:
        self.schema = schema
        self.path = Path(path)
        self.enricher = enricher
        self.limiter = limiter
        self.backup_dir = Path(backup_dir)
        self.references: Dict[str, Index] = dict(references or {})
        self.prepare = prepare
        self.skip = skip
        self.checkpoint_every = max(0, int(checkpoint_every or 0))
        self.delimiter = delimiter
        self.create_defaults = create_defaults
        self.clock = clock
        self.must_exist = must_exist
        self.report = PipelineReport(entity=schema.name)
        self._backed_up = False
        self._fieldnames: List[str] = []

    # ------------------------------------------------------------------
    @property
    def state(self) -> PipelineState:
        return self.report.state

    def _enter(self, state: PipelineState) -> None:
        logger.debug("%s pipeline: %s -> %s", self.schema.name, self.report.state.value, state.value)
        self.report.state = state

    def _persist(self, records: List[Record]) -> None:
        if not self._backed_up:
            self.report.backup_path = create_backup(self.path, self.backup_dir)
            self._backed_up = True
        save_records(self.path, records, delimiter=self.delimiter, fieldnames=self._fieldnames)

    # ------------------------------------------------------------------
    def load(self) -> List[Record]:
        self._enter(PipelineState.LOADING)
        if self.must_exist and not self.path.exists():
            raise MissingPreconditionError(f"{self.schema.name} file not found at: {self.path}")
        self._fieldnames = read_fieldnames(self.path, delimiter=self.delimiter)
        records = load_records(self.path, delimiter=self.delimiter)
        self.report.loaded = len(records)
        return records

    def filter(self, records: List[Record]) -> List[Record]:
        self._enter(PipelineState.FILTERING)
        if self.prepare is not None:
            records = self.prepare(records)

        if not records and self.create_defaults and self.schema.direct_references:
            defaults = build_default_records(self.schema, self.references, now=self.clock())
            if defaults:
                logger.warning(
                    "No %s records found in %s, created %d default records",
                    self.schema.name,
                    self.path.name,
                    len(defaults),
                )
            self.report.defaults_created = len(defaults)
            return defaults

        before = len(records)
        records = filter_orphans(records, self.schema, self.references)
        self.report.dropped = before - len(records)
        return records

    def enrich_all(self, records: List[Record]) -> List[Record]:
        self._enter(PipelineState.ENRICHING)
        total = len(records)
        processed: List[Record] = []
        pending_wait = False

        for i, record in enumerate(records):
            label = self.schema.label(record)
            reason = self.skip(record) if self.skip is not None else None
            if reason is None and is_complete(record, self.schema):
                reason = "already complete"

            if reason is not None:
                logger.info("Skipping %s %d/%d: %s (%s)", self.schema.name, i + 1, total, label, reason)
                self.report.skipped += 1
                processed.append(record)
            else:
                if pending_wait:
                    self.limiter.wait()
                context = resolve_context(record, self.schema, self.references)
                partial = self.enricher.enrich(record, context)
                pending_wait = True
                if not partial:
                    self.report.failed += 1
                else:
                    protected = (self.schema.id_field,) if self.schema.id_field else ()
                    filled = merge_missing(record, partial, protected=protected)
                    if filled and self.schema.timestamps:
                        touch(record, self.clock())
                    self.report.enriched += 1
                    log_validation_result(self.schema, record, validate_record(record, self.schema))
                processed.append(record)
                logger.info("Processed %s %d/%d: %s", self.schema.name, i + 1, total, label)

            if self.checkpoint_every and (i + 1) % self.checkpoint_every == 0 and i + 1 < total:
                self._persist(processed + records[i + 1:])
                self.report.checkpoints += 1
                logger.info("Progress saved: %d/%d %s records processed", i + 1, total, self.schema.name)

        return processed

    def save(self, records: List[Record]) -> None:
        self._enter(PipelineState.SAVING)
        self._persist(records)
        self.report.saved = len(records)

    def run(self) -> PipelineReport:
        logger.info("Starting %s processing...", self.schema.name)
        try:
            records = self.load()
            records = self.filter(records)
            records = self.enrich_all(records)
            self.save(records)
        except Exception:
            self._enter(PipelineState.FAILED)
            raise
        self._enter(PipelineState.DONE)
        logger.info("%s processing completed: %s", self.schema.name, self.report.summary())
        return self.report
