from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class EnumRule:
    """Allowed values for one field; ``message`` overrides the default error text.

    ``ignore_case`` compares case-insensitively; ``contains`` accepts any value
    that mentions one of the allowed values.
    """
    field: str
    allowed: Tuple[str, ...]
    message: Optional[str] = None
    ignore_case: bool = False
    contains: bool = False

    def accepts(self, value: str) -> bool:
        candidate = value.lower() if self.ignore_case else value
        allowed = [a.lower() for a in self.allowed] if self.ignore_case else list(self.allowed)
        if self.contains:
            return any(a in candidate for a in allowed)
        return candidate in allowed

    def error(self) -> str:
        if self.message:
            return self.message
        verb = "must include one of" if self.contains else "must be one of"
        return f"{self.field} {verb}: {', '.join(self.allowed)}"


@dataclass(frozen=True)
class Reference:
    """Foreign-key style link from a dependent record to another entity.

    ``target_field`` names the key column in the referenced file when it
    differs from ``field``. A reference with ``via`` set is reached through
    the record already resolved under that context key (a benchmark's
    platform through its model); it feeds prompts only and never filters.
    """
    field: str
    entity: str
    context_key: str
    label_field: Optional[str] = None
    target_field: Optional[str] = None
    via: Optional[str] = None

    @property
    def key_field(self) -> str:
        return self.target_field or self.field


@dataclass(frozen=True)
class EntitySchema:
    """Constraint table and enrichment settings for one entity type."""
    name: str
    id_field: Optional[str]
    id_prefix: str = ""
    required: Tuple[str, ...] = ()
    enums: Tuple[EnumRule, ...] = ()
    url_fields: Tuple[str, ...] = ()
    date_fields: Tuple[str, ...] = ()
    completeness_fields: Tuple[str, ...] = ()
    enrich_fields: Tuple[str, ...] = ()
    references: Tuple[Reference, ...] = ()
    prompt_template: str = "entity_user.jinja"
    label_fields: Tuple[str, ...] = ()
    # createdAt / updatedAt bookkeeping
    timestamps: bool = True

    @property
    def direct_references(self) -> Tuple[Reference, ...]:
        return tuple(r for r in self.references if r.via is None)

    def columns(self) -> List[str]:
        """Header for a fresh file: id, join keys, required and enriched fields, timestamps."""
        cols: Dict[str, None] = {}
        if self.id_field:
            cols[self.id_field] = None
        for f in (
            *(r.field for r in self.direct_references),
            *self.required,
            *self.label_fields,
            *self.enrich_fields,
        ):
            cols.setdefault(f, None)
        if self.timestamps:
            cols.setdefault("createdAt", None)
            cols.setdefault("updatedAt", None)
        return list(cols)

    def label(self, record: Dict[str, Optional[str]]) -> str:
        """Human-readable name of ``record`` for log lines."""
        for f in self.label_fields:
            if record.get(f):
                return str(record[f])
        if self.id_field and record.get(self.id_field):
            return str(record[self.id_field])
        return "unknown"


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
