from pathlib import Path

import pytest

from catalog_lib.csv_utils import load_records, read_fieldnames, save_records
from catalog_lib.enrichment import EnrichmentShapeError
from catalog_lib.pipeline import EnrichmentPipeline
from catalog_lib.processors.categories import (
    CategoryEnricher,
    category_schema,
    empty_levels_skipper,
    parse_levels,
)
from catalog_lib.rate import RateLimiter

HEADERS = [f"Level {i}" for i in range(1, 11)]
LEVELS = ["Healthcare", "Diagnostics", "Medical Imaging", "Brain MRI", "Neuro", "Alzheimer's", "Biomarkers", "CNN"]


def _row(*values):
    values = list(values) + [""] * (len(HEADERS) - len(values))
    return dict(zip(HEADERS, values))


def test_parse_levels_requires_eight_items():
    assert parse_levels(LEVELS) == LEVELS
    with pytest.raises(EnrichmentShapeError):
        parse_levels(LEVELS[:7])
    with pytest.raises(EnrichmentShapeError):
        parse_levels({"levels": LEVELS})


def test_schema_and_skipper():
    schema = category_schema(HEADERS)
    assert schema.enrich_fields == tuple(HEADERS[2:])
    skip = empty_levels_skipper(HEADERS)
    assert skip(_row("", "")) == "Empty Level 1 and Level 2"
    assert skip(_row("AI", "")) is None


def test_enricher_maps_levels_to_columns(fake_llm, prompts):
    llm, fake = fake_llm(LEVELS)
    partial = CategoryEnricher(HEADERS, llm, prompts).enrich(_row("Artificial Intelligence", "Healthcare AI"))

    assert partial == dict(zip(HEADERS[2:], LEVELS))
    call = fake.calls[0]
    assert "response_format" not in call
    assert "Level 1 (Main Category): Artificial Intelligence" in call["messages"][1]["content"]
    assert "categorization" in call["messages"][0]["content"]


def test_enricher_rejects_short_array(fake_llm, prompts):
    llm, _ = fake_llm(LEVELS[:7])
    enricher = CategoryEnricher(HEADERS, llm, prompts)
    assert enricher.enrich(_row("AI", "NLP")) == {}


def test_sheet_update_end_to_end(tmp_path: Path, fake_llm, prompts):
    path = tmp_path / "AI Hierarchical Categorization System.csv"
    done = _row("AI", "Vision", *LEVELS)
    save_records(path, [_row("AI", "NLP"), _row("", ""), done])
    assert read_fieldnames(path) == HEADERS

    llm, fake = fake_llm(LEVELS)
    sleeps = []
    report = EnrichmentPipeline(
        category_schema(HEADERS),
        path,
        CategoryEnricher(HEADERS, llm, prompts),
        RateLimiter(1000, sleep=sleeps.append),
        tmp_path / "backups",
        skip=empty_levels_skipper(HEADERS),
        checkpoint_every=1,
    ).run()

    rows = load_records(path)
    assert rows[0] == _row("AI", "NLP", *LEVELS)
    assert rows[1] == _row("", "")
    assert rows[2] == done
    assert len(fake.calls) == 1
    assert sleeps == []
    assert report.skipped == 2
    assert report.checkpoints == 2
