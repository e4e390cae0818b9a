import argparse
from pathlib import Path

import pytest

from catalog_lib.config import load_settings
from catalog_lib.csv_utils import save_records
from catalog_lib.entities import TRAINING
from catalog_lib.errors import MissingPreconditionError
from catalog_lib.runtime import load_references, parse_reference

YAML = """
paths:
  data_dir: data
  backups_dir: backups
  logs_dir: logs
  prompts_dir: prompts
files:
  platforms: Platforms.csv
  companies: Companies.csv
  models: Models.csv
  training: Training.csv
llm:
  model: gpt-4o
pipeline:
  delay_ms: 0
"""


@pytest.fixture
def settings(tmp_path: Path):
    p = tmp_path / "config.yaml"
    p.write_text(YAML, encoding="utf-8")
    return load_settings(str(p), root=tmp_path)


def test_references_indexed_by_join_field(settings):
    save_records(settings.data_file("models"), [{"model_id": "m1", "platform_id": "p1"}])
    save_records(settings.data_file("platforms"), [{"platform_id": "p1", "platform_name": "Alpha"}])

    refs = load_references(TRAINING, settings)

    assert list(refs["model_id"]) == ["m1"]
    assert refs["platform_id"]["p1"]["platform_name"] == "Alpha"


def test_missing_referenced_file_is_fatal(settings):
    save_records(settings.data_file("platforms"), [{"platform_id": "p1"}])

    with pytest.raises(MissingPreconditionError, match="Models.csv not found; process models before training"):
        load_references(TRAINING, settings)


def test_parse_reference():
    ref = parse_reference("certification_id:security_and_compliance:security_id")
    assert (ref.field, ref.entity, ref.context_key, ref.key_field) == (
        "certification_id",
        "security_and_compliance",
        "security_and_compliance",
        "security_id",
    )
    assert parse_reference("platform_id:platforms").key_field == "platform_id"
    for bad in ("platform_id", "platform_id:", "a:b:c:d"):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_reference(bad)
