from pathlib import Path

from catalog_lib.csv_utils import load_records, read_fieldnames, save_records
from catalog_lib.entities import MODEL_BENCHMARKS, MODELS, VERSIONING
from catalog_lib.processors.scaffold import scaffold_tables

FILES = {
    "models": "Models.csv",
    "versioning": "Versioning.csv",
    "model_benchmarks": "model_benchmarks.csv",
}


def test_missing_tables_get_schema_headers(tmp_path: Path):
    written = scaffold_tables(tmp_path / "data", FILES, [MODELS, VERSIONING, MODEL_BENCHMARKS])

    assert [p.name for p in written] == ["Models.csv", "Versioning.csv", "model_benchmarks.csv"]
    header = read_fieldnames(tmp_path / "data" / "model_benchmarks.csv")
    assert header[:3] == ["model_benchmark_id", "model_id", "benchmark_id"]
    assert header[-2:] == ["createdAt", "updatedAt"]
    assert "score_date" in header
    assert len(header) == len(set(header))
    assert load_records(tmp_path / "data" / "Models.csv") == []


def test_existing_tables_kept_unless_forced(tmp_path: Path):
    data = tmp_path / "data"
    save_records(data / "Models.csv", [{"model_id": "m1", "platform_id": "p1"}])

    assert scaffold_tables(data, FILES, [MODELS]) == []
    assert [r["model_id"] for r in load_records(data / "Models.csv")] == ["m1"]

    written = scaffold_tables(data, FILES, [MODELS], force=True, backup_dir=tmp_path / "backups")
    assert written == [data / "Models.csv"]
    assert load_records(data / "Models.csv") == []
    backups = list((tmp_path / "backups").iterdir())
    assert len(backups) == 1
    assert backups[0].name.startswith("Models_backup_")


def test_schema_without_configured_file_is_skipped(tmp_path: Path):
    assert scaffold_tables(tmp_path, {}, [MODELS]) == []
    assert list(tmp_path.iterdir()) == []
