from pathlib import Path

import pytest

from catalog_lib.csv_utils import load_records, save_records
from catalog_lib.entities import COMPANIES, PLATFORMS, SUPPORT
from catalog_lib.errors import MissingPreconditionError
from catalog_lib.pipeline import EnrichmentPipeline, PipelineState
from catalog_lib.rate import RateLimiter
from catalog_lib.xref import index_records

NOW = "2024-02-01T00:00:00.000Z"

COMPLETE = {
    "platform_category": "NLP",
    "platform_sub_category": "Chatbots",
    "platform_description": "d",
    "platform_status": "Active",
    "api_availability": "Yes",
    "integration_options": "REST",
}


class StubEnricher:
    def __init__(self, reply=None, error=None):
        self.reply = reply if reply is not None else {}
        self.error = error
        self.seen = []

    def enrich(self, record, context=None):
        self.seen.append((dict(record), dict(context or {})))
        if self.error:
            raise self.error
        return dict(self.reply)


class SleepLog:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def _pipeline(tmp_path, schema, path, enricher, sleep=None, **kw):
    limiter = RateLimiter(500, sleep=sleep or SleepLog())
    return EnrichmentPipeline(schema, path, enricher, limiter, tmp_path / "backups", clock=lambda: NOW, **kw)


def _platforms_file(tmp_path: Path) -> Path:
    p = tmp_path / "Platforms.csv"
    save_records(
        p,
        [
            {"platform_id": "p1", "platform_name": "Alpha", "platform_url": "https://alpha.ai",
             "platform_status": "Beta", "updatedAt": "old"},
            dict({"platform_id": "p2", "platform_name": "Beta", "platform_url": "https://beta.io",
                  "updatedAt": "old"}, **COMPLETE),
            {"platform_id": "p3", "platform_name": "Gamma", "platform_url": "https://gamma.com",
             "updatedAt": "old"},
        ],
    )
    return p


def test_incomplete_records_enriched_complete_skipped(tmp_path: Path):
    path = _platforms_file(tmp_path)
    enricher = StubEnricher(reply={"platform_status": "Active", "platform_category": "Vision"})
    sleep = SleepLog()

    report = _pipeline(tmp_path, PLATFORMS, path, enricher, sleep=sleep).run()

    assert report.state is PipelineState.DONE
    assert (report.loaded, report.enriched, report.skipped, report.saved) == (3, 2, 1, 3)
    assert [r["platform_name"] for r, _ in enricher.seen] == ["Alpha", "Gamma"]
    # one pause between the two calls, none after the last
    assert sleep.calls == [0.5]

    rows = load_records(path)
    assert [r["platform_id"] for r in rows] == ["p1", "p2", "p3"]
    assert rows[0]["platform_status"] == "Beta"
    assert rows[0]["platform_category"] == "Vision"
    assert rows[0]["updatedAt"] == NOW
    assert rows[1]["platform_category"] == "NLP"
    assert rows[1]["updatedAt"] == "old"
    assert rows[2]["platform_status"] == "Active"


def test_single_backup_before_first_write(tmp_path: Path):
    path = _platforms_file(tmp_path)
    original = path.read_text(encoding="utf-8")

    report = _pipeline(tmp_path, PLATFORMS, path, StubEnricher({"platform_status": "Active"}),
                       checkpoint_every=1).run()

    backups = list((tmp_path / "backups").iterdir())
    assert len(backups) == 1
    assert backups[0].read_text(encoding="utf-8") == original
    assert report.backup_path == backups[0]
    assert report.checkpoints == 2


def test_failed_enrichment_keeps_record(tmp_path: Path):
    path = _platforms_file(tmp_path)
    report = _pipeline(tmp_path, PLATFORMS, path, StubEnricher(reply={})).run()

    assert report.failed == 2
    assert report.enriched == 0
    rows = load_records(path)
    assert rows[0]["updatedAt"] == "old"
    assert rows[0]["platform_status"] == "Beta"


def test_empty_dependent_file_seeded_from_platforms(tmp_path: Path):
    platforms = [
        {"platform_id": "p1", "platform_name": "Alpha"},
        {"platform_id": "p2", "platform_name": "Beta"},
        {"platform_id": "p3", "platform_name": "Gamma"},
    ]
    refs = {"platform_id": index_records(platforms, "platform_id")}
    path = tmp_path / "Support.csv"
    enricher = StubEnricher(reply={"support_hours": "24/7"})

    report = _pipeline(tmp_path, SUPPORT, path, enricher, references=refs).run()

    assert report.defaults_created == 3
    assert [ctx["platform"]["platform_name"] for _, ctx in enricher.seen] == ["Alpha", "Beta", "Gamma"]
    rows = load_records(path)
    assert [r["platform_id"] for r in rows] == ["p1", "p2", "p3"]
    assert all(r["support_hours"] == "24/7" for r in rows)
    assert all(r["support_id"].startswith("sup_") for r in rows)
    assert report.backup_path is None


def test_only_orphans_dropped_before_enrichment(tmp_path: Path):
    refs = {"platform_id": index_records([{"platform_id": "p1"}], "platform_id")}
    path = tmp_path / "Support.csv"
    save_records(
        path,
        [
            {"support_id": "s1", "platform_id": "p1"},
            {"support_id": "s2", "platform_id": "p404"},
            {"support_id": "", "platform_id": "p1"},
        ],
    )
    report = _pipeline(tmp_path, SUPPORT, path, StubEnricher({"support_hours": "24/7"}), references=refs).run()

    assert report.dropped == 1
    rows = load_records(path)
    assert [r["support_id"] for r in rows] == ["s1", ""]
    assert all(r["support_hours"] == "24/7" for r in rows)


def test_skip_hook(tmp_path: Path):
    path = _platforms_file(tmp_path)
    enricher = StubEnricher({"platform_status": "Active"})
    report = _pipeline(
        tmp_path, PLATFORMS, path, enricher,
        skip=lambda r: "excluded" if r["platform_id"] == "p1" else None,
    ).run()
    assert report.skipped == 2
    assert [r["platform_id"] for r, _ in enricher.seen] == ["p3"]


def test_unexpected_error_marks_failed(tmp_path: Path):
    path = _platforms_file(tmp_path)
    before = path.read_text(encoding="utf-8")
    pipeline = _pipeline(tmp_path, PLATFORMS, path, StubEnricher(error=RuntimeError("disk")))

    with pytest.raises(RuntimeError):
        pipeline.run()

    assert pipeline.state is PipelineState.FAILED
    assert path.read_text(encoding="utf-8") == before


def test_record_missing_required_field_is_kept_and_saved(tmp_path: Path, caplog):
    path = _platforms_file(tmp_path)
    rows = load_records(path)
    rows.append({"platform_id": "p4", "platform_name": "Delta", "platform_url": "", "updatedAt": "old"})
    save_records(path, rows)

    report = _pipeline(tmp_path, PLATFORMS, path, StubEnricher({"platform_status": "Active"})).run()

    assert report.dropped == 0
    saved = load_records(path)
    assert [r["platform_id"] for r in saved] == ["p1", "p2", "p3", "p4"]
    assert saved[3]["platform_url"] == ""
    assert saved[3]["platform_status"] == "Active"
    assert "Validation issues with platforms record Delta: platform_url is required" in caplog.text


def test_enum_violation_after_enrichment_is_persisted_with_warning(tmp_path: Path, caplog):
    path = tmp_path / "Companies.csv"
    save_records(path, [{"company_id": "c1", "company_name": "Acme", "company_website_url": "https://acme.ai"}])
    reply = {
        "company_hq_location": "Paris, France",
        "company_size": "Gigantic",
        "company_funding_stage": "Series A",
        "company_annual_revenue": "$10M",
    }

    report = _pipeline(tmp_path, COMPANIES, path, StubEnricher(reply)).run()

    assert report.state is PipelineState.DONE
    assert report.enriched == 1
    assert load_records(path)[0]["company_size"] == "Gigantic"
    warnings = [r for r in caplog.records if r.levelname == "WARNING"]
    assert any(
        "Validation issues with companies record Acme: company_size must be one of" in r.getMessage()
        for r in warnings
    )
    assert not [r for r in caplog.records if r.levelname == "ERROR"]


def test_missing_input_file_is_fatal_when_required(tmp_path: Path):
    pipeline = _pipeline(tmp_path, PLATFORMS, tmp_path / "Platforms.csv", StubEnricher(), must_exist=True)

    with pytest.raises(MissingPreconditionError, match="platforms file not found"):
        pipeline.run()

    assert pipeline.state is PipelineState.FAILED
    assert not (tmp_path / "Platforms.csv").exists()


def test_empty_collection_keeps_its_header(tmp_path: Path):
    path = tmp_path / "Support.csv"
    path.write_text("support_id,platform_id,support_hours\r\n", encoding="utf-8")

    report = _pipeline(tmp_path, SUPPORT, path, StubEnricher(), references={}).run()

    assert report.saved == 0
    assert path.read_text(encoding="utf-8").strip() == "support_id,platform_id,support_hours"
    assert load_records(path) == []


def test_nothing_written_without_records_or_columns(tmp_path: Path):
    path = tmp_path / "Support.csv"
    report = _pipeline(tmp_path, SUPPORT, path, StubEnricher(), references={}).run()

    assert report.state is PipelineState.DONE
    assert not path.exists()
