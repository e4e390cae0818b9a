import pytest

from catalog_lib.enrichment import EnrichmentShapeError, EntityEnricher, extract_fields
from catalog_lib.entities import (
    COMPANIES,
    PLATFORM_LICENSES,
    SCHEMAS,
    SUPPORT,
    TECHNICAL_SPECIFICATIONS,
    generic_schema,
)
from catalog_lib.models import Reference
from catalog_lib.processors.catalog import CATALOG_ORDER


def test_extract_fields_keeps_expected_only():
    out = extract_fields({"company_size": "Small", "ceo": "x", "company_hq_location": None}, COMPANIES.enrich_fields)
    assert out == {"company_size": "Small", "company_hq_location": None}


def test_extract_fields_rejects_wrong_shape():
    with pytest.raises(EnrichmentShapeError):
        extract_fields(["a"], COMPANIES.enrich_fields)
    with pytest.raises(EnrichmentShapeError):
        extract_fields({"unrelated": 1}, COMPANIES.enrich_fields)


def test_enrich_returns_partial(fake_llm, prompts):
    llm, fake = fake_llm({"company_size": "Large", "company_hq_location": "San Francisco, USA"})
    enricher = EntityEnricher(COMPANIES, llm, prompts)
    partial = enricher.enrich({"company_name": "OpenAI", "company_website_url": "https://openai.com"})

    assert partial == {"company_size": "Large", "company_hq_location": "San Francisco, USA"}
    user = fake.calls[0]["messages"][1]["content"]
    assert '"OpenAI"' in user
    assert "https://openai.com" in user


@pytest.mark.parametrize("reply", ["not json at all", ["a", "b"], RuntimeError("boom")])
def test_enrich_failure_yields_empty_partial(fake_llm, prompts, reply, caplog):
    llm, _ = fake_llm(reply)
    enricher = EntityEnricher(COMPANIES, llm, prompts)
    assert enricher.enrich({"company_name": "Acme"}) == {}
    assert "Failed to enrich companies record Acme" in caplog.text


def test_support_prompt_uses_platform_context(fake_llm, prompts):
    llm, _ = fake_llm()
    enricher = EntityEnricher(SUPPORT, llm, prompts)
    prompt = enricher.build_prompt(
        {"support_id": "s1", "platform_id": "p1"},
        {"platform": {"platform_name": "Alpha", "platform_url": "https://alpha.ai"}},
    )
    assert '"Alpha"' in prompt
    assert "Platform URL: https://alpha.ai" in prompt
    assert "Platform category: Unknown" in prompt


def test_join_prompt_without_context_renders(fake_llm, prompts):
    llm, _ = fake_llm()
    enricher = EntityEnricher(PLATFORM_LICENSES, llm, prompts)
    prompt = enricher.build_prompt({"platform_license_id": "x"})
    assert 'license "Unknown"' in prompt


def test_generic_prompt_lists_fields(fake_llm, prompts):
    llm, _ = fake_llm()
    schema = generic_schema("features", "feature_id", ["feature_name", "feature_description"])
    prompt = EntityEnricher(schema, llm, prompts).build_prompt({"feature_id": "f1", "feature_name": "Chat"})
    assert "- feature_name: Chat" in prompt
    assert "- feature_description" in prompt


@pytest.mark.parametrize("name", sorted(SCHEMAS))
def test_every_entity_prompt_renders_without_context(fake_llm, prompts, name):
    llm, _ = fake_llm()
    prompt = EntityEnricher(SCHEMAS[name], llm, prompts).build_prompt({})
    assert "Return ONLY the JSON object" in prompt


@pytest.mark.parametrize("name", CATALOG_ORDER)
def test_catalog_prompts_ask_for_every_enriched_field(fake_llm, prompts, name):
    llm, _ = fake_llm()
    schema = SCHEMAS[name]
    prompt = EntityEnricher(schema, llm, prompts).build_prompt({})
    missing = [f for f in schema.enrich_fields if f"- {f}:" not in prompt]
    assert missing == []


def test_model_prompt_carries_model_and_platform(fake_llm, prompts):
    llm, _ = fake_llm()
    enricher = EntityEnricher(TECHNICAL_SPECIFICATIONS, llm, prompts)
    prompt = enricher.build_prompt(
        {"spec_id": "s1", "model_id": "m1"},
        {
            "model": {"model_family": "GPT", "model_version": "4", "parameters_count": "1.8T"},
            "platform": {"platform_name": "OpenAI API", "platform_category": "NLP"},
        },
    )
    assert 'AI model "GPT 4" from the platform "OpenAI API"' in prompt
    assert "Parameters count: 1.8T" in prompt
    assert "Platform category: NLP" in prompt


def test_model_prompt_without_model_names_it_unknown(fake_llm, prompts):
    llm, _ = fake_llm()
    prompt = EntityEnricher(TECHNICAL_SPECIFICATIONS, llm, prompts).build_prompt({"spec_id": "s1"})
    assert 'AI model "Unknown model"' in prompt


def test_generic_prompt_shows_referenced_records(fake_llm, prompts):
    llm, _ = fake_llm()
    schema = generic_schema(
        "features", "feature_id", ["feature_name"],
        references=[Reference("platform_id", "platforms", "platforms")],
    )
    prompt = EntityEnricher(schema, llm, prompts).build_prompt(
        {"feature_id": "f1", "platform_id": "p1"},
        {"platforms": {"platform_id": "p1", "platform_name": "Alpha"}},
    )
    assert "Related platforms:" in prompt
    assert "- platform_name: Alpha" in prompt
    assert schema.required == ("feature_id", "platform_id")
