# src/catalog_lib/entities.py
"""Per-entity constraint tables and the completeness checker."""
from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence

from .models import EntitySchema, EnumRule, Reference
from .records import Record, is_blank

PLATFORM_REF = Reference("platform_id", "platforms", "platform", label_field="platform_name")
LICENSE_REF = Reference("license_id", "licenses", "license", label_field="license_name")

PLATFORMS = EntitySchema(
    name="platforms",
    id_field="platform_id",
    id_prefix="platform",
    required=("platform_id", "platform_name", "platform_url"),
    enums=(EnumRule("platform_status", ("Active", "Beta", "Discontinued")),),
    url_fields=("platform_url",),
    completeness_fields=(
        "platform_category",
        "platform_sub_category",
        "platform_description",
        "platform_status",
        "api_availability",
        "integration_options",
    ),
    enrich_fields=(
        "platform_category",
        "platform_sub_category",
        "platform_description",
        "platform_status",
        "api_availability",
        "integration_options",
    ),
    prompt_template="platforms_user.jinja",
    label_fields=("platform_name",),
)

COMPANIES = EntitySchema(
    name="companies",
    id_field="company_id",
    id_prefix="company",
    required=("company_name",),
    enums=(EnumRule("company_size", ("Startup", "Small", "Medium", "Large", "Enterprise")),),
    url_fields=("company_website_url",),
    completeness_fields=(
        "company_hq_location",
        "company_size",
        "company_funding_stage",
        "company_annual_revenue",
    ),
    enrich_fields=(
        "company_hq_location",
        "company_size",
        "company_funding_stage",
        "company_annual_revenue",
    ),
    prompt_template="companies_user.jinja",
    label_fields=("company_name",),
)

SUPPORT = EntitySchema(
    name="support",
    id_field="support_id",
    id_prefix="sup",
    required=("support_id", "platform_id"),
    enums=(
        EnumRule(
            "sla_available",
            ("true", "false", "Yes", "No"),
            message="sla_available must be a boolean value (true/false or Yes/No)",
        ),
    ),
    completeness_fields=(
        "support_options",
        "sla_available",
        "support_channels",
        "support_hours",
        "enterprise_support",
    ),
    enrich_fields=(
        "support_options",
        "sla_available",
        "support_channels",
        "support_hours",
        "enterprise_support",
        "training_options",
        "consulting_services",
        "implementation_support",
        "response_time_guarantees",
    ),
    references=(PLATFORM_REF,),
    prompt_template="support_user.jinja",
)

LICENSES = EntitySchema(
    name="licenses",
    id_field="license_id",
    id_prefix="lic",
    required=("platform_id",),
    enums=(EnumRule("license_type", ("Open-source", "Proprietary", "Creative Commons", "Other")),),
    completeness_fields=("license_type", "open_source_status", "license_name"),
    enrich_fields=(
        "license_type",
        "open_source_status",
        "license_name",
        "license_url",
        "license_expiration_date",
    ),
    references=(PLATFORM_REF,),
    prompt_template="licenses_user.jinja",
)

PLATFORM_LICENSES = EntitySchema(
    name="platform_licenses",
    id_field="platform_license_id",
    id_prefix="plat_lic",
    required=("platform_license_id", "platform_id", "license_id"),
    completeness_fields=("license_tier", "license_restrictions"),
    enrich_fields=("license_tier", "license_restrictions", "license_url"),
    references=(PLATFORM_REF, LICENSE_REF),
    prompt_template="platform_licenses_user.jinja",
)

PRICING = EntitySchema(
    name="pricing",
    id_field="pricing_id",
    id_prefix="price",
    required=("platform_id",),
    enums=(EnumRule("pricing_model", ("Subscription", "One-Time", "Usage-Based", "Free")),),
    completeness_fields=(
        "pricing_model",
        "starting_price",
        "billing_frequency",
        "custom_pricing_available",
    ),
    enrich_fields=(
        "pricing_model",
        "starting_price",
        "enterprise_pricing",
        "billing_frequency",
        "custom_pricing_available",
        "pricing_url",
        "discount_options",
    ),
    references=(PLATFORM_REF,),
    prompt_template="pricing_user.jinja",
)

MODEL_REF = Reference("model_id", "models", "model", label_field="model_family")
MODEL_PLATFORM_REF = Reference("platform_id", "platforms", "platform", label_field="platform_name", via="model")
API_REF = Reference("api_id", "api", "api", label_field="api_standards")
API_PLATFORM_REF = Reference("platform_id", "platforms", "platform", label_field="platform_name", via="api")
FEATURE_REF = Reference("feature_id", "features", "feature", label_field="notable_features")
BENCHMARK_REF = Reference("benchmark_id", "benchmarks", "benchmark", label_field="benchmark_name")
USE_CASE_REF = Reference("use_case_id", "use_cases", "use_case", label_field="primary_use_case")
CERTIFICATION_REF = Reference(
    "certification_id",
    "security_and_compliance",
    "certification",
    label_field="security_certifications",
    target_field="security_id",
)

BOOLEAN_TEXT = ("true", "false")

MODELS = EntitySchema(
    name="models",
    id_field="model_id",
    id_prefix="model",
    required=("model_family", "model_version", "platform_id"),
    enums=(EnumRule("model_size_unit", ("KB", "MB", "GB", "TB")),),
    completeness_fields=(
        "model_family",
        "model_version",
        "model_type",
        "model_architecture",
        "parameters_count",
        "context_window_size",
        "token_limit",
        "model_size",
        "model_size_unit",
    ),
    enrich_fields=(
        "model_family",
        "model_version",
        "model_variants",
        "model_type",
        "model_architecture",
        "parameters_count",
        "context_window_size",
        "token_limit",
        "model_size",
        "model_size_unit",
    ),
    references=(PLATFORM_REF,),
    prompt_template="models_user.jinja",
    label_fields=("model_family",),
)

API = EntitySchema(
    name="api",
    id_field="api_id",
    id_prefix="api",
    required=("platform_id",),
    completeness_fields=(
        "api_standards",
        "authentication_methods",
        "webhook_support",
        "third_party_integrations",
        "export_formats",
    ),
    enrich_fields=(
        "api_standards",
        "authentication_methods",
        "webhook_support",
        "third_party_integrations",
        "export_formats",
        "import_capabilities",
    ),
    references=(PLATFORM_REF,),
    prompt_template="api_user.jinja",
)

FEATURES = EntitySchema(
    name="features",
    id_field="feature_id",
    id_prefix="feat",
    required=("platform_id", "notable_features"),
    completeness_fields=(
        "notable_features",
        "explainability_features",
        "customization_options",
        "bias_mitigation_approaches",
    ),
    enrich_fields=(
        "notable_features",
        "explainability_features",
        "customization_options",
        "bias_mitigation_approaches",
    ),
    references=(PLATFORM_REF,),
    prompt_template="features_user.jinja",
)

COMMUNITY = EntitySchema(
    name="community",
    id_field="community_id",
    id_prefix="comm",
    required=("platform_id",),
    completeness_fields=(
        "community_size",
        "community_engagement_score",
        "user_rating",
        "github_repository",
        "stackoverflow_tags",
    ),
    enrich_fields=(
        "community_size",
        "community_engagement_score",
        "user_rating",
        "github_repository",
        "stackoverflow_tags",
        "academic_papers",
        "case_studies",
    ),
    references=(PLATFORM_REF,),
    prompt_template="community_user.jinja",
)

DOCUMENTATION = EntitySchema(
    name="documentation",
    id_field="doc_id",
    id_prefix="doc",
    required=("platform_id",),
    completeness_fields=(
        "documentation_description",
        "doc_quality",
        "documentation_url",
        "example_code_available",
        "learning_curve_rating",
    ),
    enrich_fields=(
        "documentation_description",
        "doc_quality",
        "documentation_url",
        "faq_url",
        "forum_url",
        "example_code_available",
        "example_code_languages",
        "video_tutorials_available",
        "learning_curve_rating",
    ),
    references=(PLATFORM_REF,),
    prompt_template="documentation_user.jinja",
)

MARKET = EntitySchema(
    name="market",
    id_field="market_id",
    id_prefix="mkt",
    required=("platform_id",),
    completeness_fields=(
        "user_count",
        "adoption_rate",
        "industry_penetration",
        "typical_customer_profile",
        "direct_competitors",
        "competitive_advantages",
    ),
    enrich_fields=(
        "user_count",
        "adoption_rate",
        "industry_penetration",
        "typical_customer_profile",
        "success_stories",
        "direct_competitors",
        "competitive_advantages",
        "market_share",
        "analyst_ratings",
        "industry_awards",
    ),
    references=(PLATFORM_REF,),
    prompt_template="market_user.jinja",
)

TRIALS = EntitySchema(
    name="trials",
    id_field="trial_id",
    id_prefix="trial",
    required=("platform_id",),
    enums=(EnumRule("trial_duration_unit", ("Day", "Week", "Month", "Year")),),
    completeness_fields=("free_trial_plan", "trial_duration", "trial_duration_unit", "usage_limits"),
    enrich_fields=("free_trial_plan", "trial_duration", "trial_duration_unit", "usage_limits"),
    references=(PLATFORM_REF,),
    prompt_template="trials_user.jinja",
)

SECURITY_AND_COMPLIANCE = EntitySchema(
    name="security_and_compliance",
    id_field="security_id",
    id_prefix="sec",
    required=("security_id", "platform_id"),
    enums=(
        EnumRule(
            "gdpr_compliance",
            BOOLEAN_TEXT,
            message="gdpr_compliance must be a boolean value (true or false)",
            ignore_case=True,
        ),
        EnumRule(
            "hipaa_compliance",
            BOOLEAN_TEXT,
            message="hipaa_compliance must be a boolean value (true or false)",
            ignore_case=True,
        ),
    ),
    completeness_fields=(
        "security_certifications",
        "compliance_standards",
        "gdpr_compliance",
        "hipaa_compliance",
        "data_retention_policies",
    ),
    enrich_fields=(
        "security_certifications",
        "compliance_standards",
        "gdpr_compliance",
        "hipaa_compliance",
        "iso_certifications",
        "data_retention_policies",
    ),
    references=(PLATFORM_REF,),
    prompt_template="security_user.jinja",
)

VERSIONING = EntitySchema(
    name="versioning",
    id_field="version_id",
    id_prefix="version",
    required=("version_id", "platform_id"),
    enums=(
        EnumRule("maintenance_status", ("Active", "Maintenance", "Deprecated", "End of Life")),
        EnumRule("update_frequency", ("Weekly", "Monthly", "Quarterly", "Annually", "As Needed")),
    ),
    url_fields=("changelog_url",),
    date_fields=("release_date", "last_updated", "deprecation_date"),
    completeness_fields=("release_date", "maintenance_status", "update_frequency", "version_numbering_scheme"),
    enrich_fields=(
        "release_date",
        "last_updated",
        "maintenance_status",
        "deprecation_date",
        "update_frequency",
        "changelog_url",
        "version_numbering_scheme",
        "backward_compatibility_notes",
        "known_issues",
    ),
    references=(PLATFORM_REF,),
    prompt_template="versioning_user.jinja",
)

# Model-dependent entities also resolve the model's platform for their prompts.

TECHNICAL_SPECIFICATIONS = EntitySchema(
    name="technical_specifications",
    id_field="spec_id",
    id_prefix="spec",
    required=("model_id",),
    completeness_fields=(
        "input_types",
        "output_types",
        "supported_languages",
        "hardware_requirements",
        "gpu_acceleration",
        "latency",
        "compatible_frameworks",
    ),
    enrich_fields=(
        "input_types",
        "output_types",
        "supported_languages",
        "hardware_requirements",
        "gpu_acceleration",
        "latency",
        "inference_time",
        "training_time",
        "compatible_frameworks",
        "minimum_requirements",
        "optimal_requirements",
        "dependency_information",
    ),
    references=(MODEL_REF, MODEL_PLATFORM_REF),
    prompt_template="technical_specifications_user.jinja",
)

PERFORMANCE = EntitySchema(
    name="performance",
    id_field="performance_id",
    id_prefix="perf",
    required=("model_id",),
    completeness_fields=(
        "performance_metrics",
        "accuracy_metrics",
        "precision_metrics",
        "recall_metrics",
        "f1_score",
    ),
    enrich_fields=(
        "performance_metrics",
        "performance_score",
        "accuracy_metrics",
        "precision_metrics",
        "recall_metrics",
        "f1_score",
    ),
    references=(MODEL_REF, MODEL_PLATFORM_REF),
    prompt_template="performance_user.jinja",
)

BENCHMARKS = EntitySchema(
    name="benchmarks",
    id_field="benchmark_id",
    id_prefix="bench",
    required=("model_id",),
    completeness_fields=("benchmark_name", "benchmark_score", "benchmark_details"),
    enrich_fields=("benchmark_name", "benchmark_score", "benchmark_details"),
    references=(MODEL_REF, MODEL_PLATFORM_REF),
    prompt_template="benchmarks_user.jinja",
    label_fields=("benchmark_name",),
)

TRAINING = EntitySchema(
    name="training",
    id_field="training_id",
    id_prefix="train",
    required=("model_id",),
    completeness_fields=(
        "training_data_size",
        "training_methodology",
        "fine_tuning_supported",
        "transfer_learning_supported",
    ),
    enrich_fields=(
        "training_data_size",
        "training_data_notes",
        "training_methodology",
        "fine_tuning_supported",
        "transfer_learning_supported",
        "fine_tuning_performance",
    ),
    references=(MODEL_REF, MODEL_PLATFORM_REF),
    prompt_template="training_user.jinja",
)

ETHICS = EntitySchema(
    name="ethics",
    id_field="ethics_id",
    id_prefix="eth",
    required=("model_id",),
    completeness_fields=(
        "ethical_guidelines_url",
        "bias_evaluation",
        "fairness_metrics",
        "transparency_score",
        "environmental_impact",
    ),
    enrich_fields=(
        "ethical_guidelines_url",
        "bias_evaluation",
        "fairness_metrics",
        "transparency_score",
        "environmental_impact",
    ),
    references=(MODEL_REF, MODEL_PLATFORM_REF),
    prompt_template="ethics_user.jinja",
)

USE_CASES = EntitySchema(
    name="use_cases",
    id_field="use_case_id",
    id_prefix="use_case",
    required=("use_case_id", "model_id", "primary_use_case"),
    completeness_fields=(
        "primary_use_case",
        "secondary_use_case",
        "specialized_domains",
        "supported_tasks",
        "limitations",
    ),
    enrich_fields=(
        "primary_use_case",
        "secondary_use_case",
        "specialized_domains",
        "supported_tasks",
        "limitations",
        "typical_use_case",
    ),
    references=(MODEL_REF, MODEL_PLATFORM_REF),
    prompt_template="use_cases_user.jinja",
    label_fields=("primary_use_case",),
)

# Join tables and per-parent children.

API_INTEGRATIONS = EntitySchema(
    name="api_integrations",
    id_field="integration_id",
    id_prefix="integration",
    required=("integration_id", "api_id", "integration_type"),
    enums=(
        EnumRule(
            "integration_type",
            ("REST", "GraphQL", "SOAP", "SDK", "Webhook", "OAuth", "Custom"),
            contains=True,
        ),
    ),
    url_fields=("integration_url",),
    completeness_fields=("integration_type", "integration_details"),
    enrich_fields=("integration_type", "integration_details", "integration_url"),
    references=(API_REF, API_PLATFORM_REF),
    prompt_template="api_integrations_user.jinja",
)

MODEL_BENCHMARKS = EntitySchema(
    name="model_benchmarks",
    id_field="model_benchmark_id",
    id_prefix="model_benchmark",
    required=("model_benchmark_id", "model_id", "benchmark_id"),
    url_fields=("source_url",),
    date_fields=("score_date",),
    completeness_fields=("score", "score_date", "methodology"),
    enrich_fields=("score", "score_date", "methodology", "source_url"),
    references=(MODEL_REF, BENCHMARK_REF),
    prompt_template="model_benchmarks_user.jinja",
)

MODEL_USE_CASES = EntitySchema(
    name="model_use_cases",
    id_field="model_use_case_id",
    id_prefix="model_use_case",
    required=("model_use_case_id", "model_id", "use_case_id"),
    enums=(EnumRule("suitability_rating", ("High", "Medium", "Low")),),
    completeness_fields=("suitability_rating", "implementation_notes"),
    enrich_fields=("suitability_rating", "implementation_notes", "success_stories"),
    references=(MODEL_REF, USE_CASE_REF),
    prompt_template="model_use_cases_user.jinja",
)

PLATFORM_FEATURES = EntitySchema(
    name="platform_features",
    id_field="platform_feature_id",
    id_prefix="platform_feature",
    required=("platform_feature_id", "platform_id", "feature_id"),
    enums=(
        EnumRule("implementation_quality", ("Basic", "Standard", "Advanced", "Excellent")),
        EnumRule(
            "feature_availability",
            ("Generally Available", "Beta", "Preview", "Limited Access", "Deprecated"),
        ),
    ),
    completeness_fields=("implementation_quality", "feature_availability", "feature_limitations"),
    enrich_fields=("implementation_quality", "feature_availability", "feature_limitations"),
    references=(PLATFORM_REF, FEATURE_REF),
    prompt_template="platform_features_user.jinja",
)

PLATFORM_CERTIFICATIONS = EntitySchema(
    name="platform_certifications",
    id_field="platform_certification_id",
    id_prefix="platform_certification",
    required=("platform_certification_id", "platform_id", "certification_id"),
    url_fields=("verification_url",),
    date_fields=("certification_date", "expiration_date"),
    completeness_fields=("certification_date", "certification_scope"),
    enrich_fields=("certification_date", "expiration_date", "certification_scope", "verification_url"),
    references=(PLATFORM_REF, CERTIFICATION_REF),
    prompt_template="platform_certifications_user.jinja",
)

SCHEMAS: Dict[str, EntitySchema] = {
    s.name: s
    for s in (
        PLATFORMS,
        COMPANIES,
        SUPPORT,
        LICENSES,
        PLATFORM_LICENSES,
        PRICING,
        MODELS,
        API,
        FEATURES,
        COMMUNITY,
        DOCUMENTATION,
        MARKET,
        TRIALS,
        SECURITY_AND_COMPLIANCE,
        VERSIONING,
        TECHNICAL_SPECIFICATIONS,
        PERFORMANCE,
        BENCHMARKS,
        TRAINING,
        ETHICS,
        USE_CASES,
        API_INTEGRATIONS,
        MODEL_BENCHMARKS,
        MODEL_USE_CASES,
        PLATFORM_FEATURES,
        PLATFORM_CERTIFICATIONS,
    )
}


def generic_schema(
    name: str,
    id_field: str,
    fields: Sequence[str],
    completeness_fields: Optional[Iterable[str]] = None,
    id_prefix: str = "",
    references: Sequence[Reference] = (),
) -> EntitySchema:
    """Schema for an arbitrary entity file described only by its id and fields.

    ``references`` link it to other entity files: records pointing at unknown
    keys are dropped and the referenced records reach the prompt.
    """
    fields = tuple(f for f in fields if f)
    refs = tuple(references)
    return EntitySchema(
        name=name,
        id_field=id_field,
        id_prefix=id_prefix,
        required=(id_field,) + tuple(r.field for r in refs if r.via is None),
        references=refs,
        completeness_fields=tuple(completeness_fields) if completeness_fields else fields,
        enrich_fields=fields,
        prompt_template="entity_user.jinja",
    )


def is_complete(record: Record, schema: EntitySchema) -> bool:
    """True when every completeness field of ``schema`` holds a non-empty value."""
    return all(not is_blank(record.get(f)) for f in schema.completeness_fields)
