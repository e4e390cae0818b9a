# verify_all.py
# Row counts, missing columns and dangling references across data/.
from pathlib import Path
import pandas as pd

data = Path("data")

FILES = {
    "platforms": ("Platforms.csv", ["platform_id", "platform_name", "platform_url", "company_id"]),
    "companies": ("Companies.csv", ["company_id", "company_name", "company_website_url"]),
    "licenses": ("Licenses.csv", ["license_id", "platform_id"]),
    "platform_licenses": ("platform_licenses.csv", ["platform_license_id", "platform_id", "license_id"]),
    "support": ("Support.csv", ["support_id", "platform_id"]),
    "pricing": ("Pricing.csv", ["pricing_id", "platform_id"]),
}


def load(path):
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def show(label, path, cols=None):
    if not path.exists():
        print(f"{label}: MISSING -> {path}")
        return None
    df = load(path)
    print(f"{label}: {path} -> rows={len(df)}")
    if cols:
        missing = [c for c in cols if c not in df.columns]
        if missing:
            print(f"  Missing cols: {missing}")
    return df


def dangling(df, col, ids):
    if df is None or col not in df.columns:
        return []
    vals = df[col][df[col] != ""]
    return sorted(set(vals) - ids)


frames = {}
print("== Data files ==")
for name, (fname, cols) in FILES.items():
    frames[name] = show(name, data / fname, cols)

platforms = frames["platforms"]
platform_ids = set(platforms["platform_id"]) if platforms is not None and "platform_id" in platforms else set()
companies = frames["companies"]
company_ids = set(companies["company_id"]) if companies is not None and "company_id" in companies else set()
licenses = frames["licenses"]
license_ids = set(licenses["license_id"]) if licenses is not None and "license_id" in licenses else set()

print("\n== Cross-check ==")
checks = [
    ("platforms.company_id", frames["platforms"], "company_id", company_ids),
    ("licenses.platform_id", frames["licenses"], "platform_id", platform_ids),
    ("support.platform_id", frames["support"], "platform_id", platform_ids),
    ("pricing.platform_id", frames["pricing"], "platform_id", platform_ids),
    ("platform_licenses.platform_id", frames["platform_licenses"], "platform_id", platform_ids),
    ("platform_licenses.license_id", frames["platform_licenses"], "license_id", license_ids),
]
for label, df, col, ids in checks:
    bad = dangling(df, col, ids)
    print(f"{label}: {'OK' if not bad else f'{len(bad)} dangling -> {bad[:5]}'}")

if platforms is not None and "company_id" in platforms:
    unmatched = int((platforms["company_id"] == "").sum())
    print(f"platforms without company: {unmatched}")
