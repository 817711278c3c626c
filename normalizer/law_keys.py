"""
normalizer/law_keys.py — derived key fields of a Law record.

Public API:
  compute_law_keys(law, rules) -> dict   fields to store (only changed ones)
  title_key_of(law) -> str               root_title, else title_normalized
"""

from __future__ import annotations

from typing import Any

from data_model.laws import Law
from normalizer.fingerprint import law_fingerprint
from normalizer.gazette import gazette_key_from_number, normalize_gazette_key
from normalizer.title_key import DEFAULT_RULES, TitleKeyRules, title_keys


def compute_law_keys(law: Law, rules: TitleKeyRules = DEFAULT_RULES) -> dict[str, Any]:
    keys = title_keys(law.title, rules)
    gazette_key = normalize_gazette_key(law.gazette_key) or gazette_key_from_number(law.gazette_number)
    wanted: dict[str, Any] = {
        "title_normalized":     keys.title_normalized or None,
        "root_title":           keys.root_title or None,
        "gazette_key":          gazette_key,
        "document_fingerprint": law_fingerprint(law.document_path, law.source_url),
    }
    # slug is editorial once set; only fill it when missing
    if not law.slug and keys.slug:
        wanted["slug"] = keys.slug
    return {k: v for k, v in wanted.items() if getattr(law, k) != v}


def title_key_of(law: Law) -> str:
    if law.root_title and law.root_title.strip():
        return law.root_title.strip()
    if law.title_normalized and law.title_normalized.strip():
        return law.title_normalized.strip().lower()
    return title_keys(law.title).root_title
