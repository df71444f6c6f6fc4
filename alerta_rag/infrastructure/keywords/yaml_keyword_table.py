"""Keyword category table loaded from YAML.

Expected layout::

    categories:
      - name: pix
        triggers: [pix]
        targets: [pix]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from alerta_rag.domain.errors import ValidationError
from alerta_rag.domain.services.keyword_matching import KeywordCategory, KeywordMatcher


def _terms(entry: dict[str, Any], key: str, name: str) -> tuple[str, ...]:
    raw = entry.get(key) or []
    if isinstance(raw, str):
        raw = [raw]
    terms = tuple(str(t).strip() for t in raw if str(t).strip())
    if not terms:
        raise ValidationError(f"keyword category '{name}' has no {key}")
    return terms


def parse_keyword_categories(data: Any) -> list[KeywordCategory]:
    if not isinstance(data, dict) or not isinstance(data.get("categories"), list):
        raise ValidationError("keyword table must contain a 'categories' list")
    categories: list[KeywordCategory] = []
    for i, entry in enumerate(data["categories"]):
        if not isinstance(entry, dict):
            raise ValidationError(f"keyword category #{i} must be a mapping")
        name = str(entry.get("name") or f"category_{i}")
        categories.append(
            KeywordCategory(
                name=name,
                triggers=_terms(entry, "triggers", name),
                targets=_terms(entry, "targets", name),
            )
        )
    if not categories:
        raise ValidationError("keyword table is empty")
    return categories


def load_keyword_matcher(path: str | Path) -> KeywordMatcher:
    """Build a matcher from a YAML table. Raises ValidationError on bad files."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as ex:
        raise ValidationError(f"cannot read keyword table '{path}': {ex}") from ex
    return KeywordMatcher(parse_keyword_categories(data))
