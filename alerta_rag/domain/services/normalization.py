# alerta_rag/domain/services/normalization.py
# Pure domain services: no I/O, deterministic, no external libraries.
from __future__ import annotations

import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")


def fold_text(text: str | None) -> str:
    """Lowercase and strip diacritics (NFD + combining-mark removal)."""
    if not text:
        return ""
    # lowercase first: some lowercase mappings emit combining marks (e.g. "İ")
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_query(text: str | None) -> str:
    """
    Canonical cache key for a free-text question.

    Accents removed, lowercased, whitespace runs collapsed to a single space,
    trimmed. Idempotent: normalize_query(normalize_query(x)) == normalize_query(x).

    Examples:
        >>> normalize_query("  Cálculo   de HORAS ")
        'calculo de horas'
    """
    return _WHITESPACE.sub(" ", fold_text(text)).strip()
