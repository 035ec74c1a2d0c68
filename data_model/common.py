"""
Wspólne typy pierwotne modelu formularza.

Mapowanie na format wymiany (import / eksport JSON):
  formType      → FormKind
  width         → FieldWidth
  status        → FormStatus  (tylko reprezentacja wewnętrzna)
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, TypeAlias

# ---------------------------------------------------------------------------
# Aliasy typów
# ---------------------------------------------------------------------------

# Identyfikatory są nadawane przez wywołującego (nie przez silnik) i służą
# jako jedyny klucz dopasowania węzła importu do węzła istniejącego.
NodeId: TypeAlias = str

# Otwarta mapa atrybutów (settings, metadata, bloki konfiguracji pola).
AttrMap: TypeAlias = dict[str, Any]


# ---------------------------------------------------------------------------
# Enumy
# ---------------------------------------------------------------------------

class FormKind(StrEnum):
    """Rodzaj formularza. Wire: formType"""
    UAD_3_6 = "UAD_3_6"
    UAD_2_6 = "UAD_2_6"
    BPO     = "BPO"
    OTHER   = "Other"


class FieldWidth(StrEnum):
    """Szerokość pola w siatce sekcji. Wire: width (domyślnie full)"""
    QUARTER        = "quarter"
    HALF           = "half"
    THREE_QUARTERS = "three_quarters"
    FULL           = "full"


class FormStatus(StrEnum):
    """Status cyklu życia dokumentu (nie jest eksportowany)."""
    DRAFT     = "draft"
    PUBLISHED = "published"
    ARCHIVED  = "archived"
    TEMPLATE  = "template"


# ---------------------------------------------------------------------------
# Czas
# ---------------------------------------------------------------------------

def utcnow() -> datetime:
    """Bieżący czas UTC (świadomy strefy), z dokładnością do mikrosekund."""
    return datetime.now(timezone.utc)
