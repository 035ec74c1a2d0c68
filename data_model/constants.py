"""
Stałe katalogowe modelu formularza.

KNOWN_FIELD_TYPES — rodzaje pól znane edytorowi. Lista NIE jest zamknięta:
  walidator importu akceptuje dowolny niepusty field_type, a nieznany
  zgłasza jedynie jako ostrzeżenie.
"""

from __future__ import annotations

KNOWN_FIELD_TYPES: tuple[str, ...] = (
    # tekstowe
    "text", "textarea", "email", "password", "phone", "url",
    # liczbowe
    "number", "currency", "percentage",
    # wyboru
    "select", "multiselect", "radio", "checkbox", "toggle",
    # data / czas
    "date", "datetime", "time",
    # pliki
    "file", "image", "signature",
    # interaktywne
    "rating", "slider", "matrix",
    # lokalizacja
    "address", "location",
    # wyliczane / dynamiczne
    "calculated", "lookup", "hidden",
    # elementy układu
    "section_break", "page_break", "html_content",
)

# Pola wyboru: bez listy options walidator zgłasza ostrzeżenie.
CHOICE_FIELD_TYPES: frozenset[str] = frozenset(
    {"select", "multiselect", "radio"}
)

# Nazwy pięciu niezależnych bloków konfiguracji pola (+ metadata).
# Brak bloku (None) ≠ blok pusty; rozróżnienie przeżywa merge i eksport.
FIELD_CONFIG_BLOCKS: tuple[str, ...] = (
    "options",
    "validation",
    "conditional_visibility",
    "calculated_config",
    "lookup_config",
    "metadata",
)
