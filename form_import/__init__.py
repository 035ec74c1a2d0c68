"""
form_import — klasyfikacja, analiza konfliktów i scalanie importów formularza.

Publiczne API:
  classify_and_validate(raw)                         → ValidationReport (value: ClassifiedImport)
  classify(data)                                     → ValidationReport
  analyze(imp, existing, mode, target, resolutions)  → ImportAnalysis
  merge(imp, existing, mode, target, resolutions)    → Document
  allowed_modes(kind, existing)                      → list[MergeMode]
  describe_import_kind(kind)                         → str

Przepływ:
  surowe bajty → parse → klasyfikacja → walidacja → analyze (opcjonalnie,
  do potwierdzenia przez użytkownika) → merge → nowy Document
"""

from .types import (
    PARTIAL_KINDS,
    ClassifiedImport,
    ConflictResolution,
    ConflictType,
    ImportAnalysis,
    ImportConflict,
    ImportModeError,
    ImportSummary,
    MergeMode,
    ResolutionAction,
    Resolutions,
    conflict_key,
    parse_resolutions,
)
from .classifier import (
    ACCEPTED_SHAPES,
    classify,
    classify_and_validate,
    describe_import_kind,
    detect_kind,
)
from .analyzer import allowed_modes, analyze
from .merge import merge

__all__ = [
    "PARTIAL_KINDS",
    "ClassifiedImport",
    "ConflictResolution",
    "ConflictType",
    "ImportAnalysis",
    "ImportConflict",
    "ImportModeError",
    "ImportSummary",
    "MergeMode",
    "ResolutionAction",
    "Resolutions",
    "conflict_key",
    "parse_resolutions",
    "ACCEPTED_SHAPES",
    "classify",
    "classify_and_validate",
    "describe_import_kind",
    "detect_kind",
    "allowed_modes",
    "analyze",
    "merge",
]
