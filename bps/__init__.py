"""BPS-Erfassung: Roster, Katalog, Wizard-Zustand und Übermittlung."""

from bps.catalog import resolve_catalog
from bps.errors import BpsApiError, BpsError, RecordRequestError, SelectionValidationError
from bps.roster import filter_by_name, group_by_classroom
from bps.selection import SelectionMode, SelectionState, WizardStep
from bps.submission import SubmissionEngine, SubmissionOutcome, SubmissionResult

__all__ = [
    "resolve_catalog",
    "BpsApiError",
    "BpsError",
    "RecordRequestError",
    "SelectionValidationError",
    "filter_by_name",
    "group_by_classroom",
    "SelectionMode",
    "SelectionState",
    "WizardStep",
    "SubmissionEngine",
    "SubmissionOutcome",
    "SubmissionResult",
]
