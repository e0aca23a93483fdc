"""Centralized constants for the revisor application.

Scheduling defaults and storage names live here so every layer
imports from a single source of truth.
"""

# ---------- Scheduling ----------
DEFAULT_REVISION_INTERVALS = (1, 3, 7, 14, 30)  # days

# ---------- Retention ----------
AUTO_DELETE_DAYS = 7

# ---------- Storage ----------
STORAGE_KEY = "revisionItems"
DATA_FILE_NAME = "revisions.json"
