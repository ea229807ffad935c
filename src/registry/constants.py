"""Centralized constants for the registry module.

Field limits and the sequence origin live here to avoid magic
numbers scattered across validation and service code.
"""

# ContentRecord field limits
MAX_TITLE_LENGTH = 64
MAX_SUMMARY_LENGTH = 128
MAX_LABEL_LENGTH = 32
MAX_LABELS = 10
MIN_LABELS = 1

# Size must satisfy 0 < size < MAX_CONTENT_SIZE
MAX_CONTENT_SIZE = 1_000_000_000

# Content ids start at 1; the counter starts here
INITIAL_SEQUENCE = 0
