"""Utility modules for validation, formatting and workspace paths."""

from utils.formatting import extract_db_date, truncate
from utils.validation import validate_ref_name
from utils.workspace import copy_output_file

__all__ = [
    "extract_db_date",
    "truncate",
    "validate_ref_name",
    "copy_output_file",
]
