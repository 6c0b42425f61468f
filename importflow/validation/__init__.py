"""Record-level validation and normalization rules."""
from importflow.validation.hooks import apply_record_hook, record_hook
from importflow.validation.names import is_well_formed, normalize_author, reformat_author

__all__ = [
    "apply_record_hook",
    "is_well_formed",
    "normalize_author",
    "record_hook",
    "reformat_author",
]
