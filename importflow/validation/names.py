"""Author-name normalization applied to every customer record."""
from __future__ import annotations

import logging
import unicodedata
from typing import Optional

from importflow.core.errors import NameFormatError
from importflow.core.models import Record

logger = logging.getLogger(__name__)

AUTHOR_FIELD = "author"
UPDATED_COMMENT = "Author name was updated for vendor"
UNPARSEABLE_MESSAGE = "Author name must be 'Surname, Given' or 'Given Surname'"

_NAME_PUNCTUATION = "'-"


def _is_name_token(token: str) -> bool:
    """A name token is letters of any script plus apostrophes and hyphens."""

    token = unicodedata.normalize("NFC", token)
    return bool(token) and all(
        ch in _NAME_PUNCTUATION or unicodedata.category(ch).startswith("L") for ch in token
    )


def is_well_formed(name: str) -> bool:
    """Return True when ``name`` already reads ``Surname, Given``."""

    surname, comma, given = name.partition(",")
    return bool(comma) and _is_name_token(surname.strip()) and _is_name_token(given.strip())


def reformat_author(raw: str) -> str:
    """Turn ``Given Surname`` into ``Surname, Given``.

    Only the first two whitespace-separated tokens are used. Raises
    ``NameFormatError`` when fewer than two tokens are present or the result
    would still not be a valid ``Surname, Given`` value.
    """

    tokens = raw.split()
    if len(tokens) < 2:
        raise NameFormatError(f"expected a given name and a surname, got {raw!r}")

    given, surname = tokens[0], tokens[1]
    candidate = f"{surname}, {given}"
    if not is_well_formed(candidate):
        raise NameFormatError(f"could not build 'Surname, Given' from {raw!r}")
    return candidate


def _already_flagged(record: Record) -> bool:
    cell = record.values[AUTHOR_FIELD]
    return not cell.valid and any(
        message.type == "error" and message.message == UNPARSEABLE_MESSAGE for message in cell.messages
    )


def normalize_author(record: Record) -> Optional[Record]:
    """Rewrite a malformed author field in place.

    Returns the record when it was changed (value rewritten or error
    attached) and ``None`` when there was nothing to do. A record that
    already carries the unparseable-name error is left as it is, so writing
    flagged records back does not keep changing them on later commits.
    """

    author = record.get(AUTHOR_FIELD)
    if author is None:
        return None

    author = str(author)
    if is_well_formed(author):
        return None

    try:
        normalized = reformat_author(author)
    except NameFormatError as exc:
        if _already_flagged(record):
            return None
        logger.warning("Record %s: %s", record.id, exc)
        record.add_error(AUTHOR_FIELD, UNPARSEABLE_MESSAGE)
        return record

    record.set(AUTHOR_FIELD, normalized)
    record.add_comment(AUTHOR_FIELD, UPDATED_COMMENT)
    return record
