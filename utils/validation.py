import html
import re
from typing import Any, Dict, List, Sequence

import bleach

from services.exceptions import InvalidDocumentId

# Firestore rejects ids of the form __.*__ and anything over 1500 bytes
_RESERVED_ID = re.compile(r"^__.*__$")
MAX_ID_BYTES = 1500
MAX_MARKUP_PASSES = 5


def validate_document_id(doc_id: str) -> str:
    """
    Check that a path parameter can name a Firestore document

    Raises:
        InvalidDocumentId: If the id is empty, contains a slash, is '.' or '..',
            uses the reserved __name__ form or is too long
    """
    if (
            not doc_id
            or "/" in doc_id
            or doc_id in (".", "..")
            or _RESERVED_ID.match(doc_id)
            or len(doc_id.encode("utf-8")) > MAX_ID_BYTES
    ):
        raise InvalidDocumentId()
    return doc_id


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic/FastAPI validation errors into {msg, param, location} entries"""
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        formatted.append({
            "msg": error.get("msg", "Invalid value"),
            "param": ".".join(loc[1:]),
            "location": loc[0] if loc else "",
        })
    return formatted


def strip_markup(text: str) -> str:
    """
    Remove HTML tags from user text and return it as plain, trimmed text

    Entities are decoded after each pass, so "a & b" is kept as is and markup
    hidden behind entities is stripped on the next pass.
    """
    for _ in range(MAX_MARKUP_PASSES):
        cleaned = html.unescape(bleach.clean(text, tags=set(), strip=True))
        if cleaned == text:
            break
        text = cleaned
    return text.strip()
