"""
Lenient parser for term/definition lists pasted from flashcard sites.

Accepted layouts, detected in this order:

1. ``term<TAB>definition`` per line
2. ``term - definition`` per line
3. ``term,definition`` per line
4. term and definition on alternating lines
"""
import re
from dataclasses import dataclass
from typing import List

import structlog

logger = structlog.get_logger()

TITLE_PREVIEW_CHARS = 20


class CardImportError(Exception):
    """Pasted text could not be turned into cards. The message is user-facing."""


@dataclass(frozen=True)
class ImportedTerm:
    term: str
    definition: str


@dataclass(frozen=True)
class ImportedSet:
    title: str
    terms: List[ImportedTerm]


def _split_pairs(lines, separator):
    pairs = []
    for line in lines:
        parts = [part.strip() for part in line.split(separator)]
        pairs.append((parts[0], parts[1] if len(parts) > 1 else ""))
    return pairs


def parse_card_text(text: str) -> ImportedSet:
    text = text.lstrip("\ufeff")
    lines = [line for line in re.split(r"\r?\n", text) if line.strip()]
    if not lines:
        raise CardImportError("Please paste some content first")

    if "\t" in text:
        layout, pairs = "tab", _split_pairs(lines, "\t")
    elif " - " in text:
        layout, pairs = "dash", _split_pairs(lines, " - ")
    elif "," in text:
        layout, pairs = "comma", _split_pairs(lines, ",")
    else:
        layout = "alternating"
        pairs = [
            (lines[i].strip(), lines[i + 1].strip())
            for i in range(0, len(lines) - 1, 2)
        ]

    terms = []
    for term, definition in pairs:
        if not term or not definition:
            logger.warning("import_term_skipped", term=term, definition=definition)
            continue
        terms.append(ImportedTerm(term=term, definition=definition))

    if not terms:
        raise CardImportError(
            "Could not find any valid flashcards in the text. "
            "Please check the format and try again."
        )

    logger.info("import_parsed", layout=layout, line_count=len(lines), term_count=len(terms))
    title = f"Imported Deck ({terms[0].term[:TITLE_PREVIEW_CHARS]}...)"
    return ImportedSet(title=title, terms=terms)
