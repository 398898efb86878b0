"""Paragraph-scoped word tokenization."""

from __future__ import annotations

import re
from typing import Iterable, List

from tosarchive.scraper.models import WordToken

# Runs of letters/digits, allowing inner apostrophes ("don't", "platform’s").
_WORD_RE = re.compile(r"[^\W_]+(?:['’][^\W_]+)*")


def tokenize(paragraphs: Iterable[str]) -> List[WordToken]:
    """Split *paragraphs* into lowercased words tagged with a 1-based paragraph index."""
    tokens: List[WordToken] = []
    for index, paragraph in enumerate(paragraphs, start=1):
        for match in _WORD_RE.finditer(paragraph):
            tokens.append(WordToken(paragraph_index=index, word=match.group(0).lower()))
    return tokens


def word_count(paragraphs: Iterable[str]) -> int:
    return len(tokenize(paragraphs))
