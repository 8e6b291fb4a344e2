"""Split meeting transcripts into sentences and parse each one as a task."""
from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from app.services.task_parser import ParsedTask, parse_task

_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


def split_sentences(transcript: str) -> List[str]:
    """Return the trimmed, non-empty sentences of ``transcript`` in order."""
    fragments = _SENTENCE_BOUNDARY.split(transcript or "")
    return [fragment.strip() for fragment in fragments if fragment.strip()]


def parse_transcript(transcript: str, now: Optional[datetime] = None) -> List[ParsedTask]:
    """Parse every sentence independently.

    Low-confidence results are kept; callers decide what to persist.
    """
    now = now or datetime.now()
    return [parse_task(sentence, now=now) for sentence in split_sentences(transcript)]
