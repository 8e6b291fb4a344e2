from __future__ import annotations

from datetime import date, datetime

from app.services.meeting_minutes import parse_transcript, split_sentences
from app.services.task_parser import parse_task

NOW = datetime(2025, 6, 18, 9, 30)

TRANSCRIPT = (
    "Aman you take the landing page by 10pm tomorrow. "
    "Rajeev you take care of client follow-up by Wednesday."
)


def test_split_on_sentence_punctuation():
    assert split_sentences("Do X. Do Y!") == ["Do X", "Do Y"]


def test_split_collapses_punctuation_runs_and_drops_empty_fragments():
    assert split_sentences("  Ship it?!  ... Then rest.. ") == ["Ship it", "Then rest"]
    assert split_sentences("...") == []
    assert split_sentences("") == []


def test_each_sentence_parsed_independently():
    results = parse_transcript(TRANSCRIPT, now=NOW)
    assert len(results) == 2

    first, second = results
    assert first.assignee == "Aman"
    assert first.due_date == datetime(2025, 6, 19, 22, 0)
    assert second.assignee == "Rajeev"
    assert second.due_date.date() == date(2025, 6, 25)
    assert second.name == "take care of client follow-up by"


def test_transcript_matches_single_task_parsing():
    sentences = split_sentences(TRANSCRIPT)
    assert parse_transcript(TRANSCRIPT, now=NOW) == [parse_task(sentence, now=NOW) for sentence in sentences]


def test_degenerate_sentences_are_kept():
    results = parse_transcript("P1. Review the budget!", now=NOW)
    assert len(results) == 2
    assert results[0].name == "Untitled Task"
    assert results[0].priority == "P1"
