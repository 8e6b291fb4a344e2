from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from app.services.task_parser import (
    NO_ASSIGNEE_WARNING,
    NO_DUE_DATE_WARNING,
    NO_NAME_WARNING,
    UNTITLED_TASK,
    AssigneeLexicon,
    parse_task,
)

# A Wednesday.
NOW = datetime(2025, 6, 18, 9, 30)


def test_full_sentence_extracts_every_field():
    result = parse_task("Call client Rajeev tomorrow 5pm P1", now=NOW)
    assert result.priority == "P1"
    assert result.due_time == "5pm"
    assert result.due_date == datetime(2025, 6, 19, 17, 0)
    assert result.assignee == "Rajeev"
    assert result.name == "Call client"
    assert result.is_valid is True
    assert result.warnings == []
    assert result.errors == []


def test_extracted_tokens_do_not_leak_into_name():
    result = parse_task("Call client Rajeev tomorrow 5pm P1", now=NOW)
    for token in ("P1", "5pm", "tomorrow", "Rajeev"):
        assert token not in result.name


def test_company_after_marker_is_not_an_assignee():
    result = parse_task("Send invoice to Microsoft P2", now=NOW)
    assert result.priority == "P2"
    assert result.assignee is None
    assert result.name == "Send invoice to Microsoft"
    assert NO_ASSIGNEE_WARNING in result.warnings
    assert NO_DUE_DATE_WARNING in result.warnings


def test_leading_name_you_idiom():
    result = parse_task("Aman you take the landing page by 10pm tomorrow", now=NOW)
    assert result.assignee == "Aman"
    assert result.due_time == "10pm"
    assert result.due_date == datetime(2025, 6, 19, 22, 0)
    assert result.name == "take the landing page by"


def test_leading_name_you_strips_please():
    result = parse_task("Aman you please send the deck", now=NOW)
    assert result.assignee == "Aman"
    assert result.name == "send the deck"


def test_leading_capitalized_word_before_you_is_always_the_addressee():
    result = parse_task("Call you later", now=NOW)
    assert result.assignee == "Call"
    assert result.name == "later"


@pytest.mark.parametrize("text", ["", "   "])
def test_empty_input_falls_back_to_untitled_task(text):
    result = parse_task(text, now=NOW)
    assert result.name == UNTITLED_TASK
    assert result.is_valid is True
    assert result.priority == "P3"
    assert result.warnings == [NO_NAME_WARNING, NO_ASSIGNEE_WARNING, NO_DUE_DATE_WARNING]


def test_priority_defaults_to_p3():
    assert parse_task("write the quarterly report", now=NOW).priority == "P3"


def test_priority_is_case_insensitive_and_first_match_wins():
    result = parse_task("deploy build p1 p4", now=NOW)
    assert result.priority == "P1"
    assert result.name == "deploy build p4"


def test_out_of_range_priority_is_ignored():
    result = parse_task("archive logs P5", now=NOW)
    assert result.priority == "P3"
    assert result.name == "archive logs P5"


def test_same_weekday_rolls_forward_a_week():
    result = parse_task("Review docs by Wednesday", now=NOW)
    assert result.due_date == datetime(2025, 6, 25, 9, 30)
    assert result.assignee is None
    assert result.name == "Review docs by"


def test_weekday_later_this_week_with_midnight_time():
    result = parse_task("ship release 12am friday", now=NOW)
    assert result.due_date == datetime(2025, 6, 20, 0, 0)


@pytest.mark.parametrize(
    "text, expected_time, expected_due",
    [
        ("standup at 9:30am today", "9:30am", datetime(2025, 6, 18, 9, 30)),
        ("sync 14:45 tomorrow", "14:45", datetime(2025, 6, 19, 14, 45)),
        ("lunch 12pm today", "12pm", datetime(2025, 6, 18, 12, 0)),
        ("deploy hotfix tonight 11pm", "11pm", datetime(2025, 6, 18, 23, 0)),
        ("prep notes this evening 6:15pm", "6:15pm", datetime(2025, 6, 18, 18, 15)),
    ],
)
def test_time_is_merged_into_date(text, expected_time, expected_due):
    result = parse_task(text, now=NOW)
    assert result.due_time == expected_time
    assert result.due_date == expected_due


def test_time_without_date_leaves_due_date_unset():
    result = parse_task("call mom 5pm", now=NOW)
    assert result.due_time == "5pm"
    assert result.due_date is None
    assert NO_DUE_DATE_WARNING in result.warnings
    assert result.name == "call mom"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("submit report 20th June", datetime(2025, 6, 20)),
        ("renew license 5 Aug 2026", datetime(2026, 8, 5)),
        ("book flights 1st september", datetime(2025, 9, 1)),
        ("pay rent 7/1", datetime(2025, 7, 1)),
        ("archive logs 3/4/99", datetime(1999, 3, 4)),
        ("archive logs 3/4/25", datetime(2025, 3, 4)),
        ("archive logs 3/4/2031", datetime(2031, 3, 4)),
        ("archive logs 1/2/50", datetime(2050, 1, 2)),
        ("archive logs 1/2/51", datetime(1951, 1, 2)),
    ],
)
def test_calendar_dates(text, expected):
    result = parse_task(text, now=NOW)
    assert result.due_date == expected
    assert result.warnings == [NO_ASSIGNEE_WARNING]


def test_calendar_date_takes_time_of_day():
    result = parse_task("renew license 5 Aug 2026 10:30am", now=NOW)
    assert result.due_date == datetime(2026, 8, 5, 10, 30)


@pytest.mark.parametrize("token", ["31 June", "13/45", "0/0"])
def test_invalid_calendar_date_is_consumed_with_warning(token):
    result = parse_task(f"file taxes {token}", now=NOW)
    assert result.due_date is None
    assert result.name == "file taxes"
    assert f"Could not parse date: {token}" in result.warnings
    assert NO_DUE_DATE_WARNING in result.warnings


def test_impossible_time_keeps_the_date():
    result = parse_task("rotate keys 25:00 tomorrow", now=NOW)
    assert result.due_time == "25:00"
    assert result.due_date == datetime(2025, 6, 19, 9, 30)
    assert "Could not parse time: 25:00" in result.warnings


def test_aware_reference_time_is_preserved():
    now = datetime(2025, 6, 18, 9, 30, tzinfo=ZoneInfo("Asia/Kolkata"))
    result = parse_task("Call client Rajeev tomorrow 5pm", now=now)
    assert result.due_date == datetime(2025, 6, 19, 17, 0, tzinfo=ZoneInfo("Asia/Kolkata"))


def test_marker_assignee_is_capitalized():
    result = parse_task("prepare slides for sarah", now=NOW)
    assert result.assignee == "Sarah"
    assert result.name == "prepare slides"


def test_company_falls_through_to_capitalized_scan():
    result = parse_task("send deck to Google with Olivia", now=NOW)
    assert result.assignee == "Olivia"
    assert result.name == "send deck to Google with"


def test_common_name_matches_lowercase():
    result = parse_task("review pr with shreya", now=NOW)
    assert result.assignee == "Shreya"
    assert result.name == "review pr with"


def test_name_equal_to_detected_verb_is_skipped():
    lexicon = AssigneeLexicon(names=("finish", "aman"))
    result = parse_task("finish the report with aman", now=NOW, lexicon=lexicon)
    assert result.assignee == "Aman"
    assert result.name == "finish the report with"


def test_custom_company_list():
    lexicon = AssigneeLexicon(companies=frozenset({"acme"}))
    result = parse_task("ship order to Acme", now=NOW, lexicon=lexicon)
    assert result.assignee is None


def test_parsing_is_deterministic():
    text = "Aman you take the landing page by 10pm tomorrow P2"
    assert parse_task(text, now=NOW) == parse_task(text, now=NOW)


@pytest.mark.parametrize("text", ["!!!", "99:99", "P9 P0", "to", "you please", "by", "12/12/12/12"])
def test_odd_input_never_raises(text):
    result = parse_task(text, now=NOW)
    assert result.priority in {"P1", "P2", "P3", "P4"}
    assert result.name
