#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Slot grammar codec for Golestan timetable cells.

A slot token is the compact form ``d<day>/<HH:MM>-<HH:MM>`` of one weekly
meeting, with day 0 = Saturday ... 6 = Friday. The encode half rewrites the
portal's Persian "day + time" phrases into tokens; the decode half turns a
token back into a typed CourseTime.

Encoding is a fixed, ordered rewrite table followed by a small positional
split:

1. Weekday phrases become ``d<index>/``.
2. Session labels (lecture, exercise) become the delimiter ``c``.
3. The exam keyword becomes the delimiter ``e``; the "hour" keyword and all
   whitespace are dropped.
4. Everything before the first ``e`` is the meetings segment, split on ``c``.
   The fragment before the first ``c`` is discarded and at most five slot
   fragments are kept, each cut at the location marker.

Exam text is aligned beforehand so that its segment reads
``e(<date>):<HH:MM>-<HH:MM>``.
"""

import re
from datetime import time
from typing import List, NamedTuple, Tuple

import jdatetime

from .exceptions import (
    EndBeforeStart,
    InvalidDay,
    InvalidExamWindow,
    InvalidTime,
    InvalidTimeRange,
)
from .normalizer import normalize_digits
from ..data.models import MAX_SLOTS, CourseTime, ExamWindow

SESSION_DELIMITER = 'c'
EXAM_DELIMITER = 'e'
LOCATION_MARKER = 'مکان'

# Ordered (pattern, replacement) rules, written against normalize_digits output.
# A phrase must precede every shorter phrase that is a substring of it:
# all the compound weekdays end in "شنبه", so bare "شنبه" comes after them,
# and weekday codes are produced before whitespace is stripped.
REWRITE_RULES: List[Tuple[str, str]] = [
    (r'پنج\s*شنبه', 'd5/'),
    (r'چهار\s*شنبه', 'd4/'),
    (r'سه\s*شنبه', 'd3/'),
    (r'دو\s*شنبه', 'd2/'),
    (r'یک\s*شنبه', 'd1/'),
    (r'شنبه', 'd0/'),
    (r'جمعه', 'd6/'),
    # half-semester markers
    (r'نیمه[12]\s*ت', ''),
    (r'درس\s*\(\s*[تع]\s*\)\s*:', SESSION_DELIMITER),
    (r'حل\s*تمرین\s*\(\s*[تع]\s*\)\s*:', SESSION_DELIMITER),
    (r'امتحان', EXAM_DELIMITER),
    (r'ساعت', ''),
    # odd/even week marker after a time range; parity is not modeled
    (r'\s+[فز](?!\w)', ''),
    (r'،', ''),
    (r'\s+', ''),
]

# One left-to-right scan; at each position the earliest rule that matches wins
_REWRITE_RE = re.compile('|'.join(f'({pattern})' for pattern, _ in REWRITE_RULES))

_EXAM_DATE_RE = re.compile(r'تاریخ\s*:\s*')
_EXAM_HOUR_RE = re.compile(r'\s*ساعت\s*:')

_DAY_RE = re.compile(r'-?[0-9]+')
_CLOCK_RE = re.compile(r'([0-9]{1,2}):([0-9]{2})')
_DATE_RE = re.compile(r'([0-9]{4})/([0-9]{1,2})/([0-9]{1,2})')


class EncodedCell(NamedTuple):
    """Result of encoding one time/exam cell pair."""

    slots: List[str]
    exam_segment: str


def apply_rules(text):
    """Run the rewrite table over already normalized text."""
    return _REWRITE_RE.sub(lambda m: REWRITE_RULES[m.lastindex - 1][1], text)


def align_exam_phrase(text):
    """
    Rewrite the first "تاریخ: ... ساعت: ..." phrase into "امتحان(...) ساعت : ...".

    After the rewrite table runs this reads ``e(<date>):<range>``, which is
    what parse_exam_segment locates positionally.
    """
    match = _EXAM_DATE_RE.search(text)
    if not match:
        return text
    tail = _EXAM_HOUR_RE.sub(') ساعت :', text[match.end():], count=1)
    return text[:match.start()] + 'امتحان(' + tail


def encode_cell(time_text, exam_text=''):
    """
    Encode the raw meeting cell and exam cell of one course row.

    Args:
        time_text: Raw text of the day/time cell
        exam_text: Raw text of the exam cell, may be empty

    Returns:
        EncodedCell: up to five candidate slot strings and the exam segment
        (empty when the row carries no exam phrase). Candidates are not
        validated here; see decode_slot.
    """
    text = f"{normalize_digits(time_text)} {normalize_digits(exam_text)}"
    processed = apply_rules(align_exam_phrase(text))

    exam_segment = ''
    exam_index = processed.find(EXAM_DELIMITER)
    if exam_index != -1:
        exam_segment = processed[exam_index:]
        processed = processed[:exam_index]

    slots = []
    for fragment in processed.split(SESSION_DELIMITER)[1:MAX_SLOTS + 1]:
        location_index = fragment.find(LOCATION_MARKER)
        if location_index != -1:
            fragment = fragment[:location_index]
        if fragment:
            slots.append(fragment)

    return EncodedCell(slots, exam_segment)


def parse_exam_segment(segment):
    """Split ``e(<date>):<range>`` into its date and time-range strings."""
    date = ''
    open_index = segment.find('(')
    if open_index != -1:
        close_index = segment.find(')', open_index)
        if close_index != -1:
            date = segment[open_index + 1:close_index].replace('.', '/').strip()

    time_range = ''
    range_index = segment.find('):')
    if range_index != -1:
        time_range = segment[range_index + 2:].strip()

    return date, time_range


def _parse_clock(text, token, error):
    match = _CLOCK_RE.fullmatch(text.strip())
    if not match:
        raise error(token, f"{text!r} is not HH:MM")
    try:
        return time(int(match.group(1)), int(match.group(2)))
    except ValueError:
        raise error(token, f"{text!r} is out of range") from None


def decode_slot(token):
    """
    Decode one slot token into a CourseTime.

    One-digit hours are read as the portal sometimes prints them;
    CourseTime.to_token() gives the canonical ``HH:MM`` spelling.

    Raises:
        InvalidDay: missing ``d`` prefix or day outside 0-6
        InvalidTimeRange: no ``/`` or not exactly two ``-`` parts
        InvalidTime: a part is not a 24-hour HH:MM value
        EndBeforeStart: end is not strictly after start
    """
    if not token.startswith('d'):
        raise InvalidDay(token, "missing 'd' prefix")

    day_part, separator, range_part = token[1:].partition('/')
    if not _DAY_RE.fullmatch(day_part) or not 0 <= int(day_part) <= 6:
        raise InvalidDay(token)

    parts = range_part.split('-')
    if not separator or len(parts) != 2:
        raise InvalidTimeRange(token)

    start = _parse_clock(parts[0], token, InvalidTime)
    end = _parse_clock(parts[1], token, InvalidTime)
    if end <= start:
        raise EndBeforeStart(token)

    return CourseTime(int(day_part), start, end)


def decode_slots(tokens):
    """Decode every non-empty token; the first bad token aborts with its error."""
    return [decode_slot(token) for token in tokens if token]


def decode_exam(date, time_range):
    """
    Combine a ``YYYY/MM/DD`` date and an ``HH:MM-HH:MM`` range into an ExamWindow.

    The date is read in the Solar Hijri calendar the portal prints; no
    conversion to another calendar happens here. The window keeps the
    zero-padded forms of both strings.

    Raises:
        InvalidExamWindow: on any format error or when end is not after start
    """
    token = f"{date} {time_range}".strip()
    date_match = _DATE_RE.fullmatch(date.strip())
    if not date_match:
        raise InvalidExamWindow(token, 'date must be YYYY/MM/DD')

    parts = time_range.split('-')
    if len(parts) != 2:
        raise InvalidExamWindow(token, 'time must be HH:MM-HH:MM')
    start_time = _parse_clock(parts[0], token, InvalidExamWindow)
    end_time = _parse_clock(parts[1], token, InvalidExamWindow)

    year, month, day = (int(value) for value in date_match.groups())
    try:
        start = jdatetime.datetime(year, month, day, start_time.hour, start_time.minute)
        end = jdatetime.datetime(year, month, day, end_time.hour, end_time.minute)
    except ValueError as e:
        raise InvalidExamWindow(token, str(e)) from None

    if end <= start:
        raise InvalidExamWindow(token, 'end must be after start')

    return ExamWindow(
        date=f"{year:04d}/{month:02d}/{day:02d}",
        time_range=f"{start_time:%H:%M}-{end_time:%H:%M}",
        start=start,
        end=end,
    )
