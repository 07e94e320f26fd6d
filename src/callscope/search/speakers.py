"""Heuristic speaker discovery from transcript lines.

Transcripts put the speaker at the start of each intervention
("Rui: estou a chegar"). Sessions extracted by older parsers sometimes
lack explicit source/destination names, so the speaker prefix is the only
identity available. This is a best-effort pattern, not a grammar, and is
kept apart from alias resolution so it can be swapped out.
"""

import re
from collections.abc import Callable, Iterator
from typing import Optional

SPEAKER_LINE_PATTERN = re.compile(r"^([A-ZÀ-Ú][a-zà-ú0-9_\-\s]{1,30}):")

SpeakerExtractor = Callable[[str], Optional[str]]


def extract_line_speaker(line: str) -> Optional[str]:
    """Return the speaker prefix of a transcript line, if any.

    Example:
        >>> extract_line_speaker("Rui: estou a chegar")
        'Rui'
        >>> extract_line_speaker("estou a chegar") is None
        True
    """
    match = SPEAKER_LINE_PATTERN.match(line)
    if not match:
        return None
    name = match.group(1).strip()
    return name or None


def first_line_speaker(content: str) -> Optional[str]:
    """Speaker of the first transcript line."""
    first_line = content.split("\n", 1)[0] if content else ""
    return extract_line_speaker(first_line)


def iter_content_speakers(content: str) -> Iterator[str]:
    """Yield the speaker of every line that has one, in order."""
    for line in content.split("\n"):
        speaker = extract_line_speaker(line)
        if speaker:
            yield speaker
