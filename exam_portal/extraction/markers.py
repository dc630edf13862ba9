from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

DIGITS = frozenset("0123456789")
_SEPARATORS = frozenset(":.")

# Order matters: longer tokens first so "q." wins over "q" and "question" over "q".
BLOCK_MARKERS: tuple[str, ...] = ("question",)
LABELED_MARKERS: tuple[str, ...] = ("question", "answer", "q.", "q", "a.", "a")


@dataclass(frozen=True)
class MarkerHeader:
    start: int
    end: int
    digits: str


@dataclass(frozen=True)
class MarkedBlock:
    digits: str
    text: str


def parse_question_number(digits: str, question_count: int) -> int | None:
    """
    Value of an ASCII digit run if it lies in `[1, question_count]`, else None.

    Leading zeros are dropped before conversion, and runs longer than the
    bound itself are rejected without calling `int()`, so arbitrarily long
    digit runs never hit the interpreter's int-conversion limit.
    """
    significant = digits.lstrip("0")
    if not significant or question_count <= 0:
        return None
    if len(significant) > len(str(question_count)):
        return None
    number = int(significant)
    return number if number <= question_count else None


def match_header(text: str, pos: int, tokens: Sequence[str]) -> MarkerHeader | None:
    """Match `<token> <ws>* <digits> [:.]?` starting exactly at `pos`."""
    n = len(text)
    for token in tokens:
        stop = pos + len(token)
        if stop > n or text[pos:stop].lower() != token:
            continue

        i = stop
        while i < n and text[i].isspace():
            i += 1
        j = i
        while j < n and text[j] in DIGITS:
            j += 1
        if j == i:
            continue

        digits = text[i:j]
        if j < n and text[j] in _SEPARATORS:
            j += 1
        return MarkerHeader(start=pos, end=j, digits=digits)
    return None


def iter_headers(text: str, tokens: Sequence[str]) -> Iterator[MarkerHeader]:
    """Yield non-overlapping marker headers left to right."""
    initials = {token[0] for token in tokens}
    pos = 0
    n = len(text)
    while pos < n:
        if text[pos].lower() in initials:
            header = match_header(text, pos, tokens)
            if header is not None:
                yield header
                pos = header.end
                continue
        pos += 1


def split_marked_blocks(text: str, tokens: Sequence[str]) -> list[MarkedBlock]:
    """Slice text into blocks, each running from a header to the next header (or end)."""
    headers = list(iter_headers(text, tokens))
    blocks: list[MarkedBlock] = []
    for index, header in enumerate(headers):
        stop = headers[index + 1].start if index + 1 < len(headers) else len(text)
        blocks.append(MarkedBlock(digits=header.digits, text=text[header.end:stop].strip()))
    return blocks
