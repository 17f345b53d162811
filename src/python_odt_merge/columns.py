"""
Expansion of compact column specifications.

A specification is a string of uppercase letters and hyphens. "A-C" means
columns A, B and C; letters outside a range stand for themselves.

Algorithm:
    Letters are accumulated in a pending group. A hyphen marks the next
    letter as a range end. When that letter arrives, the last two letters of
    the group become the range bounds, the letters before them are emitted
    as they are, then the inclusive range is emitted and the group is
    cleared. Letters left in the group at the end are emitted as they are.

    Because the start letter of a range may already have closed the previous
    range, chained ranges repeat their shared letter:
    "A-BB-E" -> A B B C D E.
"""

import logging
import string

logger = logging.getLogger(__name__)

RANGE_MARK = "-"


def expand_columns(spec: str) -> list[str]:
    """Expand a column specification into single-letter column names.

    Args:
        spec: Letters A-Z and hyphens, e.g. "A-C" or "A-BB-E"

    Returns:
        Column letters in order, duplicates preserved. A reversed range
        such as "C-A" contributes no letters.

    Raises:
        ValueError: If `spec` contains anything but A-Z and '-'

    Example:
        >>> expand_columns("A-C")
        ['A', 'B', 'C']
        >>> expand_columns("A-BB-E")
        ['A', 'B', 'B', 'C', 'D', 'E']
    """
    invalid = sorted({char for char in spec if char not in string.ascii_uppercase + RANGE_MARK})
    if invalid:
        raise ValueError(f"Invalid column specification {spec!r}: unexpected {invalid}")

    if len(spec) == 1 and spec != RANGE_MARK:
        return [spec]

    columns: list[str] = []
    group: list[str] = []
    in_range = False
    for char in spec:
        if char == RANGE_MARK:
            in_range = True
            continue
        group.append(char)
        if in_range and len(group) >= 2:
            end = group.pop()
            start = group.pop()
            columns.extend(group)
            if start > end:
                logger.warning("Reversed column range %s-%s in %r ignored", start, end, spec)
            columns.extend(chr(code) for code in range(ord(start), ord(end) + 1))
            group.clear()
        in_range = False

    columns.extend(group)
    return columns


def column_letters(count: int) -> list[str]:
    """Return the first `count` column letters (A, B, C, ...).

    Raises:
        ValueError: If more than 26 columns are requested
    """
    if count > len(string.ascii_uppercase):
        limit = len(string.ascii_uppercase)
        raise ValueError(f"At most {limit} columns are supported, got {count}")
    return list(string.ascii_uppercase[:count])
