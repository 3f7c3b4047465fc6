"""
Line Diff Engine

Longest-common-subsequence line diff computed in linear space: Hirschberg
splits over bit-parallel LCS rows. Lines keep their terminators so the
classified output reproduces both inputs exactly.
"""

from typing import Dict, List, Sequence, Tuple

from ..models.diff import DiffLine, LineKind


def split_lines(text: str) -> List[str]:
    """
    Split text into lines, keeping the trailing newline on each line.

    Only "\\n" separates lines; "\\r\\n" endings stay attached to the line text.
    A final line without a newline is kept as-is.
    """
    if not text:
        return []

    parts = text.split('\n')
    lines = [part + '\n' for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def compute_line_diff(before: str, after: str) -> List[DiffLine]:
    """
    Compute a minimal line-level diff between two texts.

    Args:
        before: Original content
        after: New content

    Returns:
        Classified lines; removed lines precede added lines within each
        changed region, and equal input always yields the same output.
    """
    old = split_lines(before)
    new = split_lines(after)

    # 공통 prefix/suffix는 정렬 대상에서 제외
    prefix = 0
    limit = min(len(old), len(new))
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1

    suffix = 0
    while (
        suffix < limit - prefix
        and old[len(old) - 1 - suffix] == new[len(new) - 1 - suffix]
    ):
        suffix += 1

    old_mid = old[prefix:len(old) - suffix]
    new_mid = new[prefix:len(new) - suffix]

    lines = [DiffLine(LineKind.UNCHANGED, text) for text in old[:prefix]]
    lines.extend(_emit(old_mid, new_mid, _match_lines(old_mid, new_mid)))
    lines.extend(DiffLine(LineKind.UNCHANGED, text) for text in old[len(old) - suffix:])
    return lines


def _match_lines(old: Sequence[str], new: Sequence[str]) -> List[Tuple[int, int]]:
    """Return the (old index, new index) pairs of one longest common subsequence."""
    if not old or not new:
        return []

    # 상대편에 없는 라인은 LCS에 포함될 수 없으므로 먼저 제거
    old_lines = set(old)
    new_lines = set(new)
    old_index = [i for i, text in enumerate(old) if text in new_lines]
    new_index = [j for j, text in enumerate(new) if text in old_lines]
    if not old_index:
        return []

    codes: Dict[str, int] = {}
    old_codes = [codes.setdefault(old[i], len(codes)) for i in old_index]
    new_codes = [codes.setdefault(new[j], len(codes)) for j in new_index]

    pairs: List[Tuple[int, int]] = []
    _hirschberg(old_codes, new_codes, 0, 0, pairs)
    return [(old_index[a], new_index[b]) for a, b in pairs]


def _hirschberg(
    old: Sequence[int],
    new: Sequence[int],
    old_offset: int,
    new_offset: int,
    pairs: List[Tuple[int, int]]
) -> None:
    """Append matched index pairs in order, splitting on the middle "before" line."""
    n, m = len(old), len(new)

    head = 0
    while head < n and head < m and old[head] == new[head]:
        pairs.append((old_offset + head, new_offset + head))
        head += 1

    tail = 0
    while tail < n - head and tail < m - head and old[n - 1 - tail] == new[m - 1 - tail]:
        tail += 1

    if head or tail:
        _hirschberg(
            old[head:n - tail], new[head:m - tail], old_offset + head, new_offset + head, pairs
        )
        pairs.extend(
            (old_offset + n - tail + k, new_offset + m - tail + k) for k in range(tail)
        )
        return

    if n == 0 or m == 0:
        return

    if n == 1:
        line = old[0]
        for j, other in enumerate(new):
            if other == line:
                pairs.append((old_offset, new_offset + j))
                return
        return

    mid = n // 2
    forward = _lcs_row(old[:mid], new)
    backward = _lcs_row(old[:mid - 1:-1], new[::-1])

    # ties go to the rightmost split, so insertions come before the matched
    # line and earlier "before" lines stay available for a match
    split, best = 0, -1
    for j in range(m + 1):
        score = forward[j] + backward[m - j]
        if score >= best:
            split, best = j, score

    _hirschberg(old[:mid], new[:split], old_offset, new_offset, pairs)
    _hirschberg(old[mid:], new[split:], old_offset + mid, new_offset + split, pairs)


def _lcs_row(old: Sequence[int], new: Sequence[int]) -> List[int]:
    """
    LCS lengths of old against every prefix of new.

    Bit-parallel row update: bit j of the vector is 0 where the LCS length
    grows between new[:j] and new[:j + 1].
    """
    m = len(new)
    if m == 0:
        return [0]

    masks: Dict[int, int] = {}
    for j, line in enumerate(new):
        masks[line] = masks.get(line, 0) | (1 << j)

    full = (1 << m) - 1
    vector = full
    for line in old:
        matched = vector & masks.get(line, 0)
        vector = ((vector + matched) | (vector - matched)) & full

    row = [0]
    length = 0
    for bit in reversed(format(vector, "b").zfill(m)):
        if bit == "0":
            length += 1
        row.append(length)
    return row


def _emit(old: Sequence[str], new: Sequence[str], pairs: List[Tuple[int, int]]) -> List[DiffLine]:
    """Classify lines around the matched pairs, removals before additions."""
    lines: List[DiffLine] = []
    i = j = 0
    for old_pos, new_pos in pairs:
        lines.extend(DiffLine(LineKind.REMOVED, text) for text in old[i:old_pos])
        lines.extend(DiffLine(LineKind.ADDED, text) for text in new[j:new_pos])
        lines.append(DiffLine(LineKind.UNCHANGED, old[old_pos]))
        i, j = old_pos + 1, new_pos + 1

    lines.extend(DiffLine(LineKind.REMOVED, text) for text in old[i:])
    lines.extend(DiffLine(LineKind.ADDED, text) for text in new[j:])
    return lines
