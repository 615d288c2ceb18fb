"""Fuzzy subsequence scoring and ranking of menu entries.

Scores reward contiguous runs, word-boundary hits, and shorter names.
Entries that do not match rank after all matches in base order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .model import Entry

_BOUNDARY_CHARS = frozenset(" \t/_-.:")

_RUN_BONUS = 20
_RUN_STEP = 4
_RUN_CAP = 4
_GAP_STEP = 2
_GAP_CAP = 40
_BOUNDARY_BONUS = 35


@dataclass(frozen=True)
class RankedEntry:
    """An entry annotated with its score and highlighted character spans.

    ``score`` is ``None`` when the entry does not match the current query.
    ``match_spans`` are half-open ``(start, end)`` ranges into ``entry.name``.
    """

    entry: Entry
    score: int | None
    match_spans: tuple[tuple[int, int], ...] = ()
    base_index: int = 0

    @property
    def matched(self) -> bool:
        return self.score is not None


def _fold_char(ch: str) -> str:
    """Case-fold one character without changing string length."""
    folded = ch.casefold()
    if len(folded) == 1:
        return folded
    lowered = ch.lower()
    return lowered if len(lowered) == 1 else ch


def _fold(text: str) -> list[str]:
    return [_fold_char(ch) for ch in text]


def _is_word_boundary(name: str, idx: int) -> bool:
    if idx == 0:
        return True
    prev = name[idx - 1]
    if prev in _BOUNDARY_CHARS:
        return True
    return prev.islower() and name[idx].isupper()


def _match_positions(query: list[str], candidate: list[str], name: str) -> list[int] | None:
    """Return candidate indices of the best-scoring subsequence match, or ``None``.

    Dynamic programming over (query index, candidate index, capped run
    length) with the bonuses and penalties of ``_score_positions``. Running
    maxima keep the gap transition linear in the candidate length.
    """
    size = len(candidate)
    boundary = [_is_word_boundary(name, idx) for idx in range(size)]
    rows: list[list[list[tuple[int, tuple[int, int] | None] | None]]] = []
    prev_best: list[int | None] = []
    prev_run: list[int] = []

    for qi, qch in enumerate(query):
        row: list[list[tuple[int, tuple[int, int] | None] | None]] = [
            [None] * (_RUN_CAP + 1) for _ in range(size)
        ]
        lin: int | None = None
        cap: int | None = None
        lin_at = cap_at = -1
        for idx in range(size):
            if qi > 0:
                if lin is not None:
                    lin -= _GAP_STEP
                prev = idx - 2
                if prev >= 0 and prev_best[prev] is not None:
                    if lin is None or prev_best[prev] - _GAP_STEP >= lin:
                        lin, lin_at = prev_best[prev] - _GAP_STEP, prev
                    if cap is None or prev_best[prev] >= cap:
                        cap, cap_at = prev_best[prev], prev
            if candidate[idx] != qch:
                continue

            bonus = _BOUNDARY_BONUS if boundary[idx] else 0
            cells = row[idx]
            if qi == 0:
                if idx == 0:
                    cells[1] = (_RUN_BONUS + _RUN_STEP + bonus, None)
                else:
                    cells[0] = (bonus - min(_GAP_CAP, idx * _GAP_STEP), None)
                continue

            if idx > 0:
                for run, cell in enumerate(rows[-1][idx - 1]):
                    if cell is None:
                        continue
                    nxt = min(_RUN_CAP, run + 1)
                    score = cell[0] + _RUN_BONUS + _RUN_STEP * nxt + bonus
                    if cells[nxt] is None or score > cells[nxt][0]:
                        cells[nxt] = (score, (idx - 1, run))

            gapped: tuple[int, int] | None = None
            if lin is not None:
                gapped = (lin, lin_at)
            if cap is not None and (gapped is None or cap - _GAP_CAP > gapped[0]):
                gapped = (cap - _GAP_CAP, cap_at)
            if gapped is not None:
                score, prev = gapped
                cells[0] = (score + bonus, (prev, prev_run[prev]))

        rows.append(row)
        prev_best, prev_run = _best_per_position(row)
        if all(best is None for best in prev_best):
            return None

    end = -1
    for idx, best in enumerate(prev_best):
        if best is not None and (end < 0 or best > prev_best[end]):
            end = idx

    positions: list[int] = []
    idx, run = end, prev_run[end]
    for qi in range(len(query) - 1, -1, -1):
        positions.append(idx)
        parent = rows[qi][idx][run][1]
        if parent is None:
            break
        idx, run = parent
    positions.reverse()
    return positions


def _best_per_position(row) -> tuple[list[int | None], list[int]]:
    """Best score at each candidate index, preferring longer runs on ties."""
    best: list[int | None] = []
    runs: list[int] = []
    for cells in row:
        top: int | None = None
        top_run = 0
        for run in range(_RUN_CAP, -1, -1):
            cell = cells[run]
            if cell is not None and (top is None or cell[0] > top):
                top, top_run = cell[0], run
        best.append(top)
        runs.append(top_run)
    return best, runs


def _score_positions(name: str, positions: list[int]) -> int:
    score = 0
    prev_idx = -1
    run = 0
    for idx in positions:
        if idx == prev_idx + 1:
            run += 1
            score += _RUN_BONUS + _RUN_STEP * min(_RUN_CAP, run)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(_GAP_CAP, gap * _GAP_STEP)
        if _is_word_boundary(name, idx):
            score += _BOUNDARY_BONUS
        prev_idx = idx

    score -= len(name)
    return score


def _spans(positions: list[int]) -> tuple[tuple[int, int], ...]:
    """Merge sorted positions into half-open contiguous ranges."""
    spans: list[tuple[int, int]] = []
    for idx in positions:
        if spans and spans[-1][1] == idx:
            spans[-1] = (spans[-1][0], idx + 1)
        else:
            spans.append((idx, idx + 1))
    return tuple(spans)


def fuzzy_match(query: str, name: str) -> tuple[int, tuple[tuple[int, int], ...]] | None:
    """Score ``name`` against ``query``; ``None`` when not a subsequence."""
    if not query:
        return 0, ()
    positions = _match_positions(_fold(query), _fold(name), name)
    if positions is None:
        return None
    return _score_positions(name, positions), _spans(positions)


def rank(entries: Sequence[Entry], query: str) -> list[RankedEntry]:
    """Rank ``entries`` for ``query``.

    An empty query keeps base order with a neutral score of ``0``. Otherwise
    matches sort by score descending then base order, followed by all
    non-matching entries in base order.
    """
    if not query:
        return [RankedEntry(entry, 0, (), idx) for idx, entry in enumerate(entries)]

    matched: list[RankedEntry] = []
    unmatched: list[RankedEntry] = []
    for idx, entry in enumerate(entries):
        result = fuzzy_match(query, entry.name)
        if result is None:
            unmatched.append(RankedEntry(entry, None, (), idx))
            continue
        score, spans = result
        matched.append(RankedEntry(entry, score, spans, idx))

    matched.sort(key=lambda item: (-item.score, item.base_index))
    return matched + unmatched


def matching_count(ranked: Sequence[RankedEntry]) -> int:
    """Count ranked entries that carry a score (matches sort first)."""
    count = 0
    for item in ranked:
        if not item.matched:
            break
        count += 1
    return count
