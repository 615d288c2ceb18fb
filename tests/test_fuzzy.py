from __future__ import annotations

import unittest

from lazymenu.fuzzy import fuzzy_match, matching_count, rank
from lazymenu.model import Entry


def entries(*names: str) -> list[Entry]:
    return [Entry(name, f"run-{name}") for name in names]


def matched_text(name: str, spans: tuple[tuple[int, int], ...]) -> str:
    return "".join(name[start:end] for start, end in spans)


class FuzzyMatchTests(unittest.TestCase):
    def test_prefers_contiguous_matches_and_rejects_missing(self) -> None:
        contiguous = fuzzy_match("abc", "abc.py")
        gapped = fuzzy_match("abc", "a_x_b_x_c.py")

        self.assertIsNotNone(contiguous)
        self.assertIsNotNone(gapped)
        self.assertGreater(contiguous[0], gapped[0])
        self.assertIsNone(fuzzy_match("zzz", "abc.py"))

    def test_is_case_insensitive(self) -> None:
        result = fuzzy_match("FIRE", "firefox")
        self.assertIsNotNone(result)
        self.assertEqual(result[1], ((0, 4),))

    def test_word_boundary_beats_mid_word(self) -> None:
        boundary = fuzzy_match("b", "open browser")
        middle = fuzzy_match("b", "openbxxxxxxx")
        self.assertGreater(boundary[0], middle[0])

    def test_shorter_name_wins_for_equal_match(self) -> None:
        short = fuzzy_match("term", "terminal")
        long = fuzzy_match("term", "terminal emulator with extras")
        self.assertGreater(short[0], long[0])

    def test_prefers_word_boundary_over_earliest_occurrence(self) -> None:
        self.assertEqual(fuzzy_match("b", "abc Bar")[1], ((4, 5),))
        self.assertEqual(fuzzy_match("br", "abroad browser")[1], ((7, 9),))

    def test_length_penalty_separates_close_lengths(self) -> None:
        shorter = fuzzy_match("fire", "Firefox")
        longer = fuzzy_match("fire", "Firefoxes")
        self.assertEqual(shorter[1], longer[1])
        self.assertGreater(shorter[0], longer[0])

    def test_tightens_match_toward_the_end(self) -> None:
        result = fuzzy_match("ab", "a___ab")
        self.assertEqual(result[1], ((4, 6),))

    def test_spans_reproduce_query_in_order(self) -> None:
        for query, name in [
            ("gim", "GIMP image editor"),
            ("pwr", "power off"),
            ("sd", "shutdown"),
            ("ffx", "firefox"),
        ]:
            result = fuzzy_match(query, name)
            self.assertIsNotNone(result, (query, name))
            spans = result[1]
            self.assertEqual(matched_text(name, spans).casefold(), query.casefold())
            previous_end = 0
            for start, end in spans:
                self.assertLessEqual(previous_end, start)
                self.assertLess(start, end)
                self.assertLessEqual(end, len(name))
                previous_end = end

    def test_empty_query_is_neutral(self) -> None:
        self.assertEqual(fuzzy_match("", "anything"), (0, ()))


class RankTests(unittest.TestCase):
    def test_empty_query_keeps_base_order(self) -> None:
        items = entries("zeta", "alpha", "mid")
        ranked = rank(items, "")
        self.assertEqual([item.entry for item in ranked], items)
        self.assertTrue(all(item.score == 0 for item in ranked))
        self.assertEqual(matching_count(ranked), 3)

    def test_reboot_ranks_above_shutdown_for_re(self) -> None:
        ranked = rank([Entry("shutdown", "shutdown now"), Entry("reboot", "reboot")], "re")
        self.assertEqual(ranked[0].entry.name, "reboot")
        self.assertTrue(ranked[0].matched)
        self.assertEqual(ranked[0].match_spans, ((0, 2),))
        self.assertEqual(ranked[1].entry.name, "shutdown")
        self.assertFalse(ranked[1].matched)

    def test_unmatched_entries_follow_matches_in_base_order(self) -> None:
        ranked = rank(entries("xa", "b", "ya", "c", "a"), "a")
        names = [item.entry.name for item in ranked]
        self.assertEqual(names[3:], ["b", "c"])
        self.assertEqual(matching_count(ranked), 3)
        self.assertEqual(set(names[:3]), {"xa", "ya", "a"})

    def test_shorter_name_ranks_first_for_equal_match(self) -> None:
        ranked = rank([Entry("Firefoxes", "firefox -P"), Entry("Firefox", "firefox")], "fire")
        self.assertEqual([item.entry.name for item in ranked], ["Firefox", "Firefoxes"])

    def test_score_ties_keep_base_order(self) -> None:
        ranked = rank(entries("cat", "cab", "car"), "ca")
        self.assertEqual([item.entry.name for item in ranked], ["cat", "cab", "car"])

    def test_ranking_is_deterministic(self) -> None:
        items = entries("firefox", "files", "fish shell", "gimp", "thunderbird")
        first = rank(items, "fi")
        second = rank(items, "fi")
        self.assertEqual(first, second)

    def test_matched_entries_sorted_by_score_descending(self) -> None:
        ranked = rank(entries("a_x_b_x_c", "abc", "xabc"), "abc")
        scores = [item.score for item in ranked]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertEqual(ranked[0].entry.name, "abc")


if __name__ == "__main__":
    unittest.main()
