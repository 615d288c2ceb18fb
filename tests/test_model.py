"""Menu model validation and display ordering."""

from __future__ import annotations

import unittest

from lazymenu.errors import ConfigError
from lazymenu.model import Entry, Menu, order_menus, validate_menus


class MenuOrderingTests(unittest.TestCase):
    def test_menus_sort_by_order_then_declaration(self) -> None:
        menus = [
            Menu("c", "> ", order=1),
            Menu("a", "> ", order=0),
            Menu("b", "> ", order=1),
            Menu("d", "> ", order=-2),
        ]
        self.assertEqual([menu.name for menu in order_menus(menus)], ["d", "a", "c", "b"])


class MenuValidationTests(unittest.TestCase):
    def test_valid_menus_are_returned_in_display_order(self) -> None:
        menus = validate_menus(
            [
                Menu("power", "power> ", (Entry("reboot", "reboot"),), order=2),
                Menu("apps", "run> ", (Entry("gimp", "gimp"),), order=1),
            ]
        )
        self.assertEqual([menu.name for menu in menus], ["apps", "power"])

    def test_empty_menu_set_is_rejected(self) -> None:
        with self.assertRaises(ConfigError):
            validate_menus([])

    def test_duplicate_menu_names_are_rejected(self) -> None:
        with self.assertRaises(ConfigError):
            validate_menus([Menu("apps", "> "), Menu("apps", "$ ")])

    def test_duplicate_entry_names_are_rejected(self) -> None:
        menu = Menu("apps", "> ", (Entry("gimp", "gimp"), Entry("gimp", "gimp-2.10")))
        with self.assertRaises(ConfigError):
            validate_menus([menu])

    def test_blank_entry_value_is_rejected(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            validate_menus([Menu("apps", "> ", (Entry("gimp", "   "),))])
        self.assertIn("gimp", str(ctx.exception))

    def test_menu_without_entries_is_allowed(self) -> None:
        self.assertEqual(len(validate_menus([Menu("empty", "> ")])), 1)


if __name__ == "__main__":
    unittest.main()
