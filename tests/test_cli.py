"""
CLI tests: catalog listing and one-shot checks with a patched browser.
"""

import unittest
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from cli import cli
from uiverify.errors import DriverError

from fakes import make_locator, make_page


def _patched_browser(page):
    browser_cls = patch("cli.BrowserManager").start()
    browser = browser_cls.return_value
    browser.__aenter__.return_value = browser
    browser.__aexit__.return_value = False
    browser.launch = AsyncMock(return_value=page)
    return browser


class TestConditionsCommand(unittest.TestCase):
    def test_lists_catalog(self) -> None:
        result = CliRunner().invoke(cli, ["conditions"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("visible", result.output)
        self.assertIn("count_above", result.output)


class TestCheckCommand(unittest.TestCase):
    def tearDown(self) -> None:
        patch.stopall()

    def test_passing_check(self) -> None:
        browser = _patched_browser(make_page(make_locator(visible=True)))
        result = CliRunner().invoke(
            cli, ["check", "https://example.com", "-c", "visible", "-t", "#hero"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Passed", result.output)
        browser.launch.assert_awaited_once_with(url="https://example.com")
        browser.__aexit__.assert_awaited_once()

    def test_failing_check_exits_1(self) -> None:
        browser = _patched_browser(make_page(make_locator(text="Hello")))
        result = CliRunner().invoke(
            cli,
            [
                "check", "https://example.com",
                "-c", "contains_text", "-t", "#msg", "-e", "Bye", "--timeout", "0",
            ],
        )
        self.assertEqual(result.exit_code, 1, result.output)
        self.assertIn("Failed", result.output)
        browser.__aexit__.assert_awaited_once()

    def test_count_expected_is_coerced(self) -> None:
        _patched_browser(make_page(make_locator(count=4)))
        result = CliRunner().invoke(
            cli, ["check", "https://example.com", "-c", "count_above", "-t", "li", "-e", "3"]
        )
        self.assertEqual(result.exit_code, 0, result.output)

    def test_page_condition_needs_no_target(self) -> None:
        _patched_browser(make_page(title="Example Domain"))
        result = CliRunner().invoke(
            cli,
            ["check", "https://example.com", "-c", "title_matches", "-e", "^Example", "--regex"],
        )
        self.assertEqual(result.exit_code, 0, result.output)

    def test_navigation_failure_exits_2(self) -> None:
        browser = _patched_browser(make_page())
        browser.launch.side_effect = DriverError("Could not open https://nowhere.invalid: net::ERR")
        result = CliRunner().invoke(
            cli, ["check", "https://nowhere.invalid", "-c", "visible", "-t", "#a"]
        )
        self.assertEqual(result.exit_code, 2, result.output)
        self.assertIn("Could not open", result.output)
        browser.__aexit__.assert_awaited_once()

    def test_unknown_condition(self) -> None:
        result = CliRunner().invoke(cli, ["check", "https://example.com", "-c", "sparkly"])
        self.assertEqual(result.exit_code, 2)

    def test_element_condition_requires_target(self) -> None:
        result = CliRunner().invoke(cli, ["check", "https://example.com", "-c", "visible"])
        self.assertEqual(result.exit_code, 2)
        self.assertIn("--target", result.output)


if __name__ == "__main__":
    unittest.main()
