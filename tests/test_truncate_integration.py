from __future__ import annotations

import json
import unittest
from pathlib import Path
from typing import Any

from htmlsnip import MarkupMismatchError, TruncateOptions, truncate

_CASES_DIR = Path(__file__).with_name("htmlsnip-truncate-tests")


def _build_options(raw: Any) -> TruncateOptions | str | None:
    if raw is None or isinstance(raw, str):
        return raw

    if not isinstance(raw, dict):
        raise TypeError("options must be a string or an object")

    return TruncateOptions(
        break_words=raw.get("break_words", True),
        suffix=raw.get("suffix"),
        enclose_suffix_in_tags=raw.get("enclose_suffix_in_tags", False),
    )


class TestTruncateIntegration(unittest.TestCase):
    def test_truncate_cases(self) -> None:
        cases_path = _CASES_DIR / "cases.json"
        cases = json.loads(cases_path.read_text(encoding="utf-8"))
        if not isinstance(cases, list):
            raise TypeError("cases.json must contain a list")

        for case in cases:
            name = case["name"]
            input_html = case["input_html"]
            length = case["length"]
            options = _build_options(case.get("options"))

            expected_error = case.get("error")
            if expected_error is not None:
                with self.assertRaises(MarkupMismatchError, msg=name) as ctx:
                    truncate(input_html, length, options)
                assert ctx.exception.tag == expected_error["tag"], name
                assert ctx.exception.offset == expected_error["offset"], name
                continue

            expected_html = case["expected_html"]
            actual = truncate(input_html, length, options)
            if actual != expected_html:
                self.fail(
                    "\n".join(
                        [
                            f"Case: {name}",
                            f"Input: {input_html}",
                            f"Length: {length}",
                            f"Expected: {expected_html}",
                            f"Actual:   {actual}",
                        ]
                    )
                )


if __name__ == "__main__":
    unittest.main()
