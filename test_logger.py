"""
Logging setup tests.
"""

import json
import logging
import unittest

from infra.logger import ROOT_LOGGER_NAME, JsonFormatter, configure_logging, get_logger


class TestLogger(unittest.TestCase):
    def tearDown(self) -> None:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root.handlers):
            root.removeHandler(handler)
        root.addHandler(logging.NullHandler())
        root.setLevel(logging.NOTSET)
        root.propagate = True

    def test_json_formatter_emits_one_object_per_record(self) -> None:
        record = logging.LogRecord(
            "skirmish.agents", logging.INFO, __file__, 1, "chose %d action(s)", (2,), None
        )
        record.plies = 3

        payload = json.loads(JsonFormatter().format(record))

        self.assertEqual(payload["level"], "INFO")
        self.assertEqual(payload["logger"], "skirmish.agents")
        self.assertEqual(payload["message"], "chose 2 action(s)")
        self.assertEqual(payload["plies"], 3)

    def test_get_logger_nests_under_root(self) -> None:
        self.assertEqual(get_logger("env.state").name, "skirmish.env.state")
        self.assertEqual(get_logger("skirmish.api").name, "skirmish.api")

    def test_configure_replaces_handlers(self) -> None:
        configure_logging(level="DEBUG", json=True)
        root = configure_logging(level="WARNING", json=True)

        self.assertEqual(root.level, logging.WARNING)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].formatter, JsonFormatter)

    def test_unknown_level(self) -> None:
        with self.assertRaises(ValueError):
            configure_logging(level="LOUD")


if __name__ == "__main__":
    unittest.main()
