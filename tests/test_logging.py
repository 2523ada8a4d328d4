"""Tests for :mod:`querynorm.logging`."""

import logging
from datetime import datetime
from unittest import TestCase

import pytz

from querynorm import FieldMapping, QueryNormalizer
from querynorm.logging import getLogger, log_default

NOW = datetime(2024, 3, 15, 10, 30, tzinfo=pytz.utc)


class TestGetLogger(TestCase):
    """Tests for :func:`.getLogger`."""

    def test_level(self):
        """The requested level is applied."""
        logger = getLogger("querynorm.test", level=logging.WARNING)
        self.assertEqual(logger.level, logging.WARNING)


class TestLogDefault(TestCase):
    """Defaulted request parameters are logged at debug level."""

    def test_log_default(self):
        """The parameter, its value and the default are recorded."""
        logger = getLogger("querynorm.test")
        with self.assertLogs(logger, level="DEBUG") as captured:
            log_default(logger, "size", "lots", 30)
        self.assertEqual(captured.records[0].levelno, logging.DEBUG)
        self.assertEqual(captured.records[0].getMessage(),
                         "Invalid size 'lots'; using 30")

    def test_normalizer(self):
        """Each defaulted field gets its own record."""
        mapping = FieldMapping.from_properties({"timestamp": {"type": "date"}})
        normalizer = QueryNormalizer(mapping)
        with self.assertLogs("querynorm.process.normalize",
                             level="DEBUG") as captured:
            normalizer.normalize({"range": "custom", "start": "bad-date",
                                  "sort": "nope", "size": "0"}, now=NOW)
        messages = [record.getMessage() for record in captured.records]
        self.assertIn("Invalid start 'bad-date'; using '2024-03-08'",
                      messages)
        self.assertIn("Invalid sort 'nope'; using 'timestamp'", messages)
        self.assertIn("Invalid size '0'; using 30", messages)
