"""Tests for :mod:`querynorm.services.prepare`."""

from datetime import datetime
from unittest import TestCase

import pytz
from elasticsearch_dsl import Search

from querynorm.domain import FieldMapping
from querynorm.process.normalize import QueryNormalizer
from querynorm.services.prepare import daily_aggregation, prepare_search

NOW = datetime(2024, 3, 15, 10, 30, tzinfo=pytz.utc)

MAPPING = FieldMapping.from_properties({
    "timestamp": {"type": "date"},
    "title": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
    "status": {"type": "keyword"},
})


class TestPrepareSearch(TestCase):
    """Tests for :func:`.prepare_search`."""

    def setUp(self):
        """Create a normalizer with the default configuration."""
        self.normalizer = QueryNormalizer(MAPPING)

    def test_defaults(self):
        """An empty request matches everything, sorted and sized."""
        request = self.normalizer.normalize({}, now=NOW)
        body = prepare_search(request, MAPPING).to_dict()
        self.assertEqual(body["query"], {"match_all": {}})
        self.assertEqual(body["sort"], [
            {"timestamp": {"order": "desc"}},
            {"_id": {"order": "asc"}},
        ])
        self.assertEqual(body["size"], 30)
        self.assertNotIn("from", body, "Offset paging is not used")
        self.assertNotIn("search_after", body)

    def test_query_and_cursor(self):
        """Field clauses, date range and cursor are applied."""
        request = self.normalizer.normalize({
            "status": "!closed",
            "title": "dark matter",
            "range": "today",
            "search_after": "1700000000,abc",
            "size": "5",
        }, now=NOW)
        body = prepare_search(request, MAPPING).to_dict()
        query = body["query"]["bool"]
        self.assertEqual(query["must"], [{"match": {"title": "dark matter"}}])
        self.assertEqual(query["must_not"], [{"term": {"status": "closed"}}])
        self.assertIn({"range": {"timestamp": {
            "gte": "2024-03-15 00:00:00",
            "lte": "2024-03-15 23:59:59",
            "format": "yyyy-MM-dd HH:mm:ss",
            "time_zone": "UTC",
        }}}, query["filter"])
        self.assertEqual(body["search_after"], ["1700000000", "abc"])
        self.assertEqual(body["size"], 5)

    def test_existing_search(self):
        """A search in preparation is extended, not replaced."""
        request = self.normalizer.normalize({"status": "new"}, now=NOW)
        search = prepare_search(request, MAPPING, Search(index="logs"))
        self.assertEqual(search._index, ["logs"])
        self.assertEqual(search.to_dict()["query"],
                         {"bool": {"filter": [{"term": {"status": "new"}}]}})


class TestDailyAggregation(TestCase):
    """Tests for :func:`.daily_aggregation`."""

    def test_ranges(self):
        """One labelled range per day."""
        agg = daily_aggregation("timestamp", "2024-01-01", "2024-01-03")
        body = agg.to_dict()["date_range"]
        self.assertEqual(body["field"], "timestamp")
        self.assertEqual(body["format"], "MMM dd, yyyy")
        self.assertEqual(body["ranges"], [
            {"from": "Jan 01, 2024", "to": "Jan 02, 2024"},
            {"from": "Jan 02, 2024", "to": "Jan 03, 2024"},
            {"from": "Jan 03, 2024", "to": "Jan 04, 2024"},
        ])

    def test_bad_bounds(self):
        """No ranges if a bound cannot be parsed."""
        agg = daily_aggregation("timestamp", "bad-date", "2024-01-03")
        self.assertEqual(agg.to_dict()["date_range"]["ranges"], [])
