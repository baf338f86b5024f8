"""
Unit tests for CustomRulesSource.
"""

import requests
from unittest.mock import Mock, patch

from docbuddy.rules.source import CustomRulesSource


RULES_URL = "https://rules.example.com/customRules/data"


def make_response(json_data, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


class TestCustomRulesSource:
    """Unit tests for CustomRulesSource class."""

    def setup_method(self):
        self.source = CustomRulesSource(RULES_URL, timeout=5)

    def test_lookup_found(self):
        payload = {"data": [
            {"email": "other@example.com", "rules": "be formal"},
            {"email": "author@example.com", "rules": "use emojis"},
        ]}

        with patch.object(self.source.session, 'get', return_value=make_response(payload)) as mock_get:
            lookup = self.source.lookup("author@example.com")

        mock_get.assert_called_once_with(RULES_URL, timeout=5)
        assert lookup.found
        assert lookup.rules == "use emojis"
        assert lookup.error is None

    def test_lookup_no_record(self):
        payload = {"data": [{"email": "other@example.com", "rules": "be formal"}]}

        with patch.object(self.source.session, 'get', return_value=make_response(payload)):
            lookup = self.source.lookup("author@example.com")

        assert not lookup.found
        assert lookup.rules is None
        assert lookup.error is None

    def test_lookup_empty_rules(self):
        payload = {"data": [{"email": "author@example.com", "rules": "   "}]}

        with patch.object(self.source.session, 'get', return_value=make_response(payload)):
            assert not self.source.lookup("author@example.com").found

    def test_lookup_http_error(self):
        with patch.object(self.source.session, 'get', return_value=make_response({}, status_code=503)):
            lookup = self.source.lookup("author@example.com")

        assert not lookup.found
        assert lookup.error

    def test_lookup_connection_error(self):
        with patch.object(self.source.session, 'get', side_effect=requests.ConnectionError("refused")):
            lookup = self.source.lookup("author@example.com")

        assert lookup.error

    def test_lookup_malformed_payload(self):
        with patch.object(self.source.session, 'get', return_value=make_response({"data": "not a list"})):
            lookup = self.source.lookup("author@example.com")

        assert not lookup.found
        assert lookup.error

    def test_lookup_skips_malformed_records(self):
        payload = {"data": [
            {"email": "", "rules": "be formal"},
            {"rules": "no email"},
            "not a record",
            {"email": "author@example.com", "rules": "use emojis"},
        ]}

        with patch.object(self.source.session, 'get', return_value=make_response(payload)):
            lookup = self.source.lookup("author@example.com")

        assert lookup.found
        assert lookup.rules == "use emojis"
        assert lookup.error is None

    def test_lookup_null_rules_in_other_record(self):
        payload = {"data": [
            {"email": "other@example.com", "rules": None},
            {"email": "author@example.com", "rules": "use emojis"},
        ]}

        with patch.object(self.source.session, 'get', return_value=make_response(payload)):
            assert self.source.lookup("author@example.com").rules == "use emojis"

    def test_lookup_null_rules_for_author(self):
        payload = {"data": [{"email": "author@example.com", "rules": None}]}

        with patch.object(self.source.session, 'get', return_value=make_response(payload)):
            lookup = self.source.lookup("author@example.com")

        assert not lookup.found
        assert lookup.error is None

    def test_lookup_fetches_fresh_every_time(self):
        payload = {"data": []}

        with patch.object(self.source.session, 'get', return_value=make_response(payload)) as mock_get:
            self.source.lookup("author@example.com")
            self.source.lookup("author@example.com")

        assert mock_get.call_count == 2

    def test_disabled_source(self):
        source = CustomRulesSource(None)

        with patch.object(source.session, 'get') as mock_get:
            lookup = source.lookup("author@example.com")

        mock_get.assert_not_called()
        assert not source.enabled
        assert not lookup.found
        assert lookup.error is None

    def test_missing_author(self):
        with patch.object(self.source.session, 'get') as mock_get:
            assert not self.source.lookup(None).found

        mock_get.assert_not_called()
