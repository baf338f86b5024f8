"""
Custom Rules Source

Fetches author-scoped documentation rules from an external HTTP source.
Lookups never raise; failures are reported through RulesLookup.
"""

import logging
from typing import Optional
import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..models.suggestion import CustomRulesResponse, RulesLookup


logger = logging.getLogger(__name__)


class CustomRulesSource:
    """
    Client for the custom rules source.

    The source returns ``{"data": [{"email": ..., "rules": ...}]}``.
    Rules are fetched fresh on every lookup.
    """

    def __init__(self, url: Optional[str], timeout: int = 10):
        """
        Initialize custom rules source.

        Args:
            url: Endpoint returning the rule records, or None to disable lookups
            timeout: Request timeout in seconds
        """
        self.url = url
        self.timeout = timeout
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session with retry strategy."""
        session = requests.Session()

        retry_strategy = Retry(
            total=2,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({'Accept': 'application/json', 'User-Agent': 'DocBuddy/1.0'})

        return session

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def fetch(self) -> CustomRulesResponse:
        """
        Fetch all rule records.

        Returns:
            Parsed CustomRulesResponse

        Raises:
            requests.RequestException: For transport or HTTP errors
            pydantic.ValidationError: For malformed payloads
        """
        response = self.session.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        return CustomRulesResponse.model_validate(response.json() or {})

    def lookup(self, author_email: Optional[str]) -> RulesLookup:
        """
        Look up the rule set of an author.

        Args:
            author_email: Author identity used as the lookup key

        Returns:
            RulesLookup with rules, None rules when no record exists, or an error
        """
        if not self.enabled or not author_email:
            return RulesLookup()

        logger.info(f"Getting custom rules for {author_email}")

        try:
            records = self.fetch()
        except (requests.RequestException, ValidationError, ValueError) as e:
            logger.error(f"Error getting custom rules: {e}")
            return RulesLookup(error=str(e))

        rules = records.rules_for(author_email)
        if rules is None:
            logger.debug(f"No custom rules found for {author_email}")
        return RulesLookup(rules=rules)
