"""Contract analysis service combining prompt, completion and parsing."""

import logging
from typing import Optional

from ..interfaces.completion import ICompletionClient
from ..models.contract import ContractAnalysis
from .exceptions import UpstreamError
from .fixtures import FIXTURE_FILENAME, FIXTURE_MARKER, is_fixture_upload, load_sample_analysis
from .prompt_builder import build_prompt
from .response_parser import parse_response


logger = logging.getLogger(__name__)


class ContractAnalyzer:
    """
    Turns contract text into a decoded ContractAnalysis.

    The sample contract short-circuits to the canned analysis; every other
    document goes through one completion request. The steps are exposed
    separately so callers can report progress between them.
    """

    def __init__(
        self,
        completion_client: Optional[ICompletionClient] = None,
        fixture_filename: str = FIXTURE_FILENAME,
        fixture_marker: str = FIXTURE_MARKER,
    ):
        self._completion_client = completion_client
        self.fixture_filename = fixture_filename
        self.fixture_marker = fixture_marker

    @property
    def has_completion_client(self) -> bool:
        return self._completion_client is not None

    def is_fixture(self, filename: str, text: str) -> bool:
        """Check whether a document takes the canned-analysis path."""
        return is_fixture_upload(filename, text, self.fixture_filename, self.fixture_marker)

    def fixture_analysis(self) -> ContractAnalysis:
        logger.info("Using canned analysis for sample contract")
        return load_sample_analysis()

    async def request_completion(self, contract_text: str) -> str:
        """
        Build the prompt and request a completion.

        Raises:
            UpstreamError: If no completion client is configured, or the
                model reports an error.
            CompletionTimeoutError: If the model does not answer in time.
            EmptyResponseError: If the model answers with no text.
        """
        if self._completion_client is None:
            raise UpstreamError(message="API key not configured")
        prompt = build_prompt(contract_text)
        return await self._completion_client.complete(prompt)

    def parse(self, raw_text: str) -> ContractAnalysis:
        return parse_response(raw_text)

    async def analyze(self, contract_text: str, filename: str) -> ContractAnalysis:
        """Run the whole analysis for one document."""
        if self.is_fixture(filename, contract_text):
            return self.fixture_analysis()
        raw_text = await self.request_completion(contract_text)
        return self.parse(raw_text)
