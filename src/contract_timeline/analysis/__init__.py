"""Contract analysis: prompt, completion, parsing and post-processing."""

from .analyzer import ContractAnalyzer
from .completion_client import GeminiCompletionClient, TimeoutRace
from .exceptions import (
    ContractAnalysisError,
    CompletionTimeoutError,
    EmptyResponseError,
    MalformedResponseError,
    UpstreamError,
    UploadFailedError,
    UploadInProgressError,
)
from .fixtures import FIXTURE_FILENAME, FIXTURE_MARKER, is_fixture_upload, load_sample_analysis
from .post_processor import post_process
from .prompt_builder import build_prompt
from .response_parser import extract_json_payload, parse_response

__all__ = [
    "ContractAnalyzer",
    "GeminiCompletionClient",
    "TimeoutRace",
    "ContractAnalysisError",
    "CompletionTimeoutError",
    "EmptyResponseError",
    "MalformedResponseError",
    "UpstreamError",
    "UploadFailedError",
    "UploadInProgressError",
    "FIXTURE_FILENAME",
    "FIXTURE_MARKER",
    "is_fixture_upload",
    "load_sample_analysis",
    "post_process",
    "build_prompt",
    "extract_json_payload",
    "parse_response",
]
