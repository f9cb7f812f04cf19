"""Decoding of raw model output into a contract analysis."""

import json
import logging
import re

from ..models.contract import ContractAnalysis
from ..parsers.serialization import ContractSerializer
from .exceptions import MalformedResponseError


logger = logging.getLogger(__name__)

# ```json ... ``` is tried before a language-less ``` ... ``` fence
JSON_FENCE_PATTERN = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
PLAIN_FENCE_PATTERN = re.compile(r"```\s*(.*?)\s*```", re.DOTALL)


def extract_json_payload(raw_text: str) -> str:
    """
    Locate the JSON document inside a model response.

    Returns the interior of the first fenced code block, or the whole
    text when the response is not fenced.
    """
    for pattern in (JSON_FENCE_PATTERN, PLAIN_FENCE_PATTERN):
        match = pattern.search(raw_text)
        if match:
            return match.group(1).strip()
    return raw_text.strip()


def parse_response(raw_text: str) -> ContractAnalysis:
    """
    Decode a model response into a ContractAnalysis.

    Args:
        raw_text: The raw completion text.

    Returns:
        The decoded analysis. Event ids may be empty and no countdown is
        set; run the post-processor before use.

    Raises:
        MalformedResponseError: If the text is not valid JSON or does not
            match the analysis schema.
    """
    if not isinstance(raw_text, str):
        raise MalformedResponseError(
            message="Model response is not text",
            raw_text=repr(raw_text),
        )

    payload = extract_json_payload(raw_text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.error(f"Model response is not valid JSON: {e}")
        raise MalformedResponseError(
            message=f"Could not decode model response as JSON: {e.msg}",
            details={"line": e.lineno, "column": e.colno},
            raw_text=raw_text,
        )
    except RecursionError:
        logger.error("Model response is nested too deeply to decode")
        raise MalformedResponseError(
            message="Could not decode model response as JSON: nesting too deep",
            raw_text=raw_text,
        )

    try:
        analysis = ContractSerializer.analysis_from_dict(data)
    except ValueError as e:
        logger.error(f"Model response does not match the analysis schema: {e}")
        raise MalformedResponseError(
            message=f"Model response does not match the analysis schema: {e}",
            raw_text=raw_text,
        )

    logger.info(
        f"Parsed analysis with {len(analysis.structure)} sections "
        f"and {len(analysis.timeline_events)} timeline events"
    )
    return analysis
