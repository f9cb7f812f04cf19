"""Shared fixtures for the Contract Timeline tests."""

import json

import pytest

from contract_timeline.analysis.fixtures import sample_payload

from tests.factories import make_contract


@pytest.fixture
def sample_response_text():
    """Sample analysis as the model would return it, inside a json fence."""
    return "```json\n" + json.dumps(sample_payload(), indent=2) + "\n```"


@pytest.fixture
def contract():
    return make_contract()
