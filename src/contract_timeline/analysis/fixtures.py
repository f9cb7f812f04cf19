"""Canned analysis used for the sample contract.

Uploading the sample contract (by file name, or any document containing the
marker heading) bypasses the model and returns this analysis instantly, so
demonstrations and tests do not depend on the model or the network.
"""

import copy
from typing import Any, Dict

from ..models.contract import ContractAnalysis
from ..parsers.serialization import ContractSerializer


FIXTURE_FILENAME = "sirion-test-contract.pdf"
FIXTURE_MARKER = "MASTER SOFTWARE DEVELOPMENT SERVICES AGREEMENT"

SAMPLE_ANALYSIS: Dict[str, Any] = {
    "metadata": {
        "value": "$150,000 USD",
        "effectiveDate": "2025-11-20",
        "expiryDate": "2026-11-20",
        "parties": ["Apex Logistics Inc.", "Zenith Code Solutions LLC"],
    },
    "structure": [
        {
            "section": "Agreement Overview",
            "content": (
                "This Master Software Development Services Agreement sets the terms under which "
                "Zenith Code Solutions LLC will design, build and launch a logistics platform for "
                "Apex Logistics Inc. over a twelve month term."
            ),
        },
        {
            "section": "Scope of Services",
            "content": (
                "Services cover requirement analysis, architecture design, development of a beta "
                "release, production launch and ninety days of post-launch support."
            ),
        },
        {
            "section": "Payment Terms",
            "content": (
                "Total fees of $150,000 USD are invoiced against the three delivery phases. "
                "Invoices are payable within thirty days of receipt."
            ),
        },
        {
            "section": "Deliverables and Milestones",
            "content": (
                "Phase 1 covers requirements and architecture, Phase 2 a beta version and Phase 3 "
                "the final production launch. Each phase ends with written acceptance by the client."
            ),
        },
        {
            "section": "Delay Penalties",
            "content": (
                "Late delivery of the beta version incurs a penalty of $2,000 per week of delay, "
                "capped at 10% of the total contract value. Time is of the essence for the final launch."
            ),
        },
        {
            "section": "Intellectual Property",
            "content": (
                "All deliverables become the property of Apex Logistics Inc. upon full payment. "
                "The provider keeps its pre-existing tools and libraries."
            ),
        },
        {
            "section": "Confidentiality",
            "content": (
                "Both parties keep proprietary information confidential for three years after "
                "the agreement ends, with standard exceptions for public information."
            ),
        },
        {
            "section": "Term and Termination",
            "content": (
                "The agreement continues for twelve months unless terminated earlier. Either party "
                "may terminate for material breach not cured within thirty days of notice."
            ),
        },
    ],
    "timelineEvents": [
        {
            "title": "Phase 1: Requirement Analysis & Architecture Design Due",
            "date": "2025-12-20",
            "type": "Deliverable",
            "risk": "Low",
            "repercussion": "No specific repercussion mentioned in contract",
        },
        {
            "title": "Phase 2: Beta Version Release Due",
            "date": "2026-02-28",
            "type": "Deliverable",
            "risk": "High",
            "repercussion": (
                "Provider shall be liable for a penalty of $2,000 for every week of delay, "
                "capped at 10% of the total contract value."
            ),
        },
        {
            "title": "Phase 3: Final Production Launch",
            "date": "2026-05-15",
            "type": "Deliverable",
            "risk": "Critical",
            "repercussion": "Time is of the essence for this deliverable.",
        },
        {
            "title": "Post-Launch Support Period End",
            "date": "2026-08-13",
            "type": "Milestone",
            "risk": "Low",
            "repercussion": "End of ninety (90) days support duration.",
        },
        {
            "title": "Contract Expiry",
            "date": "2026-11-20",
            "type": "Termination",
            "risk": "Low",
            "repercussion": (
                "Agreement shall continue for a period of twelve (12) months, "
                "unless terminated earlier."
            ),
        },
    ],
}


def is_fixture_upload(
    filename: str,
    text: str,
    fixture_filename: str = FIXTURE_FILENAME,
    fixture_marker: str = FIXTURE_MARKER,
) -> bool:
    """Check whether an upload should take the canned-analysis path."""
    if fixture_filename and filename == fixture_filename:
        return True
    return bool(fixture_marker) and fixture_marker in (text or "")


def sample_payload() -> Dict[str, Any]:
    """A fresh copy of the canned wire payload."""
    return copy.deepcopy(SAMPLE_ANALYSIS)


def load_sample_analysis() -> ContractAnalysis:
    """The canned analysis, decoded but not yet post-processed."""
    return ContractSerializer.analysis_from_dict(sample_payload())
