"""Serialization and deserialization utilities for contracts and analyses."""

import json
from datetime import date, datetime
from typing import Any, List, Optional

from ..models.contract import (
    Contract,
    ContractAnalysis,
    ContractMetadata,
    ContractSection,
    TimelineEvent,
)
from ..models.enums import EventType, RiskLevel


class ContractSerializer:
    """
    Converts contracts and analyses to and from their JSON wire format.

    The wire format uses the camelCase field names of the model output
    schema, so the same decoder validates model responses, persisted
    contracts and HTTP payloads. Decoding fails closed: a missing required
    field or an invalid value raises ValueError.
    """

    @staticmethod
    def serialize(contract: Contract) -> str:
        """Serialize a Contract to a JSON string."""
        return json.dumps(ContractSerializer.contract_to_dict(contract), ensure_ascii=False)

    @staticmethod
    def deserialize(json_str: str) -> Contract:
        """
        Deserialize a JSON string to a Contract.

        Raises:
            ValueError: If the JSON is invalid or malformed.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {str(e)}")
        return ContractSerializer.contract_from_dict(data)

    @staticmethod
    def serialize_many(contracts: List[Contract]) -> str:
        """Serialize a list of contracts to a JSON array."""
        return json.dumps(
            [ContractSerializer.contract_to_dict(c) for c in contracts],
            ensure_ascii=False,
        )

    @staticmethod
    def deserialize_many(json_str: str) -> List[Contract]:
        """Deserialize a JSON array of contracts."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {str(e)}")
        except RecursionError:
            raise ValueError("Invalid JSON: nesting too deep")
        if not isinstance(data, list):
            raise ValueError("Expected a list of contracts")
        return [ContractSerializer.contract_from_dict(item) for item in data]

    # =========================================================================
    # Contract
    # =========================================================================

    @staticmethod
    def contract_to_dict(contract: Contract) -> dict[str, Any]:
        """Convert Contract to dictionary."""
        return {
            "contractId": contract.contract_id,
            "filename": contract.filename,
            "uploadDate": contract.upload_date.isoformat(),
            "analysis": ContractSerializer.analysis_to_dict(contract.analysis),
        }

    @staticmethod
    def contract_from_dict(data: Any) -> Contract:
        """Convert dictionary to Contract."""
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for Contract")

        for field_name in ("contractId", "filename", "uploadDate", "analysis"):
            if field_name not in data:
                raise ValueError(f"Missing required field '{field_name}' in Contract")

        try:
            upload_date = datetime.fromisoformat(data["uploadDate"])
        except (TypeError, ValueError):
            raise ValueError(f"Invalid uploadDate: {data['uploadDate']!r}")

        return Contract(
            contract_id=_require_str(data, "contractId", "Contract"),
            filename=_require_str(data, "filename", "Contract"),
            upload_date=upload_date,
            analysis=ContractSerializer.analysis_from_dict(data["analysis"]),
        )

    # =========================================================================
    # Analysis
    # =========================================================================

    @staticmethod
    def analysis_to_dict(analysis: ContractAnalysis) -> dict[str, Any]:
        """Convert ContractAnalysis to dictionary."""
        return {
            "metadata": ContractSerializer._metadata_to_dict(analysis.metadata),
            "structure": [
                {"section": s.section, "content": s.content} for s in analysis.structure
            ],
            "timelineEvents": [
                ContractSerializer.event_to_dict(e) for e in analysis.timeline_events
            ],
        }

    @staticmethod
    def analysis_from_dict(data: Any) -> ContractAnalysis:
        """Convert dictionary to ContractAnalysis."""
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for ContractAnalysis")

        for field_name in ("metadata", "structure", "timelineEvents"):
            if field_name not in data:
                raise ValueError(f"Missing required field '{field_name}' in ContractAnalysis")

        structure = data["structure"]
        events = data["timelineEvents"]
        if not isinstance(structure, list):
            raise ValueError("'structure' must be a list")
        if not isinstance(events, list):
            raise ValueError("'timelineEvents' must be a list")

        timeline_events = [ContractSerializer.event_from_dict(e) for e in events]
        _check_unique_event_ids(timeline_events)

        return ContractAnalysis(
            metadata=ContractSerializer._dict_to_metadata(data["metadata"]),
            structure=[ContractSerializer._dict_to_section(s) for s in structure],
            timeline_events=timeline_events,
        )

    @staticmethod
    def _metadata_to_dict(metadata: ContractMetadata) -> dict[str, Any]:
        return {
            "value": metadata.value,
            "effectiveDate": _format_date(metadata.effective_date),
            "expiryDate": _format_date(metadata.expiry_date),
            "parties": list(metadata.parties),
        }

    @staticmethod
    def _dict_to_metadata(data: Any) -> ContractMetadata:
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for ContractMetadata")

        parties = data.get("parties") or []
        if not isinstance(parties, list) or not all(isinstance(p, str) for p in parties):
            raise ValueError("'parties' must be a list of strings")

        return ContractMetadata(
            value=_require_str(data, "value", "ContractMetadata"),
            effective_date=_parse_optional_date(data.get("effectiveDate"), "effectiveDate"),
            expiry_date=_parse_optional_date(data.get("expiryDate"), "expiryDate"),
            parties=list(parties),
        )

    @staticmethod
    def _dict_to_section(data: Any) -> ContractSection:
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for ContractSection")
        return ContractSection(
            section=_require_str(data, "section", "ContractSection"),
            content=_require_str(data, "content", "ContractSection"),
        )

    # =========================================================================
    # Timeline events
    # =========================================================================

    @staticmethod
    def event_to_dict(event: TimelineEvent) -> dict[str, Any]:
        """Convert TimelineEvent to dictionary; empty ids are left out."""
        data = {}
        if event.id:
            data["id"] = event.id
        data.update({
            "title": event.title,
            "date": event.date.isoformat(),
            "type": event.type.value,
            "risk": event.risk.value,
            "repercussion": event.repercussion,
        })
        if event.days_until is not None:
            data["daysUntil"] = event.days_until
        return data

    @staticmethod
    def event_from_dict(data: Any) -> TimelineEvent:
        """
        Convert dictionary to TimelineEvent.

        A missing id decodes to an empty string; the post-processor assigns
        positional ids to such events.
        """
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for TimelineEvent")

        for field_name in ("title", "date", "type", "risk", "repercussion"):
            if field_name not in data:
                raise ValueError(f"Missing required field '{field_name}' in TimelineEvent")

        event_date = _parse_optional_date(data["date"], "date")
        if event_date is None:
            raise ValueError("TimelineEvent 'date' must not be empty")

        try:
            event_type = EventType(data["type"])
        except ValueError:
            raise ValueError(f"Unknown event type: {data['type']!r}")
        try:
            risk = RiskLevel(data["risk"])
        except ValueError:
            raise ValueError(f"Unknown risk level: {data['risk']!r}")

        raw_id = data.get("id")
        if raw_id is not None and not isinstance(raw_id, (str, int)):
            raise ValueError("TimelineEvent 'id' must be a string")

        days_until = data.get("daysUntil")
        if days_until is not None and (isinstance(days_until, bool) or not isinstance(days_until, int)):
            raise ValueError("TimelineEvent 'daysUntil' must be an integer")

        return TimelineEvent(
            id=str(raw_id) if raw_id is not None else "",
            title=_require_str(data, "title", "TimelineEvent"),
            date=event_date,
            type=event_type,
            risk=risk,
            repercussion=_require_str(data, "repercussion", "TimelineEvent"),
            days_until=days_until,
        )


def _require_str(data: dict, key: str, owner: str) -> str:
    if key not in data:
        raise ValueError(f"Missing required field '{key}' in {owner}")
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"'{key}' in {owner} must be a string")
    return value


def _check_unique_event_ids(events: List[TimelineEvent]) -> None:
    """Events without an id will take their 1-based position as id."""
    seen = set()
    for index, event in enumerate(events):
        event_id = event.id or str(index + 1)
        if event_id in seen:
            raise ValueError(f"Duplicate timeline event id: {event_id!r}")
        seen.add(event_id)


def _parse_optional_date(value: Any, name: str) -> Optional[date]:
    """
    Parse a YYYY-MM-DD string; empty values mean the date is unknown.

    ISO date-times are accepted and reduced to their calendar date.
    """
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{name}' must be a YYYY-MM-DD string")
    text = value.strip()
    try:
        if len(text) > 10:
            # fromisoformat rejects a trailing Z before Python 3.11
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            return datetime.fromisoformat(text).date()
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid date for '{name}': {value!r}")


def _format_date(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


def serialize_contract(contract: Contract) -> str:
    """Convenience function to serialize a Contract."""
    return ContractSerializer.serialize(contract)


def deserialize_contract(json_str: str) -> Contract:
    """Convenience function to deserialize a Contract."""
    return ContractSerializer.deserialize(json_str)
