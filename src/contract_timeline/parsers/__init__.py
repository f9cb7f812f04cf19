"""Document text extraction and serialization for the Contract Timeline Analyzer."""

from .text_extractor import DocumentTextExtractor, placeholder_text
from .serialization import ContractSerializer, serialize_contract, deserialize_contract
from .exceptions import ExtractionError, UnsupportedFormatError, FileTooLargeError

__all__ = [
    "DocumentTextExtractor",
    "placeholder_text",
    "ContractSerializer",
    "serialize_contract",
    "deserialize_contract",
    "ExtractionError",
    "UnsupportedFormatError",
    "FileTooLargeError",
]
