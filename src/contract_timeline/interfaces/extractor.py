"""Text extractor interface for the Contract Timeline Analyzer."""

from abc import ABC, abstractmethod

from ..models.contract import UploadedFile


class ITextExtractor(ABC):
    """
    Abstract interface for turning an uploaded document into plain text.
    """

    @abstractmethod
    def extract(self, file: UploadedFile) -> str:
        """
        Extract plain text from an uploaded document.

        Args:
            file: The uploaded document.

        Returns:
            Extracted text, or a placeholder when the document has no
            readable text.

        Raises:
            UnsupportedFormatError: If the file type is not accepted.
            FileTooLargeError: If the file exceeds the upload limit.
        """
        pass
