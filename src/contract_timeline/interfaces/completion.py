"""Completion client interface for the Contract Timeline Analyzer."""

from abc import ABC, abstractmethod


class ICompletionClient(ABC):
    """
    Abstract interface for a text-completion model.

    The model is treated as an opaque prompt-in/text-out service that may
    answer slowly, not at all, or with malformed text.
    """

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the raw text of the completion.

        Args:
            prompt: The fully assembled instruction string.

        Returns:
            Raw model output.

        Raises:
            CompletionTimeoutError: If no answer arrives within the bound.
            EmptyResponseError: If the model answers with an empty body.
            UpstreamError: For network, authentication or model-side errors.
        """
        pass
