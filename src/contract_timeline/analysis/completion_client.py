"""Completion client for the Gemini generative model."""

import asyncio
import logging
from typing import Any, Awaitable, Optional, Set

import google.generativeai as genai

from ..interfaces.completion import ICompletionClient
from .exceptions import CompletionTimeoutError, EmptyResponseError, UpstreamError


logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-pro"
DEFAULT_TIMEOUT = 10.0


class TimeoutRace:
    """
    Races an awaitable against a timer.

    Whichever finishes first wins. When the timer wins the request is
    abandoned rather than cancelled: it may keep running, but its eventual
    result or error is discarded and never reaches the caller. Abandoned
    tasks are referenced here until they settle so they are not garbage
    collected mid-flight.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout
        self._abandoned: Set[asyncio.Future] = set()

    @property
    def pending_abandoned(self) -> int:
        """Number of abandoned requests that have not settled yet."""
        return len(self._abandoned)

    async def run(self, request: Awaitable[Any]) -> Any:
        """
        Await ``request`` for at most ``timeout`` seconds.

        Raises:
            CompletionTimeoutError: If the timer fires first.
        """
        request_task = asyncio.ensure_future(request)
        timer = asyncio.ensure_future(asyncio.sleep(self.timeout))
        try:
            done, _ = await asyncio.wait(
                {request_task, timer}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            timer.cancel()

        if request_task in done:
            return request_task.result()

        self._abandoned.add(request_task)
        request_task.add_done_callback(self._discard_late_result)
        logger.warning(f"Completion request abandoned after {self.timeout:g}s")
        raise CompletionTimeoutError(
            message="Request timed out",
            timeout=self.timeout,
        )

    def _discard_late_result(self, task: asyncio.Future) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.debug(f"Discarded late completion error: {error}")
        else:
            logger.debug("Discarded late completion result")


class GeminiCompletionClient(ICompletionClient):
    """
    Completion client backed by the Google Gemini API.

    Each call issues a single ``generate_content_async`` request raced
    against a fixed timeout.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = DEFAULT_MODEL_NAME,
        timeout: float = DEFAULT_TIMEOUT,
        model: Optional[Any] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Gemini API key. Required unless ``model`` is given.
            model_name: Name of the Gemini model.
            timeout: Seconds to wait for an answer.
            model: Optional pre-built model object exposing
                ``generate_content_async``.
        """
        if model is None:
            if not api_key:
                raise ValueError("A Gemini API key is required")
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name)
        self._model = model
        self.model_name = model_name
        self._race = TimeoutRace(timeout)

    @property
    def timeout(self) -> float:
        return self._race.timeout

    async def complete(self, prompt: str) -> str:
        """
        Send a prompt to Gemini and return the raw completion text.

        Raises:
            CompletionTimeoutError: If Gemini does not answer in time.
            EmptyResponseError: If the answer has no text.
            UpstreamError: For any error reported by the API client.
        """
        logger.info(f"Requesting completion from {self.model_name} ({len(prompt)} chars)")
        text = await self._race.run(self._request(prompt))
        if not text or not text.strip():
            raise EmptyResponseError(message="No response from Gemini API")
        logger.info(f"Received completion of {len(text)} chars")
        return text

    async def _request(self, prompt: str) -> str:
        try:
            response = await self._model.generate_content_async(prompt)
            return response.text
        except Exception as e:
            raise UpstreamError(
                message=str(e) or type(e).__name__,
                details={"model": self.model_name, "error_type": type(e).__name__},
            ) from e
