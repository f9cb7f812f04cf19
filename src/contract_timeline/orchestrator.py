"""Upload orchestration for the Contract Timeline Analyzer.

This module drives one contract upload from raw file to a committed,
post-processed Contract: text extraction, the sample-contract short-circuit
or the model round trip, post-processing, and the store commit. Progress is
reported to an optional observer and failures are classified as timeout or
generic before they reach the caller.
"""

import asyncio
import inspect
import logging
import time
import uuid
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Union

from .analysis.analyzer import ContractAnalyzer
from .analysis.exceptions import UploadFailedError, UploadInProgressError
from .analysis.post_processor import post_process
from .interfaces.completion import ICompletionClient
from .interfaces.extractor import ITextExtractor
from .models.contract import Contract, ContractAnalysis, ProcessingStatus, UploadedFile
from .models.enums import UploadState
from .parsers.text_extractor import DocumentTextExtractor
from .storage.contract_store import ContractStore


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProcessingStatus], Union[None, Awaitable[None]]]

STARTING = ProcessingStatus("Starting analysis...", 0)
PROCESSING_STAGES = [
    ProcessingStatus("Initializing Document Scanner...", 10),
    ProcessingStatus("Extracting Text from PDF...", 25),
    ProcessingStatus("Analyzing Termination Clauses...", 40),
    ProcessingStatus("Identifying Key Milestones...", 55),
    ProcessingStatus("Extracting Deliverables...", 70),
    ProcessingStatus("Calculating Risk Profiles...", 85),
    ProcessingStatus("Generating Timeline Visualization...", 95),
    ProcessingStatus("Analysis Complete", 100),
]

# Index of the first stage reported after the analysis has been obtained
_POST_ANALYSIS_STAGE = 3

# States from which an upload may fail
_FAILABLE_STATES = {
    UploadState.EXTRACTING,
    UploadState.SHORT_CIRCUIT,
    UploadState.REQUESTING,
    UploadState.PARSING,
    UploadState.POST_PROCESSING,
}


def generate_contract_id() -> str:
    """New contract id: CNT-<epoch millis>-<random suffix>."""
    return f"CNT-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


class ProgressReporter:
    """Forwards progress to an observer, never letting the percentage go back."""

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self._callback = callback
        self.history: List[ProcessingStatus] = []

    @property
    def last_progress(self) -> int:
        return self.history[-1].progress if self.history else 0

    async def report(self, status: ProcessingStatus) -> None:
        if self.history and status.progress < self.last_progress:
            status = ProcessingStatus(status.stage, self.last_progress)
        self.history.append(status)
        if self._callback is None:
            return
        outcome = self._callback(status)
        if inspect.isawaitable(outcome):
            await outcome


class UploadOrchestrator:
    """
    Coordinates the analysis of one uploaded contract at a time.

    A second upload started while one is running is rejected with a
    GENERIC UploadFailedError wrapping UploadInProgressError.
    """

    def __init__(
        self,
        store: ContractStore,
        completion_client: Optional[ICompletionClient] = None,
        extractor: Optional[ITextExtractor] = None,
        analyzer: Optional[ContractAnalyzer] = None,
        stage_delay: float = 0.2,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Contract store successful uploads are committed to.
            completion_client: Model client; without one only the sample
                contract can be analyzed.
            extractor: Optional text extractor (created if not provided).
            analyzer: Optional analysis service (created if not provided).
            stage_delay: Seconds between cosmetic progress stages.
            clock: Source of the current time for countdowns.
        """
        self._store = store
        self._extractor = extractor or DocumentTextExtractor()
        self._analyzer = analyzer or ContractAnalyzer(completion_client)
        self.stage_delay = stage_delay
        self._clock = clock
        self._in_flight = False
        self.state = UploadState.IDLE
        self.state_history: List[UploadState] = [UploadState.IDLE]

    @property
    def is_processing(self) -> bool:
        return self._in_flight

    def _transition(self, state: UploadState) -> None:
        logger.debug(f"Upload state {self.state.value} -> {state.value}")
        self.state = state
        self.state_history.append(state)

    async def upload(
        self,
        file: UploadedFile,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Contract:
        """
        Analyze an uploaded contract and commit it to the store.

        Args:
            file: The uploaded document.
            on_progress: Optional observer for progress updates; may be a
                plain function or a coroutine function.

        Returns:
            The committed Contract, now the store's active contract.

        Raises:
            UploadFailedError: Classified as TIMEOUT or GENERIC. The store is
                left untouched.
        """
        if self._in_flight:
            logger.warning(f"Rejected upload of {file.filename}: another upload is in progress")
            raise UploadFailedError.classify(
                UploadInProgressError(message="Another upload is already in progress")
            )

        self._in_flight = True
        self.state = UploadState.IDLE
        self.state_history = [UploadState.IDLE]
        try:
            return await self._run(file, ProgressReporter(on_progress))
        finally:
            self._in_flight = False

    async def _run(self, file: UploadedFile, progress: ProgressReporter) -> Contract:
        contract_id = generate_contract_id()
        logger.info(f"Starting upload {contract_id} for {file.filename} ({file.size} bytes)")
        await progress.report(STARTING)

        try:
            self._transition(UploadState.EXTRACTING)
            await progress.report(PROCESSING_STAGES[0])
            await progress.report(PROCESSING_STAGES[1])
            text = self._extractor.extract(file)

            analysis = await self._analyze(file, text, progress)

            for stage in PROCESSING_STAGES[_POST_ANALYSIS_STAGE:]:
                await progress.report(stage)
                if self.stage_delay > 0:
                    await asyncio.sleep(self.stage_delay)

            self._transition(UploadState.POST_PROCESSING)
            now = self._clock()
            analysis = post_process(analysis, now)
            contract = Contract(
                contract_id=contract_id,
                filename=file.filename,
                upload_date=now,
                analysis=analysis,
            )
        except Exception as e:
            failure = UploadFailedError.classify(e)
            if self.state in _FAILABLE_STATES:
                self._transition(UploadState.FAILED)
            if failure.is_timeout:
                logger.warning(f"Upload {contract_id} timed out: {e}")
            else:
                logger.exception(f"Upload {contract_id} failed: {e}")
            raise failure from e

        self._store.add(contract)
        self._transition(UploadState.COMMITTED)
        logger.info(
            f"Upload {contract_id} committed with "
            f"{len(contract.analysis.timeline_events)} timeline events"
        )
        return contract

    async def _analyze(
        self, file: UploadedFile, text: str, progress: ProgressReporter
    ) -> ContractAnalysis:
        if self._analyzer.is_fixture(file.filename, text):
            self._transition(UploadState.SHORT_CIRCUIT)
            await progress.report(PROCESSING_STAGES[2])
            return self._analyzer.fixture_analysis()

        self._transition(UploadState.REQUESTING)
        await progress.report(PROCESSING_STAGES[2])
        raw_text = await self._analyzer.request_completion(text)

        self._transition(UploadState.PARSING)
        return self._analyzer.parse(raw_text)
