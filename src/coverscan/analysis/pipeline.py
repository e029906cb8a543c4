"""Cover analysis orchestration: image -> identity -> metadata -> summary."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

import httpx

from coverscan.analysis.catalog import CatalogResolver
from coverscan.analysis.config import AnalysisSettings
from coverscan.analysis.extractor import VisionExtractor
from coverscan.analysis.images import ImageFetchError, normalize_image
from coverscan.analysis.models import AnalysisFailure, AnalysisStatus, BookSummary, ImageRef
from coverscan.analysis.openrouter import GenerationRequestError, OpenRouterGenerator
from coverscan.analysis.summary import SummaryGenerator


logger = logging.getLogger(__name__)

STAGE_IMAGE = "image"
STAGE_EXTRACTION = "extraction"
STAGE_SUMMARY = "summary"
STAGE_UNKNOWN = "unknown"


@dataclass(slots=True)
class AnalysisError(RuntimeError):
    """Pipeline-level failure raised by the first non-recoverable stage."""

    stage: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (stage={self.stage})"


class CoverAnalysisPipeline:
    """Runs the four analysis stages sequentially for one image reference."""

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        extractor: VisionExtractor,
        resolver: CatalogResolver,
        summarizer: SummaryGenerator,
        owns_http_client: bool = False,
    ) -> None:
        self._http_client = http_client
        self._extractor = extractor
        self._resolver = resolver
        self._summarizer = summarizer
        self._owns_http_client = owns_http_client

    @classmethod
    def from_settings(
        cls,
        settings: AnalysisSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
        ai_client: Any | None = None,
    ) -> "CoverAnalysisPipeline":
        owns_http_client = http_client is None
        client = http_client or httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        generator = OpenRouterGenerator(settings, client=ai_client)
        return cls(
            http_client=client,
            extractor=VisionExtractor(generator, model=settings.vision_model),
            resolver=CatalogResolver(
                client,
                catalog_url=settings.catalog_url,
                api_key=settings.catalog_api_key,
            ),
            summarizer=SummaryGenerator(
                generator,
                model=settings.summary_model,
                language=settings.summary_language,
            ),
            owns_http_client=owns_http_client,
        )

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "CoverAnalysisPipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def run(self, ref: ImageRef) -> BookSummary:
        logger.info("Preparing image for analysis")
        try:
            image_url = await normalize_image(ref, client=self._http_client)
        except ImageFetchError as exc:
            raise AnalysisError(stage=STAGE_IMAGE, message=str(exc)) from exc

        logger.info("Extracting title and author from cover")
        try:
            identity = await self._extractor.extract(image_url)
        except GenerationRequestError as exc:
            raise AnalysisError(stage=STAGE_EXTRACTION, message=str(exc)) from exc
        logger.info("Extracted identity: %r by %r", identity.title, identity.author)

        logger.info("Searching catalog")
        metadata = await self._resolver.resolve(identity)

        logger.info("Generating summary")
        try:
            return await self._summarizer.summarize(metadata)
        except GenerationRequestError as exc:
            raise AnalysisError(stage=STAGE_SUMMARY, message=str(exc)) from exc


class CoverAnalyzer:
    """Tracks idle/pending/settled/failed state for the most recently started analysis.

    Each call gets its own generation number; an older call that finishes after a
    newer one was started returns its outcome to its own caller but leaves the
    tracked state untouched.
    """

    def __init__(self, pipeline: CoverAnalysisPipeline) -> None:
        self._pipeline = pipeline
        self._generation = 0
        self._status = AnalysisStatus.IDLE
        self._result: BookSummary | None = None
        self._failure: AnalysisFailure | None = None

    @property
    def status(self) -> AnalysisStatus:
        return self._status

    @property
    def result(self) -> BookSummary | None:
        return self._result

    @property
    def failure(self) -> AnalysisFailure | None:
        return self._failure

    async def analyze(self, ref: ImageRef) -> BookSummary | AnalysisFailure:
        self._generation += 1
        generation = self._generation
        self._status = AnalysisStatus.PENDING
        self._result = None
        self._failure = None

        outcome: BookSummary | AnalysisFailure
        try:
            outcome = await self._pipeline.run(ref)
        except AnalysisError as exc:
            logger.warning("Cover analysis failed at stage %s: %s", exc.stage, exc.message)
            outcome = AnalysisFailure(stage=exc.stage, error=exc.message)
        except Exception as exc:
            logger.exception("Unexpected error during cover analysis")
            outcome = AnalysisFailure(stage=STAGE_UNKNOWN, error=str(exc) or type(exc).__name__)

        if generation != self._generation:
            logger.info("Discarding superseded analysis #%s (latest is #%s)", generation, self._generation)
            return outcome

        if isinstance(outcome, AnalysisFailure):
            self._failure = outcome
            self._status = AnalysisStatus.FAILED
        else:
            self._result = outcome
            self._status = AnalysisStatus.SETTLED
        return outcome
