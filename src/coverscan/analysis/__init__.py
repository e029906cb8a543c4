"""Cover identification and summarization pipeline."""

from coverscan.analysis.config import AnalysisSettings
from coverscan.analysis.models import (
    AnalysisFailure,
    AnalysisStatus,
    BookMetadata,
    BookSummary,
    ExtractedIdentity,
    ImageRef,
)
from coverscan.analysis.pipeline import AnalysisError, CoverAnalysisPipeline, CoverAnalyzer

__all__ = [
    "AnalysisError",
    "AnalysisFailure",
    "AnalysisSettings",
    "AnalysisStatus",
    "BookMetadata",
    "BookSummary",
    "CoverAnalysisPipeline",
    "CoverAnalyzer",
    "ExtractedIdentity",
    "ImageRef",
]
