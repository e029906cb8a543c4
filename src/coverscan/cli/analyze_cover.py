"""CLI entrypoint that identifies and summarizes a book from a cover photo."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

from dotenv import load_dotenv

from coverscan.analysis.config import AnalysisSettings
from coverscan.analysis.models import AnalysisFailure, AnalysisStatus, BookSummary, ImageRef
from coverscan.analysis.pipeline import CoverAnalysisPipeline, CoverAnalyzer


logger = logging.getLogger(__name__)


async def run_analysis(
    pipeline: CoverAnalysisPipeline,
    ref: ImageRef,
) -> tuple[AnalysisStatus, BookSummary | AnalysisFailure]:
    async with pipeline:
        analyzer = CoverAnalyzer(pipeline)
        outcome = await analyzer.analyze(ref)
    return analyzer.status, outcome


def build_payload(status: AnalysisStatus, outcome: BookSummary | AnalysisFailure) -> dict[str, object]:
    payload: dict[str, object] = {"status": status.value}
    if isinstance(outcome, AnalysisFailure):
        payload["failure"] = outcome.to_dict()
    else:
        payload["result"] = outcome.to_dict()
    return payload


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Identify a book from its cover photo and summarize it")
    parser.add_argument("--image", required=True, help="Image file path, file:// or http(s) URL, or data URL")
    parser.add_argument("--verbose", action="store_true", help="Log stage details at DEBUG level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )
    load_dotenv()

    try:
        settings = AnalysisSettings.from_env()
    except ValueError as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    logger.info(
        "Loaded analysis config: vision_model=%s, summary_model=%s, language=%s",
        settings.vision_model,
        settings.summary_model,
        settings.summary_language,
    )

    pipeline = CoverAnalysisPipeline.from_settings(settings)
    status, outcome = asyncio.run(run_analysis(pipeline, ImageRef(args.image)))

    print(json.dumps(build_payload(status, outcome), ensure_ascii=False, indent=2))
    return 0 if status is AnalysisStatus.SETTLED else 1


if __name__ == "__main__":
    raise SystemExit(main())
