import argparse
import asyncio
import sys
from pathlib import Path

from docrouter.config.settings import Settings
from docrouter.database.connection import close_pool, init_pool
from docrouter.logging.logger import Log
from docrouter.processor.file_loader import FileLoader
from docrouter.processor.pipeline import PipelineContext
from docrouter.processor.processor import build_processor
from docrouter.profiling.models import UserTier


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="docrouter",
        description="Route an upload to the cheapest adequate OCR pipeline and print its text.",
    )
    parser.add_argument("file", type=Path, help="PDF or image to process")
    parser.add_argument(
        "--user-tier",
        choices=[tier.value for tier in UserTier],
        default=None,
        help="Subscription tier of the uploader (defaults to USER_TIER from the environment)",
    )
    parser.add_argument(
        "--mime-type",
        default=None,
        help="Override the MIME type guessed from the file extension",
    )
    return parser.parse_args(argv)


async def run(settings: Settings, args: argparse.Namespace) -> PipelineContext:
    upload = FileLoader().load(args.file, mime_type=args.mime_type)
    tier_value = args.user_tier or settings.user_tier
    user_tier = UserTier(tier_value) if tier_value else None
    processor = build_processor(settings)
    return await processor.process(upload, user_tier=user_tier)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> process the file -> print the outcome."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    use_database = settings.decision_recorder.lower() == "postgres"
    if use_database:
        init_pool(settings)

    try:
        context = asyncio.run(run(settings, args))
    except Exception as exc:
        Log.exception(f"Failed to process {args.file}: {exc}")
        return 1
    finally:
        if use_database:
            close_pool()

    result = context.result
    if result is None or context.config is None:
        return 1
    print(f"tier: {context.config.tier.value}")
    print(f"cost: {result.total_cost} units")
    print(f"time: {result.total_time_ms:.0f} ms")
    if not result.success:
        print(f"error: {result.error}", file=sys.stderr)
        return 1
    print()
    print(result.extracted_text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
