import argparse
import json
import sys
from pathlib import Path

from civicscan.config.settings import Settings
from civicscan.inference.factory import InferenceFactory
from civicscan.inference.orchestrator import InferenceOrchestrator
from civicscan.logging.logger import Log
from civicscan.processor.models import Assessment
from civicscan.processor.processor import build_processor


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="civicscan",
        description="Validate a civic-issue photo and print its prioritized assessment.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("image", nargs="?", type=Path, help="Path to a local image file")
    source.add_argument("--url", help="URL of an image that is already hosted remotely")
    source.add_argument(
        "--health",
        action="store_true",
        help="Print inference configuration status and exit",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build processor -> assess -> print JSON."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level, stream=sys.stderr)

    client = InferenceFactory.create_client(settings)
    try:
        if args.health:
            orchestrator = InferenceOrchestrator(client=client, settings=settings)
            print(json.dumps(orchestrator.health_status(), indent=2))
            return 0

        processor = build_processor(settings, client=client)
        assessment: Assessment
        if args.url:
            assessment = processor.assess_url(args.url)
        else:
            assessment = processor.assess_file(args.image)
    finally:
        client.close()

    print(json.dumps(assessment.to_dict(), indent=2))
    return 0 if assessment.allow_upload else 1


if __name__ == "__main__":
    sys.exit(main())
