#!/usr/bin/env python3
"""
Tag Recommendation Runner

Runs one submission against the configured Gemini backend and vocabulary
and prints the rendered report. Useful for trying prompt or vocabulary
changes locally without starting the API.

Usage:
    python scripts/tag_work.py story.txt --title "My Fic"
    python scripts/tag_work.py story.txt --title "My Fic" --tags "Fluff" "Time Travel"
    python scripts/tag_work.py story.txt --title "My Fic" --vocabulary data/vocabulary.csv --json
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from tagassist.exceptions import InvalidRecommendationError, TagAssistError
from tagassist.schemas.tags import Work
from tagassist.services.tagging_service import create_tagging_service
from tagassist.services.vocabulary import CsvVocabularySource

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Request tag recommendations for a work")
    parser.add_argument("text_file", type=Path, help="File holding the body of the work")
    parser.add_argument("--title", required=True, help="Title of the work")
    parser.add_argument("--tags", nargs="*", default=[], help="Tags the author proposes")
    parser.add_argument("--vocabulary", type=Path, help="Vocabulary CSV (defaults to VOCABULARY_CSV_PATH)")
    parser.add_argument("--json", action="store_true", help="Print the set as JSON instead of the report")
    parser.add_argument("--debug", action="store_true", help="Log the raw model response")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    if args.debug:
        logging.getLogger("tagassist").setLevel(logging.DEBUG)

    try:
        body = args.text_file.read_text(encoding="utf-8")
    except OSError as e:
        print(f"❌ Cannot read {args.text_file}: {e}", file=sys.stderr)
        return 1

    vocabulary_source = CsvVocabularySource(args.vocabulary) if args.vocabulary else None
    service = create_tagging_service(vocabulary_source=vocabulary_source)
    work = Work(title=args.title, body=body, author_tags=tuple(args.tags))

    print(f"🤖 Requesting tag recommendations for '{work.title}'...")
    try:
        rec_set = await service.submit(work)
    except InvalidRecommendationError as e:
        print("❌ Model provided disallowed recommendations:", file=sys.stderr)
        for violation in e.violations:
            print(f"   - {violation}", file=sys.stderr)
        return 1
    except TagAssistError as e:
        print(f"❌ {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(rec_set.model_dump(mode="json", exclude={"work": {"body"}}), indent=2))
    else:
        print()
        print(service.render(work))
    return 0


def main(argv=None) -> int:
    return asyncio.run(run(parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
