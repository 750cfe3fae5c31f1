"""
Controlled vocabulary loading.

The vocabulary is read-only reference data: rows of (category, name, uses).
It is read fresh on every prompt construction. A missing, unreadable or empty
source raises VocabularyUnavailableError; there is no fallback vocabulary.

CSV format (header row optional):
    category,name,uses
    fandom,Harry Potter - J. K. Rowling,412904
"""

import csv
import logging
from pathlib import Path
from typing import List, Protocol, Union

from tagassist.exceptions import VocabularyUnavailableError
from tagassist.schemas.tags import VocabularyEntry

logger = logging.getLogger(__name__)

_HEADER_NAMES = {"name", "tag", "tag name"}


class VocabularySource(Protocol):
    """Anything that can produce the current controlled vocabulary."""

    def load(self) -> List[VocabularyEntry]:
        ...


class CsvVocabularySource:
    """Vocabulary backed by a CSV file on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[VocabularyEntry]:
        """
        Read every vocabulary row from the CSV file.

        Malformed rows are skipped with a warning.

        Raises:
            VocabularyUnavailableError: If the file cannot be read or holds
                no usable rows.
        """
        try:
            with self.path.open(encoding="utf-8", newline="") as handle:
                rows = list(csv.reader(handle, skipinitialspace=True))
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.error(f"Failed to read vocabulary from {self.path}: {e}")
            raise VocabularyUnavailableError(
                f"Cannot read controlled vocabulary from {self.path}"
            ) from e

        entries = parse_vocabulary_rows(rows)
        if not entries:
            logger.error(f"Vocabulary file {self.path} has no usable rows")
            raise VocabularyUnavailableError(f"Controlled vocabulary at {self.path} is empty")

        logger.debug(f"Loaded {len(entries)} vocabulary entries from {self.path}")
        return entries


def parse_vocabulary_rows(rows: List[List[str]]) -> List[VocabularyEntry]:
    """Turn raw CSV rows into entries, skipping a header row and blank or malformed lines."""
    entries: List[VocabularyEntry] = []

    for line_no, row in enumerate(rows, start=1):
        cells = [cell.strip() for cell in row]
        if not any(cells):
            continue

        if line_no == 1 and len(cells) > 1 and cells[1].lower() in _HEADER_NAMES:
            continue

        if len(cells) < 2 or not cells[0] or not cells[1]:
            logger.warning(f"Skipping malformed vocabulary row {line_no}: {row}")
            continue

        uses = 0
        if len(cells) > 2 and cells[2]:
            try:
                uses = int(cells[2].replace(",", ""))
            except ValueError:
                logger.warning(f"Non-numeric use count on vocabulary row {line_no}: {cells[2]!r}")

        entries.append(VocabularyEntry(category=cells[0], name=cells[1], uses=uses))

    return entries
