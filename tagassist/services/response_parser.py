"""
Parsing and validation of tag recommendation responses.

The model is treated as an untrusted oracle. Its raw text goes through:
1. Extraction: the first balanced top-level JSON object in the text
2. Shape validation: content.toAdd and content.toRemove must be lists of objects
3. Per-tag validation: every rule violation is collected, not just the first

RULES (per candidate tag):
- An addition already among the author's tags is a duplication violation
- A removal not among the author's tags is an unsupported-removal violation
- An empty name, type or reason is a missing-field violation
- With a vocabulary given, an addition outside it is an unknown-tag violation

Any violation rejects the whole response. Nothing is dropped silently.
"""

import json
import logging
import re
from typing import AbstractSet, Any, Dict, List, Optional, Tuple

from tagassist.exceptions import InvalidRecommendationError, MalformedResponseError
from tagassist.schemas.tags import Tag, Work
from tagassist.utils.logging import truncate_for_log

logger = logging.getLogger(__name__)

TAG_FIELDS = ("name", "type", "reason")

RawCandidates = List[Dict[str, Any]]


def extract_json_span(text: str) -> Optional[str]:
    """
    Find the first balanced top-level {...} span in text.

    Braces inside JSON strings (including escaped quotes) are ignored.
    An opening brace that is never closed is skipped and the scan restarts
    at the next one. Returns None if no balanced span exists.
    """
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            return text[start:end + 1]
        start = text.find("{", start + 1)

    return None


def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index of the brace closing the one at start, or None if unclosed."""
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]

        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index

    return None


def _clean_json_text(json_content: str) -> str:
    """Strip the usual LLM artifacts that break json.loads."""
    # Remove trailing commas before } or ]
    json_content = re.sub(r',(\s*[}\]])', r'\1', json_content)

    # Control characters other than tab, newline and carriage return
    json_content = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', json_content)

    # Curly/smart quotes
    json_content = json_content.replace('“', '"').replace('”', '"')
    json_content = json_content.replace('‘', "'").replace('’', "'")

    return json_content


def _load_json_object(span: str) -> Any:
    try:
        return json.loads(span)
    except json.JSONDecodeError:
        logger.debug("Strict JSON parse failed, retrying after cleanup")

    try:
        return json.loads(_clean_json_text(span))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response: {e}")
        raise MalformedResponseError(f"Response JSON could not be parsed: {e}") from e


def _candidate_list(content: Dict[str, Any], key: str) -> RawCandidates:
    candidates = content.get(key)
    if not isinstance(candidates, list):
        raise MalformedResponseError(f"Response content.{key} is missing or not a list")

    for index, candidate in enumerate(candidates):
        if not isinstance(candidate, dict):
            raise MalformedResponseError(f"Response content.{key}[{index}] is not an object")

    return candidates


def parse_recommendation_response(response_text: str) -> Tuple[RawCandidates, RawCandidates]:
    """
    Extract the toAdd and toRemove candidate lists from raw model output.

    The model may wrap the payload in commentary or a markdown code block.

    Returns:
        (to_add candidates, to_remove candidates) as raw dicts, in order

    Raises:
        MalformedResponseError: If no JSON object is found, it does not
            parse, or it lacks content.toAdd / content.toRemove lists.
    """
    span = extract_json_span(response_text)
    if span is None:
        logger.error(f"No JSON found in response: {truncate_for_log(response_text, 200)}")
        raise MalformedResponseError("No JSON object found in response")

    payload = _load_json_object(span)

    if not isinstance(payload, dict) or not isinstance(payload.get("content"), dict):
        raise MalformedResponseError("Response is missing the 'content' object")

    content = payload["content"]
    return _candidate_list(content, "toAdd"), _candidate_list(content, "toRemove")


def _field_text(candidate: Dict[str, Any], field: str) -> str:
    value = candidate.get(field)
    if not isinstance(value, str):
        return ""
    return value.strip()


def _tag_fields(candidate: Dict[str, Any]) -> Dict[str, str]:
    return {field: _field_text(candidate, field) for field in TAG_FIELDS}


def _missing_field_violations(fields: Dict[str, str], list_name: str, index: int) -> List[str]:
    label = f"'{fields['name']}'" if fields["name"] else "unnamed tag"
    return [
        f"Missing field: {list_name}[{index}] ({label}) has no {field}"
        for field in TAG_FIELDS
        if not fields[field]
    ]


def validate_recommendations(
    work: Work,
    raw_to_add: RawCandidates,
    raw_to_remove: RawCandidates,
    vocabulary_names: Optional[AbstractSet[str]] = None,
) -> Tuple[List[Tag], List[Tag]]:
    """
    Check every candidate tag against the work and build the accepted lists.

    Args:
        work: The work the recommendations are for
        raw_to_add: Addition candidates from parse_recommendation_response
        raw_to_remove: Removal candidates from parse_recommendation_response
        vocabulary_names: When given, additions must use one of these names

    Returns:
        (to_add, to_remove) Tag lists in the order received

    Raises:
        InvalidRecommendationError: With every violation found.
    """
    violations: List[str] = []
    add_fields = [_tag_fields(candidate) for candidate in raw_to_add]
    remove_fields = [_tag_fields(candidate) for candidate in raw_to_remove]

    for index, fields in enumerate(add_fields):
        violations.extend(_missing_field_violations(fields, "toAdd", index))

        name = fields["name"]
        if name:
            if work.has_author_tag(name):
                violations.append(
                    f"Duplicated tag: '{name}' is already among the author's tags"
                )
            if vocabulary_names is not None and name not in vocabulary_names:
                violations.append(
                    f"Unknown tag: '{name}' is not in the controlled vocabulary"
                )

    for index, fields in enumerate(remove_fields):
        violations.extend(_missing_field_violations(fields, "toRemove", index))

        name = fields["name"]
        if name and not work.has_author_tag(name):
            violations.append(
                f"Unsupported removal: '{name}' is not among the author's tags"
            )

    if violations:
        logger.warning(
            f"Rejected recommendations for work_id={work.work_id}: "
            f"{len(violations)} violation(s)"
        )
        raise InvalidRecommendationError(violations)

    to_add = [Tag(**fields) for fields in add_fields]
    to_remove = [Tag(**fields) for fields in remove_fields]
    return to_add, to_remove
