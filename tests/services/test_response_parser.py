"""
Tests for response extraction and tag validation.

These tests verify:
- Locating the JSON payload inside commentary and code fences
- Shape validation of content.toAdd / content.toRemove
- Every business rule violation is reported, not just the first
"""

import pytest

from tagassist.exceptions import InvalidRecommendationError, MalformedResponseError
from tagassist.schemas.tags import Work
from tagassist.services.response_parser import (
    extract_json_span,
    parse_recommendation_response,
    validate_recommendations,
)


def _tag(name="Fluff", type="freeform", reason="Soft and warm throughout."):
    return {"name": name, "type": type, "reason": reason}


# =============================================================================
# UNIT TESTS: JSON Extraction
# =============================================================================

class TestExtractJsonSpan:
    """Tests for extract_json_span."""

    def test_plain_object(self):
        assert extract_json_span('{"a": 1}') == '{"a": 1}'

    def test_object_wrapped_in_commentary(self):
        text = 'Sure! Here are my tags:\n{"a": {"b": [1, 2]}}\nHope this helps {:'
        assert extract_json_span(text) == '{"a": {"b": [1, 2]}}'

    def test_object_inside_markdown_fence(self):
        text = '```json\n{"content": {"toAdd": []}}\n```'
        assert extract_json_span(text) == '{"content": {"toAdd": []}}'

    def test_braces_inside_strings_are_ignored(self):
        text = '{"reason": "uses } and { freely"} trailing'
        assert extract_json_span(text) == '{"reason": "uses } and { freely"}'

    def test_escaped_quotes_inside_strings(self):
        text = r'{"reason": "she said \"}\" twice"} done'
        assert extract_json_span(text) == r'{"reason": "she said \"}\" twice"}'

    def test_no_object_returns_none(self):
        assert extract_json_span("I could not find any tags for this story.") is None

    def test_unclosed_object_returns_none(self):
        assert extract_json_span('{"content": {"toAdd": [') is None

    def test_unclosed_brace_before_payload_is_skipped(self):
        text = 'Note: the { key was odd.\n{"content": {"toAdd": [], "toRemove": []}}'
        assert extract_json_span(text) == '{"content": {"toAdd": [], "toRemove": []}}'


# =============================================================================
# UNIT TESTS: Response Parsing
# =============================================================================

class TestParseRecommendationResponse:
    """Tests for parse_recommendation_response."""

    def test_valid_payload(self):
        text = '{"content": {"toAdd": [{"name": "Fluff", "type": "freeform", "reason": "r"}], "toRemove": []}}'
        to_add, to_remove = parse_recommendation_response(text)

        assert to_add == [{"name": "Fluff", "type": "freeform", "reason": "r"}]
        assert to_remove == []

    def test_plain_prose_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            parse_recommendation_response("This story is lovely, tag it as Fluff.")

    def test_stray_brace_in_commentary_is_not_fatal(self):
        text = 'Note: the { key was odd.\n{"content": {"toAdd": [], "toRemove": []}}'
        assert parse_recommendation_response(text) == ([], [])

    def test_unparseable_span_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            parse_recommendation_response("{this is not json}")

    def test_trailing_commas_are_tolerated(self):
        text = '{"content": {"toAdd": [], "toRemove": [],},}'
        assert parse_recommendation_response(text) == ([], [])

    def test_smart_quotes_are_tolerated(self):
        text = '{“content”: {“toAdd”: [], “toRemove”: []}}'
        assert parse_recommendation_response(text) == ([], [])

    def test_missing_content_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            parse_recommendation_response('{"toAdd": [], "toRemove": []}')

    def test_missing_to_remove_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            parse_recommendation_response('{"content": {"toAdd": []}}')

    def test_non_list_to_add_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            parse_recommendation_response('{"content": {"toAdd": {}, "toRemove": []}}')

    def test_non_object_candidate_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            parse_recommendation_response('{"content": {"toAdd": ["Fluff"], "toRemove": []}}')

    def test_legacy_key_names_are_not_accepted(self):
        with pytest.raises(MalformedResponseError):
            parse_recommendation_response('{"content": {"tagsToAdd": [], "tagsToRemove": []}}')


# =============================================================================
# UNIT TESTS: Tag Validation
# =============================================================================

class TestValidateRecommendations:
    """Tests for validate_recommendations."""

    @pytest.fixture
    def work(self) -> Work:
        return Work(title="T", body="B", author_tags=("Example Fandom", "Angst"))

    def test_valid_candidates_keep_order(self, work):
        to_add, to_remove = validate_recommendations(
            work,
            [_tag("Fluff"), _tag("Example Hero", "character")],
            [_tag("Angst", reason="Nothing sad happens.")],
        )

        assert [tag.name for tag in to_add] == ["Fluff", "Example Hero"]
        assert [tag.name for tag in to_remove] == ["Angst"]
        assert to_add[1].type == "character"

    def test_values_are_stripped(self, work):
        to_add, _ = validate_recommendations(work, [_tag("  Fluff ", " freeform", "Warm. ")], [])
        assert to_add[0].name == "Fluff"
        assert to_add[0].type == "freeform"
        assert to_add[0].reason == "Warm."

    def test_duplicate_addition(self, work):
        with pytest.raises(InvalidRecommendationError) as exc_info:
            validate_recommendations(work, [_tag("Example Fandom", "fandom")], [])

        assert len(exc_info.value.violations) == 1
        assert "Duplicated tag" in exc_info.value.violations[0]
        assert "Example Fandom" in exc_info.value.violations[0]

    def test_unsupported_removal(self, work):
        with pytest.raises(InvalidRecommendationError) as exc_info:
            validate_recommendations(work, [], [_tag("Ghost Tag")])

        assert len(exc_info.value.violations) == 1
        assert "Unsupported removal" in exc_info.value.violations[0]
        assert "Ghost Tag" in exc_info.value.violations[0]

    @pytest.mark.parametrize("field", ["name", "type", "reason"])
    def test_missing_field_on_addition(self, work, field):
        candidate = _tag()
        candidate[field] = ""

        with pytest.raises(InvalidRecommendationError) as exc_info:
            validate_recommendations(work, [candidate], [])

        assert len(exc_info.value.violations) == 1
        assert f"has no {field}" in exc_info.value.violations[0]

    def test_whitespace_reason_counts_as_missing(self, work):
        with pytest.raises(InvalidRecommendationError) as exc_info:
            validate_recommendations(work, [], [_tag("Angst", reason="   ")])

        assert "has no reason" in exc_info.value.violations[0]

    def test_absent_or_non_string_fields_count_as_missing(self, work):
        with pytest.raises(InvalidRecommendationError) as exc_info:
            validate_recommendations(work, [{"name": "Fluff", "type": 3}], [])

        messages = " ".join(exc_info.value.violations)
        assert "has no type" in messages
        assert "has no reason" in messages

    def test_nameless_removal_reports_only_missing_fields(self, work):
        with pytest.raises(InvalidRecommendationError) as exc_info:
            validate_recommendations(work, [], [{"name": "", "type": "", "reason": ""}])

        assert len(exc_info.value.violations) == 3
        assert all(v.startswith("Missing field") for v in exc_info.value.violations)

    def test_all_violations_are_accumulated(self, work):
        with pytest.raises(InvalidRecommendationError) as exc_info:
            validate_recommendations(
                work,
                [_tag("Example Fandom", "fandom"), _tag("Fluff", reason="")],
                [_tag("Ghost Tag"), _tag("Angst")],
            )

        violations = exc_info.value.violations
        assert len(violations) == 3
        assert any("Duplicated tag" in v for v in violations)
        assert any("has no reason" in v for v in violations)
        assert any("Unsupported removal" in v for v in violations)
        assert "Ghost Tag" in str(exc_info.value)

    def test_unknown_vocabulary_addition(self, work):
        with pytest.raises(InvalidRecommendationError) as exc_info:
            validate_recommendations(
                work, [_tag("Made Up Tag")], [], vocabulary_names={"Fluff"}
            )

        assert "Unknown tag" in exc_info.value.violations[0]

    def test_removals_are_not_checked_against_vocabulary(self, work):
        _, to_remove = validate_recommendations(
            work, [], [_tag("Angst")], vocabulary_names={"Fluff"}
        )
        assert to_remove[0].name == "Angst"

    def test_without_vocabulary_any_addition_name_is_allowed(self, work):
        to_add, _ = validate_recommendations(work, [_tag("Made Up Tag")], [])
        assert to_add[0].name == "Made Up Tag"
