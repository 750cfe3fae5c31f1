"""
Tagging Prompt Templates

Contains the system prompt and user prompt builder for tag recommendations.

Architecture:
- Pattern: Single-shot LLM call (one prompt, one JSON response)
- Model: Gemini 2.5 Flash (configurable)
- Output: JSON parsed from response text and validated locally

Prompt Engineering Pattern:
- Uses XML tags for structured content
- System prompt defines role only
- User prompt contains the rules, the vocabulary, the output schema and the work
"""

from typing import Iterable, Sequence

from tagassist.schemas.tags import VocabularyEntry, Work

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

TAGGING_SYSTEM_PROMPT = """You are a helpful assistant that recommends fanfiction tags for authors to tag their works with, and helps them refine the tags they already proposed.

<role>
You compare the content of a work against the author's proposed tags and an official tag list, then:
- Suggest official tags the author should add
- Suggest proposed tags the author should leave out
- Explain every decision with a short, concrete reason
</role>

<output_format>
Always return valid JSON matching the schema provided in the user prompt.
No markdown code blocks, no explanatory text, only the JSON object.
</output_format>"""


# =============================================================================
# OUTPUT SCHEMA
# =============================================================================

TAGGING_OUTPUT_SCHEMA = """{
  "content": {
    "toAdd": [
      {
        "name": "TagName",
        "type": "TagType",
        "reason": "Reason this tag should be added."
      }
    ],
    "toRemove": [
      {
        "name": "TagName",
        "type": "TagType",
        "reason": "Reason this tag should be removed."
      }
    ]
  }
}"""


def format_vocabulary(entries: Iterable[VocabularyEntry]) -> str:
    """Serialize the vocabulary as one 'category, name, uses' line per entry."""
    return "\n".join(f"{entry.category}, {entry.name}, {entry.uses}" for entry in entries)


def format_author_tags(tags: Sequence[str]) -> str:
    if not tags:
        return "(none)"
    return "\n".join(f"- {tag}" for tag in tags)


# =============================================================================
# USER PROMPT BUILDER
# =============================================================================

def build_tagging_user_prompt(work: Work, vocabulary: Sequence[VocabularyEntry]) -> str:
    """
    Build the user prompt for tag recommendations with complete context.

    This function generates the dynamic user prompt that includes:
    - The two sub-tasks (recommend additions, recommend removals)
    - The grounding and no-duplication rules
    - The full controlled vocabulary
    - Output schema requirements
    - The work's title, body and author tags

    Args:
        work: The work being tagged
        vocabulary: Controlled vocabulary entries, in source order

    Returns:
        str: Formatted user prompt ready to be sent to the model
    """
    return f"""Analyze the fanfiction content and compare it to the author's proposed tags.

<tasks>
1. Suggest new tags to add from the official list if they are clearly supported by the story.
2. Suggest tags to remove if the author proposed them but they are not clearly supported by the story.
3. Explain your decision for each added or removed tag in its reason field.
</tasks>

<critical_rules>
1. Only suggest adding tags that are present in the official list, using the exact name and type from the list.
2. Tags must be supported by the work's text. Do not guess or infer beyond what is present. The author's own proposed tags are not themselves evidence.
3. If a list (like toRemove) has no entries, return it as an empty list ([]).
4. Output only the JSON object: no extra commentary, explanations, or markdown.
5. NO DUPLICATION: Do not suggest adding a tag that is already in the author's proposed tags.
6. Only suggest removing tags that appear in the author's proposed tags.
7. Do NOT suggest removing a tag just because it is not standard, recognized, or in the official list.
8. Do NOT suggest removing a tag because it is too specific.
9. Every tag must have a non-empty name, type and reason.
</critical_rules>

<relationship_notation>
"/" marks romantic relationships and "&" marks platonic relationships.
M/M, F/M and F/F are romance categories; Gen is the platonic category.
Readers often filter by relationship, so two characters being tagged does not mean the relationship tag itself should be removed.
</relationship_notation>

<official_tags>
Format: TYPE, NAME, NUMBER OF USES. Only these tags may be added.
{format_vocabulary(vocabulary)}
</official_tags>

<output_schema>
Return your response as a JSON object with this exact structure:
{TAGGING_OUTPUT_SCHEMA}
</output_schema>

<title>
{work.title}
</title>

<work_text>
{work.body}
</work_text>

<author_tags>
{format_author_tags(work.author_tags)}
</author_tags>

Return ONLY the JSON object, no additional text."""
