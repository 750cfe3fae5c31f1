"""
Query-side helpers that turn a RecommendationSet into grouped tags and text.

Both helpers are pure: the same set always yields the same grouping and
byte-identical text.
"""

from typing import Dict, Iterable, List

from tagassist.schemas.tags import OrganizedTags, RecommendationSet, Tag

SECTION_RULE = "======================="
CATEGORY_RULE = "-----------------------"


def group_by_category(tags: Iterable[Tag]) -> Dict[str, List[Tag]]:
    """Group tags by type, keeping first-seen category order and tag order."""
    grouped: Dict[str, List[Tag]] = {}
    for tag in tags:
        grouped.setdefault(tag.type, []).append(tag)
    return grouped


def organize(rec_set: RecommendationSet) -> OrganizedTags:
    """Return the set's additions and removals grouped by category."""
    return OrganizedTags(
        to_add=group_by_category(rec_set.to_add),
        to_remove=group_by_category(rec_set.to_remove),
    )


def _render_groups(groups: Dict[str, List[Tag]]) -> str:
    text = ""
    for category, tags in groups.items():
        text += f"\n{category}: \n{CATEGORY_RULE}\n"
        for tag in tags:
            text += f"{tag.name}: {tag.reason}\n"
    return text


def render(rec_set: RecommendationSet) -> str:
    """
    Render a readable report: additions first, then removals.

    Example:
        Suggested tags: 
        =======================

        fandom: 
        -----------------------
        Example Fandom: Story is set in this world.

        Tags to leave out: 
        =======================
    """
    organized = organize(rec_set)

    text = f"Suggested tags: \n{SECTION_RULE}\n"
    text += _render_groups(organized.to_add)
    text += f"\nTags to leave out: \n{SECTION_RULE}\n"
    text += _render_groups(organized.to_remove)

    return text
