"""
Story definitions (GetStories_2 / SetStories_2).
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from ..core.errors import ValidationError, require_name, require_positive, require_range
from ..core.mapper import RecordDecoder
from .base import BaseManager


@dataclass(frozen=True)
class StoryDefinition:
    """One story of the model.

    Attributes:
        name: Story name
        elevation: Elevation of the story top (read only; derived from heights)
        height: Story height
        is_master: Master story flag
        similar_to: Master story this story is similar to
        splice_above: Whether a splice exists above the story
        splice_height: Splice height above the story
        color: Display color (Windows RGB int)
    """
    name: str
    height: float
    elevation: float = 0.0
    is_master: bool = True
    similar_to: str = "None"
    splice_above: bool = False
    splice_height: float = 0.0
    color: int = 0


@dataclass
class StoryLayout:
    """Base elevation and stories, bottom to top"""
    base_elevation: float
    stories: List[StoryDefinition] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [story.name for story in self.stories]

    @property
    def total_height(self) -> float:
        return sum(story.height for story in self.stories)

    def __len__(self) -> int:
        return len(self.stories)


_GET_FIELDS = (
    "base_elevation", "count", "name", "elevation", "height", "is_master",
    "similar_to", "splice_above", "splice_height", "color",
)
# SetStories_2 takes no elevations
_SET_FIELD_MAP = {
    "name": "name",
    "height": "height",
    "is_master": "is_master",
    "similar_to": "similar_to",
    "splice_above": "splice_above",
    "splice_height": "splice_height",
    "color": "color",
}
_DECODER = RecordDecoder(StoryDefinition, converters={
    "name": str,
    "height": float,
    "elevation": float,
    "is_master": bool,
    "similar_to": str,
    "splice_above": bool,
    "splice_height": float,
    "color": int,
})


class StoryManager(BaseManager):
    """Story call-sites (Story)."""

    def get_stories(self) -> StoryLayout:
        context = self._context("Story.GetStories_2")
        outcome = self._fetch(
            context, "Story.GetStories_2", (0.0, 0, [], [], [], [], [], [], [], []),
            _GET_FIELDS, _DECODER, scalar_fields=("base_elevation",))
        stories = self._translator.unwrap(outcome)
        return StoryLayout(float(outcome.scalars.get("base_elevation") or 0.0), stories)

    def names(self) -> List[str]:
        return self._names(self._context("Story.GetNameList"), "Story.GetNameList")

    def set_stories(self, base_elevation: float, stories: Sequence[StoryDefinition]) -> None:
        """Replace the story table. Stories are listed bottom to top, above the base."""
        stories = list(stories or ())
        context = self._context(
            "Story.SetStories_2", [str(getattr(s, "name", s)) for s in stories])
        require_range(base_elevation, "base_elevation", context=context)
        if not stories:
            raise ValidationError("stories", stories, "cannot be empty", context)
        seen = set()
        for index, story in enumerate(stories):
            if not isinstance(story, StoryDefinition):
                raise ValidationError(f"stories[{index}]", story, "must be a StoryDefinition", context)
            require_name(story.name, f"stories[{index}].name", context)
            require_positive(story.height, f"stories[{index}].height", context)
            if story.name in seen:
                raise ValidationError(f"stories[{index}].name", story.name, "duplicate story name", context)
            seen.add(story.name)

        arrays = self._mapper.encode(stories, _SET_FIELD_MAP)
        self._execute(
            context, "Story.SetStories_2", base_elevation, len(stories),
            arrays["name"], arrays["height"], arrays["is_master"], arrays["similar_to"],
            arrays["splice_above"], arrays["splice_height"], arrays["color"])
