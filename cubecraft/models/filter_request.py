from collections.abc import Mapping
from dataclasses import dataclass, field, replace

ALL_FILTER = "all"


@dataclass(frozen=True, slots=True)
class FilterRequest:
    """
    Every filter and the sort order for one query.

    Selected options are ORed within a group and groups are ANDed together.
    Helper methods return a new request; the original is never modified.

    Attributes:
        search: Case-insensitive text matched against name, type and description
        filter_option: Legacy single-select filter id, "all" for no filter
        selections: Selected option ids per multi-select group
        ranges: Inclusive (min, max) per range group
        tiers: Selected tier labels
        tier_scheme: Which tier banding the tier selection refers to
        sort_by: Sort option id
        descending: Reverse the sort order
    """

    search: str = ""
    filter_option: str = ALL_FILTER
    selections: Mapping[str, frozenset[str]] = field(default_factory=dict)
    ranges: Mapping[str, tuple[float, float]] = field(default_factory=dict)
    tiers: frozenset[str] = frozenset()
    tier_scheme: str = "standard"
    sort_by: str = "name"
    descending: bool = False

    def toggle_option(self, group_id: str, option_id: str) -> "FilterRequest":
        """Select or deselect one option; an emptied group is dropped entirely."""
        selections = dict(self.selections)
        current = selections.get(group_id, frozenset())
        updated = current - {option_id} if option_id in current else current | {option_id}
        if updated:
            selections[group_id] = updated
        else:
            selections.pop(group_id, None)
        return replace(self, selections=selections)

    def clear_group(self, group_id: str) -> "FilterRequest":
        selections = {k: v for k, v in self.selections.items() if k != group_id}
        return replace(self, selections=selections)

    def set_range(self, group_id: str, low: float, high: float) -> "FilterRequest":
        ranges = dict(self.ranges)
        ranges[group_id] = (min(low, high), max(low, high))
        return replace(self, ranges=ranges)

    def clear_range(self, group_id: str) -> "FilterRequest":
        ranges = {k: v for k, v in self.ranges.items() if k != group_id}
        return replace(self, ranges=ranges)

    def toggle_tier(self, tier: str) -> "FilterRequest":
        tiers = self.tiers - {tier} if tier in self.tiers else self.tiers | {tier}
        return replace(self, tiers=tiers)

    def cleared(self) -> "FilterRequest":
        """Drop every filter but keep the sort."""
        return FilterRequest(
            tier_scheme=self.tier_scheme,
            sort_by=self.sort_by,
            descending=self.descending,
        )

    @property
    def active_filter_count(self) -> int:
        count = sum(len(options) for options in self.selections.values() if options)
        count += len(self.ranges)
        count += len(self.tiers)
        if self.filter_option != ALL_FILTER:
            count += 1
        if self.search.strip():
            count += 1
        return count

    @property
    def has_active_filters(self) -> bool:
        return self.active_filter_count > 0
