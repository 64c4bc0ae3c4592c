from cubecraft.filtering.engine import (
    BUILTIN_SORTS,
    PICK_SORT,
    FilterMetrics,
    apply_filters,
    apply_filters_indexed,
    available_sorts,
)

__all__ = [
    "BUILTIN_SORTS",
    "FilterMetrics",
    "PICK_SORT",
    "apply_filters",
    "apply_filters_indexed",
    "available_sorts",
]
