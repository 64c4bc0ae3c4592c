from cubecraft.models.filter_request import ALL_FILTER, FilterRequest


class TestFilterRequest:
    def test_default_has_no_filters(self) -> None:
        request = FilterRequest()
        assert request.filter_option == ALL_FILTER
        assert request.active_filter_count == 0
        assert request.has_active_filters is False

    def test_toggle_option_adds_and_removes(self) -> None:
        request = FilterRequest().toggle_option("attribute", "DARK")
        assert request.selections == {"attribute": frozenset({"DARK"})}

        request = request.toggle_option("attribute", "DARK")
        assert "attribute" not in request.selections

    def test_toggle_does_not_modify_original(self) -> None:
        original = FilterRequest()
        original.toggle_option("attribute", "DARK")
        assert original.selections == {}

    def test_set_range_normalizes_bounds(self) -> None:
        request = FilterRequest().set_range("level", 8, 4)
        assert request.ranges["level"] == (4, 8)

    def test_clear_range_and_group(self) -> None:
        request = (
            FilterRequest()
            .set_range("level", 1, 4)
            .toggle_option("race", "dragon")
            .clear_range("level")
            .clear_group("race")
        )
        assert request.ranges == {}
        assert request.selections == {}

    def test_toggle_tier(self) -> None:
        request = FilterRequest().toggle_tier("S").toggle_tier("A").toggle_tier("S")
        assert request.tiers == frozenset({"A"})

    def test_active_filter_count(self) -> None:
        request = FilterRequest(search="dragon", filter_option="monsters")
        request = request.toggle_option("attribute", "DARK").toggle_option("attribute", "LIGHT")
        request = request.set_range("level", 1, 4).toggle_tier("S")
        assert request.active_filter_count == 6
        assert request.has_active_filters is True

    def test_blank_search_is_not_a_filter(self) -> None:
        assert FilterRequest(search="   ").active_filter_count == 0

    def test_cleared_keeps_sort(self) -> None:
        request = FilterRequest(search="x", sort_by="atk", descending=True).toggle_tier("S")
        cleared = request.cleared()
        assert cleared.has_active_filters is False
        assert cleared.sort_by == "atk"
        assert cleared.descending is True
