import pytest

from cubecraft.models.failure import CubeValidationError
from cubecraft.services.tiers import UNSCORED, score_for_tier, tier_bands, tier_labels, tier_of


class TestTierOf:
    @pytest.mark.parametrize(
        ("score", "tier"),
        [(100, "S"), (90, "S"), (89, "A"), (80, "A"), (79, "B"), (70, "B"),
         (69, "C"), (60, "C"), (59, "D"), (50, "D"), (49, "F"), (0, "F")],
    )  # fmt: skip
    def test_standard_bands(self, score: int, tier: str) -> None:
        assert tier_of(score) == tier

    @pytest.mark.parametrize(
        ("score", "tier"),
        [(95, "S"), (94, "A"), (90, "A"), (89, "B"), (75, "B"), (74, "C"),
         (60, "C"), (45, "D"), (44, "E"), (30, "E"), (29, "F")],
    )  # fmt: skip
    def test_display_bands(self, score: int, tier: str) -> None:
        assert tier_of(score, "display") == tier

    def test_unscored(self) -> None:
        assert tier_of(None) == UNSCORED
        assert tier_of(None, "display") == UNSCORED

    def test_out_of_range_scores_land_in_end_bands(self) -> None:
        assert tier_of(150) == "S"
        assert tier_of(-5) == "F"

    def test_unknown_scheme(self) -> None:
        with pytest.raises(CubeValidationError, match="Unknown tier scheme"):
            tier_of(50, "letter-grades")


class TestScoreForTier:
    @pytest.mark.parametrize(
        ("tier", "score"),
        [("S", 95), ("A", 85), ("B", 75), ("C", 65), ("D", 55), ("F", 25)],
    )
    def test_standard_midpoints(self, tier: str, score: int) -> None:
        assert score_for_tier(tier) == score

    def test_midpoint_maps_back_to_tier(self) -> None:
        for scheme in ("standard", "display"):
            for label in tier_labels(scheme):
                assert tier_of(score_for_tier(label, scheme), scheme) == label

    def test_unknown_tier(self) -> None:
        with pytest.raises(CubeValidationError, match="Unknown tier"):
            score_for_tier("Z")


class TestTierBands:
    def test_labels_best_first(self) -> None:
        assert tier_labels() == ["S", "A", "B", "C", "D", "F"]
        assert tier_labels("display") == ["S", "A", "B", "C", "D", "E", "F"]

    def test_bands_cover_zero_to_hundred(self) -> None:
        for scheme in ("standard", "display"):
            bands = tier_bands(scheme)
            assert bands[0].upper == 100
            assert bands[-1].lower == 0
            for higher, lower in zip(bands, bands[1:], strict=False):
                assert lower.upper == higher.lower - 1
