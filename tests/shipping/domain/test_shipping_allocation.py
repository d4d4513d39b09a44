"""Tests for shipping region matching and allocation."""

from shipping.allocation import UNRESOLVED_REGION_LABEL, allocate_shipping, match_rate
from shipping.rate.rate import ShippingRate

SENTINELS = ["default", "all", "nationwide"]


def _rate(region_name, amount, seller_id="s1", rate_id=None, min_days=2, max_days=5):
    return ShippingRate(
        id=rate_id or f"{seller_id}-{region_name}",
        seller_id=seller_id,
        region_name=region_name,
        amount=amount,
        delivery_time_min=min_days,
        delivery_time_max=max_days,
    )


class TestMatchRate:
    def test_exact_region_match_is_case_insensitive_and_trimmed(self):
        rates = [_rate("Alexandria", 40), _rate("Cairo", 30)]
        assert match_rate("  cAIRO ", rates, SENTINELS).amount == 30

    def test_exact_match_beats_sentinel(self):
        rates = [_rate("nationwide", 60), _rate("Giza", 25)]
        assert match_rate("giza", rates, SENTINELS).amount == 25

    def test_falls_back_to_sentinel(self):
        rates = [_rate("Alexandria", 40), _rate("All", 55)]
        assert match_rate("Aswan", rates, SENTINELS).amount == 55

    def test_no_match_without_sentinel(self):
        assert match_rate("Aswan", [_rate("Alexandria", 40)], SENTINELS) is None

    def test_blank_region_only_matches_sentinel(self):
        assert match_rate("", [_rate("Cairo", 30)], SENTINELS) is None
        assert match_rate("  ", [_rate("default", 35)], SENTINELS).amount == 35


class TestAllocateShipping:
    def test_one_allocation_per_seller(self):
        rates = {
            "s1": [_rate("Cairo", 30, "s1")],
            "s2": [_rate("default", 50, "s2")],
        }
        quote = allocate_shipping("Cairo", {"s1": 2, "s2": 1}, rates, SENTINELS)

        assert quote.total == 80
        assert quote.allocations["s1"].region_label == "Cairo"
        assert quote.allocations["s1"].item_count == 2
        assert quote.allocations["s2"].region_label == "default"
        assert quote.unresolved_sellers == []

    def test_unresolved_region_yields_zero_and_flag(self):
        quote = allocate_shipping("Luxor", {"s1": 1}, {"s1": [_rate("Cairo", 30)]}, SENTINELS)

        allocation = quote.allocations["s1"]
        assert allocation.amount == 0
        assert allocation.unresolved is True
        assert allocation.region_label == UNRESOLVED_REGION_LABEL
        assert allocation.delivery_min_days is None
        assert quote.unresolved_sellers == ["s1"]

    def test_seller_without_any_rates_is_unresolved(self):
        quote = allocate_shipping("Cairo", {"s9": 1}, {}, SENTINELS)
        assert quote.allocations["s9"].unresolved is True
        assert quote.total == 0

    def test_same_inputs_give_same_quote(self):
        rates = {"s1": [_rate("Cairo", 30, "s1"), _rate("all", 45, "s1")], "s2": [_rate("ALL", 20, "s2")]}
        first = allocate_shipping("cairo", {"s2": 1, "s1": 1}, rates, SENTINELS)
        second = allocate_shipping("cairo", {"s1": 1, "s2": 1}, rates, SENTINELS)
        assert first == second
        assert list(first.allocations) == ["s1", "s2"]

    def test_delivery_estimate_comes_from_matched_rate(self):
        quote = allocate_shipping("Cairo", {"s1": 1}, {"s1": [_rate("Cairo", 30, min_days=1, max_days=3)]}, SENTINELS)
        assert quote.allocations["s1"].delivery_min_days == 1
        assert quote.allocations["s1"].delivery_max_days == 3
