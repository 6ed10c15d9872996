"""
Tests for listing analysis.
"""

import logging

import pytest

from dealcalc.calculations.analysis import analyze_listing, analyze_listings
from dealcalc.calculations.defaults import EngineConfig, FinancingDefaults
from dealcalc.calculations.models import DealMetrics, ListingInput, PropertyType


class TestAnalyzeListing:
    """Test single-listing metrics."""

    def test_multifamily_listing(self):
        """Test metrics for a 12% cap multifamily listing."""
        metrics = analyze_listing(
            ListingInput(asking_price=500000, cap_rate=0.12, listing_id="mf-1")
        )
        assert isinstance(metrics, DealMetrics)
        assert metrics.listing_id == "mf-1"
        assert metrics.noi == pytest.approx(60000)
        assert metrics.cap_rate == pytest.approx(0.12)
        assert abs(metrics.cocr_percent - 20.4220) < 0.001
        assert abs(metrics.dscr_payment - 2447.25) < 0.01
        assert metrics.seller_fi_payment == 0.0
        assert abs(metrics.monthly_cash_flow - 2552.75) < 0.01
        assert abs(metrics.target_price - 579893.74) < 1.0
        assert metrics.target_price_converged
        assert abs(metrics.discount_to_target - (-0.159787)) < 1e-5
        assert metrics.assignment_fee == pytest.approx(25000)
        assert metrics.net_to_buyer == pytest.approx(26750)
        assert abs(metrics.cash_out_after_refi - 188904.05) < 0.01

    def test_known_noi_overrides_estimate(self):
        """Test a supplied NOI is used as-is."""
        metrics = analyze_listing(
            ListingInput(asking_price=500000, cap_rate=0.05, noi=60000)
        )
        assert metrics.noi == 60000
        assert abs(metrics.cocr_percent - 20.4220) < 0.001

    def test_seller_financed_listing(self):
        """Test seller carry shrinks the DSCR payment."""
        plain = analyze_listing(ListingInput(asking_price=500000, cap_rate=0.12))
        carried = analyze_listing(
            ListingInput(asking_price=500000, cap_rate=0.12, seller_fi_percent=0.20)
        )
        assert carried.dscr_payment < plain.dscr_payment
        assert carried.seller_fi_payment == pytest.approx(100000 / 360)
        assert carried.cocr_percent > plain.cocr_percent

    def test_assisted_living_listing(self):
        """Test assisted-living NOI comes from the bedroom count."""
        metrics = analyze_listing(
            ListingInput(
                asking_price=1500000,
                property_type=PropertyType.ASSISTED_LIVING,
                bedroom_count=8,
            )
        )
        assert metrics.noi == pytest.approx(144000)

    def test_custom_config(self):
        """Test financing assumptions come from the supplied config."""
        config = EngineConfig(financing=FinancingDefaults(dscr_rate=0.06))
        base = analyze_listing(ListingInput(asking_price=500000, cap_rate=0.12))
        cheaper = analyze_listing(
            ListingInput(asking_price=500000, cap_rate=0.12), config
        )
        assert cheaper.dscr_payment < base.dscr_payment
        assert cheaper.target_price > base.target_price

    def test_default_config_when_none(self):
        """Test None config uses the canonical defaults."""
        listing = ListingInput(asking_price=500000, cap_rate=0.12)
        assert analyze_listing(listing, None) == analyze_listing(listing)
        assert analyze_listings([listing], None) == [analyze_listing(listing)]

    def test_zero_noi_listing(self):
        """Test a listing with no income still produces metrics."""
        metrics = analyze_listing(ListingInput(asking_price=500000, cap_rate=0.0))
        assert metrics.noi == 0.0
        assert metrics.target_price == 0.0
        assert not metrics.target_price_converged


class TestAnalyzeListings:
    """Test batch analysis."""

    def test_batch_preserves_order(self):
        """Test one result per listing, in order."""
        listings = [
            ListingInput(asking_price=500000, cap_rate=0.12, listing_id="a"),
            ListingInput(asking_price=800000, cap_rate=0.08, listing_id="b"),
        ]
        results = analyze_listings(listings)
        assert [r.listing_id for r in results] == ["a", "b"]

    def test_bad_listing_is_isolated(self, caplog):
        """Test a malformed listing yields None without stopping the batch."""
        listings = [
            ListingInput(asking_price=500000, cap_rate=0.12, listing_id="a"),
            None,
            ListingInput(asking_price=800000, cap_rate=0.08, listing_id="c"),
        ]
        with caplog.at_level(logging.WARNING):
            results = analyze_listings(listings)
        assert results[0].listing_id == "a"
        assert results[1] is None
        assert results[2].listing_id == "c"
        assert "Skipping listing 1" in caplog.text

    def test_empty_batch(self):
        """Test an empty batch."""
        assert analyze_listings([]) == []
