"""
Fee Normalizer Tests.
"""

from datetime import datetime, timezone

import pytest

from fee_adapters import (
    BitcoinRecommendedFees,
    EvmGasPrice,
    NormalizationError,
    NormalizedReading,
    SolanaPrioritizationFees,
    normalize,
)


OBSERVED_AT = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestEvmNormalization:
    """Wei -> gwei with a fixed +/-20% spread."""

    def test_one_gwei(self):
        reading = normalize(EvmGasPrice(price_wei=int("0x3b9aca00", 16)), 1, OBSERVED_AT)

        assert reading.fee_slow == pytest.approx(0.8)
        assert reading.fee_average == pytest.approx(1.0)
        assert reading.fee_fast == pytest.approx(1.2)

    def test_identity_fields(self):
        reading = normalize(EvmGasPrice(price_wei=25_000_000_000), 137, OBSERVED_AT)

        assert reading.chain_id == 137
        assert reading.observed_at == OBSERVED_AT
        assert reading.fee_average == pytest.approx(25.0)
        assert reading.is_ordered

    def test_zero_price(self):
        reading = normalize(EvmGasPrice(price_wei=0), 1, OBSERVED_AT)

        assert (reading.fee_slow, reading.fee_average, reading.fee_fast) == (0.0, 0.0, 0.0)


class TestSolanaNormalization:
    """Mean sample / 1000 with the same spread."""

    def test_mean_of_samples(self):
        reading = normalize(SolanaPrioritizationFees(samples=(1000, 2000, 3000)), 101, OBSERVED_AT)

        assert reading.fee_slow == pytest.approx(1.6)
        assert reading.fee_average == pytest.approx(2.0)
        assert reading.fee_fast == pytest.approx(2.4)

    def test_empty_samples_are_zero(self):
        reading = normalize(SolanaPrioritizationFees(samples=()), 101, OBSERVED_AT)

        assert reading.fee_slow == 0.0
        assert reading.fee_average == 0.0
        assert reading.fee_fast == 0.0


class TestBitcoinNormalization:
    """Each level scaled independently by 0.1."""

    def test_recommended_levels(self):
        raw = BitcoinRecommendedFees(fastest_fee=20, half_hour_fee=15, hour_fee=10)

        reading = normalize(raw, 0, OBSERVED_AT)

        assert reading.fee_slow == pytest.approx(1.0)
        assert reading.fee_average == pytest.approx(1.5)
        assert reading.fee_fast == pytest.approx(2.0)

    def test_out_of_order_levels_pass_through(self):
        """Upstream ordering is not corrected, only reported."""
        raw = BitcoinRecommendedFees(fastest_fee=5, half_hour_fee=15, hour_fee=10)

        reading = normalize(raw, 0, OBSERVED_AT)

        assert reading.fee_fast == pytest.approx(0.5)
        assert not reading.is_ordered


class TestNormalizeDispatch:

    def test_unknown_observation_type(self):
        with pytest.raises(NormalizationError, match="Unsupported raw observation type"):
            normalize({"price": 1}, 1, OBSERVED_AT)

    def test_reading_to_dict(self):
        reading = NormalizedReading(1, OBSERVED_AT, 0.8, 1.0, 1.2)

        assert reading.to_dict() == {
            "chain_id": 1,
            "observed_at": "2025-01-01T12:00:00+00:00",
            "fee_slow": 0.8,
            "fee_average": 1.0,
            "fee_fast": 1.2,
        }
