"""Tests for vectorised Black-Scholes pricing."""

import numpy as np
import pytest
from optyield.core import ContractTerms, CALL, PUT
from optyield.black_scholes import price as bs_scalar, calculate_all
from optyield.black_scholes_vec import bs_price_vec, bs_greeks_vec
from optyield.errors import InvalidInputError


# ---------------------------------------------------------------------------
# bs_price_vec matches scalar price
# ---------------------------------------------------------------------------
class TestBSPriceVec:
    def test_single_call_matches_scalar(self):
        expected = bs_scalar(ContractTerms(S=100, K=100, T=1.0, r=0.05, sigma=0.2, kind=CALL))
        got = bs_price_vec(100, 100, 1.0, 0.05, 0.0, 0.2, CALL)
        assert abs(float(got) - expected) < 1e-10

    def test_single_put_matches_scalar(self):
        expected = bs_scalar(ContractTerms(S=100, K=100, T=1.0, r=0.05, sigma=0.2, kind=PUT))
        got = bs_price_vec(100, 100, 1.0, 0.05, 0.0, 0.2, "put")
        assert abs(float(got) - expected) < 1e-10

    def test_array_of_spots(self):
        spots = np.array([90.0, 100.0, 110.0])
        prices = bs_price_vec(spots, 100, 1.0, 0.05, 0.0, 0.2, CALL)
        assert prices.shape == (3,)
        for i, S in enumerate(spots):
            terms = ContractTerms(S=S, K=100, T=1.0, r=0.05, sigma=0.2)
            assert abs(prices[i] - bs_scalar(terms)) < 1e-10

    def test_array_of_strikes(self):
        strikes = np.linspace(80, 120, 50)
        prices = bs_price_vec(100, strikes, 1.0, 0.05, 0.0, 0.2, CALL)
        assert prices.shape == (50,)
        # Prices should be monotonically decreasing for calls
        assert np.all(np.diff(prices) < 0)

    def test_with_dividend(self):
        expected = bs_scalar(ContractTerms(S=100, K=110, T=0.5, r=0.03, sigma=0.25, q=0.02))
        got = bs_price_vec(100, 110, 0.5, 0.03, 0.02, 0.25, CALL)
        assert abs(float(got) - expected) < 1e-10

    def test_expired_entries_are_intrinsic(self):
        spots = np.array([90.0, 100.0, 110.0])
        np.testing.assert_allclose(
            bs_price_vec(spots, 100, 0.0, 0.05, 0.0, 0.2, CALL), [0.0, 0.0, 10.0]
        )
        np.testing.assert_allclose(
            bs_price_vec(spots, 100, 0.0, 0.05, 0.0, 0.2, PUT), [10.0, 0.0, 0.0]
        )

    def test_mixed_expiry(self):
        T = np.array([0.0, 0.5])
        got = bs_price_vec(110, 100, T, 0.05, 0.0, 0.2, CALL)
        assert got[0] == 10.0
        assert abs(got[1] - bs_scalar(ContractTerms(110, 100, 0.5, 0.05, 0.2))) < 1e-10


# ---------------------------------------------------------------------------
# bs_greeks_vec matches scalar calculate_all
# ---------------------------------------------------------------------------
class TestBSGreeksVec:
    @pytest.mark.parametrize("kind", [CALL, PUT])
    def test_scalar_greeks_match(self, kind):
        expected = calculate_all(ContractTerms(100, 95, 0.75, 0.04, 0.3, 0.01, kind)).as_dict()
        got = bs_greeks_vec(100, 95, 0.75, 0.04, 0.01, 0.3, kind)
        for key in ("price", "delta", "gamma", "vega", "theta", "rho"):
            assert abs(float(got[key]) - expected[key]) < 1e-10, f"{key} mismatch"

    def test_vectorized_greeks(self):
        spots = np.array([90.0, 100.0, 110.0])
        got = bs_greeks_vec(spots, 100, 1.0, 0.05, 0.0, 0.2, CALL)
        assert got["delta"].shape == (3,)
        # Call delta should increase with spot
        assert np.all(np.diff(got["delta"]) > 0)

    @pytest.mark.parametrize("kind", [CALL, PUT])
    def test_expired_greeks_match_scalar(self, kind):
        for S in (90.0, 110.0):
            expected = calculate_all(ContractTerms(S, 100, 0.0, 0.05, 0.2, kind=kind)).as_dict()
            got = bs_greeks_vec(S, 100, 0.0, 0.05, 0.0, 0.2, kind)
            for key, value in expected.items():
                assert float(got[key]) == value, f"{key} mismatch at S={S}"


# ---------------------------------------------------------------------------
# Input validation matches the scalar engine
# ---------------------------------------------------------------------------
class TestVecValidation:
    @pytest.mark.parametrize("S,K,T,sigma,field", [
        (110, 100, -0.5, 0.2, "T"),
        (110, 100, 0.5, 0.0, "sigma"),
        (110, 100, 0.5, -0.2, "sigma"),
        (-1, 100, 0.5, 0.2, "S"),
        (100, 0, 0.5, 0.2, "K"),
        (100, 100, float("nan"), 0.2, "T"),
    ])
    @pytest.mark.parametrize("fn", [bs_price_vec, bs_greeks_vec])
    def test_rejects_invalid(self, fn, S, K, T, sigma, field):
        with pytest.raises(InvalidInputError) as exc:
            fn(S, K, T, 0.05, 0.0, sigma, CALL)
        assert exc.value.field == field

    def test_one_bad_entry_rejects_the_array(self):
        spots = np.array([90.0, 100.0, 0.0])
        with pytest.raises(InvalidInputError):
            bs_price_vec(spots, 100, 0.5, 0.05, 0.0, 0.2, PUT)

    def test_zero_vol_allowed_at_expiry(self):
        T = np.array([0.0, 0.5])
        sigma = np.array([0.0, 0.2])
        got = bs_price_vec(110, 100, T, 0.05, 0.0, sigma, CALL)
        assert got[0] == 10.0
        assert abs(got[1] - bs_scalar(ContractTerms(110, 100, 0.5, 0.05, 0.2))) < 1e-10
