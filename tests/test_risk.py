"""Tests for the Monte Carlo risk engine."""

import logging
import math

import numpy as np
import pytest
from scipy.stats import norm

from optrisk import Portfolio, RiskConfig, european_call, european_put, american_put
from optrisk.exceptions import (
    DegenerateSimulationError, InvalidParameterError, NumericalDomainError,
)
from optrisk.rng import NormalSource, reset_default_source
from optrisk.risk import (
    simulate_scenario_spots, revalue_scenarios, tail_size,
    value_at_risk, expected_shortfall, risk_report,
)

SPOT, SIGMA, R = 100.0, 0.25, 0.05


@pytest.fixture
def book():
    p = Portfolio(depth=40)
    p.add_position(10, european_call(100, SIGMA, 1.0, R))
    p.add_position(10, european_put(100, SIGMA, 1.0, R))
    p.add_position(10, american_put(100, SIGMA, 1.0, R))
    return p


class _ZeroSource:
    """Stream of exact zeros: every scenario is the drift-only move."""

    def draw(self, n):
        return np.zeros(n)


class TestScenarios:
    def test_drift_only_with_zero_draws(self):
        spots = simulate_scenario_spots(SPOT, SIGMA, R, 5, source=_ZeroSource())
        dt = 1.0 / 252.0
        vol = SIGMA * math.sqrt(dt)
        expected = SPOT * math.exp(dt * (R - 0.5 * vol * vol))
        np.testing.assert_allclose(spots, expected, rtol=1e-15)

    def test_log_return_moments(self):
        spots = simulate_scenario_spots(SPOT, SIGMA, R, 100_000, source=NormalSource(1))
        lr = np.log(spots / SPOT)
        assert abs(lr.std() - SIGMA * math.sqrt(1 / 252)) < 1e-3

    def test_chunked_revaluation_matches_single_batch(self, book):
        spots = simulate_scenario_spots(SPOT, SIGMA, R, 50, source=NormalSource(2))
        np.testing.assert_allclose(
            revalue_scenarios(book, spots, chunk_size=7),
            book.values(spots), rtol=0, atol=1e-12,
        )

    def test_bad_inputs(self):
        with pytest.raises(NumericalDomainError):
            simulate_scenario_spots(0.0, SIGMA, R, 10)
        with pytest.raises(InvalidParameterError):
            simulate_scenario_spots(SPOT, 0.0, R, 10)
        with pytest.raises(InvalidParameterError):
            simulate_scenario_spots(SPOT, SIGMA, R, 0)


class TestTailSize:
    def test_five_percent(self):
        assert tail_size(20) == 1
        assert tail_size(100) == 5
        assert tail_size(20_000) == 1000
        assert tail_size(39) == 1

    def test_custom_confidence(self):
        assert tail_size(1000, RiskConfig(confidence=0.99).tail_fraction) == 10

    def test_too_few_scenarios(self):
        with pytest.raises(DegenerateSimulationError):
            tail_size(19)
        with pytest.raises(InvalidParameterError):
            tail_size(0)


class TestRiskMeasures:
    def test_es_geq_var_single_run(self, book):
        rep = risk_report(book, SPOT, SIGMA, R, 2000, source=NormalSource(3))
        assert rep.es >= rep.var
        assert rep.tail_size == 100
        assert np.all(np.diff(rep.scenario_values) >= 0)

    def test_es_geq_var_separate_calls_same_stream(self, book):
        var = value_at_risk(book, SPOT, SIGMA, R, 2000, source=NormalSource(4))
        es = expected_shortfall(book, SPOT, SIGMA, R, 2000, source=NormalSource(4))
        assert es >= var

    def test_report_matches_single_measures(self, book):
        rep = risk_report(book, SPOT, SIGMA, R, 500, source=NormalSource(9))
        assert rep.var == value_at_risk(book, SPOT, SIGMA, R, 500, source=NormalSource(9))
        assert rep.es == expected_shortfall(book, SPOT, SIGMA, R, 500, source=NormalSource(9))

    def test_definitions(self, book):
        rep = risk_report(book, SPOT, SIGMA, R, 400, source=NormalSource(5))
        vals = np.sort(book.values(rep.scenario_spots))
        base = book.value(SPOT)
        assert rep.base_value == base
        assert abs(rep.var - (base - vals[19])) < 1e-10
        assert abs(rep.es - (base - vals[:20].mean())) < 1e-10

    def test_reproducible(self, book):
        a = book.value_at_risk(SPOT, SIGMA, R, 1000, source=NormalSource(123))
        b = book.value_at_risk(SPOT, SIGMA, R, 1000, source=NormalSource(123))
        assert a == b
        c = book.expected_shortfall(SPOT, SIGMA, R, 1000, source=NormalSource(123))
        d = book.expected_shortfall(SPOT, SIGMA, R, 1000, source=NormalSource(123))
        assert c == d

    def test_default_source_is_shared_state(self, book):
        reset_default_source()
        first = book.value_at_risk(SPOT, SIGMA, R, 200)
        second = book.value_at_risk(SPOT, SIGMA, R, 200)
        assert first != second
        reset_default_source()
        assert book.value_at_risk(SPOT, SIGMA, R, 200) == first

    def test_minimum_scenarios(self, book):
        rep = risk_report(book, SPOT, SIGMA, R, 20, source=NormalSource(6))
        assert rep.var == rep.es
        with pytest.raises(InvalidParameterError):
            book.value_at_risk(SPOT, SIGMA, R, 19)
        with pytest.raises(DegenerateSimulationError):
            book.expected_shortfall(SPOT, SIGMA, R, 10)

    def test_empty_portfolio(self):
        assert Portfolio().value_at_risk(SPOT, SIGMA, R, 100, source=NormalSource(1)) == 0.0

    def test_long_short_nets_to_zero(self):
        inst = european_call(100, SIGMA, 1.0, R)
        p = Portfolio()
        p.add_position(1, inst)
        p.add_position(-1, inst)
        assert abs(p.expected_shortfall(SPOT, SIGMA, R, 200, source=NormalSource(1))) < 1e-12

    def test_linear_position_matches_normal_quantile(self):
        # strike far below spot and tiny vol: value ~ S - K exp(-rT), linear in S
        p = Portfolio()
        p.add_position(1, european_call(1.0, 0.01, 1.0, R))
        var = p.value_at_risk(SPOT, SIGMA, R, 20_000, source=NormalSource(7))
        dt = 1.0 / 252.0
        vol = SIGMA * math.sqrt(dt)
        drift = dt * (R - 0.5 * vol * vol)
        expected = SPOT * (1.0 - math.exp(drift + vol * norm.ppf(0.05)))
        assert abs(var - expected) / expected < 0.05

    def test_logs_run(self, book, caplog):
        with caplog.at_level(logging.INFO, logger="optrisk.risk"):
            risk_report(book, SPOT, SIGMA, R, 100, source=NormalSource(8))
        assert "risk run complete" in caplog.text


class TestConfiguredSeed:
    def test_different_seeds_give_different_var(self, book):
        reset_default_source()
        a = value_at_risk(book, SPOT, SIGMA, R, 200, config=RiskConfig(seed=1))
        b = value_at_risk(book, SPOT, SIGMA, R, 200, config=RiskConfig(seed=999))
        assert a != b

    def test_configured_seed_matches_explicit_source(self, book):
        a = value_at_risk(book, SPOT, SIGMA, R, 200, config=RiskConfig(seed=31))
        b = value_at_risk(book, SPOT, SIGMA, R, 200, source=NormalSource(31))
        assert a == b

    def test_explicit_source_wins_over_seed(self, book):
        a = value_at_risk(book, SPOT, SIGMA, R, 200, source=NormalSource(4),
                          config=RiskConfig(seed=31))
        b = value_at_risk(book, SPOT, SIGMA, R, 200, source=NormalSource(4))
        assert a == b
