"""
Unit tests for the Eco Calculator estimation resolver.
Uses an in-memory provider (no network).
"""
import unittest

from app.projects.eco_calculator.core.constants import Mode, TransportType
from app.projects.eco_calculator.core.providers import EmissionsProvider
from app.projects.eco_calculator.core.resolver import (
    CalculationRequest,
    EstimationResolver,
    parse_amount,
)
from app.projects.eco_calculator.core.results import CalculationResult, ErrorKind


class FakeProvider(EmissionsProvider):
    """Returns a canned outcome and records every query."""

    NAME = "fake"
    API_KEY_SETTING = "FAKE_API_KEY"

    def __init__(self, outcome=None, configured=True):
        self.api_key = "test-key" if configured else None
        self.outcome = outcome or CalculationResult.failure(
            ErrorKind.REMOTE_FAILURE, "down", provider=self.NAME
        )
        self.queries = []

    def estimate(self, query):
        self.queries.append(query)
        return self.outcome


def travel(distance, transport=TransportType.CAR):
    return CalculationRequest(mode=Mode.TRAVEL, raw_input=distance, transport=transport)


def energy(kwh):
    return CalculationRequest(mode=Mode.ENERGY, raw_input=kwh)


class TestParseAmount(unittest.TestCase):

    def test_positive_numbers(self):
        self.assertEqual(parse_amount("12.5"), 12.5)
        self.assertEqual(parse_amount(" 40 "), 40.0)
        self.assertEqual(parse_amount(3), 3.0)

    def test_rejects_invalid(self):
        for raw in (None, "", "abc", "12abc", "0", "-5", "nan", "inf"):
            self.assertIsNone(parse_amount(raw), raw)


class TestLocalFallback(unittest.TestCase):
    """Remote failures fall back to the fixed per-unit factors."""

    def setUp(self):
        self.provider = FakeProvider()
        self.resolver = EstimationResolver(self.provider)

    def test_travel_factors(self):
        expected = {
            TransportType.CAR: 18.0,
            TransportType.BUS: 8.0,
            TransportType.TRAIN: 4.0,
        }
        for transport, value in expected.items():
            result = self.resolver.resolve(travel("100", transport))
            self.assertTrue(result.success)
            self.assertAlmostEqual(result.value, value)
            self.assertEqual(result.source, "fallback")

    def test_energy_factor(self):
        result = self.resolver.resolve(energy("100"))
        self.assertTrue(result.success)
        self.assertAlmostEqual(result.value, 70.9)
        self.assertEqual(result.source, "fallback")

    def test_provider_called_once_per_submission(self):
        self.resolver.resolve(travel("42"))
        self.assertEqual(len(self.provider.queries), 1)
        query = self.provider.queries[0]
        self.assertEqual(query.amount, 42.0)
        self.assertIs(query.transport, TransportType.CAR)

    def test_fallback_revalidates_input(self):
        result = self.resolver.local_fallback(energy("-1"))
        self.assertFalse(result.success)
        self.assertIs(result.error_kind, ErrorKind.VALIDATION)

    def test_same_request_twice_gives_same_result(self):
        first = self.resolver.resolve(travel("73.4", TransportType.BUS))
        second = self.resolver.resolve(travel("73.4", TransportType.BUS))
        self.assertEqual(first, second)

    def test_missing_transport_defaults_to_car(self):
        result = self.resolver.resolve(travel("10", None))
        self.assertAlmostEqual(result.value, 1.8)


class TestRemoteSuccess(unittest.TestCase):

    def test_remote_value_returned(self):
        provider = FakeProvider(CalculationResult.ok(21.5, source="remote", provider="fake"))
        result = EstimationResolver(provider).resolve(travel("100"))
        self.assertTrue(result.success)
        self.assertEqual(result.value, 21.5)
        self.assertEqual(result.source, "remote")
        self.assertEqual(result.provider, "fake")


class TestBike(unittest.TestCase):

    def test_bike_is_zero_without_provider_call(self):
        provider = FakeProvider()
        for distance in ("1", "250.5", "10000"):
            result = EstimationResolver(provider).resolve(travel(distance, TransportType.BIKE))
            self.assertTrue(result.success)
            self.assertEqual(result.value, 0.0)
        self.assertEqual(provider.queries, [])

    def test_bike_needs_no_api_key(self):
        result = EstimationResolver(FakeProvider(configured=False)).resolve(
            travel("5", TransportType.BIKE)
        )
        self.assertTrue(result.success)
        self.assertEqual(result.value, 0.0)


class TestValidation(unittest.TestCase):

    def test_invalid_distance(self):
        provider = FakeProvider()
        for raw in ("", "abc", "0", "-3"):
            result = EstimationResolver(provider).resolve(travel(raw))
            self.assertFalse(result.success)
            self.assertIs(result.error_kind, ErrorKind.VALIDATION)
            self.assertEqual(result.error, "Please enter a valid distance.")
        self.assertEqual(provider.queries, [])

    def test_invalid_energy(self):
        provider = FakeProvider()
        result = EstimationResolver(provider).resolve(energy("lots"))
        self.assertIs(result.error_kind, ErrorKind.VALIDATION)
        self.assertEqual(result.error, "Please enter a valid energy amount.")
        self.assertEqual(provider.queries, [])


class TestConfiguration(unittest.TestCase):
    """Missing credentials stop the calculation; no fallback."""

    def test_unconfigured_provider(self):
        provider = FakeProvider(configured=False)
        result = EstimationResolver(provider).resolve(travel("100"))
        self.assertFalse(result.success)
        self.assertIs(result.error_kind, ErrorKind.CONFIGURATION)
        self.assertEqual(result.error, "API key is not configured.")
        self.assertEqual(provider.queries, [])

    def test_no_provider(self):
        result = EstimationResolver().resolve(energy("10"))
        self.assertIs(result.error_kind, ErrorKind.CONFIGURATION)

    def test_missing_key_logged_with_setting_name(self):
        with self.assertLogs("app.projects.eco_calculator.core.resolver", level="ERROR") as logs:
            EstimationResolver(FakeProvider(configured=False)).resolve(travel("100"))
        self.assertEqual(len(logs.output), 1)
        self.assertIn("FAKE_API_KEY is not configured", logs.output[0])

    def test_requests_without_remote_call_log_no_error(self):
        resolver = EstimationResolver(FakeProvider(configured=False))
        with self.assertNoLogs("app.projects.eco_calculator.core.resolver", level="ERROR"):
            resolver.resolve(travel("5", TransportType.BIKE))
            resolver.resolve(CalculationRequest(mode=Mode.ARITHMETIC, raw_input="1+1"))

    def test_validation_checked_before_configuration(self):
        result = EstimationResolver().resolve(energy("abc"))
        self.assertIs(result.error_kind, ErrorKind.VALIDATION)


class TestArithmetic(unittest.TestCase):

    def setUp(self):
        self.provider = FakeProvider()
        self.resolver = EstimationResolver(self.provider)

    def test_evaluates_locally(self):
        result = self.resolver.resolve(CalculationRequest(mode=Mode.ARITHMETIC, raw_input="2+2"))
        self.assertTrue(result.success)
        self.assertEqual(result.value, 4)
        self.assertEqual(result.source, "local")
        self.assertEqual(self.provider.queries, [])

    def test_malformed_expression(self):
        result = self.resolver.resolve(CalculationRequest(mode=Mode.ARITHMETIC, raw_input="2+"))
        self.assertFalse(result.success)
        self.assertIs(result.error_kind, ErrorKind.EVALUATION)
        self.assertEqual(result.error, "Invalid calculation")

    def test_division_by_zero_is_an_evaluation_error(self):
        result = self.resolver.evaluate("5/0")
        self.assertIs(result.error_kind, ErrorKind.EVALUATION)


if __name__ == "__main__":
    unittest.main()
