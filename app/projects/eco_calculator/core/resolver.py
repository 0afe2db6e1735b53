"""
Estimation resolver.

Pure Python, no Flask imports. Turns a CalculationRequest into a
CalculationResult:

- arithmetic requests are evaluated locally,
- travel/energy requests are validated, sent to the emissions provider,
  and on a remote failure recomputed with local emission factors.
"""
import logging
import math
from dataclasses import dataclass, replace
from typing import Optional

from app.projects.eco_calculator.core.constants import (
    ENERGY_EMISSION_FACTOR,
    INVALID_CALCULATION_MESSAGE,
    INVALID_DISTANCE_MESSAGE,
    INVALID_ENERGY_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    TRAVEL_EMISSION_FACTORS,
    Mode,
    TransportType,
)
from app.projects.eco_calculator.core.expression import ExpressionError, evaluate_expression
from app.projects.eco_calculator.core.providers import EmissionsProvider, EstimateQuery
from app.projects.eco_calculator.core.results import CalculationResult, ErrorKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationRequest:
    mode: Mode
    raw_input: str
    transport: Optional[TransportType] = None


def parse_amount(raw_input) -> Optional[float]:
    """Positive finite number from user input, or None."""
    if raw_input is None:
        return None
    try:
        amount = float(str(raw_input).strip())
    except ValueError:
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def _invalid_amount(mode: Mode) -> CalculationResult:
    message = INVALID_DISTANCE_MESSAGE if mode is Mode.TRAVEL else INVALID_ENERGY_MESSAGE
    return CalculationResult.failure(ErrorKind.VALIDATION, message)


class EstimationResolver:
    """
    Resolves calculator requests against an emissions provider.

    A missing or unconfigured provider is a CONFIGURATION error; no local
    fallback is attempted in that case. Only REMOTE_FAILURE results fall
    back to local factors.
    """

    def __init__(self, provider: Optional[EmissionsProvider] = None):
        self.provider = provider

    def resolve(self, request: CalculationRequest) -> CalculationResult:
        if request.mode is Mode.ARITHMETIC:
            return self.evaluate(request.raw_input)

        if request.mode is Mode.TRAVEL and request.transport is None:
            request = replace(request, transport=TransportType.CAR)

        amount = parse_amount(request.raw_input)
        if amount is None:
            return _invalid_amount(request.mode)

        if request.mode is Mode.TRAVEL and request.transport is TransportType.BIKE:
            return CalculationResult.ok(0.0, source="local")

        if self.provider is None or not self.provider.is_configured:
            setting = self.provider.API_KEY_SETTING if self.provider else "emissions provider"
            logger.error(f"{setting} is not configured")
            return CalculationResult.failure(ErrorKind.CONFIGURATION, MISSING_API_KEY_MESSAGE)

        remote = self.try_remote(request, amount)
        if not remote.is_remote_failure:
            return remote

        logger.warning(
            f"Remote estimate failed for {request.mode.value} via "
            f"{remote.provider}; using local factors"
        )
        return self.local_fallback(request)

    def evaluate(self, expression) -> CalculationResult:
        """Evaluate an arithmetic expression; never touches the network."""
        try:
            value = evaluate_expression(expression)
        except ExpressionError as e:
            logger.info(f"Invalid calculation {expression!r}: {e}")
            return CalculationResult.failure(ErrorKind.EVALUATION, INVALID_CALCULATION_MESSAGE)
        return CalculationResult.ok(value, source="local")

    def try_remote(self, request: CalculationRequest, amount: float) -> CalculationResult:
        query = EstimateQuery(mode=request.mode, amount=amount, transport=request.transport)
        return self.provider.estimate(query)

    def local_fallback(self, request: CalculationRequest) -> CalculationResult:
        """Deterministic estimate from the fixed per-unit factors."""
        amount = parse_amount(request.raw_input)
        if amount is None:
            return _invalid_amount(request.mode)

        if request.mode is Mode.TRAVEL:
            factor = TRAVEL_EMISSION_FACTORS[request.transport or TransportType.CAR]
        elif request.mode is Mode.ENERGY:
            factor = ENERGY_EMISSION_FACTOR
        else:
            raise ValueError(f"No local emission factor for {request.mode.value}")

        return CalculationResult.ok(amount * factor, source="fallback")
