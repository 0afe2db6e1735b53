"""
Emissions estimation providers.

Each provider turns an EstimateQuery into one HTTPS POST against a
third-party API and returns a CalculationResult. Transport errors, non-2xx
responses and unreadable bodies all come back as REMOTE_FAILURE results so
the resolver can fall back to local factors.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from app.projects.eco_calculator.core.constants import (
    NOTIONAL_SHIPMENT_WEIGHT_KG,
    REMOTE_FAILURE_MESSAGE,
    Mode,
    TransportType,
)
from app.projects.eco_calculator.core.results import CalculationResult, ErrorKind

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class EstimateQuery:
    """A validated travel or energy amount to estimate."""

    mode: Mode
    amount: float
    transport: Optional[TransportType] = None


class EmissionsProvider:
    """
    Base class for emissions APIs.

    Subclasses set NAME, BASE_URL, ENDPOINT and API_KEY_SETTING and implement
    build_payload() and extract_co2e().
    """

    NAME = "base"
    BASE_URL = ""
    ENDPOINT = ""
    API_KEY_SETTING = ""

    def __init__(self, api_key=None, timeout=None, session=None, country="us"):
        self.api_key = api_key
        self.timeout = timeout or DEFAULT_TIMEOUT
        self.session = session or requests.Session()
        self.country = country

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def url(self) -> str:
        return f"{self.BASE_URL}/{self.ENDPOINT}"

    def build_payload(self, query: EstimateQuery) -> dict:
        raise NotImplementedError

    def extract_co2e(self, data) -> float:
        raise NotImplementedError

    def estimate(self, query: EstimateQuery) -> CalculationResult:
        """POST the query and read the kg CO2e value from the response."""
        if not self.is_configured:
            return CalculationResult.failure(
                ErrorKind.REMOTE_FAILURE, REMOTE_FAILURE_MESSAGE, provider=self.NAME
            )

        payload = self.build_payload(query)
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            co2e = float(self.extract_co2e(response.json()))
        except requests.RequestException as e:
            logger.error(f"{self.NAME} API error: {e}")
            if getattr(e, "response", None) is not None:
                logger.error(f"Response body: {e.response.text}")
            return CalculationResult.failure(
                ErrorKind.REMOTE_FAILURE, REMOTE_FAILURE_MESSAGE, provider=self.NAME
            )
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"{self.NAME} API returned an unexpected body: {e}")
            return CalculationResult.failure(
                ErrorKind.REMOTE_FAILURE, REMOTE_FAILURE_MESSAGE, provider=self.NAME
            )

        logger.info(f"{self.NAME} estimate for {query.mode.value}: {co2e} kg CO2e")
        return CalculationResult.ok(co2e, source="remote", provider=self.NAME)


class ClimatiqProvider(EmissionsProvider):
    """Climatiq /estimate, addressed by emission factor id."""

    NAME = "climatiq"
    BASE_URL = "https://beta4.api.climatiq.io"
    ENDPOINT = "estimate"
    API_KEY_SETTING = "CLIMATIQ_API_KEY"

    EMISSION_FACTOR_IDS = {
        TransportType.CAR: "passenger_vehicle-vehicle_type_car-fuel_source_na-distance_na-engine_size_na",
        TransportType.BUS: "passenger_vehicle-vehicle_type_bus-fuel_source_na-distance_na-engine_size_na",
        TransportType.TRAIN: "passenger_train-route_type_national_rail-fuel_source_na",
    }
    ELECTRICITY_FACTOR_ID = "electricity-energy_source_grid_mix"

    def build_payload(self, query):
        if query.mode is Mode.TRAVEL:
            factor_id = self.EMISSION_FACTOR_IDS.get(query.transport)
            if factor_id is None:
                raise ValueError(f"No Climatiq emission factor for {query.transport}")
            parameters = {"distance": query.amount, "distance_unit": "km"}
        elif query.mode is Mode.ENERGY:
            factor_id = self.ELECTRICITY_FACTOR_ID
            parameters = {"energy": query.amount, "energy_unit": "kWh"}
        else:
            raise ValueError(f"Climatiq cannot estimate {query.mode.value}")

        return {
            "emission_factor": {"id": factor_id},
            "parameters": parameters,
        }

    def extract_co2e(self, data):
        return data["co2e"]


class CarbonInterfaceProvider(EmissionsProvider):
    """Carbon Interface /estimates: shipping for travel, electricity for energy."""

    NAME = "carbon_interface"
    BASE_URL = "https://www.carboninterface.com/api/v1"
    ENDPOINT = "estimates"
    API_KEY_SETTING = "CARBON_INTERFACE_API_KEY"

    TRANSPORT_METHODS = {
        TransportType.CAR: "truck",
        TransportType.BUS: "truck",
        TransportType.TRAIN: "train",
    }

    def build_payload(self, query):
        if query.mode is Mode.TRAVEL:
            method = self.TRANSPORT_METHODS.get(query.transport)
            if method is None:
                raise ValueError(f"No Carbon Interface transport method for {query.transport}")
            return {
                "type": "shipping",
                "weight_value": NOTIONAL_SHIPMENT_WEIGHT_KG,
                "weight_unit": "kg",
                "distance_value": query.amount,
                "distance_unit": "km",
                "transport_method": method,
            }
        if query.mode is Mode.ENERGY:
            return {
                "type": "electricity",
                "electricity_unit": "kwh",
                "electricity_value": query.amount,
                "country": self.country,
            }
        raise ValueError(f"Carbon Interface cannot estimate {query.mode.value}")

    def extract_co2e(self, data):
        return data["data"]["attributes"]["carbon_kg"]


PROVIDERS = {
    ClimatiqProvider.NAME: ClimatiqProvider,
    CarbonInterfaceProvider.NAME: CarbonInterfaceProvider,
}


def _provider_class(name):
    name = (name or ClimatiqProvider.NAME).strip().lower()
    provider_cls = PROVIDERS.get(name)
    if provider_cls is None:
        raise ValueError(f"Unknown emissions provider '{name}'. Choose from: {', '.join(PROVIDERS)}")
    return provider_cls


def provider_from_config(config, name=None) -> EmissionsProvider:
    """
    Build a provider from an app config mapping.

    Uses EMISSIONS_PROVIDER unless name is given, the provider's own API key
    setting (CLIMATIQ_API_KEY / CARBON_INTERFACE_API_KEY), EMISSIONS_API_TIMEOUT
    and ENERGY_COUNTRY_CODE.
    """
    provider_cls = _provider_class(name or config.get("EMISSIONS_PROVIDER"))
    return provider_cls(
        api_key=config.get(provider_cls.API_KEY_SETTING),
        timeout=config.get("EMISSIONS_API_TIMEOUT"),
        country=config.get("ENERGY_COUNTRY_CODE") or "us",
    )
