"""
Constants for the Eco Calculator: modes, transport types, local emission
factors and user-facing messages.
"""
import enum


class Mode(enum.Enum):
    TRAVEL = "travel"
    ENERGY = "energy"
    ARITHMETIC = "arithmetic"

    @classmethod
    def parse(cls, value):
        """Mode from its wire value; 'standard' is accepted for ARITHMETIC."""
        if isinstance(value, cls):
            return value
        value = (value or "").strip().lower()
        if value == "standard":
            return cls.ARITHMETIC
        return cls(value)


class TransportType(enum.Enum):
    CAR = "car"
    BUS = "bus"
    TRAIN = "train"
    BIKE = "bike"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        return cls((value or "").strip().lower())


MODE_VALUES = [m.value for m in Mode] + ["standard"]
TRANSPORT_VALUES = [t.value for t in TransportType]

# Local fallback factors, kg CO2e per km
TRAVEL_EMISSION_FACTORS = {
    TransportType.CAR: 0.18,
    TransportType.BUS: 0.08,
    TransportType.TRAIN: 0.04,
    TransportType.BIKE: 0.0,
}

# Local fallback factor, kg CO2e per kWh
ENERGY_EMISSION_FACTOR = 0.709

# Notional shipment weight sent with travel estimates to weight-based providers
NOTIONAL_SHIPMENT_WEIGHT_KG = 100

# Arithmetic keypad, row by row
KEYPAD_ROWS = [
    ["7", "8", "9", "/"],
    ["4", "5", "6", "*"],
    ["1", "2", "3", "-"],
    ["0", ".", "=", "+"],
    ["C"],
]
KEYPAD_KEYS = [key for row in KEYPAD_ROWS for key in row]
CLEAR_KEY = "C"
EQUALS_KEY = "="

# --- User-facing messages ---
INVALID_DISTANCE_MESSAGE = "Please enter a valid distance."
INVALID_ENERGY_MESSAGE = "Please enter a valid energy amount."
MISSING_API_KEY_MESSAGE = "API key is not configured."
REMOTE_FAILURE_MESSAGE = "An error occurred. Please try again."
INVALID_CALCULATION_MESSAGE = "Invalid calculation"

INPUT_LABELS = {
    Mode.TRAVEL: "Distance (km)",
    Mode.ENERGY: "Electricity Usage (kWh)",
}


def format_co2e(value):
    """Two-decimal display of a kg CO2e value, e.g. '12.34 kg CO2e'."""
    if value is None:
        return ""
    return f"{value:.2f} kg CO2e"
