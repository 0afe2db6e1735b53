"""
Calculator view state.

One explicit state object per session: a Mode-tagged input payload, the
phase, and the settled result or error. Pure Python; the web layer stores
it in the Flask session through to_dict()/from_dict().
"""
import enum
from dataclasses import dataclass, field
from typing import Optional, Union

from app.projects.eco_calculator.core.constants import (
    CLEAR_KEY,
    EQUALS_KEY,
    KEYPAD_KEYS,
    Mode,
    TransportType,
    format_co2e,
)
from app.projects.eco_calculator.core.expression import format_number
from app.projects.eco_calculator.core.resolver import CalculationRequest
from app.projects.eco_calculator.core.results import CalculationResult


class Phase(enum.Enum):
    IDLE = "idle"
    AWAITING_INPUT = "awaiting_input"
    LOADING = "loading"
    SETTLED = "settled"


class InvalidTransition(ValueError):
    """Raised when an action does not apply to the current mode."""

    pass


class CalculationInProgress(RuntimeError):
    """Raised when a submission is made while another is still loading."""

    pass


@dataclass
class TravelInput:
    distance: str = ""
    transport: TransportType = TransportType.CAR


@dataclass
class EnergyInput:
    kwh: str = ""


@dataclass
class ArithmeticInput:
    expression: str = ""


Payload = Union[TravelInput, EnergyInput, ArithmeticInput]

_PAYLOAD_FOR_MODE = {
    Mode.TRAVEL: TravelInput,
    Mode.ENERGY: EnergyInput,
    Mode.ARITHMETIC: ArithmeticInput,
}


@dataclass(frozen=True)
class Submission:
    request: CalculationRequest
    generation: int


@dataclass
class CalculatorState:
    payload: Payload = field(default_factory=TravelInput)
    phase: Phase = Phase.IDLE
    result: Optional[float] = None
    error: Optional[str] = None
    source: Optional[str] = None
    generation: int = 0

    # --- Derived views ---

    @property
    def mode(self) -> Mode:
        if isinstance(self.payload, TravelInput):
            return Mode.TRAVEL
        if isinstance(self.payload, EnergyInput):
            return Mode.ENERGY
        return Mode.ARITHMETIC

    @property
    def loading(self) -> bool:
        return self.phase is Phase.LOADING

    @property
    def input(self) -> str:
        if isinstance(self.payload, TravelInput):
            return self.payload.distance
        if isinstance(self.payload, EnergyInput):
            return self.payload.kwh
        return self.payload.expression

    @property
    def transport(self) -> Optional[TransportType]:
        if isinstance(self.payload, TravelInput):
            return self.payload.transport
        return None

    @property
    def result_display(self) -> Optional[str]:
        if self.result is None:
            return None
        if self.mode is Mode.ARITHMETIC:
            return f"= {format_number(self.result)}"
        return format_co2e(self.result)

    # --- Transitions ---

    def select_mode(self, mode):
        """Switch mode; clears input, result, error and expression."""
        mode = Mode.parse(mode)
        self.payload = _PAYLOAD_FOR_MODE[mode]()
        self.phase = Phase.AWAITING_INPUT
        self.result = None
        self.error = None
        self.source = None
        self.generation += 1

    def enter_input(self, text):
        text = "" if text is None else str(text)
        if isinstance(self.payload, TravelInput):
            self.payload.distance = text
        elif isinstance(self.payload, EnergyInput):
            self.payload.kwh = text
        else:
            self.payload.expression = text
        self._edited()

    def select_transport(self, transport):
        if not isinstance(self.payload, TravelInput):
            raise InvalidTransition("Transport type only applies in travel mode")
        self.payload.transport = TransportType.parse(transport)
        self._edited()

    def press_key(self, key, resolver=None) -> Optional[CalculationResult]:
        """
        Apply an arithmetic keypad key.

        'C' clears the expression, '=' submits it through the resolver and
        returns the result; every other key appends to the expression.
        """
        if not isinstance(self.payload, ArithmeticInput):
            raise InvalidTransition("Keypad only applies in arithmetic mode")
        if key not in KEYPAD_KEYS:
            raise InvalidTransition(f"Unknown key {key!r}")

        if key == CLEAR_KEY:
            self.payload.expression = ""
            self.result = None
            self.error = None
            self.source = None
            self.phase = Phase.AWAITING_INPUT
            return None
        if key == EQUALS_KEY:
            if resolver is None:
                raise ValueError("A resolver is required to evaluate the expression")
            return self.submit(resolver)

        self.payload.expression += key
        self._edited()
        return None

    def begin_submit(self) -> Submission:
        """Enter LOADING and capture the request to resolve."""
        if self.loading:
            raise CalculationInProgress("A calculation is already in progress")
        request = CalculationRequest(mode=self.mode, raw_input=self.input, transport=self.transport)
        self.phase = Phase.LOADING
        self.result = None
        self.error = None
        self.source = None
        return Submission(request=request, generation=self.generation)

    def complete(self, submission: Submission, outcome: CalculationResult) -> bool:
        """
        Settle a submission. Returns False, leaving the state untouched,
        when the mode changed while the submission was in flight.
        """
        if submission.generation != self.generation:
            return False

        self.phase = Phase.SETTLED
        if outcome.success:
            self.result = outcome.value
            self.error = None
            self.source = outcome.source
            if isinstance(self.payload, ArithmeticInput):
                self.payload.expression = format_number(outcome.value)
        else:
            self.result = None
            self.error = outcome.error
            self.source = None
        return True

    def submit(self, resolver) -> CalculationResult:
        """
        Resolve the current input; LOADING is always released.

        An exception raised by the resolver propagates to the caller after
        the release.
        """
        submission = self.begin_submit()
        try:
            outcome = resolver.resolve(submission.request)
            self.complete(submission, outcome)
        finally:
            if self.loading and submission.generation == self.generation:
                self.phase = Phase.AWAITING_INPUT
        return outcome

    def _edited(self):
        if self.phase in (Phase.IDLE, Phase.SETTLED):
            self.phase = Phase.AWAITING_INPUT

    # --- Serialisation ---

    def to_dict(self) -> dict:
        data = {
            "mode": self.mode.value,
            "input": self.input,
            "phase": self.phase.value,
            "result": self.result,
            "error": self.error,
            "source": self.source,
            "generation": self.generation,
        }
        if self.transport is not None:
            data["transport"] = self.transport.value
        return data

    @classmethod
    def from_dict(cls, data) -> "CalculatorState":
        """Rebuild a state; missing or unreadable data gives a fresh state."""
        if not data:
            return cls()
        try:
            mode = Mode.parse(data.get("mode"))
            text = str(data.get("input") or "")
            if mode is Mode.TRAVEL:
                payload = TravelInput(
                    distance=text,
                    transport=TransportType.parse(data.get("transport") or TransportType.CAR.value),
                )
            elif mode is Mode.ENERGY:
                payload = EnergyInput(kwh=text)
            else:
                payload = ArithmeticInput(expression=text)

            phase = Phase(data.get("phase", Phase.IDLE.value))
            # No request outlives the one that stored the state
            if phase is Phase.LOADING:
                phase = Phase.AWAITING_INPUT

            result = data.get("result")
            return cls(
                payload=payload,
                phase=phase,
                result=float(result) if result is not None else None,
                error=data.get("error"),
                source=data.get("source"),
                generation=int(data.get("generation", 0)),
            )
        except (ValueError, TypeError, AttributeError):
            return cls()

    def view(self) -> dict:
        """JSON-ready snapshot for the UI."""
        return {
            "mode": self.mode.value,
            "input": self.input,
            "display": self.input or "0",
            "expression": self.payload.expression if isinstance(self.payload, ArithmeticInput) else "",
            "transport": self.transport.value if self.transport else None,
            "result": self.result,
            "result_display": self.result_display,
            "error": self.error,
            "loading": self.loading,
            "phase": self.phase.value,
            "source": self.source,
        }
