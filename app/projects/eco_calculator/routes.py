"""
Eco Calculator - CO2e estimates for travel and electricity, plus a basic
arithmetic keypad. No login required.

The page is a template with a small script that drives the JSON API
below. Calculator state lives in the Flask session.
"""

from flask import Blueprint, current_app, jsonify, render_template, session

from app.projects.eco_calculator.core.constants import (
    INPUT_LABELS,
    KEYPAD_ROWS,
    TRANSPORT_VALUES,
    Mode,
)
from app.projects.eco_calculator.core.providers import provider_from_config
from app.projects.eco_calculator.core.resolver import EstimationResolver
from app.projects.eco_calculator.core.state import (
    CalculationInProgress,
    CalculatorState,
    InvalidTransition,
)
from app.projects.eco_calculator.forms import (
    CalculateForm,
    InputForm,
    KeyForm,
    ModeForm,
    TransportForm,
)
from app.utils.logging import log_calculation, log_project_visit

PROJECT = 'eco_calculator'
SESSION_KEY = 'eco_calculator_state'

eco_calculator_bp = Blueprint('eco_calculator', __name__,
                              template_folder='templates')


def _load_state():
    return CalculatorState.from_dict(session.get(SESSION_KEY))


def _save_state(state):
    session[SESSION_KEY] = state.to_dict()


def _state_response(state):
    _save_state(state)
    return jsonify(state.view())


def _form_error(form):
    """First validation message from a form."""
    for errors in form.errors.values():
        if errors:
            return errors[0]
    return 'Invalid request'


def get_resolver():
    """Resolver wired to the configured emissions provider."""
    return EstimationResolver(provider_from_config(current_app.config))


def _submit(state):
    """Run a submission and record its outcome in the activity log."""
    mode = state.mode.value
    outcome = state.submit(get_resolver())
    log_calculation(PROJECT, mode, outcome)
    return outcome


@eco_calculator_bp.route('/')
def index():
    """Display the calculator"""
    log_project_visit(PROJECT, 'Eco Calculator')
    state = _load_state()
    _save_state(state)
    return render_template('eco_calculator/calculator.html',
                           state=state.view(),
                           modes=[m.value for m in Mode],
                           transports=TRANSPORT_VALUES,
                           keypad_rows=KEYPAD_ROWS,
                           input_labels={m.value: label for m, label in INPUT_LABELS.items()})


@eco_calculator_bp.route('/api/state', methods=['GET'])
def api_state():
    """Current calculator state."""
    return _state_response(_load_state())


@eco_calculator_bp.route('/api/mode', methods=['POST'])
def api_mode():
    """Switch mode; clears input, result, error and expression."""
    form = ModeForm()
    if not form.validate():
        return jsonify({'error': _form_error(form)}), 400

    state = _load_state()
    state.select_mode(form.mode.data)
    return _state_response(state)


@eco_calculator_bp.route('/api/input', methods=['POST'])
def api_input():
    """Replace the raw input (distance, kWh or expression)."""
    form = InputForm()
    if not form.validate():
        return jsonify({'error': _form_error(form)}), 400

    state = _load_state()
    state.enter_input(form.value.data or '')
    return _state_response(state)


@eco_calculator_bp.route('/api/transport', methods=['POST'])
def api_transport():
    """Select the transport type (travel mode only)."""
    form = TransportForm()
    if not form.validate():
        return jsonify({'error': _form_error(form)}), 400

    state = _load_state()
    try:
        state.select_transport(form.transport.data)
    except InvalidTransition as e:
        return jsonify({'error': str(e)}), 400
    return _state_response(state)


@eco_calculator_bp.route('/api/key', methods=['POST'])
def api_key():
    """Press an arithmetic keypad key; '=' evaluates the expression."""
    form = KeyForm()
    if not form.validate():
        return jsonify({'error': _form_error(form)}), 400

    state = _load_state()
    try:
        resolver = EstimationResolver() if form.key.data == '=' else None
        outcome = state.press_key(form.key.data, resolver)
        if outcome is not None:
            log_calculation(PROJECT, state.mode.value, outcome)
    except InvalidTransition as e:
        return jsonify({'error': str(e)}), 400
    except CalculationInProgress as e:
        return jsonify({'error': str(e)}), 409
    return _state_response(state)


@eco_calculator_bp.route('/api/calculate', methods=['POST'])
def api_calculate():
    """
    Submit the current input. Optional 'value' and 'transport' fields are
    applied first. Calculation errors come back in the state's 'error'.
    """
    form = CalculateForm()
    if not form.validate():
        return jsonify({'error': _form_error(form)}), 400

    state = _load_state()
    try:
        if form.value.raw_data:
            state.enter_input(form.value.data or '')
        if form.transport.data:
            state.select_transport(form.transport.data)
        _submit(state)
    except InvalidTransition as e:
        return jsonify({'error': str(e)}), 400
    except CalculationInProgress as e:
        return jsonify({'error': str(e)}), 409
    return _state_response(state)
