import click
from flask import current_app
from flask.cli import with_appcontext

from app.projects.eco_calculator.core.constants import TRANSPORT_VALUES, Mode, TransportType, format_co2e
from app.projects.eco_calculator.core.expression import format_number
from app.projects.eco_calculator.core.providers import provider_from_config
from app.projects.eco_calculator.core.resolver import CalculationRequest, EstimationResolver


@click.group(name='eco')
def eco_cli():
    """Eco Calculator commands."""
    pass


@eco_cli.command('estimate')
@click.argument('mode', type=click.Choice([Mode.TRAVEL.value, Mode.ENERGY.value]))
@click.argument('amount')
@click.option('--transport', default=TransportType.CAR.value, type=click.Choice(TRANSPORT_VALUES),
              help='Transport type for travel estimates')
@click.option('--provider', default=None, help='Emissions provider (climatiq or carbon_interface)')
@with_appcontext
def estimate_command(mode, amount, transport, provider):
    """Estimate kg CO2e for a distance (km) or an amount of electricity (kWh)."""
    try:
        emissions_provider = provider_from_config(current_app.config, name=provider)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--provider')

    request = CalculationRequest(
        mode=Mode(mode),
        raw_input=amount,
        transport=TransportType(transport) if mode == Mode.TRAVEL.value else None,
    )
    result = EstimationResolver(emissions_provider).resolve(request)

    if not result.success:
        click.echo(result.error, err=True)
        raise SystemExit(1)

    click.echo(f"{format_co2e(result.value)} ({result.source})")


@eco_cli.command('evaluate')
@click.argument('expression')
def evaluate_command(expression):
    """Evaluate a basic arithmetic expression, e.g. "2+2*3"."""
    result = EstimationResolver().evaluate(expression)
    if not result.success:
        click.echo(result.error, err=True)
        raise SystemExit(1)
    click.echo(format_number(result.value))


@eco_cli.command('init-db')
@with_appcontext
def init_db_command():
    """Create the activity log table."""
    from app import db
    from app.models import LogEntry

    db.create_all()
    click.echo(f"Created tables: {LogEntry.__tablename__}")
