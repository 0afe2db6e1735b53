"""
Logging utilities for tracking calculator activity across the site.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from app.models import LogEntry
from app import db

logger = logging.getLogger(__name__)


def _record(project, category, description):
    """Persist a LogEntry; activity logging never breaks the request."""
    try:
        db.session.add(LogEntry(
            project=project,
            category=category,
            description=description
        ))
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to write activity log ({project}/{category}): {e}")


def log_project_visit(project_name, project_display_name=None):
    """
    Log a visit to a project/page.

    Args:
        project_name (str): The project identifier (e.g., 'eco_calculator')
        project_display_name (str, optional): Human-readable name for the description.
                                              Defaults to project_name if not provided.
    """
    display_name = project_display_name or project_name
    _record(project_name, 'Visit', f"Anonymous user visited {display_name}")


def log_calculation(project_name, mode, result):
    """
    Log the outcome of a calculation.

    Successful remote estimates are logged as 'Estimate', local fallbacks as
    'Fallback' and failures as 'Error' with the user-facing message.

    Args:
        project_name (str): The project identifier
        mode (str): Calculation mode value (e.g., 'travel')
        result: CalculationResult returned by the resolver
    """
    if not result.success:
        kind = result.error_kind.value if result.error_kind else 'unknown'
        _record(project_name, 'Error', f"{mode} calculation failed ({kind}): {result.error}")
    elif result.source == 'fallback':
        _record(project_name, 'Fallback', f"{mode} estimate used local factors: {result.value}")
    elif result.source == 'remote':
        _record(
            project_name,
            'Estimate',
            f"{mode} estimate from {result.provider}: {result.value}"
        )
