"""Forecast and accuracy summary built straight from raw poll records."""

import logging

from poll_forecast.config import ACTUAL_2024_RESULT, DEFAULT_CONFIG
from poll_forecast.engine import compute_forecast, evaluate_accuracy
from poll_forecast.errors import ForecastError
from poll_forecast.ingest import sanitize_polls
from poll_forecast.models import json_float

log = logging.getLogger(__name__)

TOP_POLLS = 3


def generate_predictions(records, election_date=None, config=DEFAULT_CONFIG):
    """Sanitise records and run the forecast. None if nothing can be forecast."""
    polls = sanitize_polls(records)
    if not polls:
        return None
    try:
        return compute_forecast(polls, election_date, config)
    except ForecastError as e:
        log.error(f'Error generating predictions: {e}')
        return None


def summarize(result, actual=ACTUAL_2024_RESULT):
    """Forecast, accuracy against `actual`, methodology and the top polls."""
    accuracy = evaluate_accuracy(result, actual)
    return {
        'predictions': result.predictions.to_dict(),
        'accuracy': {k: json_float(v) for k, v in accuracy.items()},
        'methodology': result.methodology,
        'top_polls': [p.to_dict() for p in result.poll_details[:TOP_POLLS]],
    }


def prediction_summary(records, actual=ACTUAL_2024_RESULT, election_date=None,
                       config=DEFAULT_CONFIG):
    result = generate_predictions(records, election_date, config)
    if result is None:
        return None
    return summarize(result, actual)
