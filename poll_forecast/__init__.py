"""
poll_forecast — weighted poll aggregation with structural bias correction
for the 2024 Taiwan presidential election (DPP / KMT / TPP).
"""

from poll_forecast.config import DEFAULT_CONFIG, ForecastConfig
from poll_forecast.engine import compute_forecast, evaluate_accuracy
from poll_forecast.errors import (
    DegenerateRawAverageError,
    EmptyInputError,
    ForecastError,
    NoValidPollsError,
    PollSourceError,
)
from poll_forecast.models import (
    PollObservation,
    PredictionResult,
    SeriesBundle,
    VoteShare,
    WeightedPoll,
)
from poll_forecast.series import build_series, filter_by_institutions
from poll_forecast.summary import generate_predictions, prediction_summary, summarize

__version__ = '1.0.0'
