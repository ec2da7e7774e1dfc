"""
series.py — Daily trend lines for the forecast chart

Corrected per-poll values are averaged per calendar day (weighted by poll
weight) and the election day point is pinned to the final forecast. A second
set of dashed lines shows the plain average of the uncorrected polls.
"""

import logging
import re
from collections import defaultdict
from datetime import datetime

from poll_forecast.config import DEFAULT_CONFIG
from poll_forecast.engine import compute_forecast
from poll_forecast.errors import ForecastError
from poll_forecast.models import PARTIES, ChartSeries, SeriesBundle, json_float

log = logging.getLogger(__name__)

_FULLWIDTH_PARENS = re.compile(r'（[^）]*）')
_ASCII_PARENS = re.compile(r'\([^)]*\)')
_WHITESPACE = re.compile(r'\s+')


def normalize_institution(name):
    """'影響力數據顧問（QuickseeK）' -> '影響力數據顧問'."""
    name = _FULLWIDTH_PARENS.sub('', name or '')
    name = _ASCII_PARENS.sub('', name)
    return _WHITESPACE.sub('', name).strip()


def filter_by_institutions(observations, selected=None):
    """Keep polls whose institution matches, or starts with, a selected name."""
    if not selected:
        return list(observations)

    wanted = {normalize_institution(s) for s in selected}
    kept = []
    for poll in observations:
        inst = normalize_institution(poll.institution)
        if inst in wanted or any(inst.startswith(w) for w in wanted):
            kept.append(poll)
    return kept


def _series_name(party, variant):
    return f'{party.upper()} ({variant})'


def _day(value):
    return value.date() if isinstance(value, datetime) else value


def group_by_date(poll_details):
    groups = defaultdict(list)
    for p in poll_details:
        groups[_day(p.date)].append(p)
    return groups


def weighted_daily_average(polls, party):
    total = sum(getattr(p.corrected, party) * p.weight for p in polls)
    weight = sum(p.weight for p in polls)
    return json_float(round(total / weight, 2)) if weight > 0 else None


def simple_daily_average(polls, party):
    if not polls:
        return None
    return round(sum(getattr(p.original, party) for p in polls) / len(polls), 2)


def build_series(observations, institution_filter=None, election_date=None,
                 config=DEFAULT_CONFIG):
    """Build the enhanced and raw-average chart series.

    Returns an empty SeriesBundle when no forecast can be made.
    """
    if election_date is None:
        election_date = config.election_date

    filtered = filter_by_institutions(observations, institution_filter)
    if not filtered:
        return SeriesBundle()

    try:
        result = compute_forecast(filtered, election_date, config)
    except ForecastError as e:
        log.warning(f'No chart data: {e}')
        return SeriesBundle()

    groups = group_by_date(result.poll_details)
    dates = sorted(groups)

    enhanced = {party: [] for party in PARTIES}
    for day in dates:
        for party in PARTIES:
            enhanced[party].append(weighted_daily_average(groups[day], party))

    # Election day always carries the forecast itself
    election_day = _day(election_date)
    if dates[-1] != election_day:
        dates.append(election_day)
        for party in PARTIES:
            enhanced[party].append(getattr(result.predictions, party))
    else:
        for party in PARTIES:
            enhanced[party][-1] = getattr(result.predictions, party)

    raw = {party: [] for party in PARTIES}
    for day in dates[:-1]:
        for party in PARTIES:
            raw[party].append(simple_daily_average(groups.get(day), party))
    for party in PARTIES:
        raw[party].append(None)

    series = [ChartSeries(_series_name(party, 'Enhanced'), enhanced[party])
              for party in PARTIES]
    series += [ChartSeries(_series_name(party, 'Average'), raw[party],
                           dash='dashed', width=2)
               for party in PARTIES]

    log.debug(f'Built {len(series)} series over {len(dates)} dates')
    return SeriesBundle(x_axis=dates, series=series)
