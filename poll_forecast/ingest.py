"""
ingest.py — Load and sanitise the raw poll list

Sources:
  - http(s) URL serving the JSON poll list (e.g. https://example.org/p3.json)
  - local .json file (list of poll objects, or {"polls": [...]})
  - local .csv file with institution,method,sample,dpp,kmt,tpp,date columns

Sanitising drops records the forecast cannot use and clamps vote shares into
[0, 100]. The forecast engine itself never clamps.
"""

import json
import logging
import math
import numbers
import re
from datetime import date, datetime
from pathlib import Path

import pandas as pd
import requests

from poll_forecast.config import DEFAULT_METHOD, DEFAULT_SAMPLE
from poll_forecast.errors import PollSourceError
from poll_forecast.models import PARTIES, PollObservation

log = logging.getLogger(__name__)

HEADERS = {
    'User-Agent': 'poll-forecast/1.0',
    'Accept': 'application/json',
}

DATE_FORMATS = ('%Y-%m-%d', '%Y/%m/%d', '%Y.%m.%d')


# ── Field parsing ────────────────────────────────────────────────────

def parse_poll_date(value):
    """Parse '2023-12-20', '2023/12/20', '2023.12.20' or an ISO timestamp.

    Returns a date, or None when the value cannot be read.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    if text[-1:] in ('Z', 'z'):
        # fromisoformat only reads a Z suffix from Python 3.11
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_sample_size(value):
    """Parse sample size like '1,068' or 1068 to int. None if unusable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, numbers.Real):
        if not math.isfinite(value):
            return None
        return int(value)
    text = re.sub(r'[^\d]', '', str(value))
    return int(text) if text else None


def is_finite_number(value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def clamp(value, low=0.0, high=100.0):
    return max(low, min(high, float(value)))


# ── Sanitising ───────────────────────────────────────────────────────

def sanitize_poll(record):
    """Turn one raw record into a PollObservation, or None to drop it."""
    if not isinstance(record, dict):
        return None

    raw_date = record.get('date')
    if not isinstance(raw_date, (str, date)) or (isinstance(raw_date, str) and not raw_date.strip()):
        return None
    institution = record.get('institution')
    if not isinstance(institution, str):
        return None
    if not all(is_finite_number(record.get(party)) for party in PARTIES):
        return None

    poll_date = parse_poll_date(raw_date)
    if poll_date is None:
        return None

    method = record.get('method')
    if not isinstance(method, str) or not method:
        method = DEFAULT_METHOD

    sample = parse_sample_size(record.get('sample'))
    if not sample or sample <= 0:
        sample = DEFAULT_SAMPLE

    undecided = record.get('undecided')
    if not is_finite_number(undecided):
        undecided = None

    return PollObservation(
        institution=institution,
        method=method,
        sample=sample,
        dpp=clamp(record['dpp']),
        kmt=clamp(record['kmt']),
        tpp=clamp(record['tpp']),
        date=poll_date,
        undecided=undecided,
    )


def sanitize_polls(records):
    """Keep the usable records, in their original order."""
    polls = []
    for record in records or []:
        poll = sanitize_poll(record)
        if poll is not None:
            polls.append(poll)

    dropped = len(records or []) - len(polls)
    if dropped:
        log.info(f'Dropped {dropped} malformed poll records')
    return polls


# ── Loading ──────────────────────────────────────────────────────────

def fetch_poll_records(url, timeout=30):
    log.info(f'Fetching polls: {url}')
    try:
        resp = requests.get(url, headers=HEADERS, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError) as e:
        raise PollSourceError(f'Failed to fetch {url}: {e}') from e


def read_csv_records(path):
    try:
        df = pd.read_csv(path, dtype={'institution': str, 'method': str, 'date': str},
                         encoding='utf-8-sig')
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise PollSourceError(f'Failed to read {path}: {e}') from e
    # NaN cells -> None so they read as missing fields
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient='records')


def read_json_records(path):
    try:
        return json.loads(Path(path).read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as e:
        raise PollSourceError(f'Failed to read {path}: {e}') from e


def load_poll_records(source, timeout=30):
    """Raw poll dicts from a URL, a .csv file or a .json file."""
    source = str(source)
    if source.startswith(('http://', 'https://')):
        data = fetch_poll_records(source, timeout=timeout)
    elif source.lower().endswith('.csv'):
        data = read_csv_records(source)
    else:
        data = read_json_records(source)

    if isinstance(data, dict):
        data = data.get('polls')
    if not isinstance(data, list):
        raise PollSourceError(f'{source}: expected a list of polls')

    log.info(f'Loaded {len(data)} poll records from {source}')
    return data


def load_polls(source, timeout=30):
    return sanitize_polls(load_poll_records(source, timeout=timeout))
