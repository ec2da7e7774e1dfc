"""
engine.py — Demographic structural forecast from a list of polls

Each poll dated on or before election day is weighted by
recency * sample size * methodology. The weighted average is corrected
toward a historical baseline, undecided respondents are redistributed with
fixed coefficients, and the result is normalised to 100%.

The same per-party correction factor is then pushed back onto every poll so
that per-poll trend lines land on the final forecast.
"""

import logging
import math
from dataclasses import replace

from poll_forecast.config import DEFAULT_CONFIG
from poll_forecast.errors import (
    DegenerateRawAverageError,
    EmptyInputError,
    NoValidPollsError,
)
from poll_forecast.models import PARTIES, ZERO_SHARE, PredictionResult, VoteShare, WeightedPoll

log = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


def _ratio(num, den):
    """num / den, giving NaN or a signed infinity instead of raising."""
    if den == 0:
        if num == 0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num)
    return num / den


def normalise(share):
    """Scale a VoteShare so its three parts sum to 100."""
    total = share.total()
    return VoteShare(*(_ratio(v, total) * 100 for v in share))


def round_to_total(share, total=100, places=2):
    """Round to `places` decimals keeping the parts summing to `total`.

    Largest remainder: every part is floored to the grid, then the leftover
    units go to the parts with the biggest fractional remainders.
    """
    if not all(math.isfinite(v) for v in share):
        return VoteShare(*(round(v, places) for v in share))

    scale = 10 ** places
    scaled = [v * scale for v in share]
    floors = [math.floor(x) for x in scaled]
    leftover = round(total * scale) - sum(floors)
    by_remainder = sorted(range(len(scaled)), key=lambda i: scaled[i] - floors[i], reverse=True)
    for i in by_remainder[:max(leftover, 0)]:
        floors[i] += 1
    return VoteShare(*(f / scale for f in floors))


# ── Weights ──────────────────────────────────────────────────────────

def days_before(election_date, poll_date):
    """Signed days from poll to election; negative when the poll is later."""
    return (election_date - poll_date).total_seconds() / SECONDS_PER_DAY


def recency_weight(days_ago, config=DEFAULT_CONFIG):
    return math.exp(-days_ago * math.log(2) / config.recency_halflife)


def effective_sample(sample, config=DEFAULT_CONFIG):
    return sample if sample and sample > 0 else config.default_sample


def sample_weight(sample, config=DEFAULT_CONFIG):
    """log10(N) / log10(baseline): a 10x larger sample is needed to matter."""
    n = effective_sample(sample, config)
    return math.log10(n) / math.log10(config.sample_baseline)


def method_weight(method, config=DEFAULT_CONFIG):
    """First table key contained in the method text, in table order."""
    text = method or ''
    for key, weight in config.method_weights:
        if key in text:
            return weight
    return config.unknown_method_weight


def weigh_poll(poll, election_date, config=DEFAULT_CONFIG):
    """Build the WeightedPoll for one observation, or None if post-election."""
    days_ago = days_before(election_date, poll.date)
    if days_ago < 0:
        return None

    recency = recency_weight(days_ago, config)
    size = sample_weight(poll.sample, config)
    methodology = method_weight(poll.method, config)

    return WeightedPoll(
        original=poll.shares,
        corrected=ZERO_SHARE,
        weight=recency * size * methodology,
        recency_weight=recency,
        sample_weight=size,
        method_weight=methodology,
        days_ago=days_ago,
        institution=poll.institution,
        method=poll.method,
        date=poll.date,
        sample=poll.sample,
    )


# ── Correction ───────────────────────────────────────────────────────

def structural_correction(raw_avg, config=DEFAULT_CONFIG):
    """Apply baseline delta and undecided redistribution, then normalise."""
    undecided = 100 - raw_avg.total()
    baseline = config.history_baseline
    delta = VoteShare(*(b - r for b, r in zip(baseline, raw_avg)))

    gains = VoteShare(*(
        undecided * a + d * b
        for a, d, b in zip(config.undecided_gain, delta, config.delta_gain)
    ))
    log.debug(f'Undecided {undecided:.2f}, gains '
              f'DPP {gains.dpp:+.2f} KMT {gains.kmt:+.2f} TPP {gains.tpp:+.2f}')

    return normalise(VoteShare(*(r + g for r, g in zip(raw_avg, gains))))


def back_propagate(polls, raw_avg, final):
    """Scale every poll by final / raw and renormalise each poll on its own."""
    for party, raw in zip(PARTIES, raw_avg):
        if raw == 0:
            raise DegenerateRawAverageError(party)
    factors = VoteShare(*(f / r for f, r in zip(final, raw_avg)))

    corrected = []
    for p in polls:
        scaled = VoteShare(*(o * k for o, k in zip(p.original, factors)))
        corrected.append(replace(p, corrected=normalise(scaled)))
    return corrected


# ── Forecast ─────────────────────────────────────────────────────────

def compute_forecast(observations, election_date=None, config=DEFAULT_CONFIG):
    """Predict the election result from a sequence of PollObservation.

    Raises EmptyInputError for no polls, NoValidPollsError when nothing
    dated on or before the election carries weight, and
    DegenerateRawAverageError when a party averages exactly 0.
    """
    if not observations:
        raise EmptyInputError('Polling data cannot be empty')
    if election_date is None:
        election_date = config.election_date

    polls = []
    total_weight = 0.0
    sums = [0.0, 0.0, 0.0]

    for obs in observations:
        poll = weigh_poll(obs, election_date, config)
        if poll is None:
            continue
        polls.append(poll)
        for i, share in enumerate(poll.original):
            sums[i] += share * poll.weight
        total_weight += poll.weight

    dropped = len(observations) - len(polls)
    if dropped:
        log.debug(f'Skipped {dropped} polls dated after {election_date}')

    if total_weight == 0:
        raise NoValidPollsError('No valid polls found')

    raw_avg = VoteShare(*(s / total_weight for s in sums))
    final = structural_correction(raw_avg, config)
    polls = back_propagate(polls, raw_avg, final)

    # sorted() is stable, reverse=True keeps tie order
    polls = sorted(polls, key=lambda p: p.weight, reverse=True)

    log.debug(f'Forecast from {len(polls)} polls (weight {total_weight:.2f}): '
              f'DPP {final.dpp:.2f} KMT {final.kmt:.2f} TPP {final.tpp:.2f}')

    return PredictionResult(
        predictions=round_to_total(final),
        total_polls=len(polls),
        total_weight=round(total_weight, 2),
        election_date=election_date,
        recency_halflife=config.recency_halflife,
        sample_baseline=config.sample_baseline,
        poll_details=polls,
    )


def evaluate_accuracy(result, actual):
    """Absolute error per party against the actual outcome, plus the total."""
    predicted = result.predictions
    if isinstance(actual, dict):
        actual = VoteShare(*(actual[party] for party in PARTIES))
    errors = [abs(p - a) for p, a in zip(predicted, actual)]
    report = {f'{party}_error': round(e, 2) for party, e in zip(PARTIES, errors)}
    report['total_error'] = round(sum(errors), 2)
    return report
