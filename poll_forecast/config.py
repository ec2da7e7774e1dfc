"""
Fixed coefficients for the poll forecast.

Weighting: weight = recency * sample_size * methodology
  - Recency: 14-day half-life
  - Sample size: log10(N) / log10(1068), 1068 being the reference survey
  - Methodology: substring lookup in an ordered table, first match wins

Correction: raw weighted average is pulled toward the 2022 Taipei mayoral
baseline ("silent voter" skew) and undecided respondents are handed out with
fixed empirical coefficients.
"""

from dataclasses import dataclass
from datetime import date

from poll_forecast.models import VoteShare

# ── Methodology ratings ──────────────────────────────────────────────
# Order matters: a method text is matched against each key by substring
# containment and the first hit wins.

METHOD_WEIGHTS = (
    ('手機簡訊', 1.45),   # mobile text message
    ('網路', 1.35),       # internet panel
    ('市話+手機', 1.2),   # landline + mobile
    ('市話+網路', 1.25),  # landline + internet
    ('手機', 1.3),        # mobile only
    ('市話', 0.75),       # landline only
)
UNKNOWN_METHOD_WEIGHT = 0.8

# Method assumed for polls published without one
DEFAULT_METHOD = '市話'

# ── Baselines ────────────────────────────────────────────────────────

# 2022 Taipei mayoral result, used as a structural proxy
HISTORY_BASELINE = VoteShare(dpp=34.83, kmt=37.4, tpp=27.2)

# 2024 presidential result, for accuracy reporting
ACTUAL_2024_RESULT = VoteShare(dpp=40.05, kmt=33.49, tpp=26.46)

ELECTION_DATE = date(2024, 1, 13)

RECENCY_HALF_LIFE = 14
SAMPLE_BASELINE = 1068
DEFAULT_SAMPLE = 1000

# Undecided redistribution: gain = undecided * a + structural_delta * b
UNDECIDED_GAIN = VoteShare(dpp=0.393, kmt=0.22, tpp=0.10)
DELTA_GAIN = VoteShare(dpp=0.0, kmt=0.203, tpp=0.52)

# ── Polling sources ──────────────────────────────────────────────────
# (code, display name, enabled by default)

DEFAULT_SOURCES = (
    ('taiwan_public_opinion_foundation', '台灣民意基金會', True),
    ('udn', '聯合報', True),
    ('quickseek', '影響力數據顧問（QuickseeK）', True),
    ('cmmedia', '匯流新聞網（精確）', True),
    ('media_storm', '鋒燦傳媒', True),
    ('apec', '中華亞太菁英交流協會', True),
    ('mirror_media', '菱傳媒', True),
    ('tvbs', 'TVBS', True),
    ('zhen_media', '震傳媒', True),
)


def enabled_sources(sources=DEFAULT_SOURCES):
    """Display names of the sources switched on."""
    return [name for _code, name, enabled in sources if enabled]


@dataclass(frozen=True)
class ForecastConfig:
    recency_halflife: float = RECENCY_HALF_LIFE
    sample_baseline: int = SAMPLE_BASELINE
    default_sample: int = DEFAULT_SAMPLE
    method_weights: tuple = METHOD_WEIGHTS
    unknown_method_weight: float = UNKNOWN_METHOD_WEIGHT
    history_baseline: VoteShare = HISTORY_BASELINE
    undecided_gain: VoteShare = UNDECIDED_GAIN
    delta_gain: VoteShare = DELTA_GAIN
    election_date: date = ELECTION_DATE


DEFAULT_CONFIG = ForecastConfig()
