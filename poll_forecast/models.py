"""Records passed between the loader, the forecast engine and the charts."""

import math
from collections import namedtuple
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

PARTIES = ('dpp', 'kmt', 'tpp')


def json_float(value):
    """NaN and infinities become None (JSON null)."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class VoteShare(namedtuple('VoteShare', PARTIES)):
    """Three-way vote share in percent."""

    __slots__ = ()

    def total(self):
        return self.dpp + self.kmt + self.tpp

    def to_dict(self):
        return {k: json_float(v) for k, v in self._asdict().items()}


ZERO_SHARE = VoteShare(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class PollObservation:
    institution: str
    method: str
    sample: Optional[int]
    dpp: float
    kmt: float
    tpp: float
    date: date
    undecided: Optional[float] = None

    @property
    def shares(self):
        return VoteShare(self.dpp, self.kmt, self.tpp)


@dataclass(frozen=True)
class WeightedPoll:
    original: VoteShare
    corrected: VoteShare
    weight: float
    recency_weight: float
    sample_weight: float
    method_weight: float
    days_ago: float
    institution: str
    method: str
    date: date
    sample: Optional[int]

    def to_dict(self):
        return {
            **self.original.to_dict(),
            'weight': json_float(self.weight),
            'original': self.original.to_dict(),
            'corrected': self.corrected.to_dict(),
            'institution': self.institution,
            'method': self.method,
            'date': self.date.isoformat(),
            'days_ago': json_float(self.days_ago),
            'sample': self.sample or 0,
            'recency_weight': json_float(self.recency_weight),
            'sample_weight': json_float(self.sample_weight),
            'method_weight': json_float(self.method_weight),
        }


@dataclass(frozen=True)
class PredictionResult:
    predictions: VoteShare
    total_polls: int
    total_weight: float
    election_date: date
    recency_halflife: float
    sample_baseline: int
    poll_details: List[WeightedPoll] = field(default_factory=list)

    @property
    def methodology(self):
        return {
            'total_polls': self.total_polls,
            'total_weight': json_float(self.total_weight),
            'election_date': self.election_date.isoformat(),
            'recency_halflife': self.recency_halflife,
            'sample_baseline': self.sample_baseline,
        }

    def to_dict(self):
        return {
            'predictions': self.predictions.to_dict(),
            'methodology': self.methodology,
            'poll_details': [p.to_dict() for p in self.poll_details],
        }


@dataclass(frozen=True)
class ChartSeries:
    name: str
    data: List[Optional[float]]
    smooth: bool = True
    dash: str = 'solid'
    width: int = 3

    def to_dict(self):
        return {
            'name': self.name,
            'type': 'line',
            'smooth': self.smooth,
            'data': [json_float(v) for v in self.data],
            'lineStyle': {'width': self.width, 'type': self.dash},
        }


@dataclass(frozen=True)
class SeriesBundle:
    """Category axis plus aligned line series. None marks a missing point."""

    x_axis: List[date] = field(default_factory=list)
    series: List[ChartSeries] = field(default_factory=list)

    def is_empty(self):
        return not self.x_axis

    def to_dict(self):
        return {
            'xAxis': [d.isoformat() for d in self.x_axis],
            'series': [s.to_dict() for s in self.series],
        }
