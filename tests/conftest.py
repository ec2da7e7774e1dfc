# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

import json
from datetime import date

import pytest

from poll_forecast.models import PollObservation

ELECTION_DAY = date(2024, 1, 13)


@pytest.fixture
def make_poll():
    """Factory for PollObservation with sensible defaults."""

    def _make(institution='TVBS', method='市話', sample=1000,
              dpp=35.0, kmt=32.0, tpp=20.0, day=date(2024, 1, 2), undecided=None):
        return PollObservation(
            institution=institution, method=method, sample=sample,
            dpp=dpp, kmt=kmt, tpp=tpp, date=day, undecided=undecided,
        )

    return _make


@pytest.fixture
def campaign_polls(make_poll):
    """Five polls over the last weeks of the campaign."""
    return [
        make_poll('台灣民意基金會', '市話+手機', 1080, 34.5, 30.1, 21.3, date(2023, 12, 18)),
        make_poll('聯合報', '市話+手機', 1104, 32.0, 27.0, 21.0, date(2023, 12, 20)),
        make_poll('TVBS', '市話+手機', 1209, 33.0, 30.0, 22.0, date(2023, 12, 20)),
        make_poll('美麗島電子報', '市話+手機', 1070, 38.5, 28.3, 18.8, date(2023, 12, 26)),
        make_poll('鋒燦傳媒', '網路', 3000, 36.0, 35.5, 24.0, date(2024, 1, 2)),
    ]


@pytest.fixture
def raw_records():
    """Poll list as it arrives from p3.json, including junk rows."""
    return [
        {'institution': 'TVBS', 'method': '市話+手機', 'sample': 1209,
         'dpp': 33, 'kmt': 30, 'tpp': 22, 'date': '2023-12-20'},
        {'institution': '聯合報', 'method': '', 'sample': '1,104',
         'dpp': 32, 'kmt': 27, 'tpp': 21, 'date': '2023/12/20', 'undecided': 20},
        {'institution': '鋒燦傳媒', 'method': '網路', 'sample': 0,
         'dpp': 36, 'kmt': 105, 'tpp': -3, 'date': '2024-01-02'},
        {'institution': 'No date', 'method': '網路', 'sample': 1000,
         'dpp': 36, 'kmt': 30, 'tpp': 20, 'date': ''},
        {'institution': 'Bad date', 'method': '網路', 'sample': 1000,
         'dpp': 36, 'kmt': 30, 'tpp': 20, 'date': 'last tuesday'},
        {'institution': 'Text share', 'method': '網路', 'sample': 1000,
         'dpp': '36', 'kmt': 30, 'tpp': 20, 'date': '2024-01-01'},
        {'institution': 'Missing tpp', 'method': '網路', 'sample': 1000,
         'dpp': 36, 'kmt': 30, 'date': '2024-01-01'},
        {'method': '網路', 'sample': 1000,
         'dpp': 36, 'kmt': 30, 'tpp': 20, 'date': '2024-01-01'},
    ]


@pytest.fixture
def polls_file(tmp_path, raw_records):
    path = tmp_path / 'p3.json'
    path.write_text(json.dumps(raw_records, ensure_ascii=False), encoding='utf-8')
    return path
