"""
cli.py — Forecast the 2024 Taiwan presidential election from a poll list

Usage:
    poll-forecast polls.json                      # Forecast + chart series as JSON
    poll-forecast polls.csv --summary             # Forecast, accuracy, top polls
    poll-forecast https://example.org/p3.json --chart trends.html
    poll-forecast polls.json --institution TVBS --institution 聯合報
    poll-forecast polls.json --all-sources --output out/forecast.json
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from poll_forecast.charts import write_chart
from poll_forecast.config import DEFAULT_CONFIG, enabled_sources
from poll_forecast.engine import compute_forecast
from poll_forecast.errors import ForecastError, PollSourceError
from poll_forecast.ingest import load_polls
from poll_forecast.series import build_series, filter_by_institutions
from poll_forecast.summary import summarize

log = logging.getLogger('PollForecast')


def parse_election_date(text):
    try:
        return datetime.strptime(text, '%Y-%m-%d').date()
    except ValueError:
        raise argparse.ArgumentTypeError(f'invalid date (want YYYY-MM-DD): {text}')


def build_parser():
    parser = argparse.ArgumentParser(
        description='Weighted, bias-corrected forecast from opinion polls'
    )
    parser.add_argument('source',
                        help='Poll list: .json / .csv file or http(s) URL')
    parser.add_argument('--election-date', type=parse_election_date,
                        default=DEFAULT_CONFIG.election_date,
                        help=f'Election day (default: {DEFAULT_CONFIG.election_date})')
    parser.add_argument('--institution', action='append', default=None,
                        help='Only use polls from this institution (repeatable)')
    parser.add_argument('--all-sources', action='store_true',
                        help='Use every institution instead of the default source list')
    parser.add_argument('--summary', action='store_true',
                        help='Include accuracy against the actual 2024 result and top polls')
    parser.add_argument('--output', type=str, default=None,
                        help='Write JSON here instead of stdout')
    parser.add_argument('--chart', type=str, default=None,
                        help='Write an HTML trend chart here')
    parser.add_argument('--verbose', action='store_true',
                        help='Debug logging')
    return parser


def run(args):
    """Returns the JSON document for the given arguments."""
    polls = load_polls(args.source)
    if args.all_sources:
        selected = []
    else:
        selected = args.institution or enabled_sources()

    filtered = filter_by_institutions(polls, selected)
    log.info(f'{len(filtered)} of {len(polls)} polls selected')

    result = compute_forecast(filtered, args.election_date)
    p = result.predictions
    log.info(f'Forecast: DPP {p.dpp:.2f}%  KMT {p.kmt:.2f}%  TPP {p.tpp:.2f}%')
    bundle = build_series(filtered, None, args.election_date)

    output = result.to_dict()
    if args.summary:
        summary = summarize(result)
        output['accuracy'] = summary['accuracy']
        output['top_polls'] = summary['top_polls']
    output['chart'] = bundle.to_dict()

    if args.chart:
        write_chart(bundle, args.chart)
    return output


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
    )

    try:
        output = run(args)
    except PollSourceError as e:
        log.error(str(e))
        return 1
    except ForecastError as e:
        log.error(f'Cannot forecast: {e}')
        return 1

    text = json.dumps(output, indent=2, ensure_ascii=False, allow_nan=False)
    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding='utf-8')
        log.info(f'Written: {out_path}')
    else:
        print(text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
