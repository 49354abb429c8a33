# repeater_csv.py
# Build a radio programming CSV of the repeaters nearest a Maidenhead locator.
#
# Data comes from one of the directories in repeater_sources (RSGB for the UK,
# HearHam for everywhere else). Entries are ranked by great-circle distance
# from the locator and the closest ones are written out in the 15 column
# layout the radio's programming software imports.
#
#   repeater-csv --locator IO91wm --source UK --count 30 --aprs
#
# Use --input to rank a JSON file saved earlier instead of fetching.

import argparse
import csv
import json
import math
import sys
from collections import namedtuple

import pandas as pd
import requests

from maidenhead import haversine_distance, is_valid_locator, to_location
from repeater_sources import DEFAULT_TIMEOUT, SOURCES, PayloadError, fetch_payload, get_source

CSV_HEADERS = [
    'title', 'tx_freq', 'rx_freq', 'tx_sub_audio(CTCSS=freq/DCS=number)',
    'rx_sub_audio(CTCSS=freq/DCS=number)', 'tx_power(H/M/L)', 'bandwidth(12500/25000)',
    'scan(0=OFF/1=ON)', 'talk around(0=OFF/1=ON)', 'pre_de_emph_bypass(0=OFF/1=ON)',
    'sign(0=OFF/1=ON)', 'tx_dis(0=OFF/1=ON)', 'mute(0=OFF/1=ON)',
    'rx_modulation(0=FM/1=AM)', 'tx_modulation(0=FM/1=AM)',
]

# scan on, everything else off, FM both ways
ROW_FLAGS = ['1', '0', '0', '0', '0', '0', '0', '0']

APRS_ROW = ['APRS', '144800000', '144800000', '', '', 'H', '12500', '0', '0', '0', '0', '0', '0', '0', '0']

DEFAULT_COUNT = 50

RankedEntry = namedtuple('RankedEntry', ['record', 'distance_km'])

RepeaterRequest = namedtuple('RepeaterRequest', ['source_key', 'locator', 'max_count', 'include_aprs'])


def _sort_key(entry):
    # NaN distances (undecodable locators) go last
    d = entry.distance_km
    return (math.isnan(d), 0.0 if math.isnan(d) else d)


def rank(payload, source_key, locator):
    """Filter, locate and sort a payload's repeaters nearest-first.

    Returns a list of RankedEntry. The sort is stable, so entries at the same
    distance keep their order from the payload.
    """
    source = get_source(source_key)
    eligible = source.filter_data(payload)
    home = to_location(locator)
    entries = []
    for item in eligible:
        record = source.normalize(item)
        entries.append(RankedEntry(record, haversine_distance(home, record.location)))
    return sorted(entries, key=_sort_key)


def _clean_cell(value):
    # fields are written unquoted, so anything that would break a row goes
    text = '' if value is None else str(value)
    return text.replace(',', ' ').replace('"', '').replace('\r', ' ').replace('\n', ' ')


def format_row(record):
    return [
        record.name,
        record.tx_freq,
        record.rx_freq,
        record.tone,
        record.tone,
        record.power,
        record.bandwidth,
    ] + ROW_FLAGS


def select_rows(entries, max_count, include_aprs=False):
    """Rows to write, APRS first when asked for, never more than max_count."""
    rows = []
    if include_aprs and max_count > 0:
        rows.append(list(APRS_ROW))
    for entry in entries:
        if len(rows) >= max_count:
            break
        rows.append(format_row(entry.record))
    return rows


def render(entries, max_count, include_aprs=False):
    rows = [[_clean_cell(v) for v in row] for row in select_rows(entries, max_count, include_aprs)]
    df = pd.DataFrame(rows, columns=CSV_HEADERS, dtype=str)
    return df.to_csv(index=False, lineterminator='\n', quoting=csv.QUOTE_NONE)


def build_csv(payload, request):
    entries = rank(payload, request.source_key, request.locator)
    return render(entries, request.max_count, request.include_aprs)


def output_filename(locator):
    return f'Repeaters - {locator}.csv'


def load_payload(path):
    with open(path, 'r', encoding='utf-8') as fh:
        return json.load(fh)


def positive_int(text):
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f'not a number: {text}')
    if n < 1:
        raise argparse.ArgumentTypeError('must be at least 1')
    return n


def main(argv=None):
    parser = argparse.ArgumentParser(description='Rank repeaters by distance from a grid locator and write a programming CSV')
    parser.add_argument('--locator', '-l', required=True, help='Maidenhead locator, 4 or 6 characters (e.g. IO91 or IO91wm)')
    parser.add_argument('--source', '-s', default='default', help=f'Repeater directory: {", ".join(SOURCES)} (unknown values use default)')
    parser.add_argument('--count', '-n', type=positive_int, default=DEFAULT_COUNT, help='Maximum number of channels to write, APRS included')
    parser.add_argument('--aprs', action='store_true', help='Add an APRS 144.800 channel first')
    parser.add_argument('--input', '-i', help='Read the directory JSON from this file instead of fetching it')
    parser.add_argument('--output', '-o', help='Output CSV file (default: "Repeaters - <locator>.csv")')
    parser.add_argument('--timeout', type=float, default=DEFAULT_TIMEOUT, help='HTTP timeout in seconds')
    args = parser.parse_args(argv)

    if not is_valid_locator(args.locator):
        print(f'ERROR: {args.locator!r} is not a 4 or 6 character Maidenhead locator')
        sys.exit(1)

    source = get_source(args.source)
    try:
        if args.input:
            payload = load_payload(args.input)
        else:
            print(f'Fetching {source.label} from {source.api_url}')
            payload = fetch_payload(source, timeout=args.timeout)
    except (OSError, ValueError, requests.RequestException) as e:
        print(f'ERROR: could not load repeater data: {e}')
        sys.exit(1)

    request = RepeaterRequest(source.key, args.locator, args.count, args.aprs)
    try:
        text = build_csv(payload, request)
    except PayloadError as e:
        print(f'ERROR: unexpected {source.key} data: {e}')
        sys.exit(1)

    output = args.output or output_filename(args.locator)
    with open(output, 'w', newline='', encoding='utf-8') as f:
        f.write(text)
    rows = text.count('\n') - 1
    print(f'Wrote {rows} rows to {output}')


if __name__ == '__main__':
    main()
