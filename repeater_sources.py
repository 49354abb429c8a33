# repeater_sources.py
# Per-directory adapters for repeater listings.
#
# Each source knows where its JSON lives, which entries are usable analog FM
# voice repeaters on 2m/70cm, and how to map an entry onto a common record.
# Add a new directory by writing its two functions and registering it in
# SOURCES.

import math
from collections import namedtuple

import requests

from maidenhead import to_location

USER_AGENT = 'repeater-csv/0.1'
DEFAULT_TIMEOUT = 15

DEFAULT_POWER = 'H'
DEFAULT_BANDWIDTH = '12500'

# Band edges in Hz
VALID_BANDS = [(144000000, 146000000), (420000000, 450000000)]

UK_MODES = ('A',)
UK_TYPES = ('AV', 'DM')
UK_BANDS = ('2M', '70CM')


class PayloadError(ValueError):
    """Raised when a fetched payload does not have the shape a source expects."""


RepeaterRecord = namedtuple(
    'RepeaterRecord',
    ['name', 'tx_freq', 'rx_freq', 'tone', 'power', 'bandwidth', 'location'],
)

RepeaterSource = namedtuple(
    'RepeaterSource',
    ['key', 'label', 'api_url', 'filter_data', 'normalize'],
)


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _hz(value):
    hz = _to_float(value)
    if math.isnan(hz):
        return ''
    return int(round(hz))


def _mhz_to_hz(value):
    return _hz(_to_float(value) * 1000000)


def _records(payload, key=None):
    """Pull the list of entries out of a payload, or raise PayloadError."""
    if key is not None:
        if not isinstance(payload, dict) or not isinstance(payload.get(key), list):
            raise PayloadError(f'expected an object with a "{key}" array')
        items = payload[key]
    elif isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict) and isinstance(payload.get('data'), list):
        items = payload['data']
    else:
        raise PayloadError('expected an array of repeaters')
    return [item for item in items if isinstance(item, dict)]


# --- RSGB (UK) ---------------------------------------------------------------

def filter_uk(payload):
    out = []
    for item in _records(payload, 'data'):
        modes = item.get('modeCodes') or ()
        if not any(m in modes for m in UK_MODES):
            continue
        if item.get('type') not in UK_TYPES:
            continue
        if item.get('band') not in UK_BANDS:
            continue
        if item.get('status') != 'OPERATIONAL':
            continue
        out.append(item)
    return out


def uk_tone(ctcss):
    # RSGB gives CTCSS as Hz with one decimal, the radio wants hundredths
    val = _to_float(ctcss)
    if math.isnan(val):
        return ''
    return str(int(round(val * 100)))


def uk_power(erp):
    val = _to_float(erp)
    if math.isnan(val):
        return DEFAULT_POWER
    return 'H' if val > 5 else 'L'


def uk_bandwidth(txbw):
    val = _to_float(txbw)
    if math.isnan(val):
        return DEFAULT_BANDWIDTH
    return '12500' if val == 12.5 else '25000'


def normalize_uk(item):
    # tx/rx are from the repeater's side; the radio transmits on its input
    return RepeaterRecord(
        name=str(item.get('repeater') or ''),
        tx_freq=_mhz_to_hz(item.get('rx')),
        rx_freq=_mhz_to_hz(item.get('tx')),
        tone=uk_tone(item.get('ctcss')),
        power=uk_power(item.get('dbwErp')),
        bandwidth=uk_bandwidth(item.get('txbw')),
        location=to_location(item.get('locator')),
    )


# --- HearHam (worldwide) -----------------------------------------------------

def valid_freq(f):
    return any(lo <= f <= hi for lo, hi in VALID_BANDS)


def filter_hearham(payload):
    out = []
    for item in _records(payload):
        # JSON true is not 1 here
        op = item.get('operational')
        if type(op) is not int or op != 1 or item.get('mode') != 'FM':
            continue
        freq = _to_float(item.get('frequency'))
        if math.isnan(freq) or not valid_freq(freq):
            continue
        out.append(item)
    return out


def hearham_tone(encode):
    if encode is None:
        return ''
    tone = str(encode).strip()
    if tone.upper().startswith('DCS'):
        return tone[3:].strip()
    return tone


def normalize_hearham(item):
    freq = _to_float(item.get('frequency'))
    offset = _to_float(item.get('offset') or 0)
    rx = freq if math.isnan(offset) else freq + offset
    return RepeaterRecord(
        name=str(item.get('callsign') or ''),
        tx_freq=_hz(freq),
        rx_freq=_hz(rx),
        tone=hearham_tone(item.get('encode')),
        power=DEFAULT_POWER,
        bandwidth=DEFAULT_BANDWIDTH,
        location=(_to_float(item.get('latitude')), _to_float(item.get('longitude'))),
    )


SOURCES = {
    'UK': RepeaterSource(
        key='UK',
        label='RSGB repeater list (UK)',
        api_url='https://api-beta.rsgb.online/all/systems',
        filter_data=filter_uk,
        normalize=normalize_uk,
    ),
    'default': RepeaterSource(
        key='default',
        label='HearHam repeater directory',
        api_url='https://hearham.com/api/repeaters/v1',
        filter_data=filter_hearham,
        normalize=normalize_hearham,
    ),
}


def get_source(key):
    """Look up a source by key (case-insensitive); unknown keys get the default."""
    if key:
        for name, source in SOURCES.items():
            if name.lower() == str(key).strip().lower():
                return source
    return SOURCES['default']


def fetch_payload(source, session=None, timeout=DEFAULT_TIMEOUT):
    """GET the source's listing and return the decoded JSON."""
    http = session or requests
    resp = http.get(source.api_url, headers={'User-Agent': USER_AGENT}, timeout=timeout)
    resp.raise_for_status()
    return resp.json()
