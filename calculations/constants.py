"""
Shared constants for propagation calculations.
"""

# Bands in display order with their nominal frequencies in MHz
BANDS = ['160m', '80m', '40m', '30m', '20m', '17m', '15m', '12m', '10m', '6m']
BAND_FREQUENCIES = {
    '160m': 1.8,
    '80m': 3.5,
    '40m': 7,
    '30m': 10,
    '20m': 14,
    '17m': 18,
    '15m': 21,
    '12m': 24,
    '10m': 28,
    '6m': 50
}

EARTH_RADIUS_KM = 6371

# Space weather used when live NOAA data is unavailable
DEFAULT_SFI = 150
DEFAULT_K_INDEX = 2
DEFAULT_SSN = 100
MAX_K_INDEX = 9

# Path endpoints used when coordinates are missing or invalid
DEFAULT_DE = {'lat': 40.0, 'lon': -75.0}
DEFAULT_DX = {'lat': 35.0, 'lon': 139.0}

MAX_RELIABILITY = 99

# Geomagnetic storm degradation, most severe first
K_INDEX_DEGRADATION = [
    (5, 0.3),
    (4, 0.6),
    (3, 0.8),
]

# Long path penalty, longest first (km, multiplier)
DISTANCE_PENALTY = [
    (15000, 0.7),
    (10000, 0.85),
]

# High bands need solar flux: (min freq MHz, SFI threshold)
HIGH_BAND_SFI_REQUIREMENTS = [
    (21, 100),
    (28, 120),
]

# Reliability thresholds for labels, highest first
SNR_LABELS = [
    (80, '+20dB'),
    (60, '+10dB'),
    (40, '0dB'),
    (20, '-10dB'),
]
SNR_FLOOR_LABEL = '-20dB'

STATUS_LABELS = [
    (70, 'EXCELLENT'),
    (50, 'GOOD'),
    (30, 'FAIR'),
    (15, 'POOR'),
]
STATUS_FLOOR_LABEL = 'CLOSED'
