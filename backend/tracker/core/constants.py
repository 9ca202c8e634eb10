"""Shared tracking constants.

Centralizes values used by the filtering and calibration code so we can
document and adjust them in one place.
"""

# Mean Earth radius used by the haversine distance
EARTH_RADIUS_KM = 6371.0

# Default worst acceptable GPS accuracy for a route point (meters)
DEFAULT_MAX_ACCURACY_M = 25.0

# Minimum session length before its measurements update calibration
MIN_CALIBRATION_SESSION_MS = 30_000

# Measurement noise reported when there is nothing to derive it from
UNCALIBRATED_MEASUREMENT_NOISE = 100.0

# Scale applied to the stddev of accuracies to get measurement noise
MEASUREMENT_NOISE_SCALE = 2.0

# Nearest-rank percentile used for the accuracy summary
ACCURACY_PERCENTILE = 0.95

# Stationary pruning thresholds (meters)
STATIONARY_NOISE_M = 0.5
ROUTE_PRUNE_M = 2.0

# Auto-pause: no movement of at least this many meters for this long
AUTO_PAUSE_MIN_MOVEMENT_M = 1.0
AUTO_PAUSE_AFTER_MS = 5_000

# Heart rate zone bounds as fractions of HR max.
# Z1: [0.00, 0.50], Z2: (0.50, 0.60], ..., Z5: (0.80, 1.00]
HR_ZONE_BOUNDS = [0.0, 0.5, 0.6, 0.7, 0.8, 1.0]
HR_ZONE_NAMES = ["Rest", "Light", "Moderate", "Tempo", "Max"]

# Pace above this (min/km) is shown as "--"
MAX_DISPLAY_PACE_MIN_PER_KM = 30.0
