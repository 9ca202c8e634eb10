from tracker.core.constants import DEFAULT_MAX_ACCURACY_M


def is_valid_point(
    latitude: float,
    longitude: float,
    accuracy_m: float,
    max_accuracy_m: float = DEFAULT_MAX_ACCURACY_M,
) -> bool:
    """Whether a fix is usable as a route point.

    Rejects out-of-range coordinates and fixes whose reported accuracy is
    missing (<= 0) or worse than `max_accuracy_m`.
    """
    if not (-90.0 <= latitude <= 90.0) or not (-180.0 <= longitude <= 180.0):
        return False
    return 0 < accuracy_m <= max_accuracy_m
