def normalize_confidence(value: object, default: float = 0.5) -> float:
    """Coerce a provider confidence into [0, 1].

    Values above 1 and up to 100 are read as percentages. Anything that is
    not a number (booleans included) yields ``default``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return default
    try:
        number = float(value)
    except OverflowError:
        # Integers too large for a float clamp like any other out-of-range value.
        return 1.0 if isinstance(value, int) and value > 0 else 0.0
    except ValueError:
        return default
    if number != number:  # NaN
        return default
    if 1.0 < number <= 100.0:
        number /= 100.0
    return max(0.0, min(1.0, number))
