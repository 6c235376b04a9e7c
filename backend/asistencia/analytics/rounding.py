from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def round2(value: float | int | Decimal | None) -> float:
    """Half-up rounding at 2 decimals. ``None`` counts as 0."""
    if value is None:
        return 0.0
    # str() avoids binary artefacts such as 1.005 -> 1.00499999...
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def percentage(
    numerator: float | int,
    denominator: float | int,
    *,
    clamp: bool = True,
) -> float:
    """numerator / denominator × 100, rounded; 0 when the denominator is not positive."""
    if not denominator or denominator <= 0:
        return 0.0
    value = numerator / denominator * 100
    if clamp:
        value = min(100.0, max(0.0, value))
    return round2(value)
