"""
Membership functions used to fuzzify crisp inputs.

Each function maps a crisp value to a degree of membership in [0, 1] for one
of the four supported shapes: triangular, trapezoidal, saturation (shoulder)
and Gaussian. The functions are pure and stateless; invalid shape parameters
raise ValueError instead of producing NaN or a silent zero.
"""

import math


def triangular(left: float, center: float, right: float, x: float) -> float:
    """
    Calculates the membership degree for a triangular function.

    Args:
        left (float): Left foot of the triangle (membership 0).
        center (float): Peak of the triangle (membership 1).
        right (float): Right foot of the triangle (membership 0).
        x (float): The crisp input value.

    Returns:
        float: The degree of membership, from 0.0 to 1.0.
    """
    if not left <= center <= right:
        raise ValueError(f"Invalid triangle params [{left}, {center}, {right}]")

    if x <= left or x >= right:
        return 0.0
    # left half rt triangle
    elif left < x <= center:
        return (x - left) / (center - left) if center - left > 0 else 1.0
    # right half rt triangle
    elif center < x < right:
        return (right - x) / (right - center) if right - center > 0 else 1.0
    return 0.0


def trapezoidal(
    low_left: float, up_left: float, up_right: float, low_right: float, x: float
) -> float:
    """
    Calculates the membership degree for a trapezoidal function.

    Args:
        low_left (float): Left base corner (membership 0).
        up_left (float): Start of the plateau (membership 1).
        up_right (float): End of the plateau (membership 1).
        low_right (float): Right base corner (membership 0).
        x (float): The crisp input value.

    Returns:
        float: Degree of membership (0.0 to 1.0)
    """
    if not (low_left <= up_left <= up_right <= low_right):
        raise ValueError(
            f"Invalid trapezoid params [{low_left}, {up_left}, {up_right}, {low_right}]"
        )

    if x <= low_left or x >= low_right:
        return 0.0
    elif up_left <= x <= up_right:
        return 1.0
    elif low_left < x < up_left:
        return (x - low_left) / (up_left - low_left)
    elif up_right < x < low_right:
        return (low_right - x) / (low_right - up_right)
    return 0.0


def saturation(up: float, down: float, x: float) -> float:
    """
    Calculates the membership degree for a saturation (shoulder) function.

    The ramp direction follows the order of the two limits. When ``up < down``
    the set is a left shoulder: full membership up to ``up``, none from
    ``down`` on. Otherwise it is a right shoulder: full membership from ``up``
    on, none up to ``down``.

    Args:
        up (float): Limit where membership saturates at 1.
        down (float): Limit where membership drops to 0.
        x (float): The crisp input value.

    Returns:
        float: Degree of membership (0.0 to 1.0)
    """
    if up < down:
        if x <= up:
            return 1.0
        elif x >= down:
            return 0.0
        return (down - x) / (down - up)

    if x >= up:
        return 1.0
    elif x <= down:
        return 0.0
    return (x - down) / (up - down)


def gaussian(center: float, width: float, x: float) -> float:
    """
    Calculates the membership degree for a Gaussian function.

    The curve is ``exp(-((x - center) / sqrt(2 * width)) ** 2)``, so ``width``
    plays the role of the variance.

    Args:
        center (float): Center of the bell curve.
        width (float): Spread of the bell curve; must be positive.
        x (float): The crisp input value.

    Returns:
        float: Degree of membership in (0.0, 1.0].
    """
    if width <= 0:
        raise ValueError(f"Invalid gaussian width {width}; must be > 0")
    return math.exp(-(((x - center) / math.sqrt(2.0 * width)) ** 2))
