"""
Student-t distribution helpers written without a statistics library.

    P(T <= t) = 1 - 0.5 * I_x(df/2, 1/2)   for t >= 0,  x = df / (df + t^2)
    P(T <= t) = 0.5 * I_x(df/2, 1/2)       for t < 0

I_x is the regularized incomplete beta function, evaluated with a continued
fraction (modified Lentz) on top of a Lanczos log-gamma.
"""
from __future__ import annotations

import math

# Continued fraction controls
MAX_ITERATIONS = 100
EPSILON = 3e-7
FPMIN = 1e-30

# Lanczos approximation, g = 7, n = 9
LANCZOS_G = 7
LANCZOS_COEFFICIENTS = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)


def log_gamma(z: float) -> float:
    """ln(Gamma(z)); arguments below 0.5 go through the reflection formula."""
    if z < 0.5:
        return math.log(math.pi) - math.log(math.sin(math.pi * z)) - log_gamma(1 - z)

    z -= 1
    x = LANCZOS_COEFFICIENTS[0]
    for i in range(1, LANCZOS_G + 2):
        x += LANCZOS_COEFFICIENTS[i] / (z + i)
    t = z + LANCZOS_G + 0.5
    return 0.5 * math.log(2 * math.pi) + (z + 0.5) * math.log(t) - t + math.log(x)


def _floor(value: float) -> float:
    return FPMIN if abs(value) < FPMIN else value


def beta_continued_fraction(a: float, b: float, x: float) -> float:
    """Continued fraction for the incomplete beta function (Lentz's method)."""
    qab = a + b
    qap = a + 1
    qam = a - 1
    c = 1.0
    d = 1 / _floor(1 - qab * x / qap)
    h = d

    for m in range(1, MAX_ITERATIONS + 1):
        m2 = 2 * m

        # even step
        aa = m * (b - m) * x / ((qam + m2) * (a + m2))
        d = 1 / _floor(1 + aa * d)
        c = _floor(1 + aa / c)
        h *= d * c

        # odd step
        aa = -(a + m) * (qab + m) * x / ((a + m2) * (qap + m2))
        d = 1 / _floor(1 + aa * d)
        c = _floor(1 + aa / c)
        delta = d * c
        h *= delta

        if abs(delta - 1.0) < EPSILON:
            break

    return h


def regularized_incomplete_beta(x: float, a: float, b: float) -> float:
    """I_x(a, b) for 0 <= x <= 1."""
    if x <= 0:
        return 0.0
    if x >= 1:
        return 1.0

    bt = math.exp(
        log_gamma(a + b) - log_gamma(a) - log_gamma(b)
        + a * math.log(x)
        + b * math.log(1 - x)
    )

    # The fraction converges fastest on this side of the mean.
    if x < (a + 1) / (a + b + 2):
        return bt * beta_continued_fraction(a, b, x) / a
    return 1 - bt * beta_continued_fraction(b, a, 1 - x) / b


def student_t_cdf(t: float, df: float) -> float:
    """P(T <= t) for Student's t with df degrees of freedom (0.5 on invalid input)."""
    if not math.isfinite(t) or not math.isfinite(df) or df <= 0:
        return 0.5
    x = df / (df + t * t)
    ib = regularized_incomplete_beta(x, df / 2, 0.5)
    if t >= 0:
        return 1 - 0.5 * ib
    return 0.5 * ib


def two_tailed_p_value(t: float, df: float) -> float:
    cdf = student_t_cdf(t, df)
    p_value = 2 * min(cdf, 1 - cdf)
    return max(0.0, min(1.0, p_value))
