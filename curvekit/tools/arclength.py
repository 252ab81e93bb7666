"""
Approximate arc length parametrization.

Implemented using M. Walter, A. Fournier, Approximate Arc Length Parametrization, Anais do IX SIBGRAPHI,
p. 143--150, 1996, see https://www.visgraf.impa.br/sibgrapi96/trabs/pdf/a14.pdf

A speed function (the norm of the derivative of a curve) is integrated at a few fractions of its domain and a
polynomial is fitted through those samples. The forward map takes the curve parameter to the length travelled,
the inverse maps take a length back to the curve parameter, which permits sampling a curve at equal distances.
The accuracy is empirical, and a map is only valid within the domain it was built for.
"""
from curvekit.tools.bezier import cubic_bezier_deriv
from curvekit.tools.ellipse import ellipse_deriv
from curvekit.tools.quadrature import (
    BISECTION_MAX_ITERATIONS,
    BISECTION_TOLERANCE,
    bisection_method,
    gauss_legendre5,
)


class ArcLengthMap:
    """
    Immutable polynomial y = sum(c_i * u^i) where u is the input rescaled by the map.

    Forward maps take x in [xmin, xmax] and rescale it to u in [0, 1]. Inverse maps take the length y directly
    and rescale the polynomial result back into [xmin, xmax].
    """

    __slots__ = ("_coefficients", "_xmin", "_xmax", "_length", "_inverse")

    def __init__(self, coefficients, xmin, xmax, length, inverse=False):
        self._coefficients = tuple(coefficients)
        self._xmin = xmin
        self._xmax = xmax
        self._length = length
        self._inverse = inverse

    def __repr__(self):
        return (
            f"ArcLengthMap({self._coefficients!r}, {self._xmin!r}, {self._xmax!r}, "
            f"length={self._length!r}, inverse={self._inverse!r})"
        )

    def __call__(self, value):
        if self._inverse:
            return self._xmin + (self._xmax - self._xmin) * self._evaluate(value)
        return self._evaluate((value - self._xmin) / (self._xmax - self._xmin))

    def _evaluate(self, u):
        # Horner, the constant term is always zero.
        y = 0.0
        for c in reversed(self._coefficients):
            y = (y + c) * u
        return y

    @property
    def coefficients(self):
        """Coefficients of u, u^2, ... in that order."""
        return self._coefficients

    @property
    def domain(self):
        return self._xmin, self._xmax

    @property
    def length(self):
        return self._length

    @property
    def inverse(self):
        return self._inverse

    @property
    def degree(self):
        return len(self._coefficients)


def polynomial_approx3(integrate, speed, xmin, xmax):
    """
    Map from the parameter x in [xmin, xmax] to the integral of speed. For a circle xmin and xmax would be 0 and
    2*pi respectively for example. The total length of the curve is available as the map's length.
    """
    y1 = integrate(speed, xmin, xmin + (xmax - xmin) * 1.0 / 3.0)
    y2 = integrate(speed, xmin, xmin + (xmax - xmin) * 2.0 / 3.0)
    y3 = integrate(speed, xmin, xmax)

    # We have four points on the y(x) curve at x0=0, x1=1/3, x2=2/3 and x3=1
    # y(x) = a*x^3 + b*x^2 + c*x + d  (NB: y0 = d = 0)
    # [y1; y2; y3] = [1/27, 1/9, 1/3;
    #                 8/27, 4/9, 2/3;
    #                    1,   1,   1] * [a; b; c]
    #
    # After inverting:
    # [a; b; c] = 0.5 * [ 27, -27,  9;
    #                    -45,  36, -9;
    #                     18,  -9,  2] * [y1; y2; y3]
    a = 13.5 * y1 - 13.5 * y2 + 4.5 * y3
    b = -22.5 * y1 + 18.0 * y2 - 4.5 * y3
    c = 9.0 * y1 - 4.5 * y2 + y3
    return ArcLengthMap((c, b, a), xmin, xmax, abs(y3))


def _length_from_start(integrate, speed, xmin, xmax):
    def f(x):
        return abs(integrate(speed, xmin, xmin + (xmax - xmin) * x))

    return f


def inv_polynomial_approx3(
    integrate,
    speed,
    xmin,
    xmax,
    max_iterations=BISECTION_MAX_ITERATIONS,
    tolerance=BISECTION_TOLERANCE,
):
    """
    Opposite of polynomial_approx3, maps the length y in [0, length] to x in [xmin, xmax].

    The samples of x are found by bisection, limited to max_iterations and stopping within the relative
    tolerance, see bisection_method().
    """
    f = _length_from_start(integrate, speed, xmin, xmax)
    y3 = f(1.0)
    if y3 == 0.0:
        return ArcLengthMap((0.0, 0.0, 0.0), xmin, xmax, 0.0, inverse=True)
    x1 = bisection_method(f, (1.0 / 3.0) * y3, 0.0, 1.0, max_iterations, tolerance)
    x2 = bisection_method(f, (2.0 / 3.0) * y3, 0.0, 1.0, max_iterations, tolerance)
    x3 = 1.0

    # Same system as the forward map, now with x(y) and the samples at y3/3, 2*y3/3 and y3.
    # [a*y3^3; b*y3^2; c*y3] = 0.5 * [ 27, -27,  9;
    #                                 -45,  36, -9;
    #                                  18,  -9,  2] * [x1; x2; x3]
    a = (27.0 * x1 - 27.0 * x2 + 9.0 * x3) / (2.0 * y3 * y3 * y3)
    b = (-45.0 * x1 + 36.0 * x2 - 9.0 * x3) / (2.0 * y3 * y3)
    c = (18.0 * x1 - 9.0 * x2 + 2.0 * x3) / (2.0 * y3)
    return ArcLengthMap((c, b, a), xmin, xmax, y3, inverse=True)


def inv_polynomial_approx4(
    integrate,
    speed,
    xmin,
    xmax,
    max_iterations=BISECTION_MAX_ITERATIONS,
    tolerance=BISECTION_TOLERANCE,
):
    """
    Quartic version of inv_polynomial_approx3, one more bisection for a closer fit.
    """
    f = _length_from_start(integrate, speed, xmin, xmax)
    y4 = f(1.0)
    if y4 == 0.0:
        return ArcLengthMap((0.0, 0.0, 0.0, 0.0), xmin, xmax, 0.0, inverse=True)
    x1 = bisection_method(f, (1.0 / 4.0) * y4, 0.0, 1.0, max_iterations, tolerance)
    x2 = bisection_method(f, (2.0 / 4.0) * y4, 0.0, 1.0, max_iterations, tolerance)
    x3 = bisection_method(f, (3.0 / 4.0) * y4, 0.0, 1.0, max_iterations, tolerance)
    x4 = 1.0

    # Five points on the x(y) curve at y0=0, y1=1/4, y2=2/4, y3=3/4 and y4=1
    # x(y) = a*y^4 + b*y^3 + c*y^2 + d*y + e  (NB: x0 = e = 0)
    # [x1; x2; x3; x4] = [1/256,  1/64, 1/16, 1/4;
    #                      1/16,   1/8,  1/4, 1/2;
    #                    81/256, 27/64, 9/16, 3/4;
    #                         1,     1,    1,   1] * [a*y4^4; b*y4^3; c*y4^2; d*y4]
    #
    # After inverting:
    # [a*y4^4; b*y4^3; c*y4^2; d*y4] = 1/3 * [-128,  192, -128,  32;
    #                                          288, -384,  224, -48;
    #                                         -208,  228, -112,  22;
    #                                           48,  -36,   16,  -3] * [x1; x2; x3; x4]
    a = (-128.0 * x1 + 192.0 * x2 - 128.0 * x3 + 32.0 * x4) / (3.0 * y4**4)
    b = (288.0 * x1 - 384.0 * x2 + 224.0 * x3 - 48.0 * x4) / (3.0 * y4**3)
    c = (-208.0 * x1 + 228.0 * x2 - 112.0 * x3 + 22.0 * x4) / (3.0 * y4**2)
    d = (48.0 * x1 - 36.0 * x2 + 16.0 * x3 - 3.0 * x4) / (3.0 * y4)
    return ArcLengthMap((d, c, b, a), xmin, xmax, y4, inverse=True)


def cubic_bezier_length_map(
    p0,
    p1,
    p2,
    p3,
    inverse=True,
    integrate=gauss_legendre5,
    max_iterations=BISECTION_MAX_ITERATIONS,
    tolerance=BISECTION_TOLERANCE,
):
    """
    Arc length map of a cubic Bézier over t in [0, 1]. The inverse map (the default) takes a length along the
    curve to the parameter t found there. max_iterations and tolerance are the bisection budget of the inverse.
    """
    def speed(t):
        return cubic_bezier_deriv(p0, p1, p2, p3, t).length()

    if inverse:
        return inv_polynomial_approx4(integrate, speed, 0.0, 1.0, max_iterations, tolerance)
    return polynomial_approx3(integrate, speed, 0.0, 1.0)


def ellipse_length_map(
    rx,
    ry,
    theta1,
    theta2,
    inverse=True,
    integrate=gauss_legendre5,
    max_iterations=BISECTION_MAX_ITERATIONS,
    tolerance=BISECTION_TOLERANCE,
):
    """
    Arc length map of an elliptical arc over the angle range theta1 to theta2. Rotation and center do not change
    lengths so they are not needed.
    """
    def speed(theta):
        return ellipse_deriv(rx, ry, 0.0, True, theta).length()

    if inverse:
        return inv_polynomial_approx4(integrate, speed, theta1, theta2, max_iterations, tolerance)
    return polynomial_approx3(integrate, speed, theta1, theta2)
