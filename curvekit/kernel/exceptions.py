class CurveKitError(Exception):
    """
    This root curvekit exception is provided in case we ever want to provide common functionality
    across all curvekit exceptions.

    Expected geometric degeneracies (roots outside the domain, curvature at an inflection point, a split angle
    outside the arc) never raise; they are reported with None. These exceptions are for caller mistakes that
    can be recovered from.
    """


class QuadratureError(ValueError, CurveKitError):
    """
    Raised when a Gauss-Legendre integrator is requested for an order that has no precomputed table.
    """


class ParameterError(ValueError, CurveKitError):
    """
    Raised by GeometryParameters when a configured value cannot be converted to its declared type.

    An explanatory message naming the parameter is provided.
    """
