from typing import Dict

from curvekit.kernel.exceptions import ParameterError
from curvekit.tools import arclength, ellipse, flatten
from curvekit.tools.quadrature import gauss_legendre

INT_PARAMETERS = (
    "arc_beziers",
    "arc_segments",
    "quadrature_order",
    "bisection_iterations",
)

FLOAT_PARAMETERS = (
    "tolerance",
    "min_step",
    "bisection_tolerance",
)

DEFAULTS = {
    "tolerance": 0.01,
    "min_step": 1e-5,
    "arc_beziers": 16,
    "arc_segments": 64,
    "quadrature_order": 5,
    "bisection_iterations": 100,
    "bisection_tolerance": 0.001,
}


class GeometryParameters:
    """
    GeometryParameters is a helper class which seeks to normalize, validate, and extract values from an underlying
    dictionary of geometry settings: the flatness tolerance, the minimum parameter step of the flattener, the fixed
    subdivision counts used for elliptical arcs and the quadrature / bisection budgets.

    The dictionary is the primary storage, so values read from a settings file as strings can be placed in it
    directly and converted with validate(). Keys outside the scope of this class are kept and ignored.

    The geometry operations taking these values are available as methods which apply them, so a configured
    application flattens, strokes and measures with:

        params = GeometryParameters.from_settings(settings)
        path = params.flatten_cubic_bezier(p0, p1, p2, p3)
    """

    def __init__(self, settings: Dict = None, **kwargs):
        self.settings = settings
        if self.settings is None:
            self.settings = dict()
        self.settings.update(kwargs)

    def __repr__(self):
        return f"GeometryParameters({self.derive()!r})"

    @classmethod
    def from_settings(cls, settings, section="geometry"):
        """
        Build parameters from the given section of a kernel Settings object.
        """
        params = cls(settings.read_persistent_string_dict(section, suffix=True))
        params.validate()
        return params

    def to_settings(self, settings, section="geometry"):
        settings.write_persistent_dict(section, self.derive())

    def derive(self):
        derived_dict = dict(self.settings)
        for attr in DEFAULTS:
            derived_dict[attr] = getattr(self, attr)
        return derived_dict

    def validate(self):
        settings = self.settings
        try:
            for v in FLOAT_PARAMETERS:
                if v in settings:
                    settings[v] = float(settings[v])
            for v in INT_PARAMETERS:
                if v in settings:
                    settings[v] = int(float(settings[v]))
        except (TypeError, ValueError) as e:
            raise ParameterError(f"Invalid value for '{v}': {settings[v]!r}") from e
        if "quadrature_order" in settings and settings["quadrature_order"] not in (
            3,
            5,
            7,
        ):
            raise ParameterError(
                f"Invalid value for 'quadrature_order': {settings['quadrature_order']!r}"
            )

    def integrator(self):
        """Gauss-Legendre integrator of the configured order."""
        return gauss_legendre(self.quadrature_order)

    def flatten_cubic_bezier(self, p0, p1, p2, p3, path=None):
        return flatten.flatten_cubic_bezier(
            p0, p1, p2, p3, self.tolerance, path=path, min_step=self.min_step
        )

    def stroke_cubic_bezier(self, p0, p1, p2, p3, d, path=None):
        return flatten.stroke_cubic_bezier(
            p0, p1, p2, p3, d, self.tolerance, path=path, min_step=self.min_step
        )

    def flatten_quadratic_bezier(self, p0, p1, p2, path=None):
        return flatten.flatten_quadratic_bezier(
            p0, p1, p2, self.tolerance, path=path, min_step=self.min_step
        )

    def stroke_quadratic_bezier(self, p0, p1, p2, d, path=None):
        return flatten.stroke_quadratic_bezier(
            p0, p1, p2, d, self.tolerance, path=path, min_step=self.min_step
        )

    def ellipse_to_beziers(self, start, rx, ry, phi, large_arc, sweep, end, path=None):
        return ellipse.ellipse_to_beziers(
            start, rx, ry, phi, large_arc, sweep, end, path=path, segments=self.arc_beziers
        )

    def flatten_ellipse(self, start, rx, ry, phi, large_arc, sweep, end, path=None):
        return ellipse.flatten_ellipse(
            start,
            rx,
            ry,
            phi,
            large_arc,
            sweep,
            end,
            path=path,
            segments_per_turn=self.arc_segments,
        )

    def cubic_bezier_length_map(self, p0, p1, p2, p3, inverse=True):
        return arclength.cubic_bezier_length_map(
            p0,
            p1,
            p2,
            p3,
            inverse=inverse,
            integrate=self.integrator(),
            max_iterations=self.bisection_iterations,
            tolerance=self.bisection_tolerance,
        )

    def ellipse_length_map(self, rx, ry, theta1, theta2, inverse=True):
        return arclength.ellipse_length_map(
            rx,
            ry,
            theta1,
            theta2,
            inverse=inverse,
            integrate=self.integrator(),
            max_iterations=self.bisection_iterations,
            tolerance=self.bisection_tolerance,
        )

    @property
    def tolerance(self):
        return self.settings.get("tolerance", DEFAULTS["tolerance"])

    @tolerance.setter
    def tolerance(self, value):
        self.settings["tolerance"] = value

    @property
    def min_step(self):
        return self.settings.get("min_step", DEFAULTS["min_step"])

    @min_step.setter
    def min_step(self, value):
        self.settings["min_step"] = value

    @property
    def arc_beziers(self):
        return self.settings.get("arc_beziers", DEFAULTS["arc_beziers"])

    @arc_beziers.setter
    def arc_beziers(self, value):
        self.settings["arc_beziers"] = value

    @property
    def arc_segments(self):
        return self.settings.get("arc_segments", DEFAULTS["arc_segments"])

    @arc_segments.setter
    def arc_segments(self, value):
        self.settings["arc_segments"] = value

    @property
    def quadrature_order(self):
        return self.settings.get("quadrature_order", DEFAULTS["quadrature_order"])

    @quadrature_order.setter
    def quadrature_order(self, value):
        self.settings["quadrature_order"] = value

    @property
    def bisection_iterations(self):
        return self.settings.get(
            "bisection_iterations", DEFAULTS["bisection_iterations"]
        )

    @bisection_iterations.setter
    def bisection_iterations(self, value):
        self.settings["bisection_iterations"] = value

    @property
    def bisection_tolerance(self):
        return self.settings.get(
            "bisection_tolerance", DEFAULTS["bisection_tolerance"]
        )

    @bisection_tolerance.setter
    def bisection_tolerance(self, value):
        self.settings["bisection_tolerance"] = value
