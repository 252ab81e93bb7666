"""
curvekit: the mathematical core of a 2D vector path library.

Quadratic and cubic Bézier and elliptical arc geometry, approximate arc length parametrization and the adaptive
flattener / stroker turning curves into polylines within a flatness tolerance. See curvekit.tools.
"""

__version__ = "0.3.0"
