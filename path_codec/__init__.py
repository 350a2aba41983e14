"""
Path Codec Package.

Path file codec and spline geometry engine for a robotics motion-path
editor.  Converts in-memory paths (continuous chains of Bézier splines) to
and from line-oriented path file formats.

Subpackages:
    geometry: Vertices, control points, splines and paths
    units: Units of length and fixed-precision conversion
    configs: Format default configuration loading and validation
    sampling: Speed-annotated knot sampling along a path
    formats: Format interface, document JSON schema, LemLib v0.4 codec
    utils: Logging and YAML helpers
"""

__version__ = "0.1.0"

__all__ = ["geometry", "units", "configs", "sampling", "formats", "utils"]
