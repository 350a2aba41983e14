"""
Knot sampling module.

Default point sampler used by format encoders.
"""

from path_codec.sampling.knots import calculate_knots

__all__ = ["calculate_knots"]
