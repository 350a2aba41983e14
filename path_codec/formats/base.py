"""Format interface and the in-memory authoring document.

A :class:`Format` turns a :class:`PathFileData` document into file text and
back.  Each concrete format also supplies its default configuration, since
unit of length and speed scale are format decisions.

Number rendering
----------------
Path files are consumed by tools that print numbers the way JavaScript
does: integral values have no decimal point, there are no trailing zeros,
and negative zero prints as ``0``.  :func:`format_number` reproduces this
for the rounded values the codecs emit.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path as FsPath

from path_codec import __version__
from path_codec.configs.loader import (
    FormatConfig,
    GeneralConfig,
    OutputConfig,
    SpeedConfig,
    default_config,
    load_config,
)
from path_codec.geometry.spline import Path, make_id
from path_codec.geometry.vertex import Knot

PointSampler = Callable[[Path, GeneralConfig, SpeedConfig], Sequence[Knot]]
"""``(path, gc, sc) -> knots``: dense, speed-annotated samples along a path."""


def format_number(value: float) -> str:
    """Render *value* like JavaScript's ``String(number)``.

    Examples
    --------
    >>> format_number(5.0), format_number(2.54), format_number(-0.0)
    ('5', '2.54', '0')
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    text = repr(float(value))
    if "e" not in text:
        return text[:-2] if text.endswith(".0") else text
    # JavaScript switches to exponent notation outside [1e-7, 1e21).
    mantissa, exponent = text.split("e")
    exp = int(exponent)
    if -7 < exp < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"


@dataclass
class PathFileData:
    """Complete authoring document.

    Parameters
    ----------
    format : str
        Name of the format the document was authored for.
    gc, sc, oc : GeneralConfig, SpeedConfig, OutputConfig
        Document-wide configuration.  Paths built by the codecs reference
        these same objects.
    paths : list[Path]
        All paths in the document, in display order.
    app_version : str
        Version of the library that produced the document.
    """

    format: str
    gc: GeneralConfig
    sc: SpeedConfig
    oc: OutputConfig
    paths: list[Path] = field(default_factory=list)
    app_version: str = __version__


class Format(ABC):
    """A path file format: a name plus a decode/encode pair.

    Subclasses set :attr:`config_path` to ship their own defaults; ``None``
    uses the package defaults.
    """

    config_path: FsPath | None = None

    def __init__(self) -> None:
        self.uid = make_id(10)
        self._config: FormatConfig | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    @property
    def name(self) -> str:
        return self.get_name()

    @abstractmethod
    def get_name(self) -> str:
        """Human-readable format name, also stored in exported documents."""

    # -- Default configuration ----------------------------------------------

    @property
    def config(self) -> FormatConfig:
        if self._config is None:
            self._config = (
                default_config()
                if self.config_path is None
                else load_config(self.config_path)
            )
        return self._config

    def build_general_config(self) -> GeneralConfig:
        return self.config.gc

    def build_speed_config(self) -> SpeedConfig:
        return self.config.sc

    def build_output_config(self) -> OutputConfig:
        return self.config.oc

    def new_document(self, paths: Sequence[Path] = ()) -> PathFileData:
        """Empty (or pre-filled) document with this format's defaults."""
        return PathFileData(
            format=self.name,
            gc=self.build_general_config(),
            sc=self.build_speed_config(),
            oc=self.build_output_config(),
            paths=list(paths),
        )

    # -- Codec --------------------------------------------------------------

    @abstractmethod
    def decode(self, text: str) -> PathFileData:
        """Parse file *text* into a document.

        All-or-nothing: either a complete document is returned or a
        :class:`~path_codec.exceptions.FormatError` is raised.
        """

    @abstractmethod
    def encode(
        self,
        document: PathFileData,
        sampler: PointSampler | None = None,
        *,
        path_index: int = 0,
    ) -> str:
        """Render the selected path of *document* as file text."""
