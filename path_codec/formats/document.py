"""JSON schema for the full authoring document.

Line-oriented formats such as LemLib v0.4 cannot express headings, the
editor's unit of length, knot density or more than one path.  Exports
therefore append the complete document as one JSON line; importing that
line restores everything the format itself dropped.

Keys are camelCase on the wire to stay compatible with documents written by
the browser editor; ``from`` is a reserved word in Python and is mapped to
``from_``.

Usage::

    from path_codec.formats.document import dump_path_file_data, load_path_file_data
    text = dump_path_file_data(document)
    again = load_path_file_data(text)
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from path_codec.configs.loader import (
    GeneralConfig,
    NumberRange,
    OutputConfig,
    RangeLimit,
    SpeedConfig,
    validate_range,
)
from path_codec.exceptions import DocumentError
from path_codec.formats.base import PathFileData
from path_codec.geometry.spline import Path, Spline
from path_codec.geometry.vertex import Control, EndPointControl
from path_codec.units.converter import UnitOfLength

logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


# ============================================================================
# GEOMETRY
# ============================================================================

class ControlModel(_CamelModel):
    """Control point; ``heading`` is set only on end points."""
    x: float
    y: float
    heading: Optional[float] = None


class SplineModel(_CamelModel):
    """Spline with 2 (straight) or 4 (cubic) controls."""
    uid: str = Field(..., min_length=1)
    controls: List[ControlModel]

    @field_validator('controls')
    @classmethod
    def validate_count(cls, v: List[ControlModel]) -> List[ControlModel]:
        if len(v) not in (2, 4):
            raise ValueError(f"Spline requires 2 or 4 controls, got {len(v)}")
        return v


# ============================================================================
# CONFIGURATION
# ============================================================================

class RangeLimitModel(_CamelModel):
    value: float
    label: str


class NumberRangeModel(_CamelModel):
    min_limit: RangeLimitModel
    max_limit: RangeLimitModel
    step: float = Field(..., gt=0)
    from_: float = Field(..., alias="from")
    to: float

    @model_validator(mode='after')
    def validate_order(self) -> 'NumberRangeModel':
        if not (self.min_limit.value <= self.from_ <= self.to <= self.max_limit.value):
            raise ValueError(
                f"Range [{self.from_}, {self.to}] not within "
                f"[{self.min_limit.value}, {self.max_limit.value}]"
            )
        return self


class GeneralConfigModel(_CamelModel):
    robot_width: float = Field(..., gt=0)
    robot_height: float = Field(..., gt=0)
    show_robot: bool = True
    uol: UnitOfLength
    knot_density: float = Field(..., gt=0)
    control_magnet_distance: float = Field(0.0, ge=0)


class SpeedConfigModel(_CamelModel):
    speed_limit: NumberRangeModel
    application_range: NumberRangeModel
    transition_range: NumberRangeModel


class OutputConfigModel(BaseModel):
    """Format-specific output options, kept verbatim."""
    model_config = ConfigDict(extra="allow")


# ============================================================================
# DOCUMENT
# ============================================================================

class PathModel(_CamelModel):
    """One named path.

    ``gc``/``sc`` are present only when the path does not use the
    document-wide settings; absent means "same as the document".
    """
    uid: str = Field(..., min_length=1)
    name: str = "Path"
    gc: Optional[GeneralConfigModel] = None
    sc: Optional[SpeedConfigModel] = None
    splines: List[SplineModel] = Field(default_factory=list)


class PathFileDataModel(_CamelModel):
    """Top-level document."""
    app_version: str
    format: str
    gc: GeneralConfigModel
    sc: SpeedConfigModel
    oc: OutputConfigModel = Field(default_factory=OutputConfigModel)
    paths: List[PathModel] = Field(default_factory=list)


# ============================================================================
# CONVERSION
# ============================================================================

def _range_to_model(rng: NumberRange) -> NumberRangeModel:
    return NumberRangeModel(
        min_limit=RangeLimitModel(value=rng.min_limit.value, label=rng.min_limit.label),
        max_limit=RangeLimitModel(value=rng.max_limit.value, label=rng.max_limit.label),
        step=rng.step,
        from_=rng.from_,
        to=rng.to,
    )


def _range_from_model(name: str, m: NumberRangeModel) -> NumberRange:
    rng = NumberRange(
        min_limit=RangeLimit(value=m.min_limit.value, label=m.min_limit.label),
        max_limit=RangeLimit(value=m.max_limit.value, label=m.max_limit.label),
        step=m.step,
        from_=m.from_,
        to=m.to,
    )
    validate_range(name, rng)
    return rng


def _spline_to_model(spline: Spline) -> SplineModel:
    controls = [
        ControlModel(
            x=c.x,
            y=c.y,
            heading=c.heading if isinstance(c, EndPointControl) else None,
        )
        for c in spline.controls
    ]
    return SplineModel(uid=spline.uid, controls=controls)


def _spline_from_model(m: SplineModel) -> Spline:
    last = len(m.controls) - 1
    controls = [
        EndPointControl(c.x, c.y, c.heading or 0.0) if i in (0, last) else Control(c.x, c.y)
        for i, c in enumerate(m.controls)
    ]
    return Spline(*controls, uid=m.uid)


def _general_to_model(gc: GeneralConfig) -> GeneralConfigModel:
    return GeneralConfigModel(
        robot_width=gc.robot_width,
        robot_height=gc.robot_height,
        show_robot=gc.show_robot,
        uol=gc.uol,
        knot_density=gc.knot_density,
        control_magnet_distance=gc.control_magnet_distance,
    )


def _general_from_model(m: GeneralConfigModel) -> GeneralConfig:
    return GeneralConfig(
        robot_width=m.robot_width,
        robot_height=m.robot_height,
        show_robot=m.show_robot,
        uol=m.uol,
        knot_density=m.knot_density,
        control_magnet_distance=m.control_magnet_distance,
    )


def _speed_to_model(sc: SpeedConfig) -> SpeedConfigModel:
    return SpeedConfigModel(
        speed_limit=_range_to_model(sc.speed_limit),
        application_range=_range_to_model(sc.application_range),
        transition_range=_range_to_model(sc.transition_range),
    )


def _speed_from_model(m: SpeedConfigModel) -> SpeedConfig:
    return SpeedConfig(
        speed_limit=_range_from_model("speed_limit", m.speed_limit),
        application_range=_range_from_model("application_range", m.application_range),
        transition_range=_range_from_model("transition_range", m.transition_range),
    )


def _path_to_model(path: Path, document: PathFileData) -> PathModel:
    return PathModel(
        uid=path.uid,
        name=path.name,
        gc=_general_to_model(path.gc) if path.gc != document.gc else None,
        sc=_speed_to_model(path.sc) if path.sc != document.sc else None,
        splines=[_spline_to_model(s) for s in path.splines],
    )


def to_model(document: PathFileData) -> PathFileDataModel:
    """Convert an in-memory document to its schema model.

    A path whose settings differ from the document's carries its own
    ``gc``/``sc``, so that the settings its export was encoded with
    survive a reload.
    """
    return PathFileDataModel(
        app_version=document.app_version,
        format=document.format,
        gc=_general_to_model(document.gc),
        sc=_speed_to_model(document.sc),
        oc=OutputConfigModel(**document.oc.extras),
        paths=[_path_to_model(path, document) for path in document.paths],
    )


def from_model(model: PathFileDataModel) -> PathFileData:
    """Rebuild an in-memory document, re-checking geometry invariants.

    Paths without their own settings share the document's ``gc``/``sc``
    objects.

    Raises
    ------
    InvalidSplineShape, DiscontinuousPath
        If a spline or path violates the geometry invariants.
    ConfigError
        If a speed range is inconsistent.
    """
    gc = _general_from_model(model.gc)
    sc = _speed_from_model(model.sc)
    oc = OutputConfig(extras=dict(model.oc.model_extra or {}))
    paths = [
        Path(
            *(_spline_from_model(s) for s in p.splines),
            gc=_general_from_model(p.gc) if p.gc is not None else gc,
            sc=_speed_from_model(p.sc) if p.sc is not None else sc,
            name=p.name,
            uid=p.uid,
        )
        for p in model.paths
    ]
    return PathFileData(
        format=model.format,
        gc=gc,
        sc=sc,
        oc=oc,
        paths=paths,
        app_version=model.app_version,
    )



# ============================================================================
# PUBLIC API
# ============================================================================

def dump_path_file_data(document: PathFileData) -> str:
    """Serialize *document* to compact JSON (single line)."""
    return to_model(document).model_dump_json(by_alias=True, exclude_none=True)


def load_path_file_data(text: str) -> PathFileData:
    """Parse JSON produced by :func:`dump_path_file_data`.

    Raises
    ------
    DocumentError
        If the JSON is malformed or fails schema validation.
    """
    try:
        model = PathFileDataModel.model_validate_json(text)
    except ValidationError as e:
        raise DocumentError(f"Invalid path file data: {e}") from e
    document = from_model(model)
    logger.debug(
        "Loaded document: format=%s, %d path(s)", document.format, len(document.paths)
    )
    return document


def document_as_dict(document: PathFileData) -> dict[str, Any]:
    """JSON-compatible dict of *document* (camelCase keys)."""
    return to_model(document).model_dump(mode="json", by_alias=True, exclude_none=True)
