"""
Table schemas for the three Camtrap DP 1.0 tables and header validation.

**Conceptual**: This module defines the "data contracts" of a Camtrap DP
package: for deployments.csv, media.csv and observations.csv, the ordered
list of columns, each with its field kind, required flag and constraints,
plus the whole-record invariants a row must satisfy once every field has
decoded.

**Schema philosophy**:
  - Column order is the order written on output. On input, columns are
    matched by name, so any order is accepted.
  - Missing required columns are fatal for the whole table (SchemaError).
  - Unknown columns are ignored by default, since Camtrap DP allows
    extension columns. `strict_columns=True` rejects them instead.
  - Optional columns absent from the header decode as None.

Schemas are plain module-level values passed explicitly to the reader and
writer; nothing is registered globally.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Sequence

from camtrap_dp.data.codecs import FieldKind, FieldSpec
from camtrap_dp.data.errors import SchemaError, SchemaErrorKind
from camtrap_dp.data.models import (
    CameraSetupType,
    CaptureMethod,
    ClassificationMethod,
    Deployment,
    FeatureType,
    LifeStage,
    Medium,
    Observation,
    ObservationLevel,
    ObservationType,
    Sex,
)


class RecordKind(str, Enum):
    """The three Camtrap DP tables. Values are the resource names."""
    DEPLOYMENT = "deployments"
    MEDIUM = "media"
    OBSERVATION = "observations"


@dataclass(frozen=True)
class Invariant:
    """
    Whole-record rule checked after all fields of a row decoded.

    Attributes:
        columns: Columns the rule involves (used to label the error).
        check: Returns None when the record satisfies the rule, else a
               description of the violation.
    """
    columns: tuple[str, ...]
    check: Callable[[object], Optional[str]]

    @property
    def label(self) -> str:
        return "/".join(self.columns)


@dataclass(frozen=True)
class TableSchema:
    """
    Ordered column specification for one record kind.

    Attributes:
        kind: RecordKind of the table.
        record_type: Dataclass rows decode into.
        fields: Column specifications in canonical output order.
        invariants: Whole-record rules.
    """
    kind: RecordKind
    record_type: type
    fields: tuple[FieldSpec, ...]
    invariants: tuple[Invariant, ...] = ()

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def file_name(self) -> str:
        """Conventional file name of the table inside a package ("deployments.csv")."""
        return f"{self.kind.value}.csv"

    @property
    def column_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def required_columns(self) -> list[str]:
        return [f.name for f in self.fields if f.required]

    def column(self, name: str) -> FieldSpec:
        """Look up a column specification by column name."""
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.name} has no column '{name}'. Columns: {self.column_names}")


def validate_header(
    columns: Sequence[str],
    schema: TableSchema,
    strict_columns: bool = False,
    context: Optional[str] = None,
) -> None:
    """
    Validate a table header against a schema.

    **Functionally**:
      - Every required column of the schema must be present (any order).
      - No column name may appear twice.
      - Columns not in the schema are ignored, unless strict_columns=True.

    Args:
        columns: Column names from the header row.
        schema: Table schema to validate against.
        strict_columns: Reject columns the schema does not define.
        context: Optional source description included in error messages.

    Raises:
        SchemaError: MISSING_COLUMN listing every missing required column,
                     DUPLICATE_COLUMN listing every repeated column, or
                     UNEXPECTED_COLUMN listing every unknown column.
    """
    present = set(columns)

    seen = set()
    duplicates = []
    for name in columns:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    if duplicates:
        raise SchemaError(SchemaErrorKind.DUPLICATE_COLUMN, duplicates, columns, context=context)

    missing = [name for name in schema.required_columns if name not in present]
    if missing:
        raise SchemaError(SchemaErrorKind.MISSING_COLUMN, missing, columns, context=context)

    if strict_columns:
        known = set(schema.column_names)
        unexpected = [name for name in columns if name not in known]
        if unexpected:
            raise SchemaError(SchemaErrorKind.UNEXPECTED_COLUMN, unexpected, columns, context=context)


# ============================================================================
# Invariants
# ============================================================================

def _not_after(start: Optional[datetime], end: Optional[datetime], start_name: str, end_name: str) -> Optional[str]:
    if start is None or end is None:
        return None
    if (start.utcoffset() is None) != (end.utcoffset() is None):
        return f"{start_name} and {end_name} must both have or both lack a timezone designator"
    if start > end:
        return f"{start_name} ({start.isoformat()}) is after {end_name} ({end.isoformat()})"
    return None


def _deployment_period(record: Deployment) -> Optional[str]:
    return _not_after(record.deployment_start, record.deployment_end, "deploymentStart", "deploymentEnd")


def _observation_event_period(record: Observation) -> Optional[str]:
    return _not_after(record.event_start, record.event_end, "eventStart", "eventEnd")


def _observation_reference(record: Observation) -> Optional[str]:
    if record.media_id is None and record.deployment_id is None:
        return "at least one of mediaID or deploymentID is required"
    return None


# ============================================================================
# Table schemas
# ============================================================================

def _spec(name, attribute, kind, required=False, **constraints) -> FieldSpec:
    return FieldSpec(name=name, attribute=attribute, kind=kind, required=required, **constraints)


# Relative path that does not start with '.', '/' or '~' and has no '..', or a URL
FILE_PATH_PATTERN = re.compile(r"^(?=^[^./~])(^((?!\.{2}).)*$).*$")
MEDIATYPE_PATTERN = re.compile(r"^(image|video|audio)/.*$")


DEPLOYMENTS = TableSchema(
    kind=RecordKind.DEPLOYMENT,
    record_type=Deployment,
    fields=(
        _spec("deploymentID", "deployment_id", FieldKind.STRING, required=True),
        _spec("locationID", "location_id", FieldKind.STRING),
        _spec("locationName", "location_name", FieldKind.STRING),
        _spec("latitude", "latitude", FieldKind.FLOAT, required=True, minimum=-90, maximum=90),
        _spec("longitude", "longitude", FieldKind.FLOAT, required=True, minimum=-180, maximum=180),
        _spec("coordinateUncertainty", "coordinate_uncertainty", FieldKind.INTEGER, minimum=1),
        _spec("deploymentStart", "deployment_start", FieldKind.DATETIME, required=True),
        _spec("deploymentEnd", "deployment_end", FieldKind.DATETIME, required=True),
        _spec("setupBy", "setup_by", FieldKind.STRING),
        _spec("cameraID", "camera_id", FieldKind.STRING),
        _spec("cameraModel", "camera_model", FieldKind.STRING),
        _spec("cameraDelay", "camera_delay", FieldKind.INTEGER, minimum=0),
        _spec("cameraHeight", "camera_height", FieldKind.FLOAT, minimum=0),
        _spec("cameraDepth", "camera_depth", FieldKind.FLOAT, minimum=0),
        _spec("cameraTilt", "camera_tilt", FieldKind.INTEGER, minimum=-90, maximum=90),
        _spec("cameraHeading", "camera_heading", FieldKind.INTEGER, minimum=0, maximum=360),
        _spec("detectionDistance", "detection_distance", FieldKind.FLOAT, minimum=0),
        _spec("timestampIssues", "timestamp_issues", FieldKind.BOOLEAN),
        _spec("baitUse", "bait_use", FieldKind.BOOLEAN),
        _spec("featureType", "feature_type", FieldKind.ENUM, enum=FeatureType),
        _spec("habitat", "habitat", FieldKind.STRING),
        _spec("deploymentGroups", "deployment_groups", FieldKind.LIST),
        _spec("deploymentTags", "deployment_tags", FieldKind.LIST),
        _spec("deploymentComments", "deployment_comments", FieldKind.STRING),
    ),
    invariants=(
        Invariant(("deploymentStart", "deploymentEnd"), _deployment_period),
    ),
)


MEDIA = TableSchema(
    kind=RecordKind.MEDIUM,
    record_type=Medium,
    fields=(
        _spec("mediaID", "media_id", FieldKind.STRING, required=True),
        _spec("deploymentID", "deployment_id", FieldKind.STRING, required=True),
        _spec("captureMethod", "capture_method", FieldKind.ENUM, enum=CaptureMethod),
        _spec("timestamp", "timestamp", FieldKind.DATETIME, required=True),
        _spec("filePath", "file_path", FieldKind.STRING, required=True, pattern=FILE_PATH_PATTERN),
        _spec("filePublic", "file_public", FieldKind.BOOLEAN, required=True),
        _spec("fileName", "file_name", FieldKind.STRING),
        _spec("fileMediatype", "file_mediatype", FieldKind.STRING, required=True, pattern=MEDIATYPE_PATTERN),
        _spec("exifData", "exif_data", FieldKind.JSON),
        _spec("favorite", "favorite", FieldKind.BOOLEAN),
        _spec("mediaComments", "media_comments", FieldKind.STRING),
    ),
)


OBSERVATIONS = TableSchema(
    kind=RecordKind.OBSERVATION,
    record_type=Observation,
    fields=(
        _spec("observationID", "observation_id", FieldKind.STRING, required=True),
        _spec("deploymentID", "deployment_id", FieldKind.STRING),
        _spec("mediaID", "media_id", FieldKind.STRING),
        _spec("eventID", "event_id", FieldKind.STRING),
        _spec("eventStart", "event_start", FieldKind.DATETIME),
        _spec("eventEnd", "event_end", FieldKind.DATETIME),
        _spec("observationLevel", "observation_level", FieldKind.ENUM, required=True, enum=ObservationLevel),
        _spec("observationType", "observation_type", FieldKind.ENUM, required=True, enum=ObservationType),
        _spec("cameraSetupType", "camera_setup_type", FieldKind.ENUM, enum=CameraSetupType),
        _spec("scientificName", "scientific_name", FieldKind.STRING),
        _spec("count", "count", FieldKind.INTEGER, minimum=1),
        _spec("lifeStage", "life_stage", FieldKind.ENUM, enum=LifeStage),
        _spec("sex", "sex", FieldKind.ENUM, enum=Sex),
        _spec("behavior", "behavior", FieldKind.LIST),
        _spec("individualID", "individual_id", FieldKind.STRING),
        _spec("individualPositionRadius", "individual_position_radius", FieldKind.FLOAT, minimum=0),
        _spec("individualPositionAngle", "individual_position_angle", FieldKind.FLOAT, minimum=-90, maximum=90),
        _spec("individualSpeed", "individual_speed", FieldKind.FLOAT, minimum=0),
        _spec("bboxX", "bbox_x", FieldKind.FLOAT, minimum=0, maximum=1),
        _spec("bboxY", "bbox_y", FieldKind.FLOAT, minimum=0, maximum=1),
        _spec("bboxWidth", "bbox_width", FieldKind.FLOAT, minimum=1e-15, maximum=1),
        _spec("bboxHeight", "bbox_height", FieldKind.FLOAT, minimum=1e-15, maximum=1),
        _spec("classificationMethod", "classification_method", FieldKind.ENUM, enum=ClassificationMethod),
        _spec("classifiedBy", "classified_by", FieldKind.STRING),
        _spec("classificationTimestamp", "classification_timestamp", FieldKind.DATETIME),
        _spec("classificationProbability", "classification_probability", FieldKind.FLOAT, minimum=0, maximum=1),
        _spec("observationTags", "observation_tags", FieldKind.LIST),
        _spec("observationComments", "observation_comments", FieldKind.STRING),
    ),
    invariants=(
        Invariant(("mediaID", "deploymentID"), _observation_reference),
        Invariant(("eventStart", "eventEnd"), _observation_event_period),
    ),
)


SCHEMAS = {
    RecordKind.DEPLOYMENT: DEPLOYMENTS,
    RecordKind.MEDIUM: MEDIA,
    RecordKind.OBSERVATION: OBSERVATIONS,
}


def schema_for(kind: RecordKind | str) -> TableSchema:
    """
    Return the schema of a record kind.

    Args:
        kind: RecordKind or its resource name ("deployments", "media", "observations").

    Raises:
        ValueError: If the name is not a Camtrap DP table.
    """
    try:
        return SCHEMAS[RecordKind(kind)]
    except ValueError:
        raise ValueError(
            f"Unknown table '{kind}'. Expected one of: {[k.value for k in RecordKind]}"
        )
