"""
Typed records and controlled vocabularies of Camtrap DP 1.0.

**Conceptual**: A Camtrap DP package holds three tables, each row of which
becomes one immutable record here:

  - Deployment: one placement of a camera trap at a location for a time span.
  - Medium: one image/video/audio file recorded during a deployment.
  - Observation: one classification derived from a medium or an event.

Records are frozen dataclasses. Absent optional values are None; pipe
separated list columns (tags, groups, behavior) are tuples of strings. To
correct a record, build a new one with `dataclasses.replace` and put it in
place of the old one in the caller's collection.

Tables reference each other by identifier only (Medium.deployment_id,
Observation.media_id / deployment_id). Nothing here enforces those links;
see `camtrap_dp.data.integrity` for post-load checks.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


# ============================================================================
# Controlled vocabularies
# ============================================================================

class FeatureType(str, Enum):
    """Type of the feature (if any) associated with a deployment."""
    ROAD_PAVED = "roadPaved"
    ROAD_DIRT = "roadDirt"
    TRAIL_HIKING = "trailHiking"
    TRAIL_GAME = "trailGame"
    ROAD_UNDERPASS = "roadUnderpass"
    ROAD_OVERPASS = "roadOverpass"
    ROAD_BRIDGE = "roadBridge"
    CULVERT = "culvert"
    BURROW = "burrow"
    NEST_SITE = "nestSite"
    CARCASS = "carcass"
    WATER_SOURCE = "waterSource"
    FRUITING_TREE = "fruitingTree"


class CaptureMethod(str, Enum):
    """Method used to capture a media file."""
    ACTIVITY_DETECTION = "activityDetection"
    TIME_LAPSE = "timeLapse"


class FileType(str, Enum):
    """Top-level media type of a media file (the part before the '/')."""
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class ObservationLevel(str, Enum):
    """Level at which an observation was classified."""
    MEDIA = "media"
    EVENT = "event"


class ObservationType(str, Enum):
    """Type of an observation."""
    ANIMAL = "animal"
    HUMAN = "human"
    VEHICLE = "vehicle"
    BLANK = "blank"
    UNKNOWN = "unknown"
    UNCLASSIFIED = "unclassified"


class CameraSetupType(str, Enum):
    """Type of the camera setup action (if any) associated with an observation."""
    SETUP = "setup"
    CALIBRATION = "calibration"


class LifeStage(str, Enum):
    ADULT = "adult"
    SUBADULT = "subadult"
    JUVENILE = "juvenile"


class Sex(str, Enum):
    FEMALE = "female"
    MALE = "male"


class ClassificationMethod(str, Enum):
    HUMAN = "human"
    MACHINE = "machine"


# ============================================================================
# Records
# ============================================================================

@dataclass(frozen=True)
class Deployment:
    """
    Camera trap placement (one row of deployments.csv).

    Coordinates are WGS84 decimal degrees. Start and end carry the timezone
    designator from the source text (naive when the text had none).
    """
    deployment_id: str
    latitude: float
    longitude: float
    deployment_start: datetime
    deployment_end: datetime
    location_id: Optional[str] = None
    location_name: Optional[str] = None
    coordinate_uncertainty: Optional[int] = None  # meters
    setup_by: Optional[str] = None
    camera_id: Optional[str] = None
    camera_model: Optional[str] = None
    camera_delay: Optional[int] = None  # seconds
    camera_height: Optional[float] = None  # meters
    camera_depth: Optional[float] = None  # meters
    camera_tilt: Optional[int] = None  # degrees, -90 down .. 90 up
    camera_heading: Optional[int] = None  # degrees clockwise from north
    detection_distance: Optional[float] = None  # meters
    timestamp_issues: Optional[bool] = None
    bait_use: Optional[bool] = None
    feature_type: Optional[FeatureType] = None
    habitat: Optional[str] = None
    deployment_groups: Optional[tuple[str, ...]] = None
    deployment_tags: Optional[tuple[str, ...]] = None
    deployment_comments: Optional[str] = None


@dataclass(frozen=True)
class Medium:
    """
    Media file recorded during a deployment (one row of media.csv).

    `exif_data` holds the decoded JSON object; equality compares it as a dict.
    """
    media_id: str
    deployment_id: str
    timestamp: datetime
    file_path: str
    file_public: bool
    file_mediatype: str
    capture_method: Optional[CaptureMethod] = None
    file_name: Optional[str] = None
    exif_data: Optional[dict[str, Any]] = None
    favorite: Optional[bool] = None
    media_comments: Optional[str] = None

    def __post_init__(self):
        top_level, slash, _ = self.file_mediatype.partition("/")
        if not slash or top_level not in {member.value for member in FileType}:
            raise ValueError(
                f"Medium {self.media_id}: file_mediatype must be an image/, video/ or "
                f"audio/ media type, got {self.file_mediatype!r}"
            )

    @property
    def file_type(self) -> FileType:
        """Image, video or audio, from the IANA media type (e.g. "image/jpeg")."""
        return FileType(self.file_mediatype.split("/", 1)[0])


@dataclass(frozen=True)
class Observation:
    """
    Observation derived from a media file or an event (one row of observations.csv).

    At least one of `media_id` / `deployment_id` is present on every record
    read from a table. `classification_probability` is the classifier's
    confidence in [0, 1].
    """
    observation_id: str
    observation_level: ObservationLevel
    observation_type: ObservationType
    deployment_id: Optional[str] = None
    media_id: Optional[str] = None
    event_id: Optional[str] = None
    event_start: Optional[datetime] = None
    event_end: Optional[datetime] = None
    camera_setup_type: Optional[CameraSetupType] = None
    scientific_name: Optional[str] = None
    count: Optional[int] = None
    life_stage: Optional[LifeStage] = None
    sex: Optional[Sex] = None
    behavior: Optional[tuple[str, ...]] = None  # dominant behavior first
    individual_id: Optional[str] = None
    individual_position_radius: Optional[float] = None
    individual_position_angle: Optional[float] = None
    individual_speed: Optional[float] = None
    bbox_x: Optional[float] = None
    bbox_y: Optional[float] = None
    bbox_width: Optional[float] = None
    bbox_height: Optional[float] = None
    classification_method: Optional[ClassificationMethod] = None
    classified_by: Optional[str] = None
    classification_timestamp: Optional[datetime] = None
    classification_probability: Optional[float] = None
    observation_tags: Optional[tuple[str, ...]] = None
    observation_comments: Optional[str] = None
