"""
Post-load integrity checks across records and tables.

**Conceptual**: The reader validates each row on its own. Rules that need
more than one row are checked here, on demand, after loading:

  - Identifiers are unique within their table (deploymentID, mediaID,
    observationID).
  - Media reference an existing deployment.
  - Observations reference an existing medium and/or deployment, and an
    observation naming both agrees with the medium's deployment.

Checks report issues rather than raise, so a caller can print them all.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence

from camtrap_dp.data.models import Deployment, Medium, Observation
from camtrap_dp.data.schemas import DEPLOYMENTS, MEDIA, OBSERVATIONS, TableSchema


@dataclass(frozen=True)
class IntegrityIssue:
    """
    One cross-row problem.

    Attributes:
        table: Table name of the offending record ("media", ...).
        record_id: Identifier of the offending record.
        column: Column involved.
        message: Human-readable description.
    """
    table: str
    record_id: str
    column: str
    message: str

    def __str__(self):
        return f"{self.table}[{self.record_id}].{self.column}: {self.message}"


def find_duplicate_ids(records: Iterable, schema: TableSchema) -> list[IntegrityIssue]:
    """
    Report identifiers that occur more than once in a table.

    The identifier is the schema's first column (deploymentID, mediaID,
    observationID). One issue per duplicated identifier.
    """
    id_field = schema.fields[0]
    counts = Counter(getattr(record, id_field.attribute) for record in records)
    return [
        IntegrityIssue(schema.name, record_id, id_field.name, f"identifier occurs {n} times")
        for record_id, n in counts.items()
        if n > 1
    ]


def find_dangling_references(
    deployments: Sequence[Deployment],
    media: Sequence[Medium],
    observations: Sequence[Observation],
) -> list[IntegrityIssue]:
    """
    Report references to records that do not exist.

    Args:
        deployments / media / observations: Loaded records of one package.

    Returns:
        Issues in table order (media first, then observations).
    """
    deployment_ids = {d.deployment_id for d in deployments}
    media_by_id = {m.media_id: m for m in media}
    issues = []

    for medium in media:
        if medium.deployment_id not in deployment_ids:
            issues.append(IntegrityIssue(
                "media", medium.media_id, "deploymentID",
                f"deployment '{medium.deployment_id}' does not exist",
            ))

    for observation in observations:
        if observation.deployment_id is not None and observation.deployment_id not in deployment_ids:
            issues.append(IntegrityIssue(
                "observations", observation.observation_id, "deploymentID",
                f"deployment '{observation.deployment_id}' does not exist",
            ))

        if observation.media_id is None:
            continue
        medium = media_by_id.get(observation.media_id)
        if medium is None:
            issues.append(IntegrityIssue(
                "observations", observation.observation_id, "mediaID",
                f"medium '{observation.media_id}' does not exist",
            ))
        elif observation.deployment_id is not None and observation.deployment_id != medium.deployment_id:
            issues.append(IntegrityIssue(
                "observations", observation.observation_id, "deploymentID",
                f"deployment '{observation.deployment_id}' differs from deployment "
                f"'{medium.deployment_id}' of medium '{medium.media_id}'",
            ))

    return issues


def deployment_of(observation: Observation, media: Sequence[Medium]) -> str | None:
    """
    Deployment identifier of an observation, derived through its medium when absent.
    """
    if observation.deployment_id is not None:
        return observation.deployment_id
    for medium in media:
        if medium.media_id == observation.media_id:
            return medium.deployment_id
    return None


def check_integrity(tables) -> list[IntegrityIssue]:
    """
    Run every integrity check over a loaded package (loaders.CamtrapTables).
    """
    issues = []
    issues.extend(find_duplicate_ids(tables.deployments, DEPLOYMENTS))
    issues.extend(find_duplicate_ids(tables.media, MEDIA))
    issues.extend(find_duplicate_ids(tables.observations, OBSERVATIONS))
    issues.extend(find_dangling_references(tables.deployments, tables.media, tables.observations))
    return issues
