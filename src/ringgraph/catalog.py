"""
Catalog records consumed by the connection engine.

Raw records come from an external catalog loader as nested JSON objects with
camelCase keys. They are parsed into pydantic models that never reject a record
for a malformed optional field: anything that cannot be read maps to a neutral
default (empty string, ``False``, empty list/dict).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

LOGGER = logging.getLogger(__name__)

CATALOG_SECTIONS = ("experiences", "apps", "experiments")

_TRUE_STRINGS = {"true", "yes", "1", "y"}


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _as_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (int, float)):
        return value != 0
    return False


def _as_text_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value if v is not None and str(v).strip()]
    return []


def _as_block(value: Any) -> Any:
    if isinstance(value, (Mapping, BaseModel)):
        return value
    return {}


class _Block(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TechnicalDetails(_Block):
    algorithm: str = ""
    complexity: str = ""
    precision: str = ""
    frame_rate: str = Field("", alias="frameRate")
    render_time: str = Field("", alias="renderTime")
    interactivity: str = ""
    scientific_accuracy: bool = Field(False, alias="scientificAccuracy")

    @field_validator(
        "algorithm", "complexity", "precision", "frame_rate", "render_time", "interactivity",
        mode="before",
    )
    @classmethod
    def _text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("scientific_accuracy", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return _as_flag(value)


class Experience(_Block):
    interaction_level: str = Field("", alias="interactionLevel")
    duration: str = ""
    audio_reactive: bool = Field(False, alias="audioReactive")
    vr_compatible: bool = Field(False, alias="vrCompatible")
    contemplative: bool = False
    meditative: bool = False
    educational: bool = False
    therapeutic: bool = False
    collaborative: bool = False
    biofeedback: bool = False

    @field_validator("interaction_level", "duration", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _as_text(value).strip()

    @field_validator(
        "audio_reactive", "vr_compatible", "contemplative", "meditative", "educational",
        "therapeutic", "collaborative", "biofeedback",
        mode="before",
    )
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return _as_flag(value)


class Outputs(_Block):
    formats: List[str] = Field(default_factory=list)
    color_modes: List[str] = Field(default_factory=list, alias="colorModes")
    max_resolution: str = Field("", alias="maxResolution")

    @field_validator("formats", "color_modes", mode="before")
    @classmethod
    def _texts(cls, value: Any) -> List[str]:
        return _as_text_list(value)

    @field_validator("max_resolution", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _as_text(value)


class Project(_Block):
    """A catalog entry. Read-only for the lifetime of an engine session."""

    id: str
    title: str = ""
    category: str = ""
    type: str = ""
    description: str = ""
    long_description: str = Field("", alias="longDescription")
    is_new: bool = Field(False, alias="isNew")
    technical_details: TechnicalDetails = Field(
        default_factory=TechnicalDetails, alias="technicalDetails"
    )
    experience: Experience = Field(default_factory=Experience)
    outputs: Outputs = Field(default_factory=Outputs)
    parameters: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _identifier(cls, value: Any) -> str:
        text = _as_text(value).strip()
        if not text:
            raise ValueError("project id must be a non-empty string")
        return text

    @field_validator("title", "category", "type", "description", "long_description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("is_new", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return _as_flag(value)

    @field_validator("technical_details", "experience", "outputs", mode="before")
    @classmethod
    def _block(cls, value: Any) -> Any:
        return _as_block(value)

    @field_validator("parameters", mode="before")
    @classmethod
    def _parameters(cls, value: Any) -> Dict[str, Any]:
        return dict(value) if isinstance(value, Mapping) else {}

    @property
    def parameter_count(self) -> int:
        return len(self.parameters)


@dataclass
class Catalog:
    projects: List[Project] = field(default_factory=list)
    collections: List[Dict[str, Any]] = field(default_factory=list)


ProjectLike = Union[Project, Mapping[str, Any]]


def parse_projects(records: Iterable[ProjectLike]) -> List[Project]:
    """Validate raw records, dropping ones without an id and duplicate ids."""

    projects: List[Project] = []
    seen: set[str] = set()
    for index, record in enumerate(records):
        if isinstance(record, Project):
            project = record
        elif isinstance(record, Mapping):
            try:
                project = Project.model_validate(dict(record))
            except ValidationError as exc:
                LOGGER.warning("Skipping catalog record #%d: %s", index, exc.errors()[0]["msg"])
                continue
        else:
            LOGGER.warning("Skipping catalog record #%d: not an object", index)
            continue
        if project.id in seen:
            LOGGER.warning("Skipping duplicate project id '%s'", project.id)
            continue
        seen.add(project.id)
        projects.append(project)
    return projects


def catalog_from_data(data: Any) -> Catalog:
    if isinstance(data, list):
        return Catalog(projects=parse_projects(data))
    if not isinstance(data, Mapping):
        raise ValueError("catalog must be a JSON object or a list of project records")
    records: List[Any] = []
    for section in CATALOG_SECTIONS:
        section_records = data.get(section) or []
        if isinstance(section_records, list):
            records.extend(section_records)
    if not records and isinstance(data.get("projects"), list):
        records = data["projects"]
    collections = [c for c in data.get("collections") or [] if isinstance(c, Mapping)]
    return Catalog(projects=parse_projects(records), collections=[dict(c) for c in collections])


def load_catalog(path: Path) -> Catalog:
    catalog = catalog_from_data(json.loads(Path(path).read_text(encoding="utf-8")))
    LOGGER.info("Loaded %d projects and %d curated collections from %s",
                len(catalog.projects), len(catalog.collections), path)
    return catalog
