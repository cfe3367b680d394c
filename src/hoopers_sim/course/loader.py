"""Course file import/export.

Course files use the designer's camelCase JSON layout::

    {"id": "...", "name": "...", "ringWidth": 25, "ringHeight": 35,
     "equipment": [{"id": "...", "type": "hoop", "x": 120, "y": 80,
                    "rotation": 0, "orderNumber": 1}, ...]}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hoopers_sim.course.models import Course, Equipment, EquipmentType

_logger = logging.getLogger(__name__)


class EquipmentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    type: Literal["hoop", "barrel", "tunnel", "start", "finish"]
    x: float
    y: float
    rotation: float
    order_number: int | None = Field(default=None, alias="orderNumber")

    def to_equipment(self) -> Equipment:
        return Equipment(
            id=self.id,
            type=EquipmentType(self.type),
            x=self.x,
            y=self.y,
            rotation=self.rotation,
            order_number=self.order_number,
        )


class CourseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    ring_width: float = Field(alias="ringWidth")
    ring_height: float = Field(alias="ringHeight")
    equipment: list[EquipmentModel]
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    def to_course(self) -> Course:
        return Course(
            id=self.id,
            name=self.name,
            ring_width=self.ring_width,
            ring_height=self.ring_height,
            equipment=tuple(e.to_equipment() for e in self.equipment),
        )

    @classmethod
    def from_course(cls, course: Course) -> CourseModel:
        return cls(
            id=course.id,
            name=course.name,
            ring_width=course.ring_width,
            ring_height=course.ring_height,
            equipment=[
                EquipmentModel(
                    id=e.id,
                    type=e.type.value,
                    x=e.x,
                    y=e.y,
                    rotation=e.rotation,
                    order_number=e.order_number,
                )
                for e in course.equipment
            ],
        )


def parse_course_file(text: str) -> Course | None:
    """Parse course JSON.

    Returns ``None`` on malformed JSON or a structurally invalid course.
    """
    try:
        model = CourseModel.model_validate_json(text)
    except ValidationError as exc:
        _logger.warning("Rejected course file: %d validation error(s)", exc.error_count())
        return None
    return model.to_course()


def load_course(path: str | Path) -> Course:
    """Read and parse a course file.

    Raises:
        ValueError: If the file does not contain a valid course.
    """
    text = Path(path).read_text(encoding="utf-8")
    course = parse_course_file(text)
    if course is None:
        raise ValueError(f"Not a valid course file: {path}")
    return course


def course_to_json(course: Course, indent: int | None = 2) -> str:
    """Serialise *course* in the camelCase file layout."""
    return CourseModel.from_course(course).model_dump_json(
        by_alias=True, exclude_none=True, indent=indent
    )
