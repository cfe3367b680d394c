"""Course modelling, control points and file import."""

from hoopers_sim.course.control_points import extract_control_points
from hoopers_sim.course.loader import course_to_json, load_course, parse_course_file
from hoopers_sim.course.models import SCALE, Course, Equipment, EquipmentType, Point

__all__ = [
    "SCALE",
    "Course",
    "Equipment",
    "EquipmentType",
    "Point",
    "course_to_json",
    "extract_control_points",
    "load_course",
    "parse_course_file",
]
