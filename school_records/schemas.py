"""Pydantic transfer objects (DTOs) exchanged between services and controllers.

DTOs mirror the persistence entities without tying controllers to the
ORM session: a `StudentDTO` carries its resolved class as a nested
`ClassDTO`.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional


class ClassDTO(BaseModel):
    """Class data as seen by controllers and templates."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None


class StudentDTO(BaseModel):
    """Student data with the referenced class.

    When a DTO is built from form input only `student_class.id` is set.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    name: str
    email: str
    age: int
    student_class: ClassDTO
