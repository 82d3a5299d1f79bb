"""SQLModel data models.

This module defines the application's database tables using SQLModel.
A `SchoolClass` groups zero or more `Student` rows; every student
belongs to exactly one class through the `class_id` foreign key.
"""

from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship


class SchoolClass(SQLModel, table=True):
    """A class (form group) that students are enrolled in.

    The table is named `class`; the Python name avoids the keyword.
    """
    __tablename__ = "class"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, nullable=False)
    description: Optional[str] = None
    students: List['Student'] = Relationship(back_populates='student_class')

    def __repr__(self):
        return f"<SchoolClass {self.id} {self.name}>"


class Student(SQLModel, table=True):
    """A student record.

    `student_class` is resolved lazily from `class_id` when first accessed.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    email: str
    age: int
    class_id: int = Field(foreign_key='class.id', nullable=False)
    student_class: Optional[SchoolClass] = Relationship(back_populates='students')

    def __repr__(self):
        return f"<Student {self.id} {self.name}>"
