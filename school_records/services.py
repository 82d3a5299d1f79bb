"""Business logic services used by HTTP controllers.

Services are intentionally thin: they convert entities to DTOs and back,
enforce the one cross-entity rule (a student must reference an existing
class) and persist through the repositories they are constructed with.
"""

import logging
from typing import List, Optional
from sqlmodel import Session
from . import models, repositories
from .errors import ClassNotFoundError, ConflictError, NotFoundError
from .schemas import ClassDTO, StudentDTO

logger = logging.getLogger("school_records.services")


def class_to_dto(entity: models.SchoolClass) -> ClassDTO:
    return ClassDTO(id=entity.id, name=entity.name, description=entity.description)


def student_to_dto(entity: models.Student) -> StudentDTO:
    """Convert a `Student` entity, resolving its class on access."""
    return StudentDTO(
        id=entity.id,
        name=entity.name,
        email=entity.email,
        age=entity.age,
        student_class=class_to_dto(entity.student_class),
    )


class ClassService:
    """CRUD operations on classes."""
    def __init__(self, class_repo: repositories.ClassRepository, student_repo: repositories.StudentRepository):
        self.class_repo = class_repo
        self.student_repo = student_repo

    def find_all(self) -> List[ClassDTO]:
        return [class_to_dto(c) for c in self.class_repo.find_all()]

    def find_by_id(self, class_id: int) -> Optional[ClassDTO]:
        entity = self.class_repo.find_by_id(class_id)
        return class_to_dto(entity) if entity else None

    def search_by_name(self, fragment: str) -> List[ClassDTO]:
        """Return classes whose name contains `fragment` (case-insensitive)."""
        return [class_to_dto(c) for c in self.class_repo.find_all_by_name(fragment)]

    def save(self, dto: ClassDTO) -> ClassDTO:
        """Create a new class from `dto`; any id on the DTO is ignored."""
        entity = models.SchoolClass(name=dto.name, description=dto.description)
        saved = self.class_repo.save(entity)
        logger.info("class created id=%s", saved.id)
        return class_to_dto(saved)

    def update(self, dto: ClassDTO) -> ClassDTO:
        """Overwrite name/description of the existing class `dto.id`."""
        entity = self.class_repo.find_by_id(dto.id) if dto.id is not None else None
        if entity is None:
            raise NotFoundError("Class not found")
        entity.name = dto.name
        entity.description = dto.description
        saved = self.class_repo.save(entity)
        logger.info("class updated id=%s", saved.id)
        return class_to_dto(saved)

    def delete_by_id(self, class_id: int) -> None:
        """Delete a class; missing ids are ignored.

        A class that still has students cannot be deleted.
        """
        enrolled = self.student_repo.count_by_class(class_id)
        if enrolled:
            raise ConflictError(f"Class {class_id} still has {enrolled} student(s)")
        if self.class_repo.delete_by_id(class_id):
            logger.info("class deleted id=%s", class_id)


class StudentService:
    """CRUD operations on students and the class-reference check."""
    def __init__(self, student_repo: repositories.StudentRepository, class_repo: repositories.ClassRepository):
        self.student_repo = student_repo
        self.class_repo = class_repo

    def find_all(self) -> List[StudentDTO]:
        return [student_to_dto(s) for s in self.student_repo.find_all()]

    def find_by_id(self, student_id: int) -> Optional[StudentDTO]:
        entity = self.student_repo.find_by_id(student_id)
        return student_to_dto(entity) if entity else None

    def search_by_name(self, fragment: str) -> List[StudentDTO]:
        """Return students whose name contains `fragment` (case-insensitive)."""
        return [student_to_dto(s) for s in self.student_repo.find_all_by_name(fragment)]

    def _require_class(self, class_id: int) -> models.SchoolClass:
        student_class = self.class_repo.find_by_id(class_id)
        if student_class is None:
            logger.warning("rejected student class reference class_id=%s", class_id)
            raise ClassNotFoundError(class_id)
        return student_class

    def save(self, dto: StudentDTO) -> StudentDTO:
        """Create a student in the class `dto.student_class.id`.

        Raises `ClassNotFoundError` when that class does not exist.
        """
        student_class = self._require_class(dto.student_class.id)
        entity = models.Student(
            name=dto.name,
            email=dto.email,
            age=dto.age,
            class_id=student_class.id,
        )
        saved = self.student_repo.save(entity)
        logger.info("student created id=%s class_id=%s", saved.id, saved.class_id)
        return student_to_dto(saved)

    def update(self, dto: StudentDTO, student_id: int) -> StudentDTO:
        """Merge `dto` into the stored student `student_id`.

        The class reference is only looked up again when it changed;
        otherwise the stored reference is kept as is.
        """
        student = self.student_repo.find_by_id(student_id)
        if student is None:
            raise NotFoundError("Student not found")
        new_class_id = dto.student_class.id
        if new_class_id != student.class_id:
            student.class_id = self._require_class(new_class_id).id
        student.name = dto.name
        student.email = dto.email
        student.age = dto.age
        saved = self.student_repo.save(student)
        logger.info("student updated id=%s class_id=%s", saved.id, saved.class_id)
        return student_to_dto(saved)

    def delete_by_id(self, student_id: int) -> None:
        if not self.student_repo.delete_by_id(student_id):
            raise NotFoundError("Student not found")
        logger.info("student deleted id=%s", student_id)


def build_services(session: Session):
    """Wire repositories into services for one database session."""
    class_repo = repositories.ClassRepository(session)
    student_repo = repositories.StudentRepository(session)
    return (
        ClassService(class_repo, student_repo),
        StudentService(student_repo, class_repo),
    )
