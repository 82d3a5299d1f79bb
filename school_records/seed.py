"""Demo data for local development.

`seed_demo_data` is idempotent: classes are matched by name and students
by email, so running it twice does not duplicate rows.
"""

from sqlmodel import Session
from .schemas import ClassDTO, StudentDTO
from .services import build_services

DEMO_CLASSES = [
    {"name": "10A1", "description": "Lớp chuyên Toán"},
    {"name": "10A2", "description": "Lớp chuyên Văn"},
    {"name": "11B1", "description": None},
]

DEMO_STUDENTS = [
    {"name": "Nguyễn Văn An", "email": "an.nguyen@school.edu.vn", "age": 16, "class": "10A1"},
    {"name": "Trần Thị Bình", "email": "binh.tran@school.edu.vn", "age": 16, "class": "10A2"},
    {"name": "Lê Minh Châu", "email": "chau.le@school.edu.vn", "age": 17, "class": "11B1"},
]


def seed_demo_data(session: Session) -> dict:
    """Insert the demo classes and students that are not present yet."""
    class_svc, student_svc = build_services(session)
    classes = {c.name: c for c in class_svc.find_all()}
    created_classes = 0
    for c in DEMO_CLASSES:
        if c["name"] not in classes:
            classes[c["name"]] = class_svc.save(ClassDTO(name=c["name"], description=c["description"]))
            created_classes += 1

    emails = {s.email for s in student_svc.find_all()}
    created_students = 0
    for s in DEMO_STUDENTS:
        if s["email"] in emails:
            continue
        student_svc.save(StudentDTO(
            name=s["name"],
            email=s["email"],
            age=s["age"],
            student_class=ClassDTO(id=classes[s["class"]].id),
        ))
        created_students += 1
    return {"classes": created_classes, "students": created_students}
