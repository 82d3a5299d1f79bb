"""Form-bound view objects and their validation.

Controllers receive raw HTML form values; the `validate_*_form`
functions turn them into a validated pydantic VO or a list of
`FieldError` items that templates show next to each input. Validation
never raises on bad user input.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, EmailStr, ValidationError, field_validator

from .config import settings

CLASS_NAME_BLANK = "Tên lớp không được để trống"
STUDENT_NAME_BLANK = "Tên sinh viên không được để trống"
EMAIL_INVALID = "Email không hợp lệ"
AGE_NOT_INTEGER = "Tuổi phải là số nguyên"
CLASS_REQUIRED = "Vui lòng chọn lớp"
CLASS_NOT_FOUND = "Lớp không tồn tại"


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str
    message: str


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ClassForm(BaseModel):
    """Input of the class create/edit form."""
    name: str
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_blank(cls, value):
        if value is None or not str(value).strip():
            raise ValueError("blank")
        return str(value).strip()

    @field_validator("description", mode="before")
    @classmethod
    def _empty_description(cls, value):
        value = _blank_to_none(value)
        return value.strip() if isinstance(value, str) else value


class StudentForm(BaseModel):
    """Input of the student create/edit form."""
    name: str
    email: EmailStr
    age: int
    class_id: int

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_blank(cls, value):
        if value is None or not str(value).strip():
            raise ValueError("blank")
        return str(value).strip()

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("class_id", mode="before")
    @classmethod
    def _empty_class(cls, value):
        return _blank_to_none(value)

    @field_validator("age")
    @classmethod
    def _age_in_range(cls, value: int) -> int:
        if not settings.STUDENT_MIN_AGE <= value <= settings.STUDENT_MAX_AGE:
            raise ValueError("out_of_range")
        return value


def _age_out_of_range() -> str:
    return f"Tuổi phải nằm trong khoảng {settings.STUDENT_MIN_AGE}-{settings.STUDENT_MAX_AGE}"


def _class_field_error(field: str, err: dict) -> FieldError:
    if field == "name":
        return FieldError("name", "blank", CLASS_NAME_BLANK)
    return FieldError(field, err["type"], err["msg"])


def _student_field_error(field: str, err: dict) -> FieldError:
    if field == "name":
        return FieldError("name", "blank", STUDENT_NAME_BLANK)
    if field == "email":
        return FieldError("email", "invalid_email", EMAIL_INVALID)
    if field == "age":
        if err["type"] == "value_error" and "out_of_range" in err["msg"]:
            return FieldError("age", "out_of_range", _age_out_of_range())
        return FieldError("age", "not_integer", AGE_NOT_INTEGER)
    if field == "class_id":
        return FieldError("class_id", "required", CLASS_REQUIRED)
    return FieldError(field, err["type"], err["msg"])


def _collect(exc: ValidationError, to_field_error) -> List[FieldError]:
    errors: List[FieldError] = []
    seen = set()
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "__all__"
        # one message per field is enough for the form
        if field in seen:
            continue
        seen.add(field)
        errors.append(to_field_error(field, err))
    return errors


def validate_class_form(data: Mapping) -> Tuple[Optional[ClassForm], List[FieldError]]:
    """Validate raw class form values."""
    try:
        return ClassForm.model_validate(dict(data)), []
    except ValidationError as exc:
        return None, _collect(exc, _class_field_error)


def validate_student_form(data: Mapping) -> Tuple[Optional[StudentForm], List[FieldError]]:
    """Validate raw student form values.

    Only the shape of `class_id` is checked here; whether the class exists
    is decided by the student service.
    """
    try:
        return StudentForm.model_validate(dict(data)), []
    except ValidationError as exc:
        return None, _collect(exc, _student_field_error)


def class_not_found_error() -> FieldError:
    return FieldError("class_id", "class_not_found", CLASS_NOT_FOUND)


def errors_by_field(errors: List[FieldError]) -> Dict[str, str]:
    """Map field name to its first error message for template lookups."""
    out: Dict[str, str] = {}
    for e in errors:
        out.setdefault(e.field, e.message)
    return out
