from school_records.forms import (
    CLASS_NAME_BLANK,
    CLASS_REQUIRED,
    EMAIL_INVALID,
    AGE_NOT_INTEGER,
    STUDENT_NAME_BLANK,
    FieldError,
    class_not_found_error,
    errors_by_field,
    validate_class_form,
    validate_student_form,
)


def test_class_form_requires_non_blank_name():
    form, errors = validate_class_form({'name': '   ', 'description': 'x'})
    assert form is None
    assert errors == [FieldError('name', 'blank', CLASS_NAME_BLANK)]


def test_class_form_missing_name_is_blank_error():
    _, errors = validate_class_form({})
    assert errors[0].field == 'name'
    assert errors[0].message == CLASS_NAME_BLANK


def test_class_form_strips_values_and_empties_description():
    form, errors = validate_class_form({'name': ' 10A1 ', 'description': '  '})
    assert errors == []
    assert form.name == '10A1'
    assert form.description is None


def test_student_form_valid():
    form, errors = validate_student_form({'name': 'An', 'email': 'an@x.com', 'age': '20', 'class_id': '3'})
    assert errors == []
    assert form.age == 20
    assert form.class_id == 3
    assert form.email == 'an@x.com'


def test_student_form_collects_one_error_per_field():
    form, errors = validate_student_form({'name': '', 'email': 'not-an-email', 'age': 'abc', 'class_id': ''})
    assert form is None
    by_field = errors_by_field(errors)
    assert by_field == {
        'name': STUDENT_NAME_BLANK,
        'email': EMAIL_INVALID,
        'age': AGE_NOT_INTEGER,
        'class_id': CLASS_REQUIRED,
    }


def test_student_form_age_out_of_range():
    _, errors = validate_student_form({'name': 'An', 'email': 'an@x.com', 'age': '0', 'class_id': '1'})
    assert len(errors) == 1
    assert errors[0].field == 'age'
    assert errors[0].code == 'out_of_range'
    assert '1-150' in errors[0].message


def test_class_not_found_error_targets_class_field():
    err = class_not_found_error()
    assert err.field == 'class_id'
    assert err.message == 'Lớp không tồn tại'
