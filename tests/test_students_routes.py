from fastapi.testclient import TestClient
from sqlmodel import select
from school_records.main import app
from school_records import models

client = TestClient(app)


def _create_class(name='10A1', description='Lớp chuyên Toán'):
    client.post('/classes', data={'name': name, 'description': description}, follow_redirects=False)


def _student_form(**overrides):
    data = {'name': 'An', 'email': 'an@x.com', 'age': '20', 'classId': '1'}
    data.update(overrides)
    return data


def _students(session):
    return session.exec(select(models.Student)).all()


def test_create_student_with_missing_class_rerenders_form(session):
    r = client.post('/students', data=_student_form(classId='999'), follow_redirects=False)
    assert r.status_code == 200
    assert 'data-field="class_id">Lớp không tồn tại' in r.text
    assert 'value="an@x.com"' in r.text
    assert _students(session) == []


def test_create_student_with_invalid_fields_rerenders_form(session):
    _create_class()
    r = client.post('/students', data=_student_form(name='', email='nope', age='abc'), follow_redirects=False)
    assert r.status_code == 200
    assert 'Tên sinh viên không được để trống' in r.text
    assert 'Email không hợp lệ' in r.text
    assert 'Tuổi phải là số nguyên' in r.text
    assert _students(session) == []


def test_create_student_persists_with_resolved_class(session):
    _create_class()
    r = client.post('/students', data=_student_form(), follow_redirects=False)
    assert r.status_code == 303
    assert r.headers['location'] == '/students'
    rows = _students(session)
    assert len(rows) == 1
    assert rows[0].student_class.name == '10A1'
    assert rows[0].student_class.description == 'Lớp chuyên Toán'
    listing = client.get('/students').text
    assert 'an@x.com' in listing
    assert 'Lớp chuyên Toán' in listing


def test_new_student_form_lists_classes():
    _create_class('10A1')
    _create_class('11B2')
    r = client.get('/students/new')
    assert r.status_code == 200
    assert '10A1' in r.text and '11B2' in r.text


def test_edit_student_form_and_missing_redirect():
    _create_class()
    client.post('/students', data=_student_form(), follow_redirects=False)
    r = client.get('/students/edit/1')
    assert r.status_code == 200
    assert 'value="1" selected' in r.text
    r = client.get('/students/edit/50', follow_redirects=False)
    assert r.status_code == 303
    assert r.headers['location'] == '/students'


def test_update_only_age_keeps_class(session):
    _create_class()
    client.post('/students', data=_student_form(), follow_redirects=False)
    r = client.post('/students/update/1', data=_student_form(age='21'), follow_redirects=False)
    assert r.status_code == 303
    row = _students(session)[0]
    assert row.age == 21
    assert row.class_id == 1


def test_update_to_missing_class_shows_inline_error(session):
    _create_class()
    client.post('/students', data=_student_form(), follow_redirects=False)
    r = client.post('/students/update/1', data=_student_form(classId='404'), follow_redirects=False)
    assert r.status_code == 200
    assert 'Lớp không tồn tại' in r.text
    assert 'action="/students/update/1"' in r.text
    assert _students(session)[0].class_id == 1


def test_update_missing_student_is_404():
    _create_class()
    r = client.post('/students/update/9', data=_student_form(), follow_redirects=False)
    assert r.status_code == 404
    assert r.text == 'Resource not found: Student not found'


def test_delete_student_and_missing_student(session):
    _create_class()
    client.post('/students', data=_student_form(), follow_redirects=False)
    r = client.get('/students/delete/1', follow_redirects=False)
    assert r.status_code == 303
    assert _students(session) == []
    r = client.get('/students/delete/1', follow_redirects=False)
    assert r.status_code == 404


def test_deleting_referenced_class_is_conflict(session):
    _create_class()
    client.post('/students', data=_student_form(), follow_redirects=False)
    r = client.get('/classes/delete/1', follow_redirects=False)
    assert r.status_code == 409
    assert r.text.startswith('Conflict: ')
    assert _students(session)[0].class_id == 1


def test_oversized_class_id_is_inline_error(session):
    _create_class()
    r = client.post('/students', data=_student_form(classId='99999999999999999999'), follow_redirects=False)
    assert r.status_code == 200
    assert 'data-field="class_id">Lớp không tồn tại' in r.text
    assert _students(session) == []


def test_oversized_student_ids_behave_as_missing():
    huge = '99999999999999999999'
    r = client.get(f'/students/edit/{huge}', follow_redirects=False)
    assert r.status_code == 303
    assert r.headers['location'] == '/students'
    assert client.get(f'/students/delete/{huge}', follow_redirects=False).status_code == 404
