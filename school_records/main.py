"""FastAPI application entrypoint and HTTP controllers.

Controllers are intentionally thin: they bind HTML form values to
validated view objects, delegate to services, and either render a
template or redirect back to a list page.

Endpoints implemented:
- GET /, GET /login, GET /health
- GET /classes, GET /classes/new, POST /classes
- GET /classes/edit/{id}, POST /classes/update/{id}, GET /classes/delete/{id}
- GET /students, GET /students/new, POST /students
- GET /students/edit/{id}, POST /students/update/{id}, GET /students/delete/{id}
- /error (any method)
"""

from fastapi import FastAPI, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlmodel import Session
from http import HTTPStatus
from pathlib import Path
from typing import Optional
import json
import logging
import time
import uuid
from .config import settings
from .database import create_db_and_tables, get_session
from . import repositories, services
from .errors import ClassNotFoundError, register_exception_handlers
from .forms import (
    class_not_found_error,
    errors_by_field,
    validate_class_form,
    validate_student_form,
)
from .schemas import ClassDTO, StudentDTO

app = FastAPI(title="School Records")
logger = logging.getLogger("school_records.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))
register_exception_handlers(app)

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        # the 500 body is produced outside this middleware, so it carries no X-Request-ID
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
            ensure_ascii=True,
        ),
    )
    return response


def get_class_service(db: Session = Depends(get_session)) -> services.ClassService:
    return services.ClassService(
        repositories.ClassRepository(db),
        repositories.StudentRepository(db),
    )


def get_student_service(db: Session = Depends(get_session)) -> services.StudentService:
    return services.StudentService(
        repositories.StudentRepository(db),
        repositories.ClassRepository(db),
    )


def render(request: Request, template: str, status_code: int = 200, **context):
    return templates.TemplateResponse(request, template, context, status_code=status_code)


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def render_error(request: Request, status_code: int, message: str = "", path: str = "", headers=None):
    """Render the error page for `status_code`.

    404 gets the dedicated not-found page; every other status shows the
    generic page with the code and reason.
    """
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    template = "error/404.html" if status_code == 404 else "error/error.html"
    response = render(
        request,
        template,
        status_code=status_code,
        title=reason,
        status=status_code,
        error=reason,
        message=message,
        path=path or request.url.path,
    )
    if headers:
        response.headers.update(headers)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_error_page(request: Request, exc: StarletteHTTPException):
    """Show unmatched routes and other framework HTTP errors as an HTML page."""
    return render_error(request, exc.status_code, message=str(exc.detail or ""), headers=exc.headers)


@app.api_route("/error", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], response_class=HTMLResponse)
def error_page(request: Request, status: int = 500, message: str = "", path: str = ""):
    """Generic error display driven by `status`, `message` and `path` attributes."""
    return render_error(request, status, message=message, path=path)


# ---------------------------------------------------------------- home

@app.get("/", response_class=HTMLResponse)
def home(request: Request):
    return render(request, "home.html", title="Home")


@app.get("/login", response_class=HTMLResponse)
def login(request: Request):
    """Static login page; no authentication is performed."""
    return render(request, "auth/login.html", title="Login")


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}


# ---------------------------------------------------------------- classes

def _class_form_page(request: Request, values: dict, errors=None, class_id: Optional[int] = None):
    action = f"/classes/update/{class_id}" if class_id is not None else "/classes"
    return render(
        request,
        "classes/form.html",
        title="Edit class" if class_id is not None else "New class",
        values=values,
        errors=errors_by_field(errors or []),
        class_id=class_id,
        action=action,
    )


@app.get("/classes", response_class=HTMLResponse)
def list_classes(request: Request, name: Optional[str] = None, svc: services.ClassService = Depends(get_class_service)):
    """List all classes, optionally filtered by a name fragment."""
    classes = svc.search_by_name(name) if name and name.strip() else svc.find_all()
    return render(request, "classes/list.html", title="Classes", classes=classes, query=name or "")


@app.get("/classes/new", response_class=HTMLResponse)
def new_class(request: Request):
    return _class_form_page(request, {"name": "", "description": ""})


@app.post("/classes", response_class=HTMLResponse)
def create_class(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    svc: services.ClassService = Depends(get_class_service),
):
    """Create a class, or re-render the form with field errors."""
    values = {"name": name, "description": description}
    form, errors = validate_class_form(values)
    if errors:
        return _class_form_page(request, values, errors)
    svc.save(ClassDTO(name=form.name, description=form.description))
    return redirect("/classes")


@app.get("/classes/edit/{class_id}", response_class=HTMLResponse)
def edit_class(request: Request, class_id: int, svc: services.ClassService = Depends(get_class_service)):
    """Show the edit form, or go back to the list when the class is missing."""
    dto = svc.find_by_id(class_id)
    if dto is None:
        return redirect("/classes")
    values = {"name": dto.name, "description": dto.description or ""}
    return _class_form_page(request, values, class_id=class_id)


@app.post("/classes/update/{class_id}", response_class=HTMLResponse)
def update_class(
    request: Request,
    class_id: int,
    name: str = Form(""),
    description: str = Form(""),
    svc: services.ClassService = Depends(get_class_service),
):
    values = {"name": name, "description": description}
    form, errors = validate_class_form(values)
    if errors:
        return _class_form_page(request, values, errors, class_id=class_id)
    svc.update(ClassDTO(id=class_id, name=form.name, description=form.description))
    return redirect("/classes")


@app.get("/classes/delete/{class_id}")
def delete_class(class_id: int, svc: services.ClassService = Depends(get_class_service)):
    svc.delete_by_id(class_id)
    return redirect("/classes")


# ---------------------------------------------------------------- students

def _student_form_page(request: Request, values: dict, classes, errors=None, student_id: Optional[int] = None):
    action = f"/students/update/{student_id}" if student_id is not None else "/students"
    return render(
        request,
        "students/form.html",
        title="Edit student" if student_id is not None else "New student",
        values=values,
        classes=classes,
        errors=errors_by_field(errors or []),
        student_id=student_id,
        action=action,
    )


def _student_dto(form) -> StudentDTO:
    return StudentDTO(
        name=form.name,
        email=form.email,
        age=form.age,
        student_class=ClassDTO(id=form.class_id),
    )


@app.get("/students", response_class=HTMLResponse)
def list_students(request: Request, name: Optional[str] = None, svc: services.StudentService = Depends(get_student_service)):
    """List students with their class name and description."""
    students = svc.search_by_name(name) if name and name.strip() else svc.find_all()
    return render(request, "students/list.html", title="Students", students=students, query=name or "")


@app.get("/students/new", response_class=HTMLResponse)
def new_student(request: Request, class_svc: services.ClassService = Depends(get_class_service)):
    values = {"name": "", "email": "", "age": "", "class_id": ""}
    return _student_form_page(request, values, class_svc.find_all())


@app.post("/students", response_class=HTMLResponse)
def create_student(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    age: str = Form(""),
    class_id: str = Form("", alias="classId"),
    svc: services.StudentService = Depends(get_student_service),
    class_svc: services.ClassService = Depends(get_class_service),
):
    """Create a student.

    Field errors and an unknown class both re-render the form (HTTP 200)
    without creating a row.
    """
    values = {"name": name, "email": email, "age": age, "class_id": class_id}
    form, errors = validate_student_form(values)
    if not errors:
        try:
            svc.save(_student_dto(form))
            return redirect("/students")
        except ClassNotFoundError:
            errors = [class_not_found_error()]
    return _student_form_page(request, values, class_svc.find_all(), errors)


@app.get("/students/edit/{student_id}", response_class=HTMLResponse)
def edit_student(
    request: Request,
    student_id: int,
    svc: services.StudentService = Depends(get_student_service),
    class_svc: services.ClassService = Depends(get_class_service),
):
    """Show the edit form, or go back to the list when the student is missing."""
    dto = svc.find_by_id(student_id)
    if dto is None:
        return redirect("/students")
    values = {
        "name": dto.name,
        "email": dto.email,
        "age": str(dto.age),
        "class_id": str(dto.student_class.id),
    }
    return _student_form_page(request, values, class_svc.find_all(), student_id=student_id)


@app.post("/students/update/{student_id}", response_class=HTMLResponse)
def update_student(
    request: Request,
    student_id: int,
    name: str = Form(""),
    email: str = Form(""),
    age: str = Form(""),
    class_id: str = Form("", alias="classId"),
    svc: services.StudentService = Depends(get_student_service),
    class_svc: services.ClassService = Depends(get_class_service),
):
    """Update a student; a missing student is a 404 through the global handler."""
    values = {"name": name, "email": email, "age": age, "class_id": class_id}
    form, errors = validate_student_form(values)
    if not errors:
        try:
            svc.update(_student_dto(form), student_id)
            return redirect("/students")
        except ClassNotFoundError:
            errors = [class_not_found_error()]
    return _student_form_page(request, values, class_svc.find_all(), errors, student_id=student_id)


@app.get("/students/delete/{student_id}")
def delete_student(student_id: int, svc: services.StudentService = Depends(get_student_service)):
    svc.delete_by_id(student_id)
    return redirect("/students")
