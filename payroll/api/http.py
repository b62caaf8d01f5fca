import logging
from collections.abc import Iterator

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from payroll import __version__
from payroll.config import Settings, get_settings
from payroll.core.validate import InvalidSalaryError
from payroll.db.engine import get_session_factory, session_scope
from payroll.lifespan import build_application_lifespan
from payroll.services import employees as employee_service
from payroll.services.employees import EmployeeNotFoundError, OverrideDisabledError
from payroll.store import BracketRepository

from .schemas import (
    BracketOut,
    EmployeeCreate,
    EmployeeOut,
    EmployeePageOut,
    EmployeeUpdate,
    ProjectionOut,
    SalaryInput,
    TaxOverrideRequest,
    TaxReportOut,
)

logger = logging.getLogger("payroll")


async def _announce_startup(app: FastAPI) -> None:
    settings = app.state.settings
    logger.info(
        "Payroll API startup complete; seed_on_startup=%s feature_tax_override=%s",
        settings.seed_on_startup,
        settings.feature_tax_override,
    )


app = FastAPI(
    title="Payroll Tax Service",
    description="Employee records with Philippine progressive income tax projection.",
    version=__version__,
    lifespan=build_application_lifespan("api", startup_hook=_announce_startup),
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["*"],
    allow_credentials=True,
)
router = APIRouter()


def _settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if isinstance(settings, Settings):
        return settings
    return get_settings()


def get_session(request: Request) -> Iterator[Session]:
    factory = getattr(request.app.state, "session_factory", None) or get_session_factory()
    with session_scope(factory) as session:
        yield session


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Employee not found")


def _invalid_salary(exc: InvalidSalaryError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


@app.get("/health")
def health(request: Request, session: Session = Depends(get_session)):
    settings = _settings(request)
    return {
        "ok": True,
        "build": {
            "version": settings.build_version,
            "sha": settings.build_sha,
            "feature_tax_override": settings.feature_tax_override,
        },
        "brackets": BracketRepository(session).count(),
    }


@router.get("/employees", response_model=EmployeePageOut)
def list_employees(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    search: str | None = Query(None, max_length=200),
    session: Session = Depends(get_session),
):
    settings = _settings(request)
    size = limit or settings.default_page_size
    if size > settings.max_page_size:
        raise HTTPException(status_code=422, detail=f"limit must be at most {settings.max_page_size}")
    result = employee_service.list_employees(session, page=page, limit=size, search=search)
    return EmployeePageOut.from_page(result)


@router.get("/employees/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: int, session: Session = Depends(get_session)):
    try:
        employee = employee_service.get_employee(session, employee_id)
    except EmployeeNotFoundError as exc:
        raise _not_found() from exc
    return EmployeeOut.from_row(employee)


@router.post("/employees", response_model=EmployeeOut, status_code=201)
def create_employee(payload: EmployeeCreate, session: Session = Depends(get_session)):
    try:
        employee = employee_service.create_employee(
            session,
            first_name=payload.first_name,
            last_name=payload.last_name,
            monthly_salary=payload.monthly_salary,
        )
    except InvalidSalaryError as exc:
        raise _invalid_salary(exc) from exc
    session.commit()
    return EmployeeOut.from_row(employee)


@router.put("/employees/{employee_id}", response_model=EmployeeOut)
def update_employee(employee_id: int, payload: EmployeeUpdate, session: Session = Depends(get_session)):
    try:
        employee = employee_service.update_employee(
            session,
            employee_id,
            first_name=payload.first_name,
            last_name=payload.last_name,
            monthly_salary=payload.monthly_salary,
        )
    except EmployeeNotFoundError as exc:
        raise _not_found() from exc
    except InvalidSalaryError as exc:
        raise _invalid_salary(exc) from exc
    session.commit()
    return EmployeeOut.from_row(employee)


@router.delete("/employees/{employee_id}")
def delete_employee(employee_id: int, session: Session = Depends(get_session)):
    try:
        employee_service.delete_employee(session, employee_id)
    except EmployeeNotFoundError as exc:
        raise _not_found() from exc
    session.commit()
    return {"message": "Employee deleted successfully"}


@router.put("/employees/{employee_id}/tax-result", response_model=EmployeeOut)
def override_tax_result(
    employee_id: int,
    payload: TaxOverrideRequest,
    request: Request,
    session: Session = Depends(get_session),
):
    """Manually overwrite an employee's derived tax fields.

    Disabled unless ``FEATURE_TAX_OVERRIDE`` is set; regular updates never
    touch these fields and the next salary change re-projects them.
    """
    try:
        employee = employee_service.override_tax_result(
            session,
            employee_id,
            annual_salary=payload.annual_salary,
            annual_tax=payload.annual_tax,
            net_annual_salary=payload.net_annual_salary,
            settings=_settings(request),
        )
    except OverrideDisabledError as exc:
        raise HTTPException(status_code=410, detail="Manual tax override disabled") from exc
    except EmployeeNotFoundError as exc:
        raise _not_found() from exc
    session.commit()
    return EmployeeOut.from_row(employee)


@router.get("/tax-brackets", response_model=list[BracketOut])
def list_tax_brackets(session: Session = Depends(get_session)):
    return [BracketOut.from_bracket(bracket) for bracket in BracketRepository(session).list_ordered()]


@router.get("/calculate-tax/{employee_id}", response_model=TaxReportOut)
@router.post("/calculate-tax/{employee_id}", response_model=TaxReportOut)
def calculate_tax(employee_id: int, session: Session = Depends(get_session)):
    try:
        report = employee_service.calculate_for_employee(session, employee_id)
    except EmployeeNotFoundError as exc:
        raise _not_found() from exc
    return TaxReportOut.from_report(report)


@router.post("/tax/compute", response_model=ProjectionOut)
def compute_tax(payload: SalaryInput, session: Session = Depends(get_session)):
    try:
        projection = employee_service.project_salary(session, payload.monthly_salary)
    except InvalidSalaryError as exc:
        raise _invalid_salary(exc) from exc
    return ProjectionOut.from_projection(projection)


app.include_router(router)
