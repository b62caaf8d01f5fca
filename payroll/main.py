import argparse
import os
import random
import sys
from decimal import Decimal
from typing import Literal, Sequence

from rich.console import Console
from rich.table import Table

from payroll.config import Settings, get_settings
from payroll.core.brackets import TaxBracket
from payroll.core.projection import Projection
from payroll.core.validate import InvalidSalaryError
from payroll.db import engine as db_engine
from payroll.services import employees as employee_service
from payroll.services import seeding
from payroll.store import BracketRepository

ColorPreference = Literal["auto", "always", "never"]


def _resolve_color_preference(pref: ColorPreference) -> ColorPreference:
    if pref == "auto" and os.getenv("NO_COLOR"):
        return "never"
    return pref


def _get_console(pref: ColorPreference) -> Console:
    resolved = _resolve_color_preference(pref)
    return Console(
        force_terminal=True if resolved == "always" else None,
        no_color=resolved == "never",
        highlight=False,
    )


def _format_currency(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"PHP {value:,.2f}"


def _format_rate(rate: Decimal) -> str:
    return f"{rate * 100:.0f}%"


def _build_table(title: str, columns: list[str]) -> Table:
    table = Table(title=title, expand=False)
    for column in columns:
        table.add_column(column)
    return table


def _open_database(settings: Settings) -> None:
    db_engine.init_engine_from_url(settings.database_url, echo=settings.database_echo)
    db_engine.create_tables()


def _print_brackets(brackets: Sequence[TaxBracket], console: Console) -> None:
    if not brackets:
        console.print("No tax brackets configured. Run `payroll seed` first.")
        return
    table = _build_table("Tax brackets", ["Bracket", "Min income", "Max income", "Rate", "Base tax"])
    for bracket in brackets:
        table.add_row(
            bracket.name,
            _format_currency(bracket.min_income),
            _format_currency(bracket.max_income) if bracket.max_income is not None else "and above",
            _format_rate(bracket.rate),
            _format_currency(bracket.base_tax),
        )
    console.print(table)


def _print_projection(projection: Projection, console: Console) -> None:
    rows = [
        ("Monthly salary", _format_currency(projection.monthly_salary)),
        ("Annual salary", _format_currency(projection.annual_salary)),
        ("Tax bracket", projection.bracket.name if projection.bracket else "none (check bracket table)"),
        ("Annual tax", _format_currency(projection.annual_tax)),
        ("Monthly tax", _format_currency(projection.monthly_tax)),
        ("Net annual salary", _format_currency(projection.net_annual_salary)),
        ("Net monthly salary", _format_currency(projection.net_monthly_salary)),
    ]
    table = _build_table("Tax projection", ["Metric", "Value"])
    for metric, value in rows:
        table.add_row(metric, value)
    console.print(table)


def _cmd_serve(args: argparse.Namespace, console: Console) -> int:
    import uvicorn

    console.print(f"Serving payroll API on http://{args.host}:{args.port}")
    uvicorn.run("payroll.api.http:app", host=args.host, port=args.port, log_level=args.log_level)
    return 0


def _cmd_brackets(args: argparse.Namespace, console: Console, settings: Settings) -> int:
    _open_database(settings)
    with db_engine.session_scope() as session:
        brackets = BracketRepository(session).list_ordered()
    _print_brackets(brackets, console)
    return 0


def _cmd_compute(args: argparse.Namespace, console: Console, settings: Settings) -> int:
    try:
        salary = employee_service.salary_in_cents(args.monthly_salary)
    except InvalidSalaryError as exc:
        console.print(f"ERROR: {exc}")
        return 2
    _open_database(settings)
    with db_engine.session_scope() as session:
        projection = employee_service.project_salary(session, salary)
    _print_projection(projection, console)
    return 0


def _cmd_seed(args: argparse.Namespace, console: Console, settings: Settings) -> int:
    _open_database(settings)
    with db_engine.session_scope() as session:
        if args.reseed_brackets:
            inserted = seeding.reseed_tax_brackets(session)
            console.print(f"Reseeded {inserted} tax brackets and re-projected employees.")
        else:
            inserted = seeding.seed_tax_brackets(session)
            console.print(f"Seeded {inserted} tax brackets." if inserted else "Tax brackets already seeded.")
    if args.employees:
        target = args.target if args.target is not None else settings.seed_employee_target
        rng = random.Random(args.random_seed if args.random_seed is not None else settings.seed_random_seed)
        with db_engine.session_scope() as session:
            created = seeding.seed_employees(session, target, force=args.force, rng=rng)
        console.print(f"Seeded {created} employees (target {target}).")
    return 0


def _cmd_employees(args: argparse.Namespace, console: Console, settings: Settings) -> int:
    _open_database(settings)
    limit = args.limit or settings.default_page_size
    with db_engine.session_scope() as session:
        page = employee_service.list_employees(session, page=args.page, limit=limit, search=args.search)
        table = _build_table(
            f"Employees (page {page.page} of {max(page.pages, 1)}, {page.total} total)",
            ["ID", "Name", "Monthly", "Annual", "Bracket", "Annual tax", "Net annual"],
        )
        for row in page.items:
            table.add_row(
                str(row.id),
                row.full_name,
                _format_currency(row.monthly_salary),
                _format_currency(row.annual_salary),
                row.tax_bracket.bracket_name if row.tax_bracket is not None else "-",
                _format_currency(row.annual_tax),
                _format_currency(row.net_annual_salary),
            )
    console.print(table)
    return 0


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="payroll",
        description="Employee payroll records and Philippine income tax projection.",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output preference (default: auto).",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const="never",
        help="Alias for --color never.",
    )
    parser.add_argument("--database-url", help="Override DATABASE_URL for this run.")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3000)
    serve.add_argument("--log-level", default="info")

    sub.add_parser("brackets", help="Show the tax bracket table.")

    compute = sub.add_parser("compute", help="Project annual tax for a monthly salary.")
    compute.add_argument("monthly_salary", help="Monthly salary, e.g. 45000 or 45,000.50")

    seed = sub.add_parser("seed", help="Seed tax brackets and optional sample employees.")
    seed.add_argument("--employees", action="store_true", help="Also seed random sample employees.")
    seed.add_argument("--target", type=int, help="Employee count to top up to (default SEED_EMPLOYEE_TARGET).")
    seed.add_argument("--force", action="store_true", help="Clear existing employees before seeding.")
    seed.add_argument("--random-seed", type=int, help="Seed for reproducible sample employees.")
    seed.add_argument(
        "--reseed-brackets",
        action="store_true",
        help="Replace the bracket table and re-project every employee.",
    )

    employees = sub.add_parser("employees", help="List employees.")
    employees.add_argument("--search", help="Case-insensitive name filter.")
    employees.add_argument("--page", type=int, default=1)
    employees.add_argument("--limit", type=int)

    args = parser.parse_args(argv)
    limit = getattr(args, "limit", None)
    if getattr(args, "page", 1) < 1 or (limit is not None and limit < 1):
        parser.error("--page and --limit must be positive")
    return args


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    console = _get_console(args.color)
    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url
        get_settings.cache_clear()
    settings = get_settings()

    if args.command == "serve":
        code = _cmd_serve(args, console)
    elif args.command == "brackets":
        code = _cmd_brackets(args, console, settings)
    elif args.command == "compute":
        code = _cmd_compute(args, console, settings)
    elif args.command == "seed":
        code = _cmd_seed(args, console, settings)
    else:
        code = _cmd_employees(args, console, settings)
    db_engine.reset_engine()
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
