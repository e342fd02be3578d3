"""Typer CLI entrypoint for the applicant tracker."""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .errors import RecruiterError
from .logging import bind_context, configure_logging
from .schemas import FACTOR_NAMES
from .schemas.config import load_config
from .service import RecruiterService

app = typer.Typer(help="Applicant tracking: roles, candidates, scoring and pipeline stages.")

DATA_DIR_OPTION = typer.Option(
    None,
    "--data-dir",
    envvar="RECRUITER_DATA_DIR",
    file_okay=False,
    help="Directory holding candidates, roles, weights and the activity log.",
)
CONFIG_OPTION = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path.")
LOG_LEVEL_OPTION = typer.Option(None, help="Log level for structured logging (default from config).")


def _read_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def _build_service(data_dir: Optional[Path], config: Optional[Path], log_level: Optional[str]) -> RecruiterService:
    raw = _read_yaml(config) if config else None
    try:
        app_config = load_config(raw)
    except (ValueError, ValidationError) as exc:
        raise typer.BadParameter(str(exc), param_name="config") from exc
    if data_dir is not None:
        app_config.data_dir = str(data_dir)
    if app_config.data_dir is None:
        app_config.data_dir = "data"

    configure_logging(log_level or app_config.log_level)
    bind_context(data_dir=app_config.data_dir)
    container = create_container(settings=app_config.to_settings())
    return container.service()


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


@contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except RecruiterError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except (ValidationError, ValueError, yaml.YAMLError) as exc:
        typer.echo(f"Invalid input: {exc}", err=True)
        raise typer.Exit(code=2) from exc


@app.command("role-add")
def role_add(
    file: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False, help="Role YAML/JSON."),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Create a role from a YAML or JSON document."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        data = _read_yaml(file)
        if not isinstance(data, dict):
            raise ValueError("Role file must hold a single object")
        _emit(service.create_role(data).to_record())


@app.command()
def roles(
    status: Optional[str] = typer.Option(None, help="Filter by status (open/closed)."),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """List roles."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        _emit([role.to_record() for role in service.list_roles(status)])


@app.command()
def add(
    name: str = typer.Option(..., help="Candidate name."),
    email: str = typer.Option("", help="Contact email."),
    resume: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Plain-text resume."),
    notes: str = typer.Option("", help="Recruiter notes."),
    project_id: str = typer.Option("", help="Role id to attach the candidate to."),
    stage: Optional[str] = typer.Option(None, help="Initial stage; defaults to the role's first stage."),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Add one candidate."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        candidate = service.add_candidate(
            {
                "name": name,
                "email": email,
                "resume_text": resume.read_text(encoding="utf-8") if resume else "",
                "notes": notes,
                "project_id": project_id,
                "stage": stage,
            }
        )
        _emit(candidate.to_record())


@app.command("import")
def import_candidates(
    file: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False, help="JSON array or JSONL file."),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Bulk-import candidates."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        imported = service.import_candidates(_read_items(file))
        _emit({"imported": len(imported), "ids": [c.id for c in imported]})


def _read_items(path: Path) -> list[dict]:
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return []
    if text.startswith("["):
        try:
            items = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON: {exc}") from exc
        return list(items)
    items = []
    for idx, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            items.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise ValueError(f"line {idx}: invalid JSON ({exc})") from exc
    return items


@app.command("list")
def list_candidates(
    project_id: Optional[str] = typer.Option(None),
    stage: Optional[str] = typer.Option(None),
    source: Optional[str] = typer.Option(None),
    min_score: Optional[int] = typer.Option(None),
    max_score: Optional[int] = typer.Option(None),
    search: Optional[str] = typer.Option(None),
    sort: Optional[str] = typer.Option(None, help="Field to sort by; prefix with '-' for descending."),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """List candidates with optional filters."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        candidates = service.list_candidates(
            project_id=project_id,
            stage=stage,
            source=source,
            min_score=min_score,
            max_score=max_score,
            search=search,
            sort=sort,
        )
        _emit([c.to_record() for c in candidates])


@app.command()
def score(
    candidate_id: str = typer.Argument(...),
    manual: Optional[int] = typer.Option(None, "--score", help="Manual override score (0-100)."),
    reason: Optional[str] = typer.Option(None, help="Reason stored with a manual override."),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Score one candidate, automatically or by manual override."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        _emit(service.score_candidate(candidate_id, score=manual, reason=reason).to_record())


@app.command("batch-score")
def batch_score(
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Score every candidate that has no score yet."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        _emit({"scored": service.batch_score()})


@app.command()
def move(
    candidate_id: str = typer.Argument(...),
    stage: str = typer.Argument(...),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Move a candidate to another pipeline stage."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        candidate = service.move_stage(candidate_id, stage)
        _emit(
            {
                "id": candidate.id,
                "stage": candidate.stage,
                "history": [entry.model_dump(mode="json", by_alias=True) for entry in candidate.stage_history],
            }
        )


@app.command()
def reassign(
    candidate_id: str = typer.Argument(...),
    project_id: str = typer.Argument(..., help="Target role id; pass '' to unassign."),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Attach a candidate to another role."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        candidate = service.reassign(candidate_id, project_id)
        _emit({"id": candidate.id, "project_id": candidate.project_id, "stage": candidate.stage})


@app.command()
def dashboard(
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Print pipeline totals and recent activity."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        _emit(service.dashboard().to_dict())


@app.command()
def weights(
    assignments: Optional[List[str]] = typer.Option(None, "--set", help="factor=value, repeatable."),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Show the scoring weights, or update them with --set."""
    with _handle_errors():
        service = _build_service(data_dir, config, log_level)
        if not assignments:
            _emit(service.current_weights().as_dict())
            return
        updated = service.current_weights().as_dict()
        for assignment in assignments:
            factor, sep, value = assignment.partition("=")
            if not sep or factor.strip() not in FACTOR_NAMES:
                raise ValueError(f"Expected <factor>=<value> with a known factor, got {assignment!r}")
            updated[factor.strip()] = value.strip()
        _emit(service.save_weights(updated).as_dict())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
