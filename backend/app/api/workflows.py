"""REST API endpoints for registering and inspecting workflow records."""

from __future__ import annotations

from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from flask import Blueprint, abort, current_app, jsonify, request

from ..cwl.elements import (
    element_map_from_dict,
    element_map_to_dict,
    step_map_from_dict,
    step_map_to_dict,
)
from ..errors import WorkflowConflict
from ..models.git import GitDetails, GitType
from ..models.workflow import Workflow
from ..services import get_services

bp = Blueprint("workflows", __name__)

_SOURCE_FIELDS = ("repo_url", "branch", "path")


def _serialize_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    timestamp = value.isoformat()
    if timestamp.endswith("+00:00"):
        return timestamp.replace("+00:00", "Z")
    if not timestamp.endswith("Z"):
        return f"{timestamp}Z"
    return timestamp


def _serialize_summary(workflow: Workflow) -> dict[str, Any]:
    ref = workflow.retrieved_from
    return {
        "id": workflow.id,
        "label": workflow.label,
        "retrieved_from": ref.to_dict() if ref is not None else None,
        "retrieved_on": _serialize_timestamp(workflow.retrieved_on),
        "last_commit": workflow.last_commit,
    }


def _serialize_workflow(workflow: Workflow) -> dict[str, Any]:
    """Return a JSON serialisable representation of a workflow."""

    payload = _serialize_summary(workflow)
    ref = workflow.retrieved_from
    if ref is not None and workflow.last_commit:
        path_part = "" if ref.path == "/" else ref.path
        payload["permalink"] = f"/git/{workflow.last_commit}/{path_part}"
    payload.update(
        {
            "doc": workflow.doc,
            "inputs": element_map_to_dict(workflow.inputs),
            "outputs": element_map_to_dict(workflow.outputs),
            "steps": step_map_to_dict(workflow.steps),
            "docker_link": workflow.docker_link,
            "ro_bundle": workflow.ro_bundle,
            "dot_graph": workflow.dot_graph,
        }
    )
    return payload


def _normalize_source(value: Any) -> tuple[GitDetails | None, list[str]]:
    """Validate the ``retrieved_from`` payload."""

    if not isinstance(value, dict):
        return None, ["retrieved_from must be an object"]

    errors: list[str] = []
    for field in _SOURCE_FIELDS:
        candidate = value.get(field)
        if not isinstance(candidate, str) or not candidate.strip():
            errors.append(f"retrieved_from.{field} is required")
    packed_id = value.get("packed_id")
    if packed_id is not None and not isinstance(packed_id, str):
        errors.append("retrieved_from.packed_id must be a string or null")
    if errors:
        return None, errors

    ref = GitDetails(
        repo_url=value["repo_url"].strip(),
        branch=value["branch"].strip(),
        path=value["path"].strip().strip("/") or "/",
        packed_id=(packed_id or "").strip() or None,
    )
    if ref.git_type is not GitType.GENERIC and not ref.has_repository_path:
        return None, [f"retrieved_from.repo_url must name an owner/repo on {ref.git_type.value}"]
    return ref, []


def _normalize_content(payload: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Validate the parsed CWL content of a registration payload."""

    errors: list[str] = []
    for field in ("inputs", "outputs", "steps"):
        value = payload.get(field)
        if value is not None and not isinstance(value, dict):
            errors.append(f"{field} must be an object")
    for field in ("label", "doc", "docker_link", "ro_bundle"):
        value = payload.get(field)
        if value is not None and not isinstance(value, str):
            errors.append(f"{field} must be a string or null")
    if errors:
        return {}, errors

    try:
        content = {
            "inputs": element_map_from_dict(payload.get("inputs")),
            "outputs": element_map_from_dict(payload.get("outputs")),
            "steps": step_map_from_dict(payload.get("steps")),
        }
    except (AttributeError, TypeError) as exc:
        return {}, [f"invalid workflow content: {exc}"]
    return content, []


@bp.post("/workflows")
def create_workflow() -> tuple[object, int]:
    payload = request.get_json(silent=True, force=True) or {}

    ref, errors = _normalize_source(payload.get("retrieved_from"))
    content, content_errors = _normalize_content(payload)
    errors.extend(content_errors)

    last_commit = payload.get("last_commit")
    if not isinstance(last_commit, str) or not last_commit.strip():
        errors.append("last_commit is required")
    if errors:
        return jsonify({"errors": errors}), HTTPStatus.BAD_REQUEST

    workflow = Workflow(
        label=payload.get("label"),
        doc=payload.get("doc"),
        inputs=content["inputs"],
        outputs=content["outputs"],
        steps=content["steps"],
        docker_link=payload.get("docker_link"),
    )
    workflow.retrieved_from = ref
    workflow.retrieved_on = datetime.now(timezone.utc)
    workflow.last_commit = last_commit.strip()
    workflow.ro_bundle = payload.get("ro_bundle")
    workflow.generate_graph()

    try:
        get_services().repository.save(workflow)
    except WorkflowConflict as exc:
        return jsonify({"error": str(exc)}), HTTPStatus.CONFLICT

    return jsonify(_serialize_workflow(workflow)), HTTPStatus.CREATED


@bp.get("/workflows")
def list_workflows() -> tuple[object, int]:
    workflows = get_services().repository.list_all()
    return jsonify([_serialize_summary(workflow) for workflow in workflows]), HTTPStatus.OK


def _get_or_404(workflow_id: int) -> Workflow:
    workflow = get_services().repository.find(workflow_id)
    if workflow is None:
        abort(HTTPStatus.NOT_FOUND)
    return workflow


@bp.get("/workflows/<int:workflow_id>")
def get_workflow(workflow_id: int) -> tuple[object, int]:
    workflow = _get_or_404(workflow_id)
    return jsonify(_serialize_workflow(workflow)), HTTPStatus.OK


@bp.post("/workflows/<int:workflow_id>/graph")
def regenerate_graph(workflow_id: int) -> tuple[object, int]:
    workflow = _get_or_404(workflow_id)
    result = workflow.generate_graph()
    if not result.generated:
        current_app.logger.warning("Keeping previous graph for workflow %s", workflow_id)
        return (
            jsonify({"generated": False, "error": result.error}),
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    get_services().repository.save(workflow)
    return jsonify({"generated": True, "dot_graph": workflow.dot_graph}), HTTPStatus.OK


@bp.delete("/workflows/<int:workflow_id>")
def delete_workflow(workflow_id: int) -> tuple[object, int]:
    workflow = _get_or_404(workflow_id)
    get_services().repository.delete(workflow)
    return "", HTTPStatus.NO_CONTENT
