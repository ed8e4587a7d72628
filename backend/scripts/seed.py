"""Seed the database with an example workflow so its permalinks resolve."""
from __future__ import annotations

import pathlib
import sys
from datetime import datetime, timezone

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app import create_app
from backend.app.cwl.elements import CWLElement, CWLStep
from backend.app.models.git import GitDetails
from backend.app.models.workflow import Workflow
from backend.app.services import get_services

EXAMPLE_SOURCE = GitDetails(
    repo_url="https://github.com/common-workflow-language/workflows.git",
    branch="master",
    path="workflows/lobSTR/lobSTR-workflow.cwl",
)
EXAMPLE_COMMIT = "933bf2a1a1cce32d88f88f136275ca5e9528f4f4"


def _example_content() -> dict[str, object]:
    inputs = {
        "p1": CWLElement(label="Paired reads 1", type="File[]"),
        "p2": CWLElement(label="Paired reads 2", type="File[]"),
        "reference": CWLElement(label="Reference bundle", type="File"),
    }
    steps = {
        "lobSTR": CWLStep(
            label="lobSTR",
            run="lobSTR-tool.cwl",
            run_type="CommandLineTool",
            inputs={
                "p1": CWLElement(source_ids=["#p1"]),
                "p2": CWLElement(source_ids=["#p2"]),
                "reference": CWLElement(source_ids=["#reference"]),
            },
            outputs={"bam": CWLElement(type="File")},
        ),
        "samtools_sort": CWLStep(
            label="samtools sort",
            run="samtools-sort.cwl",
            run_type="CommandLineTool",
            inputs={"input": CWLElement(source_ids=["#lobSTR/bam"])},
            outputs={"output_file": CWLElement(type="File")},
        ),
    }
    outputs = {
        "bam": CWLElement(label="Sorted alignments", type="File", source_ids=["#samtools_sort/output_file"]),
    }
    return {"inputs": inputs, "outputs": outputs, "steps": steps}


def _ensure_example_workflow() -> tuple[bool, bool]:
    repository = get_services().repository
    workflow = repository.find_by_source(EXAMPLE_SOURCE)
    content = _example_content()
    created = workflow is None
    updated = False

    if workflow is None:
        workflow = Workflow(
            label="lobSTR workflow",
            doc="Example workflow calling short tandem repeats.",
            inputs=content["inputs"],
            outputs=content["outputs"],
            steps=content["steps"],
            docker_link="https://hub.docker.com/r/rabix/lobstr",
        )
        workflow.retrieved_from = EXAMPLE_SOURCE
    elif workflow.last_commit != EXAMPLE_COMMIT:
        updated = True

    workflow.retrieved_on = datetime.now(timezone.utc)
    workflow.last_commit = EXAMPLE_COMMIT
    if workflow.dot_graph is None:
        workflow.generate_graph()
    repository.save(workflow)
    return created, updated


def main() -> None:
    app = create_app()
    with app.app_context():
        created, updated = _ensure_example_workflow()
        print(
            "Seed completed",
            f"workflows created={int(created)}",
            f"workflows updated={int(updated)}",
            f"permalink=/git/{EXAMPLE_COMMIT}/{EXAMPLE_SOURCE.path}",
        )


if __name__ == "__main__":
    main()
