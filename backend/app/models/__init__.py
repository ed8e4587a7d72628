"""Database models for the workflow permalink backend."""

from .git import GitDetails, GitType
from .workflow import GraphResult, Workflow

__all__ = ["GitDetails", "GitType", "GraphResult", "Workflow"]
