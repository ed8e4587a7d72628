"""Column types storing CWL descriptors as JSON."""

from __future__ import annotations

from typing import Any

from sqlalchemy.types import JSON, TypeDecorator

from ..cwl.elements import (
    element_map_from_dict,
    element_map_to_dict,
    step_map_from_dict,
    step_map_to_dict,
)


class ElementMap(TypeDecorator):
    """Mapping of port name to :class:`CWLElement`."""

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> Any:
        if value is None:
            return None
        return element_map_to_dict(value)

    def process_result_value(self, value: Any, dialect: Any) -> Any:
        if value is None:
            return None
        return element_map_from_dict(value)


class StepMap(TypeDecorator):
    """Mapping of step name to :class:`CWLStep`."""

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> Any:
        if value is None:
            return None
        return step_map_to_dict(value)

    def process_result_value(self, value: Any, dialect: Any) -> Any:
        if value is None:
            return None
        return step_map_from_dict(value)
