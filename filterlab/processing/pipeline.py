"""
Filter chains.

A pipeline is an ordered list of filters applied one after another, each one
reading the previous filter's output. Pipelines round-trip through JSON so the
last chain a user ran can be stored in the settings file.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from ..core import FilterKind, UnknownFilterError
from ..logger import get_logger
from .filters import ProcessingFilter
from .registry import create_filter

logger = get_logger("pipeline")


@dataclass
class ProcessingPipeline:
    """Ordered chain of filters; disabling the pipeline disables every step."""

    filters: List[ProcessingFilter] = field(default_factory=list)
    enabled: bool = True

    # Bumped when the stored layout changes
    FORMAT_VERSION = "1.0"

    def add_filter(self, filter: Union[str, FilterKind, ProcessingFilter]) -> ProcessingFilter:
        """
        Append a filter, given as an instance, a registry id or a FilterKind.

        Raises:
            UnknownFilterError: if an id names no registered filter
        """
        if not isinstance(filter, ProcessingFilter):
            created = create_filter(filter)
            if created is None:
                raise UnknownFilterError(filter.value if isinstance(filter, FilterKind) else filter)
            filter = created
        filter.order = len(self.filters)
        self.filters.append(filter)
        return filter

    def remove_filter(self, index: int) -> bool:
        if not 0 <= index < len(self.filters):
            return False
        del self.filters[index]
        self._renumber()
        return True

    def move_filter(self, from_index: int, to_index: int) -> bool:
        count = len(self.filters)
        if not (0 <= from_index < count and 0 <= to_index < count):
            return False
        self.filters.insert(to_index, self.filters.pop(from_index))
        self._renumber()
        return True

    def get_filter(self, index: int) -> Optional[ProcessingFilter]:
        if 0 <= index < len(self.filters):
            return self.filters[index]
        return None

    def is_empty(self) -> bool:
        return not self.filters

    def get_enabled_filters(self) -> List[ProcessingFilter]:
        """Steps that will actually run, in order."""
        if not self.enabled:
            return []
        return [f for f in self.filters if f.enabled]

    def _renumber(self) -> None:
        for position, f in enumerate(self.filters):
            f.order = position

    def __len__(self) -> int:
        return len(self.filters)

    def __iter__(self) -> Iterator[ProcessingFilter]:
        return iter(self.filters)

    # Serialization

    def to_dict(self) -> Dict[str, Any]:
        """Filters are stored by registry id plus their parameter values."""
        return {
            "format_version": self.FORMAT_VERSION,
            "enabled": self.enabled,
            "filters": [
                {
                    "filter_id": f.filter_id,
                    "enabled": f.enabled,
                    "parameters": {name: p.value for name, p in f.parameters.items()},
                }
                for f in self.filters
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProcessingPipeline":
        """
        Rebuild a pipeline through the registry.

        Entries naming an unknown filter are skipped, as are parameter values
        the filter rejects (the filter keeps its default). Both are logged.
        """
        version = data.get("format_version", cls.FORMAT_VERSION)
        if version != cls.FORMAT_VERSION:
            logger.warning("Pipeline format %s differs from %s; loading anyway",
                           version, cls.FORMAT_VERSION)

        pipeline = cls(enabled=bool(data.get("enabled", True)))
        for entry in data.get("filters", []):
            filter_obj = create_filter(entry.get("filter_id") or "")
            if filter_obj is None:
                logger.warning("Skipping unknown filter %r", entry.get("filter_id"))
                continue

            for name, value in entry.get("parameters", {}).items():
                param = filter_obj.get_parameter(name)
                if param is None:
                    logger.warning("%s has no parameter %r", filter_obj.name, name)
                    continue
                default = param.value
                if not filter_obj.set_parameter(name, value):
                    logger.warning("Ignoring %s %s=%r", filter_obj.name, name, value)
                    filter_obj.set_parameter(name, default)

            filter_obj.enabled = bool(entry.get("enabled", True))
            pipeline.add_filter(filter_obj)

        return pipeline

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> "ProcessingPipeline":
        """Raises ValueError if text is not a JSON object."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Pipeline JSON must be an object")
        return cls.from_dict(data)
