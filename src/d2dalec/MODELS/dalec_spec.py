"""
Models for the generated Dalec specification and the records that feed it.
"""
from typing import Any, Dict, Iterator, List, Optional, Union
from pydantic import BaseModel

SpecValue = Union[str, int, float, bool, List["SpecValue"], Dict[str, "SpecValue"]]

DEFAULT_SYNTAX = "ghcr.io/azure/dalec/frontend:latest"

# Order in which top-level sections are emitted
SECTION_ORDER = [
    "args",
    "name",
    "packager",
    "vendor",
    "license",
    "website",
    "description",
    "version",
    "revision",
    "x-build-extensions",
    "sources",
    "dependencies",
    "targets",
    "build",
    "artifacts",
    "image",
    "tests",
]

class RepoMetadata(BaseModel):
    """
    Repository information used to fill in the specification.
    Any field may be empty.
    """
    git_url: str = ""
    commit: str = ""
    website: str = ""
    description: str = ""
    license: str = ""
    repo_name: str = ""

class PreviousSpec(BaseModel):
    """
    The fields of a previously generated specification used for revision
    reconciliation.
    """
    commit: str = ""
    revision: str = "1"

class DalecSpec:
    """
    An open-schema Dalec specification document.

    Values are nested dicts, lists and scalars so that source, dependency
    and target names discovered at run time can be added freely. The
    leading ``# syntax=`` directive is held apart from the keyed content.
    """
    def __init__(self, syntax: str = DEFAULT_SYNTAX):
        self.syntax = syntax
        self._data: Dict[str, SpecValue] = {}

    def __getitem__(self, key: str) -> SpecValue:
        return self._data[key]

    def __setitem__(self, key: str, value: SpecValue):
        self._data[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def keys(self):
        return self._data.keys()

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    @property
    def args(self) -> Dict[str, SpecValue]:
        return self._data.setdefault("args", {})

    @property
    def name(self) -> str:
        return self._data.get("name", "")

    @property
    def sources(self) -> Dict[str, SpecValue]:
        return self._data.setdefault("sources", {})

    @property
    def dependencies(self) -> Dict[str, SpecValue]:
        return self._data.setdefault("dependencies", {})

    @property
    def targets(self) -> Dict[str, SpecValue]:
        return self._data.setdefault("targets", {})

    @property
    def build(self) -> Dict[str, SpecValue]:
        return self._data.setdefault("build", {})

    @property
    def artifacts(self) -> Dict[str, SpecValue]:
        return self._data.setdefault("artifacts", {})

    @property
    def image(self) -> Dict[str, SpecValue]:
        return self._data.setdefault("image", {})

    @property
    def tests(self) -> List[SpecValue]:
        return self._data.setdefault("tests", [])

    def get_path(self, path: str) -> SpecValue:
        """
        Retrieves a nested value using dot notation, e.g. ``build.env.VERSION``.

        :raises KeyError: If a key along the path is missing or not a mapping.
        """
        current: Any = self._data
        for key in path.split("."):
            if not isinstance(current, dict):
                raise KeyError(f"not a map at key: {key} in path {path}")
            if key not in current:
                raise KeyError(f"key not found: {key} in path {path}")
            current = current[key]
        return current

    def set_path(self, path: str, value: SpecValue):
        """
        Sets a nested value using dot notation, creating or replacing
        intermediate mappings as needed.
        """
        keys = path.split(".")
        current = self._data
        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[keys[-1]] = value

    def to_dict(self) -> Dict[str, SpecValue]:
        """
        Returns the keyed content in emission order, without the syntax directive.
        Keys outside the known section order follow in insertion order.
        """
        ordered = {key: self._data[key] for key in SECTION_ORDER if key in self._data}
        for key, value in self._data.items():
            if key not in ordered:
                ordered[key] = value
        return ordered
