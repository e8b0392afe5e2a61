"""
Pydantic data models for runtime_dependencies.json.

Each entry describes one zip archive: where to fetch it, what to call the
temporary download and where it is extracted relative to the application
data directory. URLs may hold {host}, {version} and {arch} placeholders.
"""

import json
import pathlib
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

RUNTIME_DEPENDENCIES_FILE = pathlib.Path(__file__).parent / "runtime_dependencies.json"


class Dependency(BaseModel):
    """
    A downloadable archive.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    url: str = Field(..., description="URL or URL template to download from")
    archive_type: str = Field("zip", alias="archiveType")
    archive_name: str = Field(..., alias="archiveName")
    install_path: str = Field("", alias="installPath")
    stale_paths: List[str] = Field(default_factory=list, alias="stalePaths")
    version: Optional[str] = None
    host: Optional[str] = None
    description: Optional[str] = Field(None, alias="_description")

    def resolve_url(
        self,
        version: Optional[str] = None,
        host: Optional[str] = None,
        arch: Optional[str] = None,
    ) -> str:
        """
        Fill the URL template. Explicit arguments win over the entry's own values.
        """
        return self.url.format(
            version=version or self.version or "",
            host=host or self.host or "",
            arch=arch or "",
        )


class RuntimeDependenciesConfig(BaseModel):
    """
    Complete runtime dependencies configuration.

    Structure:
    {
      "_description": "...",
      "dependencies": {
        "cli": Dependency,
        "runtime": Dependency
      }
    }
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    description: Optional[str] = Field(None, alias="_description")
    dependencies: Dict[str, Dependency] = Field(default_factory=dict)

    def get_dependencies(self) -> Dict[str, Dependency]:
        return self.dependencies

    def get_dependency(self, key: str) -> Optional[Dependency]:
        return self.dependencies.get(key)

    @classmethod
    def from_dict(cls, data: dict) -> "RuntimeDependenciesConfig":
        return cls.model_validate(data)


def load_runtime_dependencies(
    path: pathlib.Path = RUNTIME_DEPENDENCIES_FILE,
) -> RuntimeDependenciesConfig:
    """
    Load and validate a runtime_dependencies.json file (the packaged one by default)
    """
    with open(path, "r") as f:
        return RuntimeDependenciesConfig.from_dict(json.load(f))
