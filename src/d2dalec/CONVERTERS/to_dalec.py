# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Converters for generating Dalec specifications from Dockerfile build models.
"""
import logging
from typing import Any, Dict, Optional

from ..MODELS.build_model import BuildModel
from ..MODELS.dalec_spec import DalecSpec, PreviousSpec, RepoMetadata
from ..MANAGERS.revision_manager import RevisionDecision, reconcile_revision
from . import dalec_rules

logger = logging.getLogger(__name__)

PACKAGER = "Azure Container Upstream"
VENDOR = "Microsoft Corporation"
BUILD_REPOSITORY = "azure"
BUILD_TARGETS = [
    "azlinux3/rpm",
    "azlinux3/container",
    "windowscross/container",
]
PER_TARGET = {
    "windowscross": {"platforms": ["windows/amd64"]},
}


def build_extensions(package_name: str) -> Dict[str, Any]:
    """
    Creates the x-build-extensions section.
    """
    return {
        "image-name": package_name.lower(),
        "repository": BUILD_REPOSITORY,
        "build-targets": list(BUILD_TARGETS),
        "per-target": {target: {key: list(value) for key, value in conf.items()}
                       for target, conf in PER_TARGET.items()},
    }


class DalecConverter:
    """
    Converts a Dockerfile build model and repository metadata into a
    Dalec specification.
    """

    def __init__(self, model: Optional[BuildModel], metadata: Optional[RepoMetadata] = None):
        """
        Initializes the Dalec converter.

        :param model: The Dockerfile build model; None is treated as an empty Dockerfile.
        :param metadata: Repository metadata, if it could be fetched.
        """
        self.model = model if model is not None else BuildModel()
        self.metadata = metadata
        self.revision: Optional[RevisionDecision] = None

    def convert(self, previous: Optional[PreviousSpec] = None) -> DalecSpec:
        """
        Generates the specification.

        :param previous: The previously generated specification, if any. Its
            commit and revision decide the emitted ``args.REVISION``.
        :return: The generated DalecSpec.
        """
        spec = DalecSpec()

        spec["args"] = dalec_rules.extract_args(self.model, self.metadata)
        self.revision = reconcile_revision(
            previous,
            spec.get_path("args.COMMIT"),
            default=spec.get_path("args.REVISION"),
        )
        spec.set_path("args.REVISION", self.revision.revision)

        package_name = dalec_rules.derive_package_name(self.model, self.metadata)
        spec["name"] = package_name
        self._populate_metadata(spec)

        spec["x-build-extensions"] = build_extensions(package_name)

        spec["sources"] = dalec_rules.extract_sources(self.model, self.metadata)
        spec["dependencies"] = dalec_rules.extract_dependencies(self.model)
        spec["targets"] = dalec_rules.extract_targets(self.model)
        spec["build"] = dalec_rules.extract_build(self.model)
        spec["artifacts"] = dalec_rules.extract_artifacts(self.model)
        spec["image"] = dalec_rules.extract_image(self.model)
        spec["tests"] = []

        logger.debug("Generated spec for %s with %d stages", package_name, len(self.model.stages))
        return spec

    def _populate_metadata(self, spec: DalecSpec):
        """
        Fills the package metadata fields. Unknown values stay as empty
        strings for manual input.
        """
        meta = self.metadata or RepoMetadata()
        spec["packager"] = PACKAGER
        spec["vendor"] = VENDOR
        spec["license"] = meta.license
        spec["website"] = meta.website
        spec["description"] = meta.description
        spec["version"] = "${VERSION}"
        spec["revision"] = "${REVISION}"
