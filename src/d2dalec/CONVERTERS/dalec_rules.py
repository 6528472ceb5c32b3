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
Extraction rules turning a BuildModel into the sections of a Dalec spec.

Each rule reads the model (and optional repository metadata) and returns
one section. Rules do not depend on each other's output.
"""
import posixpath
from typing import Any, Dict, List, Optional

from ..MODELS.build_model import BuildModel, Stage
from ..MODELS.dalec_spec import RepoMetadata
from ..CLASSIFIERS.stage_roles import (
    DEFAULT_BUILDER_NAME,
    builder_stage_name,
    final_stage_candidate,
    is_builder_stage,
    uses_language_toolchain,
)

DEFAULT_PACKAGE_NAME = "package"
DEFAULT_SOURCE_NAME = "source"
DEFAULT_REVISION = "1"
DEFAULT_VERSION = "0.1"

GENERIC_STAGE_NAMES = {"builder", "build"}
OS_STAGE_NAMES = {"linux", "windows"}

BINARY_DIR_SEGMENT = "/bin/"
EXECUTABLE_SUFFIX = ".exe"
CONVENTIONAL_BIN_DIR = "/usr/bin/"

GO_BUILD_DEPENDENCY = "msft-golang"
GO_RUNTIME_DEPENDENCIES = ["openssl-libs", "SymCrypt", "SymCrypt-OpenSSL"]
GO_BUILD_ENV = {
    "GOPROXY": "direct",
    "GOEXPERIMENT": "systemcrypto",
    "CGO_ENABLED": "1",
}
RUNTIME_TARGET = "azlinux3"

# RUN commands installing system packages belong to dependencies, not steps
PACKAGE_INSTALL_MARKERS = ("apt-get", "yum install", "tdnf install")

# Env names owned by the args section
EXCLUDED_BUILD_ENV = {"OS", "ARCH", "VERSION"}


def _declared_arg(model: BuildModel, key: str, default: str) -> str:
    value = model.global_args.get(key, "")
    return value if value else default


def _has_toolchain(model: BuildModel) -> bool:
    return any(uses_language_toolchain(stage) for stage in model.stages)


def extract_args(model: BuildModel, meta: Optional[RepoMetadata] = None) -> Dict[str, Any]:
    """
    Builds the args section. Declared global ARGs of the same name replace
    the generated defaults; the commit prefers repository metadata.
    """
    commit = meta.commit if meta is not None and meta.commit else _declared_arg(model, "COMMIT", "")
    return {
        "REVISION": _declared_arg(model, "REVISION", DEFAULT_REVISION),
        "VERSION": _declared_arg(model, "VERSION", DEFAULT_VERSION),
        "COMMIT": commit,
        "TARGETARCH": _declared_arg(model, "TARGETARCH", ""),
        "TARGETOS": _declared_arg(model, "TARGETOS", ""),
    }


def _binary_name_from(path: str) -> str:
    name = posixpath.basename(path.rstrip("/"))
    if name.lower().endswith(EXECUTABLE_SUFFIX):
        name = name[:-len(EXECUTABLE_SUFFIX)]
    return name.lower()


def _is_directory_source(path: str) -> bool:
    return path.endswith("/") or posixpath.basename(path) == "bin"


def derive_package_name(model: BuildModel, meta: Optional[RepoMetadata] = None) -> str:
    """
    Picks the package name.

    Order of preference: repository name, the last meaningful stage name,
    a binary copied out of the builder stage, then ``package``.
    """
    if meta is not None and meta.repo_name:
        return meta.repo_name.lower()

    for stage in reversed(model.stages):
        name = stage.name.lower()
        if not name or name in OS_STAGE_NAMES:
            continue
        if name in GENERIC_STAGE_NAMES or is_builder_stage(stage):
            continue
        return name

    builder = builder_stage_name(model.stages)
    for stage in reversed(model.stages):
        for copy in stage.copy_instructions:
            if copy.from_stage not in (builder, DEFAULT_BUILDER_NAME):
                continue
            for src in copy.sources:
                if BINARY_DIR_SEGMENT in src and not _is_directory_source(src):
                    name = _binary_name_from(src)
                    if name:
                        return name

    return DEFAULT_PACKAGE_NAME


def _source_name_from_workdir(stage: Stage) -> str:
    if stage.workdir:
        name = posixpath.basename(stage.workdir.rstrip("/"))
        if name and name not in ("/", "."):
            return name
    return DEFAULT_SOURCE_NAME


def _git_source(meta: Optional[RepoMetadata]) -> Dict[str, Any]:
    # An empty url is left for manual input
    url = meta.git_url if meta is not None and meta.git_url else ""
    return {"git": {"url": url, "commit": "${COMMIT}"}}


def extract_sources(model: BuildModel, meta: Optional[RepoMetadata] = None) -> Dict[str, Any]:
    """
    Builds the sources section with a single git source, named after the
    repository or the first builder stage's working directory.
    """
    if not model.stages:
        return {}

    source_name = meta.repo_name if meta is not None and meta.repo_name else ""

    for stage in model.stages:
        if not is_builder_stage(stage):
            continue
        if not source_name:
            source_name = _source_name_from_workdir(stage)
        source = _git_source(meta)
        if uses_language_toolchain(stage):
            source["generate"] = [{"gomod": {}}]
        return {source_name: source}

    return {source_name or DEFAULT_SOURCE_NAME: _git_source(meta)}


def extract_dependencies(model: BuildModel) -> Dict[str, Any]:
    """
    Builds the dependencies section from toolchain usage across all stages.
    """
    build_deps: Dict[str, Any] = {}
    for stage in model.stages:
        if uses_language_toolchain(stage) or stage.base_ref == "go" or "golang" in stage.base_ref:
            build_deps[GO_BUILD_DEPENDENCY] = {}

    if build_deps:
        return {"build": build_deps}
    return {}


def extract_targets(model: BuildModel) -> Dict[str, Any]:
    """
    Adds the runtime crypto libraries a Go binary needs on Azure Linux.
    """
    if not _has_toolchain(model):
        return {}
    runtime = {dep: {} for dep in GO_RUNTIME_DEPENDENCIES}
    return {RUNTIME_TARGET: {"dependencies": {"runtime": runtime}}}


def _build_commands(stage: Stage) -> str:
    commands = [
        run for run in stage.run_commands
        if not any(marker in run for marker in PACKAGE_INSTALL_MARKERS)
    ]
    if not commands:
        return ""
    cmd = "\n".join(commands)
    if stage.workdir and "cd " not in cmd:
        cmd = f"cd {stage.workdir}\n{cmd}"
    return cmd


def extract_build(model: BuildModel) -> Dict[str, Any]:
    """
    Builds the build section: environment from builder stages and one
    step per builder stage with its RUN commands.
    """
    if not model.stages:
        return {}

    env: Dict[str, str] = {"VERSION": "${VERSION}"}
    steps: List[Dict[str, str]] = []

    for stage in model.stages:
        if not is_builder_stage(stage):
            continue
        for key, value in stage.env.items():
            if key not in EXCLUDED_BUILD_ENV:
                env[key] = value
        if uses_language_toolchain(stage):
            env.update(GO_BUILD_ENV)

        cmd = _build_commands(stage)
        if cmd:
            steps.append({"command": cmd})

    build: Dict[str, Any] = {"env": env}
    if steps:
        build["steps"] = steps
    return build


def _is_binary_path(path: str) -> bool:
    if _is_directory_source(path):
        return False
    return BINARY_DIR_SEGMENT in path or path.lower().endswith(EXECUTABLE_SUFFIX)


def extract_artifacts(model: BuildModel) -> Dict[str, Any]:
    """
    Collects binaries copied from the builder stage into later stages.
    """
    builder = builder_stage_name(model.stages)
    binaries: Dict[str, Any] = {}

    for stage in reversed(model.stages):
        if is_builder_stage(stage):
            continue
        for copy in stage.copy_instructions:
            if copy.from_stage not in (builder, DEFAULT_BUILDER_NAME):
                continue
            for src in copy.sources:
                if _is_binary_path(src):
                    binaries[src] = {}

    if binaries:
        return {"binaries": binaries}
    return {}


def _resolve_destination(dest: str, binary: str) -> str:
    if dest.endswith("/") or posixpath.basename(dest) == "bin":
        return posixpath.join(dest, binary)
    return dest


def create_symlinks(stage: Stage) -> Dict[str, Any]:
    """
    Maps ``/usr/bin/<binary>`` to wherever a builder binary was copied,
    when that is not ``/usr/bin`` already.
    """
    symlinks: Dict[str, Any] = {}
    for copy in stage.copy_instructions:
        from_stage = (copy.from_stage or "").lower()
        if from_stage != DEFAULT_BUILDER_NAME and "build" not in from_stage:
            continue
        if not copy.dest:
            continue
        for src in copy.sources:
            if BINARY_DIR_SEGMENT not in src or _is_directory_source(src):
                continue
            binary = posixpath.basename(src)
            if not binary:
                continue
            dest_path = _resolve_destination(copy.dest, binary)
            if BINARY_DIR_SEGMENT not in dest_path:
                continue
            link = CONVENTIONAL_BIN_DIR + binary
            if dest_path != link:
                symlinks[link] = {"path": dest_path}

    if symlinks:
        return {"symlinks": symlinks}
    return {}


def extract_image(model: BuildModel) -> Dict[str, Any]:
    """
    Builds the image section from the final stage: the entrypoint command
    and symlinks for copied binaries.
    """
    final = final_stage_candidate(model.stages)
    if final is None:
        return {}

    image: Dict[str, Any] = {}
    if final.entrypoint:
        entrypoint = final.entrypoint[0]
        # Unwrap /bin/sh -c "<command>"
        if len(final.entrypoint) > 2 and final.entrypoint[0] == "/bin/sh":
            entrypoint = final.entrypoint[2]
        image["entrypoint"] = entrypoint

    post = create_symlinks(final)
    if post:
        image["post"] = post
    return image
