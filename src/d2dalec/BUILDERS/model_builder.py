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
Builders for converting parsed Dockerfile instructions into a BuildModel
of stages, directives and global declarations.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..PARSERS.dockerfile_parser import DockerfileParser
from ..MODELS.dockerfile_ast import Instruction
from ..MODELS.build_model import BuildModel, BuildWarning, CopyInstruction, CopyKind, Stage

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "/bin/sh"


def parse_key_value(value: str) -> Tuple[str, str]:
    """
    Splits ``key=value`` or ``key value`` into its parts.

    The first ``=`` wins; without one, the first space separates key from
    value. A lone word is a key with an empty value.
    """
    if "=" in value:
        key, val = value.split("=", 1)
        return key.strip(), val
    parts = value.split(" ", 1)
    if len(parts) == 2:
        return parts[0].strip(), parts[1]
    return value.strip(), ""


@dataclass
class _BuildState:
    """
    Mutable state for one build pass. The current stage is tracked by index
    into ``stages`` so growing the list never invalidates it.
    """
    stages: List[Stage] = field(default_factory=list)
    global_args: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    warnings: List[BuildWarning] = field(default_factory=list)
    current: Optional[int] = None

    @property
    def stage(self) -> Optional[Stage]:
        if self.current is None:
            return None
        return self.stages[self.current]

    def warn(self, inst: Instruction, message: str):
        logger.warning("line %d: %s: %s", inst.line, inst.instruction, message)
        self.warnings.append(BuildWarning(line=inst.line, instruction=inst.instruction, message=message))


class ModelBuilder:
    """
    Walks a Dockerfile instruction stream and builds the stage model.
    Unknown instructions are ignored.
    """
    def __init__(self, base_dir: str = "."):
        """
        Initializes the ModelBuilder.

        :param base_dir: The base directory for resolving relative paths.
        """
        self.base_dir = base_dir
        self.parser = DockerfileParser()
        self._handlers = {
            "FROM": self._on_from,
            "ARG": self._on_arg,
            "ENV": self._on_env,
            "WORKDIR": self._on_workdir,
            "RUN": self._on_run,
            "COPY": self._on_copy,
            "ADD": self._on_copy,
            "ENTRYPOINT": self._on_entrypoint,
            "CMD": self._on_cmd,
            "EXPOSE": self._on_expose,
            "LABEL": self._on_label,
        }

    def build_from_file(self, dockerfile_path: str) -> BuildModel:
        """
        Parses a Dockerfile and builds its model.

        :param dockerfile_path: Path to the Dockerfile.
        :return: A BuildModel instance.
        :raises OSError: If the Dockerfile cannot be read.
        """
        full_path = os.path.join(self.base_dir, dockerfile_path)
        instructions = self.parser.parse(full_path)
        logger.debug("Parsed %d instructions from %s", len(instructions), full_path)
        return self.build(instructions)

    def build(self, instructions: Iterable[Instruction]) -> BuildModel:
        """
        Builds a model from already parsed instructions.

        :param instructions: Instructions in file order.
        :return: A BuildModel instance.
        """
        state = _BuildState()

        for inst in instructions:
            handler = self._handlers.get(inst.instruction.upper())
            if handler is None:
                continue
            handler(state, inst)

        return BuildModel(
            stages=state.stages,
            global_args=state.global_args,
            labels=state.labels,
            warnings=state.warnings,
        )

    def _require_stage(self, state: _BuildState, inst: Instruction) -> Optional[Stage]:
        stage = state.stage
        if stage is None:
            state.warn(inst, "instruction appears before any FROM, ignored")
        return stage

    def _on_from(self, state: _BuildState, inst: Instruction):
        # FROM --platform=linux/amd64 golang:1.21 AS builder
        stage = Stage(platform=inst.flag_value("platform"))
        args = inst.arguments
        if args:
            stage.base_ref = args[0]
            if len(args) > 2 and args[1].upper() == "AS":
                stage.name = args[2]
        else:
            state.warn(inst, "missing base image")

        state.stages.append(stage)
        state.current = len(state.stages) - 1

    def _on_arg(self, state: _BuildState, inst: Instruction):
        key, value = parse_key_value(" ".join(inst.arguments))
        if not key:
            state.warn(inst, "missing argument name")
            return
        state.global_args[key] = value
        if state.stage is not None:
            state.stage.args[key] = value

    def _on_env(self, state: _BuildState, inst: Instruction):
        stage = self._require_stage(state, inst)
        if stage is None:
            return
        key, value = parse_key_value(" ".join(inst.arguments))
        if not key:
            state.warn(inst, "missing variable name")
            return
        stage.env[key] = value

    def _on_workdir(self, state: _BuildState, inst: Instruction):
        stage = self._require_stage(state, inst)
        if stage is None:
            return
        if not inst.arguments:
            state.warn(inst, "missing path")
            return
        stage.workdir = inst.arguments[0]

    def _on_run(self, state: _BuildState, inst: Instruction):
        stage = self._require_stage(state, inst)
        if stage is None:
            return
        stage.run_commands.append(" ".join(inst.arguments))

    def _on_copy(self, state: _BuildState, inst: Instruction):
        stage = self._require_stage(state, inst)
        if stage is None:
            return
        if not inst.arguments:
            state.warn(inst, "no source or destination given, skipped")
            return

        # COPY --from=builder /app/bin /usr/local/bin
        stage.copy_instructions.append(CopyInstruction(
            kind=CopyKind(inst.instruction.upper()),
            from_stage=inst.flag_value("from"),
            sources=list(inst.arguments[:-1]),
            dest=inst.arguments[-1],
        ))

    def _command_array(self, inst: Instruction) -> List[str]:
        """
        Exec form is taken literally; shell form is wrapped in ``/bin/sh -c``.
        """
        if inst.json_form:
            return list(inst.arguments)
        cmd = " ".join(inst.arguments)
        if cmd:
            return [DEFAULT_SHELL, "-c", cmd]
        return []

    def _on_entrypoint(self, state: _BuildState, inst: Instruction):
        stage = self._require_stage(state, inst)
        if stage is not None:
            stage.entrypoint = self._command_array(inst)

    def _on_cmd(self, state: _BuildState, inst: Instruction):
        stage = self._require_stage(state, inst)
        if stage is not None:
            stage.cmd = self._command_array(inst)

    def _on_expose(self, state: _BuildState, inst: Instruction):
        stage = self._require_stage(state, inst)
        if stage is None:
            return
        if not inst.arguments:
            state.warn(inst, "missing port")
            return
        stage.exposed_ports.append(inst.arguments[0])

    def _on_label(self, state: _BuildState, inst: Instruction):
        key, value = parse_key_value(" ".join(inst.arguments))
        if not key:
            state.warn(inst, "missing label name")
            return
        state.labels[key] = value.strip('"')
