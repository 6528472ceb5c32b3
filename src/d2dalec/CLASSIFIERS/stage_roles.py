"""
Heuristics answering which role a build stage plays: compiling, shipping,
or building with a particular language toolchain.
"""
import re
from typing import Optional, Sequence
from ..MODELS.build_model import Stage

DEFAULT_BUILDER_NAME = "builder"

# Commands in a RUN line that show the Go toolchain was invoked
GO_TOOLCHAIN_SIGNATURES = ("go build", "go mod")

# Platform-specific stages never chosen as the final image
PLATFORM_STAGE_NAMES = {"windows", "hpc"}

def is_builder_stage(stage: Stage) -> bool:
    """
    Checks whether a stage compiles rather than ships, judged by its name.
    """
    name = stage.name.lower()
    return name == DEFAULT_BUILDER_NAME or "build" in name

def _command_pattern(signature: str):
    # The command word must stand alone: "cargo build" is not "go build"
    return re.compile(r"(?<![\w./-])" + re.escape(signature) + r"\b")

def uses_language_toolchain(stage: Stage, signatures: Sequence[str] = GO_TOOLCHAIN_SIGNATURES) -> bool:
    """
    Checks whether any RUN command of the stage invokes a toolchain signature.
    """
    patterns = [_command_pattern(sig) for sig in signatures]
    return any(p.search(run) for run in stage.run_commands for p in patterns)

def final_stage_candidate(stages: Sequence[Stage]) -> Optional[Stage]:
    """
    Picks the last non platform-specific stage that has an entrypoint or
    copies files in.

    :param stages: Stages in declaration order.
    :return: The selected stage, or None when no stage qualifies.
    """
    for stage in reversed(stages):
        if stage.name in PLATFORM_STAGE_NAMES:
            continue
        if stage.entrypoint or stage.copy_instructions:
            return stage
    return None

def builder_stage_name(stages: Sequence[Stage]) -> str:
    """
    Name of the first builder stage, or ``builder`` when none is declared.
    """
    for stage in stages:
        if is_builder_stage(stage) and stage.name:
            return stage.name
    return DEFAULT_BUILDER_NAME
