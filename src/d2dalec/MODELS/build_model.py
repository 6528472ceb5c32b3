"""
Models for the structured view of a multi-stage Dockerfile: stages,
their directives, and the global declarations shared between them.
"""
from typing import List, Dict, Optional
from pydantic import BaseModel, ConfigDict
from enum import Enum

class CopyKind(str, Enum):
    """
    The directive a file transfer came from.
    """
    COPY = "COPY"
    ADD = "ADD"

class CopyInstruction(BaseModel):
    """
    A single COPY or ADD directive. The last positional argument is the
    destination, every preceding one is a source.
    """
    kind: CopyKind = CopyKind.COPY
    from_stage: Optional[str] = None
    sources: List[str] = []
    dest: str = ""

class Stage(BaseModel):
    """
    One build phase, started by FROM and ending at the next FROM.
    """
    name: str = ""
    base_ref: str = ""
    platform: Optional[str] = None

    args: Dict[str, str] = {}
    env: Dict[str, str] = {}
    workdir: str = ""

    run_commands: List[str] = []
    copy_instructions: List[CopyInstruction] = []

    entrypoint: List[str] = []
    cmd: List[str] = []
    exposed_ports: List[str] = []

    def display_name(self, index: int) -> str:
        """Name used in reports for stages without an AS clause."""
        return self.name or f"(unnamed stage {index})"

class BuildWarning(BaseModel):
    """
    A recoverable fault raised while building the model from one instruction.
    """
    line: int = 0
    instruction: str
    message: str

class BuildModel(BaseModel):
    """
    Top-level result of building a Dockerfile model. Stage order is the
    declaration order and is preserved everywhere downstream.
    """
    model_config = ConfigDict(frozen=True)

    stages: List[Stage] = []
    global_args: Dict[str, str] = {}
    labels: Dict[str, str] = {}
    warnings: List[BuildWarning] = []
