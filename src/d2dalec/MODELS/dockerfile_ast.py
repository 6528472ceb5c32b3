"""
Models for the Dockerfile Abstract Syntax Tree.
"""
from typing import List, Optional
from pydantic import BaseModel

class Instruction(BaseModel):
    """
    Represents a single instruction in a Dockerfile.

    ``arguments`` holds the positional arguments left after flag stripping.
    Exec-form instructions (``CMD ["a", "b"]``) set ``json_form`` and carry
    one argument per array element.
    """
    instruction: str
    arguments: List[str] = []
    flags: List[str] = []
    json_form: bool = False
    raw: str = ""
    line: int = 0

    def flag_value(self, name: str) -> Optional[str]:
        """
        Returns the value of a ``--name=value`` flag, or None if not present.
        """
        prefix = f"--{name}="
        for flag in self.flags:
            if flag.startswith(prefix):
                return flag[len(prefix):]
        return None
