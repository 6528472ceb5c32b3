"""
Parsers for Dockerfiles, extracting instructions, flags and arguments.
"""
import json
import re
from typing import List, Optional, Tuple
from ..MODELS.dockerfile_ast import Instruction

# Instructions whose shell-form remainder is kept as a single argument
SINGLE_ARGUMENT_INSTRUCTIONS = {"RUN", "CMD", "ENTRYPOINT", "ARG", "ENV", "LABEL", "HEALTHCHECK", "SHELL"}

# Instructions which accept leading --key=value flags
FLAG_INSTRUCTIONS = {"FROM", "COPY", "ADD", "RUN", "HEALTHCHECK"}

INSTRUCTION_PATTERN = re.compile(r'^\s*([A-Za-z]+)(?:\s+(.*))?$')
FLAG_PATTERN = re.compile(r'^(--\S+)\s*')

class DockerfileParser:
    """
    Parser for Dockerfile instructions.
    """
    def parse(self, dockerfile_path: str) -> List[Instruction]:
        """
        Parses a Dockerfile from a file path.

        Args:
            dockerfile_path (str): Path to the Dockerfile.

        Returns:
            List[Instruction]: List of parsed instructions.
        """
        with open(dockerfile_path, 'r') as f:
            content = f.read()
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> List[Instruction]:
        """
        Parses a Dockerfile from a string content.

        Args:
            content (str): Content of the Dockerfile.

        Returns:
            List[Instruction]: List of parsed instructions.
        """
        instructions = []

        for line_no, logical in self._logical_lines(content):
            match = INSTRUCTION_PATTERN.match(logical)
            if not match:
                continue

            inst = match.group(1).upper()
            args_str = (match.group(2) or "").strip()

            flags = []
            if inst in FLAG_INSTRUCTIONS:
                flags, args_str = self._split_flags(args_str)

            args, json_form = self._split_arguments(inst, args_str)

            instructions.append(Instruction(
                instruction=inst,
                arguments=args,
                flags=flags,
                json_form=json_form,
                raw=logical.strip(),
                line=line_no,
            ))

        return instructions

    def _logical_lines(self, content: str) -> List[Tuple[int, str]]:
        """
        Joins backslash continuations and drops comments and blank lines.

        :param content: Raw Dockerfile content.
        :return: (starting line number, logical line) pairs.
        """
        result = []
        buffer: List[str] = []
        start: Optional[int] = None

        for line_no, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()
            # Comment and blank lines are skipped even inside a continuation
            if not stripped or stripped.startswith('#'):
                continue

            if start is None:
                start = line_no

            if re.search(r'\\\s*$', line):
                buffer.append(re.sub(r'\\\s*$', '', line))
                continue

            buffer.append(line)
            result.append((start, ' '.join(part.strip() for part in buffer if part.strip())))
            buffer = []
            start = None

        if buffer and start is not None:
            result.append((start, ' '.join(part.strip() for part in buffer if part.strip())))

        return result

    def _split_flags(self, args_str: str) -> Tuple[List[str], str]:
        """
        Splits leading --key=value flags off an argument string.
        """
        flags = []
        match = FLAG_PATTERN.match(args_str)
        while match:
            flags.append(match.group(1))
            args_str = args_str[match.end():]
            match = FLAG_PATTERN.match(args_str)
        return flags, args_str.strip()

    def _split_arguments(self, inst: str, args_str: str) -> Tuple[List[str], bool]:
        """
        Handles JSON/Exec form vs Shell form.

        :return: The argument list and whether it came from a JSON array.
        """
        if not args_str:
            return [], False

        if args_str.startswith('[') and args_str.endswith(']'):
            try:
                decoded = json.loads(args_str)
            except json.JSONDecodeError:
                # Not valid JSON, treat as shell form
                decoded = None
            if isinstance(decoded, list) and all(isinstance(a, str) for a in decoded):
                return decoded, True

        if inst in SINGLE_ARGUMENT_INSTRUCTIONS:
            return [args_str], False
        return args_str.split(), False
