"""
Parsers for previously generated Dalec specification files.
"""
import logging
import os
import yaml
from typing import Any, Dict, Optional
from ..MODELS.dalec_spec import PreviousSpec

logger = logging.getLogger(__name__)

class SpecReader:
    """
    Reads the fields of a previous Dalec spec needed for revision reconciliation.
    """
    def read(self, spec_path: str) -> Optional[PreviousSpec]:
        """
        Reads a previous spec from a path.

        :param spec_path: Path to the previous spec.
        :return: The previous spec, or None if the file does not exist.
        :raises ValueError: If the file is not a valid YAML mapping.
        """
        if not os.path.exists(spec_path):
            logger.info("No previous spec at %s, starting a fresh revision", spec_path)
            return None

        with open(spec_path, 'r') as f:
            content = f.read()
        return self.read_from_string(content)

    def read_from_string(self, content: str) -> PreviousSpec:
        """
        Reads a previous spec from YAML content.

        The commit and revision are taken from the ``args`` section, falling
        back to top-level ``commit``/``revision`` keys.
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"failed to parse previous spec: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("previous spec is not a YAML mapping")

        args = data.get('args') if isinstance(data.get('args'), dict) else {}

        commit = self._scalar(args, 'COMMIT') or self._scalar(data, 'commit')
        revision = self._scalar(args, 'REVISION') or self._scalar(data, 'revision') or "1"

        return PreviousSpec(commit=commit, revision=revision)

    def _scalar(self, data: Dict[str, Any], key: str) -> str:
        """
        Helper returning a scalar value as a string, or empty if absent.
        """
        value = data.get(key)
        if value is None or isinstance(value, (dict, list)):
            return ""
        return str(value)
