"""
Serialization of Dalec specifications to YAML.
"""
import yaml
from typing import List
from ..MODELS.dalec_spec import DalecSpec

class SpecDumper(yaml.SafeDumper):
    """
    YAML dumper indenting block sequences under their parent key.
    """
    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)

def _represent_str(dumper, data):
    # Multi-line build commands read better as literal blocks
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)

SpecDumper.add_representer(str, _represent_str)

def _space_sections(text: str) -> str:
    """
    Inserts a blank line before every top-level key after the first.
    """
    formatted: List[str] = []
    for i, line in enumerate(text.splitlines()):
        top_level = line and not line[0].isspace() and not line.startswith("#")
        if i > 0 and top_level and formatted and formatted[-1].strip():
            formatted.append("")
        formatted.append(line)
    return "\n".join(formatted) + "\n"

def write_yaml(spec: DalecSpec) -> str:
    """
    Converts a DalecSpec to formatted YAML.

    :param spec: The specification to serialize.
    :return: The YAML document, starting with the ``# syntax=`` directive.
    """
    body = yaml.dump(
        spec.to_dict(),
        Dumper=SpecDumper,
        default_flow_style=False,
        sort_keys=False,
        indent=2,
        width=4096,
        allow_unicode=True,
    )
    header = f"# syntax={spec.syntax}\n\n" if spec.syntax else ""
    return header + _space_sections(body)

def write_file(spec: DalecSpec, output_path: str) -> str:
    """
    Writes a DalecSpec to a YAML file.

    :param spec: The specification to serialize.
    :param output_path: Destination file path.
    :return: The path written to.
    :raises OSError: If the file cannot be written.
    """
    content = write_yaml(spec)
    with open(output_path, "w") as f:
        f.write(content)
    return output_path
