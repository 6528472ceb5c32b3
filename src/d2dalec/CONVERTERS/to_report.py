"""
Converters for rendering human readable reports of parsed Dockerfiles,
repository metadata and generated fields.
"""
from typing import List, Optional
from jinja2 import Environment
from ..MODELS.build_model import BuildModel
from ..MODELS.dalec_spec import RepoMetadata

BUILD_MODEL_TEMPLATE = """\
DOCKERFILE PARSING RESULTS
{% if model.global_args %}
Global ARGs:
{% for k, v in model.global_args.items() %}
  - {{ k }}{% if v %} = {{ v }}{% else %} (no default){% endif %}

{% endfor %}
{% endif %}
{% if model.labels %}
Labels:
{% for k, v in model.labels.items() %}
  - {{ k }} = {{ v }}
{% endfor %}
{% endif %}
Build Stages: {{ model.stages | length }}
{% for stage in model.stages %}
----------------------------------------
Stage {{ loop.index0 }}: {{ stage.display_name(loop.index0) }}
  Base: {{ stage.base_ref }}
{% if stage.platform %}
  Platform: {{ stage.platform }}
{% endif %}
{% if stage.workdir %}
  Workdir: {{ stage.workdir }}
{% endif %}
{% if stage.args %}
  ARGs:
{% for k, v in stage.args.items() %}
    - {{ k }} = {{ v }}
{% endfor %}
{% endif %}
{% if stage.env %}
  ENV:
{% for k, v in stage.env.items() %}
    - {{ k }} = {{ v }}
{% endfor %}
{% endif %}
{% if stage.run_commands %}
  RUN commands: {{ stage.run_commands | length }}
{% for run in stage.run_commands %}
    - {{ run | shorten(70) }}
{% endfor %}
{% endif %}
{% if stage.copy_instructions %}
  COPY/ADD: {{ stage.copy_instructions | length }}
{% for copy in stage.copy_instructions %}
    - {{ copy.kind.value }}: {{ copy.sources | join(', ') }} -> {{ copy.dest }}{% if copy.from_stage %} (from {{ copy.from_stage }}){% endif %}

{% endfor %}
{% endif %}
{% if stage.entrypoint %}
  Entrypoint: {{ stage.entrypoint }}
{% endif %}
{% if stage.cmd %}
  Cmd: {{ stage.cmd }}
{% endif %}
{% if stage.exposed_ports %}
  Expose: {{ stage.exposed_ports | join(', ') }}
{% endif %}
{% endfor %}
{% if model.warnings %}
Warnings:
{% for w in model.warnings %}
  - line {{ w.line }} {{ w.instruction }}: {{ w.message }}
{% endfor %}
{% endif %}
"""

REPO_INFO_TEMPLATE = """\
Repository Information
  Repository: {{ info.full_name }}
  Website: {{ info.website }}
  Git URL: {{ info.git_url }}
{% if info.description %}
  Description: {{ info.description }}
{% endif %}
{% if info.license %}
  License: {{ info.license }}
{% endif %}
  Default Branch: {{ info.default_branch }}
  Latest Commit: {{ info.latest_commit }}
"""

FIELD_REPORT_TEMPLATE = """\
{% if populated %}
Automatically populated fields:
{% for label, value in populated %}
  + {{ label }}: {{ value }}
{% endfor %}
{% endif %}
{% if manual %}
Fields requiring manual input:
{% for label in manual %}
  - {{ label }}
{% endfor %}
{% endif %}
"""


def _shorten(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    return value[:max_len - 3] + "..."


_env = Environment(trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)
_env.filters["shorten"] = _shorten


def render_build_model(model: BuildModel) -> str:
    """
    Renders a summary of the parsed stages and global declarations.
    """
    return _env.from_string(BUILD_MODEL_TEMPLATE).render(model=model)


def render_repo_info(info) -> str:
    """
    Renders fetched repository metadata.

    :param info: A RepoInfo from the GitHub client.
    """
    return _env.from_string(REPO_INFO_TEMPLATE).render(info=info)


def render_field_report(metadata: Optional[RepoMetadata]) -> str:
    """
    Lists which fields came from repository metadata and which still need
    manual input.
    """
    meta = metadata or RepoMetadata()
    populated = [
        (label, value)
        for label, value in (
            ("Source URL", meta.git_url),
            ("Commit", meta.commit),
            ("Website", meta.website),
            ("Description", meta.description),
            ("License", meta.license),
        )
        if value
    ]
    manual: List[str] = [
        label
        for label, value in (
            ("source URL", meta.git_url),
            ("description", meta.description),
            ("license", meta.license),
        )
        if not value
    ]
    return _env.from_string(FIELD_REPORT_TEMPLATE).render(populated=populated, manual=manual)
