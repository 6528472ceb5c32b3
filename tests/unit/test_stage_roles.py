from d2dalec.CLASSIFIERS.stage_roles import (
    builder_stage_name,
    final_stage_candidate,
    is_builder_stage,
    uses_language_toolchain,
)
from d2dalec.MODELS.build_model import CopyInstruction, Stage


def test_is_builder_stage():
    assert is_builder_stage(Stage(name="builder"))
    assert is_builder_stage(Stage(name="Build-Env"))
    assert is_builder_stage(Stage(name="gobuild"))
    assert not is_builder_stage(Stage(name="runtime"))
    assert not is_builder_stage(Stage())


def test_uses_language_toolchain():
    assert uses_language_toolchain(Stage(run_commands=["go build -o bin/app ./main.go"]))
    assert uses_language_toolchain(Stage(run_commands=["echo hi", "go mod download"]))
    assert not uses_language_toolchain(Stage(run_commands=["make all", "cargo build"]))
    assert uses_language_toolchain(Stage(run_commands=["cd src && go build ."]))
    assert not uses_language_toolchain(Stage(run_commands=["cargo build --release", "mango build"]))
    assert not uses_language_toolchain(Stage())


def test_final_stage_candidate_picks_last_qualifying_stage():
    stages = [
        Stage(name="builder", copy_instructions=[CopyInstruction(sources=["."], dest="/src")]),
        Stage(name="linux", entrypoint=["/app"]),
        Stage(name="windows", entrypoint=["app.exe"]),
        Stage(name="empty"),
    ]
    assert final_stage_candidate(stages) is stages[1]


def test_final_stage_candidate_skips_hpc():
    stages = [Stage(name="hpc", entrypoint=["/app"])]
    assert final_stage_candidate(stages) is None


def test_final_stage_candidate_none_for_no_stages():
    assert final_stage_candidate([]) is None


def test_builder_stage_name():
    stages = [Stage(name="deps"), Stage(name="build-env"), Stage(name="builder")]
    assert builder_stage_name(stages) == "build-env"


def test_builder_stage_name_fallback():
    assert builder_stage_name([Stage(name="runtime"), Stage()]) == "builder"
    assert builder_stage_name([]) == "builder"
