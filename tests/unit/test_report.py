from d2dalec.BUILDERS.model_builder import ModelBuilder
from d2dalec.CONVERTERS.to_report import render_build_model, render_field_report, render_repo_info
from d2dalec.MODELS.dalec_spec import RepoMetadata
from d2dalec.PARSERS.dockerfile_parser import DockerfileParser
from d2dalec.REGISTRY.github_client import RepoInfo


def test_render_build_model():
    content = (
        "ARG VERSION\nLABEL team=core\n"
        "FROM --platform=linux/amd64 golang:1.21 AS builder\nWORKDIR /src\nENV CGO_ENABLED=0\n"
        "RUN " + "x" * 100 + "\n"
        "FROM alpine\nCOPY --from=builder /src/bin/app /usr/bin/app\nEXPOSE 8080\nCOPY\n"
    )
    model = ModelBuilder().build(DockerfileParser().parse_from_string(content))

    report = render_build_model(model)

    assert "VERSION (no default)" in report
    assert "team = core" in report
    assert "Build Stages: 2" in report
    assert "Stage 0: builder" in report
    assert "Stage 1: (unnamed stage 1)" in report
    assert "Platform: linux/amd64" in report
    assert "x" * 67 + "..." in report
    assert "x" * 68 not in report
    assert "COPY: /src/bin/app -> /usr/bin/app (from builder)" in report
    assert "Expose: 8080" in report
    assert "line 10 COPY" in report


def test_render_repo_info():
    info = RepoInfo(owner="octo", repo="tool", website="https://w", git_url="https://g",
                    latest_commit="abc", license="MIT")
    report = render_repo_info(info)
    assert "Repository: octo/tool" in report
    assert "License: MIT" in report
    assert "Description" not in report
    assert "Latest Commit: abc" in report


def test_render_field_report():
    report = render_field_report(RepoMetadata(git_url="https://g", commit="abc"))
    assert "Source URL: https://g" in report
    assert "Commit: abc" in report
    assert "Fields requiring manual input:" in report
    assert "  - description" in report
    assert "  - license" in report
    assert "source URL" not in report


def test_render_field_report_without_metadata():
    report = render_field_report(None)
    assert "Automatically populated" not in report
    assert "  - source URL" in report
