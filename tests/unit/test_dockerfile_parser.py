from d2dalec.PARSERS.dockerfile_parser import DockerfileParser

def test_parse_from_string():
    content = """
    FROM python:3.9-slim
    WORKDIR /app
    COPY . .
    RUN pip install -r requirements.txt \\
        && echo "done"
    ENV PORT=8080
    CMD ["python", "app.py"]
    """
    parser = DockerfileParser()
    instructions = parser.parse_from_string(content)

    inst_names = [i.instruction for i in instructions]
    assert inst_names == ["FROM", "WORKDIR", "COPY", "RUN", "ENV", "CMD"]

    # Check CMD parsing (exec form)
    cmd_inst = next(i for i in instructions if i.instruction == "CMD")
    assert cmd_inst.arguments == ["python", "app.py"]
    assert cmd_inst.json_form

    # Check RUN with line continuation
    run_inst = next(i for i in instructions if i.instruction == "RUN")
    assert run_inst.arguments == ['pip install -r requirements.txt && echo "done"']
    assert run_inst.line == 5
    assert not run_inst.json_form

def test_flags_are_split_off():
    content = """
FROM --platform=linux/amd64 golang:1.21 AS builder
COPY --from=builder --chmod=755 /app/bin/app /usr/local/bin/app
RUN --mount=type=cache,target=/root/.cache go build ./...
"""
    instructions = DockerfileParser().parse_from_string(content)

    from_inst, copy_inst, run_inst = instructions
    assert from_inst.flags == ["--platform=linux/amd64"]
    assert from_inst.arguments == ["golang:1.21", "AS", "builder"]
    assert from_inst.flag_value("platform") == "linux/amd64"

    assert copy_inst.flag_value("from") == "builder"
    assert copy_inst.flag_value("chmod") == "755"
    assert copy_inst.arguments == ["/app/bin/app", "/usr/local/bin/app"]

    assert run_inst.flag_value("mount") == "type=cache,target=/root/.cache"
    assert run_inst.arguments == ["go build ./..."]

def test_comments_and_directives_are_skipped():
    content = """# syntax=docker/dockerfile:1
# a comment
from alpine
RUN echo one \\
# comment inside continuation
    two
"""
    instructions = DockerfileParser().parse_from_string(content)

    assert [i.instruction for i in instructions] == ["FROM", "RUN"]
    assert instructions[1].arguments == ["echo one two"]

def test_blank_lines_inside_continuation():
    content = "FROM golang\nRUN go mod download && \\\n\n    go build -o /out/bin/app ./cmd\nCMD [\"app\"]\n"
    instructions = DockerfileParser().parse_from_string(content)

    assert [i.instruction for i in instructions] == ["FROM", "RUN", "CMD"]
    assert instructions[1].arguments == ["go mod download && go build -o /out/bin/app ./cmd"]
    assert instructions[1].line == 2

def test_invalid_json_falls_back_to_shell_form():
    instructions = DockerfileParser().parse_from_string('ENTRYPOINT [not json]\nCMD [1, 2]\n')

    assert instructions[0].arguments == ["[not json]"]
    assert not instructions[0].json_form
    # Non-string elements are not a valid exec form
    assert instructions[1].arguments == ["[1, 2]"]
    assert not instructions[1].json_form

def test_instruction_without_arguments():
    instructions = DockerfileParser().parse_from_string("FROM alpine\nCOPY --from=builder\n")

    assert instructions[1].instruction == "COPY"
    assert instructions[1].arguments == []
    assert instructions[1].flags == ["--from=builder"]

def test_parse_file(tmp_path):
    dockerfile = tmp_path / "Dockerfile"
    dockerfile.write_text("FROM alpine\nEXPOSE 8080\n")

    instructions = DockerfileParser().parse(str(dockerfile))

    assert instructions[1].instruction == "EXPOSE"
    assert instructions[1].arguments == ["8080"]
