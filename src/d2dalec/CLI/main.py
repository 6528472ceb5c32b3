"""
Command Line Interface for D2Dalec.
"""
import logging
import os
import sys

import click
from pydantic import ValidationError

from ..BUILDERS.model_builder import ModelBuilder
from ..CONVERTERS.to_dalec import DalecConverter
from ..CONVERTERS.to_report import render_build_model, render_field_report, render_repo_info
from ..CONVERTERS.yaml_writer import write_file
from ..PARSERS.spec_reader import SpecReader
from ..REGISTRY.github_client import GitHubClient
from ..UTILS.logging_config import configure_logging
from ..UTILS.settings import load_settings

logger = logging.getLogger(__name__)


def _fail(message: str):
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.command()
@click.option('--repo', '-r', required=True, help='GitHub repository (owner/repo or https://github.com/owner/repo)')
@click.option('--dockerfile', '-f', default=None, help='Path to Dockerfile [default: Dockerfile]')
@click.option('--output', '-o', default=None, help='Output YAML file path [default: dalec.yml]')
@click.option('--previous', '-p', default=None, help='Previously generated spec, used to bump the revision')
@click.option('--offline', is_flag=True, help='Skip fetching repository metadata')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def cli(repo, dockerfile, output, previous, offline, verbose):
    """
    D2Dalec - Dockerfile to Dalec spec generator.

    Converts a multi-stage Dockerfile into a Dalec specification,
    filled in with GitHub repository metadata.
    """
    configure_logging(verbose)
    try:
        settings = load_settings()
    except ValidationError as e:
        _fail(f"invalid settings: {e}")
    dockerfile = dockerfile or settings.dockerfile
    output = output or settings.output
    logger.debug("Using Dockerfile %s, output %s, API %s", dockerfile, output, settings.github_api_url)

    repo_info = None
    metadata = None
    if offline:
        click.echo("Offline mode: skipping repository metadata.")
    else:
        click.echo("=== FETCHING GITHUB METADATA ===")
        client = GitHubClient(
            token=settings.github_token,
            api_url=settings.github_api_url,
            timeout=settings.request_timeout,
        )
        try:
            repo_info = client.fetch_repo_info(repo)
        except (ValueError, RuntimeError) as e:
            _fail(f"fetching repository info: {e}")
        click.echo(render_repo_info(repo_info))
        metadata = repo_info.to_metadata()

    click.echo("=== PARSING DOCKERFILE ===")
    model = None
    if os.path.exists(dockerfile):
        try:
            model = ModelBuilder().build_from_file(dockerfile)
        except (OSError, UnicodeDecodeError) as e:
            _fail(f"parsing Dockerfile: {e}")
        if verbose:
            click.echo(render_build_model(model))
        else:
            click.echo(f"Parsed {len(model.stages)} build stages")
        for warning in model.warnings:
            click.echo(f"Warning: line {warning.line} {warning.instruction}: {warning.message}")
    else:
        click.echo(f"No Dockerfile at {dockerfile}, generating a metadata-only spec.")

    previous_spec = None
    if previous:
        try:
            previous_spec = SpecReader().read(previous)
        except (OSError, ValueError) as e:
            _fail(f"reading previous spec: {e}")
        if previous_spec is None:
            click.echo(f"No previous spec at {previous}, starting at the default revision.")

    click.echo("=== TRANSFORMING TO DALEC SPEC ===")
    converter = DalecConverter(model, metadata)
    spec = converter.convert(previous_spec)
    if converter.revision is not None and converter.revision.bumped:
        click.echo(f"Commit unchanged, revision bumped to {converter.revision.revision}")

    try:
        write_file(spec, output)
    except OSError as e:
        _fail(f"writing {output}: {e}")

    click.echo(f"Successfully generated {output}")
    click.echo(render_field_report(metadata))


def main():
    """
    Main entry point for the CLI.
    """
    cli()


if __name__ == '__main__':
    main()
