from __future__ import annotations

import os
from pathlib import Path

import typer

from cdr.cli.context import CLIContext, build_context
from cdr.core.config import ReleaseInputs, resolve_inputs
from cdr.core.errors import ErrorCode
from cdr.core.result import Err
from cdr.output.console import Style
from cdr.output.errors import print_release_error, release_error_exit_code
from cdr.release.errors import ReleaseError
from cdr.release.service import ReleaseService


def _fail(ctx: CLIContext, error: ReleaseError) -> typer.Exit:
    ctx.runner.set_failed(error.message)
    print_release_error(error, ctx.console)
    return typer.Exit(code=release_error_exit_code(error))


def create(
    release: str | None = typer.Option(None, "--release", help="Release name."),
    delivery_pipeline: str | None = typer.Option(
        None, "--delivery-pipeline", help="Delivery pipeline name."
    ),
    region: str | None = typer.Option(None, "--region", help="Region [default: us-central1]."),
    project_id: str | None = typer.Option(None, "--project-id", help="Google Cloud project."),
    credentials: str | None = typer.Option(
        None,
        "--credentials",
        help="Service-account key JSON (raw or base64).",
    ),
    gcloud_version: str | None = typer.Option(
        None, "--gcloud-version", help="Cloud SDK version [default: latest]."
    ),
    annotations: str | None = typer.Option(None, "--annotations"),
    labels: str | None = typer.Option(None, "--labels"),
    description: str | None = typer.Option(None, "--description"),
    gcs_source_staging_dir: str | None = typer.Option(None, "--gcs-source-staging-dir"),
    ignore_file: str | None = typer.Option(None, "--ignore-file"),
    to_target: str | None = typer.Option(None, "--to-target"),
    build_artifacts: str | None = typer.Option(None, "--build-artifacts"),
    source: str | None = typer.Option(None, "--source"),
    images: str | None = typer.Option(None, "--images"),
    flags: str | None = typer.Option(
        None, "--flags", help="Extra gcloud flags, split on whitespace outside quotes."
    ),
    config: Path | None = typer.Option(
        None, "--config", help="TOML file with a [release] table of inputs."
    ),
) -> None:
    """Create a Cloud Deploy release.

    Inputs also come from INPUT_<NAME> environment variables, so the command
    runs unchanged as a GitHub Actions step.
    """
    ctx = build_context()

    overrides = ReleaseInputs.from_mapping(
        {
            "release": release,
            "delivery_pipeline": delivery_pipeline,
            "region": region,
            "project_id": project_id,
            "credentials": credentials,
            "gcloud_version": gcloud_version,
            "annotations": annotations,
            "labels": labels,
            "description": description,
            "gcs_source_staging_dir": gcs_source_staging_dir,
            "ignore_file": ignore_file,
            "to_target": to_target,
            "build_artifacts": build_artifacts,
            "source": source,
            "images": images,
            "flags": flags,
        }
    )
    inputs = resolve_inputs(environ=os.environ, overrides=overrides, config_path=config)
    if isinstance(inputs, Err):
        raise _fail(ctx, ReleaseError(kind="invalid_input", message=inputs.error.message))

    service = ReleaseService(sdk=ctx.sdk, runner=ctx.runner, console=ctx.console)
    try:
        result = service.run(inputs.value)
    except Exception as e:  # noqa: BLE001
        ctx.runner.set_failed(str(e) or type(e).__name__)
        ctx.console.error(f"release run aborted: {e}")
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR)) from e
    if isinstance(result, Err):
        raise _fail(ctx, result.error)

    outcome = result.value
    ctx.console.success(f"release {outcome.release} created")
    if outcome.operation_id:
        ctx.console.print(outcome.operation_id, Style.DIM)
