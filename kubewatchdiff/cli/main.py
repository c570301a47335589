"""Click commands: ``watch``, ``diff`` and ``serve``.

Diff output goes to stdout; structured logs go to stderr.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from kubewatchdiff.config import load_config
from kubewatchdiff.diff.compare import diff_resources, parse_document
from kubewatchdiff.errors import WatchDiffError
from kubewatchdiff.models.config import KubeWatchDiffConfig
from kubewatchdiff.models.resources import DEFAULT_DIFF_SCOPE, FilterConfig
from kubewatchdiff.observability.logging import get_logger, setup_logging
from kubewatchdiff.watch.driver import PollDriver, WatchOptions


@click.group()
@click.option("--log-level", default=None, help="debug, info, warning or error (default from KUBEWATCHDIFF_LOG_LEVEL).")
@click.version_option(package_name="kubewatchdiff")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Watch Kubernetes resources and print git-style structural diffs."""
    try:
        config = load_config()
    except WatchDiffError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(log_level or config.log.level)
    ctx.obj = config


@cli.command()
@click.argument("kind")
@click.option("-n", "--namespace", default="", help="Namespace to watch (all namespaces if omitted).")
@click.option("-l", "--selector", "label_selector", default="", help="Label selector.")
@click.option("--field-selector", default="", help="Field selector.")
@click.option("--api-version", default="", help="Pin the apiVersion when KIND is ambiguous.")
@click.option("--context", "kube_context", default=None, help="Kubeconfig context.")
@click.option("--interval", "interval_seconds", type=int, default=None, help="Seconds between iterations (1-600).")
@click.option("--iterations", type=int, default=None, help="Number of iterations (1-100).")
@click.option("--ignore-status/--no-ignore-status", default=None, help="Drop the status subtree before diffing.")
@click.option("--ignore-meta/--no-ignore-meta", default=None, help="Keep only metadata name and namespace.")
@click.option("--timestamp/--no-timestamp", "show_timestamp", default=None, help="Prefix reports with HH:MM:SS.")
@click.option("--scope", multiple=True, help="Top-level key to compare; repeatable (default spec and status).")
@click.option("--track-deletions", is_flag=True, help="Report resources that disappear between iterations.")
@click.pass_obj
def watch(
    config: KubeWatchDiffConfig,
    kind: str,
    namespace: str,
    label_selector: str,
    field_selector: str,
    api_version: str,
    kube_context: str | None,
    interval_seconds: int | None,
    iterations: int | None,
    ignore_status: bool | None,
    ignore_meta: bool | None,
    show_timestamp: bool | None,
    scope: tuple[str, ...],
    track_deletions: bool,
) -> None:
    """Poll KIND resources and print the diffs between iterations."""
    defaults = config.watch
    options = WatchOptions(
        ignore_status=defaults.ignore_status if ignore_status is None else ignore_status,
        ignore_meta=defaults.ignore_meta if ignore_meta is None else ignore_meta,
        interval_seconds=defaults.interval_seconds if interval_seconds is None else interval_seconds,
        iterations=defaults.iterations if iterations is None else iterations,
        show_timestamp=defaults.show_timestamp if show_timestamp is None else show_timestamp,
    )
    context = config.kube.context if kube_context is None else kube_context

    async def _run() -> str:
        from kubewatchdiff.lister.kubernetes import KubernetesResourceLister

        async with await KubernetesResourceLister.create(context=context, api_version=api_version) as lister:
            driver = PollDriver(
                lister,
                options,
                scope=scope or DEFAULT_DIFF_SCOPE,
                track_deletions=track_deletions,
            )
            return await driver.run(kind, namespace, label_selector, field_selector)

    log = get_logger("cli")
    log.info("watch_started", kind=kind, namespace=namespace or "<all>", iterations=options.iterations)
    try:
        output = asyncio.run(_run())
    except WatchDiffError as exc:
        log.error("watch_failed", kind=kind, error=str(exc))
        raise click.ClickException(str(exc)) from exc
    click.echo(output)


@cli.command()
@click.argument("old_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--ignore-status", is_flag=True, help="Drop the status subtree before diffing.")
@click.option("--ignore-meta", is_flag=True, help="Keep only metadata name and namespace.")
@click.option("--scope", multiple=True, help="Top-level key to compare; repeatable (default spec and status).")
def diff(old_file: Path, new_file: Path, ignore_status: bool, ignore_meta: bool, scope: tuple[str, ...]) -> None:
    """Diff two JSON or YAML manifests of the same resource."""
    try:
        old_doc = parse_document(old_file.read_text(), source=str(old_file))
        new_doc = parse_document(new_file.read_text(), source=str(new_file))
    except WatchDiffError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(
        diff_resources(
            old_doc,
            new_doc,
            filters=FilterConfig(ignore_status=ignore_status, ignore_meta=ignore_meta),
            scope=scope or DEFAULT_DIFF_SCOPE,
        )
    )


@cli.command()
@click.option("--host", default="0.0.0.0", help="Bind address.")
@click.option("--port", type=int, default=None, help="Port (default from KUBEWATCHDIFF_API_PORT).")
@click.option("--no-cluster", is_flag=True, help="Serve /diff only, without a Kubernetes lister.")
@click.pass_obj
def serve(config: KubeWatchDiffConfig, host: str, port: int | None, no_cluster: bool) -> None:
    """Serve the REST API with uvicorn."""
    import uvicorn  # type: ignore[import-untyped]

    from kubewatchdiff.api import create_app

    async def _serve() -> None:
        lister = None
        if not no_cluster:
            from kubewatchdiff.lister.kubernetes import KubernetesResourceLister

            lister = await KubernetesResourceLister.create(context=config.kube.context)
        try:
            uv_config = uvicorn.Config(
                app=create_app(lister=lister, config=config),
                host=host,
                port=port or config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
            await uvicorn.Server(uv_config).serve()
        finally:
            if lister is not None:
                await lister.close()

    log = get_logger("cli")
    try:
        asyncio.run(_serve())
    except WatchDiffError as exc:
        log.error("serve_failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc
