"""Typer CLI application for the App-Ray CI scanner."""

from pathlib import Path
from typing import Optional

import typer
from pydantic import SecretStr, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from appray.core import AppException, logs, settings
from appray.features.scanner.models import Credentials, ProxyConfig, ScanRunResult
from appray.features.scanner.reporting import (
    generate_html_report,
    show_error,
    show_job_table,
    show_progress,
    show_summary,
)
from appray.features.scanner.schemas import ScanRequest
from appray.features.scanner.services import ScanOrchestrator, check_connection

app = typer.Typer(
    name="appray",
    help="App-Ray CI scanner - submit mobile applications for security scanning",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def _credentials(username: Optional[str], password: Optional[str]) -> Optional[Credentials]:
    """Resolve credentials from options, falling back to APPRAY_* settings."""
    username = username or settings.USERNAME
    secret = SecretStr(password) if password else settings.PASSWORD
    if not username or secret is None:
        return None
    return Credentials(username=username, password=secret)


def _proxy(host: Optional[str], port: Optional[int]) -> Optional[ProxyConfig]:
    host = host or settings.PROXY_HOST
    port = port or settings.PROXY_PORT
    if not host or not port:
        return None
    return ProxyConfig(host=host, port=port)


@app.command()
def scan(
    application: str = typer.Argument(
        ...,
        help="Application binary (APK/IPA), relative to the workspace",
    ),
    url: str = typer.Option(
        settings.URL,
        "--url",
        "-u",
        help="App-Ray service URL",
    ),
    workspace: Path = typer.Option(
        Path("."),
        "--workspace",
        "-w",
        help="Build workspace; the JUnit report is written here",
    ),
    username: Optional[str] = typer.Option(
        None,
        "--username",
        help="App-Ray username (or APPRAY_USERNAME)",
    ),
    password: Optional[str] = typer.Option(
        None,
        "--password",
        help="App-Ray password (or APPRAY_PASSWORD)",
    ),
    wait_timeout: int = typer.Option(
        settings.WAIT_TIMEOUT,
        "--wait-timeout",
        "-t",
        help="Minutes to wait for the scan to finish",
    ),
    risk_score_threshold: int = typer.Option(
        settings.RISK_SCORE_THRESHOLD,
        "--risk-threshold",
        "-r",
        help="Fail the build when the risk score is above this value",
    ),
    require_risk_score: bool = typer.Option(
        False,
        "--require-risk-score",
        help="Fail finished scans that do not report a risk score",
    ),
    proxy_host: Optional[str] = typer.Option(None, "--proxy-host", help="HTTP proxy host"),
    proxy_port: Optional[int] = typer.Option(None, "--proxy-port", help="HTTP proxy port"),
    html: Optional[str] = typer.Option(
        None,
        "--html",
        help="Also write an HTML result record to this path",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """
    Submit an application to App-Ray and fail the build on high risk.

    Example usage:

        appray scan build/app-release.apk

        appray scan app.ipa --url https://app-ray.example.com --risk-threshold 40

        appray scan app.apk --workspace "$WORKSPACE" --html appray.html
    """
    if verbose:
        logs.set_level("DEBUG")

    try:
        request = ScanRequest(
            base_url=url,
            application_path=application,
            workspace=workspace,
            credentials=_credentials(username, password),
            wait_timeout=wait_timeout,
            risk_score_threshold=risk_score_threshold,
            require_risk_score=require_risk_score,
            proxy=_proxy(proxy_host, proxy_port),
        )
    except ValidationError as e:
        show_error(f"Invalid configuration: {e}")
        raise typer.Exit(1)

    console.print()
    console.print(f"[bold cyan]App-Ray CI Scanner[/bold cyan] v{settings.APP_VERSION}")
    console.print()
    console.print(f"Service: [cyan]{escape(request.base_url)}[/cyan]")
    console.print(f"Application: [dim]{escape(str(request.application))}[/dim]")
    console.print(
        f"[dim]Timeout: {request.wait_timeout}m  "
        f"Risk threshold: {request.risk_score_threshold}[/dim]"
    )
    console.print()

    try:
        result = _run_scan(request)
    except AppException as e:
        show_error(e.message)
        raise typer.Exit(1)

    show_job_table(result.job)
    show_summary(result)

    if html:
        try:
            report_path = generate_html_report(result, html)
        except OSError as e:
            logs.error("HTML report could not be written", "cli", {"path": html}, exception=e)
            show_error(f"Failed to write HTML report {html}: {e}")
            raise typer.Exit(1)
        console.print()
        console.print(f"[dim]Report saved to: {escape(report_path)}[/dim]")

    if not result.verdict.passed:
        raise typer.Exit(1)


def _run_scan(request: ScanRequest) -> ScanRunResult:
    """Run the scan with progress display."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Connecting to App-Ray...", total=None)

        def on_progress(message: str) -> None:
            progress.update(task, description=escape(message))
            show_progress(message)

        orchestrator = ScanOrchestrator(on_progress=on_progress)
        return orchestrator.run(request)


@app.command()
def check(
    url: str = typer.Option(settings.URL, "--url", "-u", help="App-Ray service URL"),
    username: Optional[str] = typer.Option(None, "--username", help="App-Ray username"),
    password: Optional[str] = typer.Option(None, "--password", help="App-Ray password"),
    proxy_host: Optional[str] = typer.Option(None, "--proxy-host", help="HTTP proxy host"),
    proxy_port: Optional[int] = typer.Option(None, "--proxy-port", help="HTTP proxy port"),
) -> None:
    """Test the connection and credentials against App-Ray."""
    result = check_connection(
        url.strip(),
        _credentials(username, password),
        proxy=_proxy(proxy_host, proxy_port),
    )
    if not result.ok:
        show_error(result.message)
        raise typer.Exit(1)
    console.print(f"[green]{escape(result.message)}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"App-Ray CI Scanner v{settings.APP_VERSION}")


@app.command()
def info() -> None:
    """Show configuration information."""
    console.print()
    console.print("[bold]Configuration[/bold]")
    console.print()
    console.print(f"  App Name:        {settings.APP_NAME}")
    console.print(f"  Version:         {settings.APP_VERSION}")
    console.print(f"  Service URL:     {settings.URL}")
    console.print(f"  Wait timeout:    {settings.WAIT_TIMEOUT}m")
    console.print(f"  Risk threshold:  {settings.RISK_SCORE_THRESHOLD}")
    console.print(f"  JUnit file:      {settings.JUNIT_FILE}")
    console.print(f"  Request timeout: {settings.REQUEST_TIMEOUT}s")
    console.print()


if __name__ == "__main__":
    app()
