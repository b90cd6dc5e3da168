"""Rich terminal UI for CLI output."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import JobStatus, ScanJob, ScanRunResult

# Global console instance
console = Console()

STATUS_STYLES = {
    JobStatus.QUEUED: "yellow",
    JobStatus.PROCESSING: "cyan",
    JobStatus.FINISHED: "green",
    JobStatus.FAILED: "bold red",
}


def show_progress(message: str) -> None:
    """Show a progress message in the terminal."""
    if "[FAIL]" in message or "[ERROR]" in message or "[WARN]" in message:
        console.print(f"[bold red]{escape(message)}[/bold red]")
    elif "[PASS]" in message:
        console.print(f"[green]{escape(message)}[/green]")
    elif "[WAIT]" in message:
        console.print(f"[yellow]{escape(message)}[/yellow]")
    else:
        console.print(f"[cyan]{escape(message)}[/cyan]")


def show_job_table(job: ScanJob) -> None:
    """Display the scan job snapshot."""
    table = Table(title="App-Ray Scan Job", show_header=True, header_style="bold cyan")

    table.add_column("Field", style="cyan", width=18)
    table.add_column("Value")

    style = STATUS_STYLES.get(job.status, "white")
    table.add_row("Job ID", escape(job.id))
    table.add_row("Status", f"[{style}]{job.status.value.upper()}[/{style}]")
    table.add_row("Platform", escape(job.platform) or "-")
    table.add_row("Package", escape(job.package_name) or "-")
    table.add_row("Label", escape(job.label) or "-")
    table.add_row("Version", escape(job.version) or "-")
    table.add_row("SHA1", escape(job.app_hash) or "-")
    if job.progress_total:
        table.add_row("Progress", f"{job.progress_finished} / {job.progress_total}")
    if job.status == JobStatus.FINISHED:
        table.add_row("Risk Score", str(job.risk_score))
    if job.failure_reason:
        table.add_row("Failure", f"[red]{escape(job.failure_reason)}[/red]")

    console.print()
    console.print(table)


def show_summary(result: ScanRunResult) -> None:
    """Show the final verdict panel."""
    verdict = result.verdict
    lines = [
        f"Application: {escape(result.application)}",
        f"Job: {escape(result.job.id)} ({result.job.status.value})",
        f"Reason: {escape(verdict.reason)}",
    ]
    if verdict.result_url:
        lines.append(f"Details: {escape(verdict.result_url)}")
    if result.junit_path:
        lines.append(f"JUnit: {escape(result.junit_path)}")
    lines.append(f"Duration: {result.duration_seconds:.2f}s")

    if verdict.passed:
        content = "[bold green]SCAN PASSED[/bold green]\n\n" + "\n".join(lines)
        panel = Panel(
            content,
            border_style="green",
            title="[bold green]App-Ray[/bold green]",
            title_align="left",
        )
    else:
        content = "[bold red]SCAN FAILED[/bold red]\n\n" + "\n".join(lines)
        panel = Panel(
            content,
            border_style="red",
            title="[bold red]App-Ray[/bold red]",
            title_align="left",
        )

    console.print()
    console.print(panel)


def show_error(message: str) -> None:
    """Display an error message without stack trace."""
    console.print(f"\n[bold red][ERROR][/bold red] {escape(message)}\n")
