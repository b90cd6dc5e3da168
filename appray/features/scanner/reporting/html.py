"""HTML result record rendered with Jinja2."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from appray.core import logs
from ..models import ScanRunResult


def generate_html_report(
    result: ScanRunResult,
    output_path: str = "appray.html",
) -> str:
    """
    Generate the HTML result record for a scan run.

    Args:
        result: Completed scan run
        output_path: Path to save the HTML report

    Returns:
        Absolute path to the generated report file
    """
    logs.info("Generating HTML report", "reporting", {"output": output_path})

    # appray/templates/
    template_dir = Path(__file__).parent.parent.parent.parent / "templates"

    env = Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=select_autoescape(["html"]),
    )
    template = env.get_template("result.html")

    html = template.render(
        result=result,
        job=result.job,
        verdict=result.verdict,
        passed=result.verdict.passed,
        result_url=result.verdict.result_url,
        account=result.account,
        organization=result.organization,
    )

    output_file = Path(output_path).absolute()
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(html)

    logs.info("Report generated", "reporting", {"path": str(output_file)})
    return str(output_file)
