"""JUnit artifact persisted into the build workspace."""

from pathlib import Path
from typing import Union

from appray.core import logs, settings


def write_junit_report(
    workspace: Union[str, Path],
    report: bytes,
    filename: str = settings.JUNIT_FILE,
) -> str:
    """
    Write the JUnit XML exported by App-Ray into the workspace.

    Returns:
        Absolute path to the written file
    """
    output_file = (Path(workspace) / filename).absolute()
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_bytes(report)

    logs.info("JUnit report written", "reporting", {"path": str(output_file)})
    return str(output_file)
