"""
Helpers shared by the status reconciler and dispatcher.
"""

from urllib.parse import quote

from cocoon_status.models.build import Build, BuildResult
from cocoon_status.models.status import StatusState


def status_description(prefix: str, builder_name: str) -> str:
    return f"{prefix}: {builder_name}"


def with_reload_hint(url: str, seconds: int = 30) -> str:
    """Append the auto-refresh hint used by pending build pages.

    The suffix is always appended verbatim, even when the URL already
    carries a query string.
    """
    return f"{url}?reload={seconds}"


def completed_state(result: BuildResult | None) -> StatusState:
    """Map a build result onto a status state.

    Only success is green. Canceled, infra failures and unrecognised
    results all report as failure.
    """
    if result == BuildResult.SUCCESS:
        return StatusState.SUCCESS
    return StatusState.FAILURE


def build_console_url(template: str, build: Build) -> str:
    return template.format(
        project=build.builder_id.project,
        bucket=build.builder_id.bucket,
        builder=quote(build.builder_id.builder),
        id=build.id,
    )
