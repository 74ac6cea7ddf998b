"""HTML report templates for operator notifications.

Renders the pre-deletion warning, the post-deletion completion report
and the probe error notice. All paths and messages are escaped.
"""

from datetime import datetime
from html import escape

from recsweep.storage.models import DeletionPlan, WaveReport, bytes_to_gb

WARNING_SUBJECT = "Low disk space warning"
COMPLETION_SUBJECT = "Automatic deletion completed"
PROBE_ERROR_SUBJECT = "Disk space check error"

_TABLE_OPEN = '<table border="1" cellpadding="5" style="border-collapse: collapse;">'
_FOOTER = "<p>This message was sent automatically, please do not reply.</p>"


def _gb(value: int) -> str:
    return f"{bytes_to_gb(value):.2f} GB"


def _local_time(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def render_warning(plans: list[DeletionPlan], delay_hours: float, min_free_gb: float) -> str:
    """Render the warning sent before a deletion wave is armed.

    Args:
        plans: Consolidated plans of the wave.
        delay_hours: Hours until the directories are deleted; 0 for a
            manual sweep.
        min_free_gb: Configured free-space threshold.

    Returns:
        HTML body.
    """
    total = sum(plan.total_bytes for plan in plans)
    parts = [
        "<h2>Low disk space warning</h2>",
        "<p>Free space on the recording volumes has dropped below the threshold "
        f"of <strong>{min_free_gb:g} GB</strong>.</p>",
    ]

    for plan in plans:
        space = plan.space
        parts.append(f"<h3>Volume {escape(plan.volume_key)}</h3>")
        parts.append(
            "<ul>"
            f"<li>Free space: <strong>{_gb(space.free_bytes)}</strong></li>"
            f"<li>Usage: <strong>{space.used_percentage:.2f}%</strong></li>"
            f"<li>Space to free: <strong>{_gb(plan.space_to_free_bytes)}</strong></li>"
            "</ul>"
        )
        if not plan.is_sufficient:
            parts.append(
                "<p><strong>Not enough recordings to reach the target:</strong> "
                f"{_gb(plan.shortfall_bytes)} will still be missing.</p>"
            )
        rows = "".join(
            f"<tr><td>{escape(d.path)}</td><td>{_gb(d.size_bytes)}</td>"
            f"<td>{_local_time(d.mtime)}</td></tr>"
            for d in plan.directories
        )
        parts.append(
            f"{_TABLE_OPEN}<tr><th>Directory</th><th>Size</th><th>Modified</th></tr>"
            f"{rows}</table>"
        )

    if delay_hours > 0:
        parts.append(
            f"<p>The directories above will be deleted automatically in "
            f"<strong>{delay_hours:g} hours</strong>, freeing about "
            f"<strong>{_gb(total)}</strong>. Move anything you need to keep "
            "before then.</p>"
        )
    else:
        parts.append(
            "<p>The directories above are being deleted <strong>now</strong> by a "
            f"manual sweep, freeing about <strong>{_gb(total)}</strong>.</p>"
        )
    parts.append(_FOOTER)
    return "\n".join(parts)


def render_completion(report: WaveReport) -> str:
    """Render the report sent after a deletion wave ran.

    Args:
        report: Outcome of the wave.

    Returns:
        HTML body.
    """
    title = "Automatic deletion completed"
    if report.dry_run:
        title += " (dry run)"

    parts = [
        f"<h2>{title}</h2>",
        "<ul>"
        f"<li>Directories removed: <strong>{len(report.removed)}</strong></li>"
        f"<li>Directories retained: <strong>{len(report.retained)}</strong></li>"
        f"<li>Space freed: <strong>{_gb(report.freed_bytes)}</strong></li>"
        "</ul>",
    ]

    for volume_key, space in sorted(report.space_after.items()):
        if space is None:
            parts.append(
                f"<p>Volume {escape(volume_key)}: free space could not be re-checked.</p>"
            )
        else:
            parts.append(
                f"<p>Volume {escape(volume_key)}: <strong>{_gb(space.free_bytes)}</strong> "
                f"free, {space.used_percentage:.2f}% used.</p>"
            )

    if report.removed:
        rows = "".join(
            f"<tr><td>{escape(d.path)}</td><td>{_gb(d.size_bytes)}</td></tr>"
            for d in report.removed
        )
        parts.append("<p>Removed directories:</p>")
        parts.append(f"{_TABLE_OPEN}<tr><th>Directory</th><th>Freed</th></tr>{rows}</table>")

    if report.retained:
        rows = "".join(
            f"<tr><td>{escape(r.record.path)}</td><td>{escape(r.error)}</td></tr>"
            for r in report.retained
        )
        parts.append("<p>Directories that could not be deleted (still on disk):</p>")
        parts.append(f"{_TABLE_OPEN}<tr><th>Directory</th><th>Error</th></tr>{rows}</table>")

    parts.append(_FOOTER)
    return "\n".join(parts)


def render_probe_error(path: str, error: str) -> str:
    """Render the notice sent when a monitored path's volume cannot be checked."""
    return "\n".join(
        [
            "<h2>Disk space check error</h2>",
            f"<p>Checking disk space for <strong>{escape(path)}</strong> failed:</p>",
            f"<pre>{escape(error)}</pre>",
            "<p>The path was skipped for this check.</p>",
            _FOOTER,
        ]
    )
