"""Deletion of project build artifacts."""

import logging
import os

from devdust.models import CleanFailure, CleanResult, Project, ScanOptions
from devdust.utils.filesystem import get_directory_size, remove_directory

logger = logging.getLogger("devdust")


def clean_project(
    project: Project,
    options: ScanOptions | None = None,
    dry_run: bool = False,
) -> CleanResult:
    """Delete every artifact directory of a project.

    Artifact directories are looked up again right before deletion, since
    the user may have changed things since the scan. A failing directory is
    recorded and the remaining ones are still deleted; nothing is rolled
    back.

    Args:
        project: Project to clean
        options: Settings used to measure sizes (defaults to ScanOptions())
        dry_run: Measure what would be freed without deleting anything

    Returns:
        CleanResult with bytes freed and any per-directory failures
    """
    if options is None:
        options = ScanOptions()

    result = CleanResult(project=project, dry_run=dry_run)

    for artifact_path in project.artifact_paths():
        size = get_directory_size(artifact_path, options)

        if dry_run:
            result.freed_bytes += size
            continue

        try:
            remove_directory(artifact_path)
        except OSError as e:
            logger.debug("Failed to remove %s: %s", artifact_path, e)
            result.errors.append(CleanFailure(path=artifact_path, error=e.strerror or str(e)))
            # Count whatever rmtree managed to delete before failing
            remaining = get_directory_size(artifact_path, options) if os.path.isdir(artifact_path) else 0
            result.freed_bytes += max(size - remaining, 0)
            continue

        result.freed_bytes += size

    return result
