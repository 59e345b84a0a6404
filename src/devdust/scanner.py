"""Scanner for finding development projects and their build artifacts."""

import fnmatch
import logging
import os
import time
from collections.abc import Iterable, Iterator
from pathlib import Path

from devdust.models import (
    ArtifactDirectory,
    Project,
    ProjectType,
    ScannedProject,
    ScanOptions,
    ScanResult,
    ScanWarning,
)
from devdust.utils.filesystem import (
    get_directory_size,
    get_last_modified,
    resolve_artifacts,
    walk,
)

logger = logging.getLogger("devdust")

# Checked in order, first match wins. Godot and Unity come before the
# generic C# rule because both also ship .csproj files.
DETECTION_RULES: list[tuple[ProjectType, tuple[str, ...], tuple[str, ...]]] = [
    (ProjectType.RUST, ("Cargo.toml",), ()),
    (ProjectType.NODE, ("package.json",), ()),
    (ProjectType.MAVEN, ("pom.xml",), ()),
    (ProjectType.GRADLE, ("build.gradle", "build.gradle.kts"), ()),
    (ProjectType.CMAKE, ("CMakeLists.txt",), ()),
    (ProjectType.HASKELL_STACK, ("stack.yaml",), ()),
    (ProjectType.SCALA_SBT, ("build.sbt",), ()),
    (ProjectType.COMPOSER, ("composer.json",), ()),
    (ProjectType.DART, ("pubspec.yaml",), ()),
    (ProjectType.ELIXIR, ("mix.exs",), ()),
    (ProjectType.SWIFT, ("Package.swift",), ()),
    (ProjectType.ZIG, ("build.zig",), ()),
    (ProjectType.GODOT, ("project.godot",), ()),
    (ProjectType.UNITY, ("Assembly-CSharp.csproj",), ()),
    (ProjectType.UNREAL, (), (".uproject",)),
    (ProjectType.DOTNET, (), (".csproj", ".fsproj")),
    (ProjectType.PYTHON, (), (".py",)),
    (ProjectType.JUPYTER, (), (".ipynb",)),
]


def detect_project_type(path: Path, names: Iterable[str] | None = None) -> ProjectType | None:
    """Detect the project type of a directory from its marker files.

    Python needs more than a stray script: at least one Python artifact
    directory must already exist next to the ``.py`` file.

    Args:
        path: Directory to classify
        names: Names of the directory's immediate children, if already listed

    Returns:
        The detected ProjectType, or None if the directory is not a project
    """
    if names is None:
        try:
            names = os.listdir(path)
        except OSError:
            return None
    names = set(names)

    for project_type, marker_names, extensions in DETECTION_RULES:
        if marker_names and not names.isdisjoint(marker_names):
            return project_type
        if extensions and any(name.endswith(extensions) for name in names):
            if project_type is ProjectType.PYTHON and not resolve_artifacts(
                path, project_type.artifact_directories
            ):
                continue
            return project_type

    return None


def _is_artifact_name(name: str, project_type: ProjectType) -> bool:
    return any(
        fnmatch.fnmatchcase(name, pattern)
        for pattern in project_type.artifact_directories
        if "/" not in pattern
    )


def _to_warning(error: OSError) -> ScanWarning:
    path = Path(error.filename) if error.filename else None
    return ScanWarning(path=path, message=error.strerror or str(error))


def _get_last_modified(project: Project, options: ScanOptions) -> float | None:
    try:
        return get_last_modified(project.path, options)
    except OSError:
        return None


def _walk_projects(
    root: Path, options: ScanOptions
) -> Iterator[tuple[Project, float | None] | ScanWarning]:
    """Yield each project with its last modification, if already known."""
    root = Path(root)
    errors: list[OSError] = []

    for dirpath, dirnames, filenames in walk(root, options, on_error=errors.append):
        while errors:
            yield _to_warning(errors.pop(0))

        current = Path(dirpath)
        # Hidden directories are searched but never projects themselves
        if current != root and current.name.startswith("."):
            continue

        project_type = detect_project_type(current, dirnames + filenames)
        if project_type is None:
            continue

        dirnames[:] = [d for d in dirnames if not _is_artifact_name(d, project_type)]

        project = Project(project_type=project_type, path=current)
        last_modified = None
        if options.min_age_seconds > 0:
            last_modified = _get_last_modified(project, options)
            age = None if last_modified is None else time.time() - last_modified
            # Age unknown or in the future: keep the project
            if age is not None and 0 <= age < options.min_age_seconds:
                logger.debug("Skipping %s: modified too recently", current)
                continue

        yield project, last_modified

    while errors:
        yield _to_warning(errors.pop(0))


def scan_directory(root: Path, options: ScanOptions) -> Iterator[Project | ScanWarning]:
    """Recursively find development projects under a root directory.

    The root itself may be a project. Hidden directories below the root are
    searched but never reported as projects, and a project's own artifact
    directories are never descended into. Other subdirectories are, so
    nested projects are found.

    Args:
        root: Directory to scan
        options: Walk settings and age filter

    Yields:
        Project for every match, ScanWarning for every directory that
        could not be read
    """
    for item in _walk_projects(root, options):
        yield item if isinstance(item, ScanWarning) else item[0]


def measure_project(
    project: Project, options: ScanOptions, last_modified: float | None = None
) -> ScannedProject:
    """Size a project's artifact directories and find its last modification.

    Pass ``last_modified`` when it is already known to skip walking the
    project again.
    """
    artifacts = []
    for artifact_path in project.artifact_paths():
        artifacts.append(
            ArtifactDirectory(
                path=artifact_path,
                name=artifact_path.relative_to(project.path).as_posix(),
                size_bytes=get_directory_size(artifact_path, options),
            )
        )

    if last_modified is None:
        last_modified = _get_last_modified(project, options)

    return ScannedProject(project=project, artifacts=artifacts, last_modified=last_modified)


def scan_for_projects(roots: list[Path], options: ScanOptions) -> ScanResult:
    """Scan root directories for projects that have artifacts to clean.

    Args:
        roots: List of root directories to scan
        options: Walk settings and age filter

    Returns:
        ScanResult with projects sorted largest first
    """
    projects: list[ScannedProject] = []
    warnings: list[ScanWarning] = []
    seen: set[str] = set()

    for root in roots:
        for item in _walk_projects(root, options):
            if isinstance(item, ScanWarning):
                logger.debug("Walk error: %s", item)
                warnings.append(item)
                continue

            project, last_modified = item

            # Overlapping roots or followed links can reach a project twice
            key = os.path.realpath(project.path)
            if key in seen:
                continue
            seen.add(key)

            scanned = measure_project(project, options, last_modified)
            if scanned.total_size_bytes == 0:
                logger.debug("Skipping %s: no artifacts", project.path)
                continue
            projects.append(scanned)

    projects.sort(key=lambda p: (-p.total_size_bytes, str(p.project.path)))
    return ScanResult(roots=list(roots), projects=projects, warnings=warnings)
