"""Data models for devdust."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from devdust.utils.filesystem import resolve_artifacts


class ProjectType(Enum):
    """Kinds of development project, with their artifact directories."""

    RUST = ("Rust", ("target", ".xwin-cache"))
    NODE = ("Node.js", ("node_modules", ".next", ".nuxt", "dist", "build", ".angular"))
    PYTHON = (
        "Python",
        (
            "__pycache__",
            ".pytest_cache",
            ".mypy_cache",
            ".ruff_cache",
            ".tox",
            ".nox",
            ".venv",
            "venv",
            ".hypothesis",
            "__pypackages__",
            "*.egg-info",
        ),
    )
    DOTNET = (".NET", ("bin", "obj"))
    UNITY = ("Unity", ("Library", "Temp", "Obj", "Logs", "MemoryCaptures", "Build", "Builds"))
    UNREAL = ("Unreal Engine", ("Binaries", "Build", "Saved", "Intermediate", "DerivedDataCache"))
    MAVEN = ("Maven", ("target",))
    GRADLE = ("Gradle", ("build", ".gradle"))
    CMAKE = ("CMake", ("build", "cmake-build-debug", "cmake-build-release"))
    HASKELL_STACK = ("Haskell Stack", (".stack-work",))
    SCALA_SBT = ("Scala SBT", ("target", "project/target"))
    COMPOSER = ("PHP Composer", ("vendor",))
    DART = ("Dart/Flutter", ("build", ".dart_tool"))
    ELIXIR = ("Elixir", ("_build", ".elixir-tools", ".elixir_ls", ".lexical"))
    SWIFT = ("Swift", (".build", ".swiftpm"))
    ZIG = ("Zig", ("zig-cache", "zig-out"))
    GODOT = ("Godot", (".godot",))
    JUPYTER = ("Jupyter", (".ipynb_checkpoints",))

    def __init__(self, display_name: str, artifact_directories: tuple[str, ...]) -> None:
        self.display_name = display_name
        self.artifact_directories = artifact_directories


@dataclass(frozen=True)
class Project:
    """A directory recognised as the root of a development project."""

    project_type: ProjectType
    path: Path

    @property
    def display_name(self) -> str:
        """Directory name of the project root."""
        return self.path.name or "Unknown"

    def artifact_paths(self) -> list[Path]:
        """Artifact directories that exist right now under the project root."""
        return resolve_artifacts(self.path, self.project_type.artifact_directories)


@dataclass(frozen=True)
class ScanOptions:
    """Options shared by walking, sizing and cleaning."""

    follow_symlinks: bool = False
    same_filesystem: bool = True
    min_age_seconds: int = 0


@dataclass
class ArtifactDirectory:
    """An artifact directory found inside a project."""

    path: Path
    name: str  # relative to the project root, e.g. "node_modules"
    size_bytes: int

    @property
    def size_human(self) -> str:
        """Return human-readable size."""
        return format_size(self.size_bytes)


@dataclass
class ScannedProject:
    """A detected project together with its measured artifacts."""

    project: Project
    artifacts: list[ArtifactDirectory] = field(default_factory=list)
    last_modified: float | None = None

    @property
    def total_size_bytes(self) -> int:
        """Total size of all artifact directories."""
        return sum(a.size_bytes for a in self.artifacts)


@dataclass
class ScanWarning:
    """A filesystem error met while walking, reported and skipped."""

    path: Path | None
    message: str

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


@dataclass
class ScanResult:
    """Result of scanning root directories."""

    roots: list[Path]
    projects: list[ScannedProject]
    warnings: list[ScanWarning] = field(default_factory=list)

    @property
    def total_size_bytes(self) -> int:
        return sum(p.total_size_bytes for p in self.projects)


@dataclass
class CleanFailure:
    """An artifact directory that could not be removed."""

    path: Path
    error: str


@dataclass
class CleanResult:
    """Outcome of cleaning one project.

    A non-empty ``errors`` list is a partial failure: ``freed_bytes`` still
    holds whatever was removed before and after the failing directories.
    """

    project: Project
    freed_bytes: int = 0
    errors: list[CleanFailure] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors

    def describe(self) -> str:
        if self.ok:
            return f"Cleaned {format_size(self.freed_bytes)}"
        return (
            f"Partially cleaned ({format_size(self.freed_bytes)}), "
            f"{len(self.errors)} errors occurred"
        )


SIZE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]

MINUTE = 60
HOUR = MINUTE * 60
DAY = HOUR * 24
WEEK = DAY * 7
MONTH = DAY * 30
YEAR = DAY * 365


def format_size(bytes_size: int) -> str:
    """Format bytes as human-readable string."""
    if bytes_size <= 0:
        return "0 B"
    size = float(bytes_size)
    for unit in SIZE_UNITS[:-1]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} {SIZE_UNITS[-1]}"


def format_elapsed_time(seconds: int) -> str:
    """Format an age in seconds as e.g. "2 days ago"."""
    seconds = max(int(seconds), 0)
    if seconds < MINUTE:
        value, unit = seconds, "second"
    elif seconds < HOUR:
        value, unit = seconds // MINUTE, "minute"
    elif seconds < DAY:
        value, unit = seconds // HOUR, "hour"
    elif seconds < WEEK:
        value, unit = seconds // DAY, "day"
    elif seconds < MONTH:
        value, unit = seconds // WEEK, "week"
    elif seconds < YEAR:
        value, unit = seconds // MONTH, "month"
    else:
        value, unit = seconds // YEAR, "year"

    plural = "" if value == 1 else "s"
    return f"{value} {unit}{plural} ago"
