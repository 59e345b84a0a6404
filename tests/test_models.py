"""Tests for devdust data models and formatting helpers."""

from pathlib import Path

import pytest

from devdust.models import (
    ArtifactDirectory,
    CleanFailure,
    CleanResult,
    Project,
    ProjectType,
    ScannedProject,
    ScanOptions,
    ScanWarning,
    format_elapsed_time,
    format_size,
)

from conftest import write_file


class TestFormatSize:
    """Tests for format_size."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0 B"),
            (1, "1.0 B"),
            (512, "512.0 B"),
            (1023, "1023.0 B"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (1_048_576, "1.0 MB"),
            (1_073_741_824, "1.0 GB"),
            (1024**4, "1.0 TB"),
            (1024**5, "1.0 PB"),
            (1024**6, "1024.0 PB"),
        ],
    )
    def test_format(self, size: int, expected: str) -> None:
        """Test sizes pick the largest fitting unit."""
        assert format_size(size) == expected


class TestFormatElapsedTime:
    """Tests for format_elapsed_time."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0 seconds ago"),
            (1, "1 second ago"),
            (59, "59 seconds ago"),
            (60, "1 minute ago"),
            (150, "2 minutes ago"),
            (3600, "1 hour ago"),
            (86400, "1 day ago"),
            (2 * 86400, "2 days ago"),
            (7 * 86400, "1 week ago"),
            (30 * 86400, "1 month ago"),
            (364 * 86400, "12 months ago"),
            (365 * 86400, "1 year ago"),
            (3 * 365 * 86400, "3 years ago"),
        ],
    )
    def test_format(self, seconds: int, expected: str) -> None:
        """Test ages use the largest whole unit."""
        assert format_elapsed_time(seconds) == expected

    def test_negative_is_clamped(self) -> None:
        """Test a future timestamp does not produce a negative age."""
        assert format_elapsed_time(-5) == "0 seconds ago"


class TestProjectType:
    """Tests for the project type table."""

    def test_display_names(self) -> None:
        """Test human-readable names."""
        assert ProjectType.RUST.display_name == "Rust"
        assert ProjectType.NODE.display_name == "Node.js"
        assert ProjectType.PYTHON.display_name == "Python"
        assert ProjectType.DOTNET.display_name == ".NET"
        assert ProjectType.UNREAL.display_name == "Unreal Engine"

    def test_artifact_directories(self) -> None:
        """Test a few artifact lists."""
        assert ProjectType.RUST.artifact_directories == ("target", ".xwin-cache")
        assert ProjectType.DOTNET.artifact_directories == ("bin", "obj")
        assert "project/target" in ProjectType.SCALA_SBT.artifact_directories
        assert "*.egg-info" in ProjectType.PYTHON.artifact_directories

    def test_every_type_has_artifacts(self) -> None:
        """Test no project type is missing its artifact list."""
        assert len(ProjectType) == 18
        for project_type in ProjectType:
            assert project_type.artifact_directories


class TestProject:
    """Tests for Project."""

    def test_display_name(self, tmp_path: Path) -> None:
        """Test the display name is the directory name."""
        project = Project(ProjectType.RUST, tmp_path / "crab")
        assert project.display_name == "crab"

    def test_display_name_unknown(self) -> None:
        """Test a nameless path falls back to Unknown."""
        assert Project(ProjectType.RUST, Path("/")).display_name == "Unknown"

    def test_is_immutable(self, tmp_path: Path) -> None:
        """Test projects cannot be modified after creation."""
        project = Project(ProjectType.RUST, tmp_path)
        with pytest.raises(AttributeError):
            project.path = tmp_path / "other"  # type: ignore[misc]

    def test_artifact_paths_rechecked(self, rust_project: Path) -> None:
        """Test artifact paths reflect the filesystem at call time."""
        project = Project(ProjectType.RUST, rust_project)
        assert project.artifact_paths() == [rust_project / "target"]

        write_file(rust_project / ".xwin-cache" / "sdk", 1)
        assert project.artifact_paths() == [rust_project / "target", rust_project / ".xwin-cache"]


class TestScanOptions:
    """Tests for ScanOptions defaults."""

    def test_defaults(self) -> None:
        """Test default walking behaviour."""
        options = ScanOptions()
        assert options.follow_symlinks is False
        assert options.same_filesystem is True
        assert options.min_age_seconds == 0


class TestResults:
    """Tests for result dataclasses."""

    def test_scanned_project_total(self, tmp_path: Path) -> None:
        """Test total size sums artifacts."""
        scanned = ScannedProject(
            project=Project(ProjectType.NODE, tmp_path),
            artifacts=[
                ArtifactDirectory(tmp_path / "node_modules", "node_modules", 100),
                ArtifactDirectory(tmp_path / "dist", "dist", 50),
            ],
        )
        assert scanned.total_size_bytes == 150

    def test_clean_result_ok(self, tmp_path: Path) -> None:
        """Test a clean result without errors."""
        result = CleanResult(project=Project(ProjectType.RUST, tmp_path), freed_bytes=2048)
        assert result.ok
        assert result.describe() == "Cleaned 2.0 KB"

    def test_clean_result_partial(self, tmp_path: Path) -> None:
        """Test a partial failure description."""
        result = CleanResult(
            project=Project(ProjectType.RUST, tmp_path),
            freed_bytes=1024,
            errors=[CleanFailure(tmp_path / "target", "Permission denied")],
        )
        assert not result.ok
        assert result.describe() == "Partially cleaned (1.0 KB), 1 errors occurred"

    def test_scan_warning_str(self, tmp_path: Path) -> None:
        """Test warnings render with and without a path."""
        assert str(ScanWarning(tmp_path, "Permission denied")) == f"{tmp_path}: Permission denied"
        assert str(ScanWarning(None, "boom")) == "boom"
