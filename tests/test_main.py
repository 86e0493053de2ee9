"""Main test module for presence-dashboard."""

from unittest.mock import patch

import presence_dashboard


class TestVersion:
    """Test version information."""

    def test_version_exists(self) -> None:
        """Verifies that version string is defined in package.

        Business context:
        Version information is reported by --version and in the web
        app's OpenAPI metadata.
        """
        assert presence_dashboard.__version__ is not None

    def test_version_format(self) -> None:
        """Verifies version follows MAJOR.MINOR.PATCH with numeric parts."""
        parts = presence_dashboard.__version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)

    def test_metadata_exported(self) -> None:
        assert presence_dashboard.__title__ == "presence_dashboard"
        assert presence_dashboard.__license__ == "MIT"


class TestModuleEntryPoint:
    def test_main_module_exits_with_cli_code(self) -> None:
        """Verifies python -m presence_dashboard delegates to cli.main."""
        import runpy

        with patch("presence_dashboard.cli.main", return_value=0) as mock_main:
            try:
                runpy.run_module("presence_dashboard", run_name="__main__")
            except SystemExit as exc:
                assert exc.code == 0
        mock_main.assert_called_once()
