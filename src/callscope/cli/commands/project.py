"""Project file helpers shared by the CLI commands."""

from ...core.config import Config
from ...services import Workspace


def open_workspace(config: Config) -> Workspace:
    """Load the configured project into a workspace.

    Args:
        config: Application configuration.

    Returns:
        Workspace restored from ``config.project_path``.

    Raises:
        FileNotFoundError: If the project file does not exist.
        ProjectFormatError: If the project file is malformed.
    """
    return Workspace.from_project(config.project_path, sort=config.search.default_sort)


def save_workspace(workspace: Workspace, config: Config) -> None:
    """Write the workspace back to the configured project file."""
    workspace.save(config.project_path)
