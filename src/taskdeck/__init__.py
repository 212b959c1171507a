"""taskdeck: task query engine and OAuth callback handling for a task-management client."""

__version__ = "0.1.0"
