"""Sprint, epic and work item lifecycle engine for project boards."""

__version__ = "0.1.0"
