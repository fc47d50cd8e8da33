"""DevSpace core: engineer roster, tasks and the GitHub repository binding."""

__version__ = "0.1.0"
