import logging
from typing import Optional


class CustomFormatter(logging.Formatter):
    """Custom formatter to remove the project name from the logger name."""

    def format(self, record):
        if record.name.startswith('ivms101'):
            record.name = record.name[len('ivms101'):]
            if record.name.startswith('.'):
                record.name = record.name[1:]
        return super().format(record)


def setup_logging(verbose: bool = False, level: Optional[int] = None):
    """Set up logging for the application.

    ``level`` takes precedence over ``verbose`` when given.
    """
    if level is None:
        level = logging.DEBUG if verbose else logging.INFO
    formatter = CustomFormatter('%(levelname)s:%(name)s:%(message)s')
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    package_logger = logging.getLogger('ivms101')
    package_logger.setLevel(level)
    # Repeated setup (e.g. several CLI invocations in one process) must not stack handlers
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    # Prevent propagation to the root logger to avoid duplicate messages
    package_logger.propagate = False
