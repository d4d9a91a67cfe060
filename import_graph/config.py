"""
Configuration and logging setup for import-graph

Entry points load a .env file before reading these values; importing the
library never touches the environment.
"""

import logging
import os


class Config:
    """Defaults that can be overridden through the environment or a .env file"""
    LOG_LEVEL_ENV = "IMPORT_GRAPH_LOG_LEVEL"
    DEFAULT_LOG_LEVEL = "WARNING"

    # DOT output
    GRAPH_NAME_ENV = "IMPORT_GRAPH_NAME"
    DEFAULT_GRAPH_NAME = "importgraph"

    # Node fill colors
    STDLIB_COLOR = "palegreen"
    NATIVE_COLOR = "darkgoldenrod1"
    DEFAULT_COLOR = "paleturquoise"

    @classmethod
    def log_level(cls) -> str:
        return os.environ.get(cls.LOG_LEVEL_ENV, cls.DEFAULT_LOG_LEVEL)

    @classmethod
    def graph_name(cls) -> str:
        return os.environ.get(cls.GRAPH_NAME_ENV, cls.DEFAULT_GRAPH_NAME)


def setup_logging(level: str = None) -> logging.Logger:
    """Configure logging to stderr and return the package logger"""
    level = level or Config.log_level()
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s  %(name)-28s  %(levelname)-7s  %(message)s",
    )
    return logging.getLogger("import_graph")
