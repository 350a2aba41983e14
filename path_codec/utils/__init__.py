"""Shared utilities: logging setup and YAML loading."""

from path_codec.utils.logging_config import get_logger, log_context, push_context, setup_logging

__all__ = ["get_logger", "log_context", "push_context", "setup_logging"]
