from .logging import log_debug, log_error, log_info, log_warning, setup_logging
from .platform import Platform, classify_url

__all__ = ["Platform", "classify_url", "log_debug", "log_error", "log_info", "log_warning", "setup_logging"]
