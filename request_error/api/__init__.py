from .handlers import error_response, install_error_handlers
