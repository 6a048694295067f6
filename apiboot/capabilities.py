"""
Capability installer.

Attaches the optional validation, default-binding and error-handling
capabilities to the app's slots (``app.state.validator``,
``app.state.binder``, ``app.state.error_handler``). Each flag is
independent. Installing the same flags again changes nothing.
"""

import logging

from fastapi import FastAPI

from apiboot.core.config import ServerConfig
from apiboot.shared.binding import DefaultValueBinder, Validator
from apiboot.shared.errors.handlers import register_error_handlers

logger = logging.getLogger(__name__)

VALIDATION = "validation"
DEFAULT_BINDER = "default_binder"
ERROR_HANDLER = "error_handler"


def installed_capabilities(app: FastAPI) -> frozenset[str]:
    """Names of the capabilities attached to ``app``."""
    return frozenset(getattr(app.state, "capabilities", ()))


def install(app: FastAPI, config: ServerConfig) -> None:
    """Attach every capability enabled in ``config``.

    Args:
        app: The FastAPI application instance.
        config: The server configuration holding the feature flags.
    """
    installed = set(installed_capabilities(app))

    if config.enable_validation and VALIDATION not in installed:
        app.state.validator = Validator()
        installed.add(VALIDATION)

    if config.enable_default_binder and DEFAULT_BINDER not in installed:
        app.state.binder = DefaultValueBinder(getattr(app.state, "validator", None))
        installed.add(DEFAULT_BINDER)

    if config.enable_error_handler and ERROR_HANDLER not in installed:
        register_error_handlers(app)
        installed.add(ERROR_HANDLER)

    app.state.capabilities = frozenset(installed)
    logger.debug("Capabilities installed: %s", ", ".join(sorted(installed)) or "none")
