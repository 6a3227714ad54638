"""
Formcheck Controllers
=====================

Request handlers built on the validation system.
"""

from formcheck.controllers.form_controller import (
    FormController,
    HandlerResponse,
    LOGIN_RULES,
)

__all__ = [
    "FormController",
    "HandlerResponse",
    "LOGIN_RULES",
]
