"""
Formcheck Form Controller
=========================

Login handler validating submitted credentials.

The handler is transport agnostic: it receives the already parsed
request fields and returns a status code with a body. Wiring it to
a router and serializing the body is left to the host application.
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Dict, Optional, Union

from formcheck.utils.logger import Logger, get_logger
from formcheck.validation.exceptions import ValidationError
from formcheck.validation.validator import ValidatorFactory

LOGIN_RULES = {
    "username": "required",
    "password": "required",
}


@dataclass
class HandlerResponse:
    """Status code and body produced by a handler."""

    status_code: int
    body: Union[str, Dict[str, Any]]

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class FormController:
    """
    Handlers for form submissions.

    Example:
        controller = FormController()
        response = controller.login({"username": "admin", "password": "secret"})
        response.status_code  # 200
    """

    def __init__(
        self,
        factory: Optional[ValidatorFactory] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self.factory = factory or ValidatorFactory()
        self.logger = logger or get_logger("formcheck")

    def login(self, fields: Dict[str, Any]) -> HandlerResponse:
        """
        Validate login credentials.

        Returns:
            200 with "OK", or 400 with the error report
        """
        validator = self.factory.make(fields, LOGIN_RULES)

        try:
            validator.validate()
        except ValidationError as e:
            self.logger.info(
                "Login rejected",
                errors=e.validator.errors().to_json(),
            )
            return HandlerResponse(HTTPStatus.BAD_REQUEST, e.errors)

        return HandlerResponse(HTTPStatus.OK, "OK")
