"""Response helpers shared by the use cases."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ...error_codes import ErrorCode
from ...exceptions import BridgeError, InputValidationError

RequestT = TypeVar("RequestT", bound=BaseModel)


def error_response(error: str, message: str | None = None, **extra: Any) -> dict[str, Any]:
    response: dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        response["message"] = message
    response.update(extra)
    return response


def invalid_input_response(error: InputValidationError) -> dict[str, Any]:
    """The "Invalid input" response listing each field problem."""
    return error_response(
        "Invalid input",
        details=error.context.get("details", []),
        error_code=error.error_code,
    )


def configuration_error_response(error: BridgeError) -> dict[str, Any]:
    return error_response(
        "Configuration error",
        error.message,
        error_code=error.error_code,
        suggestion=error.suggestion,
    )


def validate_request(
    model: type[RequestT], args: RequestT | dict[str, Any] | None
) -> RequestT:
    """Validate caller arguments against ``model``.

    Raises:
        InputValidationError: With the field problems in ``context["details"]``
    """
    if isinstance(args, model):
        return args
    try:
        return model.model_validate(args or {})
    except ValidationError as e:
        details = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "(root)",
                "message": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        raise InputValidationError(
            f"Invalid {model.__name__}",
            error_code=ErrorCode.VAL_INPUT_INVALID.value,
            context={"details": details},
        ) from e
