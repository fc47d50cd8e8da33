"""Translate pydantic validation failures into the core's ValidationError."""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from devspace.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def format_error(exc: PydanticValidationError) -> str:
    """Render the first pydantic error as ``field: message``."""
    err = exc.errors()[0]
    loc = ".".join(str(x) for x in err["loc"])
    msg = err["msg"]
    # "Value error, Must be a valid URL" -> "Must be a valid URL"
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, ") :]
    return f"{loc}: {msg}" if loc else msg


def validate_input(model_class: type[M], data: M | dict[str, Any]) -> M:
    """Validate ``data`` against ``model_class``.

    Already-built models are re-validated so that callers cannot bypass
    constraints with ``model_construct``.

    Raises:
        ValidationError: with the first error's message.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model_class.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(format_error(e)) from e
