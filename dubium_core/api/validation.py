"""Request body validation decorator.

@validate_request inspects the view's signature: a parameter annotated
with a Pydantic model is filled from the JSON body (or form data); path
parameters are passed through unchanged.
"""

import inspect
from functools import wraps

from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError

# Never echo these back in error details
REDACTED_FIELDS = {"password"}


def _redact(data):
    if not isinstance(data, dict):
        return data
    return {k: ("***" if k in REDACTED_FIELDS else v) for k, v in data.items()}


def _format_errors(error: PydanticValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
            "expected_type": e["type"],
        }
        for e in error.errors()
    ]


def validate_request(f):
    """
    Validate the request body against the view's Pydantic parameter.

    Raises:
        ValidationError: If the body is missing or does not match the model,
            with details {"model", "received", "errors"}

    Example:
    ```python
    @auth_bp.post("/auth/login")
    @validate_request
    def login(data: LoginRequest):
        ...
    ```
    """
    signature = inspect.signature(f)
    model_params = {
        name: param.annotation
        for name, param in signature.parameters.items()
        if inspect.isclass(param.annotation) and issubclass(param.annotation, BaseModel)
    }

    @wraps(f)
    def wrapper(*args, **kwargs):
        for name, model in model_params.items():
            if request.is_json:
                payload = request.get_json(silent=True)
            else:
                payload = request.form.to_dict() or None

            if payload is None:
                raise ValidationError(
                    "Request body is required",
                    {"model": model.__name__, "received": None, "errors": []}
                )

            try:
                kwargs[name] = model.model_validate(payload)
            except PydanticValidationError as e:
                raise ValidationError(
                    "Invalid request data",
                    {
                        "model": model.__name__,
                        "received": _redact(payload),
                        "errors": _format_errors(e),
                    }
                )

        return f(*args, **kwargs)

    return wrapper
