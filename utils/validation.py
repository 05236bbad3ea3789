# utils/validation.py
from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from utils.errors import ValidationError


def _field_errors(err: PydanticValidationError) -> list:
    return [
        {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
        for e in err.errors()
    ]


def parse_body(schema: type[BaseModel]) -> BaseModel:
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid data", errors=[{"field": "", "message": "Expected a JSON object"}])
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as err:
        raise ValidationError("Invalid data", errors=_field_errors(err))
