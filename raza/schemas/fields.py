import math
from typing import Annotated
from pydantic import AliasChoices, BeforeValidator, Field

def _number(value):
    if value is None or value == "":
        return 0.0
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("must be a finite number")
    return number

def _text(value):
    if value is None:
        return ""
    return str(value)

def _date(value):
    # backend dates arrive as "YYYY-MM-DD" or full ISO timestamps
    if value is None:
        return ""
    return str(value).split("T")[0]

def _id(value):
    if value == "":
        return None
    return value

Amount = Annotated[float, BeforeValidator(_number)]
Text = Annotated[str, BeforeValidator(_text)]
DateText = Annotated[str, BeforeValidator(_date)]
EntityId = Annotated[int | str | None, BeforeValidator(_id)]

def aliased(*names: str, default=None):
    """Field accepting every backend spelling in ``names``, first match wins."""
    return Field(default=default, validation_alias=AliasChoices(*names))

def same_id(left, right) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)

def wire_id(value):
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value
