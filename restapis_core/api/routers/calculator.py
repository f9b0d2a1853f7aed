"""
Router module for /math requests

All operands are accepted as strings in the path and converted
afterwards, so that non-numeric input results in a custom error.
"""

import math
from typing import Callable, List

from fastapi import APIRouter

from ..base import UnsupportedMathOperation
from ...misc import converters, simple_math
from ... import schemas


router = APIRouter(
    prefix="/math",
    tags=["Math"],
    responses={400: {"model": schemas.APIError}}
)


def _parse(*numbers: str) -> List[float]:
    if not all(map(converters.is_numeric, numbers)):
        raise UnsupportedMathOperation("Please set a numeric value!", f"operands: {numbers!r}")
    return [converters.convert_to_float(n) for n in numbers]


def _calculate(operation: Callable[..., float], *numbers: str) -> float:
    operands = _parse(*numbers)
    try:
        result = operation(*operands)
    except ZeroDivisionError as exc:
        raise UnsupportedMathOperation("Division by zero is not allowed!", str(exc)) from exc
    except ValueError as exc:
        raise UnsupportedMathOperation("The square root of a negative number is not defined!", str(exc)) from exc
    if not math.isfinite(result):
        raise UnsupportedMathOperation("The result is out of range!", repr(result))
    return result


@router.get("/sum/{number_one}/{number_two}", response_model=float)
async def sum_numbers(number_one: str, number_two: str):
    return _calculate(simple_math.add, number_one, number_two)


@router.get("/sub/{number_one}/{number_two}", response_model=float)
async def subtract_numbers(number_one: str, number_two: str):
    return _calculate(simple_math.sub, number_one, number_two)


@router.get("/mult/{number_one}/{number_two}", response_model=float)
async def multiply_numbers(number_one: str, number_two: str):
    return _calculate(simple_math.mult, number_one, number_two)


@router.get("/div/{number_one}/{number_two}", response_model=float)
async def divide_numbers(number_one: str, number_two: str):
    """
    Divide the first number by the second one

    * `400`: if the second number is zero
    """

    return _calculate(simple_math.div, number_one, number_two)


@router.get("/mean/{number_one}/{number_two}", response_model=float)
async def mean_of_numbers(number_one: str, number_two: str):
    return _calculate(simple_math.mean, number_one, number_two)


@router.get("/squareroot/{number}", response_model=float)
async def square_root_of_number(number: str):
    """
    Return the square root of the number

    * `400`: if the number is negative
    """

    return _calculate(simple_math.square_root, number)
