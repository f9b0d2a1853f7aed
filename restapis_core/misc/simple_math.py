"""
Simple arithmetic operations for the calculator endpoints

Invalid operations raise the usual Python exceptions: ``ZeroDivisionError``
when dividing by zero and ``ValueError`` for the square root of negatives.
"""

import math


def add(number_one: float, number_two: float) -> float:
    return number_one + number_two


def sub(number_one: float, number_two: float) -> float:
    return number_one - number_two


def mult(number_one: float, number_two: float) -> float:
    return number_one * number_two


def div(number_one: float, number_two: float) -> float:
    return number_one / number_two


def mean(number_one: float, number_two: float) -> float:
    return (number_one + number_two) / 2


def square_root(number: float) -> float:
    return math.sqrt(number)
