##############################################################################

##############################################################################

import typing
from typing import Union

import numpy as np
from prettytable import PrettyTable

from ratesweep.utils.error import LibError
from ratesweep.utils.messages import format_message

###############################################################################


def label_to_string(label: str,
                    value: (float, str),
                    separator: str = "\n"):
    """ Format label/value pairs for a unified formatting. """
    return f"{label}: {value}{separator}"

###############################################################################


def format_table(header: (list, tuple),
                 rows: (list, tuple)):
    """ Format a 2D array into a table-like string using PrettyTable. """

    t = PrettyTable(header)
    num_cols = len(header)

    if len(rows) == 0:
        return ""

    for row in rows:
        if len(row) != num_cols:
            raise ValueError("Header and Row Size must match!")

        t.add_row(row)

    return t

###############################################################################


def to_usable_type(t):
    """ Convert a type such that it can be used with `isinstance` """
    origin = typing.get_origin(t)
    if origin is not None:
        # t comes from the `typing` module
        if origin is list:
            return (list, tuple, np.ndarray)
        elif origin is Union:
            return tuple(to_usable_type(tp) for tp in typing.get_args(t))
        return origin
    else:
        # t is a normal type
        if t is float:
            return (int, float, np.floating)
        if t is int:
            return (int, np.integer)
        if isinstance(t, tuple):
            return tuple(to_usable_type(tp) for tp in t)
        if t is typing.Any:
            return object

    return t


def _flatten(types):
    if isinstance(types, tuple):
        out = ()
        for tp in types:
            out += _flatten(tp)
        return out
    return (types,)

###############################################################################


def check_argument_types(func, values):
    """ Check that all values passed into a function are of the same type
    as the function annotations. If a value has not been annotated, it
    will not be checked. """
    for value_name, annotation_type in func.__annotations__.items():

        if value_name == "return" or value_name not in values:
            continue

        value = values[value_name]
        usable_type = _flatten(to_usable_type(annotation_type))

        if not isinstance(value, usable_type):
            raise LibError(format_message(
                "Argument '{}' of {}.{} has type {}, expected one of {}",
                value_name, func.__module__, func.__qualname__,
                type(value).__name__,
                [getattr(tp, "__name__", str(tp)) for tp in usable_type]))

###############################################################################
