"""Render call expressions in the remote evaluator's syntax.

Rendering rules:
- Symbol: bare identifier (resolved against the remote workspace)
- str: single-quoted
- int: unquoted integer, float: unquoted ``repr``
- bool: TRUE / FALSE
- None: NULL
- StringVector: c('a','b')
"""

from dsspatial.models.call import Argument, CallExpression, Literal, StringVector, Symbol


def render_literal(value: str | int | float | bool | None) -> str:
    if value is None:
        return "NULL"
    # bool before int: bool is a subclass of int
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return f"'{value}'"
    msg = f"Cannot render literal of type {type(value).__name__}"
    raise TypeError(msg)


def render_argument(arg: Argument) -> str:
    if isinstance(arg, Symbol):
        return arg.name
    if isinstance(arg, Literal):
        return render_literal(arg.value)
    if isinstance(arg, StringVector):
        return "c(" + ",".join(render_literal(value) for value in arg.values) + ")"
    msg = f"Unknown argument type {type(arg).__name__}"
    raise TypeError(msg)


def serialize(call: CallExpression) -> str:
    """Serialize a call to the text submitted for remote evaluation.

    Args:
        call: Structured call expression

    Returns:
        Expression string, e.g. ``coordsToLinesDS(coords,'id')``
    """
    return f"{call.function}(" + ",".join(render_argument(arg) for arg in call.args) + ")"


def exists_call(name: str) -> CallExpression:
    """``exists('name')``: does an object exist in the remote workspace."""
    return CallExpression("exists", (Literal(name),))


def class_call(name: str) -> CallExpression:
    """``classDS(name)``: class tag of a remote object."""
    return CallExpression("classDS", (Symbol(name),))


def colnames_call(name: str) -> CallExpression:
    """``colnamesDS(name)``: column names of a remote frame."""
    return CallExpression("colnamesDS", (Symbol(name),))
