"""
Message formatting for error and log text.

Templates use ``{}`` as placeholder. Arguments are substituted in order;
placeholders without an argument are left untouched and surplus arguments
are appended as `` - [a, b]`` so that no diagnostic value is ever lost.

Example:
    >>> format_message("Leg {} has {} payment periods", 1, 4)
    'Leg 1 has 4 payment periods'
    >>> format_message("Missing {}", "GBP", "2024-01-15")
    'Missing GBP - [2024-01-15]'
"""

from typing import Optional

_PLACEHOLDER = "{}"


def _to_string(value) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def format_message(template: Optional[str], *args) -> str:
    """ Substitute ``{}`` placeholders in template with args. """

    if template is None:
        template = ""

    if len(args) == 0:
        return template

    parts = []
    pos = 0
    used = 0
    while used < len(args):
        idx = template.find(_PLACEHOLDER, pos)
        if idx < 0:
            break
        parts.append(template[pos:idx])
        parts.append(_to_string(args[used]))
        pos = idx + len(_PLACEHOLDER)
        used += 1

    parts.append(template[pos:])
    message = "".join(parts)

    if used < len(args):
        excess = ", ".join(_to_string(a) for a in args[used:])
        message += f" - [{excess}]"

    return message
