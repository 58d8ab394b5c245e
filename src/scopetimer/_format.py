"""Placeholder substitution for report templates.

Recognized placeholders are ``{filename}``, ``{row}``, ``{name}``,
``{function}`` and ``{result}``. Substitution is a single left-to-right pass,
so replacement text is never re-scanned: a name containing ``{result}`` is
printed literally. Any other ``{...}`` token passes through untouched.
"""

import re
from collections.abc import Mapping

from beartype import beartype

from scopetimer._settings import TimerSettings

PLACEHOLDERS: tuple[str, ...] = ("filename", "row", "name", "function", "result")

_PLACEHOLDER_RE = re.compile(r"\{(" + "|".join(PLACEHOLDERS) + r")\}")


@beartype
def render_template(template: str, values: Mapping[str, object]) -> str:
    """Replace every recognized placeholder that has a value in ``values``."""

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in values:
            return match.group(0)
        return str(values[key])

    return _PLACEHOLDER_RE.sub(_substitute, template)


@beartype
def format_report(settings: TimerSettings, result_text: str) -> str:
    """Render ``settings.format`` for one finished measurement."""
    site = settings.call_site
    assert site is not None, "Settings must carry a call site"
    return render_template(
        settings.format,
        {
            "filename": site.filename,
            "row": site.line,
            "name": settings.name,
            "function": site.function,
            "result": result_text,
        },
    )
