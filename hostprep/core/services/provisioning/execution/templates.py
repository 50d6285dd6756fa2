"""
L4 Execution — Step field templating.

Step fields reference ``TemplateContext`` fields by name::

    deb [arch={{Arch}} signed-by={{KeyPath}}] {{URL}} {{Channel}} {{Component}}

Unknown names are errors, never silently empty.
"""

from __future__ import annotations

import logging

import jinja2

from hostprep.core.errors import TemplateRenderError
from hostprep.core.models.template import TemplateContext

logger = logging.getLogger(__name__)

_MARKER = "{{"

# Only ``{{ }}`` substitution is template syntax.  Block and comment
# delimiters are set to sequences containing NUL, which YAML text never
# holds, so shell idioms like ``${#VAR}`` or ``{%`` stay literal.
_env = jinja2.Environment(
    block_start_string="{%\x00",
    block_end_string="\x00%}",
    comment_start_string="{#\x00",
    comment_end_string="\x00#}",
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
)


def render(template: str, context: TemplateContext) -> str:
    """Render ``template`` against ``context``.

    Strings without ``{{`` are returned unchanged.

    Raises:
        TemplateRenderError: Syntax error or reference to an unknown
            name.
    """
    if _MARKER not in template:
        return template

    try:
        return _env.from_string(template).render(context.model_dump())
    except jinja2.UndefinedError as e:
        raise TemplateRenderError(f"Undefined template variable in {template!r}: {e}") from e
    except jinja2.TemplateSyntaxError as e:
        raise TemplateRenderError(f"Template syntax error in {template!r}: {e}") from e


def render_all(values: list[str], context: TemplateContext) -> list[str]:
    return [render(v, context) for v in values]
