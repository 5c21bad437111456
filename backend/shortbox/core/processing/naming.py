"""Path templates for organising processed files."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from shortbox.core.utils import sanitize_path_component

FIELD_TOKEN_PATTERN = re.compile(r"\{([^{}]+)\}")

TEMPLATE_FIELDS = ("series", "issue", "year", "publisher", "volume")

DEFAULT_TEMPLATE = "{publisher}/{series} ({volume})/{series} #{issue} ({year})"


def format_path(template: str, data: Mapping[str, Any] | BaseModel) -> str:
    """Render a path template such as ``{publisher}/{series}/{series} #{issue}``.

    Values are sanitised for use in file names; separators in the template
    itself are kept. Unknown fields and fields whose value is None are left
    in place untouched.

    Args:
        template: Template with {field} tokens
        data: Metadata as a mapping or model (e.g. ProcessingData)

    Returns:
        Rendered path
    """
    values = data.model_dump() if isinstance(data, BaseModel) else dict(data)

    def replace(match: re.Match[str]) -> str:
        field = match.group(1).strip()
        if field not in TEMPLATE_FIELDS or values.get(field) is None:
            return match.group(0)
        return sanitize_path_component(str(values[field]))

    return FIELD_TOKEN_PATTERN.sub(replace, template)
