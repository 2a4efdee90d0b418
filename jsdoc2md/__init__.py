"""
jsdoc2md: Markdown API documentation from jsdoc-annotated JavaScript.

Runs jsdoc over the source, structures its output into template data and
renders that through Jinja templates. Usable as a library, from the
``jsdoc2md`` command and as an MkDocs plugin.
"""

__version__ = "1.0.0"

from .api import (  # noqa: E402
    JsdocToMarkdown,
    clear,
    create,
    get_jsdoc_data,
    get_jsdoc_data_sync,
    get_namepaths,
    get_template_data,
    get_template_data_sync,
    render,
    render_sync,
)
from .jsdoc import InvalidFilesError, JsdocError  # noqa: E402

__all__ = [
    "InvalidFilesError",
    "JsdocError",
    "JsdocToMarkdown",
    "clear",
    "create",
    "get_jsdoc_data",
    "get_jsdoc_data_sync",
    "get_namepaths",
    "get_template_data",
    "get_template_data_sync",
    "render",
    "render_sync",
]
