"""
Option normalizers.

One loosely-typed options mapping feeds three consumers: jsdoc (extraction),
the structuring transform and the renderer. Each gets its own narrow options
object built here. Keys are accepted in kebab-case (as written on the command
line and in .jsdoc2md.json) or snake_case.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

DEFAULT_TEMPLATE = '{% include "main" %}'
DEFAULT_SORT_BY = ("scope", "category", "kind", "order")


def normalize_keys(options):
    if not options:
        return {}
    return {str(k).replace("-", "_"): v for k, v in dict(options).items()}


def arrayify(value):
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


@dataclass
class JsdocOptions:
    files: list[str] = field(default_factory=list)
    source: str | None = None
    configure: str | None = None
    html: bool = False
    cache: bool = True

    @classmethod
    def from_options(cls, options=None):
        opts = normalize_keys(options)
        return cls(
            files=[str(f) for f in arrayify(opts.get("files"))],
            source=opts.get("source"),
            configure=opts.get("configure"),
            html=bool(opts.get("html", False)),
            cache=opts.get("cache", True) is not False,
        )

    def to_dict(self):
        return asdict(self)


@dataclass
class ParseOptions:
    sort_by: tuple[str, ...] = DEFAULT_SORT_BY

    @classmethod
    def from_options(cls, options=None):
        opts = normalize_keys(options)
        sort_by = opts.get("sort_by", DEFAULT_SORT_BY)
        if sort_by in (None, "none"):
            sort_by = ()
        return cls(sort_by=tuple(arrayify(sort_by)))


@dataclass
class DmdOptions:
    template: str = DEFAULT_TEMPLATE
    heading_depth: int = 2
    example_lang: str | None = None
    plugin: list[str] = field(default_factory=list)
    helper: list[str] = field(default_factory=list)
    partial: list[str] = field(default_factory=list)
    name_format: bool = False
    no_gfm: bool = False
    separators: bool = False
    module_index_format: str = "dl"
    global_index_format: str = "dl"
    param_list_format: str = "table"
    property_list_format: str = "table"
    member_index_format: str = "grouped"

    @classmethod
    def from_options(cls, options=None):
        opts = normalize_keys(options)
        return cls(
            template=opts.get("template") or DEFAULT_TEMPLATE,
            heading_depth=opts.get("heading_depth") or 2,
            example_lang=opts.get("example_lang"),
            plugin=arrayify(opts.get("plugin")),
            helper=arrayify(opts.get("helper")),
            partial=arrayify(opts.get("partial")),
            name_format=bool(opts.get("name_format", False)),
            no_gfm=bool(opts.get("no_gfm", False)),
            separators=bool(opts.get("separators", False)),
            module_index_format=opts.get("module_index_format") or "dl",
            global_index_format=opts.get("global_index_format") or "dl",
            param_list_format=opts.get("param_list_format") or "table",
            property_list_format=opts.get("property_list_format") or "table",
            member_index_format=opts.get("member_index_format") or "grouped",
        )

    def to_dict(self):
        return asdict(self)
