"""
MkDocs plugin rendering JavaScript API documentation into pages.

Pages embed directives such as::

    ::: jsdoc:autodoc
        :files: src/*.js
        :name: module:util
        :heading-depth: 3

Each directive runs jsdoc over the listed files (relative to
``source_root``), renders the template data and replaces itself with the
resulting Markdown.
"""

from __future__ import annotations

import logging
import os
import re

from jinja2 import TemplateError
from mkdocs.config import config_options
from mkdocs.config.base import Config as MkDocsConfig
from mkdocs.plugins import BasePlugin

from .api import create
from .jsdoc import JsdocError, JsdocExplainer

log = logging.getLogger("mkdocs.plugins.jsdoc2md")

_DIRECTIVE_RE = re.compile(
    r"^(?P<indent>[ \t]*):::[ \t]+jsdoc:(?P<directive>autodoc)\s*\n"
    r"(?P<body>(?:(?P=indent)[ \t]+:[\w-]+:.*\n)*)",
    re.MULTILINE,
)
_OPTION_RE = re.compile(r"^\s+:([\w-]+):\s*(.+)$", re.MULTILINE)

_INT_OPTIONS = {"heading_depth"}
_BOOL_OPTIONS = {"name_format", "no_gfm", "separators"}
_RENDER_OPTIONS = (
    "template",
    "heading_depth",
    "example_lang",
    "plugin",
    "helper",
    "partial",
    "name_format",
    "no_gfm",
    "separators",
    "module_index_format",
    "global_index_format",
    "param_list_format",
    "property_list_format",
    "member_index_format",
)


class Jsdoc2mdConfig(MkDocsConfig):
    source_root = config_options.Type(str, default="")
    jsdoc_command = config_options.Type(str, default="")
    configure = config_options.Type(str, default="")
    cache = config_options.Type(bool, default=True)
    sort_by = config_options.Type(list, default=["scope", "category", "kind", "order"])
    template = config_options.Type(str, default="")
    heading_depth = config_options.Type(int, default=2)
    example_lang = config_options.Type(str, default="js")
    plugin = config_options.Type(list, default=[])
    helper = config_options.Type(list, default=[])
    partial = config_options.Type(list, default=[])
    name_format = config_options.Type(bool, default=False)
    no_gfm = config_options.Type(bool, default=False)
    separators = config_options.Type(bool, default=False)
    module_index_format = config_options.Type(str, default="dl")
    global_index_format = config_options.Type(str, default="dl")
    param_list_format = config_options.Type(str, default="table")
    property_list_format = config_options.Type(str, default="table")
    member_index_format = config_options.Type(str, default="grouped")


def _as_bool(value):
    return value.strip().lower() in ("true", "yes", "1")


def _filter_by_name(data, name):
    """Keep ``name`` and every identifier nested beneath it."""
    keep = {name}
    grew = True
    # members may precede their parent after sorting
    while grew:
        grew = False
        for entry in data:
            if entry.get("memberof") in keep and entry.get("longname") not in keep:
                keep.add(entry.get("longname"))
                grew = True
    return [e for e in data if e.get("longname") in keep]


class Jsdoc2mdPlugin(BasePlugin[Jsdoc2mdConfig]):

    def __init__(self):
        super().__init__()
        self._cache = {}
        self._config_dir = ""
        self._jsdoc2md = None

    def _source_root(self):
        root = self.config["source_root"]
        if root and not os.path.isabs(root):
            root = os.path.join(self._config_dir, root)
        return os.path.normpath(root or self._config_dir or os.getcwd())

    def _resolve_files(self, patterns):
        root = self._source_root()
        out = []
        for item in re.split(r"[\s,]+", patterns.strip()):
            if item:
                out.append(item if os.path.isabs(item) else os.path.join(root, item))
        return out

    def _render_options(self, opts):
        options = {name: self.config[name] for name in _RENDER_OPTIONS}
        for key, raw in opts.items():
            name = key.replace("-", "_")
            if name not in _RENDER_OPTIONS:
                continue
            if name in _INT_OPTIONS:
                try:
                    options[name] = int(raw)
                except ValueError:
                    log.warning("jsdoc2md: bad %s value %r, ignoring", key, raw)
            elif name in _BOOL_OPTIONS:
                options[name] = _as_bool(raw)
            else:
                options[name] = raw
        return options

    def _template_data(self, files):
        key = tuple(files)
        if key in self._cache:
            return self._cache[key]
        options = {
            "files": files,
            "configure": self.config["configure"] or None,
            "cache": self.config["cache"],
            "sort_by": self.config["sort_by"] or "none",
        }
        data = self._jsdoc2md.get_template_data_sync(options)
        self._cache[key] = data
        return data

    def _handle_directive(self, match, page):
        opts = {}
        for m in _OPTION_RE.finditer(match.group("body")):
            opts[m.group(1)] = m.group(2).strip()
        patterns = opts.get("files", "")
        if not patterns:
            log.error("jsdoc2md: %s: missing :files: for jsdoc:autodoc", page.file.src_path)
            return "<!-- jsdoc2md: missing :files: for jsdoc:autodoc -->\n"
        files = self._resolve_files(patterns)
        try:
            data = self._template_data(files)
            if "name" in opts:
                data = _filter_by_name(data, opts["name"])
                if not data:
                    return f"<!-- jsdoc2md: identifier '{opts['name']}' not found -->\n"
            return self._jsdoc2md.render_sync({"data": data, **self._render_options(opts)})
        except (JsdocError, TemplateError, ImportError, OSError) as exc:
            log.error("jsdoc2md: %s: %s", page.file.src_path, exc)
            return f"<!-- jsdoc2md: {exc} -->\n"

    # ── MkDocs lifecycle hooks ──

    def on_config(self, config, **kwargs):
        self._config_dir = os.path.dirname(config.get("config_file_path", "") or "") or os.getcwd()
        self._cache.clear()
        command = self.config["jsdoc_command"] or None
        self._jsdoc2md = create(explainer=JsdocExplainer(command=command))
        log.info("jsdoc2md: sources resolved against %s", self._source_root())
        return config

    def on_page_markdown(self, markdown, *, page, config, files, **kwargs):
        return _DIRECTIVE_RE.sub(lambda m: self._handle_directive(m, page), markdown)
