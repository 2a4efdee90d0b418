"""
Markdown renderer for template data.

Takes the structured identifier list and renders it through Jinja
templates: the default partials from ``partials.py``, overridden by
plugin packages and then by user partial files, with helpers from
``helpers.py`` extended the same way. Rendered output is memoised.
"""

from __future__ import annotations

import asyncio
import importlib
import importlib.util
import inspect
import logging
import os
import re

from jinja2 import ChoiceLoader, DictLoader, Environment

from . import __version__
from .cache import Cache, default_cache_dir
from .helpers import HELPERS, TemplateIndex
from .options import DmdOptions
from .partials import DEFAULT_PARTIALS

log = logging.getLogger(__name__)

_BLANK_RUN_RE = re.compile(r"\n{3,}")
_FENCE_RE = re.compile(r"^```.*?^```[ \t]*$", re.MULTILINE | re.DOTALL)


def _read_text(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _partial_name(path):
    return os.path.basename(path).split(".")[0]


def _load_partial_files(paths):
    return {_partial_name(p): _read_text(p) for p in paths}


def _public_callables(module):
    out = {}
    for name, obj in vars(module).items():
        if name.startswith("_") or not callable(obj) or inspect.isclass(obj):
            continue
        if getattr(obj, "__module__", None) != module.__name__:
            continue
        out[name] = obj
    return out


def load_helper_file(path):
    name = "jsdoc2md_helper_" + re.sub(r"\W", "_", os.path.splitext(os.path.basename(path))[0])
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load helper file {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return _public_callables(module)


def load_plugin(name):
    """Import a plugin module and return its ``(partials, helpers)`` mappings."""
    module = importlib.import_module(name)
    partials = getattr(module, "partials", None) or {}
    if isinstance(partials, (str, os.PathLike)):
        directory = os.fspath(partials)
        partials = _load_partial_files(
            os.path.join(directory, fn) for fn in sorted(os.listdir(directory))
        )
    helpers = getattr(module, "helpers", None) or {}
    return dict(partials), dict(helpers)


def build_environment(options):
    plugin_partials = {}
    helpers = dict(HELPERS)
    for name in options.plugin:
        partials, plugin_helpers = load_plugin(name)
        plugin_partials.update(partials)
        helpers.update(plugin_helpers)
    for path in options.helper:
        helpers.update(load_helper_file(path))

    env = Environment(
        loader=ChoiceLoader(
            [
                DictLoader(_load_partial_files(options.partial)),
                DictLoader(plugin_partials),
                DictLoader(DEFAULT_PARTIALS),
            ]
        ),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.globals.update(helpers)
    env.filters.update(helpers)
    return env


def _tidy(text):
    """Collapse runs of blank lines outside fenced code blocks."""
    parts = []
    pos = 0
    for m in _FENCE_RE.finditer(text):
        parts.append(_BLANK_RUN_RE.sub("\n\n", text[pos : m.start()]))
        parts.append(m.group(0))
        pos = m.end()
    parts.append(_BLANK_RUN_RE.sub("\n\n", text[pos:]))
    text = "".join(parts).strip("\n")
    return text + "\n" if text.strip() else ""


def render_template_data(data, options=None):
    if not isinstance(options, DmdOptions):
        options = DmdOptions.from_options(options)
    env = build_environment(options)
    template = env.from_string(options.template)
    text = template.render(data=data, index=TemplateIndex(data), options=options)
    return _tidy(text)


class Renderer:
    def __init__(self, cache=None):
        self.cache = cache if cache is not None else Cache(default_cache_dir("dmd"))

    def _cache_key(self, data, options):
        files = [(p, _read_text(p)) for p in (*options.helper, *options.partial)]
        return Cache.key(data, options.to_dict(), files, __version__)

    def render_sync(self, data, options):
        key = self._cache_key(data, options)
        cached = self.cache.read(key)
        if cached is not None:
            return cached
        text = render_template_data(data, options)
        self.cache.write(key, text)
        return text

    async def render(self, data, options):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.render_sync, data, options)
