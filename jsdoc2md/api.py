"""
jsdoc2md facade.

Composes extraction (jsdoc), structuring (``parse``) and rendering in strict
sequence. Every operation takes one optional options mapping; see
``options.py`` for the recognised keys. Errors from any stage propagate
unchanged.
"""

from __future__ import annotations

from .jsdoc import JsdocExplainer
from .options import DmdOptions, JsdocOptions, ParseOptions
from .parse import parse as _parse
from .renderer import Renderer
from .stats import UsageStats, tracked

NAMEPATH_KINDS = (
    "module",
    "class",
    "constructor",
    "mixin",
    "member",
    "namespace",
    "constant",
    "function",
    "event",
    "typedef",
    "external",
)


def group_namepaths(data):
    return {
        kind: [identifier.get("longname") for identifier in data if identifier.get("kind") == kind]
        for kind in NAMEPATH_KINDS
    }


class JsdocToMarkdown:
    """Render markdown API docs from jsdoc-annotated source code.

    ``explainer`` needs ``explain``/``explain_sync`` and a ``cache``;
    ``renderer`` needs ``render``/``render_sync`` and a ``cache``;
    ``parser`` is a callable ``(jsdoc_data, options) -> template_data``.
    """

    def __init__(self, explainer=None, parser=None, renderer=None, stats=None):
        self.explainer = explainer if explainer is not None else JsdocExplainer()
        self.parser = parser if parser is not None else _parse
        self.renderer = renderer if renderer is not None else Renderer()
        self.stats = stats

    # ── render ──

    @tracked
    async def render(self, options=None):
        """Return markdown documentation.

        Accepts every ``get_jsdoc_data`` option plus the render options
        (``template``, ``heading-depth``, ``example-lang``, ``plugin``,
        ``helper``, ``partial``, ``name-format``, ``no-gfm``,
        ``separators`` and the index/list format selectors). When ``data``
        is supplied it is rendered as-is and jsdoc is not run.
        """
        options = options or {}
        dmd_options = DmdOptions.from_options(options)
        if options.get("data") is not None:
            return await self.renderer.render(options["data"], dmd_options)
        template_data = await self.get_template_data(options)
        return await self.renderer.render(template_data, dmd_options)

    @tracked
    def render_sync(self, options=None):
        options = options or {}
        dmd_options = DmdOptions.from_options(options)
        if options.get("data") is not None:
            return self.renderer.render_sync(options["data"], dmd_options)
        return self.renderer.render_sync(self.get_template_data_sync(options), dmd_options)

    # ── template data ──

    @tracked
    async def get_template_data(self, options=None):
        """Return template data: the structured jsdoc output."""
        options = options or {}
        jsdoc_data = await self.get_jsdoc_data(options)
        return self.parser(jsdoc_data, ParseOptions.from_options(options))

    @tracked
    def get_template_data_sync(self, options=None):
        options = options or {}
        jsdoc_data = self.get_jsdoc_data_sync(options)
        return self.parser(jsdoc_data, ParseOptions.from_options(options))

    # ── raw jsdoc data ──

    @tracked
    async def get_jsdoc_data(self, options=None):
        """Return raw jsdoc doclets.

        Options: ``files`` (globs), ``source`` (inline code), ``configure``
        (jsdoc config path), ``html`` (experimental .html support) and
        ``cache`` (False disables memoisation). ``files`` or ``source`` is
        required.
        """
        return await self.explainer.explain(JsdocOptions.from_options(options))

    @tracked
    def get_jsdoc_data_sync(self, options=None):
        return self.explainer.explain_sync(JsdocOptions.from_options(options))

    # ── misc ──

    @tracked
    async def clear(self):
        """Clear the jsdoc cache, then the render cache."""
        await self.explainer.cache.clear()
        await self.renderer.cache.clear()

    @tracked
    async def get_namepaths(self, options=None):
        """Return ``{kind: [longname, ...]}`` for every namepath kind."""
        return group_namepaths(await self.get_template_data(options))


def create(explainer=None, parser=None, renderer=None, stats=None):
    if stats is None:
        stats = UsageStats()
    return JsdocToMarkdown(explainer=explainer, parser=parser, renderer=renderer, stats=stats)


_default = None


def default():
    """Return the shared instance behind the module-level functions."""
    global _default
    if _default is None:
        _default = create()
    return _default


async def render(options=None):
    return await default().render(options)


def render_sync(options=None):
    return default().render_sync(options)


async def get_template_data(options=None):
    return await default().get_template_data(options)


def get_template_data_sync(options=None):
    return default().get_template_data_sync(options)


async def get_jsdoc_data(options=None):
    return await default().get_jsdoc_data(options)


def get_jsdoc_data_sync(options=None):
    return default().get_jsdoc_data_sync(options)


async def clear():
    await default().clear()


async def get_namepaths(options=None):
    return await default().get_namepaths(options)
