"""
Template helpers.

Functions here are registered on the Jinja environment as both globals and
filters. Helpers that need the identifier set or the render options take
the template context (``pass_context``) and read ``index`` and ``options``
from it.
"""

from __future__ import annotations

import re

import markdown as _markdown
from jinja2 import pass_context

_KIND_TITLES = [
    ("module", "Modules"),
    ("class", "Classes"),
    ("mixin", "Mixins"),
    ("namespace", "Namespaces"),
    ("enum", "Enums"),
    ("member", "Members"),
    ("constant", "Constants"),
    ("function", "Functions"),
    ("event", "Events"),
    ("typedef", "Typedefs"),
    ("external", "External"),
]

_SCOPE_TITLES = {"instance": "_instance_", "static": "_static_", "inner": "_inner_"}

_LINK_RE = re.compile(
    r"(?:\[(?P<pre>[^\]]+)\])?\{@link(?:code|plain)?\s+(?P<target>[^}\s|]+)"
    r"(?:\s*\|\s*|\s+)?(?P<text>[^}]*)\}"
)
_CAPTION_RE = re.compile(r"^\s*<caption>(.*?)</caption>\s*", re.DOTALL)
_LANG_RE = re.compile(r"^\s*@lang\s+(\S+)[ \t]*\n?")


class TemplateIndex:
    """Lookup tables over one render's template data."""

    def __init__(self, data):
        self.data = list(data)
        self.by_longname = {}
        for entry in self.data:
            name = entry.get("longname")
            current = self.by_longname.get(name)
            # modules win over exported identifiers, anything wins over constructors
            if (
                current is None
                or current.get("kind") == "constructor"
                or entry.get("kind") == "module"
            ):
                self.by_longname[name] = entry

    def find(self, longname):
        return self.by_longname.get(longname)

    def exported(self, module):
        for entry in self.data:
            if entry.get("isExported") and entry.get("longname") == module.get("longname"):
                return entry
        return None

    def parent(self, entry):
        memberof = entry.get("memberof")
        if not memberof:
            return None
        if entry.get("kind") == "constructor":
            for e in self.data:
                if e.get("kind") == "class" and e.get("longname") == memberof:
                    return e
        found = self.find(memberof)
        # static and instance members of an exporting module belong to the export
        if found is not None and found.get("kind") == "module" and entry.get("scope") != "inner":
            exported = self.exported(found)
            if exported is not None and exported is not entry:
                return exported
        return found

    def is_toplevel(self, entry):
        if entry.get("isExported") or entry.get("kind") == "constructor":
            return False
        memberof = entry.get("memberof")
        return not memberof or memberof not in self.by_longname

    def children(self, entry):
        longname = entry.get("longname")
        kind = entry.get("kind")
        out = []
        # constructors share the class longname but own nothing
        if kind == "constructor":
            return out
        if kind == "module":
            exported = self.exported(entry)
            if exported is not None:
                out.append(exported)
                return out + [
                    e
                    for e in self.data
                    if e.get("memberof") == longname
                    and e.get("scope") == "inner"
                    and e is not exported
                ]
        for e in self.data:
            if e is entry or e.get("memberof") != longname:
                continue
            if e.get("kind") == "constructor" and kind != "class":
                continue
            if e.get("isExported"):
                continue
            if entry.get("isExported") and e.get("scope") == "inner":
                continue
            out.append(e)
        ctors = [e for e in out if e.get("kind") == "constructor"]
        return ctors + [e for e in out if e.get("kind") != "constructor"]


def _kind(entry):
    if entry.get("isEnum"):
        return "enum"
    return entry.get("kind") or ""


# ── names and links ──


def anchor(entry):
    ident = entry.get("id") or entry.get("longname") or ""
    prefix = ""
    if entry.get("isExported"):
        prefix += "exp_"
    if entry.get("kind") == "constructor":
        prefix += "new_"
    ident = ident.replace(":", "_").replace("~", "..").replace("()", "_new").replace("#", "+")
    return prefix + re.sub(r"\s+", "_", ident)


def _code(text, options):
    if options is not None and options.name_format:
        return f"`{text}`"
    return text


def _escape_html(text):
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def types(type_obj, table=False):
    if not type_obj:
        return ""
    names = type_obj.get("names", []) if isinstance(type_obj, dict) else list(type_obj)
    sep = " \\| " if table else " | "
    return sep.join(f"<code>{_escape_html(n)}</code>" for n in names)


def param_name(param):
    name = param.get("name", "")
    if param.get("variable"):
        name = f"...{name}"
    if param.get("optional"):
        name = f"[{name}]"
    return name


def _param_sig(params):
    return ", ".join(param_name(p) for p in params or [] if "." not in p.get("name", ""))


@pass_context
def link(ctx, longname, text=None):
    index = ctx["index"]
    options = ctx.get("options")
    target = index.find(longname)
    return _link_to(target, longname, text, options)


def _link_to(target, longname, text, options):
    label = text or (target.get("name") if target else None) or longname
    if target is None:
        return _code(label, options)
    return f"[{_code(label, options)}](#{anchor(target)})"


@pass_context
def parent_name(ctx, entry):
    parent = ctx["index"].parent(entry)
    if parent is None:
        memberof = entry.get("memberof") or ""
        return re.split(r"[.#~]|module:", memberof)[-1]
    if parent.get("typicalname"):
        return parent["typicalname"]
    name = parent.get("name") or ""
    if entry.get("scope") == "instance" and parent.get("kind") == "class" and name:
        return name[0].lower() + name[1:]
    return name


@pass_context
def sig_name(ctx, entry):
    options = ctx.get("options")
    kind = _kind(entry)
    name = entry.get("name") or ""

    prefix = ""
    nested = entry.get("memberof") and not entry.get("isExported")
    if nested and kind not in ("constructor", "module"):
        sym = "~" if entry.get("scope") == "inner" else "."
        prefix = f"{parent_name(ctx, entry)}{sym}"

    if kind == "constructor":
        sig = f"new {name}({_param_sig(entry.get('params'))})"
    elif kind == "function":
        sig = f"{prefix}{name}({_param_sig(entry.get('params'))})"
    elif kind == "event":
        sig = f'"{name}"'
    else:
        sig = f"{prefix}{name}"

    out = _code(sig, options)
    if kind == "function" and entry.get("returns"):
        ret = types(entry["returns"][0].get("type"))
        if ret:
            out += f" ⇒ {ret}"
    elif kind in ("member", "constant", "typedef") and entry.get("type"):
        out += f" : {types(entry['type'])}"
    elif kind == "enum":
        out += " : <code>enum</code>"
    if entry.get("isExported"):
        out += " ⏏"
    return out


_KIND_LABELS = {"function": "method", "member": "property"}


@pass_context
def kind_in_context(ctx, entry):
    kind = _kind(entry)
    if kind in ("module", "constructor"):
        return None
    if entry.get("isExported"):
        return f"Exported {kind}"
    parent = ctx["index"].parent(entry)
    if parent is None:
        return f"global {kind}"
    label = _KIND_LABELS.get(kind, kind)
    owner = _link_to(parent, parent["longname"], None, ctx.get("options"))
    if kind == "event":
        return f"event emitted by {owner}"
    scope = entry.get("scope") or "static"
    return f"{scope} {label} of {owner}"


# ── text ──


@pass_context
def inline_links(ctx, text):
    if not text:
        return ""

    def _replace(m):
        target = m.group("target")
        label = m.group("pre") or m.group("text").strip() or target
        if re.match(r"^[a-z]+://", target):
            return f"[{label}]({target})"
        entry = ctx["index"].find(target)
        if entry is None:
            return f"<code>{_escape_html(label)}</code>"
        return f"[{_code(label, ctx.get('options'))}](#{anchor(entry)})"

    return _LINK_RE.sub(_replace, text)


def md_to_html(text):
    if not text:
        return ""
    return _markdown.markdown(text)


def one_line(text):
    if not text:
        return ""
    return " ".join(str(text).split()).replace("|", "\\|")


@pass_context
def hashes(ctx, depth):
    return "#" * max(1, int(ctx["options"].heading_depth) + depth)


@pass_context
def example_block(ctx, example):
    options = ctx["options"]
    text = example or ""
    caption = ""
    m = _CAPTION_RE.match(text)
    if m:
        caption = m.group(1).strip()
        text = text[m.end() :]
    lang = options.example_lang or ""
    m = _LANG_RE.match(text)
    if m:
        lang = m.group(1)
        text = text[m.end() :]
    if lang == "none":
        lang = ""
    text = text.strip("\n")

    header = "**Example**"
    if caption:
        header += f" *({caption})*"
    if lang == "off":
        return f"{header}  \n{text}"
    if options.no_gfm:
        body = "\n".join(f"    {line}" for line in text.split("\n"))
        return f"{header}  \n\n{body}"
    return f"{header}  \n```{lang}\n{text}\n```"


def _returns_lines(entry):
    lines = []
    for ret in entry.get("returns") or []:
        line = "**Returns**: " + (types(ret.get("type")) or "")
        if ret.get("description"):
            line += f" - {ret['description']}"
        lines.append(line.rstrip())
    return lines


@pass_context
def meta_lines(ctx, entry):
    """Return the ``**Label**: value`` lines shown under an identifier."""
    lines = []
    if entry.get("augments"):
        lines.append("**Extends**: " + ", ".join(link(ctx, a) for a in entry["augments"]))
    if entry.get("mixes"):
        lines.append("**Mixes**: " + ", ".join(link(ctx, a) for a in entry["mixes"]))
    if entry.get("implements"):
        lines.append("**Implements**: " + ", ".join(link(ctx, a) for a in entry["implements"]))
    if entry.get("fires"):
        lines.append("**Emits**: " + ", ".join(link(ctx, a) for a in entry["fires"]))
    if entry.get("access") in ("private", "protected"):
        lines.append(f"**Access**: {entry['access']}")
    if entry.get("readonly"):
        lines.append("**Read only**: true")
    if entry.get("chainable"):
        lines.append("**Chainable**")
    if entry.get("since"):
        lines.append(f"**Since**: {entry['since']}")
    if entry.get("version"):
        lines.append(f"**Version**: {entry['version']}")
    if entry.get("deprecated"):
        dep = entry["deprecated"]
        lines.append("**Deprecated**" + (f": {dep}" if isinstance(dep, str) else ""))
    if entry.get("category"):
        lines.append(f"**Category**: {entry['category']}")
    if "defaultvalue" in entry:
        lines.append(f"**Default**: <code>{_escape_html(entry['defaultvalue'])}</code>")
    if entry.get("thisvalue"):
        lines.append(f"**this**: {link(ctx, entry['thisvalue'])}")
    if entry.get("kind") != "class":
        lines += _returns_lines(entry)
    for exc in entry.get("exceptions") or []:
        line = "**Throws**: " + (types(exc.get("type")) or "")
        if exc.get("description"):
            line += f" - {exc['description']}"
        lines.append(line.rstrip())
    for see in entry.get("see") or []:
        lines.append(f"**See**: {inline_links(ctx, see)}")
    for item in entry.get("todoList") or []:
        box = "x" if item.get("done") else " "
        lines.append(f"**Todo**: [{box}] {item.get('task', '')}")
    if entry.get("author"):
        lines.append("**Author**: " + ", ".join(entry["author"]))
    return [inline_links(ctx, line) for line in lines]


# ── indexes ──


@pass_context
def toplevel(ctx):
    index = ctx["index"]
    return [e for e in index.data if index.is_toplevel(e)]


@pass_context
def children(ctx, entry):
    return ctx["index"].children(entry)


@pass_context
def show_main_index(ctx):
    return len(toplevel(ctx)) > 1


@pass_context
def modules(ctx):
    return [e for e in toplevel(ctx) if e.get("kind") == "module"]


@pass_context
def globals_by_kind(ctx):
    """Return ``(title, entries)`` pairs for non-module top-level identifiers."""
    found = [e for e in toplevel(ctx) if e.get("kind") != "module"]
    groups = []
    for kind, title in _KIND_TITLES:
        if kind == "module":
            continue
        group = [e for e in found if _kind(e) == kind]
        if group:
            groups.append((title, group))
    return groups


@pass_context
def index_tree(ctx, entry):
    """Return ``{"level", "text"}`` items forming the member index of ``entry``."""
    index = ctx["index"]
    options = ctx["options"]
    grouped = options.member_index_format == "grouped"
    items = []

    def _walk(node, level):
        kids = index.children(node)
        if not grouped:
            for kid in kids:
                items.append({"level": level, "text": _index_text(ctx, kid)})
                _walk(kid, level + 1)
            return
        ctors = [k for k in kids if k.get("kind") == "constructor"]
        rest = [k for k in kids if k.get("kind") != "constructor"]
        for kid in ctors:
            items.append({"level": level, "text": _index_text(ctx, kid)})
        scopes = []
        for kid in rest:
            if _index_scope(kid) not in scopes:
                scopes.append(_index_scope(kid))
        for scope in scopes:
            members = [k for k in rest if _index_scope(k) == scope]
            sub = level
            if scope is not None and len(scopes) + len(ctors) > 1:
                items.append({"level": level, "text": _SCOPE_TITLES[scope]})
                sub = level + 1
            for kid in members:
                items.append({"level": sub, "text": _index_text(ctx, kid)})
                _walk(kid, sub + 1)

    if not index.children(entry):
        return []
    items.append({"level": 0, "text": _index_text(ctx, entry)})
    _walk(entry, 1)
    return items


def _index_scope(entry):
    scope = entry.get("scope")
    return scope if scope in _SCOPE_TITLES else None


def _index_text(ctx, entry):
    return f"[{sig_name(ctx, entry)}](#{anchor(entry)})"


HELPERS = {
    "anchor": anchor,
    "children": children,
    "example_block": example_block,
    "globals_by_kind": globals_by_kind,
    "hashes": hashes,
    "index_tree": index_tree,
    "inline_links": inline_links,
    "kind_in_context": kind_in_context,
    "link": link,
    "md_to_html": md_to_html,
    "meta_lines": meta_lines,
    "modules": modules,
    "one_line": one_line,
    "param_name": param_name,
    "parent_name": parent_name,
    "show_main_index": show_main_index,
    "sig_name": sig_name,
    "toplevel": toplevel,
    "types": types,
}
