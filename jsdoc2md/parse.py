"""
Turn raw jsdoc doclets into template data.

jsdoc's explain output is noisy: undocumented symbols, package records,
inherited copies of overridden methods, class doclets that double as
constructor docs, and custom tags buried in a ``tags`` list. This module
cleans that up into one dict per documentable identifier, each with a
unique ``id`` the templates use for anchors.
"""

from __future__ import annotations

import copy

from .options import ParseOptions

_KIND_ORDER = [
    "class",
    "constructor",
    "mixin",
    "member",
    "namespace",
    "enum",
    "constant",
    "function",
    "event",
    "typedef",
    "external",
]
_SCOPE_ORDER = ["global", "instance", "static", "inner"]
_CUSTOM_ORDERS = {"kind": _KIND_ORDER, "scope": _SCOPE_ORDER}

_INTERNAL_FIELDS = ("comment", "___id", "___s", "undocumented", "tags")
_META_FIELDS = ("lineno", "filename", "path")


def _is_documented(doclet):
    if doclet.get("undocumented") or doclet.get("ignore"):
        return False
    return doclet.get("kind") != "package"


def _drop_overridden(doclets):
    own = {d.get("longname") for d in doclets if not d.get("inherited")}
    return [d for d in doclets if not (d.get("inherited") and d.get("longname") in own)]


def _promote_tags(doclet):
    todo_list = [{"done": False, "task": t} for t in doclet.get("todo", [])]
    for tag in doclet.get("tags", []):
        title = tag.get("title")
        value = tag.get("value", tag.get("text", ""))
        if title == "typicalname":
            doclet["typicalname"] = value
        elif title == "category":
            doclet["category"] = value
        elif title == "chainable":
            doclet["chainable"] = True
        elif title == "done":
            todo_list.append({"done": True, "task": value})
        elif title == "todo":
            todo_list.append({"done": False, "task": value})
    if todo_list:
        doclet["todoList"] = todo_list
    doclet.pop("todo", None)
    if "this" in doclet:
        doclet["thisvalue"] = doclet.pop("this")


def _reduce_meta(doclet):
    meta = doclet.get("meta")
    if isinstance(meta, dict):
        doclet["meta"] = {k: meta[k] for k in _META_FIELDS if k in meta}


def _strip_internal(doclet):
    for name in _INTERNAL_FIELDS:
        doclet.pop(name, None)


def _split_class(doclet):
    """Return ``(class_entry, constructor_entry_or_None)`` for a class doclet."""
    ctor = None
    has_ctor_docs = doclet.get("description") or doclet.get("params") or doclet.get("exceptions")
    if has_ctor_docs and not doclet.get("hideconstructor"):
        ctor = {
            "id": f"{doclet['longname']}()",
            "longname": doclet["longname"],
            "name": doclet.get("name"),
            "kind": "constructor",
            "memberof": doclet["longname"],
        }
        for key in ("description", "params", "exceptions", "meta", "access"):
            if key in doclet:
                ctor[key] = copy.deepcopy(doclet[key])
    if "classdesc" in doclet:
        doclet["description"] = doclet.pop("classdesc")
    elif ctor is not None:
        doclet.pop("description", None)
    doclet.pop("params", None)
    doclet.pop("exceptions", None)
    doclet.pop("hideconstructor", None)
    return doclet, ctor


def _mark_exported(entries):
    modules = {e["longname"] for e in entries if e.get("kind") == "module"}
    for e in entries:
        if e.get("kind") in ("module", "constructor"):
            continue
        if e.get("longname") in modules:
            e["isExported"] = True
            e["id"] = f"{e['longname']}--{e.get('name')}"


def _assign_ids(entries):
    seen = {}
    for e in entries:
        base = e.get("id") or e.get("longname")
        n = seen.get(base, 0)
        seen[base] = n + 1
        e["id"] = base if n == 0 else f"{base}+{n}"


def _sort_key(entry, fields):
    key = []
    for name in fields:
        value = entry.get(name)
        order = _CUSTOM_ORDERS.get(name)
        if value is None:
            key.append((2, 0, ""))
        elif order is not None:
            rank = order.index(value) if value in order else len(order)
            key.append((0, rank, str(value)))
        elif isinstance(value, (int, float)):
            key.append((0, value, ""))
        else:
            key.append((1, 0, str(value)))
    return tuple(key)


def parse(jsdoc_data, options=None):
    """Structure raw jsdoc doclets into a list of template data entries."""
    if not isinstance(options, ParseOptions):
        options = ParseOptions.from_options(options)

    doclets = [copy.deepcopy(d) for d in jsdoc_data if _is_documented(d)]
    doclets = _drop_overridden(doclets)

    entries = []
    for doclet in doclets:
        _promote_tags(doclet)
        _reduce_meta(doclet)
        _strip_internal(doclet)
        if doclet.get("kind") == "class":
            cls, ctor = _split_class(doclet)
            entries.append(cls)
            if ctor is not None:
                entries.append(ctor)
        else:
            entries.append(doclet)

    _mark_exported(entries)
    _assign_ids(entries)
    for i, e in enumerate(entries):
        e["order"] = i

    if options.sort_by:
        entries.sort(key=lambda e: _sort_key(e, options.sort_by))
    return entries
