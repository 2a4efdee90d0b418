"""
Default partial templates.

Each entry is a Jinja template that can be replaced by name: a plugin's
``partials`` mapping or a ``--partial`` file whose stem matches the key.
Included partials see ``entry`` and ``depth`` from the including scope.
"""

MAIN = """\
{% include "main-index" %}
{% include "all-docs" %}
"""

MAIN_INDEX = """\
{% if show_main_index() %}
{% include "module-index" %}
{% include "global-index" %}
{% endif %}
"""

MODULE_INDEX = """\
{% set fmt = options.module_index_format %}
{% set groups = [("Modules", modules())] if modules() else [] %}
{% include "index-groups" %}
"""

GLOBAL_INDEX = """\
{% set fmt = options.global_index_format %}
{% set groups = globals_by_kind() %}
{% include "index-groups" %}
"""

INDEX_GROUPS = """\
{% if fmt != "none" %}
{% for title, entries in groups %}
{{ hashes(0) }} {{ title }}

{% if fmt == "dl" and not options.no_gfm %}
<dl>
{% for e in entries %}
<dt><a href="#{{ anchor(e) }}">{{ sig_name(e) }}</a></dt>
{% if e.description %}
<dd>{{ md_to_html(inline_links(e.description)) }}</dd>
{% endif %}
{% endfor %}
</dl>
{% elif fmt == "table" and not options.no_gfm %}
| {{ title }} | Description |
| --- | --- |
{% for e in entries %}
| [{{ sig_name(e) }}](#{{ anchor(e) }}) | {{ one_line(inline_links(e.description)) }} |
{% endfor %}
{% else %}
{% for e in entries %}
* [{{ sig_name(e) }}](#{{ anchor(e) }}){% if e.description %} - {{ one_line(inline_links(e.description)) }}{% endif %}

{% endfor %}
{% endif %}

{% endfor %}
{% endif %}
"""

ALL_DOCS = """\
{% for entry in toplevel() %}
{% with depth = 0 %}
{% include "docs" %}
{% endwith %}
{% endfor %}
"""

DOCS = """\
<a name="{{ anchor(entry) }}"></a>

{{ hashes(depth) }} {{ sig_name(entry) }}
{% include "body" %}
{% include "member-index" %}
{% for child in children(entry) %}
{% with entry = child, depth = depth + 1 %}
{% include "docs" %}
{% endwith %}
{% endfor %}
{% if options.separators and depth == 0 %}

* * *

{% endif %}

"""

BODY = """\
{% if entry.description %}
{{ inline_links(entry.description) }}

{% endif %}
{% set kind = kind_in_context(entry) %}
{% if kind %}
**Kind**: {{ kind }}{{ "  " }}
{% endif %}
{% for line in meta_lines(entry) %}
{{ line }}{{ "  " }}
{% endfor %}
{% include "params" %}
{% include "properties" %}
{% include "examples" %}
"""

PARAMS = """\
{% set rows = entry.params or [] %}
{% if rows %}
{% set title = "Params" %}
{% set fmt = options.param_list_format %}
{% include "param-rows" %}
{% endif %}
"""

PROPERTIES = """\
{% set rows = entry.properties or [] %}
{% if rows %}
{% set title = "Properties" %}
{% set fmt = options.property_list_format %}
{% include "param-rows" %}
{% endif %}
"""

PARAM_ROWS = """\
{% set defaults = rows | selectattr("defaultvalue", "defined") | list %}

{% if fmt == "list" or options.no_gfm %}
**{{ title }}**

{% for p in rows %}
- {{ param_name(p) }}{% if p.type %} {{ types(p.type) }}{% endif %}{% if p.defaultvalue is defined %} <code> = {{ p.defaultvalue }}</code>{% endif %}{% if p.description %} - {{ one_line(inline_links(p.description)) }}{% endif %}

{% endfor %}
{% else %}
| {{ "Param" if title == "Params" else "Name" }} | Type |{% if defaults %} Default |{% endif %} Description |
| --- | --- |{% if defaults %} --- |{% endif %} --- |
{% for p in rows %}
| {{ param_name(p) }} | {{ types(p.type, true) }} |{% if defaults %} {% if p.defaultvalue is defined %}<code>{{ p.defaultvalue }}</code>{% endif %} |{% endif %} {{ one_line(inline_links(p.description)) }} |
{% endfor %}
{% endif %}

"""

EXAMPLES = """\
{% for example in entry.examples or [] %}

{{ example_block(example) }}
{% endfor %}
"""

MEMBER_INDEX = """\
{% set tree = index_tree(entry) %}
{% if tree %}

{% for item in tree %}
{{ "    " * item.level }}* {{ item.text }}
{% endfor %}

{% endif %}
"""

DEFAULT_PARTIALS = {
    "main": MAIN,
    "main-index": MAIN_INDEX,
    "module-index": MODULE_INDEX,
    "global-index": GLOBAL_INDEX,
    "index-groups": INDEX_GROUPS,
    "all-docs": ALL_DOCS,
    "docs": DOCS,
    "body": BODY,
    "params": PARAMS,
    "properties": PROPERTIES,
    "param-rows": PARAM_ROWS,
    "examples": EXAMPLES,
    "member-index": MEMBER_INDEX,
}
