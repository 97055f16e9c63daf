"""
JSDoc parser for package sources.

Turns the ``/** ... */`` comments of a JavaScript source file into the
structured JSON written to docs/json, and derives the type dictionary,
table of contents and overview snippets from the parsed files.

Recognised tags:
- @class, @constructor, @alias, @private, @hidden
- @param {type} name - description   ([name] / {type=} optional,
  {...type} variadic, {?type} nullable)
- @return / @returns {type} description
- @throws {type} description
- @example (free text until the next tag)
- @resource [Title]{@link url}
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Tuple

from docbundler.config import defaults
from docbundler.models import ParseError

logger = logging.getLogger(__name__)

# Regular expressions - JSDoc patterns
DOC_OPEN = "/**"
DOC_CLOSE = "*/"
STAR_LINE_RE = re.compile(r"^\s*\*\s?(.*)$")
TAG_RE = re.compile(r"^@(?P<tag>[A-Za-z]+)\b\s*(?P<rest>.*)$")
RESOURCE_RE = re.compile(r"^\[(?P<title>[^\]]+)\]\{@link\s+(?P<link>[^}\s]+)\s*\}")

# Regular expressions - JavaScript declarations
FUNCTION_RE = re.compile(r"^function\s+(?P<name>[A-Za-z_$][\w$]*)\s*\(")
PROTOTYPE_RE = re.compile(
    r"^(?P<owner>[A-Za-z_$][\w$]*)\.prototype\.(?P<name>[A-Za-z_$][\w$]*)\s*="
)
STATIC_RE = re.compile(r"^(?P<owner>[A-Za-z_$][\w$]*)\.(?P<name>[A-Za-z_$][\w$]*)\s*=")

_SKIP_TAGS = {"private", "hidden"}
_CLASS_TAGS = {"class", "constructor"}


# ========================================
# Doc block extraction
# ========================================

def _line_number(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def extract_doc_blocks(text: str) -> List[Tuple[str, str, int]]:
    """Return ``(block body, following code line, code line number)`` triples.

    Raises:
        ParseError: If a doc block is never closed.
    """
    blocks = []
    pos = 0
    while True:
        start = text.find(DOC_OPEN, pos)
        if start == -1:
            break
        end = text.find(DOC_CLOSE, start + len(DOC_OPEN))
        if end == -1:
            raise ParseError(
                f"Unterminated doc comment starting on line {_line_number(text, start)}"
            )
        body = text[start + len(DOC_OPEN):end]
        pos = end + len(DOC_CLOSE)

        code, code_line = "", _line_number(text, pos)
        offset = pos
        for line in text[pos:].splitlines(keepends=True):
            stripped = line.strip()
            if stripped and not stripped.startswith("//"):
                code = stripped
                code_line = _line_number(text, offset)
                break
            offset += len(line)
        blocks.append((body, code, code_line))
    return blocks


def normalize_doc_block(block: str) -> List[str]:
    """Strip the leading ``*`` gutter, keeping indentation after it."""
    lines = []
    for raw in block.splitlines():
        m = STAR_LINE_RE.match(raw)
        lines.append(m.group(1).rstrip() if m else raw.strip())

    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return lines


def split_tags(lines: List[str]) -> Tuple[str, List[Tuple[str, str]]]:
    """Split a normalized block into its description and ``(tag, text)`` pairs."""
    description: List[str] = []
    tags: List[Tuple[str, List[str]]] = []

    for line in lines:
        m = TAG_RE.match(line.strip())
        if m:
            tags.append((m.group("tag"), [m.group("rest")]))
        elif tags:
            tags[-1][1].append(line)
        else:
            description.append(line)

    joined = []
    for tag, parts in tags:
        if tag == "example":
            text = "\n".join(parts).strip("\n")
        else:
            text = " ".join(p.strip() for p in parts if p.strip())
        joined.append((tag, text))
    return "\n".join(description).strip(), joined


# ========================================
# Tag parsing
# ========================================

def _read_type(text: str) -> Tuple[Optional[str], str]:
    """Split a leading ``{type}`` expression off ``text``."""
    text = text.strip()
    if not text.startswith("{"):
        return None, text

    depth = 0
    for i, ch in enumerate(text):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[1:i].strip(), text[i + 1:].strip()
    raise ParseError(f"Unbalanced type expression: {text}")


def parse_type(expr: Optional[str]) -> Dict[str, Any]:
    """Break a type expression into its types and modifiers."""
    info = {"types": [], "optional": False, "nullable": False, "variable": False}
    if not expr:
        return info

    expr = expr.strip()
    if expr.endswith("="):
        info["optional"] = True
        expr = expr[:-1]
    if expr.startswith("..."):
        info["variable"] = True
        expr = expr[3:]
    if expr.startswith("?"):
        info["nullable"] = True
        expr = expr[1:]
    if expr.startswith("(") and expr.endswith(")"):
        expr = expr[1:-1]

    info["types"] = [t.strip() for t in expr.split("|") if t.strip()]
    return info


def _strip_dash(text: str) -> str:
    text = text.strip()
    if text.startswith("-"):
        text = text[1:].strip()
    return text


def parse_param(text: str) -> Dict[str, Any]:
    type_expr, rest = _read_type(text)
    parts = rest.split(None, 1)
    if not parts:
        raise ParseError(f"@param is missing a name: @param {text}")

    name = parts[0]
    info = parse_type(type_expr)
    if name.startswith("[") and name.endswith("]"):
        info["optional"] = True
        name = name[1:-1].split("=", 1)[0]

    return {
        "name": name,
        "description": _strip_dash(parts[1]) if len(parts) > 1 else "",
        "types": info["types"],
        "optional": info["optional"],
        "nullable": info["nullable"],
        "variable": info["variable"],
    }


def parse_return(text: str) -> Dict[str, Any]:
    type_expr, rest = _read_type(text)
    return {"types": parse_type(type_expr)["types"], "description": _strip_dash(rest)}


def parse_resource(text: str) -> Dict[str, str]:
    m = RESOURCE_RE.match(text.strip())
    if m:
        return {"title": m.group("title"), "link": m.group("link")}
    link = text.strip()
    return {"title": link, "link": link}


# ========================================
# File parsing
# ========================================

def doc_id_for(file_path: str) -> Tuple[str, Optional[str]]:
    """Derive ``(id, parent)`` from a package source path.

    packages/bigtable/src/index.js -> ("bigtable", None)
    packages/bigtable/src/table.js -> ("bigtable/table", "bigtable")
    """
    path = PurePosixPath(str(file_path).replace("\\", "/"))
    stem = path.stem
    dirs = list(path.parts[:-1])
    if "src" in dirs:
        src_index = len(dirs) - 1 - dirs[::-1].index("src")
        if src_index > 0:
            package = dirs[src_index - 1]
            if stem == "index":
                return package, None
            return f"{package}/{stem}", package
    return stem, None


def _title_from_id(doc_id: str) -> str:
    last = doc_id.split("/")[-1]
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_]", last) if part)


def _method_from_block(
    description: str,
    tags: List[Tuple[str, str]],
    code: str,
    source: str,
) -> Optional[Dict[str, Any]]:
    tag_names = {t for t, _ in tags}
    alias = next((text for t, text in tags if t == "alias"), None)
    # module:foo aliases name the module, not the member
    if alias and alias.startswith("module:"):
        alias = None

    if tag_names & _CLASS_TAGS:
        m = FUNCTION_RE.match(code)
        class_name = next(
            (text.split()[0] for t, text in tags if t in _CLASS_TAGS and text), None
        )
        name = alias or class_name or (m.group("name") if m else None)
        kind = "constructor"
    else:
        m = PROTOTYPE_RE.match(code)
        if m:
            name, kind = m.group("name"), "instance"
        else:
            m = STATIC_RE.match(code) or FUNCTION_RE.match(code)
            name, kind = (m.group("name"), "static") if m else (None, None)
        name = alias or name

    if not name:
        return None

    method: Dict[str, Any] = {
        "id": name,
        "name": name,
        "type": kind,
        "description": description,
        "source": source,
        "resources": [],
        "examples": [],
        "params": [],
        "returns": [],
        "exceptions": [],
    }
    for tag, text in tags:
        if tag == "param":
            method["params"].append(parse_param(text))
        elif tag in ("return", "returns"):
            method["returns"].append(parse_return(text))
        elif tag == "throws":
            type_expr, rest = _read_type(text)
            method["exceptions"].append(
                {"type": type_expr or "", "description": _strip_dash(rest)}
            )
        elif tag == "example":
            method["examples"].append({"code": text})
        elif tag == "resource":
            method["resources"].append(parse_resource(text))
    return method


def parse_file(file_path: str, contents: str) -> Dict[str, Any]:
    """Parse one source file into its documentation JSON.

    Raises:
        ParseError: If a doc block is malformed.
    """
    doc_id, parent = doc_id_for(file_path)
    doc: Dict[str, Any] = {
        "id": doc_id,
        "name": _title_from_id(doc_id),
        "type": "class",
        "overview": create_overview(parent or doc_id, False),
        "description": "",
        "source": str(file_path),
        "parent": parent,
        "methods": [],
    }

    for body, code, line in extract_doc_blocks(contents):
        description, tags = split_tags(normalize_doc_block(body))
        if any(tag in _SKIP_TAGS for tag, _ in tags):
            continue

        source = f"{file_path}#L{line}"
        method = _method_from_block(description, tags, code, source)
        if method is None:
            continue

        if method["type"] == "constructor":
            doc["name"] = method["name"]
            doc["description"] = description
            doc["source"] = source
        doc["methods"].append(method)

    logger.debug("Parsed %s: %d documented members", file_path, len(doc["methods"]))
    return doc


# ========================================
# Aggregates
# ========================================

def create_types_dictionary(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """One ``{id, name, contents}`` entry per parsed document."""
    return [
        {"id": doc["id"], "name": doc.get("name", doc["id"]), "contents": doc["path"]}
        for doc in docs
    ]


def create_toc(types: List[Dict[str, Any]], collapse: bool = False) -> Dict[str, Any]:
    """Build the table of contents from a type dictionary.

    Top-level types (ids without ``/``) become services, their children
    land in ``nav``. Orphaned children are listed as services of their own,
    or grouped under a service named after their first path segment when
    ``collapse`` is set.
    """
    services: List[Dict[str, Any]] = []
    by_id: Dict[str, Dict[str, Any]] = {}

    for entry in types:
        if "/" not in entry["id"]:
            service = {"title": entry["name"], "type": entry["id"], "nav": []}
            services.append(service)
            by_id[entry["id"]] = service

    for entry in types:
        if "/" not in entry["id"]:
            continue
        root = entry["id"].split("/", 1)[0]
        item = {"title": entry["name"], "type": entry["id"]}

        if root in by_id:
            by_id[root]["nav"].append(item)
        elif collapse:
            service = {"title": _title_from_id(root), "type": root, "nav": [item]}
            services.append(service)
            by_id[root] = service
        else:
            services.append(dict(item, nav=[]))

    return {"services": services}


def _camel(name: str) -> str:
    parts = [p for p in re.split(r"[-_/]", name) if p]
    if not parts:
        return name
    return parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])


def create_overview(
    service_name: str,
    is_bundle: bool,
    umbrella: str = defaults.UMBRELLA_PACKAGE,
    scope: str = defaults.PACKAGE_SCOPE,
) -> str:
    """Markdown usage snippet shown at the top of a service's docs."""
    var = _camel(service_name)
    config = (
        "{\n"
        "  projectId: 'grape-spaceship-123',\n"
        "  keyFilename: '/path/to/keyfile.json'\n"
        "}"
    )
    if is_bundle:
        snippet = (
            f"var gcloud = require('{umbrella}')({config});\n\n"
            f"var {var} = gcloud.{var}();"
        )
    else:
        snippet = f"var {var} = require('{scope}{service_name}')({config});"
    return f"```js\n{snippet}\n```"
