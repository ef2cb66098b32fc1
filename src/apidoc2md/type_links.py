"""Resolve API type annotations (``{string|Buffer}``) into reference links."""

from __future__ import annotations

from typing import Mapping

from apidoc2md.classifiers import TYPE_ANNOTATION_RE
from apidoc2md.config import APIDOC2MD_MDN_BASE_URL
from apidoc2md.schemas.tree import Node, NodeType

# JavaScript primitives, linked to the MDN data structures page.
JS_PRIMITIVES: dict[str, str] = {
    "any": "data_types",
    "bigint": "bigint_type",
    "boolean": "boolean_type",
    "integer": "number_type",
    "null": "null_type",
    "number": "number_type",
    "string": "string_type",
    "symbol": "symbol_type",
    "undefined": "undefined_type",
}

# JavaScript global objects, linked to their MDN reference page.
JS_GLOBALS: frozenset[str] = frozenset(
    {
        "AggregateError",
        "Array",
        "ArrayBuffer",
        "AsyncFunction",
        "AsyncGenerator",
        "AsyncGeneratorFunction",
        "AsyncIterator",
        "BigInt",
        "BigInt64Array",
        "BigUint64Array",
        "Boolean",
        "DataView",
        "Date",
        "Error",
        "EvalError",
        "Float32Array",
        "Float64Array",
        "Function",
        "Generator",
        "GeneratorFunction",
        "Int16Array",
        "Int32Array",
        "Int8Array",
        "Iterator",
        "JSON",
        "Map",
        "Math",
        "Number",
        "Object",
        "Promise",
        "Proxy",
        "RangeError",
        "ReferenceError",
        "Reflect",
        "RegExp",
        "Set",
        "SharedArrayBuffer",
        "String",
        "Symbol",
        "SyntaxError",
        "TypeError",
        "TypedArray",
        "URIError",
        "Uint16Array",
        "Uint32Array",
        "Uint8Array",
        "Uint8ClampedArray",
        "WeakMap",
        "WeakRef",
        "WeakSet",
    }
)

# Types documented in sibling API docs; relative to the output directory.
API_TYPES: dict[str, str] = {
    "AbortController": "globals.html#class-abortcontroller",
    "AbortSignal": "globals.html#class-abortsignal",
    "Blob": "buffer.html#class-blob",
    "Buffer": "buffer.html#class-buffer",
    "ChildProcess": "child_process.html#class-childprocess",
    "EventEmitter": "events.html#class-eventemitter",
    "EventTarget": "events.html#class-eventtarget",
    "FileHandle": "fs.html#class-filehandle",
    "URL": "url.html#the-whatwg-url-api",
    "URLSearchParams": "url.html#class-urlsearchparams",
    "Worker": "worker_threads.html#class-worker",
    "fs.Dirent": "fs.html#class-fsdirent",
    "fs.Stats": "fs.html#class-fsstats",
    "http.Agent": "http.html#class-httpagent",
    "http.ClientRequest": "http.html#class-httpclientrequest",
    "http.IncomingMessage": "http.html#class-httpincomingmessage",
    "http.Server": "http.html#class-httpserver",
    "http.ServerResponse": "http.html#class-httpserverresponse",
    "net.Server": "net.html#class-netserver",
    "net.Socket": "net.html#class-netsocket",
    "stream.Duplex": "stream.html#class-streamduplex",
    "stream.Readable": "stream.html#class-streamreadable",
    "stream.Writable": "stream.html#class-streamwritable",
}


def resolve_type_url(
    type_name: str, extra_types: Mapping[str, str] | None = None
) -> str | None:
    """Return the canonical reference URL of a type, or None if unknown.

    Array suffixes are ignored, so ``string[]`` resolves like ``string``.
    """
    name = type_name.strip()
    while name.endswith("[]"):
        name = name[:-2]

    if extra_types and name in extra_types:
        return extra_types[name]
    if name.lower() in JS_PRIMITIVES:
        return f"{APIDOC2MD_MDN_BASE_URL}/Data_structures#{JS_PRIMITIVES[name.lower()]}"
    if name in JS_GLOBALS:
        return f"{APIDOC2MD_MDN_BASE_URL}/Reference/Global_Objects/{name}"
    return API_TYPES.get(name)


def type_annotation_to_nodes(
    annotation: str, extra_types: Mapping[str, str] | None = None
) -> list[Node]:
    """Convert ``{string|Buffer}`` into ``<string>`` | ``<Buffer>`` link nodes.

    Unknown types are kept as inline code without a link.
    """
    pieces = [piece.strip() for piece in annotation.strip("{}").split("|")]
    nodes: list[Node] = []
    for piece in (piece for piece in pieces if piece):
        if nodes:
            nodes.append(Node(NodeType.TEXT, value=" | "))
        code = Node(NodeType.INLINE_CODE, value=f"<{piece}>")
        url = resolve_type_url(piece, extra_types)
        nodes.append(Node(NodeType.LINK, url=url, children=[code]) if url else code)
    return nodes


def split_typed_text(
    text: str, extra_types: Mapping[str, str] | None = None
) -> list[Node]:
    """Split a text span around its type annotations."""
    nodes: list[Node] = []
    position = 0
    for match in TYPE_ANNOTATION_RE.finditer(text):
        if match.start() > position:
            nodes.append(Node(NodeType.TEXT, value=text[position : match.start()]))
        nodes.extend(type_annotation_to_nodes(match.group(0), extra_types))
        position = match.end()
    if position < len(text):
        nodes.append(Node(NodeType.TEXT, value=text[position:]))
    return nodes
