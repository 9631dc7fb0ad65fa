"""
Matcher vocabularies — fixed name tables shared by the rules.
"""

from __future__ import annotations

# Textual loop openers used by the text-based containment check
LOOP_TOKENS: tuple[str, ...] = (
    "for (", "for(", "while (", "while(", "do {",
    ".forEach(", ".map(", ".filter(", ".reduce(",
)

# Array methods whose callback runs once per element
ITERATION_METHODS: frozenset[str] = frozenset({"forEach", "map", "filter", "reduce"})

STRING_NAME_HINTS: tuple[str, ...] = (
    "html", "text", "content", "message", "output", "result",
    "buffer", "str", "string", "markup", "code", "sql",
)

STRING_METHODS: frozenset[str] = frozenset({
    "toString", "valueOf", "charAt", "charCodeAt", "concat", "indexOf",
    "lastIndexOf", "slice", "substring", "substr", "toLowerCase",
    "toUpperCase", "trim", "replace", "split",
})

DOM_QUERY_METHODS: frozenset[str] = frozenset({
    "querySelector", "querySelectorAll", "getElementById",
    "getElementsByClassName", "getElementsByTagName", "getElementsByName",
    "closest", "matches",
})

DOM_MUTATION_METHODS: frozenset[str] = frozenset({
    "appendChild", "removeChild", "insertBefore", "replaceChild",
    "createElement", "createTextNode", "createDocumentFragment",
    "insertAdjacentHTML", "insertAdjacentElement", "insertAdjacentText",
})

# Mutation methods that are DOM operations even when called bare
ALWAYS_GLOBAL_DOM_METHODS: frozenset[str] = frozenset({
    "createElement", "createTextNode", "createDocumentFragment",
})

LAYOUT_METHODS: frozenset[str] = frozenset({
    "getComputedStyle", "getBoundingClientRect", "getClientRects",
})

LAYOUT_PROPERTIES: frozenset[str] = frozenset({
    "offsetWidth", "offsetHeight", "offsetTop", "offsetLeft",
    "clientWidth", "clientHeight", "scrollWidth", "scrollHeight",
})

DOM_OPERATION_COMPLEXITY: dict[str, int] = {
    "DOM Query": 3,
    "DOM Manipulation": 2,
    "Style/Layout": 4,
}

# Array methods that scan, copy or reorder the whole array on every call
EXPENSIVE_ARRAY_METHODS: frozenset[str] = frozenset({
    "find", "findIndex", "indexOf", "includes", "filter", "map", "reduce",
    "some", "every", "sort", "reverse", "join", "slice", "splice",
})

EXPENSIVE_STATIC_CALLS: dict[str, frozenset[str]] = {
    "Object": frozenset({"keys", "values", "entries", "assign"}),
    "JSON": frozenset({"stringify", "parse"}),
}

# Member calls whose result rarely changes between iterations
CACHEABLE_CALLS: frozenset[str] = frozenset({
    "length", "size", "count", "width", "height", "getAttribute",
})

EXPENSIVE_OPERATION_COMPLEXITY: dict[str, int] = {
    "find": 2,
    "indexOf": 2,
    "includes": 2,
    "filter": 2,
    "sort": 3,
    "Object.keys": 2,
    "JSON.stringify": 2,
}

CHAINABLE_ARRAY_METHODS: frozenset[str] = frozenset({
    "map", "filter", "reduce", "sort", "reverse", "slice", "concat",
})

DEPTH_GUARD_NAMES: frozenset[str] = frozenset({
    "depth", "level", "counter", "count", "limit", "maxDepth", "maxLevel", "max",
})

EVENT_CLEANUP_PAIRS: dict[str, str] = {
    "addEventListener": "removeEventListener",
    "on": "off",
    "bind": "unbind",
    "subscribe": "unsubscribe",
    "watch": "unwatch",
}

TIMER_CLEANUP_PAIRS: dict[str, str] = {
    "setTimeout": "clearTimeout",
    "setInterval": "clearInterval",
    "requestAnimationFrame": "cancelAnimationFrame",
    "requestIdleCallback": "cancelIdleCallback",
}

# Text hints that a subscription sits in a function or component body
COMPONENT_HINTS: tuple[str, ...] = (
    "function", "const ", "let ", "var ",
    "useEffect", "componentDidMount", "componentWillUnmount",
)

CLOSURE_HINTS: tuple[str, ...] = ("function(", "() =>", "function ")

# DOM lookups whose result is worth flagging when captured by a closure
RETAINED_DOM_QUERY_METHODS: frozenset[str] = frozenset({
    "querySelector", "querySelectorAll", "getElementById",
    "getElementsByClassName", "getElementsByTagName",
})

SYNC_OPERATIONS: frozenset[str] = frozenset({
    "readFileSync", "writeFileSync", "appendFileSync", "copyFileSync",
    "unlinkSync", "mkdirSync", "rmdirSync", "readdirSync", "statSync",
    "lstatSync", "existsSync", "accessSync", "chmodSync", "chownSync",
    "renameSync", "truncateSync", "execSync", "spawnSync", "pbkdf2Sync",
    "scryptSync", "randomFillSync", "randomBytesSync", "readSync", "writeSync",
})

# Module receivers whose sync members block the event loop
SYNC_MODULE_MEMBERS: dict[str, frozenset[str]] = {
    "fs": frozenset({
        "readFileSync", "writeFileSync", "appendFileSync", "copyFileSync",
        "unlinkSync", "mkdirSync", "rmdirSync", "readdirSync", "statSync",
        "lstatSync", "existsSync", "accessSync", "chmodSync", "chownSync",
        "renameSync", "truncateSync", "readSync", "writeSync",
    }),
    "child_process": frozenset({"execSync", "spawnSync"}),
    "crypto": frozenset({"pbkdf2Sync", "scryptSync", "randomFillSync", "randomBytesSync"}),
}

# Rough blocking time in milliseconds per sync operation
SYNC_BLOCK_ESTIMATES_MS: dict[str, int] = {
    "readFileSync": 50,
    "writeFileSync": 100,
    "execSync": 500,
    "spawnSync": 1000,
    "pbkdf2Sync": 200,
    "scryptSync": 300,
    "readdirSync": 30,
}
DEFAULT_SYNC_BLOCK_MS = 50

SYNC_ALTERNATIVES: dict[str, str] = {
    "readFileSync": "fs.promises.readFile()",
    "writeFileSync": "fs.promises.writeFile()",
    "appendFileSync": "fs.promises.appendFile()",
    "readdirSync": "fs.promises.readdir()",
    "statSync": "fs.promises.stat()",
    "existsSync": "fs.promises.access()",
    "execSync": "child_process.exec() with a callback or promisify",
    "spawnSync": "child_process.spawn()",
    "pbkdf2Sync": "crypto.pbkdf2()",
    "scryptSync": "crypto.scrypt()",
}

INDEX_KEY_NAMES: frozenset[str] = frozenset({"index", "i", "idx"})

MAX_FUNCTION_LINES = 30
