"""
Tests for the built-in rules — each matcher fires on its anti-pattern and
stays quiet on the corrected code.
"""

from quality_highlighter.core.rules.function_too_long import FunctionTooLongMatcher
from quality_highlighter.core.rules.infinite_recursion import (
    MISSING_BASE_CASE,
    UNMODIFIED_PARAMETERS,
    analyze_recursion,
)
from quality_highlighter.core.rules.nested_loops import max_loop_depth
from quality_highlighter.core.walker import find_all
from quality_highlighter.models.rule_models import Language, PatternCategory, Rule, Severity
from quality_highlighter.models.syntax import FunctionDeclaration


# ── nested-loops ──


def test_nested_loops_depth_two(detect, nested_loop_code):
    matches = detect(nested_loop_code, "nested-loops")
    assert len(matches) == 1
    assert matches[0].detail.complexity == 2
    assert "O(n^2)" in matches[0].detail.impact
    assert matches[0].line == 1


def test_nested_loops_triple(detect):
    code = """
for (const a of xs) {
  for (const b of ys) {
    let k = 0;
    while (k < 10) { k++; }
  }
}
"""
    matches = detect(code, "nested-loops")
    assert [m.detail.complexity for m in matches] == [3, 2]


def test_single_loop_not_flagged(detect):
    assert detect("for (const x of xs) { total += x; }", "nested-loops") == []


def test_max_loop_depth_counts_deepest_branch(parser):
    code = "do { for (;;) { break; } while (a) { while (b) { c(); } } } while (d);"
    tree = parser.parse(code, Language.JAVASCRIPT)
    assert max_loop_depth(tree.body[0]) == 3


# ── string-concatenation-in-loops ──


def test_string_concatenation_in_for_loop(detect):
    code = """
function render(items) {
  let html = "";
  for (let i = 0; i < items.length; i++) {
    html += "<li>" + items[i] + "</li>";
  }
  return html;
}
"""
    matches = detect(code, "string-concatenation-in-loops")
    assert len(matches) == 3
    assert matches[0].node.type == "AssignmentExpression"
    assert "join" in matches[0].detail.suggestion


def test_string_concatenation_in_foreach_callback(detect):
    code = "items.forEach(item => {\n  message += item.label;\n});"
    matches = detect(code, "string-concatenation-in-loops")
    assert len(matches) == 1


def test_numeric_accumulation_not_flagged(detect):
    code = "for (let i = 0; i < n; i++) { total += prices[i]; }"
    assert detect(code, "string-concatenation-in-loops") == []


def test_concatenation_outside_loop_not_flagged(detect):
    assert detect('let s = "";\ns += "a";', "string-concatenation-in-loops") == []


# ── dom-queries-in-loops ──


def test_dom_query_in_loop(detect):
    code = """
function highlight(ids) {
  for (let i = 0; i < ids.length; i++) {
    const el = document.getElementById(ids[i]);
    el.classList.add("active");
  }
}
"""
    matches = detect(code, "dom-queries-in-loops")
    assert len(matches) == 1
    assert matches[0].detail.metadata["operation"] == "DOM Query"
    assert matches[0].detail.complexity == 3


def test_dom_manipulation_needs_dom_receiver(detect):
    code = """
for (const row of rows) {
  list.appendChild(row);
  appendChild(row);
  createElement("li");
}
"""
    matches = detect(code, "dom-queries-in-loops")
    assert len(matches) == 2
    assert {m.detail.metadata["operation"] for m in matches} == {"DOM Manipulation"}


def test_layout_read_in_loop(detect):
    code = "while (queue.length) {\n  const h = panel.offsetHeight;\n  queue.pop();\n}"
    matches = detect(code, "dom-queries-in-loops")
    assert len(matches) == 1
    assert matches[0].detail.metadata["operation"] == "Style/Layout"


def test_helper_defined_between_loops_not_flagged(detect):
    code = """
for (const a of xs) {
  process(a);
}
function lookup(id) {
  return document.getElementById(id);
}
for (const b of ys) {
  lookup(b);
}
"""
    assert detect(code, "dom-queries-in-loops") == []


def test_dom_query_outside_loop_not_flagged(detect):
    assert detect('const root = document.querySelector("#root");', "dom-queries-in-loops") == []


# ── inefficient-object-access ──


def test_deep_property_access_in_loop(detect):
    code = """
function discount(order, n) {
  let sum = 0;
  for (let i = 0; i < n; i++) {
    sum += order.customer.profile.discount;
  }
  return sum;
}
"""
    matches = detect(code, "inefficient-object-access")
    paths = [m.detail.metadata["path"] for m in matches]
    assert "order.customer.profile.discount" in paths
    deep = matches[paths.index("order.customer.profile.discount")]
    assert deep.detail.impact.startswith("Deep property access")


def test_repeated_method_call_in_loop(detect):
    code = """
for (const item of items) {
  cache.lookup(item);
  cache.lookup(item.parent);
}
"""
    matches = detect(code, "inefficient-object-access")
    method_calls = [m for m in matches if m.node.type == "CallExpression"]
    assert len(method_calls) == 2
    assert method_calls[0].detail.metadata["path"] == "cache.lookup"


def test_property_access_outside_loop_not_flagged(detect):
    code = "const name = user.profile.name;\nconst age = user.profile.age;"
    assert detect(code, "inefficient-object-access") == []


# ── multiple-array-iterations ──


def test_chained_array_methods(detect):
    code = "const names = users.filter(u => u.active).map(u => u.name).sort();"
    matches = detect(code, "multiple-array-iterations")
    # the outer chain and its map().filter() prefix are both reported
    assert len(matches) == 2
    assert matches[0].detail.metadata == {"chain_length": 3, "array": "users"}
    assert "O(3n)" in matches[0].detail.impact


def test_single_array_method_not_flagged(detect):
    assert detect("const ids = users.map(u => u.id);", "multiple-array-iterations") == []


def test_chain_root_falls_back_to_array(detect):
    matches = detect("getUsers().filter(isActive).map(toName);", "multiple-array-iterations")
    assert matches[0].detail.metadata["array"] == "array"


# ── infinite-recursion-risks ──


def test_recursion_with_base_case_not_flagged(detect):
    code = """
function factorial(n) {
  if (n <= 1) return 1;
  return n * factorial(n - 1);
}
"""
    assert detect(code, "infinite-recursion-risks") == []


def test_recursion_with_unmodified_parameters(detect):
    code = """
function walk(node) {
  if (!node) return null;
  return walk(node);
}
"""
    matches = detect(code, "infinite-recursion-risks")
    assert len(matches) == 1
    assert matches[0].detail.metadata["risk"] == UNMODIFIED_PARAMETERS


def test_recursion_without_base_case_or_guard(detect):
    code = "function spin(x) {\n  return spin(x + 1);\n}"
    matches = detect(code, "infinite-recursion-risks")
    assert len(matches) == 1
    assert matches[0].detail.metadata["risk"] == MISSING_BASE_CASE
    assert "'spin'" in matches[0].detail.impact


def test_depth_guard_suppresses_missing_base_case(detect):
    code = "function descend(x, depth) {\n  return descend(x + 1, depth + 1);\n}"
    assert detect(code, "infinite-recursion-risks") == []


def test_member_property_is_not_a_depth_guard(detect):
    code = "function climb(node) {\n  return climb(node.parent, node.depth);\n}"
    assert len(detect(code, "infinite-recursion-risks")) == 1


def test_arrow_function_named_by_binding(detect):
    matches = detect("const again = (n) => again(n);", "infinite-recursion-risks")
    assert len(matches) == 1
    assert "'again'" in matches[0].detail.impact


def test_analyze_recursion_non_recursive(parser):
    tree = parser.parse("function add(a, b) { return a + b; }", Language.JAVASCRIPT)
    function = find_all(tree, lambda n: isinstance(n, FunctionDeclaration))[0]
    analysis = analyze_recursion(function)
    assert analysis.name == "add"
    assert analysis.recursive is False
    assert analysis.at_risk is False


# ── memory-leaks ──


def test_event_listener_without_cleanup(detect):
    code = 'function mount(button) {\n  button.addEventListener("click", onClick);\n}'
    matches = detect(code, "memory-leaks")
    assert len(matches) == 1
    assert matches[0].detail.metadata["leak_type"] == "Event Listener"


def test_event_listener_with_cleanup(detect):
    code = """
function mount(button) {
  button.addEventListener("click", onClick);
  return () => button.removeEventListener("click", onClick);
}
"""
    assert detect(code, "memory-leaks") == []


def test_discarded_timer_handle(detect):
    matches = detect("setInterval(poll, 1000);", "memory-leaks")
    assert len(matches) == 1
    assert matches[0].detail.metadata["leak_type"] == "Timer"


def test_stored_timer_without_clear(detect):
    assert len(detect("const id = setInterval(poll, 1000);", "memory-leaks")) == 1


def test_stored_timer_with_clear(detect):
    code = "const id = setInterval(poll, 1000);\nfunction stop() { clearInterval(id); }"
    assert detect(code, "memory-leaks") == []


def test_dom_reference_in_closure(detect):
    code = """
function setup() {
  const panel = document.querySelector("#panel");
  return () => panel.remove();
}
"""
    matches = detect(code, "memory-leaks")
    assert len(matches) == 1
    assert matches[0].detail.metadata["leak_type"] == "DOM Reference"


def test_top_level_dom_reference_not_flagged(detect):
    assert detect('const panel = document.querySelector("#panel");', "memory-leaks") == []


# ── expensive-operations-in-loops ──


def test_array_search_in_loop(detect):
    code = """
function attach(users, posts) {
  const results = [];
  for (let i = 0; i < users.length; i++) {
    const post = posts.find(p => p.userId === users[i].id);
    results.push({ user: users[i], post });
  }
  return results;
}
"""
    matches = detect(code, "expensive-operations-in-loops")
    assert len(matches) == 1
    assert matches[0].detail.metadata == {"operation": "Array", "method": "find"}
    assert matches[0].detail.complexity == 2
    assert matches[0].severity == Severity.CRITICAL


def test_object_and_json_helpers_in_loop(detect):
    code = """
while (queue.length) {
  const keys = Object.keys(config);
  send(JSON.stringify(config), keys);
}
"""
    methods = [m.detail.metadata["method"] for m in detect(code, "expensive-operations-in-loops")]
    assert methods == ["Object.keys", "JSON.stringify"]


def test_cacheable_call_in_foreach_callback(detect):
    code = "nodes.forEach(node => { render(node.getAttribute('data-id')); });"
    matches = detect(code, "expensive-operations-in-loops")
    assert len(matches) == 1
    assert matches[0].detail.metadata["operation"] == "Function"


def test_loop_header_and_hoisted_calls_not_flagged(detect):
    code = """
const sorted = items.slice().sort(byName);
for (const item of sorted.filter(isVisible)) {
  draw(item);
}
"""
    assert detect(code, "expensive-operations-in-loops") == []


def test_dom_calls_left_to_dom_rule(detect):
    code = "for (const id of ids) { document.querySelector('#' + id).focus(); }"
    assert detect(code, "expensive-operations-in-loops") == []
    assert len(detect(code, "dom-queries-in-loops")) == 1


# ── blocking-sync-operations ──


def test_fs_sync_call(detect):
    matches = detect('const data = fs.readFileSync("a.txt", "utf8");', "blocking-sync-operations")
    assert len(matches) == 1
    metadata = matches[0].detail.metadata
    assert metadata == {"operation": "readFileSync", "estimated_block_ms": 50}
    assert "fs.promises.readFile()" in matches[0].detail.suggestion


def test_bare_exec_sync(detect):
    matches = detect('const out = execSync("ls");', "blocking-sync-operations")
    assert matches[0].detail.complexity == 10


def test_async_and_unknown_receivers_not_flagged(detect):
    code = 'fs.readFile("a.txt", cb);\nstore.readFileSync("a.txt");'
    assert detect(code, "blocking-sync-operations") == []


# ── synchronous-xhr ──


def test_synchronous_xhr(detect):
    code = 'xhr.open("GET", "/api", false);\nxhr.open("GET", "/api", true);\nxhr.open("GET", "/api");'
    matches = detect(code, "synchronous-xhr")
    assert len(matches) == 1
    assert matches[0].line == 1


# ── repeated-regex-compilation ──


def test_regex_literal_in_loop(detect):
    code = "for (const line of lines) {\n  if (/error/i.test(line)) count++;\n}"
    matches = detect(code, "repeated-regex-compilation")
    assert len(matches) == 1
    assert matches[0].severity == Severity.WARNING


def test_new_regexp_in_loop(detect):
    code = "while (patterns.length) {\n  const re = new RegExp(patterns.pop());\n}"
    assert len(detect(code, "repeated-regex-compilation")) == 1


def test_hoisted_regex_not_flagged(detect):
    code = "const re = /error/i;\nfor (const line of lines) { re.test(line); }"
    assert detect(code, "repeated-regex-compilation") == []


# ── function-too-long ──


def _function_with_lines(count):
    body = "\n".join(f"  step{i}();" for i in range(count - 2))
    return f"function longTask() {{\n{body}\n}}"


def test_long_function_flagged(detect):
    matches = detect(_function_with_lines(35), "function-too-long")
    assert len(matches) == 1
    assert matches[0].detail.metadata["lines"] == 35
    assert matches[0].category == PatternCategory.MAINTAINABILITY


def test_function_at_limit_not_flagged(detect):
    assert detect(_function_with_lines(30), "function-too-long") == []


def test_custom_line_limit(engine, detect):
    engine.register(Rule(
        id="function-too-long",
        name="Function Too Long",
        category=PatternCategory.MAINTAINABILITY,
        severity=Severity.WARNING,
        languages=frozenset({Language.JAVASCRIPT}),
        matcher=FunctionTooLongMatcher(max_lines=5),
    ))
    assert len(detect(_function_with_lines(8), "function-too-long")) == 1


# ── index-as-key ──


def test_index_as_key_in_jsx(detect, react_list_code):
    matches = detect(
        react_list_code, "index-as-key",
        language=Language.JAVASCRIPT_REACT, file_path="List.jsx",
    )
    assert len(matches) == 1
    assert matches[0].severity == Severity.WARNING


def test_stable_key_not_flagged(detect, react_list_code):
    code = react_list_code.replace("key={index}", "key={item.id}")
    matches = detect(code, "index-as-key", language=Language.JAVASCRIPT_REACT, file_path="List.jsx")
    assert matches == []


def test_index_as_key_only_for_react_languages(detect, react_list_code):
    assert detect(react_list_code, "index-as-key", language=Language.JAVASCRIPT) == []


def test_index_as_key_in_tsx(detect):
    code = "const rows = (items: string[]) => items.map((s, i) => <Row key={i} text={s} />);"
    matches = detect(code, "index-as-key", language=Language.TYPESCRIPT_REACT, file_path="Rows.tsx")
    assert len(matches) == 1


# ── eval-usage ──


def test_eval_call(detect):
    matches = detect("const value = eval(input);", "eval-usage")
    assert len(matches) == 1
    assert matches[0].category == PatternCategory.SECURITY
    assert matches[0].severity == Severity.CRITICAL


def test_eval_method_not_flagged(detect):
    assert detect("sandbox.eval(input);", "eval-usage") == []
