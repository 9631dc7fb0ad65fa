"""
Test fixtures shared across all Quality Highlighter tests.
"""

import pytest

from quality_highlighter.core.analyzer import Analyzer
from quality_highlighter.core.matcher import MatchContext
from quality_highlighter.core.parser import SourceParser
from quality_highlighter.core.pattern_engine import PatternEngine
from quality_highlighter.models.rule_models import Language


@pytest.fixture(scope="session")
def parser():
    return SourceParser()


@pytest.fixture
def engine():
    """Fresh engine with every built-in rule registered."""
    return PatternEngine.with_default_rules()


@pytest.fixture
def analyzer(engine, parser):
    return Analyzer(engine=engine, parser=parser)


@pytest.fixture
def detect(parser, engine):
    """Parse a snippet and run the engine over it, optionally keeping one rule's matches."""

    def _detect(code, rule_id=None, language=Language.JAVASCRIPT, file_path="test.js"):
        tree = parser.parse(code, language)
        context = MatchContext(file_path=file_path, language=language, source=code)
        matches = engine.detect(tree, context)
        if rule_id is not None:
            matches = [m for m in matches if m.rule_id == rule_id]
        return matches

    return _detect


@pytest.fixture
def nested_loop_code():
    """The canonical O(n^2) example: numeric accumulation in a double loop."""
    return "for (let i=0;i<n;i++){ for(let j=0;j<m;j++){ x+=1; } }"


@pytest.fixture
def sample_js_code():
    """JavaScript with one instance of most anti-patterns."""
    return '''
const fs = require("fs");

function renderList(items) {
  let html = "";
  for (let i = 0; i < items.length; i++) {
    html += "<li>" + items[i] + "</li>";
  }
  return html;
}

function highlight(ids) {
  for (const id of ids) {
    const el = document.getElementById(id);
    el.classList.add("active");
  }
}

function loadConfig() {
  return JSON.parse(fs.readFileSync("config.json", "utf8"));
}

function run(code) {
  return eval(code);
}

setInterval(poll, 1000);
'''


@pytest.fixture
def clean_js_code():
    """JavaScript with no anti-patterns."""
    return '''
function add(a, b) {
  return a + b;
}

function greet(name) {
  return `Hello, ${name}`;
}

const factorial = (n) => (n <= 1 ? 1 : n * factorial(n - 1));
'''


@pytest.fixture
def react_list_code():
    """JSX list keyed by the array index."""
    return '''
function List({ items }) {
  return (
    <ul>
      {items.map((item, index) => <li key={index}>{item.name}</li>)}
    </ul>
  );
}
'''
