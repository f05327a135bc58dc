"""
Unit tests for source loading, the formatter, the query parser and the interactive session.
Run with: pytest tests/test_session.py -v
"""

import pytest
import sys
from pathlib import Path
from omegaconf import OmegaConf

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from textquery.data import LineLoader, SourceUnavailableError
from textquery.formatting import TextFormatter
from textquery.lineindex import build_index, evaluate, word_query, conjoin
from textquery.session import VariableStore, InteractiveSession
from textquery.utils import BooleanQueryParser


def make_config(**overrides):
    """Build a config shaped like conf/config.yaml."""
    config = OmegaConf.create({
        'logging': {'level': 'WARNING', 'format': '%(message)s'},
        'source': {'encoding': 'utf-8'},
        'indexing': {'show_progress': False},
        'evaluation': {'memoize': False},
        'variables': {'mode': 'text'},
        'formatter': {'max_width': 80, 'overwrite': False},
    })
    for key, value in overrides.items():
        OmegaConf.update(config, key, value)
    return config


class ScriptedIO:
    """Feeds scripted answers to a session and records what it prints."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []
        self.printed = []

    def input(self, prompt=""):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    def print(self, *args):
        self.printed.append(" ".join(str(a) for a in args))

    @property
    def output(self):
        return "\n".join(self.printed)


@pytest.fixture
def story(tmp_path):
    """A small text file."""
    path = tmp_path / "story.txt"
    path.write_text("the fox jumps\nthe dog sleeps\nthe fox sleeps\n", encoding="utf-8")
    return path


class TestLineLoader:
    """Test LineLoader class."""

    def test_load_lines(self, story):
        """Test lines are read without terminators."""
        lines = LineLoader(make_config()).load_lines(story)
        assert lines == ["the fox jumps", "the dog sleeps", "the fox sleeps"]

    def test_load_index(self, story):
        """Test loading a file and building its index."""
        store, index = LineLoader(make_config()).load_index(story)
        assert store.line_count == 3
        assert index.get_positions("fox").positions == (0, 2)

    def test_missing_file(self, tmp_path):
        """Test a missing file is reported as unavailable."""
        with pytest.raises(SourceUnavailableError) as exc_info:
            LineLoader(make_config()).load_index(tmp_path / "nope.txt")
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert exc_info.value.path == tmp_path / "nope.txt"

    def test_directory(self, tmp_path):
        """Test a directory is not a source."""
        with pytest.raises(SourceUnavailableError):
            LineLoader(make_config()).load_lines(tmp_path)

    def test_bad_encoding(self, tmp_path):
        """Test undecodable bytes are reported as unavailable."""
        path = tmp_path / "bad.txt"
        path.write_bytes(b"ok\n\xff\xfe\xfa\n")
        with pytest.raises(SourceUnavailableError):
            LineLoader(make_config()).load_lines(path)

    def test_empty_file(self, tmp_path):
        """Test an empty file gives an empty store."""
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")
        store, index = LineLoader(make_config()).load_index(path)
        assert store.line_count == 0
        assert index.get_vocabulary_size() == 0


class TestTextFormatter:
    """Test TextFormatter class."""

    def test_reflow_wraps(self):
        """Test words are wrapped at the width."""
        lines = TextFormatter.reflow(["aaa bbb ccc ddd"], 7)
        assert lines == ["aaa bbb", "ccc ddd"]

    def test_reflow_collapses_spaces(self):
        """Test runs of whitespace become single spaces."""
        assert TextFormatter.reflow(["  a    b  "], 10) == ["a b"]

    def test_reflow_keeps_paragraphs(self):
        """Test each input line is wrapped separately and blank lines stay."""
        lines = TextFormatter.reflow(["one two", "", "three"], 20)
        assert lines == ["one two", "", "three"]

    def test_reflow_long_word(self):
        """Test an over-long word gets its own line and no blank line."""
        lines = TextFormatter.reflow(["a verylongword b"], 4)
        assert lines == ["a", "verylongword", "b"]

    def test_reflow_width_never_exceeded(self):
        """Test no output line is longer than the width for fitting words."""
        text = ["lorem ipsum dolor sit amet consectetur adipiscing elit sed do"]
        for width in range(11, 30):
            assert all(len(line) <= width for line in TextFormatter.reflow(text, width))

    def test_reflow_invalid_width(self):
        """Test non-positive widths are rejected."""
        with pytest.raises(ValueError):
            TextFormatter.reflow(["a"], 0)

    def test_format_file(self, story, tmp_path):
        """Test formatting a file to disk."""
        out = tmp_path / "out.txt"
        TextFormatter(make_config()).format_file(story, out, width=8)
        assert out.read_text(encoding="utf-8") == (
            "the fox\njumps\nthe dog\nsleeps\nthe fox\nsleeps\n"
        )

    def test_format_file_default_width(self, story, tmp_path):
        """Test the configured width is used by default."""
        out = tmp_path / "out.txt"
        TextFormatter(make_config(**{'formatter.max_width': 100})).format_file(story, out)
        assert out.read_text(encoding="utf-8") == story.read_text(encoding="utf-8")

    def test_format_missing_file(self, tmp_path):
        """Test formatting a missing file."""
        with pytest.raises(SourceUnavailableError):
            TextFormatter(make_config()).format_file(tmp_path / "nope.txt", tmp_path / "out.txt")
        assert not (tmp_path / "out.txt").exists()


class TestBooleanQueryParser:
    """Test BooleanQueryParser class."""

    def setup_method(self):
        """Setup test data before each test."""
        self.parser = BooleanQueryParser()

    def test_single_word(self):
        """Test a plain word."""
        assert self.parser.parse("fox").rep() == "fox"

    def test_precedence(self):
        """Test ~ binds tighter than &, which binds tighter than |."""
        assert self.parser.parse("a | b & ~c").rep() == "(a | (b & ~(c)))"

    def test_left_associative(self):
        """Test chains group to the left."""
        assert self.parser.parse("a & b & c").rep() == "((a & b) & c)"

    def test_parentheses(self):
        """Test explicit grouping."""
        assert self.parser.parse("(a | b) & c").rep() == "((a | b) & c)"

    def test_reparse_representation(self):
        """Test a representation parses back to the same representation."""
        text = "~((fox & (dog | ~(cat))))"
        assert self.parser.parse(text).rep() == text

    def test_punctuation_stays_in_words(self):
        """Test other punctuation is part of the word."""
        assert self.parser.parse("fox. & Dog,").rep() == "(fox. & Dog,)"

    @pytest.mark.parametrize("query", ["", "   ", "a &", "(a | b", "a b", "& a", ")"])
    def test_malformed(self, query):
        """Test malformed queries raise ValueError."""
        with pytest.raises(ValueError):
            self.parser.parse(query)

    def test_custom_resolve(self):
        """Test words go through the resolve callable."""
        parser = BooleanQueryParser(resolve=lambda w: word_query(w.upper()))
        assert parser.parse("a & b").rep() == "(A & B)"


class TestVariableStore:
    """Test VariableStore class."""

    def setup_method(self):
        """Setup test data before each test."""
        self.store, self.index = build_index(["a b", "a", "b", "(a & b)"])

    def test_unbound_name_is_word(self):
        """Test an unknown name resolves to a word query."""
        variables = VariableStore()
        assert variables.resolve("a").rep() == "a"
        assert "a" not in variables

    def test_text_mode_word(self):
        """Test a bound word behaves like the word."""
        variables = VariableStore('text')
        variables.bind("x", word_query("a"))
        result = evaluate(variables.resolve("x"), self.store, self.index)
        assert result.line_numbers() == [0, 1]

    def test_text_mode_compound_becomes_single_word(self):
        """Test a bound compound is recalled as one word of its printed form."""
        variables = VariableStore('text')
        variables.bind("x", conjoin(word_query("a"), word_query("b")))
        recalled = variables.resolve("x")
        assert recalled.rep() == "(a & b)"
        assert recalled.node.term == "(a & b)"
        assert variables.lookup_text("x") == "(a & b)"
        assert evaluate(recalled, self.store, self.index).line_numbers() == []

    def test_query_mode_keeps_expression(self):
        """Test query mode recalls the expression itself."""
        variables = VariableStore('query')
        compound = conjoin(word_query("a"), word_query("b"))
        variables.bind("x", compound)
        assert variables.resolve("x") is compound
        assert evaluate(variables.resolve("x"), self.store, self.index).line_numbers() == [0]

    def test_rebind_and_names(self):
        """Test rebinding replaces and names are listed."""
        variables = VariableStore()
        variables.bind("y", word_query("a"))
        variables.bind("x", word_query("b"))
        variables.bind("y", word_query("c"))
        assert variables.names() == ["x", "y"]
        assert variables.lookup_text("y") == "c"
        assert variables.lookup_text("z") is None
        assert len(variables) == 2

    def test_invalid_mode(self):
        """Test an unknown mode is rejected."""
        with pytest.raises(ValueError):
            VariableStore('pickle')

    def test_stores_are_independent(self):
        """Test bindings do not leak between stores."""
        first, second = VariableStore(), VariableStore()
        first.bind("x", word_query("a"))
        assert "x" not in second


class TestInteractiveSession:
    """Test InteractiveSession with scripted input."""

    def _run(self, answers, config=None):
        io = ScriptedIO(answers)
        session = InteractiveSession(config or make_config(), input_func=io.input, print_func=io.print)
        session.run()
        return io, session

    def test_exit(self):
        """Test choosing exit ends the session."""
        io, _ = self._run(["4"])
        assert "Choose the function you need:" in io.output

    def test_end_of_input(self):
        """Test running out of input ends the session."""
        io, _ = self._run([])
        assert io.printed

    def test_invalid_choice(self):
        """Test an unknown menu choice."""
        io, _ = self._run(["9", "x", "4"])
        assert io.printed.count("Invalid choice!") == 2

    def test_normal_query(self, story):
        """Test a single-word query."""
        io, _ = self._run(["2", str(story), "1", "fox", "5", "4"])
        assert "fox occurs 2 times\n\t(line 1) the fox jumps\n\t(line 3) the fox sleeps\n" in io.printed

    def test_not_query(self, story):
        """Test a NOT query."""
        io, _ = self._run(["2", str(story), "2", "fox", "5", "4"])
        assert "~(fox) occurs 1 times\n\t(line 2) the dog sleeps\n" in io.printed

    def test_or_and_queries(self, story):
        """Test OR and AND queries ask for a second word."""
        io, _ = self._run([
            "2", str(story),
            "3", "fox", "sleeps",
            "4", "fox", "sleeps",
            "5", "4",
        ])
        assert any(p.startswith("(fox | sleeps) occurs 3 times") for p in io.printed)
        assert "(fox & sleeps) occurs 1 times\n\t(line 3) the fox sleeps\n" in io.printed
        assert "Enter another word: " in io.prompts

    def test_quit_query_loop(self, story):
        """Test q leaves the query loop but not the session."""
        io, _ = self._run(["2", str(story), "1", "q", "4"])
        assert io.printed[-1].startswith("Choose the function you need:")

    def test_missing_file(self, tmp_path):
        """Test an unreadable file is reported and the menu continues."""
        io, _ = self._run(["2", str(tmp_path / "nope.txt"), "4"])
        assert "Unable to open file!" in io.printed

    def test_invalid_query_type(self, story):
        """Test an unknown query type."""
        io, _ = self._run(["2", str(story), "7", "5", "4"])
        assert "Invalid choice!" in io.printed

    def test_assign_variable_text_mode(self, story):
        """Test a variable bound to a word is used in queries."""
        io, session = self._run(["3", "x", "dog", "2", str(story), "1", "x", "5", "4"])
        assert "x" in session.variables
        assert "dog occurs 1 times\n\t(line 2) the dog sleeps\n" in io.printed

    def test_assign_compound_text_mode(self, story):
        """Test a bound compound is looked up as one word."""
        io, _ = self._run(["3", "x", "fox & sleeps", "2", str(story), "1", "x", "5", "4"])
        assert "(fox & sleeps) occurs 0 times\n" in io.printed

    def test_assign_compound_query_mode(self, story):
        """Test query mode evaluates the bound expression."""
        config = make_config(**{'variables.mode': 'query'})
        io, _ = self._run(["3", "x", "fox & sleeps", "2", str(story), "2", "x", "5", "4"], config)
        assert "~((fox & sleeps)) occurs 2 times\n\t(line 1) the fox jumps\n\t(line 2) the dog sleeps\n" in io.printed

    def test_assign_uses_existing_variables(self):
        """Test expressions may refer to earlier variables."""
        _, session = self._run(["3", "x", "a & b", "3", "y", "x | c", "4"],
                               make_config(**{'variables.mode': 'query'}))
        assert session.variables.lookup_text("y") == "((a & b) | c)"

    def test_assign_invalid_expression(self):
        """Test a malformed expression is rejected."""
        io, session = self._run(["3", "x", "a &", "4"])
        assert "Invalid query!" in io.printed
        assert "x" not in session.variables

    def test_format_file(self, story, tmp_path):
        """Test the formatting menu entry."""
        out = tmp_path / "out.txt"
        io, _ = self._run(["1", str(story), "8", str(out), "4"])
        assert "File formatting completed!" in io.printed
        assert out.read_text(encoding="utf-8").splitlines()[:2] == ["the fox", "jumps"]

    def test_format_file_asks_before_replacing(self, story, tmp_path):
        """Test an existing destination needs confirmation."""
        existing = tmp_path / "existing.txt"
        existing.write_text("keep\n", encoding="utf-8")
        fresh = tmp_path / "fresh.txt"
        io, _ = self._run(["1", str(story), "80", str(existing), "n", str(fresh), "4"])
        assert existing.read_text(encoding="utf-8") == "keep\n"
        assert fresh.exists()

        io, _ = self._run(["1", str(story), "80", str(existing), "y", "4"])
        assert existing.read_text(encoding="utf-8") == story.read_text(encoding="utf-8")

    def test_format_invalid_width(self, story, tmp_path):
        """Test a bad width is rejected."""
        io, _ = self._run(["1", str(story), "0", "4"])
        assert "Invalid width!" in io.printed

    def test_format_missing_file(self, tmp_path):
        """Test formatting a missing file."""
        io, _ = self._run(["1", str(tmp_path / "nope.txt"), "4"])
        assert "Unable to open file!" in io.printed
