"""
End-to-end tests

Tests the full pipeline: micron source → Parser → Compiler → HTML output,
and the CLI stages from input file to output file.
"""

import pytest

from micron import render, strip
from micron.__main__ import env_check, output_write, results_report, source_read, source_transform
from micron.lib.compiler import Compiler
from micron.lib.session import DEFAULT_TEMPLATE
from micron.models import ProgramState, pipeline


PAGE = """>Main Header
Some `!bold`! and `*italic`* text.
# author note
----------
`c`Ff00Red centered`f`a
`[Home`:/page/index.mu]`
`<?news|yes|*>Send me news
"""


class TestRenderPage:
    """A complete page"""

    def test_page_renders(self):
        document = render(PAGE)
        html = document.html
        assert "Main Header</div>" in html
        assert "<strong" in html and "<em" in html
        assert "author note" not in html
        assert "<hr" in html
        assert "text-align: center" in html
        assert 'href=":/page/index.mu"' in html
        assert 'type="checkbox" name="news" value="yes" checked' in html
        assert document.substitutions == len(document.directives) == 6

    def test_page_strips(self):
        assert strip(PAGE) == (
            "Main Header\n"
            "Some bold and italic text.\n"
            "\n"
            "Red centered\n"
            "Home\n"
            "Send me news"
        )

    def test_default_template(self):
        document = render(DEFAULT_TEMPLATE)
        assert document.substitutions == len(document.directives)
        assert "`" not in strip(DEFAULT_TEMPLATE)


class TestCompile:
    """Writing HTML files"""

    def test_fragment(self, tmp_path):
        result = Compiler().compile("`!hi`!", tmp_path / "out" / "page.html")
        assert result["status"] is True
        assert result["directive_count"] == 1
        html = (tmp_path / "out" / "page.html").read_text(encoding="utf-8")
        assert html.startswith("<div")

    def test_standalone(self, tmp_path):
        output = tmp_path / "page.html"
        Compiler(theme_name="light").compile("`!hi`!", output, standalone=True)
        html = output.read_text(encoding="utf-8")
        assert html.startswith("<!DOCTYPE html>")
        assert "background: #ffffff;" in html
        assert "<title>Micron Preview</title>" in html


class TestCliPipeline:
    """CLI stages without argument parsing"""

    @pytest.fixture
    def inputdir(self, tmp_path):
        directory = tmp_path / "in"
        directory.mkdir()
        (directory / "page.mu").write_text(PAGE, encoding="utf-8")
        return directory

    def run(self, inputdir, tmp_path, **options):
        state = ProgramState(
            inputdir=inputdir, outputdir=tmp_path / "out", inputFile="page.mu", verbosity=0, **options
        )
        return pipeline(state, env_check, source_read, source_transform, output_write, results_report)

    def test_render_mode(self, inputdir, tmp_path):
        state = self.run(inputdir, tmp_path)
        assert state.outputFile == tmp_path / "out" / "page.html"
        assert state.transformResult["directive_count"] == 6
        assert "<strong" in state.outputFile.read_text(encoding="utf-8")

    def test_standalone_render(self, inputdir, tmp_path):
        state = self.run(inputdir, tmp_path, standalone=True)
        assert state.outputFile.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_strip_mode(self, inputdir, tmp_path):
        state = self.run(inputdir, tmp_path, mode="strip")
        assert state.outputFile.name == "page.txt"
        assert state.outputFile.read_text(encoding="utf-8") == strip(PAGE) + "\n"

    def test_highlight_mode(self, inputdir, tmp_path):
        state = self.run(inputdir, tmp_path, mode="highlight")
        assert 'class="highlight"' in state.outputFile.read_text(encoding="utf-8")

    def test_beautify_mode_reproducible(self, inputdir, tmp_path):
        first = self.run(inputdir, tmp_path, mode="beautify", seed=4).outputFile.read_text(encoding="utf-8")
        second = self.run(inputdir, tmp_path, mode="beautify", seed=4).outputFile.read_text(encoding="utf-8")
        assert first == second
        assert "End of Page" in first

    def test_missing_input(self, tmp_path):
        state = ProgramState(inputdir=tmp_path, outputdir=tmp_path / "out", inputFile="absent.mu", verbosity=0)
        with pytest.raises(SystemExit):
            env_check(state)

    def test_unknown_theme(self, inputdir, tmp_path):
        state = ProgramState(
            inputdir=inputdir, outputdir=tmp_path / "out", inputFile="page.mu", theme="nope", verbosity=0
        )
        with pytest.raises(SystemExit):
            env_check(state)
