#!/usr/bin/env python3
"""
micron - Micron markup transducer

Renders NomadNet-style micron (.mu) pages to sanitized HTML, strips them
to plain text, highlights their source or beautifies them.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Modes:
    render      .mu → sanitized HTML fragment (or a full page with --standalone)
    strip       .mu → plain text without formatting codes
    highlight   .mu → syntax-highlighted HTML of the source
    beautify    .mu → decorated .mu (reproducible with --seed)

Usage:
    micron inputdir/ outputdir/ --inputFile page.mu

    The result is written to outputdir/ as <page>.html, <page>.txt or
    <page>.magic.mu depending on the mode.

Examples:
    # Render a fragment
    micron . output/ --inputFile page.mu

    # Standalone preview page in the light theme
    micron . output/ --inputFile page.mu --standalone --theme light

    # Plain text
    micron . output/ --inputFile page.mu --mode strip

    # Reproducible beautify, verbose output
    micron . output/ --inputFile page.mu --mode beautify --seed 7 -vv
"""

import random
import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import Compiler, __version__, LOG, state_connectToLogger
from .lib.beautify import magic_format
from .lib.errors import MicronError
from .lib.lexer import source_highlight
from .lib.snippets import banner
from .lib.stripper import strip
from .lib.theme import themes_listAvailable
from .models import ProgramState, pipeline


DISPLAY_SUBTITLE = "  Micron markup transducer"

MODES = ["render", "strip", "highlight", "beautify"]

OUTPUT_SUFFIXES = {
    "render": ".html",
    "strip": ".txt",
    "highlight": ".html",
    "beautify": ".magic.mu",
}

# Define CLI arguments
parser = ArgumentParser(
    description="micron - render, strip, highlight or beautify micron pages",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input micron (.mu) file (relative to inputdir)"
)

parser.add_argument(
    "--mode", default="render", choices=MODES, help="Transformation to apply to the input"
)

parser.add_argument(
    "--theme", default="default", type=str, help="Theme for rendered and highlighted output"
)

parser.add_argument(
    "--standalone",
    action="store_true",
    default=False,
    help="Wrap rendered HTML in a complete preview page",
)

parser.add_argument(
    "--seed", default=None, type=int, help="Random seed for beautify mode"
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the output file",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Verifies that the input file and theme exist, then creates the output
    directory.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to .mu input file
            - outputFile: Path of the file to write
            - envOK: True if environment is valid

    Exits:
        1 if input file or theme not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG("\n" + banner("micron") + "\n" + DISPLAY_SUBTITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    available = themes_listAvailable()
    if state.theme not in available:
        print(f"Error: Theme not found: {state.theme}", file=sys.stderr)
        print(f"Available themes: {', '.join(available)}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    output_dir = state.outputdir / state.outputSubdir
    output_dir.mkdir(parents=True, exist_ok=True)
    state.outputFile = output_dir / (input_file.stem + OUTPUT_SUFFIXES[state.mode])
    LOG(f"Output file: {state.outputFile}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the micron source file.

    Returns:
        ProgramState with added field:
            - sourceText: Raw micron source

    Exits:
        1 if the file cannot be read
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        state.sourceText = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def source_transform(inputstate: ProgramState) -> ProgramState:
    """
    Apply the selected mode to the source.

    Returns:
        ProgramState with added fields:
            - outputText: Transformed text
            - transformResult: Dict containing:
                - status: bool
                - mode: str
                - directive_count: int (render mode only)

    Exits:
        1 if the transformation fails
    """

    state = inputstate.copy()

    LOG(f"Transforming source ({state.mode})...", level=1)

    result = {"status": True, "mode": state.mode}
    try:
        if state.mode == "render":
            compiler = Compiler(theme_name=state.theme)
            document = compiler.render(state.sourceText)
            state.outputText = (
                compiler.document_build(document.html) if state.standalone else document.html
            )
            result["directive_count"] = len(document.directives)
            result["substitutions"] = document.substitutions
        elif state.mode == "strip":
            state.outputText = strip(state.sourceText) + "\n"
        elif state.mode == "highlight":
            compiler = Compiler(theme_name=state.theme)
            highlighted = source_highlight(state.sourceText, compiler.theme.pygmentsStyle_get())
            state.outputText = (
                compiler.document_build(highlighted) if state.standalone else highlighted
            )
        else:
            state.outputText = magic_format(state.sourceText, random.Random(state.seed)) + "\n"
    except MicronError as e:
        print(f"Transformation error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    state.transformResult = result
    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the transformed text to the output file.

    Exits:
        1 if the file cannot be written
    """

    state = inputstate.copy()

    try:
        state.outputFile.write_text(state.outputText, encoding="utf-8")
    except OSError as e:
        print(f"Error writing output file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Wrote {len(state.outputText)} characters to {state.outputFile}", level=2)
    if state.transformResult is not None:
        state.transformResult["output_file"] = str(state.outputFile)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the transformation.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if transformResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.transformResult:
        print("Error: Transformation failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG(f"\n✓ {state.mode.capitalize()} successful!", level=1)
        LOG(f"  Output: {state.transformResult['output_file']}", level=1)
        if "directive_count" in state.transformResult:
            LOG(f"  Directives: {state.transformResult['directive_count']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="micron - Micron markup transducer",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - transform a micron page.

    Orchestrates the pipeline:
        1. env_check: Validate paths and theme
        2. source_read: Read the .mu file
        3. source_transform: Render, strip, highlight or beautify
        4. output_write: Write the result
        5. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing micron source files
        outputdir: Directory where output will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_read, source_transform, output_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
