#!/usr/bin/env python3
"""
markstyle - Lightweight markdown to styled text

Parses a markdown file into a styled-text buffer and writes it out as an
HTML fragment, a JSON list of styled runs, or plain text.

The command line follows the ChRIS "plugin" pattern: positional input
and output directories plus options.

Usage:
    markstyle inputdir/ outputdir/ --inputFile notes.md

Examples:
    # HTML fragment (default)
    markstyle . output/ --inputFile README.md

    # JSON runs with a theme and no bare-URL detection
    markstyle . output/ --inputFile README.md --outputFormat json \\
        --theme github --themesDir themes/ --noAutolink

    # Verbose output
    markstyle . output/ --inputFile README.md -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import MarkdownParser, Compiler, CompileError, Theme, ThemeError, __version__, LOG, state_connectToLogger
from .lib.theme import themes_listAvailable
from .models import ProgramState, pipeline


OUTPUT_EXTENSIONS = {"html": ".html", "json": ".json", "text": ".txt"}

# Define CLI arguments
parser = ArgumentParser(
    description="markstyle - Lightweight markdown to styled text",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input markdown file (relative to inputdir)"
)

parser.add_argument(
    "--outputFormat",
    default="html",
    choices=sorted(OUTPUT_EXTENSIONS),
    help="Format of the compiled document",
)

parser.add_argument(
    "--theme",
    default=None,
    type=str,
    help="Theme name (a directory with theme.yaml under --themesDir)",
)

parser.add_argument(
    "--themesDir",
    default="themes",
    type=str,
    help="Directory containing themes",
)

parser.add_argument(
    "--noAutolink",
    action="store_true",
    default=False,
    help="Disable detection of bare URLs",
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

    Returns:
        ProgramState with inputSourceFile, outputFilePath and envOK set

    Exits:
        1 if the input file does not exist
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.outputFilePath = state.outputdir / (
        Path(state.inputFile).stem + OUTPUT_EXTENSIONS.get(state.outputFormat, ".out")
    )
    LOG(f"Output file: {state.outputFilePath}", level=2)

    state.envOK = True
    return state


def parser_build(state: ProgramState) -> MarkdownParser:
    """
    Create the MarkdownParser for this run (theme and CLI flags applied).

    Exits:
        1 if the theme cannot be loaded
    """
    markdown_parser = MarkdownParser()
    if state.theme:
        try:
            Theme(state.theme, state.themesDir).parser_configure(markdown_parser)
        except ThemeError as e:
            print(f"Theme error: {e}", file=sys.stderr)
            available = themes_listAvailable(state.themesDir)
            if available:
                print(f"Available themes: {', '.join(available)}", file=sys.stderr)
            sys.exit(1)
    if state.noAutolink:
        markdown_parser.automaticLinkDetectionEnabled = False
    return markdown_parser


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read the markdown file and parse it into a StyledBuffer.

    Returns:
        ProgramState with parsedBuffer set

    Exits:
        1 if the file cannot be read
    """
    state = inputstate.copy()

    LOG("Reading source file...", level=1)
    try:
        source = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(source)} characters from {state.inputSourceFile.name}", level=2)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG("Parsing markdown...", level=1)
    state.parsedBuffer = parser_build(state).parse(source)
    LOG(f"Parsed into {len(state.parsedBuffer.spans)} style bindings", level=2)
    return state


def output_compile(inputstate: ProgramState) -> ProgramState:
    """
    Compile the parsed buffer and write it to outputFilePath.

    Returns:
        ProgramState with compileResult set

    Exits:
        1 if there is no parsed buffer or compilation/writing fails
    """
    state = inputstate.copy()

    LOG(f"Compiling to {state.outputFormat}...", level=1)

    if state.parsedBuffer is None:
        print("Error: No parsed buffer available", file=sys.stderr)
        sys.exit(1)

    try:
        output = Compiler(state.parsedBuffer).compile(state.outputFormat)
        state.outputFilePath.write_text(output, encoding="utf-8")
    except (CompileError, OSError) as e:
        print(f"Compilation error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    state.compileResult = {
        "status": True,
        "output_file": str(state.outputFilePath),
        "characters": len(state.parsedBuffer),
        "runs": sum(1 for _ in state.parsedBuffer.runs()),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display compilation results.

    Exits:
        1 if compileResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.compileResult:
        print("Error: Compilation failed", file=sys.stderr)
        sys.exit(1)

    LOG("✓ Compilation successful!", level=1)
    LOG(f"  Output: {state.compileResult['output_file']}", level=1)
    LOG(f"  Characters: {state.compileResult['characters']}", level=1)
    LOG(f"  Styled runs: {state.compileResult['runs']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="markstyle - Lightweight markdown to styled text",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - parse a markdown file and write the styled output.

    Orchestrates the pipeline:
        1. env_check: Validate paths
        2. source_parse: Read and parse markdown to a StyledBuffer
        3. output_compile: Compile to html/json/text and write the file
        4. results_report: Display results
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, source_parse, output_compile, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
