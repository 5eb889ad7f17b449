"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from functools import reduce
from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, outputFormat,
          theme, themesDir, noAutolink
        - env_check: inputSourceFile, outputFilePath, envOK
        - source_parse: parsedBuffer
        - output_compile: compileResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the markdown file
        outputdir: Directory the compiled document is written to
        verbosity: Logging verbosity level (1-3)
        inputFile: Markdown filename (relative to inputdir)
        outputFormat: html, json or text
        theme: Optional theme name
        themesDir: Directory holding themes
        noAutolink: Disable automatic link detection
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the markdown file
        outputFilePath: Resolved path of the compiled document
        parsedBuffer: StyledBuffer produced by the parser
        compileResult: Compilation results (output_file, characters, runs, status)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    outputFormat: str = field(default="html")
    theme: Optional[str] = field(default=None)
    themesDir: str = field(default="themes")
    noAutolink: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    outputFilePath: Path = field(default=Path("/"))
    parsedBuffer: Optional[Any] = field(default=None)  # StyledBuffer at runtime
    compileResult: Optional[dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Options that are not ProgramState fields are ignored.
        """
        options_dict = vars(options)
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}
        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_parse,
            output_compile,
            results_report
        )
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
