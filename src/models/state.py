"""
CLI run state and the stage pipeline

A run of the ``micron`` command is a chain of stages, each taking the
ProgramState produced by the previous one and handing on an updated one.
"""

import dataclasses
from functools import reduce
from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")
Stage = Callable[["ProgramState"], "ProgramState"]


@dataclass
class ProgramState:
    """
    Everything one CLI run knows, from parsed options to the written file.

    Fields filled by each stage:
        - options: inputdir, outputdir, verbosity, inputFile, mode, theme,
          seed, standalone, outputSubdir
        - env_check: inputSourceFile, outputFile, envOK
        - source_read: sourceText
        - source_transform: outputText, transformResult
        - output_write and results_report add nothing

    ``mode`` is one of render, strip, highlight or beautify. ``seed`` only
    matters for beautify, where it makes the random decoration repeatable.
    ``transformResult`` holds the counts reported at the end of the run.
    """

    # options
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    mode: str = field(default="render")
    theme: str = field(default="default")
    seed: Optional[int] = field(default=None)
    standalone: bool = field(default=False)
    outputSubdir: str = field(default=".")

    # filled in by stages
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    outputFile: Path = field(default=Path("/"))
    sourceText: str = field(default="")
    outputText: str = field(default="")
    transformResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Build the initial state from parsed CLI options.

        Options that are not ProgramState fields (chris_plugin adds a few of
        its own) are ignored.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        chosen = {name: value for name, value in vars(options).items() if name in known}
        return cls(**{**chosen, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """Shallow copy, so a stage can update fields without touching its input"""
        return dataclasses.replace(self)


def pipeline(initial_state: ProgramState, *stages: Stage) -> ProgramState:
    """
    Feed ``initial_state`` through ``stages`` in order and return the result.

    Example:
        pipeline(state, env_check, source_read, source_transform,
                 output_write, results_report)
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
