"""
Build state carried between the stages of a site build

A build is a chain of stages, each taking the previous ProgramState and
returning an updated copy:

    env_check -> content_collect -> site_compile -> results_report
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Type, TypeVar

if TYPE_CHECKING:
    from ..lib.compiler import Compiler
    from .content import Document


PS = TypeVar("PS", bound="ProgramState")
Stage = Callable[["ProgramState"], "ProgramState"]


@dataclass
class ProgramState:
    """
    Everything one site build knows about itself.

    Options come from the command line; each stage fills in its own part:
        - env_check: contentRoot, envOK (output directory created)
        - content_collect: compiler, documents (drafts already filtered)
        - site_compile: compileResult with document_count and skipped paths
        - results_report: reads compileResult, adds nothing

    `stagesRun` lists the stages the build has been through, in order.
    """

    # command line
    inputdir: Optional[Path] = None
    outputdir: Optional[Path] = None
    verbosity: int = 1
    contentSubdir: str = "."
    includeDrafts: bool = False
    strict: bool = False

    # filled by stages
    envOK: bool = False
    contentRoot: Path = Path("/")
    documents: Optional[List["Document"]] = None
    compiler: Optional["Compiler"] = None
    compileResult: Optional[Dict[str, Any]] = None
    stagesRun: List[str] = field(default_factory=list)

    @classmethod
    def state_createFromNamespace(
        cls: Type[PS], options: Namespace, inputdir: Path, outputdir: Path
    ) -> PS:
        """
        Initial build state from parsed CLI options.

        Options that are not state fields (the ChRIS plugin adds its own)
        are dropped.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        options_known = {key: value for key, value in vars(options).items() if key in known}
        return cls(**{**options_known, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """Shallow copy for the next stage to update"""
        return dataclasses.replace(self, stagesRun=list(self.stagesRun))


def pipeline(initial_state: ProgramState, *stages: Stage) -> ProgramState:
    """
    Run build stages left to right, feeding each the previous state.

    Example:
        final = pipeline(state, env_check, content_collect, site_compile, results_report)
        final.stagesRun
        # ['env_check', 'content_collect', 'site_compile', 'results_report']
    """
    def stage_apply(state: ProgramState, stage: Stage) -> ProgramState:
        result = stage(state)
        result.stagesRun = [*result.stagesRun, stage.__name__]
        return result

    return reduce(stage_apply, stages, initial_state)
