#!/usr/bin/env python3
"""
blogmark - Markdown content compiler for the blog site

Compiles the site's content collections (blog, news, events) from
Markdown with YAML front-matter into static HTML pages. The Markdown
dialect adds container directives (callouts, image sliders, download
and audio widgets), rich embed cards for bare provider URLs, code fence
filenames and collection-relative image paths.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    blogmark inputdir/ outputdir/ [--contentSubdir content]

    Every <collection>/<slug>/main.md under the content root is written to
    outputdir/<collection>/<slug>/index.html, together with an
    outputdir/index.json manifest.

Examples:
    # Basic build
    blogmark . dist/ --contentSubdir content

    # Preview build including drafts
    blogmark . dist/ --contentSubdir content --includeDrafts

    # Verbose output
    blogmark . dist/ --contentSubdir content -vv
"""

import sys
import traceback
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from . import __version__
from .config import appsettings, storagesettings
from .lib import Compiler, LOG, state_connectToLogger
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
  _     _                             _
 | |__ | | ___   __ _ _ __ ___   __ _| |_ __ | | __
 | '_ \| |/ _ \ / _` | '_ ` _ \ / _` | '__|  | |/ /
 | |_) | | (_) | (_| | | | | | | (_| | |     |   <
 |_.__/|_|\___/ \__, |_| |_| |_|\__,_|_|     |_|\_\
                |___/
  Markdown content compiler
"""

# Define CLI arguments
parser = ArgumentParser(
    description="blogmark - Markdown content compiler for the blog site",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--contentSubdir",
    default=".",
    type=str,
    help="Content root (holding blog/, news/, events/) relative to inputdir",
)

parser.add_argument(
    "--includeDrafts",
    action="store_true",
    default=appsettings.include_drafts,
    help="Also compile documents whose front-matter sets draft: true",
)

parser.add_argument(
    "--strict",
    action="store_true",
    default=appsettings.strict_mode,
    help="Fail on unclosed code fences and directives",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve the content root.

    Returns:
        ProgramState with added fields:
            - contentRoot: Resolved content directory
            - envOK: True if environment is valid

    Exits:
        1 if the content root does not exist
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    content_root = state.inputdir / state.contentSubdir
    if not content_root.is_dir():
        print(f"Error: Content directory not found: {content_root}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.contentRoot = content_root
    LOG(f"Content root: {content_root}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def content_collect(inputstate: ProgramState) -> ProgramState:
    """
    Load every document's front-matter and body.

    Returns:
        ProgramState with added fields:
            - compiler: Compiler bound to contentRoot/outputdir
            - documents: List[Document] selected for compilation

    Exits:
        1 if a document cannot be read
    """
    state = inputstate.copy()

    LOG("Collecting content...", level=1)

    state.compiler = Compiler(
        input_dir=state.contentRoot,
        output_dir=state.outputdir,
        storage=storagesettings,
        include_drafts=state.includeDrafts,
        strict=state.strict,
    )
    try:
        state.documents = state.compiler.documents_collect()
    except OSError as e:
        print(f"Error reading content: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Found {len(state.documents)} documents", level=2)
    return state


def site_compile(inputstate: ProgramState) -> ProgramState:
    """
    Compile the collected documents to HTML.

    Returns:
        ProgramState with added field:
            - compileResult: Dict containing status, output_dir,
              document_count, skipped

    Exits:
        1 on parse errors (strict mode) or write failures
    """
    state = inputstate.copy()

    LOG("Compiling documents to HTML...", level=1)

    if state.compiler is None:
        print("Error: No content collected", file=sys.stderr)
        sys.exit(1)

    try:
        state.compileResult = state.compiler.compile()
        LOG(f"Compilation complete: {state.compileResult['document_count']} documents", level=2)
    except SyntaxError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Compilation error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            traceback.print_exc()
        sys.exit(1)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display compilation results.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if compileResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.compileResult:
        print("Error: Compilation failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG("\n✓ Compilation successful!", level=1)
        LOG(f"  Output:    {state.compileResult['output_dir']}", level=1)
        LOG(f"  Documents: {state.compileResult['document_count']}", level=1)
        if state.compileResult['skipped']:
            LOG(f"  Skipped:   {len(state.compileResult['skipped'])}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="blogmark - Markdown content compiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - compile the content tree to a static site.

    Orchestrates the build pipeline:
        1. env_check: Validate paths
        2. content_collect: Load front-matter and bodies
        3. site_compile: Parse, transform, render, write
        4. results_report: Display results

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, content_collect, site_compile, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
