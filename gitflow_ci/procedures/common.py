import os
import shlex
import subprocess
from typing import Dict, Optional

from gitflow_ci import _, cli, const, filesystem
from gitflow_ci.buildtype import expand_vars
from gitflow_ci.common import Result
from gitflow_ci.const import BuildResult
from gitflow_ci.context import Context
from gitflow_ci.data import BranchRecord, BranchRecordStore
from gitflow_ci.history import BuildHistory


def get_history_file(context: Context) -> str:
    return context.config.history_file or filesystem.get_default_history_file(context.repo.dir)


def load_history(context: Context) -> BuildHistory:
    history_file = get_history_file(context)
    if context.verbose >= const.DEBUG_VERBOSITY:
        cli.print("history file: " + history_file)
    return BuildHistory.load(history_file)


def get_recorded_branch(result_out: Result, store: Optional[BranchRecordStore], branch_name: str) -> BranchRecord:
    record = store.get(branch_name) if store is not None else None
    if record is None:
        result_out.fail(os.EX_USAGE,
                        _("No record exists for the branch {branch}.")
                        .format(branch=repr(branch_name)),
                        _("The branch has not been built by a Gitflow action yet."))
    return record


def execute_main_build(context: Context, env_vars: Dict[str, str]) -> BuildResult:
    """
    Runs the configured build commands with the variables of the action added to the environment.
    :return: SUCCESS if all commands succeeded, FAILURE at the first failing command
    """
    variables = dict(os.environ)
    variables.update(env_vars)

    for command in context.config.build_commands:
        command_string = ' '.join(shlex.quote(token) for token in command)
        if context.verbose >= const.TRACE_VERBOSITY:
            cli.print(command_string)

        command = [expand_vars(token, variables) for token in command]

        try:
            proc = subprocess.Popen(args=command,
                                    stdin=subprocess.PIPE,
                                    cwd=context.repo.dir,
                                    env=variables)
            proc.wait()
        except FileNotFoundError as e:
            cli.eprint(_("{command}\n"
                         "could not be executed.\n"
                         "File not found: {file}")
                       .format(command=command_string, file=e.filename))
            return BuildResult.FAILURE

        if proc.returncode != os.EX_OK:
            cli.eprint(_("{command}\n"
                         "returned with an error.")
                       .format(command=command_string))
            return BuildResult.FAILURE

    return BuildResult.SUCCESS
