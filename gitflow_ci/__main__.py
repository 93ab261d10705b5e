"""
gitflow-ci - Run Gitflow actions in a build pipeline

Usage:
 gitflow-ci [options] start-release <release-version> [<release-next-development-version> <next-development-version>]
 gitflow-ci [options] test-release <release-branch> [<patch-release-version> <patch-release-next-development-version>]
 gitflow-ci [options] publish-release <release-branch>
 gitflow-ci [options] finish-release <release-branch>
 gitflow-ci [options] start-hotfix
 gitflow-ci [options] finish-hotfix <hotfix-branch>
 gitflow-ci [options] start-feature <feature-name>
 gitflow-ci [options] finish-feature <feature-branch>
 gitflow-ci [options] status
 gitflow-ci (-h|--help)
 gitflow-ci --version

Options:
 -h --help              Shows this screen.
 --version              Shows version information.

Workspace Options:
 --root=DIR             The working copy root.
 [default: .]
 --config=FILE          The configuration file relative to the working copy root.
                        Defaults to default file name in the following order: .gitflow-ci.yml, .gitflow-ci.json
 --history=FILE         The build history file.
                        Defaults to a file in the user data directory.

Execution Mode Options:
 -B --batch             Disables interaction and output coloring.
 -d --dry-run           Executes the actions without pushing.
 --omit-main-build      Skips the main build and the publication of its archives.

Output Options:
 -v --verbose           Enables detailed output.

"""

import os
import sys

import docopt

import gitflow_ci.procedures.run
import gitflow_ci.procedures.status
from gitflow_ci import cli, _
from gitflow_ci import const
from gitflow_ci.actions import ActionType
from gitflow_ci.common import GitFlowException, Result
from gitflow_ci.context import Context


# ========== commands
# mapped by command name

def cmd_status(context):
    return gitflow_ci.procedures.status.call(context)


def cmd_action(action_type: ActionType):
    return lambda context: gitflow_ci.procedures.run.call(context, action_type)


COMMANDS = {
    'start-release': cmd_action(ActionType.START_RELEASE),
    'test-release': cmd_action(ActionType.TEST_RELEASE),
    'publish-release': cmd_action(ActionType.PUBLISH_RELEASE),
    'finish-release': cmd_action(ActionType.FINISH_RELEASE),
    'start-hotfix': cmd_action(ActionType.START_HOTFIX),
    'finish-hotfix': cmd_action(ActionType.FINISH_HOTFIX),
    'start-feature': cmd_action(ActionType.START_FEATURE),
    'finish-feature': cmd_action(ActionType.FINISH_FEATURE),
    'status': cmd_status,
}


# ========== entry point

def main(argv: list = sys.argv) -> int:
    result = Result()

    args = docopt.docopt(argv=argv[1:], doc=__doc__, version=const.VERSION, help=True, options_first=False)
    try:
        context = Context.create(args, result)
    except GitFlowException:
        context = None
        pass  # errors are in result
    if context is not None:
        if context.verbose >= const.DEBUG_VERBOSITY:
            cli.print("gitflow-ci version: " + const.VERSION)
            cli.print("Python version:" + sys.version.replace('\n', ' '))
            cli.print("cwd: " + os.getcwd())

        command_funcs = [command_func for command_name, command_func in COMMANDS.items()
                         if args[command_name] is True]

        for command_func in command_funcs:
            try:
                command_result = command_func(context)
            except GitFlowException as e:
                command_result = e.result

            if command_result is not None:
                result.errors.extend(command_result.errors)
            else:
                result.error(os.EX_SOFTWARE,
                             _("internal error: command implementation {command_func} did not return a result")
                             .format(command_func=command_func),
                             None)

            if result.has_errors():
                break

    exit_code = os.EX_OK
    if len(result.errors):
        sys.stderr.flush()
        sys.stdout.flush()

        for error in result.errors:
            if error.exit_code != os.EX_OK and exit_code != os.EX_SOFTWARE:
                exit_code = error.exit_code
            cli.eprint('\n'.join(filter(None, [error.message, error.reason])))

    # print dry run status, if possible
    if context is not None and context.dry_run:
        cli.print('')
        if exit_code == os.EX_OK:
            cli.print("dry run succeeded")
        else:
            cli.eprint("dry run failed")

    return exit_code


if __name__ == "__main__":
    __exit_code = main(sys.argv)
    sys.exit(__exit_code)
