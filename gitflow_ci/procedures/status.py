import sys

import colors

from gitflow_ci import cli, const, _
from gitflow_ci.actions.common import format_grouped_records
from gitflow_ci.common import Result
from gitflow_ci.const import BuildResult
from gitflow_ci.context import Context
from gitflow_ci.data import BranchRecord
from gitflow_ci.procedures.common import load_history


def get_result_color(record: BranchRecord):
    if record.last_build_result is None:
        return colors.partial(colors.color, fg='white')
    elif record.last_build_result == BuildResult.SUCCESS:
        return colors.partial(colors.color, fg='green', style='bold')
    elif record.last_build_result == BuildResult.UNSTABLE:
        return colors.partial(colors.color, fg='yellow', style='bold')
    else:
        return colors.partial(colors.color, fg='red', style='bold')


def call(context: Context) -> Result:
    result = Result()

    history = load_history(context)
    last_build = history.last_build
    store = history.get_last_branch_record_store()

    if last_build is None or store is None:
        cli.print(_("No Gitflow builds recorded."))
        return result

    badge = last_build.get_action(const.BADGE_KEY)
    cli.print(_("Last build: #{number} {action} ({result})")
              .format(number=last_build.number,
                      action=badge.action_name if badge is not None else '-',
                      result=last_build.get_result_non_null().name))
    if store.dry_run:
        cli.print(_("The last build was a dry run."))

    status_color = colors.partial(colors.color, fg='white', style='bold')

    for record in sorted(store.list_all(), key=lambda record: record.branch_name):
        cli.fcwrite(sys.stdout, status_color, record.branch_name + ' [')
        cli.fcwrite(sys.stdout, get_result_color(record), cli.if_none(
            record.last_build_result.name if record.last_build_result is not None else None, '-'))
        cli.fcwrite(sys.stdout, status_color, ']')
        cli.fcwriteln(sys.stdout, None)

        cli.print("    build version:   " + cli.if_none(record.last_build_version, '-'))
        if record.last_release_version is not None:
            cli.print("    release version: " + record.last_release_version
                      + (' (' + record.last_release_version_commit + ')'
                         if record.last_release_version_commit is not None else ''))
        if context.verbose and record.base_release_version is not None:
            cli.print("    base release:    " + record.base_release_version)

    unstable_records = store.get_unstable_records_grouped_by_result()
    if len(unstable_records):
        cli.warn(_("Unstable branches: {branches}").format(branches=format_grouped_records(unstable_records)))

    return result
