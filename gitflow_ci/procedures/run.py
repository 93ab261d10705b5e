import os

from gitflow_ci import _, cli, const
from gitflow_ci.actions import ActionType, ActionContext, create_action
from gitflow_ci.buildtype import create_build_type_action
from gitflow_ci.cause import AbstractGitflowCause, StartReleaseCause, TestReleaseCause, PublishReleaseCause, \
    FinishReleaseCause, StartHotfixCause, FinishHotfixCause, StartFeatureCause, FinishFeatureCause
from gitflow_ci.common import GitFlowException, Result
from gitflow_ci.const import BuildResult
from gitflow_ci.context import Context
from gitflow_ci.data import BranchRecordStore
from gitflow_ci.git import RepoGitClient
from gitflow_ci.procedures.common import load_history, get_recorded_branch, execute_main_build


def create_cause(context: Context, action_type: ActionType, store: BranchRecordStore,
                 result_out: Result) -> AbstractGitflowCause:
    args = context.args
    config = context.config

    if action_type == ActionType.START_RELEASE:
        return StartReleaseCause(args['<release-version>'],
                                 args.get('<release-next-development-version>'),
                                 args.get('<next-development-version>'),
                                 context.dry_run, context.omit_main_build, config.snapshot_qualifier)
    elif action_type == ActionType.TEST_RELEASE:
        release_branch = args['<release-branch>']
        if args.get('<patch-release-version>') is not None:
            return TestReleaseCause(release_branch,
                                    args['<patch-release-version>'],
                                    args.get('<patch-release-next-development-version>'),
                                    context.dry_run, context.omit_main_build, config.snapshot_qualifier)
        record = get_recorded_branch(result_out, store, release_branch)
        if record.last_build_version is None:
            result_out.fail(os.EX_USAGE,
                            _("No build version is recorded for the branch {branch}.")
                            .format(branch=repr(release_branch)),
                            _("Specify the patch release versions explicitly."))
        return TestReleaseCause.for_release_branch(record, context.dry_run, context.omit_main_build,
                                                   config.snapshot_qualifier)
    elif action_type == ActionType.PUBLISH_RELEASE:
        record = get_recorded_branch(result_out, store, args['<release-branch>'])
        if record.last_release_version_commit is None:
            result_out.fail(os.EX_USAGE,
                            _("No release is recorded for the branch {branch}.")
                            .format(branch=repr(record.branch_name)),
                            _("Start or test a release on the branch first."))
        return PublishReleaseCause(record, context.dry_run, context.omit_main_build)
    elif action_type == ActionType.FINISH_RELEASE:
        return FinishReleaseCause(args['<release-branch>'], context.dry_run, True)
    elif action_type == ActionType.START_HOTFIX:
        record = get_recorded_branch(result_out, store, config.master_branch)
        if record.base_release_version is None or record.last_release_version is None:
            result_out.fail(os.EX_USAGE,
                            _("No release is recorded for the branch {branch}.")
                            .format(branch=repr(record.branch_name)),
                            _("Publish a release first."))
        return StartHotfixCause(record, context.dry_run, context.omit_main_build, config.snapshot_qualifier)
    elif action_type == ActionType.FINISH_HOTFIX:
        return FinishHotfixCause(args['<hotfix-branch>'], context.dry_run, True)
    elif action_type == ActionType.START_FEATURE:
        return StartFeatureCause(args['<feature-name>'], context.dry_run, context.omit_main_build)
    elif action_type == ActionType.FINISH_FEATURE:
        return FinishFeatureCause(args['<feature-branch>'], context.dry_run, context.omit_main_build)
    else:
        raise ValueError("unsupported action type: " + repr(action_type))


def call(context: Context, action_type: ActionType) -> Result:
    result = Result()

    history = load_history(context)

    git = RepoGitClient(context.repo, context.dry_run)
    git.set_action_name(action_type.action_name)
    git.fetch(context.config.remote_name)

    cause = create_cause(context, action_type, history.get_last_branch_record_store(), result)

    build = history.new_build()
    try:
        action_context = ActionContext(build, git,
                                       create_build_type_action(context, action_type.action_name),
                                       context.config)
        action = create_action(action_type, action_context, cause)

        action.before_main_build()

        if cause.omit_main_build:
            cli.print(_("Main build omitted."))
        else:
            build.set_result(execute_main_build(context, action.env_vars))

        action.after_main_build()

        build.set_result(build.get_result_non_null())
    except KeyboardInterrupt:
        build.set_result(BuildResult.ABORTED)
        raise
    except GitFlowException:
        build.set_result(BuildResult.FAILURE)
        raise
    finally:
        history.discard_old_builds(context.config.max_builds)
        history.save()
        if context.verbose >= const.INFO_VERBOSITY:
            cli.print(_("Build #{number} recorded in {file}").format(number=build.number, file=history.file))

    build_result = build.get_result_non_null()
    if build_result == BuildResult.UNSTABLE:
        result.warn(_("The build is unstable."), None)
    elif build_result.is_worse_than(BuildResult.UNSTABLE):
        result.error(os.EX_DATAERR,
                     _("The main build failed."),
                     _("Result: {result}").format(result=build_result.name))

    return result
