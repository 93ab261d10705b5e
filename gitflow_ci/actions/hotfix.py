import os

from gitflow_ci import _
from gitflow_ci.actions.common import AbstractGitflowAction, ActionContext
from gitflow_ci.cause import StartHotfixCause, FinishHotfixCause
from gitflow_ci.common import Result
from gitflow_ci.const import BuildResult


class StartHotfixAction(AbstractGitflowAction):
    """
    Creates a hotfix branch from master for the last published release. The hotfix branch is
    pushed and recorded before the main build.
    """
    ACTION_NAME = "Start Hotfix"

    MSG_CREATED_HOTFIX_BRANCH = "Created hotfix branch {0}"
    MSG_UPDATED_HOTFIX_VERSION = "Updated project files to hotfix development version {0}"

    cause: StartHotfixCause = None

    def __init__(self, context: ActionContext, cause: StartHotfixCause):
        super().__init__(context, cause)

    @property
    def hotfix_branch(self) -> str:
        return self.config.hotfix_branch_prefix + self.cause.hotfix_version

    def before_main_build_internal(self):
        master_branch = self.cause.base_branch
        # the master record is only read
        master_record = self.get_required_record(master_branch)
        if master_record is not None and master_record.last_build_result is not None \
                and master_record.last_build_result.is_worse_than(BuildResult.SUCCESS):
            result = Result()
            result.fail(os.EX_DATAERR,
                        self.console_logger.format(_("Cannot start a hotfix on the unstable branch {branch}.")
                                                   .format(branch=repr(master_branch))),
                        _("The last build of the branch resulted in {result}.")
                        .format(result=master_record.last_build_result.name))

        hotfix_branch = self.hotfix_branch
        self.checkout_branch(hotfix_branch, master_branch)
        self.console_logger.println(self.MSG_CREATED_HOTFIX_BRANCH.format(hotfix_branch))

        hotfix_version = self.cause.next_patch_development_version
        self.update_version_and_commit(hotfix_version, self.MSG_UPDATED_HOTFIX_VERSION.format(hotfix_version))
        self.push_branch(hotfix_branch)

        hotfix_record = self.store.get_or_add(hotfix_branch)
        hotfix_record.last_build_result = BuildResult.SUCCESS
        hotfix_record.last_build_version = hotfix_version
        hotfix_record.base_release_version = self.cause.base_release_version
        hotfix_record.last_release_version = self.cause.last_release_version

        self.set_branch_env_vars(hotfix_branch)

    def after_main_build_internal(self):
        if not self.is_main_build_successful():
            hotfix_record = self.store.get_or_add(self.hotfix_branch)
            hotfix_record.last_build_result = self.build.get_result_non_null()


class FinishHotfixAction(AbstractGitflowAction):
    """
    Deletes a hotfix branch.
    """
    ACTION_NAME = "Finish Hotfix"

    cause: FinishHotfixCause = None

    def __init__(self, context: ActionContext, cause: FinishHotfixCause):
        super().__init__(context, cause)

    def before_main_build_internal(self):
        self.delete_branch(self.cause.hotfix_branch)

    def after_main_build_internal(self):
        pass
