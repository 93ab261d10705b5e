from gitflow_ci.actions.common import AbstractGitflowAction, ActionContext
from gitflow_ci.cause import StartFeatureCause, FinishFeatureCause
from gitflow_ci.const import BuildResult
from gitflow_ci.data import BranchRecord


class StartFeatureAction(AbstractGitflowAction):
    ACTION_NAME = "Start Feature"

    MSG_CREATED_FEATURE_BRANCH = "Created feature branch {0}"

    cause: StartFeatureCause = None
    develop_record: BranchRecord = None

    def __init__(self, context: ActionContext, cause: StartFeatureCause):
        super().__init__(context, cause)

    @property
    def feature_branch(self) -> str:
        return self.config.feature_branch_prefix + self.cause.feature_name

    def before_main_build_internal(self):
        self.develop_record = self.get_or_add_required_record(self.config.develop_branch)

        feature_branch = self.feature_branch
        self.checkout_branch(feature_branch, self.config.develop_branch)
        self.console_logger.println(self.MSG_CREATED_FEATURE_BRANCH.format(feature_branch))

        self.set_branch_env_vars(feature_branch)

    def after_main_build_internal(self):
        if not self.is_main_build_successful():
            self.develop_record.last_build_result = self.build.get_result_non_null()
            return

        feature_branch = self.feature_branch
        self.push_branch(feature_branch)

        feature_record = self.store.get_or_add(feature_branch)
        feature_record.last_build_result = BuildResult.SUCCESS
        feature_record.last_build_version = self.develop_record.last_build_version


class FinishFeatureAction(AbstractGitflowAction):
    """
    Merges a feature branch into develop and deletes it once develop builds.
    """
    ACTION_NAME = "Finish Feature"

    MSG_MERGED_FEATURE_BRANCH = "Merged feature branch {0} into {1}"

    cause: FinishFeatureCause = None

    def __init__(self, context: ActionContext, cause: FinishFeatureCause):
        super().__init__(context, cause)

    def before_main_build_internal(self):
        develop_branch = self.config.develop_branch
        feature_branch = self.cause.feature_branch

        self.checkout_branch(develop_branch, develop_branch)
        message = self.MSG_MERGED_FEATURE_BRANCH.format(feature_branch, develop_branch)
        self.git.merge(self.config.remote_branch_name(feature_branch), message)
        self.console_logger.println(message)

        self.set_branch_env_vars(develop_branch)

    def after_main_build_internal(self):
        feature_branch = self.cause.feature_branch

        if not self.is_main_build_successful():
            feature_record = self.store.get_or_add(feature_branch)
            feature_record.last_build_result = self.build.get_result_non_null()
            return

        develop_branch = self.config.develop_branch
        self.push_branch(develop_branch)

        develop_record = self.store.get_or_add(develop_branch)
        develop_record.last_build_result = BuildResult.SUCCESS

        self.delete_branch(feature_branch)
