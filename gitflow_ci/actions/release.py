from gitflow_ci.actions.common import AbstractGitflowAction, ActionContext
from gitflow_ci.cause import StartReleaseCause, TestReleaseCause, PublishReleaseCause, FinishReleaseCause
from gitflow_ci.const import BuildResult
from gitflow_ci.data import BranchRecord


class StartReleaseAction(AbstractGitflowAction):
    """
    Creates a release branch from develop and sets the release version. After a successful main build, the
    release is tagged, the release branch moves on to the fixes development version and develop to the next
    development version.
    """
    ACTION_NAME = "Start Release"

    MSG_CREATED_RELEASE_BRANCH = "Created release branch {0}"
    MSG_UPDATED_RELEASE_VERSION = "Updated project files to release version {0}"
    MSG_CREATED_RELEASE_TAG = "Created release version tag {0}"
    MSG_UPDATED_FIXES_VERSION = "Updated project files to fixes development version {0}"
    MSG_UPDATED_NEXT_VERSION = "Updated project files on {0} branch to next development version {1}"

    cause: StartReleaseCause = None
    develop_record: BranchRecord = None

    def __init__(self, context: ActionContext, cause: StartReleaseCause):
        super().__init__(context, cause)

    @property
    def release_branch(self) -> str:
        return self.config.release_branch_prefix + self.cause.release_version

    def before_main_build_internal(self):
        # the missing branch record policy is applied before anything is changed
        self.develop_record = self.get_or_add_required_record(self.config.develop_branch)

        release_branch = self.release_branch
        self.checkout_branch(release_branch, self.config.develop_branch)
        self.console_logger.println(self.MSG_CREATED_RELEASE_BRANCH.format(release_branch))

        release_version = self.cause.release_version
        self.update_version_and_commit(release_version, self.MSG_UPDATED_RELEASE_VERSION.format(release_version))

        self.set_branch_env_vars(release_branch)

    def after_main_build_internal(self):
        if self.is_main_build_successful():
            self.after_successful_main_build()
        else:
            self.after_unsuccessful_main_build()

    def after_successful_main_build(self):
        release_version = self.cause.release_version
        release_branch = self.release_branch
        self.push_branch(release_branch)

        release_record = self.store.get_or_add(release_branch)
        release_record.last_build_result = BuildResult.SUCCESS
        release_record.last_build_version = release_version
        release_record.last_release_version = release_version
        release_record.base_release_version = release_version
        release_record.last_release_version_commit = self.get_remote_head_rev(release_branch)

        tag_name = self.config.version_tag_prefix + release_version
        message = self.MSG_CREATED_RELEASE_TAG.format(tag_name)
        self.git.tag(tag_name, message)
        self.console_logger.println(message)
        self.push_tag(tag_name)

        fixes_version = self.cause.release_next_development_version
        self.update_version_and_commit(fixes_version, self.MSG_UPDATED_FIXES_VERSION.format(fixes_version))
        self.push_branch(release_branch)

        release_record.last_build_result = BuildResult.SUCCESS
        release_record.last_build_version = fixes_version

        develop_branch = self.config.develop_branch
        self.checkout_branch(develop_branch, develop_branch)
        next_version = self.cause.next_development_version
        self.update_version_and_commit(next_version, self.MSG_UPDATED_NEXT_VERSION.format(develop_branch,
                                                                                          next_version))
        self.push_branch(develop_branch)

        self.develop_record.last_build_result = BuildResult.SUCCESS
        self.develop_record.last_build_version = next_version

    def after_unsuccessful_main_build(self):
        # the build is assumed to have failed on develop before the release branch was created,
        # so the build version of develop is kept
        self.develop_record.last_build_result = self.build.get_result_non_null()


class TestReleaseAction(AbstractGitflowAction):
    """
    Builds a patch release on an existing release branch.
    """
    # not a test class
    __test__ = False

    ACTION_NAME = "Test Release"

    MSG_CHECKED_OUT_RELEASE_BRANCH = "Checked out release branch {0}"
    MSG_UPDATED_PATCH_RELEASE_VERSION = "Updated project files to patch release version {0}"
    MSG_CREATED_PATCH_RELEASE_TAG = "Created patch release version tag {0}"
    MSG_UPDATED_PATCH_FIXES_VERSION = "Updated project files to fixes development version {0}"

    cause: TestReleaseCause = None

    def __init__(self, context: ActionContext, cause: TestReleaseCause):
        super().__init__(context, cause)

    def before_main_build_internal(self):
        release_branch = self.cause.release_branch
        self.checkout_branch(release_branch, release_branch)
        self.console_logger.println(self.MSG_CHECKED_OUT_RELEASE_BRANCH.format(release_branch))

        patch_release_version = self.cause.patch_release_version
        self.update_version_and_commit(patch_release_version,
                                       self.MSG_UPDATED_PATCH_RELEASE_VERSION.format(patch_release_version))

        self.set_branch_env_vars(release_branch)

    def after_main_build_internal(self):
        release_branch = self.cause.release_branch
        patch_release_version = self.cause.patch_release_version

        if not self.is_main_build_successful():
            release_record = self.store.get_or_add(release_branch)
            release_record.last_build_result = self.build.get_result_non_null()
            release_record.last_build_version = patch_release_version
            return

        self.push_branch(release_branch)

        release_record = self.store.get_or_add(release_branch)
        release_record.last_build_result = BuildResult.SUCCESS
        release_record.last_build_version = patch_release_version
        release_record.last_release_version = patch_release_version
        release_record.last_release_version_commit = self.get_remote_head_rev(release_branch)

        tag_name = self.config.version_tag_prefix + patch_release_version
        message = self.MSG_CREATED_PATCH_RELEASE_TAG.format(tag_name)
        self.git.tag(tag_name, message)
        self.console_logger.println(message)
        self.push_tag(tag_name)

        fixes_version = self.cause.patch_release_next_development_version
        self.update_version_and_commit(fixes_version, self.MSG_UPDATED_PATCH_FIXES_VERSION.format(fixes_version))
        self.push_branch(release_branch)

        release_record.last_build_version = fixes_version


class PublishReleaseAction(AbstractGitflowAction):
    """
    Merges the last patch release of a release branch into master.
    """
    ACTION_NAME = "Publish Release"

    MSG_MERGED_RELEASE = "Merged release version {0} from {1} into {2}"

    cause: PublishReleaseCause = None

    def __init__(self, context: ActionContext, cause: PublishReleaseCause):
        super().__init__(context, cause)

    def before_main_build_internal(self):
        master_branch = self.config.master_branch
        self.checkout_branch(master_branch, master_branch)

        message = self.MSG_MERGED_RELEASE.format(self.cause.last_patch_release_version,
                                                 self.cause.release_branch,
                                                 master_branch)
        self.git.merge(self.cause.last_patch_release_commit, message)
        self.console_logger.println(message)

        self.set_branch_env_vars(master_branch)

    def after_main_build_internal(self):
        master_branch = self.config.master_branch

        if not self.is_main_build_successful():
            master_record = self.store.get_or_add(master_branch)
            master_record.last_build_result = self.build.get_result_non_null()
            return

        self.push_branch(master_branch)

        master_record = self.store.get_or_add(master_branch)
        master_record.last_build_result = BuildResult.SUCCESS
        master_record.last_build_version = self.cause.last_patch_release_version
        master_record.last_release_version = self.cause.last_patch_release_version
        master_record.base_release_version = self.cause.base_release_version
        master_record.last_release_version_commit = self.get_remote_head_rev(master_branch)


class FinishReleaseAction(AbstractGitflowAction):
    """
    Deletes a release branch that is not maintained anymore.
    """
    ACTION_NAME = "Finish Release"

    cause: FinishReleaseCause = None

    def __init__(self, context: ActionContext, cause: FinishReleaseCause):
        super().__init__(context, cause)

    def before_main_build_internal(self):
        self.delete_branch(self.cause.release_branch)

    def after_main_build_internal(self):
        pass
