import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Iterable, Optional

from gitflow_ci import _, cli, const
from gitflow_ci.buildtype import BuildTypeAction
from gitflow_ci.cause import AbstractGitflowCause
from gitflow_ci.common import Result
from gitflow_ci.const import BuildResult, MissingBranchRecordPolicy
from gitflow_ci.context import Config
from gitflow_ci.data import BranchRecord, BranchRecordStore, RemovalMode
from gitflow_ci.git import GitClient
from gitflow_ci.history import Build, GitflowBadge


class ActionState(Enum):
    CREATED = 1,
    BEFORE_RUNNING = 2,
    BEFORE_DONE = 3,
    AFTER_RUNNING = 4,
    AFTER_DONE = 5,


class ActionContext(object):
    """
    The mutable state of a single action run, shared by the before and after hooks.
    """
    build: Build = None
    git: GitClient = None
    build_type_action: BuildTypeAction = None
    config: Config = None

    store: BranchRecordStore = None
    env_vars: Dict[str, str] = None

    remote_url: Optional[str] = None

    def __init__(self, build: Build, git: GitClient, build_type_action: BuildTypeAction, config: Config):
        self.build = build
        self.git = git
        self.build_type_action = build_type_action
        self.config = config
        self.env_vars = dict()

    def get_remote_url(self) -> str:
        if self.remote_url is None:
            self.remote_url = self.git.get_remote_url(self.config.remote_name)
        return self.remote_url


class AbstractGitflowAction(ABC):
    """
    Executes the steps of a Gitflow action before and after the main build.

    On creation, the branch record store of the build is resolved: a store already attached to
    the build is used as is, otherwise the store of the latest previous build is cloned and pruned
    of the branches that do not exist anymore on the remote. A new store is created if none of the
    previous builds has one.
    """
    ACTION_NAME: str = None

    MSG_CLEANED_UP_WORKING_DIRECTORY = "Cleaned up working/checkout directory"
    MSG_DELETED_BRANCH = "Deleted branch {branch}"
    MSG_RESULT_TO_UNSTABLE = "Changing result of successful build to unstable, because there are unstable branches: {branches}"

    state: ActionState = ActionState.CREATED
    cause: AbstractGitflowCause = None
    context: ActionContext = None

    def __init__(self, context: ActionContext, cause: AbstractGitflowCause):
        self.context = context
        self.cause = cause
        self.console_logger = cli.ConsoleLogger(self.get_action_name())

        context.git.set_action_name(self.get_action_name())

        build = context.build
        store = BranchRecordStore.resolve_or_inherit(
            build.get_action(const.BRANCH_RECORD_STORE_KEY),
            (previous_build.get_action(const.BRANCH_RECORD_STORE_KEY)
             for previous_build in build.get_previous_builds()),
            lambda branch_name: context.git.get_head_rev(context.get_remote_url(), branch_name)
        )
        build.add_action(const.BRANCH_RECORD_STORE_KEY, store)
        store.dry_run = cause.dry_run
        context.store = store

        self.state = ActionState.BEFORE_RUNNING

    @property
    def build(self) -> Build:
        return self.context.build

    @property
    def git(self) -> GitClient:
        return self.context.git

    @property
    def build_type_action(self) -> BuildTypeAction:
        return self.context.build_type_action

    @property
    def config(self) -> Config:
        return self.context.config

    @property
    def store(self) -> BranchRecordStore:
        return self.context.store

    @property
    def env_vars(self) -> Dict[str, str]:
        """the variables to be added to the environment of the main build"""
        return self.context.env_vars

    def get_action_name(self) -> str:
        return self.ACTION_NAME

    def before_main_build(self):
        if self.state != ActionState.BEFORE_RUNNING:
            raise RuntimeError("illegal state: " + self.state.name + " (before main build)")

        self.build.add_action(const.BADGE_KEY, GitflowBadge(self.get_action_name()))

        self.clean_checkout()

        self.before_main_build_internal()

        # no archives on Dry Run or without a main build
        if self.cause.dry_run or self.cause.omit_main_build:
            self.build_type_action.prevent_archive_publication(self.env_vars)

        self.state = ActionState.BEFORE_DONE

    def after_main_build(self):
        if self.state != ActionState.BEFORE_DONE:
            raise RuntimeError("illegal state: " + self.state.name + " (after main build)")
        self.state = ActionState.AFTER_RUNNING

        self.after_main_build_internal()

        build_result = self.build.get_result_non_null()
        if build_result.is_better_than(BuildResult.UNSTABLE) \
                and self.config.mark_successful_build_unstable_on_broken_branches:
            unstable_records = self.store.get_unstable_records_grouped_by_result()
            if len(unstable_records):
                self.console_logger.println(self.MSG_RESULT_TO_UNSTABLE.format(
                    branches=format_grouped_records(unstable_records)))
                self.build.set_result(BuildResult.UNSTABLE)

        self.state = ActionState.AFTER_DONE

    @abstractmethod
    def before_main_build_internal(self):
        pass

    @abstractmethod
    def after_main_build_internal(self):
        pass

    def is_main_build_successful(self) -> bool:
        return self.build.get_result_non_null() == BuildResult.SUCCESS

    def add_files_to_git_stage(self, files: Iterable[str]):
        for file in files:
            self.git.add(file)

    def clean_checkout(self):
        self.git.clean()
        self.console_logger.println(self.MSG_CLEANED_UP_WORKING_DIRECTORY)

    def checkout_branch(self, branch_name: str, source_branch: str):
        """
        Checks out a local branch at the remote head of the source branch. The project files are
        assumed to be at the last recorded build version of the source branch.
        """
        self.git.checkout_branch(branch_name, self.config.remote_branch_name(source_branch))
        source_record = self.store.get(source_branch)
        self.build_type_action.current_version = \
            source_record.last_build_version if source_record is not None else None

    def update_version_and_commit(self, version: str, message: str):
        self.add_files_to_git_stage(self.build_type_action.update_version(version))
        self.build_type_action.current_version = version
        self.git.commit(message)
        self.console_logger.println(message)

    def push_branch(self, branch_name: str):
        ref_name = const.LOCAL_BRANCH_PREFIX + branch_name
        self.git.push_command().to(self.context.get_remote_url()).ref(ref_name + ':' + ref_name).execute()

    def push_tag(self, tag_name: str):
        ref_name = const.LOCAL_TAG_PREFIX + tag_name
        self.git.push_command().to(self.context.get_remote_url()).ref(ref_name + ':' + ref_name).execute()

    def get_remote_head_rev(self, branch_name: str) -> Optional[str]:
        return self.git.get_head_rev(self.context.get_remote_url(), branch_name)

    def delete_branch(self, branch_name: str):
        # the local branch is missing if the action ran in Dry Run mode before
        if branch_name in self.git.get_branches():
            self.git.delete_branch(branch_name)
        self.console_logger.println(self.MSG_DELETED_BRANCH.format(branch=branch_name))
        self.git.push(self.config.remote_name, ':' + const.LOCAL_BRANCH_PREFIX + branch_name)

        record = self.store.get(branch_name)
        if record is not None:
            self.store.remove(record, RemovalMode.HARD)

    def get_required_record(self, branch_name: str) -> Optional[BranchRecord]:
        """
        Reads the record of a branch that is expected to have been built before, without adding it.
        A missing record is handled according to the missing branch record policy.
        """
        record = self.store.get(branch_name)
        if record is None:
            self.__handle_missing_record(branch_name, _("No record exists for the branch {branch}."))
        return record

    def get_or_add_required_record(self, branch_name: str) -> BranchRecord:
        """
        Returns the record of a branch that is expected to have been built before.
        A missing record is handled according to the missing branch record policy, then added.
        """
        record = self.store.get(branch_name)
        if record is None:
            self.__handle_missing_record(branch_name,
                                         _("No record exists for the branch {branch}, a new one is created."))
            record = self.store.get_or_add(branch_name)
        return record

    def __handle_missing_record(self, branch_name: str, warning: str):
        policy = self.config.missing_branch_record_policy
        if policy == MissingBranchRecordPolicy.FAIL:
            result = Result()
            result.fail(os.EX_DATAERR,
                        self.console_logger.format(_("No record exists for the branch {branch}.")
                                                   .format(branch=repr(branch_name))),
                        _("Build the branch first or change the policy {key}.")
                        .format(key=const.CONFIG_MISSING_BRANCH_RECORD_POLICY))
        elif policy == MissingBranchRecordPolicy.WARN:
            self.console_logger.warn(warning.format(branch=repr(branch_name)))

    def set_branch_env_vars(self, branch_name: str):
        self.env_vars[const.ENV_SIMPLE_BRANCH_NAME] = branch_name
        self.env_vars[const.ENV_REMOTE_BRANCH_NAME] = self.config.remote_branch_name(branch_name)
        self.env_vars[const.ENV_BRANCH_TYPE] = self.config.get_branch_type(branch_name)


def format_grouped_records(grouped_records: Dict[BuildResult, set]) -> str:
    return '{' + ', '.join(result.name + '=[' + ', '.join(sorted(record.branch_name for record in records)) + ']'
                           for result, records in sorted(grouped_records.items(),
                                                         key=lambda item: item[0].value)) + '}'
