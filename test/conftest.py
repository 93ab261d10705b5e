from typing import List, Optional, Set

import pytest

from gitflow_ci import const
from gitflow_ci.actions import ActionType, ActionContext, create_action
from gitflow_ci.buildtype import BuildTypeAction
from gitflow_ci.context import Config
from gitflow_ci.git import GitClient
from gitflow_ci.history import BuildHistory

ORIGIN_URL = 'file:///srv/git/origin.git'


class RecordingGitClient(GitClient):
    """
    Records the calls and simulates the branches of the working copy and the remote.
    """
    action_name: str = None
    calls: List[tuple] = None
    branches: Set[str] = None
    remote_heads: dict = None
    commit_count: int = 0

    def __init__(self, remote_heads: dict = None, branches: Set[str] = None):
        self.calls = list()
        self.remote_heads = dict(remote_heads or {})
        self.branches = set(branches or ())

    def set_action_name(self, action_name: str):
        self.action_name = action_name

    def checkout_branch(self, branch_name: str, from_ref: str):
        self.calls.append(('checkout_branch', branch_name, from_ref))
        self.branches.add(branch_name)

    def add(self, path: str):
        self.calls.append(('add', path))

    def commit(self, message: str):
        self.commit_count += 1
        self.calls.append(('commit', message))

    def tag(self, tag_name: str, message: str):
        self.calls.append(('tag', tag_name, message))

    def push(self, remote: str, refspec: str):
        self.calls.append(('push', remote, refspec))
        source, target = refspec.split(':')
        if target.startswith(const.LOCAL_BRANCH_PREFIX):
            branch_name = target[len(const.LOCAL_BRANCH_PREFIX):]
            if len(source):
                self.remote_heads[branch_name] = 'rev' + str(self.commit_count)
            else:
                self.remote_heads.pop(branch_name, None)

    def merge(self, ref: str, message: str):
        self.commit_count += 1
        self.calls.append(('merge', ref, message))

    def clean(self):
        self.calls.append(('clean',))

    def delete_branch(self, branch_name: str):
        self.calls.append(('delete_branch', branch_name))
        self.branches.discard(branch_name)

    def get_branches(self) -> Set[str]:
        return set(self.branches)

    def get_head_rev(self, url: str, branch_name: str) -> Optional[str]:
        return self.remote_heads.get(branch_name)

    def get_remote_url(self, remote_name: str) -> str:
        return ORIGIN_URL

    def calls_of(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]


class RecordingBuildType(BuildTypeAction):
    versions: List[str] = None
    # the current version at each update
    old_versions: List[Optional[str]] = None
    files: List[str] = None

    def __init__(self, files: List[str] = None):
        super().__init__(None, 'test')
        self.versions = list()
        self.old_versions = list()
        self.files = files if files is not None else ['project.yml']

    def update_version(self, version: str) -> List[str]:
        self.old_versions.append(self.current_version)
        self.versions.append(version)
        return list(self.files)


@pytest.fixture
def git() -> RecordingGitClient:
    return RecordingGitClient()


@pytest.fixture
def build_type() -> RecordingBuildType:
    return RecordingBuildType()


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def history() -> BuildHistory:
    return BuildHistory()


@pytest.fixture
def action_factory(history, git, build_type, config):
    """
    Creates an action for a new build of the history.
    """

    def create(action_type: ActionType, cause):
        build = history.new_build()
        return create_action(action_type, ActionContext(build, git, build_type, config), cause)

    return create
