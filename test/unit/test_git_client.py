import os
import subprocess

import pytest

from gitflow_ci.common import GitFlowException
from gitflow_ci.const import BuildResult
from gitflow_ci.data import BranchRecordStore
from gitflow_ci.git import RepoGitClient
from gitflow_ci.repotools import RepoContext


def git(*args):
    subprocess.check_call(['git', '-c', 'user.name=gitflow-ci', '-c', 'user.email=gitflow-ci@localhost', *args],
                          stdout=subprocess.DEVNULL)


@pytest.fixture
def origin_url(tmp_path) -> str:
    origin = os.path.join(str(tmp_path), 'origin.git')
    git('init', '-q', '--bare', origin)
    return 'file://' + origin


@pytest.fixture
def client(tmp_path) -> RepoGitClient:
    clone = os.path.join(str(tmp_path), 'clone')
    git('init', '-q', clone)
    repo = RepoContext()
    repo.dir = clone
    return RepoGitClient(repo)


def unreachable_url(tmp_path) -> str:
    return 'file://' + os.path.join(str(tmp_path), 'nonexistent', 'origin.git')


def test_head_rev_of_missing_branch(client, origin_url):
    assert client.get_head_rev(origin_url, 'develop') is None


def test_head_rev(client, origin_url):
    git('-C', client.repo.dir, 'commit', '-q', '--allow-empty', '-m', 'initial commit')
    git('-C', client.repo.dir, 'push', '-q', origin_url, 'HEAD:refs/heads/develop')
    head = subprocess.check_output(['git', '-C', client.repo.dir, 'rev-parse', 'HEAD']).decode('utf-8').strip()

    assert client.get_head_rev(origin_url, 'develop') == head
    assert client.get_head_rev(origin_url, 'master') is None


def test_head_rev_of_unreachable_remote(client, tmp_path):
    with pytest.raises(GitFlowException):
        client.get_head_rev(unreachable_url(tmp_path), 'develop')


def test_unreachable_remote_keeps_inherited_records(client, tmp_path):
    previous_store = BranchRecordStore()
    previous_store.get_or_add('develop').last_build_result = BuildResult.SUCCESS
    previous_store.get_or_add('master').last_build_result = BuildResult.SUCCESS
    url = unreachable_url(tmp_path)

    with pytest.raises(GitFlowException):
        BranchRecordStore.resolve_or_inherit(None, [previous_store],
                                             lambda branch_name: client.get_head_rev(url, branch_name))

    assert len(previous_store) == 2
