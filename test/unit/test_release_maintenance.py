import pytest

from gitflow_ci.actions import ActionType
from gitflow_ci.cause import TestReleaseCause, PublishReleaseCause
from gitflow_ci.const import BuildResult
from gitflow_ci.data import BranchRecord
from action_base import add_previous_store

ORIGIN = 'file:///srv/git/origin.git'


def released_branch_record() -> BranchRecord:
    record = BranchRecord('release/1.0.0')
    record.last_build_result = BuildResult.SUCCESS
    record.last_build_version = '1.0.2-SNAPSHOT'
    record.last_release_version = '1.0.1'
    record.base_release_version = '1.0.0'
    record.last_release_version_commit = 'c0ffee'
    return record


@pytest.fixture
def release_history(history, git):
    add_previous_store(history, ('release/1.0.0', BuildResult.SUCCESS, '1.0.1-SNAPSHOT'))
    git.remote_heads['release/1.0.0'] = 'abc'
    return history


def test_test_release_cause_from_record(release_history):
    record = release_history.get_last_branch_record_store().get('release/1.0.0')
    cause = TestReleaseCause.for_release_branch(record)

    assert cause.release_branch == 'release/1.0.0'
    assert cause.patch_release_version == '1.0.1'
    assert cause.patch_release_next_development_version == '1.0.2-SNAPSHOT'


def test_test_release(release_history, action_factory, git, build_type):
    action = action_factory(ActionType.TEST_RELEASE, TestReleaseCause('release/1.0.0', '1.0.1'))
    action.before_main_build()

    assert git.calls == [
        ('clean',),
        ('checkout_branch', 'release/1.0.0', 'origin/release/1.0.0'),
        ('add', 'project.yml'),
        ('commit', "Updated project files to patch release version 1.0.1"),
    ]
    git.calls.clear()

    action.build.set_result(BuildResult.SUCCESS)
    action.after_main_build()

    assert git.calls == [
        ('push', ORIGIN, 'refs/heads/release/1.0.0:refs/heads/release/1.0.0'),
        ('tag', 'version/1.0.1', "Created patch release version tag version/1.0.1"),
        ('push', ORIGIN, 'refs/tags/version/1.0.1:refs/tags/version/1.0.1'),
        ('add', 'project.yml'),
        ('commit', "Updated project files to fixes development version 1.0.2-SNAPSHOT"),
        ('push', ORIGIN, 'refs/heads/release/1.0.0:refs/heads/release/1.0.0'),
    ]
    assert build_type.versions == ['1.0.1', '1.0.2-SNAPSHOT']

    record = action.store.get('release/1.0.0')
    assert record.last_build_result == BuildResult.SUCCESS
    assert record.last_build_version == '1.0.2-SNAPSHOT'
    assert record.last_release_version == '1.0.1'
    assert record.last_release_version_commit == 'rev1'


def test_test_release_failed(release_history, action_factory, git):
    action = action_factory(ActionType.TEST_RELEASE, TestReleaseCause('release/1.0.0', '1.0.1'))
    action.before_main_build()
    git.calls.clear()

    action.build.set_result(BuildResult.FAILURE)
    action.after_main_build()

    assert git.calls == []
    record = action.store.get('release/1.0.0')
    assert record.last_build_result == BuildResult.FAILURE
    assert record.last_build_version == '1.0.1'
    assert record.last_release_version is None


def test_publish_release(action_factory, git):
    action = action_factory(ActionType.PUBLISH_RELEASE, PublishReleaseCause(released_branch_record()))
    action.before_main_build()

    assert git.calls == [
        ('clean',),
        ('checkout_branch', 'master', 'origin/master'),
        ('merge', 'c0ffee', "Merged release version 1.0.1 from release/1.0.0 into master"),
    ]
    git.calls.clear()

    action.build.set_result(BuildResult.SUCCESS)
    action.after_main_build()

    assert git.calls == [
        ('push', ORIGIN, 'refs/heads/master:refs/heads/master'),
    ]
    record = action.store.get('master')
    assert record.last_build_result == BuildResult.SUCCESS
    assert record.last_build_version == '1.0.1'
    assert record.last_release_version == '1.0.1'
    assert record.base_release_version == '1.0.0'
    assert record.last_release_version_commit == 'rev1'


def test_publish_release_failed(action_factory, git):
    action = action_factory(ActionType.PUBLISH_RELEASE, PublishReleaseCause(released_branch_record()))
    action.before_main_build()
    git.calls.clear()

    action.build.set_result(BuildResult.UNSTABLE)
    action.after_main_build()

    assert git.calls == []
    record = action.store.get('master')
    assert record.last_build_result == BuildResult.UNSTABLE
    assert record.last_release_version is None
