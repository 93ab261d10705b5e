import os

import pytest

from gitflow_ci import const
from gitflow_ci.const import BuildResult
from gitflow_ci.data import BranchRecordStore
from gitflow_ci.history import BuildHistory, GitflowBadge


def create_history(file: str) -> BuildHistory:
    history = BuildHistory(file)

    first_build = history.new_build()
    store = BranchRecordStore()
    record = store.get_or_add('release/1.0.0')
    record.last_build_result = BuildResult.SUCCESS
    record.last_build_version = '1.0.1-SNAPSHOT'
    record.last_release_version = '1.0.0'
    first_build.add_action(const.BRANCH_RECORD_STORE_KEY, store)
    first_build.add_action(const.BADGE_KEY, GitflowBadge("Start Release"))
    first_build.set_result(BuildResult.SUCCESS)

    second_build = history.new_build()
    second_build.set_result(BuildResult.FAILURE)

    return history


def test_build_numbers():
    history = create_history(None)
    assert [build.number for build in history.builds] == [1, 2]
    assert history.last_build.previous_build is history.builds[0]
    assert list(history.last_build.get_previous_builds()) == [history.builds[0]]


def test_last_branch_record_store():
    history = create_history(None)
    assert history.get_last_branch_record_store() is history.builds[0].get_action(const.BRANCH_RECORD_STORE_KEY)
    assert BuildHistory().get_last_branch_record_store() is None


def test_result_non_null():
    history = BuildHistory()
    build = history.new_build()
    assert build.result is None
    assert build.get_result_non_null() == BuildResult.SUCCESS


@pytest.mark.parametrize('file_name', ['history.yml', 'history.json'])
def test_save_and_load(tmp_path, file_name):
    file = os.path.join(str(tmp_path), file_name)
    create_history(file).save()

    history = BuildHistory.load(file)

    assert [build.number for build in history.builds] == [1, 2]
    assert history.builds[1].previous_build is history.builds[0]
    assert history.builds[1].result == BuildResult.FAILURE
    assert history.builds[0].get_action(const.BADGE_KEY).action_name == "Start Release"
    assert history.builds[0].timestamp.tzinfo is not None

    record = history.get_last_branch_record_store().get('release/1.0.0')
    assert record.last_build_result == BuildResult.SUCCESS
    assert record.last_build_version == '1.0.1-SNAPSHOT'
    assert record.last_release_version == '1.0.0'

    assert not os.path.exists(file + '~')


def test_load_missing_file(tmp_path):
    history = BuildHistory.load(os.path.join(str(tmp_path), 'history.yml'))
    assert history.builds == []
    assert history.last_build is None


def test_save_without_file():
    with pytest.raises(ValueError):
        create_history(None).save()


def test_discard_old_builds():
    history = BuildHistory()
    for index in range(5):
        history.new_build().add_action(const.BRANCH_RECORD_STORE_KEY, BranchRecordStore())

    discarded_builds = history.discard_old_builds(3)

    assert [build.number for build in discarded_builds] == [1, 2]
    assert [build.number for build in history.builds] == [3, 4, 5]
    assert history.builds[0].previous_build is None
    assert list(history.last_build.get_previous_builds()) == [history.builds[1], history.builds[0]]
    assert history.new_build().number == 6


def test_discard_old_builds_keeps_last_store():
    history = create_history(None)
    store = history.get_last_branch_record_store()
    history.new_build()

    history.discard_old_builds(1)

    assert [build.number for build in history.builds] == [1, 3]
    assert history.get_last_branch_record_store() is store


def test_discard_nothing():
    history = create_history(None)
    assert history.discard_old_builds(2) == []
    assert [build.number for build in history.builds] == [1, 2]
