import os

import pytest

from gitflow_ci import const
from gitflow_ci.buildtype import expand_vars
from gitflow_ci.common import GitFlowException, Result
from gitflow_ci.const import MissingBranchRecordPolicy
from gitflow_ci.context import Config, Context


def apply_config(properties: dict) -> Config:
    config = Config()
    Context.apply_config(config, properties, '/repo', Result())
    return config


def test_defaults():
    config = apply_config({})

    assert config.remote_name == 'origin'
    assert config.master_branch == 'master'
    assert config.develop_branch == 'develop'
    assert config.release_branch_prefix == 'release/'
    assert config.version_tag_prefix == 'version/'
    assert config.missing_branch_record_policy == MissingBranchRecordPolicy.WARN
    assert not config.mark_successful_build_unstable_on_broken_branches
    assert config.build_type == const.BUILD_TYPE_PROPERTIES
    assert config.property_file == os.path.join('/repo', 'project.yml')
    assert config.build_commands == []
    assert config.history_file is None
    assert config.max_builds == const.DEFAULT_MAX_BUILDS


def test_custom_values():
    config = apply_config({
        const.CONFIG_DEVELOP_BRANCH: 'dev',
        const.CONFIG_VERSION_TAG_PREFIX: 'v',
        const.CONFIG_MARK_UNSTABLE_ON_BROKEN_BRANCHES: 'true',
        const.CONFIG_MISSING_BRANCH_RECORD_POLICY: 'fail',
        const.CONFIG_BUILD: [['make', 'all']],
        const.CONFIG_HISTORY_FILE: 'ci/history.json',
        const.CONFIG_MAX_BUILDS: 20,
    })

    assert config.develop_branch == 'dev'
    assert config.version_tag_prefix == 'v'
    assert config.mark_successful_build_unstable_on_broken_branches
    assert config.missing_branch_record_policy == MissingBranchRecordPolicy.FAIL
    assert config.build_commands == [['make', 'all']]
    assert config.history_file == os.path.join('/repo', 'ci/history.json')
    assert config.max_builds == 20


@pytest.mark.parametrize('properties', [
    {const.CONFIG_MISSING_BRANCH_RECORD_POLICY: 'ignore'},
    {const.CONFIG_BUILD_TYPE: 'maven'},
    {const.CONFIG_MARK_UNSTABLE_ON_BROKEN_BRANCHES: 'maybe'},
    {const.CONFIG_HOTFIX_BRANCH_PREFIX: 'release/'},
    {const.CONFIG_FEATURE_BRANCH_PREFIX: ''},
    {const.CONFIG_BUILD: ['make']},
    {const.CONFIG_MAX_BUILDS: 0},
    {const.CONFIG_MAX_BUILDS: 'many'},
])
def test_invalid_values(properties):
    with pytest.raises(GitFlowException) as e:
        apply_config(properties)
    assert e.value.result.errors[0].exit_code == os.EX_DATAERR


def test_branch_types():
    config = Config()

    assert config.get_branch_type('master') == const.BRANCH_TYPE_MASTER
    assert config.get_branch_type('develop') == const.BRANCH_TYPE_DEVELOP
    assert config.get_branch_type('release/1.0') == const.BRANCH_TYPE_RELEASE
    assert config.get_branch_type('hotfix/1.0') == const.BRANCH_TYPE_HOTFIX
    assert config.get_branch_type('feature/login') == const.BRANCH_TYPE_FEATURE
    assert config.get_branch_type('wip') == const.BRANCH_TYPE_UNKNOWN
    assert config.remote_branch_name('develop') == 'origin/develop'


def test_expand_vars():
    variables = {'NEW_VERSION': '1.0.0', 'X': 'x'}

    assert expand_vars('$NEW_VERSION', variables) == '1.0.0'
    assert expand_vars('v${NEW_VERSION}-$X', variables) == 'v1.0.0-x'
    assert expand_vars('\\$NEW_VERSION', variables) == '$NEW_VERSION'
