import pytest

from gitflow_ci.const import BuildResult
from gitflow_ci.data import BranchRecordStore, BranchRecord, RemovalMode


def create_store(*results) -> BranchRecordStore:
    store = BranchRecordStore()
    for branch_name, result in results:
        store.get_or_add(branch_name).last_build_result = result
    return store


def test_get_or_add_is_idempotent():
    store = BranchRecordStore()
    record = store.get_or_add('develop')
    assert store.get_or_add('develop') is record
    assert len(store) == 1


def test_get_missing():
    store = BranchRecordStore()
    assert store.get('develop') is None
    assert len(store) == 0


def test_new_record_is_zero_valued():
    record = BranchRecordStore().get_or_add('release/1.0')
    assert record.branch_name == 'release/1.0'
    assert record.last_build_result is None
    assert record.last_build_version is None
    assert record.last_release_version is None
    assert record.last_release_version_commit is None


def test_empty_branch_name():
    with pytest.raises(ValueError):
        BranchRecord('')


def test_soft_removal_keeps_tombstone():
    store = create_store(('feature/a', BuildResult.FAILURE))
    store.remove(store.get('feature/a'), RemovalMode.SOFT)

    assert store.get('feature/a') is None
    assert store.list_all() == []
    assert [record.branch_name for record in store.list_all(include_removed=True)] == ['feature/a']
    assert store.get_unstable_records_grouped_by_result() == {}


def test_get_or_add_revives_tombstone():
    store = create_store(('feature/a', BuildResult.FAILURE))
    store.remove(store.get('feature/a'), RemovalMode.SOFT)

    record = store.get_or_add('feature/a')
    assert not record.removed
    assert record.last_build_result == BuildResult.FAILURE


def test_hard_removal():
    store = create_store(('feature/a', BuildResult.SUCCESS), ('feature/b', BuildResult.SUCCESS))
    store.remove_all([store.get('feature/a')], RemovalMode.HARD)

    assert store.get('feature/a') is None
    assert [record.branch_name for record in store.list_all(include_removed=True)] == ['feature/b']


def test_removal_requires_mode():
    store = create_store(('feature/a', BuildResult.SUCCESS))
    with pytest.raises(TypeError):
        store.remove(store.get('feature/a'), True)


def test_unstable_grouping():
    store = create_store(('develop', BuildResult.SUCCESS),
                         ('feature/a', BuildResult.UNSTABLE),
                         ('feature/b', BuildResult.FAILURE),
                         ('feature/c', BuildResult.FAILURE),
                         ('feature/d', None))

    grouped = store.get_unstable_records_grouped_by_result()

    assert set(grouped.keys()) == {BuildResult.UNSTABLE, BuildResult.FAILURE}
    assert {record.branch_name for record in grouped[BuildResult.UNSTABLE]} == {'feature/a'}
    assert {record.branch_name for record in grouped[BuildResult.FAILURE]} == {'feature/b', 'feature/c'}


def test_unstable_grouping_with_baseline():
    store = create_store(('feature/a', BuildResult.UNSTABLE), ('feature/b', BuildResult.FAILURE))

    grouped = store.get_unstable_records_grouped_by_result(BuildResult.UNSTABLE)

    assert list(grouped.keys()) == [BuildResult.FAILURE]


def test_clone_is_independent():
    store = create_store(('develop', BuildResult.SUCCESS))
    store.get('develop').last_build_version = '1.1.0-SNAPSHOT'

    clone = store.clone()
    clone.get('develop').last_build_result = BuildResult.FAILURE
    clone.get('develop').last_build_version = '1.2.0-SNAPSHOT'
    clone.get_or_add('feature/a')

    assert store.get('develop').last_build_result == BuildResult.SUCCESS
    assert store.get('develop').last_build_version == '1.1.0-SNAPSHOT'
    assert store.get('feature/a') is None


def test_prune():
    store = create_store(('develop', BuildResult.SUCCESS),
                         ('feature/gone', BuildResult.FAILURE),
                         ('release/1.0', BuildResult.SUCCESS))
    head_revs = {'develop': 'abc', 'release/1.0': 'def'}

    pruned = store.prune(head_revs.get)

    assert [record.branch_name for record in pruned] == ['feature/gone']
    assert all(head_revs.get(record.branch_name) is not None for record in store.list_all(include_removed=True))


def test_merge_keeps_own_records():
    store = create_store(('develop', BuildResult.SUCCESS))
    other = create_store(('develop', BuildResult.FAILURE), ('master', BuildResult.SUCCESS))

    store.merge(other)

    assert store.get('develop').last_build_result == BuildResult.SUCCESS
    assert store.get('master').last_build_result == BuildResult.SUCCESS
    assert store.get('master') is not other.get('master')


def test_resolve_or_inherit_keeps_current():
    current = BranchRecordStore()
    assert BranchRecordStore.resolve_or_inherit(current, [create_store(('develop', BuildResult.SUCCESS))],
                                                lambda branch_name: 'abc') is current


def test_resolve_or_inherit_clones_latest_previous():
    latest = create_store(('develop', BuildResult.SUCCESS), ('feature/gone', BuildResult.SUCCESS))
    older = create_store(('master', BuildResult.SUCCESS))

    store = BranchRecordStore.resolve_or_inherit(None, [None, latest, older],
                                                 lambda branch_name: 'abc' if branch_name == 'develop' else None)

    assert store is not latest
    assert [record.branch_name for record in store.list_all()] == ['develop']
    # the previous store is not pruned
    assert latest.get('feature/gone') is not None


def test_resolve_or_inherit_creates_new():
    store = BranchRecordStore.resolve_or_inherit(None, [None, None], lambda branch_name: None)
    assert len(store) == 0


def test_dict_conversion():
    store = create_store(('release/1.0', BuildResult.SUCCESS))
    store.dry_run = True
    record = store.get('release/1.0')
    record.last_release_version = '1.0.0'
    record.last_release_version_commit = 'abc'

    restored = BranchRecordStore.from_dict(store.to_dict())

    assert restored.dry_run
    assert restored.get('release/1.0').last_build_result == BuildResult.SUCCESS
    assert restored.get('release/1.0').last_release_version == '1.0.0'
    assert restored.get('release/1.0').last_release_version_commit == 'abc'
