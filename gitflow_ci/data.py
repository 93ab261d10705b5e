import copy
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set

from gitflow_ci.const import BuildResult


class RemovalMode(Enum):
    # keeps the record as a tombstone for audit purposes
    SOFT = 1,
    # erases the record
    HARD = 2,


class BranchRecord(object):
    """
    The recorded state of a remote branch: the result and version of its last build and the
    release version last created on it.
    """

    __branch_name: str = None

    last_build_result: Optional[BuildResult] = None
    last_build_version: Optional[str] = None
    last_release_version: Optional[str] = None
    base_release_version: Optional[str] = None
    last_release_version_commit: Optional[str] = None

    removed: bool = False

    def __init__(self, branch_name: str):
        if not branch_name:
            raise ValueError("branch name must not be empty")
        self.__branch_name = branch_name

    @property
    def branch_name(self) -> str:
        return self.__branch_name

    def to_dict(self) -> dict:
        return {
            'branchName': self.branch_name,
            'lastBuildResult': self.last_build_result.name if self.last_build_result is not None else None,
            'lastBuildVersion': self.last_build_version,
            'lastReleaseVersion': self.last_release_version,
            'baseReleaseVersion': self.base_release_version,
            'lastReleaseVersionCommit': self.last_release_version_commit,
            'removed': self.removed,
        }

    @staticmethod
    def from_dict(properties: dict) -> 'BranchRecord':
        record = BranchRecord(properties['branchName'])
        result_name = properties.get('lastBuildResult')
        record.last_build_result = BuildResult[result_name] if result_name is not None else None
        record.last_build_version = properties.get('lastBuildVersion')
        record.last_release_version = properties.get('lastReleaseVersion')
        record.base_release_version = properties.get('baseReleaseVersion')
        record.last_release_version_commit = properties.get('lastReleaseVersionCommit')
        record.removed = bool(properties.get('removed', False))
        return record

    def __repr__(self):
        return self.branch_name + ' (' + (self.last_build_result.name if self.last_build_result else '-') + ')'

    def __str__(self):
        return self.__repr__()


class BranchRecordStore(object):
    """
    The branch records of a build, keyed by branch name.
    Each build owns its own store, stores of previous builds are cloned, never shared.
    """

    dry_run: bool = False

    __records: Dict[str, BranchRecord] = None

    def __init__(self):
        self.__records = dict()

    def get(self, branch_name: str) -> Optional[BranchRecord]:
        record = self.__records.get(branch_name)
        if record is None or record.removed:
            return None
        return record

    def get_or_add(self, branch_name: str) -> BranchRecord:
        record = self.__records.get(branch_name)
        if record is None:
            record = BranchRecord(branch_name)
            self.__records[branch_name] = record
        elif record.removed:
            # a branch with the same name was created again
            record.removed = False
        return record

    def remove(self, record: BranchRecord, mode: RemovalMode):
        if not isinstance(mode, RemovalMode):
            raise TypeError("invalid removal mode: " + repr(mode))
        stored_record = self.__records.get(record.branch_name)
        if stored_record is None:
            return
        if mode == RemovalMode.SOFT:
            stored_record.removed = True
        else:
            del self.__records[record.branch_name]

    def remove_all(self, records: Iterable[BranchRecord], mode: RemovalMode):
        for record in list(records):
            self.remove(record, mode)

    def list_all(self, include_removed: bool = False) -> List[BranchRecord]:
        return [record for record in self.__records.values() if include_removed or not record.removed]

    def get_unstable_records_grouped_by_result(self,
                                               baseline: BuildResult = BuildResult.SUCCESS) \
            -> Dict[BuildResult, Set[BranchRecord]]:
        """
        :param baseline: the passing result, records with a worse result are unstable
        :return: the unstable records grouped by their last build result
        """
        grouped = dict()
        for record in self.list_all():
            result = record.last_build_result
            if result is not None and result.is_worse_than(baseline):
                grouped.setdefault(result, set()).add(record)
        return grouped

    def prune(self, head_rev_resolver: Callable[[str], Optional[str]]) -> List[BranchRecord]:
        """
        Removes the records of all branches that do not exist anymore.
        :param head_rev_resolver: returns the head revision of a branch or None
        :return: the removed records
        """
        obsolete_records = [record for record in self.list_all(include_removed=True)
                            if head_rev_resolver(record.branch_name) is None]
        self.remove_all(obsolete_records, RemovalMode.HARD)
        return obsolete_records

    def merge(self, other: 'BranchRecordStore'):
        """
        Adds copies of the records of another store that are not present in this store.
        """
        for record in other.list_all(include_removed=True):
            if record.branch_name not in self.__records:
                self.__records[record.branch_name] = copy.deepcopy(record)

    def clone(self) -> 'BranchRecordStore':
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        return {
            'dryRun': self.dry_run,
            'branches': [record.to_dict() for record in self.__records.values()],
        }

    @staticmethod
    def from_dict(properties: dict) -> 'BranchRecordStore':
        store = BranchRecordStore()
        store.dry_run = bool(properties.get('dryRun', False))
        for record_properties in properties.get('branches') or []:
            record = BranchRecord.from_dict(record_properties)
            store.__records[record.branch_name] = record
        return store

    @staticmethod
    def resolve_or_inherit(current: Optional['BranchRecordStore'],
                           previous_stores: Iterable[Optional['BranchRecordStore']],
                           head_rev_resolver: Callable[[str], Optional[str]]) -> 'BranchRecordStore':
        """
        Determines the store for a build.
        :param current: the store already attached to the build, returned as is
        :param previous_stores: the stores of the previous builds, latest first. The first one is cloned
        and pruned of the records of branches that do not exist anymore.
        :param head_rev_resolver: returns the head revision of a remote branch or None
        :return: the store to be used, a new empty one if no store was found
        """
        if current is not None:
            return current

        for previous_store in previous_stores:
            if previous_store is not None:
                store = previous_store.clone()
                store.prune(head_rev_resolver)
                return store

        return BranchRecordStore()

    def __len__(self):
        return len(self.list_all())
