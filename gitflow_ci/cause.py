"""
The causes of Gitflow builds: immutable descriptions of why an action runs and with which
branches and versions.
"""
from typing import Optional

from gitflow_ci import const, version
from gitflow_ci.data import BranchRecord


class AbstractGitflowCause(object):

    def __init__(self, dry_run: bool = False, omit_main_build: bool = False):
        self.__dry_run = dry_run
        self.__omit_main_build = omit_main_build

    @property
    def dry_run(self) -> bool:
        return self.__dry_run

    @property
    def omit_main_build(self) -> bool:
        return self.__omit_main_build


class StartReleaseCause(AbstractGitflowCause):

    def __init__(self, release_version: str,
                 release_next_development_version: Optional[str] = None,
                 next_development_version: Optional[str] = None,
                 dry_run: bool = False, omit_main_build: bool = False,
                 snapshot_qualifier: str = const.DEFAULT_SNAPSHOT_QUALIFIER):
        super().__init__(dry_run, omit_main_build)
        self.__release_version = release_version
        self.__release_next_development_version = release_next_development_version \
            or version.next_patch_development_version(release_version, snapshot_qualifier)
        self.__next_development_version = next_development_version \
            or version.next_minor_development_version(release_version, snapshot_qualifier)

    @property
    def release_version(self) -> str:
        return self.__release_version

    @property
    def release_next_development_version(self) -> str:
        """the development version for the fixes on the release branch"""
        return self.__release_next_development_version

    @property
    def next_development_version(self) -> str:
        """the development version for the next release on the develop branch"""
        return self.__next_development_version


class TestReleaseCause(AbstractGitflowCause):
    # not a test class
    __test__ = False

    def __init__(self, release_branch: str,
                 patch_release_version: str,
                 patch_release_next_development_version: Optional[str] = None,
                 dry_run: bool = False, omit_main_build: bool = False,
                 snapshot_qualifier: str = const.DEFAULT_SNAPSHOT_QUALIFIER):
        super().__init__(dry_run, omit_main_build)
        self.__release_branch = release_branch
        self.__patch_release_version = patch_release_version
        self.__patch_release_next_development_version = patch_release_next_development_version \
            or version.next_patch_development_version(patch_release_version, snapshot_qualifier)

    @staticmethod
    def for_release_branch(release_branch_record: BranchRecord,
                           dry_run: bool = False, omit_main_build: bool = False,
                           snapshot_qualifier: str = const.DEFAULT_SNAPSHOT_QUALIFIER) -> 'TestReleaseCause':
        """
        Derives the versions from the last build of the release branch: '1.0.1-SNAPSHOT' is tested as '1.0.1'.
        """
        if release_branch_record.last_build_version is None:
            raise ValueError("no build version recorded for " + release_branch_record.branch_name)
        return TestReleaseCause(release_branch_record.branch_name,
                                version.release_version_of(release_branch_record.last_build_version),
                                None, dry_run, omit_main_build, snapshot_qualifier)

    @property
    def release_branch(self) -> str:
        return self.__release_branch

    @property
    def patch_release_version(self) -> str:
        return self.__patch_release_version

    @property
    def patch_release_next_development_version(self) -> str:
        return self.__patch_release_next_development_version


class PublishReleaseCause(AbstractGitflowCause):

    def __init__(self, release_branch_record: BranchRecord,
                 dry_run: bool = False, omit_main_build: bool = False):
        super().__init__(dry_run, omit_main_build)
        self.__release_branch = release_branch_record.branch_name
        self.__last_patch_release_version = release_branch_record.last_release_version
        self.__last_patch_release_commit = release_branch_record.last_release_version_commit
        self.__base_release_version = release_branch_record.base_release_version

    @property
    def release_branch(self) -> str:
        return self.__release_branch

    @property
    def last_patch_release_version(self) -> str:
        return self.__last_patch_release_version

    @property
    def last_patch_release_commit(self) -> str:
        return self.__last_patch_release_commit

    @property
    def base_release_version(self) -> str:
        return self.__base_release_version


class FinishReleaseCause(AbstractGitflowCause):

    def __init__(self, release_branch: str, dry_run: bool = False, omit_main_build: bool = True):
        super().__init__(dry_run, omit_main_build)
        self.__release_branch = release_branch

    @property
    def release_branch(self) -> str:
        return self.__release_branch


class StartHotfixCause(AbstractGitflowCause):

    def __init__(self, master_branch_record: BranchRecord,
                 dry_run: bool = False, omit_main_build: bool = True,
                 snapshot_qualifier: str = const.DEFAULT_SNAPSHOT_QUALIFIER):
        super().__init__(dry_run, omit_main_build)
        if master_branch_record.base_release_version is None or master_branch_record.last_release_version is None:
            raise ValueError("no release recorded for " + master_branch_record.branch_name)
        self.__base_branch = master_branch_record.branch_name
        self.__base_release_version = master_branch_record.base_release_version
        self.__last_release_version = master_branch_record.last_release_version
        self.__next_patch_development_version = version.next_patch_development_version(
            master_branch_record.last_release_version, snapshot_qualifier)

    @property
    def base_branch(self) -> str:
        return self.__base_branch

    @property
    def hotfix_version(self) -> str:
        """the suffix of the hotfix branch"""
        return self.__base_release_version

    @property
    def base_release_version(self) -> str:
        return self.__base_release_version

    @property
    def last_release_version(self) -> str:
        return self.__last_release_version

    @property
    def next_patch_development_version(self) -> str:
        return self.__next_patch_development_version


class FinishHotfixCause(AbstractGitflowCause):

    def __init__(self, hotfix_branch: str, dry_run: bool = False, omit_main_build: bool = True):
        super().__init__(dry_run, omit_main_build)
        self.__hotfix_branch = hotfix_branch

    @property
    def hotfix_branch(self) -> str:
        return self.__hotfix_branch


class StartFeatureCause(AbstractGitflowCause):

    def __init__(self, feature_name: str, dry_run: bool = False, omit_main_build: bool = False):
        super().__init__(dry_run, omit_main_build)
        self.__feature_name = feature_name

    @property
    def feature_name(self) -> str:
        return self.__feature_name


class FinishFeatureCause(AbstractGitflowCause):

    def __init__(self, feature_branch: str, dry_run: bool = False, omit_main_build: bool = False):
        super().__init__(dry_run, omit_main_build)
        self.__feature_branch = feature_branch

    @property
    def feature_branch(self) -> str:
        return self.__feature_branch
