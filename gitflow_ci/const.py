import os
from configparser import ConfigParser
from enum import Enum

NAME = 'gitflow-ci'
AUTHOR = 'gitflow-ci'

with open(os.path.abspath(os.path.join(os.path.dirname(__file__), 'config.ini')), 'r') as __config_file:
    __config = ConfigParser()
    __config.read_file(f=__config_file)
    VERSION = __config.get(section=__config.default_section, option='version', fallback='0.0.0-dev')


class BuildResult(Enum):
    # ordinals, lower is better
    SUCCESS = 0
    UNSTABLE = 1
    FAILURE = 2
    NOT_BUILT = 3
    ABORTED = 4

    def is_better_than(self, other: 'BuildResult') -> bool:
        return self.value < other.value

    def is_worse_than(self, other: 'BuildResult') -> bool:
        return self.value > other.value


class MissingBranchRecordPolicy(Enum):
    # create the record silently
    CREATE = 1,
    # create the record and print a warning
    WARN = 2,
    # refuse to run the action
    FAIL = 3,


MISSING_BRANCH_RECORD_POLICIES = {
    'create': MissingBranchRecordPolicy.CREATE,
    'warn': MissingBranchRecordPolicy.WARN,
    'fail': MissingBranchRecordPolicy.FAIL,
}

BUILD_TYPE_PROPERTIES = 'properties'
BUILD_TYPE_COMMAND = 'command'

BUILD_TYPES = [
    BUILD_TYPE_PROPERTIES,
    BUILD_TYPE_COMMAND,
]

# config keys

CONFIG_REMOTE_NAME = 'remoteName'

CONFIG_MASTER_BRANCH = 'masterBranch'
CONFIG_DEVELOP_BRANCH = 'developBranch'

CONFIG_RELEASE_BRANCH_PREFIX = 'releaseBranchPrefix'
CONFIG_HOTFIX_BRANCH_PREFIX = 'hotfixBranchPrefix'
CONFIG_FEATURE_BRANCH_PREFIX = 'featureBranchPrefix'

CONFIG_VERSION_TAG_PREFIX = 'versionTagPrefix'
CONFIG_SNAPSHOT_QUALIFIER = 'snapshotQualifier'

CONFIG_MARK_UNSTABLE_ON_BROKEN_BRANCHES = 'markSuccessfulBuildUnstableOnBrokenBranches'
CONFIG_MISSING_BRANCH_RECORD_POLICY = 'missingBranchRecordPolicy'

CONFIG_BUILD_TYPE = 'buildType'
CONFIG_PROJECT_PROPERTY_FILE = 'propertyFile'
CONFIG_VERSION_PROPERTY = 'versionProperty'
CONFIG_ON_VERSION_CHANGE = 'onVersionChange'

CONFIG_BUILD = 'build'
CONFIG_HISTORY_FILE = 'historyFile'
CONFIG_MAX_BUILDS = 'maxBuilds'

# config defaults

DEFAULT_CONFIG_FILE_EXTENSIONS = ['yml', 'json']
DEFAULT_CONFIGURATION_FILE_NAMES = ['.gitflow-ci.' + ext for ext in DEFAULT_CONFIG_FILE_EXTENSIONS]
DEFAULT_CONFIG_FILE = DEFAULT_CONFIGURATION_FILE_NAMES[0]

DEFAULT_REMOTE_NAME = 'origin'

DEFAULT_MASTER_BRANCH = 'master'
DEFAULT_DEVELOP_BRANCH = 'develop'

DEFAULT_RELEASE_BRANCH_PREFIX = 'release/'
DEFAULT_HOTFIX_BRANCH_PREFIX = 'hotfix/'
DEFAULT_FEATURE_BRANCH_PREFIX = 'feature/'

DEFAULT_VERSION_TAG_PREFIX = 'version/'
DEFAULT_SNAPSHOT_QUALIFIER = 'SNAPSHOT'

DEFAULT_MISSING_BRANCH_RECORD_POLICY = 'warn'

DEFAULT_BUILD_TYPE = BUILD_TYPE_PROPERTIES
DEFAULT_PROJECT_PROPERTY_FILE = 'project.yml'
DEFAULT_VERSION_PROPERTY = 'version'

DEFAULT_HISTORY_FILE_NAME = 'history.yml'
DEFAULT_MAX_BUILDS = 100

# prefixes with a trailing slash for proper prefix matching
LOCAL_BRANCH_PREFIX = 'refs/heads/'
LOCAL_TAG_PREFIX = 'refs/tags/'

# branch types as exposed in GIT_BRANCH_TYPE
BRANCH_TYPE_MASTER = 'master'
BRANCH_TYPE_DEVELOP = 'develop'
BRANCH_TYPE_RELEASE = 'release'
BRANCH_TYPE_HOTFIX = 'hotfix'
BRANCH_TYPE_FEATURE = 'feature'
BRANCH_TYPE_UNKNOWN = 'unknown'

# build environment variables

ENV_SIMPLE_BRANCH_NAME = 'GIT_SIMPLE_BRANCH_NAME'
ENV_REMOTE_BRANCH_NAME = 'GIT_REMOTE_BRANCH_NAME'
ENV_BRANCH_TYPE = 'GIT_BRANCH_TYPE'

ENV_SKIP_ARCHIVE = 'GITFLOW_SKIP_ARCHIVE'
ENV_SKIP_PUBLICATION = 'GITFLOW_SKIP_PUBLICATION'

ENV_OLD_VERSION = 'OLD_VERSION'
ENV_NEW_VERSION = 'NEW_VERSION'

# keys of the objects attached to a build
BRANCH_RECORD_STORE_KEY = 'gitflowPluginData'
BADGE_KEY = 'gitflowBadge'

ERROR_VERBOSITY = 0
INFO_VERBOSITY = 1
DEBUG_VERBOSITY = 2
TRACE_VERBOSITY = 3

OS_IS_POSIX = os.name == 'posix'

