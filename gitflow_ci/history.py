import datetime
import os
from typing import Dict, Generator, List, Optional

import pytz

from gitflow_ci import const, filesystem
from gitflow_ci.const import BuildResult
from gitflow_ci.data import BranchRecordStore
from gitflow_ci.properties import PropertyIO


class GitflowBadge(object):
    """
    Marks a build as the execution of a Gitflow action.
    """
    action_name: str = None

    def __init__(self, action_name: str):
        self.action_name = action_name

    def to_dict(self) -> dict:
        return {'actionName': self.action_name}

    @staticmethod
    def from_dict(properties: dict) -> 'GitflowBadge':
        return GitflowBadge(properties.get('actionName'))


# (de)serializers for the objects attached to builds, by attachment key
_ACTION_TYPES = {
    const.BRANCH_RECORD_STORE_KEY: BranchRecordStore,
    const.BADGE_KEY: GitflowBadge,
}


class Build(object):
    """
    A run of the pipeline. Objects such as the branch record store are attached to a build
    under well-known keys so that subsequent builds can retrieve them.
    """
    number: int = None
    result: Optional[BuildResult] = None
    timestamp: datetime.datetime = None
    previous_build: Optional['Build'] = None

    actions: Dict[str, object] = None

    def __init__(self, number: int, previous_build: 'Build' = None):
        self.number = number
        self.previous_build = previous_build
        self.timestamp = datetime.datetime.now(pytz.utc)
        self.actions = dict()

    def get_action(self, key: str):
        return self.actions.get(key)

    def add_action(self, key: str, action):
        self.actions[key] = action

    def set_result(self, result: BuildResult):
        self.result = result

    def get_result_non_null(self) -> BuildResult:
        """
        :return: the result of the build, SUCCESS while no worse result has been set
        """
        return self.result if self.result is not None else BuildResult.SUCCESS

    def get_previous_builds(self) -> Generator['Build', None, None]:
        previous_build = self.previous_build
        while previous_build is not None:
            yield previous_build
            previous_build = previous_build.previous_build

    def to_dict(self) -> dict:
        return {
            'number': self.number,
            'result': self.result.name if self.result is not None else None,
            'timestamp': self.timestamp.isoformat(),
            'actions': {key: action.to_dict() for key, action in self.actions.items()},
        }

    @staticmethod
    def from_dict(properties: dict, previous_build: 'Build' = None) -> 'Build':
        build = Build(int(properties['number']), previous_build)
        result_name = properties.get('result')
        build.result = BuildResult[result_name] if result_name is not None else None
        timestamp = properties.get('timestamp')
        if timestamp is not None:
            build.timestamp = datetime.datetime.fromisoformat(timestamp).astimezone(pytz.utc)
        for key, action_properties in (properties.get('actions') or {}).items():
            action_type = _ACTION_TYPES.get(key)
            if action_type is not None:
                build.actions[key] = action_type.from_dict(action_properties)
        return build


class BuildHistory(object):
    """
    The builds of a working copy, persisted in a YAML or JSON file.
    """
    file: str = None
    builds: List[Build] = None

    def __init__(self, file: str = None):
        self.file = file
        self.builds = list()

    @property
    def last_build(self) -> Optional[Build]:
        return self.builds[-1] if len(self.builds) else None

    def new_build(self) -> Build:
        last_build = self.last_build
        build = Build(last_build.number + 1 if last_build is not None else 1, last_build)
        self.builds.append(build)
        return build

    def get_last_branch_record_store(self) -> Optional[BranchRecordStore]:
        last_build = self.last_build
        if last_build is None:
            return None
        for build in [last_build, *last_build.get_previous_builds()]:
            store = build.get_action(const.BRANCH_RECORD_STORE_KEY)
            if store is not None:
                return store
        return None

    def discard_old_builds(self, max_builds: int) -> List[Build]:
        """
        Discards the oldest builds beyond max_builds. The latest build with a branch record store
        is kept in addition, so that the next build can inherit the store.
        :return: the discarded builds
        """
        if len(self.builds) <= max_builds:
            return []

        kept_builds = self.builds[-max_builds:]
        store_build = next((build for build in reversed(self.builds)
                            if build.get_action(const.BRANCH_RECORD_STORE_KEY) is not None), None)
        if store_build is not None and store_build not in kept_builds:
            kept_builds.insert(0, store_build)

        discarded_builds = [build for build in self.builds if build not in kept_builds]

        previous_build = None
        for build in kept_builds:
            build.previous_build = previous_build
            previous_build = build
        self.builds = kept_builds

        return discarded_builds

    @staticmethod
    def load(file: str) -> 'BuildHistory':
        history = BuildHistory(file)
        if os.path.exists(file):
            properties = PropertyIO.read_file(file)
            previous_build = None
            for build_properties in properties.get('builds') or []:
                build = Build.from_dict(build_properties, previous_build)
                history.builds.append(build)
                previous_build = build
        return history

    def save(self, file: str = None):
        file = file or self.file
        if file is None:
            raise ValueError("history file undetermined")
        properties = {
            'version': const.VERSION,
            'builds': [build.to_dict() for build in self.builds],
        }
        reader = PropertyIO.get_instance_by_filename(file)
        filesystem.write_file_atomically(file, lambda path: reader.to_file(path, properties))
