import os
import re
import shlex
import subprocess
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from gitflow_ci import _, cli, const, repotools
from gitflow_ci.common import Result
from gitflow_ci.context import Context
from gitflow_ci.properties import PropertyIO


class BuildTypeAction(ABC):
    """
    Knows how the version is stored in the project files of a build type.
    """
    context: Context = None
    action_name: str = None
    # the version the project files of the checked out branch are at, None if unknown
    current_version: Optional[str] = None

    def __init__(self, context: Context, action_name: str):
        self.context = context
        self.action_name = action_name
        self.console_logger = cli.ConsoleLogger(action_name)

    @abstractmethod
    def update_version(self, version: str) -> List[str]:
        """
        Updates the project files to the provided version.
        :return: the paths of the modified files relative to the working copy root, in a stable order
        """
        pass

    def prevent_archive_publication(self, env_vars: Dict[str, str]):
        """
        Adds the variables to the build environment that keep the main build from archiving
        and publishing its artifacts.
        """
        env_vars[const.ENV_SKIP_ARCHIVE] = 'true'
        env_vars[const.ENV_SKIP_PUBLICATION] = 'true'
        self.console_logger.println(_("Archive publication is disabled for the main build"))


class PropertyFileBuildType(BuildTypeAction):
    """
    Stores the version as a property in a YAML, JSON or INI file.
    """

    def update_version(self, version: str) -> List[str]:
        config = self.context.config
        property_reader = PropertyIO.get_instance_by_filename(config.property_file)

        if os.path.exists(config.property_file):
            properties = property_reader.from_file(config.property_file)
        else:
            properties = dict()

        properties[config.version_property] = version
        property_reader.to_file(config.property_file, properties)

        if self.context.verbose >= const.DEBUG_VERBOSITY:
            cli.print("updated " + config.property_file + ": " + config.version_property + " = " + version)

        return [os.path.relpath(config.property_file, self.context.repo.dir)]


class CommandBuildType(BuildTypeAction):
    """
    Runs the configured version change commands and reports the files modified by them.
    The commands receive the versions in the environment variables OLD_VERSION and NEW_VERSION.
    OLD_VERSION is empty if the current version is unknown.
    """

    def update_version(self, version: str) -> List[str]:
        result = Result()

        variables = dict(os.environ)
        variables[const.ENV_OLD_VERSION] = self.current_version or ''
        variables[const.ENV_NEW_VERSION] = version

        for command in self.context.config.version_change_actions:
            command_string = ' '.join(shlex.quote(token) for token in command)
            if self.context.verbose >= const.TRACE_VERBOSITY:
                cli.print(command_string)

            command = [expand_vars(token, variables) for token in command]

            try:
                proc = subprocess.Popen(args=command,
                                        cwd=self.context.repo.dir,
                                        env=variables)
                proc.wait()
            except FileNotFoundError as e:
                result.fail(os.EX_DATAERR,
                            _("Version change action failed."),
                            _("{command}\n"
                              "could not be executed.\n"
                              "File not found: {file}")
                            .format(command=command_string, file=e.filename))
            if proc.returncode != os.EX_OK:
                result.fail(os.EX_DATAERR,
                            _("Version change action failed."),
                            _("{command}\n"
                              "returned with an error.")
                            .format(command=command_string))

        return repotools.git_list_modified_files(self.context.repo)


def __var_subst(match, vars: dict):
    subst = ''
    if match.group(1) is not None:
        subst += match.group(1)[:len(match.group(1)) >> 1]
    if match.group(2) is not None:
        if match.group(3) is None:
            subst += vars[match.group(5) or match.group(6)]
        else:
            subst += match.group(4)
    return subst


def expand_vars(s: str, vars: dict):
    """
    Expands $NAME and ${NAME}, a preceding backslash escapes the expansion.
    """
    return re.sub(r'((?:\\\\)+)|((\\)?(\$(?:{([^}]*)}|(\w+))))', lambda match: __var_subst(match, vars), s)


def create_build_type_action(context: Context, action_name: str) -> BuildTypeAction:
    if context.config.build_type == const.BUILD_TYPE_COMMAND:
        return CommandBuildType(context, action_name)
    return PropertyFileBuildType(context, action_name)
