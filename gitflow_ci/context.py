import os
from typing import List, Optional

from gitflow_ci import cli, const, repotools, _, utils
from gitflow_ci.common import Result
from gitflow_ci.const import MissingBranchRecordPolicy
from gitflow_ci.properties import PropertyIO
from gitflow_ci.repotools import RepoContext


class Config(object):
    # repo
    remote_name: str = const.DEFAULT_REMOTE_NAME

    master_branch: str = const.DEFAULT_MASTER_BRANCH
    develop_branch: str = const.DEFAULT_DEVELOP_BRANCH

    release_branch_prefix: str = const.DEFAULT_RELEASE_BRANCH_PREFIX
    hotfix_branch_prefix: str = const.DEFAULT_HOTFIX_BRANCH_PREFIX
    feature_branch_prefix: str = const.DEFAULT_FEATURE_BRANCH_PREFIX

    version_tag_prefix: str = const.DEFAULT_VERSION_TAG_PREFIX
    snapshot_qualifier: str = const.DEFAULT_SNAPSHOT_QUALIFIER

    # policies
    mark_successful_build_unstable_on_broken_branches = False
    missing_branch_record_policy: MissingBranchRecordPolicy = MissingBranchRecordPolicy.WARN

    # project files
    build_type: str = const.DEFAULT_BUILD_TYPE
    property_file: str = None
    version_property: str = const.DEFAULT_VERSION_PROPERTY
    version_change_actions: List[List[str]] = None

    # main build, a list of command arrays
    build_commands: List[List[str]] = None

    history_file: Optional[str] = None
    # the number of builds kept in the history
    max_builds: int = const.DEFAULT_MAX_BUILDS

    def get_branch_type(self, branch_name: str) -> str:
        """
        :return: the Gitflow type of a branch, exposed to the main build as GIT_BRANCH_TYPE
        """
        if branch_name == self.master_branch:
            return const.BRANCH_TYPE_MASTER
        elif branch_name == self.develop_branch:
            return const.BRANCH_TYPE_DEVELOP
        elif branch_name.startswith(self.release_branch_prefix):
            return const.BRANCH_TYPE_RELEASE
        elif branch_name.startswith(self.hotfix_branch_prefix):
            return const.BRANCH_TYPE_HOTFIX
        elif branch_name.startswith(self.feature_branch_prefix):
            return const.BRANCH_TYPE_FEATURE
        else:
            return const.BRANCH_TYPE_UNKNOWN

    def remote_branch_name(self, branch_name: str) -> str:
        return self.remote_name + '/' + branch_name


class Context(object):
    config: Config = None
    repo: RepoContext = None

    # args
    args = None

    root = None
    batch = False
    dry_run = False
    omit_main_build = False
    verbose = const.ERROR_VERBOSITY

    @staticmethod
    def create(args: dict, result_out: Result) -> 'Context':
        context = Context()
        context.config = Config()

        if args is not None:
            context.args = args

            context.batch = bool(context.args.get('--batch'))
            context.dry_run = bool(context.args.get('--dry-run'))
            context.omit_main_build = bool(context.args.get('--omit-main-build'))
            context.verbose = const.INFO_VERBOSITY if context.args.get('--verbose') else const.ERROR_VERBOSITY
        else:
            context.args = dict()

        # configure CLI
        cli.set_allow_color(not context.batch)

        context.root = os.path.abspath(context.args.get('--root') or '.')

        context.repo = RepoContext()
        context.repo.dir = context.root
        context.repo.verbose = context.verbose

        repo_root = repotools.git_rev_parse(context.repo, '--show-toplevel')
        if repo_root is None:
            result_out.fail(os.EX_USAGE,
                            _("No repo at this location: {path}.")
                            .format(path=repr(context.root)),
                            None)
        context.repo.dir = repo_root

        config_file = None
        if context.args.get('--config') is not None:
            config_file = os.path.join(context.repo.dir, context.args['--config'])
            if not os.path.isfile(config_file):
                result_out.fail(os.EX_DATAERR,
                                _("The specified config file does not exist or is not a regular file: {path}.")
                                .format(path=repr(config_file)),
                                None)
        else:
            for config_filename in const.DEFAULT_CONFIGURATION_FILE_NAMES:
                path = os.path.join(context.repo.dir, config_filename)
                if os.path.exists(path):
                    config_file = path
                    break

        if config_file is not None:
            if context.verbose >= const.TRACE_VERBOSITY:
                cli.print("config file: " + config_file)
            config = PropertyIO.read_file(config_file)
        else:
            config = dict()

        Context.apply_config(context.config, config, context.repo.dir, result_out)

        history_file = context.args.get('--history')
        if history_file is not None:
            context.config.history_file = os.path.abspath(history_file)

        return context

    @staticmethod
    def apply_config(config_out: Config, config: dict, root: str, result_out: Result):
        config_out.remote_name = config.get(const.CONFIG_REMOTE_NAME, const.DEFAULT_REMOTE_NAME)

        config_out.master_branch = config.get(const.CONFIG_MASTER_BRANCH, const.DEFAULT_MASTER_BRANCH)
        config_out.develop_branch = config.get(const.CONFIG_DEVELOP_BRANCH, const.DEFAULT_DEVELOP_BRANCH)

        config_out.release_branch_prefix = config.get(const.CONFIG_RELEASE_BRANCH_PREFIX,
                                                      const.DEFAULT_RELEASE_BRANCH_PREFIX)
        config_out.hotfix_branch_prefix = config.get(const.CONFIG_HOTFIX_BRANCH_PREFIX,
                                                     const.DEFAULT_HOTFIX_BRANCH_PREFIX)
        config_out.feature_branch_prefix = config.get(const.CONFIG_FEATURE_BRANCH_PREFIX,
                                                      const.DEFAULT_FEATURE_BRANCH_PREFIX)

        branch_prefixes = [config_out.release_branch_prefix,
                           config_out.hotfix_branch_prefix,
                           config_out.feature_branch_prefix]
        if any(not prefix for prefix in branch_prefixes) or len(set(branch_prefixes)) != len(branch_prefixes):
            result_out.fail(os.EX_DATAERR,
                            _("Configuration failed."),
                            _("Branch prefixes must be non-empty and distinct: {prefixes}")
                            .format(prefixes=', '.join(repr(prefix) for prefix in branch_prefixes)))

        config_out.version_tag_prefix = utils.get_or_default(config, const.CONFIG_VERSION_TAG_PREFIX,
                                                             const.DEFAULT_VERSION_TAG_PREFIX)
        config_out.snapshot_qualifier = utils.get_or_default(config, const.CONFIG_SNAPSHOT_QUALIFIER,
                                                             const.DEFAULT_SNAPSHOT_QUALIFIER)

        try:
            config_out.mark_successful_build_unstable_on_broken_branches = utils.to_bool(
                config.get(const.CONFIG_MARK_UNSTABLE_ON_BROKEN_BRANCHES), False)
        except ValueError as e:
            result_out.fail(os.EX_DATAERR,
                            _("Configuration failed."),
                            _("Invalid value for {key}: {error}")
                            .format(key=const.CONFIG_MARK_UNSTABLE_ON_BROKEN_BRANCHES, error=str(e)))

        policy = config.get(const.CONFIG_MISSING_BRANCH_RECORD_POLICY, const.DEFAULT_MISSING_BRANCH_RECORD_POLICY)
        if policy not in const.MISSING_BRANCH_RECORD_POLICIES:
            result_out.fail(os.EX_DATAERR,
                            _("Configuration failed."),
                            _("The branch record policy {policy} is invalid.")
                            .format(policy=utils.quote(str(policy), '\'')))
        config_out.missing_branch_record_policy = const.MISSING_BRANCH_RECORD_POLICIES[policy]

        config_out.build_type = config.get(const.CONFIG_BUILD_TYPE, const.DEFAULT_BUILD_TYPE)
        if config_out.build_type not in const.BUILD_TYPES:
            result_out.fail(os.EX_DATAERR,
                            _("Configuration failed."),
                            _("The build type {build_type} is invalid.")
                            .format(build_type=utils.quote(str(config_out.build_type), '\'')))

        config_out.property_file = os.path.join(root, config.get(const.CONFIG_PROJECT_PROPERTY_FILE,
                                                                 const.DEFAULT_PROJECT_PROPERTY_FILE))
        config_out.version_property = config.get(const.CONFIG_VERSION_PROPERTY, const.DEFAULT_VERSION_PROPERTY)
        config_out.version_change_actions = Context.__read_commands(config, const.CONFIG_ON_VERSION_CHANGE,
                                                                    result_out)

        config_out.build_commands = Context.__read_commands(config, const.CONFIG_BUILD, result_out)

        history_file = config.get(const.CONFIG_HISTORY_FILE)
        config_out.history_file = os.path.join(root, history_file) if history_file is not None else None

        try:
            config_out.max_builds = int(config.get(const.CONFIG_MAX_BUILDS, const.DEFAULT_MAX_BUILDS))
            if config_out.max_builds < 1:
                raise ValueError("not a positive number")
        except (TypeError, ValueError) as e:
            result_out.fail(os.EX_DATAERR,
                            _("Configuration failed."),
                            _("Invalid value for {key}: {error}")
                            .format(key=const.CONFIG_MAX_BUILDS, error=str(e)))

    @staticmethod
    def __read_commands(config: dict, key: str, result_out: Result) -> List[List[str]]:
        commands = config.get(key) or []
        if not isinstance(commands, list) \
                or any(not isinstance(command, list) or not len(command) for command in commands):
            result_out.fail(os.EX_DATAERR,
                            _("Configuration failed."),
                            _("{key} must be a list of command arrays.")
                            .format(key=key))
        return [[str(token) for token in command] for command in commands]
