import os
from abc import ABC, abstractmethod
from typing import List, Optional, Set

from gitflow_ci import _, cli, repotools, const
from gitflow_ci.common import Result
from gitflow_ci.repotools import RepoContext


class PushCommand(object):
    """
    Fluent push: client.push_command().to(url).ref(refspec).execute()
    """
    url: str = None
    refspecs: List[str] = None

    def __init__(self, client: 'GitClient'):
        self.__client = client
        self.refspecs = list()

    def to(self, url: str) -> 'PushCommand':
        self.url = url
        return self

    def ref(self, refspec: str) -> 'PushCommand':
        self.refspecs.append(refspec)
        return self

    def execute(self):
        if self.url is None:
            raise ValueError("push target undetermined")
        for refspec in self.refspecs:
            self.__client.push(self.url, refspec)


class GitClient(ABC):
    """
    The git operations the Gitflow actions are built on.
    Implementations raise a GitFlowException when an operation fails.
    """

    @abstractmethod
    def set_action_name(self, action_name: str):
        pass

    @abstractmethod
    def checkout_branch(self, branch_name: str, from_ref: str):
        """
        Creates or resets the local branch to from_ref and checks it out.
        """
        pass

    @abstractmethod
    def add(self, path: str):
        pass

    @abstractmethod
    def commit(self, message: str):
        pass

    @abstractmethod
    def tag(self, tag_name: str, message: str):
        """
        Creates an annotated tag on HEAD.
        """
        pass

    @abstractmethod
    def push(self, remote: str, refspec: str):
        pass

    def push_command(self) -> PushCommand:
        return PushCommand(self)

    @abstractmethod
    def merge(self, ref: str, message: str):
        """
        Merges ref into the current branch, always creating a merge commit.
        """
        pass

    @abstractmethod
    def clean(self):
        """
        Discards all modifications and untracked files in the working copy.
        """
        pass

    @abstractmethod
    def delete_branch(self, branch_name: str):
        """
        Deletes the local branch.
        """
        pass

    @abstractmethod
    def get_branches(self) -> Set[str]:
        """
        :return: the names of the local branches
        """
        pass

    @abstractmethod
    def get_head_rev(self, url: str, branch_name: str) -> Optional[str]:
        """
        :return: the commit the branch points to in the repository at url, None if it does not exist
        :raises GitFlowException: if the repository cannot be queried
        """
        pass

    @abstractmethod
    def get_remote_url(self, remote_name: str) -> str:
        pass


class RepoGitClient(GitClient):
    """
    Runs the git executable in a working copy.
    In Dry Run mode, all commands are executed except for pushes.
    """
    repo: RepoContext = None
    dry_run: bool = False
    action_name: str = None

    def __init__(self, repo: RepoContext, dry_run: bool = False):
        self.repo = repo
        self.dry_run = dry_run
        self.action_name = const.NAME
        self.__logger = cli.ConsoleLogger(self.action_name)

    def set_action_name(self, action_name: str):
        self.action_name = action_name
        self.__logger = cli.ConsoleLogger(action_name)

    def __git_or_fail(self, command: list, error_message: str = None):
        returncode, out, err = repotools.git(self.repo, *command)
        if returncode != os.EX_OK:
            result = Result()
            first_command_token = next(filter(lambda token: not token.startswith('-'), command))
            result.fail(os.EX_DATAERR,
                        error_message or _("git {sub_command} failed.").format(sub_command=repr(first_command_token)),
                        err.decode('utf-8').strip() if err else None)
        return out

    def checkout_branch(self, branch_name: str, from_ref: str):
        self.__git_or_fail(['checkout', '-B', branch_name, from_ref],
                           _("Failed to checkout branch {branch} from {ref}.")
                           .format(branch=repr(branch_name), ref=repr(from_ref)))

    def add(self, path: str):
        self.__git_or_fail(['add', '--', path])

    def commit(self, message: str):
        self.__git_or_fail(['commit', '-m', message])

    def tag(self, tag_name: str, message: str):
        self.__git_or_fail(['tag', '-a', '-f', '-m', message, tag_name],
                           _("Failed to create tag {tag}.").format(tag=repr(tag_name)))

    def push(self, remote: str, refspec: str):
        if self.dry_run:
            self.__logger.println(_("Dry Run: not pushing {refspec} to {remote}")
                                  .format(refspec=refspec, remote=remote))
            return
        self.__git_or_fail(['push', remote, refspec],
                           _("Failed to push {refspec} to {remote}.").format(refspec=repr(refspec), remote=remote))

    def merge(self, ref: str, message: str):
        self.__git_or_fail(['merge', '--no-ff', '-m', message, ref],
                           _("Failed to merge {ref}.").format(ref=repr(ref)))

    def clean(self):
        self.__git_or_fail(['reset', '--hard'])
        self.__git_or_fail(['clean', '-fd'])

    def delete_branch(self, branch_name: str):
        current_branch = repotools.git_rev_parse(self.repo, '--revs-only', '--symbolic-full-name', 'HEAD')
        if current_branch == repotools.create_ref_name(const.LOCAL_BRANCH_PREFIX, branch_name):
            # git refuses to delete the checked out branch
            self.__git_or_fail(['checkout', '--detach'])
        self.__git_or_fail(['branch', '-D', branch_name],
                           _("Failed to delete branch {branch}.").format(branch=repr(branch_name)))

    def get_branches(self) -> Set[str]:
        return repotools.git_list_local_branch_names(self.repo)

    def get_head_rev(self, url: str, branch_name: str) -> Optional[str]:
        # an unreachable remote must not be mistaken for a missing branch
        branch_ref_name = repotools.create_ref_name(const.LOCAL_BRANCH_PREFIX, branch_name)
        out = self.__git_or_fail(['ls-remote', '--heads', url, branch_ref_name],
                                 _("Failed to query the branch {branch} on {url}.")
                                 .format(branch=repr(branch_name), url=url))
        return repotools.find_ls_remote_commit(out.decode('utf-8').splitlines(), branch_ref_name)

    def get_remote_url(self, remote_name: str) -> str:
        remote = repotools.git_get_remote(self.repo, remote_name)
        if remote is None:
            result = Result()
            result.fail(os.EX_DATAERR,
                        _("The remote {remote} does not exist.").format(remote=repr(remote_name)),
                        None)
        return remote.url

    def fetch(self, remote_name: str):
        self.__git_or_fail(['fetch', '--prune', '--tags', remote_name],
                           _("Failed to fetch from {remote}.").format(remote=repr(remote_name)))
