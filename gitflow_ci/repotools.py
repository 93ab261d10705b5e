import os
import re
import subprocess
import typing
from typing import Optional, List

from gitflow_ci import utils, cli, const


class RepoContext(object):
    git = 'git'
    dir = '.'
    verbose = const.ERROR_VERBOSITY


class Remote(object):
    name = None
    url = None


class Ref(object):
    name = None
    obj_type = None
    obj_name = None

    @property
    def local_branch_name(self):
        if self.name.startswith(const.LOCAL_BRANCH_PREFIX):
            return self.name[len(const.LOCAL_BRANCH_PREFIX):]
        return None

    def __repr__(self):
        return self.name + ' => ' + str(self.obj_name)


def create_ref_name(*strings: str):
    return utils.split_join('/', False, False, *strings)


def git_raw(git: str, args: list, verbose: int, dir: str = None) -> typing.Tuple[int, bytes, bytes]:
    command = [git]
    if dir is not None:
        command.extend(['-C', dir])

    for index, arg in enumerate(args):
        if isinstance(arg, Ref):
            args[index] = arg.name

    command.extend(args)

    if verbose >= const.TRACE_VERBOSITY:
        cli.print(utils.command_to_str(command))

    process_env = os.environ.copy()
    process_env["LANGUAGE"] = "C"
    process_env["LC_ALL"] = "C"

    proc = subprocess.Popen(args=command,
                            stdin=subprocess.PIPE,
                            stdout=subprocess.PIPE,
                            stderr=subprocess.PIPE,
                            env=process_env)

    out, err = proc.communicate()
    if proc.returncode != os.EX_OK:
        if verbose >= const.TRACE_VERBOSITY:
            cli.eprint("command failed: " + utils.command_to_str(command))
            cli.eprint("child process returned " + str(proc.returncode))
            if err is not None:
                cli.eprint(err.decode("utf-8"))
    return proc.returncode, out, err


def git(context: RepoContext, *args) -> typing.Tuple[int, bytes, bytes]:
    return git_raw(git=context.git, args=list(args), dir=context.dir, verbose=context.verbose)


def git_for_lines(context: RepoContext, *args) -> Optional[List[str]]:
    returncode, out, err = git(context, *args)

    if returncode == os.EX_OK:
        return __extract_lines(context, out)
    return None


def __extract_lines(context, out):
    return out.decode("utf-8").splitlines()


def git_get_remote(context: RepoContext, remote_name: str) -> Optional[Remote]:
    returncode, out, err = git(context, 'remote', 'get-url', remote_name)

    if returncode == os.EX_OK:
        lines = out.decode("utf-8").splitlines()
        if len(lines) == 1:
            remote = Remote()
            remote.name = remote_name
            remote.url = lines[0]
            return remote
    return None


def git_rev_parse(context: RepoContext, *args) -> Optional[str]:
    command = ['rev-parse']
    command.extend(args)

    returncode, out, err = git(context, *command)

    lines = out.decode('utf-8').splitlines()

    if returncode == os.EX_OK and len(lines) == 1:
        return lines[0]
    return None


def git_list_refs(context: RepoContext, *args) -> typing.Generator[Ref, None, None]:
    returncode, out, err = git(context, 'for-each-ref', '--format',
                               '%(refname);%(objecttype);%(objectname)',
                               *args)

    if returncode == os.EX_OK:
        for ref_element in out.decode("utf-8").splitlines():
            ref_element = ref_element.split(';')

            ref = Ref()
            ref.name = ref_element[0]
            ref.obj_type = ref_element[1]
            ref.obj_name = ref_element[2]
            yield ref


def git_list_local_branch_names(context: RepoContext) -> typing.Set[str]:
    return set(ref.local_branch_name for ref in git_list_refs(context, const.LOCAL_BRANCH_PREFIX))


def find_ls_remote_commit(lines: List[str], ref_name: str) -> Optional[str]:
    """
    :param lines: the output of git ls-remote
    :return: the commit the ref points to, None if it is not listed
    """
    for line in lines:
        match = re.fullmatch(r'(?P<commit>[0-9a-fA-F]+)\s+(?P<ref>\S+)', line.strip())
        if match is not None and match.group('ref') == ref_name:
            return match.group('commit')
    return None


def git_list_modified_files(context: RepoContext) -> List[str]:
    """
    :return: paths of tracked files with unstaged modifications, relative to the working copy root
    """
    lines = git_for_lines(context, 'ls-files', '--modified')
    if lines is None:
        return []
    files = list()
    for line in lines:
        if len(line) and line not in files:
            files.append(line)
    return files
