import os
import re

import appdirs

from gitflow_ci import const


def replace_file(src, dst):
    if const.OS_IS_POSIX or not os.path.exists(dst):
        os.rename(src, dst)
    else:
        os.remove(dst)
        os.rename(src, dst)


def __get_or_create_dir(parent: str, name: str, mode: int = 0o700) -> str:
    from stat import S_ISDIR, S_IMODE

    path = os.path.join(parent, name)
    path = os.path.abspath(path)

    create = True

    try:
        stat = os.stat(path)
        if not S_ISDIR(stat.st_mode):
            raise Exception('Not a directory: ' + repr(path))
        elif S_IMODE(stat.st_mode) != mode:
            os.chmod(path=path, mode=mode)
        create = False
    except FileNotFoundError:
        pass

    if create:
        os.makedirs(path, mode, True)

    return path


def get_data_root_dir() -> str:
    return appdirs.user_data_dir(appname=const.NAME, appauthor=const.AUTHOR)


def get_data_dir(name: str):
    return __get_or_create_dir(get_data_root_dir(), name, 0o700)


def get_default_history_file(repo_dir: str) -> str:
    """
    :return: the history file of a working copy in the per-user data directory,
    one directory per working copy path
    """
    repo_key = re.sub(r'[^A-Za-z0-9._-]+', '_', os.path.abspath(repo_dir)).strip('_')
    return os.path.join(get_data_dir(os.path.join('history', repo_key)), const.DEFAULT_HISTORY_FILE_NAME)


def write_file_atomically(path: str, writer):
    """
    Writes through a temporary file next to the target and replaces the target afterwards.
    :param writer: callable receiving the temporary file path
    """
    temp_path = path + '~'
    writer(temp_path)
    replace_file(temp_path, path)
