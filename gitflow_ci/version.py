import re
from typing import Optional

import semver

from gitflow_ci import const

# release versions such as '1.0' are padded to SemVer before incrementing
__SHORT_VERSION_PATTERN = re.compile(r'(?P<major>\d+)(?:\.(?P<minor>\d+))?')


def parse_version_info(version: str) -> semver.VersionInfo:
    """
    :param version: a SemVer string or a major[.minor] release version
    :raises ValueError: on unparsable input
    """
    if version is None:
        raise ValueError("version must not be None")

    short_match = __SHORT_VERSION_PATTERN.fullmatch(version)
    if short_match is not None:
        return semver.VersionInfo(major=int(short_match.group('major')),
                                  minor=int(short_match.group('minor') or 0),
                                  patch=0)
    return semver.VersionInfo.parse(version)


def to_snapshot_version(version_info: semver.VersionInfo,
                        qualifier: Optional[str] = const.DEFAULT_SNAPSHOT_QUALIFIER) -> str:
    version = semver.VersionInfo(major=version_info.major,
                                 minor=version_info.minor,
                                 patch=version_info.patch)
    if qualifier:
        return str(version) + '-' + qualifier
    return str(version)


def next_patch_development_version(release_version: str,
                                   qualifier: Optional[str] = const.DEFAULT_SNAPSHOT_QUALIFIER) -> str:
    """
    '1.0.1' -> '1.0.2-SNAPSHOT'
    """
    return to_snapshot_version(parse_version_info(release_version).bump_patch(), qualifier)


def next_minor_development_version(release_version: str,
                                   qualifier: Optional[str] = const.DEFAULT_SNAPSHOT_QUALIFIER) -> str:
    """
    '1.0.0' -> '1.1.0-SNAPSHOT'
    """
    return to_snapshot_version(parse_version_info(release_version).bump_minor(), qualifier)


def release_version_of(development_version: str) -> str:
    """
    Strips the pre-release and build parts: '1.0.2-SNAPSHOT' -> '1.0.2'
    """
    version_info = parse_version_info(development_version)
    return str(semver.VersionInfo(major=version_info.major,
                                  minor=version_info.minor,
                                  patch=version_info.patch))
