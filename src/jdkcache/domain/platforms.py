"""supported request values and their validation."""
from typing import Optional

from .errors import InvalidArchitecture, InvalidParameter, InvalidPlatform

PLATFORMS = ("linux", "mac", "windows")
ARCHITECTURES = ("x64", "x86")
IMAGE_TYPES = ("jdk", "jre")

DEFAULT_VERSION = 8
DEFAULT_PLATFORM = "windows"
DEFAULT_ARCH = "x64"
DEFAULT_IMAGE_TYPE = "jdk"


def validate_platform(platform: str) -> str:
    if platform not in PLATFORMS:
        raise InvalidPlatform(platform)
    return platform


def validate_arch(arch: str) -> str:
    if arch not in ARCHITECTURES:
        raise InvalidArchitecture(arch)
    return arch


def validate_image_type(image_type: str) -> str:
    if image_type not in IMAGE_TYPES:
        raise InvalidParameter("image_type", image_type)
    return image_type


def validate_request(
    major: Optional[int],
    platform: Optional[str],
    arch: Optional[str],
    image_type: Optional[str] = None,
) -> str:
    """
    check a download request before any I/O happens.

    missing fields are reported before unsupported ones, so a request with
    neither platform nor arch fails on the first missing field.

    returns:
        the image type to use (the default when none was given)
    """
    for name, value in (("major", major), ("platform", platform), ("arch", arch)):
        if value is None:
            raise InvalidParameter(name, value)
    if isinstance(major, bool) or not isinstance(major, int):
        raise InvalidParameter("major", major)

    validate_platform(platform)
    validate_arch(arch)
    return validate_image_type(image_type or DEFAULT_IMAGE_TYPE)
