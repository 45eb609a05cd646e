"""Name conventions shared by the registry and the YAML front-end."""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def camelize(name: str) -> str:
    """Turn a factory name into the class name it implies.

    Examples:
        "user" -> "User"
        "user_profile" -> "UserProfile"
        "UserProfile" -> "UserProfile"
    """
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def underscore(name: str) -> str:
    """Turn a class name into a factory name.

    Examples:
        "User" -> "user"
        "UserProfile" -> "user_profile"
        "HTTPRequest" -> "http_request"
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()
