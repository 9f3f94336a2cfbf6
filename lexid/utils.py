import uuid


def new_uuid() -> str:
    return str(uuid.uuid4())


def etag_from(version: int) -> str:
    """Strong ETag for a version counter."""
    return f'"{version}"'


def matches_etag(if_match: str, version: int) -> bool:
    return if_match.strip().removeprefix("W/").strip('"') == str(version)
