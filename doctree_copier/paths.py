"""
Path helpers for hierarchical document stores

A path alternates collection names and document ids:
    users              -> collection
    users/u1           -> document
    users/u1/orders    -> collection
    users/u1/orders/o1 -> document
"""


def split_path(path: str) -> list[str]:
    """Split a path into its segments, rejecting empty segments"""
    if not path or path.startswith('/') or path.endswith('/'):
        raise ValueError(f"Invalid path: {path!r}")
    parts = path.split('/')
    if any(not part for part in parts):
        raise ValueError(f"Invalid path: {path!r}")
    return parts


def join_path(*segments: str) -> str:
    """Join segments into a path"""
    path = '/'.join(segments)
    split_path(path)
    return path


def is_document_path(path: str) -> bool:
    return len(split_path(path)) % 2 == 0


def is_collection_path(path: str) -> bool:
    return len(split_path(path)) % 2 == 1


def validate_document_path(path: str) -> str:
    if not is_document_path(path):
        raise ValueError(f"Document path must have even segments: {path}")
    return path


def validate_collection_path(path: str) -> str:
    if not is_collection_path(path):
        raise ValueError(f"Collection path must have odd segments: {path}")
    return path


def collection_of(document_path: str) -> str:
    """Return the collection path that holds a document"""
    return validate_document_path(document_path).rsplit('/', 1)[0]


def document_id_of(document_path: str) -> str:
    return validate_document_path(document_path).rsplit('/', 1)[1]


def collection_pattern(path: str) -> str:
    """
    Replace document ids with '*' so sibling collections group together

    Examples:
        users/u1/orders/o1 -> users/*/orders
        users/u1           -> users
        users/u1/orders    -> users/*/orders
    """
    parts = split_path(path)
    if len(parts) % 2 == 0:
        parts = parts[:-1]
    return '/'.join('*' if index % 2 else part for index, part in enumerate(parts))
