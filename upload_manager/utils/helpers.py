"""Helper functions for object keys and access references."""

import uuid


def generate_file_key(field_name: str) -> str:
    """
    Generate a unique object key for an uploaded field.
    Format: field_name_uuid4
    """
    return f"{field_name}_{uuid.uuid4()}"


def normalize_href(href: str) -> str:
    """Strip the query string from an href."""
    return href.split("?")[0]


def get_key_from_href(href: str) -> str:
    """Resolve the object key referenced by an href (its last path segment)."""
    href_without_params = normalize_href(href)
    return href_without_params[href_without_params.rfind("/") + 1:]


def build_href(endpoint: str, bucket: str, key: str) -> str:
    """Build the canonical, unsigned href of a stored object."""
    return f"{endpoint.rstrip('/')}/{bucket}/{key}"

