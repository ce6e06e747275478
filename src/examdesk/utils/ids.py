"""Identifier helpers.

Every row id is "<prefix>_<hex>", e.g. "subj_3f2c...". Prefixes:
teach, stud, subj, chap, ques, opt, test, testq, att, ans.
"""

import uuid


def generate_id(prefix: str) -> str:
    """Return a new opaque identifier with the given type prefix."""
    return f"{prefix}_{uuid.uuid4().hex}"
