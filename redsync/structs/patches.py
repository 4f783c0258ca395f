"""
All the structures needed for Redfish patching.

Currently, it is implemented via a JSON merge-patch (RFC 7386),
i.e. a simple dictionary with field overrides, and ``None`` for field deletions.
This is what Redfish services expect in the PATCH requests: only the properties
to be changed, with the nested objects containing only their changed properties.
"""
import json
from typing import Any, Dict, MutableMapping, Optional

from redsync.structs import diffs, dicts


class Patch(Dict[str, Any]):

    def __init__(self, __src: Optional[MutableMapping[str, Any]] = None) -> None:
        super().__init__(__src or {})

    @classmethod
    def from_diff(cls, d: diffs.Diff) -> "Patch":
        """
        Convert a diff of encoded fields into a merge-patch.

        The additions & changes put the new values at their paths;
        the removals put ``None`` there, which means the deletion in RFC 7386.
        """
        patch = cls()
        for op, field, old, new in d:
            dicts.ensure(patch, field, new)
        return patch

    def as_json(self) -> bytes:
        return json.dumps(self, separators=(',', ':')).encode('utf-8')
