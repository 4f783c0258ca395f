"""
The base of all the typed resources: identity, snapshot, and updates.

Every resource keeps the raw document it was decoded from (its snapshot),
and the client it was fetched with. The caller modifies the writable fields
of the resource in memory, and then calls `Entity.update`, which compares
the current values against a fresh decoding of the snapshot, and sends
only the changed writable fields to the server as a merge-patch.

The updates are optimistic: the snapshot is not refreshed after the update,
and two updates of the same resource are not serialised in any way.
To see the server's state after the update, fetch the resource again.
"""
import dataclasses
from typing import Any, ClassVar, FrozenSet, List, Optional, Type, TypeVar

from redsync.clients import api, patching
from redsync.engines import loggers
from redsync.helpers import typedefs
from redsync.models import decoding
from redsync.structs import diffs, patches

_EntityT = TypeVar('_EntityT', bound="Entity")


@dataclasses.dataclass
class Entity:
    """
    A resource with an identity, as addressed in the Redfish API.

    The subclasses declare which of their wire fields can be changed by the
    callers (``writable``), and which of them come in different shapes
    from different vendors (``divergent``, see `redsync.models.decoding`).
    """
    writable: ClassVar[FrozenSet[str]] = frozenset()
    divergent: ClassVar[FrozenSet[str]] = frozenset()

    odata_id: str = decoding.wire('@odata.id', default='', identity=True)
    id: str = decoding.wire('Id', default='', identity=True)
    name: str = decoding.wire('Name', default='')

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.__dict__ and name in decoding.identity_names(type(self)):
            raise AttributeError(f"The identity of {type(self).__name__} cannot be changed: {name!r}")
        super().__setattr__(name, value)

    def _adopt(self, *, snapshot: bytes, client: Optional[api.RemoteClient]) -> None:
        if '_snapshot' in self.__dict__:
            raise RuntimeError(f"The snapshot of {self!r} is already attached.")
        object.__setattr__(self, '_snapshot', snapshot)
        object.__setattr__(self, '_client', client)

    @property
    def snapshot(self) -> Optional[bytes]:
        """ The raw document as it was last received, or ``None`` if not decoded. """
        return self.__dict__.get('_snapshot')

    @property
    def client(self) -> Optional[api.RemoteClient]:
        return self.__dict__.get('_client')

    @classmethod
    async def fetch(
            cls: Type[_EntityT],
            uri: str,
            *,
            client: api.RemoteClient,
            logger: Optional[typedefs.Logger] = None,
    ) -> _EntityT:
        """ Get one resource from the server and decode it. """
        logger = logger if logger is not None else loggers.ResourceLogger(uri=uri, kind=cls.__name__)
        logger.debug(f"Fetching {cls.__name__}.")
        raw = await client.get(uri)
        return decoding.decode(cls, raw, client=client)

    def build_patch(self) -> patches.Patch:
        """
        Calculate the merge-patch of the changed writable fields, without sending it.

        The baseline is the snapshot, decoded again the same way the resource
        was decoded. Only the writable fields are compared. The nested objects
        are compared field by field, so only their changed fields are patched.
        """
        if self.snapshot is None:
            raise RuntimeError(f"{type(self).__name__} has no snapshot to compare against.")

        original = decoding.decode(type(self), self.snapshot)
        items: List[diffs.DiffItem] = []
        for name in decoding.wire_fields(type(self)):
            if name in self.writable:
                old = decoding.encode_field(original, name)
                new = decoding.encode_field(self, name)
                items.extend(diffs.diff_iter(old, new, path=(name,)))
        return patches.Patch.from_diff(diffs.Diff(items))

    async def update(self, *, logger: Optional[typedefs.Logger] = None) -> None:
        """
        Send the changed writable fields to the server.

        If nothing has changed, nothing is sent. Any errors of the client
        are escalated as is, and the resource remains as it is.
        """
        logger = logger if logger is not None else loggers.ResourceLogger(uri=self.odata_id, kind=type(self).__name__)
        patch = self.build_patch()
        if not patch:
            logger.debug("Nothing has changed: no update is needed.")
            return
        if self.client is None:
            raise RuntimeError(f"{type(self).__name__} has no client to send the update with.")
        if not self.odata_id:
            raise RuntimeError(f"{type(self).__name__} has no URI to send the update to.")
        await patching.patch_obj(client=self.client, uri=self.odata_id, patch=patch, logger=logger)
        logger.info(f"Updated the fields: {', '.join(sorted(patch))}.")


@dataclasses.dataclass
class Member(Entity):
    """
    A resource embedded into an array of another resource.

    Redfish 1.6+ requires ``MemberId`` to be a string with the zero-based
    array index, but older firmware sends it as an integer.
    """
    divergent: ClassVar[FrozenSet[str]] = frozenset({'MemberId'})

    member_id: str = decoding.wire('MemberId', default='', identity=True)
