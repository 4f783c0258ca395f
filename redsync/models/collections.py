"""
Fetching of the collections of resources, tolerant to the failing members.

Real fleets of hardware are partially broken: a BMC can fail to serve one
power supply while serving the others. So, a failure of one member does not
fail the whole collection: all the members are attempted, the successful ones
are returned, and the failed ones are reported by their URIs.

Only a failure of the collection document itself is fatal, since there are
no members to attempt in that case.
"""
import asyncio
import collections.abc
import logging
from typing import Dict, Generic, Iterator, List, Mapping, Optional, \
                   Sequence, Tuple, Type, TypeVar, Union, overload

from redsync.clients import api, fetching
from redsync.helpers import typedefs
from redsync.models import entities
from redsync.structs import configuration

_EntityT = TypeVar('_EntityT', bound=entities.Entity)


class CollectionError(Exception):
    """
    Some members of a collection have failed to be fetched or decoded.

    The successfully fetched resources are not lost, they are available
    both in the collection's result and in the error itself.
    """

    def __init__(
            self,
            failures: Mapping[str, BaseException],
            resources: Sequence[entities.Entity] = (),
    ) -> None:
        self.failures: Mapping[str, BaseException] = dict(failures)
        self.resources: Sequence[entities.Entity] = tuple(resources)
        uris = ', '.join(self.failures)
        super().__init__(f"{len(self.failures)} member(s) failed: {uris}")


class CollectionResult(Sequence[_EntityT], Generic[_EntityT]):
    """
    The successfully fetched members in their original order, plus the failures.

    The result is usable even if some members have failed. The callers
    must check the ``failures`` (or ``error``) explicitly, or call
    `raise_for_failures` to escalate them.
    """

    def __init__(
            self,
            resources: Sequence[_EntityT] = (),
            failures: Optional[Mapping[str, BaseException]] = None,
    ) -> None:
        super().__init__()
        self._resources: Tuple[_EntityT, ...] = tuple(resources)
        self._failures: Mapping[str, BaseException] = dict(failures or {})

    def __repr__(self) -> str:
        return f"<{type(self).__name__} resources={len(self._resources)} failures={len(self._failures)}>"

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[_EntityT]:
        return iter(self._resources)

    @overload
    def __getitem__(self, i: int) -> _EntityT: ...

    @overload
    def __getitem__(self, s: slice) -> Sequence[_EntityT]: ...

    def __getitem__(self, item: Union[int, slice]) -> Union[_EntityT, Sequence[_EntityT]]:
        return self._resources[item]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, collections.abc.Sequence):
            return tuple(self) == tuple(other)
        else:
            return NotImplemented

    def __ne__(self, other: object) -> bool:
        if isinstance(other, collections.abc.Sequence):
            return tuple(self) != tuple(other)
        else:
            return NotImplemented

    @property
    def failures(self) -> Mapping[str, BaseException]:
        return self._failures

    @property
    def error(self) -> Optional[CollectionError]:
        if not self._failures:
            return None
        return CollectionError(self._failures, self._resources)

    def raise_for_failures(self) -> None:
        error = self.error
        if error is not None:
            raise error


async def fetch_all(
        cls: Type[_EntityT],
        uri: Optional[str],
        *,
        client: api.RemoteClient,
        settings: Optional[configuration.ClientSettings] = None,
        logger: Optional[typedefs.Logger] = None,
) -> CollectionResult[_EntityT]:
    """
    Fetch all the members of a collection as the resources of the same class.

    An empty URI means an absent optional relationship: it is not an error,
    the result is empty, and no requests are made.

    The members are fetched with a limited concurrency (one by one by default).
    The order of the results is the order of the members in the collection
    regardless of the order in which the requests are completed.
    """
    settings = settings if settings is not None else configuration.ClientSettings()
    logger = logger if logger is not None else logging.getLogger(__name__)
    if not uri:
        return CollectionResult()

    uris = await fetching.list_members(client=client, uri=uri, logger=logger)
    semaphore = asyncio.Semaphore(settings.fetching.max_concurrency)

    async def fetch_one(member_uri: str) -> Union[_EntityT, Exception]:
        async with semaphore:
            try:
                return await cls.fetch(member_uri, client=client)
            except Exception as e:
                logger.warning(f"Failed to fetch {cls.__name__} at {member_uri}: {e!r}")
                return e

    outcomes = await asyncio.gather(*[fetch_one(member_uri) for member_uri in uris])

    resources: List[_EntityT] = []
    failures: Dict[str, BaseException] = {}
    for member_uri, outcome in zip(uris, outcomes):
        if isinstance(outcome, Exception):
            failures[member_uri] = outcome
        else:
            resources.append(outcome)

    if failures:
        logger.warning(f"Fetched {len(resources)} of {len(uris)} {cls.__name__} member(s) "
                       f"of {uri}; {len(failures)} failed.")
    else:
        logger.debug(f"Fetched all {len(resources)} {cls.__name__} member(s) of {uri}.")
    return CollectionResult(resources, failures)
