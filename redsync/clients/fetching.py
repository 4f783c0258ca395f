import json
from typing import List, cast

from redsync.clients import api
from redsync.helpers import typedefs
from redsync.structs import bodies


async def list_members(
        *,
        client: api.RemoteClient,
        uri: str,
        logger: typedefs.Logger,
) -> List[str]:
    """
    Resolve a collection URI to the ordered URIs of its members.

    Only the ``Members[*]["@odata.id"]`` of the collection document is used;
    the rest of the envelope (names, counts, annotations) is ignored.
    The repeated links are listed once, at their first position.
    A malformed collection document is an error of the whole collection.
    """
    raw = await client.get(uri)
    try:
        body = json.loads(raw)
    except ValueError as e:
        raise ValueError(f"The collection at {uri} is not a valid JSON document.") from e
    if not isinstance(body, dict):
        raise ValueError(f"The collection at {uri} is not a JSON object: {type(body).__name__}.")

    collection = cast(bodies.RawCollection, body)
    members = collection.get('Members')
    if members is None:
        members = []
    if not isinstance(members, list):
        raise ValueError(f"The collection at {uri} has non-list members: {members!r}.")

    uris: List[str] = []
    for index, member in enumerate(members):
        link = member.get(bodies.ODATA_ID) if isinstance(member, dict) else None
        if not isinstance(link, str) or not link:
            raise ValueError(f"The collection at {uri} has a malformed member #{index}: {member!r}.")
        uris.append(link)

    # Each member is attempted once, even if listed repeatedly.
    uris = list(dict.fromkeys(uris))
    logger.debug(f"Collection {uri} has {len(uris)} member(s).")
    return uris
