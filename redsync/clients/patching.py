from redsync.clients import api
from redsync.helpers import typedefs
from redsync.structs import patches


async def patch_obj(
        *,
        client: api.RemoteClient,
        uri: str,
        patch: patches.Patch,
        logger: typedefs.Logger,
) -> bool:
    """
    Patch a resource at the specified URI.

    The patch is sent as a JSON merge-patch: only the fields to be changed.
    An empty patch is not sent at all: some Redfish services treat
    an empty PATCH request as a malformed one and respond with an error.

    Returns ``True`` if the request was sent, ``False`` if there was nothing
    to send. All the errors of the client are escalated as is.
    """
    if not patch:
        logger.debug(f"Nothing to patch at {uri}: skipping the request.")
        return False

    logger.debug(f"Patching {uri} with: {patch!r}")
    await client.patch(uri, patch.as_json())
    return True
