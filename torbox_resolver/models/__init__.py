"""
TorBox Resolver Models Package
"""
from torbox_resolver.models.availability import AvailabilityRecord
from torbox_resolver.models.torrent import (
    AvailabilityEntry,
    FileRef,
    RemoteFile,
    RemoteTorrent,
    ResolutionToken,
    encode_stream_url,
)

__all__ = [
    "AvailabilityRecord",
    "AvailabilityEntry",
    "FileRef",
    "RemoteFile",
    "RemoteTorrent",
    "ResolutionToken",
    "encode_stream_url",
]
