"""
TorBox Torrent Models
Plain records for availability entries, remote torrents and resolution tokens
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Union


RemoteId = Union[int, str]


@dataclass(frozen=True)
class FileRef:
    """A file listed by the ``checkcached`` endpoint"""
    name: str
    size: Optional[int] = None
    
    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "FileRef":
        return cls(name=data.get("name") or "", size=data.get("size"))
    
    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "size": self.size}


@dataclass
class AvailabilityEntry:
    files: List[FileRef] = field(default_factory=list)
    
    @property
    def cached(self) -> bool:
        """Instantly playable only when TorBox listed at least one file"""
        return bool(self.files)
    
    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "AvailabilityEntry":
        if not isinstance(data, dict):
            return cls()
        return cls(files=[FileRef.from_api(f) for f in data.get("files") or [] if isinstance(f, dict)])
    
    @classmethod
    def from_files(cls, files: Optional[List[Dict[str, Any]]]) -> "AvailabilityEntry":
        return cls(files=[FileRef.from_api(f) for f in files or []])
    
    def to_dict(self) -> Dict[str, Any]:
        return {"cached": self.cached, "files": [f.to_dict() for f in self.files]}


@dataclass(frozen=True)
class RemoteFile:
    name: str
    id: Optional[RemoteId] = None
    
    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemoteFile":
        return cls(name=data.get("name") or "", id=data.get("id"))


@dataclass
class RemoteTorrent:
    """A torrent registered in the user's TorBox account"""
    id: RemoteId
    hash: str = ""
    name: str = ""
    status: str = ""
    files: List[RemoteFile] = field(default_factory=list)
    filename: Optional[str] = None
    added: Optional[str] = None
    
    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemoteTorrent":
        return cls(
            id=data.get("id"),
            hash=(data.get("hash") or "").lower(),
            name=data.get("name") or "",
            status=data.get("download_state") or data.get("status") or "",
            files=[RemoteFile.from_api(f) for f in data.get("files") or [] if isinstance(f, dict)],
            filename=data.get("filename"),
            added=data.get("added") or data.get("created_at"),
        )
    
    @property
    def display_name(self) -> str:
        return self.name or self.filename or self.hash[:12] or "Torrent"


@dataclass(frozen=True)
class ResolutionToken:
    """Everything needed to resolve one stream, parsed once at the HTTP boundary"""
    api_key: str
    infohash: str
    file_index: int = 0
    ip: Optional[str] = None
    
    @classmethod
    def from_path(
        cls,
        api_key: str,
        infohash: str,
        file_index: Optional[str],
        ip: Optional[str] = None,
    ) -> "ResolutionToken":
        try:
            index = int(file_index) if file_index is not None else 0
        except ValueError:
            # Single-file streams carry no index ("undefined"/"null")
            index = 0
        return cls(api_key=api_key, infohash=infohash.lower(), file_index=index, ip=ip)


def encode_stream_url(api_key: str, infohash: str, file_index: Optional[int]) -> str:
    """Resolution token as handed to the player: ``key/hash/null/index``"""
    index = file_index if file_index is not None else 0
    return f"{api_key}/{infohash}/null/{index}"
