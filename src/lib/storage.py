"""
Object storage (Cloudflare R2) service

Uploads post attachments into category namespaces and lists what is
stored, over the S3-compatible API via boto3. Public URLs come from
storageUrl_construct, the same helper the download/audio widgets use, so
an uploaded file and a directive naming it resolve to the same address.

Failures never raise out of the service; UploadResult / ListResult carry
`success=False` and the error message instead.

Example:
    >>> service = StorageService(storagesettings)
    >>> result = service.upload(data, "資料.pdf", "application/pdf", "downloads")
    >>> print(snippet_make(result))
    :::download
    file=%E8%B3%87%E6%96%99-1714521600000-1a2b3c4d.pdf
    name=資料.pdf
    :::
"""

import asyncio
import hashlib
import re
import time
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional
from urllib.parse import quote, unquote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config.settings import StorageSettings
from ..models.storage import ListResult, StoredObject, UploadResult
from .log import LOG
from .urls import storageUrl_construct

MAX_KEYS = 100
NAME_LIMIT = 200
SIZE_UNITS = ['Bytes', 'KB', 'MB', 'GB']
DOCUMENT_EXTENSIONS = ['.pdf', '.doc', '.docx', '.txt', '.zip', '.rar']
REQUIRED_FIELDS = ['cloudflare_account_id', 'r2_access_key_id', 'r2_secret_access_key', 'r2_bucket_name']

# encodeURIComponent's unreserved set
URI_SAFE = "-_.!~*'()"
UNSAFE_CHARACTERS = re.compile(r'[<>:"/\\|?*]')


def client_make(settings: StorageSettings) -> Any:
    """boto3 S3 client configured for the account's R2 endpoint"""
    return boto3.client(
        "s3",
        aws_access_key_id=settings.r2_access_key_id,
        aws_secret_access_key=settings.r2_secret_access_key,
        endpoint_url=settings.endpoint_make(),
        region_name="auto",
        config=Config(signature_version="s3v4"),
    )


def fileName_sanitize(name: str) -> str:
    """
    Percent-encode a base name and strip filesystem-hostile characters.

    Example:
        >>> fileName_sanitize("my file")
        'my%20file'
    """
    encoded = quote(name, safe=URI_SAFE)
    encoded = UNSAFE_CHARACTERS.sub('_', encoded)
    encoded = re.sub(r'\s+', '_', encoded)
    return encoded[:NAME_LIMIT]


def fileName_decode(key: str) -> str:
    """Display name for a stored key"""
    return unquote(PurePosixPath(key).name).replace('_', ' ')


def fileSize_format(size: int) -> str:
    """
    Human-readable byte count.

    Example:
        >>> fileSize_format(1536)
        '1.5 KB'
    """
    if size <= 0:
        return '0 Bytes'
    index = 0
    while size >= 1024 ** (index + 1) and index < len(SIZE_UNITS) - 1:
        index += 1
    value = ('%.2f' % (size / (1024 ** index))).rstrip('0').rstrip('.')
    return f"{value} {SIZE_UNITS[index]}"


def category_fromMimeType(mime_type: str, file_name: str) -> str:
    """Storage category for an upload"""
    if mime_type.startswith('image/'):
        return 'images'
    if mime_type.startswith('audio/'):
        return 'audio'
    if mime_type.startswith('video/'):
        return 'video'
    if PurePosixPath(file_name).suffix.lower() in DOCUMENT_EXTENSIONS:
        return 'downloads'
    return 'files'


def config_validate(settings: StorageSettings) -> List[str]:
    """
    Names of required storage settings that are unset.

    An empty list means uploads and listings can be attempted.
    """
    missing = [name for name in REQUIRED_FIELDS if not getattr(settings, name)]
    if missing:
        LOG(f"Missing storage configuration fields: {', '.join(missing)}", level=1)
    return missing


def snippet_make(result: UploadResult) -> str:
    """
    Markdown that embeds an uploaded file in a post

    downloads -> :::download block with body attributes
    audio     -> :::audio{file="..." name="..."}
    images    -> ![name](url)
    otherwise -> [name](url)
    """
    if result.category == 'downloads':
        return f":::download\nfile={result.file_name}\nname={result.original_name}\n:::"
    if result.category == 'audio':
        return f':::audio{{file="{result.file_name}" name="{result.original_name}"}}\n:::'
    if result.category == 'images':
        return f"![{result.original_name}]({result.url})"
    return f"[{result.original_name}]({result.url})"


class StorageService:
    """
    Upload and list objects in the configured bucket

    Args:
        settings: Storage settings (credentials, bucket, URL tiers)
        client: Preconfigured S3 client (default: client_make(settings))
    """

    def __init__(self, settings: StorageSettings, client: Optional[Any] = None) -> None:
        self.settings = settings
        self.client = client or client_make(settings)

    def key_make(self, data: bytes, original_name: str, category: str, timestamp: Optional[int] = None) -> str:
        """<category>/<sanitised-base>-<ms>-<md5[:8]><ext>"""
        path = PurePosixPath(original_name)
        extension = path.suffix
        base = path.name[:-len(extension)] if extension else path.name
        timestamp = timestamp if timestamp is not None else int(time.time() * 1000)
        digest = hashlib.md5(data).hexdigest()[:8]
        return f"{category}/{fileName_sanitize(base)}-{timestamp}-{digest}{extension}"

    def upload(self, data: bytes, original_name: str, mime_type: str, category: str = 'files') -> UploadResult:
        """Store one file; the result carries its public URL"""
        try:
            key = self.key_make(data, original_name, category)
            file_name = key.split('/', 1)[1]
            LOG(f"Uploading file to R2: {key}", level=1)
            response = self.client.put_object(
                Bucket=self.settings.r2_bucket_name,
                Key=key,
                Body=data,
                ContentType=mime_type,
                ACL='public-read',
            )
        except (ClientError, BotoCoreError) as e:
            LOG(f"Error uploading to R2: {e}", level=1)
            return UploadResult(success=False, error=str(e))

        return UploadResult(
            success=True,
            file_name=file_name,
            key=key,
            url=storageUrl_construct(file_name, category, self.settings),
            size=len(data),
            original_name=original_name,
            mime_type=mime_type,
            category=category,
            etag=response.get('ETag'),
        )

    def list(self, category: Optional[str] = None) -> ListResult:
        """Stored objects (optionally one category), newest first"""
        params: Dict[str, Any] = {'Bucket': self.settings.r2_bucket_name, 'MaxKeys': MAX_KEYS}
        if category:
            params['Prefix'] = f"{category}/"
        try:
            response = self.client.list_objects_v2(**params)
        except (ClientError, BotoCoreError) as e:
            LOG(f"Error listing R2 files: {e}", level=1)
            return ListResult(success=False, error=str(e))

        objects: List[StoredObject] = []
        for item in response.get('Contents', []):
            key = item['Key']
            prefix, _, file_name = key.rpartition('/')
            objects.append(StoredObject(
                name=fileName_decode(key),
                key=key,
                size=fileSize_format(item.get('Size', 0)),
                last_modified=item.get('LastModified'),
                url=storageUrl_construct(file_name, prefix, self.settings),
                category=key.split('/')[0],
            ))
        objects.sort(key=lambda obj: obj.last_modified.timestamp() if obj.last_modified else 0, reverse=True)
        return ListResult(success=True, objects=objects)

    async def upload_async(self, data: bytes, original_name: str, mime_type: str, category: str = 'files') -> UploadResult:
        return await asyncio.to_thread(self.upload, data, original_name, mime_type, category)

    async def list_async(self, category: Optional[str] = None) -> ListResult:
        return await asyncio.to_thread(self.list, category)
