import logging
import os
from typing import Optional, Sequence

import boto3
from botocore.config import Config

from ossdist.config import PluginConfig
from ossdist.services.uploader.interfaces import Content, ListResult, ObjectStore, PutResult
from ossdist.services.uploader.outcomes import OutcomeReporter
from ossdist.services.uploader.upload_service import FileUploadService

logger = logging.getLogger(__name__)

# Upper bound of keys per DeleteObjects request
DELETE_BATCH_SIZE = 1000


class StoreConfig:
    """Immutable connection settings for an S3-compatible bucket"""
    def __init__(self, bucket: str, endpoint: str, region: str, access_key: str, secret_key: str):
        self.bucket = bucket
        self.endpoint = endpoint
        self.region = region
        self.access_key = access_key
        self.secret_key = secret_key

    @classmethod
    def from_plugin_config(cls, config: PluginConfig) -> "StoreConfig":
        return cls(
            bucket=config.bucket,
            endpoint=config.endpoint_url,
            region=config.region,
            access_key=config.access_key_id,
            secret_key=config.access_key_secret,
        )


class S3ObjectStore(ObjectStore):
    """Bucket operations over the S3-compatible API (OSS, S3, R2, MinIO)"""
    def __init__(self, config: StoreConfig, boto_client=None):
        self.config = config
        self.bucket_name = config.bucket
        # Creating the client does not touch the network
        self.boto_client = boto_client or boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'virtual'}
            )
        )

    def list(self, prefix: str, delimiter: Optional[str] = None, max_keys: int = 1000) -> ListResult:
        params = {
            'Bucket': self.bucket_name,
            'Prefix': prefix,
            'MaxKeys': max_keys,
        }
        if delimiter:
            params['Delimiter'] = delimiter

        response = self.boto_client.list_objects_v2(**params)
        return ListResult(
            objects=[obj['Key'] for obj in response.get('Contents', [])],
            prefixes=[entry['Prefix'] for entry in response.get('CommonPrefixes', [])],
        )

    def put(self, key: str, content: Content) -> PutResult:
        if isinstance(content, (bytes, bytearray)):
            response = self.boto_client.put_object(Bucket=self.bucket_name, Key=key, Body=bytes(content))
        else:
            with open(os.fspath(content), 'rb') as f:
                response = self.boto_client.put_object(Bucket=self.bucket_name, Key=key, Body=f)
        return PutResult(status_code=int(response['ResponseMetadata']['HTTPStatusCode']))

    def delete_multi(self, keys: Sequence[str], quiet: bool = True) -> None:
        key_list = list(keys)
        for start in range(0, len(key_list), DELETE_BATCH_SIZE):
            batch = key_list[start:start + DELETE_BATCH_SIZE]
            self.boto_client.delete_objects(
                Bucket=self.bucket_name,
                Delete={
                    'Objects': [{'Key': key} for key in batch],
                    'Quiet': quiet,
                }
            )
            logger.debug(f"Deleted {len(batch)} objects from {self.bucket_name}")


class UploadServiceBuilder:
    """Constructs the store and upload service for a plugin config"""
    @staticmethod
    def build_store(config: PluginConfig) -> ObjectStore:
        return S3ObjectStore(StoreConfig.from_plugin_config(config))

    @staticmethod
    def build(config: PluginConfig,
              store: Optional[ObjectStore] = None,
              reporter: Optional[OutcomeReporter] = None) -> FileUploadService:
        return FileUploadService(
            store or UploadServiceBuilder.build_store(config),
            config,
            reporter or OutcomeReporter()
        )
