"""
Decentralized storage backends for save-as.

- StorachaClient: w3up space via an HTTP upload relay
- LighthouseClient: Lighthouse HTTP API
"""

from medisave.storage.base import UploadBackend
from medisave.storage.lighthouse_client import LighthouseClient
from medisave.storage.storacha_client import StorachaClient
from medisave.storage.types import LighthouseConfig, StorachaConfig

__all__ = [
    "UploadBackend",
    "StorachaClient",
    "StorachaConfig",
    "LighthouseClient",
    "LighthouseConfig",
]
