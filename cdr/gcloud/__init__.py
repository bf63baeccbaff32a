"""Google Cloud SDK integration."""

from .errors import SdkError
from .sdk import CloudSdk, GcloudSdk, MockCloudSdk

__all__ = [
    "CloudSdk",
    "GcloudSdk",
    "MockCloudSdk",
    "SdkError",
]
