"""Backend-agnostic storage abstraction with composable accessor layers."""

from layered_store._accessor import Accessor
from layered_store._capabilities import Capability, CapabilitySet
from layered_store._config import OperatorProfile, RegistryConfig, ServiceConfig
from layered_store._errors import (
    AlreadyExists,
    BackendUnavailable,
    CapabilityNotSupported,
    ErrorKind,
    InvalidPath,
    IsADirectory,
    NotADirectory,
    NotFound,
    PermissionDenied,
    StoreError,
    Unexpected,
)
from layered_store._info import AccessorInfo
from layered_store._layer import Layer, LayeredAccessor
from layered_store._models import Entry, EntryMode, Metadata
from layered_store._operation import Operation
from layered_store._operator import Operator
from layered_store._ops import OpCopy, OpCreateDir, OpDelete, OpList, OpRead, OpRename, OpStat, OpWrite
from layered_store._path import is_directory_path, normalize_path
from layered_store._registry import Registry, register_layer, register_service
from layered_store.layers import SanityCheckLayer

__version__ = "0.1.0"

__all__ = [
    # Core
    "Operator",
    "Registry",
    "Accessor",
    "AccessorInfo",
    "register_service",
    "register_layer",
    # Layers
    "Layer",
    "LayeredAccessor",
    "SanityCheckLayer",
    # Models & paths
    "Entry",
    "EntryMode",
    "Metadata",
    "Operation",
    "is_directory_path",
    "normalize_path",
    # Operation arguments
    "OpStat",
    "OpList",
    "OpRead",
    "OpWrite",
    "OpDelete",
    "OpCreateDir",
    "OpCopy",
    "OpRename",
    # Capabilities
    "Capability",
    "CapabilitySet",
    # Config
    "ServiceConfig",
    "OperatorProfile",
    "RegistryConfig",
    # Errors
    "ErrorKind",
    "StoreError",
    "Unexpected",
    "NotFound",
    "AlreadyExists",
    "PermissionDenied",
    "InvalidPath",
    "IsADirectory",
    "NotADirectory",
    "CapabilityNotSupported",
    "BackendUnavailable",
    # Version
    "__version__",
]
