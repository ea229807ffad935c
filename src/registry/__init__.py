# Content registry package
from .service import RegistryService
from .records import ContentRecord, RecordStore
from .permissions import PermissionMatrix
from .sequence import SequenceCounter, BlockHeight, HeightSource
from .errors import ErrorCode, ErrorCategory, ErrorResponse, is_error
from .logger import EventLogger
from .checkpoint import save_checkpoint, load_checkpoint, restore_from_checkpoint

__all__ = [
    "RegistryService",
    "ContentRecord", "RecordStore",
    "PermissionMatrix",
    "SequenceCounter", "BlockHeight", "HeightSource",
    "ErrorCode", "ErrorCategory", "ErrorResponse", "is_error",
    "EventLogger",
    "save_checkpoint", "load_checkpoint", "restore_from_checkpoint",
]
