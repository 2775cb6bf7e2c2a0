from .errors import ApiError, Forbidden, InvalidInput, NoFormatFound, RetrievalFailure, StreamInterrupted

__all__ = ["ApiError", "Forbidden", "InvalidInput", "NoFormatFound", "RetrievalFailure", "StreamInterrupted"]
