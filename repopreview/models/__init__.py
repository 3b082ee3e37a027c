from .capture import CaptureResult, CaptureSuccess, SkippedBadResponse, SkippedError

__all__ = ["CaptureResult", "CaptureSuccess", "SkippedBadResponse", "SkippedError"]
