"""Stub implementations for development and testing.

Stubs provide in-memory processors that record what they receive.
"""

from message_batcher.infrastructure.stubs.recording_processor_stub import (
    AsyncRecordingProcessorStub,
    ReceivedBatch,
    RecordingProcessorStub,
    StubProcessorFailure,
    SyncRecordingProcessorStub,
)

__all__: list[str] = [
    "AsyncRecordingProcessorStub",
    "ReceivedBatch",
    "RecordingProcessorStub",
    "StubProcessorFailure",
    "SyncRecordingProcessorStub",
]
