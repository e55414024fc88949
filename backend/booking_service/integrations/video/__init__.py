from booking_service.integrations.video.base import (
    BusyInterval,
    PartialReference,
    VideoApiAdapter,
    VideoCallData,
)
from booking_service.integrations.video.twilio_video import TWILIO_VIDEO_TYPE, TwilioVideoApiAdapter

__all__ = [
    "BusyInterval",
    "PartialReference",
    "VideoApiAdapter",
    "VideoCallData",
    "TWILIO_VIDEO_TYPE",
    "TwilioVideoApiAdapter",
]
