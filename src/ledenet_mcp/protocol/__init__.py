"""Protocol layer: checksum framing, command encoders, and status decoding."""

from .framing import build_frame, verify_frame, STATUS_REPLY_SIZE
from .commands import Command, encode_query, encode_set_color, encode_set_power
from .parser import StatusReply, decode_status, to_device_state
