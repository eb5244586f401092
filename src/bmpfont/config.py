"""Constants and defaults for bmpfont."""

# Pixel is ink when its blue channel is below this value
INK_THRESHOLD = 128

# Entries per line in the widths / advances sections
WRAP_EVERY = 32

# Initial scratch canvas edge in pixels; grown on demand
SCRATCH_SIZE = 100

DEFAULT_SIZE = 16
DEFAULT_FORMAT = "table"
DEFAULT_BACKEND = "pillow"

OUTPUT_FORMATS = ("table", "rust")
TAIL_ALIGNMENTS = ("left", "right")

# Only read by the CLI
ENV_LOG_LEVEL = "BMPFONT_LOG_LEVEL"
ENV_FORMAT = "BMPFONT_FORMAT"
ENV_SIZE = "BMPFONT_SIZE"
