"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# The one request understood by the bridge.
REQUEST = b"next"

# Header fields
SOURCE = "source"
CONTENT = "content"
PATH = "path"
SHAPE = "shape"
DTYPE = "dtype"

# Content tags, as spelled on the wire
MSGPACK = "msgpack"
ARRAY = "array"
IMAGE_DATA = "ImageData"

# Data-frame key hoisted into the dataset metadata
METADATA = "metadata"
