"""Every literal the service uses: models, prompts, routes, limits and reply texts."""

# Remote models and token budgets
OPENAI_VISION_MODEL = "o4-mini"
CLAUDE_VISION_MODEL = "claude-sonnet-4-5"
WHISPER_MODEL = "whisper-1"
REMOTE_MAX_RETRIES = 0
SINGLE_IMAGE_MAX_TOKENS = 1000
GROUP_IMAGE_MAX_TOKENS = 3000

VISION_PROVIDER_OPENAI = "openai"
VISION_PROVIDER_ANTHROPIC = "anthropic"

# Prompts (concept list is joined with ", ")
PROMPT_SINGLE_IMAGE = (
    "Check if the image contains any of the following concepts: {concepts}. "
    "Be concise. Respond in JSON format where each concept maps to a confidence "
    'percentage between 0 and 100, e.g. {{ "cat": 85.3, "dog": 12.4 }}.'
)
PROMPT_IMAGE_GROUP = (
    "Analyze ALL the provided images as a group. Check if any of these images "
    "contain the following concepts: {concepts}. Consider the entire collection "
    "when determining confidence. Respond in JSON format where each concept maps "
    "to a confidence percentage between 0 and 100 based on the overall presence "
    "across all images. If a concept never appears, return 0."
)

# Uploads
DEFAULT_IMAGE_MIME = "image/jpeg"
DEFAULT_AUDIO_FILENAME = "audio.wav"
DEFAULT_AUDIO_MIME = "audio/wav"
ALLOWED_IMAGE_MIME_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
MAX_GROUP_IMAGES = 10
MAX_UPLOAD_BYTES = 50 * 1024 * 1024
MULTIPART_CONTENT_TYPE = "multipart/form-data"
FIELD_FILE = "file"
FIELD_CONCEPTS = "concepts"
FIELD_BASE64_IMAGE = "base64Image"

# Server
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
SERVER_STATUS_TEXT = "Server is running"
MSG_SERVER_STARTING = "Starting Concept Lens API on %s:%d (vision: %s)"

# Routes
ROUTE_ANALYZE_IMAGE = "/analyze-image"
ROUTE_ANALYZE_IMAGE_FILE = "/analyze-image-file"
ROUTE_ANALYZE_IMAGES_GROUP = "/analyze-images-group"
ROUTE_TRANSCRIBE_AUDIO = "/transcribe-audio"
ROUTE_SERVER_STATUS = "/server-status"

# Validation errors
MSG_MISSING_IMAGE_OR_CONCEPTS = "Missing image or concepts list."
MSG_NO_FILE = "No file uploaded."
MSG_NO_FILES = "No files uploaded."
MSG_NO_AUDIO_FILE = "No audio file uploaded."
MSG_MISSING_CONCEPTS = "Missing concepts field."
MSG_INVALID_CONCEPTS = "Concepts must be a valid JSON array."
MSG_NO_VALID_IMAGES = "No valid images uploaded."
MSG_NOT_MULTIPART = "Request must be multipart/form-data. Current content-type: %s"
MSG_INVALID_MULTIPART = "Invalid multipart data."
MSG_BODY_TOO_LARGE = "Request body exceeds the 50 MiB limit."

# Remote failure replies
MSG_REMOTE_REQUEST_FAILED = "OpenAI API request failed."
MSG_PARSE_FAILED = "Failed to parse AI response as JSON"
MSG_TRANSCRIPTION_FAILED = "Failed to transcribe audio."

# Per-capability fallbacks
MSG_ANALYZE_IMAGE_FAILED = "Failed to analyze image."
MSG_IMAGE_FILE_FAILED = "Failed to process image file."
MSG_IMAGES_GROUP_FAILED = "Failed to analyze images."
MSG_IMAGES_UPLOAD_FAILED = "Failed to process images."
MSG_AUDIO_FILE_FAILED = "Failed to process audio file."
MSG_METHOD_NOT_ALLOWED = "Method not allowed"
MSG_INTERNAL_ERROR = "Internal server error"

# Remote error texts (thrown by clients, logged server-side only)
MSG_REMOTE_API_ERROR = "%s API responded with status %d: %s"
MSG_REMOTE_EMPTY = "%s API returned no content"
MSG_REMOTE_PARSE = "Could not parse AI response as JSON: %s"
