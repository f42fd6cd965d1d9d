"""Masking of provider credentials in error messages and log output."""

import re

REDACTED = '[REDACTED]'

# Bare provider keys, matched anywhere in a string
_KEY_PATTERNS = [
	# OpenAI style: sk-... or sk-proj-...
	re.compile(r'sk-[a-zA-Z0-9_-]{20,}'),
	# Anthropic style: sk-ant-...
	re.compile(r'sk-ant-[a-zA-Z0-9_-]{20,}'),
	# Google API keys
	re.compile(r'AIza[a-zA-Z0-9_-]{35,}'),
	# AWS style
	re.compile(r'AKIA[a-zA-Z0-9]{16,}'),
]

# key=value / "key": "value" pairs whose key names a secret
_ASSIGNMENT_PATTERN = re.compile(
	r'(?i)(["\']?(?:openai[_-]?)?(?:api[_-]?key|apikey|auth[_-]?token|token|password|secret)["\']?\s*[:=]\s*["\']?)'
	r'([^\s"\',}]{8,})'
)

_BEARER_PATTERN = re.compile(r'(?i)(bearer\s+)([a-zA-Z0-9._~+/=-]{8,})')


def sanitize_string(text: str) -> str:
	"""Replace anything that looks like a credential in `text` with a redaction marker."""
	if not text:
		return text

	sanitized = _ASSIGNMENT_PATTERN.sub(lambda m: f'{m.group(1)}{REDACTED}', text)
	sanitized = _BEARER_PATTERN.sub(lambda m: f'{m.group(1)}{REDACTED}', sanitized)
	for pattern in _KEY_PATTERNS:
		sanitized = pattern.sub(REDACTED, sanitized)
	return sanitized
