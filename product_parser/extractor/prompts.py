"""Prompt text for product extraction."""

_INSTRUCTIONS = """\
<instructions>
You are an expert product data extractor. Your role is to accurately extract structured product information from a raw HTML page.
Your output will help users view product details without reading the entire webpage.
Prioritize accuracy, structure, and clarity.
</instructions>"""

REQUIREMENTS = (
	'The output must be in pure JSON format.',
	'The extracted product data must strictly match the schema provided below.',
	'All attribute keys must use camelCase formatting (e.g., "colorOptions").',
	'If a field is missing or not found, leave it empty (null) - do not invent data.',
	'Price must be extracted as a numeric value (without currency symbols).',
	'The product URL must match the provided URL.',
)


def _requirements_block() -> str:
	lines = '\n'.join(f'  <requirement>{requirement}</requirement>' for requirement in REQUIREMENTS)
	return f'<requirements>\n{lines}\n</requirements>'


def build_extraction_prompt(html: str, url: str) -> str:
	"""
	Compose the single user message sent to the model.

	Order is fixed: instructions, requirements, then the page markup and the original URL inside
	their own tags so page content cannot be mistaken for instructions.
	"""
	return (
		f'{_INSTRUCTIONS}\n\n'
		f'{_requirements_block()}\n\n'
		'<input>\n'
		f'<html_content>\n{html}\n</html_content>\n\n'
		f'<original_url>\n{url}\n</original_url>\n'
		'</input>\n'
	)
