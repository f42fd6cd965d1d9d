"""
Conversion of pydantic models into JSON schemas accepted by strict structured-output APIs.

OpenAI's strict mode rejects `$ref` siblings, `default` values and optional properties, so the schema
pydantic produces is rewritten: references are inlined, every object closes `additionalProperties`
and lists all of its properties as required (nullability is expressed with `anyOf` + `null`).
"""

from typing import Any

from pydantic import BaseModel

# Keywords dropped from every schema node
_STRIPPED_KEYWORDS = frozenset({'title', 'default', '$defs', 'definitions'})


class SchemaOptimizer:
	@staticmethod
	def create_optimized_json_schema(model: type[BaseModel], remove_min_items: bool = False) -> dict[str, Any]:
		"""
		Build a strict-mode JSON schema for `model`.

		Args:
			model: The pydantic model describing the expected output
			remove_min_items: Drop `minItems` constraints, which some providers reject

		Returns:
			A self-contained schema dict with field descriptions preserved
		"""
		original = model.model_json_schema()
		defs: dict[str, Any] = original.get('$defs', {})

		def resolve(ref: str) -> dict[str, Any]:
			name = ref.split('/')[-1]
			if name not in defs:
				raise ValueError(f'Unresolvable schema reference: {ref}')
			return defs[name]

		def optimize(node: Any, seen: frozenset[str]) -> Any:
			if isinstance(node, list):
				return [optimize(item, seen) for item in node]
			if not isinstance(node, dict):
				return node

			# Older pydantic releases wrap a described reference as allOf: [{$ref}]
			if isinstance(node.get('allOf'), list) and len(node['allOf']) == 1 and '$ref' in node['allOf'][0]:
				node = {**node['allOf'][0], **{k: v for k, v in node.items() if k != 'allOf'}}

			if '$ref' in node:
				ref = node['$ref']
				if ref in seen:
					raise ValueError(f'Recursive schema reference is not supported: {ref}')
				# Sibling keywords (usually `description`) win over the referenced definition
				merged = {**resolve(ref), **{k: v for k, v in node.items() if k != '$ref'}}
				return optimize(merged, seen | {ref})

			optimized: dict[str, Any] = {}
			for key, value in node.items():
				if key in _STRIPPED_KEYWORDS:
					continue
				if remove_min_items and key == 'minItems':
					continue
				if key == 'properties' and isinstance(value, dict):
					optimized[key] = {name: optimize(prop, seen) for name, prop in value.items()}
				else:
					optimized[key] = optimize(value, seen)

			if optimized.get('type') == 'object' and 'properties' in optimized:
				optimized['additionalProperties'] = False
				optimized['required'] = list(optimized['properties'].keys())

			return optimized

		return optimize(original, frozenset())
