"""
The product record the model is asked to produce.

These classes are the single source of truth for both directions: the JSON schema sent to the model
is generated from them (descriptions included, they act as extraction hints) and the model's answer
is validated against them.
"""

from collections import Counter
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

ImageUrl = Annotated[str, Field(description='A direct link to a product image URL.')]

AttributeValues = (
	Annotated[str, Field(description='A single string value.')]
	| Annotated[float, Field(description='A single numeric value.')]
	| Annotated[list[str], Field(description='An array of string values.')]
	| Annotated[list[float], Field(description='An array of numeric values.')]
)


class ProductPrice(BaseModel):
	model_config = ConfigDict(extra='forbid')

	value: float = Field(description='The numeric price value of the product, without currency symbols.')
	currency: str | None = Field(default=None, description='The currency of the price, like USD, EUR, etc.')


class ProductAttribute(BaseModel):
	model_config = ConfigDict(extra='forbid')

	name: str = Field(
		description='The attribute name in camelCase format, e.g., colorOptions, sizeOptions, material, engineSize, etc.',
	)
	values: AttributeValues = Field(description='The value(s) of the attribute.')


class ProductRecord(BaseModel):
	model_config = ConfigDict(extra='forbid')

	url: str = Field(description='The original URL of the product page. Must be a valid URL.')
	title: str = Field(description='The name of the product, without extra branding or marketing language.')
	description: str | None = Field(
		default=None,
		description='A short description of the product, if available. Keep it factual and concise.',
	)
	category: str = Field(description='The product category, like T-Shirt, Electronics, Book, etc.')
	images: list[ImageUrl] | None = Field(default=None, description='An array of product image URLs, if available.')
	price: ProductPrice = Field(description='The price information for the product.')
	availability: str | None = Field(
		default=None,
		description="The availability status of the product, e.g., 'In Stock', 'Out of Stock'.",
	)
	brand: str | None = Field(default=None, description='The brand or manufacturer name, if available.')
	attributes: list[ProductAttribute] | None = Field(
		default=None,
		description='A list of attributes where each attribute has a name and corresponding value(s).',
	)

	def duplicate_attribute_names(self) -> list[str]:
		"""Attribute names that occur more than once. Uniqueness is expected but not schema-enforced."""
		if not self.attributes:
			return []
		counts = Counter(attribute.name for attribute in self.attributes)
		return [name for name, count in counts.items() if count > 1]
