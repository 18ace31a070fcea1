from storefront.models.content import ContentBase, Product, Service

__all__ = [
    "ContentBase",
    "Product",
    "Service",
]
