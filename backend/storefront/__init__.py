"""Storefront content API: products, services and the admin session gate."""
